"""IntegrityService — audit and repair of project cross-references.

Checks that the role indices and the project repository agree:

- every index link resolves to a stored project (``dangling_index_entry``),
- every linked project is owned by the holder it is listed under
  (``foreign_index_entry``),
- no holder lists the same project twice (``duplicate_index_entry``),
- every project is listed under both of its owners (``missing_index_entry``).

Dangling links are tolerated by readers, so they are reported as warnings;
the other categories are errors.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Any

import structlog

from builderfolio.domain.ids import Role
from builderfolio.services.base import BaseService
from builderfolio.services.result import ServiceResult

if TYPE_CHECKING:
    from builderfolio.domain.models import Project

logger = structlog.get_logger(__name__)

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

CAT_DANGLING = "dangling_index_entry"
CAT_FOREIGN = "foreign_index_entry"
CAT_DUPLICATE = "duplicate_index_entry"
CAT_MISSING = "missing_index_entry"

_OWNER_FIELD: dict[Role, str] = {
    Role.BUILDER: "builder_id",
    Role.MANAGER: "manager_id",
}


def _owner(project: Project, role: Role) -> str:
    return str(getattr(project, _OWNER_FIELD[role]))


def _issue(
    category: str,
    severity: str,
    role: Role,
    holder_id: str,
    project_id: int,
    message: str,
) -> dict[str, Any]:
    return {
        "category": category,
        "severity": severity,
        "role": str(role),
        "holder_id": holder_id,
        "project_id": project_id,
        "message": message,
    }


class IntegrityService(BaseService):
    """Reports and repairs disagreements between indices and projects."""

    def check(self) -> ServiceResult:
        """Report integrity issues without modifying anything."""
        with self._workspace.orchestration():
            issues = self._collect_issues()

        warnings: list[str] = []
        self._dispatch_event(
            "post_check",
            {"issues_found": len(issues), "issues_fixed": 0},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op="check",
            data={"issues": issues, "count": len(issues)},
            warnings=warnings,
        )

    def fix(self) -> ServiceResult:
        """Rewrite every index entry so it matches the project repository.

        Dangling, foreign, and duplicate links are dropped (first
        occurrence order is kept) and missing links are appended.
        """
        ws = self._workspace
        fixes: list[str] = []

        with ws.orchestration():
            for role in Role:
                index = ws.index_for(role)
                for holder_id in index.holders():
                    current = index.projects_of(holder_id)
                    wanted: list[int] = []
                    for project_id in current:
                        project = ws.projects.find_by_id(project_id)
                        if project is None or _owner(project, role) != holder_id:
                            continue
                        if project_id not in wanted:
                            wanted.append(project_id)
                    if wanted == current:
                        continue
                    index.create_entry(holder_id)
                    for project_id in wanted:
                        index.add_project(holder_id, project_id)
                    fixes.append(
                        f"Pruned {len(current) - len(wanted)} link(s) from "
                        f"{role.value} {holder_id}"
                    )

            for project in ws.projects.all():
                for role in Role:
                    index = ws.index_for(role)
                    holder_id = _owner(project, role)
                    if project.id not in index.projects_of(holder_id):
                        index.add_project(holder_id, project.id)
                        fixes.append(f"Linked project {project.id} to {role.value} {holder_id}")

        for fix in fixes:
            logger.info("integrity.fixed", action=fix)

        warnings: list[str] = []
        self._dispatch_event(
            "post_check",
            {"issues_found": len(fixes), "issues_fixed": len(fixes)},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op="fix",
            data={"fixes": fixes, "count": len(fixes)},
            warnings=warnings,
        )

    def _collect_issues(self) -> list[dict[str, Any]]:
        ws = self._workspace
        issues: list[dict[str, Any]] = []

        for role in Role:
            index = ws.index_for(role)
            for holder_id in index.holders():
                project_ids = index.projects_of(holder_id)
                for project_id, count in Counter(project_ids).items():
                    if count > 1:
                        issues.append(
                            _issue(
                                CAT_DUPLICATE,
                                SEVERITY_ERROR,
                                role,
                                holder_id,
                                project_id,
                                f"Project {project_id} linked {count} times",
                            )
                        )
                    project = ws.projects.find_by_id(project_id)
                    if project is None:
                        issues.append(
                            _issue(
                                CAT_DANGLING,
                                SEVERITY_WARNING,
                                role,
                                holder_id,
                                project_id,
                                f"Link to missing project {project_id}",
                            )
                        )
                    elif _owner(project, role) != holder_id:
                        issues.append(
                            _issue(
                                CAT_FOREIGN,
                                SEVERITY_ERROR,
                                role,
                                holder_id,
                                project_id,
                                f"Project {project_id} belongs to {_owner(project, role)}",
                            )
                        )

        for project in ws.projects.all():
            for role in Role:
                holder_id = _owner(project, role)
                if project.id not in ws.index_for(role).projects_of(holder_id):
                    issues.append(
                        _issue(
                            CAT_MISSING,
                            SEVERITY_ERROR,
                            role,
                            holder_id,
                            project.id,
                            f"Project {project.id} not listed under its {role.value}",
                        )
                    )

        return issues
