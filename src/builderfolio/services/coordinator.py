"""ProjectCoordinator — project lifecycle across repository and role indices.

Every project is recorded in three places: the project repository, the
manager index under its ``manager_id``, and the builder index under its
``builder_id``. The coordinator is the only writer that keeps the three in
step.

Pipeline for each mutation: VALIDATE → AUTHORIZE → APPLY → EVENT.

- VALIDATE failures raise ``ValueError`` before anything is written.
- AUTHORIZE failures (unknown project, wrong actor) return ``False`` and
  leave the workspace exactly as it was.
- APPLY runs inside ``workspace.orchestration()``.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import structlog

from builderfolio.domain.ids import IdScope, Role
from builderfolio.domain.lifecycle import ProjectStatus, is_valid_transition
from builderfolio.domain.models import Client, ClientDetails, Project, ProjectDraft
from builderfolio.services.base import BaseService

logger = structlog.get_logger(__name__)

# Fields a manager may edit after creation. Ownership and id are frozen.
_EDITABLE_FIELDS = ("name", "description", "start_date", "end_date")


class ProjectCoordinator(BaseService):
    """Creates, lists, updates, and deletes projects for builders and managers."""

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def new_client(self, name: str, email: str, phone: str) -> Client:
        """Validate client details and assign them the next client ID."""
        details = ClientDetails(name=name, email=email, phone=phone)
        return Client.from_details(details, self._workspace.identities.next_id(IdScope.CLIENT))

    def create_project(
        self,
        name: str,
        description: str,
        start_date: date,
        end_date: date,
        client: Client,
        status: ProjectStatus,
        builder_id: str,
        manager_id: str,
    ) -> Project:
        """Create a project and link it to its manager and builder.

        Holders that were never registered get index entries created on the
        spot.

        Raises:
            ValueError: On an empty name or owner ID, a missing client or
                date, or an end date before the start date. Nothing is
                stored and no project ID is consumed.
        """
        draft = ProjectDraft(
            name=name,
            description=description,
            start_date=start_date,
            end_date=end_date,
            client=client,
            status=status,
            builder_id=builder_id,
            manager_id=manager_id,
        )

        ws = self._workspace
        with ws.orchestration():
            project = Project.from_draft(draft, ws.identities.next_id(IdScope.PROJECT))
            ws.projects.save(project)
            ws.managers.add_project(project.manager_id, project.id)
            ws.builders.add_project(project.builder_id, project.id)

        logger.info(
            "project.created",
            project_id=project.id,
            builder_id=project.builder_id,
            manager_id=project.manager_id,
        )
        self._dispatch_event(
            "post_project_create",
            {
                "project_id": project.id,
                "name": project.name,
                "builder_id": project.builder_id,
                "manager_id": project.manager_id,
                "status": str(project.status),
            },
        )
        return project

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_project(self, project_id: int) -> Project | None:
        return self._workspace.projects.find_by_id(project_id)

    def list_projects_for(self, holder_id: str, role: Role) -> list[Project]:
        """Resolve *holder_id*'s links in *role*'s index, in link order.

        IDs that no longer resolve to a stored project are skipped.
        """
        ws = self._workspace
        with ws.orchestration():
            project_ids = ws.index_for(role).projects_of(holder_id)
            projects: list[Project] = []
            for project_id in project_ids:
                project = ws.projects.find_by_id(project_id)
                if project is None:
                    logger.debug(
                        "project.stale_link",
                        holder_id=holder_id,
                        role=str(role),
                        project_id=project_id,
                    )
                    continue
                projects.append(project)
        return projects

    def builder_projects(self, builder_id: str) -> list[Project]:
        return self.list_projects_for(builder_id, Role.BUILDER)

    def manager_projects(self, manager_id: str) -> list[Project]:
        return self.list_projects_for(manager_id, Role.MANAGER)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def update_status(
        self,
        acting_builder_id: str,
        project_id: int,
        new_status: ProjectStatus,
    ) -> bool:
        """Set a project's status on behalf of its builder.

        The stored record is replaced by an updated copy; earlier references
        to the project keep the status they were read with.

        Returns False when the project does not exist or when
        *acting_builder_id* is not the project's builder.
        """
        new_status = ProjectStatus(new_status)
        ws = self._workspace
        with ws.orchestration():
            project = ws.projects.find_by_id(project_id)
            if project is None:
                logger.info("project.status_rejected", project_id=project_id, reason="not_found")
                return False
            if acting_builder_id != project.builder_id:
                logger.warning(
                    "project.status_rejected",
                    project_id=project_id,
                    actor_id=acting_builder_id,
                    reason="unauthorized",
                )
                return False

            old_status = project.status
            # Every transition is currently allowed; the check holds a place
            # for a stricter map.
            if not is_valid_transition(str(old_status), str(new_status)):
                logger.info(
                    "project.status_rejected",
                    project_id=project_id,
                    reason="invalid_transition",
                )
                return False

            ws.projects.save(project.model_copy(update={"status": new_status}))

        logger.info(
            "project.status_updated",
            project_id=project_id,
            old_status=str(old_status),
            new_status=str(new_status),
        )
        self._dispatch_event(
            "post_status_update",
            {
                "project_id": project_id,
                "actor_id": acting_builder_id,
                "old_status": str(old_status),
                "new_status": str(new_status),
            },
        )
        return True

    def update_details(
        self,
        acting_manager_id: str,
        project_id: int,
        *,
        name: str | None = None,
        description: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> bool:
        """Edit a project's name, description, or dates on behalf of its manager.

        The edited record replaces the stored one as a whole, as with
        :meth:`update_status`, so the date rule is checked against the final
        pair of dates rather than one field at a time.

        Returns False when the project does not exist or *acting_manager_id*
        is not its manager.

        Raises:
            ValueError: If the edited project would be invalid. The stored
                project is left unchanged.
        """
        requested: dict[str, Any] = {
            "name": name,
            "description": description,
            "start_date": start_date,
            "end_date": end_date,
        }
        changes = {key: value for key, value in requested.items() if value is not None}

        ws = self._workspace
        with ws.orchestration():
            project = ws.projects.find_by_id(project_id)
            if project is None:
                return False
            if acting_manager_id != project.manager_id:
                logger.warning(
                    "project.update_rejected",
                    project_id=project_id,
                    actor_id=acting_manager_id,
                    reason="unauthorized",
                )
                return False
            if not changes:
                return True

            updated = Project.model_validate({**dict(project), **changes})
            ws.projects.save(updated)

        fields_changed = [key for key in _EDITABLE_FIELDS if key in changes]
        logger.info("project.updated", project_id=project_id, fields=fields_changed)
        self._dispatch_event(
            "post_project_update",
            {
                "project_id": project_id,
                "actor_id": acting_manager_id,
                "fields_changed": fields_changed,
            },
        )
        return True

    def delete_project(self, acting_manager_id: str, project_id: int) -> bool:
        """Delete a project on behalf of its manager and unlink it everywhere.

        The manager-side link is removed under *acting_manager_id*; the
        builder-side link under the builder recorded on the project.

        Returns False when the project does not exist or
        *acting_manager_id* is not its manager.
        """
        ws = self._workspace
        with ws.orchestration():
            project = ws.projects.find_by_id(project_id)
            if project is None:
                return False
            if acting_manager_id != project.manager_id:
                logger.warning(
                    "project.delete_rejected",
                    project_id=project_id,
                    actor_id=acting_manager_id,
                    reason="unauthorized",
                )
                return False

            ws.projects.remove(project_id)
            ws.managers.remove_project(acting_manager_id, project_id)
            builder_id = project.builder_id
            if builder_id:
                ws.builders.remove_project(builder_id, project_id)

        logger.info("project.deleted", project_id=project_id, manager_id=acting_manager_id)
        self._dispatch_event(
            "post_project_delete",
            {
                "project_id": project_id,
                "builder_id": project.builder_id,
                "manager_id": project.manager_id,
            },
        )
        return True
