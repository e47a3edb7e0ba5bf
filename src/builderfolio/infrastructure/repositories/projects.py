"""ProjectRepository — full project records keyed by project ID."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from builderfolio.domain.models import Project


class ProjectRepository:
    """Stores :class:`Project` records."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._projects: dict[int, Project] = {}

    def save(self, project: Project | None) -> None:
        """Insert *project*, silently replacing any record with the same ID."""
        if project is None:
            raise ValueError("Project cannot be None")
        with self._lock:
            self._projects[project.id] = project

    def find_by_id(self, project_id: int) -> Project | None:
        with self._lock:
            return self._projects.get(project_id)

    def remove(self, project_id: int) -> None:
        """Remove the project with *project_id*; no-op when absent."""
        with self._lock:
            self._projects.pop(project_id, None)

    def all(self) -> list[Project]:
        """All projects in ascending ID order."""
        with self._lock:
            return [self._projects[pid] for pid in sorted(self._projects)]

    def clear(self) -> None:
        """Drop every record. Intended for test isolation."""
        with self._lock:
            self._projects.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._projects)
