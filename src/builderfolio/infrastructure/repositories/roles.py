"""RoleIndex — holder ID to the ordered project IDs that holder owns.

One instance exists per :class:`Role`. Entries are plain lists: order of
assignment is preserved and the same project ID may appear more than once
if it is linked twice.
"""

from __future__ import annotations

import logging
import threading

from builderfolio.domain.ids import Role

logger = logging.getLogger(__name__)


class RoleIndex:
    """Ordered project links for every builder or every manager."""

    def __init__(self, role: Role) -> None:
        self.role = Role(role)
        self._lock = threading.Lock()
        self._entries: dict[str, list[int]] = {}

    def __repr__(self) -> str:
        return f"RoleIndex(role={self.role.value!r}, holders={len(self._entries)})"

    def create_entry(self, holder_id: str | None) -> None:
        """Start an empty project list for *holder_id*.

        Replaces any existing list, so calling it twice discards the links
        recorded in between.
        """
        if holder_id is None:
            raise ValueError(f"{self.role.value.title()} ID cannot be None")
        with self._lock:
            self._entries[holder_id] = []

    def add_project(self, holder_id: str | None, project_id: int | None) -> None:
        """Append *project_id* to *holder_id*'s list (upsert-on-append).

        A holder that was never registered through :meth:`create_entry` gets
        an entry created on the spot.
        """
        if holder_id is None:
            raise ValueError(f"{self.role.value.title()} ID cannot be None")
        if project_id is None:
            raise ValueError("Project ID cannot be None")
        with self._lock:
            entry = self._entries.get(holder_id)
            if entry is None:
                logger.debug("Auto-creating %s entry for %s", self.role.value, holder_id)
                entry = self._entries[holder_id] = []
            entry.append(project_id)

    def remove_project(self, holder_id: str, project_id: int) -> None:
        """Remove every occurrence of *project_id* from *holder_id*'s list.

        No-op when the holder or the link does not exist.
        """
        with self._lock:
            entry = self._entries.get(holder_id)
            if entry is None:
                return
            entry[:] = [pid for pid in entry if pid != project_id]

    def projects_of(self, holder_id: str) -> list[int]:
        """Return a copy of *holder_id*'s project IDs (empty if unknown)."""
        with self._lock:
            return list(self._entries.get(holder_id, ()))

    def exists(self, holder_id: str) -> bool:
        with self._lock:
            return holder_id in self._entries

    def holders(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        """Drop every entry. Intended for test isolation."""
        with self._lock:
            self._entries.clear()
