"""Workspace — the stores behind every service, wired together once.

The Workspace is the single dependency injected into each service. It owns
the identity counters, the user repository, the builder and manager role
indices, and the project repository, replacing the process-wide globals a
console application would otherwise reach for.

Every store is safe for concurrent single-key access on its own. A change
that spans several stores (creating or deleting a project touches three)
is made atomic by running it inside :meth:`Workspace.orchestration`, which
takes one re-entrant lock for the duration when
``coordinator.serialize_orchestration`` is enabled. With it disabled, a
concurrent reader may observe a project in the repository but not yet in
an index, or the reverse.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager, nullcontext
from typing import TYPE_CHECKING, Any

from builderfolio.domain.ids import Role
from builderfolio.infrastructure.identity import IdentityStore
from builderfolio.infrastructure.repositories import ProjectRepository, RoleIndex, UserRepository

if TYPE_CHECKING:
    from collections.abc import Iterator

    from builderfolio.config.settings import BuilderfolioSettings
    from builderfolio.plugins.event_bus import EventBus

logger = logging.getLogger(__name__)


class Workspace:
    """In-memory state shared by all services of one process."""

    def __init__(self, settings: BuilderfolioSettings | None = None) -> None:
        if settings is None:
            from builderfolio.config.settings import BuilderfolioSettings

            settings = BuilderfolioSettings()
        self._settings = settings
        self._lock = threading.RLock()
        self._event_bus: EventBus | None = None

        self.identities = IdentityStore()
        self.users = UserRepository()
        self.builders = RoleIndex(Role.BUILDER)
        self.managers = RoleIndex(Role.MANAGER)
        self.projects = ProjectRepository()

    @property
    def settings(self) -> BuilderfolioSettings:
        return self._settings

    @property
    def event_bus(self) -> EventBus | None:
        """The event bus, or None if not initialized."""
        return self._event_bus

    def index_for(self, role: Role) -> RoleIndex:
        """Return the role index that holds links for *role*."""
        if Role(role) is Role.BUILDER:
            return self.builders
        return self.managers

    @contextmanager
    def orchestration(self) -> Iterator[None]:
        """Scope one multi-store change.

        Serializes against every other orchestration in this workspace
        unless ``coordinator.serialize_orchestration`` is off, in which case
        it is a no-op and steps interleave freely.
        """
        guard: Any = (
            self._lock if self._settings.coordinator.serialize_orchestration else nullcontext()
        )
        with guard:
            yield

    def init_event_bus(self, *, sync: bool | None = None) -> EventBus | None:
        """Load plugins and start dispatching lifecycle events.

        Returns None when plugins are disabled in settings.
        """
        if not self._settings.plugins.enabled:
            return None
        if self._event_bus is not None:
            return self._event_bus

        from builderfolio.plugins.event_bus import EventBus
        from builderfolio.plugins.manager import PluginManager

        pm = PluginManager()
        names = pm.discover_and_load()
        logger.debug("Loaded plugins: %s", names)
        self._event_bus = EventBus(
            pm,
            sync=self._settings.sync if sync is None else sync,
            max_workers=self._settings.plugins.max_workers,
        )
        return self._event_bus

    def clear(self) -> None:
        """Empty every repository and index. Identity counters keep counting."""
        with self._lock:
            self.users.clear()
            self.builders.clear()
            self.managers.clear()
            self.projects.clear()

    def close(self) -> None:
        """Flush pending plugin events and release the executor."""
        if self._event_bus is not None:
            self._event_bus.shutdown()
            self._event_bus = None
