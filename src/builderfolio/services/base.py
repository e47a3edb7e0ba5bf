"""BaseService — common foundation for builderfolio services.

Every service receives a :class:`Workspace` at construction time and reaches
all repositories, indices, and counters through it. Multi-store changes run
inside ``self._workspace.orchestration()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from builderfolio.infrastructure.workspace import Workspace

logger = structlog.get_logger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class AuditService(BaseService):
            def audit(self) -> ServiceResult:
                with self._workspace.orchestration():
                    ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str] | None = None,
    ) -> None:
        """Dispatch a lifecycle event. No-op if the event bus is not initialized.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        bus = self._workspace.event_bus
        if bus is None:
            return
        if not bus.dispatch(hook_name, payload):
            logger.warning("event.dispatch_failed", hook=hook_name)
            if warnings is not None:
                warnings.append(f"Event dispatch failed for {hook_name}")
