"""Lifecycle event dispatch via pluggy, inline or on a thread pool.

INVARIANT: Plugin failures are warnings, never errors. A failing hook is
logged and counted; it never propagates into the operation that fired it.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from builderfolio.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class EventBus:
    """Dispatch lifecycle events to registered plugins.

    Parameters:
        plugin_manager: PluginManager whose hook relay receives events.
        sync: Run hooks on the calling thread instead of the pool.
        max_workers: ThreadPoolExecutor worker count.
    """

    def __init__(
        self,
        plugin_manager: PluginManager,
        *,
        sync: bool = False,
        max_workers: int = 2,
    ) -> None:
        self._pm = plugin_manager
        self._sync = sync
        self._executor: ThreadPoolExecutor | None = (
            None if sync else ThreadPoolExecutor(max_workers=max_workers)
        )
        self._futures: list[Future[bool]] = []
        self._lock = threading.Lock()
        self._failures = 0

    @property
    def plugin_manager(self) -> PluginManager:
        return self._pm

    @property
    def failures(self) -> int:
        """Number of hook invocations that raised so far."""
        with self._lock:
            return self._failures

    def dispatch(self, hook_name: str, payload: dict[str, Any]) -> bool:
        """Fire *hook_name* with *payload* as keyword arguments.

        Returns False only when a synchronous dispatch failed. Asynchronous
        dispatches always return True; failures surface in :attr:`failures`.
        """
        if self._sync or self._executor is None:
            return self._execute_hook(hook_name, payload)

        future = self._executor.submit(self._execute_hook, hook_name, payload)
        with self._lock:
            self._futures.append(future)
        return True

    def drain(self) -> None:
        """Block until every in-flight asynchronous dispatch has finished."""
        with self._lock:
            pending, self._futures = self._futures, []
        if pending:
            wait(pending)

    def shutdown(self) -> None:
        """Drain and stop the executor."""
        self.drain()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _execute_hook(self, hook_name: str, payload: dict[str, Any]) -> bool:
        hook = getattr(self._pm.hook, hook_name, None)
        if hook is None:
            logger.warning("Unknown hook: %s", hook_name)
            return False
        try:
            hook(**payload)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)
            with self._lock:
                self._failures += 1
            return False
        return True
