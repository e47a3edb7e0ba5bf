"""Monotonic identifier counters, one per :class:`IdScope`.

Each scope starts at 1 and only ever moves forward. Counters have no reset;
clearing the repositories leaves them where they are.
"""

from __future__ import annotations

import threading

from builderfolio.domain.ids import ROLE_SCOPES, IdScope, Role, format_user_id


class IdentityStore:
    """Thread-safe issuer of per-scope sequential identifiers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[IdScope, int] = {scope: 0 for scope in IdScope}

    def next_id(self, scope: IdScope) -> int:
        """Claim the next identifier for *scope*.

        Raises:
            ValueError: If *scope* is not a recognized :class:`IdScope`.
        """
        scope = IdScope(scope)
        with self._lock:
            self._counters[scope] += 1
            return self._counters[scope]

    def next_user_id(self, role: Role) -> str:
        """Claim the next user identifier for *role* (``B1``, ``P2``, ...)."""
        return format_user_id(role, self.next_id(ROLE_SCOPES[role]))

    def current(self, scope: IdScope) -> int:
        """Return the last identifier issued for *scope* (0 if none yet)."""
        with self._lock:
            return self._counters[IdScope(scope)]
