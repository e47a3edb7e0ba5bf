"""UserRepository — account records keyed by user identifier."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from builderfolio.domain.models import User


class UserRepository:
    """Stores :class:`User` records.

    Contact-address uniqueness is checked by callers through
    :meth:`exists_by_contact` before saving; :meth:`save` itself accepts
    whatever it is given.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: dict[str, User] = {}

    def save(self, user: User | None) -> None:
        """Insert *user*, silently replacing any record with the same ID."""
        if user is None:
            raise ValueError("User cannot be None")
        with self._lock:
            self._users[user.id] = user

    def exists_by_id(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._users

    def exists_by_contact(self, email: str) -> bool:
        """Linear scan for an exact, case-sensitive email match."""
        with self._lock:
            return any(user.email == email for user in self._users.values())

    def find_by_id(self, user_id: str) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def find_by_contact(self, email: str) -> User | None:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return user
        return None

    def all(self) -> list[User]:
        with self._lock:
            return list(self._users.values())

    def clear(self) -> None:
        """Drop every record. Intended for test isolation."""
        with self._lock:
            self._users.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
