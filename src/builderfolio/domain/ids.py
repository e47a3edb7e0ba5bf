"""Identifier scopes, role tags, and user-ID formatting.

Every entity class draws from its own monotonic sequence:

- Users: one sequence per role, rendered as ``{prefix}{n}`` (``B1``, ``P3``).
- Projects and clients: plain integers from their own global sequences.

INVARIANT: IDs are permanent. Once issued, an ID is never changed or reused.

The role of a user travels in an explicit :class:`Role` field. Nothing in
the core derives a role from the first character of an identifier.
"""

from __future__ import annotations

import re
from enum import StrEnum


class Role(StrEnum):
    """The two account roles that can own projects."""

    BUILDER = "builder"
    MANAGER = "manager"


class IdScope(StrEnum):
    """Independent identifier sequences."""

    BUILDER_USER = "builder_user"
    MANAGER_USER = "manager_user"
    PROJECT = "project"
    CLIENT = "client"


ROLE_PREFIXES: dict[Role, str] = {
    Role.BUILDER: "B",
    Role.MANAGER: "P",
}

ROLE_SCOPES: dict[Role, IdScope] = {
    Role.BUILDER: IdScope.BUILDER_USER,
    Role.MANAGER: IdScope.MANAGER_USER,
}

USER_ID_PATTERNS: dict[Role, re.Pattern[str]] = {
    role: re.compile(rf"^{prefix}[1-9]\d*$") for role, prefix in ROLE_PREFIXES.items()
}


def parse_role(token: str) -> Role:
    """Map a role token (``"builder"``, ``"Manager"``, ...) to a :class:`Role`.

    Raises:
        ValueError: If *token* names no known role.
    """
    try:
        return Role(token.strip().lower())
    except ValueError:
        msg = f"Unknown role: {token!r}. Expected one of {[r.value for r in Role]}"
        raise ValueError(msg) from None


def format_user_id(role: Role, sequence: int) -> str:
    """Render the user identifier for *role* and counter value *sequence*."""
    if sequence < 1:
        msg = f"User sequence must be positive, got {sequence}"
        raise ValueError(msg)
    return f"{ROLE_PREFIXES[role]}{sequence}"


def validate_user_id(user_id: str, role: Role) -> bool:
    """Check whether *user_id* has the shape issued for *role*."""
    return USER_ID_PATTERNS[role].match(user_id) is not None
