"""Project status lifecycle.

Status changes are unconstrained: any status is reachable from any other,
including itself. The transition map is still spelled out so that a
forward-only rule has exactly one place to live.
"""

from __future__ import annotations

from enum import StrEnum


class ProjectStatus(StrEnum):
    """Progress state of a construction project."""

    UPCOMING = "upcoming"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


PROJECT_TRANSITIONS: dict[str, list[str]] = {
    status.value: [target.value for target in ProjectStatus] for status in ProjectStatus
}


def parse_status(token: str) -> ProjectStatus:
    """Map a status token to a :class:`ProjectStatus`.

    Accepts the enum values as well as upper-case console tokens such as
    ``IN_PROGRESS`` and spaced or hyphenated variants (``in-progress``).

    Raises:
        ValueError: If *token* names no known status.
    """
    normalized = token.strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return ProjectStatus(normalized)
    except ValueError:
        msg = f"Unknown project status: {token!r}. Expected one of {list(PROJECT_TRANSITIONS)}"
        raise ValueError(msg) from None


def is_valid_transition(
    current: str,
    target: str,
    transitions: dict[str, list[str]] = PROJECT_TRANSITIONS,
) -> bool:
    """Check if transitioning from *current* to *target* is allowed."""
    allowed = transitions.get(current, [])
    return target in allowed
