"""Tests for the project status lifecycle."""

import pytest

from builderfolio.domain.lifecycle import (
    PROJECT_TRANSITIONS,
    ProjectStatus,
    is_valid_transition,
    parse_status,
)


class TestProjectStatus:
    def test_members(self) -> None:
        assert {s.value for s in ProjectStatus} == {"upcoming", "in_progress", "completed"}

    def test_every_transition_allowed(self) -> None:
        for current in ProjectStatus:
            for target in ProjectStatus:
                assert is_valid_transition(current.value, target.value)

    def test_backwards_allowed(self) -> None:
        assert is_valid_transition("completed", "upcoming", PROJECT_TRANSITIONS)

    def test_unknown_current(self) -> None:
        assert not is_valid_transition("archived", "upcoming")

    def test_custom_map(self) -> None:
        forward_only = {"upcoming": ["in_progress"], "in_progress": ["completed"]}
        assert is_valid_transition("upcoming", "in_progress", forward_only)
        assert not is_valid_transition("completed", "upcoming", forward_only)


class TestParseStatus:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("UPCOMING", ProjectStatus.UPCOMING),
            ("IN_PROGRESS", ProjectStatus.IN_PROGRESS),
            ("in-progress", ProjectStatus.IN_PROGRESS),
            ("In Progress", ProjectStatus.IN_PROGRESS),
            ("completed", ProjectStatus.COMPLETED),
        ],
    )
    def test_tokens(self, token: str, expected: ProjectStatus) -> None:
        assert parse_status(token) is expected

    def test_unknown_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown project status"):
            parse_status("ON_HOLD")
