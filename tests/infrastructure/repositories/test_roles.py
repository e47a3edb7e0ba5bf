"""Tests for RoleIndex — ordered holder-to-project links."""

from __future__ import annotations

import pytest

from builderfolio.domain.ids import Role
from builderfolio.infrastructure.repositories import RoleIndex


class TestCreateEntry:
    def test_creates_empty_list(self) -> None:
        index = RoleIndex(Role.BUILDER)
        index.create_entry("B1")
        assert index.exists("B1")
        assert index.projects_of("B1") == []

    def test_recreate_discards_links(self) -> None:
        index = RoleIndex(Role.MANAGER)
        index.create_entry("P1")
        index.add_project("P1", 1)
        index.create_entry("P1")
        assert index.projects_of("P1") == []

    def test_none_rejected(self) -> None:
        with pytest.raises(ValueError, match="Builder ID cannot be None"):
            RoleIndex(Role.BUILDER).create_entry(None)


class TestAddProject:
    def test_preserves_order(self) -> None:
        index = RoleIndex(Role.BUILDER)
        index.create_entry("B1")
        for pid in (3, 1, 2):
            index.add_project("B1", pid)
        assert index.projects_of("B1") == [3, 1, 2]

    def test_auto_creates_entry(self) -> None:
        index = RoleIndex(Role.BUILDER)
        index.add_project("B7", 4)
        assert index.exists("B7")
        assert index.projects_of("B7") == [4]

    def test_duplicates_kept(self) -> None:
        index = RoleIndex(Role.MANAGER)
        index.add_project("P1", 1)
        index.add_project("P1", 1)
        assert index.projects_of("P1") == [1, 1]

    def test_none_holder_rejected(self) -> None:
        with pytest.raises(ValueError, match="Manager ID cannot be None"):
            RoleIndex(Role.MANAGER).add_project(None, 1)

    def test_none_project_rejected(self) -> None:
        with pytest.raises(ValueError, match="Project ID cannot be None"):
            RoleIndex(Role.MANAGER).add_project("P1", None)


class TestRemoveProject:
    def test_removes_link(self) -> None:
        index = RoleIndex(Role.BUILDER)
        index.add_project("B1", 1)
        index.add_project("B1", 2)
        index.remove_project("B1", 1)
        assert index.projects_of("B1") == [2]

    def test_removes_every_occurrence(self) -> None:
        index = RoleIndex(Role.BUILDER)
        for pid in (1, 2, 1):
            index.add_project("B1", pid)
        index.remove_project("B1", 1)
        assert index.projects_of("B1") == [2]

    def test_missing_holder_is_noop(self) -> None:
        index = RoleIndex(Role.BUILDER)
        index.remove_project("B9", 1)
        assert not index.exists("B9")

    def test_missing_link_is_noop(self) -> None:
        index = RoleIndex(Role.BUILDER)
        index.add_project("B1", 2)
        index.remove_project("B1", 5)
        assert index.projects_of("B1") == [2]


class TestQueries:
    def test_unknown_holder_is_empty(self) -> None:
        assert RoleIndex(Role.BUILDER).projects_of("B1") == []

    def test_projects_of_returns_copy(self) -> None:
        index = RoleIndex(Role.BUILDER)
        index.add_project("B1", 1)
        index.projects_of("B1").append(99)
        assert index.projects_of("B1") == [1]

    def test_holders_and_clear(self) -> None:
        index = RoleIndex(Role.MANAGER)
        index.create_entry("P1")
        index.create_entry("P2")
        assert index.holders() == ["P1", "P2"]
        index.clear()
        assert index.holders() == []

    def test_repr(self) -> None:
        index = RoleIndex(Role.MANAGER)
        index.create_entry("P1")
        assert repr(index) == "RoleIndex(role='manager', holders=1)"
