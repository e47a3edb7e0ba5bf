"""Tests for IdentityStore — monotonic per-scope counters."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from builderfolio.domain.ids import IdScope, Role
from builderfolio.infrastructure.identity import IdentityStore


class TestIdentityStore:
    def test_starts_at_one(self) -> None:
        store = IdentityStore()
        assert store.next_id(IdScope.PROJECT) == 1
        assert store.next_id(IdScope.PROJECT) == 2

    def test_scopes_are_independent(self) -> None:
        store = IdentityStore()
        assert store.next_id(IdScope.PROJECT) == 1
        assert store.next_id(IdScope.CLIENT) == 1
        assert store.next_id(IdScope.PROJECT) == 2
        assert store.current(IdScope.CLIENT) == 1

    def test_user_ids_per_role(self) -> None:
        store = IdentityStore()
        assert store.next_user_id(Role.MANAGER) == "P1"
        assert store.next_user_id(Role.BUILDER) == "B1"
        assert store.next_user_id(Role.BUILDER) == "B2"
        assert store.next_user_id(Role.MANAGER) == "P2"

    def test_current_before_any_issue(self) -> None:
        assert IdentityStore().current(IdScope.BUILDER_USER) == 0

    def test_accepts_scope_value(self) -> None:
        store = IdentityStore()
        assert store.next_id("project") == 1  # type: ignore[arg-type]

    def test_unknown_scope_rejected(self) -> None:
        with pytest.raises(ValueError):
            IdentityStore().next_id("invoice")  # type: ignore[arg-type]


class TestConcurrentIssue:
    def test_no_duplicates_across_threads(self) -> None:
        store = IdentityStore()
        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(lambda _: store.next_id(IdScope.PROJECT), range(2000)))
        assert len(set(ids)) == 2000
        assert sorted(ids) == list(range(1, 2001))

    def test_user_ids_unique_across_threads(self) -> None:
        store = IdentityStore()
        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(lambda _: store.next_user_id(Role.BUILDER), range(500)))
        assert len(set(ids)) == 500
        assert all(i.startswith("B") for i in ids)
