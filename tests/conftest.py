"""Shared pytest fixtures and test helpers for builderfolio tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from builderfolio.config.models import CoordinatorConfig, PluginsConfig
from builderfolio.config.settings import BuilderfolioSettings
from builderfolio.domain.ids import Role
from builderfolio.domain.lifecycle import ProjectStatus
from builderfolio.domain.models import Project
from builderfolio.infrastructure.workspace import Workspace


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep BUILDERFOLIO_* variables from the host out of every test."""
    import os

    for key in list(os.environ):
        if key.startswith("BUILDERFOLIO_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings() -> BuilderfolioSettings:
    """Settings with plugins off and orchestration serialized."""
    return BuilderfolioSettings(plugins=PluginsConfig(enabled=False))


@pytest.fixture
def workspace(settings: BuilderfolioSettings) -> Iterator[Workspace]:
    """Fresh in-memory workspace without an event bus."""
    ws = Workspace(settings)
    try:
        yield ws
    finally:
        ws.close()


@pytest.fixture
def unserialized_workspace() -> Iterator[Workspace]:
    """Workspace whose orchestration scope takes no lock."""
    ws = Workspace(
        BuilderfolioSettings(
            coordinator=CoordinatorConfig(serialize_orchestration=False),
            plugins=PluginsConfig(enabled=False),
        )
    )
    try:
        yield ws
    finally:
        ws.close()


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in an empty directory so no builderfolio.toml is discovered."""
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service test modules)
# ---------------------------------------------------------------------------


def register(ws: Workspace, name: str, role: Role, **kwargs: Any) -> str:
    """Register a user via AccountService, asserting success; return the ID."""
    from builderfolio.services.accounts import AccountService

    params: dict[str, Any] = {
        "email": f"{name.lower()}@example.com",
        "phone": "555-0100",
        "experience": 3,
        "password": "secret",
    }
    params.update(kwargs)
    result = AccountService(ws).register(
        name,
        params["email"],
        params["phone"],
        params["experience"],
        params["password"],
        role,
    )
    assert result.ok, result.error
    return str(result.data["id"])


def create_project(
    ws: Workspace,
    builder_id: str,
    manager_id: str,
    name: str = "Bridge",
    **kwargs: Any,
) -> Project:
    """Create a project via ProjectCoordinator with sensible defaults."""
    from builderfolio.services.coordinator import ProjectCoordinator

    coordinator = ProjectCoordinator(ws)
    client = coordinator.new_client("City Council", "council@example.com", "555-0199")
    return coordinator.create_project(
        name,
        kwargs.get("description", ""),
        kwargs.get("start_date", date(2025, 1, 1)),
        kwargs.get("end_date", date(2025, 12, 31)),
        kwargs.get("client", client),
        kwargs.get("status", ProjectStatus.UPCOMING),
        builder_id,
        manager_id,
    )
