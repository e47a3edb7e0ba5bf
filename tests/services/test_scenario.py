"""Tests for ScenarioService — scripted replay of operations."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pluggy
import pytest

from builderfolio.config.models import PluginsConfig
from builderfolio.config.settings import BuilderfolioSettings
from builderfolio.infrastructure.workspace import Workspace
from builderfolio.services.scenario import ScenarioService

CLIENT = {"name": "Client X", "email": "x@example.com", "phone": "555-0101"}


def _owners() -> list[dict[str, Any]]:
    return [
        {
            "op": "register",
            "name": "Asha",
            "email": "asha@example.com",
            "password": "pw",
            "role": "manager",
        },
        {
            "op": "register",
            "name": "Ravi",
            "email": "ravi@example.com",
            "password": "pw",
            "role": "builder",
        },
    ]


def _create(**overrides: Any) -> dict[str, Any]:
    step = {
        "op": "create_project",
        "actor": "P1",
        "name": "Bridge",
        "description": "desc",
        "start_date": "2025-01-01",
        "end_date": "2025-12-31",
        "client": CLIENT,
        "builder_id": "B1",
    }
    step.update(overrides)
    return step


class TestReplay:
    def test_example_walkthrough(self, workspace: Workspace) -> None:
        steps = [
            *_owners(),
            _create(status="UPCOMING"),
            {"op": "list_projects", "holder": "B1", "role": "builder"},
            {"op": "update_status", "actor": "B1", "project_id": 1, "status": "IN_PROGRESS"},
            {"op": "delete_project", "actor": "P1", "project_id": 1},
            {"op": "list_projects", "holder": "P1", "role": "manager"},
        ]
        result = ScenarioService(workspace).replay(steps)
        assert result.ok, result.error
        assert result.op == "run"
        assert result.data["completed"] == 7
        outcomes = result.data["steps"]
        assert outcomes[0]["user_id"] == "P1"
        assert outcomes[1]["user_id"] == "B1"
        assert outcomes[2]["project"]["id"] == 1
        assert outcomes[2]["project"]["status"] == "upcoming"
        assert outcomes[3]["count"] == 1
        assert outcomes[4]["status"] == "in_progress"
        assert outcomes[6]["items"] == []

    def test_stops_at_first_failure(self, workspace: Workspace) -> None:
        steps = [
            *_owners(),
            {"op": "update_status", "actor": "B2", "project_id": 1, "status": "completed"},
            _create(),
        ]
        result = ScenarioService(workspace).replay(steps)
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "STEP_FAILED"
        assert result.error.detail == {"index": 2}
        assert result.error.message.startswith("Step 2 (update_status) failed")
        assert len(result.data["steps"]) == 3
        assert len(workspace.projects) == 0

    def test_partial_keeps_going(self, workspace: Workspace) -> None:
        steps = [
            *_owners(),
            {"op": "update_status", "actor": "B1", "project_id": 9, "status": "completed"},
            _create(),
        ]
        result = ScenarioService(workspace).replay(steps, partial=True)
        assert result.ok
        assert result.data["completed"] == 3
        assert [e["index"] for e in result.data["errors"]] == [2]
        assert len(result.warnings) == 1
        assert len(workspace.projects) == 1

    def test_empty(self, workspace: Workspace) -> None:
        result = ScenarioService(workspace).replay([])
        assert result.ok
        assert result.data == {"steps": [], "completed": 0, "errors": []}


class TestStepValidation:
    @pytest.mark.parametrize(
        "step",
        [
            {"op": "teleport"},
            {"name": "no op"},
            "not-a-dict",
            {"op": "register", "name": "A", "email": "a@x", "password": "pw", "role": "architect"},
            {"op": "update_status", "actor": "B1", "project_id": 1, "status": "ON_HOLD"},
            {"op": "check", "extra": True},
        ],
    )
    def test_malformed_step(self, workspace: Workspace, step: Any) -> None:
        result = ScenarioService(workspace).replay([step])
        assert not result.ok
        assert result.data["steps"][0]["ok"] is False

    def test_same_day_schedule_refused(self, workspace: Workspace) -> None:
        steps = [*_owners(), _create(end_date="2025-01-01")]
        result = ScenarioService(workspace).replay(steps)
        assert not result.ok
        assert "cannot be the same" in result.data["errors"][0]["error"]
        assert len(workspace.projects) == 0

    def test_end_before_start_refused(self, workspace: Workspace) -> None:
        steps = [*_owners(), _create(end_date="2024-01-01")]
        result = ScenarioService(workspace).replay(steps)
        assert not result.ok
        assert "End date cannot be before start date" in result.data["errors"][0]["error"]


class TestActors:
    def test_unregistered_manager(self, workspace: Workspace) -> None:
        steps = [*_owners(), _create(actor="P9")]
        result = ScenarioService(workspace).replay(steps)
        assert result.data["errors"][0]["error"] == "User not found: P9"

    def test_builder_cannot_act_as_manager(self, workspace: Workspace) -> None:
        steps = [*_owners(), _create(actor="B1")]
        result = ScenarioService(workspace).replay(steps)
        assert result.data["errors"][0]["error"] == "User B1 is not a manager"

    @pytest.mark.parametrize("actor", ["manager-1", "P0", "p1", "B1x"])
    def test_malformed_actor_id(self, workspace: Workspace, actor: str) -> None:
        steps = [*_owners(), _create(actor=actor)]
        result = ScenarioService(workspace).replay(steps)
        assert result.data["errors"][0]["error"] == f"User {actor} is not a manager"
        assert len(workspace.projects) == 0

    def test_owner_must_be_builder(self, workspace: Workspace) -> None:
        steps = [*_owners(), _create(builder_id="P1")]
        result = ScenarioService(workspace).replay(steps)
        assert result.data["errors"][0]["error"] == "User P1 is not a builder"

    def test_duplicate_registration(self, workspace: Workspace) -> None:
        steps = [*_owners(), _owners()[0]]
        result = ScenarioService(workspace).replay(steps)
        assert not result.ok
        assert "already exists" in result.data["errors"][0]["error"]


class TestOtherSteps:
    def test_login(self, workspace: Workspace) -> None:
        steps = [
            *_owners(),
            {"op": "login", "user_id": "B1", "password": "pw"},
            {"op": "login", "user_id": "B1", "password": "nope"},
        ]
        result = ScenarioService(workspace).replay(steps, partial=True)
        assert result.data["steps"][2] == {
            "index": 2,
            "op": "login",
            "ok": True,
            "user_id": "B1",
            "role": "builder",
        }
        assert result.data["errors"][0]["error"] == "Incorrect password"

    def test_update_details(self, workspace: Workspace) -> None:
        steps = [
            *_owners(),
            _create(),
            {"op": "update_details", "actor": "P1", "project_id": 1, "name": "Bridge II"},
        ]
        result = ScenarioService(workspace).replay(steps)
        assert result.ok
        assert result.data["steps"][3]["project"]["name"] == "Bridge II"

    def test_check_and_fix(self, workspace: Workspace) -> None:
        steps = [*_owners(), _create()]
        assert ScenarioService(workspace).replay(steps).ok
        workspace.projects.remove(1)

        result = ScenarioService(workspace).replay([{"op": "check"}, {"op": "fix"}])
        assert result.ok
        check, fix = result.data["steps"]
        assert check["count"] == 2
        assert fix["count"] == 2
        assert workspace.builders.projects_of("B1") == []


hookimpl = pluggy.HookimplMarker("builderfolio")


class RemoveAfterUpdate:
    """Drops the project from the repository as soon as it is edited."""

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    @hookimpl
    def post_project_update(
        self, project_id: int, actor_id: str, fields_changed: list[str]
    ) -> None:
        self._workspace.projects.remove(project_id)


@pytest.fixture
def sync_workspace() -> Iterator[Workspace]:
    ws = Workspace(BuilderfolioSettings(plugins=PluginsConfig(enabled=True)))
    ws.init_event_bus(sync=True)
    try:
        yield ws
    finally:
        ws.close()


class TestVanishingProject:
    def test_update_details_reports_missing_project(self, sync_workspace: Workspace) -> None:
        assert sync_workspace.event_bus is not None
        sync_workspace.event_bus.plugin_manager.register_plugin(RemoveAfterUpdate(sync_workspace))
        steps = [
            *_owners(),
            _create(),
            {"op": "update_details", "actor": "P1", "project_id": 1, "name": "Bridge II"},
        ]
        result = ScenarioService(sync_workspace).replay(steps)
        assert not result.ok
        assert result.data["errors"][0]["error"] == "Project 1 disappeared during update"
