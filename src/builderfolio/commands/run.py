"""Command: replay a JSON scenario against a fresh in-memory workspace."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from builderfolio.commands._base import BfCommand
from builderfolio.services.result import ServiceResult

if TYPE_CHECKING:
    from builderfolio.commands._context import AppContext

INVALID_FILE = "INVALID_FILE"
INVALID_FORMAT = "INVALID_FORMAT"


@click.command(
    cls=BfCommand,
    examples="""\
  builderfolio run scenario.json
  builderfolio run scenario.json --partial
  builderfolio --json run scenario.json
  builderfolio --sync -v run scenario.json""",
)
@click.argument("scenario", type=click.Path(exists=True, dir_okay=False))
@click.option("--partial", is_flag=True, help="Keep going after a failed step.")
@click.pass_obj
def run(app: AppContext, scenario: str, partial: bool) -> None:
    """Replay the operations listed in SCENARIO.

    SCENARIO must contain a JSON array of objects, each with an "op" key
    (register, login, create_project, update_status, update_details,
    delete_project, list_projects, check, fix).
    """
    try:
        with open(scenario, encoding="utf-8") as f:
            steps = json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        app.emit(ServiceResult.failure("run", INVALID_FILE, f"Error reading {scenario}: {exc}"))
        return

    if not isinstance(steps, list):
        app.emit(
            ServiceResult.failure(
                "run", INVALID_FORMAT, "Scenario file must contain a top-level array."
            )
        )
        return

    from builderfolio.services.scenario import ScenarioService

    try:
        result = ScenarioService(app.workspace).replay(steps, partial=partial)
    finally:
        app.close()
    app.emit(result)
