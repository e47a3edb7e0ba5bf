"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op``; unknown ops fall through to a
generic key-value renderer.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from builderfolio.output.console import create_console, get_output, style_for_status

if TYPE_CHECKING:
    from rich.console import Console

    from builderfolio.services.result import ServiceResult


def render_result(result: ServiceResult) -> str:
    """Render *result* to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
    else:
        _render_error(result, console)
    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="bf.ok"), Text(f"  {result.op}", style="bf.op"))


def _step_summary(step: dict[str, Any]) -> str:
    if not step.get("ok"):
        return str(step.get("error", ""))
    if "project" in step:
        project = step["project"]
        return f"project {project['id']} {project['name']!r} [{project['status']}]"
    if "user_id" in step:
        return f"{step.get('role', '')} {step['user_id']}"
    if "items" in step:
        return ", ".join(f"{p['id']}:{p['status']}" for p in step["items"]) or "(none)"
    if "issues" in step:
        return f"{step['count']} issue(s)"
    if "fixes" in step:
        return f"{step['count']} fix(es)"
    if "status" in step:
        return f"project {step['project_id']} -> {step['status']}"
    if "project_id" in step:
        return f"project {step['project_id']}"
    return ""


def _steps_table(steps: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Op", style="bf.op")
    table.add_column("Result")
    table.add_column("Detail")
    for step in steps:
        ok = Text("ok", style="bf.ok") if step.get("ok") else Text("failed", style="bf.error")
        table.add_row(
            str(step.get("index", "")),
            str(step.get("op", "")),
            ok,
            Text(_step_summary(step)),
        )
    return table


def _projects_table(items: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="bf.id", justify="right")
    table.add_column("Name")
    table.add_column("Status")
    table.add_column("Builder")
    table.add_column("Manager")
    table.add_column("Dates", style="dim")
    for item in items:
        status = str(item.get("status", ""))
        table.add_row(
            str(item.get("id", "")),
            Text(str(item.get("name", ""))),
            Text(status, style=style_for_status(status)),
            str(item.get("builder_id", "")),
            str(item.get("manager_id", "")),
            f"{item.get('start_date', '')} .. {item.get('end_date', '')}",
        )
    return table


# ── Renderers ─────────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            value = json.dumps(value, separators=(",", ":"))
        console.print(Text(f"  {key}: ", style="bf.key"), Text(str(value)), sep="")


def _render_run(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    steps = result.data.get("steps", [])
    console.print(_steps_table(steps))
    listed = [step for step in steps if step.get("ok") and step.get("items")]
    if listed:
        console.print(Text("Last project listing", style="bf.key"))
        console.print(_projects_table(listed[-1]["items"]))


def _render_error(result: ServiceResult, console: Console) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="bf.error"),
        Text(f"  {result.op}", style="bf.op"),
        Text(f"- {msg}"),
    )
    steps = result.data.get("steps")
    if steps:
        console.print(_steps_table(steps))


_OP_RENDERERS: dict[str, Callable[[ServiceResult, Console], None]] = {
    "run": _render_run,
}
