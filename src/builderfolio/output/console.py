"""Rich Console factory and theme for builderfolio output.

Consoles render to a StringIO buffer so renderers return plain strings.
In non-TTY environments (tests, pipes) Rich drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

BF_THEME = Theme(
    {
        "bf.ok": "bold green",
        "bf.error": "bold red",
        "bf.warning": "bold yellow",
        "bf.op": "bold cyan",
        "bf.key": "dim",
        "bf.id": "bold blue",
        "bf.status.upcoming": "cyan",
        "bf.status.in_progress": "yellow",
        "bf.status.completed": "green",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=BF_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for a project status."""
    return f"bf.status.{status}" if status else ""
