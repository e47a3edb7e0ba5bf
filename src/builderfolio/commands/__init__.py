"""Subcommand modules for builderfolio.

Provides register_commands() which uses deferred imports so
``builderfolio --help`` does not load the service layer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all commands on the root CLI group."""
    from builderfolio.commands.run import run

    cli.add_command(run)
