"""Root CLI group for builderfolio with global flags and command registration."""

from __future__ import annotations

import click

from builderfolio import __version__
from builderfolio.commands import register_commands
from builderfolio.commands._context import AppContext
from builderfolio.config.settings import BuilderfolioSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="builderfolio")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--sync", is_flag=True, help="Force synchronous event dispatch.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    sync: bool,
) -> None:
    """builderfolio — construction project tracking for builders and managers."""
    ctx.ensure_object(dict)
    settings = BuilderfolioSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        verbose=verbose,
        log_json=log_json,
        sync=sync,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
