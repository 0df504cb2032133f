from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from photonctl.cli import common, deployments, networks, profiles, system, tasks
from photonctl.constants import LOGGER_NAME, VERSION
from photonctl.errors import PhotonError
from photonctl.logging_config import configure_logging
from photonctl.utils.output import OutputFormat

logger = logging.getLogger(f"{LOGGER_NAME}.cli")

app = typer.Typer(no_args_is_help=True, add_completion=False, help="Photon control plane CLI")

app.add_typer(deployments.app, name="deployment")
app.add_typer(networks.app, name="network")
app.add_typer(system.app, name="system")
app.add_typer(tasks.app, name="task")
app.add_typer(profiles.profiles_app, name="profiles")
app.add_typer(profiles.config_app, name="config")
app.command("configure", help="Write a control plane profile")(profiles.configure)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"photonctl {VERSION}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    profile: Annotated[str | None, typer.Option("--profile", "-p", help="Profile name")] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config-file", "-c", help="Path to profile config file"),
    ] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = "json",
    non_interactive: Annotated[
        bool,
        typer.Option("--non-interactive", "-n", help="Never prompt; print tab-separated lines"),
    ] = False,
    log_file: Annotated[Path | None, typer.Option("--log-file", "-l", help="Write a debug log here")] = None,
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show version"),
    ] = None,
) -> None:
    _ = version
    source = ctx.get_parameter_source("output")
    # Compared by name: typer may bundle its own click with a distinct enum class.
    output_explicit = source is not None and source.name != "DEFAULT"
    if non_interactive and output_explicit and output in ("json", "yaml"):
        raise typer.BadParameter("--non-interactive cannot be combined with --output json/yaml", param_hint="--output")
    configure_logging(log_file)
    ctx.obj = common.CLIState(
        profile=profile,
        config_file=config_file,
        output=output,
        output_explicit=output_explicit,
        non_interactive=non_interactive,
        log_file=log_file,
    )


def run() -> None:
    try:
        app()
    except PhotonError as exc:
        logger.debug("command failed", exc_info=exc)
        typer.echo(f"error: {exc}", err=True)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    run()
