"""Plex operator command-line interface."""

from __future__ import annotations

import asyncio
from pathlib import Path

import click
from safir.click import display_help
from safir.kubernetes import initialize_kubernetes
from safir.logging import configure_logging

from . import __version__
from .config import Config
from .constants import (
    CONFIGURATION_PATH,
    CONFIGURATION_PATH_ENV_VAR,
    ROOT_LOGGER,
)
from .factory import Factory

__all__ = [
    "help",
    "main",
    "reconcile",
    "run",
]

_config_path_option = click.option(
    "--config-path",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar=CONFIGURATION_PATH_ENV_VAR,
    default=CONFIGURATION_PATH,
    show_default=True,
    help="Path to the operator configuration",
)


def _load_config(config_path: Path) -> Config:
    """Load configuration and set up logging."""
    config = Config.from_file(config_path)
    configure_logging(
        name=ROOT_LOGGER, profile=config.profile, log_level=config.log_level
    )
    return config


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, message="%(version)s")
def main() -> None:
    """Kubernetes operator for Plex Media Server."""


@main.command()
@click.argument("topic", default=None, required=False, nargs=1)
@click.argument("subtopic", default=None, required=False, nargs=1)
@click.pass_context
def help(ctx: click.Context, topic: str | None, subtopic: str | None) -> None:
    """Show help for any command."""
    display_help(main, ctx, topic, subtopic)


@main.command()
@_config_path_option
def run(*, config_path: Path) -> None:
    """Reconcile every Plex media server until interrupted."""
    config = _load_config(config_path)

    async def _run() -> None:
        await initialize_kubernetes()
        async with Factory.standalone(config) as factory:
            await factory.create_reconcile_loop().run()

    asyncio.run(_run())


@main.command()
@_config_path_option
@click.argument("namespace")
@click.argument("name")
def reconcile(*, config_path: Path, namespace: str, name: str) -> None:
    """Make one reconcile pass for a single Plex media server."""
    config = _load_config(config_path)

    async def _reconcile() -> bool:
        await initialize_kubernetes()
        async with Factory.standalone(config) as factory:
            reconciler = factory.create_plex_reconciler()
            return await reconciler.reconcile_by_name(name, namespace)

    if asyncio.run(_reconcile()):
        click.echo("Not yet converged, another pass is needed")
    else:
        click.echo("Converged")
