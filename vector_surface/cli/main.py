"""vector-surface command line entry point."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from vector_surface import __version__
from vector_surface.cli.commands import demo, encode
from vector_surface.config import LOG_LEVELS, Config
from vector_surface.exceptions import ConfigError

console = Console()


def setup_logging(level: str) -> None:
    """Route library logging through rich."""
    logger = logging.getLogger("vector_surface")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)


@click.group()
@click.version_option(__version__, prog_name="vector-surface")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    help="YAML config file (default: ~/.config/vector-surface/config.yaml)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Override the configured log level",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, log_level: str | None) -> None:
    """Render drawing calls to SVG or HTML5 canvas, and encode page streams."""
    try:
        config = Config.load(config_path)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1) from None
    except ConfigError as e:
        console.print(f"[red]Config error:[/red] {e}")
        raise SystemExit(1) from None
    if log_level:
        config.log_level = log_level.upper()
    setup_logging(config.log_level)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


cli.add_command(demo)
cli.add_command(encode)


if __name__ == "__main__":
    cli()
