"""Command-line entry point for nexplore."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from . import display
from .cache import NodeCache
from .config import DEFAULT_LOG_LEVEL, Config
from .errors import OpenError
from .logs import configure_logging
from .reader import open_file
from .tree import TreeState

logger = logging.getLogger(__name__)


@click.command()
@click.argument("path", type=click.Path(path_type=Path))
@click.option("-p", "--print", "print_only", is_flag=True, help="Print the tree instead of starting the TUI")
@click.option("-d", "--depth", type=click.IntRange(min=0), help="Limit printed depth (with --print)")
@click.option("--theme", help="Theme name for the TUI")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write logs to this file")
@click.option("-v", "--verbose", is_flag=True, help="Log debug messages")
@click.version_option(package_name="nexplore")
def cli(path, print_only, depth, theme, log_file, verbose):
    """Explore the HDF5 or NeXus file at PATH."""
    # CLI logging options cover warnings raised while loading the config.
    configure_logging("DEBUG" if verbose else DEFAULT_LOG_LEVEL, log_file)
    config = Config.load()
    if theme:
        config.theme = theme
    if log_file:
        config.log_file = log_file
    if verbose:
        config.log_level = "DEBUG"
    configure_logging(config.log_level, config.log_file)

    try:
        reader = open_file(path)
    except OpenError as e:
        logger.error("%s", e)
        raise click.ClickException(str(e))

    if print_only:
        try:
            display.print_tree(TreeState(NodeCache(reader)), reader.file_size, max_depth=depth)
        finally:
            reader.close()
        return

    from .tui import run_tui
    run_tui(reader, config)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
