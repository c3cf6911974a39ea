"""filetree CLI entry point."""

import logging
from pathlib import Path
from typing import Optional

import typer

from .. import __version__
from ..errors import FileTreeError
from ..fs import scan_leaves
from ..layout import MAX_COUNTER, encode
from ..tree import FileTree
from . import config as config_cli
from .common_options import config_option, root_option
from .display import console, error, info_dict, section, warning
from .utils import load_settings

app = typer.Typer(
    name="filetree",
    help="Allocate file paths in a sharded directory tree",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.add_typer(config_cli.app, name="config", help="Inspect and create configuration")


def _version_callback(value: bool):
    if value:
        console.print(f"filetree {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """Allocate file paths in a sharded directory tree."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def allocate(
    root: Optional[Path] = root_option(),
    count: int = typer.Option(1, "--count", "-n", min=1, help="Number of paths to allocate"),
    resume: bool = typer.Option(
        False, "--resume", help="Continue numbering after the leaves already in the tree"
    ),
    config: Optional[Path] = config_option(),
):
    """Allocate paths and print them, one per line.

    Parent directories are created; the files themselves are not.

    Example:
        filetree allocate --root /data/blobs --count 3 --resume
    """
    settings = load_settings(config, root)

    try:
        if resume:
            if settings.root is None:
                error("--resume needs a tree root (--root, config file, or FILETREE_ROOT)")
                raise typer.Exit(1)
            tree = FileTree.from_existing(settings.root)
        else:
            tree = settings.build()
            if not settings.persistent:
                warning(f"Temporary tree: {tree.root} is removed on exit")

        with tree:
            for _ in range(count):
                typer.echo(str(tree.allocate_path()))
    except FileTreeError as e:
        error(str(e))
        raise typer.Exit(1)


@app.command()
def locate(
    counter: int = typer.Argument(..., min=0, max=MAX_COUNTER, help="Counter value"),
):
    """Print the path of a counter relative to the tree root."""
    typer.echo(str(encode(counter).relative_path))


@app.command()
def scan(
    root: Path = typer.Argument(
        ..., help="Tree root", exists=True, file_okay=False, dir_okay=True
    ),
):
    """Report the leaves present in an existing tree."""
    count, lowest, highest = 0, None, None
    try:
        # leaves arrive in counter order
        for counter, _ in scan_leaves(root):
            if lowest is None:
                lowest = counter
            highest = counter
            count += 1
    except FileTreeError as e:
        error(str(e))
        raise typer.Exit(1)

    section(f"File tree at {root}")
    info_dict({
        "Leaves": count,
        "Lowest counter": "-" if lowest is None else lowest,
        "Highest counter": "-" if highest is None else highest,
        "Next counter": 0 if highest is None else highest + 1,
    })


if __name__ == "__main__":
    app()
