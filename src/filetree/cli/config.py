"""Configuration management CLI commands."""

from pathlib import Path
from typing import Optional

import typer
from rich.syntax import Syntax

from ..config import FileTreeConfig
from .common_options import config_option, force_option, root_option
from .display import console, error, info, success
from .utils import load_settings

app = typer.Typer(help="Inspect and create filetree configuration")


@app.command()
def show(
    config: Optional[Path] = config_option(),
):
    """Display the effective configuration.

    Values come from the config file (if given), then FILETREE_ROOT.
    """
    settings = load_settings(config)
    console.print(Syntax(settings.to_yaml_string(), "yaml", theme="ansi_dark"))


@app.command()
def init(
    path: Path = typer.Argument(..., help="Where to write the configuration file", dir_okay=False),
    root: Optional[Path] = root_option("Tree root to record in the file"),
    temporary: bool = typer.Option(
        False, "--temporary", help="Remove the tree root on teardown"
    ),
    force: bool = force_option(),
):
    """Write a configuration file with default values."""
    if path.exists() and not force:
        error(f"{path} already exists (use --force to overwrite)")
        raise typer.Exit(1)

    settings = FileTreeConfig(root=root, persistent=not temporary)
    try:
        settings.to_yaml(path)
    except OSError as e:
        error(f"Failed to write {path}: {e}")
        raise typer.Exit(1)

    success(f"Configuration saved to {path}")
    info("Use 'filetree config show --config <file>' to review it")
