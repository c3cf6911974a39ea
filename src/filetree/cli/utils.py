"""Shared helpers for CLI commands."""

from pathlib import Path

import typer

from ..config import FileTreeConfig
from ..errors import ConfigError
from .display import error


def load_settings(config_path: Path | None, root: Path | None = None) -> FileTreeConfig:
    """Load settings from an optional config file, applying CLI overrides.

    Exits with code 1 if the config file is missing or invalid.
    """
    try:
        settings = FileTreeConfig.from_yaml(config_path) if config_path else FileTreeConfig()
    except ConfigError as e:
        error(str(e))
        raise typer.Exit(1)

    if root is not None:
        settings = settings.model_copy(update={"root": root})
    return settings.resolve()
