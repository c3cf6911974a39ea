"""Common Typer options shared across CLI commands."""

import typer


def config_option(help_text: str = "Configuration file (YAML)") -> typer.Option:
    """Create a standard --config option.

    Args:
        help_text: Custom help text

    Returns:
        Configured Typer Option
    """
    return typer.Option(
        None,
        "--config",
        "-c",
        help=help_text,
        dir_okay=False,
    )


def root_option(help_text: str = "Tree root directory (overrides config)") -> typer.Option:
    """Create a standard --root option.

    Args:
        help_text: Custom help text

    Returns:
        Configured Typer Option
    """
    return typer.Option(None, "--root", "-r", help=help_text)


def force_option(help_text: str = "Overwrite existing files") -> typer.Option:
    """Create a standard --force option.

    Args:
        help_text: Custom help text

    Returns:
        Configured Typer Option
    """
    return typer.Option(False, "--force", "-f", help=help_text)


__all__ = ["config_option", "root_option", "force_option"]
