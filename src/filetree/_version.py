"""Version information for filetree."""

from importlib.metadata import PackageNotFoundError, version


def get_version() -> str:
    """Get version from package metadata."""
    try:
        return version("filetree")
    except PackageNotFoundError:
        return "0.0.0-unknown"


__version__ = get_version()
