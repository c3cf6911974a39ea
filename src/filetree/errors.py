"""Error types for filetree."""

from pathlib import Path


class FileTreeError(Exception):
    """Base exception for filetree errors."""
    pass


class FileTreeIOError(FileTreeError):
    """Filesystem operation failed while creating or reading a tree.

    The underlying ``OSError`` is kept as ``__cause__``.
    """

    def __init__(self, path: str | Path, cause: OSError):
        self.path = Path(path)
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"I/O error on {self.path}: {reason}")


class LayoutError(FileTreeError, ValueError):
    """Counter or leaf name outside the supported layout."""
    pass


class ConfigError(FileTreeError):
    """Configuration error."""
    pass
