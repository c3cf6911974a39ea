"""filetree - unique file paths in a sharded directory hierarchy."""

from ._version import __version__
from .config import FileTreeConfig
from .errors import ConfigError, FileTreeError, FileTreeIOError, LayoutError
from .keyed import KeyedFileTree
from .layout import MAX_COUNTER, ShardLocation, decode, encode
from .tree import FileTree

__all__ = [
    "FileTree",
    "KeyedFileTree",
    "FileTreeConfig",
    "ShardLocation",
    "encode",
    "decode",
    "MAX_COUNTER",
    "FileTreeError",
    "FileTreeIOError",
    "LayoutError",
    "ConfigError",
    "__version__",
]
