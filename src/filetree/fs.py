"""Filesystem helpers for directory creation and tree scanning."""

import logging
from collections.abc import Iterator
from pathlib import Path

from .errors import FileTreeIOError
from .layout import SEGMENT_DEPTH, decode, is_leaf_name, is_segment_name

logger = logging.getLogger(__name__)


def ensure_dir(path: str | Path) -> Path:
    """Ensure directory exists, creating parents if necessary.

    Args:
        path: Directory path

    Returns:
        Path object for the directory

    Raises:
        FileTreeIOError: If the directory cannot be created
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error(f"Failed to create directory {path}: {e}")
        raise FileTreeIOError(path, e) from e
    return path


def _segment_dirs(parent: Path) -> list[Path]:
    dirs = []
    for entry in parent.iterdir():
        if entry.is_dir() and is_segment_name(entry.name):
            dirs.append(entry)
        else:
            logger.debug(f"Skipping non-segment entry: {entry}")
    return sorted(dirs)


def scan_leaves(root: str | Path) -> Iterator[tuple[int, Path]]:
    """Yield ``(counter, path)`` for every leaf file found under root.

    Only files sitting at the position their name encodes are reported;
    anything else in the tree is skipped. Leaves are yielded in counter
    order.

    Raises:
        FileTreeIOError: If a directory cannot be listed
    """
    root = Path(root)
    level = [(root, "")]
    try:
        for _ in range(SEGMENT_DEPTH):
            level = [
                (child, prefix + child.name)
                for parent, prefix in level
                for child in _segment_dirs(parent)
            ]
        for directory, prefix in level:
            for entry in sorted(directory.iterdir()):
                if entry.is_file() and is_leaf_name(entry.name) and entry.name.startswith(prefix):
                    yield decode(entry.name), entry
                else:
                    logger.debug(f"Skipping non-leaf entry: {entry}")
    except OSError as e:
        logger.error(f"Failed to scan {root}: {e}")
        raise FileTreeIOError(getattr(e, "filename", None) or root, e) from e
