"""Shard layout for counter-addressed files.

A counter is written as a 12 digit zero-padded decimal string and split
into four groups of three digits. The first three groups name nested
directories, the full string names the file:

    encode(1)    -> 000/000/000/000000000001
    encode(1000) -> 000/000/001/000000001000

No directory ever holds more than ``FANOUT`` entries, however many
files the tree contains.
"""

from dataclasses import dataclass
from pathlib import Path

from .errors import LayoutError

SEGMENT_WIDTH = 3
SEGMENT_DEPTH = 3
LEAF_WIDTH = SEGMENT_WIDTH * (SEGMENT_DEPTH + 1)
MAX_COUNTER = 10**LEAF_WIDTH - 1
FANOUT = 10**SEGMENT_WIDTH


@dataclass(frozen=True)
class ShardLocation:
    """Where a counter lives inside a tree."""

    counter: int
    segments: tuple[str, ...]
    leaf: str

    @property
    def directory(self) -> Path:
        """Directory part, relative to the tree root."""
        return Path(*self.segments)

    @property
    def relative_path(self) -> Path:
        """Full path of the leaf, relative to the tree root."""
        return self.directory / self.leaf


def encode(counter: int) -> ShardLocation:
    """Convert a counter to its shard location.

    Args:
        counter: Integer in ``0..MAX_COUNTER``

    Returns:
        ShardLocation with directory segments and leaf name

    Raises:
        LayoutError: If counter is not an int or is out of range
    """
    # bool is an int subclass but never a meaningful counter
    if not isinstance(counter, int) or isinstance(counter, bool):
        raise LayoutError(f"Counter must be an int, got {type(counter).__name__}")
    if counter < 0 or counter > MAX_COUNTER:
        raise LayoutError(f"Counter out of range: {counter} (supported: 0..{MAX_COUNTER})")

    leaf = f"{counter:0{LEAF_WIDTH}d}"
    segments = tuple(
        leaf[i * SEGMENT_WIDTH:(i + 1) * SEGMENT_WIDTH] for i in range(SEGMENT_DEPTH)
    )
    return ShardLocation(counter=counter, segments=segments, leaf=leaf)


def is_leaf_name(name: str) -> bool:
    """Check whether a file name is a valid leaf name."""
    return len(name) == LEAF_WIDTH and name.isascii() and name.isdigit()


def is_segment_name(name: str) -> bool:
    """Check whether a directory name is a valid segment name."""
    return len(name) == SEGMENT_WIDTH and name.isascii() and name.isdigit()


def decode(leaf: str) -> int:
    """Convert a leaf name back to its counter.

    Raises:
        LayoutError: If leaf is not exactly LEAF_WIDTH ASCII digits
    """
    if not is_leaf_name(leaf):
        raise LayoutError(f"Invalid leaf name: {leaf!r}")
    return int(leaf)


def relative_path(counter: int) -> Path:
    """Shorthand for ``encode(counter).relative_path``."""
    return encode(counter).relative_path


__all__ = [
    "SEGMENT_WIDTH",
    "SEGMENT_DEPTH",
    "LEAF_WIDTH",
    "MAX_COUNTER",
    "FANOUT",
    "ShardLocation",
    "encode",
    "decode",
    "is_leaf_name",
    "is_segment_name",
    "relative_path",
]
