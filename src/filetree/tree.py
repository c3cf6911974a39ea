"""Counter-addressed file tree.

``FileTree`` hands out paths inside a sharded directory hierarchy (see
``filetree.layout``). Each call to ``allocate_path`` returns a path that
was never returned before by the same tree, with its parent directory
already created. The file itself is left for the caller to write.

A tree is either persistent (the root outlives the object) or temporary
(the root is a fresh temporary directory removed on ``close()``, on
context-manager exit, or when the object is garbage collected).

Trees are not thread-safe: serialize calls to ``allocate_path`` or give
each worker its own tree.
"""

import errno
import logging
import os
import tempfile
from pathlib import Path

from .errors import FileTreeError, FileTreeIOError
from .fs import ensure_dir, scan_leaves
from .layout import encode

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "file_tree"


def _not_a_directory(path: Path) -> OSError:
    if path.exists():
        return NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(path))
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))


def next_counter(root: str | Path) -> int:
    """Return the first counter not used by any leaf under root."""
    last = max((counter for counter, _ in scan_leaves(root)), default=-1)
    return last + 1


class FileTree:
    """Allocates unique file paths in a sharded directory tree.

    Example:
        >>> with FileTree() as tree:
        ...     path = tree.allocate_path()
        ...     path.write_bytes(b"payload")
    """

    def __init__(
        self,
        root: str | Path | None = None,
        persistent: bool = False,
        prefix: str = DEFAULT_PREFIX,
    ):
        """Create a tree and its root directory.

        Args:
            root: For persistent trees, the root itself (created if
                missing). For temporary trees, the directory in which a
                fresh temporary root is created. Defaults to the system
                temporary directory in both cases.
            persistent: Keep the root and its contents on teardown
            prefix: Name prefix for generated root directories

        Raises:
            FileTreeIOError: If the root cannot be created
        """
        self.persistent = persistent
        self._counter = 0
        self._closed = False
        self._tmp_dir: tempfile.TemporaryDirectory | None = None

        if persistent and root is not None:
            self._root = ensure_dir(Path(root).absolute())
        elif persistent:
            try:
                self._root = Path(tempfile.mkdtemp(prefix=prefix)).absolute()
            except OSError as e:
                raise FileTreeIOError(tempfile.gettempdir(), e) from e
        else:
            parent = ensure_dir(root) if root is not None else None
            try:
                self._tmp_dir = tempfile.TemporaryDirectory(prefix=prefix, dir=parent)
            except OSError as e:
                raise FileTreeIOError(parent or tempfile.gettempdir(), e) from e
            self._root = Path(self._tmp_dir.name).absolute()

        kind = "persistent" if persistent else "temporary"
        logger.info(f"Initialized {kind} file tree at: {self._root}")

    @classmethod
    def new(cls, persistent: bool = False) -> "FileTree":
        """Create a tree rooted in a fresh directory under the system temp dir."""
        return cls(persistent=persistent)

    @classmethod
    def new_in(cls, path: str | Path, persistent: bool = False) -> "FileTree":
        """Create a tree at ``path`` (persistent) or in a temp dir inside it."""
        return cls(path, persistent=persistent)

    @classmethod
    def from_existing(cls, root: str | Path) -> "FileTree":
        """Reopen a persistent tree, resuming after its highest leaf.

        Only leaves that exist on disk are seen. Paths that were allocated
        but never written to will be handed out again.

        Raises:
            FileTreeIOError: If root is not an existing directory
        """
        root = Path(root)
        if not root.is_dir():
            cause = _not_a_directory(root)
            raise FileTreeIOError(root, cause) from cause
        tree = cls(root, persistent=True)
        tree.resume_from(next_counter(tree.root))
        return tree

    @property
    def root(self) -> Path:
        return self._root

    def root_path(self) -> Path:
        """Return the root path for the file tree."""
        return self._root

    @property
    def counter(self) -> int:
        """Counter value the next allocation will use."""
        return self._counter

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise FileTreeError(f"File tree at {self._root} is closed")

    def resume_from(self, counter: int) -> None:
        """Move the counter forward to ``counter``; never moves it back."""
        if counter > self._counter:
            logger.debug(f"Resuming {self._root} at counter {counter}")
            self._counter = counter

    def peek(self) -> Path:
        """Return the path the next ``allocate_path`` call would return."""
        return self._root / encode(self._counter).relative_path

    def allocate_path(self) -> Path:
        """Return a path to an unused slot in the tree.

        The parent directory is created if needed; the file is not.
        If directory creation fails the counter stays put, so calling
        again retries the same slot.

        Raises:
            FileTreeIOError: If the parent directory cannot be created
            LayoutError: If the tree is full
            FileTreeError: If the tree is closed
        """
        self._check_open()
        location = encode(self._counter)
        directory = ensure_dir(self._root / location.directory)
        self._counter += 1
        path = directory / location.leaf
        logger.debug(f"Allocated {path}")
        return path

    def close(self) -> None:
        """Release the tree, deleting the root if it is temporary."""
        if self._closed:
            return
        if self._tmp_dir is not None:
            try:
                self._tmp_dir.cleanup()
            except OSError as e:
                logger.error(f"Failed to remove temporary tree {self._root}: {e}")
                raise FileTreeIOError(self._root, e) from e
            logger.info(f"Removed temporary file tree: {self._root}")
        self._closed = True

    def __enter__(self) -> "FileTree":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        kind = "persistent" if self.persistent else "temporary"
        return f"FileTree(root={str(self._root)!r}, {kind}, counter={self._counter})"
