"""Key-addressed file tree built on FileTree."""

import logging
from collections.abc import Mapping
from pathlib import Path

from .layout import decode, is_leaf_name
from .tree import FileTree

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "keyed_file_tree"


class KeyedFileTree:
    """Maps caller-supplied keys to slots in a FileTree.

    The first ``get`` for a key allocates a new path; later calls with
    the same key return that same path. As with FileTree, files are never
    created here.
    """

    def __init__(
        self,
        root: str | Path | None = None,
        persistent: bool = False,
        prefix: str = DEFAULT_PREFIX,
        *,
        tree: FileTree | None = None,
        files: Mapping[str, Path] | None = None,
    ):
        """Create a keyed tree.

        Args:
            root, persistent, prefix: As for FileTree
            tree: Existing FileTree to wrap instead of creating one
            files: Initial key map, with absolute paths inside the tree
        """
        self._tree = tree if tree is not None else FileTree(root, persistent=persistent, prefix=prefix)
        self._files: dict[str, Path] = dict(files or {})

    @classmethod
    def new(cls, persistent: bool = False) -> "KeyedFileTree":
        return cls(persistent=persistent)

    @classmethod
    def new_in(cls, path: str | Path, persistent: bool = False) -> "KeyedFileTree":
        return cls(path, persistent=persistent)

    @classmethod
    def from_existing(
        cls, root: str | Path, files: Mapping[str, str | Path]
    ) -> "KeyedFileTree":
        """Reopen a persistent tree with a previously saved key map.

        Relative paths in ``files`` are taken relative to root. New
        allocations resume after both the leaves on disk and the mapped
        paths, so a key whose file was never written keeps its slot.

        Args:
            root: Existing tree root
            files: Key map, e.g. from ``existing_files()``

        Raises:
            FileTreeIOError: If root is not an existing directory
        """
        tree = FileTree.from_existing(root)
        mapped = {}
        for key, path in files.items():
            path = Path(path)
            if not path.is_absolute():
                path = tree.root / path
            mapped[key] = path
            if is_leaf_name(path.name):
                tree.resume_from(decode(path.name) + 1)
        logger.info(f"Reopened keyed file tree at {tree.root} with {len(mapped)} keys")
        return cls(tree=tree, files=mapped)

    @property
    def tree(self) -> FileTree:
        return self._tree

    @property
    def root(self) -> Path:
        return self._tree.root

    def root_path(self) -> Path:
        """Return the root path for the file tree."""
        return self._tree.root_path()

    def get(self, key: str) -> Path:
        """Return the path for key, allocating one on first use.

        Raises:
            FileTreeIOError: If a new slot's directory cannot be created;
                the key stays unmapped
        """
        path = self._files.get(key)
        if path is None:
            path = self._tree.allocate_path()
            self._files[key] = path
            logger.debug(f"Mapped key {key!r} to {path}")
        return path

    def existing_files(self) -> dict[str, Path]:
        """Return a copy of the key map."""
        return dict(self._files)

    def close(self) -> None:
        self._tree.close()

    @property
    def closed(self) -> bool:
        return self._tree.closed

    def __contains__(self, key: object) -> bool:
        return key in self._files

    def __len__(self) -> int:
        return len(self._files)

    def __enter__(self) -> "KeyedFileTree":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"KeyedFileTree(root={str(self.root)!r}, keys={len(self._files)})"
