"""Tests for FileTree path allocation and lifecycle."""

import gc
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from filetree import FileTree
from filetree.errors import FileTreeError, FileTreeIOError, LayoutError
from filetree.layout import MAX_COUNTER


class TestAllocatePath:
    """Allocation order, uniqueness and on-disk effects."""

    def test_first_paths(self, tree):
        first = tree.allocate_path()
        second = tree.allocate_path()
        assert first == tree.root / "000/000/000/000000000000"
        assert second == tree.root / "000/000/000/000000000001"
        assert first.name == "000000000000"

    def test_new_directory_after_thousand(self, tree):
        path = None
        for _ in range(1001):
            path = tree.allocate_path()
        assert path == tree.root / "000/000/001/000000001000"
        assert path.parent.is_dir()

    def test_paths_are_unique(self, tree):
        paths = [tree.allocate_path() for _ in range(2500)]
        assert len(set(paths)) == len(paths)

    def test_parent_exists_leaf_does_not(self, tree):
        path = tree.allocate_path()
        assert path.parent.is_dir()
        assert not path.exists()

    def test_counter_advances(self, tree):
        assert tree.counter == 0
        tree.allocate_path()
        tree.allocate_path()
        assert tree.counter == 2

    def test_peek_has_no_side_effects(self, tree):
        peeked = tree.peek()
        assert not peeked.parent.exists()
        assert tree.counter == 0
        assert tree.allocate_path() == peeked

    def test_writing_to_allocated_path(self, tree):
        path = tree.allocate_path()
        path.write_bytes(b"payload")
        assert path.read_bytes() == b"payload"
        assert not tree.allocate_path().exists()

    def test_root_path_is_absolute(self, tree, tree_root):
        assert tree.root_path() == tree_root.absolute()
        assert tree.root_path().is_absolute()
        assert tree.root == tree.root_path()

    def test_independent_trees(self, tmp_path):
        with FileTree(tmp_path / "a", persistent=True) as a, \
                FileTree(tmp_path / "b", persistent=True) as b:
            a.allocate_path()
            a.allocate_path()
            assert b.allocate_path().name == "000000000000"
            assert a.counter == 2


class TestAllocationFailure:
    """A failed allocation leaves the tree unchanged."""

    def test_mkdir_failure_raises_io_error(self, tree):
        with patch.object(Path, "mkdir", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(FileTreeIOError) as exc_info:
                tree.allocate_path()
        assert isinstance(exc_info.value.__cause__, PermissionError)
        assert exc_info.value.path == tree.root / "000/000/000"
        assert "Permission denied" in str(exc_info.value)

    def test_retry_after_failure_yields_same_path(self, tree):
        expected = tree.peek()
        with patch.object(Path, "mkdir", side_effect=OSError(28, "No space left on device")):
            with pytest.raises(FileTreeIOError):
                tree.allocate_path()
        assert tree.counter == 0
        assert tree.allocate_path() == expected
        assert tree.counter == 1

    def test_root_removed_underneath(self, tree):
        tree.allocate_path()
        shutil.rmtree(tree.root)
        tree.root.write_text("not a directory")
        with pytest.raises(FileTreeIOError):
            tree.allocate_path()
        assert tree.counter == 1

    def test_tree_full(self, tree):
        tree._counter = MAX_COUNTER + 1
        with pytest.raises(LayoutError):
            tree.allocate_path()
        assert tree.counter == MAX_COUNTER + 1


class TestConstruction:
    """Root creation for persistent and temporary trees."""

    def test_persistent_root_created(self, tmp_path):
        root = tmp_path / "nested" / "root"
        ft = FileTree(root, persistent=True)
        assert root.is_dir()
        assert ft.root == root

    def test_persistent_root_is_file(self, tmp_path):
        root = tmp_path / "file"
        root.write_text("x")
        with pytest.raises(FileTreeIOError):
            FileTree(root, persistent=True)

    def test_temporary_root_inside_parent(self, tmp_path):
        with FileTree(tmp_path, persistent=False, prefix="scratch") as ft:
            assert ft.root.parent == tmp_path.absolute()
            assert ft.root.name.startswith("scratch")
            assert ft.root.is_dir()

    def test_temporary_parent_is_file(self, tmp_path):
        parent = tmp_path / "file"
        parent.write_text("x")
        with pytest.raises(FileTreeIOError):
            FileTree.new_in(parent)

    def test_new_defaults_to_system_temp(self):
        with FileTree.new() as ft:
            assert ft.root.parent == Path(tempfile.gettempdir()).absolute()
            assert not ft.persistent

    def test_repr(self, tree):
        assert "persistent" in repr(tree)
        assert "counter=0" in repr(tree)


class TestLifecycle:
    """Teardown removes temporary roots and keeps persistent ones."""

    def test_context_manager_removes_temporary_root(self):
        with FileTree.new() as ft:
            path = ft.allocate_path()
            path.write_text("data")
            root = ft.root
        assert not root.exists()
        assert ft.closed

    def test_close_removes_temporary_root_in_parent(self, tmp_path):
        ft = FileTree.new_in(tmp_path)
        path = ft.allocate_path()
        ft.close()
        assert not path.parent.exists()
        assert not ft.root.exists()
        assert tmp_path.exists()

    def test_garbage_collection_removes_temporary_root(self):
        ft = FileTree.new()
        path = ft.allocate_path()
        del ft
        gc.collect()
        assert not path.parent.exists()

    def test_exception_in_block_still_removes_root(self):
        root = None
        with pytest.raises(RuntimeError):
            with FileTree.new() as ft:
                root = ft.root
                ft.allocate_path()
                raise RuntimeError("boom")
        assert not root.exists()

    def test_persistent_root_survives_close(self, tree_root):
        ft = FileTree.new_in(tree_root, persistent=True)
        path = ft.allocate_path()
        ft.close()
        assert path.parent.exists()

    def test_persistent_new_keeps_root(self):
        ft = FileTree.new(persistent=True)
        try:
            path = ft.allocate_path()
            ft.close()
            del ft
            gc.collect()
            assert path.parent.exists()
        finally:
            shutil.rmtree(path.parents[3])

    def test_failed_close_can_be_retried(self):
        ft = FileTree.new()
        path = ft.allocate_path()
        with patch.object(
            tempfile.TemporaryDirectory, "cleanup", side_effect=PermissionError(13, "Permission denied")
        ):
            with pytest.raises(FileTreeIOError) as exc_info:
                ft.close()
        assert isinstance(exc_info.value.__cause__, PermissionError)
        assert not ft.closed
        assert ft.root.exists()

        ft.close()
        assert ft.closed
        assert not path.parent.exists()
        assert not ft.root.exists()

    def test_close_is_idempotent(self):
        ft = FileTree.new()
        ft.close()
        ft.close()
        assert ft.closed

    def test_allocate_after_close(self, tree):
        tree.close()
        with pytest.raises(FileTreeError, match="closed"):
            tree.allocate_path()


class TestFromExisting:
    """Reopening a persistent tree resumes numbering."""

    def test_resumes_after_written_leaf(self, tree_root):
        ft = FileTree(tree_root, persistent=True)
        first = ft.allocate_path()
        first.write_bytes(b"")
        ft.close()

        reopened = FileTree.from_existing(tree_root)
        second = reopened.allocate_path()
        assert first.name == "000000000000"
        assert second.name == "000000000001"

    def test_resumes_after_highest_leaf(self, tree_root):
        ft = FileTree(tree_root, persistent=True)
        for _ in range(1002):
            ft.allocate_path().touch()

        reopened = FileTree.from_existing(tree_root)
        assert reopened.counter == 1002
        assert reopened.allocate_path() == tree_root / "000/000/001/000000001002"

    def test_unwritten_slots_are_reused(self, tree_root):
        ft = FileTree(tree_root, persistent=True)
        ft.allocate_path().touch()
        unwritten = ft.allocate_path()

        reopened = FileTree.from_existing(tree_root)
        assert reopened.allocate_path() == unwritten

    def test_empty_root_starts_at_zero(self, tmp_path):
        reopened = FileTree.from_existing(tmp_path)
        assert reopened.counter == 0
        assert reopened.persistent

    def test_ignores_foreign_files(self, tree_root):
        (tree_root / "000/000/000").mkdir(parents=True)
        (tree_root / "notes.txt").write_text("x")
        (tree_root / "000/000/000/999999999999").touch()
        (tree_root / "000/000/000/000000000004").touch()
        (tree_root / "000/000/000/000000000009.tmp").touch()

        reopened = FileTree.from_existing(tree_root)
        assert reopened.counter == 5

    def test_missing_root(self, tmp_path):
        with pytest.raises(FileTreeIOError) as exc_info:
            FileTree.from_existing(tmp_path / "missing")
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
        assert exc_info.value.cause is exc_info.value.__cause__
        assert exc_info.value.path == tmp_path / "missing"

    def test_root_is_file(self, tmp_path):
        root = tmp_path / "file"
        root.write_text("x")
        with pytest.raises(FileTreeIOError) as exc_info:
            FileTree.from_existing(root)
        assert isinstance(exc_info.value.__cause__, NotADirectoryError)


class TestResumeFrom:
    """Moving the counter forward."""

    def test_moves_forward(self, tree):
        tree.resume_from(1000)
        assert tree.counter == 1000
        assert tree.allocate_path() == tree.root / "000/000/001/000000001000"

    def test_never_moves_back(self, tree):
        tree.allocate_path()
        tree.allocate_path()
        tree.resume_from(1)
        assert tree.counter == 2
