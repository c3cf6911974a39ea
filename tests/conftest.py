"""Test configuration and shared fixtures for filetree tests."""

import pytest

from filetree import FileTree


@pytest.fixture
def tree_root(tmp_path):
    """Directory used as the root of a persistent tree."""
    return tmp_path / "tree"


@pytest.fixture
def tree(tree_root):
    """Persistent FileTree rooted in the test's temporary directory."""
    with FileTree(tree_root, persistent=True) as ft:
        yield ft


@pytest.fixture(autouse=True)
def clear_root_env(monkeypatch):
    """Keep a developer's FILETREE_ROOT from leaking into tests."""
    monkeypatch.delenv("FILETREE_ROOT", raising=False)
