"""Shared fixtures for the treemap tests."""

import os

# Qt widgets need a platform plugin even when nothing is shown
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from utils.treemap_logic import SizedItem


def make_items(*sizes):
    return [SizedItem(f"item{i}", f"/root/item{i}", size) for i, size in enumerate(sizes)]


def make_node(path, size, own_size=0, file_count=0, children=()):
    """Build a fetch_subtree-style node; children are (name, size, dir_count) tuples."""
    return {
        "name": os.path.basename(path.rstrip("/")) or path,
        "path": path,
        "size": size,
        "own_size": own_size,
        "file_count": file_count,
        "dir_count": len(children),
        "children": [
            {
                "name": name,
                "path": f"{path.rstrip('/')}/{name}",
                "size": child_size,
                "own_size": 0,
                "file_count": 1,
                "dir_count": dir_count,
                "children": [],
            }
            for name, child_size, dir_count in children
        ],
    }


@pytest.fixture
def root_node():
    return make_node(
        "/data",
        1000,
        own_size=100,
        file_count=3,
        children=[("music", 500, 2), ("docs", 300, 0), ("empty", 0, 0), ("photos", 100, 1)],
    )


@pytest.fixture
def file_tree(tmp_path):
    """
    tmp_path/
        z.txt          10 bytes
        a/x.bin       100 bytes
        a/b/y.bin      50 bytes
        c/            (empty)
    """
    (tmp_path / "z.txt").write_bytes(b"z" * 10)
    (tmp_path / "a" / "b").mkdir(parents=True)
    (tmp_path / "a" / "x.bin").write_bytes(b"x" * 100)
    (tmp_path / "a" / "b" / "y.bin").write_bytes(b"y" * 50)
    (tmp_path / "c").mkdir()
    return tmp_path
