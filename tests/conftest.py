"""Test setup for dirdigest."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

TreeSpec = dict[str, "str | bytes | TreeSpec"]


def write_tree(base: Path, spec: TreeSpec) -> None:
    """Create files and directories from a nested mapping (str/bytes = file, dict = directory)."""
    for name, value in spec.items():
        path = base / name
        if isinstance(value, dict):
            path.mkdir(parents=True, exist_ok=True)
            write_tree(path, value)
        elif isinstance(value, bytes):
            path.write_bytes(value)
        else:
            path.write_text(value, encoding="utf-8")


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[TreeSpec], Path]:
    """Build a directory tree under ``tmp_path/project`` and return its root."""

    def _make(spec: TreeSpec) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        write_tree(root, spec)
        return root

    return _make


@pytest.fixture
def sample_project(make_tree: Callable[[TreeSpec], Path]) -> Path:
    """A small project with source, binary and dependency files."""
    return make_tree(
        {
            "src": {
                "app.ts": "a" * 200,
                "image.png": b"\x89PNG\x00" + b"\x01" * 49_995,
            },
            "node_modules": {"pkg": {"index.js": "module.exports = 1;\n"}},
            "README.md": "# Project\n",
        }
    )
