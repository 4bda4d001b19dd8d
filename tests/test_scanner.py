"""Tests for the directory scanner."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Callable
from unittest.mock import patch

import pytest

from dirdigest.scanner import CANCELLED_MESSAGE, scan_directory
from dirdigest.schemas import ErrorKind, FileTreeNode, IngestOptions
from dirdigest.selection import find_node


def _names(node: FileTreeNode) -> list[str]:
    return [child.name for child in node.children]


class TestScanDirectory:
    """Tests for scan_directory function."""

    def test_sample_project(self, sample_project: Path) -> None:
        """Binary files keep a node, ignored directories vanish entirely."""
        result = scan_directory(IngestOptions(root_path=str(sample_project)))

        assert result.is_success
        (root,) = result.root_nodes
        assert root.is_directory
        assert root.relative_path == ""
        assert _names(root) == ["README.md", "src"]

        app = find_node(result.root_nodes, "src/app.ts")
        assert app is not None
        assert app.token_count == 50
        assert app.file_count == 1
        assert app.content == "a" * 200

        image = find_node(result.root_nodes, "src/image.png")
        assert image is not None
        assert image.token_count == 0
        assert image.content == ""

        assert find_node(result.root_nodes, "node_modules") is None

    def test_directory_aggregates(self, sample_project: Path) -> None:
        result = scan_directory(IngestOptions(root_path=str(sample_project)))
        root = result.root_nodes[0]
        src = find_node(result.root_nodes, "src")

        assert src.file_count == 2
        assert src.token_count == 50
        assert root.file_count == 3
        assert root.token_count == 50 + len("# Project\n") // 4
        assert result.file_count == root.file_count
        assert result.total_tokens_estimated == root.token_count

    def test_missing_root(self, tmp_path: Path) -> None:
        result = scan_directory(IngestOptions(root_path=str(tmp_path / "missing")))

        assert not result.is_success
        assert result.error_kind is ErrorKind.DIRECTORY_NOT_FOUND
        assert "Directory not found" in result.error_message
        assert result.root_nodes == []

    def test_root_is_a_file(self, tmp_path: Path) -> None:
        path = tmp_path / "file.txt"
        path.write_text("x")
        result = scan_directory(IngestOptions(root_path=str(path)))
        assert result.error_kind is ErrorKind.DIRECTORY_NOT_FOUND

    def test_relative_paths_use_forward_slashes(self, make_tree: Callable) -> None:
        root = make_tree({"a": {"b": {"c.txt": "c"}}})
        result = scan_directory(IngestOptions(root_path=str(root)))
        node = find_node(result.root_nodes, "a/b/c.txt")
        assert node is not None
        assert node.relative_path == "a/b/c.txt"
        assert node.full_path == os.path.join(str(root.resolve()), "a", "b", "c.txt")

    def test_children_sorted_by_name(self, make_tree: Callable) -> None:
        root = make_tree({"b.txt": "b", "a": {}, "c": {}, "a.txt": "a"})
        result = scan_directory(IngestOptions(root_path=str(root), ignore_patterns=[]))
        assert _names(result.root_nodes[0]) == ["a", "a.txt", "b.txt", "c"]

    def test_oversized_file_keeps_node_without_content(self, make_tree: Callable) -> None:
        root = make_tree({"big.txt": "x" * 2048, "small.txt": "y" * 8})
        result = scan_directory(IngestOptions(root_path=str(root), max_file_size=1024))

        big = find_node(result.root_nodes, "big.txt")
        small = find_node(result.root_nodes, "small.txt")
        assert big.content == ""
        assert big.token_count == 0
        assert big.file_count == 1
        assert small.token_count == 2

    def test_file_exactly_at_limit_is_read(self, make_tree: Callable) -> None:
        root = make_tree({"edge.txt": "z" * 1024})
        result = scan_directory(IngestOptions(root_path=str(root), max_file_size=1024))
        assert find_node(result.root_nodes, "edge.txt").token_count == 256

    def test_crlf_file_counts_every_character(self, make_tree: Callable) -> None:
        root = make_tree({"win.txt": b"ab\r\n" * 50})
        result = scan_directory(IngestOptions(root_path=str(root)))
        assert find_node(result.root_nodes, "win.txt").token_count == 50

    def test_ignored_files_are_excluded(self, make_tree: Callable) -> None:
        root = make_tree({"keep.py": "k", "drop.svg": "<svg/>", "docs": {"a.md": "a"}})
        result = scan_directory(IngestOptions(root_path=str(root), ignore_patterns=["*.svg", "docs/"]))
        assert _names(result.root_nodes[0]) == ["keep.py"]

    def test_force_include_overrides_ignore_for_directories(self, make_tree: Callable) -> None:
        root = make_tree({"build": {"out.txt": "o"}, "dist": {"x.txt": "x"}})
        options = IngestOptions(
            root_path=str(root),
            ignore_patterns=["build", "dist"],
            force_include_patterns=["build"],
        )
        result = scan_directory(options)
        assert _names(result.root_nodes[0]) == ["build"]
        assert find_node(result.root_nodes, "build/out.txt") is not None

    def test_force_included_default_ignored_directory_keeps_its_files(self, make_tree: Callable) -> None:
        root = make_tree({"build": {"out.txt": "o", "nested": {"deep.txt": "d"}}, "main.py": "m"})
        result = scan_directory(IngestOptions(root_path=str(root), force_include_patterns=["build"]))
        assert _names(find_node(result.root_nodes, "build")) == ["nested", "out.txt"]
        assert find_node(result.root_nodes, "build/nested/deep.txt") is not None
        assert result.file_count == 3


class TestTargetMode:
    """Tests for target-file filtering."""

    def test_only_target_files_are_kept(self, make_tree: Callable) -> None:
        root = make_tree({"main.py": "m", "util.py": "u", "notes.txt": "n"})
        options = IngestOptions(root_path=str(root), ignore_patterns=[], target_file_patterns=["main.py", "*.txt"])
        result = scan_directory(options)
        assert _names(result.root_nodes[0]) == ["main.py", "notes.txt"]

    def test_target_match_beats_ignore(self, make_tree: Callable) -> None:
        root = make_tree({"logo.png": "not really a png", "other.png": "x"})
        options = IngestOptions(root_path=str(root), ignore_patterns=["*.png"], target_file_patterns=["logo.png"])
        result = scan_directory(options)
        assert _names(result.root_nodes[0]) == ["logo.png"]

    def test_file_matching_only_ignore_is_excluded(self, make_tree: Callable) -> None:
        root = make_tree({"a.log": "a", "b.py": "b"})
        options = IngestOptions(root_path=str(root), ignore_patterns=["*.log"], target_file_patterns=["b.py"])
        result = scan_directory(options)
        assert _names(result.root_nodes[0]) == ["b.py"]

    def test_directories_still_pruned_by_ignore(self, make_tree: Callable) -> None:
        root = make_tree({"node_modules": {"main.py": "m"}, "app": {"main.py": "m"}})
        options = IngestOptions(root_path=str(root), target_file_patterns=["**/main.py"])
        result = scan_directory(options)
        assert _names(result.root_nodes[0]) == ["app"]
        assert find_node(result.root_nodes, "app/main.py") is not None

    def test_directory_name_does_not_target_its_files(self, make_tree: Callable) -> None:
        root = make_tree({"src": {"a.py": "a", "b.txt": "b"}, "main.py": "m"})
        options = IngestOptions(root_path=str(root), ignore_patterns=[], target_file_patterns=["src"])
        result = scan_directory(options)
        assert _names(find_node(result.root_nodes, "src")) == []
        assert result.file_count == 0


class TestSamplingCap:
    """Tests for the per-directory file cap."""

    def test_keeps_first_files_by_name(self, make_tree: Callable) -> None:
        root = make_tree({"c.txt": "c", "a.txt": "a", "b.txt": "b"})
        result = scan_directory(IngestOptions(root_path=str(root), max_files_per_directory=1))
        assert _names(result.root_nodes[0]) == ["a.txt"]
        assert result.file_count == 1

    def test_never_caps_subdirectories(self, make_tree: Callable) -> None:
        root = make_tree({"x": {}, "y": {}, "z": {}, "a.txt": "a", "b.txt": "b"})
        result = scan_directory(IngestOptions(root_path=str(root), max_files_per_directory=1))
        assert _names(result.root_nodes[0]) == ["a.txt", "x", "y", "z"]

    def test_force_included_directory_is_not_capped(self, make_tree: Callable) -> None:
        root = make_tree(
            {
                "models": {"a.py": "a", "b.py": "b", "c.py": "c"},
                "views": {"a.py": "a", "b.py": "b", "c.py": "c"},
            }
        )
        options = IngestOptions(root_path=str(root), max_files_per_directory=1, force_include_patterns=["models"])
        result = scan_directory(options)
        assert _names(find_node(result.root_nodes, "models")) == ["a.py", "b.py", "c.py"]
        assert _names(find_node(result.root_nodes, "views")) == ["a.py"]

    def test_force_include_exemption_does_not_reach_subdirectories(self, make_tree: Callable) -> None:
        root = make_tree({"models": {"a.py": "a", "b.py": "b", "sub": {"x.py": "x", "y.py": "y"}}})
        options = IngestOptions(root_path=str(root), max_files_per_directory=1, force_include_patterns=["models"])
        result = scan_directory(options)
        assert _names(find_node(result.root_nodes, "models")) == ["a.py", "b.py", "sub"]
        assert _names(find_node(result.root_nodes, "models/sub")) == ["x.py"]

    def test_cap_applies_in_target_mode(self, make_tree: Callable) -> None:
        root = make_tree({"a.py": "a", "b.py": "b", "c.txt": "c"})
        options = IngestOptions(root_path=str(root), max_files_per_directory=1, target_file_patterns=["*.py"])
        result = scan_directory(options)
        assert _names(result.root_nodes[0]) == ["a.py"]

    def test_cap_counts_only_kept_files(self, make_tree: Callable) -> None:
        root = make_tree({"a.svg": "a", "b.py": "b", "c.py": "c"})
        options = IngestOptions(root_path=str(root), max_files_per_directory=1, ignore_patterns=["*.svg"])
        result = scan_directory(options)
        assert _names(result.root_nodes[0]) == ["b.py"]


class TestFailuresAndCancellation:
    """Tests for per-entry failures and cancellation."""

    def test_unreadable_directory_is_skipped(self, make_tree: Callable) -> None:
        root = make_tree({"locked": {"secret.txt": "s"}, "open.txt": "o"})
        locked = str(root.resolve() / "locked")
        real_scandir = os.scandir

        def fake_scandir(path):  # noqa: ANN001, ANN202
            if str(path) == locked:
                raise PermissionError("denied")
            return real_scandir(path)

        with patch("dirdigest.scanner.os.scandir", side_effect=fake_scandir):
            result = scan_directory(IngestOptions(root_path=str(root)))

        assert result.is_success
        locked_node = find_node(result.root_nodes, "locked")
        assert locked_node is not None
        assert locked_node.children == []
        assert result.file_count == 1

    def test_unreadable_file_keeps_empty_node(self, make_tree: Callable) -> None:
        root = make_tree({"a.txt": "hello world!"})
        with (
            patch("dirdigest.scanner.is_binary_file", return_value=False),
            patch("dirdigest.file_utils.Path.open", side_effect=PermissionError("denied")),
        ):
            result = scan_directory(IngestOptions(root_path=str(root)))

        assert result.is_success
        node = find_node(result.root_nodes, "a.txt")
        assert node.content == ""
        assert node.token_count == 0

    def test_cancelled_before_start(self, sample_project: Path) -> None:
        event = threading.Event()
        event.set()
        result = scan_directory(IngestOptions(root_path=str(sample_project)), cancel_event=event)

        assert not result.is_success
        assert result.error_kind is ErrorKind.CANCELLED
        assert result.error_message == CANCELLED_MESSAGE
        assert result.root_nodes == []

    def test_cancelled_mid_scan(self, make_tree: Callable) -> None:
        root = make_tree({f"f{i:02d}.txt": "x" for i in range(20)})
        event = threading.Event()
        seen: list[str] = []

        def cancel_after_some(path: Path) -> bool:
            seen.append(path.name)
            if len(seen) == 5:
                event.set()
            return False

        with patch("dirdigest.scanner.is_binary_file", side_effect=cancel_after_some):
            result = scan_directory(IngestOptions(root_path=str(root)), cancel_event=event)

        assert result.error_kind is ErrorKind.CANCELLED
        assert result.root_nodes == []
        assert len(seen) == 5

    def test_unexpected_error_is_generic(self, sample_project: Path) -> None:
        with patch("dirdigest.scanner.estimate_tokens", side_effect=RuntimeError("boom")):
            result = scan_directory(IngestOptions(root_path=str(sample_project)))

        assert not result.is_success
        assert result.error_kind is ErrorKind.GENERIC
        assert result.error_message == "Error: boom"

    def test_progress_messages(self, sample_project: Path) -> None:
        messages: list[str] = []
        scan_directory(IngestOptions(root_path=str(sample_project)), progress=messages.append)
        assert messages[0] == "Scanning directory structure..."
        assert messages[-1].startswith("Scan complete")

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_symlinked_directories_are_not_followed(self, make_tree: Callable) -> None:
        root = make_tree({"real": {"a.txt": "a"}})
        os.symlink(root / "real", root / "loop", target_is_directory=True)
        result = scan_directory(IngestOptions(root_path=str(root)))
        assert _names(result.root_nodes[0]) == ["real"]
