"""
Tests for the shared link-following directory walk.
"""

import os

import pytest

from filepusher.walk import walk_following_links
from tests.helpers import make_tree

pytestmark = pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")


def _relative_dirs(root):
    return [current.relative_to(root).as_posix() for current, _, _ in walk_following_links(root)]


class TestWalkFollowingLinks:

    def test_sorted_top_down(self, tmp_path):
        root = make_tree(tmp_path / "show", {"b/2.mkv": "2", "a/1.mkv": "1", "z.mkv": "z"})

        walked = [
            (current.relative_to(root).as_posix(), list(dirnames), filenames)
            for current, dirnames, filenames in walk_following_links(root)
        ]

        assert walked == [
            (".", ["a", "b"], ["z.mkv"]),
            ("a", [], ["1.mkv"]),
            ("b", [], ["2.mkv"]),
        ]

    def test_link_to_ancestor_is_not_descended(self, tmp_path):
        root = make_tree(tmp_path / "show", {"sub/a.mkv": "a"})
        os.symlink(root, root / "sub" / "loop")

        assert _relative_dirs(root) == [".", "sub"]

    def test_second_link_to_same_directory_is_skipped(self, tmp_path):
        outside = make_tree(tmp_path / "outside", {"linked.mkv": "l"})
        root = make_tree(tmp_path / "show", {"a.mkv": "a"})
        os.symlink(outside, root / "first")
        os.symlink(outside, root / "second")

        assert _relative_dirs(root) == [".", "first"]

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(OSError):
            list(walk_following_links(tmp_path / "missing"))
