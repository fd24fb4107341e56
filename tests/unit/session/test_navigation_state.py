"""Tests for pure cursor and scroll transitions."""

from __future__ import annotations

import unittest

from lazydiff.diff_model import FileDiff
from lazydiff.file_tree import build_file_tree, flatten_tree
from lazydiff.navigation import (
    NavigationState,
    clamp_content,
    cursor_path,
    ensure_cursor_visible,
    jump_to_file,
    move_cursor,
    relocate_cursor,
    scroll_content,
    scroll_tree,
    set_cursor,
    toggle_folder_at_cursor,
    toggle_folder_state,
)


class CursorTests(unittest.TestCase):
    def test_moving_past_viewport_scrolls_minimally(self) -> None:
        state = move_cursor(NavigationState(), 12, total=50, height=10)

        self.assertEqual((state.cursor, state.scroll), (12, 3))

    def test_moving_up_scrolls_to_cursor(self) -> None:
        state = NavigationState(cursor=20, scroll=15)
        state = move_cursor(state, -8, total=50, height=10)

        self.assertEqual((state.cursor, state.scroll), (12, 12))

    def test_cursor_is_clamped_to_tree(self) -> None:
        self.assertEqual(set_cursor(NavigationState(), 99, 5, 10).cursor, 4)
        self.assertEqual(move_cursor(NavigationState(), -3, 5, 10).cursor, 0)
        empty = set_cursor(NavigationState(cursor=4, scroll=2), 3, 0, 10)
        self.assertEqual((empty.cursor, empty.scroll), (0, 0))

    def test_scroll_shrinks_when_tree_shrinks(self) -> None:
        state = ensure_cursor_visible(NavigationState(cursor=3, scroll=30), total=12, height=10)

        self.assertEqual((state.cursor, state.scroll), (3, 2))

    def test_wheel_scroll_drags_cursor(self) -> None:
        state = scroll_tree(NavigationState(cursor=0, scroll=0), 5, total=50, height=10)

        self.assertEqual((state.scroll, state.cursor), (5, 5))
        state = scroll_tree(state, 100, total=50, height=10)
        self.assertEqual(state.scroll, 40)


class ContentScrollTests(unittest.TestCase):
    def test_content_scroll_clamps(self) -> None:
        state = scroll_content(NavigationState(), 500, max_scroll=30)

        self.assertEqual(state.content_scroll, 30)
        self.assertEqual(scroll_content(state, -100, 30).content_scroll, 0)
        self.assertEqual(clamp_content(NavigationState(content_scroll=9), 4).content_scroll, 4)

    def test_jump_to_file_puts_header_at_top(self) -> None:
        self.assertEqual(jump_to_file(NavigationState(), 17, 40).content_scroll, 17)
        self.assertEqual(jump_to_file(NavigationState(), 70, 40).content_scroll, 40)


class RelocateTests(unittest.TestCase):
    def test_cursor_follows_path_across_collapse(self) -> None:
        files = [FileDiff("dir/x.txt"), FileDiff("dir/y.txt"), FileDiff("z.txt")]
        state = NavigationState(cursor=3)
        rows = flatten_tree(build_file_tree(files, state.expanded_folders))
        self.assertEqual(cursor_path(state, rows), "z.txt")

        state = toggle_folder_state(state, "dir")
        rows = flatten_tree(build_file_tree(files, state.expanded_folders))
        state = relocate_cursor(state, rows, "z.txt", height=10)

        self.assertEqual(state.cursor, 1)
        self.assertEqual(cursor_path(state, rows), "z.txt")

    def test_toggle_folder_at_cursor_round_trips(self) -> None:
        files = [FileDiff("dir/x.txt"), FileDiff("dir/y.txt"), FileDiff("z.txt")]
        state = NavigationState(cursor=0)

        collapsed, rows = toggle_folder_at_cursor(state, files, height=10)
        self.assertEqual([node.path for node in rows], ["dir", "z.txt"])
        self.assertEqual(cursor_path(collapsed, rows), "dir")

        restored, rows = toggle_folder_at_cursor(collapsed, files, height=10)
        self.assertEqual(len(rows), 4)
        self.assertEqual(restored.cursor, 0)

    def test_toggle_folder_at_cursor_ignores_files(self) -> None:
        state = NavigationState(cursor=3)
        same, rows = toggle_folder_at_cursor(state, [FileDiff("dir/x.txt"), FileDiff("dir/y.txt"), FileDiff("z.txt")], 10)

        self.assertIs(same, state)
        self.assertEqual(len(rows), 4)

    def test_missing_path_keeps_clamped_index(self) -> None:
        rows = flatten_tree(build_file_tree([FileDiff("a.txt")], {}))
        state = relocate_cursor(NavigationState(cursor=5), rows, "gone.txt", height=10)

        self.assertEqual(state.cursor, 0)
        self.assertIsNone(cursor_path(NavigationState(cursor=3), rows))


if __name__ == "__main__":
    unittest.main()
