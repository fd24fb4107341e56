"""Tests for row generation in every layout mode.

The count-only helpers must agree with the generators, and the full-file
walk must interleave unchanged content with hunk rows at the right places.
"""

from __future__ import annotations

import unittest

from lazydiff.diff_model import DiffMode, FileDiff, LineKind, parse_unified_diff
from lazydiff.rows import RowKind, file_rows, iter_file_rows, pair_hunk_lines, paired_row_count
from lazydiff.rows.align import effective_mode, full_cache_keys, full_file_row_count
from lazydiff.virtual_lines import file_row_count


def _single(diff_body: str, path: str = "f.py") -> FileDiff:
    return parse_unified_diff(f"diff --git a/{path} b/{path}\n--- a/{path}\n+++ b/{path}\n{diff_body}")[0]


REPLACE_THREE_WITH_ONE = "@@ -1,4 +1,2 @@\n-a\n-b\n-c\n+A\n d\n"


class PairingTests(unittest.TestCase):
    def test_three_removed_one_added_is_three_rows(self) -> None:
        hunk = _single(REPLACE_THREE_WITH_ONE).hunks[0]
        pairs = list(pair_hunk_lines(hunk))

        self.assertEqual(len(pairs), 4)
        self.assertEqual(paired_row_count(hunk), 4)
        first_left, first_right = pairs[0]
        self.assertEqual(first_left[1].text, "a")
        self.assertEqual(first_right[1].text, "A")
        self.assertIsNone(pairs[1][1])
        self.assertIsNone(pairs[2][1])
        self.assertIs(pairs[3][0], pairs[3][1])

    def test_change_block_rows_are_max_of_sides(self) -> None:
        hunk = _single("@@ -1,3 +1,1 @@\n-a\n-b\n-c\n+A\n").hunks[0]

        self.assertEqual(paired_row_count(hunk), 3)
        self.assertEqual(len(list(pair_hunk_lines(hunk))), 3)

    def test_line_indexes_count_from_start_index(self) -> None:
        hunk = _single(REPLACE_THREE_WITH_ONE).hunks[0]
        pairs = list(pair_hunk_lines(hunk, start_index=10))

        self.assertEqual(pairs[0][0][0], 10)
        self.assertEqual(pairs[0][1][0], 13)
        self.assertEqual(pairs[3][0][0], 14)


class HunkLayoutTests(unittest.TestCase):
    def test_side_by_side_rows_have_header_then_pairs(self) -> None:
        item = _single(REPLACE_THREE_WITH_ONE)
        rows = list(iter_file_rows(item, DiffMode.SIDE_BY_SIDE))

        self.assertEqual([row.kind for row in rows[:2]], [RowKind.FILE_HEADER, RowKind.HUNK_HEADER])
        self.assertEqual(len(rows), 2 + 4)
        self.assertEqual(rows[2].left.line_number, 1)
        self.assertEqual(rows[2].right.line_number, 1)
        self.assertEqual(rows[2].left.kind, LineKind.REMOVED)
        self.assertIsNone(rows[3].right)

    def test_unified_rows_keep_both_numbers(self) -> None:
        item = _single(REPLACE_THREE_WITH_ONE)
        rows = list(iter_file_rows(item, DiffMode.UNIFIED))

        self.assertEqual(len(rows), 2 + 5)
        context = rows[-1]
        self.assertEqual(context.kind, RowKind.UNIFIED)
        self.assertEqual((context.old_line_number, context.new_line_number), (4, 2))
        self.assertEqual(context.cell.cache_key, "f.py")

    def test_collapsed_and_binary_files_are_header_only(self) -> None:
        item = _single(REPLACE_THREE_WITH_ONE)
        collapsed = FileDiff(item.path, hunks=item.hunks, collapsed=True)
        binary = FileDiff("img.png", is_binary=True)

        for mode in DiffMode:
            self.assertEqual([row.kind for row in iter_file_rows(collapsed, mode)], [RowKind.FILE_HEADER])
            self.assertEqual(len(list(iter_file_rows(binary, mode))), 1)

    def test_unified_equals_side_by_side_without_change_pairs(self) -> None:
        item = _single("@@ -1,2 +1,4 @@\n a\n+b\n+c\n d\n")

        self.assertEqual(
            file_row_count(item, DiffMode.UNIFIED),
            file_row_count(item, DiffMode.SIDE_BY_SIDE),
        )

    def test_file_rows_slices_window(self) -> None:
        item = _single(REPLACE_THREE_WITH_ONE)
        everything = list(iter_file_rows(item, DiffMode.SIDE_BY_SIDE, file_index=2))
        window = file_rows(item, DiffMode.SIDE_BY_SIDE, 2, 4, file_index=2)

        self.assertEqual(window, everything[2:4])
        self.assertTrue(all(row.file_index == 2 for row in window))


class FullFileTests(unittest.TestCase):
    def _modified(self) -> FileDiff:
        item = _single("@@ -2 +2 @@\n-b\n+B\n@@ -5,0 +6 @@\n+f\n")
        return FileDiff(
            item.path,
            old_content=("a", "b", "c", "d", "e"),
            new_content=("a", "B", "c", "d", "e", "f"),
            added=item.added,
            removed=item.removed,
            hunks=item.hunks,
        )

    def test_walk_interleaves_unchanged_lines(self) -> None:
        item = self._modified()
        rows = list(iter_file_rows(item, DiffMode.FULL_FILE))[1:]

        self.assertEqual(len(rows), 6)
        self.assertEqual((rows[0].left.text, rows[0].right.text), ("a", "a"))
        self.assertEqual(rows[0].left.kind, LineKind.CONTEXT)
        self.assertEqual((rows[1].left.kind, rows[1].right.kind), (LineKind.REMOVED, LineKind.ADDED))
        self.assertEqual((rows[1].left.text, rows[1].right.text), ("b", "B"))
        self.assertEqual([row.left.line_number for row in rows[2:5]], [3, 4, 5])
        self.assertIsNone(rows[5].left)
        self.assertEqual((rows[5].right.text, rows[5].right.line_number), ("f", 6))

    def test_full_file_cells_use_content_cache_keys(self) -> None:
        item = self._modified()
        old_key, new_key = full_cache_keys(item.path)
        row = list(iter_file_rows(item, DiffMode.FULL_FILE))[3]

        self.assertEqual((row.left.cache_key, row.left.line_index), (old_key, 2))
        self.assertEqual((row.right.cache_key, row.right.line_index), (new_key, 2))

    def test_new_file_has_only_right_cells(self) -> None:
        item = _single("@@ -0,0 +1,2 @@\n+x\n+y\n", path="new.txt")
        item = FileDiff(item.path, old_content=(), new_content=("x", "y"), hunks=item.hunks)
        rows = list(iter_file_rows(item, DiffMode.FULL_FILE))[1:]

        self.assertEqual(len(rows), 2)
        self.assertTrue(all(row.left is None for row in rows))
        self.assertEqual([row.right.text for row in rows], ["x", "y"])

    def test_trailing_rows_cover_longer_side(self) -> None:
        item = _single("@@ -1 +1 @@\n-a\n+A\n")
        item = FileDiff(item.path, old_content=("a", "b", "c"), new_content=("A", "b", "c", "d"), hunks=item.hunks)
        rows = list(iter_file_rows(item, DiffMode.FULL_FILE))[1:]

        self.assertEqual(len(rows), 4)
        self.assertIsNone(rows[-1].left)
        self.assertEqual(rows[-1].right.text, "d")

    def test_falls_back_without_contents(self) -> None:
        item = _single(REPLACE_THREE_WITH_ONE)

        self.assertIs(effective_mode(item, DiffMode.FULL_FILE), DiffMode.SIDE_BY_SIDE)
        self.assertEqual(
            list(iter_file_rows(item, DiffMode.FULL_FILE)),
            list(iter_file_rows(item, DiffMode.SIDE_BY_SIDE)),
        )

    def test_count_matches_walk(self) -> None:
        item = self._modified()

        self.assertEqual(full_file_row_count(item), 6)

    def test_mismatched_content_shows_diff_text(self) -> None:
        item = _single("@@ -1 +1 @@\n-a\n+A\n")
        item = FileDiff(item.path, old_content=("STALE",), new_content=("STALE2",), hunks=item.hunks)
        row = list(iter_file_rows(item, DiffMode.FULL_FILE))[1]

        self.assertEqual((row.left.text, row.right.text), ("a", "A"))
        self.assertEqual((row.left.cache_key, row.left.line_index), (item.path, 0))
        self.assertEqual((row.right.cache_key, row.right.line_index), (item.path, 1))

    def test_matching_content_keeps_content_address(self) -> None:
        item = self._modified()
        old_key, new_key = full_cache_keys(item.path)
        row = list(iter_file_rows(item, DiffMode.FULL_FILE))[2]

        self.assertEqual((row.left.cache_key, row.left.line_index), (old_key, 1))
        self.assertEqual((row.right.cache_key, row.right.line_index), (new_key, 1))


class MalformedHunkTests(unittest.TestCase):
    def _assert_forward_only(self, item: FileDiff) -> list:
        rows = list(iter_file_rows(item, DiffMode.FULL_FILE))
        self.assertEqual(file_row_count(item, DiffMode.FULL_FILE), len(rows))
        old_key, new_key = full_cache_keys(item.path)
        for side, key in (("left", old_key), ("right", new_key)):
            cells = [getattr(row, side) for row in rows[1:] if getattr(row, side) is not None]
            numbers = [cell.line_number for cell in cells]
            self.assertEqual(numbers, sorted(set(numbers)))
            indexes = [cell.line_index for cell in cells if cell.cache_key == key]
            self.assertEqual(indexes, sorted(set(indexes)))
        return rows[1:]

    def test_overlapping_hunk_does_not_step_back(self) -> None:
        item = _single("@@ -1,3 +1,3 @@\n a\n-b\n+B\n c\n@@ -2,2 +2,2 @@\n-b\n+B\n c\n")
        item = FileDiff(item.path, old_content=("a", "b", "c", "d"), new_content=("a", "B", "c", "d"), hunks=item.hunks)
        rows = self._assert_forward_only(item)

        self.assertEqual(len(rows), 5)
        self.assertEqual([row.left.line_number for row in rows], [1, 2, 3, 4, 5])
        self.assertEqual((rows[3].left.text, rows[3].right.text), ("b", "B"))

    def test_hunk_past_end_of_content_is_clamped(self) -> None:
        item = _single("@@ -10 +10 @@\n-x\n+X\n")
        item = FileDiff(item.path, old_content=("a", "b"), new_content=("a", "b"), hunks=item.hunks)
        rows = self._assert_forward_only(item)

        self.assertEqual([row.left.text for row in rows], ["a", "b", "x"])
        self.assertEqual(rows[-1].right.text, "X")
        self.assertEqual(full_file_row_count(item), 3)


class CountAgreementTests(unittest.TestCase):
    def test_counts_equal_generated_rows_in_every_mode(self) -> None:
        base = _single("@@ -1,3 +1,2 @@\n-a\n-b\n+B\n c\n@@ -8,2 +7,3 @@\n x\n+y\n z\n")
        files = [
            base,
            FileDiff(
                base.path,
                old_content=tuple(f"line {n}" for n in range(12)),
                new_content=tuple(f"line {n}" for n in range(11)),
                hunks=base.hunks,
            ),
            FileDiff("c.py", hunks=base.hunks, collapsed=True),
            FileDiff("bin.dat", is_binary=True),
        ]
        for item in files:
            for mode in DiffMode:
                with self.subTest(path=item.path, mode=mode):
                    self.assertEqual(file_row_count(item, mode), len(list(iter_file_rows(item, mode))))


if __name__ == "__main__":
    unittest.main()
