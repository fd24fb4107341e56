"""Tests for per-line Pygments tokenizing and its cache."""

from __future__ import annotations

import unittest

from lazydiff.highlight import DEFAULT_STYLE, LineHighlighter, normalize_style, sanitize_terminal_text


class LineHighlighterTests(unittest.TestCase):
    def test_fragments_concatenate_to_input(self) -> None:
        highlighter = LineHighlighter()
        text = "def greet(name):  # say hi"
        fragments = highlighter.tokens("app.py", "app.py", 0, text)

        self.assertEqual("".join(fragment for fragment, _ in fragments), text)
        self.assertTrue(any(params for _, params in fragments))
        self.assertTrue(all("\x1b" not in params for _, params in fragments))

    def test_unknown_extension_is_plain(self) -> None:
        highlighter = LineHighlighter()
        fragments = highlighter.tokens("notes", "notes.zzzunknown", 0, "just words")

        self.assertEqual("".join(fragment for fragment, _ in fragments), "just words")

    def test_disabled_returns_single_plain_fragment(self) -> None:
        highlighter = LineHighlighter(enabled=False)

        self.assertEqual(highlighter.tokens("k", "app.py", 0, "x = 1"), [("x = 1", "")])

    def test_cache_hits_return_same_list(self) -> None:
        highlighter = LineHighlighter()
        first = highlighter.tokens("k", "app.py", 3, "x = 1")
        second = highlighter.tokens("k", "app.py", 3, "x = 1")

        self.assertIs(first, second)
        self.assertEqual(len(highlighter), 1)

    def test_changed_text_under_same_key_is_retokenized(self) -> None:
        highlighter = LineHighlighter()
        highlighter.tokens("k", "app.py", 0, "x = 1")
        fragments = highlighter.tokens("k", "app.py", 0, "y = 22")

        self.assertEqual("".join(fragment for fragment, _ in fragments), "y = 22")

    def test_invalidate_and_clear(self) -> None:
        highlighter = LineHighlighter()
        highlighter.tokens("a", "app.py", 0, "x")
        highlighter.tokens("a", "app.py", 1, "y")
        highlighter.tokens("b", "app.py", 0, "z")

        highlighter.invalidate("a")
        self.assertEqual(len(highlighter), 1)
        highlighter.clear()
        self.assertEqual(len(highlighter), 0)

    def test_unknown_style_falls_back(self) -> None:
        self.assertEqual(normalize_style("no-such-style"), DEFAULT_STYLE)
        self.assertEqual(LineHighlighter("no-such-style").style_name, DEFAULT_STYLE)


class SanitizeTests(unittest.TestCase):
    def test_control_bytes_are_escaped(self) -> None:
        self.assertEqual(sanitize_terminal_text("a\x1b[2Jb"), "a\\x1b[2Jb")
        self.assertEqual(sanitize_terminal_text("tab\tkept"), "tab\tkept")


if __name__ == "__main__":
    unittest.main()
