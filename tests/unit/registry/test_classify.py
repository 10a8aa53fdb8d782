"""Tests for mark-key classification order and disabled categories."""

from __future__ import annotations

import unittest

from binky.registry.classify import MarkCategory, classify_mark, is_mark_key


def _classify(token: str, **overrides) -> MarkCategory:
    options = {
        "back_mark": ",",
        "auto_marks": ("1", "2", "3"),
        "quit_keys": ("ESC", "q"),
        "help_keys": ("?",),
    }
    options.update(overrides)
    return classify_mark(token, **options)


class ClassifyMarkTests(unittest.TestCase):
    def test_each_category(self) -> None:
        self.assertIs(_classify("ESC"), MarkCategory.QUIT)
        self.assertIs(_classify("?"), MarkCategory.HELP)
        self.assertIs(_classify(","), MarkCategory.BACK)
        self.assertIs(_classify("2"), MarkCategory.AUTO)
        self.assertIs(_classify("a"), MarkCategory.MANUAL)
        self.assertIs(_classify("UP"), MarkCategory.INVALID)
        self.assertIs(_classify(" "), MarkCategory.INVALID)
        self.assertIs(_classify(""), MarkCategory.INVALID)

    def test_first_match_wins(self) -> None:
        # "q" is printable, but quit keys are checked first.
        self.assertIs(_classify("q"), MarkCategory.QUIT)
        self.assertIs(_classify("1", back_mark="1"), MarkCategory.BACK)

    def test_disabled_back_and_auto_fall_through_to_manual(self) -> None:
        self.assertIs(_classify(",", back_mark=None), MarkCategory.MANUAL)
        self.assertIs(_classify("1", auto_marks=()), MarkCategory.MANUAL)

    def test_mark_key_validation(self) -> None:
        self.assertTrue(is_mark_key("a"))
        self.assertTrue(is_mark_key("7"))
        self.assertTrue(is_mark_key("é"))
        self.assertFalse(is_mark_key("ab"))
        self.assertFalse(is_mark_key("\t"))
        self.assertFalse(is_mark_key("\x07"))


if __name__ == "__main__":
    unittest.main()
