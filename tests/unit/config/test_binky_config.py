"""Tests for BinkyConfig defaults and JSON loading."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from binky.config import (
    DEFAULT_PREVIEW_COLUMNS,
    BinkyConfig,
    coerce_columns,
    config_from_mapping,
    config_to_mapping,
    load_binky_config,
    load_config,
    save_config,
)
from binky.host.memory import MemoryHost
from binky.registry.registry import MarkRegistry


class BinkyConfigDefaultsTests(unittest.TestCase):
    def test_defaults(self) -> None:
        config = BinkyConfig()

        self.assertEqual(config.back_mark, ",")
        self.assertEqual(config.auto_alphabet, ("1", "2", "3", "4", "5"))
        self.assertEqual(config.auto_policy, "recency")
        self.assertFalse(config.overwrite)
        self.assertEqual(config.preview_columns, DEFAULT_PREVIEW_COLUMNS)
        self.assertEqual(config.preview_columns[-1], ("context", None))

    def test_alphabet_drops_duplicates_and_back_mark(self) -> None:
        config = BinkyConfig(back_mark="2", auto_marks=("1", "2", "1", "3"))
        self.assertEqual(config.auto_alphabet, ("1", "3"))


class LoadConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "config.json"

    def write(self, data: object) -> None:
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def test_missing_or_malformed_file_gives_defaults(self) -> None:
        self.assertEqual(load_config(self.path), {})
        self.path.write_text("{not json", encoding="utf-8")
        self.assertEqual(load_config(self.path), {})
        self.write([1, 2, 3])
        self.assertEqual(load_binky_config(self.path), BinkyConfig())

    def test_valid_overrides_are_applied(self) -> None:
        self.write(
            {
                "back_mark": None,
                "auto_marks": "abc",
                "auto_policy": "frequency",
                "overwrite": True,
                "preview_columns": [["mark", 3], ["context", None]],
                "preview_delay": 0,
            }
        )

        config = load_binky_config(self.path)

        self.assertIsNone(config.back_mark)
        self.assertEqual(config.auto_alphabet, ("a", "b", "c"))
        self.assertEqual(config.auto_policy, "frequency")
        self.assertTrue(config.overwrite)
        self.assertEqual(config.preview_columns, (("mark", 3), ("context", None)))
        self.assertEqual(config.preview_delay, 0.0)

    def test_invalid_values_are_dropped_with_warning(self) -> None:
        data = {
            "back_mark": "ab",
            "overwrite": "yes",
            "auto_exclude_regexps": ["("],
            "frequency_interval": 0,
            "mystery": 1,
            "highlight": False,
        }

        with self.assertLogs("binky.config", level="WARNING") as logs:
            config = config_from_mapping(data)

        self.assertEqual(len(logs.records), 5)
        self.assertEqual(config, BinkyConfig(highlight=False))

    def test_unknown_policy_falls_back_to_default(self) -> None:
        self.write({"auto_policy": "frecency", "overwrite": True})

        with self.assertLogs("binky.config", level="WARNING") as logs:
            config = load_binky_config(self.path)

        self.assertEqual(len(logs.records), 1)
        self.assertIn("frecency", logs.output[0])
        self.assertEqual(config.auto_policy, "recency")
        self.assertTrue(config.overwrite)
        self.assertEqual(MarkRegistry(MemoryHost(), config).policy.name, "recency")

    def test_round_trip_through_file(self) -> None:
        config = BinkyConfig(auto_marks=("7", "8"), preview_header=False)

        save_config(config_to_mapping(config), self.path)

        self.assertEqual(load_binky_config(self.path), config)


class CoerceColumnsTests(unittest.TestCase):
    def test_rejects_bad_specs(self) -> None:
        for value in (
            [],
            [["mark"]],
            [["bogus", 3]],
            [["context", None], ["mark", 3]],
            [["mark", 0]],
            [["mark", True]],
        ):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    coerce_columns(value)


if __name__ == "__main__":
    unittest.main()
