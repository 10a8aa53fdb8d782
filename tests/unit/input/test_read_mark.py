"""Tests for the mark prompt, its delayed preview, and prompted commands."""

from __future__ import annotations

import unittest

from binky.commands import MarkCommands
from binky.errors import InvalidToken
from binky.host.memory import MemoryHost
from binky.host.scheduler import CooperativeScheduler
from binky.input.read_mark import MarkReaderCallbacks, read_mark
from binky.registry.registry import MarkRegistry


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class _FakeUI:
    """Scripted keys; every empty poll advances the clock by ``step`` seconds."""

    def __init__(self, keys: list[str], clock: _Clock, step: float = 0.3) -> None:
        self.keys = list(keys)
        self.clock = clock
        self.step = step
        self.events: list[str] = []
        self.timeouts: list[int | None] = []

    def read_key(self, timeout_ms: int | None) -> str:
        self.timeouts.append(timeout_ms)
        key = self.keys.pop(0)
        if key == "":
            self.clock.now += self.step
        return key

    def show_preview(self, rows) -> None:
        self.events.append(f"show:{len(rows)}")

    def hide_preview(self) -> None:
        self.events.append("hide")

    def report(self, message: str) -> None:
        self.events.append(message)

    def callbacks(self) -> MarkReaderCallbacks:
        return MarkReaderCallbacks(
            read_key=self.read_key,
            show_preview=self.show_preview,
            hide_preview=self.hide_preview,
            report=self.report,
        )


class _Fixture(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = _Clock()
        self.scheduler = CooperativeScheduler(clock=self.clock)
        self.host = MemoryHost()
        self.registry = MarkRegistry(self.host, scheduler=self.scheduler).start()
        self.d = self.host.create("D", "alpha\nbeta\n")
        self.host.goto(self.d, 6)
        self.registry.add("a")

    def read(self, keys: list[str], **kwargs) -> tuple[str | None, _FakeUI]:
        ui = _FakeUI(keys, self.clock)
        mark = read_mark("Mark: ", self.registry, ui.callbacks(), self.scheduler, **kwargs)
        return mark, ui


class ReadMarkTests(_Fixture):
    def test_preview_appears_after_idle_delay(self) -> None:
        mark, ui = self.read(["", "", "a"])

        self.assertEqual(mark, "a")
        # header + one manual row
        self.assertEqual(ui.events, ["Mark: ", "show:2", "hide"])
        self.assertEqual(ui.timeouts, [50, 50, 50])

    def test_fast_key_never_shows_preview(self) -> None:
        mark, ui = self.read(["", "a"])

        self.assertEqual(mark, "a")
        self.assertEqual(ui.events, ["Mark: "])
        self.assertEqual(self.scheduler.pending(), 0)

    def test_quit_returns_none_and_hides_preview(self) -> None:
        mark, ui = self.read(["", "", "CTRL_G"])

        self.assertIsNone(mark)
        self.assertEqual(ui.events, ["Mark: ", "show:2", "hide"])

    def test_help_key_shows_preview_immediately(self) -> None:
        mark, ui = self.read(["?", "z"])

        self.assertEqual(mark, "z")
        self.assertEqual(ui.events, ["Mark: ", "show:2", "hide"])
        self.assertEqual(self.scheduler.pending(), 0)

    def test_back_and_auto_keys_are_returned(self) -> None:
        self.assertEqual(self.read([","])[0], ",")
        self.assertEqual(self.read(["1"])[0], "1")

    def test_non_character_input_raises_and_cleans_up(self) -> None:
        ui = _FakeUI(["?", "UP"], self.clock)

        with self.assertRaises(InvalidToken):
            read_mark("Mark: ", self.registry, ui.callbacks(), self.scheduler)

        self.assertEqual(ui.events, ["Mark: ", "show:2", "hide"])
        self.assertEqual(self.scheduler.pending(), 0)

    def test_zero_delay_shows_at_once_and_negative_never(self) -> None:
        _, shown = self.read(["a"], preview_delay=0)
        _, hidden = self.read(["", "", "", "", "a"], preview_delay=-1)

        self.assertEqual(shown.events, ["Mark: ", "show:2", "hide"])
        self.assertEqual(hidden.events, ["Mark: "])


class MarkCommandsTests(_Fixture):
    def run_command(self, name: str, keys: list[str]) -> tuple[bool, list[str]]:
        ui = _FakeUI(keys, self.clock)
        commands = MarkCommands(self.registry, ui.callbacks(), self.scheduler)
        ok = getattr(commands, name)()
        return ok, ui.events

    def test_add_reports_success(self) -> None:
        self.host.goto(self.d, 0)

        ok, events = self.run_command("add", ["b"])

        self.assertTrue(ok)
        self.assertEqual(events, ["Mark add: ", "Mark b added"])
        self.assertIn("b", self.registry.manual)

    def test_add_reports_registry_error(self) -> None:
        ok, events = self.run_command("add", ["a"])

        self.assertFalse(ok)
        self.assertEqual(events, ["Mark add: ", "Mark a exists"])

    def test_delete_and_jump_messages(self) -> None:
        self.host.create("E", "one\n")

        self.assertEqual(self.run_command("jump", ["a"]), (True, ["Mark jump: ", "Jumped to D:2"]))
        self.assertEqual(self.run_command("delete", ["a"]), (True, ["Mark delete: ", "Mark a deleted"]))
        self.assertEqual(self.run_command("jump", ["a"]), (False, ["Mark jump: ", "No mark a"]))

    def test_quit_and_invalid_input_are_reported(self) -> None:
        self.assertEqual(self.run_command("jump", ["ESC"]), (False, ["Mark jump: ", "Quit"]))
        self.assertEqual(
            self.run_command("jump", ["LEFT"]),
            (False, ["Mark jump: ", "non-character input"]),
        )

    def test_view_shows_until_any_key(self) -> None:
        ok, events = self.run_command("view", ["", "", "q"])

        self.assertTrue(ok)
        self.assertEqual(events, ["show:2", "hide"])


if __name__ == "__main__":
    unittest.main()
