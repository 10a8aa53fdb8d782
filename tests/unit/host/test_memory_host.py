"""Tests for the in-memory host: live handles, focus order, lifecycle events."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from binky.host.base import DOCUMENT_CLOSED, DOCUMENT_OPENED, FOCUS_CHANGE, Document, Host, LiveHandle
from binky.host.memory import MemoryHost
from binky.host.syntax import TEXT_MODE, sanitize_context_line, syntax_mode_for


class _Recorder:
    def __init__(self, host: MemoryHost) -> None:
        self.events: list[tuple[str, object]] = []
        for event in (FOCUS_CHANGE, DOCUMENT_CLOSED, DOCUMENT_OPENED):
            host.add_listener(event, lambda payload, event=event: self.record(event, payload))

    def record(self, event: str, payload: object) -> None:
        if event == FOCUS_CHANGE:
            payload = [document.name for document in payload]
        else:
            payload = (payload.name, payload.is_alive())
        self.events.append((event, payload))


class MemoryDocumentTests(unittest.TestCase):
    def setUp(self) -> None:
        self.host = MemoryHost()
        self.doc = self.host.create("doc", "abc\ndef\nghi")

    def test_handles_follow_insertions(self) -> None:
        before = self.host.make_handle(self.doc, 2)
        after = self.host.make_handle(self.doc, 6)

        self.doc.insert(4, "XYZ\n")

        self.assertEqual(before.resolve(), (self.doc, 2))
        self.assertEqual(after.resolve(), (self.doc, 10))
        self.assertEqual(self.doc.line_at(10), "def")

    def test_handles_inside_deleted_span_collapse_to_start(self) -> None:
        inside = self.host.make_handle(self.doc, 5)
        later = self.host.make_handle(self.doc, 9)

        self.doc.delete(4, 8)

        self.assertEqual(inside.resolve()[1], 4)
        self.assertEqual(later.resolve()[1], 5)
        self.assertEqual(self.doc.text, "abc\nghi")

    def test_line_helpers(self) -> None:
        self.assertEqual(self.doc.line_at(5), "def")
        self.assertEqual(self.doc.line_number_at(0), 1)
        self.assertEqual(self.doc.line_number_at(9), 3)
        self.assertEqual(self.doc.offset_of_line(2), 4)
        self.assertEqual(self.doc.offset_of_line(99), len(self.doc.text))

    def test_point_is_clamped(self) -> None:
        self.host.goto(self.doc, 500)
        self.assertEqual(self.doc.point, len(self.doc.text))

    def test_satisfies_host_protocols(self) -> None:
        self.assertIsInstance(self.host, Host)
        self.assertIsInstance(self.doc, Document)
        self.assertIsInstance(self.host.make_handle(self.doc, 0), LiveHandle)


class MemoryHostLifecycleTests(unittest.TestCase):
    def test_focus_order_and_events(self) -> None:
        host = MemoryHost()
        recorder = _Recorder(host)
        a = host.create("a")
        host.create("b")
        host.focus(a)
        host.focus(a)

        self.assertEqual([document.name for document in host.documents()], ["b", "a"])
        self.assertEqual(
            recorder.events,
            [
                (DOCUMENT_OPENED, ("a", True)),
                (FOCUS_CHANGE, ["a"]),
                (DOCUMENT_OPENED, ("b", True)),
                (FOCUS_CHANGE, ["a", "b"]),
                (FOCUS_CHANGE, ["b", "a"]),
            ],
        )

    def test_close_fires_while_document_is_readable(self) -> None:
        host = MemoryHost()
        a = host.create("a")
        b = host.create("b")
        recorder = _Recorder(host)

        host.close(b)

        self.assertFalse(b.is_alive())
        self.assertIs(host.current_document(), a)
        self.assertEqual(recorder.events, [(DOCUMENT_CLOSED, ("b", True)), (FOCUS_CHANGE, ["a"])])

    def test_background_close_does_not_change_focus(self) -> None:
        host = MemoryHost()
        a = host.create("a")
        host.create("b")
        recorder = _Recorder(host)

        host.close(a)

        self.assertEqual(recorder.events, [(DOCUMENT_CLOSED, ("a", True))])

    def test_duplicate_names_are_uniquified(self) -> None:
        host = MemoryHost()
        host.create("notes")
        second = host.create("notes")
        self.assertEqual(second.name, "notes<2>")

    def test_open_path_reuses_open_document(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "script.py"
            path.write_text("print('hi')\n", encoding="utf-8")
            host = MemoryHost()

            first = host.open_path(path)
            second = host.open_path(path)

            self.assertIs(first, second)
            self.assertEqual(first.mode, "Python")
            self.assertEqual(first.path, path.resolve())

    def test_open_missing_path_raises(self) -> None:
        host = MemoryHost()
        with self.assertRaises(OSError):
            host.open_path(Path("/nonexistent/binky/file.txt"))
        self.assertEqual(host.documents(), [])

    def test_focus_rejects_closed_document(self) -> None:
        host = MemoryHost()
        a = host.create("a")
        host.close(a)
        with self.assertRaises(ValueError):
            host.focus(a)


class SyntaxTests(unittest.TestCase):
    def test_mode_from_file_name(self) -> None:
        self.assertEqual(syntax_mode_for("setup.py"), "Python")
        self.assertEqual(syntax_mode_for("notes.zzq"), TEXT_MODE)

    def test_context_line_control_bytes_are_escaped(self) -> None:
        self.assertEqual(sanitize_context_line("a\tb\x1b[31m"), "a b\\x1b[31m")
        self.assertEqual(sanitize_context_line("plain"), "plain")

    def test_tabs_and_carriage_returns_are_always_neutralized(self) -> None:
        self.assertEqual(sanitize_context_line("a\tb"), "a b")
        self.assertEqual(sanitize_context_line("a\tb\x01"), "a b\\x01")
        self.assertEqual(sanitize_context_line("x\ry"), "x\\x0dy")


if __name__ == "__main__":
    unittest.main()
