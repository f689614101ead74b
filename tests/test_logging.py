"""Tests for the structured event logging system."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from postfixcsv import logging as events
from postfixcsv.logging import (
    EventLevel,
    EventSink,
    EventType,
    PostfixEvent,
    emit,
    emit_error,
    emit_info,
    emit_warning,
)


@pytest.fixture
def sink(tmp_path: Path) -> EventSink:
    return EventSink(tmp_path / "logs")


class TestPostfixEvent:
    def test_event_defaults(self) -> None:
        evt = PostfixEvent(
            level=EventLevel.info,
            event_type=EventType.sheet_started,
            message="hello",
        )
        assert evt.schema_version == 1
        assert evt.ts.endswith("Z")
        assert evt.level == "info"
        assert evt.event_type == "sheet_started"
        assert evt.context == {}
        assert evt.error_code is None

    def test_all_event_types_exist(self) -> None:
        assert {e.value for e in EventType} == {
            "sheet_started",
            "sheet_completed",
            "cell_error",
            "cycle_detected",
            "file_read",
            "file_written",
        }


class TestEventSink:
    def test_creates_directory(self, tmp_path: Path) -> None:
        EventSink(tmp_path / "a" / "b")
        assert (tmp_path / "a" / "b").is_dir()

    def test_write_appends_sorted_json(self, sink: EventSink) -> None:
        sink.write(PostfixEvent(level=EventLevel.info, event_type=EventType.file_read, message="one"))
        sink.write(PostfixEvent(level=EventLevel.error, event_type=EventType.cell_error, message="two"))
        lines = sink.path.read_text().splitlines()
        assert len(lines) == 2
        first = json.loads(lines[0])
        assert first["message"] == "one"
        assert list(first) == sorted(first)

    def test_read_events_newest_first_and_filtered(self, sink: EventSink) -> None:
        for i in range(3):
            sink.write(PostfixEvent(level=EventLevel.info, event_type=EventType.file_read, message=str(i)))
        sink.write(PostfixEvent(level=EventLevel.warning, event_type=EventType.cell_error, message="w"))

        assert [e["message"] for e in sink.read_events()] == ["w", "2", "1", "0"]
        assert [e["message"] for e in sink.read_events(level="warning")] == ["w"]
        assert [e["message"] for e in sink.read_events(event_type="file_read", limit=2)] == ["2", "1"]

    def test_bad_lines_skipped(self, sink: EventSink) -> None:
        sink.path.write_text('not json\n{"message": "ok"}\n\n')
        assert sink.read_events() == [{"message": "ok"}]

    def test_missing_log_is_empty(self, sink: EventSink) -> None:
        assert sink.read_events() == []


class TestEmit:
    def test_discarded_without_sink(self) -> None:
        emit_info(EventType.file_read, "nothing happens")
        assert events.get_sink() is None

    def test_helpers_set_level(self, tmp_path: Path) -> None:
        events.configure(tmp_path)
        emit_info(EventType.file_read, "i")
        emit_warning(EventType.cell_error, "w", {"cell": "A1"}, error_code="cell_not_found")
        emit_error(EventType.cell_error, "e")

        got = events.get_sink().read_events()
        assert [(e["level"], e["message"]) for e in got] == [
            ("error", "e"),
            ("warning", "w"),
            ("info", "i"),
        ]
        assert got[1]["error_code"] == "cell_not_found"
        assert got[1]["context"] == {"cell": "A1"}

    def test_configure_none_disables(self, tmp_path: Path) -> None:
        events.configure(tmp_path)
        events.configure(None)
        assert events.get_sink() is None

    def test_emit_never_raises(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
        class _BrokenSink:
            def write(self, event: PostfixEvent) -> None:
                raise OSError("disk full")

        monkeypatch.setattr(events.events, "_sink", _BrokenSink())
        monkeypatch.setattr(events.events, "_last_stderr_ts", -1e9)
        emit(PostfixEvent(level=EventLevel.info, event_type=EventType.file_read))
        assert "logging failed" in capsys.readouterr().err
