"""Unit tests for the EventLogger notification stream."""

import json
from pathlib import Path
from typing import Any

from loyalty_ledger.ledger import EventLogger


class TestMemoryMode:
    """Tests for the in-memory buffer."""

    def test_sequence_is_monotonic(self, events: EventLogger) -> None:
        events.log_minted("alice", 1)
        events.log_burned("alice", 1)

        recent = events.read_recent(10)

        assert [e["sequence"] for e in recent] == [1, 2]
        assert [e["event_type"] for e in recent] == ["minted", "burned"]
        assert events.sequence == 2

    def test_event_payloads(self, events: EventLogger) -> None:
        minted = events.log_minted("alice", 1)
        transferred = events.log_transferred("alice", "alice", "bob", 1)
        toggled = events.log_transferability_changed("admin", True)

        assert minted["recipient"] == "alice"
        assert minted["token_id"] == 1
        assert transferred["from"] == "alice"
        assert transferred["to"] == "bob"
        assert toggled["enabled"] is True
        assert "timestamp" in minted

    def test_buffer_is_bounded(self) -> None:
        events = EventLogger(buffer_size=3)
        for i in range(5):
            events.log_minted("alice", i + 1)

        recent = events.read_recent(10)

        assert [e["token_id"] for e in recent] == [3, 4, 5]

    def test_read_recent_limit(self, events: EventLogger) -> None:
        for i in range(4):
            events.log_minted("alice", i + 1)
        assert [e["token_id"] for e in events.read_recent(2)] == [3, 4]
        assert events.read_recent(0) == []

    def test_read_recent_default_from_config(self, events: EventLogger) -> None:
        for i in range(3):
            events.log_minted("alice", i + 1)
        assert len(events.read_recent()) == 3


class TestFileMode:
    """Tests for JSONL output."""

    def test_writes_jsonl(self, tmp_path: Path) -> None:
        path = tmp_path / "logs" / "events.jsonl"
        events = EventLogger(output_file=str(path))

        events.log_minted("alice", 1)
        events.log_burned("admin", 1)

        lines = path.read_text().strip().split("\n")
        assert [json.loads(line)["event_type"] for line in lines] == ["minted", "burned"]
        assert events.read_recent(1)[0]["caller"] == "admin"

    def test_init_truncates(self, tmp_path: Path) -> None:
        path = tmp_path / "events.jsonl"
        path.write_text('{"stale": true}\n')

        EventLogger(output_file=str(path))

        assert path.read_text() == ""


class TestListeners:
    """Tests for subscribe/unsubscribe."""

    def test_listener_receives_events(self, events: EventLogger) -> None:
        received: list[dict[str, Any]] = []
        events.subscribe(received.append)

        events.log_minted("alice", 1)

        assert len(received) == 1
        assert received[0]["token_id"] == 1

    def test_unsubscribe(self, events: EventLogger) -> None:
        received: list[dict[str, Any]] = []
        events.subscribe(received.append)
        assert events.unsubscribe(received.append) is True
        assert events.unsubscribe(received.append) is False

        events.log_minted("alice", 1)

        assert received == []

    def test_failing_listener_does_not_break_others(self, events: EventLogger) -> None:
        received: list[dict[str, Any]] = []

        def broken(event: dict[str, Any]) -> None:
            raise RuntimeError("indexer down")

        events.subscribe(broken)
        events.subscribe(received.append)

        event = events.log_minted("alice", 1)

        assert received == [event]
        assert events.read_recent(1) == [event]


class TestWriteFailures:
    """A failed file append keeps the event instead of raising."""

    def test_unwritable_file_keeps_event(self, tmp_path: Path) -> None:
        path = tmp_path / "events.jsonl"
        events = EventLogger(output_file=str(path))
        # A directory at the log path makes every append fail
        path.unlink()
        path.mkdir()
        received: list[dict[str, Any]] = []
        events.subscribe(received.append)

        event = events.log_minted("alice", 1)

        assert event["sequence"] == 1
        assert received == [event]
        assert events.write_failures == 1
        assert events.unwritten_events() == [event]

    def test_memory_mode_has_no_unwritten_events(self, events: EventLogger) -> None:
        events.log_minted("alice", 1)
        assert events.write_failures == 0
        assert events.unwritten_events() == []
