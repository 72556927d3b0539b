"""JSONL event logger - notification stream for ledger activity"""

from __future__ import annotations

import json
import logging
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from ..config import get

logger = logging.getLogger(__name__)

EVENT_MINTED = "minted"
EVENT_BURNED = "burned"
EVENT_TRANSFERRED = "transferred"
EVENT_TRANSFERABILITY_CHANGED = "transferability_changed"

EventListener = Callable[[dict[str, Any]], None]


class EventLogger:
    """Append-only event log for ledger notifications.

    Supports two modes:
    1. File mode (output_file): events are appended to a JSONL file
    2. Memory mode (no output_file): events are kept in a bounded buffer

    Every event carries a monotonic 'sequence' field for ordering. Listeners
    registered with subscribe() receive each event after it is recorded.
    """

    output_path: Path | None
    _sequence: int
    _buffer: deque[dict[str, Any]]
    _listeners: list[EventListener]
    _write_failures: int

    def __init__(
        self,
        output_file: str | None = None,
        buffer_size: int = 1000,
    ) -> None:
        """Initialize the event logger.

        Args:
            output_file: JSONL file path; None keeps events in memory only
            buffer_size: Maximum events retained in memory mode
        """
        self._sequence = 0
        self._write_failures = 0
        self._buffer = deque(maxlen=buffer_size)
        self._listeners = []
        self.output_path = None
        if output_file:
            self.output_path = Path(output_file)
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            # Clear existing log on init (new ledger)
            self.output_path.write_text("")

    def subscribe(self, listener: EventListener) -> None:
        """Register a callback invoked with every logged event."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> bool:
        """Remove a callback. Returns False if it was not registered."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            return False
        return True

    def log(self, event_type: str, data: dict[str, Any]) -> dict[str, Any]:
        """Record an event and notify listeners.

        Returns:
            The recorded event dict
        """
        self._sequence += 1
        event: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "sequence": self._sequence,
            "event_type": event_type,
            **data,
        }
        # The event describes a committed ledger change; neither a failed
        # write nor a failing observer may turn it into an error
        if self.output_path is not None:
            try:
                line = json.dumps(event)
                with open(self.output_path, "a") as f:
                    f.write(line + "\n")
            except (OSError, TypeError, ValueError):
                self._write_failures += 1
                self._buffer.append(event)
                logger.exception(
                    "Failed to write %s #%d to %s; kept in memory",
                    event_type, self._sequence, self.output_path,
                )
        else:
            self._buffer.append(event)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Event listener failed for %s #%d", event_type, self._sequence)
        return event

    # ========== Ledger notification helpers ==========

    def log_minted(self, recipient: str, token_id: int) -> dict[str, Any]:
        """Log a successful mint."""
        return self.log(EVENT_MINTED, {"recipient": recipient, "token_id": token_id})

    def log_burned(self, caller: str, token_id: int) -> dict[str, Any]:
        """Log a successful burn."""
        return self.log(EVENT_BURNED, {"caller": caller, "token_id": token_id})

    def log_transferred(
        self,
        caller: str,
        from_holder: str,
        to_holder: str,
        token_id: int,
    ) -> dict[str, Any]:
        """Log a successful transfer.

        Args:
            caller: Principal who requested the transfer
            from_holder: Previous holder
            to_holder: New holder
            token_id: The token moved
        """
        return self.log(EVENT_TRANSFERRED, {
            "caller": caller,
            "from": from_holder,
            "to": to_holder,
            "token_id": token_id,
        })

    def log_transferability_changed(self, caller: str, enabled: bool) -> dict[str, Any]:
        """Log a write of the transferability flag."""
        return self.log(EVENT_TRANSFERABILITY_CHANGED, {
            "caller": caller,
            "enabled": enabled,
        })

    def read_recent(self, n: int | None = None) -> list[dict[str, Any]]:
        """Read the last N events from the log.

        N defaults to logging.default_recent from config.
        """
        if n is None:
            default_recent = get("logging.default_recent")
            if isinstance(default_recent, int):
                n = default_recent
            else:
                n = 50
        if n <= 0:
            return []
        if self.output_path is None:
            events = list(self._buffer)
            return events[-n:]
        if not self.output_path.exists():
            return []
        lines = self.output_path.read_text().strip().split("\n")
        lines = [line for line in lines if line]  # filter empty
        recent = lines[-n:] if len(lines) > n else lines
        return [json.loads(line) for line in recent]

    @property
    def sequence(self) -> int:
        """Number of events logged so far."""
        return self._sequence

    @property
    def write_failures(self) -> int:
        """Number of events that could not be appended to the output file."""
        return self._write_failures

    def unwritten_events(self) -> list[dict[str, Any]]:
        """Events kept in memory because their file write failed."""
        if self.output_path is None:
            return []
        return list(self._buffer)
