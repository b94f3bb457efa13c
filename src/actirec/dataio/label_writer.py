"""Append-only writer for the ``labels.csv`` stream."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, TextIO

from ..core.clock import Clock, now_ms
from ..core.models import Activity, LabelEvent

logger = logging.getLogger(__name__)


class LabelWriter:
    """Writes ``<timestamp_ms>;<code>`` rows, one per label event.

    The file is line buffered: labels are rare, so every row is handed to
    the OS as soon as it is recorded. Write failures never reach the caller
    (the experiment timeline must not stop) but are logged and counted in
    :attr:`failed_writes`.
    """

    def __init__(self, path: Path | str, clock: Clock = now_ms) -> None:
        self.path = Path(path)
        self._clock = clock
        self._fh: Optional[TextIO] = self.path.open("a", encoding="utf-8", buffering=1)
        self.written = 0
        self.failed_writes = 0

    def record(self, activity: Activity, at_ms: Optional[int] = None) -> Optional[LabelEvent]:
        """Append one label event; returns it, or ``None`` if the write failed."""
        event = LabelEvent(self._clock() if at_ms is None else int(at_ms), activity)
        try:
            if self._fh is None:
                raise ValueError("label file is closed")
            self._fh.write(event.to_line())
        except (OSError, ValueError) as exc:
            self.failed_writes += 1
            logger.error(
                "Failed to write label %s at %d (%d failed so far): %s",
                activity.code,
                event.timestamp_ms,
                self.failed_writes,
                exc,
            )
            return None
        self.written += 1
        return event

    def close(self) -> None:
        if self._fh is None:
            return
        try:
            self._fh.close()
        finally:
            self._fh = None
        if self.failed_writes:
            logger.warning("%d label write(s) failed for %s", self.failed_writes, self.path)

    def __enter__(self) -> "LabelWriter":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
