"""Serial ingestion loop: read, timestamp, filter and buffer sensor lines.

The loop owns the serial port and the ``readings.csv`` handle. It runs on
the calling thread until the device closes the stream.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

import serial

from ..tools.debug import debug_enabled, time_block
from .clock import Clock, now_ms
from .models import ReadingRecord

logger = logging.getLogger(__name__)

DEFAULT_WARMUP_LINES = 500
DEFAULT_FLUSH_EVERY = 5000
DEFAULT_MAX_CONSECUTIVE_READ_ERRORS = 1000
_WRITE_BUFFER_BYTES = 1 << 20


class LineSource(Protocol):
    def readline(self) -> bytes: ...


@dataclass
class IngestStats:
    lines_read: int = 0
    warmup_discarded: int = 0
    blank_dropped: int = 0
    written: int = 0
    flushes: int = 0
    read_errors: int = 0
    decode_errors: int = 0


class SerialIngestLoop:
    """Blocking line reader that writes ``<timestamp_ms>;<raw_line>`` rows.

    The first ``warmup_lines`` lines are discarded whatever they contain.
    After that every non-blank line is timestamped and written to a large
    file buffer which is flushed every ``flush_every`` post-warm-up lines and
    once more when the stream ends. ``readline()`` is the only suspension
    point; there is no timeout.
    """

    def __init__(
        self,
        port: LineSource,
        readings_path: Path | str,
        *,
        warmup_lines: int = DEFAULT_WARMUP_LINES,
        flush_every: int = DEFAULT_FLUSH_EVERY,
        fsync_each_flush: bool = False,
        max_consecutive_read_errors: int = DEFAULT_MAX_CONSECUTIVE_READ_ERRORS,
        clock: Clock = now_ms,
        encoding: str = "utf-8",
    ) -> None:
        if flush_every <= 0:
            raise ValueError(f"flush_every must be a positive integer, got {flush_every}")
        self._port = port
        self.readings_path = Path(readings_path)
        self.warmup_lines = max(0, int(warmup_lines))
        self.flush_every = int(flush_every)
        self.fsync_each_flush = fsync_each_flush
        self.max_consecutive_read_errors = max(0, int(max_consecutive_read_errors))
        self._clock = clock
        self._encoding = encoding
        self.stats = IngestStats()
        self._error_streak = 0

    def _read_line(self) -> Optional[bytes]:
        """Return the next raw line, ``b""`` at end of stream, ``None`` on a port error."""
        try:
            line = self._port.readline()
        except (serial.SerialException, OSError) as exc:
            self.stats.read_errors += 1
            self._error_streak += 1
            # A dead port fails on every read; only the first of a run is a warning.
            if self._error_streak == 1:
                logger.warning("Error reading line: %s", exc)
            else:
                logger.debug("Error reading line (%d in a row): %s", self._error_streak, exc)
            return None
        if self._error_streak:
            logger.info("Port recovered after %d read errors", self._error_streak)
            self._error_streak = 0
        return line

    def _flush(self, fh) -> None:
        with time_block("readings flush", emitter=logger.debug):
            fh.flush()
            if self.fsync_each_flush:
                os.fsync(fh.fileno())
        self.stats.flushes += 1

    def run(self) -> IngestStats:
        stats = self.stats
        warmup_seen = 0
        since_flush = 0

        debug_on = debug_enabled()
        debug_last_log = time.perf_counter()
        debug_window_lines = 0

        with self.readings_path.open(
            "w", encoding="utf-8", newline="", buffering=_WRITE_BUFFER_BYTES
        ) as fh:
            try:
                while True:
                    raw = self._read_line()
                    if raw is None:
                        if (
                            self.max_consecutive_read_errors
                            and self._error_streak >= self.max_consecutive_read_errors
                        ):
                            logger.error(
                                "%d consecutive read errors, treating the device as closed",
                                self._error_streak,
                            )
                            break
                        continue
                    if not raw:
                        logger.info("Device closed the stream")
                        break

                    try:
                        line = raw.decode(self._encoding)
                    except UnicodeDecodeError as exc:
                        stats.decode_errors += 1
                        logger.warning("Dropping undecodable line: %s", exc)
                        continue

                    stats.lines_read += 1
                    if warmup_seen < self.warmup_lines:
                        warmup_seen += 1
                        stats.warmup_discarded += 1
                        continue

                    if line.strip():
                        fh.write(ReadingRecord(self._clock(), line).to_line())
                        stats.written += 1
                    else:
                        stats.blank_dropped += 1

                    since_flush += 1
                    if since_flush >= self.flush_every:
                        self._flush(fh)
                        since_flush = 0

                    if debug_on:
                        debug_window_lines += 1
                        perf_now = time.perf_counter()
                        if perf_now - debug_last_log >= 5.0:
                            elapsed_window = max(1e-9, perf_now - debug_last_log)
                            logger.debug(
                                "lines=%d written=%d recent≈%.1f lines/s",
                                stats.lines_read,
                                stats.written,
                                debug_window_lines / elapsed_window,
                            )
                            debug_last_log = perf_now
                            debug_window_lines = 0
            finally:
                self._flush(fh)

        logger.info(
            "Ingestion finished: %d lines read, %d written, %d blank, %d read errors",
            stats.lines_read,
            stats.written,
            stats.blank_dropped,
            stats.read_errors,
        )
        return stats
