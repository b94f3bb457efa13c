"""Coordinator that runs the label timeline alongside serial ingestion."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from ..config.runtime import RecorderConfig
from ..dataio import file_paths
from ..dataio.label_writer import LabelWriter
from ..dataio.subject_info import write_subject_info
from .clock import Clock, now_ms
from .models import SubjectInfo
from .serial_ingest import IngestStats, LineSource, SerialIngestLoop
from .timeline import CueRenderer, build_timeline

logger = logging.getLogger(__name__)


@dataclass
class RecorderSession:
    """One numbered session directory and the files it holds."""

    session_dir: Path
    subject: SubjectInfo

    @classmethod
    def create(cls, base_dir: Path | str, subject: SubjectInfo) -> "RecorderSession":
        """Allocate the next session directory and write ``chars.txt`` into it."""
        session_dir = file_paths.allocate_session_dir(base_dir)
        session = cls(session_dir=session_dir, subject=subject)
        write_subject_info(session.chars_path, subject)
        return session

    @property
    def chars_path(self) -> Path:
        return self.session_dir / file_paths.CHARS_FILENAME

    @property
    def readings_path(self) -> Path:
        return self.session_dir / file_paths.READINGS_FILENAME

    @property
    def labels_path(self) -> Path:
        return self.session_dir / file_paths.LABELS_FILENAME


class Recorder:
    """Runs the two streams of one session.

    :meth:`run` starts the timeline generator on its own thread, then drives
    the serial ingestion loop on the calling thread until the device closes
    the stream. The threads share only the wall clock.
    """

    def __init__(
        self,
        session: RecorderSession,
        port: LineSource,
        config: RecorderConfig,
        renderer: CueRenderer,
        *,
        keys: Optional[Iterable[str]] = None,
        clock: Clock = now_ms,
    ) -> None:
        self.session = session
        self.port = port
        self.config = config
        self.renderer = renderer
        self._keys = keys
        self._clock = clock
        self.timeline_thread: Optional[threading.Thread] = None

    def run(self) -> IngestStats:
        labels = LabelWriter(self.session.labels_path, clock=self._clock)
        timeline = build_timeline(self.config, labels, self.renderer, keys=self._keys)

        ingest = SerialIngestLoop(
            self.port,
            self.session.readings_path,
            warmup_lines=self.config.warmup_lines,
            flush_every=self.config.flush_every,
            fsync_each_flush=self.config.fsync_each_flush,
            max_consecutive_read_errors=self.config.max_consecutive_read_errors,
            clock=self._clock,
        )

        logger.info("Recording session %s (%s policy)", self.session.session_dir, self.config.policy)
        self.timeline_thread = timeline.start()
        return ingest.run()
