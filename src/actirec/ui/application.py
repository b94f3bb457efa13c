"""Command-line entry point for a recording session.

Order of operations: open the serial device, check the base directory, ask
the subject's characteristics, allocate the session directory, then record
until the device closes the stream. Both ``python main.py`` and the
``actirec`` console script flow through :func:`main`. The ``actirec-windows``
script (:func:`windows_main`) summarises a finished session.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from ..config.runtime import LOG_LEVELS, POLICIES, RecorderConfig, load_config
from ..core.models import Activity
from ..core.recorder_session import Recorder, RecorderSession
from ..dataio import file_paths, session_loader
from ..dataio.subject_info import read_subject_info
from ..device.serial_port import open_serial
from .prompts import prompt_subject
from .renderer import TitleCardRenderer

logger = logging.getLogger(__name__)


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Record serial sensor lines alongside a timestamped activity-label stream"
    )
    parser.add_argument("--dir", help="Path to the recordings directory (default: .)")
    parser.add_argument("--dev", help="Path to the serial device")
    parser.add_argument("--config", help="YAML file with recorder settings")
    parser.add_argument(
        "--policy",
        choices=POLICIES,
        help="How activities are scheduled (default: autonomous)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for the activity order and retype passages",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        help="Logging verbosity (default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        help=(
            "Write log messages to this file instead of stderr "
            "(recommended for real sessions so logs stay off the cue cards)"
        ),
    )
    return parser


def build_config(args: argparse.Namespace) -> RecorderConfig:
    """Load ``--config`` (if any) and apply command-line overrides."""
    config = load_config(args.config)
    overrides = {
        "base_dir": args.dir,
        "device": args.dev,
        "policy": args.policy,
        "seed": args.seed,
        "log_level": args.log_level,
        "log_file": args.log_file,
    }
    config = dataclasses.replace(
        config, **{key: value for key, value in overrides.items() if value is not None}
    )
    return config.sanitized()


def configure_logging(config: RecorderConfig) -> None:
    logging.basicConfig(
        format="%(levelname)s [actirec]: %(message)s",
        level=config.log_level,
        filename=config.log_file,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    try:
        config = build_config(args)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    configure_logging(config)

    renderer = TitleCardRenderer()
    try:
        with open_serial(config.device, config.baud) as port:
            file_paths.validate_base_dir(config.base_dir)
            subject = prompt_subject()
            session = RecorderSession.create(config.base_dir, subject)
            print(f"New record: {session.session_dir}")
            stats = Recorder(session, port, config, renderer).run()
    except (OSError, ValueError, EOFError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
    finally:
        renderer.close()

    logger.info("Session complete: %d readings written", stats.written)
    return 0


def summarize_session(session_dir: Path) -> List[str]:
    """Return the report lines for one recorded session directory."""
    subject = read_subject_info(session_dir / file_paths.CHARS_FILENAME)
    reading_ts, _ = session_loader.load_readings(session_dir / file_paths.READINGS_FILENAME)
    label_ts, activities = session_loader.load_labels(session_dir / file_paths.LABELS_FILENAME)
    windows = session_loader.activity_windows(label_ts, activities)
    codes = session_loader.label_readings(reading_ts, windows)
    counts = session_loader.window_reading_counts(reading_ts, windows)

    height = "unknown" if subject.height_cm is None else f"{subject.height_cm}cm"
    lines = [
        f"Session {session_dir}: sex={subject.sex} hand={subject.hand} height={height}",
        f"{len(reading_ts)} readings, {len(windows)} activity windows",
    ]
    for window, count in zip(windows, counts):
        lines.append(
            f"  {window.activity.code} {window.start_ms}-{window.end_ms} "
            f"({window.end_ms - window.start_ms} ms): {count} readings"
        )
    totals = ", ".join(
        f"{activity.code}={int(np.count_nonzero(codes == activity.code))}" for activity in Activity
    )
    lines.append(f"Readings per activity: {totals}")
    return lines


def windows_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Summarise the activity windows of a recorded session"
    )
    parser.add_argument("session_dir", help="Numbered session directory to read")
    args = parser.parse_args(argv)

    try:
        lines = summarize_session(Path(args.session_dir))
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
