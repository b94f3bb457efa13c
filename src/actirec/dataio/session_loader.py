"""Utilities for reading one recorded session back for offline review.

Sensor payloads stay opaque strings; only the leading timestamp field of
each row is parsed.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

import numpy as np

from ..core.models import Activity


@dataclass(frozen=True)
class ActivityWindow:
    """A labelled span: from a real label up to the next ``other`` marker."""

    activity: Activity
    start_ms: int
    end_ms: int


def _split_rows(path: Path) -> Tuple[np.ndarray, List[str]]:
    timestamps: List[int] = []
    payloads: List[str] = []
    with path.open("r", encoding="utf-8") as fh:
        for line in fh:
            ts, sep, rest = line.partition(";")
            if not sep:
                continue
            timestamps.append(int(ts))
            payloads.append(rest.rstrip("\r\n"))
    return np.asarray(timestamps, dtype=np.int64), payloads


def load_readings(path: Path) -> Tuple[np.ndarray, List[str]]:
    """Return ``(timestamps_ms, raw_lines)`` from a ``readings.csv`` file."""
    return _split_rows(path)


def load_labels(path: Path) -> Tuple[np.ndarray, List[Activity]]:
    """Return ``(timestamps_ms, activities)`` from a ``labels.csv`` file."""
    timestamps, codes = _split_rows(path)
    return timestamps, [Activity.from_code(code) for code in codes]


def activity_windows(timestamps: np.ndarray, activities: List[Activity]) -> List[ActivityWindow]:
    """
    Pair each real label with the next label event.

    A real label with no later event (an interrupted session) is dropped
    because its end is unknown.
    """
    if len(timestamps) != len(activities):
        raise ValueError(
            f"timestamps and activities differ in length ({len(timestamps)} != {len(activities)})"
        )
    windows: List[ActivityWindow] = []
    for idx in range(len(activities) - 1):
        activity = activities[idx]
        if activity is Activity.OTHER:
            continue
        windows.append(
            ActivityWindow(activity, int(timestamps[idx]), int(timestamps[idx + 1]))
        )
    return windows


def _window_slice(reading_ts: np.ndarray, window: ActivityWindow) -> slice:
    lo = int(np.searchsorted(reading_ts, window.start_ms, side="right"))
    hi = int(np.searchsorted(reading_ts, window.end_ms, side="left"))
    return slice(lo, max(lo, hi))


def label_readings(reading_ts: np.ndarray, windows: List[ActivityWindow]) -> np.ndarray:
    """
    Return one activity code per reading.

    Readings strictly inside a window get that window's code; everything else
    (countdowns, transitions, boundaries) gets ``"o"``.
    """
    labels = np.full(reading_ts.shape[0], Activity.OTHER.code, dtype="<U1")
    for window in windows:
        labels[_window_slice(reading_ts, window)] = window.activity.code
    return labels


def window_reading_counts(reading_ts: np.ndarray, windows: List[ActivityWindow]) -> List[int]:
    """Number of readings strictly inside each window."""
    counts = []
    for window in windows:
        span = _window_slice(reading_ts, window)
        counts.append(span.stop - span.start)
    return counts
