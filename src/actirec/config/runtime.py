"""Runtime configuration helpers for the recorder."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_DEVICE = "/dev/serial/by-id/usb-1a86_USB_Serial-if00-port0"
DEFAULT_BASE_DIR = "."
DEFAULT_BAUD = 115200

POLICIES = ("autonomous", "interactive")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class RecorderConfig:
    """
    Tuning knobs for one recording session.

    The defaults match the lab protocol: 500 warm-up lines, a flush every
    5000 lines, eight shuffled 15 s activity slots each preceded by a 5 s
    countdown.
    """

    device: str = DEFAULT_DEVICE
    baud: int = DEFAULT_BAUD
    base_dir: str = DEFAULT_BASE_DIR

    warmup_lines: int = 500
    flush_every: int = 5000
    fsync_each_flush: bool = False
    max_consecutive_read_errors: int = 1000

    policy: str = "autonomous"
    repetitions: int = 2
    countdown_from: int = 5
    countdown_tick_seconds: float = 1.0
    activity_seconds: float = 15.0
    seed: Optional[int] = None

    log_level: str = "WARNING"
    log_file: Optional[str] = None

    def sanitized(self) -> RecorderConfig:
        """Return a copy with derived limits applied."""
        policy = str(self.policy).strip().lower()
        if policy not in POLICIES:
            raise ValueError(f"Unknown timeline policy {self.policy!r}, expected one of {POLICIES}")
        level = str(self.log_level).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {self.log_level!r}, expected one of {LOG_LEVELS}")
        return RecorderConfig(
            device=str(self.device),
            baud=max(1, int(self.baud)),
            base_dir=str(self.base_dir),
            warmup_lines=max(0, int(self.warmup_lines)),
            flush_every=max(1, int(self.flush_every)),
            fsync_each_flush=bool(self.fsync_each_flush),
            max_consecutive_read_errors=max(0, int(self.max_consecutive_read_errors)),
            policy=policy,
            repetitions=max(1, int(self.repetitions)),
            countdown_from=max(0, int(self.countdown_from)),
            countdown_tick_seconds=max(0.0, float(self.countdown_tick_seconds)),
            activity_seconds=max(0.0, float(self.activity_seconds)),
            seed=None if self.seed is None else int(self.seed),
            log_level=level,
            log_file=None if self.log_file is None else str(self.log_file),
        )


def _flatten_sections(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """
    Merge an optional ``recorder:`` section into the top level.

    Keys inside the section win over top-level duplicates.
    """
    section = data.get("recorder")
    if section is None:
        return dict(data)
    if not isinstance(section, Mapping):
        raise ValueError(f"'recorder' section must be a mapping, got {type(section).__name__}")
    merged = {key: value for key, value in data.items() if key != "recorder"}
    merged.update(section)
    return merged


def config_from_mapping(data: Mapping[str, Any] | None) -> RecorderConfig:
    """Build :class:`RecorderConfig` from ``data``; unknown keys are dropped with a warning."""
    if not data:
        return RecorderConfig()
    flat = _flatten_sections(data)
    known = {f.name for f in fields(RecorderConfig)}
    unknown = sorted(str(key) for key in flat.keys() - known)
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
    return RecorderConfig(**{key: flat[key] for key in flat.keys() & known}).sanitized()


def load_config(path: str | Path | None) -> RecorderConfig:
    """
    Load configuration from ``path``.

    A missing file (or no path at all) yields the defaults.
    """
    if path is None:
        return RecorderConfig()
    cfg_path = Path(path)
    if not cfg_path.is_file():
        logger.info("No config file at %s, using defaults", cfg_path)
        return RecorderConfig()
    with cfg_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"Expected mapping in {cfg_path}, got {type(raw).__name__}")
    logger.debug("Loaded recorder config from %s", cfg_path)
    return config_from_mapping(raw)


__all__ = [
    "DEFAULT_BASE_DIR",
    "DEFAULT_BAUD",
    "DEFAULT_DEVICE",
    "LOG_LEVELS",
    "POLICIES",
    "RecorderConfig",
    "config_from_mapping",
    "load_config",
]
