"""Shared dataclasses and enums for actirec sessions."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional


class Activity(enum.Enum):
    """What the subject is doing; the value is the code written to ``labels.csv``."""

    NOTHING = "n"
    TYPING = "t"
    SCROLLING = "s"
    FIDGETING = "f"
    # Transition marker only, never selectable by the subject.
    OTHER = "o"

    @property
    def code(self) -> str:
        return self.value

    @classmethod
    def from_code(cls, code: str) -> "Activity":
        return cls(code.strip().lower())


SLOT_ACTIVITIES = (
    Activity.NOTHING,
    Activity.TYPING,
    Activity.SCROLLING,
    Activity.FIDGETING,
)


@dataclass(frozen=True)
class ReadingRecord:
    timestamp_ms: int
    raw_line: str

    def to_line(self) -> str:
        line = self.raw_line if self.raw_line.endswith("\n") else self.raw_line + "\n"
        return f"{self.timestamp_ms};{line}"


@dataclass(frozen=True)
class LabelEvent:
    timestamp_ms: int
    activity: Activity

    def to_line(self) -> str:
        return f"{self.timestamp_ms};{self.activity.code}\n"


@dataclass(frozen=True)
class SubjectInfo:
    sex: str
    hand: str
    height_cm: Optional[int] = None

    def to_text(self) -> str:
        height = "none" if self.height_cm is None else str(self.height_cm)
        return f"sex={self.sex}\nhand={self.hand}\nheight={height}\n"
