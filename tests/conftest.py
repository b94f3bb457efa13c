from __future__ import annotations

import io
import pathlib
import sys
from typing import Iterable, List

import pytest

# Ensure src/ is on path for direct test execution
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class FakeClock:
    """Millisecond clock that only moves when ``sleep`` is called."""

    def __init__(self, start_ms: int = 1_700_000_000_000) -> None:
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += int(round(seconds * 1000))


class TickingClock:
    """Millisecond clock that advances by one on every reading."""

    def __init__(self, start_ms: int = 1) -> None:
        self.now = start_ms - 1

    def __call__(self) -> int:
        self.now += 1
        return self.now


class RecordingRenderer:
    def __init__(self) -> None:
        self.messages: List[str] = []
        self.passages: List[str] = []

    def show(self, message: str) -> None:
        self.messages.append(message)

    def show_passage(self, passage: str) -> None:
        self.passages.append(passage)


class FakeSerial(io.BytesIO):
    """In-memory stand-in for an open ``serial.Serial`` port."""

    def __init__(self, lines: Iterable[bytes]) -> None:
        super().__init__(b"".join(lines))


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()
