"""Blocking key-press source for the interactive timeline."""

from __future__ import annotations

from typing import Iterator

import keyboard


def iter_key_presses() -> Iterator[str]:
    """Yield the name of every key pressed, blocking between presses.

    Key releases are skipped. On Linux the ``keyboard`` library needs root
    (or membership of the ``input`` group) to read events.
    """
    while True:
        event = keyboard.read_event()
        if event.event_type == keyboard.KEY_DOWN and event.name:
            yield event.name.lower()
