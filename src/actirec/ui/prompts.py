"""Terminal prompts for the subject's characteristics."""

from __future__ import annotations

import sys
from typing import Callable, Optional, Sequence, TextIO

from ..core.models import SubjectInfo

HEIGHT_RANGE_CM = (50, 300)


def prompt_choice(
    prompt: str,
    allowed: Sequence[str],
    default: Optional[str] = None,
    *,
    read: Callable[[str], str] = input,
    err: Optional[TextIO] = None,
) -> str:
    """Ask until the (trimmed, lower-cased) answer is one of ``allowed``.

    An empty answer selects ``default`` when one is given.
    """
    err = err or sys.stderr
    while True:
        answer = read(prompt).strip().lower()
        if not answer and default is not None:
            answer = default
        if answer in allowed:
            return answer
        print(f"Invalid input. Expected one of {list(allowed)}. Try again.", file=err, flush=True)


def prompt_height(
    prompt: str,
    *,
    read: Callable[[str], str] = input,
    err: Optional[TextIO] = None,
) -> Optional[int]:
    """Ask for a height in cm; an empty answer means unknown (``None``)."""
    err = err or sys.stderr
    low, high = HEIGHT_RANGE_CM
    while True:
        answer = read(prompt).strip()
        if not answer:
            return None
        try:
            height = int(answer)
        except ValueError:
            print("Height must be a valid integer. Try again.", file=err, flush=True)
            continue
        if low <= height <= high:
            return height
        print(
            f"You sure? Height must be between {low} and {high}cm. Try again.",
            file=err,
            flush=True,
        )


def prompt_subject(
    *,
    read: Callable[[str], str] = input,
    err: Optional[TextIO] = None,
) -> SubjectInfo:
    sex = prompt_choice("sex (f/m): ", ("f", "m"), read=read, err=err)
    hand = prompt_choice("hand (l/R): ", ("l", "r"), default="r", read=read, err=err)
    height = prompt_height("height (in cm): ", read=read, err=err)
    return SubjectInfo(sex=sex, hand=hand, height_cm=height)
