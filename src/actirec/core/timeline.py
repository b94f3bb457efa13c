"""Activity timeline generators that write the ``labels.csv`` stream.

Two policies share the :class:`TimelineGenerator` interface:

- :class:`AutonomousTimeline` walks the subject through shuffled, fixed
  length activity slots, each preceded by an on-screen countdown.
- :class:`InteractiveTimeline` lets the subject switch activity by pressing
  a key.

Each generator runs on its own thread and exclusively owns its
:class:`~actirec.dataio.label_writer.LabelWriter`. It never talks to the
serial ingestion loop; the two streams are joined later by timestamp.
"""

from __future__ import annotations

import abc
import logging
import random
import threading
import time
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Sequence

from ..config.runtime import RecorderConfig
from ..dataio.label_writer import LabelWriter
from .models import SLOT_ACTIVITIES, Activity

logger = logging.getLogger(__name__)

PASSAGES = (
    "The tortoise and the hare are often seen as representing two different approaches to life. The hare is fast and confident, often rushing ahead, while the tortoise is slow and steady, never losing focus. In the end, the tortoise won the race because it was consistent and patient.",
    "Humans have always been fascinated by the stars. We’ve sent spacecraft to distant planets, launched satellites to explore our solar system, and studied the cosmos through telescopes. One day, we may even establish colonies on Mars, but for now, we can only imagine the future of space exploration",
    "The butterfly effect is a concept in chaos theory that suggests that small causes can have large effects. It’s based on the idea that the flap of a butterfly’s wings in one part of the world could set off a chain of events leading to significant changes in another part of the world. It highlights the interconnectedness of all things.",
    "Cooking is both a science and an art. From the precise measurements of ingredients to the creativity of combining flavors, there’s something deeply satisfying about preparing a meal. Whether you're baking a cake or grilling a steak, cooking allows for endless experimentation, and every dish is a reflection of the cook’s personality.",
    "Music has the power to transport us to another time and place. It can evoke memories, stir emotions, and bring people together. From classical compositions to modern pop songs, music is a universal language that transcends borders and connects us to something greater than ourselves.",
)

_PREPARE_MESSAGES: Dict[Activity, str] = {
    Activity.TYPING: "Prepare to type!",
    Activity.NOTHING: "Prepare to nothing!",
    Activity.SCROLLING: "Prepare to scroll!",
    Activity.FIDGETING: "Prepare to fidget!",
}

_INSTRUCTIONS: Dict[Activity, str] = {
    Activity.NOTHING: "Do nothing!",
    Activity.SCROLLING: "Scroll!",
    Activity.FIDGETING: "Fidget!",
}

DONE_MESSAGE = "Done!\nYou are amazing!"

KEY_BINDINGS: Dict[str, Activity] = {
    "t": Activity.TYPING,
    "s": Activity.SCROLLING,
    "f": Activity.FIDGETING,
    "n": Activity.NOTHING,
}
QUIT_KEY = "q"


class CueRenderer(Protocol):
    def show(self, message: str) -> None: ...

    def show_passage(self, passage: str) -> None: ...


def prepare_message(activity: Activity) -> str:
    """Return the countdown cue for a slot activity."""
    try:
        return _PREPARE_MESSAGES[activity]
    except KeyError:
        raise ValueError(f"No countdown cue for {activity.name}") from None


def plan_slots(rng: random.Random, repetitions: int = 2) -> List[Activity]:
    """Return ``repetitions`` copies of every slot activity in shuffled order."""
    slots = [activity for activity in SLOT_ACTIVITIES for _ in range(repetitions)]
    rng.shuffle(slots)
    return slots


class TimelineGenerator(abc.ABC):
    """Produces label events over time on a dedicated thread."""

    thread_name = "ActivityTimeline"

    def __init__(self, labels: LabelWriter, renderer: CueRenderer) -> None:
        self.labels = labels
        self.renderer = renderer

    @abc.abstractmethod
    def run(self) -> None:
        """Emit label events until the timeline is done."""

    def start(self) -> threading.Thread:
        """
        Run the timeline on a daemon thread and return it.

        The label writer is closed when the timeline ends. There is no stop
        signal: the thread finishes on its own or with the process.
        """

        def _target() -> None:
            try:
                self.run()
            except Exception:
                logger.exception("Activity timeline stopped unexpectedly")
            finally:
                self.labels.close()

        thread = threading.Thread(target=_target, name=self.thread_name, daemon=True)
        thread.start()
        return thread

    def _display(self, render: Callable[[str], None], text: str) -> None:
        # Cues are display only; a broken terminal must not stop the labels.
        try:
            render(text)
        except OSError as exc:
            logger.warning("Could not render cue %r: %s", text.splitlines()[0], exc)


class AutonomousTimeline(TimelineGenerator):
    """Countdown-driven schedule of shuffled activity slots.

    Per slot the label stream receives an ``other`` marker when the countdown
    starts and the slot's real code when the activity starts, so offline
    analysis keeps only samples between a real label and the next ``other``.
    """

    thread_name = "AutonomousTimeline"

    def __init__(
        self,
        labels: LabelWriter,
        renderer: CueRenderer,
        *,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        repetitions: int = 2,
        countdown_from: int = 5,
        tick_seconds: float = 1.0,
        activity_seconds: float = 15.0,
        passages: Sequence[str] = PASSAGES,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(labels, renderer)
        self.rng = rng or random.Random(seed)
        self.repetitions = repetitions
        self.countdown_from = countdown_from
        self.tick_seconds = tick_seconds
        self.activity_seconds = activity_seconds
        self.passages = tuple(passages)
        self._sleep = sleep
        self.slots: List[Activity] = []
        self.passages_shown: List[str] = []

    def _countdown(self, activity: Activity) -> None:
        cue = prepare_message(activity)
        for remaining in range(self.countdown_from, 0, -1):
            self._display(self.renderer.show, f"{cue} {remaining}")
            self._sleep(self.tick_seconds)

    def _show_instruction(self, activity: Activity) -> None:
        if activity is Activity.TYPING:
            passage = self.rng.choice(self.passages)
            self.passages_shown.append(passage)
            self._display(self.renderer.show_passage, passage)
            return
        self._display(self.renderer.show, _INSTRUCTIONS[activity])

    def run(self) -> None:
        self.slots = plan_slots(self.rng, self.repetitions)
        logger.info("Activity order: %s", " ".join(a.code for a in self.slots))

        for activity in self.slots:
            self.labels.record(Activity.OTHER)
            self._countdown(activity)
            self._show_instruction(activity)
            self.labels.record(activity)
            self._sleep(self.activity_seconds)

        self.labels.record(Activity.OTHER)
        self._display(self.renderer.show, DONE_MESSAGE)


class InteractiveTimeline(TimelineGenerator):
    """Subject-driven labelling: each recognised key press records an activity."""

    thread_name = "InteractiveTimeline"

    def __init__(
        self,
        labels: LabelWriter,
        renderer: CueRenderer,
        keys: Iterable[str],
    ) -> None:
        super().__init__(labels, renderer)
        self._keys = keys
        self.current = Activity.NOTHING

    def run(self) -> None:
        self._display(self.renderer.show, "t=type s=scroll f=fidget n=nothing q=quit")
        for key in self._keys:
            key = key.lower()
            if key == QUIT_KEY:
                logger.info("Interactive labelling stopped by the subject")
                return
            activity = KEY_BINDINGS.get(key)
            if activity is None:
                continue
            self.current = activity
            self.labels.record(activity)
            self._display(self.renderer.show, activity.name.capitalize())


def build_timeline(
    config: RecorderConfig,
    labels: LabelWriter,
    renderer: CueRenderer,
    *,
    keys: Optional[Iterable[str]] = None,
) -> TimelineGenerator:
    """Return the timeline generator selected by ``config.policy``."""
    if config.policy == "interactive":
        if keys is None:
            from ..device.keys import iter_key_presses

            keys = iter_key_presses()
        return InteractiveTimeline(labels, renderer, keys)
    if config.policy == "autonomous":
        return AutonomousTimeline(
            labels,
            renderer,
            seed=config.seed,
            repetitions=config.repetitions,
            countdown_from=config.countdown_from,
            tick_seconds=config.countdown_tick_seconds,
            activity_seconds=config.activity_seconds,
        )
    raise ValueError(f"Unknown timeline policy {config.policy!r}")
