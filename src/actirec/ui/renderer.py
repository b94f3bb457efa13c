"""Full-screen title cards for the activity cues.

One :class:`TitleCardRenderer` is created at program start and handed to the
timeline generator; nothing here is global.
"""

from __future__ import annotations

from typing import Optional

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

CARD_STYLE = "bold reverse"


class TitleCardRenderer:
    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def show(self, message: str) -> None:
        """Clear the screen and draw ``message`` centred on a card filling the terminal."""
        self.console.show_cursor(False)
        self.console.clear()
        card = Text(message.upper(), style=CARD_STYLE, justify="center")
        self.console.print(
            Panel(
                Align.center(card, vertical="middle"),
                height=max(3, self.console.height - 1),
                border_style="bold",
                padding=(0, 4),
            )
        )

    def show_passage(self, passage: str) -> None:
        """Clear the screen and show a passage for the subject to retype."""
        self.console.clear()
        self.console.print("Retype this:", style="bold", markup=False)
        self.console.line()
        self.console.print(passage, markup=False, highlight=False)
        self.console.line(2)
        self.console.show_cursor(True)

    def close(self) -> None:
        self.console.show_cursor(True)
