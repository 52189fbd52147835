r"""Narration record.

Every sample reports what it does through a `Narrator`. Lines are written to
a text stream (stdout unless told otherwise) and appended to an in-memory
record so that tests can compare the observable output line by line.

A line describing an effect is always said before any line describing an
effect it causes; coordinators call `say` before they mutate.
"""

from __future__ import annotations

import sys
from typing import Callable, List, Optional, TextIO

__all__ = ["Narrator"]


class Narrator:
    """Append-only narration sink.

    Args:
        stream: Target text stream. ``None`` means ``sys.stdout`` looked up at
            write time, so redirection after construction is honoured.
        sleeper: Callable taking milliseconds; used by `pause`.
        echo: When False, lines are only recorded.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        sleeper: Optional[Callable[[int], None]] = None,
        echo: bool = True,
    ):
        self._stream = stream
        self._sleeper = sleeper
        self.echo = echo
        self.lines: List[str] = []

    # -----------------------------------------------------------------------------
    # Output
    # -----------------------------------------------------------------------------

    def say(self, text: str = "") -> None:
        """Emit `text`; embedded newlines become separate record entries."""
        for line in str(text).split("\n"):
            self.lines.append(line)
            if self.echo:
                stream = self._stream if self._stream is not None else sys.stdout
                stream.write(line + "\n")

    def blank(self) -> None:
        self.say("")

    def banner(self, title: str, char: str = "=", width: int = 50) -> None:
        self.say(title)
        self.say(char * width)

    def section(self, title: str, char: str = "=", width: int = 50) -> None:
        self.blank()
        self.banner(title, char, width)

    def rule(self, char: str = "-", width: int = 40) -> None:
        self.say(char * width)

    def pause(self, ms: int) -> None:
        """Legibility pause. Does nothing when no sleeper was supplied."""
        if self._sleeper is not None:
            self._sleeper(ms)

    # -----------------------------------------------------------------------------
    # Record
    # -----------------------------------------------------------------------------

    def clear(self) -> None:
        self.lines.clear()

    def since(self, mark: int) -> List[str]:
        """Lines said after `mark` (a previous ``len(narrator.lines)``)."""
        return self.lines[mark:]

    def __contains__(self, text: str) -> bool:
        return any(text in line for line in self.lines)

    def __len__(self) -> int:
        return len(self.lines)
