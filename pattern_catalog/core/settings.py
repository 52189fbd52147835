r"""Run settings and the per-run demo context.

`RunSettings` is the validated configuration of one run. `DemoContext`
turns it into the collaborators every sample receives: a narrator, a seeded
random generator, a simulated clock and a sleep function.

Sleeping always advances the simulated clock, so TTLs and timings behave the
same whether pacing is on (real sleeps) or off (tests, ``--no-pace``).
"""

from __future__ import annotations

import logging
import random
import time
from pathlib import Path
from typing import Callable, Optional, TextIO

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ._logging import LOG_LEVELS
from .lifecycle import OwnershipScope
from .narration import Narrator

__all__ = ["RunSettings", "SimulatedClock", "DemoContext"]

logger = logging.getLogger(__name__)


class RunSettings(BaseModel):
    """Validated settings of a single run."""

    model_config = ConfigDict(frozen=True)

    seed: Optional[int] = Field(default=None, description="Seed for pseudo-random choices")
    pace: bool = Field(default=True, description="Perform real legibility sleeps")
    workdir: Path = Field(default_factory=Path.cwd, description="Where sample files are written")
    log_level: str = Field(default="WARNING")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return value


class SimulatedClock:
    """Monotonic clock in seconds that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self._now = start

    def __call__(self) -> float:
        return self._now

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("clock cannot move backwards")
        self._now += seconds


class DemoContext:
    """Collaborators handed to every sample."""

    def __init__(
        self,
        settings: Optional[RunSettings] = None,
        stream: Optional[TextIO] = None,
        echo: bool = True,
        scope: Optional[OwnershipScope] = None,
    ):
        self.settings = settings or RunSettings()
        self.rng = random.Random(self.settings.seed)
        self.clock = SimulatedClock()
        self.narrator = Narrator(stream=stream, sleeper=self.sleep, echo=echo)
        self.scope = scope
        self.slept_ms = 0

    @property
    def workdir(self) -> Path:
        return self.settings.workdir

    def sleep(self, ms: int) -> None:
        self.slept_ms += ms
        self.clock.advance(ms / 1000.0)
        if self.settings.pace:
            time.sleep(ms / 1000.0)

    def say(self, text: str = "") -> None:
        self.narrator.say(text)

    def own(self, obj, release: Optional[Callable[[], None]] = None):
        """Hand `obj` to the run's ownership scope (if any) and return it."""
        if self.scope is None:
            return obj
        return self.scope.own(obj, release)
