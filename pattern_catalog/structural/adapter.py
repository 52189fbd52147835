r"""Adapter.

Wraps an existing class whose interface does not fit so that clients can
use it through the interface they expect. The samples adapt

  - incompatible media decoders to a single `play(kind, filename)` call,
  - a USD-only legacy payment system to a multi-currency processor,
  - a corner-based legacy rectangle to an (x, y, w, h) rectangle,
  - `collections.deque` to a minimal stack.
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Dict, Generic, List, Optional, TypeVar

from ..catalog import register_demo, run_standalone
from ..core import CatalogError, DemoContext, Exhausted, InvalidArgument, Narrator

__all__ = [
    "MediaPlayer",
    "Mp3Player",
    "Mp4Player",
    "FlacPlayer",
    "AdvancedMediaAdapter",
    "AudioPlayer",
    "VideoPlayer",
    "VideoAdapter",
    "UniversalPlayer",
    "LegacyPaymentSystem",
    "PaymentProcessor",
    "LegacyPaymentAdapter",
    "PaymentService",
    "LegacyRectangle",
    "RectangleAdapter",
    "Stack",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")


# -----------------------------------------------------------------------------
# Media Players
# -----------------------------------------------------------------------------


class MediaPlayer(ABC):
    @abstractmethod
    def play(self, kind: str, filename: str) -> bool: ...


class Mp3Player:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    def play_mp3(self, filename: str) -> None:
        self.narrator.say(f"Playing MP3 file: {filename}")


class Mp4Player:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    def play_mp4(self, filename: str) -> None:
        self.narrator.say(f"Playing MP4 file: {filename}")


class FlacPlayer:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    def play_flac(self, filename: str) -> None:
        self.narrator.say(f"Playing FLAC file: {filename}")


class AdvancedMediaAdapter(MediaPlayer):
    """Routes mp4 and flac to their own decoders."""

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._mp4 = Mp4Player(narrator)
        self._flac = FlacPlayer(narrator)

    def play(self, kind: str, filename: str) -> bool:
        if kind == "mp4":
            self._mp4.play_mp4(filename)
        elif kind == "flac":
            self._flac.play_flac(filename)
        else:
            self.narrator.say(f"Format {kind} not supported by advanced adapter")
            return False
        return True


class AudioPlayer(MediaPlayer):
    def __init__(self, narrator: Narrator):
        self._mp3 = Mp3Player(narrator)
        self._adapter = AdvancedMediaAdapter(narrator)

    def play(self, kind: str, filename: str) -> bool:
        if kind == "mp3":
            self._mp3.play_mp3(filename)
            return True
        return self._adapter.play(kind, filename)


class VideoPlayer:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    def play_video(self, filename: str, quality: str) -> None:
        self.narrator.say(f"Playing video: {filename} in {quality} quality")


class VideoAdapter(MediaPlayer):
    FORMATS = ("avi", "mkv")

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._video = VideoPlayer(narrator)

    def play(self, kind: str, filename: str) -> bool:
        if kind not in self.FORMATS:
            self.narrator.say(f"Video format {kind} not supported")
            return False
        self._video.play_video(filename, "HD")
        return True


class UniversalPlayer(MediaPlayer):
    AUDIO = ("mp3", "mp4", "flac")

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._audio = AudioPlayer(narrator)
        self._video = VideoAdapter(narrator)

    def play(self, kind: str, filename: str) -> bool:
        if kind in self.AUDIO:
            return self._audio.play(kind, filename)
        if kind in VideoAdapter.FORMATS:
            return self._video.play(kind, filename)
        self.narrator.say(f"Media type {kind} not supported")
        return False


# -----------------------------------------------------------------------------
# Payments
# -----------------------------------------------------------------------------


class LegacyPaymentSystem:
    """Only understands US dollars."""

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.ledger: List[float] = []

    def make_payment(self, amount: float) -> None:
        self.ledger.append(amount)
        self.narrator.say(f"Legacy payment: ${amount:.2f} processed")


class PaymentProcessor(ABC):
    @abstractmethod
    def process_payment(self, currency: str, amount: float, method: str) -> str:
        """Charge `amount` and return the transaction id."""


class LegacyPaymentAdapter(PaymentProcessor):
    RATES: Dict[str, float] = {"USD": 1.0, "EUR": 1.1, "GBP": 1.3, "JPY": 0.009}

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.legacy = LegacyPaymentSystem(narrator)
        self._counter = 0
        self.last_transaction_id: Optional[str] = None

    def to_usd(self, currency: str, amount: float) -> float:
        if currency not in self.RATES:
            raise InvalidArgument(
                f"Unsupported currency: {currency}",
                [f"Supported currencies: {', '.join(self.RATES)}"],
                {"participant": "LegacyPaymentAdapter", "operation": "to_usd"},
            )
        return amount * self.RATES[currency]

    def process_payment(self, currency: str, amount: float, method: str) -> str:
        usd = self.to_usd(currency, amount)
        self.narrator.say("Adapting modern payment request:")
        self.narrator.say(f"  Original: {amount:.2f} {currency} via {method}")
        self.narrator.say(f"  Converted: ${usd:.2f} USD")
        self.legacy.make_payment(usd)
        self._counter += 1
        self.last_transaction_id = f"TXN_{self._counter}_{currency}"
        return self.last_transaction_id


class PaymentService:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.processors: List[PaymentProcessor] = []

    def add_processor(self, processor: PaymentProcessor) -> None:
        self.processors.append(processor)

    def process_all(self, currency: str, amount: float, method: str) -> List[str]:
        transactions = []
        for processor in self.processors:
            self.narrator.say("\nProcessing payment...")
            try:
                transaction = processor.process_payment(currency, amount, method)
            except CatalogError as exc:
                self.narrator.say(f"Payment failed! {exc.message}")
                continue
            transactions.append(transaction)
            self.narrator.say(f"Payment successful! Transaction ID: {transaction}")
        return transactions


# -----------------------------------------------------------------------------
# Rectangle and Stack
# -----------------------------------------------------------------------------


class LegacyRectangle:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    def draw_rectangle(self, x1: int, y1: int, x2: int, y2: int) -> None:
        self.narrator.say(f"Legacy Rectangle drawn from ({x1},{y1}) to ({x2},{y2})")


class RectangleAdapter(LegacyRectangle):
    """Class adapter: inherits the legacy drawing and exposes `draw`."""

    def draw(self, x: int, y: int, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise InvalidArgument(
                "Width and height must be non-negative",
                [f"Got width={width}, height={height}"],
                {"participant": "RectangleAdapter", "operation": "draw"},
            )
        self.draw_rectangle(x, y, x + width, y + height)


class Stack(Generic[T]):
    """LIFO view over a deque."""

    def __init__(self):
        self._items: Deque[T] = deque()

    def push(self, value: T) -> None:
        self._items.append(value)

    def pop(self) -> T:
        if not self._items:
            raise Exhausted(
                "Stack is empty",
                ["Check empty() before popping"],
                {"participant": "Stack", "operation": "pop"},
            )
        return self._items.pop()

    def top(self) -> T:
        if not self._items:
            raise Exhausted(
                "Stack is empty",
                ["Check empty() before reading the top"],
                {"participant": "Stack", "operation": "top"},
            )
        return self._items[-1]

    def empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("adapter", "Adapter Pattern", "structural", "Media players, legacy payments, rectangle, stack")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Adapter Pattern Demo ===")

    say("\n1. Media Player Adapter:")
    say("-" * 30)
    player = AudioPlayer(narrator)
    player.play("mp3", "song.mp3")
    player.play("mp4", "video.mp4")
    player.play("flac", "highquality.flac")
    player.play("wav", "unsupported.wav")

    say("\n2. Payment System Adapter:")
    say("-" * 30)
    payments = PaymentService(narrator)
    payments.add_processor(LegacyPaymentAdapter(narrator))
    payments.process_all("USD", 100.50, "Credit Card")
    payments.process_all("EUR", 85.75, "PayPal")
    payments.process_all("GBP", 75.25, "Bank Transfer")
    payments.process_all("CHF", 10.00, "Cash")

    say("\n3. Rectangle Class Adapter:")
    say("-" * 30)
    RectangleAdapter(narrator).draw(10, 20, 100, 50)

    say("\n4. Container Adapter (Stack):")
    say("-" * 30)
    stack: Stack[int] = Stack()
    for value in range(1, 6):
        stack.push(value)
    say("Pushing elements: 1 2 3 4 5")
    say(f"Stack size: {len(stack)}")
    popped = []
    while not stack.empty():
        popped.append(str(stack.pop()))
    say(f"Popping elements: {' '.join(popped)}")

    say("\n5. Multiple Media Adapters:")
    say("-" * 30)
    universal = UniversalPlayer(narrator)
    universal.play("mp3", "audio.mp3")
    universal.play("avi", "movie.avi")
    universal.play("mkv", "series.mkv")
    universal.play("wmv", "unsupported.wmv")


if __name__ == "__main__":
    sys.exit(run_standalone("adapter"))
