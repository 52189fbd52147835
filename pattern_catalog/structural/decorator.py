r"""Decorator.

A decorator has the role of the component it wraps and owns that
component outright. Every operation delegates inward, then adds its own
contribution on the way out. Coffee add-ons add to cost and description,
text styles wrap markup, and stream layers transform the bytes.

Order matters for streams: writing goes outermost first, reading undoes
the layers innermost first, so

.. code-block:: python

    stream = LoggingDecorator(EncryptionDecorator(CompressionDecorator(FileStream("a.txt", n))))
    stream.write(text)
    assert stream.read() == text
"""

from __future__ import annotations

import base64
import logging
import sys
import zlib
from abc import ABC, abstractmethod
from typing import List

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, InvalidArgument, Narrator

__all__ = [
    "Coffee",
    "BasicCoffee",
    "CoffeeDecorator",
    "MilkDecorator",
    "SugarDecorator",
    "VanillaDecorator",
    "ChocolateDecorator",
    "WhippedCreamDecorator",
    "CoffeeBuilder",
    "TextComponent",
    "PlainText",
    "BoldDecorator",
    "ItalicDecorator",
    "UnderlineDecorator",
    "ColorDecorator",
    "DataStream",
    "FileStream",
    "StreamDecorator",
    "EncryptionDecorator",
    "CompressionDecorator",
    "LoggingDecorator",
]

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Coffee
# -----------------------------------------------------------------------------


class Coffee(ABC):
    @property
    @abstractmethod
    def description(self) -> str: ...

    @property
    @abstractmethod
    def cost(self) -> float: ...

    @property
    def size(self) -> str:
        return "Regular"


class BasicCoffee(Coffee):
    PRICES = {"Small": 2.50, "Regular": 3.50, "Large": 4.50}

    def __init__(self, size: str = "Regular"):
        if size not in self.PRICES:
            raise InvalidArgument(
                f"Unknown coffee size: {size}",
                [f"Choose one of: {', '.join(self.PRICES)}"],
                {"participant": "BasicCoffee", "operation": "__init__"},
            )
        self._size = size

    @property
    def description(self) -> str:
        return f"{self._size} Coffee"

    @property
    def cost(self) -> float:
        return self.PRICES[self._size]

    @property
    def size(self) -> str:
        return self._size


class CoffeeDecorator(Coffee):
    """Adds `label` to the description and `price` to the cost."""

    label = ""
    price = 0.0

    def __init__(self, coffee: Coffee):
        self._coffee = coffee

    @property
    def description(self) -> str:
        return f"{self._coffee.description} + {self.label}"

    @property
    def cost(self) -> float:
        return self._coffee.cost + self.price

    @property
    def size(self) -> str:
        return self._coffee.size


class MilkDecorator(CoffeeDecorator):
    label, price = "Milk", 0.60


class SugarDecorator(CoffeeDecorator):
    label, price = "Sugar", 0.25


class VanillaDecorator(CoffeeDecorator):
    label, price = "Vanilla", 0.80


class ChocolateDecorator(CoffeeDecorator):
    label, price = "Chocolate", 1.20


class WhippedCreamDecorator(CoffeeDecorator):
    label, price = "Whipped Cream", 0.90


class CoffeeBuilder:
    def __init__(self, size: str = "Regular"):
        self._coffee: Coffee = BasicCoffee(size)

    def _wrap(self, decorator: type) -> "CoffeeBuilder":
        self._coffee = decorator(self._coffee)
        return self

    def add_milk(self) -> "CoffeeBuilder":
        return self._wrap(MilkDecorator)

    def add_sugar(self) -> "CoffeeBuilder":
        return self._wrap(SugarDecorator)

    def add_vanilla(self) -> "CoffeeBuilder":
        return self._wrap(VanillaDecorator)

    def add_chocolate(self) -> "CoffeeBuilder":
        return self._wrap(ChocolateDecorator)

    def add_whipped_cream(self) -> "CoffeeBuilder":
        return self._wrap(WhippedCreamDecorator)

    def build(self) -> Coffee:
        return self._coffee


# -----------------------------------------------------------------------------
# Text
# -----------------------------------------------------------------------------


class TextComponent(ABC):
    @property
    @abstractmethod
    def text(self) -> str: ...

    def __len__(self) -> int:
        return len(self.text)


class PlainText(TextComponent):
    def __init__(self, text: str):
        self._text = text

    @property
    def text(self) -> str:
        return self._text


class _TagDecorator(TextComponent):
    tag = ""

    def __init__(self, component: TextComponent):
        self._component = component

    @property
    def text(self) -> str:
        return f"<{self.tag}>{self._component.text}</{self.tag}>"


class BoldDecorator(_TagDecorator):
    tag = "b"


class ItalicDecorator(_TagDecorator):
    tag = "i"


class UnderlineDecorator(_TagDecorator):
    tag = "u"


class ColorDecorator(TextComponent):
    def __init__(self, component: TextComponent, color: str):
        self._component = component
        self.color = color

    @property
    def text(self) -> str:
        return f'<span style="color:{self.color}">{self._component.text}</span>'


# -----------------------------------------------------------------------------
# Data Streams
# -----------------------------------------------------------------------------


class DataStream(ABC):
    @abstractmethod
    def read(self) -> str: ...

    @abstractmethod
    def write(self, data: str) -> None: ...

    @property
    @abstractmethod
    def info(self) -> str: ...


class FileStream(DataStream):
    """In-memory stand-in for a file."""

    def __init__(self, filename: str, narrator: Narrator):
        self.filename = filename
        self.narrator = narrator
        self.data = f"Sample file content: {filename}"

    def read(self) -> str:
        return self.data

    def write(self, data: str) -> None:
        self.data = data

    @property
    def info(self) -> str:
        return f"File: {self.filename}"


class StreamDecorator(DataStream):
    tag = ""

    def __init__(self, stream: DataStream):
        self._stream = stream

    def read(self) -> str:
        return self.decode(self._stream.read())

    def write(self, data: str) -> None:
        self._stream.write(self.encode(data))

    def encode(self, data: str) -> str:
        return data

    def decode(self, data: str) -> str:
        return data

    @property
    def info(self) -> str:
        return f"{self._stream.info} [{self.tag}]"


class EncryptionDecorator(StreamDecorator):
    """Caesar shift on ASCII letters; case is kept and other characters pass through."""

    tag = "Encrypted"

    def __init__(self, stream: DataStream, shift: int = 3):
        super().__init__(stream)
        self.shift = shift

    @staticmethod
    def _rotate(data: str, shift: int) -> str:
        out: List[str] = []
        for char in data:
            if "a" <= char <= "z":
                out.append(chr((ord(char) - ord("a") + shift) % 26 + ord("a")))
            elif "A" <= char <= "Z":
                out.append(chr((ord(char) - ord("A") + shift) % 26 + ord("A")))
            else:
                out.append(char)
        return "".join(out)

    def encode(self, data: str) -> str:
        return self._rotate(data, self.shift)

    def decode(self, data: str) -> str:
        return self._rotate(data, -self.shift)


class CompressionDecorator(StreamDecorator):
    """zlib, then base64 so the payload stays text, behind a marker prefix."""

    tag = "Compressed"
    MARKER = "[COMPRESSED]"

    def encode(self, data: str) -> str:
        packed = base64.b64encode(zlib.compress(data.encode("utf-8"))).decode("ascii")
        return self.MARKER + packed

    def decode(self, data: str) -> str:
        if not data.startswith(self.MARKER):
            return data
        packed = data[len(self.MARKER):]
        return zlib.decompress(base64.b64decode(packed)).decode("utf-8")


class LoggingDecorator(StreamDecorator):
    tag = "Logged"

    def __init__(self, stream: DataStream, narrator: Narrator):
        super().__init__(stream)
        self.narrator = narrator

    def read(self) -> str:
        self.narrator.say(f"[LOG] Reading from {self._stream.info}")
        return super().read()

    def write(self, data: str) -> None:
        self.narrator.say(f"[LOG] Writing to {self._stream.info}: {len(data)} bytes")
        super().write(data)


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


def _print_order(say, coffee: Coffee) -> None:
    say(f"Order: {coffee.description}")
    say(f"Cost: ${coffee.cost:.2f}")
    say(f"Size: {coffee.size}")
    say("-" * 40)


@register_demo("decorator", "Decorator Pattern", "structural", "Coffee add-ons, text styles, stream layers")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Decorator Pattern Demo ===")

    say("\n1. Coffee Shop Orders:")
    say("-" * 40)
    _print_order(say, BasicCoffee("Large"))
    _print_order(say, MilkDecorator(BasicCoffee("Regular")))
    _print_order(
        say,
        WhippedCreamDecorator(ChocolateDecorator(VanillaDecorator(MilkDecorator(SugarDecorator(BasicCoffee("Large")))))),
    )
    say("\nUsing Coffee Builder:")
    _print_order(say, CoffeeBuilder("Small").add_milk().add_sugar().add_vanilla().build())

    say("\n2. Text Formatting:")
    say("-" * 40)
    plain = PlainText("Hello World")
    say(f"Plain: {plain.text} (length: {len(plain)})")
    bold = BoldDecorator(PlainText("Hello World"))
    say(f"Bold: {bold.text} (length: {len(bold)})")
    styled = ColorDecorator(UnderlineDecorator(ItalicDecorator(BoldDecorator(PlainText("Styled Text")))), "red")
    say(f"Styled: {styled.text}")
    say(f"Length: {len(styled)}")

    say("\n3. Data Stream Processing:")
    say("-" * 40)
    plain_stream = FileStream("data.txt", narrator)
    say(f"Basic stream info: {plain_stream.info}")
    say(f"Content: {plain_stream.read()}")

    logged = LoggingDecorator(FileStream("logged_data.txt", narrator), narrator)
    say("\nLogged stream:")
    say(f"Info: {logged.info}")
    say(f"Content: {logged.read()}")

    say("\nLayered stream (Logging -> Encryption -> Compression -> File):")
    backing = FileStream("secure_data.txt", narrator)
    secure = LoggingDecorator(EncryptionDecorator(CompressionDecorator(backing)), narrator)
    say(f"Info: {secure.info}")
    secure.write("This is sensitive data that needs protection")
    say(f"Stored on disk: {backing.data}")
    say(f"Retrieved content: {secure.read()}")

    say("\nSame layers, other order (Compression -> Encryption -> File):")
    swapped_backing = FileStream("swapped.txt", narrator)
    swapped = CompressionDecorator(EncryptionDecorator(swapped_backing))
    swapped.write("This is sensitive data that needs protection")
    say(f"Stored on disk: {swapped_backing.data}")
    say(f"Retrieved content: {swapped.read()}")

    say("\n4. Coffee Shop Menu Simulation:")
    say("-" * 40)
    orders = [
        CoffeeBuilder("Small").add_sugar().build(),
        CoffeeBuilder("Regular").add_milk().add_vanilla().build(),
        CoffeeBuilder("Large").add_chocolate().add_whipped_cream().build(),
        CoffeeBuilder("Regular").add_milk().add_sugar().add_vanilla().add_chocolate().add_whipped_cream().build(),
    ]
    for number, order in enumerate(orders, 1):
        say(f"Order #{number}:")
        say(f"  {order.description}")
        say(f"  Cost: ${order.cost:.2f}")
    say(f"\nTotal Revenue: ${sum(order.cost for order in orders):.2f}")


if __name__ == "__main__":
    sys.exit(run_standalone("decorator"))
