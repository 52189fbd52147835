r"""Bridge.

Two hierarchies that vary independently, joined by a reference: shapes
hold a renderer, notifications hold a sender. Any shape draws through any
renderer, and the renderer can be swapped at runtime.

\dot
digraph Bridge {
    rankdir=LR;
    node [shape=rectangle];
    "Shape" -> "Renderer" [label="renderer"];
    "Notification" -> "NotificationSender" [label="sender"];
}
\enddot
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from typing import List

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, Narrator

__all__ = [
    "Renderer",
    "OpenGLRenderer",
    "DirectXRenderer",
    "SVGRenderer",
    "Shape",
    "Circle",
    "Rectangle",
    "Line",
    "House",
    "NotificationSender",
    "EmailSender",
    "SMSSender",
    "PushSender",
    "Notification",
    "SimpleNotification",
    "UrgentNotification",
]

logger = logging.getLogger(__name__)


def _n(value: float) -> str:
    return f"{value:g}"


# -----------------------------------------------------------------------------
# Implementors: Renderers
# -----------------------------------------------------------------------------


class Renderer(ABC):
    name = ""
    default_color = "white"

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.color = self.default_color

    @abstractmethod
    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None: ...

    @abstractmethod
    def draw_circle(self, x: float, y: float, radius: float) -> None: ...

    @abstractmethod
    def draw_rectangle(self, x: float, y: float, width: float, height: float) -> None: ...

    @abstractmethod
    def set_color(self, color: str) -> None: ...


class OpenGLRenderer(Renderer):
    name = "OpenGL"

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.narrator.say(f"[OpenGL] Drawing line from ({_n(x1)},{_n(y1)}) to ({_n(x2)},{_n(y2)}) in {self.color}")

    def draw_circle(self, x: float, y: float, radius: float) -> None:
        self.narrator.say(f"[OpenGL] Drawing circle at ({_n(x)},{_n(y)}) with radius {_n(radius)} in {self.color}")

    def draw_rectangle(self, x: float, y: float, width: float, height: float) -> None:
        self.narrator.say(
            f"[OpenGL] Drawing rectangle at ({_n(x)},{_n(y)}) size {_n(width)}x{_n(height)} in {self.color}"
        )

    def set_color(self, color: str) -> None:
        self.color = color
        self.narrator.say(f"[OpenGL] Color set to {color}")


class DirectXRenderer(Renderer):
    name = "DirectX"

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.narrator.say(f"[DirectX] Rendering line: ({_n(x1)},{_n(y1)})->({_n(x2)},{_n(y2)}) color={self.color}")

    def draw_circle(self, x: float, y: float, radius: float) -> None:
        self.narrator.say(f"[DirectX] Rendering circle: center=({_n(x)},{_n(y)}) r={_n(radius)} color={self.color}")

    def draw_rectangle(self, x: float, y: float, width: float, height: float) -> None:
        self.narrator.say(
            f"[DirectX] Rendering rectangle: pos=({_n(x)},{_n(y)}) size={_n(width)}x{_n(height)} color={self.color}"
        )

    def set_color(self, color: str) -> None:
        self.color = color
        self.narrator.say(f"[DirectX] Color changed to {color}")


class SVGRenderer(Renderer):
    """Accumulates SVG elements instead of drawing."""

    name = "SVG"
    default_color = "black"

    def __init__(self, narrator: Narrator):
        super().__init__(narrator)
        self.elements: List[str] = []

    def draw_line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.elements.append(
            f'<line x1="{_n(x1)}" y1="{_n(y1)}" x2="{_n(x2)}" y2="{_n(y2)}" stroke="{self.color}"/>'
        )
        self.narrator.say("[SVG] Added line element")

    def draw_circle(self, x: float, y: float, radius: float) -> None:
        self.elements.append(f'<circle cx="{_n(x)}" cy="{_n(y)}" r="{_n(radius)}" fill="{self.color}"/>')
        self.narrator.say("[SVG] Added circle element")

    def draw_rectangle(self, x: float, y: float, width: float, height: float) -> None:
        self.elements.append(
            f'<rect x="{_n(x)}" y="{_n(y)}" width="{_n(width)}" height="{_n(height)}" fill="{self.color}"/>'
        )
        self.narrator.say("[SVG] Added rectangle element")

    def set_color(self, color: str) -> None:
        self.color = color
        self.narrator.say(f"[SVG] Color set to {color}")

    @property
    def content(self) -> str:
        return "\n".join(["<svg>", *self.elements, "</svg>"])


# -----------------------------------------------------------------------------
# Abstractions: Shapes
# -----------------------------------------------------------------------------


class Shape(ABC):
    def __init__(self, renderer: Renderer, x: float = 0, y: float = 0):
        self.renderer = renderer
        self.x, self.y = x, y

    @abstractmethod
    def draw(self) -> None: ...

    def move(self, x: float, y: float) -> None:
        self.x, self.y = x, y

    def set_color(self, color: str) -> None:
        self.renderer.set_color(color)

    def set_renderer(self, renderer: Renderer) -> None:
        self.renderer = renderer

    @property
    def renderer_name(self) -> str:
        return self.renderer.name


class Circle(Shape):
    def __init__(self, renderer: Renderer, x: float, y: float, radius: float):
        super().__init__(renderer, x, y)
        self.radius = radius

    def draw(self) -> None:
        self.renderer.draw_circle(self.x, self.y, self.radius)


class Rectangle(Shape):
    def __init__(self, renderer: Renderer, x: float, y: float, width: float, height: float):
        super().__init__(renderer, x, y)
        self.width, self.height = width, height

    def draw(self) -> None:
        self.renderer.draw_rectangle(self.x, self.y, self.width, self.height)

    def resize(self, width: float, height: float) -> None:
        self.width, self.height = width, height


class Line(Shape):
    def __init__(self, renderer: Renderer, x1: float, y1: float, x2: float, y2: float):
        super().__init__(renderer, x1, y1)
        self.x2, self.y2 = x2, y2

    def draw(self) -> None:
        self.renderer.draw_line(self.x, self.y, self.x2, self.y2)


class House(Shape):
    """Composite drawing made of renderer primitives."""

    def draw(self) -> None:
        r, x, y = self.renderer, self.x, self.y
        self.renderer.narrator.say(f"Drawing house at ({_n(x)},{_n(y)}) using {r.name}")
        r.set_color("brown")
        r.draw_rectangle(x, y, 100, 80)
        r.set_color("red")
        r.draw_rectangle(x - 10, y + 80, 120, 40)
        r.set_color("darkbrown")
        r.draw_rectangle(x + 40, y, 20, 50)
        r.set_color("lightblue")
        r.draw_circle(x + 20, y + 60, 8)
        r.draw_circle(x + 80, y + 60, 8)


# -----------------------------------------------------------------------------
# Notifications
# -----------------------------------------------------------------------------


class NotificationSender(ABC):
    channel = ""

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.sent = 0

    def send(self, title: str, message: str) -> None:
        self.sent += 1
        self._deliver(title, message)

    @abstractmethod
    def _deliver(self, title: str, message: str) -> None: ...


class EmailSender(NotificationSender):
    channel = "Email"

    def _deliver(self, title: str, message: str) -> None:
        self.narrator.say("[EMAIL] To: user@example.com")
        self.narrator.say(f"[EMAIL] Subject: {title}")
        self.narrator.say(f"[EMAIL] Body: {message}")


class SMSSender(NotificationSender):
    channel = "SMS"
    LIMIT = 160

    def _deliver(self, title: str, message: str) -> None:
        text = f"{title}: {message}"
        if len(text) > self.LIMIT:
            text = text[: self.LIMIT - 3] + "..."
        self.narrator.say(f"[SMS] {text} ({self.LIMIT} char limit)")


class PushSender(NotificationSender):
    channel = "Push Notification"

    def _deliver(self, title: str, message: str) -> None:
        self.narrator.say(f"[PUSH] 📱 {title}")
        self.narrator.say(f"[PUSH] {message}")


class Notification(ABC):
    def __init__(self, sender: NotificationSender, title: str, message: str):
        self.sender = sender
        self.title = title
        self.message = message

    @abstractmethod
    def send(self) -> None: ...

    @property
    def channel(self) -> str:
        return self.sender.channel


class SimpleNotification(Notification):
    def send(self) -> None:
        self.sender.send(self.title, self.message)


class UrgentNotification(Notification):
    def send(self) -> None:
        self.sender.send(f"🚨 URGENT: {self.title}", f"⚠️ {self.message} ⚠️")


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("bridge", "Bridge Pattern", "structural", "Shapes over renderers, notifications over senders")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Bridge Pattern Demo ===")

    say("\n1. Graphics Rendering Bridge:")
    say("-" * 40)
    shapes: List[Shape] = [
        Circle(OpenGLRenderer(narrator), 10, 10, 5),
        Rectangle(DirectXRenderer(narrator), 20, 20, 15, 10),
        Line(SVGRenderer(narrator), 0, 0, 50, 50),
    ]
    for shape in shapes:
        say(f"\nUsing {shape.renderer_name}:")
        shape.set_color("blue")
        shape.draw()

    say("\n2. Complex Shape (House):")
    say("-" * 40)
    House(OpenGLRenderer(narrator), 100, 100).draw()
    say()
    House(DirectXRenderer(narrator), 200, 100).draw()

    say("\n3. SVG Content Generation:")
    say("-" * 40)
    svg = SVGRenderer(narrator)
    circle = Circle(svg, 50, 50, 25)
    circle.set_color("red")
    circle.draw()
    say("\nGenerated SVG:")
    say(svg.content)

    say("\n4. Notification System Bridge:")
    say("-" * 40)
    email = EmailSender(narrator)
    notifications: List[Notification] = [
        SimpleNotification(email, "Welcome", "Thank you for signing up!"),
        UrgentNotification(SMSSender(narrator), "Security Alert", "Suspicious login detected"),
        SimpleNotification(PushSender(narrator), "New Message", "You have 3 unread messages"),
        UrgentNotification(email, "System Maintenance", "Service will be down for 2 hours"),
    ]
    for notification in notifications:
        say(f"\nSending via {notification.channel}:")
        notification.send()
    say(f"\nEmail sender delivered {email.sent} notifications")

    say("\n5. Runtime Renderer Switching:")
    say("-" * 40)
    circle = Circle(OpenGLRenderer(narrator), 25, 25, 10)
    say("Original renderer:")
    circle.set_color("green")
    circle.draw()
    say("\nSwitching to DirectX renderer:")
    circle.set_renderer(DirectXRenderer(narrator))
    circle.set_color("green")
    circle.draw()


if __name__ == "__main__":
    sys.exit(run_standalone("bridge"))
