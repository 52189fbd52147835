r"""Abstract Factory.

A `UIFactory` creates a whole family of widgets (button, text field,
checkbox) that belong together. `Application` only talks to the abstract
factory and the abstract widgets, so swapping Windows for Linux is a
one-line change at construction time.
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from typing import Dict, List, Type

from ..catalog import register_demo, run_standalone
from ..core import CatalogError, DemoContext, InvalidArgument, Narrator

__all__ = [
    "Button",
    "TextField",
    "Checkbox",
    "UIFactory",
    "WindowsUIFactory",
    "MacUIFactory",
    "LinuxUIFactory",
    "Application",
    "create_ui_factory",
]

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Abstract Products
# -----------------------------------------------------------------------------


class _Widget(ABC):
    style = ""

    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    @abstractmethod
    def render(self) -> None: ...


class Button(_Widget):
    def __init__(self, narrator: Narrator, text: str):
        super().__init__(narrator)
        self.text = text
        self.clicks = 0

    def on_click(self) -> None:
        self.clicks += 1
        self.narrator.say(self._click_line())

    @abstractmethod
    def _click_line(self) -> str: ...


class TextField(_Widget):
    def __init__(self, narrator: Narrator):
        super().__init__(narrator)
        self.value = ""

    def set_value(self, value: str) -> None:
        self.value = value


class Checkbox(_Widget):
    def __init__(self, narrator: Narrator):
        super().__init__(narrator)
        self.checked = False

    def set_checked(self, checked: bool) -> None:
        self.checked = checked


# -----------------------------------------------------------------------------
# Windows Family
# -----------------------------------------------------------------------------


class WindowsButton(Button):
    style = "Windows"

    def render(self) -> None:
        self.narrator.say(f"[Windows Button: {self.text}]")

    def _click_line(self) -> str:
        return f"Windows button '{self.text}' clicked with mouse"


class WindowsTextField(TextField):
    style = "Windows"

    def render(self) -> None:
        self.narrator.say(f"[Windows TextField: {self.value}]")


class WindowsCheckbox(Checkbox):
    style = "Windows"

    def render(self) -> None:
        self.narrator.say(f"[Windows Checkbox: {'☑' if self.checked else '☐'}]")


# -----------------------------------------------------------------------------
# macOS Family
# -----------------------------------------------------------------------------


class MacButton(Button):
    style = "macOS"

    def render(self) -> None:
        self.narrator.say(f"( {self.text} )")

    def _click_line(self) -> str:
        return f"Mac button '{self.text}' clicked with trackpad"


class MacTextField(TextField):
    style = "macOS"

    def render(self) -> None:
        self.narrator.say(f"│ {self.value} │")


class MacCheckbox(Checkbox):
    style = "macOS"

    def render(self) -> None:
        self.narrator.say(f"{'✓' if self.checked else '○'} Mac checkbox")


# -----------------------------------------------------------------------------
# Linux Family
# -----------------------------------------------------------------------------


class LinuxButton(Button):
    style = "Linux"

    def render(self) -> None:
        self.narrator.say(f"< {self.text} >")

    def _click_line(self) -> str:
        return f"Linux button '{self.text}' clicked"


class LinuxTextField(TextField):
    style = "Linux"

    def render(self) -> None:
        self.narrator.say(f"[ {self.value} ]")


class LinuxCheckbox(Checkbox):
    style = "Linux"

    def render(self) -> None:
        self.narrator.say(f"[{'x' if self.checked else ' '}] Linux checkbox")


# -----------------------------------------------------------------------------
# Factories
# -----------------------------------------------------------------------------


class UIFactory(ABC):
    theme = ""

    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    @abstractmethod
    def create_button(self, text: str) -> Button: ...

    @abstractmethod
    def create_text_field(self) -> TextField: ...

    @abstractmethod
    def create_checkbox(self) -> Checkbox: ...


class WindowsUIFactory(UIFactory):
    theme = "Windows"

    def create_button(self, text: str) -> Button:
        return WindowsButton(self.narrator, text)

    def create_text_field(self) -> TextField:
        return WindowsTextField(self.narrator)

    def create_checkbox(self) -> Checkbox:
        return WindowsCheckbox(self.narrator)


class MacUIFactory(UIFactory):
    theme = "macOS"

    def create_button(self, text: str) -> Button:
        return MacButton(self.narrator, text)

    def create_text_field(self) -> TextField:
        return MacTextField(self.narrator)

    def create_checkbox(self) -> Checkbox:
        return MacCheckbox(self.narrator)


class LinuxUIFactory(UIFactory):
    theme = "Linux"

    def create_button(self, text: str) -> Button:
        return LinuxButton(self.narrator, text)

    def create_text_field(self) -> TextField:
        return LinuxTextField(self.narrator)

    def create_checkbox(self) -> Checkbox:
        return LinuxCheckbox(self.narrator)


_FACTORIES: Dict[str, Type[UIFactory]] = {
    factory.theme: factory for factory in (WindowsUIFactory, MacUIFactory, LinuxUIFactory)
}


def create_ui_factory(os_name: str, narrator: Narrator) -> UIFactory:
    if os_name not in _FACTORIES:
        raise InvalidArgument(
            f"Unsupported OS: {os_name}",
            [f"Supported platforms: {', '.join(_FACTORIES)}"],
            {"operation": "create_ui_factory"},
        )
    return _FACTORIES[os_name](narrator)


# -----------------------------------------------------------------------------
# Client
# -----------------------------------------------------------------------------


class Application:
    def __init__(self, factory: UIFactory):
        self.factory = factory
        self.narrator = factory.narrator
        self.buttons: List[Button] = []
        self.text_fields: List[TextField] = []
        self.checkboxes: List[Checkbox] = []

    def create_ui(self) -> None:
        self.narrator.say(f"Creating UI with {self.factory.theme} theme:")
        self.buttons = [self.factory.create_button("OK"), self.factory.create_button("Cancel")]
        self.text_fields = [self.factory.create_text_field(), self.factory.create_text_field()]
        self.checkboxes = [self.factory.create_checkbox(), self.factory.create_checkbox()]
        self.text_fields[0].set_value("Username")
        self.text_fields[1].set_value("Password")
        self.checkboxes[0].set_checked(True)

    def render_ui(self) -> None:
        self.narrator.say(f"\nRendering {self.factory.theme} UI:")
        self.narrator.say("-" * 24)
        for widget in [*self.text_fields, *self.checkboxes, *self.buttons]:
            widget.render()

    def simulate_interaction(self) -> None:
        self.narrator.say("\nSimulating user interaction:")
        if self.buttons:
            self.buttons[0].on_click()
        if self.text_fields:
            self.text_fields[0].set_value("john_doe")
            self.narrator.say(f"Text field updated to: {self.text_fields[0].value}")
        if len(self.checkboxes) > 1:
            self.checkboxes[1].set_checked(True)
            state = "checked" if self.checkboxes[1].checked else "unchecked"
            self.narrator.say(f"Checkbox 2 is now: {state}")

    @property
    def styles(self) -> List[str]:
        return sorted({w.style for w in [*self.buttons, *self.text_fields, *self.checkboxes]})


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("abstract_factory", "Abstract Factory Pattern", "creational", "Widget families per platform")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Abstract Factory Pattern Demo ===")

    for platform in ("Windows", "macOS", "Linux", "BeOS"):
        say("\n" + "=" * 50)
        try:
            app = Application(create_ui_factory(platform, narrator))
        except CatalogError as exc:
            say(f"Error creating UI for {platform}: {exc.message}")
            continue
        app.create_ui()
        app.render_ui()
        app.simulate_interaction()


if __name__ == "__main__":
    sys.exit(run_standalone("abstract_factory"))
