r"""Composite.

Leaves and containers share one interface, so a client treats a single
file and a whole directory tree the same way. Containers forward each
operation to their children and combine the answers (`size`, `render`,
`team_size`, `payroll`). Structural operations on a leaf fail with
`PreconditionFailed`; `find` on a leaf matches only itself.

\dot
digraph Composite {
    node [shape=rectangle];
    "root/" -> "home/" -> "user/";
    "user/" -> "document.txt";
    "root/" -> "config.ini";
}
\enddot
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from typing import List, Optional

from ..catalog import register_demo, run_standalone
from ..core import CatalogError, DemoContext, Narrator, PreconditionFailed

__all__ = [
    "FileSystemComponent",
    "File",
    "Directory",
    "UIComponent",
    "Button",
    "Label",
    "Panel",
    "Employee",
    "IndividualEmployee",
    "Manager",
]

logger = logging.getLogger(__name__)


def _unsupported(participant: str, operation: str) -> PreconditionFailed:
    return PreconditionFailed(
        "Operation not supported",
        [f"{participant} is a leaf and has no children"],
        {"participant": participant, "operation": operation},
    )


# -----------------------------------------------------------------------------
# File System
# -----------------------------------------------------------------------------


class FileSystemComponent(ABC):
    def __init__(self, name: str, narrator: Narrator):
        self.name = name
        self.narrator = narrator

    @abstractmethod
    def display(self, depth: int = 0) -> None: ...

    @property
    @abstractmethod
    def size(self) -> int: ...

    @property
    def is_composite(self) -> bool:
        return False

    def add(self, component: "FileSystemComponent") -> "FileSystemComponent":
        raise _unsupported(f"File '{self.name}'", "add")

    def remove(self, name: str) -> bool:
        raise _unsupported(f"File '{self.name}'", "remove")

    def find(self, name: str) -> Optional["FileSystemComponent"]:
        return self if self.name == name else None


class File(FileSystemComponent):
    def __init__(self, name: str, size: int, narrator: Narrator, content: str = ""):
        super().__init__(name, narrator)
        self._size = size
        self.content = content

    @property
    def size(self) -> int:
        return self._size

    def set_content(self, content: str) -> None:
        self.content = content
        self._size = len(content.encode("utf-8"))

    def display(self, depth: int = 0) -> None:
        self.narrator.say(f"{'  ' * depth}📄 {self.name} ({self.size} bytes)")


class Directory(FileSystemComponent):
    def __init__(self, name: str, narrator: Narrator):
        super().__init__(name, narrator)
        self.children: List[FileSystemComponent] = []

    @property
    def size(self) -> int:
        return sum(child.size for child in self.children)

    @property
    def is_composite(self) -> bool:
        return True

    def add(self, component: FileSystemComponent) -> FileSystemComponent:
        self.children.append(component)
        return component

    def remove(self, name: str) -> bool:
        """Remove every direct child called `name`."""
        kept = [child for child in self.children if child.name != name]
        removed = len(kept) != len(self.children)
        self.children = kept
        return removed

    def find(self, name: str) -> Optional[FileSystemComponent]:
        """Depth-first search; returns the first match."""
        if self.name == name:
            return self
        for child in self.children:
            found = child.find(name)
            if found is not None:
                return found
        return None

    def display(self, depth: int = 0) -> None:
        self.narrator.say(f"{'  ' * depth}📁 {self.name}/")
        for child in self.children:
            child.display(depth + 1)


# -----------------------------------------------------------------------------
# User Interface
# -----------------------------------------------------------------------------


class UIComponent(ABC):
    kind = ""

    def __init__(self, narrator: Narrator, x: int, y: int, width: int, height: int):
        self.narrator = narrator
        self.x, self.y, self.width, self.height = x, y, width, height

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height

    @abstractmethod
    def render(self, depth: int = 0) -> None: ...

    @abstractmethod
    def click(self, x: int, y: int) -> List[str]:
        """Handle a click inside this component; returns what reacted."""

    def add(self, component: "UIComponent") -> "UIComponent":
        raise _unsupported(self.kind, "add")


class Button(UIComponent):
    kind = "Button"

    def __init__(self, narrator: Narrator, text: str, x: int, y: int, width: int, height: int):
        super().__init__(narrator, x, y, width, height)
        self.text = text
        self.clicks = 0

    def render(self, depth: int = 0) -> None:
        self.narrator.say(f"{'  ' * depth}[{self.text}] at ({self.x},{self.y}) size {self.width}x{self.height}")

    def click(self, x: int, y: int) -> List[str]:
        self.clicks += 1
        self.narrator.say(f"Button '{self.text}' clicked!")
        return [self.text]


class Label(UIComponent):
    kind = "Label"
    CHAR_WIDTH = 8
    HEIGHT = 20

    def __init__(self, narrator: Narrator, text: str, x: int, y: int):
        super().__init__(narrator, x, y, len(text) * self.CHAR_WIDTH, self.HEIGHT)
        self.text = text

    def render(self, depth: int = 0) -> None:
        self.narrator.say(f'{"  " * depth}Label: "{self.text}" at ({self.x},{self.y})')

    def click(self, x: int, y: int) -> List[str]:
        self.narrator.say(f"Label '{self.text}' is not clickable")
        return []


class Panel(UIComponent):
    kind = "Panel"

    def __init__(self, narrator: Narrator, name: str, x: int, y: int, width: int, height: int):
        super().__init__(narrator, x, y, width, height)
        self.name = name
        self.components: List[UIComponent] = []

    def add(self, component: UIComponent) -> UIComponent:
        self.components.append(component)
        return component

    def render(self, depth: int = 0) -> None:
        self.narrator.say(
            f"{'  ' * depth}Panel '{self.name}' at ({self.x},{self.y}) size {self.width}x{self.height}:"
        )
        for component in self.components:
            component.render(depth + 1)

    def click(self, x: int, y: int) -> List[str]:
        self.narrator.say(f"Click at ({x},{y}) in panel '{self.name}'")
        reacted: List[str] = []
        for component in self.components:
            if component.contains(x, y):
                reacted.extend(component.click(x, y))
        return reacted


# -----------------------------------------------------------------------------
# Organisation Chart
# -----------------------------------------------------------------------------


class Employee(ABC):
    def __init__(self, name: str, title: str, salary: float, narrator: Narrator):
        self.name = name
        self.title = title
        self.salary = salary
        self.narrator = narrator

    @abstractmethod
    def show(self, depth: int = 0) -> None: ...

    @property
    def team_size(self) -> int:
        return 1

    @property
    def payroll(self) -> float:
        return self.salary

    def add_subordinate(self, employee: "Employee") -> "Employee":
        raise _unsupported(f"Employee '{self.name}'", "add_subordinate")


class IndividualEmployee(Employee):
    def show(self, depth: int = 0) -> None:
        self.narrator.say(f"{'  ' * depth}Employee: {self.name} ({self.title}) - ${self.salary:,.0f}")


class Manager(Employee):
    def __init__(self, name: str, title: str, salary: float, narrator: Narrator):
        super().__init__(name, title, salary, narrator)
        self.subordinates: List[Employee] = []

    def add_subordinate(self, employee: Employee) -> Employee:
        self.subordinates.append(employee)
        return employee

    @property
    def team_size(self) -> int:
        return 1 + sum(s.team_size for s in self.subordinates)

    @property
    def payroll(self) -> float:
        return self.salary + sum(s.payroll for s in self.subordinates)

    def show(self, depth: int = 0) -> None:
        self.narrator.say(
            f"{'  ' * depth}Manager: {self.name} ({self.title}) - ${self.salary:,.0f} [Team size: {self.team_size}]"
        )
        for subordinate in self.subordinates:
            subordinate.show(depth + 1)


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("composite", "Composite Pattern", "structural", "File tree, UI panels, organisation chart")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Composite Pattern Demo ===")

    say("\n1. File System Composite:")
    say("-" * 40)
    root = Directory("root", narrator)
    home = root.add(Directory("home", narrator))
    user = home.add(Directory("user", narrator))
    user.add(File("document.txt", 1024, narrator, "Hello World"))
    user.add(File("image.jpg", 2048, narrator))
    projects = user.add(Directory("projects", narrator))
    projects.add(File("Makefile", 256, narrator))
    root.add(Directory("var", narrator))
    config = root.add(File("config.ini", 128, narrator))

    say("File system structure:")
    root.display()
    say(f"\nTotal size: {root.size} bytes")

    for name in ("Makefile", "main.cpp"):
        found = root.find(name)
        if found is None:
            say(f"Not found: {name}")
        else:
            say(f"Found: {found.name} ({found.size} bytes)")

    try:
        config.add(File("nested.txt", 1, narrator))
    except CatalogError as exc:
        say(f"❌ Cannot add to {config.name}: {exc.message}")

    user.remove("image.jpg")
    say(f"After removing image.jpg, total size: {root.size} bytes")

    say("\n2. UI Component System:")
    say("-" * 40)
    main = Panel(narrator, "MainPanel", 0, 0, 800, 600)
    header = main.add(Panel(narrator, "HeaderPanel", 0, 0, 800, 100))
    header.add(Label(narrator, "Application Title", 10, 10))
    header.add(Button(narrator, "Settings", 700, 10, 80, 30))
    content = main.add(Panel(narrator, "ContentPanel", 0, 100, 800, 400))
    content.add(Label(narrator, "Welcome!", 50, 150))
    content.add(Button(narrator, "Start", 50, 200, 100, 40))
    content.add(Button(narrator, "Exit", 200, 200, 100, 40))
    footer = main.add(Panel(narrator, "FooterPanel", 0, 500, 800, 100))
    footer.add(Label(narrator, "Status: Ready", 10, 510))

    say("UI Layout:")
    main.render()
    say("\nSimulating clicks:")
    for x, y in ((750, 25), (100, 220), (250, 220), (60, 160)):
        main.click(x, y)

    say("\n3. Organization Structure:")
    say("-" * 40)
    ceo = Manager("Alice Johnson", "CEO", 200000, narrator)
    cto = ceo.add_subordinate(Manager("Bob Smith", "CTO", 150000, narrator))
    cto.add_subordinate(IndividualEmployee("Charlie Brown", "Senior Developer", 90000, narrator))
    cto.add_subordinate(IndividualEmployee("Diana Prince", "Developer", 75000, narrator))
    dev = cto.add_subordinate(Manager("Eve Wilson", "Dev Manager", 120000, narrator))
    dev.add_subordinate(IndividualEmployee("Frank Miller", "Junior Developer", 60000, narrator))
    dev.add_subordinate(IndividualEmployee("Grace Lee", "QA Engineer", 65000, narrator))
    cfo = ceo.add_subordinate(Manager("Henry Davis", "CFO", 140000, narrator))
    cfo.add_subordinate(IndividualEmployee("Iris Taylor", "Accountant", 55000, narrator))
    cfo.add_subordinate(IndividualEmployee("Jack Wilson", "Financial Analyst", 60000, narrator))

    say("Organization Chart:")
    ceo.show()
    say(f"\nTotal team size: {ceo.team_size}")
    say(f"Total payroll: ${ceo.payroll:,.0f}")


if __name__ == "__main__":
    sys.exit(run_standalone("composite"))
