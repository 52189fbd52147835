r"""Command pattern with undo and redo.

Each command exposes `execute`, `undo`, a `description` and an `undoable`
flag. `CommandManager` keeps two stacks:

  - `execute_command(c)` runs `c`, pushes it on the undo stack when undoable
    and empties the redo stack;
  - `undo()` pops the undo stack, reverts the command, pushes it on redo;
  - `redo()` pops the redo stack, re-executes, pushes it back on undo.

A failing command leaves both the receiver and the stacks unchanged. Macro
commands are atomic in both directions: when a child fails, the children
already processed are rolled back before the failure is reported.

\dot
digraph Command {
    rankdir=LR;
    node [shape=rectangle];
    "CommandManager" -> "Command";
    "Command" -> "InsertCommand" -> "TextEditor";
    "Command" -> "MacroCommand" -> "Command";
}
\enddot
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from collections import deque
from typing import Callable, Deque, List, Optional

from ..catalog import register_demo, run_standalone
from ..core import CatalogError, DemoContext, InvalidArgument, Narrator

__all__ = [
    "Command",
    "TextEditor",
    "InsertCommand",
    "DeleteCommand",
    "ReplaceCommand",
    "MacroCommand",
    "FunctionalCommand",
    "CommandManager",
    "Light",
    "Fan",
    "LightOnCommand",
    "LightOffCommand",
    "FanSpeedCommand",
    "NoCommand",
    "RemoteControl",
    "CommandQueue",
]

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Role
# -----------------------------------------------------------------------------


class Command(ABC):
    undoable = True

    @abstractmethod
    def execute(self) -> None: ...

    @abstractmethod
    def undo(self) -> None: ...

    @property
    @abstractmethod
    def description(self) -> str: ...


# -----------------------------------------------------------------------------
# Text Editor Receiver
# -----------------------------------------------------------------------------


class TextEditor:
    """Content plus cursor. Invalid positions raise and change nothing."""

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.content = ""
        self.cursor = 0

    def _check_position(self, position: int) -> None:
        if not 0 <= position <= len(self.content):
            raise InvalidArgument(
                f"Invalid cursor position {position}",
                [f"Positions range from 0 to {len(self.content)}"],
                {"participant": "TextEditor", "operation": "position check"},
            )

    def insert(self, text: str, position: int) -> None:
        self._check_position(position)
        self.content = self.content[:position] + text + self.content[position:]
        self.cursor = position + len(text)
        self.narrator.say(f"Inserted '{text}' at position {position}")

    def delete(self, position: int, length: int) -> str:
        """Delete up to `length` characters; return what was removed."""
        self._check_position(position)
        if length < 0:
            raise InvalidArgument(f"Invalid length {length}")
        removed = self.content[position:position + length]
        self.content = self.content[:position] + self.content[position + len(removed):]
        self.cursor = position
        self.narrator.say(f"Deleted {len(removed)} characters at position {position}")
        return removed

    def replace(self, position: int, length: int, text: str) -> str:
        self._check_position(position)
        removed = self.content[position:position + length]
        self.content = self.content[:position] + text + self.content[position + len(removed):]
        self.cursor = position + len(text)
        self.narrator.say(
            f"Replaced {len(removed)} characters with '{text}' at position {position}"
        )
        return removed

    def display(self) -> None:
        self.narrator.say(f'Content: "{self.content}"')
        self.narrator.say(f"Cursor at position: {self.cursor}")


class InsertCommand(Command):
    def __init__(self, editor: TextEditor, text: str, position: int):
        self.editor = editor
        self.text = text
        self.position = position

    def execute(self):
        self.editor.insert(self.text, self.position)

    def undo(self):
        self.editor.delete(self.position, len(self.text))

    @property
    def description(self):
        return f"Insert '{self.text}' at position {self.position}"


class DeleteCommand(Command):
    def __init__(self, editor: TextEditor, position: int, length: int):
        self.editor = editor
        self.position = position
        self.length = length
        self.deleted = ""

    def execute(self):
        self.deleted = self.editor.delete(self.position, self.length)

    def undo(self):
        if self.deleted:
            self.editor.insert(self.deleted, self.position)

    @property
    def description(self):
        return f"Delete {self.length} characters at position {self.position}"


class ReplaceCommand(Command):
    def __init__(self, editor: TextEditor, position: int, length: int, text: str):
        self.editor = editor
        self.position = position
        self.length = length
        self.text = text
        self.replaced = ""

    def execute(self):
        self.replaced = self.editor.replace(self.position, self.length, self.text)

    def undo(self):
        self.editor.replace(self.position, len(self.text), self.replaced)

    @property
    def description(self):
        return f"Replace {self.length} characters with '{self.text}' at position {self.position}"


class MacroCommand(Command):
    """Ordered children executed in order and undone in reverse, atomically."""

    def __init__(self, name: str, narrator: Narrator, commands: Optional[List[Command]] = None):
        self.name = name
        self.narrator = narrator
        self.commands: List[Command] = list(commands or [])

    def add(self, command: Command) -> "MacroCommand":
        self.commands.append(command)
        return self

    @property
    def undoable(self) -> bool:
        return all(command.undoable for command in self.commands)

    def execute(self):
        self.narrator.say(f"Executing macro: {self.name}")
        done: List[Command] = []
        try:
            for command in self.commands:
                command.execute()
                done.append(command)
        except CatalogError:
            self.narrator.say(f"Rolling back macro: {self.name}")
            for command in reversed(done):
                command.undo()
            raise

    def undo(self):
        self.narrator.say(f"Undoing macro: {self.name}")
        undone: List[Command] = []
        try:
            for command in reversed(self.commands):
                command.undo()
                undone.append(command)
        except CatalogError:
            self.narrator.say(f"Restoring macro: {self.name}")
            for command in reversed(undone):
                command.execute()
            raise

    @property
    def description(self):
        return f"Macro: {self.name} ({len(self.commands)} commands)"


class FunctionalCommand(Command):
    """Command built from a pair of callables."""

    def __init__(self, execute: Callable[[], None], undo: Callable[[], None], description: str):
        self._execute = execute
        self._undo = undo
        self._description = description

    def execute(self):
        self._execute()

    def undo(self):
        self._undo()

    @property
    def description(self):
        return self._description


# -----------------------------------------------------------------------------
# Invoker
# -----------------------------------------------------------------------------


class CommandManager:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._undo: List[Command] = []
        self._redo: List[Command] = []

    def execute_command(self, command: Command) -> bool:
        self.narrator.say(f"Executing: {command.description}")
        try:
            command.execute()
        except CatalogError as exc:
            self.narrator.say(f"Command failed: {exc.message}")
            return False
        if command.undoable:
            self._undo.append(command)
            self._redo.clear()
        return True

    def undo(self) -> bool:
        if not self._undo:
            self.narrator.say("Nothing to undo")
            return False
        command = self._undo.pop()
        self.narrator.say(f"Undoing: {command.description}")
        try:
            command.undo()
        except CatalogError as exc:
            self._undo.append(command)
            self.narrator.say(f"Undo failed: {exc.message}")
            return False
        self._redo.append(command)
        return True

    def redo(self) -> bool:
        if not self._redo:
            self.narrator.say("Nothing to redo")
            return False
        command = self._redo.pop()
        self.narrator.say(f"Redoing: {command.description}")
        try:
            command.execute()
        except CatalogError as exc:
            self._redo.append(command)
            self.narrator.say(f"Redo failed: {exc.message}")
            return False
        self._undo.append(command)
        return True

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def history(self) -> List[str]:
        """Descriptions on the undo stack, oldest first."""
        return [command.description for command in self._undo]

    def clear_history(self) -> None:
        self._undo.clear()
        self._redo.clear()
        self.narrator.say("Command history cleared")


# -----------------------------------------------------------------------------
# Remote Control
# -----------------------------------------------------------------------------


class Light:
    def __init__(self, location: str, narrator: Narrator):
        self.location = location
        self.narrator = narrator
        self.is_on = False
        self.brightness = 0

    def turn_on(self) -> None:
        self.is_on, self.brightness = True, 100
        self.narrator.say(f"{self.location} light is ON (brightness: {self.brightness}%)")

    def turn_off(self) -> None:
        self.is_on, self.brightness = False, 0
        self.narrator.say(f"{self.location} light is OFF")


class Fan:
    SPEED_NAMES = ("OFF", "LOW", "MEDIUM", "HIGH")

    def __init__(self, location: str, narrator: Narrator):
        self.location = location
        self.narrator = narrator
        self.speed = 0

    def set_speed(self, speed: int) -> None:
        self.speed = max(0, min(3, speed))
        self.narrator.say(
            f"{self.location} fan speed set to {self.speed} ({self.SPEED_NAMES[self.speed]})"
        )


class LightOnCommand(Command):
    def __init__(self, light: Light):
        self.light = light

    def execute(self):
        self.light.turn_on()

    def undo(self):
        self.light.turn_off()

    @property
    def description(self):
        return f"Turn on {self.light.location} light"


class LightOffCommand(Command):
    def __init__(self, light: Light):
        self.light = light

    def execute(self):
        self.light.turn_off()

    def undo(self):
        self.light.turn_on()

    @property
    def description(self):
        return f"Turn off {self.light.location} light"


class FanSpeedCommand(Command):
    def __init__(self, fan: Fan, speed: int):
        self.fan = fan
        self.speed = speed
        self.previous = 0

    def execute(self):
        self.previous = self.fan.speed
        self.fan.set_speed(self.speed)

    def undo(self):
        self.fan.set_speed(self.previous)

    @property
    def description(self):
        return f"Set {self.fan.location} fan speed to {self.speed}"


class NoCommand(Command):
    undoable = False

    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    def execute(self):
        self.narrator.say("No operation")

    def undo(self):
        self.narrator.say("No operation to undo")

    @property
    def description(self):
        return "No Command"


class RemoteControl:
    SLOT_COUNT = 7

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.on_commands: List[Command] = [NoCommand(narrator) for _ in range(self.SLOT_COUNT)]
        self.off_commands: List[Command] = [NoCommand(narrator) for _ in range(self.SLOT_COUNT)]
        self.last_command: Command = NoCommand(narrator)

    def _check_slot(self, slot: int) -> None:
        if not 0 <= slot < self.SLOT_COUNT:
            raise InvalidArgument(
                f"Invalid slot {slot}", [f"Slots range from 0 to {self.SLOT_COUNT - 1}"]
            )

    def set_command(self, slot: int, on: Command, off: Command) -> None:
        self._check_slot(slot)
        self.on_commands[slot] = on
        self.off_commands[slot] = off

    def on_pressed(self, slot: int) -> None:
        self._press(self.on_commands, slot)

    def off_pressed(self, slot: int) -> None:
        self._press(self.off_commands, slot)

    def _press(self, commands: List[Command], slot: int) -> None:
        try:
            self._check_slot(slot)
        except InvalidArgument as exc:
            self.narrator.say(exc.message)
            return
        commands[slot].execute()
        self.last_command = commands[slot]

    def undo_pressed(self) -> None:
        self.last_command.undo()
        self.last_command = NoCommand(self.narrator)

    def display_status(self) -> None:
        say = self.narrator.say
        say("\n--- Remote Control Status ---")
        for slot in range(self.SLOT_COUNT):
            say(
                f"Slot {slot}: {self.on_commands[slot].description} | "
                f"{self.off_commands[slot].description}"
            )
        say(f"Last command: {self.last_command.description}")
        say("-" * 28)


# -----------------------------------------------------------------------------
# Queue
# -----------------------------------------------------------------------------


class CommandQueue:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._queue: Deque[Command] = deque()
        self.processing = False

    def add(self, command: Command) -> None:
        self._queue.append(command)
        self.narrator.say(f"Command added to queue. Queue size: {len(self._queue)}")

    def __len__(self) -> int:
        return len(self._queue)

    def process(self) -> int:
        """Run queued commands in FIFO order; return how many ran."""
        if self.processing:
            self.narrator.say("Already processing commands...")
            return 0
        self.processing = True
        processed = 0
        try:
            self.narrator.say(f"Processing {len(self._queue)} commands...")
            while self._queue:
                command = self._queue.popleft()
                self.narrator.say(f"Processing: {command.description}")
                try:
                    command.execute()
                    processed += 1
                except CatalogError as exc:
                    self.narrator.say(f"Command failed: {exc.message}")
                self.narrator.pause(200)
        finally:
            self.processing = False
        self.narrator.say("All commands processed.")
        return processed


# -----------------------------------------------------------------------------
# Script
# -----------------------------------------------------------------------------


@register_demo("command", "Command Pattern", "behavioral", "Undo/redo editor, remote control, queue")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Command Pattern Demo ===")

    say("\n1. Text Editor with Command Pattern:")
    say("=" * 50)
    editor = TextEditor(narrator)
    manager = CommandManager(narrator)
    for text, position in (("Hello", 0), (" World", 5), ("!", 11)):
        manager.execute_command(InsertCommand(editor, text, position))
        editor.display()
    say("\nTesting undo operations:")
    manager.undo()
    editor.display()
    manager.undo()
    editor.display()
    say("\nTesting redo operations:")
    manager.redo()
    editor.display()

    say("\nTesting invalid position:")
    manager.execute_command(InsertCommand(editor, "?", 99))
    editor.display()

    say("\nTesting macro command:")
    macro = MacroCommand("Format Text", narrator)
    macro.add(DeleteCommand(editor, 0, 11))
    macro.add(InsertCommand(editor, "Welcome to", 0))
    macro.add(InsertCommand(editor, " Command Pattern!", 10))
    manager.execute_command(macro)
    editor.display()
    manager.undo()
    editor.display()

    say("\n\n2. Remote Control with Command Pattern:")
    say("=" * 50)
    living_room = Light("Living Room", narrator)
    bedroom = Light("Bedroom", narrator)
    ceiling = Fan("Ceiling", narrator)
    remote = RemoteControl(narrator)
    remote.set_command(0, LightOnCommand(living_room), LightOffCommand(living_room))
    remote.set_command(1, LightOnCommand(bedroom), LightOffCommand(bedroom))
    remote.set_command(2, FanSpeedCommand(ceiling, 3), FanSpeedCommand(ceiling, 0))
    remote.display_status()
    say("\nTesting remote control:")
    remote.on_pressed(0)
    remote.on_pressed(1)
    remote.on_pressed(2)
    say("\nTurning things off:")
    remote.off_pressed(0)
    remote.off_pressed(2)
    say("\nTesting undo:")
    remote.undo_pressed()
    remote.undo_pressed()

    say("\n\n3. Functional Commands:")
    say("=" * 50)
    functional = CommandManager(narrator)
    counter = {"value": 0}

    def change(delta: Callable[[int], int], message: str) -> Callable[[], None]:
        def apply() -> None:
            counter["value"] = delta(counter["value"])
            say(f"{message}, now: {counter['value']}")

        return apply

    functional.execute_command(
        FunctionalCommand(
            change(lambda v: v + 5, "Counter incremented by 5"),
            change(lambda v: v - 5, "Counter decremented by 5"),
            "Increment counter by 5",
        )
    )
    functional.execute_command(
        FunctionalCommand(
            change(lambda v: v * 2, "Counter doubled"),
            change(lambda v: v // 2, "Counter halved"),
            "Double counter",
        )
    )
    say("\nTesting functional undo/redo:")
    functional.undo()
    functional.undo()
    functional.redo()

    say("\n\n4. Command Queue Processing:")
    say("=" * 50)
    queue = CommandQueue(narrator)
    queued_editor = TextEditor(narrator)
    queue.add(InsertCommand(queued_editor, "First ", 0))
    queue.add(InsertCommand(queued_editor, "Second ", 6))
    queue.add(InsertCommand(queued_editor, "Third", 13))
    say("Editor before processing:")
    queued_editor.display()
    queue.process()
    say("Editor after processing:")
    queued_editor.display()


if __name__ == "__main__":
    sys.exit(run_standalone("command"))
