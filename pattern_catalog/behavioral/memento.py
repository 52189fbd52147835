r"""Memento.

An originator snapshots its own state into a memento and is the only party
that reads it back. Caretakers store mementos without looking inside:

  - `EditorHistory` keeps a bounded undo stack plus a redo stack; a fresh
    save throws the redo stack away.
  - `GameSaveManager` keeps numbered save slots with overwrite and delete.
  - `ConfigurationManager` keeps named presets.

Mementos are immutable once created.
"""

from __future__ import annotations

import copy
import logging
import sys
from collections import deque
from typing import Any, Callable, Deque, Dict, List, MutableMapping, Optional

from pydantic import BaseModel, Field

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, Narrator, PreconditionFailed
from ..mixin import MappingMutatorMixin

__all__ = [
    "Memento",
    "TextEditor",
    "EditorHistory",
    "GameState",
    "Game",
    "GameSaveManager",
    "Configuration",
    "ConfigurationManager",
]

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class Memento:
    """Opaque, immutable snapshot.

    The payload is only reachable through the originator class that made it.
    """

    __slots__ = ("_owner", "_state", "saved_at", "label")

    def __init__(self, owner: type, state: Any, saved_at: float, label: str = ""):
        object.__setattr__(self, "_owner", owner)
        object.__setattr__(self, "_state", copy.deepcopy(state))
        object.__setattr__(self, "saved_at", saved_at)
        object.__setattr__(self, "label", label)

    def __setattr__(self, name: str, value: Any) -> None:
        raise PreconditionFailed(
            "Mementos are immutable",
            ["Create a new memento from the originator instead"],
            {"participant": "Memento", "operation": f"set {name}"},
        )

    def _open(self, originator: object) -> Any:
        if not isinstance(originator, self._owner):
            raise PreconditionFailed(
                f"{type(originator).__name__} cannot read a {self._owner.__name__} memento",
                ["Restore a memento on the originator type that created it"],
                {"participant": "Memento", "operation": "restore"},
            )
        return copy.deepcopy(self._state)

    def __repr__(self) -> str:
        return f"<Memento of {self._owner.__name__} at t={self.saved_at:.2f}s>"


# -----------------------------------------------------------------------------
# Text Editor and its History
# -----------------------------------------------------------------------------


class TextEditor:
    def __init__(self, narrator: Narrator, clock: Clock):
        self.narrator = narrator
        self.clock = clock
        self.content = ""
        self.cursor = 0

    def write(self, text: str) -> None:
        self.content = self.content[: self.cursor] + text + self.content[self.cursor:]
        self.cursor += len(text)
        self.narrator.say(f"📝 Wrote: '{text}'")

    def delete_previous(self, count: int = 1) -> str:
        count = min(count, self.cursor)
        if count <= 0:
            return ""
        start = self.cursor - count
        deleted = self.content[start: self.cursor]
        self.content = self.content[:start] + self.content[self.cursor:]
        self.cursor = start
        self.narrator.say(f"🗑️ Deleted: '{deleted}'")
        return deleted

    def move_cursor(self, position: int) -> None:
        self.cursor = max(0, min(position, len(self.content)))
        self.narrator.say(f"👆 Cursor moved to position: {self.cursor}")

    def replace(self, old: str, new: str) -> bool:
        """Replace the first occurrence of `old`; the cursor lands after `new`."""
        start = self.content.find(old) if old else -1
        if start < 0:
            self.narrator.say(f"❌ Text not found: '{old}'")
            return False
        self.content = self.content[:start] + new + self.content[start + len(old):]
        self.cursor = start + len(new)
        self.narrator.say(f"🔄 Replaced '{old}' with '{new}'")
        return True

    def create_memento(self) -> Memento:
        return Memento(TextEditor, (self.content, self.cursor), self.clock())

    def restore(self, memento: Memento) -> None:
        self.content, self.cursor = memento._open(self)
        self.narrator.say(f"↩️ Restored state from t={memento.saved_at:.2f}s")

    def display(self) -> None:
        self.narrator.say(f'📄 Content: "{self.content}"')
        self.narrator.say(f"   Cursor at position: {self.cursor}")
        self.narrator.say(f"   Length: {len(self.content)} characters")


class EditorHistory:
    """Undo/redo caretaker for one `TextEditor`.

    `save()` records a checkpoint before a change. `undo()` moves the
    editor's present state onto the redo stack and restores the newest
    checkpoint; `redo()` is its mirror image.
    """

    MAX_HISTORY = 50

    def __init__(self, editor: TextEditor, max_history: int = MAX_HISTORY):
        self.editor = editor
        self._undo: Deque[Memento] = deque(maxlen=max_history)
        self._redo: List[Memento] = []

    @property
    def narrator(self) -> Narrator:
        return self.editor.narrator

    def save(self) -> None:
        self._redo.clear()
        self._undo.append(self.editor.create_memento())
        self.narrator.say(f"💾 State saved (history size: {len(self._undo)})")

    def undo(self) -> bool:
        if not self._undo:
            self.narrator.say("⚠️ Nothing to undo")
            return False
        memento = self._undo.pop()
        self._redo.append(self.editor.create_memento())
        self.editor.restore(memento)
        return True

    def redo(self) -> bool:
        if not self._redo:
            self.narrator.say("⚠️ Nothing to redo")
            return False
        memento = self._redo.pop()
        self._undo.append(self.editor.create_memento())
        self.editor.restore(memento)
        return True

    @property
    def undo_size(self) -> int:
        return len(self._undo)

    @property
    def redo_size(self) -> int:
        return len(self._redo)

    def show(self) -> None:
        self.narrator.say("\n📚 History:")
        self.narrator.say(f"   Undo stack: {self.undo_size} states")
        self.narrator.say(f"   Redo stack: {self.redo_size} states")


# -----------------------------------------------------------------------------
# Game Saves
# -----------------------------------------------------------------------------


class GameState(BaseModel):
    player: str
    level: int = 1
    score: int = 0
    lives: int = 3
    inventory: Dict[str, int] = Field(default_factory=lambda: {"coins": 0, "keys": 0})

    def __str__(self) -> str:
        return f"Level {self.level}, Score: {self.score}, Lives: {self.lives}"


class Game:
    def __init__(self, player: str, narrator: Narrator, clock: Clock):
        self.state = GameState(player=player)
        self.narrator = narrator
        self.clock = clock

    def level_up(self) -> None:
        self.state.level += 1
        self.state.score += 1000
        self.narrator.say(f"🎮 Level up! Now at {self.state}")

    def score_points(self, points: int) -> None:
        self.state.score += points
        self.narrator.say(f"⭐ Scored {points} points! Total: {self.state.score}")

    def lose_life(self) -> None:
        if self.state.lives > 0:
            self.state.lives -= 1
            self.narrator.say(f"💔 Lost a life! Lives remaining: {self.state.lives}")

    def collect_item(self, item: str, quantity: int = 1) -> None:
        self.state.inventory[item] = self.state.inventory.get(item, 0) + quantity
        self.narrator.say(f"💎 Collected {quantity} {item} (total: {self.state.inventory[item]})")

    def save(self) -> Memento:
        self.narrator.say(f"💾 Game saved at {self.state}")
        return Memento(Game, self.state.model_dump(), self.clock(), label=str(self.state))

    def load(self, memento: Memento) -> None:
        self.state = GameState(**memento._open(self))
        self.narrator.say(f"📂 Game loaded from t={memento.saved_at:.2f}s - {self.state}")

    @property
    def is_game_over(self) -> bool:
        return self.state.lives <= 0

    def display_status(self) -> None:
        self.narrator.say(f"🎮 {self.state.player} - {self.state}")
        items = " ".join(f"{k}:{v}" for k, v in sorted(self.state.inventory.items()))
        self.narrator.say(f"   Inventory: {items}")


class GameSaveManager(MappingMutatorMixin[int, Memento]):
    """Fixed number of numbered slots."""

    MAX_SLOTS = 5

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._slots: Dict[int, Memento] = {}

    def _get_mapping(self) -> MutableMapping[int, Memento]:
        return self._slots

    def save_to_slot(self, slot: int, memento: Memento) -> bool:
        if not 0 <= slot < self.MAX_SLOTS:
            self.narrator.say(f"❌ Invalid save slot: {slot}")
            return False
        self._put_artifact(slot, memento)
        self.narrator.say(f"💾 Game saved to slot {slot}")
        return True

    def load_from_slot(self, slot: int) -> Optional[Memento]:
        if not self._has_identifier(slot):
            self.narrator.say(f"❌ No save found in slot {slot}")
            return None
        self.narrator.say(f"📂 Loading from slot {slot}")
        return self._get_artifact(slot)

    def delete_slot(self, slot: int) -> bool:
        if not self._has_identifier(slot):
            self.narrator.say(f"❌ No save to delete in slot {slot}")
            return False
        self._del_artifact(slot)
        self.narrator.say(f"🗑️ Deleted save slot {slot}")
        return True

    def list_slots(self) -> List[Optional[Memento]]:
        self.narrator.say("\n💾 Save Slots:")
        slots = [self._slots.get(i) for i in range(self.MAX_SLOTS)]
        for index, memento in enumerate(slots):
            if memento is None:
                self.narrator.say(f"   Slot {index}: Empty")
            else:
                self.narrator.say(f"   Slot {index}: {memento.label} (saved at t={memento.saved_at:.2f}s)")
        return slots


# -----------------------------------------------------------------------------
# Configuration Presets
# -----------------------------------------------------------------------------


class Configuration:
    def __init__(self, narrator: Narrator, clock: Clock):
        self.narrator = narrator
        self.clock = clock
        self.settings: Dict[str, str] = {}

    def set(self, key: str, value: str) -> None:
        self.settings[key] = value
        self.narrator.say(f"⚙️ Setting {key} = {value}")

    def get(self, key: str, default: str = "") -> str:
        return self.settings.get(key, default)

    def snapshot(self, description: str) -> Memento:
        self.narrator.say(f"📸 Creating configuration snapshot: {description}")
        return Memento(Configuration, self.settings, self.clock(), label=description)

    def restore(self, memento: Memento) -> None:
        self.settings = memento._open(self)
        self.narrator.say(f"🔄 Restored configuration: {memento.label}")

    def reset(self) -> None:
        self.settings.clear()
        self.narrator.say("🔄 Configuration reset")

    def display(self) -> None:
        self.narrator.say("⚙️ Current Configuration:")
        for key in sorted(self.settings):
            self.narrator.say(f"   {key} = {self.settings[key]}")


class ConfigurationManager(MappingMutatorMixin[str, Memento]):
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._presets: Dict[str, Memento] = {}

    def _get_mapping(self) -> MutableMapping[str, Memento]:
        return self._presets

    def save_preset(self, name: str, memento: Memento) -> None:
        self._put_artifact(name, memento)
        self.narrator.say(f"💾 Preset '{name}' saved")

    def load_preset(self, name: str) -> Optional[Memento]:
        if not self._has_identifier(name):
            self.narrator.say(f"❌ Preset '{name}' not found")
            return None
        self.narrator.say(f"📂 Loading preset '{name}'")
        return self._get_artifact(name)

    def delete_preset(self, name: str) -> bool:
        if not self._has_identifier(name):
            self.narrator.say(f"❌ Preset '{name}' not found")
            return False
        self._del_artifact(name)
        self.narrator.say(f"🗑️ Preset '{name}' deleted")
        return True

    def list_presets(self) -> List[str]:
        self.narrator.say("\n📋 Available Presets:")
        names = sorted(self._presets)
        for name in names:
            self.narrator.say(f"   {name} ({self._presets[name].label})")
        return names


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("memento", "Memento Pattern", "behavioral", "Editor undo/redo, game save slots, config presets")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Memento Pattern Demo ===")

    say("\n1. Text Editor with Undo/Redo:")
    say("=" * 50)
    editor = TextEditor(narrator, ctx.clock)
    history = EditorHistory(editor)
    editor.display()
    for text in ("Hello", " World", "!"):
        history.save()
        ctx.sleep(100)
        editor.write(text)
        editor.display()

    say("\nTesting undo operations:")
    history.undo()
    editor.display()
    history.undo()
    editor.display()

    say("\nTesting redo operations:")
    history.redo()
    editor.display()
    history.show()

    say("\nA new edit clears the redo stack:")
    history.save()
    editor.replace("World", "There")
    editor.display()
    history.show()
    history.redo()

    say("\n\n2. Game Save System:")
    say("=" * 50)
    game = Game("Player1", narrator, ctx.clock)
    saves = GameSaveManager(narrator)
    game.display_status()
    game.score_points(500)
    game.collect_item("coins", 10)
    game.collect_item("keys", 2)
    game.display_status()
    saves.save_to_slot(0, game.save())

    ctx.sleep(1000)
    game.level_up()
    game.score_points(750)
    game.collect_item("coins", 15)
    game.display_status()
    saves.save_to_slot(1, game.save())

    ctx.sleep(1000)
    game.lose_life()
    game.lose_life()
    game.display_status()
    saves.save_to_slot(2, game.save())
    saves.save_to_slot(7, game.save())
    saves.list_slots()

    say("\nLoading earlier save:")
    memento = saves.load_from_slot(1)
    if memento is not None:
        game.load(memento)
        game.display_status()
    saves.delete_slot(2)
    saves.load_from_slot(2)

    say("\n\n3. Configuration Management:")
    say("=" * 50)
    config = Configuration(narrator, ctx.clock)
    presets = ConfigurationManager(narrator)
    config.set("theme", "dark")
    config.set("language", "english")
    config.set("notifications", "enabled")
    config.display()
    presets.save_preset("default", config.snapshot("Default settings"))

    config.set("theme", "light")
    config.set("language", "spanish")
    config.set("sound", "enabled")
    config.display()
    presets.save_preset("spanish_light", config.snapshot("Spanish light theme"))

    config.reset()
    for key, value in (("theme", "dark"), ("language", "english"), ("sound", "enabled"), ("graphics", "high"), ("fps", "60")):
        config.set(key, value)
    config.display()
    presets.save_preset("gaming", config.snapshot("Gaming optimized"))
    presets.list_presets()

    say("\nLoading default preset:")
    memento = presets.load_preset("default")
    if memento is not None:
        config.restore(memento)
        config.display()
    presets.load_preset("missing")


if __name__ == "__main__":
    sys.exit(run_standalone("memento"))
