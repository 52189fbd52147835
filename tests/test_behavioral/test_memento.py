import pytest

from pattern_catalog.behavioral.memento import (
    Configuration,
    ConfigurationManager,
    EditorHistory,
    Game,
    GameSaveManager,
    TextEditor,
)
from pattern_catalog.core import PreconditionFailed, SimulatedClock


@pytest.fixture
def clock():
    return SimulatedClock()


class TestEditorHistory:
    def test_undo_redo_walk(self, narrator, clock):
        editor = TextEditor(narrator, clock)
        history = EditorHistory(editor)
        for text in ("Hello", " World", "!"):
            history.save()
            editor.write(text)

        history.undo()
        history.undo()
        assert editor.content == "Hello"
        history.redo()
        assert editor.content == "Hello World"
        assert editor.cursor == 11
        assert history.undo_size == 2
        assert history.redo_size == 1

    def test_save_clears_redo(self, narrator, clock):
        editor = TextEditor(narrator, clock)
        history = EditorHistory(editor)
        history.save()
        editor.write("abc")
        history.undo()
        history.save()
        assert history.redo_size == 0

    def test_empty_stacks(self, narrator, clock):
        history = EditorHistory(TextEditor(narrator, clock))
        assert not history.undo()
        assert not history.redo()

    def test_history_is_bounded(self, narrator, clock):
        editor = TextEditor(narrator, clock)
        history = EditorHistory(editor, max_history=2)
        for text in "abc":
            history.save()
            editor.write(text)
        assert history.undo_size == 2

    def test_editor_operations(self, narrator, clock):
        editor = TextEditor(narrator, clock)
        editor.write("Hello World")
        assert editor.replace("World", "There")
        assert editor.cursor == 11
        assert not editor.replace("Moon", "Sun")
        editor.move_cursor(99)
        assert editor.cursor == len(editor.content)
        assert editor.delete_previous(5) == "There"
        assert editor.content == "Hello "


class TestMementoOpacity:
    def test_memento_is_immutable(self, narrator, clock):
        memento = TextEditor(narrator, clock).create_memento()
        with pytest.raises(PreconditionFailed):
            memento.saved_at = 5.0

    def test_snapshot_is_a_copy(self, narrator, clock):
        config = Configuration(narrator, clock)
        config.set("theme", "dark")
        memento = config.snapshot("dark")
        config.set("theme", "light")
        config.restore(memento)
        assert config.get("theme") == "dark"

    def test_foreign_originator_is_refused(self, narrator, clock):
        memento = TextEditor(narrator, clock).create_memento()
        with pytest.raises(PreconditionFailed):
            Configuration(narrator, clock).restore(memento)

    def test_timestamp_comes_from_clock(self, narrator, clock):
        editor = TextEditor(narrator, clock)
        clock.advance(1.5)
        assert editor.create_memento().saved_at == 1.5


class TestGameSaves:
    def test_slots(self, narrator, clock):
        game = Game("Hero", narrator, clock)
        saves = GameSaveManager(narrator)
        game.level_up()
        game.collect_item("coins", 10)
        assert saves.save_to_slot(0, game.save())
        assert not saves.save_to_slot(5, game.save())

        game.lose_life()
        game.collect_item("coins", 5)
        game.load(saves.load_from_slot(0))
        assert game.state.level == 2
        assert game.state.lives == 3
        assert game.state.inventory["coins"] == 10

        assert saves.load_from_slot(3) is None
        assert saves.delete_slot(0)
        assert not saves.delete_slot(0)
        assert saves.list_slots() == [None] * GameSaveManager.MAX_SLOTS

    def test_game_over(self, narrator, clock):
        game = Game("Hero", narrator, clock)
        for _ in range(4):
            game.lose_life()
        assert game.state.lives == 0
        assert game.is_game_over


def test_configuration_presets(narrator, clock):
    config = Configuration(narrator, clock)
    presets = ConfigurationManager(narrator)
    config.set("theme", "dark")
    presets.save_preset("dark", config.snapshot("Dark mode"))
    config.reset()
    config.set("theme", "light")
    presets.save_preset("light", config.snapshot("Light mode"))

    config.restore(presets.load_preset("dark"))
    assert config.settings == {"theme": "dark"}
    assert presets.list_presets() == ["dark", "light"]
    assert presets.load_preset("missing") is None
    assert presets.delete_preset("light")
    assert not presets.delete_preset("light")
