import pytest

from pattern_catalog.behavioral.command import (
    CommandManager,
    CommandQueue,
    DeleteCommand,
    Fan,
    FanSpeedCommand,
    FunctionalCommand,
    InsertCommand,
    Light,
    LightOnCommand,
    LightOffCommand,
    MacroCommand,
    RemoteControl,
    ReplaceCommand,
    TextEditor,
)
from pattern_catalog.core import InvalidArgument, PreconditionFailed


class TestEditorHistory:
    def test_insert_undo_redo(self, narrator):
        editor = TextEditor(narrator)
        manager = CommandManager(narrator)
        manager.execute_command(InsertCommand(editor, "Hello", 0))
        manager.execute_command(InsertCommand(editor, " World", 5))
        manager.execute_command(InsertCommand(editor, "!", 11))
        manager.undo()
        manager.undo()
        manager.redo()
        assert editor.content == "Hello World"
        assert editor.cursor == 11

    def test_undo_on_empty_stack_is_a_no_op(self, narrator):
        manager = CommandManager(narrator)
        assert not manager.undo()
        assert not manager.redo()
        assert narrator.lines == ["Nothing to undo", "Nothing to redo"]

    def test_new_command_clears_redo(self, narrator):
        editor = TextEditor(narrator)
        manager = CommandManager(narrator)
        manager.execute_command(InsertCommand(editor, "abc", 0))
        manager.undo()
        assert manager.can_redo
        manager.execute_command(InsertCommand(editor, "x", 0))
        assert not manager.can_redo
        assert manager.history() == ["Insert 'x' at position 0"]

    def test_failed_command_is_not_recorded(self, narrator):
        editor = TextEditor(narrator)
        manager = CommandManager(narrator)
        assert not manager.execute_command(InsertCommand(editor, "x", 5))
        assert not manager.can_undo
        assert editor.content == ""

    def test_delete_and_replace_round_trip(self, narrator):
        editor = TextEditor(narrator)
        editor.insert("Hello World", 0)
        manager = CommandManager(narrator)
        manager.execute_command(ReplaceCommand(editor, 6, 5, "There"))
        manager.execute_command(DeleteCommand(editor, 0, 6))
        assert editor.content == "There"
        manager.undo()
        manager.undo()
        assert editor.content == "Hello World"

    def test_invalid_position(self, narrator):
        with pytest.raises(InvalidArgument):
            TextEditor(narrator).insert("x", 1)


class TestMacro:
    def test_macro_undoes_in_reverse(self, narrator):
        editor = TextEditor(narrator)
        macro = MacroCommand("greet", narrator)
        macro.add(InsertCommand(editor, "Hi", 0)).add(InsertCommand(editor, "!", 2))
        manager = CommandManager(narrator)
        manager.execute_command(macro)
        assert editor.content == "Hi!"
        manager.undo()
        assert editor.content == ""

    def test_macro_rolls_back_on_failure(self, narrator):
        editor = TextEditor(narrator)
        macro = MacroCommand("broken", narrator, [InsertCommand(editor, "ok", 0), InsertCommand(editor, "x", 99)])
        manager = CommandManager(narrator)
        assert not manager.execute_command(macro)
        assert editor.content == ""
        assert "Rolling back macro: broken" in narrator

    def test_failed_child_undo_restores_the_macro(self, narrator):
        log = []

        def refuse():
            raise PreconditionFailed("stuck")

        first = FunctionalCommand(lambda: log.append("+a"), lambda: log.append("-a"), "a")
        second = FunctionalCommand(lambda: log.append("+b"), refuse, "b")
        third = FunctionalCommand(lambda: log.append("+c"), lambda: log.append("-c"), "c")
        macro = MacroCommand("trio", narrator, [first, second, third])

        macro.execute()
        assert log == ["+a", "+b", "+c"]
        with pytest.raises(PreconditionFailed):
            macro.undo()
        # third was undone, second refused, so third is applied again
        assert log == ["+a", "+b", "+c", "-c", "+c"]
        assert "Restoring macro: trio" in narrator


class TestRemote:
    def test_slots_and_undo(self, narrator):
        remote = RemoteControl(narrator)
        light = Light("Kitchen", narrator)
        fan = Fan("Bedroom", narrator)
        remote.set_command(0, LightOnCommand(light), LightOffCommand(light))
        remote.set_command(1, FanSpeedCommand(fan, 3), FanSpeedCommand(fan, 0))
        remote.on_pressed(0)
        assert light.is_on
        remote.on_pressed(1)
        assert fan.speed == 3
        remote.undo_pressed()
        assert fan.speed == 0
        remote.on_pressed(6)
        assert "No operation" in narrator

    def test_invalid_slot(self, narrator):
        remote = RemoteControl(narrator)
        remote.on_pressed(9)
        assert "Invalid slot 9" in narrator
        with pytest.raises(InvalidArgument):
            remote.set_command(-1, LightOnCommand(Light("x", narrator)), LightOffCommand(Light("x", narrator)))


def test_queue_runs_fifo_and_survives_failures(narrator):
    queue = CommandQueue(narrator)
    order = []
    editor = TextEditor(narrator)
    queue.add(FunctionalCommand(lambda: order.append(1), lambda: None, "first"))
    queue.add(InsertCommand(editor, "x", 4))
    queue.add(FunctionalCommand(lambda: order.append(3), lambda: None, "third"))
    assert queue.process() == 2
    assert order == [1, 3]
    assert len(queue) == 0
