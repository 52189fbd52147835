"""End-to-end scenarios pinned to exact outcomes."""

import pytest

from pattern_catalog.architectural.event_sourcing import AccountCommandHandler, EventStore
from pattern_catalog.behavioral.chain import Priority, SupportChain, SupportTicket
from pattern_catalog.behavioral.command import CommandManager, InsertCommand, TextEditor
from pattern_catalog.behavioral.observer import EmailNotifier, NewsAgency
from pattern_catalog.behavioral.state import VendingMachine
from pattern_catalog.core import SimulatedClock
from pattern_catalog.structural.flyweight import CharacterFactory, Document


def test_editor_undo_redo(narrator):
    editor = TextEditor(narrator)
    manager = CommandManager(narrator)
    for text, position in (("Hello", 0), (" World", 5), ("!", 11)):
        manager.execute_command(InsertCommand(editor, text, position))
    manager.undo()
    manager.undo()
    manager.redo()
    assert editor.content == "Hello World"
    assert editor.cursor == 11


def test_vending_machine_purchase(narrator):
    machine = VendingMachine(narrator)
    assert machine.inventory[0] == 5
    machine.insert_coin(100)
    assert not machine.select_product(0)
    machine.insert_coin(75)
    assert machine.select_product(0)
    machine.dispense()
    assert machine.state == "Idle"
    assert machine.balance == 0
    assert machine.inventory[0] == 4
    assert machine.refunds == [25]


def test_news_agency_detach(narrator):
    agency = NewsAgency(narrator)
    a, b, c = (EmailNotifier(f"{name}@example.com", narrator) for name in "abc")
    for observer in (a, b, c):
        agency.attach(observer)
    agency.publish("n1")
    agency.detach(b)
    agency.publish("n2")
    assert (a.received, b.received, c.received) == (["n1", "n2"], ["n1"], ["n1", "n2"])


def test_event_sourced_bank(narrator):
    store = EventStore()
    handler = AccountCommandHandler(store, narrator, SimulatedClock())
    assert handler.open("acc1", "Alice", 1000.0)
    assert handler.deposit("acc1", 250.0)
    assert handler.deposit("acc1", 500.0)
    assert handler.withdraw("acc1", 1000.0)
    assert not handler.withdraw("acc1", 1000.0)
    assert handler.close("acc1")
    assert not handler.deposit("acc1", 50.0)
    account = handler.get_account_state("acc1")
    assert account.balance == 750.0
    assert account.closed
    assert len(store) == 5


@pytest.mark.parametrize(
    "priority, category, level",
    [
        (Priority.LOW, "Account", "Level 1 Support"),
        (Priority.MEDIUM, "Technical", "Level 2 Support"),
        (Priority.CRITICAL, "Infrastructure", "Level 3 Support"),
    ],
)
def test_support_escalation(narrator, priority, category, level):
    ticket = SupportTicket(id=1, description="issue", priority=priority, category=category)
    assert SupportChain(narrator).submit(ticket) == level


def test_flyweight_text(narrator):
    document = Document(CharacterFactory(narrator), narrator)
    document.add_text("banana", "Arial")
    stats = document.stats()
    assert (stats.flyweights, stats.contexts) == (3, 6)
