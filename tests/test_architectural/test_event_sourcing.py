import pytest
from pydantic import TypeAdapter, ValidationError

from pattern_catalog.architectural.event_sourcing import (
    AccountCommandHandler,
    AccountOpened,
    AccountSummaryProjection,
    BankAccount,
    CloseAccount,
    DepositMoney,
    Event,
    EventStore,
    MoneyDeposited,
    OpenAccount,
    WithdrawMoney,
)
from pattern_catalog.core import InvalidArgument, NotFound, PreconditionFailed, SimulatedClock


@pytest.fixture
def clock():
    return SimulatedClock()


@pytest.fixture
def store():
    return EventStore()


@pytest.fixture
def handler(store, narrator, clock):
    return AccountCommandHandler(store, narrator, clock)


def test_state_is_rebuilt_from_events(handler, store, clock):
    handler.handle(OpenAccount(account_id="A", owner="Alice", initial_balance=1000.0))
    clock.advance(1.0)
    handler.handle(DepositMoney(account_id="A", amount=250.0))
    handler.handle(WithdrawMoney(account_id="A", amount=500.0))
    handler.handle(CloseAccount(account_id="A"))

    account = handler.get_account_state("A")
    assert account.balance == 750.0
    assert account.closed
    assert account.version == 4
    assert len(store) == 4
    assert store.get_events("A")[-1].final_balance == 750.0


@pytest.mark.parametrize(
    "command, error, message",
    [
        (WithdrawMoney(account_id="A", amount=5000.0), PreconditionFailed, "Insufficient funds"),
        (DepositMoney(account_id="A", amount=-5.0), InvalidArgument, "Deposit amount must be positive"),
        (WithdrawMoney(account_id="A", amount=0.0), InvalidArgument, "Withdrawal amount must be positive"),
        (OpenAccount(account_id="A", owner="Again", initial_balance=1.0), PreconditionFailed, "Account already exists"),
        (DepositMoney(account_id="ghost", amount=1.0), NotFound, "Account does not exist"),
    ],
)
def test_rejected_commands_append_nothing(handler, store, command, error, message):
    handler.handle(OpenAccount(account_id="A", owner="Alice", initial_balance=100.0))
    with pytest.raises(error) as info:
        handler.handle(command)
    assert info.value.message == message
    assert len(store) == 1


def test_negative_opening_balance(handler, store):
    with pytest.raises(InvalidArgument):
        handler.handle(OpenAccount(account_id="A", owner="Alice", initial_balance=-1.0))
    assert handler.get_account_state("A") is None


def test_closed_account_accepts_nothing(handler, narrator):
    assert handler.open("A", "Alice", 100.0)
    assert handler.close("A")
    assert not handler.deposit("A", 10.0)
    assert not handler.withdraw("A", 10.0)
    assert not handler.close("A")
    assert narrator.lines == [
        "✓ Account opened for Alice (ID: A)",
        "✓ Account A closed",
        "✗ Cannot deposit to closed account",
        "✗ Cannot withdraw from closed account",
        "✗ Account is already closed",
    ]


def test_withdrawing_the_whole_balance_leaves_zero(handler, store):
    handler.handle(OpenAccount(account_id="A", owner="Alice", initial_balance=300.0))
    handler.handle(WithdrawMoney(account_id="A", amount=300.0))
    assert handler.get_account_state("A").balance == 0.0
    assert len(store) == 2

    with pytest.raises(PreconditionFailed, match="Insufficient funds"):
        handler.handle(WithdrawMoney(account_id="A", amount=0.01))
    assert len(store) == 2


def test_verb_methods_format_amounts(handler, narrator):
    handler.open("A", "Alice", 0.0)
    handler.deposit("A", 1250.5)
    assert narrator.lines[-1] == "✓ Deposited $1,250.50 to A"


def test_replay_until(handler):
    handler.open("A", "Alice", 1000.0)
    handler.deposit("A", 250.0)
    handler.deposit("A", 500.0)
    balances = [handler.replay_until("A", n).balance for n in (1, 2, 3)]
    assert balances == [1000.0, 1250.0, 1750.0]
    assert handler.replay_until("A", 0) is None


def test_chronological_order_breaks_ties_by_sequence(handler, store, clock):
    handler.open("B", "Bob", 1.0)
    handler.open("A", "Alice", 1.0)
    clock.advance(0.5)
    handler.deposit("B", 1.0)
    ordered = store.get_all_events()
    assert [e.aggregate_id for e in ordered] == ["B", "A", "B"]
    assert [e.sequence for e in ordered] == [1, 2, 3]
    assert ordered[-1].formatted_timestamp == "T+0.500s"


def test_store_rejects_foreign_events(store):
    with pytest.raises(InvalidArgument):
        store.append_events("A", [MoneyDeposited(aggregate_id="B", amount=1.0)])


def test_events_are_immutable():
    event = MoneyDeposited(aggregate_id="A", amount=1.0)
    with pytest.raises(ValidationError):
        event.amount = 2.0
    assert event.describe() == "MoneyDeposited{aggregate_id=A, amount=1.0}"


def test_event_union_parses_by_discriminator():
    parsed = TypeAdapter(Event).validate_python(
        {"event_type": "AccountOpened", "aggregate_id": "A", "owner": "Alice", "initial_balance": 5.0}
    )
    assert isinstance(parsed, AccountOpened)
    assert BankAccount.from_events([parsed]).owner == "Alice"


def test_projection(handler, store):
    handler.open("A", "Alice", 1000.0)
    handler.deposit("A", 250.0)
    handler.open("B", "Bob", 500.0)
    handler.withdraw("B", 100.0)
    handler.close("B")
    projection = AccountSummaryProjection(store)
    alice = projection.summary("A")
    assert alice.total_deposits == 1250.0
    assert alice.transactions == 2
    assert projection.total_withdrawals == 100.0
    assert projection.open_accounts == 1
    assert projection.total_balance == 1250.0
    assert projection.summary("nobody") is None


def test_commands_forbid_unknown_fields():
    with pytest.raises(ValidationError):
        DepositMoney(account_id="A", amount=1.0, memo="x")
