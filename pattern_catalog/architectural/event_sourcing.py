r"""Event Sourcing.

Account state is never stored. The store keeps an append-only log of
immutable events and every read folds them back into a `BankAccount`.

Rules checked by `AccountCommandHandler` before anything is appended:
  - an account is opened once, with a non-negative balance
  - deposits and withdrawals must be positive
  - a withdrawal may not exceed the balance
  - a closed account accepts nothing

A rejected command appends nothing. Each event carries the simulated
clock reading and a store-wide sequence number, which breaks ties when
several events share a timestamp.

\dot
digraph EventSourcing {
    rankdir=LR;
    node [shape=rectangle];
    "Command" -> "AccountCommandHandler";
    "AccountCommandHandler" -> "EventStore" [label="append_events"];
    "EventStore" -> "BankAccount" [label="from_events"];
    "EventStore" -> "AccountSummaryProjection";
}
\enddot
"""

from __future__ import annotations

import logging
import sys
from collections import defaultdict
from typing import Callable, Dict, List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Annotated

from ..catalog import register_demo, run_standalone
from ..core import CatalogError, DemoContext, InvalidArgument, Narrator, NotFound, PreconditionFailed

__all__ = [
    "AccountOpened",
    "MoneyDeposited",
    "MoneyWithdrawn",
    "AccountClosed",
    "Event",
    "OpenAccount",
    "DepositMoney",
    "WithdrawMoney",
    "CloseAccount",
    "EventStore",
    "BankAccount",
    "AccountCommandHandler",
    "AccountSummary",
    "AccountSummaryProjection",
]

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Events
# -----------------------------------------------------------------------------


class _EventBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    aggregate_id: str
    timestamp: float = 0.0
    sequence: int = 0

    @property
    def formatted_timestamp(self) -> str:
        return f"T+{self.timestamp:.3f}s"

    def describe(self) -> str:
        fields = ", ".join(f"{k}={v}" for k, v in self.model_dump(exclude={"event_type", "timestamp", "sequence"}).items())
        return f"{self.event_type}{{{fields}}}"


class AccountOpened(_EventBase):
    event_type: Literal["AccountOpened"] = "AccountOpened"
    owner: str
    initial_balance: float


class MoneyDeposited(_EventBase):
    event_type: Literal["MoneyDeposited"] = "MoneyDeposited"
    amount: float


class MoneyWithdrawn(_EventBase):
    event_type: Literal["MoneyWithdrawn"] = "MoneyWithdrawn"
    amount: float


class AccountClosed(_EventBase):
    event_type: Literal["AccountClosed"] = "AccountClosed"
    final_balance: float


Event = Annotated[
    Union[AccountOpened, MoneyDeposited, MoneyWithdrawn, AccountClosed],
    Field(discriminator="event_type"),
]


# -----------------------------------------------------------------------------
# Commands
# -----------------------------------------------------------------------------


class _CommandBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    account_id: str


class OpenAccount(_CommandBase):
    owner: str
    initial_balance: float


class DepositMoney(_CommandBase):
    amount: float


class WithdrawMoney(_CommandBase):
    amount: float


class CloseAccount(_CommandBase):
    pass


Command = Union[OpenAccount, DepositMoney, WithdrawMoney, CloseAccount]


# -----------------------------------------------------------------------------
# Store
# -----------------------------------------------------------------------------


class EventStore:
    """Append-only event log, indexed by aggregate."""

    def __init__(self):
        self._by_aggregate: Dict[str, List[Event]] = defaultdict(list)
        self._all: List[Event] = []
        self._sequence = 0

    def next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def append_events(self, aggregate_id: str, events: Sequence[Event]) -> None:
        for event in events:
            if event.aggregate_id != aggregate_id:
                raise InvalidArgument(
                    "Event belongs to another aggregate",
                    [f"Expected {aggregate_id}, got {event.aggregate_id}"],
                    {"participant": "EventStore", "operation": "append_events"},
                )
        for event in events:
            self._by_aggregate[aggregate_id].append(event)
            self._all.append(event)
        logger.debug("appended %d event(s) to %s", len(events), aggregate_id)

    def get_events(self, aggregate_id: str) -> List[Event]:
        return list(self._by_aggregate.get(aggregate_id, ()))

    def get_all_events(self) -> List[Event]:
        return sorted(self._all, key=lambda e: (e.timestamp, e.sequence))

    def aggregate_ids(self) -> List[str]:
        return list(self._by_aggregate)

    def __len__(self) -> int:
        return len(self._all)


# -----------------------------------------------------------------------------
# Aggregate
# -----------------------------------------------------------------------------


class BankAccount:
    def __init__(self, account_id: str = ""):
        self.id = account_id
        self.owner = ""
        self.balance = 0.0
        self.closed = False
        self.version = 0

    def apply(self, event: Event) -> None:
        if isinstance(event, AccountOpened):
            self.id = event.aggregate_id
            self.owner = event.owner
            self.balance = event.initial_balance
            self.closed = False
        elif isinstance(event, MoneyDeposited):
            self.balance += event.amount
        elif isinstance(event, MoneyWithdrawn):
            self.balance -= event.amount
        elif isinstance(event, AccountClosed):
            self.closed = True
        self.version += 1

    @classmethod
    def from_events(cls, events: Sequence[Event]) -> "BankAccount":
        account = cls()
        for event in events:
            account.apply(event)
        return account

    def __repr__(self) -> str:
        return (
            f"BankAccount(id={self.id}, owner={self.owner}, balance={self.balance:.2f}, "
            f"closed={self.closed}, version={self.version})"
        )


# -----------------------------------------------------------------------------
# Command Handler
# -----------------------------------------------------------------------------


def _rejected(message: str, command: Command) -> PreconditionFailed:
    return PreconditionFailed(message, [], {"participant": "AccountCommandHandler", "operation": type(command).__name__})


class AccountCommandHandler:
    """Validates commands against replayed state and appends their events.

    `handle()` raises on a broken rule. The verb methods (`open`, `deposit`,
    `withdraw`, `close`) narrate the outcome and return whether it worked.
    """

    def __init__(self, store: EventStore, narrator: Narrator, clock: Callable[[], float]):
        self.store = store
        self.narrator = narrator
        self.clock = clock
        self._ids = 0

    def new_account_id(self) -> str:
        self._ids += 1
        return f"UUID-{self._ids}"

    def _stamp(self) -> Dict[str, float]:
        return {"timestamp": self.clock(), "sequence": self.store.next_sequence()}

    def _load(self, command: Command) -> BankAccount:
        events = self.store.get_events(command.account_id)
        if not events:
            raise NotFound(
                "Account does not exist",
                [f"Open {command.account_id} first"],
                {"participant": "AccountCommandHandler", "operation": type(command).__name__},
            )
        return BankAccount.from_events(events)

    def handle(self, command: Command) -> List[Event]:
        if isinstance(command, OpenAccount):
            if command.initial_balance < 0:
                raise InvalidArgument("Initial balance cannot be negative")
            if self.store.get_events(command.account_id):
                raise _rejected("Account already exists", command)
            events = [AccountOpened(aggregate_id=command.account_id, owner=command.owner,
                                    initial_balance=command.initial_balance, **self._stamp())]
        elif isinstance(command, DepositMoney):
            if command.amount <= 0:
                raise InvalidArgument("Deposit amount must be positive")
            if self._load(command).closed:
                raise _rejected("Cannot deposit to closed account", command)
            events = [MoneyDeposited(aggregate_id=command.account_id, amount=command.amount, **self._stamp())]
        elif isinstance(command, WithdrawMoney):
            if command.amount <= 0:
                raise InvalidArgument("Withdrawal amount must be positive")
            account = self._load(command)
            if account.closed:
                raise _rejected("Cannot withdraw from closed account", command)
            if account.balance < command.amount:
                raise _rejected("Insufficient funds", command)
            events = [MoneyWithdrawn(aggregate_id=command.account_id, amount=command.amount, **self._stamp())]
        elif isinstance(command, CloseAccount):
            account = self._load(command)
            if account.closed:
                raise _rejected("Account is already closed", command)
            events = [AccountClosed(aggregate_id=command.account_id, final_balance=account.balance, **self._stamp())]
        else:
            raise InvalidArgument(f"Unknown command type: {type(command).__name__}")
        self.store.append_events(command.account_id, events)
        return events

    def _attempt(self, command: Command, success: str) -> bool:
        try:
            self.handle(command)
        except CatalogError as exc:
            self.narrator.say(f"✗ {exc.message}")
            return False
        self.narrator.say(f"✓ {success}")
        return True

    def open(self, account_id: str, owner: str, initial_balance: float) -> bool:
        return self._attempt(
            OpenAccount(account_id=account_id, owner=owner, initial_balance=initial_balance),
            f"Account opened for {owner} (ID: {account_id})",
        )

    def deposit(self, account_id: str, amount: float) -> bool:
        return self._attempt(DepositMoney(account_id=account_id, amount=amount), f"Deposited ${amount:,.2f} to {account_id}")

    def withdraw(self, account_id: str, amount: float) -> bool:
        return self._attempt(WithdrawMoney(account_id=account_id, amount=amount), f"Withdrew ${amount:,.2f} from {account_id}")

    def close(self, account_id: str) -> bool:
        return self._attempt(CloseAccount(account_id=account_id), f"Account {account_id} closed")

    def get_account_state(self, account_id: str) -> Optional[BankAccount]:
        events = self.store.get_events(account_id)
        return BankAccount.from_events(events) if events else None

    def replay_until(self, account_id: str, count: int) -> Optional[BankAccount]:
        """State of the account after its first `count` events."""
        events = self.store.get_events(account_id)[: max(count, 0)]
        return BankAccount.from_events(events) if events else None


# -----------------------------------------------------------------------------
# Projection
# -----------------------------------------------------------------------------


class AccountSummary(BaseModel):
    account_id: str = ""
    owner: str = ""
    balance: float = 0.0
    total_deposits: float = 0.0
    total_withdrawals: float = 0.0
    transactions: int = 0
    closed: bool = False

    def record(self, event: Event) -> None:
        if isinstance(event, AccountOpened):
            self.account_id = event.aggregate_id
            self.owner = event.owner
            self.balance = event.initial_balance
            self.total_deposits = event.initial_balance
        elif isinstance(event, MoneyDeposited):
            self.balance += event.amount
            self.total_deposits += event.amount
        elif isinstance(event, MoneyWithdrawn):
            self.balance -= event.amount
            self.total_withdrawals += event.amount
        elif isinstance(event, AccountClosed):
            self.closed = True
        self.transactions += 1


class AccountSummaryProjection:
    """Read model built from the full log."""

    def __init__(self, store: EventStore):
        self.store = store
        self.summaries: Dict[str, AccountSummary] = {}
        self.rebuild()

    def rebuild(self) -> None:
        self.summaries = {}
        for event in self.store.get_all_events():
            self.summaries.setdefault(event.aggregate_id, AccountSummary()).record(event)

    def summary(self, account_id: str) -> Optional[AccountSummary]:
        return self.summaries.get(account_id)

    @property
    def total_balance(self) -> float:
        return sum(s.balance for s in self.summaries.values() if not s.closed)

    @property
    def total_deposits(self) -> float:
        return sum(s.total_deposits for s in self.summaries.values())

    @property
    def total_withdrawals(self) -> float:
        return sum(s.total_withdrawals for s in self.summaries.values())

    @property
    def open_accounts(self) -> int:
        return sum(1 for s in self.summaries.values() if not s.closed)


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("event_sourcing", "Event Sourcing", "architectural", "Bank accounts rebuilt from an event log")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Event Sourcing Pattern Demo ===\n")

    store = EventStore()
    handler = AccountCommandHandler(store, narrator, ctx.clock)
    alice, bob = handler.new_account_id(), handler.new_account_id()

    say("1. Opening bank accounts:")
    handler.open(alice, "Alice Johnson", 1000.0)
    handler.open(bob, "Bob Smith", 500.0)
    handler.open(alice, "Alice Again", 10.0)

    say("\n2. Performing transactions:")
    ctx.sleep(100)
    handler.deposit(alice, 250.0)
    ctx.sleep(100)
    handler.withdraw(bob, 100.0)
    ctx.sleep(100)
    handler.deposit(alice, 500.0)

    say("\n3. Current account states:")
    for name, account_id in (("Alice", alice), ("Bob", bob)):
        state = handler.get_account_state(account_id)
        if state is not None:
            say(f"{name}'s account: ${state.balance:.2f} ({'Closed' if state.closed else 'Open'})")

    say("\n4. Event history (Alice's account):")
    alice_events = store.get_events(alice)
    for number, event in enumerate(alice_events, 1):
        say(f"Event {number}: {event.event_type} at {event.formatted_timestamp}")
        say(f"  {event.describe()}")

    say("\n5. Account summary (projection):")
    projection = AccountSummaryProjection(store)
    summary = projection.summary(alice)
    say("Alice's Summary:")
    say(f"  Total deposits: ${summary.total_deposits:.2f}")
    say(f"  Total withdrawals: ${summary.total_withdrawals:.2f}")
    say(f"  Transaction count: {summary.transactions}")
    say(f"  Current balance: ${summary.balance:.2f}")

    say("\n6. Testing business rules:")
    ctx.sleep(100)
    handler.withdraw(bob, 1000.0)
    handler.deposit(bob, -5.0)
    handler.close(bob)
    handler.deposit(bob, 50.0)
    handler.deposit("UUID-99", 10.0)

    say("\n7. Time travel:")
    for count in range(1, len(alice_events) + 1):
        state = handler.replay_until(alice, count)
        say(f"After {count} event(s): ${state.balance:.2f}")

    say("\n8. All events in chronological order:")
    for number, event in enumerate(store.get_all_events(), 1):
        say(f"{number}. {event.formatted_timestamp} - {event.event_type} (Account: {event.aggregate_id})")
    say(f"\nTotal events stored: {len(store)}")

    projection.rebuild()
    say(f"Open accounts: {projection.open_accounts}, money held: ${projection.total_balance:,.2f}")

    say("\n✅ Event Sourcing provides complete audit trail and allows")
    say("   reconstruction of state at any point in time!")


if __name__ == "__main__":
    sys.exit(run_standalone("event_sourcing"))
