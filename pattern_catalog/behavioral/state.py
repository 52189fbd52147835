r"""State pattern.

The canonical machine is a vending machine with four states:

  | State       | Event              | Guard                             | Next       |
  |-------------|--------------------|-----------------------------------|------------|
  | Idle        | insert_coin(n)     | n > 0                             | HasMoney   |
  | HasMoney    | insert_coin(n)     | n > 0                             | HasMoney   |
  | HasMoney    | select_product(i)  | valid id, stock > 0, funds        | Dispensing |
  | HasMoney    | cancel()           |                                   | Idle       |
  | Dispensing  | dispense()         |                                   | Idle       |
  | any         | set_out_of_order() |                                   | OutOfOrder |
  | OutOfOrder  | reset()            |                                   | Idle       |

Every other combination is rejected with a line explaining why. A
transition prints its state-change line before any of its effects. Money is
kept in cents.

\dot
digraph VendingMachine {
    node [shape=ellipse];
    Idle -> HasMoney [label="insert_coin"];
    HasMoney -> HasMoney [label="insert_coin"];
    HasMoney -> Dispensing [label="select_product"];
    HasMoney -> Idle [label="cancel"];
    Dispensing -> Idle [label="dispense"];
    OutOfOrder -> Idle [label="reset"];
}
\enddot
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, InvalidArgument, Narrator, PreconditionFailed

__all__ = [
    "money",
    "VendingState",
    "IdleState",
    "HasMoneyState",
    "DispensingState",
    "OutOfOrderState",
    "VendingMachine",
    "TrafficLightState",
    "TrafficLight",
    "CharacterState",
    "GameCharacter",
]

logger = logging.getLogger(__name__)

DEFAULT_PRODUCTS: Tuple[Tuple[str, int], ...] = (
    ("Coca Cola", 150),
    ("Pepsi", 150),
    ("Water", 100),
    ("Chips", 125),
    ("Candy", 75),
)
DEFAULT_INVENTORY: Tuple[int, ...] = (5, 5, 10, 3, 8)


def money(cents: int) -> str:
    """Format cents as dollars."""
    return f"${cents / 100:.2f}"


# -----------------------------------------------------------------------------
# Vending Machine States
# -----------------------------------------------------------------------------


class VendingState(ABC):
    """Behaviour of the machine in one state.

    Handlers raise `InvalidArgument` or `PreconditionFailed` to reject an
    event; the machine narrates the reason and leaves its state unchanged.
    """

    name = ""

    def insert_coin(self, machine: "VendingMachine", cents: int) -> None:
        raise PreconditionFailed(f"Cannot insert coins while {self.name}")

    def select_product(self, machine: "VendingMachine", product_id: int) -> None:
        raise PreconditionFailed(f"Cannot select a product while {self.name}")

    @abstractmethod
    def dispense(self, machine: "VendingMachine") -> None: ...

    @abstractmethod
    def cancel(self, machine: "VendingMachine") -> None: ...

    def __repr__(self) -> str:
        return self.name


def _check_coin(cents: int) -> None:
    if cents <= 0:
        raise InvalidArgument("Invalid coin amount", context={"operation": "insert_coin"})


class IdleState(VendingState):
    name = "Idle"

    def insert_coin(self, machine, cents):
        _check_coin(cents)
        machine.transition(HasMoneyState())
        machine.balance += cents
        machine.narrator.say(f"Coin inserted: {money(cents)}")

    def select_product(self, machine, product_id):
        raise PreconditionFailed("Please insert money first")

    def dispense(self, machine):
        raise PreconditionFailed("No product selected and no money inserted")

    def cancel(self, machine):
        raise PreconditionFailed("Nothing to cancel")


class HasMoneyState(VendingState):
    name = "HasMoney"

    def insert_coin(self, machine, cents):
        _check_coin(cents)
        machine.balance += cents
        machine.narrator.say(f"Additional coin inserted: {money(cents)}")
        machine.narrator.say(f"Total balance: {money(machine.balance)}")

    def select_product(self, machine, product_id):
        if not 0 <= product_id < len(machine.products):
            raise InvalidArgument(
                "Invalid product selection",
                [f"Choose a product between 0 and {len(machine.products) - 1}"],
                {"operation": "select_product"},
            )
        product, price = machine.products[product_id]
        if machine.inventory[product_id] <= 0:
            raise PreconditionFailed(f"Product out of stock: {product}")
        if machine.balance < price:
            raise PreconditionFailed(
                f"Insufficient funds. Need {money(price - machine.balance)} more"
            )
        machine.transition(DispensingState())
        machine.selected = product_id
        machine.narrator.say(f"Product selected: {product}")

    def dispense(self, machine):
        raise PreconditionFailed("Please select a product first")

    def cancel(self, machine):
        refund = machine.balance
        machine.transition(IdleState())
        machine.refund(refund)
        machine.narrator.say(f"Transaction cancelled. Refund: {money(refund)}")


class DispensingState(VendingState):
    name = "Dispensing"

    def insert_coin(self, machine, cents):
        raise PreconditionFailed("Please wait, dispensing product...")

    def select_product(self, machine, product_id):
        raise PreconditionFailed("Already dispensing a product")

    def dispense(self, machine):
        product_id = machine.selected
        assert product_id is not None
        product, price = machine.products[product_id]
        machine.transition(IdleState())
        machine.narrator.say(f"Dispensing {product}...")
        machine.narrator.pause(1000)
        machine.balance -= price
        machine.inventory[product_id] -= 1
        machine.selected = None
        machine.narrator.say("Product dispensed!")
        change = machine.balance
        if change > 0:
            machine.refund(change)
            machine.narrator.say(f"Change returned: {money(change)}")

    def cancel(self, machine):
        raise PreconditionFailed("Cannot cancel while dispensing")


class OutOfOrderState(VendingState):
    name = "OutOfOrder"

    def insert_coin(self, machine, cents):
        raise PreconditionFailed(f"Machine is out of order. Coin returned: {money(cents)}")

    def select_product(self, machine, product_id):
        raise PreconditionFailed("Machine is out of order")

    def dispense(self, machine):
        raise PreconditionFailed("Machine is out of order")

    def cancel(self, machine):
        raise PreconditionFailed("Machine is out of order")


# -----------------------------------------------------------------------------
# Vending Machine
# -----------------------------------------------------------------------------


class VendingMachine:
    """Coordinator holding balance, selection, inventory and state."""

    def __init__(
        self,
        narrator: Narrator,
        products: Tuple[Tuple[str, int], ...] = DEFAULT_PRODUCTS,
        inventory: Tuple[int, ...] = DEFAULT_INVENTORY,
    ):
        self.narrator = narrator
        self.products = list(products)
        self.inventory = list(inventory)
        self.balance = 0
        self.selected: Optional[int] = None
        self.refunds: List[int] = []
        self.rejections: List[str] = []
        self._state: VendingState = IdleState()

    @property
    def state(self) -> str:
        return self._state.name

    def transition(self, state: VendingState) -> None:
        self.narrator.say(f"State changed to: {state.name}")
        self._state = state

    def refund(self, cents: int) -> None:
        self.refunds.append(cents)
        self.balance -= cents

    def _dispatch(self, event: str, *args) -> bool:
        try:
            getattr(self._state, event)(self, *args)
        except (InvalidArgument, PreconditionFailed) as exc:
            self.rejections.append(exc.message)
            self.narrator.say(exc.message)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("%s rejected in %s: %s", event, self.state, exc.message)
            return False
        return True

    # -----------------------------------------------------------------------------
    # Events
    # -----------------------------------------------------------------------------

    def insert_coin(self, cents: int) -> bool:
        return self._dispatch("insert_coin", cents)

    def select_product(self, product_id: int) -> bool:
        return self._dispatch("select_product", product_id)

    def dispense(self) -> bool:
        return self._dispatch("dispense")

    def cancel(self) -> bool:
        return self._dispatch("cancel")

    def set_out_of_order(self) -> None:
        self.transition(OutOfOrderState())

    def reset(self) -> bool:
        """Leave OutOfOrder; any held balance is refunded."""
        if not isinstance(self._state, OutOfOrderState):
            self.rejections.append("Machine is not out of order")
            self.narrator.say("Machine is not out of order")
            return False
        refund = self.balance
        self.selected = None
        self.transition(IdleState())
        if refund:
            self.refund(refund)
            self.narrator.say(f"Refund: {money(refund)}")
        return True

    def restock(self, product_id: int, quantity: int) -> None:
        if not 0 <= product_id < len(self.products) or quantity <= 0:
            raise InvalidArgument(
                "Invalid restock request",
                context={"operation": "restock", "participant": "VendingMachine"},
            )
        self.inventory[product_id] += quantity
        self.narrator.say(f"Restocked {self.products[product_id][0]}: +{quantity}")

    def display_status(self) -> None:
        say = self.narrator.say
        say("--- Vending Machine Status ---")
        say(f"Current State: {self.state}")
        say(f"Balance: {money(self.balance)}")
        say("Products:")
        for index, ((product, price), stock) in enumerate(zip(self.products, self.inventory)):
            say(f"  {index}: {product} - {money(price)} (Stock: {stock})")
        say("----------------------------")


# -----------------------------------------------------------------------------
# Traffic Light
# -----------------------------------------------------------------------------


class TrafficLightState:
    color = ""
    duration = 0

    def next(self) -> "TrafficLightState":
        raise NotImplementedError


class RedLight(TrafficLightState):
    color, duration = "RED", 10

    def next(self):
        return GreenLight()


class GreenLight(TrafficLightState):
    color, duration = "GREEN", 15

    def next(self):
        return YellowLight()


class YellowLight(TrafficLightState):
    color, duration = "YELLOW", 3

    def next(self):
        return RedLight()


class TrafficLight:
    """One `update` is one simulated second."""

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._state: TrafficLightState = RedLight()
        self.time_remaining = self._state.duration

    @property
    def color(self) -> str:
        return self._state.color

    def update(self) -> None:
        if self.time_remaining > 0:
            self.time_remaining -= 1
            self.narrator.say(f"Traffic light: {self.color} ({self.time_remaining}s remaining)")
        else:
            state = self._state.next()
            self.narrator.say(f"Traffic light changed to: {state.color} ({state.duration}s)")
            self._state = state
            self.time_remaining = state.duration


# -----------------------------------------------------------------------------
# Game Character
# -----------------------------------------------------------------------------


class CharacterState:
    name = ""

    def handle_input(self, character: "GameCharacter", command: str) -> None:
        pass

    def update(self, character: "GameCharacter") -> None:
        pass


class CharacterIdle(CharacterState):
    name = "Idle"

    def handle_input(self, character, command):
        if command == "move":
            character.transition(Moving())
        elif command == "jump":
            character.transition(Jumping())
        elif command == "attack":
            character.transition(Attacking())
        elif command == "die":
            character.transition(Dead())
            character.health = 0

    def update(self, character):
        character.mana += 1


class Moving(CharacterState):
    name = "Moving"

    def __init__(self):
        self.remaining = 3

    def handle_input(self, character, command):
        if command == "stop":
            character.transition(CharacterIdle())
        elif command == "jump":
            character.transition(Jumping())
        elif command == "attack":
            character.transition(Attacking())

    def update(self, character):
        self.remaining -= 1
        character.narrator.say(f"Moving... ({self.remaining} seconds remaining)")
        if self.remaining <= 0:
            character.transition(CharacterIdle())


class Jumping(CharacterState):
    name = "Jumping"

    def __init__(self):
        self.remaining = 2

    def handle_input(self, character, command):
        if command == "attack":
            character.transition(Attacking())

    def update(self, character):
        character.is_jumping = True
        self.remaining -= 1
        character.narrator.say(f"Jumping... ({self.remaining} seconds remaining)")
        if self.remaining <= 0:
            character.transition(CharacterIdle())
            character.is_jumping = False


class Attacking(CharacterState):
    name = "Attacking"

    def __init__(self):
        self.remaining = 2

    def update(self, character):
        character.is_attacking = True
        character.mana -= 5
        self.remaining -= 1
        character.narrator.say(f"Attacking... ({self.remaining} seconds remaining)")
        if self.remaining <= 0:
            character.transition(CharacterIdle())
            character.is_attacking = False


class Dead(CharacterState):
    name = "Dead"

    def handle_input(self, character, command):
        if command == "respawn":
            character.transition(CharacterIdle())
            character.health = 100
            character.mana = 100
            character.narrator.say("Character respawned!")


class GameCharacter:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._health = 100
        self._mana = 100
        self.is_jumping = False
        self.is_attacking = False
        self._state: CharacterState = CharacterIdle()

    @property
    def health(self) -> int:
        return self._health

    @health.setter
    def health(self, value: int) -> None:
        self._health = max(0, value)

    @property
    def mana(self) -> int:
        return self._mana

    @mana.setter
    def mana(self, value: int) -> None:
        self._mana = max(0, min(100, value))

    @property
    def state(self) -> str:
        return self._state.name

    def transition(self, state: CharacterState) -> None:
        self.narrator.say(f"Character state: {state.name}")
        self._state = state

    def handle_input(self, command: str) -> None:
        self._state.handle_input(self, command)

    def update(self) -> None:
        self._state.update(self)

    def display_status(self) -> None:
        self.narrator.say(
            f"Character Status - State: {self.state}, Health: {self.health}, "
            f"Mana: {self.mana}, Jumping: {'Yes' if self.is_jumping else 'No'}, "
            f"Attacking: {'Yes' if self.is_attacking else 'No'}"
        )


# -----------------------------------------------------------------------------
# Script
# -----------------------------------------------------------------------------


@register_demo("state", "State Pattern", "behavioral", "Vending machine, traffic light, game character")
def demo(ctx: DemoContext) -> None:
    say = ctx.say
    say("=== State Pattern Demo ===")

    say("\n1. Vending Machine State Machine:")
    say("=" * 50)
    machine = VendingMachine(ctx.narrator)
    machine.display_status()
    say("\nTesting vending machine operations:")
    machine.select_product(0)
    machine.insert_coin(100)
    machine.select_product(0)
    machine.insert_coin(75)
    machine.select_product(0)
    machine.dispense()
    machine.display_status()
    say("\nTesting cancellation:")
    machine.insert_coin(200)
    machine.cancel()
    say("\nTesting out-of-order handling:")
    machine.set_out_of_order()
    machine.insert_coin(100)
    machine.reset()

    say("\n\n2. Traffic Light State Machine:")
    say("=" * 50)
    light = TrafficLight(ctx.narrator)
    say("Simulating traffic light for 30 seconds:")
    for _ in range(30):
        light.update()
        ctx.sleep(100)

    say("\n\n3. Game Character State Machine:")
    say("=" * 50)
    character = GameCharacter(ctx.narrator)
    character.display_status()
    say("\nSimulating character actions:")
    for command, ticks in (("move", 3), ("jump", 2), ("attack", 2)):
        character.handle_input(command)
        character.display_status()
        for _ in range(ticks):
            character.update()
            character.display_status()
    say("\nKilling character and respawning:")
    character.handle_input("die")
    character.display_status()
    character.handle_input("respawn")
    character.display_status()

    say("\n\n4. Complex State Transition Scenario:")
    say("=" * 50)
    second = VendingMachine(ctx.narrator)
    say("Customer inserts $2.00:")
    second.insert_coin(200)
    say("\nCustomer selects product 1 (Pepsi - $1.50):")
    second.select_product(1)
    say("\nCustomer tries to cancel during dispensing:")
    second.cancel()
    say("\nMachine dispenses product:")
    second.dispense()
    second.display_status()


if __name__ == "__main__":
    sys.exit(run_standalone("state"))
