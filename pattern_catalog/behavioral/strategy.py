r"""Strategy pattern.

A context delegates one step of its work to an interchangeable strategy
object. Four contexts are shown: sorting, payment processing, cart discounts
(strategies as plain callables) and a game AI whose balanced strategy draws
from the run's seeded generator.
"""

from __future__ import annotations

import random
import sys
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, Narrator

__all__ = [
    "SortStrategy",
    "BubbleSort",
    "QuickSort",
    "BuiltinSort",
    "SortContext",
    "PaymentStrategy",
    "CreditCardPayment",
    "PayPalPayment",
    "BankTransferPayment",
    "PaymentProcessor",
    "DiscountStrategy",
    "no_discount",
    "percentage_discount",
    "bulk_discount",
    "buy_two_get_one_free",
    "tiered_discount",
    "CartItem",
    "ShoppingCart",
    "GameAIStrategy",
    "AggressiveAI",
    "DefensiveAI",
    "BalancedAI",
    "GameEngine",
]


# -----------------------------------------------------------------------------
# Sorting
# -----------------------------------------------------------------------------


class SortStrategy(ABC):
    name = ""

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.comparisons = 0

    @abstractmethod
    def _sort(self, data: List[int]) -> None: ...

    def sort(self, data: List[int]) -> None:
        """Sort `data` in place."""
        self.comparisons = 0
        self.narrator.say(f"Performing {self.name}...")
        self._sort(data)
        self.narrator.say(f"{self.name} completed ({self.comparisons} comparisons)")


class BubbleSort(SortStrategy):
    name = "Bubble Sort"

    def _sort(self, data):
        for i in range(len(data)):
            for j in range(len(data) - i - 1):
                self.comparisons += 1
                if data[j] > data[j + 1]:
                    data[j], data[j + 1] = data[j + 1], data[j]


class QuickSort(SortStrategy):
    name = "Quick Sort"

    def _sort(self, data):
        self._quick_sort(data, 0, len(data) - 1)

    def _quick_sort(self, data, low, high):
        if low < high:
            pivot = self._partition(data, low, high)
            self._quick_sort(data, low, pivot - 1)
            self._quick_sort(data, pivot + 1, high)

    def _partition(self, data, low, high):
        pivot = data[high]
        i = low - 1
        for j in range(low, high):
            self.comparisons += 1
            if data[j] < pivot:
                i += 1
                data[i], data[j] = data[j], data[i]
        data[i + 1], data[high] = data[high], data[i + 1]
        return i + 1


class BuiltinSort(SortStrategy):
    name = "Builtin Sort"

    def _sort(self, data):
        data.sort()


class SortContext:
    def __init__(self, narrator: Narrator, strategy: Optional[SortStrategy] = None):
        self.narrator = narrator
        self.strategy = strategy

    def execute_sort(self, data: List[int]) -> bool:
        if self.strategy is None:
            self.narrator.say("No sorting strategy set!")
            return False
        self.narrator.say(f"Using strategy: {self.strategy.name}")
        self.strategy.sort(data)
        return True


# -----------------------------------------------------------------------------
# Payments
# -----------------------------------------------------------------------------


class PaymentStrategy(ABC):
    method = ""
    delay_ms = 0

    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    @abstractmethod
    def processing_fee(self, amount: float) -> float: ...

    @abstractmethod
    def _describe(self) -> str: ...

    def pay(self, amount: float) -> bool:
        self.narrator.say(f"Processing {self.method.lower()} payment of ${amount:.2f}")
        self.narrator.say(self._describe())
        self.narrator.pause(self.delay_ms)
        self.narrator.say(f"{self.method} payment successful!")
        return True


class CreditCardPayment(PaymentStrategy):
    method = "Credit Card"
    delay_ms = 500

    def __init__(self, card_number: str, holder: str, narrator: Narrator):
        super().__init__(narrator)
        self.card_number = card_number
        self.holder = holder

    def processing_fee(self, amount):
        return amount * 0.029

    def _describe(self):
        return f"Card: ****{self.card_number[-4:]} ({self.holder})"


class PayPalPayment(PaymentStrategy):
    method = "PayPal"
    delay_ms = 300

    def __init__(self, email: str, narrator: Narrator):
        super().__init__(narrator)
        self.email = email

    def processing_fee(self, amount):
        return amount * 0.034

    def _describe(self):
        return f"PayPal account: {self.email}"


class BankTransferPayment(PaymentStrategy):
    method = "Bank Transfer"
    delay_ms = 1000

    def __init__(self, account_number: str, routing_number: str, narrator: Narrator):
        super().__init__(narrator)
        self.account_number = account_number
        self.routing_number = routing_number

    def processing_fee(self, amount):
        return 0.50

    def _describe(self):
        return f"Account: ****{self.account_number[-4:]} (Routing: {self.routing_number})"


class PaymentProcessor:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.strategy: Optional[PaymentStrategy] = None

    def process(self, amount: float) -> bool:
        if self.strategy is None:
            self.narrator.say("No payment method selected!")
            return False
        fee = self.strategy.processing_fee(amount)
        total = amount + fee
        say = self.narrator.say
        say("\n--- Payment Processing ---")
        say(f"Method: {self.strategy.method}")
        say(f"Amount: ${amount:.2f}")
        say(f"Processing Fee: ${fee:.2f}")
        say(f"Total: ${total:.2f}")
        say("-" * 26)
        return self.strategy.pay(total)


# -----------------------------------------------------------------------------
# Discounts (functional strategies)
# -----------------------------------------------------------------------------

DiscountStrategy = Callable[[float, int], float]


def no_discount() -> DiscountStrategy:
    return lambda price, quantity: 0.0


def percentage_discount(percentage: float) -> DiscountStrategy:
    return lambda price, quantity: price * quantity * (percentage / 100.0)


def bulk_discount(threshold: int, per_item: float) -> DiscountStrategy:
    return lambda price, quantity: quantity * per_item if quantity >= threshold else 0.0


def buy_two_get_one_free() -> DiscountStrategy:
    return lambda price, quantity: (quantity // 3) * price


def tiered_discount() -> DiscountStrategy:
    def discount(price: float, quantity: int) -> float:
        total = price * quantity
        if total >= 100.0:
            return total * 0.15
        if total >= 50.0:
            return total * 0.10
        if total >= 25.0:
            return total * 0.05
        return 0.0

    return discount


class CartItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)

    @property
    def total(self) -> float:
        return self.price * self.quantity


class ShoppingCart:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.items: List[CartItem] = []
        self.discount: DiscountStrategy = no_discount()

    def add_item(self, name: str, price: float, quantity: int) -> None:
        self.items.append(CartItem(name=name, price=price, quantity=quantity))

    def subtotal(self) -> float:
        return sum(item.total for item in self.items)

    def total_discount(self) -> float:
        return sum(self.discount(item.price, item.quantity) for item in self.items)

    def total(self) -> float:
        return self.subtotal() - self.total_discount()

    def print_receipt(self) -> None:
        say = self.narrator.say
        say("\n--- Shopping Cart Receipt ---")
        for item in self.items:
            say(f"{item.name} x{item.quantity} @ ${item.price:.2f} = ${item.total:.2f}")
            item_discount = self.discount(item.price, item.quantity)
            if item_discount > 0:
                say(f"  Discount: -${item_discount:.2f}")
        say("-" * 28)
        say(f"Subtotal: ${self.subtotal():.2f}")
        say(f"Total Discount: -${self.total_discount():.2f}")
        say(f"TOTAL: ${self.total():.2f}")
        say("=" * 29)


# -----------------------------------------------------------------------------
# Game AI
# -----------------------------------------------------------------------------


class GameAIStrategy(ABC):
    name = ""
    difficulty = 0

    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    @abstractmethod
    def make_move(self, game_state: List[str]) -> str: ...


class AggressiveAI(GameAIStrategy):
    name, difficulty = "Aggressive AI", 7

    def make_move(self, game_state):
        self.narrator.say("AI thinking aggressively...")
        return "ATTACK_STRONGEST_ENEMY"


class DefensiveAI(GameAIStrategy):
    name, difficulty = "Defensive AI", 5

    def make_move(self, game_state):
        self.narrator.say("AI thinking defensively...")
        return "FORTIFY_WEAKEST_POSITION"


class BalancedAI(GameAIStrategy):
    name, difficulty = "Balanced AI", 8
    MOVES = ("ATTACK_OPPORTUNITY_TARGET", "DEFEND_KEY_POSITION", "EXPAND_TERRITORY")

    def __init__(self, narrator: Narrator, rng: random.Random):
        super().__init__(narrator)
        self.rng = rng

    def make_move(self, game_state):
        self.narrator.say("AI calculating balanced strategy...")
        return self.rng.choice(self.MOVES)


class GameEngine:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.strategy: Optional[GameAIStrategy] = None
        self.moves: List[str] = []

    def set_strategy(self, strategy: GameAIStrategy) -> None:
        self.strategy = strategy
        self.narrator.say(
            f"AI Strategy changed to: {strategy.name} (Difficulty: {strategy.difficulty}/10)"
        )

    def play_turn(self) -> Optional[str]:
        if self.strategy is None:
            self.narrator.say("No AI strategy set!")
            return None
        self.narrator.say("\n--- AI Turn ---")
        move = self.strategy.make_move(["PLAYER_HP_75", "ENEMY_HP_60", "RESOURCES_HIGH"])
        self.moves.append(move)
        self.narrator.say(f"AI Decision: {move}")
        self.narrator.say("Turn completed.")
        return move


# -----------------------------------------------------------------------------
# Script
# -----------------------------------------------------------------------------


@register_demo("strategy", "Strategy Pattern", "behavioral", "Sorting, payments, discounts, game AI")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Strategy Pattern Demo ===")

    say("\n1. Sorting Strategies:")
    say("=" * 50)
    data = [64, 34, 25, 12, 22, 11, 90, 88, 76, 50]
    say("Original data: " + " ".join(map(str, data)))
    sorter = SortContext(narrator)
    sorter.execute_sort(list(data))
    for strategy in (BubbleSort(narrator), QuickSort(narrator), BuiltinSort(narrator)):
        sorted_data = list(data)
        sorter.strategy = strategy
        sorter.execute_sort(sorted_data)
        say("Sorted data: " + " ".join(map(str, sorted_data)))
        say()

    say("\n2. Payment Processing Strategies:")
    say("=" * 50)
    processor = PaymentProcessor(narrator)
    processor.process(100.00)
    for method in (
        CreditCardPayment("1234567890123456", "John Doe", narrator),
        PayPalPayment("john.doe@example.com", narrator),
        BankTransferPayment("9876543210", "123456789", narrator),
    ):
        processor.strategy = method
        processor.process(100.00)
        say()

    say("\n3. Shopping Cart with Discount Strategies:")
    say("=" * 50)
    cart = ShoppingCart(narrator)
    cart.add_item("Laptop", 999.99, 1)
    cart.add_item("Mouse", 29.99, 2)
    cart.add_item("Keyboard", 79.99, 1)
    for title, discount in (
        ("No discount:", no_discount()),
        ("\n10% discount:", percentage_discount(10.0)),
        ("\nBulk discount (2+ items get $5 off each):", bulk_discount(2, 5.0)),
        ("\nBuy 2 get 1 free:", buy_two_get_one_free()),
        ("\nTiered discount (5%/10%/15% based on item total):", tiered_discount()),
    ):
        say(title)
        cart.discount = discount
        cart.print_receipt()

    say("\n4. Game AI Strategies:")
    say("=" * 50)
    game = GameEngine(narrator)
    for ai in (AggressiveAI(narrator), DefensiveAI(narrator), BalancedAI(narrator, ctx.rng)):
        game.set_strategy(ai)
        game.play_turn()
        say()
    say("\nDynamic AI Strategy Switching:")
    game.set_strategy(AggressiveAI(narrator))
    game.play_turn()
    say("\nPlayer health low, switching to defensive...")
    game.set_strategy(DefensiveAI(narrator))
    game.play_turn()
    say("\nGame balanced, switching to balanced strategy...")
    game.set_strategy(BalancedAI(narrator, ctx.rng))
    game.play_turn()


if __name__ == "__main__":
    sys.exit(run_standalone("strategy"))
