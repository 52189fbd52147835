import random

import pytest
from pydantic import ValidationError

from pattern_catalog.behavioral.strategy import (
    AggressiveAI,
    BalancedAI,
    BankTransferPayment,
    BubbleSort,
    BuiltinSort,
    CreditCardPayment,
    GameEngine,
    PaymentProcessor,
    PayPalPayment,
    QuickSort,
    ShoppingCart,
    SortContext,
    buy_two_get_one_free,
    bulk_discount,
    percentage_discount,
    tiered_discount,
)


@pytest.mark.parametrize("strategy_cls", [BubbleSort, QuickSort, BuiltinSort])
def test_sort_strategies_agree(narrator, strategy_cls):
    data = [64, 34, 25, 12, 22, 11, 90, 5]
    context = SortContext(narrator, strategy_cls(narrator))
    assert context.execute_sort(data)
    assert data == sorted([64, 34, 25, 12, 22, 11, 90, 5])


def test_sort_without_strategy(narrator):
    assert not SortContext(narrator).execute_sort([3, 1])
    assert "No sorting strategy set!" in narrator


def test_bubble_sort_counts_comparisons(narrator):
    strategy = BubbleSort(narrator)
    strategy.sort([3, 2, 1])
    assert strategy.comparisons == 3


class TestPayments:
    def test_fees(self, narrator):
        assert CreditCardPayment("1234567890123456", "A", narrator).processing_fee(100) == pytest.approx(2.9)
        assert PayPalPayment("a@b.c", narrator).processing_fee(100) == pytest.approx(3.4)
        assert BankTransferPayment("987654321", "021", narrator).processing_fee(100) == 0.5

    def test_processor_charges_amount_plus_fee(self, narrator):
        processor = PaymentProcessor(narrator)
        assert not processor.process(10.0)
        processor.strategy = CreditCardPayment("1234567890123456", "John", narrator)
        assert processor.process(100.0)
        assert "Total: $102.90" in narrator
        assert "Card: ****3456 (John)" in narrator

    def test_pause_goes_through_narrator(self, ctx):
        CreditCardPayment("1111", "X", ctx.narrator).pay(1.0)
        assert ctx.slept_ms == 500


class TestDiscounts:
    def test_functional_discounts(self):
        assert percentage_discount(10)(20.0, 2) == pytest.approx(4.0)
        assert bulk_discount(5, 1.0)(3.0, 4) == 0.0
        assert bulk_discount(5, 1.0)(3.0, 5) == 5.0
        assert buy_two_get_one_free()(2.0, 7) == 4.0
        assert tiered_discount()(10.0, 10) == pytest.approx(15.0)
        assert tiered_discount()(10.0, 1) == 0.0

    def test_cart_totals(self, narrator):
        cart = ShoppingCart(narrator)
        cart.add_item("Apple", 1.0, 6)
        cart.add_item("Bread", 3.0, 1)
        cart.discount = buy_two_get_one_free()
        assert cart.subtotal() == 9.0
        assert cart.total_discount() == 2.0
        assert cart.total() == 7.0

    def test_cart_rejects_bad_items(self, narrator):
        with pytest.raises(ValidationError):
            ShoppingCart(narrator).add_item("Free", -1.0, 1)


def test_game_engine_swaps_strategies(narrator):
    engine = GameEngine(narrator)
    assert engine.play_turn() is None
    engine.set_strategy(AggressiveAI(narrator))
    assert engine.play_turn() == "ATTACK_STRONGEST_ENEMY"
    engine.set_strategy(BalancedAI(narrator, random.Random(3)))
    assert engine.play_turn() in BalancedAI.MOVES
