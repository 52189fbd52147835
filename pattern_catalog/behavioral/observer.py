r"""Observer pattern.

A `Subject` delivers each notification to every attached, still-live
`Observer`, in attach order. The subject holds weak references only: an
observer released by its owner is skipped and pruned on the next
notification, and never kept alive by the subject.

Delivery rules:
  - attaching the same observer twice means it receives each message twice;
  - `detach` removes every entry for the observer and is silent if absent;
  - notification iterates over a snapshot, so attach/detach performed by an
    observer during `notify` only affects later notifications;
  - an observer that raises is logged and the loop continues.

\dot
digraph Observer {
    rankdir=LR;
    node [shape=rectangle];
    "NewsAgency" -> "Subject";
    "Subject" -> "Observer" [style=dashed, label="weakref"];
    "Observer" -> "EmailNotifier";
    "Observer" -> "SMSNotifier";
    "Observer" -> "PushNotifier";
}
\enddot
"""

from __future__ import annotations

import enum
import itertools
import logging
import sys
import weakref
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, Narrator

__all__ = [
    "Observer",
    "Subject",
    "EmailNotifier",
    "SMSNotifier",
    "PushNotifier",
    "NewsAgency",
    "StockData",
    "StockObserver",
    "StockMarket",
    "Portfolio",
    "TradingBot",
    "EventBus",
    "GameEventType",
    "GameEvent",
    "GameSession",
]

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Roles
# -----------------------------------------------------------------------------


class Observer(ABC):
    """Receives notifications from a subject."""

    @abstractmethod
    def update(self, message: str) -> None: ...

    @property
    @abstractmethod
    def name(self) -> str: ...


class Subject:
    """Weak-reference subscriber list with snapshot delivery."""

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._observers: List["weakref.ref[Observer]"] = []

    def attach(self, observer: Observer) -> None:
        self._observers.append(weakref.ref(observer))
        self.narrator.say(f"Observer {observer.name} attached")

    def detach(self, observer: Observer) -> None:
        self._observers = [
            ref for ref in self._observers if ref() is not None and ref() is not observer
        ]
        self.narrator.say(f"Observer {observer.name} detached")

    def notify(self, message: str) -> int:
        """Deliver `message` to every live observer; return the delivery count."""
        snapshot = list(self._observers)
        live = [ref() for ref in snapshot]
        self.narrator.say(f"Notifying {sum(o is not None for o in live)} observers...")

        delivered = 0
        for observer in live:
            if observer is None:
                continue
            try:
                observer.update(message)
                delivered += 1
            except Exception:
                logger.exception("observer %s failed on %r", observer.name, message)
        del live

        # drop entries whose referents have gone
        self._observers = [ref for ref in self._observers if ref() is not None]
        return delivered

    @property
    def observer_count(self) -> int:
        return sum(1 for ref in self._observers if ref() is not None)


# -----------------------------------------------------------------------------
# News Agency
# -----------------------------------------------------------------------------


class _Notifier(Observer):
    icon = ""
    channel = ""

    def __init__(self, address: str, narrator: Narrator):
        self.address = address
        self.narrator = narrator
        self.received: List[str] = []

    def update(self, message: str) -> None:
        self.received.append(message)
        self.narrator.say(f"{self.icon} {self.channel} to {self.address}: {message}")

    @property
    def name(self) -> str:
        return f"{type(self).__name__}({self.address})"


class EmailNotifier(_Notifier):
    icon = "📧"
    channel = "Email"


class SMSNotifier(_Notifier):
    icon = "📱"
    channel = "SMS"


class PushNotifier(_Notifier):
    icon = "🔔"
    channel = "Push"


class NewsAgency(Subject):
    """Publishes breaking news to its observers."""

    def __init__(self, narrator: Narrator):
        super().__init__(narrator)
        self.latest_news = ""

    def publish(self, news: str) -> int:
        self.latest_news = news
        self.narrator.say(f"\n📰 Breaking News: {news}")
        return self.notify(news)


# -----------------------------------------------------------------------------
# Stock Market (typed notifications)
# -----------------------------------------------------------------------------


class StockData(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float
    change: float = 0.0
    percent_change: float = 0.0

    def __str__(self) -> str:
        sign = "+" if self.change >= 0 else ""
        return (
            f"{self.symbol}: ${self.price:.2f} "
            f"({sign}{self.change:.2f}, {sign}{self.percent_change:.2f}%)"
        )


class StockObserver(ABC):
    @abstractmethod
    def on_price_update(self, data: StockData) -> None: ...

    @abstractmethod
    def on_volume_alert(self, symbol: str, volume: int) -> None: ...

    @property
    @abstractmethod
    def name(self) -> str: ...


class StockMarket:
    """Subject with two notification kinds."""

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._observers: List["weakref.ref[StockObserver]"] = []
        self._prices: Dict[str, float] = {}

    def subscribe(self, observer: StockObserver) -> None:
        self._observers.append(weakref.ref(observer))
        self.narrator.say(f"Stock observer {observer.name} subscribed")

    def unsubscribe(self, observer: StockObserver) -> None:
        self._observers = [
            ref for ref in self._observers if ref() is not None and ref() is not observer
        ]
        self.narrator.say(f"Stock observer {observer.name} unsubscribed")

    def set_price(self, symbol: str, price: float) -> StockData:
        old = self._prices.get(symbol, 0.0)
        change = price - old
        percent = round(change / old * 100, 6) if old else 0.0
        self._prices[symbol] = price
        data = StockData(symbol=symbol, price=price, change=change, percent_change=percent)
        self._broadcast(lambda observer: observer.on_price_update(data))
        return data

    def alert_volume(self, symbol: str, volume: int) -> None:
        self._broadcast(lambda observer: observer.on_volume_alert(symbol, volume))

    def _broadcast(self, send: Callable[[StockObserver], None]) -> None:
        for ref in list(self._observers):
            observer = ref()
            if observer is None:
                continue
            try:
                send(observer)
            except Exception:
                logger.exception("stock observer %s failed", observer.name)
        self._observers = [ref for ref in self._observers if ref() is not None]


class Portfolio(StockObserver):
    def __init__(self, title: str, narrator: Narrator):
        self.title = title
        self.narrator = narrator
        self.holdings: Dict[str, int] = {}
        self.values: Dict[str, float] = {}

    def add_holding(self, symbol: str, quantity: int) -> None:
        self.holdings[symbol] = quantity

    def on_price_update(self, data: StockData) -> None:
        if data.symbol not in self.holdings:
            return
        quantity = self.holdings[data.symbol]
        value = quantity * data.price
        self.values[data.symbol] = value
        self.narrator.say(
            f"💼 Portfolio {self.title}: {data.symbol} ({quantity} shares) = "
            f"${value:.2f} [{data}]"
        )

    def on_volume_alert(self, symbol: str, volume: int) -> None:
        if symbol in self.holdings:
            self.narrator.say(
                f"🔊 Portfolio {self.title}: High volume alert for {symbol} - "
                f"{volume} shares traded"
            )

    @property
    def total_value(self) -> float:
        return sum(self.values.values())

    @property
    def name(self) -> str:
        return f"Portfolio({self.title})"


class TradingBot(StockObserver):
    def __init__(self, strategy: str, buy_threshold: float, sell_threshold: float, narrator: Narrator):
        self.strategy = strategy
        self.buy_threshold = buy_threshold
        self.sell_threshold = sell_threshold
        self.narrator = narrator
        self.signals: List[str] = []

    def on_price_update(self, data: StockData) -> None:
        if data.percent_change <= self.buy_threshold:
            signal = "BUY"
        elif data.percent_change >= self.sell_threshold:
            signal = "SELL"
        else:
            return
        self.signals.append(f"{signal} {data.symbol}")
        self.narrator.say(
            f"🤖 TradingBot ({self.strategy}): {signal} signal for {data.symbol} "
            f"at ${data.price:.2f}"
        )

    def on_volume_alert(self, symbol: str, volume: int) -> None:
        self.narrator.say(
            f"🤖 TradingBot ({self.strategy}): Analyzing volume spike for {symbol} - "
            f"{volume} shares"
        )

    @property
    def name(self) -> str:
        return f"TradingBot({self.strategy})"


# -----------------------------------------------------------------------------
# Functional Observers
# -----------------------------------------------------------------------------


class EventBus:
    """Callback publisher keyed by subscription token.

    Callbacks are held strongly; the token is the only way to unsubscribe.
    """

    def __init__(self):
        self._subscribers: Dict[int, Callable[[object], None]] = {}
        self._tokens = itertools.count(1)

    def subscribe(self, callback: Callable[[object], None]) -> int:
        token = next(self._tokens)
        self._subscribers[token] = callback
        return token

    def unsubscribe(self, token: int) -> bool:
        return self._subscribers.pop(token, None) is not None

    def emit(self, event: object) -> None:
        for token, callback in list(self._subscribers.items()):
            try:
                callback(event)
            except Exception:
                logger.exception("subscriber %d failed on %r", token, event)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)


class GameEventType(enum.Enum):
    PLAYER_JOINED = "PLAYER_JOINED"
    PLAYER_LEFT = "PLAYER_LEFT"
    GAME_STARTED = "GAME_STARTED"
    GAME_ENDED = "GAME_ENDED"
    SCORE_CHANGED = "SCORE_CHANGED"


class GameEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: GameEventType
    player_id: str = ""
    value: int = 0

    def __str__(self) -> str:
        return f"{self.type.value} - Player: {self.player_id} - Value: {self.value}"


class GameSession:
    def __init__(self):
        self.events = EventBus()
        self.scores: Dict[str, int] = {}
        self.active = False

    def player_join(self, player_id: str) -> None:
        self.scores[player_id] = 0
        self.events.emit(GameEvent(type=GameEventType.PLAYER_JOINED, player_id=player_id))

    def player_leave(self, player_id: str) -> None:
        self.scores.pop(player_id, None)
        self.events.emit(GameEvent(type=GameEventType.PLAYER_LEFT, player_id=player_id))

    def start(self) -> None:
        self.active = True
        self.events.emit(GameEvent(type=GameEventType.GAME_STARTED))

    def end(self) -> None:
        self.active = False
        self.events.emit(GameEvent(type=GameEventType.GAME_ENDED))

    def update_score(self, player_id: str, score: int) -> bool:
        if not self.active or player_id not in self.scores:
            return False
        self.scores[player_id] = score
        self.events.emit(
            GameEvent(type=GameEventType.SCORE_CHANGED, player_id=player_id, value=score)
        )
        return True


# -----------------------------------------------------------------------------
# Script
# -----------------------------------------------------------------------------


@register_demo("observer", "Observer Pattern", "behavioral", "News agency, stock market, game events")
def demo(ctx: DemoContext) -> None:
    say = ctx.say
    say("=== Observer Pattern Demo ===")

    say("\n1. Traditional Observer Pattern - News Agency:")
    say("=" * 60)
    agency = NewsAgency(ctx.narrator)
    email = EmailNotifier("user@example.com", ctx.narrator)
    sms = SMSNotifier("+1-555-0123", ctx.narrator)
    push = PushNotifier("device_12345", ctx.narrator)
    agency.attach(email)
    agency.attach(sms)
    agency.attach(push)
    agency.publish("Major earthquake hits California")
    agency.publish("New COVID variant discovered")
    say("\nDetaching SMS notifier...")
    agency.detach(sms)
    agency.publish("Stock market reaches all-time high")

    say("\n\n2. Stock Market Observer with Typed Events:")
    say("=" * 60)
    market = StockMarket(ctx.narrator)
    retirement = Portfolio("Retirement Fund", ctx.narrator)
    retirement.add_holding("AAPL", 100)
    retirement.add_holding("GOOGL", 50)
    growth = Portfolio("Growth Fund", ctx.narrator)
    growth.add_holding("AAPL", 200)
    growth.add_holding("TSLA", 30)
    bot = TradingBot("Momentum", -5.0, 5.0, ctx.narrator)
    market.subscribe(retirement)
    market.subscribe(growth)
    market.subscribe(bot)
    say("\nSimulating stock price updates:")
    market.set_price("AAPL", 150.00)
    market.set_price("AAPL", 142.50)
    market.set_price("GOOGL", 2800.00)
    market.set_price("TSLA", 800.00)
    market.set_price("TSLA", 840.00)
    say("\nSimulating volume alerts:")
    market.alert_volume("AAPL", 10_000_000)
    market.alert_volume("TSLA", 5_000_000)

    say("\n\n3. Functional Observers with Callbacks:")
    say("=" * 60)
    session = GameSession()
    session.events.subscribe(lambda event: say(f"🎮 Game Log: {event}"))

    def leaderboard(event: GameEvent) -> None:
        if event.type is GameEventType.SCORE_CHANGED:
            say(f"🏆 Leaderboard Update: {event.player_id} scored {event.value} points!")

    def greeter(event: GameEvent) -> None:
        if event.type is GameEventType.PLAYER_JOINED:
            say(f"🎉 Welcome {event.player_id} to the game!")
        elif event.type is GameEventType.PLAYER_LEFT:
            say(f"👋 {event.player_id} has left the game.")

    session.events.subscribe(leaderboard)
    session.events.subscribe(greeter)
    say("\nGame session events:")
    session.player_join("Alice")
    session.player_join("Bob")
    session.start()
    session.update_score("Alice", 100)
    session.update_score("Bob", 150)
    session.update_score("Alice", 200)
    session.player_leave("Bob")
    session.end()

    say("\n\n4. Automatic Observer Cleanup Demo:")
    say("=" * 60)
    cleanup = NewsAgency(ctx.narrator)
    temporary: Optional[EmailNotifier] = EmailNotifier("temp@example.com", ctx.narrator)
    cleanup.attach(temporary)
    say(f"Observer count: {cleanup.observer_count}")
    cleanup.publish("Temporary observer active")
    temporary = None
    say("\nAfter observer destruction:")
    cleanup.publish("Temporary observer should be cleaned up")
    say(f"Observer count after cleanup: {cleanup.observer_count}")


if __name__ == "__main__":
    sys.exit(run_standalone("observer"))
