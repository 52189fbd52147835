import gc

from pattern_catalog.behavioral.observer import (
    EmailNotifier,
    EventBus,
    GameEventType,
    GameSession,
    NewsAgency,
    Portfolio,
    PushNotifier,
    SMSNotifier,
    StockMarket,
    TradingBot,
)


class TestNewsAgency:
    def test_detached_observer_misses_later_news(self, narrator):
        agency = NewsAgency(narrator)
        a = EmailNotifier("a@example.com", narrator)
        b = SMSNotifier("+1-555", narrator)
        c = PushNotifier("device-c", narrator)
        for observer in (a, b, c):
            agency.attach(observer)

        assert agency.publish("n1") == 3
        agency.detach(b)
        assert agency.publish("n2") == 2

        assert a.received == ["n1", "n2"]
        assert b.received == ["n1"]
        assert c.received == ["n1", "n2"]

    def test_announcement_precedes_deliveries(self, narrator):
        agency = NewsAgency(narrator)
        observer = EmailNotifier("x@example.com", narrator)
        agency.attach(observer)
        mark = len(narrator)
        agency.publish("hello")
        lines = [line for line in narrator.since(mark) if line]
        assert lines[0] == "📰 Breaking News: hello"
        assert lines[1] == "Notifying 1 observers..."
        assert lines[2] == "📧 Email to x@example.com: hello"

    def test_double_attach_delivers_twice_and_detach_removes_both(self, narrator):
        agency = NewsAgency(narrator)
        observer = EmailNotifier("twice@example.com", narrator)
        agency.attach(observer)
        agency.attach(observer)
        assert agency.publish("n1") == 2
        assert observer.received == ["n1", "n1"]

        agency.detach(observer)
        assert agency.observer_count == 0
        assert agency.publish("n2") == 0
        assert observer.received == ["n1", "n1"]

    def test_changes_made_during_delivery_apply_next_time(self, narrator):
        agency = NewsAgency(narrator)
        late = EmailNotifier("late@example.com", narrator)
        victim = SMSNotifier("+1-555", narrator)

        class Rewiring(EmailNotifier):
            def update(self, message):
                super().update(message)
                agency.attach(late)
                agency.detach(victim)

        first = Rewiring("first@example.com", narrator)
        agency.attach(first)
        agency.attach(victim)

        assert agency.publish("n1") == 2
        assert victim.received == ["n1"]
        assert late.received == []

        agency.detach(first)
        assert agency.publish("n2") == 1
        assert late.received == ["n2"]
        assert victim.received == ["n1"]

    def test_subject_does_not_keep_observers_alive(self, narrator):
        agency = NewsAgency(narrator)
        observer = EmailNotifier("gone@example.com", narrator)
        agency.attach(observer)
        assert agency.observer_count == 1
        del observer
        gc.collect()
        assert agency.observer_count == 0
        assert agency.publish("anyone?") == 0

    def test_failing_observer_does_not_stop_delivery(self, narrator):
        agency = NewsAgency(narrator)

        class Broken(EmailNotifier):
            def update(self, message):
                raise RuntimeError("broken")

        broken = Broken("bad@example.com", narrator)
        good = EmailNotifier("good@example.com", narrator)
        agency.attach(broken)
        agency.attach(good)
        assert agency.publish("news") == 1
        assert good.received == ["news"]


class TestStockMarket:
    def test_percent_change_and_portfolio_value(self, narrator):
        market = StockMarket(narrator)
        portfolio = Portfolio("Tech", narrator)
        portfolio.add_holding("AAPL", 10)
        market.subscribe(portfolio)

        market.set_price("AAPL", 100.0)
        data = market.set_price("AAPL", 110.0)
        assert data.change == 10.0
        assert data.percent_change == 10.0
        assert portfolio.total_value == 1100.0

    def test_bot_signals(self, narrator):
        market = StockMarket(narrator)
        bot = TradingBot("Momentum", -5.0, 5.0, narrator)
        market.subscribe(bot)
        market.set_price("TSLA", 200.0)
        market.set_price("TSLA", 180.0)
        market.set_price("TSLA", 200.0)
        assert bot.signals == ["BUY TSLA", "SELL TSLA"]

    def test_unsubscribe(self, narrator):
        market = StockMarket(narrator)
        bot = TradingBot("Quiet", -1.0, 1.0, narrator)
        market.subscribe(bot)
        market.unsubscribe(bot)
        market.set_price("X", 1.0)
        market.set_price("X", 5.0)
        assert bot.signals == []


class TestEventBus:
    def test_tokens_and_unsubscribe(self):
        bus = EventBus()
        seen = []
        token = bus.subscribe(seen.append)
        bus.emit("one")
        assert bus.unsubscribe(token)
        assert not bus.unsubscribe(token)
        bus.emit("two")
        assert seen == ["one"]
        assert bus.subscriber_count == 0

    def test_game_session_scores_only_when_active(self):
        session = GameSession()
        events = []
        session.events.subscribe(events.append)
        session.player_join("p1")
        assert not session.update_score("p1", 10)
        session.start()
        assert session.update_score("p1", 10)
        assert not session.update_score("ghost", 5)
        session.end()
        assert [e.type for e in events] == [
            GameEventType.PLAYER_JOINED,
            GameEventType.GAME_STARTED,
            GameEventType.SCORE_CHANGED,
            GameEventType.GAME_ENDED,
        ]
