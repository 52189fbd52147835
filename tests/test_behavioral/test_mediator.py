from pattern_catalog.behavioral.mediator import (
    Aircraft,
    ChatBot,
    ChatRoom,
    ChatUser,
    CommercialAircraft,
    ControlTower,
    EventMediator,
    GameEvent,
    SettingsDialog,
)


class TestChatRoom:
    def test_sender_never_receives_own_message(self, narrator):
        room = ChatRoom(narrator)
        alice, bob = ChatUser(room, "Alice"), ChatUser(room, "Bob")
        room.add_user(alice)
        room.add_user(bob)
        alice.send("Hi")
        assert ("Alice", "Hi") in bob.inbox
        assert all(sender != "Alice" for sender, _ in alice.inbox)
        assert room.history == ["Alice: Hi"]

    def test_join_and_leave_notices(self, narrator):
        room = ChatRoom(narrator)
        alice, bob = ChatUser(room, "Alice"), ChatUser(room, "Bob")
        room.add_user(alice)
        room.add_user(bob)
        assert alice.inbox == [("System", "Bob joined the room")]
        assert room.remove_user("Bob")
        assert alice.inbox[-1] == ("System", "Bob left the room")
        assert not room.remove_user("Bob")
        assert room.user_count == 1

    def test_bot_replies_to_questions_only(self, narrator):
        room = ChatRoom(narrator)
        alice = ChatUser(room, "Alice")
        bot = ChatBot(room, "Helper", lambda responses: responses[0])
        room.add_user(alice)
        room.add_user(bot)
        alice.send("Anyone there?")
        alice.send("Fine.")
        assert alice.inbox[-1] == ("Helper", "@Alice That's interesting!")
        assert room.history == ["Alice: Anyone there?", "Helper: @Alice That's interesting!", "Alice: Fine."]


class TestControlTower:
    def test_single_runway_queue(self, narrator):
        tower = ControlTower(narrator)
        first = CommercialAircraft(tower, "AA123", 150)
        second = Aircraft(tower, "N456")
        tower.register(first)
        tower.register(second)

        first.request_takeoff()
        second.request_landing()
        assert tower.runway_holder is first
        assert second.instructions == ["Hold at 3000ft, runway occupied"]

        first.vacate_runway()
        assert first.status == "Airborne"
        assert tower.runway_holder is second
        assert second.instructions[-1] == "Cleared to land on runway 09L"

        second.vacate_runway()
        assert second.status == "Taxiing"
        assert tower.runway_available

    def test_vacate_by_non_holder_is_ignored(self, narrator):
        tower = ControlTower(narrator)
        holder, other = Aircraft(tower, "A1"), Aircraft(tower, "B2")
        holder.request_takeoff()
        other.vacate_runway()
        assert tower.runway_holder is holder

    def test_position_reports(self, narrator):
        tower = ControlTower(narrator)
        plane = Aircraft(tower, "C3")
        plane.update_position("Final Approach")
        plane.update_position("Downwind")
        assert plane.instructions == ["Continue approach, wind 090 at 8 knots", "Turn base when ready"]


class TestSettingsDialog:
    def test_notifications_gate_dependent_widgets(self, narrator):
        dialog = SettingsDialog(narrator)
        assert not dialog.email.set_text("x@example.com")
        dialog.notifications.toggle()
        assert dialog.sound.enabled and dialog.email.enabled
        assert not dialog.save_button.enabled
        dialog.email.set_text("user@example.com")
        assert dialog.save_button.enabled
        assert dialog.save_button.click()
        assert dialog.saved == {"notifications": True, "sound": False, "email": "user@example.com"}

    def test_unchecking_disables_save(self, narrator):
        dialog = SettingsDialog(narrator)
        dialog.notifications.toggle()
        dialog.email.set_text("user@example.com")
        dialog.notifications.toggle()
        assert not dialog.save_button.enabled
        assert not dialog.save_button.click()
        assert dialog.saved is None


def test_event_mediator_counts_handlers():
    mediator = EventMediator()
    seen = []
    mediator.subscribe("player_died", lambda e: seen.append(("ui", e.data)))
    mediator.subscribe("player_died", lambda e: seen.append(("audio", e.data)))
    assert mediator.publish(GameEvent(type="player_died", data="p1")) == 2
    assert mediator.publish(GameEvent(type="unknown", data="-")) == 0
    assert seen == [("ui", "p1"), ("audio", "p1")]
    assert mediator.subscriber_count("player_died") == 2
