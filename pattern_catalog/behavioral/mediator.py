r"""Mediator.

Colleagues never talk to each other directly. They report to a mediator,
which decides who hears about it:

  - `ChatRoom` relays messages to every member but the sender.
  - `ControlTower` owns the runway and a FIFO queue of waiting aircraft.
  - `SettingsDialog` enables and disables its widgets in response to events.
  - `EventMediator` is the functional form: handlers keyed by event type.
"""

from __future__ import annotations

import logging
import sys
from collections import defaultdict, deque
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, Narrator

__all__ = [
    "Colleague",
    "ChatUser",
    "ChatBot",
    "ChatRoom",
    "Aircraft",
    "CommercialAircraft",
    "PrivateJet",
    "ControlTower",
    "Widget",
    "Button",
    "CheckBox",
    "TextBox",
    "SettingsDialog",
    "GameEvent",
    "EventMediator",
]

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Chat Room
# -----------------------------------------------------------------------------


class Colleague:
    def __init__(self, room: "ChatRoom", name: str):
        self.room = room
        self.name = name
        self.inbox: List[Tuple[str, str]] = []

    @property
    def narrator(self) -> Narrator:
        return self.room.narrator

    def send(self, message: str) -> None:
        self.narrator.say(f"👤 {self.name} sends: {message}")
        self.room.send_message(message, self)

    def receive(self, message: str, sender: str) -> None:
        self.inbox.append((sender, message))


class ChatUser(Colleague):
    def receive(self, message: str, sender: str) -> None:
        super().receive(message, sender)
        self.narrator.say(f"📱 {self.name} receives from {sender}: {message}")


class ChatBot(Colleague):
    """Answers questions with a canned reply chosen by `choose`."""

    RESPONSES = (
        "That's interesting!",
        "Can you tell me more?",
        "I understand.",
        "Thanks for sharing!",
        "How fascinating!",
    )

    def __init__(self, room: "ChatRoom", name: str, choose: Callable[[tuple], str]):
        super().__init__(room, name)
        self._choose = choose

    def send(self, message: str) -> None:
        self.narrator.say(f"🤖 {self.name} (bot) sends: {message}")
        self.room.send_message(message, self)

    def receive(self, message: str, sender: str) -> None:
        super().receive(message, sender)
        self.narrator.say(f"🤖 {self.name} (bot) receives from {sender}: {message}")
        if "?" in message and sender != "System":
            reply = self._choose(self.RESPONSES)
            self.narrator.pause(500)
            self.send(f"@{sender} {reply}")


class ChatRoom:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._users: List[Colleague] = []
        self.history: List[str] = []

    def add_user(self, user: Colleague) -> None:
        self.narrator.say(f"✅ {user.name} joined the chat room")
        existing = list(self._users)
        self._users.append(user)
        for member in existing:
            member.receive(f"{user.name} joined the room", "System")

    def remove_user(self, name: str) -> bool:
        for index, user in enumerate(self._users):
            if user.name == name:
                self.narrator.say(f"❌ {name} left the chat room")
                del self._users[index]
                for member in list(self._users):
                    member.receive(f"{name} left the room", "System")
                return True
        logger.debug("remove_user: %s is not in the room", name)
        return False

    def send_message(self, message: str, sender: Colleague) -> None:
        self.history.append(f"{sender.name}: {message}")
        # replies sent from inside receive() must not disturb this walk
        for user in list(self._users):
            if user is not sender:
                user.receive(message, sender.name)

    def show_history(self) -> None:
        self.narrator.say("\n📜 Chat History:")
        for line in self.history:
            self.narrator.say(f"   {line}")

    @property
    def user_count(self) -> int:
        return len(self._users)


# -----------------------------------------------------------------------------
# Air Traffic Control
# -----------------------------------------------------------------------------


class Aircraft:
    def __init__(self, tower: "ControlTower", call_sign: str):
        self.tower = tower
        self.call_sign = call_sign
        self.position = "Ground"
        self.status = "Parked"
        self.instructions: List[str] = []

    @property
    def narrator(self) -> Narrator:
        return self.tower.narrator

    def request_takeoff(self) -> None:
        self.narrator.say(f"✈️ {self.call_sign} requesting takeoff clearance")
        self.tower.request_takeoff(self)

    def request_landing(self) -> None:
        self.narrator.say(f"🛬 {self.call_sign} requesting landing clearance")
        self.tower.request_landing(self)

    def update_position(self, position: str) -> None:
        self.position = position
        self.narrator.say(f"📍 {self.call_sign} reporting position: {position}")
        self.tower.report_position(self, position)

    def vacate_runway(self) -> None:
        self.tower.runway_vacated(self)

    def receive_instruction(self, instruction: str) -> None:
        self.instructions.append(instruction)
        self.narrator.say(f"📻 {self.call_sign} received: {instruction}")


class CommercialAircraft(Aircraft):
    def __init__(self, tower: "ControlTower", call_sign: str, passengers: int):
        super().__init__(tower, call_sign)
        self.passengers = passengers

    def request_takeoff(self) -> None:
        self.narrator.say(f"🛫 Commercial flight {self.call_sign} (PAX: {self.passengers}) requesting takeoff")
        self.tower.request_takeoff(self)


class PrivateJet(Aircraft):
    def request_takeoff(self) -> None:
        self.narrator.say(f"🛩️ Private jet {self.call_sign} requesting priority takeoff")
        self.tower.request_takeoff(self)


class ControlTower:
    """Single-runway tower.

    Clearance occupies the runway until the cleared aircraft reports it
    vacated. Requests made meanwhile wait in arrival order.
    """

    RUNWAY = "09L"

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.aircraft: List[Aircraft] = []
        self.queue: Deque[Tuple[Aircraft, str]] = deque()
        self.runway_holder: Optional[Aircraft] = None

    @property
    def runway_available(self) -> bool:
        return self.runway_holder is None

    def register(self, aircraft: Aircraft) -> None:
        self.aircraft.append(aircraft)
        self.narrator.say(f"📝 {aircraft.call_sign} registered with Control Tower")

    def request_takeoff(self, aircraft: Aircraft) -> None:
        self.narrator.say(f"🏢 Control Tower processing takeoff request from {aircraft.call_sign}")
        if self.runway_available:
            self._clear(aircraft, "takeoff")
        else:
            self.queue.append((aircraft, "takeoff"))
            aircraft.receive_instruction(
                f"Hold position, runway occupied. You are #{len(self.queue)} in queue"
            )

    def request_landing(self, aircraft: Aircraft) -> None:
        self.narrator.say(f"🏢 Control Tower processing landing request from {aircraft.call_sign}")
        if self.runway_available:
            self._clear(aircraft, "landing")
        else:
            self.queue.append((aircraft, "landing"))
            aircraft.receive_instruction("Hold at 3000ft, runway occupied")

    def report_position(self, aircraft: Aircraft, position: str) -> None:
        self.narrator.say(f"🏢 Control Tower tracking {aircraft.call_sign} at {position}")
        if "Final" in position:
            aircraft.receive_instruction("Continue approach, wind 090 at 8 knots")
        elif "Downwind" in position:
            aircraft.receive_instruction("Turn base when ready")

    def runway_vacated(self, aircraft: Aircraft) -> None:
        if aircraft is not self.runway_holder:
            logger.warning("%s reported vacating a runway it does not hold", aircraft.call_sign)
            return
        if aircraft.status == "Taking off":
            self.narrator.say(f"🛫 {aircraft.call_sign} is airborne")
            aircraft.status = "Airborne"
        else:
            self.narrator.say(f"🛬 {aircraft.call_sign} has landed safely")
            aircraft.status = "Taxiing"
        self.runway_holder = None
        self._process_queue()

    def _clear(self, aircraft: Aircraft, kind: str) -> None:
        self.runway_holder = aircraft
        if kind == "takeoff":
            aircraft.status = "Taking off"
            aircraft.receive_instruction(f"Cleared for takeoff on runway {self.RUNWAY}")
        else:
            aircraft.status = "Landing"
            aircraft.receive_instruction(f"Cleared to land on runway {self.RUNWAY}")

    def _process_queue(self) -> None:
        if self.queue and self.runway_available:
            aircraft, kind = self.queue.popleft()
            self.narrator.say(f"🏢 Processing next aircraft in queue: {aircraft.call_sign}")
            self._clear(aircraft, kind)


# -----------------------------------------------------------------------------
# Dialog
# -----------------------------------------------------------------------------


class Widget:
    def __init__(self, dialog: "SettingsDialog", name: str, enabled: bool = True):
        self.dialog = dialog
        self.name = name
        self.enabled = enabled

    @property
    def narrator(self) -> Narrator:
        return self.dialog.narrator

    def click(self) -> bool:
        if not self.enabled:
            self.narrator.say(f"⚠️ {self.name} is disabled")
            return False
        self.narrator.say(f"🖱️ {self.name} clicked")
        self.dialog.notify(self, "click")
        return True

    def set_enabled(self, enabled: bool) -> None:
        self.enabled = enabled
        self.narrator.say(f"⚙️ {self.name} {'enabled' if enabled else 'disabled'}")


class Button(Widget):
    pass


class CheckBox(Widget):
    def __init__(self, dialog: "SettingsDialog", name: str, enabled: bool = True):
        super().__init__(dialog, name, enabled)
        self.checked = False

    def toggle(self) -> bool:
        if not self.enabled:
            self.narrator.say(f"⚠️ {self.name} is disabled")
            return False
        self.checked = not self.checked
        self.narrator.say(f"☑️ {self.name} {'checked' if self.checked else 'unchecked'}")
        self.dialog.notify(self, "checked" if self.checked else "unchecked")
        return True


class TextBox(Widget):
    def __init__(self, dialog: "SettingsDialog", name: str, enabled: bool = True):
        super().__init__(dialog, name, enabled)
        self.text = ""

    def set_text(self, text: str) -> bool:
        if not self.enabled:
            self.narrator.say(f"⚠️ {self.name} is disabled")
            return False
        self.text = text
        self.narrator.say(f"📝 {self.name} text set to: '{text}'")
        self.dialog.notify(self, "text_changed")
        return True


class SettingsDialog:
    """Owns its widgets and every rule linking them."""

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.notifications = CheckBox(self, "Enable Notifications")
        self.sound = CheckBox(self, "Enable Sound", enabled=False)
        self.email = TextBox(self, "Email Address", enabled=False)
        self.save_button = Button(self, "Save", enabled=False)
        self.cancel_button = Button(self, "Cancel")
        self.saved: Optional[Dict[str, Any]] = None

    def notify(self, sender: Widget, event: str) -> None:
        self.narrator.say(f"🔔 Dialog received event: {event} from {sender.name}")
        if sender is self.notifications:
            self.sound.set_enabled(event == "checked")
            self.email.set_enabled(event == "checked")
            self._update_save()
        elif sender is self.email and event == "text_changed":
            self._update_save()
        elif sender is self.save_button and event == "click":
            self._save()
        elif sender is self.cancel_button and event == "click":
            self.narrator.say("❌ Settings cancelled")

    def _update_save(self) -> None:
        can_save = bool(self.email.text) and self.notifications.checked
        if can_save != self.save_button.enabled:
            self.save_button.set_enabled(can_save)

    def _save(self) -> None:
        self.narrator.say("💾 Saving settings:")
        self.narrator.say(f"   Notifications: {'On' if self.notifications.checked else 'Off'}")
        self.narrator.say(f"   Sound: {'On' if self.sound.checked else 'Off'}")
        self.narrator.say(f"   Email: {self.email.text}")
        self.saved = {
            "notifications": self.notifications.checked,
            "sound": self.sound.checked,
            "email": self.email.text,
        }
        self.narrator.say("✅ Settings saved successfully!")


# -----------------------------------------------------------------------------
# Functional Event Mediator
# -----------------------------------------------------------------------------


class GameEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    data: str


class EventMediator:
    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[GameEvent], None]]] = defaultdict(list)

    def subscribe(self, event_type: str, handler: Callable[[GameEvent], None]) -> None:
        self._subscribers[event_type].append(handler)

    def publish(self, event: GameEvent) -> int:
        """Deliver `event` to every handler of its type; returns the handler count."""
        handlers = list(self._subscribers.get(event.type, ()))
        for handler in handlers:
            handler(event)
        return len(handlers)

    def subscriber_count(self, event_type: str) -> int:
        return len(self._subscribers.get(event_type, ()))


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("mediator", "Mediator Pattern", "behavioral", "Chat room, control tower, dialog, event mediator")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Mediator Pattern Demo ===")

    say("\n1. Chat Room Mediator:")
    say("=" * 50)
    room = ChatRoom(narrator)
    alice, bob, charlie = ChatUser(room, "Alice"), ChatUser(room, "Bob"), ChatUser(room, "Charlie")
    assistant = ChatBot(room, "Assistant", ctx.rng.choice)
    for user in (alice, bob, charlie, assistant):
        room.add_user(user)

    say("\nChat conversation:")
    alice.send("Hello everyone!")
    bob.send("Hey Alice, how are you?")
    charlie.send("Good morning all!")
    alice.send("I'm doing great, thanks for asking!")

    say("\nRemoving user:")
    room.remove_user("Charlie")
    bob.send("Where did Charlie go?")
    room.show_history()

    say("\n\n2. Air Traffic Control Mediator:")
    say("=" * 50)
    tower = ControlTower(narrator)
    ua123 = CommercialAircraft(tower, "UA123", 180)
    dl456 = CommercialAircraft(tower, "DL456", 210)
    jet = PrivateJet(tower, "N123AB")
    for aircraft in (ua123, dl456, jet):
        tower.register(aircraft)

    say("\nFlight operations:")
    ua123.request_takeoff()
    dl456.request_takeoff()
    jet.request_takeoff()
    ctx.sleep(200)
    ua123.vacate_runway()
    ctx.sleep(200)
    dl456.vacate_runway()
    ua123.update_position("Downwind")
    ua123.update_position("Final approach")
    ua123.request_landing()
    ctx.sleep(200)
    jet.vacate_runway()
    ctx.sleep(300)
    ua123.vacate_runway()

    say("\n\n3. GUI Dialog Mediator:")
    say("=" * 50)
    dialog = SettingsDialog(narrator)
    say("\nUser interactions:")
    dialog.save_button.click()
    dialog.notifications.toggle()
    dialog.sound.toggle()
    dialog.email.set_text("user@example.com")
    dialog.save_button.click()

    say("\n\n4. Functional Event Mediator:")
    say("=" * 50)
    events = EventMediator()
    events.subscribe("player_joined", lambda e: say(f"🎮 New player joined: {e.data}"))
    events.subscribe("player_scored", lambda e: say(f"🏆 Player scored: {e.data}"))
    events.subscribe("game_over", lambda e: say(f"🏁 Game over: {e.data}"))
    events.subscribe("player_scored", lambda e: say(f"📊 Statistics updated for: {e.data}"))

    say("\nGame events:")
    events.publish(GameEvent(type="player_joined", data="Alice"))
    events.publish(GameEvent(type="player_joined", data="Bob"))
    events.publish(GameEvent(type="player_scored", data="Alice - 100 points"))
    events.publish(GameEvent(type="player_scored", data="Bob - 150 points"))
    events.publish(GameEvent(type="game_over", data="Final Score - Alice: 100, Bob: 150"))

    say("\nSubscriber counts:")
    for event_type in ("player_joined", "player_scored", "game_over"):
        say(f"{event_type}: {events.subscriber_count(event_type)} subscribers")


if __name__ == "__main__":
    sys.exit(run_standalone("mediator"))
