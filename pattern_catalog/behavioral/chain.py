r"""Chain of Responsibility.

A chain is a singly-linked list of handlers built explicitly with
`set_next`, which returns its argument so links read left to right:

    >>> head.set_next(second).set_next(third)

For each request, every handler on the walk either

  - skips it (`accepts` is False) and the request moves on,
  - handles it and stops (`process` returns False), or
  - handles it and forwards it (`process` returns True).

`accepts` never has side effects, so routing can be checked on its own
with `Chain.route`. When the walk ends and nobody handled the request, the
chain says one "no handler" line.

\dot
digraph Chain {
    rankdir=LR;
    node [shape=rectangle];
    "Chain" -> "L1" -> "L2" -> "L3";
}
\enddot
"""

from __future__ import annotations

import enum
import logging
import sys
from abc import ABC, abstractmethod
from typing import Callable, Dict, Generic, Iterator, List, Optional, Sequence, Set, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, Narrator

__all__ = [
    "Handler",
    "Chain",
    "AuthenticationHandler",
    "AuthorizationHandler",
    "ValidationHandler",
    "Priority",
    "SupportTicket",
    "SupportHandler",
    "Level1Support",
    "Level2Support",
    "Level3Support",
    "SupportChain",
    "HTTPRequest",
    "RateLimitHandler",
    "HTTPAuthHandler",
    "CacheHandler",
    "RouteHandler",
    "FunctionalChain",
]

logger = logging.getLogger(__name__)

R = TypeVar("R")


# -----------------------------------------------------------------------------
# Role and Chain
# -----------------------------------------------------------------------------


class Handler(ABC, Generic[R]):
    name = ""

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._next: Optional["Handler[R]"] = None

    @property
    def next(self) -> Optional["Handler[R]"]:
        return self._next

    def set_next(self, handler: "Handler[R]") -> "Handler[R]":
        """Link `handler` after this one, replacing any previous successor."""
        self._next = handler
        return handler

    @abstractmethod
    def accepts(self, request: R) -> bool:
        """Acceptance predicate. Must not have effects."""

    @abstractmethod
    def process(self, request: R) -> bool:
        """Handle `request`; return True to forward it down the chain."""


class Chain(Generic[R]):
    """Coordinator owning the head of a handler list."""

    def __init__(
        self,
        narrator: Narrator,
        head: Optional[Handler[R]] = None,
        forward_line: Optional[str] = "Passing request to next handler...",
        unhandled: Callable[[R], str] = lambda request: f"❌ No handler found for request: {request}",
    ):
        self.narrator = narrator
        self.head = head
        self.forward_line = forward_line
        self.unhandled = unhandled

    def __iter__(self) -> Iterator[Handler[R]]:
        handler = self.head
        while handler is not None:
            yield handler
            handler = handler.next

    def names(self) -> List[str]:
        return [handler.name for handler in self]

    def route(self, request: R) -> Optional[Handler[R]]:
        """First handler that accepts `request`, without handling it."""
        return next((handler for handler in self if handler.accepts(request)), None)

    def dispatch(self, request: R) -> List[str]:
        """Walk the chain; return the names of the handlers that handled `request`."""
        handled: List[str] = []
        for handler in self:
            if handler.accepts(request):
                handled.append(handler.name)
                if not handler.process(request):
                    return handled
            elif handler.next is not None and self.forward_line:
                self.narrator.say(self.forward_line)
        if not handled:
            self.narrator.say(self.unhandled(request))
        return handled


# -----------------------------------------------------------------------------
# Authentication / Authorization / Validation
# -----------------------------------------------------------------------------


class _PrefixHandler(Handler[str]):
    prefix = ""
    icon = ""

    def accepts(self, request):
        return request.startswith(self.prefix)

    def process(self, request):
        self.narrator.say(f"{self.icon} {self.name} processing: {request}")
        self._check(request[len(self.prefix):])
        return False

    @abstractmethod
    def _check(self, payload: str) -> None: ...


class AuthenticationHandler(_PrefixHandler):
    name, prefix, icon = "Authentication Handler", "auth:", "🔐"

    def __init__(self, narrator: Narrator, users: Optional[Dict[str, str]] = None):
        super().__init__(narrator)
        self.users = users if users is not None else {"admin": "password123"}

    def _check(self, payload):
        user, sep, password = payload.partition(":")
        if not sep:
            self.narrator.say("❌ Invalid credentials format!")
        elif self.users.get(user) == password:
            self.narrator.say(f"✅ Authentication successful for user: {user}")
        else:
            self.narrator.say("❌ Authentication failed!")


class AuthorizationHandler(_PrefixHandler):
    name, prefix, icon = "Authorization Handler", "authorize:", "🛡️"
    actions = ("read", "write", "delete")

    def _check(self, payload):
        if payload in self.actions:
            self.narrator.say(f"✅ Action '{payload}' is authorized")
        else:
            self.narrator.say(f"❌ Action '{payload}' is not authorized!")


class ValidationHandler(_PrefixHandler):
    name, prefix, icon = "Validation Handler", "validate:", "✔️"

    def _check(self, payload):
        if not payload:
            self.narrator.say("❌ Validation failed: Empty data!")
        elif len(payload) < 3:
            self.narrator.say("❌ Validation failed: Data too short!")
        elif any(ch in "!@#$%^&*" for ch in payload):
            self.narrator.say("❌ Validation failed: Invalid characters!")
        else:
            self.narrator.say(f"✅ Validation successful for: {payload}")


# -----------------------------------------------------------------------------
# Support Tickets
# -----------------------------------------------------------------------------


class Priority(enum.IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4


class SupportTicket(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    description: str
    priority: Priority
    category: str

    def __str__(self) -> str:
        return f"Ticket #{self.id} [{self.priority.name}] {self.category}: {self.description}"


class SupportHandler(Handler[SupportTicket]):
    """Level of support defined by a priority ceiling and a set of categories."""

    icon = ""
    action = ""
    resolution = ""
    max_priority: Priority = Priority.LOW
    categories: Set[str] = set()

    def accepts(self, ticket):
        return ticket.priority <= self.max_priority and ticket.category in self.categories

    def process(self, ticket):
        self.narrator.say(f"{self.icon} {self.name} handling: {ticket}")
        self.narrator.say(f"   {self.action}")
        self.narrator.say(f"   ✅ {self.resolution}")
        return False


class Level1Support(SupportHandler):
    name, icon = "Level 1 Support", "🎧"
    action = "Providing basic troubleshooting steps..."
    resolution = "Ticket resolved by Level 1 Support"
    max_priority = Priority.MEDIUM
    categories = {"General", "Account"}


class Level2Support(SupportHandler):
    name, icon = "Level 2 Support", "🔧"
    action = "Performing advanced diagnostics..."
    resolution = "Ticket resolved by Level 2 Support"
    max_priority = Priority.HIGH
    categories = {"Technical", "Software"}


class Level3Support(SupportHandler):
    name, icon = "Level 3 Support", "🚨"
    action = "Engaging senior engineers..."
    resolution = "Critical issue handled by Level 3 Support"
    max_priority = Priority.CRITICAL
    categories = {"Security", "Infrastructure"}

    def accepts(self, ticket):
        return ticket.priority is Priority.CRITICAL or ticket.category in self.categories


class SupportChain(Chain[SupportTicket]):
    """Level 1 -> Level 2 -> Level 3."""

    def __init__(self, narrator: Narrator, levels: Optional[Sequence[SupportHandler]] = None):
        super().__init__(
            narrator,
            forward_line="Escalating to next level...",
            unhandled=lambda ticket: f"❌ No handler available for ticket: {ticket}",
        )
        if levels is None:
            levels = (Level1Support(narrator), Level2Support(narrator), Level3Support(narrator))
        for handler in levels:
            self.append(handler)

    def append(self, handler: SupportHandler) -> None:
        if self.head is None:
            self.head = handler
            return
        tail = self.head
        while tail.next is not None:
            tail = tail.next
        tail.set_next(handler)

    def submit(self, ticket: SupportTicket) -> Optional[str]:
        self.narrator.say(f"\nNew ticket: {ticket}")
        handled = self.dispatch(ticket)
        return handled[-1] if handled else None


# -----------------------------------------------------------------------------
# HTTP Middleware
# -----------------------------------------------------------------------------


class HTTPRequest(BaseModel):
    method: str
    path: str
    user_agent: str = ""
    client_ip: str
    headers: Dict[str, str] = Field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.method} {self.path} from {self.client_ip}"


class RateLimitHandler(Handler[HTTPRequest]):
    """Fixed-window request counter per client."""

    name = "Rate Limit Handler"

    def __init__(
        self,
        narrator: Narrator,
        clock: Callable[[], float],
        max_requests: int = 100,
        window: float = 60.0,
    ):
        super().__init__(narrator)
        self.clock = clock
        self.max_requests = max_requests
        self.window = window
        self._windows: Dict[str, Tuple[float, int]] = {}

    def accepts(self, request):
        return True

    def process(self, request):
        self.narrator.say(f"🚦 {self.name} checking: {request}")
        now = self.clock()
        started, count = self._windows.get(request.client_ip, (now, 0))
        if now - started >= self.window:
            started, count = now, 0
        count += 1
        self._windows[request.client_ip] = (started, count)
        if count > self.max_requests:
            self.narrator.say(f"   ❌ Rate limit exceeded for IP: {request.client_ip}")
            return False
        self.narrator.say(f"   ✅ Rate limit OK ({count}/{self.max_requests})")
        return True


class HTTPAuthHandler(Handler[HTTPRequest]):
    name = "Authentication Handler"

    def __init__(self, narrator: Narrator, valid_token: str = "Bearer valid_token"):
        super().__init__(narrator)
        self.valid_token = valid_token

    def accepts(self, request):
        return request.path.startswith(("/api/", "/admin/"))

    def process(self, request):
        self.narrator.say(f"🔑 {self.name} checking: {request}")
        token = request.headers.get("Authorization")
        if token is None:
            self.narrator.say("   ❌ Missing Authorization header")
            return False
        if token != self.valid_token:
            self.narrator.say("   ❌ Invalid authentication token")
            return False
        self.narrator.say("   ✅ Authentication successful")
        return True


class CacheHandler(Handler[HTTPRequest]):
    name = "Cache Handler"

    def __init__(self, narrator: Narrator):
        super().__init__(narrator)
        self.cache: Dict[str, str] = {}

    def accepts(self, request):
        return request.method == "GET"

    def process(self, request):
        self.narrator.say(f"💾 {self.name} checking: {request}")
        cached = self.cache.get(request.path)
        if cached is not None:
            self.narrator.say(f"   ✅ Cache hit for: {request.path}")
            self.narrator.say(f"   Returning cached response: {cached}")
            return False
        self.narrator.say(f"   ❌ Cache miss for: {request.path}")
        self.cache[request.path] = f"Cached response for {request.path}"
        return True


class RouteHandler(Handler[HTTPRequest]):
    name = "Route Handler"

    def accepts(self, request):
        return True

    def process(self, request):
        self.narrator.say(f"🛣️ {self.name} processing: {request}")
        if request.path == "/":
            self.narrator.say("   📄 Serving home page")
        elif request.path.startswith("/api/"):
            self.narrator.say("   🔌 Processing API request")
        elif request.path.startswith("/static/"):
            self.narrator.say("   📁 Serving static file")
        else:
            self.narrator.say("   ❌ 404 - Page not found")
            return False
        self.narrator.say("   ✅ Request processed successfully")
        return False


# -----------------------------------------------------------------------------
# Functional Chain
# -----------------------------------------------------------------------------


class FunctionalChain(Generic[R]):
    """Handlers as callables; the first to return True ends the walk."""

    def __init__(self):
        self.handlers: List[Callable[[R], bool]] = []

    def add(self, handler: Callable[[R], bool]) -> "FunctionalChain[R]":
        self.handlers.append(handler)
        return self

    def process(self, request: R) -> bool:
        return any(handler(request) for handler in self.handlers)


# -----------------------------------------------------------------------------
# Script
# -----------------------------------------------------------------------------


@register_demo(
    "chain", "Chain of Responsibility Pattern", "behavioral", "Auth chain, support escalation, HTTP middleware"
)
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Chain of Responsibility Pattern Demo ===")

    say("\n1. Authentication and Authorization Chain:")
    say("=" * 60)
    auth = AuthenticationHandler(narrator)
    auth.set_next(AuthorizationHandler(narrator)).set_next(ValidationHandler(narrator))
    security = Chain(narrator, auth)
    say("Chain: " + " -> ".join(security.names()))
    for request in (
        "auth:admin:password123",
        "auth:user:wrongpassword",
        "authorize:read",
        "authorize:execute",
        "validate:ValidData123",
        "validate:x",
        "validate:",
        "unknown:request",
    ):
        say(f"\nProcessing request: {request}")
        security.dispatch(request)

    say("\n\n2. Support Ticket System:")
    say("=" * 60)
    support = SupportChain(narrator)
    say("Chain: " + " -> ".join(support.names()))
    for ticket in (
        SupportTicket(id=1, description="Password reset request", priority=Priority.LOW, category="Account"),
        SupportTicket(id=2, description="Software installation issue", priority=Priority.MEDIUM, category="Technical"),
        SupportTicket(id=3, description="Server down", priority=Priority.CRITICAL, category="Infrastructure"),
        SupportTicket(id=4, description="Security breach detected", priority=Priority.CRITICAL, category="Security"),
        SupportTicket(id=5, description="General inquiry", priority=Priority.LOW, category="General"),
        SupportTicket(id=6, description="Billing question", priority=Priority.HIGH, category="Billing"),
    ):
        support.submit(ticket)

    say("\n\n3. HTTP Request Processing Chain:")
    say("=" * 60)
    limiter = RateLimitHandler(narrator, ctx.clock)
    limiter.set_next(HTTPAuthHandler(narrator)).set_next(CacheHandler(narrator)).set_next(RouteHandler(narrator))
    http = Chain(narrator, limiter, forward_line=None, unhandled=lambda r: f"❌ Request dropped: {r}")
    for request in (
        HTTPRequest(method="GET", path="/", user_agent="Mozilla/5.0", client_ip="192.168.1.1"),
        HTTPRequest(
            method="GET",
            path="/api/users",
            user_agent="curl/7.68.0",
            client_ip="192.168.1.2",
            headers={"Authorization": "Bearer valid_token"},
        ),
        HTTPRequest(method="GET", path="/api/data", user_agent="PostmanRuntime/7.26.8", client_ip="192.168.1.3"),
        HTTPRequest(
            method="POST",
            path="/api/upload",
            user_agent="Chrome/91.0",
            client_ip="192.168.1.1",
            headers={"Authorization": "Bearer invalid_token"},
        ),
        HTTPRequest(method="GET", path="/static/style.css", user_agent="Mozilla/5.0", client_ip="192.168.1.4"),
        HTTPRequest(method="GET", path="/static/style.css", user_agent="Mozilla/5.0", client_ip="192.168.1.5"),
    ):
        say(f"\nProcessing HTTP request: {request}")
        http.dispatch(request)

    say("\nBurst from one client against a limit of 2 requests per minute:")
    burst = Chain(narrator, RateLimitHandler(narrator, ctx.clock, max_requests=2), forward_line=None)
    for _ in range(3):
        burst.dispatch(HTTPRequest(method="GET", path="/", client_ip="10.0.0.9"))

    say("\n\n4. Functional Chain of Responsibility:")
    say("=" * 60)

    def email_handler(request: str) -> bool:
        if not request.startswith("email:"):
            return False
        email = request[len("email:"):]
        say(f"📧 Email handler processing: {email}")
        if "@" in email:
            say("   ✅ Valid email format")
            return True
        say("   ❌ Invalid email format")
        return False

    def phone_handler(request: str) -> bool:
        if not request.startswith("phone:"):
            return False
        phone = request[len("phone:"):]
        say(f"📞 Phone handler processing: {phone}")
        if len(phone) >= 10:
            say("   ✅ Valid phone number")
            return True
        say("   ❌ Invalid phone number")
        return False

    functional: FunctionalChain[str] = FunctionalChain().add(email_handler).add(phone_handler)
    for request in (
        "email:user@example.com",
        "email:invalid-email",
        "phone:1234567890",
        "phone:123",
        "unknown:request",
    ):
        say(f"\nProcessing: {request}")
        if not functional.process(request):
            say(f"❌ No handler found for: {request}")


if __name__ == "__main__":
    sys.exit(run_standalone("chain"))
