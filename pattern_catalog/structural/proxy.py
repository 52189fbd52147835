r"""Proxy.

A stand-in with the same interface as the real subject that controls how
and when the subject is reached:

  - virtual: `ImageProxy` builds the real image on the first `display()`;
    name and estimated size never load it.
  - protection: `BankAccountProxy` checks the caller's role first and
    answers a denied call with a sentinel (-1, "***HIDDEN***", False).
  - caching: `CachingWebProxy` keeps responses in a `cachetools.TTLCache`
    driven by an injectable timer, so the real service is hit once per TTL.
  - remote: `DatabaseProxy` connects lazily, retries a failed query once
    after reconnecting, and disconnects idempotently.
  - smart: `SmartPointer` handles share one reference count; the last
    `release()` frees the resource exactly once.
"""

from __future__ import annotations

import logging
import sys
import time
from enum import Enum
from typing import Callable, Dict, FrozenSet, Generic, Optional, TypeVar

from cachetools import TTLCache

from ..catalog import register_demo, run_standalone
from ..core import (
    AccessDenied,
    CatalogError,
    DemoContext,
    Narrator,
    OwnershipScope,
    PreconditionFailed,
    Releasable,
)

__all__ = [
    "RealImage",
    "ImageProxy",
    "UserRole",
    "RealBankAccount",
    "BankAccountProxy",
    "RealWebService",
    "CachingWebProxy",
    "RemoteDatabaseService",
    "DatabaseProxy",
    "SmartPointer",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")


# -----------------------------------------------------------------------------
# Virtual Proxy
# -----------------------------------------------------------------------------


class RealImage:
    BYTES_PER_CHAR = 1024

    def __init__(self, filename: str, narrator: Narrator):
        self.filename = filename
        self.narrator = narrator
        self.narrator.say(f"Loading image from disk: {filename}")
        self.narrator.pause(1000)
        self.size = len(filename) * self.BYTES_PER_CHAR
        self.narrator.say(f"Image loaded: {filename} ({self.size} bytes)")

    def display(self) -> None:
        self.narrator.say(f"Displaying image: {self.filename} ({self.size} bytes)")


class ImageProxy:
    def __init__(self, filename: str, narrator: Narrator):
        self.filename = filename
        self.narrator = narrator
        self._real: Optional[RealImage] = None

    @property
    def loaded(self) -> bool:
        return self._real is not None

    def display(self) -> None:
        if self._real is None:
            self.narrator.say("Proxy: Creating real image on first access")
            self._real = RealImage(self.filename, self.narrator)
        self._real.display()

    @property
    def estimated_size(self) -> int:
        """Size without touching the disk."""
        if self._real is None:
            return len(self.filename) * RealImage.BYTES_PER_CHAR
        return self._real.size


# -----------------------------------------------------------------------------
# Protection Proxy
# -----------------------------------------------------------------------------


class UserRole(str, Enum):
    CUSTOMER = "Customer"
    EMPLOYEE = "Employee"
    ADMINISTRATOR = "Administrator"


class RealBankAccount:
    def __init__(self, account_number: str, balance: float, narrator: Narrator):
        self.account_number = account_number
        self.balance = balance
        self.narrator = narrator

    def deposit(self, amount: float) -> None:
        self.balance += amount
        self.narrator.say(f"Deposited ${amount:.2f}. New balance: ${self.balance:.2f}")

    def withdraw(self, amount: float) -> bool:
        if self.balance < amount:
            self.narrator.say(f"Insufficient funds. Current balance: ${self.balance:.2f}")
            return False
        self.balance -= amount
        self.narrator.say(f"Withdrew ${amount:.2f}. New balance: ${self.balance:.2f}")
        return True


_EVERYONE = frozenset(UserRole)


class BankAccountProxy:
    POLICY: Dict[str, FrozenSet[UserRole]] = {
        "balance": _EVERYONE,
        "deposit": _EVERYONE,
        "withdraw": frozenset({UserRole.CUSTOMER, UserRole.ADMINISTRATOR}),
        "account_number": frozenset({UserRole.EMPLOYEE, UserRole.ADMINISTRATOR}),
    }

    def __init__(self, account: RealBankAccount, role: UserRole, user_id: str, narrator: Narrator):
        self._account = account
        self.role = role
        self.user_id = user_id
        self.narrator = narrator

    def _authorize(self, operation: str) -> None:
        self.narrator.say(
            f"[Security] Checking permission for {self.user_id} ({self.role.value}) to perform: {operation}"
        )
        if self.role not in self.POLICY.get(operation, frozenset()):
            raise AccessDenied(
                f"Access denied: insufficient permissions for {operation}",
                [f"Allowed roles: {', '.join(sorted(r.value for r in self.POLICY.get(operation, ())))}"],
                {"participant": self.user_id, "operation": operation},
            )

    def get_balance(self) -> float:
        try:
            self._authorize("balance")
        except AccessDenied as exc:
            self.narrator.say(exc.message)
            return -1
        return self._account.balance

    def deposit(self, amount: float) -> bool:
        try:
            self._authorize("deposit")
        except AccessDenied as exc:
            self.narrator.say(exc.message)
            return False
        self._account.deposit(amount)
        return True

    def withdraw(self, amount: float) -> bool:
        try:
            self._authorize("withdraw")
        except AccessDenied as exc:
            self.narrator.say(exc.message)
            return False
        return self._account.withdraw(amount)

    def get_account_number(self) -> str:
        try:
            self._authorize("account_number")
        except AccessDenied as exc:
            self.narrator.say(exc.message)
            return "***HIDDEN***"
        return self._account.account_number


# -----------------------------------------------------------------------------
# Caching Proxy
# -----------------------------------------------------------------------------


class RealWebService:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.fetches = 0

    def fetch(self, url: str) -> str:
        self.fetches += 1
        self.narrator.say(f"Fetching data from: {url}")
        self.narrator.pause(2000)
        return f"Data from {url} - Content: Lorem ipsum dolor sit amet..."


class CachingWebProxy:
    """Responses expire `ttl` seconds after they were stored, measured by `timer`."""

    def __init__(
        self,
        narrator: Narrator,
        ttl: float = 30.0,
        timer: Callable[[], float] = time.monotonic,
        maxsize: int = 128,
    ):
        self.narrator = narrator
        self.service = RealWebService(narrator)
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)

    def fetch(self, url: str) -> str:
        cached = self._cache.get(url)
        if cached is not None:
            self.narrator.say(f"Cache hit! Returning cached data for: {url}")
            return cached
        self.narrator.say("Cache miss. Fetching fresh data...")
        data = self.service.fetch(url)
        self._cache[url] = data
        return data

    def clear_cache(self) -> None:
        self._cache.clear()
        self.narrator.say("Cache cleared")

    @property
    def cache_size(self) -> int:
        self._cache.expire()
        return len(self._cache)


# -----------------------------------------------------------------------------
# Remote Proxy
# -----------------------------------------------------------------------------


class RemoteDatabaseService:
    def __init__(self, address: str, narrator: Narrator):
        self.address = address
        self.narrator = narrator
        self.connected = False
        self.connections = 0

    def connect(self) -> None:
        self.narrator.say(f"Connecting to database server: {self.address}")
        self.narrator.pause(1500)
        self.connected = True
        self.connections += 1
        self.narrator.say("Connected successfully!")

    def disconnect(self) -> None:
        self.narrator.say("Disconnecting from database server")
        self.connected = False

    def drop(self) -> None:
        """Simulate the server closing the connection."""
        self.connected = False

    def query(self, sql: str) -> str:
        if not self.connected:
            raise PreconditionFailed(
                "Not connected to database",
                ["Connect before querying"],
                {"participant": self.address, "operation": "query"},
            )
        self.narrator.say(f"Executing query: {sql}")
        self.narrator.pause(800)
        return f"Query result for: {sql}"


class DatabaseProxy(Releasable):
    def __init__(self, address: str, narrator: Narrator, auto_connect: bool = True):
        self.address = address
        self.narrator = narrator
        self.auto_connect = auto_connect
        self.remote: Optional[RemoteDatabaseService] = None

    @property
    def connected(self) -> bool:
        return self.remote is not None and self.remote.connected

    def connect(self) -> None:
        if self.remote is None:
            self.remote = RemoteDatabaseService(self.address, self.narrator)
        self.remote.connect()

    def disconnect(self) -> None:
        """Close the connection; a no-op when nothing is open."""
        if self.connected:
            self.remote.disconnect()

    def query(self, sql: str) -> str:
        if self.remote is None:
            if not self.auto_connect:
                raise PreconditionFailed(
                    "Not connected to database",
                    ["Call connect() or enable auto_connect"],
                    {"participant": "DatabaseProxy", "operation": "query"},
                )
            self.narrator.say("Proxy: Auto-connecting to database...")
            self.connect()
        try:
            return self.remote.query(sql)
        except CatalogError:
            self.narrator.say("Proxy: Query failed, attempting to reconnect...")
            self.connect()
            return self.remote.query(sql)

    def _on_release(self) -> None:
        self.disconnect()


# -----------------------------------------------------------------------------
# Smart Proxy
# -----------------------------------------------------------------------------


class _ControlBlock(Generic[T]):
    def __init__(self, resource: T, on_free: Optional[Callable[[T], None]]):
        self.resource: Optional[T] = resource
        self.count = 1
        self.on_free = on_free
        self.frees = 0


class SmartPointer(Releasable, Generic[T]):
    """Reference-counted handle; every handle is released exactly once."""

    def __init__(
        self,
        resource: T,
        narrator: Narrator,
        on_free: Optional[Callable[[T], None]] = None,
        _block: Optional[_ControlBlock[T]] = None,
    ):
        self.narrator = narrator
        if _block is None:
            self._block = _ControlBlock(resource, on_free)
            self.narrator.say(f"SmartPointer created, ref count: {self._block.count}")
        else:
            self._block = _block

    def copy(self) -> "SmartPointer[T]":
        self._require_live("copy")
        self._block.count += 1
        self.narrator.say(f"SmartPointer copied, ref count: {self._block.count}")
        return SmartPointer(self._block.resource, self.narrator, _block=self._block)

    def get(self) -> T:
        self._require_live("get")
        return self._block.resource

    @property
    def ref_count(self) -> int:
        return self._block.count

    @property
    def freed(self) -> bool:
        return self._block.frees > 0

    def _require_live(self, operation: str) -> None:
        if self.released:
            raise PreconditionFailed(
                "SmartPointer already released",
                ["Copy the pointer before releasing it"],
                {"participant": "SmartPointer", "operation": operation},
            )

    def _on_release(self) -> None:
        block = self._block
        block.count -= 1
        self.narrator.say(f"SmartPointer released, ref count: {block.count}")
        if block.count == 0:
            resource, block.resource = block.resource, None
            block.frees += 1
            if block.on_free is not None:
                block.on_free(resource)
            self.narrator.say("Object deleted")


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("proxy", "Proxy Pattern", "structural", "Virtual, protection, caching, remote and smart proxies")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Proxy Pattern Demo ===")

    say("\n1. Virtual Proxy - Lazy Loading Images:")
    say("=" * 50)
    images = [ImageProxy(name, narrator) for name in ("photo1.jpg", "photo2.jpg", "photo3.jpg")]
    say("\nImages created (but not loaded yet)")
    say("\nDisplaying first image:")
    images[0].display()
    say("\nDisplaying first image again (already loaded):")
    images[0].display()
    say("\nChecking file sizes:")
    for image in images:
        state = "loaded" if image.loaded else "not loaded"
        say(f"{image.filename}: {image.estimated_size} bytes ({state})")

    say("\n\n2. Protection Proxy - Bank Account Security:")
    say("=" * 50)
    for role, user, number, balance in (
        (UserRole.CUSTOMER, "john_doe", "ACC-123456", 1000.0),
        (UserRole.EMPLOYEE, "jane_smith", "ACC-789012", 2000.0),
        (UserRole.ADMINISTRATOR, "root_admin", "ACC-345678", 500.0),
    ):
        say(f"\n{role.value} Access:")
        proxy = BankAccountProxy(RealBankAccount(number, balance, narrator), role, user, narrator)
        say(f"Balance: ${proxy.get_balance():.2f}")
        proxy.deposit(100.0)
        proxy.withdraw(50.0)
        say(f"Account Number: {proxy.get_account_number()}")

    say("\n\n3. Caching Proxy - Web Service:")
    say("=" * 50)
    web = CachingWebProxy(narrator, ttl=5, timer=ctx.clock)
    say("\nFirst request:")
    web.fetch("https://api.example.com/users")
    say("\nSecond request (should hit cache):")
    web.fetch("https://api.example.com/users")
    say("\nDifferent URL:")
    web.fetch("https://api.example.com/posts")
    say(f"\nCache size: {web.cache_size}")
    say("\nSix seconds later:")
    ctx.sleep(6000)
    web.fetch("https://api.example.com/users")
    say(f"Real service was called {web.service.fetches} times")

    say("\n\n4. Remote Proxy - Database Connection:")
    say("=" * 50)
    db = ctx.own(DatabaseProxy("db.example.com:5432", narrator))
    say("\nExecuting queries through proxy:")
    say(f"Result: {db.query('SELECT * FROM users')}")
    say("\nServer drops the connection...")
    db.remote.drop()
    say(f"Result: {db.query('SELECT * FROM orders WHERE user_id = 1')}")
    db.disconnect()
    say("Disconnecting again is a no-op")
    db.disconnect()

    manual = DatabaseProxy("replica.example.com:5432", narrator, auto_connect=False)
    try:
        manual.query("SELECT 1")
    except CatalogError as exc:
        say(f"Error: {exc.message}")

    say("\n\n5. Smart Proxy - Reference Counting:")
    say("=" * 50)
    with OwnershipScope("outer") as outer:
        first = outer.own(SmartPointer("Hello, World!", narrator))
        say(f"pointer 1 content: {first.get()}")
        with OwnershipScope("inner") as inner:
            second = inner.own(first.copy())
            say(f"pointer 2 content: {second.get()}")
            say(f"Reference count: {second.ref_count}")
        say(f"After pointer 2 is released, ref count: {first.ref_count}")
    say(f"Resource freed: {first.freed}")

    say("\n\n6. Proxy Pattern Benefits:")
    say("=" * 50)
    say("✓ Virtual Proxy: Lazy loading saves memory and startup time")
    say("✓ Protection Proxy: Controls access based on user permissions")
    say("✓ Caching Proxy: Improves performance by avoiding redundant operations")
    say("✓ Remote Proxy: Hides complexity of remote communication")
    say("✓ Smart Proxy: Adds automatic memory management")


if __name__ == "__main__":
    sys.exit(run_standalone("proxy"))
