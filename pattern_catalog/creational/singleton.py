r"""Singleton.

One process-wide instance reached through `get_instance()`.

`DatabaseConnection` uses double-checked locking: the unlocked check keeps
the common path cheap and the locked re-check stops two threads from both
constructing. `Logger` does the same through `__new__`. Singletons outlive
any one run, so they hold no narrator; callers narrate what they return.
`reset_for_tests()` drops the instance so tests start clean.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import ClassVar, List, Optional

from ..catalog import register_demo, run_standalone
from ..core import CatalogError, DemoContext, PreconditionFailed

__all__ = ["DatabaseConnection", "Logger"]

logger = logging.getLogger(__name__)

_CONSTRUCT = object()


class DatabaseConnection:
    DEFAULT_URL = "database://localhost:5432"

    _instance: ClassVar[Optional["DatabaseConnection"]] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()
    created: ClassVar[int] = 0

    def __init__(self, _token: object = None):
        if _token is not _CONSTRUCT:
            raise PreconditionFailed(
                "DatabaseConnection cannot be constructed directly",
                ["Use DatabaseConnection.get_instance()"],
                {"participant": "DatabaseConnection", "operation": "__init__"},
            )
        self.connection_string = self.DEFAULT_URL
        self.queries: List[str] = []
        type(self).created += 1
        logger.info("database connection established")

    @classmethod
    def get_instance(cls) -> "DatabaseConnection":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls(_CONSTRUCT)
        return cls._instance

    @classmethod
    def has_instance(cls) -> bool:
        return cls._instance is not None

    @classmethod
    def reset_for_tests(cls) -> None:
        with cls._lock:
            cls._instance = None
            cls.created = 0

    def execute_query(self, query: str) -> str:
        self.queries.append(query)
        return f"Executing query: {query} on {self.connection_string}"

    def set_connection_string(self, url: str) -> None:
        self.connection_string = url


class Logger:
    _instance: ClassVar[Optional["Logger"]] = None
    _lock: ClassVar[threading.Lock] = threading.Lock()

    entries: List[str]

    def __new__(cls) -> "Logger":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    instance = super().__new__(cls)
                    instance.entries = []
                    cls._instance = instance
        return cls._instance

    @classmethod
    def get_instance(cls) -> "Logger":
        return cls()

    @classmethod
    def reset_for_tests(cls) -> None:
        with cls._lock:
            cls._instance = None

    def log(self, message: str) -> str:
        line = f"[LOG] {message}"
        self.entries.append(line)
        return line


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


def _worker(worker_id: int) -> List[str]:
    db = DatabaseConnection.get_instance()
    return [
        db.execute_query(f"SELECT * FROM users WHERE id = {worker_id}"),
        Logger.get_instance().log(f"Worker {worker_id} completed"),
    ]


@register_demo("singleton", "Singleton Pattern", "creational", "Database connection and logger singletons")
def demo(ctx: DemoContext) -> None:
    say = ctx.say
    say("=== Singleton Pattern Demo ===")

    fresh = not DatabaseConnection.has_instance()
    db1 = DatabaseConnection.get_instance()
    if fresh:
        say("Database connection established")
    db2 = DatabaseConnection.get_instance()
    say(f"Are both instances the same? {'Yes' if db1 is db2 else 'No'}")

    original = db1.connection_string
    say(db1.execute_query("SELECT * FROM products"))
    db2.set_connection_string("database://remote:5432")
    say(db1.execute_query("SELECT * FROM orders"))
    db2.set_connection_string(original)

    say("\nWorkers sharing the instance:")
    for worker_id in range(1, 6):
        for line in _worker(worker_id):
            say(line)
    say(f"Connections created in this process: {DatabaseConnection.created}")

    say("\nDirect construction:")
    try:
        DatabaseConnection()
    except CatalogError as exc:
        say(f"Error: {exc.message}")

    say("\nTesting Logger singleton:")
    logger1 = Logger.get_instance()
    logger2 = Logger()
    say(f"Are both logger instances the same? {'Yes' if logger1 is logger2 else 'No'}")
    say(logger1.log("Application started"))
    say(logger2.log("Application running"))


if __name__ == "__main__":
    sys.exit(run_standalone("singleton"))
