r"""Null Object.

Lookups and optional collaborators return a do-nothing object instead of
``None``, so callers never branch on absence:

  - `CustomerRepository.find_customer` returns `NULL_CUSTOMER` on a miss
  - `Application` falls back to `NULL_LOGGER`
  - `DatabaseService` falls back to `NULL_DATABASE`

The three null objects are module-level singletons. They hold no state
and refuse attribute assignment, so sharing them across runs is safe.
Customers return their lines instead of printing them for the same reason.
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar, Dict, List, MutableMapping, Optional, Union

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, Narrator
from ..mixin import MappingMutatorMixin

__all__ = [
    "Customer",
    "RealCustomer",
    "NullCustomer",
    "NULL_CUSTOMER",
    "CustomerRepository",
    "CustomerService",
    "Logger",
    "ConsoleLogger",
    "FileLogger",
    "NullLogger",
    "NULL_LOGGER",
    "Application",
    "DatabaseConnection",
    "PostgreSQLConnection",
    "NullDatabaseConnection",
    "NULL_DATABASE",
    "DatabaseService",
]

logger = logging.getLogger(__name__)


class _NullObject:
    """One shared, immutable instance per subclass."""

    _instance: ClassVar[Optional[Any]] = None

    def __new__(cls):
        if cls.__dict__.get("_instance") is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __copy__(self):
        return self

    def __deepcopy__(self, memo: Dict[int, Any]):
        return self

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


# -----------------------------------------------------------------------------
# Customers
# -----------------------------------------------------------------------------


class Customer(ABC):
    @abstractmethod
    def greet(self) -> str: ...

    @abstractmethod
    def purchase(self, item: str) -> List[str]: ...

    @property
    @abstractmethod
    def discount_rate(self) -> int: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def id(self) -> int: ...

    @property
    def is_null(self) -> bool:
        return False


class RealCustomer(Customer):
    POINTS_PER_PURCHASE = 10

    def __init__(self, customer_id: int, name: str, email: str):
        self._id = customer_id
        self._name = name
        self.email = email
        self.loyalty_points = 0

    def greet(self) -> str:
        return f"Hello {self._name}! Welcome back!"

    def purchase(self, item: str) -> List[str]:
        self.loyalty_points += self.POINTS_PER_PURCHASE
        return [f"{self._name} purchased: {item}", f"Loyalty points: {self.loyalty_points}"]

    @property
    def discount_rate(self) -> int:
        if self.loyalty_points > 100:
            return 15
        if self.loyalty_points > 50:
            return 10
        return 5

    @property
    def name(self) -> str:
        return self._name

    @property
    def id(self) -> int:
        return self._id


class NullCustomer(_NullObject, Customer):
    def greet(self) -> str:
        return "Welcome, guest!"

    def purchase(self, item: str) -> List[str]:
        return [f"Please register to purchase: {item}"]

    @property
    def discount_rate(self) -> int:
        return 0

    @property
    def name(self) -> str:
        return "Guest"

    @property
    def id(self) -> int:
        return -1

    @property
    def is_null(self) -> bool:
        return True


NULL_CUSTOMER = NullCustomer()


class CustomerRepository(MappingMutatorMixin[int, RealCustomer]):
    def __init__(self):
        self._customers: Dict[int, RealCustomer] = {}

    def _get_mapping(self) -> MutableMapping[int, RealCustomer]:
        return self._customers

    def add_customer(self, customer: RealCustomer) -> None:
        self._put_artifact(customer.id, customer)

    def find_customer(self, customer_id: int) -> Customer:
        if not self._has_identifier(customer_id):
            logger.debug("customer %s not found, returning the null customer", customer_id)
            return NULL_CUSTOMER
        return self._get_artifact(customer_id)

    def all_customers(self) -> List[Customer]:
        return [self._get_artifact(key) for key in self._iter_mapping()]

    def __len__(self) -> int:
        return self._len_mapping()


class CustomerService:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.repository = CustomerRepository()

    def add_customer(self, customer_id: int, name: str, email: str) -> None:
        self.repository.add_customer(RealCustomer(customer_id, name, email))

    def process_order(self, customer_id: int, item: str, price: float) -> float:
        say = self.narrator.say
        customer = self.repository.find_customer(customer_id)
        say(customer.greet())
        discount = customer.discount_rate
        final_price = price * (100 - discount) / 100.0
        say(f"Processing order for customer ID {customer_id}")
        say(f"Item: {item}, Original price: ${price:.2f}")
        say(f"Discount: {discount}%, Final price: ${final_price:.2f}")
        for line in customer.purchase(item):
            say(line)
        if customer.is_null:
            say("Note: This was a guest purchase")
        say("---")
        return final_price

    @property
    def customer_count(self) -> int:
        return len(self.repository)


# -----------------------------------------------------------------------------
# Loggers
# -----------------------------------------------------------------------------


class Logger(ABC):
    @abstractmethod
    def log(self, level: str, message: str) -> None: ...

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    def is_null(self) -> bool:
        return False


class ConsoleLogger(Logger):
    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    def log(self, level: str, message: str) -> None:
        self.narrator.say(f"[{level}] {message}")

    @property
    def name(self) -> str:
        return "ConsoleLogger"


class FileLogger(Logger):
    """Appends ``[LEVEL] message`` lines to a file and narrates each write."""

    def __init__(self, narrator: Narrator, path: Union[str, Path]):
        self.narrator = narrator
        self.path = Path(path)

    def log(self, level: str, message: str) -> None:
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(f"[{level}] {message}\n")
        self.narrator.say(f"[FILE LOG to {self.path.name}] [{level}] {message}")

    @property
    def name(self) -> str:
        return f"FileLogger({self.path.name})"


class NullLogger(_NullObject, Logger):
    def log(self, level: str, message: str) -> None:
        pass

    @property
    def name(self) -> str:
        return "NullLogger"

    @property
    def is_null(self) -> bool:
        return True


NULL_LOGGER = NullLogger()


class Application:
    def __init__(self, name: str, narrator: Narrator, log: Optional[Logger] = None):
        self.name = name
        self.narrator = narrator
        self.log = log if log is not None else NULL_LOGGER

    def run(self) -> None:
        self.log.log("INFO", f"{self.name} application starting")
        self.log.log("DEBUG", "Processing data")
        for step in range(1, 4):
            self.log.log("DEBUG", f"Processing step {step}")
        self.log.log("INFO", f"{self.name} application finished")
        if self.log.is_null:
            self.narrator.say(f"(Logging was disabled for {self.name})")


# -----------------------------------------------------------------------------
# Database
# -----------------------------------------------------------------------------


class DatabaseConnection(ABC):
    @abstractmethod
    def execute_query(self, query: str) -> List[str]: ...

    @property
    @abstractmethod
    def connected(self) -> bool: ...

    @property
    @abstractmethod
    def connection_info(self) -> str: ...

    @property
    def is_null(self) -> bool:
        return False


class PostgreSQLConnection(DatabaseConnection):
    def __init__(self, narrator: Narrator, url: str):
        self.narrator = narrator
        self.url = url
        narrator.say(f"Connected to PostgreSQL: {url}")

    def execute_query(self, query: str) -> List[str]:
        self.narrator.say(f"Executing query on PostgreSQL: {query}")
        return [f"Result for: {query}"]

    @property
    def connected(self) -> bool:
        return True

    @property
    def connection_info(self) -> str:
        return f"PostgreSQL: {self.url}"


class NullDatabaseConnection(_NullObject, DatabaseConnection):
    def execute_query(self, query: str) -> List[str]:
        return ["No database connection available"]

    @property
    def connected(self) -> bool:
        return False

    @property
    def connection_info(self) -> str:
        return "No Database Connection"

    @property
    def is_null(self) -> bool:
        return True


NULL_DATABASE = NullDatabaseConnection()


class DatabaseService:
    def __init__(self, connection: Optional[DatabaseConnection] = None):
        self.connection = connection if connection is not None else NULL_DATABASE

    def fetch_users(self) -> List[str]:
        return self.connection.execute_query("SELECT * FROM users")

    @property
    def available(self) -> bool:
        return self.connection.connected and not self.connection.is_null

    @property
    def connection_info(self) -> str:
        return self.connection.connection_info


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("null_object", "Null Object Pattern", "architectural", "Null customer, logger and database")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Null Object Pattern Demo ===\n")

    say("1. Customer Service Example:")
    service = CustomerService(narrator)
    service.add_customer(1, "Alice Johnson", "alice@example.com")
    service.add_customer(2, "Bob Smith", "bob@example.com")
    say(f"Total customers: {service.customer_count}\n")
    service.process_order(1, "Laptop", 1000.0)
    service.process_order(2, "Mouse", 50.0)
    service.process_order(999, "Keyboard", 100.0)

    say("\n2. Logger Example:")
    say("With console logger:")
    Application("MyApp", narrator, ConsoleLogger(narrator)).run()
    say("\nWith null logger (silent):")
    Application("SilentApp", narrator).run()

    say("\n3. Database Example:")
    for label, database in (
        ("Online service", DatabaseService(PostgreSQLConnection(narrator, "postgresql://localhost:5432/mydb"))),
        ("Offline service", DatabaseService()),
    ):
        say(f"\n{label}:")
        say(f"Database info: {database.connection_info}")
        say(f"Database available: {str(database.available).lower()}")
        users = database.fetch_users()
        say(f"Users fetched: {len(users)}")
        for user in users:
            say(f"  - {user}")

    say("\n4. Polymorphic Null Object Usage:")
    loggers: List[Logger] = [ConsoleLogger(narrator), FileLogger(narrator, ctx.workdir / "app.log"), NULL_LOGGER]
    for number, log in enumerate(loggers, 1):
        say(f"Logger {number} ({log.name}):")
        log.log("INFO", "This is a test message")
        if log.is_null:
            say("  ^ This logger is null (silent)")

    say("\n✅ Null Object pattern prevents null pointer errors")
    say("   and provides graceful default behavior!")


if __name__ == "__main__":
    sys.exit(run_standalone("null_object"))
