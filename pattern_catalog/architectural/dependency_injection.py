r"""Dependency Injection.

`UserService` receives its logger, database and mail service through the
constructor and never builds them itself. The samples show four ways of
doing the wiring:

  1. by hand,
  2. through `UserServiceBuilder` (all three dependencies are required),
  3. through `ServiceFactory` presets per environment,
  4. through `DIContainer`, a keyed registry of instances and factories.

`ApplicationContext(environment)` fills a container for one environment
and resolves a ready `UserService` from it.

\dot
digraph DI {
    rankdir=LR;
    node [shape=rectangle];
    "ApplicationContext" -> "DIContainer";
    "DIContainer" -> "UserService" [label="resolve"];
    "UserService" -> "Logger";
    "UserService" -> "Database";
    "UserService" -> "EmailService";
}
\enddot
"""

from __future__ import annotations

import json
import logging
import sys
import zlib
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, List, MutableMapping, Optional, Type

from pydantic import BaseModel, ConfigDict

from ..catalog import register_demo, run_standalone
from ..core import CatalogError, DemoContext, Narrator, PreconditionFailed
from ..mixin import MappingMutatorMixin

__all__ = [
    "Logger",
    "ConsoleLogger",
    "FileLogger",
    "Database",
    "InMemoryDatabase",
    "PostgreSQLDatabase",
    "EmailService",
    "MockEmailService",
    "SMTPEmailService",
    "UserService",
    "UserServiceBuilder",
    "ServiceFactory",
    "DIContainer",
    "Environment",
    "ApplicationContext",
]

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Roles and Implementations
# -----------------------------------------------------------------------------


class Logger(ABC):
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.lines: List[str] = []

    @abstractmethod
    def log(self, message: str) -> None: ...

    @property
    @abstractmethod
    def name(self) -> str: ...


class ConsoleLogger(Logger):
    def log(self, message: str) -> None:
        self.lines.append(message)
        self.narrator.say(f"[CONSOLE LOG] {message}")

    @property
    def name(self) -> str:
        return "ConsoleLogger"


class FileLogger(Logger):
    """Keeps the lines it would write to `filename`."""

    def __init__(self, narrator: Narrator, filename: str):
        super().__init__(narrator)
        self.filename = filename

    def log(self, message: str) -> None:
        self.lines.append(message)
        self.narrator.say(f"[FILE LOG to {self.filename}] {message}")

    @property
    def name(self) -> str:
        return f"FileLogger({self.filename})"


class Database(ABC):
    @abstractmethod
    def save(self, data: str) -> str: ...

    @abstractmethod
    def find(self, record_id: str) -> Optional[str]: ...

    @property
    @abstractmethod
    def connected(self) -> bool: ...


class InMemoryDatabase(Database):
    def __init__(self):
        self._records: Dict[str, str] = {}
        self._next_id = 0

    def save(self, data: str) -> str:
        self._next_id += 1
        record_id = f"ID{self._next_id}"
        self._records[record_id] = data
        return record_id

    def find(self, record_id: str) -> Optional[str]:
        return self._records.get(record_id)

    @property
    def connected(self) -> bool:
        return True


class PostgreSQLDatabase(Database):
    def __init__(self, narrator: Narrator, url: str):
        self.narrator = narrator
        self.url = url
        self._connected = True
        self._records: Dict[str, str] = {}
        narrator.say(f"Connected to PostgreSQL: {url}")

    def save(self, data: str) -> str:
        self.narrator.say(f"Saving to PostgreSQL: {data}")
        record_id = f"POSTGRES_ID_{zlib.crc32(data.encode('utf-8')) % 1000}"
        self._records[record_id] = data
        return record_id

    def find(self, record_id: str) -> Optional[str]:
        return self._records.get(record_id)

    def disconnect(self) -> None:
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected


class EmailService(ABC):
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.sent = 0

    def send_email(self, to: str, subject: str, body: str) -> bool:
        self.sent += 1
        self.narrator.say(f"{self.prefix} To: {to}, Subject: {subject}, Body: {body}")
        return True

    @property
    @abstractmethod
    def prefix(self) -> str: ...

    @property
    @abstractmethod
    def provider(self) -> str: ...


class MockEmailService(EmailService):
    prefix = "[MOCK EMAIL]"
    provider = "MockEmailService"


class SMTPEmailService(EmailService):
    def __init__(self, narrator: Narrator, server: str):
        super().__init__(narrator)
        self.server = server

    @property
    def prefix(self) -> str:
        return f"[SMTP via {self.server}]"

    @property
    def provider(self) -> str:
        return f"SMTP({self.server})"


# -----------------------------------------------------------------------------
# Client
# -----------------------------------------------------------------------------


class UserService:
    def __init__(self, narrator: Narrator, log: Logger, database: Database, email: EmailService):
        self.narrator = narrator
        self.log = log
        self.database = database
        self.email = email

    def create_user(self, name: str, email: str) -> Optional[str]:
        self.log.log(f"Creating user: {name}")
        if not self.database.connected:
            self.log.log("Database connection failed")
            return None
        record_id = self.database.save(json.dumps({"name": name, "email": email}, separators=(",", ":")))
        self.log.log(f"User created with ID: {record_id}")
        self.email.send_email(email, "Welcome!", f"Hello {name}, welcome to our service!")
        return record_id

    def get_user(self, record_id: str) -> Optional[str]:
        self.log.log(f"Retrieving user with ID: {record_id}")
        return self.database.find(record_id)

    def print_service_info(self) -> None:
        say = self.narrator.say
        say("UserService Configuration:")
        say(f"  Logger: {self.log.name}")
        say(f"  Database: Connected={self.database.connected}")
        say(f"  Email: {self.email.provider}")


class UserServiceBuilder:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._log: Optional[Logger] = None
        self._database: Optional[Database] = None
        self._email: Optional[EmailService] = None

    def with_logger(self, log: Logger) -> "UserServiceBuilder":
        self._log = log
        return self

    def with_database(self, database: Database) -> "UserServiceBuilder":
        self._database = database
        return self

    def with_email_service(self, email: EmailService) -> "UserServiceBuilder":
        self._email = email
        return self

    def build(self) -> UserService:
        missing = [
            role
            for role, value in (("logger", self._log), ("database", self._database), ("email", self._email))
            if value is None
        ]
        if missing:
            raise PreconditionFailed(
                "All dependencies must be provided",
                [f"Missing: {', '.join(missing)}"],
                {"participant": "UserServiceBuilder", "operation": "build"},
            )
        return UserService(self.narrator, self._log, self._database, self._email)


class ServiceFactory:
    @staticmethod
    def create_development(narrator: Narrator) -> UserService:
        return UserService(narrator, ConsoleLogger(narrator), InMemoryDatabase(), MockEmailService(narrator))

    @staticmethod
    def create_production(narrator: Narrator) -> UserService:
        return UserService(
            narrator,
            FileLogger(narrator, "production.log"),
            PostgreSQLDatabase(narrator, "postgresql://prod-server:5432/users"),
            SMTPEmailService(narrator, "smtp.company.com"),
        )

    @staticmethod
    def create_test(narrator: Narrator) -> UserService:
        return UserService(narrator, FileLogger(narrator, "test.log"), InMemoryDatabase(), MockEmailService(narrator))


# -----------------------------------------------------------------------------
# Container
# -----------------------------------------------------------------------------


class _Registration(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    singleton: bool
    provider: Any

    @property
    def label(self) -> str:
        return "instance" if self.singleton else "factory"


class DIContainer(MappingMutatorMixin[str, _Registration]):
    """Named services; instances are shared, factories build on every resolve."""

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._services: Dict[str, _Registration] = {}

    def _get_mapping(self) -> MutableMapping[str, _Registration]:
        return self._services

    def register_instance(self, name: str, instance: Any) -> None:
        self._put_artifact(name, _Registration(singleton=True, provider=instance))

    def register_factory(self, name: str, factory: Callable[[], Any]) -> None:
        self._put_artifact(name, _Registration(singleton=False, provider=factory))

    def resolve(self, name: str, expected: Optional[Type[Any]] = None) -> Optional[Any]:
        """Return the service or ``None`` (narrated) on a miss or type mismatch."""
        if not self._has_identifier(name):
            self.narrator.say(f"Service not found: {name}")
            return None
        registration = self._get_artifact(name)
        service = registration.provider if registration.singleton else registration.provider()
        if expected is not None and not isinstance(service, expected):
            self.narrator.say(f"Type mismatch for service: {name}")
            return None
        return service

    def has_service(self, name: str) -> bool:
        return self._has_identifier(name)

    def service_names(self) -> List[str]:
        return [f"{name} ({self._get_artifact(name).label})" for name in self._iter_mapping()]


class Environment(str, Enum):
    DEVELOPMENT = "Development"
    PRODUCTION = "Production"
    TEST = "Test"


class ApplicationContext:
    def __init__(self, environment: Environment, narrator: Narrator):
        self.environment = environment
        self.narrator = narrator
        self.container = DIContainer(narrator)
        self._setup()

    def _setup(self) -> None:
        c, n = self.container, self.narrator
        if self.environment is Environment.DEVELOPMENT:
            c.register_instance("logger", ConsoleLogger(n))
            c.register_instance("database", InMemoryDatabase())
            c.register_instance("email", MockEmailService(n))
        elif self.environment is Environment.PRODUCTION:
            c.register_factory("logger", lambda: FileLogger(n, "production.log"))
            c.register_factory("database", lambda: PostgreSQLDatabase(n, "postgresql://prod:5432/app"))
            c.register_factory("email", lambda: SMTPEmailService(n, "smtp.company.com"))
        else:
            c.register_instance("logger", FileLogger(n, "test.log"))
            c.register_instance("database", InMemoryDatabase())
            c.register_instance("email", MockEmailService(n))

    def get_user_service(self) -> UserService:
        log = self.container.resolve("logger", Logger)
        database = self.container.resolve("database", Database)
        email = self.container.resolve("email", EmailService)
        if log is None or database is None or email is None:
            raise PreconditionFailed(
                "Failed to resolve all dependencies",
                [f"Registered: {', '.join(self.container.service_names())}"],
                {"participant": "ApplicationContext", "operation": "get_user_service"},
            )
        return UserService(self.narrator, log, database, email)


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("dependency_injection", "Dependency Injection", "architectural", "Constructor injection and a DI container")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Dependency Injection Pattern Demo ===\n")

    say("1. Manual Dependency Injection:")
    service = UserService(narrator, ConsoleLogger(narrator), InMemoryDatabase(), MockEmailService(narrator))
    service.print_service_info()
    user_id = service.create_user("Alice Johnson", "alice@example.com")
    say(f"Created user with ID: {user_id}")
    say(f"Retrieved user data: {service.get_user(user_id)}\n")

    say("2. Builder Pattern for DI:")
    built = (
        UserServiceBuilder(narrator)
        .with_logger(FileLogger(narrator, "users.log"))
        .with_database(InMemoryDatabase())
        .with_email_service(MockEmailService(narrator))
        .build()
    )
    built.print_service_info()
    built.create_user("Bob Smith", "bob@example.com")
    try:
        UserServiceBuilder(narrator).with_logger(ConsoleLogger(narrator)).build()
    except CatalogError as exc:
        say(f"Incomplete builder: {exc.message}")
    say()

    say("3. Factory Pattern for DI:")
    say("Development Service:")
    development = ServiceFactory.create_development(narrator)
    development.print_service_info()
    development.create_user("Charlie Brown", "charlie@example.com")
    say("\nProduction Service:")
    production = ServiceFactory.create_production(narrator)
    production.print_service_info()
    production.create_user("Diana Prince", "diana@example.com")
    production.database.disconnect()
    say(f"After a database outage: create_user -> {production.create_user('Late User', 'late@example.com')}")
    say()

    say("4. DI Container:")
    container = DIContainer(narrator)
    container.register_instance("console_logger", ConsoleLogger(narrator))
    container.register_instance("file_logger", FileLogger(narrator, "app.log"))
    container.register_instance("memory_db", InMemoryDatabase())
    container.register_factory("smtp_email", lambda: SMTPEmailService(narrator, "smtp.example.com"))
    say("Registered services:")
    for name in container.service_names():
        say(f"  - {name}")
    resolved_log = container.resolve("console_logger", Logger)
    resolved_db = container.resolve("memory_db", Database)
    resolved_email = container.resolve("smtp_email", EmailService)
    if resolved_log is not None and resolved_db is not None and resolved_email is not None:
        say("\nContainer-resolved service:")
        from_container = UserService(narrator, resolved_log, resolved_db, resolved_email)
        from_container.print_service_info()
        from_container.create_user("Eve Adams", "eve@example.com")
    say(f"\nFactory services are fresh: {container.resolve('smtp_email') is not container.resolve('smtp_email')}")
    container.resolve("redis_cache")
    container.resolve("memory_db", Logger)
    say()

    say("5. Environment-based Configuration:")
    for environment in Environment:
        say(f"\n{environment.value} Environment:")
        context = ApplicationContext(environment, narrator)
        env_service = context.get_user_service()
        env_service.print_service_info()
        env_service.create_user(f"User {environment.value}", f"user@{environment.value}.com")

    say("\n✅ Dependency Injection provides flexibility, testability,")
    say("   and loose coupling between components!")


if __name__ == "__main__":
    sys.exit(run_standalone("dependency_injection"))
