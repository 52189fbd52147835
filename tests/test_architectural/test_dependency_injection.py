import json

import pytest

from pattern_catalog.architectural.dependency_injection import (
    ApplicationContext,
    ConsoleLogger,
    Database,
    DIContainer,
    Environment,
    FileLogger,
    InMemoryDatabase,
    Logger,
    MockEmailService,
    PostgreSQLDatabase,
    SMTPEmailService,
    ServiceFactory,
    UserService,
    UserServiceBuilder,
)
from pattern_catalog.core import PreconditionFailed


def make_service(narrator, database=None):
    return UserService(
        narrator, ConsoleLogger(narrator), database or InMemoryDatabase(), MockEmailService(narrator)
    )


class TestUserService:
    def test_create_and_get(self, narrator):
        service = make_service(narrator)
        record_id = service.create_user("Alice", "alice@example.com")
        assert record_id == "ID1"
        assert json.loads(service.get_user(record_id)) == {"name": "Alice", "email": "alice@example.com"}
        assert service.email.sent == 1
        assert "[CONSOLE LOG] User created with ID: ID1" in narrator

    def test_disconnected_database(self, narrator):
        database = PostgreSQLDatabase(narrator, "postgresql://x")
        database.disconnect()
        service = make_service(narrator, database)
        assert service.create_user("Late", "late@example.com") is None
        assert service.log.lines[-1] == "Database connection failed"
        assert service.email.sent == 0

    def test_postgres_ids_are_stable(self, narrator):
        first = PostgreSQLDatabase(narrator, "a").save("payload")
        second = PostgreSQLDatabase(narrator, "b").save("payload")
        assert first == second
        assert first.startswith("POSTGRES_ID_")

    def test_service_info(self, narrator):
        service = UserService(
            narrator, FileLogger(narrator, "x.log"), InMemoryDatabase(), SMTPEmailService(narrator, "smtp.x")
        )
        service.print_service_info()
        assert narrator.lines == [
            "UserService Configuration:",
            "  Logger: FileLogger(x.log)",
            "  Database: Connected=True",
            "  Email: SMTP(smtp.x)",
        ]


class TestBuilder:
    def test_complete_builder(self, narrator):
        service = (
            UserServiceBuilder(narrator)
            .with_logger(ConsoleLogger(narrator))
            .with_database(InMemoryDatabase())
            .with_email_service(MockEmailService(narrator))
            .build()
        )
        assert isinstance(service, UserService)

    def test_missing_dependencies(self, narrator):
        with pytest.raises(PreconditionFailed) as info:
            UserServiceBuilder(narrator).with_logger(ConsoleLogger(narrator)).build()
        assert info.value.suggestions == ["Missing: database, email"]


def test_factory_presets(narrator):
    assert ServiceFactory.create_development(narrator).log.name == "ConsoleLogger"
    assert ServiceFactory.create_test(narrator).log.name == "FileLogger(test.log)"
    production = ServiceFactory.create_production(narrator)
    assert production.email.provider == "SMTP(smtp.company.com)"
    assert "Connected to PostgreSQL: postgresql://prod-server:5432/users" in narrator


class TestContainer:
    def test_instances_are_shared_factories_are_fresh(self, narrator):
        container = DIContainer(narrator)
        shared = InMemoryDatabase()
        container.register_instance("db", shared)
        container.register_factory("log", lambda: ConsoleLogger(narrator))
        assert container.resolve("db") is shared
        assert container.resolve("log") is not container.resolve("log")
        assert container.service_names() == ["db (instance)", "log (factory)"]

    def test_miss_and_mismatch_return_none(self, narrator):
        container = DIContainer(narrator)
        container.register_instance("db", InMemoryDatabase())
        assert container.resolve("cache") is None
        assert container.resolve("db", Logger) is None
        assert isinstance(container.resolve("db", Database), InMemoryDatabase)
        assert narrator.lines == ["Service not found: cache", "Type mismatch for service: db"]

    def test_has_service(self, narrator):
        container = DIContainer(narrator)
        container.register_factory("x", object)
        assert container.has_service("x")
        assert not container.has_service("y")


@pytest.mark.parametrize(
    "environment, logger_name",
    [
        (Environment.DEVELOPMENT, "ConsoleLogger"),
        (Environment.PRODUCTION, "FileLogger(production.log)"),
        (Environment.TEST, "FileLogger(test.log)"),
    ],
)
def test_application_context(narrator, environment, logger_name):
    service = ApplicationContext(environment, narrator).get_user_service()
    assert service.log.name == logger_name
    assert service.create_user("U", "u@example.com") is not None


def test_application_context_with_broken_container(narrator):
    context = ApplicationContext(Environment.DEVELOPMENT, narrator)
    context.container.register_instance("database", "not a database")
    with pytest.raises(PreconditionFailed):
        context.get_user_service()
