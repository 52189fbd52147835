from concurrent.futures import ThreadPoolExecutor

import pytest

from pattern_catalog.creational.singleton import DatabaseConnection, Logger
from pattern_catalog.core import PreconditionFailed


@pytest.fixture(autouse=True)
def fresh_singletons():
    DatabaseConnection.reset_for_tests()
    Logger.reset_for_tests()
    yield
    DatabaseConnection.reset_for_tests()
    Logger.reset_for_tests()


class TestDatabaseConnection:
    def test_same_instance(self):
        first = DatabaseConnection.get_instance()
        second = DatabaseConnection.get_instance()
        assert first is second
        assert DatabaseConnection.created == 1

    def test_state_is_shared(self):
        first = DatabaseConnection.get_instance()
        DatabaseConnection.get_instance().set_connection_string("database://remote:5432")
        assert first.execute_query("SELECT 1") == "Executing query: SELECT 1 on database://remote:5432"

    def test_direct_construction_is_refused(self):
        with pytest.raises(PreconditionFailed):
            DatabaseConnection()

    def test_concurrent_first_access_constructs_once(self):
        with ThreadPoolExecutor(max_workers=8) as pool:
            instances = list(pool.map(lambda _: DatabaseConnection.get_instance(), range(32)))
        assert all(instance is instances[0] for instance in instances)
        assert DatabaseConnection.created == 1

    def test_reset(self):
        first = DatabaseConnection.get_instance()
        DatabaseConnection.reset_for_tests()
        assert not DatabaseConnection.has_instance()
        assert DatabaseConnection.get_instance() is not first


class TestLogger:
    def test_constructor_and_accessor_agree(self):
        assert Logger() is Logger.get_instance()

    def test_entries_accumulate(self):
        Logger().log("one")
        assert Logger.get_instance().log("two") == "[LOG] two"
        assert Logger().entries == ["[LOG] one", "[LOG] two"]

    def test_concurrent_logging(self):
        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(lambda i: Logger.get_instance().log(f"worker {i}"), range(20)))
        assert len(Logger().entries) == 20
