import pytest

from pattern_catalog.structural.proxy import (
    BankAccountProxy,
    CachingWebProxy,
    DatabaseProxy,
    ImageProxy,
    RealBankAccount,
    SmartPointer,
    UserRole,
)
from pattern_catalog.core import Fatal, OwnershipScope, PreconditionFailed, SimulatedClock


class TestImageProxy:
    def test_loads_once_on_first_display(self, narrator):
        image = ImageProxy("photo1.jpg", narrator)
        assert not image.loaded
        assert image.estimated_size == 10 * 1024
        image.display()
        image.display()
        assert image.loaded
        assert narrator.lines.count("Loading image from disk: photo1.jpg") == 1


class TestProtectionProxy:
    @pytest.fixture
    def account(self, narrator):
        return RealBankAccount("ACC-1", 1000.0, narrator)

    def test_customer(self, account, narrator):
        proxy = BankAccountProxy(account, UserRole.CUSTOMER, "john", narrator)
        assert proxy.get_balance() == 1000.0
        assert proxy.withdraw(50.0)
        assert proxy.get_account_number() == "***HIDDEN***"
        assert "Access denied: insufficient permissions for account_number" in narrator

    def test_employee_cannot_withdraw(self, account, narrator):
        proxy = BankAccountProxy(account, UserRole.EMPLOYEE, "jane", narrator)
        assert not proxy.withdraw(50.0)
        assert account.balance == 1000.0
        assert proxy.get_account_number() == "ACC-1"

    def test_administrator_can_do_everything(self, account, narrator):
        proxy = BankAccountProxy(account, UserRole.ADMINISTRATOR, "root", narrator)
        assert proxy.deposit(100.0)
        assert proxy.withdraw(1100.0)
        assert not proxy.withdraw(1.0)
        assert proxy.get_account_number() == "ACC-1"


class TestCachingProxy:
    def test_hits_and_expiry(self, narrator):
        clock = SimulatedClock()
        proxy = CachingWebProxy(narrator, ttl=5, timer=clock)
        proxy.fetch("u1")
        proxy.fetch("u1")
        proxy.fetch("u2")
        assert proxy.service.fetches == 2
        assert proxy.cache_size == 2
        clock.advance(6)
        assert proxy.cache_size == 0
        proxy.fetch("u1")
        assert proxy.service.fetches == 3

    def test_clear(self, narrator):
        proxy = CachingWebProxy(narrator, timer=SimulatedClock())
        proxy.fetch("u")
        proxy.clear_cache()
        proxy.fetch("u")
        assert proxy.service.fetches == 2


class TestRemoteProxy:
    def test_auto_connect_and_reconnect(self, narrator):
        db = DatabaseProxy("db:5432", narrator)
        assert db.query("SELECT 1") == "Query result for: SELECT 1"
        db.remote.drop()
        assert db.query("SELECT 2") == "Query result for: SELECT 2"
        assert db.remote.connections == 2
        assert "Proxy: Query failed, attempting to reconnect..." in narrator

    def test_manual_connect_required(self, narrator):
        with pytest.raises(PreconditionFailed):
            DatabaseProxy("db", narrator, auto_connect=False).query("SELECT 1")

    def test_release_disconnects_once(self, narrator):
        db = DatabaseProxy("db", narrator)
        db.query("SELECT 1")
        db.release()
        assert not db.connected
        db.disconnect()
        with pytest.raises(Fatal):
            db.release()


class TestSmartPointer:
    def test_resource_freed_when_last_handle_released(self, narrator):
        freed = []
        with OwnershipScope("outer") as outer:
            first = outer.own(SmartPointer("payload", narrator, on_free=freed.append))
            with OwnershipScope("inner") as inner:
                second = inner.own(first.copy())
                assert second.ref_count == 2
            assert first.ref_count == 1
            assert not first.freed
        assert first.freed
        assert freed == ["payload"]

    def test_released_handle_is_unusable(self, narrator):
        pointer = SmartPointer(1, narrator)
        pointer.release()
        with pytest.raises(PreconditionFailed):
            pointer.get()
        with pytest.raises(Fatal):
            pointer.release()
