"""Tests for the registration and login handlers."""

import asyncio
import dataclasses
from typing import Any

import pytest

from userauth.auth import (
    AccountService,
    AuthenticationFailedError,
    DuplicateUserError,
    HashPoolConfig,
    HashWorkerPool,
    MemoryUserStore,
    ValidationError,
)
from userauth.common import Role

from conftest import TEST_PASSWORD


@pytest.mark.asyncio
class TestRegister:
    """Test suite for AccountService.register."""

    async def test_register(
        self,
        hash_config: HashPoolConfig,
        store: MemoryUserStore,
        registration: dict[str, Any],
    ) -> None:
        """Test a valid registration stores a hashed record."""
        async with HashWorkerPool(hash_config) as pool:
            record = await AccountService(store, pool).register(registration)

        assert record.username == "alice"
        assert record.email == "alice@example.com"
        assert record.role is Role.USER
        assert await store.get_by_username("alice") is record

    async def test_plaintext_never_stored(
        self,
        hash_config: HashPoolConfig,
        store: MemoryUserStore,
        registration: dict[str, Any],
    ) -> None:
        """Test the stored record holds no trace of the plaintext password."""
        async with HashWorkerPool(hash_config) as pool:
            record = await AccountService(store, pool).register(registration)

        for value in dataclasses.asdict(record).values():
            assert TEST_PASSWORD not in str(value)

    async def test_same_password_distinct_hashes(
        self,
        hash_config: HashPoolConfig,
        store: MemoryUserStore,
        registration: dict[str, Any],
    ) -> None:
        """Test two users with one password get different hashes."""
        async with HashWorkerPool(hash_config) as pool:
            service = AccountService(store, pool)
            alice = await service.register(registration)
            bob = await service.register({**registration, "username": "bob"})

        assert alice.password_hash != bob.password_hash

    async def test_duplicate(
        self,
        hash_config: HashPoolConfig,
        store: MemoryUserStore,
        registration: dict[str, Any],
    ) -> None:
        """Test a second registration of a username fails."""
        async with HashWorkerPool(hash_config) as pool:
            service = AccountService(store, pool)
            first = await service.register(registration)

            with pytest.raises(DuplicateUserError):
                await service.register({**registration, "email": "other@example.com"})

        assert await store.get_by_username("alice") is first
        assert await store.count() == 1

    @pytest.mark.parametrize(
        "changes",
        [
            {"password": "abcde"},
            {"email": "not-an-email"},
            {"role": "owner"},
            {"password": None, "email": None},
        ],
    )
    async def test_duplicate_precedes_validation(
        self,
        hash_config: HashPoolConfig,
        store: MemoryUserStore,
        registration: dict[str, Any],
        changes: dict[str, Any],
    ) -> None:
        """Test a taken username is reported even for an invalid payload."""
        async with HashWorkerPool(hash_config) as pool:
            service = AccountService(store, pool)
            await service.register(registration)

            with pytest.raises(DuplicateUserError):
                await service.register({**registration, **changes})

    async def test_invalid_payload_stores_nothing(
        self,
        hash_config: HashPoolConfig,
        store: MemoryUserStore,
        registration: dict[str, Any],
    ) -> None:
        """Test a weak password fails validation and leaves the store empty."""
        async with HashWorkerPool(hash_config) as pool:
            with pytest.raises(ValidationError) as exc_info:
                await AccountService(store, pool).register(
                    {**registration, "password": "abcde"},
                )

        assert "password" in exc_info.value.errors
        assert await store.count() == 0

    async def test_concurrent_registrations(
        self,
        hash_config: HashPoolConfig,
        store: MemoryUserStore,
        registration: dict[str, Any],
    ) -> None:
        """Test N racing registrations of one username yield one success."""
        attempts = 10
        async with HashWorkerPool(hash_config) as pool:
            service = AccountService(store, pool)
            results = await asyncio.gather(
                *(service.register(registration) for _ in range(attempts)),
                return_exceptions=True,
            )

        failures = [r for r in results if isinstance(r, DuplicateUserError)]
        assert len(failures) == attempts - 1
        assert await store.count() == 1


@pytest.mark.asyncio
class TestLogin:
    """Test suite for AccountService.login."""

    async def test_login(
        self,
        hash_config: HashPoolConfig,
        store: MemoryUserStore,
        registration: dict[str, Any],
    ) -> None:
        """Test the registered password logs in and a wrong one does not."""
        async with HashWorkerPool(hash_config) as pool:
            service = AccountService(store, pool)
            record = await service.register(registration)

            user = await service.login({"username": "alice", "password": TEST_PASSWORD})
            assert user is record

            with pytest.raises(AuthenticationFailedError):
                await service.login({"username": "alice", "password": "WrongPass1@"})

    @pytest.mark.parametrize(
        "payload",
        [
            {"username": "nobody", "password": TEST_PASSWORD},
            {"username": "alice"},
            {"password": TEST_PASSWORD},
            {"username": "alice", "password": 12345},
            None,
            ["alice", TEST_PASSWORD],
        ],
    )
    async def test_login_failures(
        self,
        hash_config: HashPoolConfig,
        store: MemoryUserStore,
        registration: dict[str, Any],
        payload: object,
    ) -> None:
        """Test unknown users and malformed credentials fail the same way."""
        async with HashWorkerPool(hash_config) as pool:
            service = AccountService(store, pool)
            await service.register(registration)

            with pytest.raises(AuthenticationFailedError, match="Invalid username"):
                await service.login(payload)

    async def test_corrupt_hash(
        self,
        hash_config: HashPoolConfig,
        store: MemoryUserStore,
        registration: dict[str, Any],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Test a corrupt stored hash fails login and is logged as an error."""
        async with HashWorkerPool(hash_config) as pool:
            service = AccountService(store, pool)
            record = await service.register(registration)
            store._users["alice"] = dataclasses.replace(  # noqa: SLF001
                record,
                password_hash="corrupt",
            )

            with pytest.raises(AuthenticationFailedError):
                await service.login({"username": "alice", "password": TEST_PASSWORD})

        assert any(
            r.levelname == "ERROR" and "corrupt" in r.getMessage()
            for r in caplog.records
        )
