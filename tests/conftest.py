"""Shared fixtures for the test suite."""

from collections.abc import Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from userauth.auth import HashPoolConfig, MemoryUserStore, PasswordHasher
from userauth.app import configure_fastapi_app
from userauth.config import AppConfig

# lowest cost bcrypt accepts, keeps the suite fast
TEST_ROUNDS = 4
TEST_PASSWORD = "Abc12@34"  # noqa: S105


@pytest.fixture
def hash_config() -> HashPoolConfig:
    """Create a cheap hash pool configuration."""
    return HashPoolConfig(rounds=TEST_ROUNDS, worker_count=2)


@pytest.fixture
def hasher() -> PasswordHasher:
    """Create a cheap password hasher."""
    return PasswordHasher(rounds=TEST_ROUNDS)


@pytest.fixture
def store() -> MemoryUserStore:
    """Create an empty user store."""
    return MemoryUserStore()


@pytest.fixture
def registration() -> dict[str, Any]:
    """Create a valid registration payload."""
    return {
        "username": "alice",
        "email": "alice@example.com",
        "role": "user",
        "password": TEST_PASSWORD,
    }


@pytest.fixture
def app_config() -> AppConfig:
    """Create an application configuration for tests."""
    return AppConfig(
        logging_level="DEBUG",
        root_path="",
        host="127.0.0.1",
        port=3000,
        bcrypt_rounds=TEST_ROUNDS,
        hash_worker_count=2,
        hash_timeout=None,
    )


@pytest.fixture
def client(app_config: AppConfig, store: MemoryUserStore) -> Iterator[TestClient]:
    """Run the application, lifespan included, behind a test client."""
    with TestClient(configure_fastapi_app(app_config, store)) as test_client:
        yield test_client
