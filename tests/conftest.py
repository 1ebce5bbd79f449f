"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from keysync.client.users import FetchUsers
from keysync.errors import KeyStoreError, RemoteFetchError
from keysync.models.user import User
from keysync.storage.base import KeyStore


class InMemoryKeyStore(KeyStore):
    """Key store backed by a dict, recording every mutation."""

    def __init__(
        self,
        files: dict[str, str] | None = None,
        fail_on: set[str] | None = None,
        exists: bool = True,
    ) -> None:
        self.files: dict[str, str] = dict(files or {})
        self.fail_on = fail_on or set()
        self.exists = exists
        self.writes: list[tuple[str, str]] = []
        self.removals: list[str] = []

    @property
    def root(self) -> Path:
        return Path("/memory/keys")

    def list_entries(self) -> list[str]:
        if not self.exists:
            raise KeyStoreError("Error while reading key directory /memory/keys")
        return sorted(self.files)

    def read(self, name: str) -> str:
        if name in self.fail_on or name not in self.files:
            raise KeyStoreError(f"Error while reading file {name}")
        return self.files[name]

    def write(self, name: str, content: str) -> None:
        if name in self.fail_on:
            raise KeyStoreError(f"Error while writing file {name}")
        self.writes.append((name, content))
        self.files[name] = content

    def remove(self, name: str) -> None:
        if name in self.fail_on or name not in self.files:
            raise KeyStoreError(f"Error while deleting file {name}")
        self.removals.append(name)
        del self.files[name]

    def ensure_root(self) -> Path:
        self.exists = True
        return self.root


def make_fetch_users(users: list[User]) -> FetchUsers:
    """Build a fetch_users coroutine function returning fixed users."""

    async def fetch_users() -> list[User]:
        return list(users)

    return fetch_users


def make_failing_fetch(message: str = "connection refused") -> FetchUsers:
    """Build a fetch_users coroutine function that always fails."""

    async def fetch_users() -> list[User]:
        raise RemoteFetchError(message)

    return fetch_users


@pytest.fixture
def memory_store() -> Callable[..., InMemoryKeyStore]:
    """Factory for in-memory key stores."""
    return InMemoryKeyStore


@pytest.fixture
def alice() -> User:
    """User with a published key."""
    return User(org_username="alice", public_gpg_key="keyA")


@pytest.fixture
def bob() -> User:
    """Second user with a published key."""
    return User(org_username="bob", public_gpg_key="keyX")


@pytest.fixture
def users_response() -> dict[str, object]:
    """Sample GraphQL response from the user directory."""
    return {
        "data": {
            "users_v1": [
                {"org_username": "alice", "public_gpg_key": "keyA"},
                {"org_username": "bob", "public_gpg_key": None},
                {"org_username": "carol", "public_gpg_key": "keyC", "name": "Carol"},
            ]
        }
    }


@pytest.fixture
def fetch_users_factory() -> Callable[[list[User]], FetchUsers]:
    """Factory for fetch_users callables returning fixed users."""
    return make_fetch_users


@pytest.fixture
def failing_fetch() -> FetchUsers:
    """fetch_users callable that always fails."""
    return make_failing_fetch()
