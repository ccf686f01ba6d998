"""User storage.

Handlers depend only on the :class:`UserStore` protocol, so a persistent
backend can replace :class:`MemoryUserStore` without touching them.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol

from .errors import DuplicateUserError

if TYPE_CHECKING:
    from userauth.common import UserRecord

LOGGER = logging.getLogger(__name__)


class UserStore(Protocol):
    """Capabilities the account handlers need from a user repository."""

    async def get_by_username(self, username: str) -> UserRecord | None:
        """Return the record stored under username, if any."""
        ...

    async def get_by_email(self, email: str) -> UserRecord | None:
        """Return the first record registered with email, if any."""
        ...

    async def insert_if_absent(self, record: UserRecord) -> None:
        """Store record unless its username is taken.

        :raises DuplicateUserError: If the username already exists
        """
        ...

    async def count(self) -> int:
        """Return the number of stored records."""
        ...


class MemoryUserStore:
    """In-memory user repository keyed by username.

    Contents live as long as the process. Records are never updated or
    removed.
    """

    def __init__(self) -> None:
        self._users: dict[str, UserRecord] = {}
        self._lock = asyncio.Lock()

    async def get_by_username(self, username: str) -> UserRecord | None:
        """Look up a user by username.

        :param username: The username to look up
        :return: The stored record, or None if absent
        """
        return self._users.get(username)

    async def get_by_email(self, email: str) -> UserRecord | None:
        """Look up a user by email.

        Emails are not unique. This scans records in insertion order and
        returns the first match.

        :param email: The email to look up
        :return: The first matching record, or None if absent
        """
        return next(
            (user for user in self._users.values() if user.email == email),
            None,
        )

    async def insert_if_absent(self, record: UserRecord) -> None:
        """Insert a record if no record exists for its username.

        The existence check and the insert happen under one lock, so
        concurrent inserts of the same username produce exactly one record.

        :param record: The record to insert
        :raises DuplicateUserError: If the username already exists
        """
        async with self._lock:
            if record.username in self._users:
                raise DuplicateUserError(record.username)
            self._users[record.username] = record
        LOGGER.debug("Stored user %s", record.username)

    async def count(self) -> int:
        """Return the number of registered users."""
        return len(self._users)
