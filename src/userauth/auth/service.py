"""Registration and login orchestration.

Both handlers take the decoded request body as-is and either return the
affected record or raise an :class:`~userauth.auth.errors.AuthError`.
Nothing is stored unless every step of a registration succeeds.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import pydantic

from userauth.common import UserRecord

from .errors import AuthenticationFailedError, DuplicateUserError, MalformedHashError
from .models import LoginPayload
from .validators import validate_registration

if TYPE_CHECKING:
    from .hash_pool import HashWorkerPool
    from .store import UserStore

LOGGER = logging.getLogger(__name__)


class AccountService:
    """Registers users and checks their credentials."""

    def __init__(self, store: UserStore, hash_pool: HashWorkerPool) -> None:
        """Create a new account service.

        :param store: Repository holding the user records
        :param hash_pool: Running worker pool used for bcrypt
        """
        self.store = store
        self.hash_pool = hash_pool

    async def _raise_if_taken(self, payload: Any) -> None:  # noqa: ANN401
        if not isinstance(payload, Mapping):
            return
        username = payload.get("username")
        if isinstance(username, str) and await self.store.get_by_username(username):
            LOGGER.info("Registration rejected, username %s is taken", username)
            raise DuplicateUserError(username)

    async def register(self, payload: Any) -> UserRecord:  # noqa: ANN401
        """Register a new user.

        A taken username is reported before the rest of the payload is
        validated, so re-registering an existing name always yields
        DuplicateUserError.

        :param payload: Decoded request body
        :return: The stored record
        :raises DuplicateUserError: If the username is already registered
        :raises ValidationError: If any field breaks a rule
        :raises HashTimeoutError: If hashing exceeds the configured timeout
        """
        await self._raise_if_taken(payload)

        registration = validate_registration(payload)
        password_hash = await self.hash_pool.hash(registration.password)

        record = UserRecord(
            username=registration.username,
            email=registration.email,
            role=registration.role,
            password_hash=password_hash,
        )
        try:
            await self.store.insert_if_absent(record)
        except DuplicateUserError:
            LOGGER.info(
                "Registration for %s lost a race with a concurrent request",
                record.username,
            )
            raise

        LOGGER.info("Registered user %s with role %s", record.username, record.role)
        return record

    async def login(self, payload: Any) -> UserRecord:  # noqa: ANN401
        """Check a username and password.

        Unknown users, wrong passwords and unreadable stored hashes all raise
        the same error so callers cannot tell them apart.

        :param payload: Decoded request body with username and password
        :return: The authenticated user's record
        :raises AuthenticationFailedError: If the credentials do not match
        :raises HashTimeoutError: If verification exceeds the configured timeout
        """
        try:
            credentials = LoginPayload.model_validate(payload)
        except pydantic.ValidationError as e:
            LOGGER.debug("Login rejected, malformed credentials")
            raise AuthenticationFailedError from e

        user = await self.store.get_by_username(credentials.username)
        if user is None:
            LOGGER.debug("Login failed, unknown user %s", credentials.username)
            raise AuthenticationFailedError

        try:
            matches = await self.hash_pool.verify(
                credentials.password,
                user.password_hash,
            )
        except MalformedHashError as e:
            LOGGER.exception("Stored password hash for %s is corrupt", user.username)
            raise AuthenticationFailedError from e

        if not matches:
            LOGGER.debug("Login failed, wrong password for %s", user.username)
            raise AuthenticationFailedError

        LOGGER.info("User %s logged in", user.username)
        return user
