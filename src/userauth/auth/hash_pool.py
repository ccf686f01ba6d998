"""Worker pool that runs password hashing off the event loop.

bcrypt is deliberately slow and CPU bound. Running it on the event loop would
stall every other request for the duration of the hash, so the pool hands the
work to a bounded set of threads (bcrypt releases the GIL while hashing) and
awaits the result.

**Example Usage:**

.. code-block:: python

    config = HashPoolConfig(rounds=12, worker_count=4, timeout=5)
    async with HashWorkerPool(config) as pool:
        password_hash = await pool.hash("Abc12@34")
        assert await pool.verify("Abc12@34", password_hash)
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Self

from .errors import HashTimeoutError
from .hashing import PasswordHasher

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

LOGGER = logging.getLogger(__name__)


@dataclass
class HashPoolConfig:
    """Configure the hash worker pool.

    :cvar NO_TIMEOUT: Constant indicating hashing may take as long as it needs

    :param rounds: bcrypt cost factor
    :param worker_count: Number of threads hashing concurrently
    :param timeout: Seconds a single hash or verify may take before the
        request is rejected. Set to NO_TIMEOUT to wait indefinitely.
    """

    NO_TIMEOUT: ClassVar[None] = None
    DEFAULT_WORKER_COUNT: ClassVar[int] = 4

    rounds: int = field(default=PasswordHasher.DEFAULT_ROUNDS)
    worker_count: int = field(default=DEFAULT_WORKER_COUNT)
    timeout: int | None = field(default=NO_TIMEOUT)

    @staticmethod
    def valid_timeout(timeout: int | None) -> bool:
        """Check if a hashing timeout is valid.

        :param timeout: The timeout value to check
        :return: True if valid, False otherwise
        """
        return timeout is HashPoolConfig.NO_TIMEOUT or timeout > 0

    @property
    def hasher(self) -> PasswordHasher:
        """Get a PasswordHasher using this configuration's cost factor.

        :return: Password hasher
        """
        return PasswordHasher(rounds=self.rounds)


class HashWorkerPool:
    """A resource manager for threads running bcrypt.

    Designed to be used as an async context manager, tied to the application
    lifespan.
    """

    def __init__(self, config: HashPoolConfig | None = None) -> None:
        """Initialize the hash worker pool.

        :param config: Configuration for the worker pool, defaults if omitted
        """
        self.config = config or HashPoolConfig()
        self.hasher = self.config.hasher
        self._executor: ThreadPoolExecutor | None = None

    async def __aenter__(self) -> Self:
        """Start the worker threads."""
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Wait for in-flight hashes and stop the worker threads.

        :param exc_type: Type of exception if raised within context
        :param exc_val: Exception value if raised within context
        :param exc_tb: Description of traceback if exception raised
        """
        await self.shutdown()

    @property
    def running(self) -> bool:
        """Whether the pool currently accepts work."""
        return self._executor is not None

    def start(self) -> None:
        """Start the worker threads.

        :raises RuntimeError: If the pool is already running
        """
        if self._executor is not None:
            msg = "Hash worker pool is already running"
            raise RuntimeError(msg)

        LOGGER.info(
            "Starting hash worker pool with %d workers (bcrypt rounds=%d)",
            self.config.worker_count,
            self.config.rounds,
        )
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.worker_count,
            thread_name_prefix="hash-worker",
        )

    async def shutdown(self) -> None:
        """Stop accepting work and wait for running hashes to finish."""
        if self._executor is None:
            return

        LOGGER.info("Shutting down hash worker pool")
        executor, self._executor = self._executor, None
        await asyncio.to_thread(executor.shutdown, wait=True)
        LOGGER.info("Hash worker pool shutdown complete")

    async def _run(self, func: Callable[..., Any], *args: str) -> Any:  # noqa: ANN401
        if self._executor is None:
            msg = "Hash worker pool is not running"
            raise RuntimeError(msg)

        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(self._executor, func, *args),
                timeout=self.config.timeout,
            )
        except TimeoutError as e:
            LOGGER.warning(
                "Password hashing exceeded the %s second timeout",
                self.config.timeout,
            )
            msg = "Password hashing timed out"
            raise HashTimeoutError(msg) from e

    async def hash(self, password: str) -> str:
        """Hash a password on a worker thread.

        :param password: The plaintext password
        :return: The bcrypt hash
        :raises HashTimeoutError: If hashing exceeds the configured timeout
        :raises RuntimeError: If the pool is not running
        """
        return await self._run(self.hasher.hash, password)

    async def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password on a worker thread.

        :param password: The plaintext password
        :param password_hash: The stored bcrypt hash
        :return: True if the password matches, False otherwise
        :raises MalformedHashError: If password_hash is not a bcrypt hash
        :raises HashTimeoutError: If verification exceeds the configured timeout
        :raises RuntimeError: If the pool is not running
        """
        return await self._run(self.hasher.verify, password, password_hash)
