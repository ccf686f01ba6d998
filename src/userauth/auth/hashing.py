"""bcrypt password hashing.

bcrypt embeds the salt and the cost factor in its output, so a stored hash is
all that is needed to verify a password later.
"""

from dataclasses import dataclass
from typing import ClassVar

from bcrypt import checkpw, gensalt, hashpw

from .errors import MalformedHashError

# bcrypt only reads this many bytes of input
MAX_PASSWORD_BYTES = 72


@dataclass(frozen=True)
class PasswordHasher:
    """Hash and verify passwords with a configurable work factor.

    :cvar DEFAULT_ROUNDS: Cost factor used when none is configured
    :param rounds: bcrypt cost factor, each step doubles the hashing time
    """

    DEFAULT_ROUNDS: ClassVar[int] = 10
    MIN_ROUNDS: ClassVar[int] = 4
    MAX_ROUNDS: ClassVar[int] = 31

    rounds: int = DEFAULT_ROUNDS

    def __post_init__(self) -> None:
        """Reject cost factors bcrypt cannot use."""
        if not self.valid_rounds(self.rounds):
            msg = (
                f"bcrypt rounds must be between {self.MIN_ROUNDS} "
                f"and {self.MAX_ROUNDS}, got {self.rounds}"
            )
            raise ValueError(msg)

    @classmethod
    def valid_rounds(cls, rounds: int) -> bool:
        """Check whether a cost factor is accepted by bcrypt.

        :param rounds: The cost factor to check
        :return: True if valid, False otherwise
        """
        return cls.MIN_ROUNDS <= rounds <= cls.MAX_ROUNDS

    def hash(self, password: str) -> str:
        """Hash a password with a freshly generated salt.

        :param password: The plaintext password
        :return: The bcrypt hash, salt and cost included
        :raises ValueError: If the password is longer than bcrypt accepts
        """
        password_bytes = password.encode()
        if len(password_bytes) > MAX_PASSWORD_BYTES:
            msg = f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            raise ValueError(msg)
        return hashpw(password_bytes, gensalt(rounds=self.rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash.

        Passwords that could never have been hashed, either too long for
        bcrypt or not encodable as UTF-8, are a mismatch. The stored hash is
        still parsed for them so a corrupt hash is always reported.

        :param password: The plaintext password
        :param password_hash: A hash produced by :meth:`hash`
        :return: True if the password matches, False otherwise
        :raises MalformedHashError: If password_hash is not a bcrypt hash
        """
        try:
            password_bytes = password.encode()
        except UnicodeEncodeError:
            password_bytes = None

        try:
            hash_bytes = password_hash.encode()
            if password_bytes is None or len(password_bytes) > MAX_PASSWORD_BYTES:
                checkpw(b"", hash_bytes)
                return False
            return checkpw(password_bytes, hash_bytes)
        except ValueError as e:
            msg = "Stored password hash is not a valid bcrypt hash"
            raise MalformedHashError(msg) from e
