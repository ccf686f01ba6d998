"""Custom exceptions for the authentication module."""


class AuthError(Exception):
    """Base class for registration and login failures."""


class ValidationError(AuthError):
    """Raised when a registration payload breaks one or more field rules."""

    def __init__(self, errors: dict[str, list[str]]) -> None:
        """Create the error from a field -> messages mapping.

        :param errors: Messages for every field that failed
        """
        self.errors = errors
        details = "; ".join(
            f"{field}: {', '.join(messages)}" for field, messages in errors.items()
        )
        super().__init__(f"Invalid registration data ({details})")


class DuplicateUserError(AuthError):
    """Raised when the username is already registered."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("User with this username already exists")


class AuthenticationFailedError(AuthError):
    """Raised on unknown username or wrong password."""

    def __init__(self) -> None:
        super().__init__("Invalid username or password")


class MalformedHashError(AuthError):
    """Raised when a stored value is not a valid bcrypt hash."""


class HashTimeoutError(AuthError):
    """Raised when hashing takes longer than the configured timeout."""
