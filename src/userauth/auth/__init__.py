"""Registration, login and credential storage."""

from .auth_routes import configure_auth_router
from .errors import (
    AuthenticationFailedError,
    AuthError,
    DuplicateUserError,
    HashTimeoutError,
    MalformedHashError,
    ValidationError,
)
from .hash_pool import HashPoolConfig, HashWorkerPool
from .hashing import PasswordHasher
from .service import AccountService
from .store import MemoryUserStore, UserStore
from .validators import password_requirements, validate_registration

__all__ = [
    "AccountService",
    "AuthError",
    "AuthenticationFailedError",
    "DuplicateUserError",
    "HashPoolConfig",
    "HashTimeoutError",
    "HashWorkerPool",
    "MalformedHashError",
    "MemoryUserStore",
    "PasswordHasher",
    "UserStore",
    "ValidationError",
    "configure_auth_router",
    "password_requirements",
    "validate_registration",
]
