"""Fundamental user data model for app."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class Role(StrEnum):
    """User roles with hierarchical permissions."""

    ADMIN = "admin"
    USER = "user"

    @property
    def rank(self) -> int:
        """Position in the hierarchy, lower is more privileged."""
        return list(Role).index(self)

    def check_permission(self, required_role: Role) -> bool:
        """Check if the current role has permission for the required role.

        :param required_role: The role needed to perform an action
        :return: True if the current role has permission, False otherwise
        """
        return self.rank <= required_role.rank


@dataclass(frozen=True)
class UserRecord:
    """A registered account.

    Records are never mutated once stored. The password hash is kept out of
    the repr so records can be logged safely.
    """

    username: str
    email: str
    role: Role
    password_hash: str = field(repr=False)
