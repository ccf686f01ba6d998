"""Common data models and utilities for the application."""

from .user import Role, UserRecord

__all__ = ["Role", "UserRecord"]
