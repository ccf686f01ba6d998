"""Request payload models for registration and login."""

from __future__ import annotations

from typing import Annotated

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
)

from userauth.common import Role

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 24
PASSWORD_MIN_LENGTH = 5
PASSWORD_MAX_LENGTH = 24

Username = Annotated[
    str,
    StringConstraints(
        min_length=USERNAME_MIN_LENGTH,
        max_length=USERNAME_MAX_LENGTH,
        pattern=r"^[A-Za-z0-9]+$",
    ),
]

Password = Annotated[
    str,
    StringConstraints(
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
    ),
]


class RegistrationPayload(BaseModel):
    """Shape of a registration request.

    Character class rules for the password are applied separately by
    :func:`userauth.auth.validators.validate_registration`.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    username: Username
    email: EmailStr
    role: Role = Field(validation_alias=AliasChoices("role", "type"))
    password: Password = Field(repr=False)


class LoginPayload(BaseModel):
    """Credentials sent to the login endpoint, strict string fields only."""

    model_config = ConfigDict(extra="ignore", frozen=True, strict=True)

    username: str
    password: str = Field(repr=False)
