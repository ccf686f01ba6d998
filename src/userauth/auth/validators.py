"""Field rules for registration payloads.

Usernames must be alphanumeric and 3-24 characters long. Passwords must be
5-24 characters long and contain at least one ASCII lowercase letter, one
ASCII uppercase letter and one character from SPECIAL_CHARACTERS. Emails must be
syntactically valid and the role must be one of :class:`Role`.
"""

import logging
import string
from collections.abc import Mapping
from typing import Any

import pydantic

from .errors import ValidationError
from .hashing import MAX_PASSWORD_BYTES
from .models import RegistrationPayload

LOGGER = logging.getLogger(__name__)

SPECIAL_CHARACTERS = "@#$%^&+="


def _encodable(password: str) -> bool:
    try:
        password.encode()
    except UnicodeEncodeError:
        return False
    return True


RULES = [
    (
        lambda x: not any(c in string.ascii_lowercase for c in x),
        "Password must contain at least one lowercase letter",
    ),
    (
        lambda x: not any(c in string.ascii_uppercase for c in x),
        "Password must contain at least one uppercase letter",
    ),
    (
        lambda x: not any(c in SPECIAL_CHARACTERS for c in x),
        f"Password must contain at least one of {SPECIAL_CHARACTERS}",
    ),
    (
        lambda x: not _encodable(x),
        "Password must be valid Unicode text",
    ),
    (
        lambda x: len(x.encode(errors="surrogatepass")) > MAX_PASSWORD_BYTES,
        f"Password must be at most {MAX_PASSWORD_BYTES} bytes long",
    ),
]


def password_requirements(password: str) -> list[str]:
    """Check a password against the strength rules.

    :param password: The password to check
    :return: One message per rule the password breaks, empty if it passes
    """
    return [error_message for rule, error_message in RULES if rule(password)]


def _collect_model_errors(exc: pydantic.ValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "payload"
        errors.setdefault(field, []).append(error["msg"])
    return errors


def validate_registration(payload: Any) -> RegistrationPayload:  # noqa: ANN401
    """Validate an untyped registration payload.

    Every rule is checked so the caller gets the complete list of failing
    fields, not only the first one.

    :param payload: Decoded request body
    :return: The normalized payload
    :raises ValidationError: If any field breaks a rule
    """
    if not isinstance(payload, Mapping):
        raise ValidationError({"payload": ["Request body must be a JSON object"]})

    errors: dict[str, list[str]] = {}
    validated = None
    try:
        validated = RegistrationPayload.model_validate(payload)
    except pydantic.ValidationError as e:
        errors = _collect_model_errors(e)

    password = payload.get("password")
    if isinstance(password, str):
        strength_errors = password_requirements(password)
        if strength_errors:
            errors.setdefault("password", []).extend(strength_errors)

    if errors or validated is None:
        LOGGER.debug("Registration payload rejected: %s", sorted(errors))
        raise ValidationError(errors)

    return validated
