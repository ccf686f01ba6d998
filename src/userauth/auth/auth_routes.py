"""Registration and login routes for the FastAPI application.

Request bodies are read as raw JSON so that malformed input reaches the
validator and is reported as a 400 rather than FastAPI's default 422.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import PlainTextResponse

from .errors import (
    AuthenticationFailedError,
    DuplicateUserError,
    HashTimeoutError,
    ValidationError,
)

if TYPE_CHECKING:
    from .service import AccountService

LOGGER = logging.getLogger(__name__)

SUCCESS_BODY = "OK"


async def _read_json(request: Request) -> Any:  # noqa: ANN401
    try:
        return await request.json()
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Request body must be valid JSON",
        ) from e


def _unavailable(error: Exception) -> HTTPException:
    LOGGER.error("Password hashing unavailable: %s", error)
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Service temporarily unavailable",
    )


async def _register(service: AccountService, payload: Any) -> PlainTextResponse:  # noqa: ANN401
    try:
        await service.register(payload)
    except (ValidationError, DuplicateUserError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    except (HashTimeoutError, RuntimeError) as e:
        raise _unavailable(e) from e

    return PlainTextResponse(SUCCESS_BODY)


async def _login(service: AccountService, payload: Any) -> PlainTextResponse:  # noqa: ANN401
    try:
        await service.login(payload)
    except AuthenticationFailedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        ) from e
    except (HashTimeoutError, RuntimeError) as e:
        raise _unavailable(e) from e

    return PlainTextResponse(SUCCESS_BODY)


def configure_auth_router(router: APIRouter, service: AccountService) -> APIRouter:
    """Configure the registration and login routes.

    :param router: The APIRouter to configure
    :param service: The AccountService handling the requests
    :return: The configured APIRouter
    """

    @router.post("/register", response_class=PlainTextResponse)
    async def register(request: Request) -> PlainTextResponse:
        """Register a user from ``{username, email, role, password}``."""
        return await _register(service, await _read_json(request))

    @router.post("/login", response_class=PlainTextResponse)
    async def login(request: Request) -> PlainTextResponse:
        """Check ``{username, password}``."""
        return await _login(service, await _read_json(request))

    return router
