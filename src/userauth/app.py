"""FastAPI application factory for user registration and login."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, FastAPI
from fastapi.responses import PlainTextResponse

from userauth.auth import (
    AccountService,
    HashWorkerPool,
    MemoryUserStore,
    configure_auth_router,
)

from .config import configure_logging, load_config_from_env

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from userauth.auth import UserStore

    from .config import AppConfig

LOGGER = logging.getLogger(__name__)


def configure_fastapi_app(
    config: AppConfig,
    store: UserStore | None = None,
) -> FastAPI:
    """Configure and return the FastAPI application.

    :param config: Application configuration
    :param store: User repository, a fresh in-memory store if omitted
    :return: Configured FastAPI application
    """
    user_store = store if store is not None else MemoryUserStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[Any, Any]:
        """Application lifespan manager.

        Handles startup and shutdown of the hash worker pool.
        """
        LOGGER.info("User registration API is starting")

        async with HashWorkerPool(config.hash_config) as hash_pool:
            service = AccountService(user_store, hash_pool)
            app.state.account_service = service

            app.include_router(configure_auth_router(APIRouter(), service))

            yield

            LOGGER.info("User registration API is shutting down")

    app = FastAPI(
        title="User Registration API",
        version="0.0.1",
        lifespan=lifespan,
        root_path=config.root_path,
    )

    @app.get("/", response_class=PlainTextResponse)
    def read_root() -> str:
        return "User Registration API"

    return app


def create_app(env_file: str | None = os.environ.get("ENV_FILE", ".env")) -> FastAPI:
    """Create and configure the FastAPI application.

    The default here is for uvicorn command line usage, in which case the user
    should set ENV_FILE environment variable if they want a different file.

    :param env_file: Optional path to the environment configuration file
    :return: Configured FastAPI application
    """
    config = load_config_from_env(env_file)
    configure_logging(config)
    return configure_fastapi_app(config)
