"""Main entry point for the FastAPI application."""

import argparse
import os

import uvicorn

from userauth.app import configure_fastapi_app
from userauth.config import configure_logging, load_config_from_env


def main() -> None:
    """Run the FastAPI application using Uvicorn."""
    parser = argparse.ArgumentParser(
        description="Run the user registration and login API.",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="Path to the environment configuration file.",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to run the application on, overrides PORT.",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to run the application on, overrides HOST.",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of worker processes to run.",
    )
    args = parser.parse_args()

    config = load_config_from_env(args.env_file)
    configure_logging(config)
    host = args.host or config.host
    port = args.port or config.port

    if args.reload or args.workers > 1:
        # uvicorn needs an import string to spawn new processes
        os.environ["ENV_FILE"] = args.env_file
        uvicorn.run(
            "userauth.app:create_app",
            factory=True,
            host=host,
            port=port,
            reload=args.reload,
            workers=args.workers,
        )
        return

    uvicorn.run(configure_fastapi_app(config), host=host, port=port)


if __name__ == "__main__":
    main()
