"""Entry point for the adaptor server."""

import asyncio
import contextlib
import sys

import structlog
import uvicorn
from fastapi import FastAPI

from fsadaptor.adaptor import ConfigurationError
from fsadaptor.app import create_app
from fsadaptor.config import Settings
from fsadaptor.lifecycle import GracefulShutdown
from fsadaptor.logging import configure_logging

logger = structlog.get_logger()


async def serve(app: FastAPI, settings: Settings) -> None:
    """Run uvicorn until SIGTERM/SIGINT, then drain and exit.

    Args:
        app: Configured application.
        settings: Server configuration.
    """
    shutdown = GracefulShutdown(timeout=settings.shutdown_timeout)

    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level="warning",
        access_log=False,
        timeout_graceful_shutdown=int(shutdown.timeout),
    )
    server = uvicorn.Server(config)

    shutdown.install(asyncio.get_running_loop())

    async def run_server() -> None:
        """Serve until stopped, then release the shutdown waiter."""
        try:
            await server.serve()
        finally:
            shutdown.trigger()

    async def shutdown_server() -> None:
        """Wait for shutdown signal and stop server."""
        await shutdown.wait_for_trigger()
        server.should_exit = True

    await asyncio.gather(
        run_server(),
        shutdown_server(),
        return_exceptions=True,
    )


def main() -> None:
    """Entry point for python -m fsadaptor."""
    settings = Settings()
    configure_logging(debug=settings.debug, json_logs=settings.json_logs)

    try:
        app = create_app(settings)
    except ConfigurationError as e:
        logger.error("adaptor_config_error", key=e.key, error=str(e))
        sys.exit(1)

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(serve(app, settings))

    sys.exit(0)


if __name__ == "__main__":
    main()
