"""Graceful shutdown coordination for the adaptor server."""
import asyncio
import signal

import structlog

logger = structlog.get_logger()

SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class GracefulShutdown:
    """Turns SIGTERM/SIGINT into a single awaitable shutdown trigger.

    Attributes:
        is_triggered: Whether shutdown has been triggered.
        timeout: Seconds the server is given to drain in-flight requests.
    """

    def __init__(self, timeout: float = 30.0) -> None:
        """Initialize shutdown coordinator.

        Args:
            timeout: Seconds to wait for in-flight requests after a signal.
        """
        self._event = asyncio.Event()
        self.timeout = timeout

    @property
    def is_triggered(self) -> bool:
        return self._event.is_set()

    def install(self, loop: asyncio.AbstractEventLoop) -> None:
        """Register signal handlers on a running loop.

        Args:
            loop: Loop the server runs on.
        """
        for sig in SHUTDOWN_SIGNALS:
            loop.add_signal_handler(sig, self.trigger, sig)

    def trigger(self, sig: signal.Signals | None = None) -> None:
        """Signal waiting tasks to begin shutdown. Idempotent.

        Args:
            sig: Signal that caused the shutdown, if any.
        """
        if self._event.is_set():
            return
        logger.info("shutdown_triggered", signal=sig.name if sig else None)
        self._event.set()

    async def wait_for_trigger(self) -> None:
        """Block until ``trigger`` is called."""
        await self._event.wait()
