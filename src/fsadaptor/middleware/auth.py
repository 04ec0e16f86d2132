"""Shared-key authentication middleware."""

import secrets
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = structlog.get_logger()

PUBLIC_PREFIX = "/api/v1/health/"
API_KEY_HEADER = "X-API-Key"
BEARER_PREFIX = "Bearer "


def extract_key(request: Request) -> str:
    """Return the key presented by a client, or an empty string.

    ``X-API-Key`` wins over an ``Authorization: Bearer`` token.

    Args:
        request: Incoming HTTP request.

    Returns:
        The presented key.
    """
    key = request.headers.get(API_KEY_HEADER, "")
    if key:
        return key

    authorization = request.headers.get("Authorization", "")
    if authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):].strip()
    return ""


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Rejects requests that do not present the configured key.

    Only the indexing pipeline should be able to read documents. Health
    checks stay public so orchestration can monitor the adaptor.
    """

    def __init__(self, app: Callable[..., Awaitable[Response]], api_key: str) -> None:
        """Initialize middleware with API key.

        Args:
            app: ASGI application.
            api_key: Expected API key value.
        """
        super().__init__(app)  # type: ignore[arg-type]
        self._api_key = api_key

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Validate the presented key for non-public endpoints.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware or route handler.

        Returns:
            HTTP response, or 401 if authentication fails.
        """
        if request.url.path.startswith(PUBLIC_PREFIX):
            return await call_next(request)

        provided_key = extract_key(request)

        if not provided_key:
            logger.info("auth_missing_key", path=request.url.path)
            return JSONResponse(status_code=401, content={"detail": "Missing API key"})

        if not secrets.compare_digest(provided_key.encode(), self._api_key.encode()):
            logger.warning("auth_invalid_key", path=request.url.path)
            return JSONResponse(status_code=401, content={"detail": "Invalid API key"})

        return await call_next(request)
