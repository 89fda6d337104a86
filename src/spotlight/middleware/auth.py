"""API key authentication middleware."""

import secrets
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

PUBLIC_PATHS = frozenset(
    {
        "/api/v1/health/live",
        "/api/v1/health/ready",
    }
)

# EventSource clients cannot set headers, so the stream endpoint also
# accepts the key as a query parameter.
QUERY_KEY_PATHS = frozenset({"/api/v1/search/stream"})


def _provided_key(request: Request) -> str:
    """Extract the client's API key from the header or query string.

    Args:
        request: Incoming HTTP request.

    Returns:
        Provided key, or an empty string when absent.
    """
    key = request.headers.get("X-API-Key", "")
    if not key and request.url.path in QUERY_KEY_PATHS:
        key = request.query_params.get("api_key", "")
    return key


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Requires an API key on search endpoints.

    Search results expose file names from the local Spotlight index, so
    everything except the health probes is protected.
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
        """Reject requests without a matching key.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware or route handler.

        Returns:
            HTTP response, or 401 if authentication fails.
        """
        if request.url.path in PUBLIC_PATHS:
            return await call_next(request)

        provided = _provided_key(request)
        if not provided:
            return JSONResponse(status_code=401, content={"error": "Missing API key"})

        if not secrets.compare_digest(provided, self._api_key):
            return JSONResponse(status_code=401, content={"error": "Invalid API key"})

        return await call_next(request)
