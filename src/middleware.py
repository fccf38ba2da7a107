"""Session gate and credential throttling middleware."""

import logging
from asyncio import sleep
from collections.abc import Sequence

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from src.config import Settings
from src.exceptions import InternalError
from src.services.session import has_session_identity

logger = logging.getLogger(__name__)


def _matches(path: str, prefixes: Sequence[str]) -> bool:
    return any(path == prefix or path.startswith(prefix.rstrip("/") + "/") for prefix in prefixes)


class SessionGateMiddleware(BaseHTTPMiddleware):
    """Inspect the session cookie on protected prefixes.

    Page prefixes redirect to ``/`` unless the cookie holds JSON with an ``id``.
    API prefixes answer 401 when the cookie is missing or blank. The cookie is
    taken at face value: nothing here verifies who issued it.

    Errors the routes leave unhandled become the generic 500 body here, so
    they get the same cache header as every other response.
    """

    def __init__(
        self,
        app: ASGIApp,
        cookie_name: str = "session",
        page_prefixes: Sequence[str] = ("/dashboard",),
        api_prefixes: Sequence[str] = ("/api/dashboard",),
    ):
        super().__init__(app)
        self.cookie_name = cookie_name
        self.page_prefixes = tuple(page_prefixes)
        self.api_prefixes = tuple(api_prefixes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        raw = request.cookies.get(self.cookie_name)

        if _matches(path, self.page_prefixes) and not has_session_identity(raw):
            logger.debug(f"Redirecting anonymous request for {path}")
            response: Response = RedirectResponse(
                url=str(request.url.replace(path="/").remove_query_params("redirect")),
                status_code=status.HTTP_307_TEMPORARY_REDIRECT,
            )
        elif _matches(path, self.api_prefixes) and (not raw or not raw.strip()):
            response = JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED, content={"error": "Unauthorized"}
            )
        else:
            try:
                response = await call_next(request)
            except Exception:
                logger.exception(f"Unhandled error on {request.method} {path}")
                error = InternalError()
                response = JSONResponse(status_code=error.status_code, content=error.to_dict())

        response.headers.setdefault("Cache-Control", "no-store")
        return response


class CredentialDelayMiddleware(BaseHTTPMiddleware):
    """Sleep before register and login requests are parsed.

    Runs ahead of routing so malformed bodies wait as long as valid ones.
    """

    def __init__(self, app: ASGIApp, settings: Settings):
        super().__init__(app)
        self.settings = settings

    def delay_for(self, request: Request) -> float:
        if request.method != "POST":
            return 0
        if request.url.path == "/api/register":
            return self.settings.register_delay_seconds
        if request.url.path == "/api/login":
            return self.settings.login_delay_seconds
        return 0

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        delay = self.delay_for(request)
        if delay:
            await sleep(delay)
        return await call_next(request)
