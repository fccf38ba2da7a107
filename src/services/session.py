"""Session cookie handling.

The session is the JSON encoding of ``{id, name, email}`` stored in a cookie.
It is neither signed nor encrypted: whoever holds a cookie with an ``id`` is
treated as that user. Changing this changes what clients observe, so it is
kept as is.
"""

import json
import logging
from datetime import UTC, datetime

from fastapi import Response
from pydantic import ValidationError
from pydantic_core import from_json

from src.config import Settings
from src.models.user import User
from src.schemas.auth import UserResponse

logger = logging.getLogger(__name__)

LEGACY_AUTH_COOKIE = "auth-token"

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def encode_session(user: User | UserResponse) -> str:
    """Serialize a user's identity into a cookie value."""
    return json.dumps({"id": user.id, "name": user.name, "email": user.email})


def decode_session(raw: str | None) -> UserResponse | None:
    """Parse a cookie value back into an identity, or None if it is unusable."""
    if not raw:
        return None
    try:
        return UserResponse.model_validate_json(raw)
    except ValidationError:
        logger.warning("Ignoring malformed session cookie")
        return None


def has_session_identity(raw: str | None) -> bool:
    """Whether a cookie value looks like a session: JSON with a truthy ``id``."""
    if not raw or not raw.strip():
        return False
    try:
        # from_json caps nesting depth and reports it as ValueError
        data = from_json(raw)
    except ValueError:
        return False
    return isinstance(data, dict) and bool(data.get("id"))


def set_session_cookie(response: Response, user: User | UserResponse, settings: Settings) -> None:
    """Attach the session cookie for ``user`` to the response."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=encode_session(user),
        max_age=settings.session_max_age,
        path="/",
        secure=settings.is_production,
        httponly=True,
        samesite="lax",
    )


def clear_session_cookies(response: Response, settings: Settings) -> None:
    """Expire the session cookie and the legacy auth-token cookie."""
    for key in (settings.session_cookie_name, LEGACY_AUTH_COOKIE):
        response.set_cookie(
            key=key,
            value="",
            expires=EPOCH,
            path="/",
            secure=settings.is_production,
            httponly=True,
            samesite="lax",
        )
    response.headers.update(NO_CACHE_HEADERS)
