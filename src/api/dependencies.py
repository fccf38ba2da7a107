"""FastAPI dependencies shared by the routers."""

from typing import Annotated

from fastapi import Depends, Request

from src.config import Settings
from src.schemas.auth import UserResponse
from src.services.session import decode_session


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with."""
    return request.app.state.settings


def get_session_user(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UserResponse | None:
    """Identity from the session cookie, or None when absent or unreadable."""
    return decode_session(request.cookies.get(settings.session_cookie_name))

