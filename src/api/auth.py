"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from src.api.dependencies import get_app_settings, get_session_user
from src.config import Settings
from src.database import get_db
from src.schemas.auth import (
    ErrorResponse,
    MeResponse,
    MessageResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from src.services.auth import authenticate_user, register_user
from src.services.session import clear_session_cookies, set_session_cookie

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def register(
    user_data: UserRegister,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Register a new user."""
    user = await register_user(
        db, user_data.name, user_data.email, user_data.password, rounds=settings.bcrypt_rounds
    )

    if settings.register_sets_session:
        set_session_cookie(response, user, settings)

    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=UserResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def login(
    credentials: UserLogin,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
):
    """Login with email and password and start a cookie session."""
    user = await authenticate_user(db, credentials.email, credentials.password)

    set_session_cookie(response, user, settings)

    return UserResponse.model_validate(user)


@router.post("/logout", response_model=MessageResponse, responses={500: {"model": ErrorResponse}})
async def logout(settings: Annotated[Settings, Depends(get_app_settings)]):
    """Clear the session. Succeeds whether or not a session exists."""
    try:
        response = JSONResponse(content={"message": "Logged out successfully"})
        clear_session_cookies(response, settings)
    except Exception:
        logger.exception("Logout failed")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to logout"},
        )
    return response


@router.get("/me", response_model=MeResponse)
async def get_me(user: Annotated[UserResponse | None, Depends(get_session_user)]):
    """Get the identity carried by the session cookie."""
    return MeResponse(user=user)
