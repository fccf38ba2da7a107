"""Server side of the public root and the gated dashboard."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.dependencies import get_app_settings, get_session_user
from src.config import Settings
from src.schemas.auth import MeResponse, UserResponse

router = APIRouter(tags=["pages"])


@router.get("/")
async def root(settings: Annotated[Settings, Depends(get_app_settings)]):
    """Public landing document; unauthenticated dashboard visits end up here."""
    return {"app": settings.app_name, "status": "ok"}


@router.get("/dashboard", response_model=MeResponse)
async def dashboard(user: Annotated[UserResponse | None, Depends(get_session_user)]):
    """Dashboard entry point. Only reachable through the session gate."""
    return MeResponse(user=user)
