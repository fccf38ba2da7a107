"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import (
    ErrorResponse,
    MeResponse,
    MessageResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "MeResponse",
    "MessageResponse",
    "ErrorResponse",
]
