"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

# Messages reported for a (field, pydantic error type) pair in 400 responses.
# Anything not listed falls back to pydantic's own message.
FIELD_ERROR_MESSAGES: dict[tuple[str, str], str] = {
    ("name", "string_too_short"): "Name must be at least 2 characters",
    ("name", "string_too_long"): "Name must be at most 100 characters",
    ("email", "value_error"): "Invalid email address",
    ("email", "string_too_long"): "Invalid email address",
    ("password", "string_too_short"): "Password must be at least 8 characters",
    ("password", "string_too_long"): "Password must be at most 72 characters",
}

LOGIN_FIELD_ERROR_MESSAGES: dict[tuple[str, str], str] = {
    **FIELD_ERROR_MESSAGES,
    ("password", "string_too_short"): "Password is required",
}


class UserRegister(BaseModel):
    """User registration request."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=2, max_length=100)
    # EmailStr lowercases the domain part; the local part is stored as typed
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=72)


class UserLogin(BaseModel):
    """User login request."""

    model_config = ConfigDict(extra="forbid")

    # Normalized the same way as at registration so lookups match
    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=72)


class UserResponse(BaseModel):
    """Public identity of a user; also the payload of the session cookie."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class MeResponse(BaseModel):
    """Identity carried by the current session cookie, if any."""

    user: UserResponse | None = None


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    error: str
    details: dict | None = None
