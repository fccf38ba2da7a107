"""Exception handlers mapping failures onto the JSON error taxonomy."""

import logging
from collections import defaultdict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from src.exceptions import AppError, InternalError, ValidationError
from src.schemas.auth import FIELD_ERROR_MESSAGES, LOGIN_FIELD_ERROR_MESSAGES

logger = logging.getLogger(__name__)

# Per-path overrides of the field messages
MESSAGES_BY_PATH = {
    "/api/login": LOGIN_FIELD_ERROR_MESSAGES,
}


def flatten_validation_errors(errors, messages: dict[tuple[str, str], str]) -> dict:
    """Group pydantic errors into ``formErrors`` and per-field ``fieldErrors``.

    Unknown keys, malformed JSON and a missing body are form-level errors;
    everything located on a declared field is reported under that field.
    """
    form_errors: list[str] = []
    field_errors: dict[str, list[str]] = defaultdict(list)

    for error in errors:
        loc = [part for part in error.get("loc", ()) if part != "body"]
        error_type = error.get("type", "")

        if error_type == "extra_forbidden" and loc:
            form_errors.append(f"Unrecognized key in object: '{loc[0]}'")
        elif error_type == "json_invalid" or not loc or not isinstance(loc[0], str):
            form_errors.append(error.get("msg", "Invalid request body"))
        else:
            field = loc[0]
            field_errors[field].append(messages.get((field, error_type), error.get("msg", "")))

    return {"formErrors": form_errors, "fieldErrors": dict(field_errors)}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = MESSAGES_BY_PATH.get(request.url.path, FIELD_ERROR_MESSAGES)
    error = ValidationError(details=flatten_validation_errors(exc.errors(), messages))
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"Storage failure on {request.method} {request.url.path}", exc_info=exc)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=InternalError().to_dict(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install every handler on ``app``."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
