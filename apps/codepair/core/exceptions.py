from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

logger = logging.getLogger(__name__)


def _error_payload(
    *,
    error: str,
    type_: str,
    code: str | None = None,
    details: Any | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"error": error, "code": code, "type": type_}
    if details is not None:
        payload["details"] = details
    return payload


class CodepairException(Exception):
    """Base exception for codepair.

    HTTP handlers translate these via the registered exception handlers. The
    Socket.IO protocol never raises them for participant-facing failures; those
    are reported in the ack payload instead.
    """

    status_code: int = 400
    default_code: str | None = None

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        self.message = message
        self.code = code if code is not None else self.default_code
        self.status_code = status_code if status_code is not None else self.status_code
        self.details = details
        super().__init__(message)


class ConfigurationError(CodepairException):
    """Raised when configuration is invalid (server-side)."""

    status_code = 500
    default_code = "configuration_error"


class DuplicateSessionError(ConfigurationError):
    """Raised when a generated session id collides with a live session.

    Only reachable through a broken id generator or an exhausted id space, so it
    is fatal rather than retried.
    """

    default_code = "duplicate_session_id"

    def __init__(self, session_id: str) -> None:
        super().__init__(
            f"Session id already exists: {session_id}",
            details={"session_id": session_id},
        )
        self.session_id = session_id


class SessionNotFoundError(CodepairException):
    """Raised by HTTP lookups for a session that does not exist (or has expired)."""

    status_code = 404
    default_code = "session_not_found"

    def __init__(self, session_id: str) -> None:
        super().__init__("Session not found", details={"session_id": session_id})
        self.session_id = session_id


class ServiceUnavailableError(CodepairException):
    """Raised when a collaborator (e.g. an execution runtime) is unavailable."""

    status_code = 503
    default_code = "service_unavailable"


def register_exception_handlers(app: FastAPI) -> None:
    """Register codepair's exception handlers on a FastAPI app."""

    @app.exception_handler(CodepairException)
    async def _codepair_exception_handler(
        _request: Request, exc: CodepairException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_payload(
                error=exc.message,
                code=exc.code,
                type_=exc.__class__.__name__,
                details=exc.details,
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_exception_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=_error_payload(
                error="Validation error",
                code="validation_error",
                type_=exc.__class__.__name__,
                details=exc.errors(),
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception_handler(
        _request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail = getattr(exc, "detail", None)
        if isinstance(detail, str):
            error = detail
            details = None
        else:
            error = "Request failed"
            details = detail
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_payload(
                error=error,
                code="http_exception",
                type_=exc.__class__.__name__,
                details=details,
            ),
        )

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception: %s", exc)
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_payload(
                error="Internal server error",
                code="internal_error",
                type_="InternalServerError",
            ),
        )
