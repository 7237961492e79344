"""Centralized error handling.

Every error that reaches the application boundary is turned into a JSON body
of the form ``{"ok": false, "message": ...}``. Unmatched routes get a fixed
404 body.

Unexpected exceptions are wrapped in ``InternalError`` and answered by
``UnhandledErrorMiddleware``, which sits inside the CORS middleware so 500
responses keep their CORS headers. No handler writes a second response:
when an error surfaces after the response has started it is re-raised to
the server's default error path.
"""

import logging
import traceback
from collections.abc import Mapping

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from api.config import Settings
from domain.model.errors import DomainError, InternalError
from services.auth_service import INVALID_DATA_MESSAGE

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Внутренняя ошибка сервера"
ROUTE_NOT_FOUND_MESSAGE = "Маршрут не найден"

# Router-level statuses meaning "no route matched this request"
_UNMATCHED_ROUTE_STATUSES = {status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED}


def resolve_status(exc: BaseException) -> int:
    """Return the HTTP status carried by exc (``status`` or ``status_code``), else 500."""
    for attr in ("status", "status_code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool) and value:
            return value
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _payload_of(response) -> Mapping | None:
    """Extract the decoded body of an upstream response, if it has one."""
    data = getattr(response, "data", None)
    if isinstance(data, Mapping):
        return data

    read_json = getattr(response, "json", None)
    if callable(read_json):
        try:
            body = read_json()
        except (ValueError, httpx.ResponseNotRead):
            return None
        if isinstance(body, Mapping):
            return body
    return None


def resolve_message(exc: BaseException) -> str:
    """Derive a human-readable message from exc.

    Upstream API errors (``exc.response`` with a data/JSON body) and errors
    carrying a ``data`` mapping take precedence over the exception text.
    """
    message = str(exc) or DEFAULT_ERROR_MESSAGE

    response = getattr(exc, "response", None)
    payload = _payload_of(response) if response is not None else None
    if payload is not None:
        message = payload.get("message") or payload.get("error") or message
    else:
        data = getattr(exc, "data", None)
        if isinstance(data, Mapping):
            message = data.get("message") or message

    return message if isinstance(message, str) else str(message)


def _format_stack(exc: BaseException) -> str:
    return "".join(traceback.format_exception(exc))


def build_error_response(request: Request, exc: BaseException, settings: Settings) -> JSONResponse:
    """Log a summary of exc and build the client response."""
    status_code = resolve_status(exc)
    message = resolve_message(exc)

    log_extra = {
        "status": status_code,
        "errorMessage": message,
        "errorType": type(exc).__name__,
        "path": request.url.path,
        "method": request.method,
    }
    if exc.__cause__ is not None:
        log_extra["errorCause"] = type(exc.__cause__).__name__
    if settings.is_development:
        log_extra["stack"] = _format_stack(exc)

    level = logging.ERROR if status_code >= 500 else logging.WARNING
    logger.log(level, "API error", extra=log_extra)

    content = {"ok": False, "message": message}
    if settings.is_development and status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
        content["stack"] = _format_stack(exc)

    return JSONResponse(status_code=status_code, content=content)


class _HTTPExceptionView(Exception):
    """Adapts an HTTPException so its detail is used as the message."""

    def __init__(self, exc: StarletteHTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        super().__init__(detail)
        self.status_code = exc.status_code
        self.__cause__ = exc


def wrap_unexpected(exc: BaseException) -> InternalError:
    """Wrap exc as InternalError, keeping its status and derived message."""
    internal = InternalError(resolve_message(exc), status=resolve_status(exc))
    internal.__cause__ = exc
    return internal


def route_not_found_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"ok": False, "message": ROUTE_NOT_FOUND_MESSAGE},
    )


def install_error_handlers(app: FastAPI, settings: Settings) -> None:
    """Register the terminal error and not-found handlers on app."""

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        logger.warning("Malformed request body", extra={
            "path": request.url.path,
            "method": request.method,
            "errorCount": len(exc.errors()),
        })
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"ok": False, "message": INVALID_DATA_MESSAGE},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code in _UNMATCHED_ROUTE_STATUSES and exc.detail in ("Not Found", "Method Not Allowed"):
            return route_not_found_response()

        response = build_error_response(request, _HTTPExceptionView(exc), settings)
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError):
        return build_error_response(request, exc, settings)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        return build_error_response(request, wrap_unexpected(exc), settings)


class UnhandledErrorMiddleware:
    """Answers exceptions no handler claimed with an ``InternalError`` body.

    Installed innermost among user middleware so outer middleware (CORS)
    still decorates the response. If the response has already started the
    exception is re-raised untouched.
    """

    def __init__(self, app: ASGIApp, settings: Settings):
        self.app = app
        self.settings = settings

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_tracking(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_tracking)
        except Exception as exc:
            if response_started:
                raise
            response = build_error_response(Request(scope), wrap_unexpected(exc), self.settings)
            await response(scope, receive, send)

