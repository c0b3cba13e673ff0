import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500
    type = "INTERNAL_ERROR"
    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = 400
    type = "BAD_REQUEST"
    default_message = "Bad request"


class AuthFailureError(AppError):
    status_code = 401
    type = "UNAUTHORIZED"
    default_message = "Invalid credentials"


class ForbiddenError(AppError):
    status_code = 403
    type = "FORBIDDEN"
    default_message = "Permission denied"


class NotFoundError(AppError):
    status_code = 404
    type = "NOT_FOUND"
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    type = "CONFLICT"
    default_message = "Resource already exists"


_HTTP_TYPES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    413: "PAYLOAD_TOO_LARGE",
}


def error_body(code: int, type_: str, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    return {"status": "error", "code": code, "type": type_, "message": message, "errors": errors}


async def app_error_handler(request: Request, exc: AppError):
    logger.info(
        f"{request.method} {request.url.path} rejected: {exc.status_code} {exc.type} ({exc.message})"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.type, exc.message, exc.errors),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", []) if part != "body"]
        errors.append({"field": ".".join(loc), "message": str(err.get("msg", ""))})
    logger.info(f"{request.method} {request.url.path} invalid input: {errors}")
    return JSONResponse(
        status_code=400,
        content=error_body(400, "VALIDATION_ERROR", "Invalid input data", errors),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, _HTTP_TYPES.get(exc.status_code, "HTTP_ERROR"), message),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    message = "Internal server error" if get_settings().is_production else str(exc) or "Internal server error"
    return JSONResponse(status_code=500, content=error_body(500, "INTERNAL_ERROR", message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
