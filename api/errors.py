"""Global exception handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from clients.errors import StorageError
from core.exceptions import InvoiceNotFoundError, InvoiceValidationError, PersistenceError

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _details(errors: list[dict]) -> list[dict]:
    """Location, message and type of each pydantic error; loc parts are str or int."""
    return [{"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]} for e in errors]


def _respond(request: Request, status_code: int, code: str, message: str, details=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response(
            code, message, details=details, request_id=_request_id(request)
        ).model_dump(mode="json"),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    @app.exception_handler(InvoiceNotFoundError)
    async def not_found_handler(request: Request, exc: InvoiceNotFoundError):
        return _respond(request, 404, ErrorCodes.NOT_FOUND, str(exc))

    @app.exception_handler(InvoiceValidationError)
    async def invoice_validation_handler(request: Request, exc: InvoiceValidationError):
        return _respond(request, 422, ErrorCodes.VALIDATION_ERROR, str(exc), _details(exc.errors))

    @app.exception_handler(ValidationError)
    async def model_validation_handler(request: Request, exc: ValidationError):
        return _respond(
            request, 422, ErrorCodes.VALIDATION_ERROR,
            f"{exc.error_count()} validation error(s)",
            _details(exc.errors(include_url=False, include_context=False, include_input=False)),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _respond(
            request, 422, ErrorCodes.VALIDATION_ERROR,
            "Request is invalid", _details(list(exc.errors())),
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return _respond(request, 400, ErrorCodes.INVALID_REQUEST, str(exc))

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error("Persistence failed: %s", exc)
        return _respond(request, 503, ErrorCodes.STORAGE_UNAVAILABLE, "Invoices could not be saved")

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("Storage failed: %s", exc)
        return _respond(request, 503, ErrorCodes.STORAGE_UNAVAILABLE, "Invoice storage is unavailable")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return _respond(request, 500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")
