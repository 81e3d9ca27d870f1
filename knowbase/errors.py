"""
Exception handlers that turn domain errors into `{"error", "detail"}` JSON.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from knowbase.ai.qbusiness.exceptions import QBusinessError
from knowbase.db.exceptions import DocumentStoreError
from knowbase.integrations.drive.exceptions import DriveError
from knowbase.integrations.mail.exceptions import MailError
from knowbase.utils.logger import logger


def error_response(status_code: int, error: str, detail: Any = None) -> JSONResponse:
    content: dict[str, Any] = {"error": error}
    if detail is not None:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content)


def first_validation_message(exc: RequestValidationError) -> str:
    """Describe the first failing field as "<field>: <message>"."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"{field}: {message}" if field else message


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    message = first_validation_message(exc)
    logger.info("Request validation failed", path=request.url.path, detail=message)
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request", message)


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def handle_document_store_error(
    request: Request, exc: DocumentStoreError
) -> JSONResponse:
    return error_response(exc.status_code, "Document store error", exc.message)


async def handle_mail_error(request: Request, exc: MailError) -> JSONResponse:
    return error_response(exc.status_code, "Mail delivery failed", exc.message)


async def handle_drive_error(request: Request, exc: DriveError) -> JSONResponse:
    return error_response(
        exc.status_code or status.HTTP_500_INTERNAL_SERVER_ERROR,
        exc.message,
        exc.details,
    )


async def handle_qbusiness_error(request: Request, exc: QBusinessError) -> JSONResponse:
    return error_response(
        exc.status_code or status.HTTP_502_BAD_GATEWAY,
        "Chat backend error",
        exc.message,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the handlers above to the application."""
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(DocumentStoreError, handle_document_store_error)
    app.add_exception_handler(MailError, handle_mail_error)
    app.add_exception_handler(DriveError, handle_drive_error)
    app.add_exception_handler(QBusinessError, handle_qbusiness_error)
