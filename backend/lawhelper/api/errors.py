# lawhelper/api/errors.py
"""
Translation of service-layer failures into HTTP errors, plus the app-wide
exception handlers.
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from lawhelper.utils.exceptions import (
    AIGatewayError,
    AIServiceError,
    AITimeoutError,
    AITimeoutHTTPError,
    ExtractionError,
    UploadRejectedError,
)

logger = logging.getLogger(__name__)


@contextmanager
def ai_failure(action: str) -> Iterator[None]:
    """
    Wrap an AI gateway call. The cause is already in the server log; the
    client gets a short message.

        with ai_failure("analyze risk"):
            reply = ai.analyze_risk(...)
    """
    try:
        yield
    except AITimeoutError:
        raise AITimeoutHTTPError()
    except AIGatewayError:
        raise AIServiceError(action)


@contextmanager
def upload_failure() -> Iterator[None]:
    """Map upload and extraction errors to 413/415/400."""
    try:
        yield
    except UploadRejectedError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except ExtractionError as e:
        logger.info("extraction_failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Could not extract content from the document",
        )


def _field_name(loc) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "form", "cookie", "header")]
    return ".".join(parts) or "request"


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": _field_name(err.get("loc", ())), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    first = errors[0] if errors else {"field": "request", "message": "Invalid request"}
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": f"{first['field']}: {first['message']}", "errors": errors},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_error method=%s path=%s correlation_id=%s",
        request.method,
        request.url.path,
        getattr(request.state, "correlation_id", None),
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
