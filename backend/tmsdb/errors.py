# backend/tmsdb/errors.py
"""
Error mapping shared by all routers.

- `server_errors` wraps an endpoint body: HTTPExceptions pass through,
  anything else is logged with its traceback and becomes a 500 carrying a
  generic message.
- `integrity_errors` turns a unique-index violation that raced past the
  application-level check into the same 400/409 the check would produce.
- The exception handlers give every error body the `{"message": ...}` shape
  the web client reads.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


@contextmanager
def server_errors(message: str, db: Optional[Session] = None, **context) -> Iterator[None]:
    try:
        yield
    except HTTPException:
        raise
    except Exception:
        if db is not None:
            db.rollback()
        logger.exception(message, extra=context)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=message,
        )


@contextmanager
def integrity_errors(
    db: Session,
    detail: str,
    status_code: int = status.HTTP_400_BAD_REQUEST,
) -> Iterator[None]:
    try:
        yield
    except IntegrityError:
        db.rollback()
        logger.warning("Integrity constraint rejected write", extra={"detail": detail})
        raise HTTPException(status_code=status_code, detail=detail)


# ---------------------------------------------------------------------------
# APP-LEVEL HANDLERS
# ---------------------------------------------------------------------------


def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    content = exc.detail if isinstance(exc.detail, dict) else {"message": exc.detail}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Invalid request data",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error",
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "An unexpected error occurred"},
    )


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
