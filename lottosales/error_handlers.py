"""Maps exceptions to the error envelope."""

from __future__ import annotations

import logging

from flask import Flask
from marshmallow import ValidationError as MarshmallowValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError
from werkzeug.exceptions import HTTPException

from lottosales.errors import AppError, ConflictError, NotFoundError, StoreUnavailableError, ValidationError
from lottosales.utils.responses import Reply, fail

logger = logging.getLogger(__name__)


def _render(exc: AppError) -> Reply:
    return fail(exc.code, exc.message, exc.status_code, exc.details)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError) -> Reply:
        return _render(exc)

    @app.errorhandler(MarshmallowValidationError)
    def _handle_schema_error(exc: MarshmallowValidationError) -> Reply:
        return _render(ValidationError(details=exc.messages))

    @app.errorhandler(DuplicateKeyError)
    def _handle_duplicate_key(exc: DuplicateKeyError) -> Reply:
        logger.info("Duplicate key: %s", exc)
        return _render(ConflictError(message="Record already exists"))

    @app.errorhandler(PyMongoError)
    def _handle_store_error(exc: PyMongoError) -> Reply:
        logger.error("MongoDB operation failed", exc_info=exc)
        return _render(StoreUnavailableError())

    @app.errorhandler(HTTPException)
    def _handle_http_exception(exc: HTTPException) -> Reply:
        status = int(exc.code or 500)
        if status == 404:
            return _render(NotFoundError())
        return fail("http_error", exc.description or "HTTP error", status, details={"name": exc.name})

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception) -> Reply:
        logger.exception("Unhandled exception")
        return fail("internal_error", "Internal server error", 500)
