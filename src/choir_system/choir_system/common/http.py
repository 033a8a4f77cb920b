from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: 400,
    AuthenticationError: 401,
    AuthorizationError: 403,
    NotFoundError: 404,
    StorageError: 500,
}


def json_body() -> dict:
    """Request JSON as a dict; an absent or non-object body reads as empty."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def message(text: str, status: int = 200, **extra):
    return jsonify({"message": text, **extra}), status


def register_error_handlers(app: Flask) -> None:
    for exc_cls, status in ERROR_STATUS.items():

        def handler(e, status=status):
            if status >= 500:
                logger.error("%s: %s", type(e).__name__, e)
            return message(str(e), status)

        app.register_error_handler(exc_cls, handler)

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        return message(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def unhandled(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return message("Server error", 500)
