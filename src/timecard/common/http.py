from __future__ import annotations

import logging
from typing import Any

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import NotFoundError, ValidationError
from .validators import require_positive_int

logger = logging.getLogger(__name__)


def json_body() -> dict[str, Any]:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


def require_id(source: dict[str, Any], key: str) -> int:
    return require_positive_int(source.get(key), key)


def ok(status: int = 200, **data: Any):
    return jsonify({"success": True, **data}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(NotFoundError)
    def _not_found(e: NotFoundError):
        return jsonify({"success": False, "message": str(e)}), 404

    @app.errorhandler(ValidationError)
    def _invalid(e: ValidationError):
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return jsonify({"success": False, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "message": "Internal server error"}), 500
