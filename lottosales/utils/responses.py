"""The `{success, data, error}` envelope every endpoint answers with."""

from __future__ import annotations

from typing import Any

from flask import Response, jsonify

Reply = tuple[Response, int]


def _envelope(data: Any = None, error: dict[str, Any] | None = None) -> Response:
    return jsonify({"success": error is None, "data": data, "error": error})


def ok(data: Any, status_code: int = 200) -> Reply:
    return _envelope(data=data), status_code


def fail(code: str, message: str, status_code: int, details: Any | None = None) -> Reply:
    return _envelope(error={"code": code, "message": message, "details": details}), status_code
