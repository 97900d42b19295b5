"""API response envelopes."""

from typing import Any

from flask import jsonify


def success_response(
    data: Any = None, message: str | None = None, status_code: int = 200
):
    """Wrap ``data`` in a ``{"success": true}`` envelope."""
    body = {"success": True}

    if data is not None:
        body["data"] = data

    if message is not None:
        body["message"] = message

    return jsonify(body), status_code


def error_response(
    code: str, message: str, details: Any = None, status_code: int = 400
):
    """Wrap an error code and message in a ``{"success": false}`` envelope."""
    body = {"success": False, "error": {"code": code, "message": message}}

    if details is not None:
        body["error"]["details"] = details

    return jsonify(body), status_code


def validation_error(details):
    """400 with per-field details."""
    return error_response(
        "VALIDATION_ERROR", "Invalid input data", details, status_code=400
    )


def unauthorized(message: str = "Authentication required"):
    return error_response("UNAUTHORIZED", message, status_code=401)


def forbidden(message: str = "Access denied"):
    return error_response("FORBIDDEN", message, status_code=403)


def not_found(message: str = "Resource not found"):
    return error_response("NOT_FOUND", message, status_code=404)


def conflict(message: str = "Resource conflict"):
    return error_response("CONFLICT", message, status_code=409)


def rate_limited(message: str = "Too many requests"):
    return error_response("RATE_LIMITED", message, status_code=429)


def server_error(message: str = "Internal server error"):
    return error_response("SERVER_ERROR", message, status_code=500)


def service_unavailable(code: str, message: str):
    return error_response(code, message, status_code=503)
