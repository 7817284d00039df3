"""Uniform JSON responses with fixed CORS headers."""
from typing import Any

from fastapi.encoders import jsonable_encoder

from tech_trends.messages import ApiResponse

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,PUT,DELETE,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
}


def _headers() -> dict[str, str]:
    return {"Content-Type": "application/json", **CORS_HEADERS}


def success(data: Any, status_code: int = 200) -> ApiResponse:
    """Success response; pydantic models in ``data`` are rendered with camelCase keys."""
    return ApiResponse(status_code=status_code, body=jsonable_encoder(data), headers=_headers())


def error(
    message: str,
    status_code: int = 400,
    details: dict[str, Any] | None = None,
) -> ApiResponse:
    """Error response: ``{"error": message, **details}``."""
    body = {"error": message, **jsonable_encoder(details or {})}
    return ApiResponse(status_code=status_code, body=body, headers=_headers())


def bad_request(message: str) -> ApiResponse:
    return error(message, 400)


def unauthorized(message: str = "Unauthorized") -> ApiResponse:
    return error(message, 401)


def forbidden(message: str = "Forbidden") -> ApiResponse:
    return error(message, 403)


def not_found(message: str = "Not Found") -> ApiResponse:
    return error(message, 404)


def method_not_allowed(message: str = "Method Not Allowed") -> ApiResponse:
    return error(message, 405)


def server_error(message: str = "Internal Server Error") -> ApiResponse:
    return error(message, 500)
