"""JSON response helpers shared by the routes."""

from typing import Any, Optional

from fastapi.responses import JSONResponse

# Attached to every JSON response, including errors.
CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}

PREFLIGHT_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
}


def json_response(content: Any, status_code: int = 200, headers: Optional[dict] = None) -> JSONResponse:
    """JSON response carrying the permissive CORS header."""
    merged = dict(CORS_HEADERS)
    merged.update(headers or {})
    return JSONResponse(content=content, status_code=status_code, headers=merged)


def error_response(message: str, status_code: int = 500) -> JSONResponse:
    """The ``{"ok": false, "error": ...}`` envelope."""
    return json_response({"ok": False, "error": message}, status_code=status_code)
