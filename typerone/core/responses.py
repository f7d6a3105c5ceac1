"""
Uniform response envelopes.

Success:  ``{"success": true, "data": ...}``
Failure:  ``{"success": false, "message": ..., "details"?: ..., "error"?: ...}``
"""

from typing import Any

from fastapi.responses import JSONResponse


def ok(data: Any = None) -> dict[str, Any]:
    return {"success": True, "data": data}


def error_payload(
    message: str,
    details: dict[str, Any] | None = None,
    error: str | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"success": False, "message": message}
    if details:
        payload["details"] = details
    if error:
        payload["error"] = error
    return payload


def error_response(
    status_code: int,
    message: str,
    details: dict[str, Any] | None = None,
    error: str | None = None,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=error_payload(message, details, error))
