"""JSON error bodies for the function-style endpoints (`{"error": ...}`)."""

from typing import Any

from fastapi.responses import JSONResponse


def error_response(message: str, status_code: int = 500, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message, **extra})
