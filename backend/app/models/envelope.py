"""Response envelope shared by every registry endpoint.

Success and failure bodies have the same four keys so that clients can
always read ``data`` or ``errors`` without checking the status code first.
"""

from pydantic import BaseModel


class ApiError(BaseModel):
    """One problem with a request; ``field`` names the offending input, if any."""

    code: str
    message: str
    field: str | None = None


def success_response(data: object, **meta: object) -> dict:
    """Build a success envelope dict."""
    return {
        "status": "success",
        "data": data,
        "errors": [],
        "meta": meta,
    }


def error_response(*errors: ApiError) -> dict:
    return {
        "status": "error",
        "data": None,
        "errors": [e.model_dump() for e in errors],
        "meta": {},
    }
