"""
HTTP exceptions for API layer.

These exceptions are used ONLY in API routers and dependencies to return
proper HTTP responses. They should NOT be used in services or the graph
pipeline.
"""

from fastapi import HTTPException, status


class CustomHTTPException(HTTPException):
    """HTTP exception raised directly by the API layer."""

    pass


def bad_request(detail: str) -> CustomHTTPException:
    """Build a fresh 400 response exception."""
    return CustomHTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def unsupported_format(requested: str, supported: list[str]) -> CustomHTTPException:
    """400 for an export format the renderer does not know."""
    return bad_request(
        f"Unsupported format '{requested}'. Expected one of: {', '.join(supported)}"
    )
