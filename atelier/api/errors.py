"""
Exception to HTTP status mapping used by every endpoint.
"""
from fastapi import HTTPException

from atelier.core.exceptions import InvalidTransition


def http_error(exc: Exception) -> HTTPException:
    """
    Wrap ``exc`` in an HTTPException carrying ``{"error": message}``.

    InvalidTransition is a ValueError, so it is checked first.
    """
    if isinstance(exc, HTTPException):
        return exc
    if isinstance(exc, InvalidTransition):
        return HTTPException(status_code=409, detail={"error": str(exc)})
    if isinstance(exc, ValueError):
        return HTTPException(status_code=400, detail={"error": str(exc)})
    if isinstance(exc, LookupError):
        return HTTPException(status_code=404, detail={"error": str(exc)})
    return HTTPException(status_code=500, detail={"error": str(exc)})
