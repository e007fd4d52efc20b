"""
Error taxonomy for the Atelier service.

Validation problems derive from ValueError and missing rows from LookupError so
the endpoints can map them to 400 and 404 with the same ``except`` ladder the
rest of the API uses. Everything else surfaces as a 500.
"""
from typing import Optional


class ImageValidationError(ValueError):
    """Uploaded or referenced image is unusable (type, size, encoding)."""


class ConfigurationError(RuntimeError):
    """A required provider setting (API key, project id) is missing."""


class GenerationError(RuntimeError):
    """The generation provider failed or returned nothing usable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(LookupError):
    """Row does not exist or belongs to another user."""


class InvalidTransition(ValueError):
    """A workflow event is not allowed from the current step."""


def describe_upstream_error(status_code: Optional[int], text: str) -> str:
    """Build the message forwarded to callers for a failed provider call."""
    if status_code == 429:
        return f"Rate limit exceeded: {text}"
    if status_code == 402:
        return f"Payment required: {text}"
    if status_code is None:
        return f"Generation failed: {text}"
    return f"Generation failed ({status_code}): {text}"
