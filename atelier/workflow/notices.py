"""User-facing notices for failed generation calls."""

RATE_LIMIT_NOTICE = "Rate limit reached. Please try again in a few moments."
PAYMENT_REQUIRED_NOTICE = "Insufficient credits. Add credits to your workspace."


def friendly_error(message: str, fallback: str) -> str:
    """Map known provider failures to a friendlier notice, anything else to ``fallback``."""
    if "Rate limit" in message:
        return RATE_LIMIT_NOTICE
    if "Payment required" in message:
        return PAYMENT_REQUIRED_NOTICE
    return fallback
