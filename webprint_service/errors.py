"""
Exception types for the WebPrint service.

Each type maps onto one HTTP outcome in the endpoint layer.
"""


class WebPrintError(Exception):
    """Base exception for WebPrint service errors."""
    pass


class InvalidInputError(WebPrintError):
    """Raised when a request carries a malformed or non-HTTP(S) URL."""
    pass


class UpstreamError(WebPrintError):
    """Raised when a fetched page or the completions provider answers with an error."""
    pass


class RenderError(WebPrintError):
    """Raised when the browser cannot be launched, navigate, or print."""
    pass
