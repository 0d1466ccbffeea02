"""Custom exception hierarchy for the prerender proxy."""


class PrerenderError(Exception):
    """Base exception for all prerender errors."""


class ConfigurationError(PrerenderError):
    """Raised when configuration is missing or invalid."""


class BuildError(PrerenderError):
    """Raised when the rendering-service URL cannot be built from a request.

    Attributes:
        message: Error message ("malformed request URI", "undetectable host")
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UpstreamError(PrerenderError):
    """Raised when the rendering service cannot be used.

    Attributes:
        message: Error message
        status_code: HTTP status code from upstream (optional)
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamTransportError(UpstreamError):
    """Raised when the rendering service is unreachable or times out."""


class BodyReadError(UpstreamError):
    """Raised when the rendering service response body cannot be read."""
