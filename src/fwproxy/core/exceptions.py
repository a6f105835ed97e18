"""
Custom exceptions for the firmware forwarding proxy.
"""


class ProxyError(Exception):
    """Base exception for all fwproxy errors.

    HTTP-facing subclasses carry the status code and the literal text body
    returned to the client.
    """

    status_code = 500

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message

    @property
    def body(self) -> str:
        """Diagnostic text sent to the client."""
        return self.message


class BadRequestError(ProxyError):
    """Raised when the url parameter is missing."""

    status_code = 400

    def __init__(self, parameter: str = "url"):
        super().__init__(f"{parameter.upper()} parameter required")
        self.parameter = parameter


class ForbiddenError(ProxyError):
    """Raised when a target URL is outside the allow-listed project."""

    status_code = 403

    def __init__(self, url: str, project: str):
        super().__init__(
            f"Only URLs from github.com/{project} are allowed",
            details=f"rejected {url!r}",
        )
        self.url = url
        self.project = project


class UpstreamError(ProxyError):
    """Raised when the upstream fetch fails at the transport level."""

    status_code = 500

    def __init__(self, url: str, details: str | None = None):
        super().__init__(f"Proxy Error: {details or 'request failed'}")
        self.url = url
        self.transport_details = details


class CacheError(ProxyError):
    """Raised when a cache operation fails."""

    def __init__(self, operation: str, details: str | None = None):
        super().__init__(f"Cache error during {operation}", details=details)
        self.operation = operation
