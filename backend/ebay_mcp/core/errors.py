from typing import Optional

# Upstream bodies are cut to this length before they reach logs or RPC errors
MAX_BODY_CHARS = 500


def truncate_body(body: Optional[str], limit: int = MAX_BODY_CHARS) -> Optional[str]:
    if body is None:
        return None
    body = str(body)
    return body if len(body) <= limit else body[:limit] + "..."


class BridgeError(Exception):
    """
    Base class for every failure the dispatcher knows how to report.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = truncate_body(body)

    def describe(self) -> str:
        if self.status_code is None:
            return self.message
        if self.body:
            return f"{self.message} ({self.status_code}): {self.body}"
        return f"{self.message} ({self.status_code})"


class AuthConfigError(BridgeError):
    """Client credentials are missing from configuration."""


class UpstreamAuthError(BridgeError):
    """OAuth endpoint rejected the request or returned no usable token."""


class UpstreamSearchError(BridgeError):
    """Search endpoint returned a non-success or malformed response."""


class UpstreamDetailError(BridgeError):
    """Item detail endpoint returned a non-success or malformed response."""


class ValidationError(BridgeError):
    """Tool arguments are malformed."""
