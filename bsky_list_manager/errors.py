from typing import Optional


class BlueskyError(Exception):
    """Base class for errors raised while talking to the Bluesky API."""

    def __init__(self, message: str, status_code: Optional[int] = None,
                 error: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error = error

    @classmethod
    def wrap(cls, context: str, exc: "BlueskyError") -> "BlueskyError":
        """Build an error of this type that keeps the status and code of `exc`."""
        return cls(f"{context}: {exc}", status_code=exc.status_code, error=exc.error)


class APIError(BlueskyError):
    """A single XRPC request failed (HTTP status, transport or parse failure)."""


class AuthError(BlueskyError):
    """Session creation failed, or an authenticated call was made without a session."""


class FetchError(BlueskyError):
    """Listing follows failed; the whole enumeration is aborted."""


class CreateError(BlueskyError):
    """The list record could not be created."""


class AddError(BlueskyError):
    """A single list membership record could not be created."""
