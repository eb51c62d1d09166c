"""
Error kinds raised by the Spotify integration and the cover-art pipeline.
"""
from typing import Any, Optional, Union


class BloxifyError(Exception):
    """Base class for all relay errors"""


class AuthRefreshError(BloxifyError):
    """
    The authorization server rejected the token exchange or could not be reached.

    By the time this is raised the session credential has already been cleared.
    `payload` holds the upstream error body (or message) for diagnostics.
    """

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base}: {self.payload}" if self.payload else base


class UpstreamCallError(BloxifyError):
    """A single Web API read or write failed."""

    def __init__(self, operation: str, status_or_cause: Union[int, str, BaseException]):
        self.operation = operation
        self.status_or_cause = status_or_cause
        self.status: Optional[int] = status_or_cause if isinstance(status_or_cause, int) else None
        super().__init__(f"{operation} failed: {status_or_cause}")


class ImageProcessingError(BloxifyError):
    """Cover art could not be downloaded, decoded or resized."""
