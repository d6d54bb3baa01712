"""Error taxonomy for requests made against the home server."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class PiRemoteError(RuntimeError):
    """Base class for every classified request failure."""


class TransportError(PiRemoteError):
    """Raised when a request never produced an HTTP response.

    Covers refused connections, DNS and TLS failures, and timeouts.
    """

    def __init__(self, message: str, *, timeout: bool = False) -> None:
        super().__init__(message)
        self.timeout = timeout


class ProtocolError(PiRemoteError):
    """Raised when the server answered with a status other than 200."""

    def __init__(self, status: int, detail: str = "") -> None:
        message = f"Unexpected response status {status}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.status = status
        self.detail = detail


class ValidationError(PiRemoteError):
    """Raised when a response body cannot be turned into a snapshot."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


# Errors reported through a poller's error callback.
PollError = PiRemoteError


@dataclass(slots=True, frozen=True)
class UserFacingError:
    """One notification for the presentation layer, built from a failure."""

    title: str
    message: str
    cause: Optional[BaseException] = None

    @classmethod
    def from_error(cls, error: BaseException) -> "UserFacingError":
        if isinstance(error, ProtocolError):
            message = f"Request failed with status {error.status}."
        elif isinstance(error, ValidationError):
            message = f"Received invalid data from the server: {error}"
        else:
            message = f"An error occurred: {error}"
        return cls(title="Error", message=message, cause=error)
