"""Core primitives for pi-remote."""

from .errors import (
    PiRemoteError,
    PollError,
    ProtocolError,
    TransportError,
    UserFacingError,
    ValidationError,
)
from .models import (
    VOLUME_DIRECTIONS,
    ActionRoute,
    CommandAction,
    CommandOutcome,
    CommandRequest,
    SystemSnapshot,
)
from .protocols import ErrorCallback, HttpTransport, SnapshotCallback, TransportResponse
from .utils import invoke_callback, send_request

__all__ = [
    "ActionRoute",
    "CommandAction",
    "CommandOutcome",
    "CommandRequest",
    "ErrorCallback",
    "HttpTransport",
    "PiRemoteError",
    "PollError",
    "ProtocolError",
    "SnapshotCallback",
    "SystemSnapshot",
    "TransportError",
    "TransportResponse",
    "UserFacingError",
    "VOLUME_DIRECTIONS",
    "ValidationError",
    "invoke_callback",
    "send_request",
]
