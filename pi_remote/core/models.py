"""Domain models for metrics snapshots and remote commands."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional

from .errors import PiRemoteError, ValidationError

# Response field name -> snapshot attribute.
SNAPSHOT_FIELDS: tuple[tuple[str, str], ...] = (
    ("cpu_usage", "cpu_usage_percent"),
    ("memory_usage", "memory_usage_percent"),
    ("disk_usage", "disk_usage_percent"),
)

VOLUME_DIRECTIONS = frozenset({"up", "down"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _coerce_percent(payload: Mapping[str, Any], key: str) -> float:
    if key not in payload:
        raise ValidationError(f"Response missing field '{key}'", field=key)

    value = payload[key]
    # bool is an int subclass; a flag is never a usage reading.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(
            f"Field '{key}' is not numeric: {value!r}", field=key
        )

    try:
        number = float(value)
    except OverflowError as exc:
        raise ValidationError(
            f"Field '{key}' out of range [0, 100]: too large", field=key
        ) from exc
    if not math.isfinite(number):
        raise ValidationError(f"Field '{key}' is not finite: {value!r}", field=key)
    if not 0.0 <= number <= 100.0:
        raise ValidationError(
            f"Field '{key}' out of range [0, 100]: {value!r}", field=key
        )
    return number


@dataclass(slots=True, frozen=True)
class SystemSnapshot:
    """Point-in-time resource usage reported by the home server."""

    cpu_usage_percent: float
    memory_usage_percent: float
    disk_usage_percent: float

    @classmethod
    def from_payload(cls, payload: Any) -> "SystemSnapshot":
        """Validate a ``/system_info`` body and build a snapshot from it.

        Raises:
            ValidationError: If the body is not an object or any field is
                missing, non-numeric, non-finite or outside [0, 100]. No
                snapshot is produced in that case.
        """
        if not isinstance(payload, Mapping):
            raise ValidationError(
                f"Expected a JSON object, got {type(payload).__name__}"
            )

        values = {
            attribute: _coerce_percent(payload, key)
            for key, attribute in SNAPSHOT_FIELDS
        }
        return cls(**values)

    def as_dict(self) -> dict[str, float]:
        return {
            "cpu_usage": self.cpu_usage_percent,
            "memory_usage": self.memory_usage_percent,
            "disk_usage": self.disk_usage_percent,
        }


class CommandAction(str, Enum):
    MAKE_NOTE = "make_note"
    SEND_SMS = "send_sms"
    SHOW_NEWS = "show_news"
    GIVE_ALPHA = "give_alpha"
    GIVE_TRANSLATION = "give_translation"
    FETCH_CAMERA = "fetch_camera"
    HOME_AUTO = "home_auto"
    SPOTIFY_PLAY = "spotify_play"
    ADJUST_VOLUME_UP = "adjust_volume_up"
    ADJUST_VOLUME_DOWN = "adjust_volume_down"

    @property
    def label(self) -> str:
        """Human-readable name used in outcome messages."""
        return self.value.replace("_", " ")

    @classmethod
    def parse(cls, value: "CommandAction | str") -> "CommandAction":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise ValueError(f"Unsupported action: {value!r}") from exc

    @classmethod
    def for_volume(cls, direction: str) -> "CommandAction":
        if direction not in VOLUME_DIRECTIONS:
            raise ValueError(f"Unsupported volume direction: {direction!r}")
        return cls.ADJUST_VOLUME_UP if direction == "up" else cls.ADJUST_VOLUME_DOWN


@dataclass(slots=True, frozen=True)
class ActionRoute:
    """How an action reaches the server.

    Attributes:
        method: HTTP method used for the request.
        path: Request path relative to the server base URL.
        reports_outcome: False for fire-and-forget actions whose response
            status is never inspected.
    """

    method: str
    path: str
    reports_outcome: bool = True


@dataclass(slots=True, frozen=True)
class CommandRequest:
    action: CommandAction
    requested_at: datetime = field(default_factory=_utcnow)


@dataclass(slots=True, frozen=True)
class CommandOutcome:
    succeeded: bool
    action: CommandAction
    message: str
    status: Optional[int] = None
    error: Optional[PiRemoteError] = None
