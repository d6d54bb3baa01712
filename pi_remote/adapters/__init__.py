"""Adapter modules for external integrations."""

from .browser import LinkOpener, LinkOutcome
from .http import AiohttpTransport

__all__ = [
    "AiohttpTransport",
    "LinkOpener",
    "LinkOutcome",
]
