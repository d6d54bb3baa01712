"""Remote-control client for a Raspberry Pi home server."""

__version__ = "0.1.0"
