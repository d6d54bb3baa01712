"""Configuration loader for pi-remote."""

from __future__ import annotations

from configparser import ConfigParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from . import constants


@dataclass(slots=True)
class ServerConfig:
    url: str = constants.DEFAULT_SERVER_URL
    request_timeout_seconds: float = constants.DEFAULT_REQUEST_TIMEOUT_SECONDS


@dataclass(slots=True)
class PollingConfig:
    interval_seconds: float = constants.DEFAULT_POLL_INTERVAL_SECONDS
    initial_delay_seconds: Optional[float] = None  # None waits one full interval


@dataclass(slots=True)
class LinksConfig:
    share_links: Dict[str, str] = field(
        default_factory=lambda: dict(constants.DEFAULT_SHARE_LINKS)
    )


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = None
    log_network: bool = False


@dataclass(slots=True)
class RemoteConfig:
    server: ServerConfig
    polling: PollingConfig
    links: LinksConfig
    logging: LoggingConfig
    raw: ConfigParser
    path: Path


def _positive_float(
    parser: ConfigParser, section: str, option: str, *, default: float
) -> float:
    try:
        value = parser.getfloat(section, option, fallback=default)
    except ValueError:
        return default
    if value <= 0:
        return default
    return value


def load_config(path: Optional[Path] = None) -> RemoteConfig:
    """Load configuration from disk, applying defaults where necessary."""

    config_path = path or constants.DEFAULT_CONFIG_PATH
    parser = ConfigParser()
    parser.read_dict(
        {
            "server": {
                "url": constants.DEFAULT_SERVER_URL,
                "request_timeout_seconds": str(
                    constants.DEFAULT_REQUEST_TIMEOUT_SECONDS
                ),
            },
            "polling": {
                "interval_seconds": str(constants.DEFAULT_POLL_INTERVAL_SECONDS),
            },
            "links": dict(constants.DEFAULT_SHARE_LINKS),
            "logging": {
                "level": "INFO",
                "log_network": "false",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path)

    server = ServerConfig(
        url=parser.get("server", "url").strip().rstrip("/"),
        request_timeout_seconds=_positive_float(
            parser,
            "server",
            "request_timeout_seconds",
            default=constants.DEFAULT_REQUEST_TIMEOUT_SECONDS,
        ),
    )

    initial_delay: Optional[float] = None
    if parser.has_option("polling", "initial_delay_seconds"):
        try:
            initial_delay = max(
                0.0, parser.getfloat("polling", "initial_delay_seconds")
            )
        except ValueError:
            initial_delay = None

    polling = PollingConfig(
        interval_seconds=_positive_float(
            parser,
            "polling",
            "interval_seconds",
            default=constants.DEFAULT_POLL_INTERVAL_SECONDS,
        ),
        initial_delay_seconds=initial_delay,
    )

    links = LinksConfig(
        share_links={
            name.strip().lower(): value.strip()
            for name, value in parser.items("links")
            if value.strip()
        }
    )

    log_path_value = parser.get("logging", "path", fallback="").strip()
    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=Path(log_path_value).expanduser() if log_path_value else None,
        log_network=parser.getboolean("logging", "log_network", fallback=False),
    )

    return RemoteConfig(
        server=server,
        polling=polling,
        links=links,
        logging=logging_config,
        raw=parser,
        path=config_path,
    )


def save_config(config: RemoteConfig) -> None:
    """Persist the current configuration to disk."""

    config_path = config.path
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as stream:
        config.raw.write(stream)
