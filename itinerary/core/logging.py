"""
Channel-aware structured logging.

Every logger belongs to one channel and messages are filtered by level
and by the set of enabled channels:

    PIPELINE  pass orchestration and timing
    SCAN      airport code substitution
    REWRITE   clock and date rewriting
    LOOKUP    airport reference table loading
    SYSTEM    everything else

Environment:
    ITINERARY_LOG_LEVEL     silent / info / verbose / debug (default info)
    ITINERARY_LOG_FORMAT    console / json (default console)
    ITINERARY_LOG_CHANNELS  comma-separated channel filter (default all)
"""

import logging
import os
import sys
from datetime import datetime
from enum import Enum, IntEnum
from typing import Any, Optional, Union

import structlog


class LogLevel(IntEnum):
    SILENT = 0
    INFO = 1
    VERBOSE = 2
    DEBUG = 3

    @classmethod
    def from_string(cls, s: str) -> "LogLevel":
        """Parse a level name; unknown names fall back to INFO."""
        return cls.__members__.get(s.strip().upper(), cls.INFO)


class LogChannel(str, Enum):
    PIPELINE = "PIPELINE"
    SCAN = "SCAN"
    REWRITE = "REWRITE"
    LOOKUP = "LOOKUP"
    SYSTEM = "SYSTEM"

    @classmethod
    def parse(cls, names: list[str]) -> list["LogChannel"]:
        """Parse channel names, skipping unknown ones."""
        return [cls(n.strip().upper()) for n in names if n.strip().upper() in cls.__members__]


_config: dict[str, Any] = {
    "level": LogLevel.INFO,
    "channels": set(LogChannel),
    "configured": False,
}

# Passes are routed by their numeric prefix
_PASS_CHANNELS = {
    "p20": LogChannel.SCAN,
    "p30": LogChannel.REWRITE,
}


def configure_logging(
    level: Union[LogLevel, str, None] = None,
    format: Optional[str] = None,
    channels: Optional[list[str]] = None,
    force: bool = False,
) -> None:
    """
    Configure structlog and the channel filter.

    Arguments left as None are read from the environment. Repeated calls
    are no-ops unless ``force`` is set.
    """
    if _config["configured"] and not force:
        return

    if level is None:
        level = os.environ.get("ITINERARY_LOG_LEVEL", "info")
    if isinstance(level, str):
        level = LogLevel.from_string(level)

    if format is None:
        format = os.environ.get("ITINERARY_LOG_FORMAT", "console")

    if channels is None:
        env_channels = os.environ.get("ITINERARY_LOG_CHANNELS", "")
        channels = env_channels.split(",") if env_channels else []
        parsed = LogChannel.parse(channels) or list(LogChannel)
    else:
        parsed = LogChannel.parse(channels)

    _config["level"] = level
    _config["channels"] = set(parsed)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.CRITICAL + 10 if level is LogLevel.SILENT else logging.DEBUG,
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if format == "json"
        else structlog.dev.ConsoleRenderer(colors=True)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _config["configured"] = True


class ChannelLogger:
    """A structlog logger bound to one channel (and optionally one pass)."""

    def __init__(self, channel: LogChannel, name: Optional[str] = None, pass_name: Optional[str] = None):
        self.channel = channel
        self.pass_name = pass_name
        self._logger = structlog.get_logger(name or f"itinerary.{channel.value.lower()}")

    def _should_log(self, msg_level: LogLevel) -> bool:
        return self.channel in _config["channels"] and _config["level"] >= msg_level

    def _emit(self, method: str, event: str, kwargs: dict) -> None:
        kwargs["channel"] = self.channel.value
        if self.pass_name:
            kwargs["pass"] = self.pass_name
        getattr(self._logger, method)(event, **kwargs)

    def info(self, event: str, **kwargs: Any) -> None:
        if self._should_log(LogLevel.INFO):
            self._emit("info", event, kwargs)

    def verbose(self, event: str, **kwargs: Any) -> None:
        if self._should_log(LogLevel.VERBOSE):
            self._emit("debug", event, kwargs)

    def debug(self, event: str, **kwargs: Any) -> None:
        if self._should_log(LogLevel.DEBUG):
            self._emit("debug", event, kwargs)

    def error(self, event: str, **kwargs: Any) -> None:
        """Errors ignore the channel filter; only SILENT suppresses them."""
        if _config["level"] is not LogLevel.SILENT:
            self._emit("error", event, kwargs)


def get_logger(channel: LogChannel = LogChannel.SYSTEM) -> ChannelLogger:
    configure_logging()
    return ChannelLogger(channel)


def get_pass_logger(pass_name: str) -> ChannelLogger:
    """Logger for a pipeline pass, e.g. ``get_pass_logger("p20_airport_codes")``."""
    configure_logging()
    channel = _PASS_CHANNELS.get(pass_name[:3], LogChannel.PIPELINE)
    return ChannelLogger(channel, name=f"itinerary.{pass_name}", pass_name=pass_name)


class TransformLogger:
    """Per-run pipeline logger: binds the request id and times each pass."""

    def __init__(self, request_id: str):
        self._log = get_logger(LogChannel.PIPELINE)
        self._start_time = datetime.now()
        self._pass_start: dict[str, datetime] = {}
        structlog.contextvars.bind_contextvars(request_id=request_id)

    def pass_start(self, pass_name: str) -> None:
        self._pass_start[pass_name] = datetime.now()
        self._log.verbose("pass_started", pass_name=pass_name)

    def pass_end(self, pass_name: str) -> None:
        started = self._pass_start.get(pass_name, self._start_time)
        self._log.info(
            "pass_completed",
            pass_name=pass_name,
            duration_ms=round((datetime.now() - started).total_seconds() * 1000, 2),
        )

    def pass_error(self, pass_name: str, error: Exception) -> None:
        self._log.error(
            "pass_failed",
            pass_name=pass_name,
            error=str(error),
            error_type=type(error).__name__,
        )

    def transform_complete(self, status: str, **metrics: Any) -> None:
        self._log.info(
            "transform_complete",
            status=status,
            total_duration_ms=round((datetime.now() - self._start_time).total_seconds() * 1000, 2),
            **metrics,
        )
        structlog.contextvars.unbind_contextvars("request_id")
