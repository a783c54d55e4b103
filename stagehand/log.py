"""Structured logging with verbosity filtering and optional external sinks."""

from __future__ import annotations

import enum
import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


class Verbosity(enum.IntEnum):
    """How much the logger lets through."""

    MINIMAL = 0
    MEDIUM = 1
    DETAILED = 2


class LogLevel(enum.IntEnum):
    """Severity of a log record; lower values are more severe."""

    ERROR = 0
    INFO = 1
    DEBUG = 2

    @classmethod
    def from_value(cls, value: int) -> LogLevel:
        """Map a numeric level to a LogLevel; unknown values become INFO."""
        byte = int(value) & 0xFF
        if byte == 0:
            return cls.ERROR
        if byte == 2:
            return cls.DEBUG
        return cls.INFO

    def label(self) -> str:
        return self.name


@dataclass
class LogRecord:
    """A single structured log entry handed to log sinks."""

    message: str
    level: LogLevel
    category: str | None = None
    auxiliary: Any = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        """Serialisable form; empty category and auxiliary are left out."""
        data: dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(),
            "message": self.message,
            "level": self.level.name.lower(),
        }
        if self.category is not None:
            data["category"] = self.category
        if self.auxiliary is not None:
            data["auxiliary"] = self.auxiliary
        return data


LogCallback = Callable[[LogRecord], None]


@dataclass
class LogConfig:
    """Logging settings shared across a session."""

    verbose: Verbosity = Verbosity.MEDIUM
    use_rich: bool = True
    env: str = "LOCAL"
    external_logger: LogCallback | None = None
    quiet_dependencies: bool = True

    def should_log(self, level: LogLevel) -> bool:
        return level == LogLevel.ERROR or int(level) <= int(self.verbose)


def default_log_handler(record: LogRecord) -> None:
    """Print a record to standard output."""
    timestamp = record.timestamp.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    label = record.level.label()
    if record.category is not None:
        print(f"[{timestamp}] {label:<5} [{record.category}] {record.message}")
    else:
        print(f"[{timestamp}] {label:<5} {record.message}")
    if record.auxiliary is not None:
        print(f"    {json.dumps(record.auxiliary, separators=(',', ':'))}")


class StagehandLogger:
    """Logger that filters by verbosity and forwards to an external sink or the console."""

    def __init__(
        self,
        verbose: Verbosity = Verbosity.MEDIUM,
        *,
        config: LogConfig | None = None,
    ) -> None:
        self.config = config if config is not None else LogConfig(verbose=verbose)
        self._default_handler: LogCallback = default_log_handler

    def set_verbose(self, verbose: Verbosity) -> None:
        self.config.verbose = verbose

    def set_external_logger(self, logger: LogCallback | None) -> None:
        self.config.external_logger = logger

    def log(
        self,
        message: str,
        level: LogLevel,
        category: str | None = None,
        auxiliary: Any = None,
    ) -> None:
        if not self.config.should_log(level):
            return
        record = LogRecord(message, level, category, auxiliary)
        sink = self.config.external_logger or self._default_handler
        sink(record)

    def error(self, message: str, category: str | None = None, auxiliary: Any = None) -> None:
        self.log(message, LogLevel.ERROR, category, auxiliary)

    def info(self, message: str, category: str | None = None, auxiliary: Any = None) -> None:
        self.log(message, LogLevel.INFO, category, auxiliary)

    def debug(self, message: str, category: str | None = None, auxiliary: Any = None) -> None:
        self.log(message, LogLevel.DEBUG, category, auxiliary)

    def __repr__(self) -> str:
        return (
            f"StagehandLogger(verbosity={self.config.verbose.name}, "
            f"use_rich={self.config.use_rich}, env={self.config.env!r}, "
            f"external_logger={self.config.external_logger is not None})"
        )


def _field(obj: Any, key: str) -> Any:
    return obj.get(key) if isinstance(obj, Mapping) else None


def sync_log_handler(payload: Any, logger: StagehandLogger) -> None:
    """Forward a log payload received from the API to a logger."""
    message_obj = payload.get("message", payload) if isinstance(payload, Mapping) else payload

    level_value = _field(message_obj, "level")
    if not isinstance(level_value, int) or isinstance(level_value, bool):
        level_value = 1
    message = _field(message_obj, "message")
    if not isinstance(message, str):
        message = ""
    category = _field(message_obj, "category")
    if not isinstance(category, str):
        category = None
    auxiliary = _field(message_obj, "auxiliary")

    logger.log(message, LogLevel.from_value(level_value), category, auxiliary)