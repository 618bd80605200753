"""Logging Config - process-wide log setup for the glossia package."""

import json
import logging
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, TextIO

from glossia.core import ConfigError
from glossia.services.env_parsing import env_bool, env_str

ROOT_LOGGER_NAME = "glossia"
LOG_FORMATS = ("pretty", "compact", "json")

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}

# Attributes every LogRecord carries; anything else came in through `extra`.
_STANDARD_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def parse_level(value: str) -> int:
    """
    Parse a level filter such as "debug" or "info,glossia=debug".

    Only the bare level name is honoured; per-target directives are skipped.

    Raises:
        ConfigError: If no recognised level name is present.
    """
    for part in value.split(","):
        part = part.strip().lower()
        if part and "=" not in part and part in _LEVELS:
            return _LEVELS[part]
    raise ConfigError(f"Unrecognised log level: '{value}'")


@dataclass
class LoggingConfig:
    level: int = logging.INFO
    format: str = "pretty"
    with_target: bool = True
    with_thread_ids: bool = False
    with_line_number: bool = False
    with_timestamp: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LoggingConfig":
        """
        Read GLOSSIA_LOG (falling back to RUST_LOG), LOG_FORMAT and the
        LOG_WITH_TARGET / LOG_WITH_THREAD_IDS / LOG_WITH_LINE_NUMBER /
        LOG_WITH_TIMESTAMP flags.
        """
        raw_level = env_str("GLOSSIA_LOG", environ) or env_str("RUST_LOG", environ)
        log_format = (env_str("LOG_FORMAT", environ) or "pretty").lower()
        if log_format not in LOG_FORMATS:
            raise ConfigError(f"LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}, got '{log_format}'")

        return cls(
            level=parse_level(raw_level) if raw_level else logging.INFO,
            format=log_format,
            with_target=env_bool("LOG_WITH_TARGET", True, environ),
            with_thread_ids=env_bool("LOG_WITH_THREAD_IDS", False, environ),
            with_line_number=env_bool("LOG_WITH_LINE_NUMBER", False, environ),
            with_timestamp=env_bool("LOG_WITH_TIMESTAMP", True, environ),
        )

    @classmethod
    def production(cls) -> "LoggingConfig":
        return cls(level=logging.INFO, format="json", with_thread_ids=True)

    @classmethod
    def development(cls) -> "LoggingConfig":
        return cls(level=logging.DEBUG, format="pretty", with_line_number=True)


class JsonFormatter(logging.Formatter):
    """One JSON object per line: standard fields plus anything passed via `extra`."""

    def __init__(self, config: Optional[LoggingConfig] = None):
        super().__init__()
        self._config = config or LoggingConfig(format="json")

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if self._config.with_timestamp:
            payload["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        if self._config.with_target:
            payload["target"] = record.name
        if self._config.with_thread_ids:
            payload["thread_id"] = record.thread
        if self._config.with_line_number:
            payload["line"] = record.lineno

        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_"):
                payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def build_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.format == "json":
        return JsonFormatter(config)

    parts = []
    if config.with_timestamp:
        parts.append("%(asctime)s")
    parts.append("%(levelname)-8s" if config.format == "pretty" else "%(levelname)s")
    if config.with_thread_ids:
        parts.append("[%(thread)d]")
    if config.with_target:
        parts.append("%(name)s:%(lineno)d" if config.with_line_number else "%(name)s")
    elif config.with_line_number:
        parts.append("line %(lineno)d")
    parts.append("%(message)s")

    separator = " | " if config.format == "pretty" else " "
    return logging.Formatter(separator.join(parts), datefmt="%Y-%m-%d %H:%M:%S")


def init_logging(config: Optional[LoggingConfig] = None, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        config: Logging settings. Read from the environment if None.
        stream: Output stream for the handler. Defaults to stderr.

    Returns:
        The configured "glossia" logger.
    """
    config = config or LoggingConfig.from_env()

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(config.level)

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(config.level)
    handler.setFormatter(build_formatter(config))
    logger.addHandler(handler)

    return logger


def log_startup(component: str, version: str) -> None:
    logging.getLogger(ROOT_LOGGER_NAME).info(
        f"Starting {component} v{version}",
        extra={"event": "startup", "component": component, "version": version},
    )


def log_shutdown(component: str) -> None:
    logging.getLogger(ROOT_LOGGER_NAME).info(
        f"Shutting down {component}",
        extra={"event": "shutdown", "component": component},
    )
