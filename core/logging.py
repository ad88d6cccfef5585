# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Structured logging with request context
# PURPOSE: Attach request, entity and signer fields to every log line
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

stdlib logging with a per-request context:

- log_context() pushes fields (correlation_id, entity_id, signer_address,
  component, operation, plus free-form extras) for the duration of a block
- StructuredFormatter emits one JSON object per record (LOG_FORMAT=json)
- HumanFormatter emits a single readable line with the context inline
- get_logger() returns an adapter that tags records with a component

Context lives in a ContextVar, so each request handled on the event loop
sees only its own fields.

Usage:
    from core.logging import ComponentType, get_logger, log_context

    logger = get_logger(__name__, ComponentType.SERVICE)

    with log_context(entity_id="bafkrei..."):
        logger.info("Uploading entity", extra={"files": 3})
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Union

# Third-party loggers that are noisy at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "botocore", "boto3", "urllib3", "uvicorn.access")


class ComponentType(str, Enum):
    """Component tag attached to records from get_logger()."""
    API = "api"
    SERVICE = "service"
    REGISTRY = "registry"
    SCHEDULER = "scheduler"


@dataclass(frozen=True)
class LogContext:
    """Fields attached to every record logged inside a log_context() block."""
    correlation_id: Optional[str] = None
    entity_id: Optional[str] = None
    signer_address: Optional[str] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only; extras are flattened in."""
        result = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        result.update(self.extra)
        return result


_KNOWN_FIELDS = frozenset(f.name for f in fields(LogContext)) - {"extra"}
_EMPTY_CONTEXT = LogContext()
_current: ContextVar[LogContext] = ContextVar("log_context", default=_EMPTY_CONTEXT)


def get_current_context() -> LogContext:
    return _current.get()


@contextmanager
def log_context(**kwargs) -> Iterator[LogContext]:
    """
    Push context fields for the duration of the block.

    Fields not set here are inherited from the enclosing block. Unknown
    keyword names are stored as extras.

    Example:
        with log_context(correlation_id="req-123", entity_id="bafk..."):
            logger.info("Processing upload")
    """
    parent = _current.get()
    known = {k: v for k, v in kwargs.items() if k in _KNOWN_FIELDS}
    extra = {**parent.extra, **kwargs.get("extra", {})}
    extra.update({k: v for k, v in kwargs.items() if k not in _KNOWN_FIELDS and k != "extra"})

    context = replace(parent, extra=extra, **known)
    token = _current.set(context)
    try:
        yield context
    finally:
        _current.reset(token)


def _record_data(record: logging.LogRecord) -> Dict[str, Any]:
    # Set by ContextLogger.process
    return getattr(record, "extra", None) or {}


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, for log aggregation."""

    def __init__(self, include_context: bool = True, include_source: bool = True):
        super().__init__()
        self.include_context = include_context
        self.include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_data: Dict[str, Any] = {
            "timestamp": timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_context:
            context = get_current_context().to_dict()
            if context:
                log_data["context"] = context

        data = _record_data(record)
        if data:
            log_data["data"] = data

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if self.include_source:
            log_data["source"] = f"{record.filename}:{record.lineno} {record.funcName}"

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """Single-line format for local development."""

    LABELS = (
        ("correlation_id", "req"),
        ("entity_id", "entity"),
        ("signer_address", "signer"),
    )

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        context = get_current_context()

        tags = [
            f"{label}={getattr(context, name)}"
            for name, label in self.LABELS
            if getattr(context, name)
        ]
        line = f"{timestamp:%Y-%m-%d %H:%M:%S} {record.levelname:<8} {record.name}"
        if tags:
            line += f" [{', '.join(tags)}]"
        line += f": {record.getMessage()}"

        data = _record_data(record)
        if data:
            line += f" {data}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


class ContextLogger(logging.LoggerAdapter):
    """
    Adapter that moves `extra=` kwargs onto `record.extra`.

    The adapter's component, if any, is added to every record's data.
    """

    def process(self, msg, kwargs):
        data = dict(kwargs.get("extra") or {})
        component = (self.extra or {}).get("component")
        if component:
            data.setdefault("component", component)
        kwargs["extra"] = {"extra": data}
        return msg, kwargs


def get_logger(name: str, component: Optional[ComponentType] = None) -> ContextLogger:
    """Logger for `name`, tagged with `component` when given."""
    return ContextLogger(
        logging.getLogger(name),
        {"component": component.value if component else None},
    )


def configure_logging(level: Union[str, int] = "INFO", json_output: bool = False) -> None:
    """
    Replace root handlers with a single stdout handler.

    Args:
        level: Root log level name or number
        json_output: StructuredFormatter instead of HumanFormatter
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredFormatter() if json_output else HumanFormatter())

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


__all__ = [
    "ComponentType",
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
]
