"""Structured logging helpers with audit-run correlation context."""

from __future__ import annotations

import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import Iterator

_RUN_ID_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "run_id", default="-"
)
_PHASE_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "phase", default="-"
)
_NODE_TYPE_VAR: contextvars.ContextVar[str] = contextvars.ContextVar(
    "node_type", default="-"
)

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | run_id=%(run_id)s | phase=%(phase)s | "
    "node_type=%(node_type)s | %(name)s | %(message)s"
)


class _RunContextFilter(logging.Filter):
    """Inject run correlation fields into all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = _RUN_ID_VAR.get("-")
        record.phase = _PHASE_VAR.get("-")
        record.node_type = _NODE_TYPE_VAR.get("-")
        return True


def _ensure_filter_on_root_handlers() -> None:
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        has_filter = any(isinstance(f, _RunContextFilter) for f in handler.filters)
        if not has_filter:
            handler.addFilter(_RunContextFilter())


def resolve_log_level(level: int | str) -> int:
    """Accept ``logging.DEBUG`` style ints or names such as ``"debug"``."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def configure_structured_logging(level: int | str = logging.INFO) -> None:
    """Configure root logging format with run/phase/node-type context."""
    resolved = resolve_log_level(level)
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    else:
        root_logger.setLevel(resolved)
        formatter = logging.Formatter(LOG_FORMAT)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)
    _ensure_filter_on_root_handlers()


def set_run_id(run_id: str | None = None) -> str:
    """Set or generate run correlation ID."""
    value = run_id or str(uuid.uuid4())
    _RUN_ID_VAR.set(value)
    return value


def get_run_id() -> str:
    return _RUN_ID_VAR.get("-")


@contextmanager
def phase_scope(phase: str) -> Iterator[None]:
    """Temporarily set phase context for emitted logs."""
    token = _PHASE_VAR.set(phase)
    try:
        yield
    finally:
        _PHASE_VAR.reset(token)


@contextmanager
def node_type_scope(node_type: object) -> Iterator[None]:
    """Tag emitted logs with the node type currently being processed."""
    token = _NODE_TYPE_VAR.set(str(node_type) if node_type is not None else "-")
    try:
        yield
    finally:
        _NODE_TYPE_VAR.reset(token)
