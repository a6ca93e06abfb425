# src/logging/context.py — v1
"""Contextual logging support: attach context id, operation and URI to records.

The sync engines set these per operation; formatters read them.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_context_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "context_id", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)
_uri: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "uri", default=None
)
_mode: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "mode", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    context_id: str | None = None
    operation: str | None = None
    uri: str | None = None
    mode: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        context_id=_context_id.get(),
        operation=_operation.get(),
        uri=_uri.get(),
        mode=_mode.get(),
    )


def set_operation_context(
    context_id: str | None, operation: str, uri: str | None = None
) -> None:
    """Set the context for one sync operation (each asyncio task has its own)."""
    _context_id.set(context_id)
    _operation.set(operation)
    _uri.set(uri)


def set_mode_context(mode: str) -> None:
    """Record whether the current operation runs online or offline."""
    _mode.set(mode)


def clear_context() -> None:
    """Reset all context variables."""
    _context_id.set(None)
    _operation.set(None)
    _uri.set(None)
    _mode.set(None)
