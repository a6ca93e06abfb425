# src/core/errors.py — v1
"""Exception hierarchy for HAL resource synchronization.

None of these are retried automatically. They surface to the caller of the
operation (get, put, delete, post, load) that triggered them.
"""

from __future__ import annotations


class HalError(Exception):
    """Base class for all halgraph errors."""


class ConsistencyError(HalError):
    """A document's self link does not identify the expected resource."""

    def __init__(self, expected: str | None, actual: str | None) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Self link href differs: expected '{expected}', was '{actual}'"
        )


class ContentTypeError(HalError):
    """Response cannot be merged as a HAL document."""


class EmptyBodyError(HalError):
    """Response has no body although a HAL merge was required."""


class TransportError(HalError):
    """Network or HTTP failure reported by the transport."""

    def __init__(
        self, message: str, *, status: int | None = None, url: str | None = None
    ) -> None:
        self.status = status
        self.url = url
        super().__init__(message)


class StoreError(HalError):
    """Persistent store operation failed."""


class AbstractMethodError(NotImplementedError):
    """A resource without request-building behavior was asked to sync."""

    def __init__(self, cls_name: str, method: str) -> None:
        super().__init__(f"Abstract method {cls_name}.{method}() not implemented")
