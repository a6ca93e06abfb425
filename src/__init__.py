# src/__init__.py — v1
"""halgraph: identity-mapped HAL resource graphs with offline sync."""

from halgraph.api.facade import create_context, create_engine
from halgraph.context.hal_context import HalContext
from halgraph.core.errors import (
    ConsistencyError,
    ContentTypeError,
    EmptyBodyError,
    HalError,
    StoreError,
    TransportError,
)
from halgraph.core.profiles import ProfileRegistry, register_profile
from halgraph.resource.generic_resource import GenericResource
from halgraph.resource.hal_resource import HalResource
from halgraph.version import __version__

__all__ = [
    "ConsistencyError",
    "ContentTypeError",
    "EmptyBodyError",
    "GenericResource",
    "HalContext",
    "HalError",
    "HalResource",
    "ProfileRegistry",
    "StoreError",
    "TransportError",
    "__version__",
    "create_context",
    "create_engine",
    "register_profile",
]
