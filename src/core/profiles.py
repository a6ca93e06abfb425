# src/core/profiles.py — v1
"""Profile registry and per-resource extension layers.

A profile URI maps to a set of named computed properties. Definitions are
registered once (before documents carrying the profile are extracted) and
shared; each resource installs them on its own ProfileExtension so that
switching one resource's profile never affects another resource.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping

logger = logging.getLogger(__name__)


class ProfileError(Exception):
    """Raised when a profile definition is invalid."""


@dataclass(frozen=True)
class ProfileProperty:
    """Computed property definition: getter and optional setter."""

    fget: Callable[[Any], Any]
    fset: Callable[[Any, Any], None] | None = None
    doc: str | None = None

    @classmethod
    def coerce(cls, definition: Any) -> ProfileProperty:
        """Accept a ProfileProperty, a builtin `property` or a bare getter."""
        if isinstance(definition, ProfileProperty):
            return definition
        if isinstance(definition, property):
            if definition.fget is None:
                raise ProfileError("Profile property needs a getter")
            return cls(fget=definition.fget, fset=definition.fset, doc=definition.__doc__)
        if callable(definition):
            return cls(fget=definition)
        raise ProfileError(f"Unsupported profile property: {definition!r}")


class ProfileRegistry:
    """Profile URI -> computed property definitions."""

    def __init__(self) -> None:
        self._profiles: dict[str, dict[str, ProfileProperty]] = {}

    @property
    def profiles(self) -> list[str]:
        """Return sorted list of registered profile URIs."""
        return sorted(self._profiles)

    def register(self, profile: str, properties: Mapping[str, Any]) -> None:
        """Register (or replace) the properties of a profile."""
        definitions: dict[str, ProfileProperty] = {}
        for name, definition in properties.items():
            if not name or name.startswith("_"):
                raise ProfileError(
                    f"Invalid property name {name!r} for profile {profile}"
                )
            definitions[name] = ProfileProperty.coerce(definition)
        if profile in self._profiles:
            logger.warning("Overwriting existing profile: %s", profile)
        self._profiles[profile] = definitions
        logger.debug(
            "Registered profile %s (%d properties)", profile, len(definitions)
        )

    def register_many(self, profiles: Mapping[str, Mapping[str, Any]]) -> None:
        """Register several profiles at once."""
        for profile, properties in profiles.items():
            self.register(profile, properties)

    def unregister(self, profile: str) -> None:
        self._profiles.pop(profile, None)

    def get(self, profile: str) -> dict[str, ProfileProperty]:
        """Definitions for a profile; empty when the profile is unknown."""
        definitions = self._profiles.get(profile)
        if definitions is None:
            logger.debug("No properties registered for profile %s", profile)
            return {}
        return definitions

    def __contains__(self, profile: object) -> bool:
        return profile in self._profiles


class ProfileExtension:
    """Resource-private layer holding the installed profile properties."""

    def __init__(self) -> None:
        self._properties: dict[str, ProfileProperty] = {}

    def install(self, definitions: Mapping[str, ProfileProperty]) -> None:
        """Install definitions; later installs shadow earlier ones."""
        self._properties.update(definitions)

    def clear(self) -> None:
        self._properties.clear()

    def lookup(self, name: str) -> ProfileProperty | None:
        return self._properties.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._properties

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)


# Process-wide default, used by contexts created without an explicit registry.
default_registry = ProfileRegistry()


def register_profile(profile: str, properties: Mapping[str, Any]) -> None:
    """Register a profile on the process-wide default registry."""
    default_registry.register(profile, properties)
