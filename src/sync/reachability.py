# src/sync/reachability.py — v1
"""Network reachability signal consulted by the offline engine.

The engine reads `offline` at the start of every operation; nothing is
cached between operations.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)

ReachabilityListener = Callable[[bool], None]


class BaseReachability(ABC):
    """Boolean offline state."""

    @property
    @abstractmethod
    def offline(self) -> bool:
        """True when the network is considered unreachable."""


class ManualReachability(BaseReachability):
    """Reachability set by the host (network monitor, UI toggle, tests)."""

    def __init__(self, offline: bool = False) -> None:
        self._offline = offline
        self._listeners: list[ReachabilityListener] = []

    @property
    def offline(self) -> bool:
        return self._offline

    def set_offline(self, offline: bool) -> None:
        """Change the state and notify listeners if it differs."""
        if offline == self._offline:
            return
        self._offline = offline
        logger.info("Network is now %s", "offline" if offline else "online")
        for listener in list(self._listeners):
            listener(offline)

    def subscribe(self, listener: ReachabilityListener) -> Callable[[], None]:
        """Register a change listener; returns a function removing it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
