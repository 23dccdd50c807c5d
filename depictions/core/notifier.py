"""Change notification for addresses whose data may have changed."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

Observer = Callable[[str], None]


class ChangeNotifier(Protocol):
    """Receives a signal after data reachable through an address changed."""

    def notify(self, address: str) -> None:
        """Signal that ``address`` may have changed. Never raises."""
        ...


@dataclass(frozen=True)
class _Registration:
    address: str
    callback: Observer
    notify_for_descendants: bool


def _is_descendant(address: str, ancestor: str) -> bool:
    return address.startswith(ancestor + "/")


class ObserverRegistry:
    """In-process notifier that fans changes out to registered observers.

    An observer on address ``O`` hears about a change to ``C`` when ``O == C``,
    when ``O`` lies under ``C``, or when ``C`` lies under ``O`` and the observer
    asked for descendants.
    """

    def __init__(self) -> None:
        self._registrations: list[_Registration] = []
        self._lock = threading.Lock()

    def register(
        self, address: str, callback: Observer, notify_for_descendants: bool = False
    ) -> Callable[[], None]:
        """Register ``callback`` for ``address``. Returns a function that unregisters it."""
        registration = _Registration(address, callback, notify_for_descendants)
        with self._lock:
            self._registrations.append(registration)

        def unregister() -> None:
            with self._lock:
                if registration in self._registrations:
                    self._registrations.remove(registration)

        return unregister

    def notify(self, address: str) -> None:
        with self._lock:
            registrations = list(self._registrations)

        targets = [r for r in registrations if self._wants(r, address)]
        logger.debug("Change at %s, notifying %d observer(s)", address, len(targets))
        for registration in targets:
            try:
                registration.callback(address)
            except Exception:
                logger.exception("Observer for %s failed on change at %s", registration.address, address)

    @staticmethod
    def _wants(registration: _Registration, changed: str) -> bool:
        # Trailing slashes name the same resource.
        observed = registration.address.rstrip("/")
        changed = changed.rstrip("/")
        if observed == changed:
            return True
        if _is_descendant(observed, changed):
            return True
        return registration.notify_for_descendants and _is_descendant(changed, observed)

    def __len__(self) -> int:
        return len(self._registrations)
