from __future__ import annotations

import logging
import types
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Dict, List, Optional

from .config import EmitterConfig
from .exceptions import AggregateInvocationError

logger = logging.getLogger(__name__)


def _describe(callback: Any) -> str:
    return getattr(callback, "__qualname__", None) or getattr(callback, "__name__", str(callback))


def _same_callback(registered: Any, callback: Any) -> bool:
    # Each attribute access builds a new bound method; those compare equal
    # when they share __self__ and __func__.
    if registered is callback:
        return True
    return isinstance(callback, types.MethodType) and registered == callback


@dataclass(frozen=True, eq=False)
class ListenerRecord:
    """A single registration of a callback under an event name.

    Records compare by identity, so registering the same callback twice
    yields two independent records.
    """

    callback: Callable[..., Any]
    once: bool = False


class Emitter:
    """Synchronous in-process event emitter.

    Listeners are registered under event names and invoked in registration
    order when the name is emitted. Listener failures do not stop an
    emission: every listener is attempted, then a single
    AggregateInvocationError reports all of them.

    Callbacks may call back into the emitter (emit, on, once, remove,
    remove_all) while an emission is in progress. The lock guards the
    mapping only and is never held while a listener runs.
    """

    def __init__(self, config: Optional[EmitterConfig] = None) -> None:
        self._config = config or EmitterConfig()
        self._listeners: Dict[str, List[ListenerRecord]] = {}
        self._lock = RLock()

    @property
    def config(self) -> EmitterConfig:
        return self._config

    # ------------------------ Registration ------------------------
    def register(self, event_name: str, callback: Callable[..., Any], once: bool = False) -> None:
        """Append a listener to the end of ``event_name``'s sequence.

        Args:
            event_name: Event name to listen for. Any string is accepted.
            callback: Callable invoked with the arguments passed to ``emit``.
            once: Remove the listener the first time it is invoked.
        """
        record = ListenerRecord(callback=callback, once=once)
        with self._lock:
            self._listeners.setdefault(event_name, []).append(record)
        logger.debug(
            "Registered %s listener %s for event '%s'",
            "once" if once else "on",
            _describe(callback),
            event_name,
        )

    def on(self, event_name: str, callback: Callable[..., Any]) -> None:
        """Register a listener that fires on every emission."""
        self.register(event_name, callback, once=False)

    def once(self, event_name: str, callback: Callable[..., Any]) -> None:
        """Register a listener that fires on the next emission only."""
        self.register(event_name, callback, once=True)

    # ------------------------ Queries ------------------------
    def listeners(self, event_name: str) -> List[ListenerRecord]:
        """Return the live listener sequence for ``event_name``.

        The returned list is the registry's own storage, not a copy, and
        stays live once the name has been registered: removals empty it in
        place. A fresh empty list is returned for names never registered.
        """
        with self._lock:
            return self._listeners.get(event_name, [])

    def listener_count(self, event_name: str) -> int:
        return len(self.listeners(event_name))

    def event_names(self) -> List[str]:
        """Names that currently have at least one listener, in first-registration order."""
        with self._lock:
            return [name for name, records in self._listeners.items() if records]

    # ------------------------ Emission ------------------------
    def emit(self, event_name: str, *args: Any, **kwargs: Any) -> None:
        """Invoke every listener registered for ``event_name``.

        Listeners run against a snapshot taken at the start of the call. A
        once-listener is removed just before it runs, so it stays removed
        even if it raises, and is skipped if a nested emission already fired
        it.

        Raises:
            AggregateInvocationError: one or more listeners raised. Raised
                after all listeners have been attempted.
        """
        with self._lock:
            snapshot = list(self._listeners.get(event_name, ()))
        if not snapshot:
            logger.debug("Emitting '%s' with no listeners", event_name)
            return
        logger.debug("Emitting '%s' to %d listeners", event_name, len(snapshot))

        errors: List[Exception] = []
        for record in snapshot:
            if record.once and not self._discard(event_name, record):
                continue
            try:
                record.callback(*args, **kwargs)
            except Exception as exc:
                errors.append(exc)
                if self._config.log_listener_failures:
                    logger.exception("Error in listener %s for event '%s': %s", _describe(record.callback), event_name, exc)
                else:
                    logger.debug("Listener %s for event '%s' raised: %r", _describe(record.callback), event_name, exc)

        if errors:
            raise AggregateInvocationError(event_name, errors, self._config.error_separator) from errors[0]

    def _discard(self, event_name: str, record: ListenerRecord) -> bool:
        """Remove ``record`` from the live sequence. Returns False if it was already gone."""
        with self._lock:
            records = self._listeners.get(event_name)
            if not records:
                return False
            for index, candidate in enumerate(records):
                if candidate is record:
                    del records[index]
                    return True
            return False

    # ------------------------ Removal ------------------------
    def remove(self, event_name: str, callback: Callable[..., Any]) -> None:
        """Remove the first listener whose callback is ``callback``.

        Matching is by identity, except that bound methods match when they
        are bound to the same object and function. Only one record is
        removed per call even if the callback was registered several times.
        Silently ignores unknown names and callbacks.
        """
        with self._lock:
            for record in self._listeners.get(event_name, ()):
                if _same_callback(record.callback, callback):
                    self._discard(event_name, record)
                    logger.debug("Removed listener %s from event '%s'", _describe(callback), event_name)
                    return

    def remove_all_for(self, event_name: str) -> None:
        """Remove every listener registered for ``event_name``."""
        with self._lock:
            records = self._listeners.get(event_name, [])
            removed = len(records)
            records.clear()
        logger.debug("Removed %d listeners from event '%s'", removed, event_name)

    def remove_all_global(self) -> None:
        """Remove every listener for every event name."""
        with self._lock:
            for records in self._listeners.values():
                records.clear()
        logger.debug("Removed all listeners")

    def remove_all(self, event_name: Optional[str] = None) -> None:
        """Remove listeners for ``event_name``, or for all names when it is None."""
        if event_name is None:
            self.remove_all_global()
        else:
            self.remove_all_for(event_name)
