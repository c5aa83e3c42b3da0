from __future__ import annotations

from typing import List, Sequence


class EmitterError(Exception):
    """Base exception for the emitter package."""


class AggregateInvocationError(EmitterError):
    """Raised by ``Emitter.emit`` when one or more listeners raised.

    Every listener for the emission has already been attempted (and fired
    once-listeners pruned) by the time this is raised.

    Attributes:
        event_name: Name of the event whose emission failed.
        errors: The exceptions caught from listeners, in invocation order.
        messages: ``str()`` of each caught exception.
    """

    def __init__(self, event_name: str, errors: Sequence[BaseException], separator: str = " | ") -> None:
        self.event_name = event_name
        self.errors: List[BaseException] = list(errors)
        self.messages: List[str] = [str(err) for err in self.errors]
        super().__init__(f"Event {event_name} threw the following errors: {separator.join(self.messages)}")
