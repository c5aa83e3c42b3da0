"""
Emitter package root.

A small synchronous publish/subscribe primitive: register listeners under
event names, then emit a name to invoke them with arbitrary arguments.
"""

from .config import EmitterConfig, load_emitter_config
from .exceptions import AggregateInvocationError, EmitterError
from .registry import Emitter, ListenerRecord

__version__ = "0.1.0"

__all__ = [
    "AggregateInvocationError",
    "Emitter",
    "EmitterConfig",
    "EmitterError",
    "ListenerRecord",
    "load_emitter_config",
]
