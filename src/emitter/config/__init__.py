from .loader import EmitterConfig, load_emitter_config

__all__ = [
    "EmitterConfig",
    "load_emitter_config",
]
