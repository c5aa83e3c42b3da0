from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from importlib.resources import files as resource_files
from typing import Any, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

ENV_ERROR_SEPARATOR = "EMITTER_ERROR_SEPARATOR"
ENV_LOG_LISTENER_FAILURES = "EMITTER_LOG_LISTENER_FAILURES"


def _as_bool(value: Any) -> bool:
    """Interpret common truthy/falsey values into a bool.

    Accepts: True/False, 1/0, "true"/"false", "yes"/"no", "on"/"off" (case-insensitive).
    Other non-empty strings evaluate to True.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        v = value.strip().lower()
        if v in {"1", "true", "yes", "y", "on"}:
            return True
        if v in {"0", "false", "no", "n", "off"}:
            return False
        return bool(v)
    return bool(value)


@dataclass(frozen=True)
class EmitterConfig:
    """Runtime options for an Emitter.

    - error_separator: joins listener failure messages in AggregateInvocationError.
    - log_listener_failures: log each listener failure with its traceback at ERROR level.
      When False, failures are only logged at DEBUG before being aggregated.
    """

    error_separator: str = " | "
    log_listener_failures: bool = True

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "EmitterConfig":
        """Build a config from a parsed mapping. Missing fields fallback to defaults."""
        cfg = cls()
        if "error_separator" in raw:
            cfg = replace(cfg, error_separator=str(raw["error_separator"]))
        if "log_listener_failures" in raw:
            cfg = replace(cfg, log_listener_failures=_as_bool(raw["log_listener_failures"]))
        return cfg

    def with_env_overrides(self, env: Optional[Mapping[str, str]] = None) -> "EmitterConfig":
        env = os.environ if env is None else env
        cfg = self
        if ENV_ERROR_SEPARATOR in env:
            cfg = replace(cfg, error_separator=env[ENV_ERROR_SEPARATOR])
        if ENV_LOG_LISTENER_FAILURES in env:
            cfg = replace(cfg, log_listener_failures=_as_bool(env[ENV_LOG_LISTENER_FAILURES]))
        return cfg


def load_emitter_config(path: Optional[str] = None) -> EmitterConfig:
    """Load emitter configuration from YAML, then apply environment overrides.

    If path is None, loads the embedded default resource at
    emitter/config/defaults.yaml.
    """
    if path is None:
        data = resource_files("emitter.config").joinpath("defaults.yaml").read_text(encoding="utf-8")
        logger.debug("Loaded embedded emitter config resource")
    else:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            data = f.read()
        logger.debug("Loaded emitter config from path: %s", path)

    raw = yaml.safe_load(data) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Emitter config must be a mapping, got {type(raw).__name__}")
    cfg = EmitterConfig.from_mapping(raw).with_env_overrides()
    logger.info(
        "Emitter config: error_separator=%r | log_listener_failures=%s",
        cfg.error_separator,
        cfg.log_listener_failures,
    )
    return cfg
