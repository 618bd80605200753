"""Environment parsing helpers shared by the configuration objects."""

import os
from typing import Mapping, Optional

from glossia.core import ConfigError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def env_str(name: str, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return a stripped value, or None when unset or blank."""
    env = os.environ if environ is None else environ
    value = env.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def env_int(name: str, environ: Optional[Mapping[str, str]] = None) -> Optional[int]:
    value = env_str(name, environ)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got '{value}'") from e


def env_float(name: str, environ: Optional[Mapping[str, str]] = None) -> Optional[float]:
    value = env_str(name, environ)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got '{value}'") from e


def env_bool(name: str, default: bool, environ: Optional[Mapping[str, str]] = None) -> bool:
    value = env_str(name, environ)
    if value is None:
        return default
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{name} must be a boolean, got '{value}'")
