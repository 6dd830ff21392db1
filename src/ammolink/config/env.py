"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def require_env_vars(
    names: Sequence[str],
    *,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""

    source = os.environ if environ is None else environ
    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = source.get(name)
        if value is None or not value.strip():
            missing.append(name)
            continue
        values[name] = value

    if missing:
        raise MissingConfigurationError(missing)

    return values


def env_flag(name: str, *, default: bool, environ: Mapping[str, str] | None = None) -> bool:
    """Parse a boolean switch such as ``AMMOLINK_EXCLUDE_BASE_MASTER=yes``."""

    source = os.environ if environ is None else environ
    raw = source.get(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: {raw!r}", setting=name)


def env_int(name: str, *, default: int, environ: Mapping[str, str] | None = None) -> int:
    source = os.environ if environ is None else environ
    raw = source.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"Invalid integer for {name}: {raw!r}", setting=name) from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}", setting=name)
    return value


def env_list(name: str, *, environ: Mapping[str, str] | None = None) -> tuple[str, ...]:
    """Split a comma separated variable, dropping blanks."""

    source = os.environ if environ is None else environ
    raw = source.get(name)
    if raw is None:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())
