"""Environment variable readers used by the config factories."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import ConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence


def optional_env_var(name: str) -> str | None:
    """Return the stripped value of ``name``. Blank values count as unset."""

    raw = os.getenv(name)
    if raw is None:
        return None
    return raw.strip() or None


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Read every variable in ``names``, reporting all absent ones in a single error."""

    found = {name: optional_env_var(name) for name in names}
    absent = sorted(name for name, value in found.items() if value is None)
    if absent:
        raise MissingConfigurationError(f"Missing configuration for: {', '.join(absent)}")
    return {name: value for name, value in found.items() if value is not None}


def optional_float_env_var(name: str) -> float | None:
    value = optional_env_var(name)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from exc
