from __future__ import annotations

import inspect
from typing import Any

from ._errors import ConfigurationError


def type_name(cls: type) -> str:
    """Component name of a class: ``module.qualname``, or bare ``qualname`` for builtins."""
    module = getattr(cls, "__module__", None)
    if not module or module == "builtins":
        return cls.__qualname__
    return f"{module}.{cls.__qualname__}"


def component_name(key: Any) -> str:
    """Normalise a registration key (string or class) to a component name."""
    if inspect.isclass(key):
        return type_name(key)

    if not isinstance(key, str):
        msg = f"Component names must be strings or classes, got {key!r}"
        raise ConfigurationError(msg)

    if not key.strip():
        msg = "Component name must be a non-empty string"
        raise ConfigurationError(msg)

    return key
