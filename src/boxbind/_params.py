from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ._errors import ConfigurationError


MISSING = object()


@dataclass(frozen=True)
class ParamMap:
    """Explicit arguments for a callable: positional values plus named values.

    Positional values match parameters by index, named values by parameter name.
    Either may hold a :class:`~boxbind.BoxedValue`, unboxed when the map is consumed.
    """

    args: tuple[Any, ...] = ()
    kwargs: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def of(cls, value: Any = None, **overrides: Any) -> ParamMap:
        """Build a map from ``None``, a dict, a list/tuple or another ``ParamMap``.

        Integer dict keys are positional indexes, string keys are parameter names.
        ``overrides`` are merged into the named part and win over ``value``.
        """
        if value is None:
            params = cls()
        elif isinstance(value, ParamMap):
            params = value
        elif isinstance(value, Mapping):
            params = cls._from_mapping(value)
        elif isinstance(value, (list, tuple)):
            params = cls(args=tuple(value))
        else:
            msg = f"Parameter map must be a dict, list, tuple or ParamMap, got {type(value).__name__}"
            raise ConfigurationError(msg)

        if overrides:
            params = params.with_named(**overrides)

        return params

    @classmethod
    def _from_mapping(cls, value: Mapping[Any, Any]) -> ParamMap:
        positional: dict[int, Any] = {}
        named: dict[str, Any] = {}

        for key, item in value.items():
            if isinstance(key, bool):
                msg = f"Invalid parameter map key: {key!r}"
                raise ConfigurationError(msg)
            if isinstance(key, int):
                if key < 0:
                    msg = f"Positional parameter index must not be negative: {key}"
                    raise ConfigurationError(msg)
                positional[key] = item
            elif isinstance(key, str) and key:
                named[key] = item
            else:
                msg = f"Invalid parameter map key: {key!r}"
                raise ConfigurationError(msg)

        # gaps in sparse indexes stay MISSING and fall through to normal resolution
        size = max(positional) + 1 if positional else 0
        args = tuple(positional.get(index, MISSING) for index in range(size))

        return cls(args=args, kwargs=named)

    def with_named(self, **named: Any) -> ParamMap:
        return ParamMap(args=self.args, kwargs={**self.kwargs, **named})

    def positional(self, index: int) -> Any:
        """Positional value at ``index``, or ``MISSING`` when there is none."""
        if index < len(self.args):
            return self.args[index]
        return MISSING

    def named(self, name: str) -> Any:
        return self.kwargs.get(name, MISSING)

    def __bool__(self) -> bool:
        return bool(self.args or self.kwargs)


