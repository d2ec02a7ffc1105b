from __future__ import annotations

import inspect
import logging
import types
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union, get_args, get_origin, get_type_hints

from ._errors import ConfigurationError
from ._names import type_name


if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


logger = logging.getLogger(__name__)

POSITIONAL_KINDS = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
VARIADIC_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class ParameterDescriptor:
    """What the resolver needs to know about one parameter of a callable."""

    name: str
    declared_type: str | None = None
    has_default: bool = False
    default: Any = None
    kind: Any = inspect.Parameter.POSITIONAL_OR_KEYWORD

    @property
    def is_variadic(self) -> bool:
        return self.kind in VARIADIC_KINDS

    @property
    def is_positional(self) -> bool:
        return self.kind in POSITIONAL_KINDS


class SignatureInspector:
    """Describe the parameters of classes, functions and other callables.

    Classes are described by their constructor. Callables whose signature can't be
    introspected (some C builtins) may be described explicitly with ``declare()``.
    """

    def __init__(self) -> None:
        self._declared: dict[Any, tuple[ParameterDescriptor, ...]] = {}

    def declare(self, target: Callable[..., Any], descriptors: Iterable[ParameterDescriptor]) -> None:
        """Register explicit descriptors for ``target``, bypassing introspection."""
        self._declared[target] = tuple(descriptors)

    def describe(self, target: Callable[..., Any]) -> list[ParameterDescriptor]:
        try:
            declared = self._declared.get(target)
        except TypeError:  # unhashable callable instance
            declared = None
        if declared is not None:
            return list(declared)

        try:
            sig = inspect.signature(target)
        except (TypeError, ValueError) as e:
            if inspect.isclass(target):
                # e.g. builtin types without text signature: construct without arguments
                return []
            msg = f"Cannot inspect signature of {describe_target(target)}: {e}"
            raise ConfigurationError(msg) from e

        hints = _get_type_hints(target)

        return [
            ParameterDescriptor(
                name=name,
                declared_type=_declared_type(hints.get(name, p.annotation)),
                has_default=p.default is not inspect.Parameter.empty,
                default=None if p.default is inspect.Parameter.empty else p.default,
                kind=p.kind,
            )
            for name, p in sig.parameters.items()
        ]


def describe_target(target: Any) -> str:
    """Human readable name of a callable for error messages."""
    if inspect.isclass(target):
        return type_name(target)

    func = getattr(target, "__func__", target)
    qualname = getattr(func, "__qualname__", None)
    if qualname is None:
        return repr(target)
    module = getattr(func, "__module__", None)
    return f"{module}.{qualname}" if module else qualname


def _declared_type(annotation: Any) -> str | None:
    if annotation is inspect.Parameter.empty or annotation is None:
        return None
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        # Optional[X] / X | None resolves as X
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        return _declared_type(members[0]) if len(members) == 1 else None
    if origin is None and inspect.isclass(annotation):
        return type_name(annotation)
    if isinstance(annotation, str) and annotation:
        # unresolved forward reference, taken literally as a component name
        members = [part.strip() for part in annotation.split("|") if part.strip() != "None"]
        return members[0] if len(members) == 1 and members[0] else None
    return None


def _get_type_hints(target: Any) -> dict[str, Any]:
    hint_source = target
    if inspect.isclass(target):
        hint_source = inspect.getattr_static(target, "__init__", None)

    try:
        hints = get_type_hints(hint_source)
    except TypeError:
        hints = {}
    except NameError as exc:
        logger.warning("'%s' name error retrieving %s type hints", exc.name, describe_target(target))
        hints = {}

    hints.pop("return", None)
    return hints
