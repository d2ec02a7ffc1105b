from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any, Protocol

from ._boxed import unbox
from ._errors import UnresolvedDependencyError
from ._params import MISSING, ParamMap
from ._signature import describe_target


if TYPE_CHECKING:
    from collections.abc import Callable

    from ._signature import ParameterDescriptor, SignatureInspector


logger = logging.getLogger(__name__)


class Registry(Protocol):
    def has(self, name: str) -> bool: ...

    def resolve(self, name: str) -> object: ...


def resolve_parameter(
    param: ParameterDescriptor,
    index: int,
    params: ParamMap,
    registry: Registry,
    target: str,
) -> Any:
    """Resolve the value of a single parameter.

    Resolution precedence:
    1. explicit override (positional by index, then named)
    2. type-based registration
    3. name-based registration
    4. default
    5. error.
    """
    # 1) explicit override
    value = params.positional(index) if param.is_positional else MISSING
    if value is MISSING:
        value = params.named(param.name)
    if value is not MISSING:
        return unbox(value)

    # 2) type-based
    if param.declared_type is not None and registry.has(param.declared_type):
        return registry.resolve(param.declared_type)

    # 3) name-based
    if registry.has(param.name):
        return registry.resolve(param.name)

    # 4) default
    if param.has_default:
        return param.default

    # 5) error
    raise UnresolvedDependencyError(param.name, param.declared_type, target)


class Invoker:
    """Calls classes and functions with arguments resolved from a registry."""

    def __init__(self, registry: Registry, inspector: SignatureInspector) -> None:
        self._registry = registry
        self._inspector = inspector

    def invoke(self, target: Callable[..., Any], params: ParamMap | None = None) -> Any:
        params = params or ParamMap()
        descriptors = self._inspector.describe(target)

        args, kwargs = self.build_arguments(target, descriptors, params)
        return target(*args, **kwargs)

    def build_arguments(
        self,
        target: Callable[..., Any],
        descriptors: list[ParameterDescriptor],
        params: ParamMap,
    ) -> tuple[list[Any], dict[str, Any]]:
        target_name = describe_target(target)
        args: list[Any] = []
        kwargs: dict[str, Any] = {}

        declared = {p.name for p in descriptors if not p.is_variadic}
        positional_count = sum(1 for p in descriptors if p.is_positional)

        for index, p in enumerate(descriptors):
            if p.kind is inspect.Parameter.VAR_POSITIONAL:
                args.extend(unbox(v) for v in params.args[positional_count:] if v is not MISSING)
            elif p.kind is inspect.Parameter.VAR_KEYWORD:
                kwargs.update({k: unbox(v) for k, v in params.kwargs.items() if k not in declared})
            elif p.is_positional:
                args.append(resolve_parameter(p, index, params, self._registry, target_name))
            else:
                kwargs[p.name] = resolve_parameter(p, index, params, self._registry, target_name)

        self._log_unused(target_name, descriptors, params, declared, positional_count)

        return args, kwargs

    def _log_unused(
        self,
        target_name: str,
        descriptors: list[ParameterDescriptor],
        params: ParamMap,
        declared: set[str],
        positional_count: int,
    ) -> None:
        if not logger.isEnabledFor(logging.DEBUG):
            return

        kinds = {p.kind for p in descriptors}
        if inspect.Parameter.VAR_KEYWORD not in kinds:
            unused = sorted(set(params.kwargs) - declared)
            if unused:
                logger.debug("Ignoring named parameters %s for %s", unused, target_name)
        if inspect.Parameter.VAR_POSITIONAL not in kinds and len(params.args) > positional_count:
            logger.debug("Ignoring %d extra positional parameters for %s", len(params.args) - positional_count, target_name)
