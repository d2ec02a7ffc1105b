from __future__ import annotations

import inspect
import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ._errors import ConfigurationError, CyclicDependencyError, NotFoundError
from ._names import component_name
from ._params import ParamMap
from ._resolver import Invoker
from ._signature import SignatureInspector, describe_target


if TYPE_CHECKING:
    from collections.abc import Callable

    from ._signature import ParameterDescriptor


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassRecipe:
    cls: type
    params: ParamMap = field(default_factory=ParamMap)


@dataclass(frozen=True)
class FactoryRecipe:
    func: Callable[..., Any]
    params: ParamMap = field(default_factory=ParamMap)


@dataclass(frozen=True)
class AliasRecipe:
    target: str


@dataclass(frozen=True)
class ValueRecipe:
    value: Any


Recipe = ClassRecipe | FactoryRecipe | AliasRecipe | ValueRecipe


@dataclass(frozen=True)
class Configurator:
    name: str
    func: Callable[..., Any]
    params: ParamMap = field(default_factory=ParamMap)


class ComponentRegistry:
    """Recipes, activated singletons and configuration chains of one container.

    - recipes are lazy: nothing is built until ``resolve()``
    - every name resolves to one cached instance until its recipe is replaced
    - aliases always forward to their current target
    - configurators run once, right after a component is built.
    """

    def __init__(self, inspector: SignatureInspector | None = None) -> None:
        self.inspector = inspector or SignatureInspector()
        self._invoker = Invoker(self, self.inspector)
        self._recipes: dict[str, Recipe] = {}
        self._values: dict[str, object] = {}
        self._configurators: list[Configurator] = []
        self._resolving: list[str] = []
        self._lock = threading.RLock()

    def register(self, name: str, recipe: Recipe) -> None:
        name = component_name(name)

        with self._lock:
            self._recipes[name] = recipe
            self._values.pop(name, None)

        logger.debug("Registered %s as %s", name, type(recipe).__name__)

    def alias(self, name: str, target: str) -> None:
        self.register(name, AliasRecipe(component_name(target)))

    def set(self, name: str, value: object) -> None:
        self.register(name, ValueRecipe(value))

    def configure(
        self,
        name: str | None,
        func: Callable[..., Any],
        params: ParamMap | None = None,
    ) -> None:
        """Append a configuration function to the chain of ``name``.

        Without a name, the component is inferred from the function's first
        parameter: its declared type if it has one, else its parameter name.
        """
        if not callable(func):
            msg = f"Configuration function must be callable, got {func!r}"
            raise ConfigurationError(msg)

        descriptors = self.inspector.describe(func)
        if not descriptors or descriptors[0].kind is inspect.Parameter.VAR_KEYWORD:
            msg = f"Configuration function {describe_target(func)} must accept the component as its first parameter"
            raise ConfigurationError(msg)

        if name is None:
            first = descriptors[0]
            if first.is_variadic:
                msg = f"Cannot infer the component configured by {describe_target(func)}"
                raise ConfigurationError(msg)
            name = first.declared_type or first.name
        else:
            name = component_name(name)

        with self._lock:
            if self.is_active(name):
                msg = f"Cannot configure {name}: it is already active"
                raise ConfigurationError(msg)
            self._configurators.append(Configurator(name, func, params or ParamMap()))

        logger.debug("Added configurator %s for %s", describe_target(func), name)

    def has(self, name: str) -> bool:
        name = component_name(name)

        with self._lock:
            return self._canonical(name) is not None

    def is_active(self, name: str) -> bool:
        name = component_name(name)

        with self._lock:
            canonical = self._canonical(name)
            return canonical is not None and canonical in self._values

    def _canonical(self, name: str) -> str | None:
        """Follow aliases to the name that owns a concrete recipe; None if missing or looping."""
        seen = set()
        while name not in seen:
            seen.add(name)
            recipe = self._recipes.get(name)
            if recipe is None:
                return None
            if not isinstance(recipe, AliasRecipe):
                return name
            name = recipe.target
        return None

    def resolve(self, name: str) -> object:
        name = component_name(name)

        with self._lock:
            return self._resolve(name)

    def _resolve(self, name: str) -> object:
        if name in self._values:
            return self._values[name]

        recipe = self._recipes.get(name)
        if recipe is None:
            raise NotFoundError(name, self._not_found_message(name))

        if name in self._resolving:
            path = [*self._resolving[self._resolving.index(name) :], name]
            raise CyclicDependencyError(path)

        self._resolving.append(name)
        try:
            if isinstance(recipe, AliasRecipe):
                return self._resolve(recipe.target)

            value = self._build(recipe)
            value = self._apply_configurators(name, value)
        finally:
            self._resolving.pop()

        self._values[name] = value
        logger.debug("Activated %s", name)
        return value

    def _not_found_message(self, name: str) -> str:
        if self._resolving:
            requester = self._resolving[-1]
            recipe = self._recipes.get(requester)
            if isinstance(recipe, AliasRecipe):
                return f"No component registered under {name!r} (alias target of {requester!r})"
            return f"No component registered under {name!r} (required by {requester!r})"
        return f"No component registered under {name!r}"

    def _build(self, recipe: Recipe) -> object:
        if isinstance(recipe, ValueRecipe):
            return recipe.value
        if isinstance(recipe, ClassRecipe):
            return self._invoker.invoke(recipe.cls, recipe.params)
        return self._invoker.invoke(recipe.func, recipe.params)

    def _apply_configurators(self, name: str, value: object) -> object:
        chain = [c for c in self._configurators if self._canonical(c.name) == name]

        for configurator in chain:
            descriptors = self.inspector.describe(configurator.func)
            params = self._subject_params(descriptors[0], configurator.params, value)

            args, kwargs = self._invoker.build_arguments(configurator.func, descriptors, params)
            result = configurator.func(*args, **kwargs)
            logger.debug("Applied configurator %s to %s", describe_target(configurator.func), name)

            if result is not None:
                value = result

        return value

    def _subject_params(self, first: ParameterDescriptor, params: ParamMap, subject: object) -> ParamMap:
        """The configurator's own parameters with the component bound to its first parameter."""
        kwargs = {k: v for k, v in params.kwargs.items() if k != first.name}
        if first.is_positional or first.kind is inspect.Parameter.VAR_POSITIONAL:
            return ParamMap((subject, *params.args), kwargs)
        return ParamMap(params.args, {**kwargs, first.name: subject})

    def invoke(self, target: Callable[..., Any], params: ParamMap | None = None) -> Any:
        with self._lock:
            return self._invoker.invoke(target, params)
