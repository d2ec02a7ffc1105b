from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from typing import (
    TYPE_CHECKING,
    Any,
    Protocol,
    TypeVar,
    overload,
    runtime_checkable,
)

from ._boxed import BoxedValue
from ._errors import ConfigurationError
from ._names import component_name
from ._params import ParamMap
from ._registry import ClassRecipe, ComponentRegistry, FactoryRecipe
from ._signature import SignatureInspector, describe_target


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable

    T = TypeVar("T")

    Name = type[T] | str
    Params = ParamMap | Mapping[Any, Any] | list[Any] | tuple[Any, ...] | None


@runtime_checkable
class Provider(Protocol):
    """A bundle of registrations, loaded with ``Container.add()``."""

    def register(self, container: Container) -> None: ...


class Container:
    """Dependency injection container.

    - register classes, factories, aliases or pre-built values by name
    - every name is a singleton: built on first ``get()`` and cached
    - parameters are resolved by override, type, name, then default
    - ``configure()`` hooks run right after a component is built
    - ``ref()`` defers a lookup until the enclosing parameters are used.
    """

    def __init__(self, inspector: SignatureInspector | None = None) -> None:
        self._registry = ComponentRegistry(inspector)
        self._requirements: dict[str, str] = {}

        # factories may depend on the container itself
        self.set(Container, self)
        if type(self) is not Container:
            self.set(type(self), self)

    @property
    def inspector(self) -> SignatureInspector:
        return self._registry.inspector

    @overload
    def register(self, name: type[T], recipe: Params = ..., params: None = ...) -> None: ...

    @overload
    def register(self, name: Name[T], recipe: type | Callable[..., Any], params: Params = ...) -> None: ...

    def register(self, name: Name[T], recipe: Any = None, params: Params = None) -> None:
        """Register a class or factory under a name.

        Example:
          container.register(UserRepository)
          container.register(UserRepository, {"table": "users"})
          container.register("db", Database, ["sqlite://"])
          container.register("cache", lambda cache_path: FileCache(cache_path))

        Registering an existing name replaces its recipe; the next ``get()`` builds
        a new instance. Configuration functions already added for the name are kept.
        """
        if isinstance(recipe, (ParamMap, Mapping, list, tuple)):
            if params is not None:
                msg = "Pass parameters either as the recipe argument or as `params`, not both."
                raise ConfigurationError(msg)
            recipe, params = None, recipe

        if recipe is None:
            if not inspect.isclass(name):
                msg = f"Cannot register {name!r} without a class or factory."
                raise ConfigurationError(msg)
            recipe = name

        if not callable(recipe):
            msg = f"Recipe for {name!r} must be a class or a callable, got {type(recipe).__name__}"
            raise ConfigurationError(msg)

        params = ParamMap.of(params)
        if inspect.isclass(recipe):
            self._registry.register(name, ClassRecipe(recipe, params))
        else:
            self._registry.register(name, FactoryRecipe(recipe, params))

    def alias(self, name: Name[T], target: Name[Any]) -> None:
        """Make ``name`` forward to whatever ``target`` currently resolves to."""
        self._registry.alias(name, target)

    def set(self, name: Name[T], value: object) -> None:
        """Register a pre-built value."""
        self._registry.set(name, value)

    def configure(
        self,
        name: Name[T] | Callable[..., Any],
        fn: Callable[..., Any] | None = None,
        params: Params = None,
    ) -> None:
        """Add a function to run on a component right after it is built.

        The function receives the component as its first argument; other
        parameters are resolved like any other. A non-None return value replaces
        the component. ``configure(fn)`` infers the component from the type hint
        (or the name) of the first parameter.
        """
        if fn is None:
            if inspect.isclass(name) or not callable(name):
                msg = f"Missing configuration function for {name!r}"
                raise ConfigurationError(msg)
            name, fn = None, name

        self._registry.configure(name, fn, ParamMap.of(params))

    @overload
    def get(self, name: type[T]) -> T: ...

    @overload
    def get(self, name: str) -> Any: ...

    def get(self, name: Name[T]) -> object:
        return self._registry.resolve(name)

    def has(self, name: Name[T]) -> bool:
        return self._registry.has(name)

    def is_active(self, name: Name[T]) -> bool:
        """True if the component has been built, without building it."""
        return self._registry.is_active(name)

    def ref(self, name: Name[T]) -> BoxedValue:
        """Reference a component, resolved only when the enclosing parameters are used."""
        name = component_name(name)
        return BoxedValue(name, lambda: self.get(name))

    def create(self, cls: type[T], /, params: Params = None, **overrides: Any) -> T:
        """Build a fresh instance of ``cls``; it is neither cached nor registered."""
        if not inspect.isclass(cls):
            msg = f"create() expects a class, got {cls!r}"
            raise ConfigurationError(msg)

        return self._registry.invoke(cls, ParamMap.of(params, **overrides))

    def call(self, func: Callable[..., T], /, params: Params = None, **overrides: Any) -> T:
        """Call ``func`` with every parameter resolved from the container.

        ``params`` always holds the parameter map; to override a parameter that is
        itself named ``params``, put it inside the map.
        """
        if not callable(func):
            msg = f"call() expects a callable, got {func!r}"
            raise ConfigurationError(msg)

        return self._registry.invoke(func, ParamMap.of(params, **overrides))

    def add(self, provider: Provider) -> None:
        """Load the registrations bundled by a provider."""
        if not isinstance(provider, Provider):
            msg = f"{provider!r} is not a provider: it has no register(container) method"
            raise ConfigurationError(msg)

        logger.debug("Loading provider %s", describe_target(type(provider)))
        provider.register(self)

    def requires(self, name: Name[T], description: str = "") -> None:
        """Declare a component the application expects to be registered by someone."""
        self._requirements[component_name(name)] = description

    def validate(self) -> None:
        """Raise ConfigurationError listing every declared requirement that is not registered."""
        unmet = [
            f"{name} ({description})" if description else name
            for name, description in self._requirements.items()
            if not self.has(name)
        ]
        if unmet:
            msg = f"Unmet requirements: {', '.join(unmet)}"
            raise ConfigurationError(msg)
