"""Singleton dependency injection container.

Components are registered by name (a string or a class) as classes, factories,
aliases or pre-built values, and built lazily on first use. Constructor and
function parameters are resolved by explicit override, then by type, then by
name, then by default value.

Exports:
- `Container`: Registration, resolution, configuration and invocation facade.
- `BoxedValue`: Deferred component reference returned by `Container.ref()`.
- `ParamMap`: Positional and named parameter overrides.
- `ParameterDescriptor` / `SignatureInspector`: Parameter metadata of callables,
  with `SignatureInspector.declare()` for callables that can't be introspected.
- `Provider`: Protocol for bundles of registrations loaded with `Container.add()`.
- Errors: `ContainerError` and its subclasses.
"""

from ._boxed import BoxedValue
from ._container import Container, Provider
from ._errors import (
    ConfigurationError,
    ContainerError,
    CyclicDependencyError,
    NotFoundError,
    UnresolvedDependencyError,
)
from ._params import ParamMap
from ._registry import ComponentRegistry
from ._signature import ParameterDescriptor, SignatureInspector


__all__ = [
    "BoxedValue",
    "ComponentRegistry",
    "ConfigurationError",
    "Container",
    "ContainerError",
    "CyclicDependencyError",
    "NotFoundError",
    "ParamMap",
    "ParameterDescriptor",
    "Provider",
    "SignatureInspector",
    "UnresolvedDependencyError",
]
