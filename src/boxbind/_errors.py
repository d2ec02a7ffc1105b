from __future__ import annotations


class ContainerError(RuntimeError):
    """Base class for every error raised by the container."""


class ConfigurationError(ContainerError, ValueError):
    """Malformed registration: empty name, bad recipe, un-inferrable configure target."""


class NotFoundError(ContainerError, LookupError):
    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or f"No component registered under {name!r}")


class UnresolvedDependencyError(ContainerError):
    """A parameter could not be satisfied by override, type, name or default."""

    def __init__(self, parameter: str, declared_type: str | None, target: str) -> None:
        self.parameter = parameter
        self.declared_type = declared_type
        self.target = target
        msg = (
            f"Cannot satisfy parameter '{parameter}' for {target}. "
            f"No override/registration/default found (annotation: {declared_type or 'no-annotation'})."
        )
        super().__init__(msg)


class CyclicDependencyError(ContainerError):
    def __init__(self, path: list[str]) -> None:
        self.path = list(path)
        super().__init__(f"Cyclic dependency detected: {' -> '.join(self.path)}")
