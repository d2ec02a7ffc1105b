from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class BoxedValue:
    """Deferred handle to a named component.

    Created by ``Container.ref()``. Nothing is resolved until ``unbox()`` is
    called, which happens when the parameter map holding the box is consumed.
    Each call re-enters resolution; the container's singleton cache keeps the
    underlying value stable.
    """

    name: str
    resolver: Callable[[], object] = field(repr=False, compare=False)

    def unbox(self) -> object:
        return self.resolver()


def unbox(value: object) -> object:
    if isinstance(value, BoxedValue):
        return value.unbox()
    return value
