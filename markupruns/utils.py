"""Small general-purpose helpers shared across `markupruns`."""

from __future__ import annotations

import functools
from typing import Any, Callable, Generic, TypeVar, cast

_T = TypeVar("_T")


class lazyproperty(Generic[_T]):
    """Decorator like @property, but evaluated only on first access.

    The decorated method is called once, on first access, and its value is cached in the
    instance `__dict__` under the method's name. Later access returns the cached value without
    calling the method again.

    A lazyproperty is read-only. Assigning to it raises AttributeError. Because it writes the
    instance `__dict__` directly it also works on frozen dataclasses, which is how the result
    objects in this package use it.

    Usage::

        class Obj:

            @lazyproperty
            def fget(self):
                return "some result"
    """

    def __init__(self, fget: Callable[..., _T]) -> None:
        self._fget = fget
        self._name = fget.__name__
        functools.update_wrapper(self, fget)  # pyright: ignore

    def __get__(self, obj: Any, type: Any = None) -> _T:
        # -- accessed on the class, e.g. `Obj.fget`, hand back the descriptor itself --
        if obj is None:
            return self  # type: ignore

        value = obj.__dict__.get(self._name)
        if value is None:
            value = self._fget(obj)
            obj.__dict__[self._name] = value
        return cast(_T, value)

    def __set__(self, obj: Any, value: Any) -> None:
        """Raises unconditionally, a lazyproperty is read-only."""
        raise AttributeError("can't set attribute")
