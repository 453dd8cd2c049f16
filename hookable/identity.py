"""Callback identity resolution.

Every registration is keyed by an identity string derived from the callback,
so registering the same callback twice overwrites instead of duplicating and
``remove``/``exists`` can find it again. Callbacks are first classified into
one of four shapes, each with its own identity rule:

``NamedFunction``
    Module-level functions, builtins, classes used as factories and
    ``staticmethod`` objects looked up on a class. Identity is the dotted
    ``module.qualname``.

``BoundMethod``
    ``obj.method``, an ``(obj, "method")`` pair, or a callable instance.
    Identity is the hex ``id()`` of the instance followed by the method name
    (empty for callable instances). The registry keeps the instance alive for
    as long as the registration exists, so the address cannot be reused by
    another object while it is still a key.

``ClassMethod``
    A method bound to a class, or a ``(Cls, "method")`` pair. Identity is
    ``"Qualname::method"``.

``Anonymous``
    Lambdas, closures, ``functools.partial`` objects and functions carrying
    ``__wrapped__`` (decorated with ``functools.wraps``). They have no stable
    name, so the resolver numbers them in order of first sight and remembers
    the number in a weak side-table keyed by the callable object. Only the
    very same object resolves to the same identity again.
"""

from __future__ import annotations

import functools
import inspect
import itertools
import weakref
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True, slots=True)
class NamedFunction:
    func: Callable[..., Any]

    def identity(self) -> str:
        return _qualified_name(self.func)

    def target(self) -> Callable[..., Any]:
        return self.func


@dataclass(frozen=True, slots=True)
class BoundMethod:
    instance: Any
    method: str
    func: Callable[..., Any]

    def identity(self) -> str:
        return f"{id(self.instance):x}{self.method}"

    def target(self) -> Callable[..., Any]:
        return self.func


@dataclass(frozen=True, slots=True)
class ClassMethod:
    owner: type
    method: str
    func: Callable[..., Any]

    def identity(self) -> str:
        return f"{self.owner.__qualname__}::{self.method}"

    def target(self) -> Callable[..., Any]:
        return self.func


@dataclass(frozen=True, slots=True)
class Anonymous:
    func: Callable[..., Any]

    def target(self) -> Callable[..., Any]:
        return self.func


CallbackShape = Union[NamedFunction, BoundMethod, ClassMethod, Anonymous]


def classify(callback: Any) -> CallbackShape | None:
    """Return the shape of ``callback``, or ``None`` if it is not usable."""
    if isinstance(callback, tuple):
        return _classify_pair(callback)
    if not callable(callback):
        return None

    if isinstance(callback, type):
        return NamedFunction(callback)
    if isinstance(callback, functools.partial):
        return Anonymous(callback)
    if inspect.ismethod(callback):
        return _bound(callback.__self__, callback.__func__.__name__, callback)
    if inspect.isbuiltin(callback):
        owner = callback.__self__
        if owner is None or inspect.ismodule(owner):
            return NamedFunction(callback)
        return _bound(owner, callback.__name__, callback)
    if inspect.isfunction(callback):
        # functools.wraps copies the qualname of the wrapped function
        if hasattr(callback, "__wrapped__"):
            return Anonymous(callback)
        if "<lambda>" in callback.__qualname__ or "<locals>" in callback.__qualname__:
            return Anonymous(callback)
        return NamedFunction(callback)
    if inspect.ismethoddescriptor(callback):
        return NamedFunction(callback)

    return BoundMethod(callback, "", callback)


def _classify_pair(pair: tuple[Any, ...]) -> CallbackShape | None:
    if len(pair) != 2 or not isinstance(pair[1], str) or not pair[1]:
        return None
    owner, method = pair
    if isinstance(owner, str):
        return None
    func = getattr(owner, method, None)
    if not callable(func):
        return None
    return _bound(owner, method, func)


def _bound(owner: Any, method: str, func: Callable[..., Any]) -> CallbackShape:
    if isinstance(owner, type):
        return ClassMethod(owner, method, func)
    return BoundMethod(owner, method, func)


def _qualified_name(func: Any) -> str:
    qualname = getattr(func, "__qualname__", None) or getattr(func, "__name__", repr(func))
    module = getattr(func, "__module__", None)
    if module is None:
        module = getattr(getattr(func, "__objclass__", None), "__module__", None)
    return f"{module}.{qualname}" if module else qualname


class IdentityResolver:
    """Derive registration keys for callbacks.

    One resolver belongs to one registry; anonymous numbering is scoped to it.
    """

    def __init__(self) -> None:
        self._anonymous: weakref.WeakKeyDictionary[Any, int] = weakref.WeakKeyDictionary()
        self._counter = itertools.count()

    def resolve(self, callback: Any, *, probe: bool = False) -> str | None:
        """Return the identity of ``callback``.

        Args:
            callback: Any callback shape accepted by :func:`classify`.
            probe: Read-only lookup. Anonymous callbacks seen for the first
                time resolve to ``None`` instead of being assigned a number.

        Returns:
            The identity string, or ``None`` when the callback cannot be
            resolved.
        """
        shape = classify(callback)
        if shape is None:
            return None
        return self.identify(shape, probe=probe)

    def identify(self, shape: CallbackShape, *, probe: bool = False) -> str | None:
        if not isinstance(shape, Anonymous):
            return shape.identity()

        number = self._anonymous.get(shape.func)
        if number is None:
            if probe:
                return None
            number = next(self._counter)
            self._anonymous[shape.func] = number
        return f"{{anonymous}}#{number}"
