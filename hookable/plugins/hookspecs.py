"""Hook implementation markers.

``@hookimpl`` tags a function or method with the hook it should be attached
to; :func:`collect_hookimpls` finds the tagged attributes of an object so a
plugin (or a plain module) can be attached to a registry in one go.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, ParamSpec, TypeVar

P = ParamSpec("P")
R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class HookImplOptions:
    """Options attached to a hook implementation."""

    hook_name: str
    priority: int | None = None
    accepted_args: int | None = None


@dataclass(frozen=True, slots=True)
class HookImpl:
    """A marked callback, bound and ready for ``Hookable.add``."""

    hook_name: str
    callback: Callable[..., Any]
    priority: int | None = None
    accepted_args: int | None = None


def hookimpl(
    func: Callable[P, R] | str | None = None,
    *,
    priority: int | None = None,
    accepted_args: int | None = None,
) -> Any:
    """Mark a function as the implementation of a hook.

    Usable bare (``@hookimpl``, the hook name is the function name), with a
    hook name (``@hookimpl("the_content")``) or with keyword options only.

    Args:
        func: Function to decorate, or the hook name.
        priority: Registration priority; ``None`` uses the registry default.
        accepted_args: Positional arguments to pass; ``None`` uses the
            registry default.

    Returns:
        The decorated function, or a decorator.
    """
    hook_name = func if isinstance(func, str) else None

    def decorator(target: Callable[P, R]) -> Callable[P, R]:
        setattr(target, "__hookimpl__", True)
        setattr(
            target,
            "__hookimpl_opts__",
            HookImplOptions(
                hook_name=hook_name or target.__name__,
                priority=priority,
                accepted_args=accepted_args,
            ),
        )
        return target

    if func is None or hook_name is not None:
        return decorator
    return decorator(func)


def get_hookimpl_opts(func: Any) -> HookImplOptions | None:
    """Return the marker options of ``func``, unwrapping static/class methods."""
    for candidate in (func, getattr(func, "__func__", None)):
        if getattr(candidate, "__hookimpl__", False):
            return getattr(candidate, "__hookimpl_opts__", None)
    return None


def collect_hookimpls(obj: Any) -> Iterator[HookImpl]:
    """Yield every ``@hookimpl``-marked attribute of ``obj``, sorted by name.

    Attributes are inspected statically so properties are never evaluated.
    """
    for attr_name in dir(obj):
        opts = get_hookimpl_opts(inspect.getattr_static(obj, attr_name, None))
        if opts is None:
            continue
        yield HookImpl(
            hook_name=opts.hook_name,
            callback=getattr(obj, attr_name),
            priority=opts.priority,
            accepted_args=opts.accepted_args,
        )
