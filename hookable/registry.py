"""
Hookable - named, priority-ordered callback registry.

Two dispatch modes share one registration table:

- ``apply`` (filter) threads a value through every callback of a hook and
  returns what the last one produced;
- ``call`` (action) notifies every callback for its side effects and only
  reports a status.

Lower priorities run first; callbacks with equal priority run in the order
they were added. Registrations live in
``hook name -> priority -> callback identity -> Registration``.

Usage:
    registry = Hookable()

    registry.add("title", str.strip)
    registry.add("title", lambda title: title + "!", priority=20)
    registry.apply("title", "  hello ")   # "hello!"

    registry.add("boot", connect_db)
    registry.call("boot", settings)       # CallStatus.SUCCEEDED

Each dispatch walks a snapshot taken when it starts: callbacks may add or
remove registrations for the hook being dispatched, and the change is
visible from the next dispatch on. Callbacks may dispatch other hooks (or
the same one) re-entrantly; nothing bounds the depth.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final

from .cache import OrderingCache
from .config import RegistryConfig
from .context import MutableContext
from .exceptions import InvalidCallableError, InvalidHookNameError, InvalidPriorityError
from .identity import BoundMethod, IdentityResolver, classify

logger = logging.getLogger(__name__)


class _Sentinel:
    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return self._name


ALL_PRIORITIES: Final = _Sentinel("ALL_PRIORITIES")
NOT_GIVEN: Final = _Sentinel("NOT_GIVEN")


class CallStatus(Enum):
    """Outcome of an action dispatch."""

    SUCCEEDED = "succeeded"
    NO_SUCH_HOOK = "no_such_hook"
    REJECTED = "rejected"

    def __bool__(self) -> bool:
        return self is CallStatus.SUCCEEDED


@dataclass(slots=True)
class Registration:
    """One callback attached to a hook.

    ``owner`` pins the instance an ``id()``-based identity was derived from.
    """

    callback: Callable[..., Any] | None
    accepted_args: int = 1
    owner: Any = field(default=None, repr=False)


def sanitize_hook_name(hook_name: Any) -> str | None:
    """Return the trimmed hook name, or ``None`` if it is not usable."""
    if isinstance(hook_name, str) and hook_name.strip():
        return hook_name.strip()
    return None


class Hookable:
    """Callback registry with filter and action dispatch.

    Instances are independent; a host that wants one shared registry creates
    it once and hands it to every participant.
    """

    def __init__(self, config: RegistryConfig | None = None) -> None:
        self.config = config or RegistryConfig()
        self._filters: dict[str, dict[int, dict[str, Registration]]] = {}
        self._ordering = OrderingCache()
        self._identities = IdentityResolver()
        self._current: list[str] = []
        self._actions: dict[str, int] = {}

    def __repr__(self) -> str:
        return f"<Hookable hooks={len(self._filters)} dispatching={self._current!r}>"

    @property
    def all_hook_name(self) -> str:
        return self.config.all_hook_name

    def sanitize(self, hook_name: Any) -> str | None:
        return sanitize_hook_name(hook_name)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add(
        self,
        hook_name: str,
        callback: Any,
        priority: int | None = None,
        accepted_args: int | None = None,
        append: bool = True,
    ) -> bool:
        """
        Attach ``callback`` to ``hook_name``.

        Re-adding a callback with the same identity at the same priority
        replaces its registration in place.

        Args:
            hook_name: Hook to attach to.
            callback: Function, bound method, ``(obj, "method")`` or
                ``(Cls, "method")`` pair, or any other callable.
            priority: Lower runs earlier. Defaults to ``config.default_priority``.
            accepted_args: How many positional arguments the callback gets.
                Defaults to ``config.default_accepted_args``.
            append: When false, do nothing if the callback is already attached
                to this hook at any priority.

        Returns:
            ``True`` if the registration was written, ``False`` otherwise.

        Raises:
            InvalidHookNameError: ``hook_name`` is empty or not a string.
            InvalidCallableError: ``callback`` has no resolvable identity.
            InvalidPriorityError: ``priority`` is not an integer.
        """
        name = self.sanitize(hook_name)
        if name is None:
            raise InvalidHookNameError(
                "Invalid hook name specified", context={"hook_name": hook_name}
            )
        resolved = self._priority(priority)
        if resolved is None:
            raise InvalidPriorityError(
                f"Invalid priority specified on hook name {name}",
                context={"hook_name": name, "priority": priority},
            )
        if not append and self.has(name, callback):
            return False

        shape = classify(callback)
        identity = self._identities.identify(shape) if shape is not None else None
        if shape is None or identity is None:
            raise InvalidCallableError(
                f"Invalid callable specified on hook name {name}",
                context={"hook_name": name, "callback": callback},
            )

        accepted = self.config.default_accepted_args if accepted_args is None else accepted_args
        self._filters.setdefault(name, {}).setdefault(resolved, {})[identity] = Registration(
            callback=shape.target(),
            accepted_args=int(accepted),
            owner=shape.instance if isinstance(shape, BoundMethod) else None,
        )
        self._ordering.invalidate(name)

        logger.debug("Added %s to hook %r at priority %s", identity, name, resolved)
        return True

    def append(
        self,
        hook_name: str,
        callback: Any,
        priority: int | None = None,
        accepted_args: int | None = None,
        create: bool = True,
    ) -> bool:
        """Add ``callback``, or only when it is not attached yet if ``create`` is false."""
        if create or not self.has(hook_name, callback):
            return self.add(hook_name, callback, priority, accepted_args, append=True)
        return False

    def replace(
        self,
        hook_name: str,
        old_callback: Any,
        new_callback: Any,
        priority: int | None = None,
        accepted_args: int | None = None,
        create: bool = True,
    ) -> bool:
        """
        Swap ``old_callback`` for ``new_callback`` on ``hook_name``.

        The old callback is removed from the default priority if it is there;
        a missing old callback is not an error. When the hook has no
        registrations at all, ``new_callback`` is only added if ``create``.

        Raises:
            InvalidHookNameError: ``hook_name`` is empty or not a string.
        """
        name = self.sanitize(hook_name)
        if name is None:
            raise InvalidHookNameError(
                "Invalid hook name specified", context={"hook_name": hook_name}
            )
        if self.has(name):
            self.remove(name, old_callback)
            return self.add(name, new_callback, priority, accepted_args, append=True)
        if create:
            return self.add(name, new_callback, priority, accepted_args, append=True)
        return False

    def remove(self, hook_name: str, callback: Any, priority: int | None = None) -> bool:
        """Detach ``callback`` from ``hook_name`` at ``priority``.

        ``None`` means the configured default priority.

        Returns:
            Whether a registration was deleted.
        """
        name = self.sanitize(hook_name)
        if name is None:
            return False
        identity = self._identities.resolve(callback, probe=True)
        priority = self._priority(priority)
        buckets = self._filters.get(name)
        if identity is None or buckets is None or identity not in buckets.get(priority, {}):
            return False

        del buckets[priority][identity]
        if not buckets[priority]:
            del buckets[priority]
        self._ordering.invalidate(name)

        logger.debug("Removed %s from hook %r at priority %s", identity, name, priority)
        return True

    def remove_all(self, hook_name: str, priority: Any = ALL_PRIORITIES) -> bool:
        """Detach every callback of ``hook_name``, or only those at ``priority``.

        ``None`` means the configured default priority, as in :meth:`remove`.
        Unknown hook names and non-integer priorities are a no-op; the result
        is always ``True``.
        """
        name = self.sanitize(hook_name)
        if name is None:
            return True
        if priority is not ALL_PRIORITIES:
            priority = self._priority(priority)
        buckets = self._filters.get(name)
        if buckets is not None:
            if priority is ALL_PRIORITIES:
                buckets.clear()
            elif priority is not None:
                buckets.pop(priority, None)
        self._ordering.invalidate(name)

        logger.debug("Removed all callbacks from hook %r (priority=%r)", name, priority)
        return True

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def apply(self, hook_name: str, value: Any, *args: Any) -> Any:
        """
        Filter ``value`` through every callback of ``hook_name``.

        Each callback receives ``(value, *args)`` cut to its ``accepted_args``
        and its return value becomes the next ``value``. Exceptions raised by
        callbacks propagate and abort the rest of the chain.

        Returns:
            The final value; ``value`` itself if the name is invalid or
            nothing is attached.
        """
        name = self.sanitize(hook_name)
        if name is None:
            return value

        self._call_all(name, value, *args)

        with self._dispatching(name):
            snapshot = self._snapshot(name)
            if not snapshot:
                return value
            logger.debug("Applying hook %r through %d callbacks", name, len(snapshot))

            for registration in snapshot:
                params = (value, *args)[: registration.accepted_args]
                value = registration.callback(*params)

        return value

    def call(self, hook_name: str, arg: Any = "", *args: Any) -> CallStatus:
        """
        Notify every callback of ``hook_name``.

        ``arg`` is passed as the first argument; wrap an object in
        :class:`~hookable.context.MutableContext` to hand callbacks the object
        itself for in-place changes. Return values are discarded.

        Returns:
            ``CallStatus.SUCCEEDED`` after dispatch, ``NO_SUCH_HOOK`` when
            nothing is attached, ``REJECTED`` for an invalid hook name.
        """
        name = self.sanitize(hook_name)
        if name is None:
            return CallStatus.REJECTED
        self._actions[name] = self._actions.get(name, 0) + 1

        self._call_all(name, arg, *args)

        if not self._live_buckets(name):
            return CallStatus.NO_SUCH_HOOK

        with self._dispatching(name):
            first = arg.target if isinstance(arg, MutableContext) else arg
            params = (first, *args)
            snapshot = self._snapshot(name)
            logger.debug("Calling hook %r on %d callbacks", name, len(snapshot))

            for registration in snapshot:
                registration.callback(*params[: registration.accepted_args])

        return CallStatus.SUCCEEDED

    def _call_all(self, hook_name: str, *args: Any) -> None:
        """Hand the full argument list of a dispatch to the meta-hook."""
        for registration in self._snapshot(self.all_hook_name):
            registration.callback(hook_name, *args)

    def _snapshot(self, hook_name: str) -> list[Registration]:
        buckets = self._filters.get(hook_name)
        if not buckets:
            return []
        if not self._ordering.is_sorted(hook_name):
            self._filters[hook_name] = buckets = dict(sorted(buckets.items()))
            self._ordering.mark_sorted(hook_name)
        return [
            registration
            for bucket in buckets.values()
            for registration in bucket.values()
            if registration.callback is not None
        ]

    @contextmanager
    def _dispatching(self, hook_name: str) -> Iterator[None]:
        self._current.append(hook_name)
        try:
            yield
        finally:
            self._current.pop()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def exists(self, hook_name: str, callback: Any = NOT_GIVEN) -> bool | int:
        """
        Check for registrations on ``hook_name``.

        Without ``callback``, report whether anything is attached. With it,
        return the priority it is attached at, or ``False``. The priority may
        be ``0``, so compare the result with ``is False``.
        """
        name = self.sanitize(hook_name)
        if name is None or not self._live_buckets(name):
            return False
        if callback is NOT_GIVEN:
            return True

        identity = self._identities.resolve(callback, probe=True)
        if identity is None:
            return False
        for priority, bucket in self._filters[name].items():
            if identity in bucket:
                return priority
        return False

    def has(self, hook_name: str, callback: Any = NOT_GIVEN) -> bool:
        return self.exists(hook_name, callback) is not False

    def count(self, hook_name: str) -> int | bool:
        """Number of priority buckets on ``hook_name``; ``False`` if unknown."""
        name = self.sanitize(hook_name)
        if name is None or name not in self._filters:
            return False
        return len(self._filters[name])

    def current(self) -> str | None:
        """Innermost hook being dispatched."""
        return self._current[-1] if self._current else None

    def is_doing(self, hook_name: str | None = None) -> bool:
        """Whether any dispatch, or one of ``hook_name``, is in progress."""
        if hook_name is None:
            return bool(self._current)
        name = self.sanitize(hook_name)
        return name is not None and name in self._current

    def is_called(self, hook_name: str) -> int:
        """How many times ``call`` was invoked for ``hook_name``."""
        name = self.sanitize(hook_name)
        if name is None:
            return 0
        return self._actions.get(name, 0)

    def hook_names(self) -> list[str]:
        """Hook names with at least one live registration."""
        return [name for name in self._filters if self._live_buckets(name)]

    def _live_buckets(self, hook_name: str) -> bool:
        return any(self._filters.get(hook_name, {}).values())

    def _priority(self, priority: Any) -> int | None:
        """Resolve ``None`` to the default; ``None`` back for non-integers."""
        if priority is None:
            return self.config.default_priority
        if isinstance(priority, bool) or not isinstance(priority, int):
            return None
        return priority


def create_registry(config: RegistryConfig | None = None) -> Hookable:
    """Create a registry instance."""
    return Hookable(config)
