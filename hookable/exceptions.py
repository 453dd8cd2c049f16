"""Exception hierarchy and helpers for the hook registry.

All errors raised by the package derive from ``HookableError``, which carries
a stable error code, a context mapping and an optional root cause:

- ``InvalidHookNameError`` for hook names that are not non-empty strings.
- ``InvalidCallableError`` for callbacks whose shape cannot be identified.
- ``InvalidPriorityError`` for priorities that are not integers.
- ``ConfigError`` and ``PluginError`` for the configuration and plugin layers.

Exceptions raised by callbacks during dispatch are never wrapped.
"""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

THookableError = TypeVar("THookableError", bound="HookableError")


class HookableError(Exception):
    """Base exception for all registry-level errors.

    Attributes:
        message: Human-readable error message.
        code: Stable error code for programmatic processing.
        context: Extra metadata such as the offending hook name.
        cause: Original exception that triggered this error.
    """

    default_code = "HOOKABLE_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: Mapping[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message: str = message
        self.code: str = code or self.default_code
        self.context: dict[str, Any] = dict(context) if context is not None else {}
        self.cause: Exception | None = cause

        super().__init__(message)

        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return format_exception(self)


class InvalidHookNameError(HookableError):
    """Hook name is not a non-empty string after trimming."""

    default_code = "INVALID_HOOK_NAME"


class InvalidCallableError(HookableError):
    """Callback shape cannot be resolved to an identity."""

    default_code = "INVALID_CALLABLE"


class InvalidPriorityError(HookableError):
    """Priority is not an integer."""

    default_code = "INVALID_PRIORITY"


class ConfigError(HookableError):
    """Configuration could not be loaded or validated."""

    default_code = "CONFIG_ERROR"


class PluginError(HookableError):
    """Plugin registration or dependency resolution failed."""

    default_code = "PLUGIN_ERROR"


def wrap_exception(
    exc: Exception,
    error_class: type[THookableError],
    message: str,
    *,
    code: str | None = None,
    context: Mapping[str, Any] | None = None,
) -> THookableError:
    """Wrap a lower-level exception with a registry exception class.

    Args:
        exc: Original exception.
        error_class: Target ``HookableError`` subclass to construct.
        message: Message for the wrapped exception.
        code: Optional explicit error code overriding the class default.
        context: Optional context payload.

    Returns:
        An instance of ``error_class`` that chains ``exc`` as its cause.
    """
    return error_class(message, code=code, context=context, cause=exc)


def format_exception(exc: BaseException) -> str:
    """Format an exception into one readable line.

    ``HookableError`` instances include code, message, context and cause;
    anything else is rendered as ``<Type>: <message>``.
    """
    if not isinstance(exc, HookableError):
        return f"{type(exc).__name__}: {exc}"

    parts = [f"[{exc.code}] {exc.message}"]
    if exc.context:
        items = ", ".join(f"{key}={value!r}" for key, value in sorted(exc.context.items()))
        parts.append(f"context: {items}")
    if exc.cause is not None:
        parts.append(f"cause: {type(exc.cause).__name__}: {exc.cause}")
    return " | ".join(parts)


__all__ = [
    "HookableError",
    "InvalidHookNameError",
    "InvalidCallableError",
    "InvalidPriorityError",
    "ConfigError",
    "PluginError",
    "wrap_exception",
    "format_exception",
]
