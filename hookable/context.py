"""Mutable context passed to action callbacks.

``Hookable.call`` normally hands its first argument to callbacks as-is.
Wrapping an object in :class:`MutableContext` makes the sharing contract
explicit: every callback receives the wrapped ``target`` itself and may
mutate it, and the caller observes those mutations after ``call`` returns.

Example:
    state = {"seen": []}
    registry.add("boot", lambda s: s["seen"].append("db"))
    registry.call("boot", MutableContext(state))
    assert state["seen"] == ["db"]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True, eq=False)
class MutableContext:
    """Shared, mutable first argument for action dispatch.

    Attributes:
        target: Object handed by reference to every callback.
    """

    target: Any
