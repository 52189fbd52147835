r"""Ownership and guaranteed release.

Every participant a coordinator allocates is released exactly once on every
path out of the scope that owns it. `Releasable` enforces the "exactly once"
half; `OwnershipScope` enforces "on every path" by unwinding an
`contextlib.ExitStack` in reverse acquisition order.

\dot
digraph Lifecycle {
    rankdir=LR;
    node [shape=rectangle];
    "own()" -> "owned" -> "scope exit" -> "release()";
    "owned" -> "transfer()" -> "new owner";
}
\enddot
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from typing import Any, Callable, List, Optional, TypeVar

from ._errors import Fatal, PreconditionFailed

__all__ = ["Releasable", "OwnershipScope"]

logger = logging.getLogger(__name__)

R = TypeVar("R")


# -----------------------------------------------------------------------------
# Releasable Participant
# -----------------------------------------------------------------------------


class Releasable:
    """Base for participants that own a resource.

    Subclasses override `_on_release`. Calling `release` twice is a broken
    invariant and raises `Fatal`.
    """

    _released: bool = False

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            raise Fatal(
                f"{type(self).__name__} released twice",
                ["Each participant has exactly one release site"],
                {"participant": repr(self), "operation": "release"},
            )
        self._released = True
        self._on_release()

    def _on_release(self) -> None:
        """Hook for subclasses."""


# -----------------------------------------------------------------------------
# Ownership Scope
# -----------------------------------------------------------------------------


class OwnershipScope:
    """Context manager that releases owned participants in reverse order.

    Example:
        >>> with OwnershipScope() as scope:
        ...     a = scope.own(Resource("a"))
        ...     b = scope.own(Resource("b"))
        ... # b released, then a
    """

    def __init__(self, name: str = "scope"):
        self.name = name
        self._stack: Optional[ExitStack] = None
        self._owned: List[Any] = []
        self.acquired = 0
        self.released = 0

    def __enter__(self) -> "OwnershipScope":
        self._stack = ExitStack()
        self._stack.__enter__()
        return self

    def __exit__(self, *exc_info) -> bool:
        if self._stack is None:
            raise Fatal(
                f"Scope '{self.name}' exited without being entered",
                ["Use the scope as a context manager"],
                {"operation": "__exit__"},
            )
        stack, self._stack = self._stack, None
        return bool(stack.__exit__(*exc_info))

    def own(self, obj: R, release: Optional[Callable[[], None]] = None) -> R:
        """Register `obj`; it is released when the scope exits.

        `release` defaults to ``obj.release``.
        """
        if self._stack is None:
            raise PreconditionFailed(
                f"Scope '{self.name}' is not active",
                ["Use the scope as a context manager before owning participants"],
                {"operation": "own"},
            )
        releaser = release if release is not None else getattr(obj, "release")
        self._owned.append(obj)
        self.acquired += 1
        self._stack.callback(self._release_one, obj, releaser)
        return obj

    def transfer(self, obj: Any) -> Any:
        """Give up ownership of `obj` without releasing it."""
        for index, owned in enumerate(self._owned):
            if owned is obj:
                del self._owned[index]
                self.acquired -= 1
                return obj
        raise PreconditionFailed(
            f"Scope '{self.name}' does not own {obj!r}",
            ["Only owned participants can be transferred"],
            {"participant": repr(obj), "operation": "transfer"},
        )

    @property
    def owned(self) -> List[Any]:
        return list(self._owned)

    def _release_one(self, obj: Any, releaser: Callable[[], None]) -> None:
        if not any(owned is obj for owned in self._owned):
            # transferred away
            return
        self._owned = [owned for owned in self._owned if owned is not obj]
        releaser()
        self.released += 1
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("scope %s released %r", self.name, obj)
