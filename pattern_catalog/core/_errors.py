r"""Error hierarchy shared by every sample.

Each error carries a short message, a list of actionable suggestions and a
context payload suitable for logs. Non-fatal kinds are caught by the
coordinator that owns the operation and turned into one narration line;
`Fatal` propagates to the top of the program.

Doxygen Dot Graph of Exception Hierarchy:
------------------------------------------
\dot
digraph ExceptionHierarchy {
    node [shape=rectangle];
    "Exception" -> "CatalogError";
    "CatalogError" -> "InvalidArgument";
    "CatalogError" -> "PreconditionFailed";
    "CatalogError" -> "NotFound";
    "CatalogError" -> "AccessDenied";
    "CatalogError" -> "Exhausted";
    "CatalogError" -> "Fatal";
}
\enddot
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

__all__ = [
    "CatalogError",
    "InvalidArgument",
    "PreconditionFailed",
    "NotFound",
    "AccessDenied",
    "Exhausted",
    "Fatal",
]


# -----------------------------------------------------------------------------
# Base Exception
# -----------------------------------------------------------------------------


class CatalogError(Exception):
    """Base exception with rich context."""

    def __init__(
        self,
        message: str,
        suggestions: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.suggestions = suggestions or []
        self.context = context or {}

        enhanced_message = self._build_enhanced_message()
        super().__init__(enhanced_message)

    def _build_enhanced_message(self) -> str:
        """Build enhanced error message with context and suggestions."""
        lines = [self.message]

        if self.context:
            if "participant" in self.context:
                lines.append(f"  Participant: {self.context['participant']}")
            if "operation" in self.context:
                lines.append(f"  Operation: {self.context['operation']}")

        if self.suggestions:
            lines.append("  Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"    • {suggestion}")

        return "\n".join(lines)

    def __str__(self) -> str:
        # KeyError quotes its argument; keep every kind readable the same way
        return self._build_enhanced_message()


# -----------------------------------------------------------------------------
# Concrete Kinds
# -----------------------------------------------------------------------------


class InvalidArgument(CatalogError, ValueError):
    """Caller supplied an out-of-range or malformed value."""


class PreconditionFailed(CatalogError, RuntimeError):
    """Operation rejected by the current state of a participant."""


class NotFound(CatalogError, KeyError):
    """Keyed lookup miss."""


class AccessDenied(CatalogError, PermissionError):
    """Caller role is not allowed to perform the operation."""


class Exhausted(CatalogError, IndexError):
    """A stack, queue or iterator had nothing left to give."""


class Fatal(CatalogError, RuntimeError):
    """Broken invariant inside the core. Terminates the program."""
