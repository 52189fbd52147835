r"""Read-only keyed-mapping mixin with rich error context.

This module implements `MappingAccessorMixin`, a read-focused interface over a
mapping of identifiers to participants. Coordinators that look things up by
name (factories, containers, prototype registries, flyweight caches, the demo
catalogue) share it so that a miss is always reported the same way.

Key points:
  - Subclasses must implement `_get_mapping()` to return the backing mapping.
  - Presence checks and retrieval raise `NotFound` with suggestions.
  - No mutation APIs are exposed here; see `MappingMutatorMixin` for writes.

\dot
digraph MappingMixins {
    rankdir=LR;
    node [shape=rectangle];
    "MappingAccessorMixin" -> "MappingMutatorMixin";
}
\enddot
"""

from __future__ import annotations

import difflib
from typing import Generic, Hashable, Iterator, List, MutableMapping, TypeVar

from ..core._errors import NotFound

__all__ = [
    "MappingAccessorMixin",
]


# -----------------------------------------------------------------------------
# Type Variables
# -----------------------------------------------------------------------------

KeyType = TypeVar("KeyType", bound=Hashable)
ValType = TypeVar("ValType")


# -----------------------------------------------------------------------------
# Base Mixin for Accessing Keyed Participants
# -----------------------------------------------------------------------------


class MappingAccessorMixin(Generic[KeyType, ValType]):
    """Abstract accessor over a keyed mapping owned by one coordinator.

    Error semantics:
        Missing keys are reported via `NotFound` with a suggestions list
        (including close matches for string keys) and a context payload.
    """

    def _get_mapping(self) -> MutableMapping[KeyType, ValType]:
        """Return the underlying mapping."""
        raise NotImplementedError(
            f"Subclasses must implement `{type(self).__name__}._get_mapping` method."
        )

    def _len_mapping(self) -> int:
        return len(self._get_mapping())

    def _iter_mapping(self) -> Iterator[KeyType]:
        return iter(self._get_mapping())

    def _get_artifact(self, key: KeyType) -> ValType:
        """Return the participant registered under `key`, or raise `NotFound`."""
        return self._assert_presence(key)[key]

    def _has_identifier(self, key: KeyType) -> bool:
        return key in self._get_mapping()

    def _has_artifact(self, item: ValType) -> bool:
        return any(value is item for value in self._get_mapping().values())

    def _close_matches(self, key: KeyType) -> List[str]:
        if not isinstance(key, str):
            return []
        names = [k for k in self._get_mapping() if isinstance(k, str)]
        return difflib.get_close_matches(key, names, n=3)

    def _assert_presence(self, key: KeyType) -> MutableMapping[KeyType, ValType]:
        """Return mapping if `key` is present; otherwise raise `NotFound`."""
        mapping = self._get_mapping()
        if key not in mapping:
            owner = type(self).__name__
            suggestions = [
                f"Key '{key}' not found in {owner}",
                "Check that the key was registered correctly",
            ]
            matches = self._close_matches(key)
            if matches:
                suggestions.append(f"Did you mean: {', '.join(matches)}?")
            context = {
                "operation": "assert_presence",
                "participant": owner,
                "key": str(key),
                "mapping_size": len(mapping),
                "available_keys": (
                    list(mapping.keys())
                    if len(mapping) <= 10
                    else f"{list(mapping.keys())[:10]}. ({len(mapping)} total)"
                ),
            }
            raise NotFound(f"Key '{key}' is not found in the mapping", suggestions, context)
        return mapping
