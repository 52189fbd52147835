r"""Mutable keyed-mapping mixin with rich error context.

Behavior:
  - `_set_artifact` inserts and refuses to overwrite (`PreconditionFailed`).
  - `_update_artifact` / `_del_artifact` require presence (`NotFound`).
  - `_put_artifact` inserts or replaces without a guard.
"""

from __future__ import annotations

from typing import Hashable, Mapping, MutableMapping, TypeVar

from ..core._errors import PreconditionFailed
from .accessor import MappingAccessorMixin

__all__ = [
    "MappingMutatorMixin",
]

KeyType = TypeVar("KeyType", bound=Hashable)
ValType = TypeVar("ValType")


# -----------------------------------------------------------------------------
# Base Mixin for Mutating Keyed Participants
# -----------------------------------------------------------------------------


class MappingMutatorMixin(MappingAccessorMixin[KeyType, ValType]):
    """Write-side extensions for a keyed mapping."""

    def _update_mapping(self, mapping: Mapping[KeyType, ValType]) -> None:
        """Insert all items from `mapping`, asserting absence for each key."""
        for key in mapping.keys():
            self._assert_absence(key)
        self._get_mapping().update(mapping)

    def _clear_mapping(self) -> None:
        self._get_mapping().clear()

    def _set_artifact(self, key: KeyType, item: ValType) -> None:
        """Insert `item` under `key`.

        Raises:
            PreconditionFailed: if `key` is already present.
        """
        self._assert_absence(key)[key] = item

    def _put_artifact(self, key: KeyType, item: ValType) -> None:
        self._get_mapping()[key] = item

    def _update_artifact(self, key: KeyType, item: ValType) -> None:
        """Replace `item` under `key`.

        Raises:
            NotFound: if `key` is not present.
        """
        self._assert_presence(key)[key] = item

    def _del_artifact(self, key: KeyType) -> ValType:
        """Remove and return the entry under `key`.

        Raises:
            NotFound: if `key` is not present.
        """
        return self._assert_presence(key).pop(key)

    def _assert_absence(self, key: KeyType) -> MutableMapping[KeyType, ValType]:
        """Return mapping if `key` is absent; otherwise raise `PreconditionFailed`."""
        mapping = self._get_mapping()
        if key in mapping:
            owner = type(self).__name__
            suggestions = [
                f"Key '{key}' already exists in {owner}",
                "Use a different key name",
                "Remove the existing entry first",
            ]
            context = {
                "operation": "assert_absence",
                "participant": owner,
                "key": str(key),
                "mapping_size": len(mapping),
            }
            raise PreconditionFailed(
                f"Key '{key}' is already found in the mapping", suggestions, context
            )
        return mapping
