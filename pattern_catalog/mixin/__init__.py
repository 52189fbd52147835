"""Keyed-mapping mixins shared by name-keyed coordinators."""

from .accessor import MappingAccessorMixin
from .mutator import MappingMutatorMixin

__all__ = ["MappingAccessorMixin", "MappingMutatorMixin"]
