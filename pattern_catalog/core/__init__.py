"""Shared object model: errors, narration, lifecycle and run settings."""

from ._errors import (
    AccessDenied,
    CatalogError,
    Exhausted,
    Fatal,
    InvalidArgument,
    NotFound,
    PreconditionFailed,
)
from ._logging import configure_logging, resolve_log_level
from .lifecycle import OwnershipScope, Releasable
from .narration import Narrator
from .settings import DemoContext, RunSettings, SimulatedClock

__all__ = [
    # errors
    "CatalogError",
    "InvalidArgument",
    "PreconditionFailed",
    "NotFound",
    "AccessDenied",
    "Exhausted",
    "Fatal",
    # logging
    "configure_logging",
    "resolve_log_level",
    # lifecycle
    "Releasable",
    "OwnershipScope",
    # narration and settings
    "Narrator",
    "RunSettings",
    "SimulatedClock",
    "DemoContext",
]
