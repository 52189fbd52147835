r"""Pattern Catalogue.

A catalogue of classic object-oriented design patterns. Each pattern is a
small program that builds an object graph, drives it through a scripted
scenario and narrates what happens. The samples share one object model:

  - `core`: error kinds, the narration record, ownership scopes, settings
  - `mixin`: keyed-mapping accessors used by every name-keyed coordinator
  - `catalog`: registration and running of samples

Usage:
    >>> from pattern_catalog import RunSettings, run_demo
    >>> narrator = run_demo("observer", RunSettings(seed=1, pace=False))
    >>> narrator.lines[0]
    '=== Observer Pattern Demo ==='
"""

from ._version import __version__, get_version_info, print_version_info
from .catalog import DemoCatalog, DemoSpec, catalog, discover, register_demo, run_demo, run_standalone
from .core import (
    AccessDenied,
    CatalogError,
    DemoContext,
    Exhausted,
    Fatal,
    InvalidArgument,
    Narrator,
    NotFound,
    OwnershipScope,
    PreconditionFailed,
    Releasable,
    RunSettings,
)

__all__ = [
    "__version__",
    "get_version_info",
    "print_version_info",
    # catalogue
    "DemoCatalog",
    "DemoSpec",
    "catalog",
    "discover",
    "register_demo",
    "run_demo",
    "run_standalone",
    # core
    "CatalogError",
    "InvalidArgument",
    "PreconditionFailed",
    "NotFound",
    "AccessDenied",
    "Exhausted",
    "Fatal",
    "Narrator",
    "DemoContext",
    "RunSettings",
    "Releasable",
    "OwnershipScope",
]
