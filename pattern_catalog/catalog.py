r"""Demo catalogue.

Every sample registers its `main`-level script with `@register_demo`. The
catalogue is the one place that knows how to build a run: it validates the
settings, creates the `DemoContext`, opens the ownership scope and turns a
`Fatal` error into a single diagnostic and a non-zero status.

\dot
digraph Catalogue {
    rankdir=LR;
    node [shape=rectangle];
    "@register_demo" -> "DemoCatalog";
    "DemoCatalog" -> "run_demo" -> "DemoContext";
    "run_standalone" -> "run_demo";
}
\enddot
"""

from __future__ import annotations

import importlib
import logging
import os
import sys
from typing import Callable, Dict, List, Optional, TextIO

from pydantic import BaseModel, ConfigDict

from .core import (
    CatalogError,
    DemoContext,
    InvalidArgument,
    Narrator,
    OwnershipScope,
    RunSettings,
    configure_logging,
)
from .mixin import MappingMutatorMixin

__all__ = [
    "CATEGORIES",
    "DEMO_MODULES",
    "DemoSpec",
    "DemoCatalog",
    "catalog",
    "register_demo",
    "discover",
    "run_demo",
    "run_standalone",
]

logger = logging.getLogger(__name__)

CATEGORIES = ("behavioral", "structural", "creational", "architectural")

DEMO_MODULES = (
    "behavioral.observer",
    "behavioral.state",
    "behavioral.strategy",
    "behavioral.command",
    "behavioral.chain",
    "behavioral.iterator",
    "behavioral.visitor",
    "behavioral.mediator",
    "behavioral.memento",
    "behavioral.template_method",
    "behavioral.interpreter",
    "structural.adapter",
    "structural.bridge",
    "structural.composite",
    "structural.decorator",
    "structural.facade",
    "structural.flyweight",
    "structural.proxy",
    "creational.factory",
    "creational.abstract_factory",
    "creational.builder",
    "creational.prototype",
    "creational.singleton",
    "architectural.dependency_injection",
    "architectural.event_sourcing",
    "architectural.repository",
    "architectural.null_object",
    "architectural.mvc",
)


# -----------------------------------------------------------------------------
# Catalogue
# -----------------------------------------------------------------------------


class DemoSpec(BaseModel):
    """One registered sample."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    key: str
    title: str
    category: str
    summary: str = ""
    runner: Callable[[DemoContext], None]


def _same_runner(left: Callable, right: Callable) -> bool:
    """True when both runners are the same function of the same script.

    Running a sample with ``python -m`` imports it twice, once as ``__main__``
    and once under its package name, so the source file decides.
    """
    if left.__qualname__ != right.__qualname__:
        return False
    if left.__module__ == right.__module__:
        return True
    left_code = getattr(left, "__code__", None)
    right_code = getattr(right, "__code__", None)
    if left_code is None or right_code is None:
        return False
    return os.path.realpath(left_code.co_filename) == os.path.realpath(right_code.co_filename)


class DemoCatalog(MappingMutatorMixin[str, DemoSpec]):
    """Name-keyed collection of samples."""

    def __init__(self):
        self._demos: Dict[str, DemoSpec] = {}

    def _get_mapping(self) -> Dict[str, DemoSpec]:
        return self._demos

    def add(self, spec: DemoSpec) -> DemoSpec:
        if spec.category not in CATEGORIES:
            raise InvalidArgument(
                f"Unknown category: {spec.category}",
                [f"Use one of: {', '.join(CATEGORIES)}"],
                {"participant": "DemoCatalog", "operation": "add", "key": spec.key},
            )
        existing = self._demos.get(spec.key)
        if existing is not None and _same_runner(existing.runner, spec.runner):
            self._put_artifact(spec.key, spec)
        else:
            self._set_artifact(spec.key, spec)
        return spec

    def get(self, key: str) -> DemoSpec:
        return self._get_artifact(key)

    def __contains__(self, key: str) -> bool:
        return self._has_identifier(key)

    def __len__(self) -> int:
        return self._len_mapping()

    def ordered(self) -> List[DemoSpec]:
        """Samples in category order, then by key."""
        return sorted(
            self._demos.values(),
            key=lambda spec: (CATEGORIES.index(spec.category), spec.key),
        )


catalog = DemoCatalog()


def register_demo(
    key: str, title: str, category: str, summary: str = ""
) -> Callable[[Callable[[DemoContext], None]], Callable[[DemoContext], None]]:
    """Register the decorated function as the script of sample `key`."""

    def decorator(func: Callable[[DemoContext], None]) -> Callable[[DemoContext], None]:
        catalog.add(
            DemoSpec(key=key, title=title, category=category, summary=summary, runner=func)
        )
        return func

    return decorator


def discover() -> DemoCatalog:
    """Import every sample module so that its registration runs."""
    for name in DEMO_MODULES:
        importlib.import_module(f"{__package__}.{name}")
    return catalog


# -----------------------------------------------------------------------------
# Running
# -----------------------------------------------------------------------------


def run_demo(
    key: str,
    settings: Optional[RunSettings] = None,
    stream: Optional[TextIO] = None,
    echo: bool = True,
) -> Narrator:
    """Run sample `key` and return its narrator.

    Participants handed to ``ctx.own`` are released when the script returns
    or raises.
    """
    spec = discover().get(key)
    with OwnershipScope(key) as scope:
        ctx = DemoContext(settings, stream=stream, echo=echo, scope=scope)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("running %s with seed=%s", key, ctx.settings.seed)
        spec.runner(ctx)
    return ctx.narrator


def run_standalone(key: str, settings: Optional[RunSettings] = None) -> int:
    """Body of every sample's ``__main__`` block. Returns the exit status."""
    settings = settings or RunSettings()
    configure_logging(settings.log_level)
    try:
        run_demo(key, settings)
    except CatalogError as exc:
        logger.error("sample %s failed: %s", key, exc.message)
        print(f"fatal: {exc.message}", file=sys.stderr)
        return 1
    except Exception as exc:
        logger.exception("sample %s crashed", key)
        print(f"fatal: {exc}", file=sys.stderr)
        return 1
    return 0
