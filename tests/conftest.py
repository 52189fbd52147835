"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from pattern_catalog.core import DemoContext, Narrator, RunSettings

# =============================================================================
# Fixtures: Narration
# =============================================================================


@pytest.fixture
def narrator():
    """A narrator that only records lines."""
    return Narrator(echo=False)


@pytest.fixture
def settings(tmp_path):
    """Seeded, paced-off settings writing into a temporary directory."""
    return RunSettings(seed=1234, pace=False, workdir=tmp_path)


@pytest.fixture
def ctx(settings):
    """Demo context built from `settings`, without echo."""
    return DemoContext(settings, echo=False)
