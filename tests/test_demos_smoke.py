"""Every registered sample runs to completion and narrates deterministically."""

import io

import pytest

from pattern_catalog.catalog import discover, run_demo, run_standalone
from pattern_catalog.core import RunSettings
from pattern_catalog.creational.singleton import DatabaseConnection, Logger

KEYS = [spec.key for spec in discover().ordered()]


@pytest.fixture(autouse=True)
def fresh_singletons():
    DatabaseConnection.reset_for_tests()
    Logger.reset_for_tests()
    yield
    DatabaseConnection.reset_for_tests()
    Logger.reset_for_tests()


@pytest.fixture
def quiet(tmp_path):
    return RunSettings(seed=1234, pace=False, workdir=tmp_path)


@pytest.mark.parametrize("key", KEYS)
def test_demo_runs(key, quiet):
    narrator = run_demo(key, quiet, echo=False)
    assert narrator.lines[0].startswith("===")
    assert narrator.lines[0].endswith("Demo ===")
    assert len(narrator) > 5


@pytest.mark.parametrize("key", KEYS)
def test_demo_is_deterministic_for_a_seed(key, tmp_path):
    (tmp_path / "a").mkdir()
    (tmp_path / "b").mkdir()
    first = run_demo(key, RunSettings(seed=99, pace=False, workdir=tmp_path / "a"), echo=False)
    DatabaseConnection.reset_for_tests()
    Logger.reset_for_tests()
    second = run_demo(key, RunSettings(seed=99, pace=False, workdir=tmp_path / "b"), echo=False)
    assert first.lines == second.lines


def test_echo_writes_to_stream(quiet):
    stream = io.StringIO()
    narrator = run_demo("observer", quiet, stream=stream)
    assert stream.getvalue().splitlines() == narrator.lines


def test_standalone_exit_status(quiet, capsys):
    assert run_standalone("state", quiet) == 0
    assert capsys.readouterr().out.startswith("=== State Pattern Demo ===")
