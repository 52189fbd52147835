import pytest

from pattern_catalog.catalog import (
    CATEGORIES,
    DEMO_MODULES,
    DemoCatalog,
    DemoSpec,
    discover,
    register_demo,
    run_standalone,
)
from pattern_catalog.core import (
    Fatal,
    InvalidArgument,
    NotFound,
    PreconditionFailed,
    RunSettings,
)


def _noop(ctx):
    pass


def _other(ctx):
    pass


def _script(module, filename):
    """Compile a `demo` function as if it lived in `module` at `filename`."""
    namespace = {"__name__": module}
    exec(compile("def demo(ctx):\n    pass\n", filename, "exec"), namespace)
    return namespace["demo"]


def test_discover_registers_every_module():
    demos = discover()
    assert len(demos) == len(DEMO_MODULES)
    assert {spec.category for spec in demos.ordered()} == set(CATEGORIES)


def test_ordered_by_category_then_key():
    ordered = discover().ordered()
    positions = [(CATEGORIES.index(spec.category), spec.key) for spec in ordered]
    assert positions == sorted(positions)
    assert ordered[0].category == "behavioral"
    assert ordered[-1].category == "architectural"


def test_lookup():
    demos = discover()
    assert demos.get("observer").title == "Observer Pattern"
    assert "visitor" in demos
    with pytest.raises(NotFound):
        demos.get("missing")


class TestDemoCatalog:
    def test_unknown_category(self):
        with pytest.raises(InvalidArgument):
            DemoCatalog().add(DemoSpec(key="x", title="X", category="misc", runner=_noop))

    def test_same_runner_may_register_again(self):
        demos = DemoCatalog()
        demos.add(DemoSpec(key="x", title="X", category="behavioral", runner=_noop))
        demos.add(DemoSpec(key="x", title="X again", category="behavioral", runner=_noop))
        assert demos.get("x").title == "X again"
        assert len(demos) == 1

    def test_key_clash_with_another_runner(self):
        demos = DemoCatalog()
        demos.add(DemoSpec(key="x", title="X", category="behavioral", runner=_noop))
        with pytest.raises(PreconditionFailed):
            demos.add(DemoSpec(key="x", title="Y", category="structural", runner=_other))

    def test_same_name_from_another_module_clashes(self, tmp_path):
        demos = DemoCatalog()
        first = _script("samples.one", str(tmp_path / "one.py"))
        second = _script("samples.two", str(tmp_path / "two.py"))
        demos.add(DemoSpec(key="x", title="X", category="behavioral", runner=first))
        with pytest.raises(PreconditionFailed):
            demos.add(DemoSpec(key="x", title="X", category="behavioral", runner=second))

    def test_script_run_as_main_matches_its_module(self, tmp_path):
        demos = DemoCatalog()
        path = str(tmp_path / "one.py")
        as_main = _script("__main__", path)
        imported = _script("samples.one", path)
        demos.add(DemoSpec(key="x", title="X", category="behavioral", runner=as_main))
        demos.add(DemoSpec(key="x", title="X", category="behavioral", runner=imported))
        assert demos.get("x").runner.__module__ == "samples.one"


def test_register_demo_returns_function(mocker):
    fresh = DemoCatalog()
    mocker.patch("pattern_catalog.catalog.catalog", fresh)

    @register_demo("tmp", "Temporary", "creational")
    def script(ctx):
        pass

    assert fresh.get("tmp").runner is script


class TestRunStandalone:
    @pytest.fixture
    def fresh(self, mocker):
        discover()
        demos = DemoCatalog()
        mocker.patch("pattern_catalog.catalog.catalog", demos)
        return demos

    @pytest.mark.parametrize(
        "error, message",
        [
            (ZeroDivisionError("division by zero"), "division by zero"),
            (MemoryError("out of memory"), "out of memory"),
            (Fatal("disk on fire"), "disk on fire"),
        ],
    )
    def test_failure_is_one_diagnostic_and_status_one(self, fresh, capsys, error, message):
        def boom(ctx):
            ctx.say("starting")
            raise error

        fresh.add(DemoSpec(key="boom", title="Boom", category="behavioral", runner=boom))
        assert run_standalone("boom", RunSettings(pace=False, seed=1)) == 1
        captured = capsys.readouterr()
        assert captured.out == "starting\n"
        assert f"fatal: {message}" in captured.err

    def test_clean_run_is_status_zero(self, fresh, capsys):
        fresh.add(DemoSpec(key="fine", title="Fine", category="behavioral", runner=_noop))
        assert run_standalone("fine", RunSettings(pace=False, seed=1)) == 0
