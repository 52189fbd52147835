import pytest

from pattern_catalog import __version__
from pattern_catalog.__main__ import main
from pattern_catalog.catalog import DEMO_MODULES, DemoCatalog, DemoSpec, discover
from pattern_catalog.creational.singleton import DatabaseConnection, Logger


@pytest.fixture(autouse=True)
def fresh_singletons():
    DatabaseConnection.reset_for_tests()
    Logger.reset_for_tests()
    yield
    DatabaseConnection.reset_for_tests()
    Logger.reset_for_tests()


def test_version(capsys):
    with pytest.raises(SystemExit) as info:
        main(["--version"])
    assert info.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage:" in capsys.readouterr().out


def test_list(capsys):
    assert main(["list"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == len(DEMO_MODULES)
    assert lines[0].split()[0] == "chain"


def test_run_one(capsys, tmp_path):
    assert main(["run", "memento", "--no-pace", "--seed", "3", "--workdir", str(tmp_path)]) == 0
    assert capsys.readouterr().out.startswith("=== Memento Pattern Demo ===")


def test_run_unknown_suggests_close_match(capsys):
    assert main(["run", "observr", "--no-pace"]) == 2
    err = capsys.readouterr().err
    assert "unknown sample 'observr'" in err
    assert "Did you mean: observer?" in err


def test_run_all(capsys, tmp_path):
    assert main(["run-all", "--no-pace", "--workdir", str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert out.count("Demo ===") >= len(DEMO_MODULES)
    assert (tmp_path / "products.txt").exists()


def test_bad_log_level(capsys):
    assert main(["--log-level", "chatty", "list"]) == 2
    assert "Unknown log level: CHATTY" in capsys.readouterr().err


def test_info(capsys):
    assert main(["info"]) == 0
    out = capsys.readouterr().out
    assert out.startswith(f"pattern-catalog: {__version__}")
    assert "pydantic" in out


def test_crashing_sample_exits_one(capsys, mocker):
    discover()
    demos = DemoCatalog()
    mocker.patch("pattern_catalog.catalog.catalog", demos)

    def crash(ctx):
        raise ZeroDivisionError("division by zero")

    demos.add(DemoSpec(key="crash", title="Crash", category="structural", runner=crash))
    assert main(["run", "crash", "--no-pace"]) == 1
    assert "fatal: division by zero" in capsys.readouterr().err
