import io

import pytest

from pattern_catalog.core import (
    AccessDenied,
    CatalogError,
    Exhausted,
    Fatal,
    InvalidArgument,
    Narrator,
    NotFound,
    PreconditionFailed,
)


# -------------------------------------------------------------------
# Error kinds
# -------------------------------------------------------------------


@pytest.mark.parametrize(
    "kind, builtin",
    [
        (InvalidArgument, ValueError),
        (PreconditionFailed, RuntimeError),
        (NotFound, KeyError),
        (AccessDenied, PermissionError),
        (Exhausted, IndexError),
        (Fatal, RuntimeError),
    ],
)
def test_error_kinds_subclass_builtins(kind, builtin):
    """Every kind can be caught as CatalogError or as its builtin."""
    with pytest.raises(builtin):
        raise kind("boom")
    with pytest.raises(CatalogError):
        raise kind("boom")


def test_enhanced_message_lists_context_and_suggestions():
    exc = InvalidArgument(
        "Bad value",
        ["Try again", "Read the docs"],
        {"participant": "Widget", "operation": "set"},
    )
    text = str(exc)
    assert exc.message == "Bad value"
    assert text.splitlines()[0] == "Bad value"
    assert "  Participant: Widget" in text
    assert "  Operation: set" in text
    assert "    • Try again" in text


def test_not_found_str_is_not_quoted():
    """KeyError normally quotes its argument; NotFound reads like the others."""
    assert str(NotFound("missing")) == "missing"


def test_defaults_are_empty():
    exc = PreconditionFailed("nope")
    assert exc.suggestions == []
    assert exc.context == {}


# -------------------------------------------------------------------
# Narrator
# -------------------------------------------------------------------


def test_say_records_and_writes():
    stream = io.StringIO()
    narrator = Narrator(stream=stream)
    narrator.say("hello")
    narrator.say("a\nb")
    assert narrator.lines == ["hello", "a", "b"]
    assert stream.getvalue() == "hello\na\nb\n"


def test_echo_off_only_records():
    stream = io.StringIO()
    narrator = Narrator(stream=stream, echo=False)
    narrator.say("quiet")
    assert narrator.lines == ["quiet"]
    assert stream.getvalue() == ""


def test_banner_section_and_rule():
    narrator = Narrator(echo=False)
    narrator.banner("Title", width=5)
    narrator.section("Next", char="-", width=3)
    narrator.rule(width=2)
    assert narrator.lines == ["Title", "=====", "", "Next", "---", "--"]


def test_pause_uses_sleeper():
    slept = []
    narrator = Narrator(sleeper=slept.append, echo=False)
    narrator.pause(250)
    assert slept == [250]
    Narrator(echo=False).pause(100)  # no sleeper, no error


def test_since_contains_and_clear(narrator):
    narrator.say("one")
    mark = len(narrator)
    narrator.say("two three")
    assert narrator.since(mark) == ["two three"]
    assert "three" in narrator
    assert "four" not in narrator
    narrator.clear()
    assert len(narrator) == 0
