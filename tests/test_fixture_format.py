from dataclasses import replace

import orjson
import pytest

from recorder.command import Command
from recorder.exceptions import FixtureFormatError
from recorder.fixture import FIXTURE_FIELDS, Fixture, load_fixture, serialize_fixture
from recorder.snapshot import Snapshot
from recorder.targets import RangeTarget
from tests.fakes.builders import hat, mark_of


def make_fixture(marks_to_check=None) -> Fixture:
    initial = Snapshot(
        document_contents="a b\n",
        selections=[{"anchor": {"line": 0, "character": 0}, "active": {"line": 0, "character": 0}}],
        clipboard="a",
        marks={"default.a": {"start": {"line": 0, "character": 0}, "end": {"line": 0, "character": 1}}},
    )
    final = Snapshot(
        document_contents="b\n",
        selections=[{"anchor": {"line": 0, "character": 0}, "active": {"line": 0, "character": 0}}],
        clipboard="a",
        that_mark=[{"anchor": {"line": 0, "character": 0}, "active": {"line": 0, "character": 0}}],
    )
    return Fixture(
        language_id="plaintext",
        command=Command("cut", {"version": 1, "spokenForm": "cut air"}),
        initial_state=initial,
        final_state=final,
        return_value=None,
        full_targets=(RangeTarget(anchor=hat("default", "a"), active=mark_of("that")),),
        marks_to_check=marks_to_check,
    )


def test_field_order_is_fixed():
    data = orjson.loads(serialize_fixture(make_fixture(("default.a",))))
    assert list(data) == list(FIXTURE_FIELDS)


def test_marks_to_check_omitted_when_unset():
    data = orjson.loads(serialize_fixture(make_fixture()))
    assert "marksToCheck" not in data
    assert list(data) == [name for name in FIXTURE_FIELDS if name != "marksToCheck"]


def test_absent_snapshot_fields_are_not_written():
    data = orjson.loads(serialize_fixture(make_fixture()))
    assert "thatMark" not in data["initialState"]
    assert "visibleRanges" not in data["finalState"]
    assert "marks" not in data["finalState"]
    assert data["command"] == {"action": "cut", "version": 1, "spokenForm": "cut air"}


@pytest.mark.parametrize("marks_to_check", [None, ("default.a", "blue.b")])
def test_round_trip(marks_to_check):
    fixture = make_fixture(marks_to_check)
    parsed = load_fixture(serialize_fixture(fixture))

    assert parsed.command == fixture.command
    assert parsed.language_id == fixture.language_id
    assert parsed.marks_to_check == fixture.marks_to_check
    assert parsed.initial_state == fixture.initial_state
    assert parsed.full_targets == fixture.full_targets


def test_serialization_is_deterministic():
    assert serialize_fixture(make_fixture()) == serialize_fixture(make_fixture())


def test_compact_output():
    text = serialize_fixture(make_fixture(), indent=False)
    assert text.count("\n") == 1


def test_invalid_json_is_rejected():
    with pytest.raises(FixtureFormatError):
        load_fixture("{not json")


def test_non_object_is_rejected():
    with pytest.raises(FixtureFormatError):
        load_fixture("[]")


def test_missing_keys_are_reported():
    data = orjson.loads(serialize_fixture(make_fixture()))
    del data["finalState"]
    with pytest.raises(FixtureFormatError, match="finalState"):
        load_fixture(orjson.dumps(data))


def test_unknown_target_type_is_a_format_error():
    data = orjson.loads(serialize_fixture(make_fixture()))
    data["fullTargets"] = [{"type": "mystery"}]
    with pytest.raises(FixtureFormatError):
        load_fixture(orjson.dumps(data))


@pytest.mark.parametrize(
    "key, value",
    [
        ("command", "action"),
        ("command", ["cut"]),
        ("fullTargets", ["x"]),
        ("fullTargets", [{"type": "list", "elements": [7]}]),
        ("fullTargets", [{"type": "primitive", "mark": "that"}]),
        ("initialState", "hello"),
    ],
)
def test_wrongly_shaped_values_are_format_errors(key, value):
    data = orjson.loads(serialize_fixture(make_fixture()))
    data[key] = value
    with pytest.raises(FixtureFormatError):
        load_fixture(orjson.dumps(data))


def test_set_return_value_is_written_sorted():
    fixture = replace(make_fixture(), return_value={"b", "a", "c"})
    data = orjson.loads(serialize_fixture(fixture))
    assert data["returnValue"] == ["a", "b", "c"]


def test_unencodable_return_value_is_a_format_error():
    fixture = replace(make_fixture(), return_value=object())
    with pytest.raises(FixtureFormatError, match="not serializable"):
        serialize_fixture(fixture)


@pytest.mark.parametrize(
    "record",
    [
        lambda: Command("cut", {"targets": [1, 2]}),
        lambda: make_fixture(),
        lambda: make_fixture().initial_state,
    ],
)
def test_records_with_mutable_payloads_are_unhashable(record):
    with pytest.raises(TypeError, match="unhashable"):
        hash(record())
