# tests/test_parser/test_state_machine.py

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import List, Optional

import pytest

from gencad.parser import (
    FieldMode,
    FieldRule,
    GrammarError,
    MissingFieldError,
    RecordSchema,
    RecordStateMachine,
    UnexpectedKeywordError,
)
from gencad.parser.grammar import number, string, value


# --- A small two-level schema: GROUPs holding ITEMs ---

@dataclass
class Item:
    name: str
    size: Optional[float] = None
    tags: List[str] = field(default_factory=list)


@dataclass
class Group:
    name: str
    label: Optional[str] = None
    color: Optional[str] = None
    items: List[Item] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)


@dataclass
class Root:
    groups: List[Group] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)


TAG = FieldRule("tags", value(string), FieldMode.APPEND)

ITEM_SCHEMA = RecordSchema(
    name="ITEM",
    factory=Item,
    opener=value(string),
    opener_attrs=("name",),
    fields={"SIZE": FieldRule("size", value(number)), "TAG": TAG},
)

GROUP_SCHEMA = RecordSchema(
    name="GROUP",
    factory=Group,
    opener=value(string),
    opener_attrs=("name",),
    fields={
        "LABEL": FieldRule("label", value(string)),
        "COLOR": FieldRule("color", value(string), FieldMode.REPLACE),
        "TAG": TAG,
    },
    children={"ITEM": ITEM_SCHEMA},
    children_attr="items",
    required={"label": "LABEL"},
    inherit={"color": "default_color"},
)

ROOT_SCHEMA = RecordSchema(
    name="TEST",
    factory=Root,
    fields={"COLOR": FieldRule("default_color", value(string), FieldMode.REPLACE), "TAG": TAG},
    children={"GROUP": GROUP_SCHEMA},
    children_attr="groups",
    state_attrs=("default_color",),
    hints={"SIZE": "SIZE belongs to an ITEM."},
)


def run(keyword_params):
    return RecordStateMachine.run("TEST", ROOT_SCHEMA, keyword_params)


class TestRecordStateMachine:

    def test_sibling_records_close_each_other(self, keyword_params):
        root = run(keyword_params("""
GROUP g1
LABEL first
ITEM a
SIZE 1
ITEM b
GROUP g2
LABEL second
"""))
        assert [g.name for g in root.groups] == ["g1", "g2"]
        assert [i.name for i in root.groups[0].items] == ["a", "b"]
        assert root.groups[0].items[0].size == 1.0
        assert root.groups[1].items == []

    def test_shared_keyword_lands_on_the_innermost_record(self, keyword_params):
        root = run(keyword_params("""
TAG section
GROUP g
LABEL l
TAG group
ITEM a
TAG item
"""))
        assert root.tags == ["section"]
        assert root.groups[0].tags == ["group"]
        assert root.groups[0].items[0].tags == ["item"]

    def test_field_of_an_outer_record_closes_the_inner_one(self, keyword_params):
        root = run(keyword_params("""
GROUP g
ITEM a
LABEL late
ITEM b
"""))
        group = root.groups[0]
        assert group.label == "late"
        assert [i.name for i in group.items] == ["a", "b"]

    def test_first_occurrence_wins(self, keyword_params, caplog):
        caplog.set_level(logging.DEBUG, logger="gencad.parser.state_machine")
        root = run(keyword_params("""
GROUP g
LABEL first
LABEL second
"""))
        assert root.groups[0].label == "first"
        assert "ignoring repeated LABEL in GROUP" in caplog.text

    def test_ignored_duplicate_is_not_decoded(self, keyword_params):
        root = run(keyword_params("""
GROUP g
LABEL first
LABEL "never closed
"""))
        assert root.groups[0].label == "first"

    def test_replace_mode_keeps_the_latest_value(self, keyword_params):
        root = run(keyword_params("""
GROUP g
LABEL l
COLOR red
COLOR blue
"""))
        assert root.groups[0].color == "blue"

    def test_inherited_default_and_local_override(self, keyword_params):
        root = run(keyword_params("""
COLOR green
GROUP g1
LABEL l
GROUP g2
LABEL l
COLOR red
COLOR blue
"""))
        assert root.groups[0].color == "green"
        assert root.groups[1].color == "blue"
        assert not hasattr(root, "default_color")

    def test_missing_required_field(self, keyword_params):
        with pytest.raises(MissingFieldError) as excinfo:
            run(keyword_params("""
GROUP g
ITEM a
"""))
        error = excinfo.value
        assert (error.section, error.record, error.keyword, error.line) == ("TEST", "GROUP", "LABEL", 1)
        assert str(error) == "GROUP in $TEST is missing LABEL"

    def test_unexpected_keyword_names_the_open_record(self, keyword_params):
        with pytest.raises(UnexpectedKeywordError) as excinfo:
            run(keyword_params("""
GROUP g
LABEL l
BOGUS 1
"""))
        assert excinfo.value.keyword == "BOGUS"
        assert excinfo.value.line == 3
        assert excinfo.value.hint is None
        assert excinfo.value.context == "GROUP record (line 1)"

    def test_unexpected_keyword_before_any_record(self, keyword_params):
        with pytest.raises(UnexpectedKeywordError) as excinfo:
            run(keyword_params("BOGUS 1"))
        assert excinfo.value.context is None
        assert str(excinfo.value) == "Unexpected keyword BOGUS in $TEST"
        assert "not valid in $TEST." in excinfo.value.get_diagnostic_report()

    def test_unknown_keyword_wins_over_an_incomplete_record(self, keyword_params):
        with pytest.raises(UnexpectedKeywordError) as excinfo:
            run(keyword_params("""
GROUP g
ITEM a
BOGUS 1
"""))
        error = excinfo.value
        assert error.context == "ITEM record (line 2)"
        assert str(error) == "Unexpected keyword BOGUS in ITEM record (line 2) of $TEST"

    def test_unknown_keyword_leaves_open_records_in_place(self, keyword_params):
        machine = RecordStateMachine("TEST", ROOT_SCHEMA)
        for kp in keyword_params("GROUP g\nLABEL l\nITEM a"):
            machine.feed(kp)
        with pytest.raises(UnexpectedKeywordError):
            machine.feed(keyword_params("BOGUS 1")[0])
        assert machine.depth == 2

    @pytest.mark.parametrize("text, error_type", [
        ("BOGUS 1", UnexpectedKeywordError),
        ("GROUP g", MissingFieldError),
        ("GROUP g\nLABEL l\nITEM a\nSIZE x", GrammarError),
    ])
    def test_errors_pass_through_context_managers(self, keyword_params, text, error_type):
        @contextmanager
        def stage():
            yield

        with pytest.raises(error_type) as excinfo:
            with stage():
                run(keyword_params(text))
        assert excinfo.value.__traceback__ is not None

    def test_unexpected_keyword_carries_its_hint(self, keyword_params):
        with pytest.raises(UnexpectedKeywordError) as excinfo:
            run(keyword_params("SIZE 3"))
        assert excinfo.value.hint == "SIZE belongs to an ITEM."
        assert "SIZE belongs to an ITEM." in excinfo.value.get_diagnostic_report()

    def test_grammar_error_is_bound_to_its_keyword_line(self, keyword_params):
        with pytest.raises(GrammarError) as excinfo:
            run(keyword_params("""
GROUP g
LABEL l
ITEM a
SIZE 12x
"""))
        error = excinfo.value
        assert (error.section, error.keyword, error.parameter, error.line) == ("TEST", "SIZE", "12x", 4)
        assert error.expected == "end of parameter"
        assert error.position == 2
        assert isinstance(error.__cause__, GrammarError)

    def test_depth_follows_open_records(self, keyword_params):
        machine = RecordStateMachine("TEST", ROOT_SCHEMA)
        assert machine.depth == 0
        for kp in keyword_params("GROUP g\nITEM a"):
            machine.feed(kp)
        assert machine.depth == 2
        with pytest.raises(MissingFieldError):
            machine.finish()

    def test_empty_section(self):
        assert run([]) == Root()
