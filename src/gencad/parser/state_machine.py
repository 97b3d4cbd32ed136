# src/gencad/parser/state_machine.py
"""
The implicit-nesting record state machine shared by every section builder.

GenCAD has no terminators for records or sub-records: a record ends when a
keyword arrives that it does not accept. A section is therefore described as a
small tree of `RecordSchema` objects (the section itself at the root, its
records below, their sub-records below that) and one `RecordStateMachine`
walks the keyword stream with a stack of open candidates, one per nesting
level. For every keyword, starting at the innermost open candidate:

1.  a field keyword of the candidate is applied to it (first occurrence wins,
    accumulates, or replaces, depending on the field);
2.  a keyword introducing one of the candidate's sub-records opens a new
    candidate one level deeper, initialized from the keyword's parameter;
3.  otherwise, if an outer open candidate accepts the keyword, every candidate
    inside it is flushed into its parent and the keyword is handled there;
4.  a keyword that no open level accepts is an `UnexpectedKeywordError` naming
    the innermost open record. Nothing is flushed in that case, so an
    incomplete record does not mask the unknown keyword.

Sibling records close each other through rule 3: a second `PIN` is not
accepted by the open pin, so the pin is flushed and the shape opens the new
one. `ATTRIBUTE` is a field at every level and so always lands on the
innermost open candidate. When the section ends, every open candidate is
flushed. Required fields are checked when a candidate is built.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from .exceptions import GrammarError, MissingFieldError, UnexpectedKeywordError
from .tokenizer import KeywordParam

logger = logging.getLogger(__name__)


class FieldMode(Enum):
    FIRST = "first"        # first occurrence wins, later ones are ignored
    APPEND = "append"      # every occurrence is kept in file order
    REPLACE = "replace"    # the latest occurrence wins

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class FieldRule:
    """How one field keyword is decoded and stored on a candidate."""
    attr: str
    decode: Callable[[str], Any]
    mode: FieldMode = FieldMode.FIRST


@dataclass(frozen=True)
class RecordSchema:
    """
    Describes one nesting level: the record built there, the keyword table it
    accepts and the sub-records it can contain.

    Attributes:
        name: Human-readable record name used in diagnostics (e.g. 'PAD').
        factory: Builds the finished record from the candidate's values.
        opener: Decodes the parameter of the introducing keyword.
        opener_attrs: Names for the opener's decoded values, in order.
        fields: Field keyword -> rule.
        children: Introducing keyword -> sub-record schema.
        children_attr: Name of the list that flushed sub-records are added to.
        required: Attribute -> keyword, for fields that must be set before build.
        inherit: Attribute of a new child -> attribute of this candidate it is
            seeded from. Seeded values do not count as occurrences, so the
            child's own keyword still wins over them.
        state_attrs: Attributes kept on the candidate but not given to factory.
        hints: Keyword -> extra explanation when the keyword is rejected here.
    """
    name: str
    factory: Callable[..., Any]
    opener: Optional[Callable[[str], Any]] = None
    opener_attrs: Tuple[str, ...] = ()
    fields: Mapping[str, FieldRule] = field(default_factory=dict)
    children: Mapping[str, "RecordSchema"] = field(default_factory=dict)
    children_attr: Optional[str] = None
    required: Mapping[str, str] = field(default_factory=dict)
    inherit: Mapping[str, str] = field(default_factory=dict)
    state_attrs: Tuple[str, ...] = ()
    hints: Mapping[str, str] = field(default_factory=dict)


class Candidate:
    """A record under construction."""

    def __init__(self, schema: RecordSchema, values: Dict[str, Any], line: Optional[int] = None):
        self.schema = schema
        self.values = values
        self.line = line
        self.seen = set()
        for rule in schema.fields.values():
            if rule.mode is FieldMode.APPEND:
                self.values.setdefault(rule.attr, [])
        if schema.children_attr:
            self.values.setdefault(schema.children_attr, [])

    def apply(self, keyword: str, rule: FieldRule, parameter: str) -> bool:
        """Applies a field keyword. Returns False if it was a discarded duplicate."""
        if rule.mode is FieldMode.FIRST and rule.attr in self.seen:
            return False
        decoded = rule.decode(parameter)
        if rule.mode is FieldMode.APPEND:
            self.values[rule.attr].append(decoded)
        else:
            self.values[rule.attr] = decoded
        self.seen.add(rule.attr)
        return True

    def add_child(self, record: Any):
        self.values[self.schema.children_attr].append(record)

    def build(self, section: str) -> Any:
        for attr, keyword in self.schema.required.items():
            if self.values.get(attr) is None:
                raise MissingFieldError(section=section, record=self.schema.name, keyword=keyword, line=self.line)
        kwargs = {k: v for k, v in self.values.items() if k not in self.schema.state_attrs}
        return self.schema.factory(**kwargs)


class RecordStateMachine:
    """
    Runs one section's keyword stream through its schema tree.

    A machine holds the state of a single parse; build a new one (or call
    `run`) for every section.
    """

    def __init__(self, section: str, root: RecordSchema):
        self.section = section
        self.stack: List[Candidate] = [Candidate(root, {})]

    @property
    def depth(self) -> int:
        """Number of records currently open below the section level."""
        return len(self.stack) - 1

    def feed(self, kp: KeywordParam):
        try:
            self._dispatch(kp)
        except GrammarError as e:
            raise e.in_context(self.section, kp.keyword, kp.parameter, kp.line) from e

    def _dispatch(self, kp: KeywordParam):
        level = self._accepting_level(kp.keyword)
        if level is None:
            raise UnexpectedKeywordError(
                section=self.section,
                keyword=kp.keyword,
                context=self._describe(self.stack[-1]),
                line=kp.line,
                hint=self._hint(kp.keyword),
            )
        while len(self.stack) > level + 1:
            self._flush()

        candidate = self.stack[-1]
        schema = candidate.schema
        rule = schema.fields.get(kp.keyword)
        if rule is not None:
            if not candidate.apply(kp.keyword, rule, kp.parameter):
                logger.debug(
                    f"${self.section} line {kp.line}: ignoring repeated {kp.keyword} in {schema.name}; "
                    f"the first occurrence wins."
                )
            return
        self.stack.append(self._open(candidate, schema.children[kp.keyword], kp))

    def _accepting_level(self, keyword: str) -> Optional[int]:
        """Stack index of the innermost open candidate taking `keyword` as a field or sub-record."""
        for index in range(len(self.stack) - 1, -1, -1):
            schema = self.stack[index].schema
            if keyword in schema.fields or keyword in schema.children:
                return index
        return None

    def _hint(self, keyword: str) -> Optional[str]:
        for candidate in reversed(self.stack):
            if keyword in candidate.schema.hints:
                return candidate.schema.hints[keyword]
        return None

    @staticmethod
    def _describe(candidate: Candidate) -> Optional[str]:
        if candidate.line is None:
            return None
        return f"{candidate.schema.name} record (line {candidate.line})"

    def _open(self, parent: Candidate, schema: RecordSchema, kp: KeywordParam) -> Candidate:
        values: Dict[str, Any] = {}
        for attr, parent_attr in schema.inherit.items():
            if parent.values.get(parent_attr) is not None:
                values[attr] = parent.values[parent_attr]
        if schema.opener is not None:
            decoded = schema.opener(kp.parameter)
            if len(schema.opener_attrs) == 1:
                decoded = (decoded,)
            values.update(zip(schema.opener_attrs, decoded))
        return Candidate(schema, values, line=kp.line)

    def _flush(self):
        candidate = self.stack.pop()
        record = candidate.build(self.section)
        self.stack[-1].add_child(record)
        logger.debug(f"${self.section}: closed {candidate.schema.name} opened on line {candidate.line}.")

    def finish(self) -> Any:
        """Flushes every open record and builds the section model."""
        while len(self.stack) > 1:
            self._flush()
        return self.stack[0].build(self.section)

    @classmethod
    def run(cls, section: str, root: RecordSchema, keyword_params: Iterable[KeywordParam]) -> Any:
        machine = cls(section, root)
        for kp in keyword_params:
            machine.feed(kp)
        return machine.finish()

    @classmethod
    def run_record(
        cls, section: str, keyword: str, schema: RecordSchema, keyword_params: Iterable[KeywordParam]
    ) -> Any:
        """
        Builds exactly one record from its keyword lines, the first of which
        must be the introducing `keyword`.

        Raises:
            UnexpectedKeywordError: If the lines do not start with `keyword`, or
                continue past the end of the record.
            MissingFieldError: If there are no lines at all.
        """
        root = RecordSchema(
            name=section,
            factory=lambda records: records,
            children={keyword: schema},
            children_attr="records",
        )
        machine = cls(section, root)
        records = machine.stack[0].values["records"]
        for kp in keyword_params:
            machine.feed(kp)
            if records:
                raise UnexpectedKeywordError(
                    section=section, keyword=kp.keyword, context=f"a single {schema.name} record", line=kp.line
                )
        records = machine.finish()
        if not records:
            raise MissingFieldError(section=section, record=schema.name, keyword=keyword)
        return records[0]
