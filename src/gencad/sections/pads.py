# src/gencad/sections/pads.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, List

from ..formatting import format_number, format_string
from ..parser.grammar import number, pad_type, parameter, string
from ..parser.state_machine import RecordSchema, RecordStateMachine
from ..parser.tokenizer import KeywordParam
from ..types import Attribute, OutlineShape, PadType
from .common import attribute_field, attribute_lines, outline_fields, outline_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pad:
    """A pad definition: its type, drill size and copper outline."""
    name: str
    ptype: PadType
    drill_size: float
    shapes: List[OutlineShape] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        return (
            [f"PAD {format_string(self.name)} {self.ptype} {format_number(self.drill_size)}"]
            + outline_lines(self.shapes)
            + attribute_lines(self.attributes)
        )


@dataclass(frozen=True)
class Pads:
    section_name: ClassVar[str] = "PADS"

    pads: List[Pad] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        lines = [f"${self.section_name}"] + attribute_lines(self.attributes)
        for pad in self.pads:
            lines.extend(pad.to_lines())
        lines.append(f"$END{self.section_name}")
        return lines


PAD_SCHEMA = RecordSchema(
    name="PAD",
    factory=Pad,
    opener=parameter(string, pad_type, number),
    opener_attrs=("name", "ptype", "drill_size"),
    fields={**outline_fields("shapes"), **attribute_field()},
)

PADS_SCHEMA = RecordSchema(
    name="PADS",
    factory=Pads,
    fields=attribute_field(),
    children={"PAD": PAD_SCHEMA},
    children_attr="pads",
)


def parse_pads(keyword_params: Iterable[KeywordParam]) -> Pads:
    """Builds the $PADS section from its keyword lines."""
    return RecordStateMachine.run(Pads.section_name, PADS_SCHEMA, keyword_params)


def parse_pad(keyword_params: Iterable[KeywordParam]) -> Pad:
    """Builds a single PAD record, starting at its PAD line."""
    return RecordStateMachine.run_record(Pads.section_name, "PAD", PAD_SCHEMA, keyword_params)
