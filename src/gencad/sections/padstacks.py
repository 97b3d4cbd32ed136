# src/gencad/sections/padstacks.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, List

from ..formatting import format_number, format_string
from ..parser.grammar import layer, mirror, number, parameter, string
from ..parser.state_machine import FieldMode, FieldRule, RecordSchema, RecordStateMachine
from ..parser.tokenizer import KeywordParam
from ..types import Attribute, Layer, Mirror
from .common import attribute_field, attribute_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PadstackPad:
    """One PAD line of a padstack: the pad used on a given layer."""
    name: str
    layer: Layer
    rotation: float
    mirror: Mirror

    def to_line(self) -> str:
        return f"PAD {format_string(self.name)} {self.layer.to_gencad()} {format_number(self.rotation)} {self.mirror}"


@dataclass(frozen=True)
class Padstack:
    name: str
    drill_size: float
    pads: List[PadstackPad] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        lines = [f"PADSTACK {format_string(self.name)} {format_number(self.drill_size)}"]
        lines.extend(pad.to_line() for pad in self.pads)
        return lines + attribute_lines(self.attributes)


@dataclass(frozen=True)
class Padstacks:
    section_name: ClassVar[str] = "PADSTACKS"

    padstacks: List[Padstack] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        lines = [f"${self.section_name}"] + attribute_lines(self.attributes)
        for padstack in self.padstacks:
            lines.extend(padstack.to_lines())
        lines.append(f"$END{self.section_name}")
        return lines


PADSTACK_SCHEMA = RecordSchema(
    name="PADSTACK",
    factory=Padstack,
    opener=parameter(string, number),
    opener_attrs=("name", "drill_size"),
    fields={
        "PAD": FieldRule("pads", parameter(string, layer, number, mirror, into=PadstackPad), FieldMode.APPEND),
        **attribute_field(),
    },
)

PADSTACKS_SCHEMA = RecordSchema(
    name="PADSTACKS",
    factory=Padstacks,
    fields=attribute_field(),
    children={"PADSTACK": PADSTACK_SCHEMA},
    children_attr="padstacks",
)


def parse_padstacks(keyword_params: Iterable[KeywordParam]) -> Padstacks:
    """Builds the $PADSTACKS section from its keyword lines."""
    return RecordStateMachine.run(Padstacks.section_name, PADSTACKS_SCHEMA, keyword_params)


def parse_padstack(keyword_params: Iterable[KeywordParam]) -> Padstack:
    return RecordStateMachine.run_record(Padstacks.section_name, "PADSTACK", PADSTACK_SCHEMA, keyword_params)
