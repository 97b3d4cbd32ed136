# src/gencad/sections/signals.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, List

from ..formatting import format_string
from ..parser.grammar import layer, parameter, string, value, xy_ref
from ..parser.state_machine import FieldMode, FieldRule, RecordSchema, RecordStateMachine
from ..parser.tokenizer import KeywordParam
from ..types import Attribute, Layer, XYRef
from .common import attribute_field, attribute_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Node:
    """NODE: one component pin connected to the signal."""
    component_name: str
    pin_name: str

    def to_line(self) -> str:
        return f"NODE {format_string(self.component_name)} {format_string(self.pin_name)}"


@dataclass(frozen=True)
class NailLoc:
    """NAILLOC: a test-fixture nail location on the signal."""
    component_name: str
    pin_name: str
    tp_name: str
    xy: XYRef
    tan: str
    tin: str
    probe: str
    layer: Layer

    def to_line(self) -> str:
        fields = [
            format_string(self.component_name),
            format_string(self.pin_name),
            format_string(self.tp_name),
            self.xy.to_gencad(),
            format_string(self.tan),
            format_string(self.tin),
            format_string(self.probe),
            self.layer.to_gencad(),
        ]
        return "NAILLOC " + " ".join(fields)


@dataclass(frozen=True)
class Signal:
    name: str
    nodes: List[Node] = field(default_factory=list)
    nail_locations: List[NailLoc] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        lines = [f"SIGNAL {format_string(self.name)}"]
        lines.extend(node.to_line() for node in self.nodes)
        lines.extend(nail.to_line() for nail in self.nail_locations)
        return lines + attribute_lines(self.attributes)


@dataclass(frozen=True)
class Signals:
    section_name: ClassVar[str] = "SIGNALS"

    signals: List[Signal] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        lines = [f"${self.section_name}"] + attribute_lines(self.attributes)
        for signal in self.signals:
            lines.extend(signal.to_lines())
        lines.append(f"$END{self.section_name}")
        return lines


SIGNAL_SCHEMA = RecordSchema(
    name="SIGNAL",
    factory=Signal,
    opener=value(string),
    opener_attrs=("name",),
    fields={
        "NODE": FieldRule("nodes", parameter(string, string, into=Node), FieldMode.APPEND),
        "NAILLOC": FieldRule(
            "nail_locations",
            parameter(string, string, string, xy_ref, string, string, string, layer, into=NailLoc),
            FieldMode.APPEND,
        ),
        **attribute_field(),
    },
)

SIGNALS_SCHEMA = RecordSchema(
    name="SIGNALS",
    factory=Signals,
    fields=attribute_field(),
    children={"SIGNAL": SIGNAL_SCHEMA},
    children_attr="signals",
)


def parse_signals(keyword_params: Iterable[KeywordParam]) -> Signals:
    """Builds the $SIGNALS section from its keyword lines."""
    return RecordStateMachine.run(Signals.section_name, SIGNALS_SCHEMA, keyword_params)


def parse_signal(keyword_params: Iterable[KeywordParam]) -> Signal:
    return RecordStateMachine.run_record(Signals.section_name, "SIGNAL", SIGNAL_SCHEMA, keyword_params)
