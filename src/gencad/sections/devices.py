# src/gencad/sections/devices.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, List, Optional

from ..formatting import format_integer, format_string, format_text
from ..parser.grammar import parameter, positive_integer, string, text_tail, value
from ..parser.state_machine import FieldMode, FieldRule, RecordSchema, RecordStateMachine
from ..parser.tokenizer import KeywordParam
from ..types import Attribute
from .common import attribute_field, attribute_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PinDesc:
    """PINDESC: a free-text description of one pin."""
    pin_name: str
    text: str

    def to_line(self) -> str:
        return f"PINDESC {format_string(self.pin_name)} {format_text(self.text)}"


@dataclass(frozen=True)
class PinFunct:
    """PINFUNCT: the function of one pin."""
    pin_name: str
    text: str

    def to_line(self) -> str:
        return f"PINFUNCT {format_string(self.pin_name)} {format_text(self.text)}"


@dataclass(frozen=True)
class Device:
    """A device (part) definition referenced by components."""
    name: str
    part: Optional[str] = None
    device_type: Optional[str] = None
    style: Optional[str] = None
    package: Optional[str] = None
    pin_descriptions: List[PinDesc] = field(default_factory=list)
    pin_functions: List[PinFunct] = field(default_factory=list)
    pincount: Optional[int] = None
    value: Optional[str] = None
    tol: Optional[str] = None
    ntol: Optional[str] = None
    ptol: Optional[str] = None
    volts: Optional[str] = None
    desc: Optional[str] = None
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        lines = [f"DEVICE {format_text(self.name)}"]

        def optional(keyword: str, text: Optional[str]):
            if text is not None:
                lines.append(f"{keyword} {format_text(text)}")

        optional("PART", self.part)
        optional("TYPE", self.device_type)
        optional("STYLE", self.style)
        optional("PACKAGE", self.package)
        lines.extend(p.to_line() for p in self.pin_descriptions)
        lines.extend(p.to_line() for p in self.pin_functions)
        if self.pincount is not None:
            lines.append(f"PINCOUNT {format_integer(self.pincount)}")
        optional("VALUE", self.value)
        optional("TOL", self.tol)
        optional("NTOL", self.ntol)
        optional("PTOL", self.ptol)
        optional("VOLTS", self.volts)
        optional("DESC", self.desc)
        return lines + attribute_lines(self.attributes)


@dataclass(frozen=True)
class Devices:
    section_name: ClassVar[str] = "DEVICES"

    devices: List[Device] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        lines = [f"${self.section_name}"] + attribute_lines(self.attributes)
        for device in self.devices:
            lines.extend(device.to_lines())
        lines.append(f"$END{self.section_name}")
        return lines


_free_text = value(text_tail)

DEVICE_SCHEMA = RecordSchema(
    name="DEVICE",
    factory=Device,
    opener=_free_text,
    opener_attrs=("name",),
    fields={
        "PART": FieldRule("part", _free_text),
        "TYPE": FieldRule("device_type", _free_text),
        "STYLE": FieldRule("style", _free_text),
        "PACKAGE": FieldRule("package", _free_text),
        "PINDESC": FieldRule("pin_descriptions", parameter(string, text_tail, into=PinDesc), FieldMode.APPEND),
        "PINFUNCT": FieldRule("pin_functions", parameter(string, text_tail, into=PinFunct), FieldMode.APPEND),
        "PINCOUNT": FieldRule("pincount", value(positive_integer)),
        "VALUE": FieldRule("value", _free_text),
        "TOL": FieldRule("tol", _free_text),
        "NTOL": FieldRule("ntol", _free_text),
        "PTOL": FieldRule("ptol", _free_text),
        "VOLTS": FieldRule("volts", _free_text),
        "DESC": FieldRule("desc", _free_text),
        **attribute_field(),
    },
)

DEVICES_SCHEMA = RecordSchema(
    name="DEVICES",
    factory=Devices,
    fields=attribute_field(),
    children={"DEVICE": DEVICE_SCHEMA},
    children_attr="devices",
)


def parse_devices(keyword_params: Iterable[KeywordParam]) -> Devices:
    """Builds the $DEVICES section from its keyword lines."""
    return RecordStateMachine.run(Devices.section_name, DEVICES_SCHEMA, keyword_params)


def parse_device(keyword_params: Iterable[KeywordParam]) -> Device:
    return RecordStateMachine.run_record(Devices.section_name, "DEVICE", DEVICE_SCHEMA, keyword_params)
