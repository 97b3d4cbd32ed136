# src/gencad/sections/header.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, List

from ..formatting import format_number, format_text
from ..parser.grammar import attribute, dimension, number, text_tail, value, xy_ref
from ..parser.state_machine import FieldMode, FieldRule, RecordSchema, RecordStateMachine
from ..parser.tokenizer import KeywordParam
from ..types import Attribute, Dimension, XYRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Header:
    """The mandatory $HEADER section: format version, provenance and unit system."""
    section_name: ClassVar[str] = "HEADER"

    gencad_version: float
    user: str
    drawing: str
    revision: str
    units: Dimension
    origin: XYRef
    intertrack: float
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        lines = [
            f"${self.section_name}",
            f"GENCAD {format_number(self.gencad_version)}",
            f"USER {format_text(self.user)}",
            f"DRAWING {format_text(self.drawing)}",
            f"REVISION {format_text(self.revision)}",
            f"UNITS {self.units.to_gencad()}",
            f"ORIGIN {self.origin.to_gencad()}",
            f"INTERTRACK {format_number(self.intertrack)}",
        ]
        lines.extend(a.to_line() for a in self.attributes)
        lines.append(f"$END{self.section_name}")
        return lines


HEADER_SCHEMA = RecordSchema(
    name="HEADER",
    factory=Header,
    fields={
        "GENCAD": FieldRule("gencad_version", value(number)),
        "USER": FieldRule("user", value(text_tail)),
        "DRAWING": FieldRule("drawing", value(text_tail)),
        "REVISION": FieldRule("revision", value(text_tail)),
        "UNITS": FieldRule("units", value(dimension)),
        "ORIGIN": FieldRule("origin", value(xy_ref)),
        "INTERTRACK": FieldRule("intertrack", value(number)),
        "ATTRIBUTE": FieldRule("attributes", value(attribute), FieldMode.APPEND),
    },
    required={
        "gencad_version": "GENCAD",
        "user": "USER",
        "drawing": "DRAWING",
        "revision": "REVISION",
        "units": "UNITS",
        "origin": "ORIGIN",
        "intertrack": "INTERTRACK",
    },
)


def parse_header(keyword_params: Iterable[KeywordParam]) -> Header:
    """Builds the $HEADER section from its keyword lines."""
    return RecordStateMachine.run(Header.section_name, HEADER_SCHEMA, keyword_params)
