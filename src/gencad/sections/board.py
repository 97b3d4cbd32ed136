# src/gencad/sections/board.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, List, Optional, Union

from ..formatting import format_flag, format_number, format_string
from ..parser.grammar import filled, layer, number, parameter, string, text_line, value
from ..parser.state_machine import FieldMode, FieldRule, RecordSchema, RecordStateMachine
from ..parser.tokenizer import KeywordParam
from ..types import Attribute, Layer, OutlineShape, Text, shape_line
from .common import attribute_field, attribute_lines, outline_fields, outline_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Track:
    """TRACK: selects the named track width for the following artwork primitives."""
    name: str

    def to_line(self) -> str:
        return f"TRACK {format_string(self.name)}"


@dataclass(frozen=True)
class Filled:
    """FILLED: whether the following closed artwork primitives are filled."""
    value: bool

    def to_line(self) -> str:
        return f"FILLED {format_flag(self.value, 'YES')}"


ArtworkComponent = Union[OutlineShape, Track, Filled, Text]


@dataclass(frozen=True)
class Cutout:
    name: str
    shapes: List[OutlineShape] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        return [f"CUTOUT {format_string(self.name)}"] + outline_lines(self.shapes) + attribute_lines(self.attributes)


@dataclass(frozen=True)
class Mask:
    name: str
    layer: Layer
    shapes: List[OutlineShape] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        return (
            [f"MASK {format_string(self.name)} {self.layer.to_gencad()}"]
            + outline_lines(self.shapes)
            + attribute_lines(self.attributes)
        )


@dataclass(frozen=True)
class BoardArtwork:
    name: str
    layer: Layer
    components: List[ArtworkComponent] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        lines = [f"ARTWORK {format_string(self.name)} {self.layer.to_gencad()}"]
        for component in self.components:
            if isinstance(component, (Track, Filled, Text)):
                lines.append(component.to_line())
            else:
                lines.append(shape_line(component))
        return lines + attribute_lines(self.attributes)


Subsection = Union[Cutout, Mask, BoardArtwork]


@dataclass(frozen=True)
class Board:
    """The $BOARD section: outline, cutouts, masks and board-level artwork."""
    section_name: ClassVar[str] = "BOARD"

    thickness: Optional[float] = None
    outline_shapes: List[OutlineShape] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)
    subsections: List[Subsection] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        lines = [f"${self.section_name}"]
        if self.thickness is not None:
            lines.append(f"THICKNESS {format_number(self.thickness)}")
        lines.extend(outline_lines(self.outline_shapes))
        lines.extend(attribute_lines(self.attributes))
        for subsection in self.subsections:
            lines.extend(subsection.to_lines())
        lines.append(f"$END{self.section_name}")
        return lines


_ARTWORK_ONLY_HINT = "{} is only valid inside an ARTWORK sub-record of $BOARD."

CUTOUT_SCHEMA = RecordSchema(
    name="CUTOUT",
    factory=Cutout,
    opener=value(string),
    opener_attrs=("name",),
    fields={**outline_fields("shapes"), **attribute_field()},
)

MASK_SCHEMA = RecordSchema(
    name="MASK",
    factory=Mask,
    opener=parameter(string, layer),
    opener_attrs=("name", "layer"),
    fields={**outline_fields("shapes"), **attribute_field()},
)

BOARD_ARTWORK_SCHEMA = RecordSchema(
    name="ARTWORK",
    factory=BoardArtwork,
    opener=parameter(string, layer),
    opener_attrs=("name", "layer"),
    fields={
        **outline_fields("components"),
        "TRACK": FieldRule("components", parameter(string, into=Track), FieldMode.APPEND),
        "FILLED": FieldRule("components", parameter(filled, into=Filled), FieldMode.APPEND),
        "TEXT": FieldRule("components", value(text_line), FieldMode.APPEND),
        **attribute_field(),
    },
)

BOARD_SCHEMA = RecordSchema(
    name="BOARD",
    factory=Board,
    fields={
        "THICKNESS": FieldRule("thickness", value(number)),
        **outline_fields("outline_shapes"),
        **attribute_field(),
    },
    children={
        "CUTOUT": CUTOUT_SCHEMA,
        "MASK": MASK_SCHEMA,
        "ARTWORK": BOARD_ARTWORK_SCHEMA,
    },
    children_attr="subsections",
    hints={keyword: _ARTWORK_ONLY_HINT.format(keyword) for keyword in ("TRACK", "FILLED", "TEXT")},
)


def parse_board(keyword_params: Iterable[KeywordParam]) -> Board:
    """Builds the $BOARD section from its keyword lines."""
    return RecordStateMachine.run(Board.section_name, BOARD_SCHEMA, keyword_params)
