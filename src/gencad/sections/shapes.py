# src/gencad/sections/shapes.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, List, Optional, Union

from ..formatting import format_number, format_string
from ..parser.grammar import insert_type, layer, mirror, number, parameter, string, value, xy_ref
from ..parser.state_machine import FieldMode, FieldRule, RecordSchema, RecordStateMachine
from ..parser.tokenizer import KeywordParam
from ..types import Attribute, InsertType, Layer, Mirror, OutlineShape, XYRef, shape_line
from .common import attribute_field, attribute_lines, outline_fields

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fiducial:
    """A FIDUCIAL element of a shape outline."""
    xy: XYRef

    def to_line(self) -> str:
        return f"FIDUCIAL {self.xy.to_gencad()}"


ShapeElement = Union[OutlineShape, Fiducial]


@dataclass(frozen=True)
class ShapeArtwork:
    """Artwork placed within a shape."""
    name: str
    xy: XYRef
    rotation: float
    mirror: Mirror
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        return [
            f"ARTWORK {format_string(self.name)} {self.xy.to_gencad()} "
            f"{format_number(self.rotation)} {self.mirror}"
        ] + attribute_lines(self.attributes)


@dataclass(frozen=True)
class PlacedPad:
    """A pad or padstack placed within a shape, by name, at a position and layer."""
    keyword: ClassVar[str] = ""

    name: str
    pad_name: str
    xy: XYRef
    layer: Layer
    rotation: float
    mirror: Mirror
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        return [
            f"{self.keyword} {format_string(self.name)} {format_string(self.pad_name)} {self.xy.to_gencad()} "
            f"{self.layer.to_gencad()} {format_number(self.rotation)} {self.mirror}"
        ] + attribute_lines(self.attributes)


@dataclass(frozen=True)
class ShapeFid(PlacedPad):
    keyword: ClassVar[str] = "FID"


@dataclass(frozen=True)
class Pin(PlacedPad):
    keyword: ClassVar[str] = "PIN"


SubShape = Union[ShapeArtwork, ShapeFid, Pin]


@dataclass(frozen=True)
class Shape:
    """A footprint: outline elements, placed pins, fiducials and artwork."""
    name: str
    elements: List[ShapeElement] = field(default_factory=list)
    insert: Optional[InsertType] = None
    height: Optional[float] = None
    subshapes: List[SubShape] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)

    @property
    def pins(self) -> List[Pin]:
        return [s for s in self.subshapes if isinstance(s, Pin)]

    def to_lines(self) -> List[str]:
        lines = [f"SHAPE {format_string(self.name)}"]
        for element in self.elements:
            lines.append(element.to_line() if isinstance(element, Fiducial) else shape_line(element))
        if self.insert is not None:
            lines.append(f"INSERT {self.insert}")
        if self.height is not None:
            lines.append(f"HEIGHT {format_number(self.height)}")
        # Shape attributes go before the sub-records, which would otherwise claim them.
        lines.extend(attribute_lines(self.attributes))
        for subshape in self.subshapes:
            lines.extend(subshape.to_lines())
        return lines


@dataclass(frozen=True)
class Shapes:
    section_name: ClassVar[str] = "SHAPES"

    shapes: List[Shape] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        lines = [f"${self.section_name}"] + attribute_lines(self.attributes)
        for shape in self.shapes:
            lines.extend(shape.to_lines())
        lines.append(f"$END{self.section_name}")
        return lines


_PLACED_PAD_OPENER = parameter(string, string, xy_ref, layer, number, mirror)
_PLACED_PAD_ATTRS = ("name", "pad_name", "xy", "layer", "rotation", "mirror")

SHAPE_ARTWORK_SCHEMA = RecordSchema(
    name="ARTWORK",
    factory=ShapeArtwork,
    opener=parameter(string, xy_ref, number, mirror),
    opener_attrs=("name", "xy", "rotation", "mirror"),
    fields=attribute_field(),
)

SHAPE_FID_SCHEMA = RecordSchema(
    name="FID",
    factory=ShapeFid,
    opener=_PLACED_PAD_OPENER,
    opener_attrs=_PLACED_PAD_ATTRS,
    fields=attribute_field(),
)

PIN_SCHEMA = RecordSchema(
    name="PIN",
    factory=Pin,
    opener=_PLACED_PAD_OPENER,
    opener_attrs=_PLACED_PAD_ATTRS,
    fields=attribute_field(),
)

SHAPE_SCHEMA = RecordSchema(
    name="SHAPE",
    factory=Shape,
    opener=value(string),
    opener_attrs=("name",),
    fields={
        **outline_fields("elements"),
        "FIDUCIAL": FieldRule("elements", parameter(xy_ref, into=Fiducial), FieldMode.APPEND),
        "INSERT": FieldRule("insert", value(insert_type)),
        "HEIGHT": FieldRule("height", value(number)),
        **attribute_field(),
    },
    children={
        "ARTWORK": SHAPE_ARTWORK_SCHEMA,
        "FID": SHAPE_FID_SCHEMA,
        "PIN": PIN_SCHEMA,
    },
    children_attr="subshapes",
    # An INSERT seen before this SHAPE is its default insertion style.
    inherit={"insert": "default_insert"},
)

SHAPES_SCHEMA = RecordSchema(
    name="SHAPES",
    factory=Shapes,
    fields={
        "INSERT": FieldRule("default_insert", value(insert_type), FieldMode.REPLACE),
        **attribute_field(),
    },
    children={"SHAPE": SHAPE_SCHEMA},
    children_attr="shapes",
    state_attrs=("default_insert",),
)


def parse_shapes(keyword_params: Iterable[KeywordParam]) -> Shapes:
    """Builds the $SHAPES section from its keyword lines."""
    return RecordStateMachine.run(Shapes.section_name, SHAPES_SCHEMA, keyword_params)


def parse_shape(keyword_params: Iterable[KeywordParam]) -> Shape:
    """Builds a single SHAPE record, starting at its SHAPE line."""
    return RecordStateMachine.run_record(Shapes.section_name, "SHAPE", SHAPE_SCHEMA, keyword_params)
