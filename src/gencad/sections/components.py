# src/gencad/sections/components.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, List, Optional, Union

from ..formatting import format_flag, format_number, format_string, format_text
from ..parser.grammar import flip, layer, mirror, number, parameter, string, text_line, text_tail, value, xy_ref
from ..parser.state_machine import FieldMode, FieldRule, RecordSchema, RecordStateMachine
from ..parser.tokenizer import KeywordParam
from ..types import Attribute, Layer, Mirror, Text, XYRef
from .common import attribute_field, attribute_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComponentShape:
    """The SHAPE reference of a component: shape name, mirroring and board-side flip."""
    name: str
    mirror: Mirror
    flip: bool

    def to_gencad(self) -> str:
        return f"{format_string(self.name)} {self.mirror} {format_flag(self.flip, 'FLIP')}"


@dataclass(frozen=True)
class ComponentArtwork:
    name: str
    xy: XYRef
    rotation: float
    mirror: Mirror
    flip: bool
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        return [
            f"ARTWORK {format_string(self.name)} {self.xy.to_gencad()} {format_number(self.rotation)} "
            f"{self.mirror} {format_flag(self.flip, 'FLIP')}"
        ] + attribute_lines(self.attributes)


@dataclass(frozen=True)
class ComponentFid:
    name: str
    pad_name: str
    xy: XYRef
    layer: Layer
    rotation: float
    mirror: Mirror
    flip: bool
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        return [
            f"FID {format_string(self.name)} {format_string(self.pad_name)} {self.xy.to_gencad()} "
            f"{self.layer.to_gencad()} {format_number(self.rotation)} {self.mirror} {format_flag(self.flip, 'FLIP')}"
        ] + attribute_lines(self.attributes)


SubComponent = Union[ComponentArtwork, ComponentFid]


@dataclass(frozen=True)
class Component:
    """A placed component instance."""
    name: str
    device: str
    place: XYRef
    layer: Layer
    rotation: float
    shape: ComponentShape
    subcomponents: List[SubComponent] = field(default_factory=list)
    texts: List[Text] = field(default_factory=list)
    sheet: Optional[str] = None
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        lines = [
            f"COMPONENT {format_string(self.name)}",
            f"DEVICE {format_text(self.device)}",
            f"PLACE {self.place.to_gencad()}",
            f"LAYER {self.layer.to_gencad()}",
            f"ROTATION {format_number(self.rotation)}",
            f"SHAPE {self.shape.to_gencad()}",
        ]
        lines.extend(text.to_line() for text in self.texts)
        if self.sheet is not None:
            lines.append(f"SHEET {format_text(self.sheet)}")
        lines.extend(attribute_lines(self.attributes))
        for subcomponent in self.subcomponents:
            lines.extend(subcomponent.to_lines())
        return lines


@dataclass(frozen=True)
class Components:
    section_name: ClassVar[str] = "COMPONENTS"

    components: List[Component] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)

    def to_lines(self) -> List[str]:
        lines = [f"${self.section_name}"] + attribute_lines(self.attributes)
        for component in self.components:
            lines.extend(component.to_lines())
        lines.append(f"$END{self.section_name}")
        return lines


COMPONENT_ARTWORK_SCHEMA = RecordSchema(
    name="ARTWORK",
    factory=ComponentArtwork,
    opener=parameter(string, xy_ref, number, mirror, flip),
    opener_attrs=("name", "xy", "rotation", "mirror", "flip"),
    fields=attribute_field(),
)

COMPONENT_FID_SCHEMA = RecordSchema(
    name="FID",
    factory=ComponentFid,
    opener=parameter(string, string, xy_ref, layer, number, mirror, flip),
    opener_attrs=("name", "pad_name", "xy", "layer", "rotation", "mirror", "flip"),
    fields=attribute_field(),
)

COMPONENT_SCHEMA = RecordSchema(
    name="COMPONENT",
    factory=Component,
    opener=value(string),
    opener_attrs=("name",),
    fields={
        "DEVICE": FieldRule("device", value(text_tail)),
        "PLACE": FieldRule("place", value(xy_ref)),
        "LAYER": FieldRule("layer", value(layer)),
        "ROTATION": FieldRule("rotation", value(number)),
        "SHAPE": FieldRule("shape", parameter(string, mirror, flip, into=ComponentShape)),
        "TEXT": FieldRule("texts", value(text_line), FieldMode.APPEND),
        "SHEET": FieldRule("sheet", value(text_tail)),
        **attribute_field(),
    },
    children={
        "ARTWORK": COMPONENT_ARTWORK_SCHEMA,
        "FID": COMPONENT_FID_SCHEMA,
    },
    children_attr="subcomponents",
    required={
        "device": "DEVICE",
        "place": "PLACE",
        "layer": "LAYER",
        "rotation": "ROTATION",
        "shape": "SHAPE",
    },
)

COMPONENTS_SCHEMA = RecordSchema(
    name="COMPONENTS",
    factory=Components,
    fields=attribute_field(),
    children={"COMPONENT": COMPONENT_SCHEMA},
    children_attr="components",
)


def parse_components(keyword_params: Iterable[KeywordParam]) -> Components:
    """Builds the $COMPONENTS section from its keyword lines."""
    return RecordStateMachine.run(Components.section_name, COMPONENTS_SCHEMA, keyword_params)


def parse_component(keyword_params: Iterable[KeywordParam]) -> Component:
    """Builds a single COMPONENT record, starting at its COMPONENT line."""
    return RecordStateMachine.run_record(Components.section_name, "COMPONENT", COMPONENT_SCHEMA, keyword_params)
