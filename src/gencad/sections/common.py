# src/gencad/sections/common.py
from typing import Dict, List, Sequence

from ..parser.grammar import arc_ref, attribute, circle_ref, line_ref, rectangle_ref, value
from ..parser.state_machine import FieldMode, FieldRule
from ..types import Attribute, OutlineShape, shape_line

# Keyword tables shared by several sections.

def outline_fields(attr: str) -> Dict[str, FieldRule]:
    """LINE/ARC/CIRCLE/RECTANGLE accumulating, in file order, into one list."""
    return {
        "LINE": FieldRule(attr, value(line_ref), FieldMode.APPEND),
        "ARC": FieldRule(attr, value(arc_ref), FieldMode.APPEND),
        "CIRCLE": FieldRule(attr, value(circle_ref), FieldMode.APPEND),
        "RECTANGLE": FieldRule(attr, value(rectangle_ref), FieldMode.APPEND),
    }


def attribute_field() -> Dict[str, FieldRule]:
    return {"ATTRIBUTE": FieldRule("attributes", value(attribute), FieldMode.APPEND)}


def outline_lines(shapes: Sequence[OutlineShape]) -> List[str]:
    return [shape_line(s) for s in shapes]


def attribute_lines(attributes: Sequence[Attribute]) -> List[str]:
    return [a.to_line() for a in attributes]
