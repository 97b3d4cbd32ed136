# src/gencad/types.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .formatting import format_number, format_string, format_integer

logger = logging.getLogger(__name__)

# The value types in this module are the leaves of the parsed model. They are
# immutable and carry no identity beyond their field values. Each one renders
# its own parameter text with `to_gencad()`.


class Mirror(Enum):
    """Mirroring applied to a placed pad, shape or text."""
    NOT = "0"
    MIRRORX = "MIRRORX"
    MIRRORY = "MIRRORY"

    def __str__(self):
        return self.value


class PadType(Enum):
    FINGER = "FINGER"
    ROUND = "ROUND"
    ANNULAR = "ANNULAR"
    BULLET = "BULLET"
    RECTANGULAR = "RECTANGULAR"
    HEXAGON = "HEXAGON"
    OCTAGON = "OCTAGON"
    POLYGON = "POLYGON"
    UNKNOWN = "UNKNOWN"

    def __str__(self):
        return self.value


class InsertType(Enum):
    """Component insertion style of a shape (INSERT keyword)."""
    TH = "TH"
    AXIAL = "AXIAL"
    RADIAL = "RADIAL"
    DIP = "DIP"
    SIP = "SIP"
    ZIP = "ZIP"
    CONN = "CONN"
    SMD = "SMD"
    OTHER = "OTHER"

    def __str__(self):
        return self.value


class LayerName(Enum):
    TOP = "TOP"
    BOTTOM = "BOTTOM"
    SOLDERMASK_TOP = "SOLDERMASK_TOP"
    SOLDERMASK_BOTTOM = "SOLDERMASK_BOTTOM"
    SILKSCREEN_TOP = "SILKSCREEN_TOP"
    SILKSCREEN_BOTTOM = "SILKSCREEN_BOTTOM"
    SOLDERPASTE_TOP = "SOLDERPASTE_TOP"
    SOLDERPASTE_BOTTOM = "SOLDERPASTE_BOTTOM"
    INNER = "INNER"
    ALL = "ALL"
    # Parameterized layers, always followed by a layer number.
    POWER = "POWER"
    GROUND = "GROUND"
    LAYER = "LAYER"
    LAYERSET = "LAYERSET"

    def __str__(self):
        return self.value


NUMBERED_LAYERS = frozenset({LayerName.POWER, LayerName.GROUND, LayerName.LAYER, LayerName.LAYERSET})


@dataclass(frozen=True)
class Layer:
    """
    A board layer. `INNER` exists both as a plain name and numbered (`INNER3`);
    POWER, GROUND, LAYER and LAYERSET are always numbered.
    """
    name: LayerName
    number: Optional[int] = None

    def __post_init__(self):
        if self.name in NUMBERED_LAYERS and self.number is None:
            raise ValueError(f"Layer {self.name} requires a layer number.")
        if self.number is not None:
            if self.name not in NUMBERED_LAYERS and self.name is not LayerName.INNER:
                raise ValueError(f"Layer {self.name} does not take a layer number.")
            if not 0 <= self.number <= 0xFFFF:
                raise ValueError(f"Layer number {self.number} is outside the range 0-65535.")

    def to_gencad(self) -> str:
        if self.number is None:
            return self.name.value
        return f"{self.name.value}{self.number}"

    def __str__(self):
        return self.to_gencad()


class DimensionUnit(Enum):
    INCH = "INCH"
    THOU = "THOU"
    MM = "MM"
    MM100 = "MM100"
    USER = "USER"
    USERM = "USERM"
    USERMM = "USERMM"

    def __str__(self):
        return self.value


USER_UNITS = frozenset({DimensionUnit.USER, DimensionUnit.USERM, DimensionUnit.USERMM})


@dataclass(frozen=True)
class Dimension:
    """
    The unit system of a document. The USER variants carry the number of
    coordinate units per inch (USER), per centimetre (USERM) or per
    millimetre (USERMM).
    """
    unit: DimensionUnit
    units_per_reference: Optional[int] = None

    def __post_init__(self):
        if (self.unit in USER_UNITS) != (self.units_per_reference is not None):
            raise ValueError(f"Dimension {self.unit} has an invalid units-per-reference value.")

    def to_gencad(self) -> str:
        if self.units_per_reference is None:
            return self.unit.value
        return f"{self.unit.value} {format_integer(self.units_per_reference)}"

    def __str__(self):
        return self.to_gencad()


@dataclass(frozen=True)
class XYRef:
    x: float
    y: float

    def to_gencad(self) -> str:
        return f"{format_number(self.x)} {format_number(self.y)}"


@dataclass(frozen=True)
class LineRef:
    start: XYRef
    end: XYRef

    def to_gencad(self) -> str:
        return f"{self.start.to_gencad()} {self.end.to_gencad()}"


@dataclass(frozen=True)
class CircleRef:
    center: XYRef
    radius: float

    def to_gencad(self) -> str:
        return f"{self.center.to_gencad()} {format_number(self.radius)}"


@dataclass(frozen=True)
class RectangleRef:
    """A rectangle given by its origin corner, width (x) and height (y)."""
    origin: XYRef
    x: float
    y: float

    def to_gencad(self) -> str:
        return f"{self.origin.to_gencad()} {format_number(self.x)} {format_number(self.y)}"


@dataclass(frozen=True)
class CircularArcRef:
    start: XYRef
    end: XYRef
    center: XYRef

    def to_gencad(self) -> str:
        return f"{self.start.to_gencad()} {self.end.to_gencad()} {self.center.to_gencad()}"


@dataclass(frozen=True)
class EllipticalArcRef:
    start: XYRef
    end: XYRef
    center: XYRef
    major: float
    minor: float

    def to_gencad(self) -> str:
        return (
            f"{self.start.to_gencad()} {self.end.to_gencad()} {self.center.to_gencad()} "
            f"{format_number(self.major)} {format_number(self.minor)}"
        )


ArcRef = Union[CircularArcRef, EllipticalArcRef]


@dataclass(frozen=True)
class Attribute:
    """A free-form (category, name, data) annotation."""
    category: str
    name: str
    data: str

    def to_gencad(self) -> str:
        return f"{format_string(self.category)} {format_string(self.name)} {format_string(self.data)}"

    def to_line(self) -> str:
        return f"ATTRIBUTE {self.to_gencad()}"


@dataclass(frozen=True)
class TextPar:
    """Text placement parameters: size, rotation, mirror, layer, the text and its bounding area."""
    text_size: float
    rotation: float
    mirror: Mirror
    layer: Layer
    text: str
    area: RectangleRef

    def to_gencad(self) -> str:
        return (
            f"{format_number(self.text_size)} {format_number(self.rotation)} {self.mirror} "
            f"{self.layer.to_gencad()} {format_string(self.text)} {self.area.to_gencad()}"
        )


@dataclass(frozen=True)
class Text:
    """A TEXT line: an origin followed by the text placement parameters."""
    origin: XYRef
    text: TextPar

    def to_gencad(self) -> str:
        return f"{self.origin.to_gencad()} {self.text.to_gencad()}"

    def to_line(self) -> str:
        return f"TEXT {self.to_gencad()}"


def shape_line(shape: Union[LineRef, CircularArcRef, EllipticalArcRef, CircleRef, RectangleRef]) -> str:
    """Renders one of the four outline primitives together with its keyword."""
    if isinstance(shape, LineRef):
        keyword = "LINE"
    elif isinstance(shape, (CircularArcRef, EllipticalArcRef)):
        keyword = "ARC"
    elif isinstance(shape, CircleRef):
        keyword = "CIRCLE"
    elif isinstance(shape, RectangleRef):
        keyword = "RECTANGLE"
    else:
        raise TypeError(f"Not an outline primitive: {shape!r}")
    return f"{keyword} {shape.to_gencad()}"


OutlineShape = Union[LineRef, CircularArcRef, EllipticalArcRef, CircleRef, RectangleRef]
