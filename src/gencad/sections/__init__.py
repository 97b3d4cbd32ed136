# src/gencad/sections/__init__.py
from .header import Header, parse_header
from .board import Board, BoardArtwork, Cutout, Filled, Mask, Track, parse_board
from .pads import Pad, Pads, parse_pad, parse_pads
from .padstacks import Padstack, PadstackPad, Padstacks, parse_padstack, parse_padstacks
from .shapes import Fiducial, Pin, Shape, ShapeArtwork, ShapeFid, Shapes, parse_shape, parse_shapes
from .components import (
    Component,
    ComponentArtwork,
    ComponentFid,
    ComponentShape,
    Components,
    parse_component,
    parse_components,
)
from .devices import Device, Devices, PinDesc, PinFunct, parse_device, parse_devices
from .signals import NailLoc, Node, Signal, Signals, parse_signal, parse_signals
from .unknown import Statement, UnknownSection, parse_unknown

# $NAME -> builder for every section kind with a typed model.
SECTION_PARSERS = {
    Header.section_name: parse_header,
    Board.section_name: parse_board,
    Pads.section_name: parse_pads,
    Padstacks.section_name: parse_padstacks,
    Shapes.section_name: parse_shapes,
    Components.section_name: parse_components,
    Devices.section_name: parse_devices,
    Signals.section_name: parse_signals,
}

__all__ = [
    # Section models
    "Header", "Board", "Pads", "Padstacks", "Shapes", "Components", "Devices", "Signals", "UnknownSection",
    # Records and sub-records
    "Cutout", "Mask", "BoardArtwork", "Track", "Filled",
    "Pad",
    "Padstack", "PadstackPad",
    "Shape", "Fiducial", "ShapeArtwork", "ShapeFid", "Pin",
    "Component", "ComponentShape", "ComponentArtwork", "ComponentFid",
    "Device", "PinDesc", "PinFunct",
    "Signal", "Node", "NailLoc",
    "Statement",
    # Section builders
    "SECTION_PARSERS",
    "parse_header", "parse_board", "parse_pads", "parse_padstacks", "parse_shapes",
    "parse_components", "parse_devices", "parse_signals", "parse_unknown",
    # Single-record builders
    "parse_pad", "parse_padstack", "parse_shape", "parse_component", "parse_device", "parse_signal",
]
