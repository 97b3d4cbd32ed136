# src/gencad/interpreter.py
"""
Cross-references a parsed `Document` into name-keyed lookup tables.

The interpretation pass is what downstream tools (footprint extractors,
viewers) consume: pads, padstacks, shapes, components and devices keyed by
name, plus the header that fixes the document's unit system. The HEADER
section is mandatory; sections the pass does not need (BOARD, SIGNALS,
unrecognized ones) are ignored. When a name is defined twice, the later
definition replaces the earlier one.

A file may repeat a section (two $PADS blocks, say). Their tables are merged
name by name, so a pad that only the first block defines is still found; the
tables are not reset when the section appears again.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

import numpy as np

from .config import DEFAULT_CONFIG, GencadConfig
from .document import Document
from .errors import InterpretationError
from .sections import Component, Components, Device, Devices, Header, Pad, Pads, Padstack, Padstacks, Shape, Shapes
from .units import Quantity, from_length, to_length, unit_length

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InterpretedGencadFile:
    """Name-keyed tables of one document. Repeated sections are merged into one table, later names winning."""
    header: Header
    pads: Dict[str, Pad] = field(default_factory=dict)
    padstacks: Dict[str, Padstack] = field(default_factory=dict)
    shapes: Dict[str, Shape] = field(default_factory=dict)
    components: Dict[str, Component] = field(default_factory=dict)
    devices: Dict[str, Device] = field(default_factory=dict)
    config: GencadConfig = field(default=DEFAULT_CONFIG, compare=False)

    @classmethod
    def from_document(cls, document: Document, config: Optional[GencadConfig] = None) -> "InterpretedGencadFile":
        """
        Builds the lookup tables for a parsed document.

        Raises:
            InterpretationError: If the document has no HEADER section, or its
                unit system cannot be converted to physical lengths.
        """
        header = None
        pads: Dict[str, Pad] = {}
        padstacks: Dict[str, Padstack] = {}
        shapes: Dict[str, Shape] = {}
        components: Dict[str, Component] = {}
        devices: Dict[str, Device] = {}

        for section in document.sections:
            if isinstance(section, Header):
                header = section
            elif isinstance(section, Pads):
                pads.update((p.name, p) for p in section.pads)
            elif isinstance(section, Padstacks):
                padstacks.update((p.name, p) for p in section.padstacks)
            elif isinstance(section, Shapes):
                shapes.update((s.name, s) for s in section.shapes)
            elif isinstance(section, Components):
                components.update((c.name, c) for c in section.components)
            elif isinstance(section, Devices):
                devices.update((d.name, d) for d in section.devices)
            else:
                logger.debug(f"Interpretation ignores section ${section.section_name}.")

        if header is None:
            raise InterpretationError("Missing $HEADER section in GenCAD file.")
        try:
            unit_length(header.units)
        except ValueError as e:
            raise InterpretationError(str(e)) from e

        logger.info(
            f"Interpreted document: {len(pads)} pad(s), {len(padstacks)} padstack(s), {len(shapes)} shape(s), "
            f"{len(components)} component(s), {len(devices)} device(s)."
        )
        return cls(
            header=header,
            pads=pads,
            padstacks=padstacks,
            shapes=shapes,
            components=components,
            devices=devices,
            config=config or DEFAULT_CONFIG,
        )

    # --- Cross references ---

    def shape_for(self, component: Component) -> Shape:
        """Returns the shape a component is placed with."""
        try:
            return self.shapes[component.shape.name]
        except KeyError:
            raise InterpretationError(
                f"Shape not found for component {component.name}: {component.shape.name}"
            ) from None

    def device_for(self, component: Component) -> Optional[Device]:
        """Returns the component's device, or None when the document does not define it."""
        return self.devices.get(component.device)

    # --- Units ---

    def to_length(self, value: float) -> Quantity:
        """Converts a coordinate value in the document's units to the configured length unit."""
        return to_length(value, self.header.units, self.config.length_unit)

    def from_length(self, length: Quantity) -> float:
        """Converts a physical length to a coordinate value in the document's units."""
        return from_length(length, self.header.units)

    def pin_positions(self, shape: Shape) -> np.ndarray:
        """
        Returns the pin coordinates of a shape as an (N, 2) array in the
        configured length unit, in pin order.
        """
        scale = unit_length(self.header.units).to(self.config.length_unit).magnitude
        points = np.array([[pin.xy.x, pin.xy.y] for pin in shape.pins], dtype=float).reshape(-1, 2)
        return points * scale
