# src/gencad/units.py
import logging

import pint

from .types import Dimension, DimensionUnit

logger = logging.getLogger(__name__)
ureg = pint.UnitRegistry()
Quantity = ureg.Quantity
logger.debug("Pint Unit Registry initialized.")

# Physical length of one coordinate unit for the fixed GenCAD unit systems.
FIXED_UNIT_LENGTHS = {
    DimensionUnit.INCH: Quantity(1, "inch"),
    DimensionUnit.THOU: Quantity(1, "thou"),
    DimensionUnit.MM: Quantity(1, "mm"),
    DimensionUnit.MM100: Quantity(0.01, "mm"),
}

# The USER systems count coordinate units per reference length.
USER_REFERENCE_LENGTHS = {
    DimensionUnit.USER: Quantity(1, "inch"),
    DimensionUnit.USERM: Quantity(1, "cm"),
    DimensionUnit.USERMM: Quantity(1, "mm"),
}


def unit_length(dimension: Dimension) -> Quantity:
    """
    Returns the physical length of one coordinate unit in the given unit system.

    Raises:
        ValueError: If a USER unit system declares zero units per reference.
    """
    if dimension.unit in FIXED_UNIT_LENGTHS:
        return FIXED_UNIT_LENGTHS[dimension.unit]
    if not dimension.units_per_reference:
        raise ValueError(f"Unit system '{dimension}' must declare a positive number of units per reference.")
    return USER_REFERENCE_LENGTHS[dimension.unit] / dimension.units_per_reference


def to_length(value: float, dimension: Dimension, unit: str = "mm") -> Quantity:
    """Converts a coordinate value in `dimension` units to a physical length in `unit`."""
    return (value * unit_length(dimension)).to(unit)


def from_length(length: Quantity, dimension: Dimension) -> float:
    """Converts a physical length to a coordinate value in `dimension` units."""
    return float((length / unit_length(dimension)).to("dimensionless").magnitude)
