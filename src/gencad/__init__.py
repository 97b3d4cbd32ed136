# src/gencad/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.debug("gencad package initialized.")

from .units import ureg, pint, Quantity
from .types import (
    Attribute,
    CircleRef,
    CircularArcRef,
    Dimension,
    DimensionUnit,
    EllipticalArcRef,
    InsertType,
    Layer,
    LayerName,
    LineRef,
    Mirror,
    PadType,
    RectangleRef,
    Text,
    TextPar,
    XYRef,
)
from .config import GencadConfig, ConfigParsingError, load_config
from .document import Document, parse, parse_file, serialize, write_file
from .interpreter import InterpretedGencadFile
from .errors import GencadError, DecodeError, SerializationError, InterpretationError

__all__ = [
    # Units
    "ureg", "pint", "Quantity",
    # Value types
    "Attribute", "CircleRef", "CircularArcRef", "Dimension", "DimensionUnit", "EllipticalArcRef",
    "InsertType", "Layer", "LayerName", "LineRef", "Mirror", "PadType", "RectangleRef", "Text",
    "TextPar", "XYRef",
    # Configuration
    "GencadConfig", "ConfigParsingError", "load_config",
    # Document
    "Document", "parse", "parse_file", "serialize", "write_file",
    # Interpretation
    "InterpretedGencadFile",
    # Top-Level Errors (Actionable Diagnostics)
    "GencadError", "DecodeError", "SerializationError", "InterpretationError",
]
