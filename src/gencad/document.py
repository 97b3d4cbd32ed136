# src/gencad/document.py
"""
Whole-file entry points: `parse` turns GenCAD bytes into a `Document` and
`serialize` renders a `Document` back to bytes.

A document is the ordered list of its sections. Recognized section names are
dispatched to their typed builders through `SECTION_PARSERS`; every other
section is kept verbatim as an `UnknownSection`. Parsing is all-or-nothing:
the first tokenization, grammar or structural error aborts the whole parse.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .config import DEFAULT_CONFIG, GencadConfig
from .errors import DecodeError, DiagnosableError, SerializationError
from .parser.tokenizer import RawSection, tokenize
from .sections import (
    SECTION_PARSERS,
    Board,
    Components,
    Devices,
    Header,
    Pads,
    Padstacks,
    Shapes,
    Signals,
    UnknownSection,
    parse_unknown,
)

logger = logging.getLogger(__name__)

Section = Union[Header, Board, Pads, Padstacks, Shapes, Components, Devices, Signals, UnknownSection]


@dataclass(frozen=True)
class Document:
    """A parsed GenCAD file: its sections in file order."""
    sections: List[Section] = field(default_factory=list)

    def sections_named(self, name: str) -> List[Section]:
        return [s for s in self.sections if s.section_name == name]

    def to_lines(self) -> List[str]:
        lines: List[str] = []
        for section in self.sections:
            lines.extend(section.to_lines())
        return lines


def build_section(raw: RawSection) -> Section:
    """Builds the typed model for one tokenized section."""
    builder = SECTION_PARSERS.get(raw.name)
    if builder is None:
        return parse_unknown(raw.name, raw.keyword_params)
    return builder(raw.keyword_params)


def decode(data: bytes) -> Document:
    """
    Parses GenCAD bytes, letting the typed parsing errors propagate.

    Raises:
        TokenizationError, GrammarError, StructuralError: On the first problem found.
    """
    sections = [build_section(raw) for raw in tokenize(data)]
    return Document(sections)


def parse(data: bytes, source: Optional[Union[str, Path]] = None) -> Document:
    """
    Parses a complete GenCAD file.

    Raises:
        DecodeError: With an actionable diagnostic report; the typed parsing
            error is available as ``__cause__``.
    """
    try:
        document = decode(data)
    except DiagnosableError as e:
        origin = f" from {source}" if source is not None else ""
        logger.error(f"Failed to parse GenCAD data{origin}: {e}")
        raise DecodeError(e.get_diagnostic_report()) from e
    logger.info(f"Parsed GenCAD document with {len(document.sections)} section(s).")
    return document


def parse_file(path: Union[str, Path]) -> Document:
    """Reads a whole file into memory and parses it."""
    path = Path(path)
    return parse(path.read_bytes(), source=path)


def serialize(document: Document, config: Optional[GencadConfig] = None) -> bytes:
    """
    Renders a document to GenCAD bytes. Every line, including the last, ends
    with the configured line terminator.

    Raises:
        SerializationError: If a value cannot be rendered so that it parses back
            to itself, or the text cannot be encoded in the configured encoding.
    """
    config = config or DEFAULT_CONFIG
    lines = document.to_lines()
    text = "".join(line + config.line_terminator for line in lines)
    try:
        data = text.encode(config.encoding)
    except UnicodeEncodeError as e:
        raise SerializationError(f"Document cannot be encoded as {config.encoding}: {e}") from e
    logger.info(f"Serialized {len(document.sections)} section(s) into {len(lines)} line(s).")
    return data


def write_file(document: Document, path: Union[str, Path], config: Optional[GencadConfig] = None):
    Path(path).write_bytes(serialize(document, config))
