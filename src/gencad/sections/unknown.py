# src/gencad/sections/unknown.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from ..parser.tokenizer import KeywordParam

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Statement:
    """One uninterpreted keyword line."""
    keyword: str
    parameter: str

    def to_line(self) -> str:
        return f"{self.keyword} {self.parameter}"


@dataclass(frozen=True)
class UnknownSection:
    """
    A section this library does not model (vendor extensions, newer revisions
    of the format). Its lines are kept verbatim and in order so the document
    still serializes back to the same text.
    """
    name: str
    statements: List[Statement] = field(default_factory=list)

    @property
    def section_name(self) -> str:
        return self.name

    def to_lines(self) -> List[str]:
        return [f"${self.name}"] + [s.to_line() for s in self.statements] + [f"$END{self.name}"]


def parse_unknown(name: str, keyword_params: Iterable[KeywordParam]) -> UnknownSection:
    statements = [Statement(kp.keyword, kp.parameter) for kp in keyword_params]
    logger.debug(f"Keeping unrecognized section ${name} with {len(statements)} statement(s) verbatim.")
    return UnknownSection(name, statements)
