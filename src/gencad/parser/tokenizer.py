# src/gencad/parser/tokenizer.py
"""
Splits the raw bytes of a GenCAD file into sections of keyword/parameter pairs.

The tokenizer knows nothing about what any keyword means. It recognizes the
`$NAME` / `$ENDNAME` framing, splits every line in between into an uppercase
keyword, a single space and the rest of the line, and tolerates `\\n`, `\\r\\n`
and runs of blank lines as terminators.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from .exceptions import TokenizationError

logger = logging.getLogger(__name__)

# Leading carriage returns, at least one line feed, then any further blank terminators.
NEWLINES_REGEX = re.compile(r"\r*\n[\r\n]*")
BLANK_LINES_REGEX = re.compile(r"[\r\n]*")
SECTION_START_REGEX = re.compile(r"\$([A-Z]+)")
SECTION_END_REGEX = re.compile(r"\$END([A-Z]+)")
KEYWORD_PARAM_REGEX = re.compile(r"([A-Z]+) ([^\r\n]*)")


@dataclass(frozen=True)
class KeywordParam:
    """A keyword and the parameter text that follows it on the same line."""
    keyword: str
    parameter: str
    line: Optional[int] = field(default=None, compare=False)


@dataclass(frozen=True)
class RawSection:
    """A `$NAME ... $ENDNAME` block before any interpretation of its lines."""
    name: str
    keyword_params: List[KeywordParam]
    line: Optional[int] = field(default=None, compare=False)


class _Cursor:
    """Position and line number inside the decoded file text."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def match(self, regex: re.Pattern) -> Optional[re.Match]:
        return regex.match(self.text, self.pos)

    def advance(self, m: re.Match):
        self.line += m.group().count("\n")
        self.pos = m.end()

    def current_line(self) -> str:
        end = len(self.text)
        for terminator in ("\r", "\n"):
            found = self.text.find(terminator, self.pos)
            if found != -1:
                end = min(end, found)
        return self.text[self.pos:end]

    def expect_newlines(self, allow_eof: bool = False):
        if allow_eof and self.at_end():
            return
        m = self.match(NEWLINES_REGEX)
        if not m:
            raise TokenizationError(
                details="Expected a line terminator.",
                line=self.line,
                user_input=self.current_line(),
            )
        self.advance(m)


def tokenize(data: bytes) -> List[RawSection]:
    """
    Tokenizes a complete GenCAD file.

    Raises:
        TokenizationError: If the bytes are not UTF-8, if the file holds no
            section, or if any section's framing or line structure is broken.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise TokenizationError(details=f"The file is not valid UTF-8 text: {e}") from e

    cursor = _Cursor(text)
    cursor.advance(cursor.match(BLANK_LINES_REGEX))

    sections: List[RawSection] = []
    while not cursor.at_end():
        sections.append(_read_section(cursor))

    if not sections:
        raise TokenizationError(details="The file does not contain any section.", line=cursor.line)
    logger.debug(f"Tokenized {len(sections)} section(s): {[s.name for s in sections]}")
    return sections


def _read_section(cursor: _Cursor) -> RawSection:
    start_line = cursor.line
    start = cursor.match(SECTION_START_REGEX)
    if not start:
        raise TokenizationError(
            details="Expected a section start line of the form '$NAME'.",
            line=cursor.line,
            user_input=cursor.current_line(),
        )
    name = start.group(1)
    cursor.advance(start)
    cursor.expect_newlines()

    keyword_params: List[KeywordParam] = []
    while True:
        end = cursor.match(SECTION_END_REGEX)
        if end:
            break
        kp = cursor.match(KEYWORD_PARAM_REGEX)
        if not kp:
            if cursor.at_end():
                raise TokenizationError(details=f"Section ${name} is missing its closing $END{name} line.", line=cursor.line)
            raise TokenizationError(
                details=f"Expected a 'KEYWORD parameter' line or $END{name} inside section ${name}.",
                line=cursor.line,
                user_input=cursor.current_line(),
            )
        keyword_params.append(KeywordParam(kp.group(1), kp.group(2), line=cursor.line))
        cursor.advance(kp)
        if cursor.at_end():
            raise TokenizationError(details=f"Section ${name} is missing its closing $END{name} line.", line=cursor.line)
        cursor.expect_newlines()

    if end.group(1) != name:
        raise TokenizationError(
            details=f"Section ${name} (opened on line {start_line}) is closed by $END{end.group(1)}.",
            line=cursor.line,
            user_input=cursor.current_line(),
        )
    cursor.advance(end)
    cursor.expect_newlines(allow_eof=True)
    logger.debug(f"Section ${name}: {len(keyword_params)} keyword line(s).")
    return RawSection(name, keyword_params, line=start_line)
