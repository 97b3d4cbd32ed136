# src/gencad/parser/exceptions.py
"""
Defines custom, diagnosable exceptions for the GenCAD decoding stage.

The three families mirror the stages that can reject a file:

1.  **Tokenization errors** (`TokenizationError`): the section framing itself is
    broken, e.g. a missing or mismatched `$END` line, or a line that is not a
    `KEYWORD parameter` pair.

2.  **Grammar errors** (`GrammarError`): a parameter does not match the value
    grammar expected at that position (wrong arity, a non-numeric token where a
    number is required, an unterminated quoted string, an unknown enumeration
    name). The primitive grammar only knows what it expected and where it
    stopped; the record state machine enriches the error with the section,
    keyword and line before it propagates further.

3.  **Structural errors** (`UnexpectedKeywordError`, `MissingFieldError`): the
    keyword stream cannot be arranged into records.

Every concrete class implements `get_diagnostic_report`, as mandated by the
`DiagnosableError` base class.
"""
from dataclasses import dataclass, replace
from typing import Optional

from ..errors import DiagnosableError, format_diagnostic_report


class BaseParsingError(DiagnosableError):
    """
    A local, concrete base class for all GenCAD decoding errors.
    """
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Decoding Error",
            details=str(self),
            suggestion="Please check the format and content of the GenCAD file.",
            context={}
        )


@dataclass(eq=False)
class TokenizationError(BaseParsingError):
    """Raised when the section framing or the line structure of the file is malformed."""
    details: str
    line: Optional[int] = None
    user_input: Optional[str] = None

    def __str__(self):
        location = f" (line {self.line})" if self.line is not None else ""
        return f"Tokenization error{location}: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Section Framing Error",
            details=self.details,
            suggestion=(
                "Every section must open with '$NAME' and close with '$ENDNAME' on their own lines, "
                "and every line in between must be an uppercase KEYWORD followed by a single space."
            ),
            context={'line': self.line, 'user_input': self.user_input}
        )


@dataclass(eq=False)
class GrammarError(BaseParsingError):
    """
    Raised when a parameter's text does not match the value grammar expected for
    its keyword and position.

    `expected` names the token kind that was required and `remainder` is the
    unconsumed input at the point of failure. The context fields are filled in
    by `in_context` once the failing keyword is known.
    """
    expected: str
    remainder: str
    section: Optional[str] = None
    keyword: Optional[str] = None
    parameter: Optional[str] = None
    line: Optional[int] = None

    def in_context(self, section: str, keyword: str, parameter: str, line: Optional[int]) -> "GrammarError":
        """Returns a copy of this error bound to the keyword line it was raised for."""
        return replace(self, section=section, keyword=keyword, parameter=parameter, line=line)

    @property
    def position(self) -> Optional[int]:
        """Offset of the failure inside the parameter text, when the parameter is known."""
        if self.parameter is None:
            return None
        return len(self.parameter) - len(self.remainder)

    def __str__(self):
        where = f" in {self.keyword}" if self.keyword else ""
        return f"Expected {self.expected}{where} at '{self.remainder}'"

    def get_diagnostic_report(self) -> str:
        details = f"Expected {self.expected} but found '{self.remainder}'."
        if self.parameter is not None:
            details += f"\nFull parameter: '{self.parameter}' (failure at offset {self.position})."
        return format_diagnostic_report(
            error_type="Parameter Grammar Error",
            details=details,
            suggestion=(
                "Check the number and order of values for this keyword. Numbers must be plain digits "
                "(no 'nan' or 'inf'), and strings containing spaces must be enclosed in double quotes."
            ),
            context={
                'section': self.section,
                'keyword': self.keyword,
                'line': self.line,
                'user_input': self.remainder,
            }
        )


class StructuralError(BaseParsingError):
    """Base class for errors in how keywords are arranged into records."""
    pass


@dataclass(eq=False)
class UnexpectedKeywordError(StructuralError):
    """
    Raised when no open record at any nesting level admits a keyword.

    `context` names the innermost record that was open, or is None when the
    keyword arrived at section level.
    """
    section: str
    keyword: str
    context: Optional[str] = None
    line: Optional[int] = None
    hint: Optional[str] = None

    @property
    def location(self) -> str:
        if self.context:
            return f"{self.context} of ${self.section}"
        return f"${self.section}"

    def __str__(self):
        message = f"Unexpected keyword {self.keyword} in {self.location}"
        if self.hint:
            message += f": {self.hint}"
        return message

    def get_diagnostic_report(self) -> str:
        details = f"The keyword '{self.keyword}' is not valid in {self.location}."
        if self.hint:
            details += f"\n{self.hint}"
        return format_diagnostic_report(
            error_type="Unexpected Keyword",
            details=details,
            suggestion=(
                "Move the line into a record that accepts it, or remove it. Vendor-specific keywords "
                "belong in a separate, unrecognized section."
            ),
            context={'section': self.section, 'keyword': self.keyword, 'line': self.line}
        )


@dataclass(eq=False)
class MissingFieldError(StructuralError):
    """Raised when a record is closed without one of its required fields."""
    section: str
    record: str
    keyword: str
    line: Optional[int] = None

    def __str__(self):
        return f"{self.record} in ${self.section} is missing {self.keyword}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Missing Required Field",
            details=f"The {self.record} record was closed without the required '{self.keyword}' line.",
            suggestion=f"Add a '{self.keyword}' line to the {self.record} record.",
            context={'section': self.section, 'keyword': self.keyword, 'line': self.line}
        )
