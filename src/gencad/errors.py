# src/gencad/errors.py
import logging
from abc import abstractmethod
from typing import Any, Dict, Protocol
from typing import runtime_checkable

logger = logging.getLogger(__name__)

# --- User-Facing Exception Hierarchy ---

class GencadError(Exception):
    """Base class for all custom, user-facing errors in the gencad package."""
    pass

class DecodeError(GencadError):
    """
    Raised when a GenCAD document cannot be decoded, whether the failure is in
    section framing, in a parameter's value grammar, or in the record structure.
    The message is a pre-formatted, user-friendly diagnostic report; the typed
    parsing error that caused it is chained as ``__cause__``.
    """
    pass

class SerializationError(GencadError):
    """
    Raised when a model value cannot be rendered to GenCAD text in a way that
    would parse back to the same value.
    """
    pass

class InterpretationError(GencadError):
    """
    Raised by the interpretation pass, e.g. when the mandatory HEADER section
    is missing or a cross reference cannot be resolved.
    """
    pass


# --- Diagnostic Protocol & Base Exception ---

@runtime_checkable
class Diagnosable(Protocol):
    """
    A protocol for exceptions that can generate their own rich diagnostic report.
    """
    def get_diagnostic_report(self) -> str:
        """Generates a complete, user-friendly, multi-line report string."""
        ...

class DiagnosableError(Exception, Diagnosable):
    """
    A common, concrete base class for all internal exceptions that are diagnosable.

    It inherits from `Exception`, so it can be used in `except` clauses, and it
    declares `get_diagnostic_report` abstract: every subclass provides its own
    user-friendly report.
    """
    @abstractmethod
    def get_diagnostic_report(self) -> str:
        """
        Abstract method to generate the diagnostic report.
        Subclasses MUST implement this.
        """
        raise NotImplementedError


# --- Stateless Formatting Utility ---

def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: Dict[str, Any]
) -> str:
    """
    A stateless helper to format the final multi-line report string, ensuring a
    consistent look and feel for all user-facing diagnostics.

    Args:
        error_type: The high-level category of the error (e.g., "Grammar Error").
        details: A detailed, potentially multi-line description of the problem.
        suggestion: Actionable advice for the user to resolve the issue.
        context: A dictionary of contextual information (section, keyword, line,
                 unconsumed user input, source file).

    Returns:
        A formatted, user-friendly diagnostic report string ready for display.
    """
    lines = [
        "\n",
        "================ GenCAD: Actionable Diagnostic Report ================",
        f"Error Type:     {error_type}",
    ]
    if source_file := context.get('source_file'):
        lines.append(f"Source File:    {source_file}")
    if section := context.get('section'):
        lines.append(f"Section:        ${section}")
    if keyword := context.get('keyword'):
        lines.append(f"Keyword:        {keyword}")
    if (line := context.get('line')) is not None:
        lines.append(f"Line:           {line}")
    if (user_input := context.get('user_input')) is not None:
        lines.append(f"User Input:     '{user_input}'")

    lines.append("\nDetails:")
    for line in details.splitlines():
        lines.append(f"  {line}")

    if suggestion:
        lines.append("\nSuggestion:")
        for line in suggestion.splitlines():
            lines.append(f"  {line}")

    lines.append("======================================================================")
    return "\n".join(lines)
