"""
Centralized error handling for physolver.

Provides a hierarchy of custom exceptions with user-friendly messages,
suggestions for fixes, and error recovery hints.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, List


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    INFO = auto()  # Informational, operation may have partially succeeded
    WARNING = auto()  # Non-fatal, can continue with degraded functionality
    ERROR = auto()  # Operation failed, but can retry
    CRITICAL = auto()  # Unrecoverable error


@dataclass
class ErrorContext:
    """
    Rich context for error reporting.

    Provides user-friendly information beyond the raw exception.
    """

    title: str  # Short title for status line / JSON payload
    message: str  # User-friendly message
    technical_details: Optional[str]  # Debug info (shown in verbose mode)
    suggestions: List[str]  # Actionable suggestions
    severity: ErrorSeverity
    recoverable: bool = True  # Can user retry?

    @classmethod
    def from_exception(cls, exc: Exception, context: str = "") -> "ErrorContext":
        """Create ErrorContext from any exception using smart detection."""
        exc_type = type(exc).__name__
        exc_msg = str(exc)

        if isinstance(exc, PhysolverError):
            return exc.to_context()

        if isinstance(exc, ZeroDivisionError):
            return cls(
                title="Division by Zero",
                message="The formula divided by zero for these inputs.",
                technical_details=f"{exc_type}: {exc_msg}",
                suggestions=[
                    "Check that divisor quantities are non-zero",
                    "Provide distinct values for positions and sizes",
                ],
                severity=ErrorSeverity.ERROR,
            )

        # math.sqrt / math.log outside their domain
        if isinstance(exc, ValueError) and "domain" in exc_msg.lower():
            return cls(
                title="Math Domain Error",
                message="The inputs lead to a physically undefined value.",
                technical_details=f"{exc_type}: {exc_msg}",
                suggestions=[
                    "Check the signs of the input values",
                    "Make sure magnitudes are physically consistent",
                ],
                severity=ErrorSeverity.ERROR,
            )

        if isinstance(exc, OverflowError):
            return cls(
                title="Overflow",
                message="An intermediate value was too large to represent.",
                technical_details=f"{exc_type}: {exc_msg}",
                suggestions=["Rescale the inputs (e.g. use SI prefixes consistently)"],
                severity=ErrorSeverity.ERROR,
            )

        # Generic fallback
        return cls(
            title="Error",
            message=f"An unexpected error occurred: {exc_msg}",
            technical_details=f"{exc_type}: {exc_msg}\nContext: {context}",
            suggestions=["Try again", "Report the input that caused this"],
            severity=ErrorSeverity.ERROR,
        )


class PhysolverError(Exception):
    """
    Base exception for all physolver errors.

    Subclasses provide rich error context for user-friendly reporting.
    """

    default_title = "Error"
    default_suggestions: List[str] = []
    default_severity = ErrorSeverity.ERROR

    def __init__(
        self,
        message: str,
        *,
        suggestions: Optional[List[str]] = None,
        technical_details: Optional[str] = None,
        severity: Optional[ErrorSeverity] = None,
    ):
        super().__init__(message)
        self.user_message = message
        self.suggestions = suggestions or self.default_suggestions.copy()
        self.technical_details = technical_details
        self.severity = severity or self.default_severity

    def to_context(self) -> ErrorContext:
        """Convert to ErrorContext for display."""
        return ErrorContext(
            title=self.default_title,
            message=self.user_message,
            technical_details=self.technical_details,
            suggestions=self.suggestions,
            severity=self.severity,
            recoverable=self.severity != ErrorSeverity.CRITICAL,
        )


# === Input Errors ===


class ParseError(PhysolverError):
    """Raised when a problem statement cannot be tokenized."""

    default_title = "Parse Error"
    default_suggestions = [
        "Write assignments as NAME=VALUE separated by commas (e.g. 'Q=100, W=40')",
        "Variable names must start with a letter",
        "Use plain decimal or exponent notation for values (e.g. 1.5e-3)",
    ]

    def __init__(
        self,
        message: str,
        *,
        text: str = "",
        suggestion: Optional[str] = None,
        **kwargs,
    ):
        # Add specific suggestion to front of list if provided
        suggestions = kwargs.pop("suggestions", None) or self.default_suggestions.copy()
        if suggestion:
            suggestions.insert(0, suggestion)

        super().__init__(message, suggestions=suggestions, **kwargs)
        self.text = text


class InvalidValueError(ParseError):
    """Raised when a variable is assigned an unusable value."""

    default_title = "Invalid Value"

    def __init__(self, name: str, value: object, reason: str = "must be a finite number"):
        super().__init__(
            f"Variable '{name}' {reason} (got {value!r})",
            suggestions=[
                f"Give '{name}' a real numeric value",
                "Each variable may only be assigned once",
            ],
        )
        self.name = name
        self.value = value


# === Solver Errors ===


class SolveError(PhysolverError):
    """Raised when a selected solver cannot complete its computation."""

    default_title = "Solve Error"
    default_suggestions = [
        "Check that the input values are physically consistent",
        "Provide a different combination of known variables",
    ]


class InsufficientInputsError(SolveError):
    """Raised when a solver is run without exactly the inputs it needs."""

    default_title = "Insufficient Inputs"
    default_severity = ErrorSeverity.WARNING

    def __init__(self, solver_name: str, expected: int, known: int):
        super().__init__(
            f"{solver_name} needs exactly {expected} known values, got {known}",
            suggestions=[
                f"Provide exactly {expected} of the formula's variables",
                "Leave exactly one variable unknown",
            ],
        )
        self.expected = expected
        self.known = known


class SingularGeometryError(SolveError):
    """Raised when a geometric configuration makes a formula undefined."""

    default_title = "Singular Geometry"
    default_suggestions = [
        "Move the field point away from the source",
        "Make sure distinct objects have distinct coordinates",
    ]


class InconsistentInputsError(SolveError):
    """Raised when a given value contradicts one the solver computes."""

    default_title = "Inconsistent Inputs"
    default_suggestions = [
        "Remove the value that the other inputs already determine",
        "Check the given values for typos or unit mistakes",
    ]


# === Registration Errors ===


class SolverContractError(PhysolverError):
    """Raised when a solver plug-in does not honour the solver contract."""

    default_title = "Broken Solver"
    default_severity = ErrorSeverity.CRITICAL
    default_suggestions = [
        "Fix the solver implementation before registering it",
    ]


# === Utility functions ===


def format_error_for_user(exc: Exception, context: str = "") -> str:
    """
    Format an exception into a user-friendly string.

    Returns a single string suitable for a status line or stderr.
    """
    ctx = ErrorContext.from_exception(exc, context)

    result = ctx.message
    if ctx.suggestions:
        result += f" Try: {ctx.suggestions[0]}"

    return result


def format_error_for_json(exc: Exception, context: str = "") -> dict:
    """
    Format an exception into a dict suitable for JSON output.

    Returns dict with 'title', 'message', 'suggestions', 'severity' keys.
    """
    ctx = ErrorContext.from_exception(exc, context)

    return {
        "title": ctx.title,
        "message": ctx.message,
        "suggestions": list(ctx.suggestions),
        "severity": ctx.severity.name.lower(),
        "recoverable": ctx.recoverable,
    }
