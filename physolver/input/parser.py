"""
Problem statement tokenizer.

Turns free text such as "Q=100, W=40" into a VariableStore. Anything that
is not a NAME=VALUE assignment is ignored, so separators and surrounding
prose do not matter.
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..models import VariableStore
from ..utils.errors import InvalidValueError, ParseError

logger = logging.getLogger(__name__)

# Greek letters allowed in names besides ASCII (ΔU, σ, λ, ...)
GREEK = "ΔδεσρμτλθωΩ"

ASSIGNMENT = re.compile(
    rf"(?<![A-Za-z0-9_{GREEK}])"
    rf"([A-Za-z{GREEK}][A-Za-z0-9_{GREEK}]*)"
    r"\s*=\s*"
    r"([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)


@dataclass(frozen=True)
class Token:
    """One NAME=VALUE assignment found in the input."""

    name: str
    value: float
    position: int = 0  # offset of the name in the input text


def tokenize(text: str) -> List[Token]:
    """
    Extract every NAME=VALUE assignment, in order of appearance.

    Names start with a letter (ASCII or one of the supported Greek letters);
    values are decimal numbers with optional sign and exponent.
    """
    return [
        Token(name=m.group(1), value=float(m.group(2)), position=m.start(1))
        for m in ASSIGNMENT.finditer(text)
    ]


def parse_input(text: str) -> VariableStore:
    """
    Parse a problem statement into a VariableStore.

    Raises:
        ParseError: If the text contains no assignments
        InvalidValueError: If a variable is assigned more than once
    """
    tokens = tokenize(text)
    if not tokens:
        raise ParseError(
            "Could not parse input. Use format: Q=100, W=40",
            text=text,
            suggestion=_suggest_fix(text),
        )

    values = VariableStore()
    for token in tokens:
        if token.name in values:
            raise InvalidValueError(token.name, token.value, reason="is assigned more than once")
        values[token.name] = token.value

    logger.debug("Parsed %d variable(s): %s", len(values), ", ".join(values))
    return values


def try_parse(text: str) -> Tuple[Optional[VariableStore], Optional[str]]:
    """
    Attempt to parse, returning None on failure instead of raising.

    Returns:
        Tuple of (VariableStore or None, error message or None)
    """
    try:
        return parse_input(text), None
    except ParseError as e:
        return None, str(e)


def _suggest_fix(text: str) -> Optional[str]:
    """Suggest a fix for input that produced no assignments."""
    if not text.strip():
        return "Enter at least one assignment, e.g. 'Q=100'"
    if "=" not in text:
        if ":" in text:
            return "Use '=' instead of ':' between name and value"
        return "Separate each name from its value with '='"
    return "Values must be plain numbers, e.g. 'T=300' or 'q=1.6e-19'"
