"""Input layer: problem statement tokenizing."""

from .parser import Token, tokenize, parse_input, try_parse

__all__ = ["Token", "tokenize", "parse_input", "try_parse"]
