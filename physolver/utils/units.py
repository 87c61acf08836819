"""
Unit handling with Pint integration.

Solvers declare the units of the values they derive as plain strings.
This module checks that those strings name real units and formats
values with their units for display.
"""

from typing import Optional

import pint


class UnitHandler:
    """
    Handles unit validation and display formatting.

    Usage:
        handler = UnitHandler()
        handler.is_valid_unit("J/(kg*K)")   # True
        handler.format_with_unit(60.0, "J")  # '60.0000 J'
    """

    def __init__(self):
        """Initialize the unit handler."""
        self._ureg = pint.UnitRegistry()

    def is_valid_unit(self, unit_str: str) -> bool:
        """Check whether a unit string parses to a known unit."""
        if not unit_str or not unit_str.strip():
            return False
        try:
            self._ureg.Unit(unit_str)
        except Exception:
            return False
        return True

    def format_with_unit(
        self,
        magnitude: float,
        unit_str: str = "",
        precision: int = 4,
    ) -> str:
        """
        Format a value with units for display.

        Large and small magnitudes use scientific notation.

        Args:
            magnitude: Numerical value
            unit_str: Unit string (omitted when empty)
            precision: Number of decimal places

        Returns:
            Formatted string
        """
        if abs(magnitude) >= 1e5 or (abs(magnitude) < 1e-3 and magnitude != 0):
            text = f"{magnitude:.{precision}e}"
        else:
            text = f"{magnitude:.{precision}f}"

        if unit_str:
            return f"{text} {unit_str}"
        return text


# Module-level convenience functions

_handler: Optional[UnitHandler] = None


def get_handler() -> UnitHandler:
    """Get the global unit handler instance."""
    global _handler
    if _handler is None:
        _handler = UnitHandler()
    return _handler


def is_valid_unit(unit_str: str) -> bool:
    """Check a unit string against the shared registry."""
    return get_handler().is_valid_unit(unit_str)


def format_value(magnitude: float, unit_str: str = "") -> str:
    """Format a value (and optional unit) for display."""
    return get_handler().format_with_unit(magnitude, unit_str)
