"""
Exceptions raised by gradle-coords.
"""

from typing import Optional


class GradleCoordsError(Exception):
    """Base class for all gradle-coords errors."""


class ConfigurationError(GradleCoordsError, ValueError):
    """Raised when an option value is invalid. Always raised before input is read."""


class ParseError(GradleCoordsError, ValueError):
    """Raised when a dependency tree line cannot be parsed."""

    def __init__(self, reason: str, line_number: Optional[int] = None, line: str = "") -> None:
        """
        Initialize a ParseError.

        Args:
            reason: Short description of what is wrong with the line
            line_number: 1-based line number of the offending line
            line: Content of the offending line
        """
        self.reason = reason
        self.line_number = line_number
        self.line = line
        if line_number is None:
            message = f"{reason}: {line}"
        else:
            message = f"line {line_number}: {reason}: {line}"
        super().__init__(message)
