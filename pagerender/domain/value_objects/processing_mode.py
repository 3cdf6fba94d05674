"""
ProcessingMode value object

Selects between the zero-degradation path and the size-optimizing path.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from pagerender.domain.exceptions import UnsupportedModeError


class ProcessingMode(str, Enum):
    """Valid processing modes."""
    LOSSLESS = "lossless"
    AUTO = "auto"

    @classmethod
    def parse(cls, value: Optional[str | ProcessingMode], default: Optional[ProcessingMode] = None) -> ProcessingMode:
        """
        Resolve a mode from user input, ignoring case.

        Args:
            value: Mode name such as ``"Lossless"`` or ``"auto"``
            default: Returned when ``value`` is empty

        Returns:
            ProcessingMode instance

        Raises:
            UnsupportedModeError: If the value names no known mode

        Examples:
            >>> ProcessingMode.parse("Auto")
            <ProcessingMode.AUTO: 'auto'>
        """
        if isinstance(value, ProcessingMode):
            return value
        if value is None or not str(value).strip():
            if default is None:
                raise UnsupportedModeError(value)
            return default
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise UnsupportedModeError(value) from exc
