"""Exceptions raised by the human-json formatter."""

from __future__ import annotations


class HumanJsonError(Exception):
    """Base class for all human-json errors."""


class ConfigurationError(HumanJsonError, ValueError):
    """A formatter was constructed with invalid settings."""


class CyclicStructureError(HumanJsonError, ValueError):
    """A container refers back to itself."""

    def __init__(self: CyclicStructureError, value: object) -> None:
        """Record the offending container type."""
        self.type_name = type(value).__name__
        super().__init__(f"cyclic structure detected in {self.type_name}")
