"""
Exceptions raised by the Poker Trainer core.

Argument errors also derive from ValueError so callers that only know
about the built-in exception still catch them.
"""

from typing import Any, Optional


class PokerTrainerError(Exception):
    """Base class for all Poker Trainer errors."""


class InsufficientCardsError(PokerTrainerError, ValueError):
    """Raised when a deal asks for more cards than the deck holds."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(f"Cannot deal {requested} cards, only {available} remain")


class UnknownEnumValueError(PokerTrainerError, ValueError):
    """Raised when a phase or mode key does not name a known member."""

    def __init__(self, enum_name: str, value: Any):
        self.enum_name = enum_name
        self.value = value
        super().__init__(f"Unknown {enum_name}: {value!r}")


class InvalidSessionStateError(PokerTrainerError):
    """Raised when a training session operation is called out of order."""

    def __init__(self, message: str, phase: Optional[str] = None):
        self.phase = phase
        super().__init__(message)
