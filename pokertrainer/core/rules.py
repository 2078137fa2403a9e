"""
Training Game Rules and Constants.

Phases, game modes and the fixed numbers that shape a training game:
how many cards each street reveals, how many opponents sit at the table,
how long a game lasts and how tournament blinds advance.
"""

from enum import Enum
from typing import Optional, Type, TypeVar, Union

from pokertrainer.core.errors import UnknownEnumValueError


class GamePhase(Enum):
    """Betting rounds of a hand, in the order they are played."""
    PREFLOP = "preflop"   # Hole cards only
    FLOP = "flop"         # After 3 community cards
    TURN = "turn"         # After 4th community card
    RIVER = "river"       # After 5th community card

    @property
    def order(self) -> int:
        return _PHASE_ORDER.index(self)

    def next(self) -> Optional["GamePhase"]:
        """The following street, or None after the river."""
        index = self.order + 1
        return _PHASE_ORDER[index] if index < len(_PHASE_ORDER) else None


_PHASE_ORDER = (GamePhase.PREFLOP, GamePhase.FLOP, GamePhase.TURN, GamePhase.RIVER)


class GameMode(Enum):
    """Difficulty settings; they only change the probability curve."""
    BEGINNER = "beginner"
    NORMAL = "normal"
    EXPERT = "expert"
    TOURNAMENT = "tournament"
    SCENARIO = "scenario"


E = TypeVar("E", bound=Enum)


def _parse_enum(enum_cls: Type[E], value: Union[E, str]) -> E:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        for member in enum_cls:
            if key in (member.value, member.name.lower()):
                return member
    raise UnknownEnumValueError(enum_cls.__name__, value)


def parse_phase(value: Union[GamePhase, str]) -> GamePhase:
    """
    Resolve a phase from a member or its key ("flop", "FLOP").

    Raises:
        UnknownEnumValueError: If the key names no phase.
    """
    return _parse_enum(GamePhase, value)


def parse_mode(value: Union[GameMode, str]) -> GameMode:
    """
    Resolve a game mode from a member or its key ("expert", "EXPERT").

    Raises:
        UnknownEnumValueError: If the key names no mode.
    """
    return _parse_enum(GameMode, value)


# Cards per street
HOLE_CARDS = 2
FLOP_CARDS = 3
TURN_CARDS = 1
RIVER_CARDS = 1
TOTAL_COMMUNITY_CARDS = 5

# Cards revealed when entering each phase
CARDS_TO_REVEAL = {
    GamePhase.FLOP: FLOP_CARDS,
    GamePhase.TURN: TURN_CARDS,
    GamePhase.RIVER: RIVER_CARDS,
}

# Hand evaluation
HAND_SIZE = 5
MAX_HAND_CARDS = HOLE_CARDS + TOTAL_COMMUNITY_CARDS

# Table (opponent count is drawn uniformly, bounds inclusive)
MIN_OPPONENTS = 2
MAX_OPPONENTS = 8

# Game length and tournament settings
HANDS_PER_GAME = 50
DEFAULT_STACK_SIZE = 1000
BLIND_LEVEL_INTERVAL = 10

# Scoring
ANSWER_TOLERANCE = 0.01       # An answer this close to the correct value counts
ERROR_TREND_THRESHOLD = 0.05  # Beyond this an answer is optimistic/pessimistic
HISTORY_LIMIT = 50
MAX_RANKING_ENTRIES = 10
