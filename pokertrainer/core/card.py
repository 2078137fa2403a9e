"""
Card and Deck primitives for the Poker Trainer.

A deck is a plain tuple of cards. Every operation here returns a new
value and never mutates its input, so the same deck can be handed to
several callers safely.

Usage:
    deck = shuffle_deck(new_deck())
    hole_cards, deck = deal(deck, 2)
    later = exclude_dealt(new_deck(), hole_cards)
"""

from __future__ import annotations
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable, List, Optional, Tuple, Union

from pokertrainer.core.errors import InsufficientCardsError


class Suit(Enum):
    """Card suits, in canonical deck order."""
    SPADES = "s"    # ♠
    HEARTS = "h"    # ♥
    DIAMONDS = "d"  # ♦
    CLUBS = "c"     # ♣


class Rank(IntEnum):
    """Card ranks; the value is the rank value used for ordering (Ace high)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


SUIT_SYMBOLS = {
    Suit.SPADES: "♠",
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
}

RANK_CHARS = {
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "T",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

CHAR_TO_RANK = {v: k for k, v in RANK_CHARS.items()}
CHAR_TO_RANK["10"] = Rank.TEN  # Also accept "10"
CHAR_TO_SUIT = {suit.value: suit for suit in Suit}
SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}

DECK_SIZE = 52

Deck = Tuple["Card", ...]


@dataclass(frozen=True)
class Card:
    """
    An immutable playing card.

    Cards can be created from:
    - Rank and Suit enums: Card(Rank.ACE, Suit.SPADES)
    - String notation: Card.from_string("As"), Card.from_string("10♥")

    Two cards are equal iff rank and suit match.
    """
    rank: Rank
    suit: Suit

    def __post_init__(self) -> None:
        object.__setattr__(self, "rank", Rank(self.rank))
        object.__setattr__(self, "suit", Suit(self.suit))

    @classmethod
    def from_string(cls, s: str) -> Card:
        """
        Create a card from string notation.

        Accepts formats:
        - "As", "Kh", "Td", "2c" (rank + suit char)
        - "A♠", "K♥", "10♦" (rank + suit symbol)
        """
        s = s.strip()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s!r}")

        rank_part, suit_part = s[:-1].upper(), s[-1]
        if rank_part not in CHAR_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_part}")

        if suit_part.lower() in CHAR_TO_SUIT:
            suit = CHAR_TO_SUIT[suit_part.lower()]
        elif suit_part in SYMBOL_TO_SUIT:
            suit = SYMBOL_TO_SUIT[suit_part]
        else:
            raise ValueError(f"Invalid suit: {suit_part}")

        return cls(CHAR_TO_RANK[rank_part], suit)

    @property
    def value(self) -> int:
        """Rank value from 2 to 14."""
        return int(self.rank)

    @property
    def short_str(self) -> str:
        """Short string like 'As', 'Kh'."""
        return f"{RANK_CHARS[self.rank]}{self.suit.value}"

    @property
    def color(self) -> str:
        """Return 'red' for hearts/diamonds, 'black' for clubs/spades."""
        return "red" if self.suit in (Suit.HEARTS, Suit.DIAMONDS) else "black"

    def __repr__(self) -> str:
        return f"Card({self.short_str})"

    def __str__(self) -> str:
        return f"{RANK_CHARS[self.rank]}{SUIT_SYMBOLS[self.suit]}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "rank": RANK_CHARS[self.rank],
            "suit": SUIT_SYMBOLS[self.suit],
            "text": str(self),
            "code": self.short_str,
            "color": self.color,
        }


def rank_value(rank: Union[Rank, str, int]) -> int:
    """
    Numeric ordering value of a rank: Two = 2 ... King = 13, Ace = 14.

    Accepts a Rank member, its value, or a rank character ("A", "T", "10").
    """
    if isinstance(rank, str):
        key = rank.strip().upper()
        if key not in CHAR_TO_RANK:
            raise ValueError(f"Invalid rank: {rank}")
        return int(CHAR_TO_RANK[key])
    return int(Rank(rank))


def new_deck() -> Deck:
    """Return all 52 cards, suit-major then rank-minor."""
    return tuple(Card(rank, suit) for suit in Suit for rank in Rank)


def shuffle_deck(deck: Iterable[Card], rng: Optional[random.Random] = None) -> Deck:
    """
    Return a uniformly random permutation of the deck.

    random.shuffle is a Fisher-Yates shuffle; it runs on a copy so the
    input is left untouched.
    """
    cards = list(deck)
    (rng or random).shuffle(cards)
    return tuple(cards)


def deal(deck: Deck, n: int) -> Tuple[Deck, Deck]:
    """
    Deal n cards from the top of the deck.

    Returns:
        Tuple of (dealt cards, remaining deck)

    Raises:
        InsufficientCardsError: If not enough cards remain.
    """
    if n < 0:
        raise ValueError(f"Cannot deal a negative number of cards: {n}")
    if n > len(deck):
        raise InsufficientCardsError(n, len(deck))
    return tuple(deck[:n]), tuple(deck[n:])


def exclude_dealt(deck: Iterable[Card], dealt: Iterable[Card]) -> Deck:
    """Return the deck without any card that is already in play."""
    in_play = set(dealt)
    return tuple(card for card in deck if card not in in_play)


def parse_cards(cards: Union[str, Iterable[str]]) -> List[Card]:
    """
    Parse multiple cards.

    Accepts formats:
    - "As Kh Td" (space-separated)
    - "AsKhTd" (no separator, 2 chars each)
    - ["As", "K♥", "10d"] (already split)

    Returns:
        List of Card objects
    """
    if not isinstance(cards, str):
        return [Card.from_string(s) for s in cards]

    cards_str = cards.strip()
    if not cards_str:
        return []

    if " " in cards_str or "," in cards_str:
        return [Card.from_string(s) for s in cards_str.replace(",", " ").split()]

    result = []
    i = 0
    while i < len(cards_str):
        # "10" takes three characters with its suit
        width = 3 if cards_str[i:i + 2] == "10" else 2
        chunk = cards_str[i:i + width]
        if len(chunk) < width:
            raise ValueError(f"Cannot parse card at position {i}: {cards_str[i:]}")
        result.append(Card.from_string(chunk))
        i += width

    return result
