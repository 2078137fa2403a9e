"""
Beginner hints shown next to a probability prompt.
"""

from collections import Counter
from typing import List, Sequence

from pokertrainer.core.card import Card
from pokertrainer.core.hand import HandRank, evaluate_cards
from pokertrainer.core.rules import FLOP_CARDS

FLUSH_DRAW_CARDS = 4


def strength_hint(rank: int) -> str:
    """Coarse strength bucket for a hand rank."""
    if rank >= HandRank.FULL_HOUSE:
        return "Very strong hand!"
    if rank >= HandRank.THREE_OF_A_KIND:
        return "Good hand"
    if rank >= HandRank.PAIR:
        return "Average hand"
    return "Weak hand"


def has_flush_draw(cards: Sequence[Card]) -> bool:
    """True when at least four cards share a suit."""
    if not cards:
        return False
    return max(Counter(card.suit for card in cards).values()) >= FLUSH_DRAW_CARDS


def beginner_hints(hole_cards: Sequence[Card], community_cards: Sequence[Card]) -> List[str]:
    """Strength hint, plus a flush-draw hint once the flop is out."""
    hints = [strength_hint(evaluate_cards(hole_cards, community_cards).rank)]
    if len(community_cards) >= FLOP_CARDS and has_flush_draw(list(hole_cards) + list(community_cards)):
        hints.append("Possible flush draw")
    return hints
