"""
Hand Evaluation for the Poker Trainer.

This module classifies 5-7 cards into one of ten poker hand categories.
Classification works on the aggregate counts of every supplied card
(rank counts, suit counts, straight detection) rather than picking the
best 5-card subset.

Hand Rankings (best to worst):
10. Royal Flush: flush + straight holding both an Ace and a King
9. Straight Flush: flush + straight
8. Four of a Kind: 4 cards of same rank
7. Full House: 3 of a kind + pair
6. Flush: 5 or more cards of one suit
5. Straight: 5 consecutive rank values
4. Three of a Kind: 3 cards of same rank
3. Two Pair: 2 different pairs
2. Pair: 2 cards of same rank
1. High Card: No made hand

The tie score is 100 * rank + the highest card value among all supplied
cards. It does not look at kickers, so two hands of the same category
can score equal even when a full best-five comparison would split them.

Note: Ace can be low in A-2-3-4-5 straight (wheel).
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional, Sequence

from pokertrainer.core.card import Card, Rank
from pokertrainer.core.rules import HAND_SIZE, MAX_HAND_CARDS


class HandRank(IntEnum):
    """Hand rankings from worst (lowest value) to best (highest value)."""
    HIGH_CARD = 1
    PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10


HAND_RANK_NAMES = {
    HandRank.ROYAL_FLUSH: "Royal Flush",
    HandRank.STRAIGHT_FLUSH: "Straight Flush",
    HandRank.FOUR_OF_A_KIND: "Four of a Kind",
    HandRank.FULL_HOUSE: "Full House",
    HandRank.FLUSH: "Flush",
    HandRank.STRAIGHT: "Straight",
    HandRank.THREE_OF_A_KIND: "Three of a Kind",
    HandRank.TWO_PAIR: "Two Pair",
    HandRank.PAIR: "Pair",
    HandRank.HIGH_CARD: "High Card",
}

INCOMPLETE_LABEL = "Incomplete"

# Weight of the category in the tie score
TIE_SCORE_MULTIPLIER = 100

WHEEL = frozenset({Rank.ACE, Rank.TWO, Rank.THREE, Rank.FOUR, Rank.FIVE})


@dataclass(frozen=True)
class HandEvaluation:
    """
    Result of evaluating a hand.

    Attributes:
        rank: Category from 1 (High Card) to 10 (Royal Flush), 0 if incomplete
        tie_score: 100 * rank + highest card value, 0 if incomplete
        label: Human-readable category name
    """
    rank: int
    tie_score: int
    label: str

    @property
    def is_complete(self) -> bool:
        return self.rank > 0

    @property
    def hand_rank(self) -> Optional[HandRank]:
        """The HandRank member, or None for an incomplete hand."""
        return HandRank(self.rank) if self.is_complete else None

    def to_dict(self) -> dict:
        return {"rank": self.rank, "tie_score": self.tie_score, "label": self.label}


INCOMPLETE = HandEvaluation(rank=0, tie_score=0, label=INCOMPLETE_LABEL)


def evaluate_hand(cards: Sequence[Card]) -> HandEvaluation:
    """
    Evaluate a poker hand of up to 7 cards.

    Args:
        cards: Player hole cards plus any community cards

    Returns:
        HandEvaluation; the Incomplete result when fewer than 5 cards
        are supplied (normal during preflop).

    Raises:
        ValueError: If more than 7 cards are supplied
    """
    if len(cards) > MAX_HAND_CARDS:
        raise ValueError(f"Need at most {MAX_HAND_CARDS} cards, got {len(cards)}")
    if len(cards) < HAND_SIZE:
        return INCOMPLETE

    hand_rank = classify(cards)
    highest = max(card.value for card in cards)
    return HandEvaluation(
        rank=int(hand_rank),
        tie_score=TIE_SCORE_MULTIPLIER * int(hand_rank) + highest,
        label=HAND_RANK_NAMES[hand_rank],
    )


def classify(cards: Sequence[Card]) -> HandRank:
    """
    Determine the hand category of 5 or more cards.

    Categories are tested from best to worst and the first match wins.
    """
    rank_counts = Counter(card.rank for card in cards)
    suit_counts = Counter(card.suit for card in cards)
    counts = sorted(rank_counts.values(), reverse=True)
    # Pad so a hand of four-plus-one never indexes past the groups
    counts.append(0)

    is_flush = max(suit_counts.values()) >= HAND_SIZE
    straight = is_straight(rank_counts)

    if is_flush and straight and Rank.ACE in rank_counts and Rank.KING in rank_counts:
        return HandRank.ROYAL_FLUSH
    if is_flush and straight:
        return HandRank.STRAIGHT_FLUSH
    if counts[0] == 4:
        return HandRank.FOUR_OF_A_KIND
    if counts[0] == 3 and counts[1] == 2:
        return HandRank.FULL_HOUSE
    if is_flush:
        return HandRank.FLUSH
    if straight:
        return HandRank.STRAIGHT
    if counts[0] == 3:
        return HandRank.THREE_OF_A_KIND
    if counts[0] == 2 and counts[1] == 2:
        return HandRank.TWO_PAIR
    if counts[0] == 2:
        return HandRank.PAIR
    return HandRank.HIGH_CARD


def is_straight(ranks: Iterable[Rank]) -> bool:
    """
    Check whether five consecutive rank values are present.

    The wheel (A-2-3-4-5) counts as a straight with the Ace played low.
    """
    values = sorted({int(rank) for rank in ranks})
    if len(values) < HAND_SIZE:
        return False

    run = 1
    for previous, current in zip(values, values[1:]):
        run = run + 1 if current == previous + 1 else 1
        if run >= HAND_SIZE:
            return True

    return WHEEL.issubset(values)


def evaluate_cards(hole_cards: Sequence[Card], community_cards: Sequence[Card]) -> HandEvaluation:
    """Evaluate hole cards together with the community cards."""
    return evaluate_hand(list(hole_cards) + list(community_cards))


def compare_hands(cards1: Sequence[Card], cards2: Sequence[Card]) -> int:
    """
    Compare two hands by (rank, tie_score).

    Returns:
        -1 if cards1 wins, 1 if cards2 wins, 0 if tie
    """
    key1 = _sort_key(evaluate_hand(cards1))
    key2 = _sort_key(evaluate_hand(cards2))

    if key1 > key2:
        return -1
    elif key1 < key2:
        return 1
    else:
        return 0


def _sort_key(evaluation: HandEvaluation) -> tuple:
    return (evaluation.rank, evaluation.tie_score)

