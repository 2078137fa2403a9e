"""
Showdown resolution.

Every hand is evaluated against the same community cards and ranked by
(rank, tie_score). The sort is stable, so on an exact tie the party
listed first wins: the player, then opponents in seat order.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from pokertrainer.core.card import Card
from pokertrainer.core.hand import HandEvaluation, HandRank, evaluate_cards

PLAYER = "player"
OPPONENT = "opponent"


@dataclass(frozen=True)
class ShowdownEntry:
    """
    One hand at showdown.

    Attributes:
        participant: "player" or "opponent"
        opponent_index: 0-based opponent seat, None for the player
        evaluation: Hand evaluation against the board
        cards: The participant's hole cards
    """
    participant: str
    opponent_index: Optional[int]
    evaluation: HandEvaluation
    cards: Tuple[Card, ...]

    @property
    def is_player(self) -> bool:
        return self.participant == PLAYER

    @property
    def hand_rank(self) -> Optional[HandRank]:
        return self.evaluation.hand_rank

    @property
    def name(self) -> str:
        """Display name such as 'You' or 'Opponent 3'."""
        if self.is_player:
            return "You"
        return f"Opponent {self.opponent_index + 1}"

    def to_dict(self) -> dict:
        return {
            "participant": self.participant,
            "opponent_index": self.opponent_index,
            "name": self.name,
            "hand": self.evaluation.to_dict(),
            "cards": [card.to_dict() for card in self.cards],
        }


@dataclass(frozen=True)
class ShowdownResult:
    """Winner plus every entry in final order (winner first)."""
    standings: Tuple[ShowdownEntry, ...]

    @property
    def winner(self) -> ShowdownEntry:
        return self.standings[0]

    @property
    def player_won(self) -> bool:
        return self.winner.is_player

    def to_dict(self) -> dict:
        return {
            "winner": self.winner.to_dict(),
            "player_won": self.player_won,
            "standings": [entry.to_dict() for entry in self.standings],
        }


def resolve_showdown(
    player_cards: Sequence[Card],
    opponent_hands: Sequence[Sequence[Card]],
    community_cards: Sequence[Card],
) -> ShowdownResult:
    """
    Determine the single winner of a hand.

    Args:
        player_cards: The player's hole cards
        opponent_hands: Hole cards of each opponent, in seat order
        community_cards: The shared board

    Returns:
        ShowdownResult whose winner is the best (rank, tie_score); the
        earliest-listed party wins an exact tie.
    """
    entries: List[ShowdownEntry] = [
        ShowdownEntry(PLAYER, None, evaluate_cards(player_cards, community_cards), tuple(player_cards))
    ]
    for index, cards in enumerate(opponent_hands):
        entries.append(
            ShowdownEntry(OPPONENT, index, evaluate_cards(cards, community_cards), tuple(cards))
        )

    # sorted() is stable: equal keys keep listing order
    standings = sorted(
        entries,
        key=lambda entry: (entry.evaluation.rank, entry.evaluation.tie_score),
        reverse=True,
    )
    return ShowdownResult(standings=tuple(standings))
