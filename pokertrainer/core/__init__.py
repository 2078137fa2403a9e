"""
Poker Trainer Core - Hand Evaluation and Win Probability Estimation

This module contains the card model, evaluator, estimator, showdown
resolver and training session, without any network dependencies.
"""

from pokertrainer.core.card import Card, Rank, Suit, new_deck, shuffle_deck, deal, exclude_dealt, rank_value
from pokertrainer.core.errors import (
    PokerTrainerError, InsufficientCardsError, UnknownEnumValueError, InvalidSessionStateError,
)
from pokertrainer.core.hand import HandRank, HandEvaluation, evaluate_hand
from pokertrainer.core.probability import estimate_win_probability, generate_distractors
from pokertrainer.core.rules import GamePhase, GameMode
from pokertrainer.core.showdown import ShowdownResult, resolve_showdown
from pokertrainer.core.session import TrainingSession

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "new_deck",
    "shuffle_deck",
    "deal",
    "exclude_dealt",
    "rank_value",
    "PokerTrainerError",
    "InsufficientCardsError",
    "UnknownEnumValueError",
    "InvalidSessionStateError",
    "HandRank",
    "HandEvaluation",
    "evaluate_hand",
    "estimate_win_probability",
    "generate_distractors",
    "GamePhase",
    "GameMode",
    "ShowdownResult",
    "resolve_showdown",
    "TrainingSession",
]
