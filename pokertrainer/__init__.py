"""
Poker Trainer - Texas Hold'em Win Probability Training

A training game that deals simulated hands and asks the trainee to
estimate the player's win probability on every street:
- Pure Python hand evaluation and probability estimation core
- Explicit, immutable progress state (score, streaks, achievements)
- FastAPI HTTP API around a training session

Usage:
    from pokertrainer.core import evaluate_hand, estimate_win_probability
    from pokertrainer.core import TrainingSession
"""

__version__ = "0.1.0"

from pokertrainer.core.card import Card, new_deck, shuffle_deck, deal, exclude_dealt
from pokertrainer.core.hand import HandRank, evaluate_hand
from pokertrainer.core.probability import estimate_win_probability, generate_distractors
from pokertrainer.core.showdown import resolve_showdown
from pokertrainer.core.session import TrainingSession

__all__ = [
    "Card",
    "new_deck",
    "shuffle_deck",
    "deal",
    "exclude_dealt",
    "HandRank",
    "evaluate_hand",
    "estimate_win_probability",
    "generate_distractors",
    "resolve_showdown",
    "TrainingSession",
    "__version__",
]
