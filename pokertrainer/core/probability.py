"""
Win Probability Estimation.

The estimate is a fixed heuristic curve, not an equity calculation:

    probability = clamp(base[rank] * phase * 0.85^(opponents-1) * mode,
                        0.05, 0.95)

The base value grows with the hand category, the phase multiplier grows
as community cards are revealed, and every extra opponent takes 15% off.

This module also builds the multiple-choice prompt: the correct value
plus three distractors drawn around it.
"""

from __future__ import annotations
import logging
import random
from typing import List, Optional, Sequence, Union

from pokertrainer.core.card import Card
from pokertrainer.core.hand import evaluate_hand
from pokertrainer.core.rules import (
    GameMode, GamePhase, parse_mode, parse_phase, DEFAULT_STACK_SIZE,
)


logger = logging.getLogger(__name__)


MIN_PROBABILITY = 0.05
MAX_PROBABILITY = 0.95

# Base win probability per hand rank; rank 0 (incomplete) uses the High Card value
BASE_PROBABILITY = {
    10: 0.95,
    9: 0.90,
    8: 0.85,
    7: 0.80,
    6: 0.75,
    5: 0.65,
    4: 0.55,
    3: 0.45,
    2: 0.35,
    1: 0.25,
    0: 0.25,
}

PHASE_MULTIPLIER = {
    GamePhase.PREFLOP: 0.7,
    GamePhase.FLOP: 0.85,
    GamePhase.TURN: 0.95,
    GamePhase.RIVER: 1.0,
}

OPPONENT_FACTOR = 0.85

TOURNAMENT_FACTOR = 1.1

FIXED_MODE_MULTIPLIER = {
    GameMode.BEGINNER: 1.0,
    GameMode.NORMAL: 1.0,
    GameMode.EXPERT: 0.95,
    GameMode.SCENARIO: 1.0,
}

# Distractor generation
OPTION_COUNT = 4
EXPERT_SPREAD = 0.08
DEFAULT_SPREAD = 0.15
MIN_SEPARATION = 0.03
MAX_DISTRACTOR_ATTEMPTS = 200
RELAXED_SEPARATION_FACTOR = 0.5


def clamp_probability(value: float) -> float:
    """Clamp a value to [0.05, 0.95]."""
    return min(MAX_PROBABILITY, max(MIN_PROBABILITY, value))


def mode_multiplier(mode: Union[GameMode, str], stack_size: Optional[int] = None) -> float:
    """
    Probability multiplier for a game mode.

    Tournament mode scales with the current stack: 1.1 * stack / 1000.

    Raises:
        UnknownEnumValueError: If mode is not a known game mode
        ValueError: If tournament mode is used without a stack size
    """
    mode = parse_mode(mode)
    if mode == GameMode.TOURNAMENT:
        if stack_size is None:
            raise ValueError("Tournament mode requires the current stack size")
        return TOURNAMENT_FACTOR * (stack_size / DEFAULT_STACK_SIZE)
    return FIXED_MODE_MULTIPLIER[mode]


def opponent_penalty(opponent_count: int) -> float:
    """Relative probability left after facing opponent_count opponents."""
    if opponent_count < 1:
        raise ValueError(f"Need at least 1 opponent, got {opponent_count}")
    return OPPONENT_FACTOR ** (opponent_count - 1)


def estimate_from_rank(
    rank: int,
    phase: Union[GamePhase, str],
    opponent_count: int,
    mode: Union[GameMode, str],
    stack_size: Optional[int] = None,
) -> float:
    """
    Estimate win probability for an already evaluated hand rank.

    Args:
        rank: Hand rank 0-10 (0 = incomplete)
        phase: Current betting round
        opponent_count: Opponents still in the hand (>= 1)
        mode: Game mode
        stack_size: Current stack, required in tournament mode

    Returns:
        Probability in [0.05, 0.95]
    """
    if rank not in BASE_PROBABILITY:
        raise ValueError(f"Hand rank must be 0-10, got {rank}")

    raw = (
        BASE_PROBABILITY[rank]
        * PHASE_MULTIPLIER[parse_phase(phase)]
        * opponent_penalty(opponent_count)
        * mode_multiplier(mode, stack_size)
    )
    return clamp_probability(raw)


def estimate_win_probability(
    cards: Sequence[Card],
    phase: Union[GamePhase, str],
    opponent_count: int,
    mode: Union[GameMode, str],
    stack_size: Optional[int] = None,
) -> float:
    """
    Estimate the win probability of a hand.

    Args:
        cards: Hole cards plus the community cards revealed so far
        phase: Current betting round
        opponent_count: Opponents still in the hand (>= 1)
        mode: Game mode
        stack_size: Current stack, required in tournament mode

    Returns:
        Probability in [0.05, 0.95]

    Raises:
        UnknownEnumValueError: If phase or mode is unknown
    """
    evaluation = evaluate_hand(cards)
    return estimate_from_rank(evaluation.rank, phase, opponent_count, mode, stack_size)


def generate_distractors(
    correct: float,
    mode: Union[GameMode, str],
    rng: Optional[random.Random] = None,
) -> List[float]:
    """
    Build the four answer options for a probability prompt.

    Candidates are drawn uniformly within +/- spread of the correct value
    (0.08 in expert mode, 0.15 otherwise), clamped, and kept only when
    they sit at least 0.03 away from every option accepted so far.

    If MAX_DISTRACTOR_ATTEMPTS draws in a row are rejected, the separation
    is halved before sampling continues, until the accepted options leave
    room for the rest. The loop therefore always ends.

    Returns:
        Four values, one of them equal to correct, in random order
    """
    rng = rng or random.Random()
    mode = parse_mode(mode)
    spread = EXPERT_SPREAD if mode == GameMode.EXPERT else DEFAULT_SPREAD
    separation = MIN_SEPARATION

    options = [correct]
    misses = 0
    while len(options) < OPTION_COUNT:
        candidate = clamp_probability(correct + rng.uniform(-spread, spread))

        if all(abs(candidate - option) >= separation for option in options):
            options.append(candidate)
            misses = 0
            continue

        misses += 1
        if misses >= MAX_DISTRACTOR_ATTEMPTS:
            separation *= RELAXED_SEPARATION_FACTOR
            misses = 0
            logger.warning(
                f"Relaxing distractor constraints for {correct:.3f}: "
                f"separation={separation:.4f}"
            )

    rng.shuffle(options)
    return options
