"""
Training Session - Round and Street State Machine.

A session deals simulated hands and, at every street, asks the trainee
to pick the player's win probability out of four options. It handles:
- Dealing hole cards to the player and a random number of opponents
- Revealing community cards street by street without reusing a card
- Building the probability prompt (correct value + distractors)
- Scoring answers, folds, streaks, statistics and achievements
- Resolving the showdown after the river
- Finishing a game and entering the leaderboard

Progress records are immutable; the session swaps in the new values
returned by pokertrainer.core.progress after every event.
"""

from __future__ import annotations
from typing import List, Dict, Optional, Tuple, Any, Sequence
from dataclasses import dataclass, field
import logging
import random

from pokertrainer.core.card import Card, new_deck, shuffle_deck, deal, exclude_dealt
from pokertrainer.core.errors import InvalidSessionStateError
from pokertrainer.core.hand import HandEvaluation, evaluate_cards
from pokertrainer.core.hints import beginner_hints
from pokertrainer.core.probability import estimate_win_probability, generate_distractors
from pokertrainer.core.progress import (
    Achievement, GameProgress, Statistics, RankingEntry,
    record_deal, record_answer, record_fold, finish_game, new_game,
    check_achievements, would_make_rankings, add_to_rankings, default_rankings,
)
from pokertrainer.core.rules import (
    GameMode, GamePhase, parse_mode,
    HOLE_CARDS, CARDS_TO_REVEAL, MIN_OPPONENTS, MAX_OPPONENTS,
    HANDS_PER_GAME, DEFAULT_STACK_SIZE, BLIND_LEVEL_INTERVAL,
)
from pokertrainer.core.showdown import ShowdownResult, resolve_showdown


logger = logging.getLogger(__name__)

# Tolerance when matching a submitted option against the offered ones
OPTION_MATCH_TOLERANCE = 1e-9


@dataclass
class AnswerResult:
    """Result of answering a probability prompt."""
    is_correct: bool
    selected: float
    correct: float
    unlocked: List[Achievement] = field(default_factory=list)


@dataclass
class GameSummary:
    """Result of finishing a game."""
    final_score: float
    hands_played: int
    makes_rankings: bool


class TrainingSession:
    """
    Probability training game.

    Usage:
        session = TrainingSession(mode=GameMode.NORMAL)
        session.start_round()

        while not session.game_finished:
            session.submit_answer(choose(session.options))
            if session.phase == GamePhase.RIVER:
                result = session.next_phase()  # Showdown
                session.start_round()
            else:
                session.next_phase()
    """

    def __init__(
        self,
        mode: GameMode = GameMode.NORMAL,
        stack_size: int = DEFAULT_STACK_SIZE,
        hands_per_game: int = HANDS_PER_GAME,
        rng: Optional[random.Random] = None,
        progress: Optional[GameProgress] = None,
        statistics: Optional[Statistics] = None,
        achievements: Sequence[str] = (),
        rankings: Optional[Sequence[RankingEntry]] = None,
    ):
        """
        Initialize a new training session.

        Args:
            mode: Game mode (string keys such as "expert" are accepted)
            stack_size: Starting stack, used by tournament mode
            hands_per_game: Hands dealt before the game finishes
            rng: Random source; pass a seeded Random for reproducible games
            progress: Stored progress to resume from
            statistics: Stored statistics to resume from
            achievements: Ids of achievements already unlocked
            rankings: Stored leaderboard (seeded defaults if omitted)
        """
        if stack_size <= 0:
            raise ValueError("Stack size must be positive")
        if hands_per_game < 1:
            raise ValueError("A game needs at least one hand")

        self.mode = parse_mode(mode)
        self.initial_stack_size = stack_size
        self.stack_size = stack_size
        self.hands_per_game = hands_per_game
        self.rng = rng or random.Random()

        # Persistent state
        self.progress = progress or GameProgress()
        self.statistics = statistics or Statistics()
        self.achievements: Tuple[str, ...] = tuple(achievements)
        self.rankings: Tuple[RankingEntry, ...] = (
            tuple(rankings) if rankings is not None else default_rankings()
        )

        # Current hand
        self.phase = GamePhase.PREFLOP
        self.player_cards: Tuple[Card, ...] = ()
        self.opponent_hands: List[Tuple[Card, ...]] = []
        self.community_cards: Tuple[Card, ...] = ()
        self.used_cards: Tuple[Card, ...] = ()
        self.correct_probability = 0.0
        self.options: List[float] = []
        self.selected_answer: Optional[float] = None
        self.showdown: Optional[ShowdownResult] = None

        # Game
        self.blind_level = 1
        self.game_finished = False
        self.final_score: Optional[float] = None
        self.ranked = False

    @property
    def num_opponents(self) -> int:
        return len(self.opponent_hands)

    @property
    def is_hand_running(self) -> bool:
        """A hand has been dealt and its showdown not yet resolved."""
        return bool(self.player_cards) and self.showdown is None

    @property
    def has_answered(self) -> bool:
        return self.selected_answer is not None

    def current_hand(self) -> HandEvaluation:
        """Evaluation of the player's cards with the board so far."""
        return evaluate_cards(self.player_cards, self.community_cards)

    def start_round(self) -> bool:
        """
        Deal a new hand.

        Finishes the game instead once hands_per_game hands were dealt.

        Returns:
            True if a hand was dealt, False if the game finished
        """
        self._require_running_game()
        if self.progress.hands_played >= self.hands_per_game:
            self.finish_game()
            return False

        deck = shuffle_deck(new_deck(), self.rng)
        num_opponents = self.rng.randint(MIN_OPPONENTS, MAX_OPPONENTS)

        player_cards, deck = deal(deck, HOLE_CARDS)
        opponent_hands = []
        for _ in range(num_opponents):
            hole_cards, deck = deal(deck, HOLE_CARDS)
            opponent_hands.append(hole_cards)

        self.player_cards = player_cards
        self.opponent_hands = opponent_hands
        self.community_cards = ()
        self.used_cards = player_cards + tuple(c for hand in opponent_hands for c in hand)
        self.phase = GamePhase.PREFLOP
        self.showdown = None

        self.progress, self.statistics = record_deal(self.progress, self.statistics, self.mode)
        if (
            self.mode == GameMode.TOURNAMENT
            and self.progress.hands_played % BLIND_LEVEL_INTERVAL == 0
        ):
            self.blind_level += 1
            logger.info(f"Blind level raised to {self.blind_level}")

        logger.info(
            f"Dealt hand #{self.progress.hands_played} "
            f"against {num_opponents} opponents"
        )
        self._build_prompt()
        return True

    def next_phase(self) -> Optional[ShowdownResult]:
        """
        Advance to the next street, or resolve the showdown after the river.

        Returns:
            The ShowdownResult when called on the river, otherwise None
        """
        self._require_hand()

        following = self.phase.next()
        if following is None:
            self.showdown = resolve_showdown(
                self.player_cards, self.opponent_hands, self.community_cards
            )
            winner = self.showdown.winner
            logger.info(f"Showdown: {winner.name} wins with {winner.evaluation.label}")
            return self.showdown

        deck = shuffle_deck(exclude_dealt(new_deck(), self.used_cards), self.rng)
        drawn, _ = deal(deck, CARDS_TO_REVEAL[following])

        self.community_cards = self.community_cards + drawn
        self.used_cards = self.used_cards + drawn
        self.phase = following
        logger.debug(f"{following.name}: {' '.join(str(c) for c in self.community_cards)}")

        self._build_prompt()
        return None

    def submit_answer(self, option: float) -> AnswerResult:
        """
        Answer the current prompt with one of the offered options.

        Raises:
            InvalidSessionStateError: If no prompt is open, it was already
                answered, or option is not one of the offered values
        """
        self._require_hand()
        if self.has_answered:
            raise InvalidSessionStateError(
                f"Already answered on the {self.phase.value}", self.phase.value
            )
        if not any(abs(option - offered) <= OPTION_MATCH_TOLERANCE for offered in self.options):
            raise InvalidSessionStateError(f"{option} is not one of the offered options")

        outcome = record_answer(
            self.progress,
            self.statistics,
            phase=self.phase,
            selected=option,
            correct=self.correct_probability,
            player_cards=self.player_cards,
            community_cards=self.community_cards,
            hand_type=self.current_hand().label,
        )
        self.progress = outcome.progress
        self.statistics = outcome.statistics
        self.selected_answer = option
        unlocked = self._unlock_achievements()

        logger.debug(
            f"Answer {option:.3f} vs {self.correct_probability:.3f} on "
            f"{self.phase.value}: {'correct' if outcome.is_correct else 'wrong'}"
        )
        return AnswerResult(outcome.is_correct, option, self.correct_probability, unlocked)

    def fold(self) -> bool:
        """
        Discard the current hand and deal the next one.

        Returns:
            Same as start_round()

        Raises:
            InvalidSessionStateError: If the hand already reached its showdown
        """
        self._require_hand()
        self.progress = record_fold(self.progress)
        self._unlock_achievements()
        logger.info(f"Hand #{self.progress.hands_played} folded")
        return self.start_round()

    def finish_game(self) -> GameSummary:
        """End the game and report the final accuracy."""
        self._require_running_game()
        self.progress, self.statistics, final_score = finish_game(
            self.progress, self.statistics, self.mode
        )
        self._unlock_achievements()
        self.game_finished = True
        self.final_score = final_score
        logger.info(f"Game finished with {final_score:.1f}% accuracy")
        return self.summary()

    def summary(self) -> GameSummary:
        if self.final_score is None:
            raise InvalidSessionStateError("Game has not finished")
        return GameSummary(
            final_score=self.final_score,
            hands_played=self.progress.hands_played,
            makes_rankings=would_make_rankings(self.rankings, self.final_score),
        )

    def add_to_ranking(self, name: str) -> Tuple[RankingEntry, ...]:
        """Enter the finished game on the leaderboard."""
        summary = self.summary()
        if self.ranked:
            raise InvalidSessionStateError("This game is already on the rankings")
        if not summary.makes_rankings:
            raise InvalidSessionStateError("Score does not reach the rankings")
        self.rankings = add_to_rankings(
            self.rankings, name, summary.final_score, self.progress.hands_played
        )
        self.ranked = True
        return self.rankings

    def restart(self) -> bool:
        """Start a new game, keeping statistics, achievements and rankings."""
        self.progress = new_game(self.progress)
        self.stack_size = self.initial_stack_size
        self.blind_level = 1
        self.game_finished = False
        self.final_score = None
        self.ranked = False
        self.player_cards = ()
        self.opponent_hands = []
        self.community_cards = ()
        self.used_cards = ()
        self.showdown = None
        logger.info("New game started")
        return self.start_round()

    def hints(self) -> List[str]:
        """Beginner hints for the current hand; empty in other modes."""
        if self.mode != GameMode.BEGINNER or not self.player_cards:
            return []
        return beginner_hints(self.player_cards, self.community_cards)

    def get_state(self) -> Dict[str, Any]:
        """Snapshot of the session for display or serialization."""
        score = self.progress.score
        evaluation = self.current_hand()
        return {
            "mode": self.mode.value,
            "phase": self.phase.value,
            "hand_number": self.progress.hands_played,
            "hands_per_game": self.hands_per_game,
            "player_cards": [card.to_dict() for card in self.player_cards],
            "community_cards": [card.to_dict() for card in self.community_cards],
            "num_opponents": self.num_opponents,
            "hand": evaluation.to_dict(),
            "options": list(self.options),
            "selected_answer": self.selected_answer,
            "correct_probability": self.correct_probability if self.has_answered else None,
            "score": {"correct": score.correct, "total": score.total, "folded": score.folded},
            "accuracy": score.accuracy,
            "current_streak": self.progress.current_streak,
            "best_streak": self.progress.best_streak,
            "total_games_played": self.progress.total_games_played,
            "stack_size": self.stack_size,
            "blind_level": self.blind_level,
            "achievements": list(self.achievements),
            "showdown": self.showdown.to_dict() if self.showdown else None,
            "game_finished": self.game_finished,
            "final_score": self.final_score,
            "ranked": self.ranked,
        }

    def _build_prompt(self) -> None:
        self.correct_probability = estimate_win_probability(
            list(self.player_cards) + list(self.community_cards),
            self.phase,
            self.num_opponents,
            self.mode,
            self.stack_size,
        )
        self.options = generate_distractors(self.correct_probability, self.mode, self.rng)
        self.selected_answer = None

    def _unlock_achievements(self) -> List[Achievement]:
        self.achievements, newly = check_achievements(
            self.achievements, self.progress, self.statistics
        )
        for achievement in newly:
            logger.info(f"Achievement unlocked: {achievement.name}")
        return newly

    def _require_running_game(self) -> None:
        if self.game_finished:
            raise InvalidSessionStateError("Game has already finished")

    def _require_hand(self) -> None:
        self._require_running_game()
        if not self.is_hand_running:
            raise InvalidSessionStateError("No hand in progress", self.phase.value)
