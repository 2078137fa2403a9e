"""
Trainee progress: score, streaks, statistics, achievements and rankings.

Everything here is an immutable record. Functions take the current state
and return the new state; nothing is stored at module level, so the
caller decides where progress lives (memory, a database, a browser).
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta, timezone
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pokertrainer.core.card import Card
from pokertrainer.core.rules import (
    GameMode, GamePhase,
    ANSWER_TOLERANCE, ERROR_TREND_THRESHOLD, HISTORY_LIMIT, MAX_RANKING_ENTRIES,
    HANDS_PER_GAME,
)


@dataclass(frozen=True)
class Score:
    """Answer counters for the current game."""
    correct: int = 0
    total: int = 0
    folded: int = 0

    @property
    def accuracy(self) -> float:
        """Percentage of correct answers, 0 when nothing was answered."""
        return (self.correct / self.total) * 100 if self.total else 0.0


@dataclass(frozen=True)
class GameProgress:
    """
    Progress through one training game.

    Attributes:
        score: Answer counters
        hands_played: Hands dealt in this game
        current_streak: Consecutive correct answers
        best_streak: Longest streak ever (survives restarts)
        total_games_played: Finished games (survives restarts)
    """
    score: Score = field(default_factory=Score)
    hands_played: int = 0
    current_streak: int = 0
    best_streak: int = 0
    total_games_played: int = 0


@dataclass(frozen=True)
class Tally:
    """Correct/total counter used per phase and per hand type."""
    correct: int = 0
    total: int = 0

    def add(self, is_correct: bool) -> Tally:
        return Tally(self.correct + (1 if is_correct else 0), self.total + 1)


@dataclass(frozen=True)
class ErrorTrends:
    """How far answers tend to drift from the correct value."""
    optimistic: int = 0
    pessimistic: int = 0
    accurate: int = 0


@dataclass(frozen=True)
class HandRecord:
    """One answered prompt, kept in the hand history."""
    hand: int
    player_cards: Tuple[Card, ...]
    community_cards: Tuple[Card, ...]
    phase: GamePhase
    estimated: float
    actual: float
    is_correct: bool
    hand_type: str
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "hand": self.hand,
            "player_cards": [card.short_str for card in self.player_cards],
            "community_cards": [card.short_str for card in self.community_cards],
            "phase": self.phase.value,
            "estimated": self.estimated,
            "actual": self.actual,
            "is_correct": self.is_correct,
            "hand_type": self.hand_type,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class EvolutionPoint:
    """Running accuracy after an answer."""
    hand: int
    accuracy: float
    phase: GamePhase


_STATISTICS_MAPPINGS = ("phase_stats", "hand_type_stats", "hands_by_mode", "games_by_mode")


@dataclass(frozen=True)
class Statistics:
    """
    Long-lived statistics; not cleared when a new game starts.

    Attributes:
        hand_history: Most recent answers first, at most HISTORY_LIMIT
        evolution: Running accuracy after every answer
        phase_stats: Tally per phase
        hand_type_stats: Tally per hand label
        error_trends: Optimistic/pessimistic/accurate counts
        hands_by_mode: Hands dealt per game mode
        games_by_mode: Finished games per game mode
        days_played: Dates (ISO) on which a hand was dealt
    """
    hand_history: Tuple[HandRecord, ...] = ()
    evolution: Tuple[EvolutionPoint, ...] = ()
    phase_stats: Mapping[GamePhase, Tally] = field(
        default_factory=lambda: {phase: Tally() for phase in GamePhase}
    )
    hand_type_stats: Mapping[str, Tally] = field(default_factory=dict)
    error_trends: ErrorTrends = field(default_factory=ErrorTrends)
    hands_by_mode: Mapping[GameMode, int] = field(default_factory=dict)
    games_by_mode: Mapping[GameMode, int] = field(default_factory=dict)
    days_played: Tuple[str, ...] = ()

    def __post_init__(self):
        for name in _STATISTICS_MAPPINGS:
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))
        object.__setattr__(self, "hand_history", tuple(self.hand_history))
        object.__setattr__(self, "evolution", tuple(self.evolution))
        object.__setattr__(self, "days_played", tuple(self.days_played))

    def __hash__(self):
        return hash((
            self.hand_history,
            self.evolution,
            self.error_trends,
            self.days_played,
        ) + tuple(frozenset(getattr(self, name).items()) for name in _STATISTICS_MAPPINGS))

    def to_dict(self) -> dict:
        def tallies(stats):
            return {key: {"correct": t.correct, "total": t.total} for key, t in stats.items()}

        return {
            "hand_history": [record.to_dict() for record in self.hand_history],
            "evolution": [
                {"hand": p.hand, "accuracy": p.accuracy, "phase": p.phase.value}
                for p in self.evolution
            ],
            "phase_stats": tallies({p.value: t for p, t in self.phase_stats.items()}),
            "hand_type_stats": tallies(self.hand_type_stats),
            "error_trends": {
                "optimistic": self.error_trends.optimistic,
                "pessimistic": self.error_trends.pessimistic,
                "accurate": self.error_trends.accurate,
            },
            "hands_by_mode": {m.value: n for m, n in self.hands_by_mode.items()},
            "games_by_mode": {m.value: n for m, n in self.games_by_mode.items()},
            "days_played": list(self.days_played),
        }


@dataclass(frozen=True)
class Achievement:
    """An unlockable achievement."""
    id: str
    name: str
    description: str


ACHIEVEMENTS = (
    Achievement("first_win", "First Win", "Get your first probability right"),
    Achievement("streak_5", "Streak of 5", "5 correct answers in a row"),
    Achievement("streak_10", "Ace High", "10 correct answers in a row"),
    Achievement("folder", "Selective", "Fold 10 hands"),
    Achievement("river_master", "River Master", "Get 10 river probabilities right"),
    Achievement("perfectionist", "Perfectionist", "95% accuracy over 20 answers"),
    Achievement("analyzer", "Analyst", "Play 50 hands"),
    Achievement("tournament_player", "Tournament Player", "Play 10 hands in tournament mode"),
    Achievement("dedicated", "Dedicated", "Play on 5 consecutive days"),
    Achievement("expert", "Specialist", "Finish 10 games in expert mode"),
)


@dataclass(frozen=True)
class RankingEntry:
    """A finished game on the leaderboard."""
    name: str
    score: float
    hands: int
    date: str

    def to_dict(self) -> dict:
        return {"name": self.name, "score": self.score, "hands": self.hands, "date": self.date}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def default_rankings(now: Optional[datetime] = None) -> Tuple[RankingEntry, ...]:
    """Leaderboard seeded for a fresh install."""
    stamp = (now or _now()).isoformat()
    seeds = (
        ("PokerPro", 85.2),
        ("CardShark", 82.7),
        ("BluffMaster", 79.3),
        ("AceHunter", 76.8),
        ("RiverRat", 74.5),
    )
    return tuple(RankingEntry(name, score, HANDS_PER_GAME, stamp) for name, score in seeds)


@dataclass(frozen=True)
class AnswerOutcome:
    """New state after an answer is recorded."""
    progress: GameProgress
    statistics: Statistics
    is_correct: bool


def is_correct_answer(selected: float, correct: float) -> bool:
    return abs(selected - correct) < ANSWER_TOLERANCE


def record_deal(
    progress: GameProgress,
    statistics: Statistics,
    mode: GameMode,
    now: Optional[datetime] = None,
) -> Tuple[GameProgress, Statistics]:
    """Count a newly dealt hand."""
    today = (now or _now()).date().isoformat()
    days = statistics.days_played if today in statistics.days_played else statistics.days_played + (today,)
    hands_by_mode = dict(statistics.hands_by_mode)
    hands_by_mode[mode] = hands_by_mode.get(mode, 0) + 1
    return (
        replace(progress, hands_played=progress.hands_played + 1),
        replace(statistics, hands_by_mode=hands_by_mode, days_played=days),
    )


def record_answer(
    progress: GameProgress,
    statistics: Statistics,
    *,
    phase: GamePhase,
    selected: float,
    correct: float,
    player_cards: Sequence[Card],
    community_cards: Sequence[Card],
    hand_type: str,
    now: Optional[datetime] = None,
) -> AnswerOutcome:
    """
    Score an answer and fold it into progress and statistics.

    A correct answer extends the streak; a wrong one resets it.
    """
    hit = is_correct_answer(selected, correct)
    score = replace(
        progress.score,
        correct=progress.score.correct + (1 if hit else 0),
        total=progress.score.total + 1,
    )
    streak = progress.current_streak + 1 if hit else 0
    new_progress = replace(
        progress,
        score=score,
        current_streak=streak,
        best_streak=max(progress.best_streak, streak),
    )

    phase_stats = dict(statistics.phase_stats)
    phase_stats[phase] = phase_stats.get(phase, Tally()).add(hit)

    hand_type_stats = dict(statistics.hand_type_stats)
    hand_type_stats[hand_type] = hand_type_stats.get(hand_type, Tally()).add(hit)

    record = HandRecord(
        hand=progress.hands_played,
        player_cards=tuple(player_cards),
        community_cards=tuple(community_cards),
        phase=phase,
        estimated=selected,
        actual=correct,
        is_correct=hit,
        hand_type=hand_type,
        timestamp=(now or _now()).isoformat(),
    )

    new_statistics = replace(
        statistics,
        hand_history=((record,) + statistics.hand_history)[:HISTORY_LIMIT],
        evolution=statistics.evolution + (
            EvolutionPoint(progress.hands_played, score.accuracy, phase),
        ),
        phase_stats=phase_stats,
        hand_type_stats=hand_type_stats,
        error_trends=update_error_trends(statistics.error_trends, selected, correct),
    )
    return AnswerOutcome(new_progress, new_statistics, hit)


def update_error_trends(trends: ErrorTrends, selected: float, correct: float) -> ErrorTrends:
    """Classify an answer as optimistic, pessimistic or accurate."""
    diff = selected - correct
    return ErrorTrends(
        optimistic=trends.optimistic + (1 if diff > ERROR_TREND_THRESHOLD else 0),
        pessimistic=trends.pessimistic + (1 if diff < -ERROR_TREND_THRESHOLD else 0),
        accurate=trends.accurate + (1 if abs(diff) <= ERROR_TREND_THRESHOLD else 0),
    )


def record_fold(progress: GameProgress) -> GameProgress:
    return replace(progress, score=replace(progress.score, folded=progress.score.folded + 1))


def finish_game(
    progress: GameProgress,
    statistics: Statistics,
    mode: GameMode,
) -> Tuple[GameProgress, Statistics, float]:
    """
    Close the current game.

    Returns:
        Tuple of (progress, statistics, final accuracy percentage)
    """
    games_by_mode = dict(statistics.games_by_mode)
    games_by_mode[mode] = games_by_mode.get(mode, 0) + 1
    return (
        replace(progress, total_games_played=progress.total_games_played + 1),
        replace(statistics, games_by_mode=games_by_mode),
        progress.score.accuracy,
    )


def new_game(progress: GameProgress) -> GameProgress:
    """Fresh game counters; best streak and games played carry over."""
    return GameProgress(
        best_streak=progress.best_streak,
        total_games_played=progress.total_games_played,
    )


def _longest_day_run(days: Iterable[str]) -> int:
    ordered = sorted({date.fromisoformat(day) for day in days})
    best = run = 0
    previous = None
    for day in ordered:
        run = run + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        best = max(best, run)
        previous = day
    return best


def _achievement_checks(progress: GameProgress, statistics: Statistics) -> Dict[str, bool]:
    score = progress.score
    river = statistics.phase_stats.get(GamePhase.RIVER, Tally())
    return {
        "first_win": score.correct >= 1,
        "streak_5": progress.current_streak >= 5,
        "streak_10": progress.current_streak >= 10,
        "folder": score.folded >= 10,
        "river_master": river.correct >= 10,
        "perfectionist": score.total >= 20 and score.accuracy >= 95,
        "analyzer": progress.hands_played >= HANDS_PER_GAME,
        "tournament_player": statistics.hands_by_mode.get(GameMode.TOURNAMENT, 0) >= 10,
        "dedicated": _longest_day_run(statistics.days_played) >= 5,
        "expert": statistics.games_by_mode.get(GameMode.EXPERT, 0) >= 10,
    }


def check_achievements(
    unlocked: Sequence[str],
    progress: GameProgress,
    statistics: Statistics,
) -> Tuple[Tuple[str, ...], List[Achievement]]:
    """
    Unlock every achievement whose condition now holds.

    Returns:
        Tuple of (all unlocked ids, newly unlocked achievements)
    """
    checks = _achievement_checks(progress, statistics)
    newly = [
        achievement for achievement in ACHIEVEMENTS
        if achievement.id not in unlocked and checks[achievement.id]
    ]
    return tuple(unlocked) + tuple(a.id for a in newly), newly


def would_make_rankings(rankings: Sequence[RankingEntry], score: float) -> bool:
    """True if score earns a place on the leaderboard."""
    return len(rankings) < MAX_RANKING_ENTRIES or score > rankings[-1].score


def add_to_rankings(
    rankings: Sequence[RankingEntry],
    name: str,
    score: float,
    hands: int = HANDS_PER_GAME,
    now: Optional[datetime] = None,
) -> Tuple[RankingEntry, ...]:
    """
    Insert a finished game and keep the top entries by score.

    Raises:
        ValueError: If name is blank
    """
    name = name.strip()
    if not name:
        raise ValueError("Ranking name must not be empty")
    entry = RankingEntry(name, score, hands, (now or _now()).isoformat())
    ordered = sorted(list(rankings) + [entry], key=lambda e: e.score, reverse=True)
    return tuple(ordered[:MAX_RANKING_ENTRIES])
