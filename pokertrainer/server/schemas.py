"""
Pydantic schemas for API request/response validation.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


# ============= Request Schemas =============

class CreateSessionRequest(BaseModel):
    """Request to start a training session."""
    mode: str = Field(default="normal", description="beginner, normal, expert, tournament or scenario")
    stack_size: int = Field(gt=0, default=1000)
    hands_per_game: int = Field(ge=1, le=500, default=50)
    seed: Optional[int] = Field(default=None, description="Seed for a reproducible deal sequence")


class AnswerRequest(BaseModel):
    """Request to answer the current probability prompt."""
    option: float = Field(..., ge=0.0, le=1.0)


class RankingRequest(BaseModel):
    """Request to enter a finished game on the leaderboard."""
    name: str = Field(..., min_length=1, max_length=32)


class EvaluateRequest(BaseModel):
    """Request to evaluate a hand."""
    cards: List[str] = Field(..., max_length=7, description='Card codes such as "As", "Td", "10h"')


class ProbabilityRequest(BaseModel):
    """Request to estimate win probability."""
    cards: List[str] = Field(..., min_length=2, max_length=7)
    phase: str = Field(..., description="preflop, flop, turn or river")
    opponent_count: int = Field(ge=1, le=9, default=1)
    mode: str = "normal"
    stack_size: Optional[int] = Field(default=None, gt=0)


class ShowdownRequest(BaseModel):
    """Request to resolve a showdown."""
    player_cards: List[str] = Field(..., min_length=2, max_length=2)
    opponent_hands: List[List[str]] = Field(..., min_length=1)
    community_cards: List[str] = Field(default_factory=list, max_length=5)


# ============= Response Schemas =============

class EvaluationSchema(BaseModel):
    """Hand evaluation."""
    rank: int
    tie_score: int
    label: str


class ProbabilitySchema(BaseModel):
    """Probability estimate with multiple-choice options."""
    probability: float
    evaluation: EvaluationSchema
    options: List[float]


class AnswerResultSchema(BaseModel):
    """Result of an answer."""
    is_correct: bool
    selected: float
    correct: float
    unlocked: List[str] = []


class GameSummarySchema(BaseModel):
    """Result of finishing a game."""
    final_score: float
    hands_played: int
    makes_rankings: bool


class RankingEntrySchema(BaseModel):
    """Leaderboard entry."""
    name: str
    score: float
    hands: int
    date: str


class RankingsSchema(BaseModel):
    """The shared leaderboard."""
    rankings: List[RankingEntrySchema]
