"""
HTTP API Routes for the Poker Trainer.

Session routes drive a TrainingSession (deal, answer, advance, fold,
finish). The stateless routes expose the evaluator, the probability
estimator and the showdown resolver directly.
"""

from typing import Dict, Any, List, Sequence
import logging
import random
import threading
import uuid

from fastapi import APIRouter, HTTPException

from pokertrainer.core.card import Card, parse_cards
from pokertrainer.core.errors import PokerTrainerError
from pokertrainer.core.hand import evaluate_hand
from pokertrainer.core.probability import estimate_win_probability, generate_distractors
from pokertrainer.core.progress import RankingEntry, default_rankings
from pokertrainer.core.rules import parse_mode
from pokertrainer.core.session import TrainingSession
from pokertrainer.core.showdown import resolve_showdown
from pokertrainer.server.schemas import (
    CreateSessionRequest, AnswerRequest, RankingRequest,
    EvaluateRequest, ProbabilityRequest, ShowdownRequest,
    AnswerResultSchema, GameSummarySchema, ProbabilitySchema, EvaluationSchema,
    RankingsSchema,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Oldest sessions are dropped past this size, finished games first
MAX_SESSIONS = 1000

# In-process session registry; one leaderboard shared by every session
_sessions: Dict[str, TrainingSession] = {}
_rankings: List[RankingEntry] = list(default_rankings())
_lock = threading.Lock()


def get_session(session_id: str) -> TrainingSession:
    """Look up a session or answer 404."""
    with _lock:
        session = _sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
    return session


def reset_sessions() -> None:
    """Drop every session and restore the seeded leaderboard."""
    with _lock:
        _sessions.clear()
        _rankings[:] = default_rankings()


def _evict_sessions() -> None:
    """Make room for one more session. Caller holds _lock."""
    while len(_sessions) >= MAX_SESSIONS:
        finished = [sid for sid, s in _sessions.items() if s.game_finished]
        evicted = finished[0] if finished else next(iter(_sessions))
        del _sessions[evicted]
        logger.info(f"Session {evicted} evicted")


def _bad_request(error: Exception) -> HTTPException:
    return HTTPException(status_code=400, detail=str(error))


def _parse(cards: Sequence[str]) -> List[Card]:
    try:
        return parse_cards(cards)
    except ValueError as e:
        raise _bad_request(e)


def _require_distinct(*groups: Sequence[Card]) -> None:
    seen = set()
    for group in groups:
        for card in group:
            if card in seen:
                raise HTTPException(status_code=400, detail=f"Card dealt twice: {card.short_str}")
            seen.add(card)


def _session_response(session_id: str, session: TrainingSession) -> Dict[str, Any]:
    return {"session_id": session_id, "state": session.get_state()}


# ============= Session Routes =============

@router.post("/sessions")
async def create_session(req: CreateSessionRequest) -> Dict[str, Any]:
    """
    Start a training session and deal its first hand.
    """
    try:
        with _lock:
            rankings = tuple(_rankings)
        session = TrainingSession(
            mode=parse_mode(req.mode),
            stack_size=req.stack_size,
            hands_per_game=req.hands_per_game,
            rng=random.Random(req.seed) if req.seed is not None else None,
            rankings=rankings,
        )
        session.start_round()
    except (PokerTrainerError, ValueError) as e:
        raise _bad_request(e)

    session_id = uuid.uuid4().hex
    with _lock:
        _evict_sessions()
        _sessions[session_id] = session
    logger.info(f"Session {session_id} created in {session.mode.value} mode")
    return _session_response(session_id, session)


@router.get("/sessions/{session_id}")
async def get_session_state(session_id: str) -> Dict[str, Any]:
    """Get the current session state."""
    return _session_response(session_id, get_session(session_id))


@router.delete("/sessions/{session_id}")
async def delete_session(session_id: str) -> Dict[str, Any]:
    get_session(session_id)
    with _lock:
        _sessions.pop(session_id, None)
    return {"success": True, "message": f"Session {session_id} closed"}


@router.post("/sessions/{session_id}/answer", response_model=AnswerResultSchema)
async def answer(session_id: str, req: AnswerRequest) -> AnswerResultSchema:
    """
    Answer the current probability prompt.
    """
    session = get_session(session_id)
    try:
        result = session.submit_answer(req.option)
    except PokerTrainerError as e:
        raise _bad_request(e)

    return AnswerResultSchema(
        is_correct=result.is_correct,
        selected=result.selected,
        correct=result.correct,
        unlocked=[achievement.id for achievement in result.unlocked],
    )


@router.post("/sessions/{session_id}/next")
async def next_phase(session_id: str) -> Dict[str, Any]:
    """
    Reveal the next street, or resolve the showdown after the river.
    """
    session = get_session(session_id)
    try:
        showdown = session.next_phase()
    except PokerTrainerError as e:
        raise _bad_request(e)

    response = _session_response(session_id, session)
    response["showdown"] = showdown.to_dict() if showdown else None
    return response


@router.post("/sessions/{session_id}/deal")
async def deal_next_hand(session_id: str) -> Dict[str, Any]:
    """
    Deal the next hand (finishes the game after the last hand).
    """
    session = get_session(session_id)
    try:
        dealt = session.start_round()
    except PokerTrainerError as e:
        raise _bad_request(e)

    response = _session_response(session_id, session)
    response["dealt"] = dealt
    return response


@router.post("/sessions/{session_id}/fold")
async def fold(session_id: str) -> Dict[str, Any]:
    """Fold the current hand and deal the next one."""
    session = get_session(session_id)
    try:
        session.fold()
    except PokerTrainerError as e:
        raise _bad_request(e)
    return _session_response(session_id, session)


@router.get("/sessions/{session_id}/hints")
async def hints(session_id: str) -> Dict[str, Any]:
    """Beginner hints for the current hand."""
    return {"hints": get_session(session_id).hints()}


@router.get("/sessions/{session_id}/statistics")
async def statistics(session_id: str) -> Dict[str, Any]:
    """Hand history, per-phase accuracy and error trends."""
    return get_session(session_id).statistics.to_dict()


@router.post("/sessions/{session_id}/finish", response_model=GameSummarySchema)
async def finish(session_id: str) -> GameSummarySchema:
    """End the game early."""
    session = get_session(session_id)
    try:
        summary = session.finish_game()
    except PokerTrainerError as e:
        raise _bad_request(e)
    return GameSummarySchema(**summary.__dict__)


@router.post("/sessions/{session_id}/restart")
async def restart(session_id: str) -> Dict[str, Any]:
    """Start a new game in the same session."""
    session = get_session(session_id)
    with _lock:
        session.rankings = tuple(_rankings)
    session.restart()
    return _session_response(session_id, session)


@router.post("/sessions/{session_id}/ranking", response_model=RankingsSchema)
async def add_ranking(session_id: str, req: RankingRequest) -> Dict[str, Any]:
    """Enter the finished game on the shared leaderboard."""
    session = get_session(session_id)
    with _lock:
        session.rankings = tuple(_rankings)
        try:
            rankings = session.add_to_ranking(req.name)
        except (PokerTrainerError, ValueError) as e:
            raise _bad_request(e)
        _rankings[:] = rankings
    return {"rankings": [entry.to_dict() for entry in rankings]}


@router.get("/rankings", response_model=RankingsSchema)
async def get_rankings() -> Dict[str, Any]:
    with _lock:
        return {"rankings": [entry.to_dict() for entry in _rankings]}


# ============= Stateless Routes =============

@router.post("/evaluate", response_model=EvaluationSchema)
async def evaluate(req: EvaluateRequest) -> EvaluationSchema:
    """Evaluate up to 7 cards."""
    cards = _parse(req.cards)
    _require_distinct(cards)
    return EvaluationSchema(**evaluate_hand(cards).to_dict())


@router.post("/probability", response_model=ProbabilitySchema)
async def probability(req: ProbabilityRequest) -> ProbabilitySchema:
    """Estimate win probability and build the answer options."""
    cards = _parse(req.cards)
    _require_distinct(cards)
    try:
        value = estimate_win_probability(
            cards, req.phase, req.opponent_count, req.mode, req.stack_size
        )
        options = generate_distractors(value, req.mode)
    except (PokerTrainerError, ValueError) as e:
        raise _bad_request(e)

    return ProbabilitySchema(
        probability=value,
        evaluation=EvaluationSchema(**evaluate_hand(cards).to_dict()),
        options=options,
    )


@router.post("/showdown")
async def showdown(req: ShowdownRequest) -> Dict[str, Any]:
    """Determine the winner among the player and the opponents."""
    player_cards = _parse(req.player_cards)
    opponent_hands = [_parse(hand) for hand in req.opponent_hands]
    community_cards = _parse(req.community_cards)
    for hand in opponent_hands:
        if len(hand) != 2:
            raise HTTPException(status_code=400, detail="Each opponent needs exactly 2 cards")
    _require_distinct(player_cards, community_cards, *opponent_hands)

    return resolve_showdown(player_cards, opponent_hands, community_cards).to_dict()
