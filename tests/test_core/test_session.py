"""
Tests for the training session state machine.

These tests cover:
- Dealing: hole cards, opponent count range, disjoint cards on every street
- Phase progression and the showdown after the river
- Answering, folding, finishing and restarting a game
- Tournament blind levels and beginner hints
"""

import random

import pytest
from pokertrainer.core.errors import InvalidSessionStateError
from pokertrainer.core.progress import Score
from pokertrainer.core.rules import GameMode, GamePhase, MIN_OPPONENTS, MAX_OPPONENTS
from pokertrainer.core.session import TrainingSession


def all_cards(session):
    cards = list(session.player_cards) + list(session.community_cards)
    for hand in session.opponent_hands:
        cards.extend(hand)
    return cards


def play_to_showdown(session):
    while session.phase != GamePhase.RIVER:
        session.next_phase()
    return session.next_phase()


class TestDealing:
    """Tests for dealing a hand."""

    def test_start_round(self, session):
        assert session.phase == GamePhase.PREFLOP
        assert len(session.player_cards) == 2
        assert all(len(hand) == 2 for hand in session.opponent_hands)
        assert session.community_cards == ()
        assert session.progress.hands_played == 1

    def test_opponent_count_range(self):
        session = TrainingSession(rng=random.Random(99), hands_per_game=500)
        counts = set()
        for _ in range(300):
            session.start_round()
            counts.add(session.num_opponents)
        assert min(counts) == MIN_OPPONENTS
        assert max(counts) == MAX_OPPONENTS

    def test_cards_disjoint_on_every_street(self):
        session = TrainingSession(rng=random.Random(5), hands_per_game=100)
        for _ in range(30):
            session.start_round()
            for expected in (0, 3, 4, 5):
                assert len(session.community_cards) == expected
                cards = all_cards(session)
                assert len(cards) == len(set(cards))
                assert set(cards) == set(session.used_cards)
                if session.phase != GamePhase.RIVER:
                    session.next_phase()

    def test_prompt_built(self, session):
        assert len(session.options) == 4
        assert session.correct_probability in session.options
        assert 0.05 <= session.correct_probability <= 0.95

    def test_seeded_sessions_repeat(self):
        a = TrainingSession(rng=random.Random(17))
        b = TrainingSession(rng=random.Random(17))
        a.start_round()
        b.start_round()
        assert a.player_cards == b.player_cards
        assert a.options == b.options


class TestPhases:
    """Tests for street progression."""

    def test_phases_advance_in_order(self, session):
        seen = [session.phase]
        while session.phase != GamePhase.RIVER:
            assert session.next_phase() is None
            seen.append(session.phase)
        assert seen == [GamePhase.PREFLOP, GamePhase.FLOP, GamePhase.TURN, GamePhase.RIVER]

    def test_showdown_after_river(self, session):
        result = play_to_showdown(session)
        assert result is not None
        assert len(result.standings) == session.num_opponents + 1
        assert session.showdown is result
        assert not session.is_hand_running

    def test_no_advance_after_showdown(self, session):
        play_to_showdown(session)
        with pytest.raises(InvalidSessionStateError):
            session.next_phase()

    def test_new_prompt_each_street(self, session):
        session.submit_answer(session.options[0])
        session.next_phase()
        assert not session.has_answered
        assert session.correct_probability in session.options


class TestAnswers:
    """Tests for answering prompts."""

    def test_correct_answer(self, session):
        result = session.submit_answer(session.correct_probability)
        assert result.is_correct
        assert session.progress.score.correct == 1
        assert session.progress.current_streak == 1
        assert "first_win" in session.achievements
        assert [a.id for a in result.unlocked] == ["first_win"]

    def test_wrong_answer(self, session):
        wrong = next(o for o in session.options if o != session.correct_probability)
        result = session.submit_answer(wrong)
        assert not result.is_correct
        assert session.progress.score == Score(correct=0, total=1, folded=0)
        assert session.progress.current_streak == 0

    def test_answer_twice_rejected(self, session):
        session.submit_answer(session.options[0])
        with pytest.raises(InvalidSessionStateError):
            session.submit_answer(session.options[1])

    def test_answer_must_be_an_option(self, session):
        with pytest.raises(InvalidSessionStateError):
            session.submit_answer(1.5)

    def test_answer_recorded_in_history(self, session):
        session.submit_answer(session.correct_probability)
        record = session.statistics.hand_history[0]
        assert record.phase == GamePhase.PREFLOP
        assert record.hand_type == "Incomplete"
        assert record.player_cards == session.player_cards

    def test_state_hides_correct_value_until_answered(self, session):
        assert session.get_state()["correct_probability"] is None
        session.submit_answer(session.options[0])
        assert session.get_state()["correct_probability"] == session.correct_probability


class TestGameLifecycle:
    """Tests for folding, finishing and restarting."""

    def test_fold_deals_new_hand(self, session):
        assert session.fold()
        assert session.progress.score.folded == 1
        assert session.progress.hands_played == 2
        assert session.phase == GamePhase.PREFLOP

    def test_game_finishes_after_last_hand(self):
        session = TrainingSession(rng=random.Random(3), hands_per_game=2)
        assert session.start_round()
        session.submit_answer(session.correct_probability)
        assert session.start_round()
        assert not session.start_round()
        assert session.game_finished
        assert session.final_score == 100.0
        assert session.progress.total_games_played == 1

        with pytest.raises(InvalidSessionStateError):
            session.start_round()

    def test_summary_and_ranking(self):
        session = TrainingSession(rng=random.Random(3), hands_per_game=1)
        session.start_round()
        session.submit_answer(session.correct_probability)
        summary = session.finish_game()
        assert summary.final_score == 100.0
        assert summary.makes_rankings

        rankings = session.add_to_ranking("Trainee")
        assert rankings[0].name == "Trainee"
        assert rankings[0].score == 100.0

    def test_summary_before_finish(self, session):
        with pytest.raises(InvalidSessionStateError):
            session.summary()

    def test_restart_keeps_best_streak(self, session):
        session.submit_answer(session.correct_probability)
        session.finish_game()
        assert session.restart()
        assert not session.game_finished
        assert session.progress.best_streak == 1
        assert session.progress.current_streak == 0
        assert session.progress.total_games_played == 1
        assert session.progress.hands_played == 1
        assert session.statistics.hand_history

    def test_game_ranked_only_once(self):
        """A finished game enters the leaderboard a single time."""
        session = TrainingSession(rng=random.Random(1), hands_per_game=1, rankings=())
        session.start_round()
        session.finish_game()
        session.add_to_ranking("Ana")
        assert session.ranked

        with pytest.raises(InvalidSessionStateError):
            session.add_to_ranking("Ana")
        assert [entry.name for entry in session.rankings] == ["Ana"]

    def test_restart_allows_ranking_again(self):
        """The next game can be entered after a restart."""
        session = TrainingSession(rng=random.Random(1), hands_per_game=1, rankings=())
        session.start_round()
        session.finish_game()
        session.add_to_ranking("Ana")

        session.restart()
        assert not session.ranked
        session.finish_game()
        session.add_to_ranking("Ana")
        assert len(session.rankings) == 2

    def test_fold_after_showdown_rejected(self, session):
        """A resolved hand cannot be folded."""
        play_to_showdown(session)
        with pytest.raises(InvalidSessionStateError):
            session.fold()
        assert session.progress.score.folded == 0

    def test_invalid_settings(self):
        with pytest.raises(ValueError):
            TrainingSession(stack_size=0)
        with pytest.raises(ValueError):
            TrainingSession(mode="hardcore")


class TestModes:
    """Mode-specific behaviour."""

    def test_tournament_blind_level(self):
        session = TrainingSession(mode=GameMode.TOURNAMENT, rng=random.Random(1))
        for _ in range(10):
            session.start_round()
        assert session.blind_level == 2
        assert session.statistics.hands_by_mode[GameMode.TOURNAMENT] == 10
        session.fold()
        assert "tournament_player" in session.achievements

    def test_blind_level_fixed_outside_tournament(self):
        session = TrainingSession(mode=GameMode.NORMAL, rng=random.Random(1))
        for _ in range(10):
            session.start_round()
        assert session.blind_level == 1

    def test_beginner_hints(self):
        session = TrainingSession(mode="beginner", rng=random.Random(2))
        session.start_round()
        hints = session.hints()
        assert hints[0] in ("Weak hand", "Average hand", "Good hand", "Very strong hand!")

    def test_no_hints_outside_beginner(self, session):
        assert session.hints() == []
