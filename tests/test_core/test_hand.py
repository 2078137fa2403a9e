"""
Tests for hand evaluation.
"""

import itertools

import pytest
from pokertrainer.core.card import Card, Rank, Suit, parse_cards
from pokertrainer.core.hand import (
    evaluate_hand, evaluate_cards, compare_hands, is_straight,
    HandRank, HandEvaluation, INCOMPLETE,
)


class TestHandRanking:
    """Tests for hand ranking."""

    def test_royal_flush(self, royal_flush):
        """Test royal flush recognition."""
        result = evaluate_hand(royal_flush)
        assert result.hand_rank == HandRank.ROYAL_FLUSH
        assert result.rank == 10
        assert result.label == "Royal Flush"
        assert result.tie_score == 1014

    def test_straight_flush(self, straight_flush):
        """Test straight flush recognition."""
        result = evaluate_hand(straight_flush)
        assert result.hand_rank == HandRank.STRAIGHT_FLUSH
        assert result.tie_score == 909

    def test_four_of_a_kind(self):
        """Test four of a kind recognition."""
        result = evaluate_hand(parse_cards("As Ah Ad Ac Ks"))
        assert result.hand_rank == HandRank.FOUR_OF_A_KIND

    def test_full_house(self):
        """Three aces and two twos is a full house, not four of a kind."""
        result = evaluate_hand(parse_cards("A♠ A♥ A♦ 2♣ 2♠"))
        assert result.hand_rank == HandRank.FULL_HOUSE
        assert result.rank == 7

    def test_flush(self):
        """Test flush recognition."""
        result = evaluate_hand(parse_cards("As Ks Js 9s 2s"))
        assert result.hand_rank == HandRank.FLUSH

    def test_straight(self):
        """Test straight recognition."""
        result = evaluate_hand(parse_cards("5♠ 6♥ 7♦ 8♣ 9♠"))
        assert result.hand_rank == HandRank.STRAIGHT
        assert result.rank == 5

    def test_wheel_straight(self, wheel_straight):
        """Test wheel straight (A-2-3-4-5) recognition."""
        result = evaluate_hand(wheel_straight)
        assert result.hand_rank == HandRank.STRAIGHT
        assert result.rank == 5

    def test_three_of_a_kind(self):
        """Test three of a kind recognition."""
        result = evaluate_hand(parse_cards("As Ah Ad Kc Qs"))
        assert result.hand_rank == HandRank.THREE_OF_A_KIND

    def test_two_pair(self):
        """Test two pair recognition."""
        result = evaluate_hand(parse_cards("2♠ 2♥ 3♦ 3♣ 4♠"))
        assert result.hand_rank == HandRank.TWO_PAIR
        assert result.rank == 3

    def test_one_pair(self, sample_hand):
        """Test one pair recognition."""
        result = evaluate_hand(sample_hand)
        assert result.hand_rank == HandRank.PAIR
        assert result.label == "Pair"

    def test_high_card(self):
        """Test high card recognition."""
        result = evaluate_hand(parse_cards("As Kh Jd 9c 2s"))
        assert result.hand_rank == HandRank.HIGH_CARD
        assert result.tie_score == 114


class TestIncompleteHands:
    """Fewer than five cards is a defined state, not an error."""

    def test_two_cards(self):
        result = evaluate_hand(parse_cards("As Ah"))
        assert result == INCOMPLETE
        assert result.rank == 0
        assert result.tie_score == 0
        assert result.label == "Incomplete"
        assert result.hand_rank is None

    def test_four_cards(self):
        assert evaluate_hand(parse_cards("As Ah Ad Ac")).rank == 0

    def test_empty(self):
        assert evaluate_hand([]).rank == 0

    def test_too_many_cards(self):
        with pytest.raises(ValueError):
            evaluate_hand(parse_cards("As Ah Ad Ac Ks Kh Kd Kc"))


class TestOrderInvariance:
    """Evaluation does not depend on card order."""

    def test_royal_flush_permutations(self, royal_flush):
        expected = evaluate_hand(royal_flush)
        for perm in itertools.permutations(royal_flush):
            assert evaluate_hand(list(perm)) == expected

    def test_seven_card_permutations(self):
        cards = parse_cards("2s 2h 3d 3c 4s 9h Kd")
        expected = evaluate_hand(cards)
        for perm in itertools.islice(itertools.permutations(cards), 0, None, 97):
            assert evaluate_hand(list(perm)) == expected


class TestSevenCardEvaluation:
    """Tests for evaluation over aggregate counts of 6-7 cards."""

    def test_full_house_from_seven(self):
        """Trips plus a pair among seven cards."""
        result = evaluate_hand(parse_cards("As Ah Ad Kc Ks 2h 3d"))
        assert result.hand_rank == HandRank.FULL_HOUSE

    def test_flush_from_six_suited(self):
        """Find flush in 6 suited cards."""
        result = evaluate_hand(parse_cards("As Ks Qs Js 9s 2s 3h"))
        assert result.hand_rank == HandRank.FLUSH

    def test_straight_among_seven(self):
        result = evaluate_hand(parse_cards("2h 3d 4c 5s 6h Kd Kc"))
        assert result.hand_rank == HandRank.STRAIGHT

    def test_three_pairs_is_two_pair(self):
        result = evaluate_hand(parse_cards("2h 2d 5c 5s 9h 9d Ac"))
        assert result.hand_rank == HandRank.TWO_PAIR
        assert result.tie_score == 314

    def test_two_trips_is_three_of_a_kind(self):
        """Only a count group of exactly two completes a full house."""
        result = evaluate_hand(parse_cards("2h 2d 2c 5s 5h 5d Ac"))
        assert result.hand_rank == HandRank.THREE_OF_A_KIND

    def test_royal_flush_needs_ace_and_king(self):
        """A straight flush with an off-suit Ace-King still counts as royal."""
        result = evaluate_hand(parse_cards("9h Th Jh Qh Kh Ac 2d"))
        assert result.hand_rank == HandRank.ROYAL_FLUSH

    def test_tie_score_uses_highest_card_overall(self):
        """The highest card counts even when it is not part of the category."""
        result = evaluate_hand(parse_cards("2h 2d 5c 7s 9h Kd Ac"))
        assert result.hand_rank == HandRank.PAIR
        assert result.tie_score == 214


class TestStraightDetection:
    """Tests for the straight helper."""

    def test_consecutive_run(self):
        assert is_straight([Rank.TEN, Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE])

    def test_wheel(self):
        assert is_straight([Rank.ACE, Rank.TWO, Rank.THREE, Rank.FOUR, Rank.FIVE])

    def test_no_wraparound(self):
        assert not is_straight([Rank.QUEEN, Rank.KING, Rank.ACE, Rank.TWO, Rank.THREE])

    def test_gap(self):
        assert not is_straight([Rank.TWO, Rank.THREE, Rank.FOUR, Rank.FIVE, Rank.SEVEN])


class TestHandComparison:
    """Tests for comparing hands."""

    def test_royal_flush_beats_straight_flush(self, royal_flush, straight_flush):
        assert compare_hands(royal_flush, straight_flush) == -1

    def test_flush_beats_straight(self):
        flush = parse_cards("Ks Js 9s 7s 2s")
        straight = parse_cards("As Kh Qd Jc Th")
        assert compare_hands(flush, straight) == -1
        assert compare_hands(straight, flush) == 1

    def test_higher_top_card_wins_same_category(self):
        assert compare_hands(parse_cards("As Ah Kd Qc Js"), parse_cards("Ks Kh Qd Jc Ts")) == -1

    def test_kickers_are_not_compared(self):
        """Same category and same top card tie regardless of kickers."""
        two_pair_high_kicker = parse_cards("As Ah Kd Kc Qs")
        two_pair_low_kicker = parse_cards("Ad Ac Ks Kh 2s")
        assert compare_hands(two_pair_high_kicker, two_pair_low_kicker) == 0


class TestEvaluateCards:
    def test_combines_hole_and_board(self):
        hole = [Card(Rank.ACE, Suit.HEARTS), Card(Rank.KING, Suit.HEARTS)]
        board = parse_cards("Qh Jh Th")
        assert evaluate_cards(hole, board) == HandEvaluation(10, 1014, "Royal Flush")

    def test_preflop_is_incomplete(self):
        assert evaluate_cards(parse_cards("As Ks"), []) == INCOMPLETE
