"""
Pytest configuration and shared fixtures for Poker Trainer tests.
"""

import random

import pytest
from pokertrainer.core.card import Card, Rank, Suit, new_deck, parse_cards
from pokertrainer.core.rules import GameMode
from pokertrainer.core.session import TrainingSession


@pytest.fixture
def rng():
    """A seeded random source for reproducible deals."""
    return random.Random(1234)


@pytest.fixture
def unshuffled_deck():
    """A fresh deck in canonical order."""
    return new_deck()


@pytest.fixture
def session(rng):
    """A normal-mode session with its first hand dealt."""
    session = TrainingSession(mode=GameMode.NORMAL, rng=rng)
    session.start_round()
    return session


@pytest.fixture
def sample_hand():
    """Create a sample 5-card hand (pair of aces)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.ACE, Suit.HEARTS),
        Card(Rank.KING, Suit.DIAMONDS),
        Card(Rank.QUEEN, Suit.CLUBS),
        Card(Rank.JACK, Suit.SPADES),
    ]


@pytest.fixture
def royal_flush():
    """Create a royal flush hand."""
    return parse_cards("Ah Kh Qh Jh Th")


@pytest.fixture
def straight_flush():
    """Create a straight flush (9-high)."""
    return parse_cards("9h 8h 7h 6h 5h")


@pytest.fixture
def wheel_straight():
    """Create a wheel straight (A-2-3-4-5)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.TWO, Suit.HEARTS),
        Card(Rank.THREE, Suit.DIAMONDS),
        Card(Rank.FOUR, Suit.CLUBS),
        Card(Rank.FIVE, Suit.SPADES),
    ]
