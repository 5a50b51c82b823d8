import itertools

import pytest

from rps_server.domain.hand import Hand, Outcome
from rps_server.errors import ParseHandError


def test_vs_is_antisymmetric():
    for a, b in itertools.product(Hand, Hand):
        assert a.vs(b) == b.vs(a).inverse()


def test_vs_same_hand_is_tie():
    for hand in Hand:
        assert hand.vs(hand) is Outcome.tied


def test_beat_pairs():
    assert Hand.rock.vs(Hand.scissors) is Outcome.won
    assert Hand.scissors.vs(Hand.paper) is Outcome.won
    assert Hand.paper.vs(Hand.rock) is Outcome.won
    assert Hand.scissors.vs(Hand.rock) is Outcome.lost


def test_three_cycle():
    for hand in Hand:
        beaten = [other for other in Hand if hand.vs(other) is Outcome.won]
        beaten_by = [other for other in Hand if other.vs(hand) is Outcome.won]
        assert len(beaten) == 1
        assert len(beaten_by) == 1
        assert beaten != beaten_by


def test_parse_round_trip():
    for hand in Hand:
        assert Hand.parse(hand.display_token()) is hand


@pytest.mark.parametrize("token,expected", [
    ("rock", Hand.rock),
    ("RoCk", Hand.rock),
    ("PAPER", Hand.paper),
    ("Scissors", Hand.scissors),
])
def test_parse_ignores_case(token, expected):
    assert Hand.parse(token) is expected


@pytest.mark.parametrize("token", ["", "rockk", " rock", "stone", "r", "lizard"])
def test_parse_rejects_unknown_tokens(token):
    with pytest.raises(ParseHandError):
        Hand.parse(token)


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        Hand.parse("spock")


def test_random_covers_all_hands():
    seen = {Hand.random() for _ in range(300)}
    assert seen == set(Hand)


def test_display_token_is_ascii():
    for hand in Hand:
        assert hand.display_token().isascii()
        assert hand.icon()
