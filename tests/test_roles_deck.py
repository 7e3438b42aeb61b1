"""
Tests for roles, cards and the court deck.
"""

import random

import pytest

from coup_engine.core import Role, Card, Deck, copies_per_role


def test_deck_has_three_of_each_role():
    deck = Deck.build(rng=random.Random(1))
    assert len(deck) == 15
    for role in Role:
        assert deck.count_role(role) == 3
    assert len({c.card_id for c in deck.cards}) == 15


def test_build_is_reproducible_with_seed():
    first = Deck.build(rng=random.Random(5))
    second = Deck.build(rng=random.Random(5))
    assert [c.card_id for c in first.cards] == [c.card_id for c in second.cards]


@pytest.mark.parametrize("players,expected", [(2, 3), (6, 3), (7, 4), (8, 4), (9, 5), (10, 5)])
def test_copies_scale_with_table(players, expected):
    assert copies_per_role(players) == expected


def test_deal_stops_when_deck_runs_out():
    deck = Deck.build(copies=1, rng=random.Random(0))
    hand = deck.deal(3)
    assert len(hand) == 3
    assert len(deck) == 2
    assert len(deck.deal(5)) == 2
    assert deck.draw() is None


def test_returned_cards_go_back_face_down():
    deck = Deck.build(rng=random.Random(2))
    card = deck.draw()
    card.dead = True

    deck.return_cards([card])

    assert len(deck) == 15
    assert not card.dead


def test_hidden_card_keeps_id_only():
    card = Card(card_id=4, role=Role.DUKE)
    assert card.to_dict() == {"card_id": 4, "role": "Duke", "dead": False}
    assert card.to_dict(hide_role=True)["role"] is None


def test_role_lookup_by_name():
    assert Role.from_name("contessa") == Role.CONTESSA
    with pytest.raises(ValueError):
        Role.from_name("Jester")
