import hashlib

import pytest

from rps_server.domain.hand import Hand
from rps_server.domain.round import (
    NONCE_BYTES,
    Round,
    compute_commitment,
    verify_commitment,
)
from rps_server.errors import RoundAlreadyRevealedError


def test_commitment_is_sha256_hex():
    round_ = Round.generate()
    assert len(round_.commitment) == 64
    int(round_.commitment, 16)


def test_commitment_is_reproducible_after_reveal():
    round_ = Round.generate()
    commitment = round_.commitment
    revealed = round_.reveal()
    expected = hashlib.sha256(
        (revealed.nonce + revealed.computer_hand.display_token()).encode()
    ).hexdigest()
    assert expected == commitment
    assert revealed.commitment == commitment
    assert verify_commitment(commitment, revealed.nonce, revealed.computer_hand)


def test_commitment_binds_the_hand():
    round_ = Round.generate(Hand.rock)
    revealed = round_.reveal()
    assert verify_commitment(round_.commitment, revealed.nonce, Hand.rock)
    assert not verify_commitment(round_.commitment, revealed.nonce, Hand.paper)
    assert not verify_commitment(round_.commitment, revealed.nonce, Hand.scissors)


def test_known_commitment_value():
    nonce = bytes(range(NONCE_BYTES))
    round_ = Round(Hand.paper, nonce)
    assert round_.commitment == compute_commitment(nonce.hex(), Hand.paper)
    assert round_.commitment == hashlib.sha256((nonce.hex() + "paper").encode()).hexdigest()


def test_nonce_is_lowercase_hex_of_fixed_length():
    revealed = Round.generate().reveal()
    assert len(revealed.nonce) == NONCE_BYTES * 2
    assert revealed.nonce == revealed.nonce.lower()
    bytes.fromhex(revealed.nonce)


def test_commitments_do_not_repeat():
    commitments = {Round.generate().commitment for _ in range(1000)}
    assert len(commitments) == 1000


def test_reveal_only_once():
    round_ = Round.generate()
    round_.reveal()
    assert round_.revealed
    with pytest.raises(RoundAlreadyRevealedError):
        round_.reveal()


def test_repr_hides_secrets():
    round_ = Round.generate(Hand.scissors)
    text = repr(round_)
    assert round_.commitment in text
    assert "scissors" not in text
    assert round_.reveal().nonce not in text


def test_age():
    round_ = Round.generate(issued_at=10.0)
    assert round_.age(25.0) == 15.0
