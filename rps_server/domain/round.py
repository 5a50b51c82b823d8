"""Commit-reveal rounds.

A round binds a secret computer hand to a public commitment before the user answers:

    commitment = sha256(hex(nonce) + hand_token).hexdigest()

Only the commitment is shown while the round is pending. After the user answers,
the nonce and the hand are revealed so anyone can recompute the digest.
"""

import hashlib
import secrets

from pydantic import BaseModel, ConfigDict

from rps_server.domain.hand import Hand
from rps_server.errors import RoundAlreadyRevealedError

NONCE_BYTES = 32


def compute_commitment(nonce_hex: str, hand: Hand) -> str:
    """Compute the commitment hash for a nonce and a hand

    Args:
        nonce_hex (str): Lowercase hex encoding of the nonce
        hand (Hand): The committed hand

    Returns:
        str: Hex encoded SHA-256 digest
    """
    payload = nonce_hex + hand.display_token()
    return hashlib.sha256(payload.encode("ascii")).hexdigest()


def verify_commitment(commitment: str, nonce_hex: str, hand: Hand) -> bool:
    """Check that a revealed nonce and hand reproduce a commitment."""
    return secrets.compare_digest(compute_commitment(nonce_hex, hand), commitment)


class RevealedRound(BaseModel):
    model_config = ConfigDict(frozen=True)

    computer_hand: Hand
    nonce: str
    commitment: str


class Round:
    def __init__(self, computer_hand: Hand, nonce: bytes, issued_at: float = 0.0):
        self._computer_hand = computer_hand
        self._nonce_hex = nonce.hex()
        self._revealed = False
        self.issued_at = issued_at
        self.commitment = compute_commitment(self._nonce_hex, computer_hand)

    @classmethod
    def generate(cls, computer_hand: Hand | None = None, issued_at: float = 0.0) -> "Round":
        """Draw a fresh round

        Args:
            computer_hand (Hand | None, optional): Fixed hand for tests. Defaults to a random hand.
            issued_at (float, optional): Clock reading when the round was issued. Defaults to 0.0.

        Returns:
            Round: A pending round whose commitment can be published
        """
        if computer_hand is None:
            computer_hand = Hand.random()
        return cls(computer_hand, secrets.token_bytes(NONCE_BYTES), issued_at)

    @property
    def revealed(self) -> bool:
        return self._revealed

    def age(self, now: float) -> float:
        return now - self.issued_at

    def reveal(self) -> RevealedRound:
        """Disclose the committed hand and nonce. Allowed once per round.

        Raises:
            RoundAlreadyRevealedError: The round was already revealed
        """
        if self._revealed:
            raise RoundAlreadyRevealedError("Round was already revealed")
        self._revealed = True
        return RevealedRound(
            computer_hand=self._computer_hand,
            nonce=self._nonce_hex,
            commitment=self.commitment,
        )

    def __repr__(self) -> str:
        return f"Round(commitment={self.commitment!r}, revealed={self._revealed})"
