"""Hands and the cyclic beats-relation between them.

Rule of thumb:
- The three beat-pairs are written out, never derived from enum order.
- `display_token()` is the exact text fed into the commitment hash, so it must stay ASCII.
"""

import secrets
from enum import Enum

from rps_server.errors import ParseHandError


class Outcome(str, Enum):
    won = "won"
    tied = "tied"
    lost = "lost"

    def inverse(self) -> "Outcome":
        if self is Outcome.won:
            return Outcome.lost
        if self is Outcome.lost:
            return Outcome.won
        return Outcome.tied


class Hand(str, Enum):
    rock = "rock"
    paper = "paper"
    scissors = "scissors"

    def beats(self) -> "Hand":
        """Return the hand this one beats."""
        if self is Hand.rock:
            return Hand.scissors
        if self is Hand.scissors:
            return Hand.paper
        return Hand.rock

    def vs(self, other: "Hand") -> Outcome:
        """Compare two hands

        Args:
            other (Hand): The opposing hand

        Returns:
            Outcome: won if this hand beats `other`, tied if they are equal, lost otherwise
        """
        if self is other:
            return Outcome.tied
        if self.beats() is other:
            return Outcome.won
        return Outcome.lost

    def display_token(self) -> str:
        return self.value

    def icon(self) -> str:
        if self is Hand.rock:
            return "✊"
        if self is Hand.paper:
            return "✋"
        return "✌"

    @classmethod
    def random(cls) -> "Hand":
        return secrets.choice(list(cls))

    @classmethod
    def parse(cls, token: str) -> "Hand":
        """Parse a hand token case-insensitively

        Args:
            token (str): "rock", "paper" or "scissors" in any letter case

        Raises:
            ParseHandError: The token is not one of the three hands

        Returns:
            Hand: The parsed hand
        """
        if isinstance(token, cls):
            return token
        if not isinstance(token, str):
            raise ParseHandError(repr(token))
        lowered = token.lower()
        if lowered == "rock":
            return cls.rock
        if lowered == "paper":
            return cls.paper
        if lowered == "scissors":
            return cls.scissors
        raise ParseHandError(token)
