"""Per-user score and the commit -> reveal -> recommit cycle.

States:
- no_pending_round: just logged in, or the pending round was discarded.
- awaiting_answer: a commitment is public and the next valid answer changes the counters.

Not thread safe on its own; SessionRegistry serialises calls per user.
"""

from enum import Enum
from typing import Callable

from pydantic import BaseModel, ConfigDict

from rps_server.domain.hand import Hand, Outcome
from rps_server.domain.round import Round
from rps_server.errors import (
    NoPendingRoundError,
    RoundAlreadyPendingError,
    RoundExpiredError,
    StaleRoundError,
)

RoundFactory = Callable[..., Round]


class SessionState(str, Enum):
    no_pending_round = "no_pending_round"
    awaiting_answer = "awaiting_answer"


class ReissuePolicy(str, Enum):
    overwrite = "overwrite"  # discard the unanswered round and commit to a new one
    keep = "keep"  # hand back the commitment that is still pending
    reject = "reject"


class Score(BaseModel):
    model_config = ConfigDict(frozen=True)

    win_count: int = 0
    tie_count: int = 0
    loss_count: int = 0


class RoundResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    human_hand: Hand
    computer_hand: Hand
    nonce: str
    previous_commitment: str
    score: Score
    new_commitment: str


class Session:
    def __init__(self, user_name: str, now: float = 0.0):
        self.user_name = user_name
        self.win_count = 0
        self.tie_count = 0
        self.loss_count = 0
        self.pending_round: Round | None = None
        self.last_active = now

    @property
    def state(self) -> SessionState:
        if self.pending_round is None:
            return SessionState.no_pending_round
        return SessionState.awaiting_answer

    @property
    def commitment(self) -> str | None:
        if self.pending_round is None:
            return None
        return self.pending_round.commitment

    def score(self) -> Score:
        return Score(
            win_count=self.win_count,
            tie_count=self.tie_count,
            loss_count=self.loss_count,
        )

    def issue_challenge(
        self,
        round_factory: RoundFactory,
        now: float,
        policy: ReissuePolicy = ReissuePolicy.overwrite,
    ) -> str:
        """Commit to a new computer hand

        Args:
            round_factory (RoundFactory): Called as round_factory(issued_at=now)
            now (float): Current clock reading
            policy (ReissuePolicy, optional): What to do when a round is already pending.
                Defaults to ReissuePolicy.overwrite.

        Raises:
            RoundAlreadyPendingError: A round is pending and the policy is reject

        Returns:
            str: The commitment to publish
        """
        self.last_active = now
        if self.pending_round is not None:
            if policy is ReissuePolicy.keep:
                return self.pending_round.commitment
            if policy is ReissuePolicy.reject:
                raise RoundAlreadyPendingError("A round is already waiting for an answer")
        self.pending_round = round_factory(issued_at=now)
        return self.pending_round.commitment

    def submit_answer(
        self,
        hand: Hand,
        round_factory: RoundFactory,
        now: float,
        max_age: float | None = None,
        commitment: str | None = None,
    ) -> RoundResult:
        """Reveal the pending round, score the answer and commit to the next round

        Args:
            hand (Hand): The user's hand
            round_factory (RoundFactory): Called as round_factory(issued_at=now)
            now (float): Current clock reading
            max_age (float | None, optional): Pending rounds older than this are discarded. Defaults to None.
            commitment (str | None, optional): The commitment the user answered. Defaults to None.

        Raises:
            NoPendingRoundError: No round is pending
            RoundExpiredError: The pending round was older than max_age
            StaleRoundError: `commitment` is not the pending commitment

        Returns:
            RoundResult: Revealed values, the outcome for the user and the new commitment
        """
        self.last_active = now
        pending = self.pending_round
        if pending is None:
            raise NoPendingRoundError("No round is waiting for an answer")
        if max_age is not None and pending.age(now) > max_age:
            self.pending_round = None
            raise RoundExpiredError("The pending round expired")
        if commitment is not None and commitment != pending.commitment:
            raise StaleRoundError("The answered round is no longer pending")

        revealed = pending.reveal()
        self.pending_round = None
        outcome = hand.vs(revealed.computer_hand)
        if outcome is Outcome.won:
            self.win_count += 1
        elif outcome is Outcome.tied:
            self.tie_count += 1
        else:
            self.loss_count += 1

        new_commitment = self.issue_challenge(round_factory, now)
        return RoundResult(
            outcome=outcome,
            human_hand=hand,
            computer_hand=revealed.computer_hand,
            nonce=revealed.nonce,
            previous_commitment=revealed.commitment,
            score=self.score(),
            new_commitment=new_commitment,
        )

    def close(self):
        self.pending_round = None
