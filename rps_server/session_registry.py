import logging
import secrets
import time
from threading import Lock
from typing import Callable, Tuple

from rps_server.domain.hand import Hand
from rps_server.domain.round import Round
from rps_server.domain.session import ReissuePolicy, RoundFactory, RoundResult, Score, Session
from rps_server.errors import UnknownUserError
from rps_server.models.settings_models import GameSettings

USER_ID_BYTES = 16


class SessionRegistry:
    """Owns every Session, keyed by an opaque user id.

    `lock` only guards the dictionaries. Each user id has its own lock held for the
    whole state machine transition, so answers for one user are scored one at a time
    and different users never wait on each other.
    """

    def __init__(
        self,
        settings: GameSettings | None = None,
        clock: Callable[[], float] = time.monotonic,
        round_factory: RoundFactory = Round.generate,
    ):
        self.settings = settings or GameSettings()
        self.clock = clock
        self.round_factory = round_factory
        self.sessions: dict[str, Session] = {}
        self.locks: dict[str, Lock] = {}  # user_idごとのLock
        self.lock = Lock()

    def __len__(self) -> int:
        with self.lock:
            return len(self.sessions)

    def __contains__(self, user_id: str) -> bool:
        with self.lock:
            return user_id in self.sessions

    def _get_session_and_lock(self, user_id: str) -> Tuple[Session, Lock]:
        with self.lock:
            session = self.sessions.get(user_id)
            if session is None:
                raise UnknownUserError(user_id)
            return session, self.locks[user_id]

    def _check_alive(self, user_id: str, session: Session):
        # The entry may have been removed while we were waiting for the user lock
        with self.lock:
            if self.sessions.get(user_id) is not session:
                raise UnknownUserError(user_id)

    def login(self, user_name: str) -> Tuple[str, Score]:
        """Create a session for a freshly logged in user

        Args:
            user_name (str): Display name

        Returns:
            Tuple[str, Score]: The new user id and the initial score
        """
        user_id = secrets.token_hex(USER_ID_BYTES)
        session = Session(user_name, now=self.clock())
        with self.lock:
            self.sessions[user_id] = session
            self.locks[user_id] = Lock()
        logging.info(f"login: {user_name}")
        return user_id, session.score()

    def logout(self, user_id: str) -> bool:
        """Remove the session of user_id

        Args:
            user_id (str): ID to identify this user

        Returns:
            bool: True if a session was removed
        """
        with self.lock:
            session = self.sessions.pop(user_id, None)
            user_lock = self.locks.pop(user_id, None)
        if session is None:
            return False
        with user_lock:
            session.close()
        logging.info(f"logout: {session.user_name}")
        return True

    def authenticate(self, user_id: str) -> Session:
        """Look up the live session of user_id

        Raises:
            UnknownUserError: No session for user_id
        """
        session, _ = self._get_session_and_lock(user_id)
        return session

    def challenge(
        self, user_id: str, policy: ReissuePolicy | None = None
    ) -> Tuple[str, Score, str]:
        """Commit to a new computer hand and read the state in the same transition

        Args:
            user_id (str): ID to identify this user
            policy (ReissuePolicy | None, optional): Overrides the configured reissue policy. Defaults to None.

        Raises:
            UnknownUserError: No session for user_id
            RoundAlreadyPendingError: A round is pending and the policy is reject

        Returns:
            Tuple[str, Score, str]: User name, score and the commitment to publish
        """
        if policy is None:
            policy = self.settings.reissue_policy
        session, user_lock = self._get_session_and_lock(user_id)
        with user_lock:
            self._check_alive(user_id, session)
            commitment = session.issue_challenge(self.round_factory, self.clock(), policy)
            return session.user_name, session.score(), commitment

    def issue_challenge(self, user_id: str, policy: ReissuePolicy | None = None) -> str:
        """Commit to a new computer hand for user_id and return the commitment"""
        return self.challenge(user_id, policy)[2]

    def resume(self, user_id: str) -> str:
        """Return the pending commitment, issuing one if none is pending."""
        return self.issue_challenge(user_id, ReissuePolicy.keep)

    def submit_answer(self, user_id: str, hand: Hand, commitment: str) -> RoundResult:
        """Score hand against the pending round of user_id

        Args:
            user_id (str): ID to identify this user
            hand (Hand): The user's hand
            commitment (str): The commitment the user answered; only that round can be scored

        Raises:
            UnknownUserError: No session for user_id
            NoPendingRoundError: Nothing to score, or `commitment` is no longer pending; counters are unchanged

        Returns:
            RoundResult: Revealed round and updated score
        """
        session, user_lock = self._get_session_and_lock(user_id)
        with user_lock:
            self._check_alive(user_id, session)
            result = session.submit_answer(
                hand,
                self.round_factory,
                self.clock(),
                max_age=self.settings.round_max_age,
                commitment=commitment,
            )
        logging.info(f"round: {session.user_name} {result.outcome.value} {result.score}")
        return result

    def view(self, user_id: str) -> Tuple[str, Score, str | None]:
        """Read the user name, score and pending commitment without changing them"""
        session, user_lock = self._get_session_and_lock(user_id)
        with user_lock:
            return session.user_name, session.score(), session.commitment

    def _evict_if_idle(self, user_id: str, now: float, max_idle: float) -> bool:
        try:
            session, user_lock = self._get_session_and_lock(user_id)
        except UnknownUserError:
            return False
        with user_lock:
            # The user may have played since the idle list was built
            if now - session.last_active <= max_idle:
                return False
            with self.lock:
                if self.sessions.get(user_id) is not session:
                    return False
                del self.sessions[user_id]
                del self.locks[user_id]
            session.close()
        logging.info(f"evicted idle session: {session.user_name}")
        return True

    def evict_idle(self) -> int:
        """Remove sessions idle for longer than settings.session_max_idle

        Returns:
            int: Number of removed sessions
        """
        max_idle = self.settings.session_max_idle
        if max_idle is None:
            return 0
        now = self.clock()
        with self.lock:
            candidates = [
                user_id
                for user_id, session in self.sessions.items()
                if now - session.last_active > max_idle
            ]
        count = 0
        for user_id in candidates:
            if self._evict_if_idle(user_id, now, max_idle):
                count += 1
        if count:
            logging.info(f"evicted {count} idle sessions")
        return count
