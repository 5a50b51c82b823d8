class GameError(Exception):
    """Base class of every per-request error raised by the game core."""


class ParseHandError(GameError, ValueError):
    def __init__(self, token: str):
        super().__init__(f"Invalid hand: {token!r}")
        self.token = token


class NoPendingRoundError(GameError):
    """An answer arrived while no round is waiting for one."""


class RoundExpiredError(NoPendingRoundError):
    """The pending round was older than the configured max age and has been discarded."""


class StaleRoundError(NoPendingRoundError):
    """The answer refers to a commitment that is no longer the pending one."""


class RoundAlreadyPendingError(GameError):
    pass


class RoundAlreadyRevealedError(GameError):
    pass


class UnknownUserError(GameError):
    def __init__(self, user_id: str):
        super().__init__("Unknown user")
        self.user_id = user_id
