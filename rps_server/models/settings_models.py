from pydantic import BaseModel, Field

from rps_server.domain.session import ReissuePolicy


class GameSettings(BaseModel):
    reissue_policy: ReissuePolicy = ReissuePolicy.overwrite
    round_max_age: float | None = Field(default=None, gt=0)  # seconds, None never expires
    session_max_idle: float | None = Field(default=None, gt=0)  # seconds, None never evicts
    sweep_interval_minutes: float = Field(default=10.0, gt=0)
    cookie_secure: bool = False
    log_level: str = "INFO"
