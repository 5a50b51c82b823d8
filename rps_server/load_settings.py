import os
from dotenv import load_dotenv

from rps_server.models.settings_models import GameSettings

load_dotenv()


def get_settings() -> GameSettings:
    """Build the settings from the environment and the .env file.
    Empty values mean "not set".

    Returns:
        GameSettings: Validated settings
    """
    return GameSettings(
        reissue_policy=os.getenv("RPS_REISSUE_POLICY") or "overwrite",
        round_max_age=os.getenv("RPS_ROUND_MAX_AGE") or None,
        session_max_idle=os.getenv("RPS_SESSION_MAX_IDLE") or None,
        sweep_interval_minutes=os.getenv("RPS_SWEEP_INTERVAL_MINUTES") or "10",
        cookie_secure=os.getenv("RPS_COOKIE_SECURE") or "false",
        log_level=(os.getenv("RPS_LOG_LEVEL") or "INFO").upper(),
    )


if __name__ == "__main__":
    print(get_settings())
