import pytest
from pydantic import ValidationError

from rps_server.domain.session import ReissuePolicy
from rps_server.load_settings import get_settings

ENV_NAMES = [
    "RPS_REISSUE_POLICY",
    "RPS_ROUND_MAX_AGE",
    "RPS_SESSION_MAX_IDLE",
    "RPS_SWEEP_INTERVAL_MINUTES",
    "RPS_COOKIE_SECURE",
    "RPS_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = get_settings()
    assert settings.reissue_policy is ReissuePolicy.overwrite
    assert settings.round_max_age is None
    assert settings.session_max_idle is None
    assert settings.sweep_interval_minutes == 10.0
    assert settings.cookie_secure is False
    assert settings.log_level == "INFO"


def test_empty_values_mean_unset(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.setenv(name, "")
    settings = get_settings()
    assert settings.reissue_policy is ReissuePolicy.overwrite
    assert settings.round_max_age is None
    assert settings.session_max_idle is None
    assert settings.cookie_secure is False


def test_values_are_parsed(monkeypatch):
    monkeypatch.setenv("RPS_REISSUE_POLICY", "keep")
    monkeypatch.setenv("RPS_ROUND_MAX_AGE", "30")
    monkeypatch.setenv("RPS_SESSION_MAX_IDLE", "3600.5")
    monkeypatch.setenv("RPS_SWEEP_INTERVAL_MINUTES", "2")
    monkeypatch.setenv("RPS_COOKIE_SECURE", "true")
    monkeypatch.setenv("RPS_LOG_LEVEL", "debug")
    settings = get_settings()
    assert settings.reissue_policy is ReissuePolicy.keep
    assert settings.round_max_age == 30.0
    assert settings.session_max_idle == 3600.5
    assert settings.sweep_interval_minutes == 2.0
    assert settings.cookie_secure is True
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("name,value", [
    ("RPS_REISSUE_POLICY", "sometimes"),
    ("RPS_ROUND_MAX_AGE", "-5"),
    ("RPS_COOKIE_SECURE", "maybe"),
])
def test_invalid_values_are_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        get_settings()
