# -*- coding: utf-8 -*-

import pytest
from pydantic import ValidationError

from config import Settings
from services.settings_service import TimerSettings


def test_defaults(monkeypatch):
    monkeypatch.delenv("CONSULT_TIMER_YELLOW_THRESHOLD", raising=False)
    cfg = Settings(_env_file=None)
    assert cfg.yellow_threshold == 0.6
    assert cfg.red_threshold == 0.9
    assert cfg.tick_interval_ms == 1000
    assert cfg.chime_type == "gentle-bell"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("CONSULT_TIMER_YELLOW_THRESHOLD", "0.5")
    monkeypatch.setenv("CONSULT_TIMER_SOUND_ENABLED", "false")
    cfg = Settings(_env_file=None)
    assert cfg.yellow_threshold == 0.5
    assert cfg.sound_enabled is False


@pytest.mark.parametrize(
    "name,value",
    [
        ("CONSULT_TIMER_RED_THRESHOLD", "1.5"),
        ("CONSULT_TIMER_YELLOW_THRESHOLD", "0"),
        ("CONSULT_TIMER_TICK_INTERVAL_MS", "0"),
        ("CONSULT_TIMER_CHIME_TYPE", "air-horn"),
    ],
)
def test_invalid_values_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_threshold_order_not_enforced():
    cfg = Settings(_env_file=None, yellow_threshold=0.95, red_threshold=0.5)
    assert cfg.yellow_threshold > cfg.red_threshold


def test_timer_settings_from_config():
    cfg = Settings(_env_file=None, sound_volume=0.2, chime_type="singing-bowl")
    ts = TimerSettings.from_config(cfg)
    assert ts.sound_volume == 0.2
    assert ts.chime_type == "singing-bowl"
    assert ts.yellow_threshold == cfg.yellow_threshold
