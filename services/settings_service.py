# -*- coding: utf-8 -*-

import re
from dataclasses import dataclass, replace
from typing import Callable, Optional

from domain.models import CHIME_TYPES

# bounds for the threshold inputs, in whole percent
YELLOW_MIN_PCT = 10
YELLOW_MAX_PCT = 89
RED_MAX_PCT = 99


@dataclass(frozen=True)
class TimerSettings:
    sound_enabled: bool = True
    sound_volume: float = 0.5
    chime_type: str = "gentle-bell"
    yellow_threshold: float = 0.6
    red_threshold: float = 0.9
    always_on_top: bool = True
    default_appointment_type: str = "standard"

    @classmethod
    def from_config(cls, cfg) -> "TimerSettings":
        return cls(
            sound_enabled=cfg.sound_enabled,
            sound_volume=cfg.sound_volume,
            chime_type=cfg.chime_type,
            yellow_threshold=cfg.yellow_threshold,
            red_threshold=cfg.red_threshold,
            always_on_top=cfg.always_on_top,
            default_appointment_type=cfg.default_appointment_type,
        )

    @property
    def yellow_pct(self) -> int:
        return int(round(self.yellow_threshold * 100))

    @property
    def red_pct(self) -> int:
        return int(round(self.red_threshold * 100))


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_int(text) -> Optional[int]:
    # leading integer only: "72.5" -> 72, "70%" -> 70
    m = _LEADING_INT.match(str(text))
    return int(m.group(1)) if m else None


class SettingsService:
    """
    Applies settings edits coming from the UI.

    Threshold inputs are whole percentages. This is the layer that keeps
    yellow < red; TimerEngine accepts whatever it is given.
    """

    def __init__(self, initial: Optional[TimerSettings] = None):
        self._settings = initial or TimerSettings()
        self._on_change: Optional[Callable[[TimerSettings], None]] = None

    @property
    def settings(self) -> TimerSettings:
        return self._settings

    def set_on_change(self, fn: Callable[[TimerSettings], None]) -> None:
        self._on_change = fn

    def _update(self, **changes) -> TimerSettings:
        new = replace(self._settings, **changes)
        if new != self._settings:
            self._settings = new
            if self._on_change:
                self._on_change(new)
        return self._settings

    # ----- Thresholds -----
    def commit_yellow(self, text) -> TimerSettings:
        parsed = _parse_int(text)
        if parsed is None:
            return self._settings

        yellow = max(YELLOW_MIN_PCT, min(YELLOW_MAX_PCT, parsed))
        changes = {"yellow_threshold": yellow / 100}
        # red must stay above yellow
        if self._settings.red_pct <= yellow:
            changes["red_threshold"] = min(RED_MAX_PCT, yellow + 1) / 100
        return self._update(**changes)

    def commit_red(self, text) -> TimerSettings:
        parsed = _parse_int(text)
        if parsed is None:
            return self._settings

        red = max(self._settings.yellow_pct + 1, min(RED_MAX_PCT, parsed))
        return self._update(red_threshold=red / 100)

    # ----- Sound / window -----
    def set_sound_enabled(self, enabled: bool) -> TimerSettings:
        return self._update(sound_enabled=bool(enabled))

    def set_volume(self, volume: float) -> TimerSettings:
        return self._update(sound_volume=max(0.0, min(1.0, float(volume))))

    def set_chime_type(self, chime_type: str) -> TimerSettings:
        if chime_type not in CHIME_TYPES:
            raise ValueError(f"Unknown chime type: {chime_type}")
        return self._update(chime_type=chime_type)

    def set_always_on_top(self, on_top: bool) -> TimerSettings:
        return self._update(always_on_top=bool(on_top))

    def set_default_appointment_type(self, code: str) -> TimerSettings:
        return self._update(default_appointment_type=code)
