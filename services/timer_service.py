# -*- coding: utf-8 -*-

import datetime as dt
import logging
from typing import Callable, Dict, Iterable, Optional

from core.colour import IDLE_COLOUR, get_timer_colour
from core.timer_engine import TimerEngine
from domain.models import (
    DEFAULT_APPOINTMENT_TYPES,
    AppointmentType,
    ColourResult,
    ConsultationInfo,
    ConsultationRecord,
    TimerCallbacks,
    TimerSnapshot,
)
from services.settings_service import TimerSettings

logger = logging.getLogger(__name__)

# widget states that show a live clock
LIVE_STATES = ("running", "paused", "overtime")


def format_time(seconds: int) -> str:
    m = max(0, seconds) // 60
    s = max(0, seconds) % 60
    return f"{m:02d}:{s:02d}"


class ConsultationTimerService:
    """
    Orchestrates:
    - TimerEngine lifecycle for one consultation at a time
    - widget flow (idle -> setup -> running/paused/overtime -> approval -> idle)
    - the overtime chime (once per consultation)
    - the record handed back on save (storing it is the caller's job)
    - Callbacks for UI
    """

    def __init__(
        self,
        engine: TimerEngine,
        settings: Optional[TimerSettings] = None,
        appointment_types: Optional[Iterable[AppointmentType]] = None,
        notifier: Optional[Callable[[float, str], None]] = None,
    ):
        self.engine = engine
        self.settings = settings or TimerSettings()
        self.notifier = notifier

        types = appointment_types if appointment_types is not None else DEFAULT_APPOINTMENT_TYPES
        self._types: Dict[str, AppointmentType] = {t.code: t for t in types}

        self.widget_state = "idle"
        self.consultation: Optional[ConsultationInfo] = None
        self.approval_snapshot: Optional[TimerSnapshot] = None

        self._chime_played = False
        self._pre_minimise_state = "idle"

        self._on_tick: Optional[Callable[[TimerSnapshot], None]] = None
        self._on_state_change: Optional[Callable[[str], None]] = None
        self._on_overtime: Optional[Callable[[], None]] = None

        self.engine.set_thresholds(self.settings.yellow_threshold, self.settings.red_threshold)
        self.engine.set_callbacks(
            TimerCallbacks(on_tick=self._handle_tick, on_overtime=self._handle_overtime)
        )

    # ----- Callbacks -----
    def set_on_tick(self, fn: Callable[[TimerSnapshot], None]) -> None:
        self._on_tick = fn

    def set_on_state_change(self, fn: Callable[[str], None]) -> None:
        self._on_state_change = fn

    def set_on_overtime(self, fn: Callable[[], None]) -> None:
        self._on_overtime = fn

    def _set_state(self, state: str) -> None:
        if state == self.widget_state:
            return
        logger.debug("Widget %s -> %s", self.widget_state, state)
        self.widget_state = state
        if self._on_state_change:
            self._on_state_change(state)

    def _handle_tick(self, remaining: int, elapsed: int, percent: float) -> None:
        snap = self.engine.get_snapshot()
        if snap.state == "overtime" and self.widget_state == "running":
            self._set_state("overtime")
        if self._on_tick:
            self._on_tick(snap)

    def _handle_overtime(self) -> None:
        # a minimised bar pops back open when overtime starts
        if self.widget_state in ("running", "minimised"):
            self._set_state("overtime")
        if not self._chime_played:
            self._chime_played = True
            if self.settings.sound_enabled and self.notifier:
                volume = max(0.0, min(1.0, self.settings.sound_volume))
                self.notifier(volume, self.settings.chime_type)
        if self._on_overtime:
            self._on_overtime()

    # ----- Settings -----
    def apply_settings(self, settings: TimerSettings) -> None:
        self.settings = settings
        self.engine.set_thresholds(settings.yellow_threshold, settings.red_threshold)

    @property
    def appointment_types(self):
        return list(self._types.values())

    def get_appointment_type(self, code: str) -> AppointmentType:
        t = self._types.get(code)
        if t is None:
            raise ValueError(f"Unknown appointment type: {code}")
        return t

    # ----- Public API -----
    def go_to_setup(self) -> None:
        if self.widget_state == "idle":
            self._set_state("setup")

    def cancel_setup(self) -> None:
        if self.widget_state == "setup":
            self._set_state("idle")

    def start_consultation(
        self,
        patient_name: str,
        type_code: str,
        duration_minutes: Optional[float] = None,
    ) -> None:
        appt = self.get_appointment_type(type_code)
        minutes = appt.default_minutes if duration_minutes is None else duration_minutes
        duration_sec = int(round(minutes * 60))

        # raises before any state is touched
        self.engine.start(duration_sec)

        snap = self.engine.get_snapshot()
        self._chime_played = False
        self.approval_snapshot = None
        self.consultation = ConsultationInfo(
            patient_name=patient_name.strip(),
            appointment_type=appt.name,
            appointment_type_code=appt.code,
            target_duration_seconds=duration_sec,
            started_at=self.engine.started_at,
        )
        logger.info("Consultation started: %s (%s)", appt.name, format_time(duration_sec))
        self._set_state("overtime" if snap.state == "overtime" else "running")

    def pause(self) -> None:
        if self.widget_state not in ("running", "overtime"):
            return
        self.engine.pause()
        self._set_state("paused")

    def resume(self) -> None:
        if self.widget_state != "paused":
            return
        self.engine.resume()
        self._set_state(self.engine.state)

    def stop(self) -> None:
        """
        UI stop: pause the engine and wait for approval. The engine keeps its
        counters so go_back() can carry on.
        """
        if self.widget_state not in LIVE_STATES:
            return
        if self.engine.state in ("running", "overtime"):
            self.engine.pause()
        self.approval_snapshot = self.engine.get_snapshot()
        self._set_state("approval")

    def go_back(self) -> None:
        if self.widget_state != "approval":
            return
        self.engine.resume()
        self.approval_snapshot = None
        self._set_state(self.engine.state)

    def save(self, notes: Optional[str] = None) -> ConsultationRecord:
        if self.consultation is None:
            raise ValueError("No consultation to save.")

        snap = self.engine.stop()
        completed_at = self.engine.now()
        info = self.consultation

        record = ConsultationRecord(
            patient_name=info.patient_name or None,
            appointment_type=info.appointment_type,
            target_duration_seconds=info.target_duration_seconds,
            actual_duration_seconds=snap.elapsed_seconds,
            paused_duration_seconds=snap.paused_duration_seconds,
            went_overtime=snap.elapsed_seconds > info.target_duration_seconds,
            overtime_seconds=snap.overtime_seconds,
            consultation_date=dt.datetime.fromtimestamp(
                info.started_at / 1000, tz=dt.timezone.utc
            ).date().isoformat(),
            started_at=info.started_at,
            completed_at=completed_at,
            notes=(notes or "").strip() or None,
        )
        logger.info(
            "Consultation saved: actual=%s target=%s overtime=%s",
            format_time(record.actual_duration_seconds),
            format_time(record.target_duration_seconds),
            record.went_overtime,
        )
        self._clear()
        return record

    def discard(self) -> None:
        self.engine.reset()
        logger.info("Consultation discarded")
        self._clear()

    def minimise(self) -> None:
        if self.widget_state == "minimised":
            return
        self._pre_minimise_state = self.widget_state
        self._set_state("minimised")

    def restore_from_minimised(self) -> None:
        if self.widget_state != "minimised":
            return
        prev = self._pre_minimise_state
        # the engine may have run into overtime while minimised
        if prev == "running" and self.engine.state == "overtime":
            prev = "overtime"
        self._set_state(prev)

    def _clear(self) -> None:
        self.consultation = None
        self.approval_snapshot = None
        self._chime_played = False
        self._set_state("idle")

    # ----- Derived display values -----
    def get_snapshot(self) -> TimerSnapshot:
        return self.engine.get_snapshot()

    @property
    def display_time(self) -> str:
        state = self.widget_state
        if state == "minimised":
            state = self._pre_minimise_state
        if state in ("idle", "setup"):
            return "00:00"
        if state == "approval" and self.approval_snapshot is not None:
            snap = self.approval_snapshot
            if snap.overtime_seconds > 0:
                return format_time(snap.overtime_seconds)
            return format_time(snap.remaining_seconds)
        snap = self.engine.get_snapshot()
        if snap.overtime_seconds > 0:
            return format_time(snap.overtime_seconds)
        return format_time(snap.remaining_seconds)

    @property
    def current_colour(self) -> ColourResult:
        state = self.widget_state
        if state == "minimised":
            state = self._pre_minimise_state
        if state not in LIVE_STATES:
            return IDLE_COLOUR
        snap = self.engine.get_snapshot()
        return get_timer_colour(
            snap.percent_complete,
            self.settings.yellow_threshold,
            self.settings.red_threshold,
        )
