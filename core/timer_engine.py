# -*- coding: utf-8 -*-

import logging
import time
from typing import Any, Callable, Optional

from core.colour import DEFAULT_RED_THRESHOLD, DEFAULT_YELLOW_THRESHOLD, phase_for
from core.scheduling import AsyncioScheduler
from domain.models import TimerCallbacks, TimerSnapshot

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class TimerEngine:
    """
    Countdown that keeps going into overtime (counting up) once it hits zero.

    Elapsed time is always derived from clock readings minus paused time; the
    scheduled ticks only decide how often listeners hear about it. The
    scheduler is anything with Tk-style after(ms, fn) / after_cancel(handle).

    Not thread-safe: call everything from the thread that runs the scheduler.
    """

    def __init__(
        self,
        yellow_threshold: float = DEFAULT_YELLOW_THRESHOLD,
        red_threshold: float = DEFAULT_RED_THRESHOLD,
        tick_interval_ms: int = 1000,
        callbacks: Optional[TimerCallbacks] = None,
        scheduler: Any = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.yellow_threshold = yellow_threshold
        self.red_threshold = red_threshold
        self.tick_interval_ms = int(tick_interval_ms)
        self.callbacks = callbacks or TimerCallbacks()

        self._scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self._clock = clock or _now_ms

        self._state = "idle"
        self._total_duration_sec = 0
        self._start_ms: Optional[int] = None
        self._pause_ms: Optional[int] = None
        self._paused_total_ms = 0

        self._tick_job = None
        self._last_phase = "green"
        self._overtime_fired = False

    @property
    def state(self) -> str:
        return self._state

    @property
    def started_at(self) -> Optional[int]:
        """Epoch ms of the last start(), None when idle."""
        return self._start_ms

    def now(self) -> int:
        return self._clock()

    # ----- Public API -----
    def start(self, duration_seconds: int) -> None:
        if duration_seconds <= 0:
            raise ValueError("Duration must be positive")

        self._cancel_tick()

        self._total_duration_sec = duration_seconds
        self._start_ms = self._clock()
        self._pause_ms = None
        self._paused_total_ms = 0
        self._last_phase = "green"
        self._overtime_fired = False
        self._state = "running"
        logger.info("Timer started for %ss", duration_seconds)

        self._tick()
        self._schedule_tick()

    def pause(self) -> None:
        if self._state not in ("running", "overtime"):
            logger.debug("pause() ignored in state %s", self._state)
            return
        self._pause_ms = self._clock()
        self._state = "paused"
        self._cancel_tick()
        logger.debug("Timer paused")

    def resume(self) -> None:
        if self._state != "paused":
            logger.debug("resume() ignored in state %s", self._state)
            return
        self._fold_pause()

        snap = self._build_snapshot()
        self._state = "overtime" if snap.remaining_seconds <= 0 else "running"
        logger.debug("Timer resumed into %s", self._state)

        self._tick()
        self._schedule_tick()

    def stop(self) -> TimerSnapshot:
        """
        Finish the session: returns the final snapshot and hands the same
        snapshot to on_complete. Stopping an idle engine fires nothing.
        """
        if self._state == "idle":
            logger.debug("stop() on idle timer")
            return self._build_snapshot()

        if self._state == "paused":
            self._fold_pause()

        snapshot = self._build_snapshot()
        self._cancel_tick()
        self._state = "idle"
        logger.info(
            "Timer stopped: elapsed=%ss overtime=%ss paused=%ss",
            snapshot.elapsed_seconds,
            snapshot.overtime_seconds,
            snapshot.paused_duration_seconds,
        )

        if self.callbacks.on_complete:
            self.callbacks.on_complete(snapshot)
        return snapshot

    def reset(self) -> None:
        # abandon the session; on_complete is NOT fired
        self._cancel_tick()
        self._state = "idle"
        self._total_duration_sec = 0
        self._start_ms = None
        self._pause_ms = None
        self._paused_total_ms = 0
        self._last_phase = "green"
        self._overtime_fired = False
        logger.debug("Timer reset")

    def get_snapshot(self) -> TimerSnapshot:
        return self._build_snapshot()

    def set_thresholds(self, yellow: float, red: float) -> None:
        # no ordering check here; callers that care enforce it
        self.yellow_threshold = yellow
        self.red_threshold = red

    def set_callbacks(self, callbacks: Optional[TimerCallbacks]) -> None:
        self.callbacks = callbacks or TimerCallbacks()

    # ----- Internals -----
    def _fold_pause(self) -> None:
        if self._pause_ms is not None:
            self._paused_total_ms += self._clock() - self._pause_ms
            self._pause_ms = None

    def _build_snapshot(self) -> TimerSnapshot:
        now = self._clock()

        paused_ms = self._paused_total_ms
        if self._state == "paused" and self._pause_ms is not None:
            paused_ms += now - self._pause_ms

        if self._start_ms is None:
            elapsed_ms = 0
        else:
            elapsed_ms = now - self._start_ms - paused_ms
        elapsed = max(0, elapsed_ms // 1000)

        total = self._total_duration_sec
        remaining = max(0, total - elapsed)
        overtime = max(0, elapsed - total)
        percent = elapsed / total if total > 0 else 0.0

        return TimerSnapshot(
            state=self._state,
            total_duration_seconds=total,
            elapsed_seconds=elapsed,
            remaining_seconds=remaining,
            overtime_seconds=overtime,
            paused_duration_seconds=max(0, paused_ms // 1000),
            percent_complete=percent,
            phase=phase_for(percent, self.yellow_threshold, self.red_threshold),
        )

    def _tick(self) -> None:
        if self._state not in ("running", "overtime"):
            return

        snap = self._build_snapshot()

        fire_overtime = False
        if snap.remaining_seconds <= 0:
            if self._state != "overtime":
                logger.info("Timer entered overtime")
            self._state = "overtime"
            if not self._overtime_fired:
                self._overtime_fired = True
                fire_overtime = True

        phase_changed = snap.phase != self._last_phase
        if phase_changed:
            logger.debug("Phase %s -> %s", self._last_phase, snap.phase)
            self._last_phase = snap.phase

        cb = self.callbacks
        if phase_changed and cb.on_threshold_change:
            cb.on_threshold_change(snap.phase)
        # listeners above may have stopped or reset the engine
        if fire_overtime and cb.on_overtime and self._state == "overtime":
            cb.on_overtime()
        if cb.on_tick and self._state in ("running", "overtime"):
            cb.on_tick(snap.remaining_seconds, snap.elapsed_seconds, snap.percent_complete)

    # ---- Tick loop ----
    def _schedule_tick(self) -> None:
        # at most one pending job, only while the clock is live
        self._cancel_tick()
        if self._state in ("running", "overtime"):
            self._tick_job = self._scheduler.after(self.tick_interval_ms, self._tick_once)

    def _cancel_tick(self) -> None:
        if self._tick_job is not None:
            self._scheduler.after_cancel(self._tick_job)
            self._tick_job = None

    def _tick_once(self) -> None:
        self._tick_job = None
        try:
            self._tick()
        finally:
            # a listener may have paused, stopped or restarted us, or raised
            if self._tick_job is None and self._state in ("running", "overtime"):
                self._tick_job = self._scheduler.after(self.tick_interval_ms, self._tick_once)
