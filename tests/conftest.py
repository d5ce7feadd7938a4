# -*- coding: utf-8 -*-

import pytest

from core.timer_engine import TimerEngine

# 2023-11-14 22:13:20 UTC
BASE_MS = 1_700_000_000_000


class FakeClock:
    """Epoch milliseconds that only move when a test says so."""

    def __init__(self, start_ms: int = BASE_MS):
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms


class FakeScheduler:
    """
    Tk-style after()/after_cancel() driven by a FakeClock.

    advance(ms) moves the clock forward, running due jobs in order at their
    due time.
    """

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self._jobs = {}
        self._next_id = 0

    def after(self, ms, fn):
        self._next_id += 1
        job_id = f"after#{self._next_id}"
        self._jobs[job_id] = (self.clock.now_ms + ms, self._next_id, fn)
        return job_id

    def after_cancel(self, job_id):
        self._jobs.pop(job_id, None)

    @property
    def pending(self) -> int:
        return len(self._jobs)

    def advance(self, ms: int) -> None:
        target = self.clock.now_ms + ms
        while True:
            due = [(when, seq, jid) for jid, (when, seq, _) in self._jobs.items() if when <= target]
            if not due:
                break
            when, _, jid = min(due)
            _, _, fn = self._jobs.pop(jid)
            self.clock.now_ms = max(self.clock.now_ms, when)
            fn()
        self.clock.now_ms = target


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return FakeScheduler(clock)


@pytest.fixture
def make_engine(clock, scheduler):
    def _make(**kwargs):
        kwargs.setdefault("scheduler", scheduler)
        kwargs.setdefault("clock", clock)
        return TimerEngine(**kwargs)

    return _make


@pytest.fixture
def advance(scheduler):
    return scheduler.advance
