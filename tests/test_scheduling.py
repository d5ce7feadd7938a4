# -*- coding: utf-8 -*-

import asyncio

from core.scheduling import AsyncioScheduler
from core.timer_engine import TimerEngine
from domain.models import TimerCallbacks


def test_after_and_cancel():
    async def scenario():
        sched = AsyncioScheduler()
        hits = []
        sched.after(5, lambda: hits.append("a"))
        handle = sched.after(5, lambda: hits.append("b"))
        sched.after_cancel(handle)
        await asyncio.sleep(0.05)
        return hits

    assert asyncio.run(scenario()) == ["a"]


def test_engine_on_default_scheduler_ticks_and_pauses():
    async def scenario():
        ticks = []
        engine = TimerEngine(
            tick_interval_ms=10,
            callbacks=TimerCallbacks(on_tick=lambda r, e, p: ticks.append(e)),
        )
        engine.start(60)
        await asyncio.sleep(0.1)
        running_ticks = len(ticks)

        engine.pause()
        await asyncio.sleep(0.05)
        paused_ticks = len(ticks)
        await asyncio.sleep(0.05)

        snap = engine.stop()
        return running_ticks, paused_ticks, len(ticks), snap

    running_ticks, paused_ticks, final_ticks, snap = asyncio.run(scenario())
    assert running_ticks >= 3
    assert final_ticks == paused_ticks
    assert snap.total_duration_seconds == 60
    assert snap.elapsed_seconds == 0
