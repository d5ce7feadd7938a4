#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import argparse
import asyncio
from dataclasses import asdict
from typing import List, Optional

from config import settings
from core.scheduling import AsyncioScheduler
from core.timer_engine import TimerEngine
from domain.models import ConsultationRecord
from logger import setup_logger
from services.settings_service import TimerSettings
from services.timer_service import ConsultationTimerService

logger = setup_logger("app")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Run a consultation timer in the terminal.")
    p.add_argument("--type", dest="type_code", default=settings.default_appointment_type)
    p.add_argument("--minutes", type=float, default=None, help="override the type's length")
    p.add_argument("--patient", default="")
    p.add_argument(
        "--run-seconds",
        type=float,
        default=None,
        help="save automatically after this many seconds (default: run until Ctrl-C)",
    )
    return p


def _chime(volume: float, chime_type: str) -> None:
    # audio is up to the desktop shell; the terminal gets a bell
    print("\a", end="", flush=True)
    logger.info("Overtime chime: %s at volume %.2f", chime_type, volume)


async def run(
    type_code: str,
    minutes: Optional[float] = None,
    patient: str = "",
    run_seconds: Optional[float] = None,
) -> ConsultationRecord:
    timer_settings = TimerSettings.from_config(settings)
    engine = TimerEngine(
        tick_interval_ms=settings.tick_interval_ms,
        scheduler=AsyncioScheduler(asyncio.get_running_loop()),
    )
    service = ConsultationTimerService(engine, timer_settings, notifier=_chime)
    service.set_on_tick(
        lambda snap: logger.info(
            "%s %s [%s]", service.display_time, service.current_colour.background, snap.phase
        )
    )
    service.set_on_state_change(lambda state: logger.info("State: %s", state))

    service.start_consultation(patient, type_code, minutes)
    try:
        if run_seconds is None:
            await asyncio.Event().wait()
        else:
            await asyncio.sleep(run_seconds)
    finally:
        record = service.save()
        logger.info("Record: %s", asdict(record))
    return record


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    for name in ("core", "services"):
        setup_logger(name)
    try:
        asyncio.run(run(args.type_code, args.minutes, args.patient, args.run_seconds))
    except KeyboardInterrupt:
        logger.info("Stopped")


if __name__ == "__main__":
    main()
