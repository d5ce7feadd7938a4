# -*- coding: utf-8 -*-

import asyncio

import app


def test_parser_defaults():
    args = app.build_parser().parse_args([])
    assert args.type_code == "standard"
    assert args.minutes is None
    assert args.run_seconds is None


def test_run_returns_saved_record():
    record = asyncio.run(app.run("follow_up", patient="Sam", run_seconds=0.05))
    assert record.appointment_type == "Follow-Up"
    assert record.target_duration_seconds == 600
    assert record.actual_duration_seconds == 0
    assert record.patient_name == "Sam"
    assert record.status == "completed"
