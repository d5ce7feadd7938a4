# -*- coding: utf-8 -*-

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

CHIME_TYPES = ("gentle-bell", "singing-bowl", "soft-chime")


@dataclass(frozen=True)
class TimerSnapshot:
    state: str  # idle | running | paused | overtime
    total_duration_seconds: int
    elapsed_seconds: int
    remaining_seconds: int
    overtime_seconds: int
    paused_duration_seconds: int
    percent_complete: float
    phase: str  # green | yellow | red | overtime


@dataclass(frozen=True)
class ColourResult:
    background: str
    text: str


@dataclass
class TimerCallbacks:
    """
    Listener bundle for TimerEngine. Any of them may be None.
    """

    on_tick: Optional[Callable[[int, int, float], None]] = None
    on_threshold_change: Optional[Callable[[str], None]] = None
    on_overtime: Optional[Callable[[], None]] = None
    on_complete: Optional[Callable[[TimerSnapshot], None]] = None


@dataclass(frozen=True)
class AppointmentType:
    name: str
    code: str
    default_minutes: int


# used when no other list is supplied
DEFAULT_APPOINTMENT_TYPES: Tuple[AppointmentType, ...] = (
    AppointmentType("Standard Consultation", "standard", 15),
    AppointmentType("Long Consultation", "long", 30),
    AppointmentType("Follow-Up", "follow_up", 10),
    AppointmentType("Telephone Consultation", "telephone", 5),
    AppointmentType("Procedure", "procedure", 20),
    AppointmentType("Custom", "custom", 15),
)


@dataclass(frozen=True)
class ConsultationInfo:
    patient_name: str
    appointment_type: str  # display name
    appointment_type_code: str
    target_duration_seconds: int
    started_at: int  # epoch ms


@dataclass(frozen=True)
class ConsultationRecord:
    patient_name: Optional[str]
    appointment_type: str
    target_duration_seconds: int
    actual_duration_seconds: int
    paused_duration_seconds: int
    went_overtime: bool
    overtime_seconds: int
    consultation_date: str  # yyyy-mm-dd
    started_at: int
    completed_at: int
    notes: Optional[str] = None
    status: str = "completed"
