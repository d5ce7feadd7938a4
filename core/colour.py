# -*- coding: utf-8 -*-

"""
Background colour for the consultation timer, derived from how much of the
slot has been used.

    0 %   green    #22c55e
    60 %  lime     #84cc16   (end of green / start of yellow band)
    75 %  yellow   #eab308   (middle of yellow band)
    90 %  amber    #f59e0b   (end of yellow / start of red band)
    100 % red      #ef4444
    >100% deep red #dc2626   (overtime, solid)

The percentages above are for the default thresholds; the bands move with
the thresholds passed in.
"""

import math
from typing import Tuple

from domain.models import ColourResult

RGB = Tuple[int, int, int]

GREEN: RGB = (0x22, 0xC5, 0x5E)
LIME: RGB = (0x84, 0xCC, 0x16)
YELLOW: RGB = (0xEA, 0xB3, 0x08)
AMBER: RGB = (0xF5, 0x9E, 0x0B)
RED: RGB = (0xEF, 0x44, 0x44)
DEEP_RED: RGB = (0xDC, 0x26, 0x26)

TEXT_COLOUR = "#FFFFFF"

DEFAULT_YELLOW_THRESHOLD = 0.6
DEFAULT_RED_THRESHOLD = 0.9

# what hosts paint when no consultation is running
IDLE_COLOUR = ColourResult(background="#FFFFFF", text="#1F2937")


def _clamp01(v: float) -> float:
    return max(0.0, min(1.0, v))


def _lerp(a: int, b: int, t: float) -> int:
    # round half up, not Python's half-to-even
    v = int(math.floor(a + (b - a) * t + 0.5))
    return max(0, min(255, v))


def _lerp_rgb(a: RGB, b: RGB, t: float) -> RGB:
    return (_lerp(a[0], b[0], t), _lerp(a[1], b[1], t), _lerp(a[2], b[2], t))


def to_hex(c: RGB) -> str:
    return "#{:02x}{:02x}{:02x}".format(*c)


def _band_fraction(value: float, lo: float, hi: float) -> float:
    span = hi - lo
    if span <= 0:
        return 0.0
    return _clamp01((value - lo) / span)


def phase_for(
    percent_complete: float,
    yellow_threshold: float = DEFAULT_YELLOW_THRESHOLD,
    red_threshold: float = DEFAULT_RED_THRESHOLD,
) -> str:
    if percent_complete >= 1:
        return "overtime"
    if percent_complete >= red_threshold:
        return "red"
    if percent_complete >= yellow_threshold:
        return "yellow"
    return "green"


def get_timer_colour(
    percent_complete: float,
    yellow_threshold: float = DEFAULT_YELLOW_THRESHOLD,
    red_threshold: float = DEFAULT_RED_THRESHOLD,
) -> ColourResult:
    """
    Map a completion fraction (0..1, above 1 in overtime) to the widget's
    background colour. Text is always white.

    Never raises for odd thresholds: an empty band just yields its start colour.
    """
    if percent_complete >= 1:
        return ColourResult(background=to_hex(DEEP_RED), text=TEXT_COLOUR)

    if percent_complete <= yellow_threshold:
        t = percent_complete / yellow_threshold if yellow_threshold > 0 else 0.0
        bg = _lerp_rgb(GREEN, LIME, _clamp01(t))
    elif percent_complete <= red_threshold:
        # two stops inside the yellow band: lime -> yellow -> amber
        t = _band_fraction(percent_complete, yellow_threshold, red_threshold)
        if t <= 0.5:
            bg = _lerp_rgb(LIME, YELLOW, t * 2)
        else:
            bg = _lerp_rgb(YELLOW, AMBER, (t - 0.5) * 2)
    else:
        t = _band_fraction(percent_complete, red_threshold, 1.0)
        bg = _lerp_rgb(AMBER, RED, t)

    return ColourResult(background=to_hex(bg), text=TEXT_COLOUR)
