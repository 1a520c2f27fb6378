"""Keyframe interpolation for SMIL value lists."""
from __future__ import annotations

import math
import re
from typing import Optional, Sequence, Tuple

from glint.animation.timing import INDEFINITE, RepeatPolicy

# A leading number plus an optional unit ("10", "-2.5e1", "10px", "50%").
NUMBER_RE = re.compile(r"^([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)([a-zA-Z%]*)$")


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _as_number(value: str) -> Optional[Tuple[float, str]]:
    match = NUMBER_RE.match(value.strip())
    if not match:
        return None
    return float(match.group(1)), match.group(2)


def _common_unit(a: str, b: str) -> Optional[str]:
    """Unit shared by two keyframes; a bare number adopts the other's unit."""
    if a == b or not b:
        return a
    if not a:
        return b
    return None


def format_number(value: float) -> str:
    """Format like a JS number: 5.0 -> "5", 2.5 -> "2.5"."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _effective_time(elapsed: float, dur: float, repeat: RepeatPolicy) -> Optional[float]:
    """Time into the current cycle, or None once the animation has finished."""
    if repeat == INDEFINITE:
        return elapsed % dur
    if repeat > 1:
        if elapsed > dur * repeat:
            return None
        return elapsed % dur
    if elapsed > dur:
        return None
    return elapsed


def interpolate_values(
    values: Sequence[str],
    dur: float,
    begin: float,
    t: float,
    repeat: RepeatPolicy = 1,
) -> str:
    """Return the value a keyframe list takes at global time ``t``.

    Before ``begin`` the first value holds; after the last repeat the last
    value holds. Numeric neighbours are interpolated linearly and keep a
    shared unit ("10px" -> "15px"); anything else (path data, colour names,
    number lists, mismatched units) snaps to the nearer keyframe.
    """
    elapsed = t - begin
    if elapsed < 0:
        return values[0]

    effective = _effective_time(elapsed, dur, repeat)
    if effective is None:
        return values[-1]

    progress = effective / dur
    segment = progress * (len(values) - 1)
    index = math.floor(segment)
    local = segment - index

    if index >= len(values) - 1:
        return values[-1]

    start = values[index]
    end = values[index + 1]

    a = _as_number(start)
    b = _as_number(end)
    if a is not None and b is not None:
        unit = _common_unit(a[1], b[1])
        if unit is not None:
            return format_number(lerp(a[0], b[0], local)) + unit

    return start if local < 0.5 else end
