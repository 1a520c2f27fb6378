"""Parse SMIL clock values (dur, begin, repeatCount) into seconds."""
from __future__ import annotations

import math
import re
from typing import Optional, Union

INDEFINITE = "indefinite"

RepeatPolicy = Union[int, str]

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def _parse_float(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        return math.nan


def parse_duration(text: str) -> float:
    """Parse "2s", "300ms" or "1.5" into seconds; malformed text yields NaN."""
    value = (text or "").strip()
    if value.endswith("ms"):
        return _parse_float(value[:-2]) / 1000
    if value.endswith("s"):
        return _parse_float(value[:-1])
    return _parse_float(value)


def parse_begin(text: Optional[str]) -> float:
    """Parse a begin offset. Only the first entry of "0s;3s" style lists is used."""
    if not text:
        return 0.0
    first = text.split(";")[0].strip()
    return parse_duration(first or "0s")


def parse_repeat_count(text: Optional[str]) -> RepeatPolicy:
    if text is not None and text.strip() == INDEFINITE:
        return INDEFINITE
    match = _LEADING_INT_RE.match(text or "")
    if not match:
        return 1
    count = int(match.group(1))
    return count if count > 0 else 1
