"""Prometheus-style duration parsing and formatting, e.g. ``1h30m``."""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Tuple

_MS_PER_UNIT: Tuple[Tuple[str, int], ...] = (
    ("y", 365 * 24 * 60 * 60 * 1000),
    ("w", 7 * 24 * 60 * 60 * 1000),
    ("d", 24 * 60 * 60 * 1000),
    ("h", 60 * 60 * 1000),
    ("m", 60 * 1000),
    ("s", 1000),
    ("ms", 1),
)

_DURATION_RE = re.compile(
    r"^(?:(?P<y>\d+)y)?(?:(?P<w>\d+)w)?(?:(?P<d>\d+)d)?(?:(?P<h>\d+)h)?"
    r"(?:(?P<m>\d+)m)?(?:(?P<s>\d+)s)?(?:(?P<ms>\d+)ms)?$"
)


def format_duration(value: timedelta) -> str:
    remaining = int(value / timedelta(milliseconds=1))
    if remaining == 0:
        return "0s"
    if remaining < 0:
        raise ValueError("duration must not be negative")
    parts = []
    for unit, size in _MS_PER_UNIT:
        # Years and weeks are only used when they divide the duration exactly.
        if unit in ("y", "w") and remaining % size:
            continue
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(f"{count}{unit}")
    return "".join(parts)


def parse_duration(text: str) -> timedelta:
    raw = text.strip()
    match = _DURATION_RE.match(raw)
    if not raw or match is None:
        raise ValueError(f"Invalid duration: {text!r}")
    total_ms = 0
    for unit, size in _MS_PER_UNIT:
        amount = match.group(unit)
        if amount:
            total_ms += int(amount) * size
    return timedelta(milliseconds=total_ms)
