"""Time window arithmetic for Logpull requests."""

from __future__ import annotations

from datetime import datetime, timedelta

from logpull_exporter.domain.models import TimeWindow

# Logpull requires 'end' to be at least one minute before now.
SAFETY_OFFSET = timedelta(minutes=1)

# Logpull requires 'start' to be no more than seven days before now, so the
# window must fit inside seven days less the safety offset.
# https://developers.cloudflare.com/logs/logpull-api/requesting-logs#parameters
LOG_PERIOD_RANGE = timedelta(days=7) - SAFETY_OFFSET


def validate_log_period(log_period: timedelta) -> None:
    if log_period <= timedelta(0):
        raise ValueError("log period must be greater than zero")
    if log_period >= LOG_PERIOD_RANGE:
        raise ValueError("log period out of acceptable range")


def compute_window(now: datetime, log_period: timedelta) -> TimeWindow:
    end = now - SAFETY_OFFSET
    return TimeWindow(start=end - log_period, end=end)
