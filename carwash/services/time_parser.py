# carwash/services/time_parser.py
"""
Hour-of-day bucketing for the dashboard traffic histogram.
Entry times are display strings ("14:30", "2:30 PM", "09:15 a. m."),
not timestamps, so the hour is recovered heuristically.
"""

import re
from typing import Iterable
from carwash.schemas.dashboard import HourlyBucket
from carwash.schemas.service import ServiceRecord
from carwash.utils.logger import get_logger

logger = get_logger(__name__)

START_HOUR = 8
END_HOUR = 20   # inclusive

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_entry_hour(entry_time: str) -> int:
    """
    Hour (0-23) of a free-form entry time.
    Raises ValueError when the text before the first ':' has no leading integer.
    """
    head = entry_time.split(":", 1)[0]
    match = _LEADING_INT.match(head)
    if not match:
        raise ValueError(f"No hour in entry time {entry_time!r}")
    hour = int(match.group(1))

    lowered = entry_time.lower()
    if "pm" in lowered and hour < 12:
        hour += 12
    if "am" in lowered and hour == 12:
        hour = 0
    return hour


def hour_label(hour: int) -> str:
    if hour > 12:
        return f"{hour - 12}PM"
    if hour == 12:
        return "12PM"
    return f"{hour}AM"


def hourly_traffic(services: Iterable[ServiceRecord]) -> list[HourlyBucket]:
    """Cars per entry hour, 8AM..8PM. Unparseable or out-of-range entries are skipped."""
    counts = {hour: 0 for hour in range(START_HOUR, END_HOUR + 1)}

    for service in services:
        try:
            hour = parse_entry_hour(service.entry_time)
        except (ValueError, AttributeError) as e:
            logger.warning(f"[TRAFFIC] Skipping ticket {service.id}: {e}")
            continue
        if hour in counts:
            counts[hour] += 1

    return [HourlyBucket(hour=h, name=hour_label(h), cars=c) for h, c in counts.items()]
