# -*- coding: utf-8 -*-
"""Map a comment time to the live phase it belongs to.

Each day has two live phases in Vietnam time (UTC+7):
- morning: 00:00 - 12:30
- evening: 12:31 - 23:59
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Union

import pandas as pd

logger = logging.getLogger(__name__)

TIMEZONE_OFFSET_HOURS = 7
MORNING_CUTOFF_MINUTES = 12 * 60 + 30

GRAPH_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

MORNING = "morning"
EVENING = "evening"


@dataclass(frozen=True)
class LivePhaseKey:
    phase_date: str  # YYYY-MM-DD, local date
    phase_type: str  # "morning" or "evening"


def parse_facebook_time(value: Union[str, datetime]) -> datetime:
    """Parse a Graph API timestamp ("2025-10-18T03:40:00+0000") to aware UTC.

    Naive datetimes are taken as UTC.

    Raises:
        ValueError: If the value cannot be parsed.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), GRAPH_TIME_FORMAT).astimezone(
                timezone.utc
            )
        except ValueError:
            pass

    timestamp = pd.to_datetime(value, utc=True, errors="coerce")
    if pd.isna(timestamp):
        raise ValueError(f"Invalid Facebook time: {value!r}")
    return timestamp.to_pydatetime()


def determine_live_phase(
    comment_time: Union[str, datetime],
    tz_offset_hours: int = TIMEZONE_OFFSET_HOURS,
    morning_cutoff_minutes: int = MORNING_CUTOFF_MINUTES,
) -> LivePhaseKey:
    """Find the (date, morning/evening) phase of a comment."""
    utc_time = parse_facebook_time(comment_time)
    local_time = utc_time + timedelta(hours=tz_offset_hours)

    total_minutes = local_time.hour * 60 + local_time.minute
    phase_type = MORNING if total_minutes <= morning_cutoff_minutes else EVENING

    return LivePhaseKey(phase_date=local_time.strftime("%Y-%m-%d"), phase_type=phase_type)
