"""
Timezone helpers

All request-facing times are resolved in the caller's IANA zone. An empty or
unknown zone name falls back to settings.DEFAULT_TIMEZONE.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.core.config import settings

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")

# Fixed-width so stored timestamps compare correctly as text
UTC_STORAGE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def get_location(tz_name: Optional[str] = None) -> ZoneInfo:
    """
    Resolve an IANA zone name, falling back to the default zone
    
    Args:
        tz_name: Zone name such as 'Asia/Shanghai', or empty/None
        
    Returns:
        ZoneInfo: Requested zone, or the default one
    """
    if tz_name:
        try:
            return ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning(f"Unknown timezone '{tz_name}', using {settings.DEFAULT_TIMEZONE}")
    return ZoneInfo(settings.DEFAULT_TIMEZONE)


def now_in_user_location(tz_name: Optional[str] = None) -> datetime:
    """Current time in the user's zone"""
    return datetime.now(get_location(tz_name))


def start_of_day_in_user_location(dt: datetime, tz_name: Optional[str] = None) -> datetime:
    """Midnight of dt's calendar day in the user's zone"""
    loc = get_location(tz_name)
    midnight = dt.astimezone(loc).replace(hour=0, minute=0, second=0, microsecond=0)
    # Where DST starts at 00:00 midnight does not exist; the UTC round-trip
    # moves it to the first real instant of the day.
    return midnight.astimezone(timezone.utc).astimezone(loc)


def parse_date_in_user_location(value: str, tz_name: Optional[str] = None) -> datetime:
    """
    Parse a strict YYYY-MM-DD date as midnight in the user's zone
    
    Raises:
        ValueError: value is not a valid YYYY-MM-DD date
    """
    if not value or not _DATE_RE.fullmatch(value):
        raise ValueError(f"date must be YYYY-MM-DD, got {value!r}")
    parsed = datetime.strptime(value, DATE_FORMAT)
    loc = get_location(tz_name)
    return parsed.replace(tzinfo=loc).astimezone(timezone.utc).astimezone(loc)


def end_of_day(day_start: datetime) -> datetime:
    """Last representable instant of the calendar day starting at day_start"""
    # Aware arithmetic on ZoneInfo datetimes is wall-clock, so this lands on
    # the next local midnight even across DST changes.
    return day_start + timedelta(days=1) - timedelta(microseconds=1)


def to_utc_iso(dt: datetime) -> str:
    """Format an aware datetime for storage/comparison in SQLite"""
    return dt.astimezone(timezone.utc).strftime(UTC_STORAGE_FORMAT)
