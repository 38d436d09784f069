"""
Trigger time computation for reminder notifications.

All wall-clock work happens in the configured zone: a reminder's `time` is a
local time of day and "same calendar day" means the same local date.
"""
import logging
from datetime import datetime, time, timedelta, timezone, tzinfo
from typing import List, Optional, Tuple, Union
from app.models.reminder import Frequency

logger = logging.getLogger(__name__)


def parse_time_of_day(value: Union[time, str, None]) -> Optional[time]:
    """Accept a `time` or an "HH:MM[:SS]" string; empty means no time of day."""
    if value is None or value == "":
        return None
    if isinstance(value, time):
        return value
    parts = [int(p) for p in str(value).split(":")]
    while len(parts) < 3:
        parts.append(0)
    return time(parts[0], parts[1], parts[2])


def to_local(moment: datetime, tz: tzinfo) -> datetime:
    # Naive timestamps are taken as already local
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment.astimezone(tz)


def at_time_of_day(day, time_of_day: Optional[time], tz: tzinfo, with_seconds: bool = True) -> datetime:
    """Combine a local date with a time of day (midnight when missing)."""
    if time_of_day is None:
        return datetime(day.year, day.month, day.day, tzinfo=tz)
    second = time_of_day.second if with_seconds else 0
    return datetime(day.year, day.month, day.day, time_of_day.hour, time_of_day.minute, second, tzinfo=tz)


def compute_trigger_times(reminder, tz: tzinfo) -> List[datetime]:
    """
    Candidate fire times for a reminder.

    once  -> start_date's day at `time` (hour, minute, second).
    daily -> every day from start_date to end_date inclusive at `time` (hour, minute).
    Anything else, or a daily reminder without both dates, yields nothing.
    """
    frequency = getattr(reminder.frequency, "value", reminder.frequency)
    time_of_day = parse_time_of_day(reminder.time)

    if frequency == Frequency.ONCE.value:
        if not reminder.start_date:
            return []
        start = to_local(reminder.start_date, tz)
        return [at_time_of_day(start.date(), time_of_day, tz)]

    if frequency == Frequency.DAILY.value:
        if not reminder.start_date or not reminder.end_date:
            logger.info(f"Skipping daily reminder {reminder.id} - start_date and end_date are required")
            return []
        first_day = to_local(reminder.start_date, tz).date()
        last_day = to_local(reminder.end_date, tz).date()
        days = (last_day - first_day).days
        return [
            at_time_of_day(first_day + timedelta(days=offset), time_of_day, tz, with_seconds=False)
            for offset in range(days + 1)
        ]

    return []


def is_schedulable(trigger: datetime, now: datetime) -> bool:
    """Future triggers, and past triggers that still fall on today's date."""
    if trigger >= now:
        return True
    return trigger.astimezone(now.tzinfo).date() == now.date()


def occurrence_key(reminder_id, trigger: datetime) -> Tuple[str, str]:
    return str(reminder_id), format_trigger(trigger)


def format_trigger(trigger: datetime) -> str:
    return trigger.astimezone(timezone.utc).isoformat()


def parse_stored_time(value: str) -> Optional[datetime]:
    """Parse a ledger `time`; offset-less values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_stored_time(value: str) -> str:
    """Re-render a ledger `time` so keys compare regardless of stored offset."""
    parsed = parse_stored_time(value)
    if parsed is None:
        return value
    return format_trigger(parsed)
