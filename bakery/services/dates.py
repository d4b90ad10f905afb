from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from django.utils import timezone


@dataclass
class DateRange:
    start: datetime
    end: datetime  # end exclusive (safer for queries)


def start_of_day(d: date, tz=None) -> datetime:
    tz = tz or timezone.get_current_timezone()
    return timezone.make_aware(datetime(d.year, d.month, d.day, 0, 0, 0), tz)


def day_range(d: date, tz=None) -> DateRange:
    """[start_of_day, start_of_next_day) for a local calendar day."""
    return DateRange(start_of_day(d, tz), start_of_day(d + timedelta(days=1), tz))


def local_day(dt: datetime) -> date:
    return timezone.localtime(dt).date()


def at_local_time(d: date, hhmm: str) -> datetime:
    """Aware datetime for `d` at "HH:MM" in the current timezone."""
    hours, minutes = (int(p) for p in hhmm.split(":", 1))
    return timezone.make_aware(datetime.combine(d, time(hours, minutes)))


def week_start(d: date) -> date:
    # weeks run Sunday..Saturday
    return d - timedelta(days=(d.weekday() + 1) % 7)


def week_number(d: date) -> int:
    """
    Week of the year with weeks starting on Sunday.
    Jan 1 is always in week 1; the first Sunday after it starts week 2.
    """
    jan1 = date(d.year, 1, 1)
    jan1_weekday = (jan1.weekday() + 1) % 7  # Sunday=0
    return (d.timetuple().tm_yday - 1 + jan1_weekday) // 7 + 1
