"""Discord timestamp formatting and builder helpers.

Renders ``<t:EPOCH:STYLE>`` values the way the Discord client shows them and
provides the pieces the timestamp builder needs (style catalogue, token
generation, timezone helpers, presets). Formatting takes ``now`` explicitly;
:func:`system_clock` is only the default clock handed in by callers.
"""

import math
import re
import time as _time
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from enum import Enum
from typing import Callable, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger


class TimestampStyle(str, Enum):
    SHORT_TIME = "t"
    LONG_TIME = "T"
    SHORT_DATE = "d"
    LONG_DATE = "D"
    SHORT_DATE_TIME = "f"
    LONG_DATE_TIME = "F"
    RELATIVE = "R"


DEFAULT_STYLE = TimestampStyle.SHORT_DATE_TIME

Clock = Callable[[], int]


def system_clock() -> int:
    """Current time in whole epoch seconds."""
    return math.floor(_time.time())


@dataclass(frozen=True)
class TimestampStyleInfo:
    style: TimestampStyle
    name: str
    example: str


TIMESTAMP_STYLES: List[TimestampStyleInfo] = [
    TimestampStyleInfo(TimestampStyle.SHORT_TIME, "Short Time", "9:41 PM"),
    TimestampStyleInfo(TimestampStyle.LONG_TIME, "Long Time", "9:41:30 PM"),
    TimestampStyleInfo(TimestampStyle.SHORT_DATE, "Short Date", "11/28/2018"),
    TimestampStyleInfo(TimestampStyle.LONG_DATE, "Long Date", "November 28, 2018"),
    TimestampStyleInfo(
        TimestampStyle.SHORT_DATE_TIME, "Short Date/Time", "November 28, 2018 9:41 PM"
    ),
    TimestampStyleInfo(
        TimestampStyle.LONG_DATE_TIME,
        "Long Date/Time",
        "Wednesday, November 28, 2018 9:41 PM",
    ),
    TimestampStyleInfo(TimestampStyle.RELATIVE, "Relative", "in 5 minutes"),
]

# (threshold in seconds, singular, plural); ascending
_RELATIVE_LADDER = (
    (60, "second", "seconds"),
    (60 * 60, "minute", "minutes"),
    (60 * 60 * 24, "hour", "hours"),
    (60 * 60 * 24 * 30, "day", "days"),
    (60 * 60 * 24 * 365, "month", "months"),
    (math.inf, "year", "years"),
)


def coerce_style(style: Optional[str]) -> TimestampStyle:
    """Map a raw style code to a TimestampStyle; missing or unknown codes become ``f``."""
    if not style:
        return DEFAULT_STYLE
    try:
        return TimestampStyle(style)
    except ValueError:
        return DEFAULT_STYLE


def _zone(tz_name: str):
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.debug(f"Unknown timezone {tz_name!r}, falling back to UTC")
        return dt_timezone.utc


def _clock(dt: datetime, with_seconds: bool = False) -> str:
    hour = dt.hour % 12 or 12
    meridiem = "AM" if dt.hour < 12 else "PM"
    if with_seconds:
        return f"{hour}:{dt.minute:02d}:{dt.second:02d} {meridiem}"
    return f"{hour}:{dt.minute:02d} {meridiem}"


def _long_date(dt: datetime) -> str:
    return f"{dt.strftime('%B')} {dt.day}, {dt.year}"


def format_relative_time(epoch: int, now: int) -> str:
    """Format ``epoch`` relative to ``now`` (e.g. "in 5 minutes", "3 hours ago").

    The unit is the first rung of the ladder whose threshold exceeds the
    absolute difference; the magnitude is that difference divided by the
    threshold of the rung below it.
    """
    diff = epoch - now
    if diff == 0:
        return "now"

    abs_diff = abs(diff)
    value = abs_diff
    unit = "seconds"
    for i, (threshold, singular, plural) in enumerate(_RELATIVE_LADDER):
        if abs_diff < threshold:
            previous = _RELATIVE_LADDER[i - 1][0] if i > 0 else 1
            value = abs_diff // previous
            unit = singular if value == 1 else plural
            break

    if diff < 0:
        return f"{value} {unit} ago"
    return f"in {value} {unit}"


def format_timestamp(
    epoch: int,
    style: Optional[str],
    now: int,
    timezone: str = "UTC",
) -> str:
    """Render ``epoch`` in the given Discord style as seen from ``timezone``."""
    resolved = coerce_style(style)
    if resolved is TimestampStyle.RELATIVE:
        return format_relative_time(epoch, now)

    try:
        dt = datetime.fromtimestamp(epoch, tz=_zone(timezone))
    except (OverflowError, OSError, ValueError):
        return str(epoch)

    if resolved is TimestampStyle.SHORT_TIME:
        return _clock(dt)
    if resolved is TimestampStyle.LONG_TIME:
        return _clock(dt, with_seconds=True)
    if resolved is TimestampStyle.SHORT_DATE:
        return f"{dt.month}/{dt.day}/{dt.year}"
    if resolved is TimestampStyle.LONG_DATE:
        return _long_date(dt)
    if resolved is TimestampStyle.LONG_DATE_TIME:
        return f"{dt.strftime('%A')}, {_long_date(dt)} {_clock(dt)}"
    return f"{_long_date(dt)} {_clock(dt)}"


def generate_timestamp_token(epoch: int, style: Optional[str] = None) -> str:
    """Build the markup token for ``epoch``; the default style is left implicit."""
    if style and style != DEFAULT_STYLE.value:
        return f"<t:{epoch}:{coerce_style(style).value}>"
    return f"<t:{epoch}>"


# =============================================================================
# Timezones
# =============================================================================


@dataclass(frozen=True)
class TimezoneInfo:
    name: str
    label: str
    offset: str
    group: str


POPULAR_TIMEZONES = (
    "America/New_York",
    "America/Chicago",
    "America/Denver",
    "America/Los_Angeles",
    "America/Toronto",
    "America/Vancouver",
    "Europe/London",
    "Europe/Paris",
    "Europe/Berlin",
    "Europe/Moscow",
    "Asia/Tokyo",
    "Asia/Shanghai",
    "Asia/Singapore",
    "Asia/Dubai",
    "Asia/Kolkata",
    "Australia/Sydney",
    "Pacific/Auckland",
    "UTC",
)


def is_valid_timezone(tz_name: str) -> bool:
    if not tz_name:
        return False
    try:
        ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


def format_offset(minutes: int) -> str:
    """Format a UTC offset in minutes as ``+05:30`` / ``-08:00``."""
    sign = "+" if minutes >= 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{mins:02d}"


def describe_timezone(tz_name: str, at: datetime) -> TimezoneInfo:
    """Describe ``tz_name`` with its UTC offset at instant ``at``."""
    local = at.astimezone(ZoneInfo(tz_name))
    offset = local.utcoffset() or timedelta(0)
    return TimezoneInfo(
        name=tz_name,
        label=tz_name.replace("_", " "),
        offset=format_offset(int(offset.total_seconds() // 60)),
        group=tz_name.split("/", 1)[0],
    )


def get_popular_timezones(at: datetime) -> List[TimezoneInfo]:
    return [
        describe_timezone(name, at)
        for name in POPULAR_TIMEZONES
        if is_valid_timezone(name)
    ]


_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def to_epoch_seconds(date_str: str, time_str: str, tz_name: str) -> int:
    """Convert a local ``YYYY-MM-DD`` date and ``HH:MM[:SS]`` time in ``tz_name`` to epoch seconds.

    Raises:
        ValueError: if the date, time or timezone is invalid.
    """
    if not is_valid_timezone(tz_name):
        raise ValueError(f"Unknown timezone: {tz_name}")
    match = _TIME_RE.match(time_str.strip())
    if not match:
        raise ValueError(f"Invalid time: {time_str!r}")
    hour, minute, second = (int(g) if g else 0 for g in match.groups())
    local = datetime.combine(
        date.fromisoformat(date_str.strip()),
        time(hour, minute, second),
        tzinfo=ZoneInfo(tz_name),
    )
    return math.floor(local.timestamp())


# =============================================================================
# Presets
# =============================================================================


def _at(dt: datetime, hour: int, minute: int = 0) -> datetime:
    return dt.replace(hour=hour, minute=minute, second=0, microsecond=0)


def _tonight_7pm(now: datetime) -> datetime:
    target = _at(now, 19)
    if target <= now:
        target += timedelta(days=1)
    return target


def _next_friday_6pm(now: datetime) -> datetime:
    # isoweekday: Monday=1 ... Friday=5
    days_until_friday = (5 - now.isoweekday() + 7) % 7 or 7
    return _at(now, 18) + timedelta(days=days_until_friday)


@dataclass(frozen=True)
class TimestampPreset:
    id: str
    label: str
    resolve: Callable[[datetime], datetime]


TIMESTAMP_PRESETS: List[TimestampPreset] = [
    TimestampPreset("now", "Now", lambda now: now),
    TimestampPreset("in5min", "In 5 minutes", lambda now: now + timedelta(minutes=5)),
    TimestampPreset("in15min", "In 15 minutes", lambda now: now + timedelta(minutes=15)),
    TimestampPreset("in30min", "In 30 minutes", lambda now: now + timedelta(minutes=30)),
    TimestampPreset("in1hour", "In 1 hour", lambda now: now + timedelta(hours=1)),
    TimestampPreset("in24hours", "In 24 hours", lambda now: now + timedelta(hours=24)),
    TimestampPreset("tonight7pm", "Tonight 7 PM", _tonight_7pm),
    TimestampPreset("tomorrow", "Tomorrow (same time)", lambda now: now + timedelta(days=1)),
    TimestampPreset(
        "tomorrowNoon",
        "Tomorrow noon",
        lambda now: _at(now + timedelta(days=1), 12),
    ),
    TimestampPreset("nextFriday6pm", "Next Friday 6 PM", _next_friday_6pm),
    TimestampPreset("nextWeek", "Next week (same time)", lambda now: now + timedelta(weeks=1)),
]


def resolve_preset(preset_id: str, now: datetime) -> int:
    """Epoch seconds for the preset ``preset_id`` evaluated at the aware datetime ``now``.

    Raises:
        KeyError: if no preset has that id.
    """
    for preset in TIMESTAMP_PRESETS:
        if preset.id == preset_id:
            return math.floor(preset.resolve(now).timestamp())
    raise KeyError(preset_id)


__all__ = [
    "TimestampStyle",
    "TimestampStyleInfo",
    "TIMESTAMP_STYLES",
    "DEFAULT_STYLE",
    "Clock",
    "system_clock",
    "coerce_style",
    "format_timestamp",
    "format_relative_time",
    "generate_timestamp_token",
    "TimezoneInfo",
    "POPULAR_TIMEZONES",
    "is_valid_timezone",
    "format_offset",
    "describe_timezone",
    "get_popular_timezones",
    "to_epoch_seconds",
    "TimestampPreset",
    "TIMESTAMP_PRESETS",
    "resolve_preset",
]
