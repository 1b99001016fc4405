"""Time utilities for exchange-timezone calendar handling."""
from datetime import date, datetime, timezone
from typing import Optional
from dateutil.relativedelta import relativedelta
import pytz


DEFAULT_EXCHANGE_TIMEZONE = "Asia/Shanghai"


def utc_now() -> datetime:
    """Default wall clock: timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def to_exchange_time(
    moment: Optional[datetime] = None,
    timezone_str: str = DEFAULT_EXCHANGE_TIMEZONE
) -> datetime:
    """
    Convert a moment to the exchange timezone.

    Args:
        moment: Aware datetime (naive values are taken as UTC); defaults to now
        timezone_str: Exchange timezone name

    Returns:
        Aware datetime in the exchange timezone
    """
    if moment is None:
        moment = utc_now()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)

    return moment.astimezone(pytz.timezone(timezone_str))


def exchange_date(moment: datetime, timezone_str: str = DEFAULT_EXCHANGE_TIMEZONE) -> str:
    """Calendar date (YYYY-MM-DD) of a moment on the exchange calendar."""
    return to_exchange_time(moment, timezone_str).date().isoformat()


def exchange_hour(moment: datetime, timezone_str: str = DEFAULT_EXCHANGE_TIMEZONE) -> int:
    """Hour of day (0-23) of a moment on the exchange calendar."""
    return to_exchange_time(moment, timezone_str).hour


def months_before(moment: datetime, months: int) -> datetime:
    """Same wall time `months` calendar months earlier (clamped to month end)."""
    earlier = moment - relativedelta(months=months)
    # pytz zones carry a fixed offset per instance; re-localize for DST
    if hasattr(moment.tzinfo, "localize"):
        earlier = moment.tzinfo.localize(earlier.replace(tzinfo=None))
    return earlier


def parse_news_time(
    value: Optional[str],
    timezone_str: str = DEFAULT_EXCHANGE_TIMEZONE
) -> Optional[datetime]:
    """
    Parse a stored news timestamp or date into an aware datetime.

    Accepts ISO-8601 timestamps (with or without offset, a trailing "Z" is
    UTC), ISO dates and US-style M/D/YYYY dates. Values without an offset
    are read on the exchange calendar.

    Returns:
        Aware datetime, or None if the value cannot be parsed
    """
    if not value:
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    parsed: Optional[datetime] = None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        try:
            parsed = datetime.strptime(text, "%m/%d/%Y")
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = pytz.timezone(timezone_str).localize(parsed)
    return parsed


def parse_iso_date(value: str) -> Optional[date]:
    """Parse YYYY-MM-DD, returning None for blank or malformed values."""
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def format_us_date(moment: datetime) -> str:
    """M/D/YYYY, e.g. 10/5/2024."""
    return f"{moment.month}/{moment.day}/{moment.year}"


def format_us_time(moment: datetime) -> str:
    """h:mm:ss AM, e.g. 9:05:00 PM."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d}:{moment.second:02d} {suffix}"


def format_us_datetime(moment: datetime) -> str:
    """M/D/YYYY, h:mm:ss AM."""
    return f"{format_us_date(moment)}, {format_us_time(moment)}"
