"""Calendar-day helpers.

Timestamps are stored as naive UTC. A shop "day" is the half-open interval
[local midnight, next local midnight) in the shop time zone.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from lottosales.config import config_value
from lottosales.errors import ValidationError


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def coerce_datetime(value: object) -> datetime | None:
    """Read a stored timestamp (datetime or ISO string) as naive UTC."""

    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        return to_naive_utc(parsed)
    return None


def shop_timezone(name: str | None = None) -> ZoneInfo:
    tz_name = name or str(config_value("SHOP_TIMEZONE", "UTC"))
    try:
        return ZoneInfo(tz_name)
    except ZoneInfoNotFoundError:
        return ZoneInfo("UTC")


def parse_iso_date(value: str | date) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as e:
        raise ValidationError("date must be YYYY-MM-DD", details={"date": [str(value)]}) from e


def day_range(day: str | date, tz: ZoneInfo) -> tuple[datetime, datetime]:
    """Return [start, end) of a local calendar day as naive UTC datetimes."""

    d = parse_iso_date(day)
    start = datetime.combine(d, time.min, tzinfo=tz)
    end = datetime.combine(d + timedelta(days=1), time.min, tzinfo=tz)
    return to_naive_utc(start), to_naive_utc(end)


def local_date(value: datetime, tz: ZoneInfo) -> date:
    """Local calendar day of a naive-UTC timestamp."""

    aware = value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value
    return aware.astimezone(tz).date()
