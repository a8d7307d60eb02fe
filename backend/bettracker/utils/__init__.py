from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Make a naive datetime timezone-aware (UTC). Already-aware datetimes pass through."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_wager_date(value: str | date | datetime) -> date:
    """Parse a wager date into a calendar date.

    Accepts bare dates ("2024-01-31") and ISO 8601 datetimes, with or without
    a Z/offset suffix. Datetimes are converted to UTC before the time of day
    is dropped, so "2024-01-31T23:30:00-05:00" becomes 2024-02-01.
    """
    if isinstance(value, datetime):
        return ensure_utc(value).astimezone(timezone.utc).date()
    if isinstance(value, date):
        return value
    text = value.strip()
    if len(text) == 10:
        return date.fromisoformat(text)
    parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    return ensure_utc(parsed).astimezone(timezone.utc).date()


def wager_date_to_api(value: date) -> str:
    """Serialize a calendar date the way the wager API stores it (UTC midnight)."""
    return datetime(value.year, value.month, value.day, tzinfo=timezone.utc).isoformat().replace("+00:00", "Z")
