from datetime import date, datetime, timezone

DATE_FORMAT = "%Y-%m-%d"


def parse_date(value: str) -> date:
    """Parse a calendar day in strict YYYY-MM-DD form.

    Raises ValueError for anything else, including datetimes and
    unpadded fields such as "2026-1-5".
    """
    parsed = datetime.strptime(value, DATE_FORMAT).date()
    if format_date(parsed) != value:
        raise ValueError(f"'{value}' is not a YYYY-MM-DD date")
    return parsed


def format_date(value: date) -> str:
    # strftime does not zero-pad years below 1000 on every platform.
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def to_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def today_utc() -> date:
    return datetime.now(timezone.utc).date()
