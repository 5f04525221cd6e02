"""Due date parsing for the edit form."""

from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta

from tasktui.exceptions import ValidationError

DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y")
TIME_FORMAT = "%H:%M"

# A date without a time means "by the end of that day"
END_OF_DAY = time(23, 59, 59)

_KEYWORDS = {
    "today": 0,
    "tod": 0,
    "tomorrow": 1,
    "tom": 1,
    "yesterday": -1,
}


def _parse_date(text: str, today: date) -> date | None:
    if text.lower() in _KEYWORDS:
        return today + timedelta(days=_KEYWORDS[text.lower()])
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_due_date(text: str, now: datetime | None = None) -> datetime | None:
    """Parse user input into an aware due date.

    Accepts ``YYYY-MM-DD``, ``DD.MM.YYYY`` or today/tomorrow/yesterday,
    optionally followed by ``HH:MM``. Blank input means "no due date".

    Raises:
        ValidationError: If the text is not a recognised date
    """
    text = text.strip()
    if not text:
        return None

    now = (now or datetime.now(UTC)).astimezone()
    date_part, _, time_part = text.partition(" ")
    parsed_date = _parse_date(date_part, now.date())
    if parsed_date is None:
        raise ValidationError("Due date should be YYYY-MM-DD or DD.MM.YYYY")

    parsed_time = END_OF_DAY
    if time_part.strip():
        try:
            parsed_time = datetime.strptime(time_part.strip(), TIME_FORMAT).time()
        except ValueError as e:
            raise ValidationError("Due time should be HH:MM") from e

    # Naive local wall-clock time; astimezone() attaches the local zone
    return datetime.combine(parsed_date, parsed_time).astimezone()


def format_due_input(value: datetime | None) -> str:
    """Render a stored due date back into editable text."""
    if value is None:
        return ""
    local = value.astimezone()
    if local.time().replace(microsecond=0) == END_OF_DAY:
        return local.strftime(DATE_FORMATS[0])
    return local.strftime(f"{DATE_FORMATS[0]} {TIME_FORMAT}")
