from datetime import datetime, date, timezone
from typing import Optional


def parse_form_date(value: Optional[str]) -> Optional[datetime]:
    """Parse a form date (``MM/DD/YYYY`` or ISO ``YYYY-MM-DD``) to a UTC datetime at noon.

    Anchoring at 12:00 UTC keeps the calendar day stable for any client
    timezone within +/-12 hours.
    """
    if value is None or str(value).strip() == "":
        return None
    text = str(value).strip()
    for fmt in ("%m/%d/%Y", "%Y-%m-%d"):
        try:
            parsed = datetime.strptime(text[:10], fmt)
            break
        except ValueError:
            continue
    else:
        raise ValueError(f"Invalid date '{value}', expected MM/DD/YYYY")
    return datetime(parsed.year, parsed.month, parsed.day, 12, 0, 0, tzinfo=timezone.utc)


def parse_form_day(value: Optional[str]) -> Optional[date]:
    parsed = parse_form_date(value)
    return parsed.date() if parsed else None
