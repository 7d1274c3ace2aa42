"""Timestamp helpers. Formatting is done per call, nothing is cached."""
from datetime import date, datetime
from typing import Optional

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"


def now_timestamp() -> str:
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def parse_date(s: Optional[str]) -> Optional[date]:
    if not s:
        return None
    try:
        return datetime.strptime(s.strip(), DATE_FORMAT).date()
    except ValueError:
        return None
