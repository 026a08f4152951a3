from __future__ import annotations

import datetime as dt
from typing import Optional, Union

Number = Union[int, float]

MISSING = "—"

# Backend timestamps are "yyyy-MM-dd HH:mm:ss"; older payloads used ISO-8601
_DATE_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d")


def parse_datetime(s: Optional[str]) -> Optional[dt.datetime]:
    if not s or not isinstance(s, str):
        return None
    text = s.strip()
    for fmt in _DATE_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return dt.datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None


def format_date(s: Optional[str]) -> Optional[str]:
    """'2015-03-04 10:00:00' -> 'Mar 4, 2015'; None when unparseable."""
    d = parse_datetime(s)
    if d is None:
        return None
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def format_number(num: Optional[Number]) -> str:
    if num is None:
        return MISSING
    if num >= 1_000_000:
        return f"{num / 1_000_000:.1f}M"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K"
    if isinstance(num, float) and not num.is_integer():
        return f"{num:.1f}"
    return str(int(num))
