"""
Parsing helpers for values scraped out of html tables and csv exports

Missing or unreadable numeric cells are common in the sources we read, so
`parse_number` returns a default (zero) instead of raising. A sparse cell
should not abort a whole run.
"""
import math
import re
from typing import Optional

import pandas as pd

_NUMBER_JUNK = re.compile(r"[,\s]")
_EPOCH_MS = re.compile(r"^\d+$")


def parse_string(text: Optional[str]) -> str:
    """Trim and collapse all whitespace in `text`"""
    if text is None:
        return ""
    return " ".join(str(text).split())


def parse_number(text, default: Optional[int] = 0) -> Optional[int]:
    """
    Parse a count like ``"1,234"``

    Returns an `int` for whole, non-negative values and `default` when the
    value is empty, missing, negative, fractional, or not a number
    """
    if text is None:
        return default
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        value = float(text)
    else:
        cleaned = _NUMBER_JUNK.sub("", str(text))
        if not cleaned:
            return default
        try:
            value = float(cleaned)
        except ValueError:
            return default

    if math.isnan(value) or math.isinf(value):
        return default
    if value < 0 or not value.is_integer():
        return default

    return int(value)


def parse_published_date(value) -> str:
    """
    Convert a source "last edited" value into an ISO-8601 UTC timestamp

    Accepts ISO strings (``"2020-04-27T18:13:20.273Z"``) as well as epoch
    milliseconds (``1585082918049``), as the Missouri export switched
    between the two on 2020-04-28.
    """
    text = str(value).strip()
    if _EPOCH_MS.match(text):
        ts = pd.to_datetime(int(text), unit="ms", utc=True)
    else:
        ts = pd.to_datetime(text, utc=True)

    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def iso_date(dt) -> str:
    """Format a date or timestamp as ``YYYY-MM-DD``"""
    return pd.Timestamp(dt).strftime("%Y-%m-%d")
