"""
Date-keyed extraction variants.

Upstream dashboards change their report format at known calendar
boundaries. A scraper lists one `Variant` per format and the
`VariantTable` picks the one that was active on the run date, so re-running
a scraper for a historical date reproduces the format of that date.
"""
import bisect
import datetime
from typing import Callable, Iterable, List, Optional, Union

import pandas as pd

from county_tools.scrapers.base import NoVariantError

EARLIEST = "earliest"

# older scrapers keyed their default routine with "0"
_EARLIEST_ALIASES = {EARLIEST, "0"}

DateLike = Union[str, datetime.date, pd.Timestamp]


def _to_date(value: DateLike) -> datetime.date:
    return pd.Timestamp(value).date()


class Variant:
    """
    One extraction routine for a single historical format of a source

    Parameters
    ----------
    start: str
        ISO date (``YYYY-MM-DD``) from which this format applies, or
        ``"earliest"`` (also ``"0"``) for the oldest/default format
    fetch: Callable
        ``fetch(scraper) -> raw`` performs the I/O for this format
    normalize: Callable
        ``normalize(scraper, raw) -> rows`` turns the raw data into output rows
    """

    def __init__(self, start: str, fetch: Callable, normalize: Callable):
        self.key = EARLIEST if str(start) in _EARLIEST_ALIASES else str(start)
        self.start = None if self.key == EARLIEST else _to_date(self.key)
        self.fetch = fetch
        self.normalize = normalize

    def __repr__(self):
        return f"Variant({self.key!r}, {self.normalize.__name__})"


class VariantTable:
    """Immutable collection of variants ordered by start date"""

    def __init__(self, variants: Iterable[Variant]):
        earliest = None
        dated: List[Variant] = []
        for variant in variants:
            if variant.start is None:
                if earliest is not None:
                    raise ValueError("Only one earliest variant is allowed")
                earliest = variant
            else:
                dated.append(variant)

        dated.sort(key=lambda v: v.start)
        starts = [v.start for v in dated]
        if len(set(starts)) != len(starts):
            raise ValueError("Variant start dates must be unique")

        self._earliest = earliest
        self._dated = tuple(dated)
        self._starts = tuple(starts)

    @property
    def keys(self) -> List[str]:
        out = [EARLIEST] if self._earliest is not None else []
        return out + [v.key for v in self._dated]

    def __len__(self):
        return len(self._dated) + (self._earliest is not None)

    def select(self, reference_date: Optional[DateLike] = None) -> Variant:
        """
        Find the variant whose start is the latest date not after
        `reference_date` (today if not given)

        Raises
        ------
        NoVariantError
            When every dated variant starts after `reference_date` and there
            is no earliest variant
        """
        if reference_date is None:
            reference_date = datetime.date.today()
        ref = _to_date(reference_date)

        ix = bisect.bisect_right(self._starts, ref)
        if ix > 0:
            return self._dated[ix - 1]
        if self._earliest is not None:
            return self._earliest

        raise NoVariantError(f"No variant applies to {ref.isoformat()}")
