"""
Turn a `RecordAccumulator` into the list of output rows

Every output list has one row per accumulated region, an optional row
for the unassigned bucket, one row with the totals across all of those,
and an empty row for each canonical region the source didn't mention.
"""
import numbers
from typing import Any, Dict, Iterable, List, Mapping, Optional

from county_tools.scrapers.base import UNASSIGNED

Row = Dict[str, Any]


def _is_metric(value) -> bool:
    return isinstance(value, numbers.Number) and not isinstance(value, bool)


def object_to_list(records: Mapping[str, Mapping], region_key: str = "county") -> List[Row]:
    """Convert a region -> record mapping into a list of rows"""
    return [{region_key: region, **record} for region, record in records.items()]


def sum_data(rows: Iterable[Row], region_key: str = "county") -> Row:
    """
    Sum every numeric metric across `rows`

    A metric missing from a row counts as 0 for that row. Identifiers and
    non-numeric fields like `publishedDate` are not summed.
    """
    totals: Row = {}
    for row in rows:
        for key, value in row.items():
            if key == region_key or not _is_metric(value):
                continue
            totals[key] = totals.get(key, 0) + value
    return totals


def add_empty_regions(
    rows: List[Row], regions: Iterable[str], region_key: str = "county"
) -> List[Row]:
    """Append a row with no metrics for every region missing from `rows`"""
    seen = {row.get(region_key) for row in rows}
    out = list(rows)
    for region in regions:
        if region not in seen:
            out.append({region_key: region})
            seen.add(region)
    return out


def finalize(
    records: Mapping[str, Mapping],
    regions: Iterable[str],
    unassigned: Optional[Mapping[str, Any]] = None,
    region_key: str = "county",
    total: Optional[Mapping[str, Any]] = None,
) -> List[Row]:
    """
    Build the output rows for one run

    Parameters
    ----------
    records:
        The accumulated region -> record mapping
    regions:
        Every canonical region of the jurisdiction
    unassigned:
        Metrics tracked outside of `records` for data that can't be tied
        to a region (e.g. "Out of State"). Merged into the unassigned row
        if `records` already has one
    region_key:
        Name of the region identifier in each row
    total:
        Identifying fields for the total row, e.g. ``{"state": "iso2:US-MO"}``

    Returns
    -------
    rows: List[Row]
        Region rows, the unassigned row, the total row and then empty
        rows for regions missing from the source
    """
    rows = object_to_list(records, region_key)

    if unassigned is not None:
        bucket = {k: v for k, v in unassigned.items() if k != region_key}
        existing = [row for row in rows if row[region_key] == UNASSIGNED]
        if existing:
            row = existing[0]
            for key, value in bucket.items():
                if _is_metric(value):
                    row[key] = row.get(key, 0) + value
                else:
                    row.setdefault(key, value)
        else:
            rows.append({region_key: UNASSIGNED, **bucket})

    total_row = dict(total or {})
    total_row.update(sum_data(rows, region_key))
    rows.append(total_row)

    return add_empty_regions(rows, regions, region_key)
