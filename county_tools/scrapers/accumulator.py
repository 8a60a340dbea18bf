from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional

RegionRecord = Dict[str, Any]


class RecordAccumulator(Mapping):
    """
    Per-run mapping from canonical region name to a partial record

    Sources often list the same region on several rows (e.g. separate
    "in state" and "other" case tallies), so metrics are merged additively.
    A metric is absent from a record until the first row touches it.

    Insertion order is kept so that output built from an accumulator is
    reproducible.
    """

    def __init__(self):
        self._records: Dict[str, RegionRecord] = {}

    def __getitem__(self, region: str) -> RegionRecord:
        return self._records[region]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self):
        return f"RecordAccumulator({self._records!r})"

    def add(self, region: Optional[str], metric: str, delta, **defaults) -> None:
        """
        Add `delta` to `metric` for `region`

        If `region` has no record yet, one is created with `metric` set to
        `delta` and with `defaults` applied. `defaults` are ignored for
        existing records. A `region` of None (an invalid row) contributes
        nothing.
        """
        if region is None:
            return

        if region not in self._records:
            record = dict(defaults)
            record[metric] = delta
            self._records[region] = record
        elif metric not in self._records[region]:
            self._records[region][metric] = delta
        else:
            self._records[region][metric] += delta

    def ensure(self, region: Optional[str], **defaults) -> None:
        "Create `region` if needed and set each of `defaults` where absent"
        if region is None:
            return

        record = self._records.setdefault(region, {})
        for key, value in defaults.items():
            record.setdefault(key, value)

    def set_default(self, region: Optional[str], field: str, value) -> None:
        "Set a non-additive field, like `publishedDate`, unless already set"
        self.ensure(region, **{field: value})

    def records(self) -> Dict[str, RegionRecord]:
        "A copy of the accumulated records"
        return {region: dict(record) for region, record in self._records.items()}
