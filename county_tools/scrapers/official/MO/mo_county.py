import logging
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
import us

from county_tools.scrapers.accumulator import RecordAccumulator
from county_tools.scrapers.base import UNASSIGNED, RequestError, UnknownRegionError
from county_tools.scrapers.official.base import ArcGIS, VariantDashboard
from county_tools.scrapers.official.MO.data import MO_COUNTIES, MO_COUNTY_ALIASES
from county_tools.scrapers.parse import (
    iso_date,
    parse_number,
    parse_published_date,
    parse_string,
)
from county_tools.scrapers.variants import EARLIEST, Variant, VariantTable

_logger = logging.getLogger(__name__)


class MissouriCounty(ArcGIS, VariantDashboard):
    """
    County level cases, deaths and tests for Missouri

    Cases and deaths were published as html tables on the DHSS results page
    until 2020-03-30 and as a csv export of an ArcGIS layer after that.
    Cumulative test counts always come from a separate ArcGIS layer that
    has one row per test, so we ask the service to count them for us.
    """

    location_type = "county"
    state_fips = int(us.states.lookup("Missouri").fips)
    source = "https://health.mo.gov/living/healthcondiseases/communicable/novel-coronavirus/results.php"
    source_name = "Missouri Department of Health and Senior Services"
    timezone = "US/Central"

    counties = MO_COUNTIES
    county_aliases = MO_COUNTY_ALIASES

    ARCGIS_ID = "Bd4MACzvEukoZ9mR"
    srvid = 6
    testing_service = "Daily_COVID19_Testing_Report_for_OPI"
    lpha_dashboard_id = "6f2a47a25872470a815bcd95f52c2872"
    lpha_layer = "lpha_boundry"

    # rows of the csv export that don't belong to any county
    unassigned_names = ("TBD", "Out of State")

    # aggregate rows some pages add below the counties
    summary_names = ("Total", "Totals")

    # The deaths table was added to the results page on this date
    deaths_table_after = "2020-03-24"

    # -- testing counts --

    def _query_testing_counts(self, as_of: Optional[pd.Timestamp] = None) -> dict:
        """Count the tests reported on or before `as_of` by county and result"""
        if as_of is None:
            as_of = self._retrieve_dt(self.timezone)

        return self.query_statistics(
            self.testing_service,
            0,
            self.srvid,
            where=f"test_date <= DATE '{iso_date(as_of)}'",
            group_by=["county", "result"],
            out_statistics=[
                {
                    "statisticType": "count",
                    "onStatisticField": "*",
                    "outStatisticFieldName": "Count",
                }
            ],
        )

    def _apply_testing_counts(self, accumulator: RecordAccumulator, res_json: dict):
        """
        Add the counts from `_query_testing_counts` to the `tested` metric

        The testing layer spells counties in upper case without the " County"
        suffix. Counties that only show up here get `tested` and `positives`
        set to zero before the count is added.
        """
        if not isinstance(res_json, dict) or not isinstance(
            res_json.get("features"), list
        ):
            raise RequestError("Testing counts are not an ArcGIS feature set")

        for attributes in self.arcgis_attributes(res_json):
            try:
                name, count = attributes["county"], attributes["Count"]
            except KeyError as e:
                raise RequestError(f"Testing counts are missing field {e}") from e
            if isinstance(count, bool) or not isinstance(count, int):
                raise RequestError(f"Testing count for {name!r} is {count!r}")

            try:
                county = self.normalizer.normalize_upper(name)
            except UnknownRegionError as e:
                _logger.warning("%s in testing counts, counting as %s", e, UNASSIGNED)
                county = UNASSIGNED

            accumulator.ensure(county, tested=0, positives=0)
            accumulator.add(county, "tested", count)

    def enrich(
        self, accumulator: RecordAccumulator, as_of: Optional[pd.Timestamp] = None
    ) -> RecordAccumulator:
        "Query the cumulative test counts as of `as_of` and merge them in"
        self._apply_testing_counts(accumulator, self._query_testing_counts(as_of))
        return accumulator

    def _resolve_county(self, name: str) -> Optional[str]:
        "Canonical county for a row label, or None for rows to skip"
        if name.lower() in (s.lower() for s in self.summary_names):
            _logger.debug("Skipping summary row %r", name)
            return None
        return self.normalizer.resolve(name)

    # -- html results page --

    def _fetch_results_page(self) -> Dict[str, Any]:
        return {
            "page": self.get_text(self.source),
            "testing": self._query_testing_counts(),
        }

    def _count_in_state_other(self, html: str) -> RecordAccumulator:
        # county | cases of residents | cases of non-residents
        accumulator = RecordAccumulator()
        for tr in self.table_rows(self.parse_html(html), 0):
            county = self._resolve_county(parse_string(self.cell_text(tr, 1)))
            cases_state = parse_number(self.cell_text(tr, 2))
            cases_other = parse_number(self.cell_text(tr, 3))
            accumulator.add(county, "cases", cases_state + cases_other)

        return accumulator

    def _normalize_in_state_other(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        accumulator = self._count_in_state_other(data["page"])
        self._apply_testing_counts(accumulator, data["testing"])
        return self.finalize(accumulator)

    def _count_cases_deaths_tables(self, html: str) -> RecordAccumulator:
        soup = self.parse_html(html)
        accumulator = RecordAccumulator()
        for tr in self.table_rows(soup, 0):
            county = self._resolve_county(parse_string(self.cell_text(tr, 1)))
            cases = parse_number(self.cell_text(tr, 2))
            accumulator.add(county, "cases", cases, deaths=0)

        if self.run_date_is_after(self.deaths_table_after, self.timezone):
            for tr in self.table_rows(soup, 1):
                county = self._resolve_county(parse_string(self.cell_text(tr, 1)))
                deaths = parse_number(self.cell_text(tr, 2))
                accumulator.add(county, "deaths", deaths)

        return accumulator

    def _normalize_cases_deaths_tables(
        self, data: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        accumulator = self._count_cases_deaths_tables(data["page"])
        self._apply_testing_counts(accumulator, data["testing"])
        return self.finalize(accumulator)

    # -- ArcGIS csv export --

    def _fetch_lpha_csv(self) -> Dict[str, Any]:
        url = self.arcgis_csv_url(self.srvid, self.lpha_dashboard_id, self.lpha_layer)
        return {"csv": self.get_text(url), "testing": self._query_testing_counts()}

    def _count_lpha_csv(self, text: str) -> Tuple[RecordAccumulator, Dict[str, int]]:
        accumulator = RecordAccumulator()
        unassigned = {"cases": 0, "deaths": 0}
        for row in self.read_csv_records(text):
            name = parse_string(row.get("NAME"))
            cases = parse_number(row.get("Cases"))
            deaths = parse_number(row.get("Deaths"))

            if name in self.unassigned_names:
                unassigned["cases"] += cases
                unassigned["deaths"] += deaths
                continue

            county = self._resolve_county(name)
            if county is None:
                continue
            accumulator.add(county, "cases", cases)
            accumulator.add(county, "deaths", deaths)

            edit_date = parse_string(row.get("EditDate"))
            if edit_date and "publishedDate" not in accumulator[county]:
                try:
                    published = parse_published_date(edit_date)
                except ValueError:
                    _logger.debug("Unreadable EditDate %r for %s", edit_date, county)
                    continue
                accumulator.set_default(county, "publishedDate", published)

        return accumulator, unassigned

    def _normalize_lpha_csv(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        accumulator, unassigned = self._count_lpha_csv(data["csv"])
        self._apply_testing_counts(accumulator, data["testing"])
        return self.finalize(accumulator, unassigned)

    variants = VariantTable(
        [
            Variant(EARLIEST, _fetch_results_page, _normalize_in_state_other),
            Variant("2020-02-22", _fetch_results_page, _normalize_cases_deaths_tables),
            Variant("2020-03-30", _fetch_lpha_csv, _normalize_lpha_csv),
        ]
    )
