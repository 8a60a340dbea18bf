import io
import json
import logging
from abc import ABC
from typing import Any, Dict, List, Mapping, Optional, Union

import jmespath
import pandas as pd
import requests
import us
from bs4 import BeautifulSoup
from bs4.element import Tag

from county_tools.scrapers.accumulator import RecordAccumulator
from county_tools.scrapers.base import DatasetBase, RequestError
from county_tools.scrapers.normalizer import NameNormalizer
from county_tools.scrapers.transform import finalize
from county_tools.scrapers.util import requests_session
from county_tools.scrapers.variants import Variant, VariantTable

_logger = logging.getLogger(__name__)


class StateDashboard(DatasetBase, ABC):
    """
    Definition of common parameters and values for scraping a State Dashboard

    Attributes
    ----------

    data_type: str = "covid"
        Data type is set to covid
    state_fips: int
        Must be set by subclasses. The two digit state fips code (as an int)
    source: str
        Must be set by subclasses. URL pointing to dashboard
    source_name: str
        Must be set by subclasses. Name of entity managing dataset, e.g.
        "Missouri Department of Health and Senior Services"
    timezone: str
        Timezone used to turn the execution datetime into the date of
        the data

    """

    data_type: str = "covid"
    location_type: str = "county"
    state_fips: int
    source: str
    source_name: str
    timezone: str = "US/Eastern"

    def __init__(self, execution_dt: Optional[pd.Timestamp] = None):
        super().__init__(execution_dt)
        self._sess: Optional[requests.Session] = None

    @property
    def sess(self) -> requests.Session:
        if self._sess is None:
            self._sess = requests_session()
        return self._sess

    @property
    def state_iso(self) -> str:
        "The state as an ISO 3166-2 code, e.g. ``iso2:US-MO``"
        state = us.states.lookup(str(self.state_fips).zfill(2))
        return f"iso2:US-{state.abbr}"

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Make an http request, turning any failure into a `RequestError`

        Failures are not retried
        """
        try:
            res = self.sess.request(method, url, **kwargs)
            res.raise_for_status()
        except requests.RequestException as e:
            raise RequestError(f"{method} {url} failed: {e}") from e

        return res

    def get_json(self, url: str, method: str = "GET", **kwargs) -> Any:
        res = self._request(method, url, **kwargs)
        try:
            return res.json()
        except ValueError as e:
            raise RequestError(f"{url} did not return json") from e

    def get_text(self, url: str, **kwargs) -> str:
        return self._request("GET", url, **kwargs).text

    @staticmethod
    def parse_html(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, features="lxml")

    @staticmethod
    def table_rows(soup: BeautifulSoup, index: int = 0) -> List[Tag]:
        """
        Get all `tr` elements from the `index`-th table on a page

        Raises
        ------
        RequestError
            If the page has fewer tables than expected
        """
        tables = soup.find_all("table")
        if index >= len(tables):
            msg = f"Expected at least {index + 1} table(s), page has {len(tables)}"
            raise RequestError(msg)

        return tables[index].find_all("tr")

    @staticmethod
    def cell_text(tr: Tag, n: int) -> str:
        """
        Text of the `n`-th (1-based) cell of a row, if that cell is a `td`

        Header cells and missing cells give an empty string
        """
        cells = tr.find_all(["td", "th"], recursive=False)
        if len(cells) < n or cells[n - 1].name != "td":
            return ""
        return cells[n - 1].get_text()

    @staticmethod
    def read_csv_records(text: str) -> List[Dict[str, str]]:
        """Parse csv text into one dict per row. All values are kept as strings"""
        df = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)
        return df.to_dict("records")


class VariantDashboard(StateDashboard, ABC):
    """
    Parent class for county level dashboards whose format changed over time

    Must define class variables:

    * `variants`: a `VariantTable` mapping start dates to extraction routines
    * `counties`: every canonical region in the state

    and optionally `county_aliases`, a dict of irregular spellings used by
    the source to canonical names.

    `fetch` and `normalize` dispatch to the variant that was active on the
    execution date (in `timezone`)
    """

    variants: VariantTable
    counties: List[str]
    county_aliases: Dict[str, str] = {}

    def __init__(self, execution_dt: Optional[pd.Timestamp] = None):
        super().__init__(execution_dt)
        self.normalizer = NameNormalizer(self.counties, self.county_aliases)

    @property
    def variant(self) -> Variant:
        return self.variants.select(self._retrieve_dt(self.timezone))

    def fetch(self) -> Any:
        variant = self.variant
        _logger.info("%s: fetching with variant %s", self.name, variant.key)
        return variant.fetch(self)

    def normalize(self, data: Any) -> List[Dict[str, Any]]:
        return self.variant.normalize(self, data)

    def finalize(
        self,
        accumulator: RecordAccumulator,
        unassigned: Optional[Mapping[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        "Build output rows, with totals and empty rows for missing counties"
        return finalize(
            accumulator,
            self.counties,
            unassigned=unassigned,
            region_key=self.location_type,
            total={"state": self.state_iso},
        )


class ArcGIS(StateDashboard, ABC):
    """
    Parent class for extracting data from an ArcGIS dashbaord

    Must define class variables:

    * `ARCGIS_ID`

    in order to use this class
    """

    ARCGIS_ID: str

    def arcgis_query_url(
        self, service: str, sheet: Union[str, int], srvid: Union[str, int]
    ) -> str:
        """
        Construct the arcgis query url given service, sheet, and srvid

        The correct value should be found by inspecting the network tab of the
        browser's developer tools

        Parameters
        ----------
        service : str
            The name of an argcis service
        sheet : Union[str,int]
            The sheet number containing the data of interest
        srvid : Union[str,int]
            The server id hosting the desired service

        Returns
        -------
        url: str
            The url pointing to the ArcGIS resource to be collected

        """
        out = f"https://services{srvid}.arcgis.com/{self.ARCGIS_ID}/"
        out += f"ArcGIS/rest/services/{service}/FeatureServer/{sheet}/query"

        return out

    def arcgis_csv_url(
        self, srvid: Union[str, int], dashboard_id: str, layer: str
    ) -> str:
        """
        Find the download url of the csv export of a hosted layer

        The dashboard manifest names the organization hosting the layer and
        the layer metadata holds the item id used for its csv download

        Parameters
        ----------
        srvid : Union[str,int]
            The server id hosting the layer
        dashboard_id : str
            The id of the dashboard item that displays the layer
        layer : str
            The name of the layer's feature service

        Returns
        -------
        url: str
            The url of the csv export
        """
        manifest = self.get_json(
            f"https://maps.arcgis.com/sharing/rest/content/items/{dashboard_id}",
            params={"f": "json"},
        )
        org_id = manifest.get("orgId")
        if not org_id:
            raise RequestError(f"No orgId in manifest of dashboard {dashboard_id}")

        metadata = self.get_json(
            f"https://services{srvid}.arcgis.com/{org_id}/arcgis/rest/services/"
            f"{layer}/FeatureServer/0",
            params={"f": "json"},
        )
        item_id = metadata.get("serviceItemId")
        if not item_id:
            raise RequestError(f"No serviceItemId in metadata of layer {layer}")

        return f"https://opendata.arcgis.com/datasets/{item_id}_0.csv"

    def query_statistics(
        self,
        service: str,
        sheet: Union[str, int],
        srvid: Union[str, int],
        where: str,
        group_by: List[str],
        out_statistics: List[Dict[str, str]],
    ) -> dict:
        """
        Run a grouped aggregate query against a feature service

        Parameters
        ----------
        service, sheet, srvid :
            See `arcgis_query_url` method
        where : str
            SQL style filter, e.g. ``"test_date <= DATE '2020-04-01'"``
        group_by : List[str]
            Fields to group by
        out_statistics : List[Dict[str, str]]
            ArcGIS statistic definitions, e.g. ``[{"statisticType": "count",
            "onStatisticField": "*", "outStatisticFieldName": "Count"}]``

        Returns
        -------
        js: dict
            The JSON response. Always has a ``features`` list

        Raises
        ------
        RequestError
            If the request fails or the response is not a feature set
        """
        params = {
            "f": "json",
            "where": where,
            "groupByFieldsForStatistics": ",".join(group_by),
            "outStatistics": json.dumps(out_statistics),
            "returnGeometry": "false",
            "resultRecordCount": 32000,
            "resultOffset": 0,
        }
        url = self.arcgis_query_url(service=service, sheet=sheet, srvid=srvid)
        res_json = self.get_json(url, method="POST", data=params)

        # ArcGIS reports query errors with a 200 status
        if "error" in res_json:
            raise RequestError(f"ArcGIS query failed: {res_json['error']}")
        if not isinstance(res_json.get("features"), list):
            raise RequestError("ArcGIS response has no features")

        return res_json

    def arcgis_attributes(self, res_json: dict) -> List[Dict[str, Any]]:
        "The attributes of every feature in an ArcGIS response"
        return jmespath.search("features[].attributes", res_json) or []
