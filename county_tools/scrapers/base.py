import json
import os
import pickle
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

# Set county to this if you only have state data, but this isn't the entire state
UNASSIGNED = "(unassigned)"


class RequestError(Exception):
    """Error raised when a network request fails or returns malformed data"""

    pass


class UnknownRegionError(KeyError):
    """Error raised when a source reports a region name we cannot map"""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"Unknown region name: {self.name!r}"


class NoVariantError(LookupError):
    """Error raised when no extraction variant applies to a run date"""

    pass


def _get_base_path() -> Path:
    if "DATAPATH" in os.environ.keys():
        return Path(os.environ["DATAPATH"])
    else:
        return Path.home() / ".county-data"


class DatasetBase(ABC):
    """
    Attributes
    ----------
    data_type: str = "general"
        The type of data for this scraper. This is often set to "covid"
        by subclasses

    location_type: Optional[str]
        The geography of the output rows, e.g. `"county"`. Also the key
        used for the region identifier in each output row

    source: str
        A string containing a URL that points to the dashboard or remote
        resource that will be scraped
    """

    data_type: str = "general"
    location_type: Optional[str]
    base_path: Path
    source: str

    def __init__(self, execution_dt: Optional[pd.Timestamp] = None):
        if execution_dt is None:
            execution_dt = pd.Timestamp.now(tz="UTC")
        self.execution_dt = pd.to_datetime(execution_dt, utc=True)
        self.base_path = _get_base_path()

        # Make sure the storage path exists and create if not
        if not self.base_path.exists():
            self.base_path.mkdir(parents=True)

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @classmethod
    def find_previous_fetch_execution_dates(
        cls,
        start_date: Optional[pd.Timestamp] = None,
        end_date: Optional[pd.Timestamp] = None,
        only_last: bool = False,
    ) -> List[pd.Timestamp]:
        """Finds previous times that a scraper fetch run succeeded.

        Parameters
        ----------
        start_date:
            Optional start date.
        end_date:
            Optional end date.
        only_last:
            If true will return only the most recent run.
        """
        scraper_fetch_path = _get_base_path() / "raw" / cls.__name__
        if not scraper_fetch_path.exists():
            return []

        vintages = [
            path.stem for path in scraper_fetch_path.iterdir() if path.is_file()
        ]
        timestamps = sorted(
            [
                pd.to_datetime(vintage, format="%Y-%m-%d_%H", utc=True)
                for vintage in vintages
            ]
        )

        # Filter timestamps based on input arguments.
        if start_date is not None:
            start_date = pd.to_datetime(start_date, utc=True)
            timestamps = [
                timestamp for timestamp in timestamps if timestamp >= start_date
            ]
        if end_date is not None:
            end_date = pd.to_datetime(end_date, utc=True)
            timestamps = [
                timestamp for timestamp in timestamps if timestamp <= end_date
            ]

        if only_last and timestamps:
            return [timestamps[-1]]

        return timestamps

    def _retrieve_dt(self, tz: str = "US/Eastern") -> pd.Timestamp:
        """Get the current datetime in a specific timezone"""
        out = self.execution_dt.tz_convert(tz).normalize().tz_localize(None)

        return out

    def run_date_is_after(self, date: str, tz: str = "US/Eastern") -> bool:
        """
        Whether the run date (in timezone `tz`) is strictly after `date`

        Used by extraction routines for conditional logic such as "the
        deaths table only exists after this date"
        """
        return self._retrieve_dt(tz) > pd.Timestamp(date)

    def _filepath(self, raw: bool) -> Path:
        """
        Method for determining the file path/file name -- Everything is
        stored using the following conventions:

        * `{stage}` is either `"raw"` or `"clean"` based on whether the
          data being read in is raw or clean data
        * `{name}` comes from the name of the scraper
        * `{execution_dt}` is the execution datetime
        * `{file_type}` is the file type

        The data will then be stored  at the path:

        `{stage}/{classname}/{execution_dt}.{file_type}``

        Parameters
        ----------
        raw : bool
            Takes the value `True` if we are storing raw
            data

        Returns
        -------
        path : str
            The autogenerated name for where the data will
            be stored
        """
        stage = "raw" if raw else "clean"
        file_type = "pickle" if raw else "json"
        execution_date = self.execution_dt.strftime(r"%Y-%m-%d_%H")

        path = self.base_path / stage / self.name
        if not path.exists():
            path.mkdir(parents=True)

        return path / f"{execution_date}.{file_type}"

    def _read_clean(self) -> List[Dict[str, Any]]:
        """
        Reads the normalized rows from the corresponding filepath

        Returns
        -------
        rows : List[Dict[str, Any]]
            The normalized output rows
        """
        fp = self._filepath(raw=False)
        if not os.path.exists(fp):
            msg = "The data that you are trying to read does not exist"
            raise ValueError(msg)

        with open(fp, "r") as f:
            return json.load(f)

    def _read_raw(self) -> Any:
        """
        The `_read_raw` method reads raw data from a filepath

        Returns
        -------
        data :
            The data exactly as returned by `fetch`
        """
        fp = self._filepath(raw=True)
        if not os.path.exists(fp):
            msg = "The data that you are trying to read does not exist"
            raise ValueError(msg)

        with open(fp, "rb") as f:
            data = pickle.load(f)

        return data

    def _store_clean(self, rows: List[Dict[str, Any]]) -> Path:
        """
        Saves the normalized rows as json at their corresponding filepath

        Returns
        -------
        filename : Path
            The path to the file where the data was written
        """
        filename = self._filepath(raw=False)
        with open(filename, "w") as f:
            json.dump(rows, f, indent=2)
        return filename

    def _store_raw(self, data: Any) -> Path:
        """
        The `_store_raw` method saves the data into its corresponding
        filepath

        Parameters
        ----------
        data :
            The data in its raw format

        Returns
        -------
        filename : Path
            The path to the file where the data was written
        """
        filename = self._filepath(raw=True)

        with open(filename, "wb") as f:
            pickle.dump(data, f)

        return filename

    @abstractmethod
    def fetch(self) -> Any:
        """
        The `fetch` method should retrieve the data in its raw form.
        Whatever is returned must be picklable so it can be stored and
        normalized again later

        Returns
        -------
        data : Any
            The data in its raw format
        """
        pass

    def _fetch(self) -> Path:
        """
        Fetches the raw data and dumps it into storage using the
        `_store_raw` method

        Returns
        -------
        filename : Path
            The path to the file where the data was written
        """
        data = self.fetch()
        return self._store_raw(data)

    @abstractmethod
    def normalize(self, data: Any) -> List[Dict[str, Any]]:
        """
        The `normalize` method should take the data in its raw form
        and turn it into a list of output rows

        Parameters
        ----------
        data : Any
            The raw data

        Returns
        -------
        rows : List[Dict[str, Any]]
            One mapping per region with zero or more metrics
        """
        pass

    def _normalize(self) -> Path:
        """
        Reads the raw data from storage, normalizes it and then saves
        the output rows

        Returns
        -------
        filename : Path
            The path to the file where the data was written
        """
        data = self._read_raw()
        rows = self.normalize(data)
        return self._store_clean(rows)

    def reprocess_from_already_fetched_data(self) -> Path:
        """Reprocesses data from fetched data - useful to fix errors after fetch."""
        return self._normalize()
