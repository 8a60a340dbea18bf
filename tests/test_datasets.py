import pandas as pd
import pytest

from county_tools import ALL_SCRAPERS
from county_tools.scrapers import VariantTable
from county_tools.scrapers.official.base import VariantDashboard

SORTED_SCRAPERS = sorted(ALL_SCRAPERS, key=lambda x: x.__name__)


def test_registry_has_only_functional_scrapers():
    assert SORTED_SCRAPERS
    assert VariantDashboard not in SORTED_SCRAPERS


@pytest.mark.parametrize("cls", SORTED_SCRAPERS)
def test_all_dataset_has_type(cls):
    assert hasattr(cls, "data_type")


@pytest.mark.parametrize("cls", SORTED_SCRAPERS)
def test_all_dataset_has_location_type(cls):
    assert hasattr(cls, "location_type")


@pytest.mark.parametrize("cls", SORTED_SCRAPERS)
def test_covid_dataset_has_source(cls):
    if getattr(cls, "data_type", False) == "covid":
        assert hasattr(cls, "source")
        assert hasattr(cls, "state_fips")


@pytest.mark.parametrize("cls", SORTED_SCRAPERS)
def test_all_datasets_has_source_name(cls):
    assert hasattr(cls, "source_name")


@pytest.mark.parametrize(
    "cls", [c for c in SORTED_SCRAPERS if issubclass(c, VariantDashboard)]
)
def test_variant_dashboard_tables(cls):
    assert isinstance(cls.variants, VariantTable)
    assert len(cls.variants) > 0
    assert len(set(cls.counties)) == len(cls.counties)
    assert set(cls.county_aliases.values()) <= set(cls.counties)

    # a variant must apply to any run date
    d = cls(pd.Timestamp.now(tz="UTC") - pd.Timedelta("1 days"))
    assert d.variant is not None
