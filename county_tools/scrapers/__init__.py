from county_tools.scrapers.accumulator import RecordAccumulator
from county_tools.scrapers.base import (
    UNASSIGNED,
    DatasetBase,
    NoVariantError,
    RequestError,
    UnknownRegionError,
)
from county_tools.scrapers.normalizer import NameNormalizer
from county_tools.scrapers.variants import EARLIEST, Variant, VariantTable

from county_tools.scrapers.official.MO.mo_county import MissouriCounty
