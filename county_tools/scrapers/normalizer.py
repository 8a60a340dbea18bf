import logging
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional

from county_tools.scrapers.base import UNASSIGNED, UnknownRegionError

_logger = logging.getLogger(__name__)


def add_suffix(name: str, suffix: str = " County") -> str:
    """Append `suffix` to `name` unless it already ends with it"""
    if name.endswith(suffix):
        return name
    return f"{name}{suffix}"


def build_upper_index(
    regions: Iterable[str], aliases: Mapping[str, str], suffix: str = " County"
) -> Dict[str, str]:
    """
    Build a map from the upper case, suffix-less form of each region to its
    canonical name; e.g. ``"CAPE GIRARDEAU" -> "Cape Girardeau County"``.

    Some sources list county names all in upper case and without the
    " County" suffix. Upper cased alias keys are merged in as well.
    """
    out = {}
    for region in regions:
        key = region[: -len(suffix)] if region.endswith(suffix) else region
        out[key.upper()] = region
    for raw, region in aliases.items():
        out[raw.upper()] = region
    return out


class NameNormalizer:
    """
    Map raw region names from a source to canonical region names

    Parameters
    ----------
    regions: Iterable[str]
        The canonical names, e.g. every county in a state
    aliases: Mapping[str, str]
        Known irregular spellings mapped to their canonical name
    suffix: str
        Appended to names that don't carry it (cities are left alone)
    placeholder: str
        Raw value meaning "to be determined"; mapped to `unassigned`
    unassigned: str
        The sentinel region for data that can't be attributed
    """

    def __init__(
        self,
        regions: Iterable[str],
        aliases: Optional[Mapping[str, str]] = None,
        suffix: str = " County",
        placeholder: str = "TBD",
        unassigned: str = UNASSIGNED,
    ):
        self.regions = tuple(regions)
        self.suffix = suffix
        self.unassigned = unassigned
        self.aliases = MappingProxyType(dict(aliases or {}))
        self.upper_index = MappingProxyType(
            build_upper_index(self.regions, self.aliases, suffix)
        )
        self._canonical = frozenset(self.regions)
        self._placeholder = add_suffix(placeholder, suffix)

    def normalize(self, raw: str) -> str:
        name = self.aliases.get(raw, raw)
        if name == self.unassigned:
            return name

        if "city" not in name.lower():
            name = add_suffix(name, self.suffix)

        if name == self._placeholder:
            name = self.unassigned

        return name

    def is_valid(self, name: str) -> bool:
        "False for the bare suffix that empty rows normalize to"
        return name.strip() != self.suffix.strip()

    def is_canonical(self, name: str) -> bool:
        return name in self._canonical or name == self.unassigned

    def resolve(self, raw: str) -> Optional[str]:
        """
        Normalize `raw` and check it against the canonical regions

        Returns None for empty/garbage rows, which should be skipped. Names
        that aren't canonical are logged and attributed to the unassigned
        region so their counts still make it into the totals.
        """
        name = self.normalize(raw)
        if not self.is_valid(name):
            _logger.debug("Skipping row with empty region name %r", raw)
            return None

        if not self.is_canonical(name):
            _logger.warning(
                "Unknown region %r (normalized to %r), counting it as %s",
                raw,
                name,
                self.unassigned,
            )
            return self.unassigned

        return name

    def normalize_upper(self, raw_upper: str) -> str:
        """
        Look up an upper case, suffix-less name. There is no fallback

        Raises
        ------
        UnknownRegionError
            When the name isn't in the upper case index
        """
        try:
            return self.upper_index[raw_upper]
        except KeyError:
            raise UnknownRegionError(raw_upper) from None
