# countries.py
from __future__ import annotations

import json
import logging
import pathlib
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import requests

from utils import parse_number, strict_bool

logger = logging.getLogger(__name__)

DATA_DIR = pathlib.Path(__file__).resolve().parent / "data"
DEFAULT_COUNTRY_DATA = DATA_DIR / "countryData.json"

FETCH_TIMEOUT_SECONDS = 12


class CountryDataError(RuntimeError):
    """The country dataset could not be fetched or decoded."""


# Source key -> CountryRecord attribute
_NUMERIC_KEYS = {
    "population": "population",
    "popDensity": "pop_density",
    "GDP": "gdp",
}

_TEXT_KEYS = {
    "continent": "continent",
    "firstLanguage": "first_language",
}

_FLAG_KEYS = {
    "isLandlocked": "is_landlocked",
    "isUnMember": "is_un_member",
    "isCommonwealthMember": "is_commonwealth_member",
    "isEuMember": "is_eu_member",
    "isNatoMember": "is_nato_member",
    "isAfricanUnionMember": "is_african_union_member",
    "isIslamicCooperationMember": "is_islamic_cooperation_member",
    "isIrenaMember": "is_irena_member",
    "isIccMember": "is_icc_member",
    "isNonAlignedMember": "is_non_aligned_member",
}


@dataclass(frozen=True)
class CountryRecord:
    name: str
    population: Optional[float] = None
    pop_density: Optional[float] = None
    gdp: Optional[float] = None
    continent: str = ""
    first_language: str = ""
    is_landlocked: bool = False
    is_un_member: bool = False
    is_commonwealth_member: bool = False
    is_eu_member: bool = False
    is_nato_member: bool = False
    is_african_union_member: bool = False
    is_islamic_cooperation_member: bool = False
    is_irena_member: bool = False
    is_icc_member: bool = False
    is_non_aligned_member: bool = False
    # Any keys we don't model explicitly, kept verbatim
    extra: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a field by its source (camelCase) name, including unknown extras."""
        for table in (_NUMERIC_KEYS, _TEXT_KEYS, _FLAG_KEYS):
            if key in table:
                return getattr(self, table[key])
        return self.extra.get(key, default)


def parse_country_record(name: str, raw: Mapping[str, Any]) -> CountryRecord:
    kwargs: Dict[str, Any] = {"name": name}

    for src, attr in _NUMERIC_KEYS.items():
        kwargs[attr] = parse_number(raw.get(src))

    for src, attr in _TEXT_KEYS.items():
        value = raw.get(src)
        kwargs[attr] = value.strip() if isinstance(value, str) else ""

    for src, attr in _FLAG_KEYS.items():
        kwargs[attr] = strict_bool(raw.get(src))

    known = set(_NUMERIC_KEYS) | set(_TEXT_KEYS) | set(_FLAG_KEYS)
    kwargs["extra"] = {k: v for k, v in raw.items() if k not in known}

    return CountryRecord(**kwargs)


def parse_country_data(data: Any) -> Dict[str, CountryRecord]:
    """
    Decode the dataset: a JSON object keyed by country name.

    Records that aren't objects are skipped (logged), everything else is kept
    in source order.
    """
    if not isinstance(data, dict):
        raise CountryDataError(
            f"Country data must be an object keyed by name, got {type(data).__name__}"
        )

    countries: Dict[str, CountryRecord] = {}
    for name, raw in data.items():
        if not name or not isinstance(raw, dict):
            logger.warning(f"Skipping malformed country record: {name!r}")
            continue
        countries[name] = parse_country_record(name, raw)
    return countries


def read_country_file(path: pathlib.Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise CountryDataError(f"Country data file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise CountryDataError(f"Country data file is not valid JSON: {e}") from e


def fetch_country_url(url: str) -> Any:
    try:
        r = requests.get(url, timeout=FETCH_TIMEOUT_SECONDS)
        r.raise_for_status()
        return r.json()
    except requests.JSONDecodeError as e:
        raise CountryDataError(f"Country data at {url} is not valid JSON: {e}") from e
    except requests.RequestException as e:
        raise CountryDataError(f"Failed to fetch country data from {url}: {e}") from e


def load_countries(path: Optional[pathlib.Path] = None, url: Optional[str] = None) -> Dict[str, CountryRecord]:
    """
    Load the static dataset once. A URL wins over a path when both are given.
    Raises CountryDataError on any failure.
    """
    if url:
        raw = fetch_country_url(url)
    else:
        raw = read_country_file(pathlib.Path(path) if path else DEFAULT_COUNTRY_DATA)
    return parse_country_data(raw)


class CountryStore:
    """
    Holds the dataset for the lifetime of the process.

    `load` is the single loading step. Until it succeeds `ready` is False and
    callers must not generate challenges.
    """

    def __init__(self):
        self._countries: Optional[Dict[str, CountryRecord]] = None
        self.error: Optional[str] = None

    @property
    def ready(self) -> bool:
        return self._countries is not None

    @property
    def countries(self) -> Dict[str, CountryRecord]:
        if self._countries is None:
            raise CountryDataError("Country data has not been loaded")
        return self._countries

    def load(self, path: Optional[pathlib.Path] = None, url: Optional[str] = None) -> Dict[str, CountryRecord]:
        try:
            self._countries = load_countries(path=path, url=url)
        except CountryDataError as e:
            self.error = str(e)
            raise
        self.error = None
        return self._countries
