# rules/filters.py
from __future__ import annotations

from enum import Enum
from operator import attrgetter
from typing import Callable, Dict, Iterable, List, Mapping

from countries import CountryRecord
from utils import random_choice


class SecondaryFilter(str, Enum):
    COMMONWEALTH = "isCommonwealthMember"
    LANDLOCKED = "isLandlocked"
    EU = "isEuMember"
    NATO = "isNatoMember"
    AFRICAN_UNION = "isAfricanUnionMember"
    ISLAMIC_COOPERATION = "isIslamicCooperationMember"
    ICC = "isIccMember"
    NON_ALIGNED = "isNonAlignedMember"


# Registry order is the sampling order.
FILTERS = tuple(SecondaryFilter)

_ACCESSORS: Dict[SecondaryFilter, Callable[[CountryRecord], bool]] = {
    SecondaryFilter.COMMONWEALTH: attrgetter("is_commonwealth_member"),
    SecondaryFilter.LANDLOCKED: attrgetter("is_landlocked"),
    SecondaryFilter.EU: attrgetter("is_eu_member"),
    SecondaryFilter.NATO: attrgetter("is_nato_member"),
    SecondaryFilter.AFRICAN_UNION: attrgetter("is_african_union_member"),
    SecondaryFilter.ISLAMIC_COOPERATION: attrgetter("is_islamic_cooperation_member"),
    SecondaryFilter.ICC: attrgetter("is_icc_member"),
    SecondaryFilter.NON_ALIGNED: attrgetter("is_non_aligned_member"),
}

_CLAUSES: Dict[SecondaryFilter, str] = {
    SecondaryFilter.COMMONWEALTH: "are members of The Commonwealth",
    SecondaryFilter.LANDLOCKED: "are Landlocked",
    SecondaryFilter.EU: "are members of The European Union",
    SecondaryFilter.NATO: "are members of The North Atlantic Treaty Organization",
    SecondaryFilter.AFRICAN_UNION: "are members of The African Union",
    SecondaryFilter.ISLAMIC_COOPERATION: "are members of The Organisation of Islamic Cooperation",
    SecondaryFilter.ICC: "are members of the International Criminal Court",
    SecondaryFilter.NON_ALIGNED: "are members of The Non-Aligned Movement",
}


def sample_filter(rng=None, exclude: Iterable[SecondaryFilter] = ()) -> SecondaryFilter:
    excluded = set(exclude)
    pool = [f for f in FILTERS if f not in excluded]
    if not pool:
        raise ValueError("No secondary filters left to sample")
    return random_choice(pool, rng)


def record_matches(record: CountryRecord, secondary: SecondaryFilter) -> bool:
    return _ACCESSORS[secondary](record) is True


def apply_filter(
    names: Iterable[str],
    countries: Mapping[str, CountryRecord],
    secondary: SecondaryFilter,
) -> List[str]:
    """Keep the names whose record has the flag set. Unknown names never match."""
    out: List[str] = []
    for name in names:
        record = countries.get(name)
        if record is not None and record_matches(record, secondary):
            out.append(name)
    return out


def filter_clause(secondary: SecondaryFilter) -> str:
    return _CLAUSES[secondary]
