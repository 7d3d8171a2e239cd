# rules/challenge.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Tuple

from countries import CountryRecord
from rules.filters import SecondaryFilter, apply_filter, filter_clause, sample_filter
from rules.predicates import (
    Parameter,
    PredicateKind,
    evaluate_predicate,
    sample_predicate,
)

logger = logging.getLogger(__name__)

MIN_ANSWERS = 2
MAX_ANSWERS = 8
MAX_ATTEMPTS = 100


@dataclass(frozen=True)
class Challenge:
    kind: PredicateKind
    parameter: Parameter
    answers: Tuple[str, ...]
    description: str
    filters: Tuple[SecondaryFilter, ...] = ()
    attempts: int = field(default=1, compare=False)


def render_description(
    template: str,
    count: int,
    parameter: Parameter,
    filters: Sequence[SecondaryFilter] = (),
) -> str:
    """
    Fill the template: "X" -> answer count, "*" -> upper-cased parameter.

    With filters applied, the template's closing punctuation is dropped and
    each filter's clause is appended, joined with "and":
      "4 countries begin with the letter 'S' and are Landlocked"
    """
    text = template.replace("X", str(count), 1).replace("*", str(parameter).upper(), 1)
    clauses = [filter_clause(f) for f in filters]
    if clauses:
        text = f"{text[:-1]} and {' and '.join(clauses)}"
    return text


def _narrow(
    candidates: List[str],
    countries: Mapping[str, CountryRecord],
    rng,
    max_answers: int,
    min_answers: int,
    allow_repeat_filter: bool,
) -> Tuple[Optional[List[str]], List[SecondaryFilter]]:
    """
    Shrink an oversized candidate list with up to two secondary filters.
    Returns (None, applied) when the first filter leaves too few to play.
    """
    applied: List[SecondaryFilter] = []

    first = sample_filter(rng)
    applied.append(first)
    narrowed = apply_filter(candidates, countries, first)
    if len(narrowed) < min_answers:
        return None, applied

    if len(narrowed) > max_answers:
        second = sample_filter(rng, exclude=() if allow_repeat_filter else applied)
        applied.append(second)
        narrowed = apply_filter(narrowed, countries, second)

    return narrowed, applied


def generate_challenge(
    countries: Mapping[str, CountryRecord],
    rng=None,
    max_attempts: int = MAX_ATTEMPTS,
    min_answers: int = MIN_ANSWERS,
    max_answers: int = MAX_ANSWERS,
    case_sensitive: bool = False,
    allow_repeat_filter: bool = True,
) -> Optional[Challenge]:
    """
    Sample predicates until one yields between `min_answers` and
    `max_answers` countries (inclusive), narrowing large results with
    secondary filters.

    Every attempt counts toward `max_attempts`, including ones abandoned
    after over-narrowing. Returns None if nothing was accepted in time.
    """
    names = list(countries)
    if not names:
        logger.warning("No country data; cannot generate a challenge")
        return None

    for attempt in range(1, max_attempts + 1):
        predicate = sample_predicate(rng)
        result = evaluate_predicate(predicate.kind, names, rng, case_sensitive)
        candidates = result.answers
        applied: List[SecondaryFilter] = []

        if len(candidates) > max_answers:
            candidates, applied = _narrow(
                candidates, countries, rng, max_answers, min_answers, allow_repeat_filter
            )
            if candidates is None:
                continue

        if min_answers <= len(candidates) <= max_answers:
            return Challenge(
                kind=predicate.kind,
                parameter=result.parameter,
                answers=tuple(candidates),
                description=render_description(
                    predicate.template, len(candidates), result.parameter, applied
                ),
                filters=tuple(applied),
                attempts=attempt,
            )

    logger.warning(f"Max attempts ({max_attempts}) reached, no valid challenge found")
    return None
