# rules/predicates.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Tuple, Union

from utils import random_choice, random_int, random_letter, random_vowel

MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 10


class PredicateKind(str, Enum):
    EXACT_LENGTH = "exactLength"
    CONTAIN_VOWEL = "containVowel"
    SINGLE_OCCURRENCE_VOWEL = "singleOccurrenceVowel"
    ENDING_LETTER = "endingLetter"
    BEGINNING_LETTER = "beginningLetter"
    MEMBERS_OF = "membersOf"


Parameter = Union[int, str, None]


@dataclass(frozen=True)
class Predicate:
    kind: PredicateKind
    # "X" is replaced by the answer count, "*" by the sampled parameter
    template: str


@dataclass(frozen=True)
class PredicateResult:
    answers: List[str]
    parameter: Parameter


PREDICATES: Dict[PredicateKind, Predicate] = {
    p.kind: p
    for p in (
        Predicate(PredicateKind.EXACT_LENGTH, "X countries contain exactly * letters."),
        Predicate(PredicateKind.CONTAIN_VOWEL, "X countries contain the vowel '*'."),
        Predicate(
            PredicateKind.SINGLE_OCCURRENCE_VOWEL,
            "X countries contain only one occurrence of the vowel '*'.",
        ),
        Predicate(PredicateKind.ENDING_LETTER, "X countries end with the letter '*'."),
        Predicate(PredicateKind.BEGINNING_LETTER, "X countries begin with the letter '*'."),
        Predicate(PredicateKind.MEMBERS_OF, "X countries that are members of '*'."),
    )
}

# membersOf has a template but no evaluation, so sampling it can only waste an attempt.
SAMPLED_PREDICATES: Tuple[PredicateKind, ...] = tuple(
    k for k in PREDICATES if k is not PredicateKind.MEMBERS_OF
)


# --- Name tests (pure, parameter supplied) ---

def has_length(name: str, n: int) -> bool:
    return len(name) == n


def contains_vowel(name: str, vowel: str) -> bool:
    return vowel in name.lower()


def has_single_vowel(name: str, vowel: str) -> bool:
    return name.lower().count(vowel) == 1


def begins_with(name: str, letter: str, case_sensitive: bool = False) -> bool:
    return (name if case_sensitive else name.lower()).startswith(letter)


def ends_with(name: str, letter: str, case_sensitive: bool = False) -> bool:
    return (name if case_sensitive else name.lower()).endswith(letter)


def matches(kind: PredicateKind, name: str, parameter: Parameter, case_sensitive: bool = False) -> bool:
    """Does `name` satisfy predicate `kind` with an already-chosen parameter?"""
    if parameter is None:
        return False
    if kind is PredicateKind.EXACT_LENGTH:
        return has_length(name, int(parameter))
    if kind is PredicateKind.CONTAIN_VOWEL:
        return contains_vowel(name, str(parameter))
    if kind is PredicateKind.SINGLE_OCCURRENCE_VOWEL:
        return has_single_vowel(name, str(parameter))
    if kind is PredicateKind.BEGINNING_LETTER:
        return begins_with(name, str(parameter), case_sensitive)
    if kind is PredicateKind.ENDING_LETTER:
        return ends_with(name, str(parameter), case_sensitive)
    return False


# --- Parameter sampling ---

_SAMPLERS: Dict[PredicateKind, Callable[..., Parameter]] = {
    PredicateKind.EXACT_LENGTH: lambda rng: random_int(MIN_NAME_LENGTH, MAX_NAME_LENGTH, rng),
    PredicateKind.CONTAIN_VOWEL: random_vowel,
    PredicateKind.SINGLE_OCCURRENCE_VOWEL: random_vowel,
    PredicateKind.ENDING_LETTER: random_letter,
    PredicateKind.BEGINNING_LETTER: random_letter,
}


def sample_parameter(kind: PredicateKind, rng=None) -> Parameter:
    sampler = _SAMPLERS.get(kind)
    return sampler(rng) if sampler else None


def evaluate_predicate(
    kind: PredicateKind,
    names: Iterable[str],
    rng=None,
    case_sensitive: bool = False,
) -> PredicateResult:
    """
    Sample a fresh parameter for `kind` and collect every name that matches,
    in dataset order. membersOf always comes back empty with no parameter.
    """
    parameter = sample_parameter(kind, rng)
    if parameter is None:
        return PredicateResult(answers=[], parameter=None)

    answers = [n for n in names if matches(kind, n, parameter, case_sensitive)]
    return PredicateResult(answers=answers, parameter=parameter)


def sample_predicate(rng=None) -> Predicate:
    return PREDICATES[random_choice(SAMPLED_PREDICATES, rng)]
