# utils.py
import random
import string
from typing import Any, Optional

VOWELS = ("a", "e", "i", "o", "u")


def _rng(rng=None):
    """Fall back to the shared `random` module when no generator is passed."""
    return rng if rng is not None else random


def random_int(lo: int, hi: int, rng=None) -> int:
    """Uniform integer in [lo, hi], both ends inclusive."""
    return _rng(rng).randint(lo, hi)


def random_choice(seq, rng=None):
    return _rng(rng).choice(seq)


def random_vowel(rng=None) -> str:
    return _rng(rng).choice(VOWELS)


def random_letter(rng=None) -> str:
    """Lower-case letter a-z."""
    return _rng(rng).choice(string.ascii_lowercase)


def strict_bool(value: Any) -> bool:
    """
    Only a real boolean True counts.
    "yes", 1, None and missing values are all False.
    """
    return value is True


def parse_number(value: Any) -> Optional[float]:
    """
    Accept ints/floats as-is and numeric strings with optional commas.
    Anything else is None.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        s = value.strip().replace(",", "")
        if not s:
            return None
        try:
            return float(s) if "." in s or "e" in s.lower() else int(s)
        except ValueError:
            return None
    return None
