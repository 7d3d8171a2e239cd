import pytest

from countries import CountryRecord


class ScriptedRandom:
    """
    Stand-in for `random` that hands back pre-chosen values in order.
    Every sequence it is asked to choose from is recorded in `seen`.
    """

    def __init__(self, picks=(), ints=()):
        self.picks = list(picks)
        self.ints = list(ints)
        self.seen = []

    def choice(self, seq):
        self.seen.append(list(seq))
        value = self.picks.pop(0)
        assert value in seq
        return value

    def randint(self, lo, hi):
        value = self.ints.pop(0)
        assert lo <= value <= hi
        return value


def make_countries(*records):
    return {r.name: r for r in records}


@pytest.fixture
def sahel():
    return make_countries(
        CountryRecord("Chad", is_landlocked=True, is_african_union_member=True),
        CountryRecord("Mali", is_landlocked=True, is_african_union_member=True),
        CountryRecord("Togo", is_african_union_member=True, is_commonwealth_member=True),
    )


@pytest.fixture
def b_countries():
    # Ten names starting with "B": enough to force narrowing
    return make_countries(
        CountryRecord("Bahamas", is_commonwealth_member=True, is_non_aligned_member=True),
        CountryRecord("Bahrain", is_non_aligned_member=True),
        CountryRecord("Bangladesh", is_commonwealth_member=True, is_non_aligned_member=True),
        CountryRecord("Barbados", is_commonwealth_member=True, is_non_aligned_member=True),
        CountryRecord("Belarus", is_landlocked=True, is_non_aligned_member=True),
        CountryRecord("Belgium", is_eu_member=True, is_nato_member=True),
        CountryRecord("Belize", is_commonwealth_member=True, is_non_aligned_member=True),
        CountryRecord("Benin", is_non_aligned_member=True),
        CountryRecord("Bhutan", is_landlocked=True, is_non_aligned_member=True),
        CountryRecord("Bolivia", is_landlocked=True, is_non_aligned_member=True),
    )
