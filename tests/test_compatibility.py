"""
Unit tests for the compatibility filter
"""

import pytest

from swipematch.models.user import UserType
from swipematch.services.compatibility import eligible_candidates, is_compatible
from tests.test_utils import make_user


class TestIsCompatible:
    """Gender and orientation rules"""

    def test_straight_man_and_straight_woman_are_mutually_compatible(self):
        man = make_user("a", gender="male", sexuality="straight")
        woman = make_user("b", gender="female", sexuality="straight")

        assert is_compatible(man, woman) is True
        assert is_compatible(woman, man) is True

    def test_straight_man_excludes_gay_woman_and_men(self):
        man = make_user("a", gender="male", sexuality="straight")

        assert is_compatible(man, make_user("b", gender="female", sexuality="gay")) is False
        assert is_compatible(man, make_user("c", gender="male", sexuality="straight")) is False

    def test_straight_woman_accepts_bisexual_man(self):
        woman = make_user("a", gender="female", sexuality="straight")

        assert is_compatible(woman, make_user("b", gender="male", sexuality="bisexual")) is True

    def test_gay_man_wants_men_who_are_not_straight(self):
        man = make_user("a", gender="male", sexuality="gay")

        assert is_compatible(man, make_user("b", gender="male", sexuality="gay")) is True
        assert is_compatible(man, make_user("c", gender="male", sexuality="bisexual")) is True
        assert is_compatible(man, make_user("d", gender="male", sexuality="straight")) is False
        assert is_compatible(man, make_user("e", gender="female", sexuality="gay")) is False

    def test_lesbian_is_treated_as_gay_woman(self):
        woman = make_user("a", gender="female", sexuality="lesbian")

        assert is_compatible(woman, make_user("b", gender="female", sexuality="gay")) is True
        assert is_compatible(woman, make_user("c", gender="female", sexuality="lesbian")) is True
        assert is_compatible(woman, make_user("d", gender="female", sexuality="straight")) is False

    @pytest.mark.parametrize("sexuality", ["bisexual", "pansexual"])
    def test_open_orientations_accept_everyone(self, sexuality):
        subject = make_user("a", gender="female", sexuality=sexuality)

        assert is_compatible(subject, make_user("b", gender="male", sexuality="straight")) is True
        assert is_compatible(subject, make_user("c", gender="female", sexuality="gay")) is True
        assert is_compatible(subject, make_user("d")) is True

    @pytest.mark.parametrize("gender,sexuality", [(None, "straight"), ("male", None), (None, None)])
    def test_unset_subject_fields_accept_everyone(self, gender, sexuality):
        subject = make_user("a", gender=gender, sexuality=sexuality)

        assert is_compatible(subject, make_user("b", gender="male", sexuality="gay")) is True

    def test_unknown_candidate_gender_fails_gender_rules(self):
        man = make_user("a", gender="male", sexuality="straight")

        assert is_compatible(man, make_user("b", gender=None, sexuality="straight")) is False

    def test_unlisted_orientation_only_accepts_undeclared_candidates(self):
        subject = make_user("a", gender="male", sexuality="asexual")

        assert is_compatible(subject, make_user("b", gender="female", sexuality=None)) is True
        assert is_compatible(subject, make_user("c", gender="female", sexuality="straight")) is False

    def test_labels_are_case_insensitive(self):
        man = make_user("a", gender="Male", sexuality="STRAIGHT")
        woman = make_user("b", gender="Female", sexuality="Straight")

        assert is_compatible(man, woman) is True


class TestEligibleCandidates:
    """Population filtering"""

    @pytest.fixture
    def population(self):
        return [
            make_user("zoe", gender="female", sexuality="straight"),
            make_user("amy", gender="female", sexuality="bisexual"),
            make_user("mia", gender="female", sexuality="gay"),
            make_user("liz", user_type=UserType.MATCH_MAKER, gender="female", sexuality="straight"),
            make_user("eve", user_type=UserType.DATER_AND_MATCH_MAKER, gender="female", sexuality="straight"),
            make_user("tom", gender="male", sexuality="straight"),
        ]

    def test_filters_sorts_and_skips_non_daters(self, population):
        subject = make_user("tom", gender="male", sexuality="straight")

        result = eligible_candidates(subject, population)

        assert [user.id for user in result] == ["amy", "eve", "zoe"]

    def test_subject_never_in_own_candidates(self, population):
        subject = make_user("amy", gender="female", sexuality="bisexual")

        result = eligible_candidates(subject, population)

        assert "amy" not in [user.id for user in result]

    def test_exclude_ids_are_dropped(self, population):
        subject = make_user("tom", gender="male", sexuality="straight")

        result = eligible_candidates(subject, population, exclude_ids=["eve", "zoe"])

        assert [user.id for user in result] == ["amy"]

    def test_duplicates_in_population_are_collapsed(self, population):
        subject = make_user("tom", gender="male", sexuality="straight")

        result = eligible_candidates(subject, population + population)

        assert [user.id for user in result] == ["amy", "eve", "zoe"]

    def test_empty_population(self):
        assert eligible_candidates(make_user("a"), []) == []
