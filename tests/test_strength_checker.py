"""Complexity rules"""
import pytest

from policy_engine.config import PolicyConfig
from policy_engine.services.strength_checker import (ALL_RULES, MISSING_DIGIT, MISSING_LOWERCASE,
                                                     MISSING_SPECIAL, MISSING_UPPERCASE, TOO_SHORT,
                                                     StrengthChecker)


@pytest.fixture
def checker():
    return StrengthChecker()


def test_strong_password_has_no_violations(checker):
    """Eight characters covering every class is the smallest accepted shape"""
    assert checker.check('waspAr$0') == frozenset()
    assert checker.is_strong('waspAr$0')


@pytest.mark.parametrize("password,violation", [
    ('waspar$0', MISSING_UPPERCASE),
    ('waspaRs0', MISSING_SPECIAL),
    ('waspar$o', MISSING_DIGIT),
    ('WASPAR$0', MISSING_LOWERCASE),
    ('Was$0', TOO_SHORT),
])
def test_known_weak_passwords(checker, password, violation):
    assert violation in checker.check(password)


CLASS_POOLS = {
    MISSING_LOWERCASE: "abc",
    MISSING_UPPERCASE: "XYZ",
    MISSING_DIGIT: "123",
    MISSING_SPECIAL: "#$%",
}


@pytest.mark.parametrize("omitted", sorted(CLASS_POOLS))
def test_each_class_is_independently_required(checker, omitted):
    """Dropping any single class fails exactly that rule"""
    candidate = "".join(pool for rule, pool in CLASS_POOLS.items() if rule != omitted)
    assert len(candidate) >= 8
    assert checker.check(candidate) == {omitted}


@pytest.mark.parametrize("candidate", ['', 'A', 'Ab1!', 'Ab1!xyz'])
def test_short_passwords_fail_regardless_of_composition(checker, candidate):
    assert TOO_SHORT in checker.check(candidate)


def test_length_boundary(checker):
    assert TOO_SHORT in checker.check('Ab1!xyz')      # 7
    assert TOO_SHORT not in checker.check('Ab1!xyzw')  # 8


def test_none_is_treated_as_empty(checker):
    assert checker.check(None) == ALL_RULES


def test_multiple_violations_are_all_reported(checker):
    assert checker.check('abc') == {TOO_SHORT, MISSING_UPPERCASE, MISSING_DIGIT, MISSING_SPECIAL}


def test_any_non_alphanumeric_counts_as_special_by_default(checker):
    assert checker.is_strong('Password 1')
    assert checker.is_strong('Password~1')


def test_configured_special_set_restricts_specials():
    checker = StrengthChecker(special_characters='!@#')
    assert MISSING_SPECIAL in checker.check('Password~1')
    assert checker.is_strong('Password#1')


def test_from_policy_uses_policy_values():
    checker = StrengthChecker.from_policy(PolicyConfig(min_length=12))
    assert TOO_SHORT in checker.check('Password@1')
    assert checker.is_strong('Password@123')


def test_requirements_mention_min_length():
    assert StrengthChecker(min_length=10).requirements()[0] == 'At least 10 characters long'
