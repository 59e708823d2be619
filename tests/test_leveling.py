"""Tests for level/experience arithmetic."""

import pytest
from hypothesis import given, strategies as st

from companionfit.errors import NegativeExperienceError
from companionfit.leveling import (
    apply_experience,
    experience_for_next_level,
    user_level_for,
)


def test_threshold_scales_with_level():
    assert experience_for_next_level(1) == 100
    assert experience_for_next_level(2) == 200
    assert experience_for_next_level(15) == 1500


def test_exact_threshold_levels_up_with_zero_remainder():
    result = apply_experience(1, 0, 100)
    assert (result.level, result.experience, result.level_ups) == (2, 0, 1)


def test_250_xp_from_level_one():
    result = apply_experience(1, 0, 250)
    assert (result.level, result.experience, result.level_ups) == (2, 150, 1)


def test_large_grant_applies_every_level_up():
    # 100 + 200 + 300 = 600 consumed, 50 left over at level 4
    result = apply_experience(1, 0, 650)
    assert (result.level, result.experience, result.level_ups) == (4, 50, 3)


def test_existing_experience_carries_over():
    result = apply_experience(3, 250, 60)
    assert (result.level, result.experience, result.level_ups) == (4, 10, 1)


def test_zero_grant_is_noop():
    result = apply_experience(5, 42, 0)
    assert (result.level, result.experience, result.level_ups) == (5, 42, 0)


def test_negative_grant_rejected():
    with pytest.raises(NegativeExperienceError):
        apply_experience(1, 0, -1)


def test_negative_grant_is_value_error():
    with pytest.raises(ValueError):
        apply_experience(1, 50, -10)


def test_level_below_one_rejected():
    with pytest.raises(ValueError, match="level must be >= 1"):
        apply_experience(0, 0, 10)


@given(
    level=st.integers(min_value=1, max_value=200),
    gained=st.integers(min_value=0, max_value=1_000_000),
    data=st.data(),
)
def test_experience_stays_below_threshold(level, gained, data):
    experience = data.draw(st.integers(min_value=0, max_value=experience_for_next_level(level) - 1))
    result = apply_experience(level, experience, gained)
    assert 0 <= result.experience < experience_for_next_level(result.level)
    assert result.level >= level
    assert result.level - level == result.level_ups


@given(
    level=st.integers(min_value=1, max_value=100),
    gained=st.integers(min_value=0, max_value=100_000),
)
def test_total_experience_is_conserved(level, gained):
    result = apply_experience(level, 0, gained)
    consumed = sum(experience_for_next_level(lv) for lv in range(level, result.level))
    assert consumed + result.experience == gained


@pytest.mark.parametrize(
    "total,expected",
    [(0, 1), (999, 1), (1000, 2), (2500, 3)],
)
def test_user_level_for(total, expected):
    assert user_level_for(total) == expected
