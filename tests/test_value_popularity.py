"""Tests for the Value Calculator and Popularity Normalizer"""

import pytest

from giftrank.services.value import compute_value
from giftrank.services.popularity import compute_popularity


def test_value_is_score_per_hundred():
    """Test value scales score by 100 / price"""

    assert compute_value(1.5, 100) == pytest.approx(1.5)
    assert compute_value(1.5, 300) == pytest.approx(0.5)


def test_value_matches_range_formula():
    """Test score / (price / 100) equals score * 100 / price_min"""

    score, price_min = 0.8731, 437.0
    assert compute_value(score, price_min) == pytest.approx(score * 100 / price_min)


def test_value_non_positive_price():
    """Test free or negative prices give zero value"""

    assert compute_value(2.0, 0) == 0
    assert compute_value(2.0, -10) == 0


def test_value_zero_score():
    """Test zero score gives zero value"""

    assert compute_value(0, 250) == 0


def test_value_non_finite_inputs():
    """Test non-finite inputs give zero value"""

    assert compute_value(float("nan"), 100) == 0
    assert compute_value(1.0, float("inf")) == 0
    assert compute_value(float("inf"), 100) == 0


def test_popularity_calibration():
    """Test the fixed calibration points"""

    assert compute_popularity(100) == pytest.approx(1.0)
    assert compute_popularity(10_000) == pytest.approx(3.0)
    assert compute_popularity(1_000_000) == pytest.approx(5.0)


def test_popularity_missing_or_non_positive():
    """Test missing and non-positive counts give zero"""

    assert compute_popularity(0) == 0
    assert compute_popularity(-50) == 0
    assert compute_popularity(None) == 0
    assert compute_popularity("lots") == 0


def test_popularity_clamped():
    """Test counts outside the calibrated range are clamped"""

    assert compute_popularity(5) == 0
    assert compute_popularity(10) == 0
    assert compute_popularity(10 ** 9) == 5.0
