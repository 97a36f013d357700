import pytest

from spending_insights.analytics.trends import TrendDirection, analyze_trend


def test_increasing_and_significant():
    result = analyze_trend([100, 100, 200, 200])
    assert result.direction is TrendDirection.INCREASING
    assert result.percentage_change == pytest.approx(100.0)
    assert result.is_significant


def test_decreasing():
    result = analyze_trend([200, 200, 100, 100])
    assert result.direction is TrendDirection.DECREASING
    assert result.percentage_change == pytest.approx(-50.0)
    assert result.is_significant


def test_small_change_is_stable():
    result = analyze_trend([100, 103])
    assert result.direction is TrendDirection.STABLE
    assert result.percentage_change == pytest.approx(3.0)
    assert not result.is_significant


def test_direction_without_significance():
    result = analyze_trend([100, 107])
    assert result.direction is TrendDirection.INCREASING
    assert not result.is_significant


def test_odd_length_gives_middle_to_second_half():
    result = analyze_trend([100, 100, 200])
    assert result.percentage_change == pytest.approx(50.0)


def test_zero_first_half_yields_zero_change():
    result = analyze_trend([0, 0, 50, 50])
    assert result.direction is TrendDirection.STABLE
    assert result.percentage_change == 0.0
    assert not result.is_significant


@pytest.mark.parametrize("values", [[], [42.0]])
def test_too_few_values(values):
    result = analyze_trend(values)
    assert result.direction is TrendDirection.STABLE
    assert result.percentage_change == 0.0
    assert not result.is_significant


def test_custom_thresholds():
    result = analyze_trend([100, 103], direction_threshold=2.0, significance_threshold=2.5)
    assert result.direction is TrendDirection.INCREASING
    assert result.is_significant


def test_direction_serializes_as_string():
    assert TrendDirection.STABLE == "stable"
