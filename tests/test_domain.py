"""Tests for value classification, domain resolution and input validation."""

import pytest

from hbarchart.domain import (
    ALL_NEGATIVE,
    ALL_POSITIVE,
    MIXED,
    classify_values,
    normalize_data,
    resolve_domain,
)


def _data(*values):
    return [{'label': f"d{i}", 'value': value} for i, value in enumerate(values)]


def test_positive_values_start_domain_at_zero() -> None:
    extremes = classify_values(_data(3, 7))

    assert extremes.sign_pattern == ALL_POSITIVE
    assert resolve_domain(extremes) == (0, 7)


def test_negative_values_end_domain_at_zero() -> None:
    extremes = classify_values(_data(-3, -7))

    assert extremes.sign_pattern == ALL_NEGATIVE
    assert extremes.has_negative and not extremes.has_positive
    assert resolve_domain(extremes) == (-7, 0)


def test_mixed_values_span_actual_extremes() -> None:
    extremes = classify_values(_data(-5, 10, 2))

    assert extremes.sign_pattern == MIXED
    assert resolve_domain(extremes) == (-5, 10)
    assert extremes.min_index == 0
    assert extremes.max_index == 1


def test_all_zero_data_is_positive_only() -> None:
    extremes = classify_values(_data(0, 0))

    assert extremes.sign_pattern == ALL_POSITIVE
    assert resolve_domain(extremes) == (0, 0)


def test_empty_data_has_zero_domain() -> None:
    extremes = classify_values([])

    assert (extremes.min, extremes.max) == (0, 0)
    assert resolve_domain(extremes) == (0, 0)
    assert extremes.min_index == -1


def test_negative_data_touching_zero_is_negative_only() -> None:
    extremes = classify_values(_data(-3, 0))

    assert extremes.sign_pattern == ALL_NEGATIVE
    assert resolve_domain(extremes) == (-3, 0)


def test_normalize_data_copies_label_value_and_color() -> None:
    data = normalize_data([{'label': 'A', 'value': 2, 'color': '#fff', 'extra': 1}, {'label': 3, 'value': 1.5}])

    assert data == [{'label': 'A', 'value': 2.0, 'color': '#fff'}, {'label': '3', 'value': 1.5}]


def test_normalize_data_accepts_none() -> None:
    assert normalize_data(None) == []


@pytest.mark.parametrize(
    "record",
    [
        {'value': 1},
        {'label': 'A'},
        {'label': 'A', 'value': 'ten'},
        {'label': 'A', 'value': True},
        {'label': 'A', 'value': float('nan')},
        ['A', 1],
    ],
)
def test_normalize_data_rejects_malformed_records(record) -> None:
    with pytest.raises(ValueError):
        normalize_data([record])
