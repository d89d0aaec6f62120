"""Tests for margin correction and label trimming."""

import pytest

from hbarchart.domain import classify_values
from hbarchart.label_fit import EXTRA_PADDING, compute_margins, label_width_budget
from hbarchart.label_trimmer import ELLIPSIS, LabelTrimmer

from .conftest import CHAR_WIDTH, FixedWidthSurface

LABEL_PADDING = 20


def _place(surface, texts):
    return [surface.viewport.append('text').text(text) for text in texts]


def _margins(surface, data, group_texts, value_texts, max_label_width=175):
    return compute_margins(
        _place(surface, group_texts),
        _place(surface, value_texts),
        classify_values(data),
        LABEL_PADDING,
        max_label_width,
        surface.measure_text
    )


def test_positive_margins_put_group_labels_left(surface) -> None:
    data = [{'label': 'X', 'value': 3}, {'label': 'Y', 'value': 7}]
    margins = _margins(surface, data, ['X', 'Y'], ['3.00', '7.00'])

    assert margins == {
        'left': CHAR_WIDTH + LABEL_PADDING + EXTRA_PADDING,
        'right': 4 * CHAR_WIDTH + LABEL_PADDING + EXTRA_PADDING,
    }


def test_negative_margins_put_group_labels_right(surface) -> None:
    data = [{'label': 'X', 'value': -3}, {'label': 'Y', 'value': -7}]
    margins = _margins(surface, data, ['X', 'Y'], ['-3.00', '-7.00'])

    assert margins == {'left': 59, 'right': 31}


def test_group_label_margin_is_capped(surface) -> None:
    data = [{'label': 'L' * 40, 'value': 1}]
    margins = _margins(surface, data, ['L' * 40], ['1.00'], max_label_width=100)

    assert margins['left'] == 100


def test_mixed_margins_follow_extreme_value_labels(surface) -> None:
    data = [{'label': 'A', 'value': -5}, {'label': 'B', 'value': 10}]
    margins = _margins(surface, data, ['A', 'B'], ['-5.00', '10.00'])

    assert margins == {'left': 59, 'right': 59}


def test_mixed_margins_ignore_wider_labels_of_inner_bars(surface) -> None:
    data = [
        {'label': 'A', 'value': -10},
        {'label': 'A much longer category name', 'value': -9.5},
        {'label': 'B', 'value': 5},
    ]
    margins = _margins(surface, data, [d['label'] for d in data], ['-10.00', '-9.50', '5.00'])

    # Right margin comes from "5.00", not the wider "-10.00" or "-9.50"
    assert margins == {'left': 66, 'right': 52}


def test_empty_data_gives_padding_only_margins(surface) -> None:
    margins = compute_margins([], [], classify_values([]), LABEL_PADDING, 175, surface.measure_text)

    assert margins == {'left': 24, 'right': 24}


def test_unmeasurable_labels_count_as_zero_width(surface) -> None:
    data = [{'label': 'X', 'value': 3}]
    margins = _margins(surface, data, [''], [''])

    assert margins == {'left': 24, 'right': 24}


@pytest.mark.parametrize(
    "values, expected",
    [
        ([3, 7], 80),
        ([-3, -7], 52),
        ([-3, 7], 350),
    ],
)
def test_label_width_budget(values, expected) -> None:
    extremes = classify_values([{'label': 'd', 'value': v} for v in values])

    assert label_width_budget({'left': 100, 'right': 52}, extremes, LABEL_PADDING, 700) == expected


def _trimmer(budget):
    return LabelTrimmer(get_label_size=lambda d, node: budget, get_label_text=lambda d: d['label'])


def _label_node(surface, label):
    node = surface.viewport.append('text', 'group')
    node.datum = {'label': label}
    return node


def test_trimmer_leaves_fitting_labels_untouched() -> None:
    surface = FixedWidthSurface()
    node = _label_node(surface, 'Short')

    _trimmer(100).trim([node], surface.measure_text)
    assert node.text_content == 'Short'


def test_trimmer_cuts_long_labels_to_budget() -> None:
    surface = FixedWidthSurface()
    node = _label_node(surface, 'L' * 40)

    _trimmer(155).trim([node], surface.measure_text)

    assert node.text_content == 'L' * 19 + ELLIPSIS
    assert surface.measure_text(node) <= 155


def test_trimmer_shrinks_until_remeasured_width_fits() -> None:
    surface = FixedWidthSurface()
    node = _label_node(surface, 'Wide' * 10)

    # Mean character width underestimates the real one, forcing extra cuts
    calls = []

    def measure(n):
        calls.append(n.text_content)
        return surface.measure_text(n) + (30 if n.text_content.endswith(ELLIPSIS) else 0)

    _trimmer(120).trim([node], measure)

    assert measure(node) <= 120
    assert node.text_content.endswith(ELLIPSIS)
    assert len(calls) > 2


def test_trimmer_floor_is_bare_ellipsis() -> None:
    surface = FixedWidthSurface()
    node = _label_node(surface, 'Category')

    _trimmer(5).trim([node], surface.measure_text)
    assert node.text_content == ELLIPSIS
