"""Margin correction from measured label extents.

Left and right margins have to make room for label text, while label
positions and the drawable width depend on the margins. The chart breaks the
cycle with one corrective pass: render with the current margins, measure the
labels that were placed, size the margins from those measurements, and
re-apply the margin-dependent geometry once.
"""

import logging
from typing import Callable, Dict, Optional, Sequence

from .domain import ALL_NEGATIVE, ALL_POSITIVE, ValueExtremes
from .render_surface import Node

logger = logging.getLogger(__name__)

# Guards against text-metric rounding cutting labels off
EXTRA_PADDING: float = 4


def _max_width(nodes: Sequence[Optional[Node]], measure: Callable[[Optional[Node]], float]) -> float:
    """Widest measured node, 0 when there are none."""
    return max((measure(node) for node in nodes), default=0)


def compute_margins(
    group_label_nodes: Sequence[Optional[Node]],
    value_label_nodes: Sequence[Optional[Node]],
    extremes: ValueExtremes,
    label_padding: float,
    max_label_width: float,
    measure: Callable[[Optional[Node]], float]
) -> Dict[str, float]:
    """Size the left and right margins so labels sit flush with the chart edges.

    Args:
        group_label_nodes: Placed group label nodes, in dataset order.
        value_label_nodes: Placed value label nodes, in dataset order.
        extremes: Classified dataset values.
        label_padding: Space between labels and the bars or zero line.
        max_label_width: Cap on the margin claimed by group labels.
        measure: Returns the rendered width of a text node.

    Returns:
        Dictionary with 'left' and 'right' margins.
    """
    max_value_label_width = _max_width(value_label_nodes, measure)
    max_group_label_width = _max_width(group_label_nodes, measure)
    group_margin = min(max_label_width, max_group_label_width + label_padding + EXTRA_PADDING)
    value_margin = max_value_label_width + label_padding + EXTRA_PADDING

    pattern = extremes.sign_pattern
    if pattern == ALL_POSITIVE:
        # Group labels on the left, value labels on the right
        margins = {'left': group_margin, 'right': value_margin}
    elif pattern == ALL_NEGATIVE:
        # Value labels on the left, group labels on the right
        margins = {'left': value_margin, 'right': group_margin}
    else:
        # Only the labels of the most negative and most positive bars reach
        # the chart edges
        left_label = value_label_nodes[extremes.min_index] if value_label_nodes else None
        right_label = value_label_nodes[extremes.max_index] if value_label_nodes else None
        margins = {
            'left': measure(left_label) + label_padding + EXTRA_PADDING,
            'right': measure(right_label) + label_padding + EXTRA_PADDING,
        }

    logger.debug(f"Margins for {pattern} values: {margins}")
    return margins


def label_width_budget(
    margins: Dict[str, float],
    extremes: ValueExtremes,
    label_padding: float,
    outer_width: float
) -> float:
    """Width group labels are trimmed to, derived from the corrected margins.

    Args:
        margins: Dictionary with 'left' and 'right' margins.
        extremes: Classified dataset values.
        label_padding: Space between labels and the zero line.
        outer_width: Width of the whole chart.

    Returns:
        The width budget in pixels.
    """
    pattern = extremes.sign_pattern
    if pattern == ALL_POSITIVE:
        return margins['left'] - label_padding
    if pattern == ALL_NEGATIVE:
        return margins['right']
    return outer_width / 2
