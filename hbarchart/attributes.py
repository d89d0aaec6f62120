"""Attribute generators for the horizontal bar chart.

Each generator is a pure function of a datum, its index and the current
layout. Calling one twice with the same inputs yields the same attributes.
Positions inside a bar group are relative to the group origin, which sits at
the left end of the bar.
"""

from typing import Any, Dict

from .layout import ChartLayout
from .render_surface import fmt_num

# Vertical offset centring label text on the bar
LABEL_DY: str = '.35em'


def group_attrs(d: Dict[str, Any], i: int, layout: ChartLayout) -> Dict[str, Any]:
    """Place a bar group at the left end of its bar.

    Negative bars start left of the zero line so a rect drawn with a positive
    width still ends at zero.
    """
    x = layout.x_scale(min(0.0, d['value']))
    y = layout.y_scale(i)
    return {'transform': f"translate({fmt_num(x)}, {fmt_num(y)})"}


def bar_fill(d: Dict[str, Any], layout: ChartLayout) -> str:
    """Explicit datum colour, else the tint for the value's sign."""
    if d.get('color'):
        return d['color']
    if d['value'] < 0:
        return layout.config.get('most_tinted_color')
    return layout.config.get('least_tinted_color')


def bar_attrs(d: Dict[str, Any], i: int, layout: ChartLayout) -> Dict[str, Any]:
    """Size the bar rect from zero to the value.

    The fill is applied separately as an inline style, see `bar_fill`.

    Args:
        d: Datum with a numeric 'value'.
        i: Index of the datum.
        layout: Current layout.

    Returns:
        Width, height and stroke width of the rect.
    """
    x_scale = layout.x_scale
    return {
        'width': abs(x_scale(d['value']) - x_scale(0)),
        'height': layout.bar_thickness,
        'stroke-width': 0,
    }


def value_label_attrs(d: Dict[str, Any], i: int, layout: ChartLayout) -> Dict[str, Any]:
    """Anchor the value label `label_padding` beyond the far end of the bar."""
    x_scale = layout.x_scale
    label_padding = layout.config.get('label_padding')
    if d['value'] < 0:
        x = -label_padding
    else:
        x = x_scale(d['value']) - x_scale(0) + label_padding
    return {
        'x': x,
        'y': layout.bar_thickness / 2,
        'dy': LABEL_DY,
        'text-anchor': 'end' if d['value'] < 0 else 'start',
        'stroke-width': 0,
    }


def group_label_attrs(d: Dict[str, Any], i: int, layout: ChartLayout) -> Dict[str, Any]:
    """Anchor the group label `label_padding` beyond the zero line."""
    x_scale = layout.x_scale
    label_padding = layout.config.get('label_padding')
    if d['value'] < 0:
        x = x_scale(0) - x_scale(d['value']) + label_padding
    else:
        x = -label_padding
    return {
        'x': x,
        'y': layout.bar_thickness / 2,
        'dy': LABEL_DY,
        'text-anchor': 'start' if d['value'] < 0 else 'end',
        'stroke-width': 0,
    }


def axis_attrs(layout: ChartLayout) -> Dict[str, Any]:
    """Zero line spanning the full drawable height."""
    zero = layout.x_scale(0)
    return {
        'x1': zero,
        'x2': zero,
        'y1': 0,
        'y2': layout.height,
    }


def viewport_attrs(layout: ChartLayout) -> Dict[str, Any]:
    margins = layout.margins
    return {'transform': f"translate({fmt_num(margins.left)}, {fmt_num(margins.top)})"}


def svg_attrs(layout: ChartLayout) -> Dict[str, Any]:
    return {
        'width': layout.outer_width,
        'height': layout.outer_height,
        'viewBox': f"0 0 {fmt_num(layout.outer_width)} {fmt_num(layout.outer_height)}",
    }
