"""Horizontal bar chart layout and rendering."""

from .bar_chart import HorizontalBarChart
from .capabilities import FloatingTooltip, Sortable, Tooltipped, ValueSorter, make_label_formatter
from .domain import ValueExtremes, classify_values, normalize_data, resolve_domain
from .label_trimmer import LabelTrimmer
from .layout import ChartConfig, ChartLayout, Margins, resolve_outer_height
from .render_surface import Node, RenderSurface
from .scales import BandScale, LinearScale

__all__ = [
    'BandScale',
    'ChartConfig',
    'ChartLayout',
    'FloatingTooltip',
    'HorizontalBarChart',
    'LabelTrimmer',
    'LinearScale',
    'Margins',
    'Node',
    'RenderSurface',
    'Sortable',
    'Tooltipped',
    'ValueExtremes',
    'ValueSorter',
    'classify_values',
    'make_label_formatter',
    'normalize_data',
    'resolve_domain',
    'resolve_outer_height',
]
