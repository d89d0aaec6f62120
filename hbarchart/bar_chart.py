"""Horizontal bar chart rendering.

Renders a sequence of labeled values as horizontal bars on a render surface:
one group per bar holding the bar rect, a value label beyond the far end of
the bar and a group label on the other side of the zero line. After the first
pass the labels are measured and the left/right margins are corrected so the
labels sit flush with the chart edges.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

from .attributes import (
    axis_attrs,
    bar_attrs,
    bar_fill,
    group_attrs,
    group_label_attrs,
    svg_attrs,
    value_label_attrs,
    viewport_attrs,
)
from .capabilities import FloatingTooltip, Sortable, Tooltipped, make_label_formatter, tooltip_content
from .domain import normalize_data
from .label_fit import compute_margins, label_width_budget
from .label_trimmer import LabelTrimmer
from .layout import ChartConfig, ChartLayout, Margins
from .render_surface import Node, RenderSurface

logger = logging.getLogger(__name__)

AXIS_KEY: str = 'y-axis'


def _noop(*args: Any) -> None:
    return None


class HorizontalBarChart:
    """Horizontal bar chart bound to one render surface.

    Each chart owns its margins, layout and dataset; nothing is shared between
    instances.

    Attributes:
        config: Chart configuration.
        surface: Surface the chart renders into.
        tooltip: Tooltip collaborator driven by the hover handlers.
        sorter: Optional collaborator putting data into display order.
        interactive: Whether hovering a bar shows a tooltip.
        margins: Current margins; corrected after every render.
        layout: Layout of the last completed render.
        finished_data: Dataset of the last render, in display order.
    """

    def __init__(
        self,
        config: Union[ChartConfig, Dict[str, Any], None] = None,
        surface: Optional[RenderSurface] = None,
        tooltip: Optional[Tooltipped] = None,
        sorter: Optional[Sortable] = None,
        interactive: bool = True
    ) -> None:
        """Initialize the chart.

        Args:
            config: ChartConfig, or a dictionary of overrides for one.
            surface: Surface to render into; a new one is created if omitted.
            tooltip: Tooltip collaborator; a FloatingTooltip if omitted.
            sorter: Sorting collaborator; data is used as given if omitted.
            interactive: Whether hover handlers do anything.
        """
        self.config: ChartConfig = config if isinstance(config, ChartConfig) else ChartConfig(config)
        self.surface: RenderSurface = surface or RenderSurface(
            font_scale=self.config.get('font_scale'),
            font_thickness=self.config.get('font_thickness')
        )
        self.tooltip: Tooltipped = tooltip or FloatingTooltip()
        self.sorter: Optional[Sortable] = sorter
        self.interactive: bool = interactive

        self.format_label: Callable[[float], str] = make_label_formatter(self.config.get('value_format'))

        self.margins: Margins = Margins.provisional(self.config)
        self.layout: Optional[ChartLayout] = None
        self.finished_data: List[Dict[str, Any]] = []

        self._data_key: Optional[Tuple[Any, ...]] = None
        self._rendering: bool = False

    # ----------------------------------------------------------------------
    # Tooltip handlers
    # ----------------------------------------------------------------------

    @property
    def show_details(self) -> Callable[[Dict[str, Any], Optional[int], Node], Any]:
        if not self.interactive:
            return _noop

        def show(d: Dict[str, Any], i: Optional[int], element: Node) -> Any:
            element.classed('hovered', True)
            content = tooltip_content(d, self.config.get('tooltip_value_display_name'), self.format_label)
            return self.tooltip.show_tooltip(content, d, element)

        return show

    @property
    def hide_details(self) -> Callable[[Dict[str, Any], Optional[int], Node], Any]:
        if not self.interactive:
            return _noop

        def hide(d: Dict[str, Any], i: Optional[int], element: Node) -> Any:
            element.classed('hovered', False)
            return self.tooltip.hide_tooltip()

        return hide

    # ----------------------------------------------------------------------
    # Drawing
    # ----------------------------------------------------------------------

    def draw(self, data: Optional[Sequence[Dict[str, Any]]]) -> Optional[ChartLayout]:
        """Render the dataset, correcting the margins to fit the labels.

        Args:
            data: Sequence of datum mappings with 'label', 'value' and an
                optional 'color'.

        Returns:
            The final layout, or None if a render was already in progress.

        Raises:
            ValueError: If a datum is malformed.
        """
        if self._rendering:
            logger.warning("Ignoring draw request issued while the chart is rendering")
            return None

        self._rendering = True
        try:
            finished = normalize_data(data)
            if self.sorter is not None:
                finished = self.sorter.sort(finished)
            self._invalidate_margins(finished)
            self.finished_data = finished

            layout = ChartLayout(finished, self.config, self.margins)
            self.update_data(layout)
            self.update_axes(layout)
            self.update_graphic(layout)
            self.layout = self.correct_margins(layout)
            return self.layout
        finally:
            self._rendering = False

    def _invalidate_margins(self, finished: List[Dict[str, Any]]) -> None:
        """Fall back to provisional margins when the dataset has changed."""
        data_key = tuple((d['label'], d['value'], d.get('color')) for d in finished)
        if data_key != self._data_key:
            self.margins = Margins.provisional(self.config)
            self._data_key = data_key

    def groups(self) -> List[Node]:
        """Bar groups currently in the viewport, in display order."""
        return self.surface.viewport.select_all('g.bar')

    def y_axis(self) -> Node:
        """Zero line of the chart, created as the viewport's first child on first use.

        Returns:
            The axis line node; the same node on every call.
        """
        def create_axis() -> Node:
            return self.surface.viewport.insert_first('g', 'y axis').append('line')

        return self.surface.ensure_node(AXIS_KEY, create_axis, selector='.y.axis line')

    def update_data(self, layout: ChartLayout) -> None:
        """Reconcile bar groups with the dataset, creating and removing as needed."""
        groups = self.groups()
        data = layout.data

        for i, d in enumerate(data):
            if i < len(groups):
                group = groups[i]
            else:
                group = self.surface.viewport.append('g', 'bar')
                group.on('mouseover', lambda d, i, element: self.show_details(d, i, element))
                group.on('mouseout', lambda d, i, element: self.hide_details(d, i, element))
                group.append('rect')
                group.append('text', 'value')
                group.append('text', 'group')

            for node in [group] + group.children:
                node.datum = d
                node.index = i

        for group in groups[len(data):]:
            group.remove()

    def update_axes(self, layout: ChartLayout) -> None:
        self.y_axis().attr(axis_attrs(layout))

    def update_graphic(self, layout: ChartLayout) -> None:
        """Set label text and apply every geometry attribute for `layout`."""
        for group in self.groups():
            d = group.datum
            group.select('text.value').text(self.format_label(d['value']))
            group.select('text.group').text(d['label'])
        self._apply_geometry(layout)

    def _apply_geometry(self, layout: ChartLayout) -> None:
        self.surface.root.attr(svg_attrs(layout))
        self.surface.viewport.attr(viewport_attrs(layout))
        for group in self.groups():
            d, i = group.datum, group.index
            group.attr(group_attrs(d, i, layout))
            group.select('rect').attr(bar_attrs(d, i, layout)).style('fill', bar_fill(d, layout))
            group.select('text.value').attr(value_label_attrs(d, i, layout))
            group.select('text.group').attr(group_label_attrs(d, i, layout))

    def correct_margins(self, layout: ChartLayout) -> ChartLayout:
        """Measure the placed labels, then re-lay out with corrected margins.

        Runs exactly once per render; the labels' text does not depend on the
        geometry, so a second measurement would give the same margins.

        Args:
            layout: Layout the labels were placed with.

        Returns:
            Layout under the corrected margins.
        """
        groups = self.groups()
        value_label_nodes = [group.select('text.value') for group in groups]
        group_label_nodes = [group.select('text.group') for group in groups]
        label_padding = self.config.get('label_padding')

        margins = compute_margins(
            group_label_nodes,
            value_label_nodes,
            layout.extremes,
            label_padding,
            self.config.max_label_width,
            self.surface.measure_text
        )
        self.margins = self.margins.with_horizontal(margins['left'], margins['right'])

        corrected = ChartLayout(layout.data, self.config, self.margins)
        self.update_axes(corrected)
        self._apply_geometry(corrected)

        label_width = label_width_budget(margins, corrected.extremes, label_padding, corrected.outer_width)
        label_trimmer = LabelTrimmer(
            get_label_size=lambda d, node: label_width,
            get_label_text=lambda d: d['label']
        )
        label_trimmer.trim(group_label_nodes, self.surface.measure_text)

        logger.debug(f"Corrected margins: {self.margins}, group label width {label_width}")
        return corrected

    # ----------------------------------------------------------------------
    # Output
    # ----------------------------------------------------------------------

    def to_svg(self) -> str:
        return self.surface.to_svg()

    def to_png(self) -> bytes:
        return self.surface.to_png()
