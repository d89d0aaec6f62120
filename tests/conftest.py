"""Shared fixtures for the horizontal bar chart tests."""

from typing import Optional

import pytest

from hbarchart.bar_chart import HorizontalBarChart
from hbarchart.layout import ChartConfig
from hbarchart.render_surface import Node, RenderSurface

# Every character measures this many pixels on the fixed-width surface
CHAR_WIDTH = 7


class FixedWidthSurface(RenderSurface):
    """Render surface with predictable text metrics."""

    def measure_text(self, node: Optional[Node]) -> float:
        if node is None or not node.text_content or not node.attached:
            return 0
        return CHAR_WIDTH * len(node.text_content)


@pytest.fixture
def surface() -> FixedWidthSurface:
    return FixedWidthSurface()


@pytest.fixture
def make_chart(surface):
    """Build a chart on the fixed-width surface with config overrides."""

    def _make(interactive: bool = True, **overrides) -> HorizontalBarChart:
        return HorizontalBarChart(ChartConfig(overrides), surface=surface, interactive=interactive)

    return _make
