"""Chart configuration and the layout computations that depend on it.

The layout is recomputed from scratch on every render: configuration,
dataset and current margins go in, scales and bar geometry come out. Nothing
here depends on rendered text, so the outer height is settled before the
margin-correction pass runs.
"""

import logging
from typing import Any, Dict, Optional, Sequence

from .domain import ValueExtremes, classify_values, resolve_domain
from .scales import BandScale, LinearScale

logger = logging.getLogger(__name__)


class ChartConfig:
    """Configuration class for all layout parameters of the chart."""

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Initialize chart configuration.

        Args:
            config: Optional dictionary of custom configuration values.
        """
        self.defaults: Dict[str, Any] = {
            # Preferred height of the whole chart, including padding
            'default_outer_height': 500,
            'outer_width': 700,

            # Space between label and zero line, also pads labels against
            # the edges of the viewport
            'label_padding': 20,

            # Space between adjacent bars, as fraction of each slot
            'bar_padding': 0.2,

            # Constraints on size of each bar, None disables a bound
            'min_bar_thickness': 20,
            'max_bar_thickness': 60,

            # Horizontal space group labels may claim; None derives it from
            # outer_width * label_width_multiplier
            'max_label_width': None,
            'label_width_multiplier': 0.25,

            # Left/right margin used before any label has been measured
            'horizontal_margin': 30,

            # Bar fills by sign
            'most_tinted_color': 'rgb(179, 179, 179)',
            'least_tinted_color': 'rgb(65, 65, 65)',

            'value_format': ',.2f',
            'tooltip_value_display_name': 'Value',

            # Text metrics
            'font_scale': 0.5,
            'font_thickness': 1,
        }

        if config:
            self.defaults.update(config)

    def get(self, key: str) -> Any:
        """Get configuration value by key.

        Args:
            key: Configuration key name.

        Returns:
            Configuration value, or None if key not found.
        """
        return self.defaults.get(key)

    @property
    def margin_top(self) -> float:
        return self.get('label_padding')

    @property
    def margin_bottom(self) -> float:
        return self.get('label_padding')

    @property
    def max_label_width(self) -> float:
        max_label_width = self.get('max_label_width')
        if max_label_width is None:
            return self.get('outer_width') * self.get('label_width_multiplier')
        return max_label_width


class Margins:
    """Space around the drawable area of the chart, in pixels."""

    def __init__(self, left: float, right: float, top: float, bottom: float) -> None:
        self.left: float = left
        self.right: float = right
        self.top: float = top
        self.bottom: float = bottom

    @classmethod
    def provisional(cls, config: ChartConfig) -> 'Margins':
        """Margins to lay out with before any label has been measured."""
        horizontal = config.get('horizontal_margin')
        return cls(horizontal, horizontal, config.margin_top, config.margin_bottom)

    def with_horizontal(self, left: float, right: float) -> 'Margins':
        """Copy with new left and right margins, keeping top and bottom."""
        return Margins(left, right, self.top, self.bottom)

    def as_dict(self) -> Dict[str, float]:
        """Margins keyed by side."""
        return {'left': self.left, 'right': self.right, 'top': self.top, 'bottom': self.bottom}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Margins):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self) -> str:
        return f"Margins(left={self.left}, right={self.right}, top={self.top}, bottom={self.bottom})"


def _max_ignoring_none(*values: Optional[float]) -> Optional[float]:
    """Maximum of the values that are not None, or None if there are none."""
    present = [v for v in values if v is not None]
    return max(present) if present else None


def _min_ignoring_none(*values: Optional[float]) -> Optional[float]:
    """Minimum of the values that are not None, or None if there are none."""
    present = [v for v in values if v is not None]
    return min(present) if present else None


def min_outer_height(
    num_bars: int,
    min_bar_thickness: Optional[float],
    margin_top: float,
    margin_bottom: float
) -> Optional[float]:
    """Smallest outer height that fits every bar at its minimum thickness.

    Returns:
        The bound, or None when min_bar_thickness is unset.
    """
    if min_bar_thickness is None:
        return None
    return num_bars * min_bar_thickness + margin_top + margin_bottom


def max_outer_height(
    num_bars: int,
    max_bar_thickness: Optional[float],
    margin_top: float,
    margin_bottom: float
) -> Optional[float]:
    """Largest outer height before bars exceed their maximum thickness.

    Returns:
        The bound, or None when max_bar_thickness is unset.
    """
    if max_bar_thickness is None:
        return None
    return num_bars * max_bar_thickness + margin_top + margin_bottom


def resolve_outer_height(
    default_outer_height: float,
    min_height: Optional[float],
    max_height: Optional[float]
) -> float:
    """Clamp the default outer height into the configured bounds.

    Missing bounds are skipped rather than treated as 0 or infinity.

    Args:
        default_outer_height: Preferred outer height.
        min_height: Lower bound, or None.
        max_height: Upper bound, or None.

    Returns:
        The enforced outer height.
    """
    max_min_default = _max_ignoring_none(default_outer_height, min_height)
    return _min_ignoring_none(max_min_default, max_height)


class ChartLayout:
    """Scales and bar geometry for one dataset under one set of margins.

    Attributes:
        data: The dataset being laid out.
        extremes: Sign composition and extremes of the values.
        x_domain: Domain of the value axis before nice rounding.
        outer_width: Width of the whole chart.
        outer_height: Enforced height of the whole chart.
        width: Drawable width between the left and right margins.
        height: Drawable height between the top and bottom margins.
        x_scale: Niced value scale over ``[0, width]``.
        y_scale: Index band scale over ``[0, height]``.
        bar_thickness: Thickness of every bar, the band width without gutter.
    """

    def __init__(
        self,
        data: Sequence[Dict[str, Any]],
        config: ChartConfig,
        margins: Margins
    ) -> None:
        """Compute the layout.

        Args:
            data: Dataset of datum dictionaries, in display order.
            config: Chart configuration.
            margins: Margins to lay out with.
        """
        self.data: Sequence[Dict[str, Any]] = data
        self.config: ChartConfig = config
        self.margins: Margins = margins
        self.num_bars: int = len(data)

        self.extremes: ValueExtremes = classify_values(data)
        self.x_domain = resolve_domain(self.extremes)

        self.min_outer_height: Optional[float] = min_outer_height(
            self.num_bars, config.get('min_bar_thickness'), margins.top, margins.bottom
        )
        self.max_outer_height: Optional[float] = max_outer_height(
            self.num_bars, config.get('max_bar_thickness'), margins.top, margins.bottom
        )
        self.outer_height: float = resolve_outer_height(
            config.get('default_outer_height'), self.min_outer_height, self.max_outer_height
        )
        self.outer_width: float = config.get('outer_width')

        self.width: float = max(0.0, self.outer_width - margins.left - margins.right)
        self.height: float = max(0.0, self.outer_height - margins.top - margins.bottom)

        self.x_scale: LinearScale = LinearScale(self.x_domain, (0, self.width)).nice()
        self.y_scale: BandScale = BandScale(self.num_bars, (0, self.height), config.get('bar_padding'))

        # The band excludes the gutter, so a bar never leaves its slot
        self.bar_thickness: float = float(self.y_scale.band_width)

        logger.debug(
            f"Layout: {self.num_bars} bars, domain {self.x_domain} -> {self.x_scale.domain}, "
            f"outer height {self.outer_height}, bar thickness {self.bar_thickness}"
        )
