"""Configuration management for the horizontal bar chart renderer.

This module handles environment variable loading and application configuration
using pydantic-settings for type-safe configuration management.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Attributes:
        DEFAULT_OUTER_HEIGHT: Preferred height of the whole chart, including padding.
        OUTER_WIDTH: Width of the whole chart, including margins.
        LABEL_PADDING: Space between labels and the zero line.
        BAR_PADDING: Space between adjacent bars, as a fraction of each slot.
        MIN_BAR_THICKNESS: Lower bound on bar thickness (unset = unbounded).
        MAX_BAR_THICKNESS: Upper bound on bar thickness (unset = unbounded).
        LABEL_WIDTH_MULTIPLIER: Share of the outer width group labels may claim.
        HORIZONTAL_MARGIN: Provisional left/right margin before measurement.
        MOST_TINTED_COLOR: Fill for negative bars.
        LEAST_TINTED_COLOR: Fill for positive bars.
        VALUE_FORMAT: Python format specifier applied to value labels.
        TOOLTIP_VALUE_DISPLAY_NAME: Name shown before the value in tooltips.
        FONT_SCALE: OpenCV font scale used to measure and draw label text.
        FONT_THICKNESS: OpenCV font thickness used to measure and draw label text.
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True,
        env_parse_none_str='none'
    )

    DEFAULT_OUTER_HEIGHT: float = Field(
        default=500,
        gt=0,
        description="Default outer chart height in pixels"
    )

    OUTER_WIDTH: float = Field(
        default=700,
        gt=0,
        description="Outer chart width in pixels"
    )

    LABEL_PADDING: float = Field(
        default=20,
        ge=0,
        description="Space between label and zero line"
    )

    BAR_PADDING: float = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Gutter between bars as a fraction of each slot"
    )

    MIN_BAR_THICKNESS: Optional[float] = Field(
        default=20,
        ge=0,
        description="Minimum bar thickness, unset for no lower bound"
    )

    MAX_BAR_THICKNESS: Optional[float] = Field(
        default=60,
        ge=0,
        description="Maximum bar thickness, unset for no upper bound"
    )

    LABEL_WIDTH_MULTIPLIER: float = Field(
        default=0.25,
        ge=0.0,
        le=1.0,
        description="Fraction of outer width available to group labels"
    )

    HORIZONTAL_MARGIN: float = Field(
        default=30,
        ge=0,
        description="Provisional horizontal margin before labels are measured"
    )

    MOST_TINTED_COLOR: str = Field(
        default="rgb(179, 179, 179)",
        description="Fill colour of negative bars"
    )

    LEAST_TINTED_COLOR: str = Field(
        default="rgb(65, 65, 65)",
        description="Fill colour of positive bars"
    )

    VALUE_FORMAT: str = Field(
        default=",.2f",
        description="Format specifier for value labels"
    )

    TOOLTIP_VALUE_DISPLAY_NAME: str = Field(
        default="Value",
        description="Display name of the value in tooltips"
    )

    FONT_SCALE: float = Field(
        default=0.5,
        gt=0,
        le=4.0,
        description="Font scale for label text"
    )

    FONT_THICKNESS: int = Field(
        default=1,
        ge=1,
        le=10,
        description="Font thickness for label text"
    )

    LOG_LEVEL: str = Field(
        default="ERROR",
        description="Logging level"
    )

    @field_validator('MOST_TINTED_COLOR', 'LEAST_TINTED_COLOR')
    @classmethod
    def validate_color(cls, v: str) -> str:
        """Validate that a colour is not empty."""
        if not v or not v.strip():
            raise ValueError("Bar colours cannot be empty")
        return v.strip()

    @field_validator('LOG_LEVEL')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of {valid_levels}, got '{v}'"
            )
        return v_upper

    @model_validator(mode='after')
    def validate_thickness_bounds(self) -> 'Settings':
        """Validate that the bar thickness bounds are compatible."""
        low = self.MIN_BAR_THICKNESS
        high = self.MAX_BAR_THICKNESS
        if low is not None and high is not None and low > high:
            raise ValueError(
                f"MIN_BAR_THICKNESS ({low}) cannot exceed MAX_BAR_THICKNESS ({high})"
            )
        return self

    def chart_overrides(self) -> Dict[str, Any]:
        """Translate the settings into chart configuration overrides.

        Returns:
            Dictionary accepted by ``hbarchart.ChartConfig``.
        """
        return {
            'default_outer_height': self.DEFAULT_OUTER_HEIGHT,
            'outer_width': self.OUTER_WIDTH,
            'label_padding': self.LABEL_PADDING,
            'bar_padding': self.BAR_PADDING,
            'min_bar_thickness': self.MIN_BAR_THICKNESS,
            'max_bar_thickness': self.MAX_BAR_THICKNESS,
            'label_width_multiplier': self.LABEL_WIDTH_MULTIPLIER,
            'horizontal_margin': self.HORIZONTAL_MARGIN,
            'most_tinted_color': self.MOST_TINTED_COLOR,
            'least_tinted_color': self.LEAST_TINTED_COLOR,
            'value_format': self.VALUE_FORMAT,
            'tooltip_value_display_name': self.TOOLTIP_VALUE_DISPLAY_NAME,
            'font_scale': self.FONT_SCALE,
            'font_thickness': self.FONT_THICKNESS,
        }


def get_project_root() -> Path:
    """Get the project root directory.

    Returns:
        Path object pointing to the project root.
    """
    return Path(__file__).parent


def get_output_dir() -> Path:
    """Get the chart output directory.

    Returns:
        Path object pointing to the charts directory.
    """
    output_dir = get_project_root() / "charts"
    output_dir.mkdir(exist_ok=True)
    return output_dir


# Global settings instance
settings = Settings()
