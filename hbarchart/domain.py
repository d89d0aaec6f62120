"""Value classification and value-axis domain resolution."""

import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

# --- Sign patterns ---
ALL_POSITIVE: str = 'positive'
ALL_NEGATIVE: str = 'negative'
MIXED: str = 'mixed'


def normalize_data(data: Optional[Sequence[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Validate raw records and copy them into the datum shape used for rendering.

    Args:
        data: Sequence of mappings with 'label', 'value' and optional 'color'.

    Returns:
        List of datum dictionaries with a string label and a float value.

    Raises:
        ValueError: If a record has no label or a non-numeric value.
    """
    finished: List[Dict[str, Any]] = []
    for i, record in enumerate(data or []):
        if not isinstance(record, dict):
            raise ValueError(f"Datum {i} must be an object, got {type(record).__name__}")
        if record.get('label') is None:
            raise ValueError(f"Datum {i} is missing a label")

        value = record.get('value')
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Datum {i} ('{record['label']}') has a non-numeric value: {value!r}")
        if not math.isfinite(value):
            raise ValueError(f"Datum {i} ('{record['label']}') has a non-finite value: {value!r}")

        datum: Dict[str, Any] = {'label': str(record['label']), 'value': float(value)}
        if record.get('color'):
            datum['color'] = str(record['color'])
        finished.append(datum)
    return finished


class ValueExtremes:
    """Sign composition and extremes of a dataset's values."""

    def __init__(self, values: Sequence[float]) -> None:
        """Compute extremes over the given values.

        An empty value set behaves like an all-zero one.

        Args:
            values: The values of the dataset, in dataset order.
        """
        self.values: List[float] = list(values)
        self.min: float = min(self.values) if self.values else 0.0
        self.max: float = max(self.values) if self.values else 0.0
        self.has_positive: bool = self.max > 0
        self.has_negative: bool = self.min < 0

    @property
    def all_positive(self) -> bool:
        return self.min >= 0

    @property
    def all_negative(self) -> bool:
        return self.max <= 0

    @property
    def sign_pattern(self) -> str:
        """All-zero data counts as positive-only."""
        if self.all_positive:
            return ALL_POSITIVE
        if self.all_negative:
            return ALL_NEGATIVE
        return MIXED

    @property
    def min_index(self) -> int:
        """Index of the first datum holding the minimum value."""
        return self.values.index(self.min) if self.values else -1

    @property
    def max_index(self) -> int:
        """Index of the first datum holding the maximum value."""
        return self.values.index(self.max) if self.values else -1

    def __repr__(self) -> str:
        return (
            f"ValueExtremes(min={self.min}, max={self.max}, "
            f"has_positive={self.has_positive}, has_negative={self.has_negative})"
        )


def classify_values(data: Sequence[Dict[str, Any]]) -> ValueExtremes:
    """Build the value extremes of a dataset.

    Args:
        data: Dataset of datum dictionaries.

    Returns:
        ValueExtremes for the dataset's values.
    """
    return ValueExtremes([d['value'] for d in data])


def resolve_domain(extremes: ValueExtremes) -> Tuple[float, float]:
    """Derive the value-axis domain from the dataset's sign composition.

    Mixed data spans the actual extremes, negative-only data ends at zero and
    everything else (including all-zero and empty data) starts at zero.

    Args:
        extremes: Classified dataset values.

    Returns:
        The (lo, hi) domain.
    """
    if extremes.has_negative:
        if extremes.has_positive:
            return (extremes.min, extremes.max)
        return (extremes.min, 0.0)
    return (0.0, extremes.max)
