"""Scales mapping data space to pixel space.

Two scales are used by the horizontal bar chart:

- ``LinearScale`` maps a value to a horizontal pixel offset. Its domain can be
  "niced", i.e. extended outward to round numbers.
- ``BandScale`` maps a bar index to the vertical offset of an evenly sized
  slot, with a fraction of every slot reserved as gutter between bars.
"""

import math
from typing import List, Optional, Sequence, Tuple

# Default number of ticks the nice rounding aims for
DEFAULT_TICK_COUNT: int = 10


def _round_half_up(x: float) -> int:
    """Round to the nearest integer, halves away from negative infinity."""
    return int(math.floor(x + 0.5))


def _tick_step(lo: float, hi: float, count: int) -> float:
    """Choose a step of 1, 2 or 5 times a power of ten giving about `count` ticks.

    Args:
        lo: Lower end of the extent.
        hi: Upper end of the extent.
        count: Desired number of ticks.

    Returns:
        The step, or 0 for an empty extent.
    """
    span = hi - lo
    if span <= 0 or count <= 0:
        return 0.0
    step = 10 ** math.floor(math.log10(span / count))
    err = count / span * step
    if err <= 0.15:
        step *= 10
    elif err <= 0.35:
        step *= 5
    elif err <= 0.75:
        step *= 2
    return step


class LinearScale:
    """Continuous linear mapping from a numeric domain to a pixel range."""

    def __init__(self, domain: Sequence[float], range_: Sequence[float]) -> None:
        """Initialize the scale.

        Args:
            domain: (lo, hi) input extent.
            range_: (start, stop) output extent in pixels.
        """
        self.domain: Tuple[float, float] = (float(domain[0]), float(domain[1]))
        self.range: Tuple[float, float] = (float(range_[0]), float(range_[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        span = d1 - d0
        # A zero-width domain maps everything onto the start of the range
        if span == 0:
            return r0
        return r0 + (value - d0) / span * (r1 - r0)

    def nice(self, count: int = DEFAULT_TICK_COUNT) -> 'LinearScale':
        """Return a copy whose domain is extended outward to round numbers.

        A degenerate domain such as [0, 0] is widened to a unit span first so
        the mapping stays finite and zero keeps its place at the range start.

        Args:
            count: Desired number of ticks guiding the step size.

        Returns:
            A new, niced LinearScale.
        """
        lo, hi = self.domain
        if lo == hi:
            hi = lo + 1
        step = _tick_step(lo, hi, count)
        if step:
            lo = math.floor(lo / step) * step
            hi = math.ceil(hi / step) * step
        return LinearScale((lo, hi), self.range)

    def ticks(self, count: int = DEFAULT_TICK_COUNT) -> List[float]:
        """Return round values within the domain, roughly `count` of them."""
        lo, hi = self.domain
        step = _tick_step(lo, hi, count)
        if not step:
            return [lo]
        start = math.ceil(lo / step)
        stop = math.floor(hi / step)
        return [i * step for i in range(start, stop + 1)]

    def __repr__(self) -> str:
        return f"LinearScale(domain={self.domain}, range={self.range})"


class BandScale:
    """Discrete mapping from bar index to a rounded, evenly sized band.

    Padding is a fraction of each slot, so ``padding=0.2`` leaves 80% of the
    slot for the bar and 20% for the gutter. The same fraction pads both
    outer ends of the range.
    """

    def __init__(
        self,
        count: int,
        range_: Sequence[float],
        padding: float = 0.0,
        outer_padding: Optional[float] = None
    ) -> None:
        """Initialize the band scale.

        Args:
            count: Number of bands (the domain is ``0..count-1``).
            range_: (start, stop) output extent in pixels.
            padding: Fraction of each slot reserved as gutter.
            outer_padding: Padding before the first and after the last band,
                in slots. Defaults to `padding`.
        """
        if outer_padding is None:
            outer_padding = padding

        self.count: int = max(0, int(count))
        self.range: Tuple[float, float] = (float(range_[0]), float(range_[1]))
        self.padding: float = padding
        self.outer_padding: float = outer_padding

        start, stop = self.range
        reverse = stop < start
        if reverse:
            start, stop = stop, start

        slots = self.count - padding + 2 * outer_padding
        if self.count == 0 or slots <= 0:
            self.step: float = 0.0
            self.offsets: List[float] = []
            self.band_width: float = 0.0
            return

        self.step = float(math.floor((stop - start) / slots))
        error = stop - start - (self.count - padding) * self.step
        first = start + _round_half_up(error / 2)
        self.offsets = [first + self.step * i for i in range(self.count)]
        if reverse:
            self.offsets.reverse()
        self.band_width = float(_round_half_up(self.step * (1 - padding)))

    def __call__(self, index: int) -> float:
        return self.offsets[index]

    def __len__(self) -> int:
        return self.count

    def __repr__(self) -> str:
        return (
            f"BandScale(count={self.count}, range={self.range}, "
            f"padding={self.padding}, band_width={self.band_width})"
        )
