"""
Mass interval arithmetic and wormhole state boundaries.

A MassInterval is the observer's knowledge of the remaining jump mass:
the worst case (min) and best case (max) in Gg.
"""

import math
from dataclasses import dataclass
from typing import Any

from backend.engine import VARIANCE_FRACTION, GONE_SENTINEL, WORMHOLE_MASS_TYPES, WORMHOLE_STATES


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (2.5 -> 3), unlike round()."""
    return math.floor(value + 0.5)


@dataclass(frozen=True)
class MassInterval:
    """Remaining-mass range. min <= max; both >= 0 except the gone sentinel."""
    min: float
    max: float

    @property
    def width(self) -> float:
        return self.max - self.min

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def to_dict(self) -> dict[str, Any]:
        # Displayed bounds are always integers
        return {"min": round_half_up(self.min), "max": round_half_up(self.max)}


def subtract(interval: MassInterval, mass_range: tuple[float, float]) -> MassInterval:
    """
    Subtract a ship's mass from an interval, clamping both bounds at 0.

    mass_range is (low, high). For an exact mass (cold/hot/custom) low == high and
    both bounds move by the same amount. For an unknown fit the ship may have been as
    heavy as `high` (worst case for the lower bound) or as light as `low` (best case
    for the upper bound), so the interval can only widen.
    """
    low, high = mass_range
    return MassInterval(
        min=max(0, interval.min - high),
        max=max(0, interval.max - low),
    )


def clamp(interval: MassInterval, boundaries: MassInterval) -> MassInterval:
    """Intersect with state boundaries, keeping min <= max."""
    new_min = max(interval.min, boundaries.min)
    new_max = min(interval.max, boundaries.max)
    return MassInterval(min=min(new_min, new_max), max=new_max)


# Band fractions are expressed in tenths so boundaries stay exact integers.
# Lower bounds round down and upper bounds round up: a boundary never excludes
# a mass its band admits.
def _floor_tenths(value: int, tenths: int) -> int:
    return (value * tenths) // 10


def _ceil_tenths(value: int, tenths: int) -> int:
    return -((-value * tenths) // 10)


def normalize_state(state: str) -> str:
    """fresh only means "nothing observed yet"; it behaves like stable."""
    if state not in WORMHOLE_STATES:
        raise ValueError(f"Unknown wormhole state: {state}")
    return "stable" if state == "fresh" else state


@dataclass(frozen=True)
class WormholeProfile:
    """Capacity figures for one wormhole size and the per-state mass bands."""
    base_capacity: int
    variance_fraction: float = VARIANCE_FRACTION

    def __post_init__(self):
        if self.base_capacity not in WORMHOLE_MASS_TYPES:
            raise ValueError(
                f"Unsupported wormhole capacity {self.base_capacity}. "
                f"Expected one of: {', '.join(str(m) for m in WORMHOLE_MASS_TYPES)}"
            )

    @property
    def min_capacity(self) -> int:
        return round_half_up(self.base_capacity * (1 - self.variance_fraction))

    @property
    def max_capacity(self) -> int:
        return round_half_up(self.base_capacity * (1 + self.variance_fraction))

    def display_range(self, state: str) -> MassInterval:
        """Range shown to the observer for a state; fresh is the full, unrestricted range."""
        if state == "fresh":
            return MassInterval(self.min_capacity, self.max_capacity)
        return self.state_boundaries(state)

    def state_boundaries(self, state: str) -> MassInterval:
        """Range used to clamp intervals. fresh uses the stable band."""
        state = normalize_state(state)
        min_cap = self.min_capacity
        max_cap = self.max_capacity
        if state == "stable":
            return MassInterval(_floor_tenths(min_cap, 5), max_cap)
        if state == "destab":
            return MassInterval(_floor_tenths(min_cap, 1), _ceil_tenths(max_cap, 5))
        if state == "critical":
            return MassInterval(0, _ceil_tenths(max_cap, 1))
        return MassInterval(*GONE_SENTINEL)


def percent_remaining(remaining: float, original: float) -> float:
    return remaining / original * 100


def derive_state(remaining: float, original: float) -> str:
    """
    Automatic (game mode) state from the hidden remaining mass.
    <= 0% gone, <= 10% critical, <= 50% destab, otherwise stable.
    Compared without division so exact thresholds are not lost to float error.
    """
    if remaining <= 0:
        return "gone"
    if remaining * 10 <= original:
        return "critical"
    if remaining * 2 <= original:
        return "destab"
    return "stable"
