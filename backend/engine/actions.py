"""
Action definitions for tracker and game sessions.
An action is one ship transit through the wormhole. Actions are immutable.
"""

import math
from dataclasses import dataclass
from typing import Any

from backend.engine import SHIP_MODES
from backend.engine.definitions import ShipDefinition

DIRECTIONS = ("outbound", "inbound")


@dataclass(frozen=True)
class Action:
    """A single transit. ship is None for a custom-mass transit."""
    direction: str  # "outbound" (towards the far side) or "inbound" (back home)
    mode: str  # "cold", "hot", "unknown" or "custom"
    ship: ShipDefinition | None = None
    custom_mass: float | None = None

    @property
    def ship_key(self) -> str | None:
        """Far-side ledger key; custom-mass transits have none."""
        return self.ship.id if self.ship is not None else None

    def mass_range(self) -> tuple[float, float]:
        """(min, max) mass the observer attributes to this transit."""
        if self.mode == "custom":
            return (self.custom_mass, self.custom_mass)
        return self.ship.mass_range(self.mode)

    @property
    def is_exact(self) -> bool:
        low, high = self.mass_range()
        return low == high

    def direction_text(self) -> str:
        return "<< Incoming" if self.direction == "inbound" else "Outgoing >>"

    def display_name(self) -> str:
        if self.ship is None:
            return "Custom"
        return f"{self.ship.display_name} ({SHIP_MODES[self.mode]})"

    def mass_text(self) -> str:
        low, high = self.mass_range()
        if self.mode == "unknown":
            low_text = f"-{_fmt(low)} (min)" if low > 0 else "-"
            high_text = f"-{_fmt(high)} (max)" if high > 0 else "-"
            return f"{low_text} / {high_text} Gg"
        return f"-{_fmt(low)} Gg" if low > 0 else "-"

    def describe(self) -> str:
        return f"{self.direction_text()} - {self.display_name()} {self.mass_text()}"

    def to_dict(self) -> dict[str, Any]:
        low, high = self.mass_range()
        return {
            "direction": self.direction,
            "mode": self.mode,
            "ship_id": self.ship_key,
            "custom_mass": self.custom_mass,
            "mass_min": low,
            "mass_max": high,
            "description": self.describe(),
        }


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _check_direction(direction: str) -> None:
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown direction '{direction}'. Expected one of: {', '.join(DIRECTIONS)}")


def ship_transit(ship: ShipDefinition, direction: str, mode: str) -> Action:
    """
    A ship of a known type crossing the hole.
    Example: ship_transit(ship_defs["bs"], "inbound", "unknown")
    """
    _check_direction(direction)
    if mode not in ("cold", "hot", "unknown"):
        raise ValueError(f"Ship mode must be cold, hot or unknown, not '{mode}'")
    return Action(direction=direction, mode=mode, ship=ship)


def custom_transit(mass: float, direction: str) -> Action:
    """
    A transit of an exactly known custom mass. Rejects non-numeric and non-positive mass.
    Custom transits carry no ship type, so they never touch the far-side ledger.
    """
    _check_direction(direction)
    if isinstance(mass, bool) or not isinstance(mass, (int, float)) or not 0 < mass < math.inf:
        raise ValueError("Please enter a valid custom mass value")
    return Action(direction=direction, mode="custom", custom_mass=mass)
