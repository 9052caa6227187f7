"""
Session state records.
Ledger entries are immutable once written; the far-side ledger is the only
record mutated in place, and only by its owning session.
"""

from dataclasses import dataclass, field
from typing import Any

from backend.engine.actions import Action
from backend.engine.definitions import ShipDefinition
from backend.engine.mass import MassInterval


def _ensure_counts(value: Any) -> dict[str, int]:
    """Parse a ship_id -> count map, dropping zero, negative and malformed entries."""
    if not isinstance(value, dict):
        return {}
    out = {}
    for k, v in value.items():
        try:
            count = int(v)
        except (TypeError, ValueError):
            continue
        if count > 0:
            out[str(k)] = count
    return out


@dataclass
class FarSideLedger:
    """Ships currently on the far side of the hole, by ship type."""
    counts: dict[str, int] = field(default_factory=dict)

    def increment(self, ship_id: str) -> tuple[int, int]:
        old = self.counts.get(ship_id, 0)
        self.counts[ship_id] = old + 1
        return old, old + 1

    def decrement(self, ship_id: str) -> tuple[int, int]:
        """Floored at 0; an inbound ship nobody saw leave changes nothing."""
        old = self.counts.get(ship_id, 0)
        new = max(0, old - 1)
        if new == 0:
            self.counts.pop(ship_id, None)
        else:
            self.counts[ship_id] = new
        return old, new

    def record(self, action: Action) -> tuple[int, int] | None:
        """Apply a transit's direction. Returns (old, new) or None for custom-mass transits."""
        if action.ship_key is None:
            return None
        if action.direction == "outbound":
            return self.increment(action.ship_key)
        return self.decrement(action.ship_key)

    def is_empty(self) -> bool:
        return not any(count > 0 for count in self.counts.values())

    def snapshot(self) -> dict[str, int]:
        return {k: v for k, v in self.counts.items() if v > 0}

    def describe(self, ship_defs: dict[str, ShipDefinition]) -> str:
        snap = self.snapshot()
        if not snap:
            return "None"
        parts = []
        for ship_id, count in snap.items():
            ship_def = ship_defs.get(ship_id)
            name = ship_def.display_name if ship_def else ship_id
            parts.append(f"{name} x{count}")
        return ", ".join(parts)

    @classmethod
    def from_dict(cls, data: Any) -> "FarSideLedger":
        return cls(counts=_ensure_counts(data))


@dataclass(frozen=True)
class TrackerLedgerEntry:
    """One committed batch of tracker actions."""
    actions: tuple[Action, ...]
    declared_state: str  # As declared, including "no-change"
    resulting_state: str  # Effective state after the batch
    final_mass: MassInterval
    passed_mass: float  # Estimate for this batch
    total_passed_mass: float  # Estimate across the session
    far_side: dict[str, int]  # Snapshot after this batch

    def to_dict(self) -> dict[str, Any]:
        return {
            "actions": [a.to_dict() for a in self.actions],
            "declared_state": self.declared_state,
            "resulting_state": self.resulting_state,
            "final_mass": self.final_mass.to_dict(),
            "passed_mass": round(self.passed_mass),
            "total_passed_mass": round(self.total_passed_mass),
            "far_side": dict(self.far_side),
        }


@dataclass(frozen=True)
class GameLogEntry:
    """
    One resolved player action, or one whole random event.
    mass_impact is the declared (observer-side) mass range of the executed actions,
    never the hidden resolved mass.
    """
    kind: str  # "player" or "random_event"
    name: str  # "player" or the event name
    actions: tuple[Action, ...]
    displayed: MassInterval
    state: str
    category: str  # collapse | critical | destab | stabilize | no-change
    mass_impact: MassInterval
    processed: int = 1
    skipped: int = 0
    far_side: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        out = {
            "kind": self.kind,
            "name": self.name,
            "actions": [a.to_dict() for a in self.actions],
            "displayed": self.displayed.to_dict(),
            "state": self.state,
            "category": self.category,
            "mass_impact": self.mass_impact.to_dict(),
            "far_side": dict(self.far_side),
        }
        if self.kind == "random_event":
            out["processed"] = self.processed
            out["skipped"] = self.skipped
        return out
