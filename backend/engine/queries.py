"""
Query functions for UI integration.
These help a presentation layer validate input and describe a session
without mutating it.
"""

import math
from dataclasses import dataclass
from typing import Any

from backend.engine import SHIP_MODES
from backend.engine.actions import DIRECTIONS
from backend.engine.definitions import ShipDefinition
from backend.engine.game import GameSession
from backend.engine.tracker import TrackerSession


@dataclass
class ValidationResult:
    """Result of input validation."""
    valid: bool
    error: str | None = None
    value: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "error": self.error}


# ===== Input Validation =====

def validate_custom_mass(raw: Any) -> ValidationResult:
    """
    Parse operator-entered custom mass. Non-numeric and non-positive input is rejected
    here, before anything reaches a session.
    """
    if isinstance(raw, bool) or raw is None:
        return ValidationResult(False, "Please enter a valid custom mass value")
    try:
        mass = float(raw)
    except (TypeError, ValueError):
        return ValidationResult(False, "Please enter a valid custom mass value")
    if not 0 < mass < math.inf:
        return ValidationResult(False, "Please enter a valid custom mass value")
    return ValidationResult(True, value=mass)


def validate_transit(
    session: TrackerSession | GameSession | None,
    ship_id: str | None,
    mode: str,
    direction: str,
    ship_defs: dict[str, ShipDefinition],
) -> ValidationResult:
    """Validate a transit request without applying it."""
    if session is None:
        return ValidationResult(False, "No active session. Configure one first.")
    if session.status == "completed":
        return ValidationResult(False, "Wormhole is gone. Reset to start a new session.")
    if direction not in DIRECTIONS:
        return ValidationResult(False, f"Unknown direction '{direction}'")
    if mode not in SHIP_MODES:
        return ValidationResult(False, f"Unknown ship mode '{mode}'")
    if mode == "custom":
        return ValidationResult(True)
    ship_def = ship_defs.get(ship_id or "")
    if ship_def is None:
        return ValidationResult(False, f"Unknown ship type '{ship_id}'")
    if ship_def.size_class > session.restriction:
        return ValidationResult(
            False,
            f"{ship_def.display_name} is too large for a restriction level {session.restriction} wormhole",
        )
    return ValidationResult(True, value=ship_def)


# ===== Queries =====

def get_eligible_ships(
    ship_defs: dict[str, ShipDefinition],
    restriction: int,
) -> list[ShipDefinition]:
    """Ships whose size class fits through a wormhole of the given restriction level."""
    return [s for s in ship_defs.values() if s.size_class <= restriction]


def get_available_commands(session: TrackerSession | GameSession | None) -> list[str]:
    if session is None:
        return ["configure"]
    if session.status == "completed":
        return ["reset"]
    if isinstance(session, TrackerSession):
        commands = ["stage", "reset"]
        if session.staged:
            commands[1:1] = ["unstage", "commit"]
        return commands
    return ["apply_action", "reset"]


def get_declarable_states(session: TrackerSession) -> list[str]:
    """
    States a UI should offer on commit, in severity order.
    Severity already reached is not offered again; the engine itself accepts any state.
    """
    order = ["stable", "destab", "critical", "gone"]
    current = "stable" if session.current_state == "fresh" else session.current_state
    reached = order.index(current) if current in order else 0
    return ["no-change"] + order[reached + 1:]


def get_session_summary(
    session: TrackerSession | GameSession,
    ship_defs: dict[str, ShipDefinition],
) -> dict[str, Any]:
    """Short status block for CLIs."""
    display = session.current_display().to_dict()
    summary = {
        "mode": session.mode,
        "status": session.status,
        "capacity": session.profile.base_capacity,
        "state": session.current_state,
        "display": display,
        "far_side": session.far_side.describe(ship_defs),
        "verdict": session.verdict,
    }
    if isinstance(session, TrackerSession):
        summary["staged"] = len(session.staged)
        summary["entries"] = len(session.ledger)
    else:
        summary["entries"] = len(session.log)
        summary["random_event_occurred"] = session.random_event_occurred
    return summary
