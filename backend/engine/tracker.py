"""
Tracker session: manual mode with full knowledge of every transit.

Actions are staged, then committed as a batch together with the state the
operator observed. The batch is applied raw and clamped once to the declared
state's boundaries.
"""

import logging
import random
from dataclasses import dataclass
from typing import Any

from backend.engine import WORMHOLE_STATES
from backend.engine.actions import Action
from backend.engine.definitions import ShipDefinition
from backend.engine.events import (
    SessionEvent,
    session_configured,
    session_completed,
    action_staged,
    action_unstaged,
    batch_committed,
    commit_skipped,
)
from backend.engine.mass import MassInterval, WormholeProfile, clamp
from backend.engine.messages import draw_completion_message
from backend.engine.reducer import (
    apply_batch,
    apply_far_side,
    check_restriction,
    check_restriction_level,
    passed_mass_estimate,
)
from backend.engine.state import FarSideLedger, TrackerLedgerEntry

logger = logging.getLogger(__name__)

# States an operator may declare on commit. "no-change" keeps the current state.
DECLARABLE_STATES = ("no-change", "fresh", "stable", "destab", "critical", "gone")

# Starting states; a wormhole cannot start gone
INITIAL_STATES = ("fresh", "stable", "destab", "critical")

STATE_CHANGE_TEXT = {
    "no-change": "no state change",
    "fresh": "fresh",
    "stable": "stable",
    "destab": "destabilized",
    "critical": "critical",
    "gone": "wormhole gone",
}


@dataclass
class CommitResult:
    """Outcome of a commit. applied is False for an empty batch (a no-op, not an error)."""
    applied: bool
    message: str
    entry: TrackerLedgerEntry | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "applied": self.applied,
            "message": self.message,
            "entry": self.entry.to_dict() if self.entry else None,
        }


class TrackerSession:
    """
    Idle -> Configuring -> Tracking -> {Tracking, Completed}.
    A session is built by configure() and discarded at reset; it never outlives one configuration.
    """

    mode = "tracker"

    def __init__(
        self,
        capacity: int,
        initial_state: str = "fresh",
        restriction: int = 5,
        initial_far_side: dict[str, int] | None = None,
        rng: random.Random | None = None,
    ):
        if initial_state not in INITIAL_STATES:
            raise ValueError(
                f"Invalid initial state '{initial_state}'. Allowed: {', '.join(INITIAL_STATES)}"
            )
        check_restriction_level(restriction)
        self.status = "configuring"
        self.profile = WormholeProfile(capacity)
        self.initial_state = initial_state
        self.current_state = initial_state
        self.restriction = restriction
        self.rng = rng if rng is not None else random.Random()
        self.far_side = FarSideLedger.from_dict(initial_far_side or {})
        self.staged: list[Action] = []
        self.ledger: list[TrackerLedgerEntry] = []
        self.verdict: str | None = None
        self.completion_message: str | None = None

    def start(self) -> list[SessionEvent]:
        """Configuring -> Tracking."""
        if self.status != "configuring":
            raise ValueError(f"Cannot start tracking from status '{self.status}'")
        self.status = "tracking"
        logger.info(
            "Tracking %s Gg wormhole from %s state", self.profile.base_capacity, self.initial_state
        )
        return [session_configured(
            self.mode,
            self.profile.base_capacity,
            self.initial_state,
            self.restriction,
            self.far_side.snapshot(),
        )]

    def _require_tracking(self) -> None:
        if self.status == "completed":
            raise ValueError("Wormhole is gone. Reset to start a new session.")
        if self.status != "tracking":
            raise ValueError("Tracking has not started.")

    # ===== Staging =====

    def stage(self, action: Action) -> list[SessionEvent]:
        """Queue an action. No mass effect until commit."""
        self._require_tracking()
        check_restriction(action, self.restriction)
        self.staged.append(action)
        return [action_staged(len(self.staged) - 1, action.to_dict())]

    def unstage(self, index: int) -> list[SessionEvent]:
        self._require_tracking()
        if index < 0 or index >= len(self.staged):
            raise ValueError(f"Invalid staged action index: {index}")
        action = self.staged.pop(index)
        return [action_unstaged(index, action.to_dict())]

    # ===== Commit =====

    def initial_mass_range(self) -> MassInterval:
        """Starting range; never changes during the session."""
        return self.profile.display_range(self.initial_state)

    def current_display(self) -> MassInterval:
        if self.ledger:
            return self.ledger[-1].final_mass
        return self.initial_mass_range()

    def total_passed_mass(self) -> float:
        return self.ledger[-1].total_passed_mass if self.ledger else 0

    def commit(self, declared_state: str) -> tuple[CommitResult, list[SessionEvent]]:
        """
        Apply every staged action (raw, in order) to the last committed interval,
        then clamp once to the effective state's boundaries.
        Any declared state is accepted; refusing to "un-degrade" is up to the UI.
        """
        self._require_tracking()
        if declared_state not in DECLARABLE_STATES:
            raise ValueError(
                f"Invalid state '{declared_state}'. Allowed: {', '.join(DECLARABLE_STATES)}"
            )

        if not self.staged:
            message = "No actions to apply"
            return CommitResult(applied=False, message=message), [commit_skipped(message)]

        events: list[SessionEvent] = []
        actions = list(self.staged)

        mass = apply_batch(self.current_display(), actions)
        entry_passed_mass = 0
        for action in actions:
            entry_passed_mass += passed_mass_estimate(action)
            events.extend(apply_far_side(self.far_side, action))

        if declared_state != "no-change":
            self.current_state = declared_state
        final_mass = clamp(mass, self.profile.state_boundaries(self.current_state))

        total_passed_mass = self.total_passed_mass() + entry_passed_mass
        entry = TrackerLedgerEntry(
            actions=tuple(actions),
            declared_state=declared_state,
            resulting_state=self.current_state,
            final_mass=final_mass,
            passed_mass=entry_passed_mass,
            total_passed_mass=total_passed_mass,
            far_side=self.far_side.snapshot(),
        )
        self.ledger.append(entry)
        self.staged = []

        events.append(batch_committed(
            len(self.ledger) - 1,
            len(actions),
            declared_state,
            final_mass.to_dict(),
            entry_passed_mass,
            total_passed_mass,
        ))
        logger.debug(
            "Committed %d action(s) as %s: %s", len(actions), declared_state, final_mass.to_dict()
        )

        if declared_state == "gone":
            events.extend(self._complete())

        message = f"Applied {len(actions)} action(s) with {STATE_CHANGE_TEXT[declared_state]}"
        return CommitResult(applied=True, message=message, entry=entry), events

    def _complete(self) -> list[SessionEvent]:
        self.status = "completed"
        self.staged = []
        self.verdict = "win" if self.far_side.is_empty() else "loss"
        self.completion_message = draw_completion_message(self.verdict, self.rng)
        logger.info("Tracking complete: %s (far side: %s)", self.verdict, self.far_side.snapshot())
        return [session_completed(self.verdict, self.far_side.snapshot(), self.completion_message)]

    # ===== Snapshot =====

    def snapshot(self, ship_defs: dict[str, ShipDefinition] | None = None) -> dict[str, Any]:
        out = {
            "mode": self.mode,
            "status": self.status,
            "capacity": self.profile.base_capacity,
            "initial_state": self.initial_state,
            "state": self.current_state,
            "state_text": WORMHOLE_STATES[self.current_state],
            "restriction": self.restriction,
            "initial_mass": self.initial_mass_range().to_dict(),
            "display": self.current_display().to_dict(),
            "staged": [a.to_dict() for a in self.staged],
            "ledger": [e.to_dict() for e in self.ledger],
            "total_passed_mass": round(self.total_passed_mass()),
            "far_side": self.far_side.snapshot(),
            "verdict": self.verdict,
            "completion_message": self.completion_message,
        }
        if ship_defs is not None:
            out["far_side_text"] = self.far_side.describe(ship_defs)
        return out
