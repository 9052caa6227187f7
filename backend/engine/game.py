"""
Game session: simulation mode with a concealed ground truth.

The session samples an exact capacity and tracks the exact remaining mass, but
the observer only ever sees the displayed interval. The displayed interval is
updated from the declared (observer-side) mass of each transit and clamped to
the boundaries of the automatically derived state.

Invariant: while the wormhole is open, the hidden remaining mass lies inside
the displayed interval. A violation is a bug in the interval logic and is raised.
"""

import logging
import random
from typing import Any

from backend.engine import WORMHOLE_STATES
from backend.engine.actions import Action, ship_transit
from backend.engine.definitions import ShipDefinition
from backend.engine.events import (
    SessionEvent,
    TRANSITION_CATEGORIES,
    session_configured,
    session_completed,
    action_applied,
    state_changed,
)
from backend.engine.mass import MassInterval, WormholeProfile, derive_state, normalize_state, percent_remaining
from backend.engine.messages import draw_completion_message
from backend.engine.random_events import RandomEventInjector
from backend.engine.reducer import (
    apply_action_clamped,
    apply_far_side,
    check_restriction,
    check_restriction_level,
)
from backend.engine.state import FarSideLedger, GameLogEntry

logger = logging.getLogger(__name__)

# Fraction of the original capacity still present, per starting state.
# Bands exclude their lower edge: exactly 50% is already destab, exactly 10% critical.
INITIAL_FRACTION_BANDS = {
    "fresh": (1.0, 1.0),
    "stable": (0.5, 1.0),
    "destab": (0.1, 0.5),
    "critical": (0.0, 0.1),
}


class InvariantViolation(AssertionError):
    """Hidden remaining mass escaped the displayed interval while the hole is open."""


class GameSession:
    """
    Configuring -> Playing -> Completed.
    All randomness (capacity, starting mass, unknown-fit coin flips, events, flavor text)
    comes from the injected rng.
    """

    mode = "game"

    def __init__(
        self,
        capacity: int,
        initial_state: str = "fresh",
        restriction: int = 5,
        initial_far_side: dict[str, int] | None = None,
        rng: random.Random | None = None,
        injector: RandomEventInjector | None = None,
    ):
        if initial_state not in INITIAL_FRACTION_BANDS:
            raise ValueError(
                f"Invalid initial state '{initial_state}'. "
                f"Allowed: {', '.join(INITIAL_FRACTION_BANDS)}"
            )
        check_restriction_level(restriction)
        self.status = "configuring"
        self.profile = WormholeProfile(capacity)
        self.initial_state = initial_state
        self.current_state = initial_state
        self.restriction = restriction
        self.rng = rng if rng is not None else random.Random()
        self.injector = injector
        self.far_side = FarSideLedger.from_dict(initial_far_side or {})
        self.log: list[GameLogEntry] = []
        self.random_event_occurred = False
        self.verdict: str | None = None
        self.completion_message: str | None = None

        # Hidden ground truth
        self.original_capacity = self.rng.randint(self.profile.min_capacity, self.profile.max_capacity)
        self.current_remaining = self.original_capacity * self._draw_fraction(initial_state)

        self.display = self.profile.display_range(initial_state)
        self.check_invariant()

    def _draw_fraction(self, state: str) -> float:
        """Uniform in (low, high]; simulates unseen earlier traffic consistent with the state."""
        low, high = INITIAL_FRACTION_BANDS[state]
        return high - (high - low) * self.rng.random()

    def start(self) -> list[SessionEvent]:
        if self.status != "configuring":
            raise ValueError(f"Cannot start game from status '{self.status}'")
        self.status = "playing"
        logger.info(
            "Game started: %s Gg wormhole, %s state, restriction %s",
            self.profile.base_capacity, self.initial_state, self.restriction,
        )
        return [session_configured(
            self.mode,
            self.profile.base_capacity,
            self.initial_state,
            self.restriction,
            self.far_side.snapshot(),
        )]

    # ===== Core resolution =====

    @staticmethod
    def transition_category(old_state: str, new_state: str) -> str:
        """collapse is reported unconditionally; fresh and stable count as the same state."""
        if new_state == "gone":
            return "collapse"
        if normalize_state(old_state) == normalize_state(new_state):
            return "no-change"
        return TRANSITION_CATEGORIES[normalize_state(new_state)]

    def _resolve_true_mass(self, action: Action) -> float:
        """Exact mass if known; otherwise a fair coin picks cold or hot. Never revealed."""
        low, high = action.mass_range()
        if low == high:
            return low
        return high if self.rng.random() < 0.5 else low

    def resolve_action(self, action: Action, source: str = "player") -> tuple[str, list[SessionEvent]]:
        """
        Debit the hidden mass, update the display, derive the new state.
        Shared by player actions and random-event steps. Does not touch the far-side ledger.

        Returns:
            (transition_category, events)
        """
        previous_state = self.current_state
        true_mass = self._resolve_true_mass(action)
        self.current_remaining -= true_mass

        new_state = derive_state(self.current_remaining, self.original_capacity)
        self.display = apply_action_clamped(self.display, action, self.profile, new_state)
        self.current_state = new_state
        logger.debug(
            "%s: %s -> display %s, state %s", source, action.describe(), self.display.to_dict(), new_state
        )

        events: list[SessionEvent] = [
            action_applied(action.to_dict(), self.display.to_dict(), new_state, source)
        ]
        category = self.transition_category(previous_state, new_state)
        if category != "no-change":
            logger.info("Wormhole transition %s -> %s (%s)", previous_state, new_state, category)
            events.append(state_changed(previous_state, new_state, category))

        self.check_invariant()
        return category, events

    def check_invariant(self) -> None:
        if self.current_state == "gone":
            return
        if not self.display.contains(self.current_remaining):
            logger.error(
                "Hidden mass %.3f outside displayed interval %s (state %s, original %s)",
                self.current_remaining, self.display, self.current_state, self.original_capacity,
            )
            raise InvariantViolation(
                f"Hidden mass {self.current_remaining} outside displayed interval "
                f"[{self.display.min}, {self.display.max}]"
            )

    # ===== Player commands =====

    def apply_player_action(
        self,
        direction: str,
        ship: ShipDefinition,
        mode: str = "unknown",
    ) -> tuple[GameLogEntry, list[SessionEvent]]:
        return self.apply(ship_transit(ship, direction, mode))

    def apply(self, action: Action) -> tuple[GameLogEntry, list[SessionEvent]]:
        """
        Resolve one player transit, then give the random event injector its turn.
        Returns the player's log entry; a fired random event adds its own entry to self.log.
        """
        if self.status == "completed":
            raise ValueError("Wormhole is gone. Reset to start a new game.")
        if self.status != "playing":
            raise ValueError("Game has not started.")
        check_restriction(action, self.restriction)

        category, events = self.resolve_action(action, source="player")
        events.extend(apply_far_side(self.far_side, action))

        low, high = action.mass_range()
        entry = GameLogEntry(
            kind="player",
            name="player",
            actions=(action,),
            displayed=self.display,
            state=self.current_state,
            category=category,
            mass_impact=MassInterval(low, high),
            far_side=self.far_side.snapshot(),
        )
        self.log.append(entry)

        if self.current_state == "gone":
            events.extend(self._complete())
            return entry, events

        if self.injector is not None:
            event_entry, evts = self.injector.maybe_fire(self)
            events.extend(evts)
            if event_entry is not None:
                self.log.append(event_entry)
                if self.current_state == "gone":
                    events.extend(self._complete())

        return entry, events

    def _complete(self) -> list[SessionEvent]:
        self.status = "completed"
        self.verdict = "win" if self.far_side.is_empty() else "loss"
        self.completion_message = draw_completion_message(self.verdict, self.rng)
        logger.info("Game complete: %s (far side: %s)", self.verdict, self.far_side.snapshot())
        return [session_completed(self.verdict, self.far_side.snapshot(), self.completion_message)]

    # ===== Snapshot =====

    def current_display(self) -> MassInterval:
        return self.display

    def snapshot(self, ship_defs: dict[str, ShipDefinition] | None = None) -> dict[str, Any]:
        """Observer view. Hidden values are only revealed once the game is over."""
        out = {
            "mode": self.mode,
            "status": self.status,
            "capacity": self.profile.base_capacity,
            "initial_state": self.initial_state,
            "state": self.current_state,
            "state_text": WORMHOLE_STATES[self.current_state],
            "restriction": self.restriction,
            "initial_mass": self.profile.display_range(self.initial_state).to_dict(),
            "display": self.display.to_dict(),
            "log": [e.to_dict() for e in self.log],
            "random_event_occurred": self.random_event_occurred,
            "far_side": self.far_side.snapshot(),
            "verdict": self.verdict,
            "completion_message": self.completion_message,
        }
        if ship_defs is not None:
            out["far_side_text"] = self.far_side.describe(ship_defs)
        if self.status == "completed":
            out["revealed"] = {
                "original_capacity": self.original_capacity,
                "remaining": round(self.current_remaining, 3),
                "percent_remaining": round(
                    percent_remaining(self.current_remaining, self.original_capacity), 1
                ),
            }
        return out
