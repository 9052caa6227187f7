"""
Random events for game mode.

After each resolved player action, every defined event rolls its own trigger
probability. Events whose ships are too large for the hole are discarded; one
of the remaining triggered events is picked at random and its transits are run
through the same machinery as a player action. At most one event fires per session.
"""

import logging
from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

from backend.engine.actions import Action, ship_transit
from backend.engine.definitions import ShipDefinition
from backend.engine.events import SessionEvent, random_event_triggered, random_event_resolved
from backend.engine.mass import MassInterval
from backend.engine.state import GameLogEntry

if TYPE_CHECKING:
    from backend.engine.game import GameSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RandomEventStep:
    """One transit inside an event, by ship type."""
    ship_id: str
    direction: str
    mode: str


@dataclass(frozen=True)
class RandomEventDefinition:
    name: str
    display_name: str
    probability: float  # Chance per player action
    steps: tuple[RandomEventStep, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "probability": self.probability,
            "steps": [
                {"ship_id": s.ship_id, "direction": s.direction, "mode": s.mode}
                for s in self.steps
            ],
        }


RANDOM_EVENTS: tuple[RandomEventDefinition, ...] = (
    RandomEventDefinition(
        name="hictor_scout",
        display_name="A neutral hictor scouts through the hole",
        probability=0.05,
        steps=(RandomEventStep("rhic", "inbound", "unknown"),),
    ),
    RandomEventDefinition(
        name="cruiser_gang",
        display_name="A hostile cruiser gang roams through",
        probability=0.04,
        steps=(
            RandomEventStep("cruiser", "inbound", "unknown"),
            RandomEventStep("cruiser", "inbound", "unknown"),
            RandomEventStep("cruiser", "inbound", "unknown"),
        ),
    ),
    RandomEventDefinition(
        name="battleship_ratter",
        display_name="A battleship ratter jumps out and back",
        probability=0.03,
        steps=(
            RandomEventStep("bs", "outbound", "unknown"),
            RandomEventStep("bs", "inbound", "unknown"),
        ),
    ),
    RandomEventDefinition(
        name="marauder_pair",
        display_name="Two marauders burn through with propulsion hot",
        probability=0.02,
        steps=(
            RandomEventStep("marauder", "inbound", "hot"),
            RandomEventStep("marauder", "inbound", "hot"),
        ),
    ),
    RandomEventDefinition(
        name="carrier_transit",
        display_name="A carrier forces its way through",
        probability=0.01,
        steps=(RandomEventStep("carrier", "inbound", "unknown"),),
    ),
)


class RandomEventInjector:
    """Rolls, filters and executes random events for one game session."""

    def __init__(
        self,
        ship_defs: dict[str, ShipDefinition],
        events: tuple[RandomEventDefinition, ...] = RANDOM_EVENTS,
        probabilities: dict[str, float] | None = None,
    ):
        """
        Args:
            ship_defs: Ship definitions used to build each step's transit
            events: Event table
            probabilities: Per-event overrides by name (tests force 1.0)
        """
        self.ship_defs = ship_defs
        self.events = events
        self.probabilities = dict(probabilities or {})

    def probability(self, event: RandomEventDefinition) -> float:
        return self.probabilities.get(event.name, event.probability)

    def is_eligible(self, event: RandomEventDefinition, restriction: int) -> bool:
        """Every ship in the event must fit through the hole."""
        for step in event.steps:
            ship_def = self.ship_defs.get(step.ship_id)
            if ship_def is None or ship_def.size_class > restriction:
                return False
        return True

    def roll(self, rng, restriction: int) -> list[RandomEventDefinition]:
        """Roll every event once; return the triggered events that are eligible."""
        triggered = [e for e in self.events if rng.random() < self.probability(e)]
        return [e for e in triggered if self.is_eligible(e, restriction)]

    def build_actions(self, event: RandomEventDefinition) -> list[Action]:
        return [
            ship_transit(self.ship_defs[step.ship_id], step.direction, step.mode)
            for step in event.steps
        ]

    def maybe_fire(self, session: "GameSession") -> tuple[GameLogEntry | None, list[SessionEvent]]:
        """
        Run after a player action has been fully resolved.
        Returns one consolidated log entry for the event, or None if nothing fired.
        """
        if session.random_event_occurred or session.current_remaining <= 0:
            return None, []
        if session.status != "playing":
            return None, []

        candidates = self.roll(session.rng, session.restriction)
        if not candidates:
            return None, []

        event = session.rng.choice(candidates)
        session.random_event_occurred = True
        logger.info("Random event fired: %s", event.name)

        events: list[SessionEvent] = [random_event_triggered(
            event.name, event.display_name, [c.name for c in candidates],
        )]

        actions = self.build_actions(event)
        state_before = session.current_state
        executed: list[Action] = []
        impact = MassInterval(0, 0)
        for action in actions:
            _, evts = session.resolve_action(action, source=event.name)
            events.extend(evts)
            executed.append(action)
            low, high = action.mass_range()
            impact = MassInterval(impact.min + low, impact.max + high)
            if session.current_state == "gone":
                break

        skipped = len(actions) - len(executed)
        if skipped:
            logger.info("Random event %s halted: %d step(s) skipped", event.name, skipped)
        events.append(random_event_resolved(
            event.name, len(executed), skipped, session.current_state,
        ))

        entry = GameLogEntry(
            kind="random_event",
            name=event.name,
            actions=tuple(executed),
            displayed=session.display,
            state=session.current_state,
            category=session.transition_category(state_before, session.current_state),
            mass_impact=impact,
            processed=len(executed),
            skipped=skipped,
            far_side=session.far_side.snapshot(),
        )
        return entry, events
