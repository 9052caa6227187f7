"""
Session construction and mode dispatch.

A session is either a TrackerSession or a GameSession. Callers own the session
object; there is no module-level session.
"""

import random
from typing import Union

from backend.engine.actions import Action
from backend.engine.definitions import ShipDefinition
from backend.engine.events import SessionEvent
from backend.engine.game import GameSession
from backend.engine.mass import MassInterval
from backend.engine.random_events import RandomEventInjector
from backend.engine.tracker import TrackerSession

Session = Union[TrackerSession, GameSession]

MODES = ("tracker", "game")


def configure(
    mode: str,
    capacity: int,
    initial_state: str,
    restriction: int,
    ship_defs: dict[str, ShipDefinition],
    initial_far_side: dict[str, int] | None = None,
    rng: random.Random | None = None,
    event_probabilities: dict[str, float] | None = None,
) -> tuple[Session, list[SessionEvent]]:
    """
    Build and start a session.

    Args:
        mode: "tracker" or "game"
        capacity: Base wormhole capacity in Gg
        initial_state: fresh, stable, destab or critical
        restriction: Largest ship size class allowed through (1..5)
        ship_defs: Ship definitions (random events build their transits from these)
        initial_far_side: Ships already stranded before tracking starts, ship_id -> count
        rng: Randomness source; pass a seeded random.Random for reproducible sessions
        event_probabilities: Per-event probability overrides for game mode

    Returns:
        (session, events)
    """
    for ship_id in (initial_far_side or {}):
        if ship_id not in ship_defs:
            raise ValueError(f"Unknown ship type on far side: {ship_id}")

    if mode == "tracker":
        session = TrackerSession(
            capacity, initial_state, restriction, initial_far_side, rng=rng,
        )
    elif mode == "game":
        session = GameSession(
            capacity, initial_state, restriction, initial_far_side, rng=rng,
            injector=RandomEventInjector(ship_defs, probabilities=event_probabilities),
        )
    else:
        raise ValueError(f"Unknown session mode '{mode}'. Expected one of: {', '.join(MODES)}")
    return session, session.start()


def apply_action(session: Session, action: Action) -> list[SessionEvent]:
    """
    Feed one transit into a session.
    Tracker: the action is staged and takes effect at the next commit.
    Game: the action is resolved immediately.
    """
    if isinstance(session, TrackerSession):
        return session.stage(action)
    _, events = session.apply(action)
    return events


def current_display(session: Session) -> MassInterval:
    return session.current_display()


def verdict(session: Session) -> str | None:
    """ "win", "loss", or None while the wormhole is still open."""
    return session.verdict


def is_completed(session: Session) -> bool:
    return session.status == "completed"
