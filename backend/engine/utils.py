"""
Console helpers for the demo script and the interactive CLI.
"""

from backend.engine import WORMHOLE_STATES
from backend.engine.definitions import ShipDefinition
from backend.engine.game import GameSession
from backend.engine.tracker import TrackerSession


def format_mass(interval) -> str:
    d = interval.to_dict()
    return f"{d['min']} - {d['max']} Gg"


def print_session_state(
    session: TrackerSession | GameSession,
    ship_defs: dict[str, ShipDefinition],
) -> None:
    """Print the observer's view of a session."""
    print(f"\n{'='*60}")
    print(
        f"{session.mode.upper()} | {session.profile.base_capacity} Gg | "
        f"State: {WORMHOLE_STATES[session.current_state]} | Status: {session.status}")
    print(f"{'='*60}")
    print(f"Possible Remaining: {format_mass(session.current_display())}")
    print(f"Ships on Far Side: {session.far_side.describe(ship_defs)}")
    if isinstance(session, TrackerSession) and session.staged:
        print("Staged:")
        for i, action in enumerate(session.staged, start=1):
            print(f"  {i}. {action.describe()}")
    if session.verdict:
        print(f"\n*** {session.verdict.upper()} *** {session.completion_message}")
    print()


def print_tracker_log(session: TrackerSession, ship_defs: dict[str, ShipDefinition]) -> None:
    """Print the committed ledger, one block per batch."""
    initial = session.initial_mass_range()
    print(f"\n{'='*70}")
    print(
        f"Initial Setup: {session.profile.base_capacity} Gg wormhole in "
        f"{WORMHOLE_STATES[session.initial_state]} state")
    print(f"Starting Mass Range: {format_mass(initial)}")
    print(f"{'='*70}")

    if not session.ledger:
        print("No actions applied")
        return

    for index, entry in enumerate(session.ledger, start=1):
        print(f"\n--- Applied Actions {index} ---")
        for action in entry.actions:
            print(f"  * {action.describe()}")
        if entry.declared_state != "no-change":
            print(f"  *** STATE CHANGE: Wormhole is now {WORMHOLE_STATES[entry.declared_state]} ***")
        print(f"  Possible Remaining: {format_mass(entry.final_mass)}")
        print(f"  This Entry: ~{round(entry.passed_mass)} Gg passed")
        print(f"  Total Known Passed: ~{round(entry.total_passed_mass)} Gg")
        names = [
            f"{ship_defs[k].display_name if k in ship_defs else k} x{v}"
            for k, v in entry.far_side.items()
        ]
        print(f"  Ships on Far Side: {', '.join(names) if names else 'None'}")


def print_game_log(session: GameSession) -> None:
    """Print the observer-side game log. Hidden masses are never printed."""
    print(f"\n{'='*70}")
    print(f"GAME LOG: {session.profile.base_capacity} Gg wormhole, started {session.initial_state}")
    print(f"{'='*70}")
    for index, entry in enumerate(session.log, start=1):
        if entry.kind == "random_event":
            print(f"\n[{index}] RANDOM EVENT: {entry.name} "
                  f"({entry.processed} processed, {entry.skipped} skipped)")
        else:
            print(f"\n[{index}] {entry.actions[0].describe()}")
        print(f"  Possible Remaining: {format_mass(entry.displayed)}")
        print(f"  State: {WORMHOLE_STATES[entry.state]} ({entry.category})")
