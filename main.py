"""
Main entry point for the Wormhole Rolling Engine.
Demonstrates core functionality with a tracker scenario and a seeded game.
"""

import logging
import random

from backend.engine.actions import ship_transit, custom_transit
from backend.engine.definitions import load_static_definitions
from backend.engine.reducer import apply_action
from backend.engine.mass import WormholeProfile
from backend.engine.session import configure
from backend.engine.utils import (
    format_mass,
    print_session_state,
    print_tracker_log,
    print_game_log,
)


def main():
    print("Wormhole Rolling Engine - V1")
    print("=" * 60)

    ship_defs, wormhole_defs, _, restriction_levels = load_static_definitions()

    # ===== SCENARIO 1: Raw interval arithmetic =====
    print("\n[SCENARIO 1: Interval Arithmetic on a Fresh 3000 Gg Hole]")
    profile = WormholeProfile(3000)
    mass = profile.display_range("fresh")
    print(f"Fresh range: {format_mass(mass)}")

    bs_unknown = ship_transit(ship_defs["bs"], "inbound", "unknown")
    mass = apply_action(mass, bs_unknown)
    print(f"After {bs_unknown.describe()}: {format_mass(mass)}")

    bs_hot = ship_transit(ship_defs["bs"], "inbound", "hot")
    mass = apply_action(mass, bs_hot)
    print(f"After {bs_hot.describe()}: {format_mass(mass)}")

    # ===== SCENARIO 2: Tracker session =====
    print("\n[SCENARIO 2: Tracker Session on B274]")
    wh = wormhole_defs["B274"]
    print(f"B274: {wh.total_mass} Gg, {restriction_levels[wh.restriction]}, to {wh.destination}")

    tracker, _ = configure("tracker", wh.total_mass, "fresh", wh.restriction, ship_defs)
    tracker.stage(ship_transit(ship_defs["rbs"], "outbound", "hot"))
    tracker.stage(ship_transit(ship_defs["rbs"], "inbound", "hot"))
    result, _ = tracker.commit("no-change")
    print(f"✓ {result.message}")

    tracker.stage(ship_transit(ship_defs["rbs"], "outbound", "hot"))
    tracker.stage(ship_transit(ship_defs["rbs"], "inbound", "hot"))
    result, _ = tracker.commit("destab")
    print(f"✓ {result.message}")

    tracker.stage(ship_transit(ship_defs["rbs"], "outbound", "cold"))
    tracker.stage(ship_transit(ship_defs["rbs"], "inbound", "hot"))
    tracker.stage(custom_transit(100, "outbound"))
    result, _ = tracker.commit("gone")
    print(f"✓ {result.message}")

    print_tracker_log(tracker, ship_defs)
    print_session_state(tracker, ship_defs)

    # ===== SCENARIO 3: Seeded game session =====
    print("\n[SCENARIO 3: Game Session (seed 7)]")
    game, _ = configure("game", 2000, "fresh", 3, ship_defs, rng=random.Random(7))
    rbs = ship_defs["rbs"]
    direction = "outbound"
    while game.status != "completed":
        _, events = game.apply_player_action(direction, rbs, "hot")
        for event in events:
            if event.type in ("state_changed", "random_event_triggered"):
                print(f"  {event.type}: {event.payload}")
        direction = "inbound" if direction == "outbound" else "outbound"

    print_game_log(game)
    print_session_state(game, ship_defs)
    print(f"Revealed: {game.snapshot()['revealed']}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)
    main()
