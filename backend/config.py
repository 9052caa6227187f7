"""
Single place for default tracker/game configuration.
Change these to switch what a session uses when the caller leaves a field out.
"""
# Base capacity in Gg; must be one of backend.engine.WORMHOLE_MASS_TYPES.
DEFAULT_WORMHOLE_CAPACITY = 3300
DEFAULT_INITIAL_STATE = "fresh"
# Restriction level 1..5 (5 = capital ships allowed).
DEFAULT_RESTRICTION = 5
DEFAULT_SHIP_ID = "rbs"
DEFAULT_SHIP_MODE = "unknown"
