"""
Wormhole Rolling Engine
V1 - Mass-interval tracking and state-transition core without web framework or UI
"""

VARIANCE_FRACTION = 0.1

# Display-only range for a collapsed wormhole. Not a real mass.
GONE_SENTINEL = (-5000, 0)

WORMHOLE_MASS_TYPES = [100, 500, 750, 1000, 2000, 3000, 3300, 5000]

# Ordered by severity. "fresh" is a display alias of "stable".
WORMHOLE_STATES = {
    "fresh": "Fresh",
    "stable": "Stable",
    "destab": "Destab",
    "critical": "Critical",
    "gone": "Gone",
}

SHIP_MODES = {
    "cold": "Cold",
    "unknown": "Unknown",
    "hot": "Hot",
    "custom": "Custom",
}
