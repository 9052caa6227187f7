"""
Static definitions for ships and wormhole types.
All reference data lives under data/: ships.json, wormholes.json, special_wormholes.json
and restrictions.json. Loaded once at startup and treated as read-only.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DATA_DIR = Path(__file__).parent.parent / "data"


@dataclass(frozen=True)
class ShipDefinition:
    """Defines immutable mass properties of a ship type."""
    id: str
    display_name: str
    cold_mass: int  # Mass with propulsion offline (lower bound)
    hot_mass: int  # Mass with propulsion overheated (upper bound)
    size_class: int  # 1..5, compared against a wormhole's restriction level

    def mass_range(self, mode: str) -> tuple[int, int]:
        """
        (min, max) mass for a knowledge mode.
        "unknown" is the full [cold, hot] range; cold/hot are exact.
        """
        if mode == "unknown":
            return (self.cold_mass, self.hot_mass)
        if mode == "cold":
            return (self.cold_mass, self.cold_mass)
        if mode == "hot":
            return (self.hot_mass, self.hot_mass)
        raise ValueError(f"Unknown ship mode: {mode}")


@dataclass(frozen=True)
class WormholeDefinition:
    """Defines immutable properties of a wormhole type (e.g. B274)."""
    id: str
    total_mass: int  # Base capacity in Gg
    restriction: int  # Largest ship size class allowed through
    destination: str  # "HS", "LS", "NS", "C1".."C6", "Thera", ...
    special: Optional[str] = None  # Note for non-standard holes like K162


def load_static_definitions(
    data_dir: Path | str | None = None,
) -> tuple[
    dict[str, ShipDefinition],
    dict[str, WormholeDefinition],
    dict[str, WormholeDefinition],
    dict[int, str],
]:
    """
    Load static definitions (ships, wormholes, special wormholes, restriction texts).

    Args:
        data_dir: Path to directory containing the JSON files. Defaults to backend/data.

    Returns: (ship_definitions, wormhole_definitions, special_wormhole_definitions, restriction_levels)
    """
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIR

    # Load ships
    with open(data_dir / "ships.json", "r") as f:
        ships_data = json.load(f)

    ships = {}
    for ship_id, data in ships_data.items():
        ships[ship_id] = ShipDefinition(
            id=data["id"],
            display_name=data["display_name"],
            cold_mass=data["cold_mass"],
            hot_mass=data["hot_mass"],
            size_class=data["size_class"],
        )

    # Load wormholes
    with open(data_dir / "wormholes.json", "r") as f:
        wormholes_data = json.load(f)

    wormholes = {}
    for code, data in wormholes_data.items():
        wormholes[code] = WormholeDefinition(
            id=data["id"],
            total_mass=data["total_mass"],
            restriction=data["restriction"],
            destination=data["destination"],
        )

    # Special wormholes (exit holes, drifter holes); optional
    specials = {}
    specials_path = data_dir / "special_wormholes.json"
    if specials_path.exists():
        with open(specials_path, "r", encoding="utf-8") as f:
            specials_data = json.load(f)
        for code, data in specials_data.items():
            specials[code] = WormholeDefinition(
                id=data["id"],
                total_mass=data["total_mass"],
                restriction=data["restriction"],
                destination=data["destination"],
                special=data.get("special"),
            )

    with open(data_dir / "restrictions.json", "r") as f:
        restriction_levels = {int(k): v for k, v in json.load(f).items()}

    return ships, wormholes, specials, restriction_levels


# ===== Catalogue lookups =====

def get_wormhole_info(
    code: str | None,
    wormhole_defs: dict[str, WormholeDefinition],
    special_defs: dict[str, WormholeDefinition],
    restriction_levels: dict[int, str],
) -> dict | None:
    """Plain-data info for a wormhole code, or None if the code is unknown."""
    if not code:
        return None
    wh = wormhole_defs.get(code) or special_defs.get(code)
    if wh is None:
        return None
    return {
        "code": code,
        "total_mass": wh.total_mass,
        "restriction": wh.restriction,
        "restriction_text": restriction_levels.get(wh.restriction, "Variable"),
        "destination": wh.destination,
        "special": wh.special,
    }


def get_all_wormhole_codes(
    wormhole_defs: dict[str, WormholeDefinition],
    special_defs: dict[str, WormholeDefinition],
) -> list[str]:
    return sorted([*wormhole_defs.keys(), *special_defs.keys()])


def get_wormholes_by_restriction(
    restriction_level: int,
    wormhole_defs: dict[str, WormholeDefinition],
) -> list[str]:
    return [code for code, wh in wormhole_defs.items() if wh.restriction == restriction_level]


def get_wormholes_by_destination(
    destination: str,
    wormhole_defs: dict[str, WormholeDefinition],
) -> list[str]:
    return [code for code, wh in wormhole_defs.items() if wh.destination == destination]


def get_wormholes_by_mass_range(
    min_mass: int,
    max_mass: int,
    wormhole_defs: dict[str, WormholeDefinition],
) -> list[str]:
    """Codes whose total mass lies in [min_mass, max_mass] (inclusive)."""
    return [
        code for code, wh in wormhole_defs.items()
        if min_mass <= wh.total_mass <= max_mass
    ]
