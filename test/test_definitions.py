"""
Tests for static reference data and catalogue lookups.
"""

from backend.engine.definitions import (
    get_all_wormhole_codes,
    get_wormhole_info,
    get_wormholes_by_destination,
    get_wormholes_by_mass_range,
    get_wormholes_by_restriction,
)
from backend.engine.queries import get_eligible_ships


def test_definitions_loaded(ship_defs, wormhole_defs, special_defs, restriction_levels):
    assert set(ship_defs) == {"rbs", "rhic", "carrier", "bs", "marauder", "cruiser"}
    assert len(wormhole_defs) == 96
    assert set(special_defs) == {"K162", "⛮"}
    assert restriction_levels[5] == "up to Capital"


def test_ship_mass_ranges(ship_defs):
    bs = ship_defs["bs"]
    assert bs.mass_range("unknown") == (100, 150)
    assert bs.mass_range("cold") == (100, 100)
    assert bs.mass_range("hot") == (150, 150)


def test_b274_info(wormhole_defs, special_defs, restriction_levels):
    info = get_wormhole_info("B274", wormhole_defs, special_defs, restriction_levels)
    assert info == {
        "code": "B274",
        "total_mass": 2000,
        "restriction": 3,
        "restriction_text": "up to Battleship",
        "destination": "HS",
        "special": None,
    }


def test_z971_info(wormhole_defs, special_defs, restriction_levels):
    info = get_wormhole_info("Z971", wormhole_defs, special_defs, restriction_levels)
    assert info["total_mass"] == 100
    assert info["restriction_text"] == "up to Battlecruiser"
    assert info["destination"] == "C1"


def test_special_wormhole_info(wormhole_defs, special_defs, restriction_levels):
    info = get_wormhole_info("K162", wormhole_defs, special_defs, restriction_levels)
    assert info["special"] == "Exit hole - varies by origin"
    assert info["restriction_text"] == "Variable"


def test_unknown_code(wormhole_defs, special_defs, restriction_levels):
    assert get_wormhole_info("Q000", wormhole_defs, special_defs, restriction_levels) is None
    assert get_wormhole_info("", wormhole_defs, special_defs, restriction_levels) is None
    assert get_wormhole_info(None, wormhole_defs, special_defs, restriction_levels) is None


def test_all_codes(wormhole_defs, special_defs):
    codes = get_all_wormhole_codes(wormhole_defs, special_defs)
    assert len(codes) == 98
    assert codes == sorted(codes)
    assert "K162" in codes and "B274" in codes


def test_filters(wormhole_defs):
    assert "A009" in get_wormholes_by_restriction(1, wormhole_defs)
    assert "B274" not in get_wormholes_by_restriction(1, wormhole_defs)

    highsec = get_wormholes_by_destination("HS", wormhole_defs)
    assert {"B274", "D845"} <= set(highsec)
    assert all(wormhole_defs[c].destination == "HS" for c in highsec)

    small = get_wormholes_by_mass_range(100, 100, wormhole_defs)
    assert {"Z971", "F353"} <= set(small)
    assert "B274" not in small


def test_eligible_ships(ship_defs):
    assert {s.id for s in get_eligible_ships(ship_defs, 2)} == {"rhic", "cruiser"}
    assert len(get_eligible_ships(ship_defs, 5)) == len(ship_defs)
