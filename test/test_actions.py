"""
Tests for transit construction, descriptions and input validation.
"""

import pytest

from backend.engine.actions import Action, ship_transit, custom_transit
from backend.engine.queries import validate_custom_mass
from backend.engine.reducer import check_restriction, passed_mass_estimate


def test_unknown_ship_description(ship_defs):
    action = ship_transit(ship_defs["bs"], "inbound", "unknown")
    assert action.describe() == "<< Incoming - Battleship (Unknown) -100 (min) / -150 (max) Gg"
    assert action.mass_range() == (100, 150)
    assert not action.is_exact


def test_hot_ship_description(ship_defs):
    action = ship_transit(ship_defs["rbs"], "outbound", "hot")
    assert action.describe() == "Outgoing >> - Rolling Battleship (Hot) -300 Gg"
    assert action.is_exact


def test_custom_description():
    action = custom_transit(500, "outbound")
    assert action.describe() == "Outgoing >> - Custom -500 Gg"
    assert action.ship_key is None
    assert action.mass_range() == (500, 500)


def test_action_to_dict(ship_defs):
    data = ship_transit(ship_defs["cruiser"], "inbound", "unknown").to_dict()
    assert data["ship_id"] == "cruiser"
    assert data["mass_min"] == 13
    assert data["mass_max"] == 63
    assert data["custom_mass"] is None


@pytest.mark.parametrize("mass", [0, -5, float("inf"), float("nan"), "12", None, True])
def test_custom_transit_rejects_invalid_mass(mass):
    with pytest.raises(ValueError, match="valid custom mass"):
        custom_transit(mass, "inbound")


def test_bad_direction_rejected(ship_defs):
    with pytest.raises(ValueError):
        ship_transit(ship_defs["bs"], "sideways", "cold")
    with pytest.raises(ValueError):
        custom_transit(10, "up")


def test_ship_transit_rejects_custom_mode(ship_defs):
    with pytest.raises(ValueError):
        ship_transit(ship_defs["bs"], "inbound", "custom")


@pytest.mark.parametrize("raw", ["abc", "", "-5", "0", "nan", "inf", None, True])
def test_validate_custom_mass_rejects(raw):
    result = validate_custom_mass(raw)
    assert not result.valid
    assert result.error == "Please enter a valid custom mass value"


def test_validate_custom_mass_accepts_numeric_text():
    result = validate_custom_mass("12.5")
    assert result.valid
    assert result.value == 12.5


def test_restriction_check(ship_defs):
    check_restriction(ship_transit(ship_defs["cruiser"], "inbound", "cold"), 2)
    check_restriction(custom_transit(5000, "inbound"), 1)
    with pytest.raises(ValueError, match="restriction level 3"):
        check_restriction(ship_transit(ship_defs["carrier"], "inbound", "cold"), 3)


def test_passed_mass_estimate(ship_defs):
    assert passed_mass_estimate(ship_transit(ship_defs["bs"], "inbound", "unknown")) == 125
    assert passed_mass_estimate(ship_transit(ship_defs["bs"], "inbound", "hot")) == 150
    assert passed_mass_estimate(Action("outbound", "custom", custom_mass=42)) == 42
