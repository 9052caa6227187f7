"""
Tests for tracker mode: staging, batch commits, declared states and the far-side ledger.
"""

import pytest

from backend.engine.actions import ship_transit, custom_transit
from backend.engine.events import BATCH_COMMITTED, COMMIT_SKIPPED, FAR_SIDE_CHANGED, SESSION_COMPLETED
from backend.engine.mass import MassInterval
from backend.engine.messages import SUCCESS_MESSAGES, FAILURE_MESSAGES
from backend.engine.queries import get_available_commands, get_declarable_states, get_session_summary
from backend.engine.session import configure, apply_action, current_display, verdict, is_completed
from backend.engine.state import FarSideLedger
from backend.engine.tracker import TrackerSession


@pytest.fixture
def tracker(ship_defs):
    session, _ = configure("tracker", 3000, "fresh", 5, ship_defs)
    return session


def event_types(events):
    return [e.type for e in events]


def test_configure_starts_tracking(ship_defs):
    session, events = configure("tracker", 3000, "fresh", 5, ship_defs)
    assert isinstance(session, TrackerSession)
    assert session.status == "tracking"
    assert event_types(events) == ["session_configured"]
    assert current_display(session) == MassInterval(2700, 3300)


@pytest.mark.parametrize("state, expected", [
    ("stable", MassInterval(1350, 3300)),
    ("destab", MassInterval(270, 1650)),
    ("critical", MassInterval(0, 330)),
])
def test_initial_range_for_declared_state(ship_defs, state, expected):
    session, _ = configure("tracker", 3000, state, 5, ship_defs)
    assert session.initial_mass_range() == expected


def test_cannot_start_gone(ship_defs):
    with pytest.raises(ValueError):
        configure("tracker", 3000, "gone", 5, ship_defs)


def test_configure_validation(ship_defs):
    with pytest.raises(ValueError):
        configure("tracker", 3000, "fresh", 0, ship_defs)
    with pytest.raises(ValueError):
        configure("tracker", 1234, "fresh", 5, ship_defs)
    with pytest.raises(ValueError):
        configure("sandbox", 3000, "fresh", 5, ship_defs)
    with pytest.raises(ValueError):
        configure("tracker", 3000, "fresh", 5, ship_defs, initial_far_side={"titan": 1})


def test_staging_has_no_mass_effect(tracker, ship_defs):
    apply_action(tracker, ship_transit(ship_defs["bs"], "inbound", "unknown"))
    assert len(tracker.staged) == 1
    assert tracker.current_display() == MassInterval(2700, 3300)
    assert tracker.ledger == []


def test_commit_no_change(tracker, ship_defs):
    tracker.stage(ship_transit(ship_defs["bs"], "inbound", "unknown"))
    tracker.stage(ship_transit(ship_defs["bs"], "inbound", "hot"))
    result, events = tracker.commit("no-change")

    assert result.applied
    assert result.message == "Applied 2 action(s) with no state change"
    assert tracker.current_display().to_dict() == {"min": 2400, "max": 3050}
    assert tracker.current_state == "fresh"
    assert tracker.staged == []
    assert BATCH_COMMITTED in event_types(events)

    entry = tracker.ledger[-1]
    assert entry.passed_mass == 275
    assert entry.total_passed_mass == 275
    assert entry.declared_state == "no-change"
    assert entry.resulting_state == "fresh"


def test_passed_mass_accumulates(tracker, ship_defs):
    tracker.stage(ship_transit(ship_defs["bs"], "inbound", "unknown"))
    tracker.commit("no-change")
    tracker.stage(custom_transit(25, "outbound"))
    tracker.commit("no-change")
    assert tracker.ledger[-1].passed_mass == 25
    assert tracker.total_passed_mass() == 150


def test_declared_state_clamps_batch_once(tracker, ship_defs):
    rbs_hot = ship_transit(ship_defs["rbs"], "outbound", "hot")
    tracker.stage(rbs_hot)
    tracker.stage(ship_transit(ship_defs["rbs"], "inbound", "hot"))
    result, _ = tracker.commit("destab")

    assert result.message == "Applied 2 action(s) with destabilized"
    assert tracker.current_state == "destab"
    assert tracker.current_display() == MassInterval(1650, 1650)


def test_no_change_keeps_previous_declared_state(tracker, ship_defs):
    tracker.stage(custom_transit(1600, "outbound"))
    tracker.commit("destab")
    tracker.stage(custom_transit(100, "outbound"))
    tracker.commit("no-change")
    assert tracker.current_state == "destab"
    assert tracker.ledger[-1].resulting_state == "destab"
    assert tracker.current_display() == MassInterval(1000, 1550)


def test_empty_commit_is_a_no_op(tracker):
    result, events = tracker.commit("destab")
    assert not result.applied
    assert result.message == "No actions to apply"
    assert event_types(events) == [COMMIT_SKIPPED]
    assert tracker.ledger == []
    assert tracker.current_state == "fresh"


def test_invalid_declared_state(tracker):
    with pytest.raises(ValueError):
        tracker.commit("fresh")


def test_unstage(tracker, ship_defs):
    tracker.stage(ship_transit(ship_defs["bs"], "inbound", "unknown"))
    tracker.stage(custom_transit(10, "inbound"))
    events = tracker.unstage(0)
    assert event_types(events) == ["action_unstaged"]
    assert [a.mode for a in tracker.staged] == ["custom"]
    with pytest.raises(ValueError):
        tracker.unstage(3)


def test_restriction_enforced_on_stage(ship_defs):
    session, _ = configure("tracker", 2000, "fresh", 2, ship_defs)
    with pytest.raises(ValueError):
        session.stage(ship_transit(ship_defs["carrier"], "outbound", "cold"))
    session.stage(ship_transit(ship_defs["rhic"], "outbound", "cold"))
    assert len(session.staged) == 1


def test_gone_collapses_to_zero_and_wins(ship_defs):
    session, _ = configure("tracker", 1000, "fresh", 5, ship_defs)
    session.stage(custom_transit(1200, "outbound"))
    result, events = session.commit("gone")

    assert result.message == "Applied 1 action(s) with wormhole gone"
    assert session.current_display() == MassInterval(0, 0)
    assert is_completed(session)
    assert verdict(session) == "win"
    assert session.completion_message in SUCCESS_MESSAGES
    assert event_types(events)[-1] == SESSION_COMPLETED


def test_gone_with_ship_stranded_is_a_loss(ship_defs):
    session, _ = configure("tracker", 1000, "fresh", 5, ship_defs)
    session.stage(ship_transit(ship_defs["bs"], "outbound", "hot"))
    session.stage(custom_transit(1200, "outbound"))
    session.commit("gone")

    assert session.verdict == "loss"
    assert session.far_side.snapshot() == {"bs": 1}
    assert session.completion_message in FAILURE_MESSAGES


def test_seeded_far_side_brought_home(ship_defs):
    session, _ = configure("tracker", 1000, "fresh", 5, ship_defs, initial_far_side={"bs": 1})
    session.stage(ship_transit(ship_defs["bs"], "inbound", "unknown"))
    session.stage(custom_transit(2000, "outbound"))
    session.commit("gone")
    assert session.verdict == "win"


def test_far_side_updates_on_commit(tracker, ship_defs):
    tracker.stage(ship_transit(ship_defs["rbs"], "outbound", "cold"))
    tracker.stage(ship_transit(ship_defs["rbs"], "outbound", "cold"))
    assert tracker.far_side.is_empty()

    _, events = tracker.commit("no-change")
    assert tracker.far_side.snapshot() == {"rbs": 2}
    assert event_types(events).count(FAR_SIDE_CHANGED) == 2
    assert tracker.ledger[-1].far_side == {"rbs": 2}
    assert tracker.far_side.describe(ship_defs) == "Rolling Battleship x2"


def test_inbound_without_outbound_stays_at_zero(tracker, ship_defs):
    tracker.stage(ship_transit(ship_defs["rbs"], "inbound", "cold"))
    _, events = tracker.commit("no-change")
    assert tracker.far_side.snapshot() == {}
    assert FAR_SIDE_CHANGED not in event_types(events)


def test_custom_transit_never_touches_far_side(tracker):
    tracker.stage(custom_transit(100, "outbound"))
    tracker.commit("no-change")
    assert tracker.far_side.is_empty()


def test_completed_session_rejects_commands(ship_defs):
    session, _ = configure("tracker", 100, "fresh", 5, ship_defs)
    session.stage(custom_transit(500, "outbound"))
    session.commit("gone")
    with pytest.raises(ValueError):
        session.stage(custom_transit(5, "outbound"))
    with pytest.raises(ValueError):
        session.commit("no-change")
    assert get_available_commands(session) == ["reset"]


def test_available_commands(tracker, ship_defs):
    assert get_available_commands(None) == ["configure"]
    assert get_available_commands(tracker) == ["stage", "reset"]
    tracker.stage(custom_transit(5, "outbound"))
    assert get_available_commands(tracker) == ["stage", "unstage", "commit", "reset"]


def test_declarable_states(tracker):
    assert get_declarable_states(tracker) == ["no-change", "destab", "critical", "gone"]
    tracker.stage(custom_transit(2000, "outbound"))
    tracker.commit("destab")
    assert get_declarable_states(tracker) == ["no-change", "critical", "gone"]


def test_display_always_ordered(tracker, ship_defs):
    for state in ["no-change", "destab", "no-change", "critical", "no-change"]:
        tracker.stage(ship_transit(ship_defs["rbs"], "outbound", "unknown"))
        tracker.stage(ship_transit(ship_defs["rbs"], "inbound", "hot"))
        tracker.commit(state)
        display = tracker.current_display()
        assert 0 <= display.min <= display.max


def test_snapshot(tracker, ship_defs):
    tracker.stage(ship_transit(ship_defs["bs"], "outbound", "cold"))
    snap = tracker.snapshot(ship_defs)
    assert snap["mode"] == "tracker"
    assert snap["display"] == {"min": 2700, "max": 3300}
    assert len(snap["staged"]) == 1
    assert snap["far_side_text"] == "None"


def test_session_summary(tracker, ship_defs):
    tracker.stage(custom_transit(5, "outbound"))
    summary = get_session_summary(tracker, ship_defs)
    assert summary["mode"] == "tracker"
    assert summary["staged"] == 1
    assert summary["entries"] == 0
    assert summary["display"] == {"min": 2700, "max": 3300}


def test_far_side_ledger_parsing():
    ledger = FarSideLedger.from_dict({"bs": 2, "rbs": 0, "rhic": "x", "cruiser": -1})
    assert ledger.snapshot() == {"bs": 2}
    assert ledger.decrement("bs") == (2, 1)
    assert ledger.decrement("bs") == (1, 0)
    assert ledger.decrement("bs") == (0, 0)
    assert ledger.is_empty()


def test_declaring_fresh_clamps_to_stable_band(ship_defs):
    session, _ = configure("tracker", 1000, "destab", 5, ship_defs)
    session.stage(custom_transit(10, "inbound"))
    result, _ = session.commit("fresh")
    assert result.applied
    assert result.message == "Applied 1 action(s) with fresh"
    assert session.current_state == "fresh"
    assert session.current_display() == MassInterval(450, 540)


@pytest.mark.parametrize("restriction", [0, 6, "3", None])
def test_constructor_rejects_bad_restriction(restriction):
    with pytest.raises(ValueError, match="Restriction level"):
        TrackerSession(1000, restriction=restriction)
