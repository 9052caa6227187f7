"""
Session events for UI hooks and logging.
Events describe what happened while a command was processed.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class SessionEvent:
    """Base event class. All events have a type and payload."""
    type: str
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": self.payload}


# ===== Event Type Constants =====

# Lifecycle events
SESSION_CONFIGURED = "session_configured"
SESSION_COMPLETED = "session_completed"

# Tracker events
ACTION_STAGED = "action_staged"
ACTION_UNSTAGED = "action_unstaged"
BATCH_COMMITTED = "batch_committed"
COMMIT_SKIPPED = "commit_skipped"

# Game events
ACTION_APPLIED = "action_applied"
STATE_CHANGED = "state_changed"
RANDOM_EVENT_TRIGGERED = "random_event_triggered"
RANDOM_EVENT_RESOLVED = "random_event_resolved"

# Far side events
FAR_SIDE_CHANGED = "far_side_changed"


# Transition categories, keyed by the state a wormhole moves into
TRANSITION_CATEGORIES = {
    "gone": "collapse",
    "critical": "critical",
    "destab": "destab",
    "stable": "stabilize",
}

TRANSITION_MESSAGES = {
    "collapse": "Wormhole collapsed!",
    "critical": "Wormhole is now critical - less than 10% of its mass remains",
    "destab": "Wormhole has destabilized - less than half of its mass remains",
    "stabilize": "Wormhole has stabilized",
    "no-change": "No visible change",
}


# ===== Event Factory Functions =====

def session_configured(
    mode: str,
    capacity: int,
    initial_state: str,
    restriction: int,
    far_side: dict[str, int],
) -> SessionEvent:
    return SessionEvent(SESSION_CONFIGURED, {
        "mode": mode,
        "capacity": capacity,
        "initial_state": initial_state,
        "restriction": restriction,
        "far_side": far_side,
    })


def session_completed(verdict: str, far_side: dict[str, int], message: str) -> SessionEvent:
    """Emitted once when the wormhole is gone. verdict is "win" or "loss"."""
    return SessionEvent(SESSION_COMPLETED, {
        "verdict": verdict,
        "far_side": far_side,
        "message": message,
    })


def action_staged(index: int, action: dict[str, Any]) -> SessionEvent:
    return SessionEvent(ACTION_STAGED, {"index": index, "action": action})


def action_unstaged(index: int, action: dict[str, Any]) -> SessionEvent:
    return SessionEvent(ACTION_UNSTAGED, {"index": index, "action": action})


def batch_committed(
    entry_index: int,
    action_count: int,
    declared_state: str,
    final_mass: dict[str, int],
    passed_mass: float,
    total_passed_mass: float,
) -> SessionEvent:
    return SessionEvent(BATCH_COMMITTED, {
        "entry_index": entry_index,
        "action_count": action_count,
        "declared_state": declared_state,
        "final_mass": final_mass,
        "passed_mass": passed_mass,
        "total_passed_mass": total_passed_mass,
    })


def commit_skipped(reason: str) -> SessionEvent:
    return SessionEvent(COMMIT_SKIPPED, {"reason": reason})


def action_applied(
    action: dict[str, Any],
    displayed: dict[str, int],
    state: str,
    source: str,  # "player" or the random event name
) -> SessionEvent:
    """The hidden mass resolved for the action is deliberately not part of the payload."""
    return SessionEvent(ACTION_APPLIED, {
        "action": action,
        "displayed": displayed,
        "state": state,
        "source": source,
    })


def state_changed(old_state: str, new_state: str, category: str) -> SessionEvent:
    return SessionEvent(STATE_CHANGED, {
        "old_state": old_state,
        "new_state": new_state,
        "category": category,
        "message": TRANSITION_MESSAGES[category],
    })


def random_event_triggered(name: str, display_name: str, candidates: list[str]) -> SessionEvent:
    return SessionEvent(RANDOM_EVENT_TRIGGERED, {
        "name": name,
        "display_name": display_name,
        "candidates": candidates,  # every valid event that rolled true
    })


def random_event_resolved(
    name: str,
    processed: int,
    skipped: int,
    final_state: str,
) -> SessionEvent:
    return SessionEvent(RANDOM_EVENT_RESOLVED, {
        "name": name,
        "processed": processed,
        "skipped": skipped,
        "final_state": final_state,
    })


def far_side_changed(ship_id: str, old_count: int, new_count: int) -> SessionEvent:
    return SessionEvent(FAR_SIDE_CHANGED, {
        "ship_id": ship_id,
        "old_count": old_count,
        "new_count": new_count,
        "change": new_count - old_count,
    })
