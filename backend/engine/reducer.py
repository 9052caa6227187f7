"""
Action engine.
Applies a single transit to a mass interval, optionally clamping to a state's
boundaries, and applies the far-side side effect of its direction.
"""

from backend.engine.actions import Action
from backend.engine.events import SessionEvent, far_side_changed
from backend.engine.mass import MassInterval, WormholeProfile, subtract, clamp
from backend.engine.state import FarSideLedger


def apply_action(
    interval: MassInterval,
    action: Action,
    boundaries: MassInterval | None = None,
) -> MassInterval:
    """
    Apply a single transit to an interval.

    Args:
        interval: Current remaining-mass interval
        action: Transit to apply
        boundaries: State boundaries to clamp to. None gives the raw, unclamped result.

    Returns:
        New interval (min <= max, both >= 0 unless clamped to the gone sentinel)
    """
    new_interval = subtract(interval, action.mass_range())
    if boundaries is not None:
        new_interval = clamp(new_interval, boundaries)
    return new_interval


def apply_action_raw(interval: MassInterval, action: Action) -> MassInterval:
    """Used for tracker batches: the clamp is applied once, after the whole batch."""
    return apply_action(interval, action, None)


def apply_action_clamped(
    interval: MassInterval,
    action: Action,
    profile: WormholeProfile,
    state: str,
) -> MassInterval:
    """Used for live game actions: clamped immediately since the display updates every step."""
    return apply_action(interval, action, profile.state_boundaries(state))


def apply_batch(interval: MassInterval, actions: list[Action]) -> MassInterval:
    for action in actions:
        interval = apply_action_raw(interval, action)
    return interval


def check_restriction_level(restriction: int) -> None:
    if isinstance(restriction, bool) or not isinstance(restriction, int) or not 1 <= restriction <= 5:
        raise ValueError(f"Restriction level must be between 1 and 5, not {restriction}")


def check_restriction(action: Action, restriction: int) -> None:
    """Raise if the ship is too large for the hole. Custom-mass transits are not checked."""
    if action.ship is not None and action.ship.size_class > restriction:
        raise ValueError(
            f"{action.ship.display_name} (size class {action.ship.size_class}) "
            f"cannot pass a restriction level {restriction} wormhole"
        )


def passed_mass_estimate(action: Action) -> float:
    """
    Mass logged as "passed" for a transit: exact when known, otherwise the midpoint
    of [cold, hot]. An estimate for the log only; never fed back into interval math.
    """
    low, high = action.mass_range()
    if low == high:
        return low
    return (low + high) / 2


def apply_far_side(ledger: FarSideLedger, action: Action) -> list[SessionEvent]:
    """Outbound increments the ship type's count, inbound decrements it (floor 0)."""
    change = ledger.record(action)
    if change is None:
        return []
    old, new = change
    if old == new:
        return []
    return [far_side_changed(action.ship_key, old, new)]
