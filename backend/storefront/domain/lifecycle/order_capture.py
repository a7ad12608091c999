from enum import Enum
from typing import Dict, Set

from storefront.domain.invariants.exceptions import IllegalTransition


class CaptureState(str, Enum):
    IDLE = "idle"
    VARIANT_CHOSEN = "variant_chosen"
    FILLING = "filling"
    SUBMITTING = "submitting"
    CONFIRMED = "confirmed"
    FAILED = "failed"


# Filling is sticky: once entered, edits and re-selection stay in it.
ALLOWED_CAPTURE_TRANSITIONS: Dict[CaptureState, Set[CaptureState]] = {
    CaptureState.IDLE: {CaptureState.VARIANT_CHOSEN},
    CaptureState.VARIANT_CHOSEN: {
        CaptureState.VARIANT_CHOSEN,
        CaptureState.FILLING,
        CaptureState.SUBMITTING,
    },
    CaptureState.FILLING: {CaptureState.FILLING, CaptureState.SUBMITTING},
    CaptureState.SUBMITTING: {CaptureState.CONFIRMED, CaptureState.FAILED},
    CaptureState.FAILED: {CaptureState.FILLING},
    CaptureState.CONFIRMED: set(),  # terminal
}


def assert_capture_transition(*, from_state: CaptureState, to_state: CaptureState) -> None:
    allowed = ALLOWED_CAPTURE_TRANSITIONS.get(from_state, set())

    if to_state not in allowed:
        raise IllegalTransition(
            f"Illegal order capture transition: {from_state.value} -> {to_state.value}"
        )
