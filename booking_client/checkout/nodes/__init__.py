from __future__ import annotations

from booking_client.checkout.state import CheckoutState
from booking_client.utils.errors import error_to_message, error_to_notice


def fail(state: CheckoutState, exc: BaseException) -> CheckoutState:
    """Record a failed step; the graph routes any state with `error` to the end."""
    state["status"] = "failed"
    state["error"] = error_to_message(exc)
    state["notice"] = error_to_notice(exc)
    state["next_node"] = None
    return state
