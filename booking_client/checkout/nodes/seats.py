from __future__ import annotations

import logging

from booking_client.checkout.nodes import fail
from booking_client.checkout.state import CheckoutState
from booking_client.utils.errors import BookingError

logger = logging.getLogger("booking.checkout.seats")


async def confirm_seats(state: CheckoutState) -> CheckoutState:
    """
    Mandatory server-side revalidation of the drafted seats right before the
    ticket is created. A conflict refreshes the inventory's status feed.
    """
    if state.get("ticket_id"):
        # resumed after the ticket already exists; the seats were checked then
        state["next_node"] = "ticket"
        return state

    draft = state["draft"]
    inventory = state["services"].inventory
    seat_ids = [seat.id for seat in draft.seats]
    try:
        inventory.validate_availability(seat_ids, draft.showtime.id, strict=True)
    except BookingError as exc:
        logger.info("Seats %s no longer available for showtime %s", seat_ids, draft.showtime.id)
        return fail(state, exc)

    state["status"] = "seats_confirmed"
    state["next_node"] = "ticket"
    return state
