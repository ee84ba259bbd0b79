from __future__ import annotations

import logging

from booking_client.checkout.nodes import fail
from booking_client.checkout.state import CheckoutState
from booking_client.schemas import PaymentMethod
from booking_client.utils.errors import BookingError

logger = logging.getLogger("booking.checkout.ticket")


async def create_ticket(state: CheckoutState) -> CheckoutState:
    draft = state["draft"]

    if not state.get("ticket_id"):
        try:
            ticket = state["services"].submitter.submit(draft)
        except BookingError as exc:
            return fail(state, exc)
        state["ticket"] = ticket
        state["ticket_id"] = ticket.id
    else:
        logger.info("Reusing ticket %s for order %s", state["ticket_id"], draft.order_id)

    state["status"] = "pending_payment"
    if draft.payment_method is not PaymentMethod.STRIPE:
        # cash is settled at the counter; the ticket stays pending
        state["next_node"] = None
    elif state.get("payment_id"):
        # already charged on an earlier attempt; only the ticket update is left
        logger.info("Payment %s already confirmed for ticket %s", state["payment_id"], state["ticket_id"])
        state["next_node"] = "paid"
    else:
        state["next_node"] = "payment"
    return state
