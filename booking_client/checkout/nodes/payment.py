from __future__ import annotations

import logging

from booking_client.checkout.nodes import fail
from booking_client.checkout.state import CheckoutState
from booking_client.crud import payment_crud
from booking_client.schemas.payment_schema import PaymentIntentCreate
from booking_client.utils.errors import BookingError, PaymentError

logger = logging.getLogger("booking.checkout.payment")


async def process_payment(state: CheckoutState) -> CheckoutState:
    """Create a payment intent for the ticket and confirm it with the gateway."""
    draft = state["draft"]
    client = state["services"].client
    ticket_id = state["ticket_id"]
    order_id = draft.order_id or (state.get("ticket").order_id if state.get("ticket") else None) or ticket_id

    intent_in = PaymentIntentCreate(
        amount=draft.total,
        order_id=order_id,
        movie_title=draft.movie_title,
        ticket_info={
            "ticketId": ticket_id,
            "seats": [seat.name for seat in draft.seats],
            "showtime": draft.showtime.id,
            "cinema": draft.showtime.cinema.label,
        },
        metadata={"ticketId": ticket_id, "email": draft.contact.email},
    )
    try:
        intent = payment_crud.create_payment_intent(client, intent_in)
        state["payment_intent_id"] = intent.payment_intent_id
        state["client_secret"] = intent.client_secret

        confirmation = payment_crud.confirm_payment(client, intent.payment_intent_id, order_id)
        if not confirmation.succeeded:
            raise PaymentError(confirmation.error)
    except BookingError as exc:
        if not isinstance(exc, PaymentError):
            exc = PaymentError(exc.message)
        logger.warning("Payment for ticket %s failed: %s", ticket_id, exc.message)
        return fail(state, exc)

    state["payment_id"] = confirmation.payment_id or intent.payment_intent_id
    state["next_node"] = "paid"
    return state


async def mark_ticket_paid(state: CheckoutState) -> CheckoutState:
    draft = state["draft"]
    try:
        state["services"].submitter.mark_paid(state["ticket_id"], state.get("payment_id"), draft.payment_method)
    except BookingError as exc:
        return fail(state, exc)

    logger.info("Ticket %s marked paid (%s)", state["ticket_id"], state.get("payment_id"))
    state["status"] = "completed"
    state["next_node"] = None
    return state
