from __future__ import annotations

import logging
from typing import Optional

from booking_client.crud import ticket_crud
from booking_client.schemas import PaymentMethod, TicketStatus
from booking_client.schemas.booking_schema import (
    BookingDraft,
    TicketCreate,
    TicketFoodItem,
    TicketOut,
    TicketPaymentUpdate,
    TicketSeat,
)
from booking_client.utils.api_client import ApiClient
from booking_client.utils.errors import ApiError, SubmissionError
from booking_client.utils.helper import generate_order_id, utcnow

logger = logging.getLogger("booking.submitter")


def initial_status(payment_method: PaymentMethod) -> TicketStatus:
    # both methods start unpaid; online payments are marked paid after gateway confirmation
    return TicketStatus.PENDING_PAYMENT


class BookingSubmitter:
    """Turns a frozen BookingDraft into a ticket on the backend. One attempt per call."""

    def __init__(self, client: ApiClient):
        self.client = client

    def build_payload(self, draft: BookingDraft) -> TicketCreate:
        showtime = draft.showtime
        return TicketCreate(
            order_id=draft.order_id or generate_order_id(),
            movie_id=draft.movie_id or showtime.movie_id,
            movie_title=draft.movie_title,
            selected_seats=[TicketSeat(id=s.id, name=s.name, price=s.price) for s in draft.seats],
            selected_food_items=[
                TicketFoodItem(id=f.item.id, name=f.item.name, price=f.item.price, quantity=f.quantity)
                for f in draft.food_items
            ],
            seat_total_price=draft.seat_total,
            food_total_price=draft.food_total,
            discount_code=draft.discount.code if draft.discount else None,
            discount_amount=draft.discount_amount,
            total_price=draft.total,
            cinema=showtime.cinema.id,
            room=showtime.room.id,
            showtime=showtime.id,
            user_info=draft.contact.to_wire(),
            payment_method=draft.payment_method,
            status=initial_status(draft.payment_method),
        )

    def submit(self, draft: BookingDraft) -> TicketOut:
        payload = self.build_payload(draft)
        logger.info(
            "Submitting order %s: %d seats, total %d, %s",
            payload.order_id, len(payload.selected_seats), payload.total_price, payload.payment_method.value,
        )
        try:
            ticket = ticket_crud.create(self.client, payload)
        except ApiError as exc:
            logger.error("Ticket creation for order %s failed: %s", payload.order_id, exc.message)
            raise SubmissionError(exc.message, status_code=exc.status_code) from exc
        logger.info("Order %s created as ticket %s", payload.order_id, ticket.id)
        return ticket

    def mark_paid(
        self,
        ticket_id: str,
        payment_id: Optional[str],
        method: PaymentMethod = PaymentMethod.STRIPE,
    ):
        update = TicketPaymentUpdate(
            status=TicketStatus.COMPLETED,
            payment_id=payment_id,
            payment_method=method,
            paid_at=utcnow(),
        )
        try:
            return ticket_crud.update_payment(self.client, ticket_id, update)
        except ApiError as exc:
            logger.error("Ticket %s payment update failed: %s", ticket_id, exc.message)
            raise SubmissionError(exc.message, status_code=exc.status_code) from exc
