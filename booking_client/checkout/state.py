from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, TypedDict

from booking_client.booking.inventory import SeatInventoryView
from booking_client.booking.submitter import BookingSubmitter
from booking_client.schemas import Notice
from booking_client.schemas.booking_schema import BookingDraft, TicketOut
from booking_client.utils.api_client import ApiClient


CheckoutStatus = Literal["started", "validated", "seats_confirmed", "pending_payment", "completed", "failed"]


@dataclass
class CheckoutServices:
    client: ApiClient
    submitter: BookingSubmitter
    inventory: SeatInventoryView

    @classmethod
    def from_client(cls, client: ApiClient, inventory: Optional[SeatInventoryView] = None) -> "CheckoutServices":
        return cls(
            client=client,
            submitter=BookingSubmitter(client),
            inventory=inventory or SeatInventoryView(client),
        )


class CheckoutState(TypedDict, total=False):
    # Inputs
    services: CheckoutServices
    draft: BookingDraft

    # Ticket
    ticket: Optional[TicketOut]
    ticket_id: Optional[str]

    # Online payment
    payment_intent_id: Optional[str]
    client_secret: Optional[str]
    payment_id: Optional[str]

    # Flow control
    status: CheckoutStatus
    next_node: Optional[str]

    # Outputs
    error: Optional[str]
    notice: Optional[Notice]
