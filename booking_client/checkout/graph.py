from __future__ import annotations

import logging
from typing import Optional

from langgraph.graph import END, StateGraph

from booking_client.checkout.nodes.payment import mark_ticket_paid, process_payment
from booking_client.checkout.nodes.seats import confirm_seats
from booking_client.checkout.nodes.ticket import create_ticket
from booking_client.checkout.nodes.validate import validate_draft
from booking_client.checkout.state import CheckoutServices, CheckoutState
from booking_client.schemas.booking_schema import BookingDraft
from booking_client.utils.logger import bind_session

logger = logging.getLogger("booking.checkout")


def route_next(state: CheckoutState) -> str:
    if state.get("error"):
        return END
    return state.get("next_node") or END


checkout_graph = StateGraph(CheckoutState)

checkout_graph.add_node("validate", validate_draft)
checkout_graph.add_node("seats", confirm_seats)
checkout_graph.add_node("ticket", create_ticket)
checkout_graph.add_node("payment", process_payment)
checkout_graph.add_node("paid", mark_ticket_paid)

checkout_graph.set_entry_point("validate")
checkout_graph.add_conditional_edges("validate", route_next, {"seats": "seats", END: END})
checkout_graph.add_conditional_edges("seats", route_next, {"ticket": "ticket", END: END})
checkout_graph.add_conditional_edges("ticket", route_next, {"payment": "payment", "paid": "paid", END: END})
checkout_graph.add_conditional_edges("payment", route_next, {"paid": "paid", END: END})
checkout_graph.add_edge("paid", END)

checkout_app = checkout_graph.compile()


async def run_checkout(
    draft: BookingDraft,
    services: CheckoutServices,
    ticket_id: Optional[str] = None,
    payment_id: Optional[str] = None,
) -> CheckoutState:
    """
    Submit a confirmed draft: revalidate seats, create the ticket and, for online
    payment, pay and mark it paid. Pass the `ticket_id` of an earlier attempt to
    retry payment without creating a second ticket; pass its `payment_id` too when
    the charge went through and only marking the ticket paid failed. The draft is
    never modified.
    """
    state: CheckoutState = {
        "services": services,
        "draft": draft,
        "ticket_id": ticket_id,
        # a confirmed charge only applies to the ticket it was made for
        "payment_id": payment_id if ticket_id else None,
        "status": "started",
        "error": None,
        "next_node": None,
    }
    with bind_session(draft.order_id):
        result: CheckoutState = await checkout_app.ainvoke(state)
        if result.get("error"):
            logger.info("Checkout stopped at %s: %s", result.get("status"), result.get("error"))
        else:
            logger.info("Checkout finished with status %s", result.get("status"))
    return result
