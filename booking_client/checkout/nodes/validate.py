from __future__ import annotations

import logging
from typing import List

from booking_client.checkout.nodes import fail
from booking_client.checkout.state import CheckoutState
from booking_client.schemas.booking_schema import BookingDraft
from booking_client.utils.errors import BookingValidationError

logger = logging.getLogger("booking.checkout.validate")


def draft_problems(draft: BookingDraft) -> List[str]:
    """Everything missing from a draft before it may be sent, as user-facing messages."""
    problems = []
    contact = draft.contact
    if not contact.full_name:
        problems.append("Thiếu họ tên")
    if not contact.email:
        problems.append("Thiếu email")
    if not contact.phone:
        problems.append("Thiếu số điện thoại")
    if not draft.seats:
        problems.append("Chưa chọn ghế")
    if draft.total <= 0:
        problems.append("Tổng tiền không hợp lệ")
    if not draft.movie_title and not draft.movie_id:
        problems.append("Thiếu thông tin phim")
    if not draft.showtime.id:
        problems.append("Thiếu thông tin suất chiếu")
    if not draft.showtime.cinema.id:
        problems.append("Thiếu thông tin rạp chiếu")
    if not draft.showtime.room.id:
        problems.append("Thiếu thông tin phòng chiếu")
    return problems


async def validate_draft(state: CheckoutState) -> CheckoutState:
    draft = state.get("draft")
    if draft is None:
        return fail(state, BookingValidationError("Không có đơn đặt vé để thanh toán."))

    problems = draft_problems(draft)
    if problems:
        logger.info("Draft %s rejected: %s", draft.order_id, problems)
        return fail(state, BookingValidationError("Dữ liệu không hợp lệ:\n" + "\n".join(problems)))

    state["status"] = "validated"
    state["next_node"] = "seats"
    return state
