from __future__ import annotations

import logging
from typing import NamedTuple, Optional

from booking_client.booking.pricing import PriceBreakdown, format_vnd
from booking_client.crud import discount_crud
from booking_client.schemas import DiscountType
from booking_client.schemas.discount_schema import DiscountDescriptor
from booking_client.utils.api_client import ApiClient
from booking_client.utils.errors import DiscountRejectedError

logger = logging.getLogger("booking.discount")

ZERO_AMOUNT_MESSAGE = "Mã giảm giá không áp dụng được cho đơn hàng hiện tại."
WRONG_CINEMA_MESSAGE = "Mã giảm giá không áp dụng cho rạp này."


class DiscountResolution(NamedTuple):
    descriptor: DiscountDescriptor
    amount: int

    def describe(self) -> str:
        return f"{self.descriptor.code} (-{self.descriptor.percent}%): -{format_vnd(self.amount)}"


def applicable_base(discount_type: DiscountType, totals: PriceBreakdown) -> int:
    """Subtotal a discount of this type is computed against."""
    if discount_type in (DiscountType.TICKET, DiscountType.MOVIE):
        return totals.seat_subtotal
    if discount_type is DiscountType.FOOD:
        return totals.food_subtotal
    return totals.before_discount


def discount_amount(descriptor: DiscountDescriptor, totals: PriceBreakdown) -> int:
    # floor(base * percent / 100) in integer arithmetic
    return applicable_base(descriptor.type, totals) * descriptor.percent // 100


def resolve_discount(
    descriptor: DiscountDescriptor,
    totals: PriceBreakdown,
    cinema_id: Optional[str],
) -> DiscountResolution:
    """
    Validate a discount against the current order and cinema.
    Raises DiscountRejectedError when it restricts to another cinema or would
    take nothing off the order.
    """
    if not descriptor.applies_to_cinema(cinema_id):
        raise DiscountRejectedError(WRONG_CINEMA_MESSAGE)
    amount = discount_amount(descriptor, totals)
    if amount <= 0:
        raise DiscountRejectedError(ZERO_AMOUNT_MESSAGE)
    return DiscountResolution(descriptor, amount)


class DiscountResolver:
    """Looks codes up against the backend catalog and resolves them for an order."""

    def __init__(self, client: ApiClient):
        self.client = client

    def lookup(self, code: str) -> DiscountDescriptor:
        descriptor = discount_crud.verify(self.client, code)
        logger.info("Discount %s verified: %s%% on %s", descriptor.code, descriptor.percent, descriptor.type.value)
        return descriptor

    def resolve_code(self, code: str, totals: PriceBreakdown, cinema_id: Optional[str]) -> DiscountResolution:
        return resolve_discount(self.lookup(code), totals, cinema_id)
