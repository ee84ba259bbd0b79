"""
Price computation for a reservation. Pure functions, no I/O; amounts are whole VND.
"""
from __future__ import annotations

from typing import Iterable, NamedTuple

from booking_client.schemas.food_schema import SelectedFoodItem
from booking_client.schemas.seat_schema import Seat


class PriceBreakdown(NamedTuple):
    seat_subtotal: int
    food_subtotal: int
    discount_amount: int
    grand_total: int

    @property
    def before_discount(self) -> int:
        return self.seat_subtotal + self.food_subtotal


def seat_subtotal(seats: Iterable[Seat]) -> int:
    return sum(seat.price for seat in seats)


def food_subtotal(items: Iterable[SelectedFoodItem]) -> int:
    return sum(item.item.price * item.quantity for item in items)


def grand_total(seat_amount: int, food_amount: int, discount_amount: int = 0) -> int:
    return seat_amount + food_amount - discount_amount


def compute_totals(
    seats: Iterable[Seat],
    items: Iterable[SelectedFoodItem],
    discount_amount: int = 0,
) -> PriceBreakdown:
    seats_sum = seat_subtotal(seats)
    food_sum = food_subtotal(items)
    return PriceBreakdown(
        seat_subtotal=seats_sum,
        food_subtotal=food_sum,
        discount_amount=discount_amount,
        grand_total=grand_total(seats_sum, food_sum, discount_amount),
    )


def format_vnd(amount: int) -> str:
    """80000 -> '80.000đ'"""
    return f"{amount:,}".replace(",", ".") + "đ"
