from __future__ import annotations

import re
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from pydantic import ConfigDict, Field, ValidationError, field_validator, model_validator

from booking_client.utils.errors import BookingValidationError

from . import ContactSource, PaymentMethod, TicketStatus, WireModel, first_present
from .discount_schema import DiscountDescriptor
from .food_schema import SelectedFoodItem
from .seat_schema import Seat
from .showtime_schema import Showtime

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# 0xxxxxxxxx (10 digits) or 84xxxxxxxxx (11 digits)
PHONE_PATTERN = re.compile(r"^(84|0)(3|5|7|8|9)[0-9]{8}$")
_FIELD_NAMES = {"fullName": "full_name"}


# ---------------------------------------------------------------------------
# contact info
# ---------------------------------------------------------------------------

class ContactInfo(WireModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    full_name: str = Field(..., alias="fullName")
    email: str
    phone: str

    @field_validator("full_name", mode="before")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValueError("Vui lòng nhập họ và tên")
        if len(value) < 2:
            raise ValueError("Họ và tên phải có ít nhất 2 ký tự")
        if len(value) > 50:
            raise ValueError("Họ và tên không được quá 50 ký tự")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = (value or "").strip().lower()
        if not value:
            raise ValueError("Vui lòng nhập email")
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Email không hợp lệ")
        return value

    @field_validator("phone", mode="before")
    @classmethod
    def _check_phone(cls, value: str) -> str:
        value = re.sub(r"\s", "", value or "")
        if not value:
            raise ValueError("Vui lòng nhập số điện thoại")
        if not PHONE_PATTERN.match(value):
            raise ValueError("Số điện thoại không hợp lệ (VD: 0912345678 hoặc 84912345678)")
        return value

    @classmethod
    def from_form(cls, full_name: str, email: str, phone: str) -> "ContactInfo":
        """Validate raw form input, raising BookingValidationError with per-field messages."""
        try:
            return cls(full_name=full_name, email=email, phone=phone)
        except ValidationError as exc:
            field_errors: Dict[str, str] = {}
            for err in exc.errors():
                field = str(err["loc"][0]) if err["loc"] else "form"
                field = _FIELD_NAMES.get(field, field)
                field_errors.setdefault(field, str(err["msg"]).removeprefix("Value error, "))
            raise BookingValidationError(
                "Vui lòng kiểm tra lại thông tin đã nhập", field_errors=field_errors
            ) from exc

    def to_wire(self) -> dict:
        return {"fullName": self.full_name, "email": self.email, "phone": self.phone}


class CachedContactInfo(WireModel):
    full_name: str = Field("", alias="fullName")
    email: str = ""
    phone: str = ""
    saved_at: Optional[datetime] = Field(None, alias="savedAt")
    source: ContactSource = ContactSource.MANUAL


# ---------------------------------------------------------------------------
# booking draft (frozen handoff from session to submitter)
# ---------------------------------------------------------------------------

class BookingDraft(WireModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    order_id: Optional[str] = None
    movie_id: Optional[str] = None
    movie_title: Optional[str] = None
    showtime: Showtime
    seats: Tuple[Seat, ...]
    food_items: Tuple[SelectedFoodItem, ...] = ()
    seat_total: int
    food_total: int = 0
    discount: Optional[DiscountDescriptor] = None
    discount_amount: int = 0
    total: int
    contact: ContactInfo
    payment_method: PaymentMethod = PaymentMethod.STRIPE
    confirmed_at: datetime


# ---------------------------------------------------------------------------
# tickets (wire payloads)
# ---------------------------------------------------------------------------

class TicketSeat(WireModel):
    id: str = Field(..., alias="_id")
    name: str
    price: int


class TicketFoodItem(WireModel):
    id: str = Field(..., alias="_id")
    name: str
    price: int
    quantity: int


class TicketCreate(WireModel):
    order_id: str = Field(..., alias="orderId")
    movie_id: Optional[str] = Field(None, alias="movieId")
    movie_title: Optional[str] = Field(None, alias="movieTitle")
    selected_seats: List[TicketSeat] = Field(default_factory=list, alias="selectedSeats")
    selected_food_items: List[TicketFoodItem] = Field(default_factory=list, alias="selectedFoodItems")
    seat_total_price: int = Field(..., alias="seatTotalPrice")
    food_total_price: int = Field(0, alias="foodTotalPrice")
    discount_code: Optional[str] = Field(None, alias="discountCode")
    discount_amount: int = Field(0, alias="discountAmount")
    total_price: int = Field(..., alias="totalPrice")
    cinema: str
    room: str
    showtime: str
    user_info: Dict[str, str] = Field(..., alias="userInfo")
    payment_method: PaymentMethod = Field(..., alias="paymentMethod")
    status: TicketStatus = TicketStatus.PENDING_PAYMENT

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TicketOut(WireModel):
    id: str
    order_id: Optional[str] = Field(None, alias="orderId")
    status: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data):
        if isinstance(data, dict) and "id" not in data:
            data = dict(data)
            data["id"] = first_present(data, "_id", "ticketId")
        if isinstance(data, dict) and data.get("id") is not None:
            data["id"] = str(data["id"])
        return data


class TicketPaymentUpdate(WireModel):
    status: TicketStatus = TicketStatus.COMPLETED
    payment_id: Optional[str] = Field(None, alias="paymentId")
    payment_method: PaymentMethod = Field(PaymentMethod.STRIPE, alias="paymentMethod")
    paid_at: datetime = Field(..., alias="paidAt")

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
