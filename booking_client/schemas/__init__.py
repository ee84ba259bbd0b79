from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# Shared Pydantic base (Pydantic v2)
class WireModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


# Enums shared across schemas
class SeatViewState(str, Enum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    SELECTED = "selected"


# Only this status value from the seat-status feed is selectable
SEAT_AVAILABLE = "available"


class DiscountType(str, Enum):
    TICKET = "ticket"
    FOOD = "food"
    COMBO = "combo"
    MOVIE = "movie"
    GENERIC = "generic"


class PaymentMethod(str, Enum):
    CASH = "cash"
    STRIPE = "stripe"


class TicketStatus(str, Enum):
    PENDING_PAYMENT = "pending_payment"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ContactSource(str, Enum):
    API = "api"
    MANUAL = "manual"
    API_UPDATED = "api_updated"


class SessionState(str, Enum):
    BROWSING = "browsing"
    SHOWTIME_SELECTED = "showtime_selected"
    SEATS_PICKED = "seats_picked"
    FOOD_PICKED = "food_picked"
    PAYMENT_REVIEW = "payment_review"
    CONFIRMED = "confirmed"
    EXPIRED = "expired"


class NoticeKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NETWORK = "network"
    EXPIRED = "expired"
    SUBMISSION = "submission"


# Value objects shared by multiple schemas
class EntityRef(WireModel):
    """
    Normalized reference to a backend entity (cinema, room, showtime, seat).

    The backend sends these either populated ({"_id": ..., "name": ...}) or as a
    bare id string depending on the endpoint; `coerce` folds both into one shape.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: Optional[str] = None

    @classmethod
    def coerce(cls, value: Any) -> Any:
        if value is None or isinstance(value, EntityRef):
            return value
        if isinstance(value, dict):
            ref_id = value.get("_id") or value.get("id")
            if ref_id is None:
                return value
            return {"id": str(ref_id), "name": value.get("name") or value.get("title")}
        return {"id": str(value), "name": None}

    @property
    def label(self) -> str:
        return self.name or self.id


class Notice(WireModel):
    kind: NoticeKind
    title: str
    message: str
    blocking: bool = Field(True, description="Requires user acknowledgement")


def first_present(data: dict, *keys: str, default: Any = None) -> Any:
    """Return the first key of `data` whose value is not None."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def ref_id(value: Any) -> Optional[str]:
    """Id of a populated-or-bare entity reference, or None."""
    ref = EntityRef.coerce(value)
    if isinstance(ref, EntityRef):
        return ref.id
    if isinstance(ref, dict):
        return ref.get("id")
    return None
