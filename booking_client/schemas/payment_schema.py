from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import Field, field_validator, model_validator

from . import WireModel, first_present


class PaymentIntentCreate(WireModel):
    amount: int = Field(..., gt=0)
    currency: str = "vnd"
    order_id: str = Field(..., alias="orderId")
    movie_title: Optional[str] = Field(None, alias="movieTitle")
    ticket_info: Dict[str, Any] = Field(default_factory=dict, alias="ticketInfo")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PaymentIntent(WireModel):
    payment_intent_id: str = Field(..., alias="paymentIntentId")
    client_secret: Optional[str] = Field(None, alias="clientSecret")

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data.get("data") or data)
        if "paymentIntentId" not in data and "payment_intent_id" not in data:
            data["paymentIntentId"] = first_present(data, "paymentIntent", "id", "intentId")
        if "clientSecret" not in data and "client_secret" in data:
            data["clientSecret"] = data["client_secret"]
        return data


class PaymentConfirmation(WireModel):
    success: bool = False
    status: Optional[str] = None
    payment_id: Optional[str] = Field(None, alias="paymentId")
    error: Optional[str] = None

    @field_validator("payment_id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def succeeded(self) -> bool:
        status = (self.status or "").lower()
        if status:
            return status in ("succeeded", "completed", "paid")
        return self.success
