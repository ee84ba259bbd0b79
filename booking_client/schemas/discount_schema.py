from __future__ import annotations

from typing import Any, List, Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from . import DiscountType, WireModel, first_present, ref_id


class DiscountDescriptor(WireModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    code: str
    name: Optional[str] = None
    percent: int = Field(..., ge=0, le=100)
    type: DiscountType = DiscountType.GENERIC
    cinemas: List[str] = Field(default_factory=list, description="Empty means valid at every cinema")

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        raw = data
        data = dict(raw)
        data["code"] = str(first_present(raw, "code", "promo_code", "promoCode", default="")).strip().upper()
        data["percent"] = first_present(raw, "percent", "discount_percent", "discountPercent", "percentage", default=0)
        if "cinemas" not in raw:
            data["cinemas"] = first_present(raw, "cinema", "cinemaIds", "cinema_ids", default=[])
        return data

    @field_validator("type", mode="before")
    @classmethod
    def _known_type(cls, value: Any) -> Any:
        if isinstance(value, DiscountType):
            return value
        try:
            return DiscountType(str(value or "").strip().lower())
        except ValueError:
            return DiscountType.GENERIC

    @field_validator("cinemas", mode="before")
    @classmethod
    def _cinema_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            value = [value]
        return [cid for cid in (ref_id(v) for v in value) if cid]

    def applies_to_cinema(self, cinema_id: Optional[str]) -> bool:
        if not self.cinemas:
            return True
        return cinema_id is not None and str(cinema_id) in self.cinemas
