from __future__ import annotations

from typing import Any, Optional

from pydantic import ConfigDict, Field, model_validator

from . import WireModel, first_present


class FoodItem(WireModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str = Field(..., max_length=100)
    description: Optional[str] = None
    price: int = 0
    category: str = "other"
    image_url: Optional[str] = Field(None, max_length=255)
    available: bool = True

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        raw = data
        data = {
            "id": first_present(raw, "id", "_id"),
            "name": first_present(raw, "name", "title", default=""),
            "description": first_present(raw, "description", "desc"),
            "price": first_present(raw, "price", "cost", default=0),
            "category": first_present(raw, "category", "type", default="other"),
            "image_url": first_present(raw, "image_url", "image", "imageUrl", "photo"),
            "available": raw.get("available") is not False and raw.get("status") != "disabled",
        }
        if data["id"] is not None:
            data["id"] = str(data["id"])
        return data


class SelectedFoodItem(WireModel):
    item: FoodItem
    quantity: int = Field(1, ge=1)

    @property
    def line_total(self) -> int:
        return self.item.price * self.quantity
