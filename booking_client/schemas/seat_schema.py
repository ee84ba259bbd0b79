from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import ConfigDict, Field, model_validator

from . import SEAT_AVAILABLE, WireModel, first_present, ref_id

_SEAT_NUMBER = re.compile(r"(\d+)$")


class Seat(WireModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str = Field(..., max_length=10, description="e.g., A1, B5")
    price: int = 0
    room_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "id" not in data:
            data["id"] = first_present(data, "_id", "seatId")
        if data.get("id") is not None:
            data["id"] = str(data["id"])
        if "name" not in data:
            data["name"] = first_present(data, "seatNumber", "seat_number", default="")
        if "room_id" not in data:
            data["room_id"] = ref_id(first_present(data, "roomId", "room"))
        if data.get("price") is None:
            data["price"] = 0
        return data

    @property
    def row(self) -> str:
        return self.name[:1].upper()

    @property
    def number(self) -> int:
        match = _SEAT_NUMBER.search(self.name)
        return int(match.group(1)) if match else 0


class SeatStatusEntry(WireModel):
    seat_id: str
    status: str = SEAT_AVAILABLE

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "seat_id" not in data:
            data["seat_id"] = ref_id(first_present(data, "seatId", "seat"))
        if data.get("status") is None:
            data["status"] = SEAT_AVAILABLE
        else:
            data["status"] = str(data["status"]).strip().lower()
        return data
