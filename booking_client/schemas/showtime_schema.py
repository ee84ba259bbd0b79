from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import ConfigDict, Field, field_validator, model_validator

from . import EntityRef, WireModel, first_present


class Showtime(WireModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    movie_id: Optional[str] = None
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", description="e.g. 2025-05-26")
    time: str = Field(..., pattern=r"^\d{2}:\d{2}$", description="Start time in HH:MM")
    room: EntityRef
    cinema: EntityRef
    available_seats: Optional[int] = None

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "id" not in data:
            data["id"] = first_present(data, "_id", "showtimeId")
        if "movie_id" not in data:
            movie = first_present(data, "movieId", "movie")
            if isinstance(movie, dict):
                movie = movie.get("_id") or movie.get("id")
            data["movie_id"] = str(movie) if movie is not None else None
        if "available_seats" not in data and "availableSeats" in data:
            data["available_seats"] = data["availableSeats"]
        # date may arrive as a full ISO timestamp
        raw_date = data.get("date")
        if isinstance(raw_date, str) and len(raw_date) > 10:
            data["date"] = raw_date[:10]
        if data.get("id") is not None:
            data["id"] = str(data["id"])
        return data

    @field_validator("room", "cinema", mode="before")
    @classmethod
    def _normalize_ref(cls, value: Any) -> Any:
        return EntityRef.coerce(value)

    @property
    def starts_at(self) -> datetime:
        return datetime.strptime(f"{self.date} {self.time}", "%Y-%m-%d %H:%M")
