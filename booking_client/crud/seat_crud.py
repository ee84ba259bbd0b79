from typing import Any, List

from booking_client.crud.base import ResourceCRUD
from booking_client.schemas.seat_schema import Seat
from booking_client.utils.api_client import ApiClient
from booking_client.utils.helper import unwrap_object

seat_crud = ResourceCRUD[Seat](Seat, path="/seats", list_keys=("seats", "data"))


def _flatten_seats(payload: Any) -> List[Any]:
    # groupByRow=true may hand back {"A": [...], "B": [...]} instead of a flat list
    body = unwrap_object(payload)
    seats = body.get("seats") if isinstance(body, dict) else body
    if isinstance(seats, dict):
        return [seat for row in seats.values() if isinstance(row, list) for seat in row]
    if isinstance(seats, list):
        return seats
    return []


def get_by_room(client: ApiClient, room_id: str) -> List[Seat]:
    payload = client.get(f"{seat_crud.path}/room/{room_id}", params={"groupByRow": "true"})
    seats = [seat_crud.parse(raw) for raw in _flatten_seats(payload)]
    # seats listed under a room belong to it even when the payload omits the room field
    return [s if s.room_id else s.model_copy(update={"room_id": str(room_id)}) for s in seats]
