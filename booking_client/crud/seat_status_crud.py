import logging
from typing import Dict, List, Optional, Tuple

from booking_client.crud.base import ResourceCRUD
from booking_client.schemas.seat_schema import SeatStatusEntry
from booking_client.utils.api_client import ApiClient

logger = logging.getLogger("booking.seat_status")

seat_status_crud = ResourceCRUD[SeatStatusEntry](
    SeatStatusEntry, path="/seat-status", list_keys=("data", "seatStatuses", "statuses")
)


def get_by_showtime(client: ApiClient, showtime_id: str) -> Dict[str, str]:
    entries = seat_status_crud.get_all(client, sub_path=f"showtime/{showtime_id}")
    return {e.seat_id: e.status for e in entries if e.seat_id}


def validate_availability(client: ApiClient, seat_ids: List[str], showtime_id: str) -> Tuple[bool, Optional[str]]:
    """
    Ask the backend whether every seat is still free for the showtime.
    Returns (success, error message from the backend).
    """
    result = client.post(
        "/seats/validate-availability",
        json={"seatIds": list(seat_ids), "showtimeId": showtime_id},
    )
    if not isinstance(result, dict):
        return True, None
    success = result.get("success") is not False
    if not success:
        logger.info("Backend rejected seats %s for showtime %s: %s", seat_ids, showtime_id, result.get("error"))
    return success, result.get("error") or result.get("message")
