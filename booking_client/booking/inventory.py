from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional

from booking_client.crud import seat_crud, seat_status_crud
from booking_client.schemas import SEAT_AVAILABLE, SeatViewState
from booking_client.schemas.seat_schema import Seat
from booking_client.schemas.showtime_schema import Showtime
from booking_client.utils.api_client import ApiClient
from booking_client.utils.errors import ApiError, CatalogLoadError, SeatConflictError

logger = logging.getLogger("booking.inventory")


class SeatInventoryView:
    """
    Seat map for one room plus the per-showtime status feed.

    Seats come from the room catalog; statuses come from the showtime feed and any
    seat missing from the feed counts as available.
    """

    def __init__(self, client: ApiClient):
        self.client = client
        self.room_id: Optional[str] = None
        self.showtime_id: Optional[str] = None
        self.seats: List[Seat] = []
        self.statuses: Dict[str, str] = {}
        self._by_id: Dict[str, Seat] = {}

    # ---------------- catalog ----------------
    def load_seats(self, room_id: str) -> List[Seat]:
        try:
            seats = seat_crud.get_by_room(self.client, room_id)
        except ApiError as exc:
            logger.error("Seat catalog for room %s failed to load: %s", room_id, exc.message)
            raise CatalogLoadError() from exc

        self.seats = sorted(seats, key=lambda s: (s.row, s.number))
        self._by_id = {s.id: s for s in self.seats}
        self.room_id = room_id
        logger.info("Loaded %d seats for room %s", len(self.seats), room_id)
        return self.seats

    def load_seat_status(self, showtime_id: str) -> Dict[str, str]:
        self.showtime_id = showtime_id
        try:
            self.statuses = seat_status_crud.get_by_showtime(self.client, showtime_id)
        except ApiError as exc:
            # degrade to "everything available"; the backend still arbitrates at checkout
            logger.warning("Seat status for showtime %s unavailable: %s", showtime_id, exc.message)
            self.statuses = {}
        return self.statuses

    def refresh_for_showtime(self, showtime: Showtime) -> None:
        if showtime.room.id != self.room_id or not self.seats:
            self.load_seats(showtime.room.id)
        self.load_seat_status(showtime.id)

    # ---------------- queries ----------------
    def get_seat(self, seat_id: str) -> Optional[Seat]:
        return self._by_id.get(seat_id)

    def rows(self) -> "OrderedDict[str, List[Seat]]":
        grouped: "OrderedDict[str, List[Seat]]" = OrderedDict()
        for seat in self.seats:
            grouped.setdefault(seat.row, []).append(seat)
        return grouped

    def status_of(self, seat_id: str) -> str:
        return self.statuses.get(seat_id, SEAT_AVAILABLE)

    def is_selectable(self, seat_id: str) -> bool:
        return seat_id in self._by_id and self.status_of(seat_id) == SEAT_AVAILABLE

    def view_state(self, seat_id: str, selected_ids: Iterable[str] = ()) -> SeatViewState:
        if seat_id in set(selected_ids):
            return SeatViewState.SELECTED
        if self.status_of(seat_id) != SEAT_AVAILABLE:
            return SeatViewState.RESERVED
        return SeatViewState.AVAILABLE

    # ---------------- backend revalidation ----------------
    def validate_availability(self, seat_ids: List[str], showtime_id: str, strict: bool = False) -> bool:
        """
        Ask the backend to confirm the seats are still free.
        A reported conflict refreshes the status feed and raises SeatConflictError.
        Transport failures raise only when `strict`; otherwise they are logged and ignored.
        """
        try:
            success, error = seat_status_crud.validate_availability(self.client, seat_ids, showtime_id)
        except ApiError as exc:
            if strict:
                raise
            logger.warning("Availability check skipped for showtime %s: %s", showtime_id, exc.message)
            return True

        if not success:
            self.load_seat_status(showtime_id)
            raise SeatConflictError(error)
        return True
