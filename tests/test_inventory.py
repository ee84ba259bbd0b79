import pytest

from booking_client.booking.inventory import SeatInventoryView
from booking_client.schemas import SeatViewState
from booking_client.utils.errors import ApiError, CatalogLoadError, SeatConflictError

from conftest import FakeApiClient, make_showtime


class TestLoadSeats:
    def test_seats_sorted_by_row_then_number(self, inventory):
        seats = inventory.load_seats("r1")
        names = [s.name for s in seats]
        assert names[:4] == ["A1", "A2", "A10", "B1"]
        assert names[4:6] == ["C1", "C2"]
        assert names[-1] == "C10"

    def test_rows_grouping(self, inventory):
        inventory.load_seats("r1")
        rows = inventory.rows()
        assert list(rows) == ["A", "B", "C"]
        assert [s.name for s in rows["A"]] == ["A1", "A2", "A10"]

    def test_load_failure_is_blocking(self):
        client = FakeApiClient({("GET", "/seats/room/r1"): ApiError("boom", status_code=500)})

        with pytest.raises(CatalogLoadError):
            SeatInventoryView(client).load_seats("r1")

    def test_rows_dict_payload_is_flattened(self):
        client = FakeApiClient({
            ("GET", "/seats/room/r2"): {"data": {"seats": {"B": [{"_id": "x", "name": "B2"}], "A": [{"_id": "y", "name": "A1"}]}}},
        })
        seats = SeatInventoryView(client).load_seats("r2")
        assert [s.name for s in seats] == ["A1", "B2"]
        assert all(s.room_id == "r2" for s in seats)


class TestSeatStatus:
    def test_missing_seats_default_to_available(self, inventory, showtime):
        inventory.refresh_for_showtime(showtime)
        assert inventory.status_of("b1") == "booked"
        assert inventory.status_of("a2") == "available"
        assert inventory.is_selectable("a2")
        assert not inventory.is_selectable("b1")

    def test_unknown_seat_is_not_selectable(self, inventory, showtime):
        inventory.refresh_for_showtime(showtime)
        assert not inventory.is_selectable("zz")

    def test_status_failure_degrades_to_available(self, client, inventory, showtime):
        client.routes[("GET", "/seat-status/showtime/st1")] = ApiError("timeout")
        inventory.refresh_for_showtime(showtime)
        assert inventory.statuses == {}
        assert inventory.is_selectable("b1")

    def test_view_state(self, inventory, showtime):
        inventory.refresh_for_showtime(showtime)
        assert inventory.view_state("a1", ["a1"]) is SeatViewState.SELECTED
        assert inventory.view_state("b1") is SeatViewState.RESERVED
        assert inventory.view_state("a2") is SeatViewState.AVAILABLE


class TestRefreshForShowtime:
    def test_same_room_reloads_status_only(self, client, inventory, showtime):
        inventory.refresh_for_showtime(showtime)
        inventory.refresh_for_showtime(make_showtime("st2"))
        assert len(client.calls_to("GET", "/seats/room/r1")) == 1
        assert len(client.calls_to("GET", "/seat-status/showtime/st2")) == 1

    def test_room_change_reloads_seats(self, client, inventory, showtime):
        client.routes[("GET", "/seats/room/r2")] = {"seats": [{"_id": "z1", "name": "Z1", "price": 90000}]}
        client.routes[("GET", "/seat-status/showtime/st3")] = {"data": []}
        inventory.refresh_for_showtime(showtime)
        inventory.refresh_for_showtime(make_showtime("st3", room_id="r2"))
        assert inventory.room_id == "r2"
        assert [s.name for s in inventory.seats] == ["Z1"]


class TestValidateAvailability:
    def test_conflict_refreshes_status_and_raises(self, client, inventory, showtime):
        # Given: the backend reports a conflict and the feed now shows a2 taken
        inventory.refresh_for_showtime(showtime)
        client.routes[("POST", "/seats/validate-availability")] = {"success": False, "error": "Ghế A2 đã được đặt"}
        client.routes[("GET", "/seat-status/showtime/st1")] = {"data": [{"seatId": "a2", "status": "booked"}]}
        # When
        with pytest.raises(SeatConflictError) as exc_info:
            inventory.validate_availability(["a2"], "st1")
        # Then
        assert exc_info.value.message == "Ghế A2 đã được đặt"
        assert inventory.status_of("a2") == "booked"

    def test_request_body(self, client, inventory):
        assert inventory.validate_availability(["a1", "a2"], "st1") is True
        assert client.calls_to("POST", "/seats/validate-availability") == [
            {"seatIds": ["a1", "a2"], "showtimeId": "st1"}
        ]

    def test_transport_failure_is_ignored_unless_strict(self, client, inventory):
        client.routes[("POST", "/seats/validate-availability")] = ApiError("offline")
        assert inventory.validate_availability(["a1"], "st1", strict=False) is True
        with pytest.raises(ApiError):
            inventory.validate_availability(["a1"], "st1", strict=True)
