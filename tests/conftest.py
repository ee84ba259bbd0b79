"""
Shared fixtures: an in-memory stand-in for ApiClient and a small seat map.

FakeApiClient answers (method, path) pairs from a routes table; an entry may be
a payload, an exception instance to raise, or a callable taking the request body.
"""
from typing import Any, Dict, List, Optional, Tuple

import pytest

from booking_client.booking.inventory import SeatInventoryView
from booking_client.booking.session import ReservationSession
from booking_client.crud.showtime_crud import group_showtimes
from booking_client.schemas import PaymentMethod
from booking_client.schemas.booking_schema import ContactInfo
from booking_client.schemas.food_schema import FoodItem
from booking_client.schemas.showtime_schema import Showtime
from booking_client.utils.errors import ApiError


class FakeApiClient:
    def __init__(self, routes: Optional[Dict[Tuple[str, str], Any]] = None, token: Optional[str] = None):
        self.routes: Dict[Tuple[str, str], Any] = dict(routes or {})
        self.token = token
        self.calls: List[Tuple[str, str, Any]] = []

    def _answer(self, method: str, path: str, body: Any) -> Any:
        self.calls.append((method, path, body))
        if (method, path) not in self.routes:
            raise ApiError(f"HTTP 404: {path}", status_code=404)
        answer = self.routes[(method, path)]
        if isinstance(answer, Exception):
            raise answer
        if callable(answer):
            return answer(body)
        return answer

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._answer("GET", path, params)

    def post(self, path: str, json: Optional[Any] = None) -> Any:
        return self._answer("POST", path, json)

    def put(self, path: str, json: Optional[Any] = None) -> Any:
        return self._answer("PUT", path, json)

    def calls_to(self, method: str, path: str) -> List[Any]:
        return [body for m, p, body in self.calls if m == method and p == path]


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


SEATS_PAYLOAD = {
    "success": True,
    "seats": [
        {"_id": "b1", "name": "B1", "price": 80000, "room": "r1"},
        {"_id": "a2", "name": "A2", "price": 80000, "room": "r1"},
        {"_id": "a10", "name": "A10", "price": 80000, "room": "r1"},
        {"_id": "a1", "name": "A1", "price": 80000, "room": "r1"},
    ]
    + [{"_id": f"c{i}", "name": f"C{i}", "price": 60000, "room": "r1"} for i in range(1, 11)],
}

STATUS_PAYLOAD = {
    "success": True,
    "data": [
        {"seat": {"_id": "b1"}, "status": "booked"},
        {"seatId": "a1", "status": "available"},
    ],
}


def make_showtime(showtime_id: str = "st1", room_id: str = "r1", time: str = "19:30", date: str = "2025-05-26") -> Showtime:
    return Showtime.model_validate({
        "_id": showtime_id,
        "movieId": "m1",
        "date": date,
        "time": time,
        "room": {"_id": room_id, "name": "Phòng 1"},
        "cinema": {"_id": "c1", "name": "CGV Vincom"},
    })


def default_routes() -> Dict[Tuple[str, str], Any]:
    return {
        ("GET", "/seats/room/r1"): SEATS_PAYLOAD,
        ("GET", "/seat-status/showtime/st1"): STATUS_PAYLOAD,
        ("GET", "/seat-status/showtime/st2"): {"success": True, "data": []},
        ("POST", "/seats/validate-availability"): {"success": True},
    }


@pytest.fixture
def client() -> FakeApiClient:
    return FakeApiClient(default_routes())


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def showtime() -> Showtime:
    return make_showtime()


@pytest.fixture
def inventory(client) -> SeatInventoryView:
    return SeatInventoryView(client)


@pytest.fixture
def session(client, inventory, clock, showtime) -> ReservationSession:
    grouped = group_showtimes([showtime, make_showtime("st2", time="21:00")])
    return ReservationSession(
        movie_id="m1",
        movie_title="Lật Mặt 7",
        cinema={"_id": "c1", "name": "CGV Vincom"},
        grouped_showtimes=grouped,
        inventory=inventory,
        clock=clock,
    )


@pytest.fixture
def combo() -> FoodItem:
    return FoodItem.model_validate({"_id": "f1", "title": "Combo", "cost": 50000, "type": "combo"})


@pytest.fixture
def contact() -> ContactInfo:
    return ContactInfo.from_form("Nguyễn Văn A", "A@Example.com ", "0912 345 678")


@pytest.fixture
def draft_factory(session, showtime, combo, contact):
    """Drive the session to a confirmed BookingDraft."""
    def build(payment_method=PaymentMethod.STRIPE, with_food=True):
        session.select_showtime(showtime)
        session.toggle_seat("a1")
        session.toggle_seat("a2")
        if with_food:
            session.add_food(combo)
        session.enter_payment_review()
        return session.confirm(contact, payment_method)

    return build
