from collections import defaultdict
from typing import Dict, List

from booking_client.crud.base import ResourceCRUD
from booking_client.schemas.showtime_schema import Showtime
from booking_client.utils.api_client import ApiClient

showtime_crud = ResourceCRUD[Showtime](Showtime, path="/showtimes", list_keys=("data", "showtimes"))

GroupedShowtimes = Dict[str, Dict[str, List[Showtime]]]


def get_by_movie(client: ApiClient, movie_id: str) -> List[Showtime]:
    return showtime_crud.get_all(client, sub_path=f"movie/{movie_id}")


def group_showtimes(showtimes: List[Showtime]) -> GroupedShowtimes:
    """{date: {cinema_id: [showtimes sorted by start time]}}, dates in ascending order."""
    grouped: Dict[str, Dict[str, List[Showtime]]] = defaultdict(lambda: defaultdict(list))
    for st in showtimes:
        grouped[st.date][st.cinema.id].append(st)

    result: GroupedShowtimes = {}
    for date in sorted(grouped):
        result[date] = {
            cinema_id: sorted(items, key=lambda s: s.time)
            for cinema_id, items in grouped[date].items()
        }
    return result
