import logging
from typing import List

from booking_client.crud.base import ResourceCRUD
from booking_client.schemas.food_schema import FoodItem
from booking_client.utils.api_client import ApiClient
from booking_client.utils.errors import ApiError

logger = logging.getLogger("booking.food")

food_item_crud = ResourceCRUD[FoodItem](FoodItem, path="/foods", list_keys=("data", "foods", "items"))

# Deployments expose the concession menu under different names; first one that answers wins
MENU_ENDPOINTS = ("/foods", "/concessions", "/menu-items", "/products")

MENU_UNAVAILABLE_MESSAGE = "Không thể tải thực đơn"


def get_menu(client: ApiClient) -> List[FoodItem]:
    last_error = None
    for endpoint in MENU_ENDPOINTS:
        try:
            payload = client.get(endpoint)
        except ApiError as exc:
            logger.debug("Menu endpoint %s unavailable: %s", endpoint, exc.message)
            last_error = exc
            continue
        if isinstance(payload, dict) and payload.get("success") is False:
            return []
        return food_item_crud.parse_many(payload)
    raise ApiError(MENU_UNAVAILABLE_MESSAGE) from last_error
