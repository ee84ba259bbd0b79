from typing import Any, Dict

from booking_client.schemas import first_present
from booking_client.utils.api_client import ApiClient
from booking_client.utils.helper import unwrap_object

PROFILE_PATH = "/user/profile"
UPDATE_PROFILE_PATH = "/user/update"


def get_profile(client: ApiClient) -> Dict[str, str]:
    """Contact fields from the signed-in user's profile (empty strings when absent)."""
    data = unwrap_object(client.get(PROFILE_PATH))
    if not isinstance(data, dict):
        data = {}
    return {
        "fullName": first_present(data, "fullName", "name", default=""),
        "email": first_present(data, "email", default=""),
        "phone": first_present(data, "phone", "phoneNumber", "number_phone", default=""),
    }


def update_profile(client: ApiClient, full_name: str, email: str, phone: str) -> Any:
    return client.put(
        UPDATE_PROFILE_PATH,
        json={"fullName": full_name, "email": email, "phone": phone, "number_phone": phone},
    )
