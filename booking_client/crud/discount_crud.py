from urllib.parse import quote

from booking_client.crud.base import ResourceCRUD
from booking_client.schemas.discount_schema import DiscountDescriptor
from booking_client.utils.api_client import ApiClient
from booking_client.utils.errors import ApiError, DiscountRejectedError

discount_crud = ResourceCRUD[DiscountDescriptor](DiscountDescriptor, path="/discounts")

INVALID_CODE_MESSAGE = "Mã giảm giá không hợp lệ hoặc đã hết hạn."


def verify(client: ApiClient, code: str) -> DiscountDescriptor:
    code = (code or "").strip()
    if not code:
        raise DiscountRejectedError("Vui lòng nhập mã giảm giá.")
    try:
        result = client.get(f"{discount_crud.path}/verify/{quote(code, safe='')}")
    except ApiError as exc:
        # an unknown code comes back as 4xx; anything else is a transport problem
        if exc.status_code is not None and 400 <= exc.status_code < 500:
            raise DiscountRejectedError(exc.message or INVALID_CODE_MESSAGE) from exc
        raise
    if not isinstance(result, dict) or result.get("success") is False or not result.get("data"):
        message = result.get("message") if isinstance(result, dict) else None
        raise DiscountRejectedError(message or INVALID_CODE_MESSAGE)
    data = dict(result["data"])
    if not data.get("code"):
        data["code"] = code
    return discount_crud.parse(data)
