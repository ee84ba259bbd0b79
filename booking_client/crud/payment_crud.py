from pydantic import ValidationError

from booking_client.schemas.payment_schema import PaymentConfirmation, PaymentIntent, PaymentIntentCreate
from booking_client.utils.api_client import ApiClient
from booking_client.utils.errors import PaymentError

CREATE_INTENT_PATH = "/payment/create-payment-intent"
CONFIRM_PAYMENT_PATH = "/payment/confirm-payment"


def create_payment_intent(client: ApiClient, obj_in: PaymentIntentCreate) -> PaymentIntent:
    result = client.post(CREATE_INTENT_PATH, json=obj_in.to_wire())
    if isinstance(result, dict) and result.get("success") is False:
        raise PaymentError(result.get("error") or result.get("message"))
    try:
        return PaymentIntent.model_validate(result)
    except ValidationError as exc:
        raise PaymentError("Không thể khởi tạo thanh toán.") from exc


def confirm_payment(client: ApiClient, payment_intent_id: str, order_id: str) -> PaymentConfirmation:
    result = client.post(
        CONFIRM_PAYMENT_PATH,
        json={"paymentIntentId": payment_intent_id, "orderId": order_id},
    )
    data = result.get("data") if isinstance(result, dict) and isinstance(result.get("data"), dict) else {}
    merged = {**(result if isinstance(result, dict) else {}), **data}
    merged.setdefault("paymentId", payment_intent_id)
    try:
        return PaymentConfirmation.model_validate(merged)
    except ValidationError as exc:
        raise PaymentError("Không thể xác nhận thanh toán.") from exc
