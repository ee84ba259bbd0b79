from __future__ import annotations

import logging
from typing import Dict, Optional

from booking_client.schemas import Notice, NoticeKind

logger = logging.getLogger("booking.errors")

GENERIC_MESSAGE = "Đã có lỗi xảy ra. Vui lòng thử lại."


class BookingError(Exception):
    """Base for every error the reservation flow surfaces to the user."""

    title = "Lỗi"
    kind = NoticeKind.VALIDATION
    default_message = GENERIC_MESSAGE

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_notice(self) -> Notice:
        return Notice(kind=self.kind, title=self.title, message=self.message)


# ---------------------------------------------------------------------------
# Validation errors: handled locally, no network call made
# ---------------------------------------------------------------------------

class BookingValidationError(BookingError):
    title = "Thông tin không hợp lệ"

    def __init__(self, message: Optional[str] = None, field_errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.field_errors = field_errors or {}


class NoShowtimeSelectedError(BookingValidationError):
    title = "Chưa chọn suất chiếu"
    default_message = "Vui lòng chọn suất chiếu trước khi chọn ghế."


class NoSeatsSelectedError(BookingValidationError):
    title = "Chưa chọn ghế"
    default_message = "Vui lòng chọn ít nhất một ghế để tiếp tục!"


class SeatUnavailableError(BookingValidationError):
    title = "Ghế không khả dụng"
    default_message = "Ghế này đã được đặt hoặc đang được giữ."


class SeatLimitError(BookingValidationError):
    title = "Vượt quá số ghế"
    default_message = "Bạn chỉ có thể chọn tối đa 8 ghế."


class FoodUnavailableError(BookingValidationError):
    title = "Món không khả dụng"
    default_message = "Món này hiện không phục vụ."


class DiscountRejectedError(BookingValidationError):
    title = "Mã giảm giá"
    default_message = "Mã giảm giá không áp dụng được cho đơn hàng này."


# ---------------------------------------------------------------------------
# Inventory conflict: resolved by refreshing status and clearing the selection
# ---------------------------------------------------------------------------

class SeatConflictError(BookingError):
    title = "Ghế đã có người đặt"
    kind = NoticeKind.CONFLICT
    default_message = "Một số ghế bạn chọn không còn trống. Vui lòng chọn lại ghế."


# ---------------------------------------------------------------------------
# Network / transport
# ---------------------------------------------------------------------------

class ApiError(BookingError):
    title = "Lỗi kết nối"
    kind = NoticeKind.NETWORK
    default_message = "Không thể kết nối đến server. Vui lòng kiểm tra kết nối mạng và thử lại."

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CatalogLoadError(ApiError):
    title = "Không thể tải sơ đồ ghế"
    default_message = "Không thể tải sơ đồ ghế. Vui lòng thử lại."


# ---------------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------------

class SessionStateError(BookingError):
    title = "Phiên đặt vé"
    default_message = "Thao tác không hợp lệ ở bước hiện tại."


class SessionExpiredError(SessionStateError):
    title = "Hết thời gian giữ ghế"
    kind = NoticeKind.EXPIRED
    default_message = "Phiên đặt vé đã hết hạn. Vui lòng đặt vé lại từ đầu."


# ---------------------------------------------------------------------------
# Submission / payment
# ---------------------------------------------------------------------------

class SubmissionError(BookingError):
    title = "Đặt vé thất bại"
    kind = NoticeKind.SUBMISSION
    default_message = "Không thể tạo vé. Vui lòng thử lại."

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PaymentError(SubmissionError):
    title = "Thanh toán thất bại"
    default_message = "Đã có lỗi xảy ra trong quá trình thanh toán. Vui lòng thử lại."


def error_to_message(exc: BaseException) -> str:
    """
    Map any exception to the message shown to the user.
    Only BookingError carries user-facing text; anything else gets the generic message.
    """
    if isinstance(exc, BookingError):
        return exc.message
    logger.error("Unexpected error surfaced to user: %s: %s", type(exc).__name__, exc)
    return GENERIC_MESSAGE


def error_to_notice(exc: BaseException) -> Notice:
    if isinstance(exc, BookingError):
        return exc.to_notice()
    return Notice(kind=NoticeKind.NETWORK, title=BookingError.title, message=error_to_message(exc))
