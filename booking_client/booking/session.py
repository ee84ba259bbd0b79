from __future__ import annotations

import logging
import time
import uuid
from collections import OrderedDict
from typing import Callable, List, Optional

from booking_client.booking.discount import DiscountResolution, DiscountResolver, resolve_discount
from booking_client.booking.inventory import SeatInventoryView
from booking_client.booking.pricing import PriceBreakdown, compute_totals
from booking_client.booking.timer import CountdownTimer
from booking_client.crud.showtime_crud import GroupedShowtimes
from booking_client.schemas import EntityRef, Notice, NoticeKind, PaymentMethod, SessionState
from booking_client.schemas.booking_schema import BookingDraft, ContactInfo
from booking_client.schemas.discount_schema import DiscountDescriptor
from booking_client.schemas.food_schema import FoodItem, SelectedFoodItem
from booking_client.schemas.seat_schema import Seat
from booking_client.schemas.showtime_schema import Showtime
from booking_client.utils.config import settings
from booking_client.utils.errors import (
    BookingError,
    DiscountRejectedError,
    FoodUnavailableError,
    NoSeatsSelectedError,
    NoShowtimeSelectedError,
    SeatConflictError,
    SeatLimitError,
    SeatUnavailableError,
    SessionExpiredError,
    SessionStateError,
)
from booking_client.utils.helper import generate_order_id, utcnow

logger = logging.getLogger("booking.session")

DISCOUNT_DROPPED_MESSAGE = "Mã giảm giá không còn áp dụng cho đơn hàng và đã được gỡ."

# states in which the seat/food/showtime selection can still change
_EDITABLE_STATES = (
    SessionState.BROWSING,
    SessionState.SHOWTIME_SELECTED,
    SessionState.SEATS_PICKED,
    SessionState.FOOD_PICKED,
)


class ReservationSession:
    """
    One in-progress booking, from showtime selection to the frozen draft.

    browsing -> showtime_selected -> seats_picked -> food_picked -> payment_review
    -> confirmed | expired. Invalid operations raise a BookingError subclass, leave
    the session unchanged and record a Notice for the UI.
    """

    def __init__(
        self,
        movie_id: str,
        movie_title: Optional[str],
        cinema,
        grouped_showtimes: GroupedShowtimes,
        inventory: SeatInventoryView,
        discount_resolver: Optional[DiscountResolver] = None,
        max_seats: Optional[int] = None,
        hold_seconds: Optional[int] = None,
        on_notice: Optional[Callable[[Notice], None]] = None,
        on_expired: Optional[Callable[[], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.session_id = uuid.uuid4().hex[:12]
        self.movie_id = movie_id
        self.movie_title = movie_title
        self.cinema = EntityRef.model_validate(EntityRef.coerce(cinema))
        self.grouped_showtimes = grouped_showtimes
        self.inventory = inventory
        self.discount_resolver = discount_resolver or DiscountResolver(inventory.client)
        self.max_seats = max_seats or settings.MAX_SELECTED_SEATS
        self.on_notice = on_notice
        self.on_expired = on_expired

        self.state = SessionState.BROWSING
        self.selected_date: Optional[str] = None
        self.showtime: Optional[Showtime] = None
        self.selected_seat_ids: List[str] = []
        self.food: "OrderedDict[str, SelectedFoodItem]" = OrderedDict()
        self.discount: Optional[DiscountResolution] = None
        self.order_id: Optional[str] = None
        self.draft: Optional[BookingDraft] = None
        self.notices: List[Notice] = []

        self.confirmed = False
        self.backgrounded = False
        self._state_before_review = SessionState.SEATS_PICKED
        self._expiry_shown = False
        self._expiry_pending = False

        self.timer = CountdownTimer(
            seconds=hold_seconds or settings.HOLD_SECONDS,
            on_expire=self._on_timer_expired,
            clock=clock,
        )

    # ------------------------------------------------------------------
    # notices and guards
    # ------------------------------------------------------------------
    def _notify(self, notice: Notice) -> None:
        self.notices.append(notice)
        logger.info("Session %s notice [%s]: %s", self.session_id, notice.kind.value, notice.message)
        if self.on_notice is not None:
            self.on_notice(notice)

    def _reject(self, exc: BookingError) -> BookingError:
        self._notify(exc.to_notice())
        return exc

    def _ensure_active(self) -> None:
        if self.state is SessionState.EXPIRED:
            raise SessionExpiredError()
        if self.state is SessionState.CONFIRMED:
            raise SessionStateError("Đơn đặt vé đã được xác nhận.")

    def _ensure_editable(self) -> None:
        self._ensure_active()
        if self.state not in _EDITABLE_STATES:
            raise self._reject(SessionStateError("Vui lòng quay lại bước chọn ghế để thay đổi đơn hàng."))

    def _sync_state(self) -> None:
        if self.state not in _EDITABLE_STATES:
            return
        if self.showtime is None:
            self.state = SessionState.BROWSING
        elif not self.selected_seat_ids:
            self.state = SessionState.SHOWTIME_SELECTED
        elif not self.food:
            self.state = SessionState.SEATS_PICKED
        else:
            self.state = SessionState.FOOD_PICKED

    # ------------------------------------------------------------------
    # showtime
    # ------------------------------------------------------------------
    def available_dates(self) -> List[str]:
        return [d for d, by_cinema in self.grouped_showtimes.items() if by_cinema.get(self.cinema.id)]

    def select_date(self, date: str) -> List[Showtime]:
        """Showtimes of this session's cinema on `date`, earliest first."""
        self._ensure_active()
        self.selected_date = date
        return list(self.grouped_showtimes.get(date, {}).get(self.cinema.id, []))

    def select_showtime(self, showtime: Showtime) -> None:
        self._ensure_editable()
        try:
            self.inventory.refresh_for_showtime(showtime)
        except BookingError as exc:
            raise self._reject(exc)

        if self.showtime is None or self.showtime.id != showtime.id:
            if self.selected_seat_ids:
                logger.info("Showtime changed to %s, clearing %d selected seats", showtime.id, len(self.selected_seat_ids))
            self.selected_seat_ids = []
        self.showtime = showtime
        self.selected_date = showtime.date
        self._sync_state()
        self._reresolve_discount()

    # ------------------------------------------------------------------
    # seats
    # ------------------------------------------------------------------
    @property
    def selected_seats(self) -> List[Seat]:
        seats = (self.inventory.get_seat(seat_id) for seat_id in self.selected_seat_ids)
        return [seat for seat in seats if seat is not None]

    def toggle_seat(self, seat_id: str) -> bool:
        """Flip membership of a seat in the selection; returns whether it is now selected."""
        self._ensure_editable()
        if self.showtime is None:
            raise self._reject(NoShowtimeSelectedError())

        if seat_id in self.selected_seat_ids:
            # deselecting never consults the status feed
            self.selected_seat_ids.remove(seat_id)
            selected = False
        else:
            if not self.inventory.is_selectable(seat_id):
                raise self._reject(SeatUnavailableError())
            if len(self.selected_seat_ids) >= self.max_seats:
                raise self._reject(SeatLimitError(f"Bạn chỉ có thể chọn tối đa {self.max_seats} ghế."))
            self.selected_seat_ids.append(seat_id)
            selected = True

        self._sync_state()
        self._reresolve_discount()
        return selected

    def clear_seats(self) -> None:
        self.selected_seat_ids = []
        self._sync_state()
        self._reresolve_discount()

    def proceed_from_seats(self) -> bool:
        """
        Leave the seat map. Needs at least one seat; the backend availability
        check is best-effort here and mandatory again at checkout.
        """
        self._ensure_active()
        if self.showtime is None:
            raise self._reject(NoShowtimeSelectedError())
        if not self.selected_seat_ids:
            raise self._reject(NoSeatsSelectedError())
        try:
            self.inventory.validate_availability(list(self.selected_seat_ids), self.showtime.id, strict=False)
        except SeatConflictError as exc:
            self.clear_seats()
            raise self._reject(exc)
        return True

    # ------------------------------------------------------------------
    # food
    # ------------------------------------------------------------------
    def add_food(self, item: FoodItem) -> int:
        self._ensure_editable()
        if not item.available:
            raise self._reject(FoodUnavailableError())
        current = self.food.get(item.id)
        quantity = current.quantity + 1 if current else 1
        self.food[item.id] = SelectedFoodItem(item=item, quantity=quantity)
        self._sync_state()
        self._reresolve_discount()
        return quantity

    def remove_food(self, item_id: str) -> int:
        self._ensure_editable()
        current = self.food.get(item_id)
        if current is None:
            return 0
        if current.quantity <= 1:
            del self.food[item_id]
            quantity = 0
        else:
            quantity = current.quantity - 1
            self.food[item_id] = SelectedFoodItem(item=current.item, quantity=quantity)
        self._sync_state()
        self._reresolve_discount()
        return quantity

    # ------------------------------------------------------------------
    # pricing and discount
    # ------------------------------------------------------------------
    def _base_totals(self) -> PriceBreakdown:
        return compute_totals(self.selected_seats, self.food.values())

    def totals(self) -> PriceBreakdown:
        amount = self.discount.amount if self.discount else 0
        return compute_totals(self.selected_seats, self.food.values(), amount)

    def apply_discount(self, descriptor: DiscountDescriptor) -> DiscountResolution:
        self._ensure_active()
        try:
            resolution = resolve_discount(descriptor, self._base_totals(), self.cinema.id)
        except DiscountRejectedError as exc:
            raise self._reject(exc)
        self.discount = resolution
        logger.info("Discount %s applied: -%d", descriptor.code, resolution.amount)
        return resolution

    def apply_discount_code(self, code: str) -> DiscountResolution:
        self._ensure_active()
        try:
            descriptor = self.discount_resolver.lookup(code)
        except BookingError as exc:
            raise self._reject(exc)
        return self.apply_discount(descriptor)

    def remove_discount(self) -> None:
        self._ensure_active()
        self.discount = None

    def _reresolve_discount(self) -> None:
        if self.discount is None:
            return
        try:
            self.discount = resolve_discount(self.discount.descriptor, self._base_totals(), self.cinema.id)
        except DiscountRejectedError:
            logger.info("Discount %s no longer applies, dropped", self.discount.descriptor.code)
            self.discount = None
            self._notify(Notice(
                kind=NoticeKind.VALIDATION,
                title=DiscountRejectedError.title,
                message=DISCOUNT_DROPPED_MESSAGE,
                blocking=False,
            ))

    # ------------------------------------------------------------------
    # payment review and the hold countdown
    # ------------------------------------------------------------------
    @property
    def remaining_seconds(self) -> int:
        return self.timer.remaining

    def enter_payment_review(self) -> None:
        self._ensure_active()
        if self.showtime is None:
            raise self._reject(NoShowtimeSelectedError())
        if not self.selected_seat_ids:
            raise self._reject(NoSeatsSelectedError())
        if self.state is not SessionState.PAYMENT_REVIEW:
            self._state_before_review = self.state
        if self.order_id is None:
            self.order_id = generate_order_id()
        self.state = SessionState.PAYMENT_REVIEW
        # start() tears down any interval left from an earlier entry
        self.timer.start()
        logger.info("Session %s in payment review, order %s, hold %ss", self.session_id, self.order_id, self.timer.seconds)

    def leave_payment_review(self) -> None:
        if self.state is not SessionState.PAYMENT_REVIEW:
            return
        self.timer.stop()
        self.state = self._state_before_review
        self._sync_state()

    def app_backgrounded(self) -> None:
        self.backgrounded = True
        self.timer.suspend()

    def app_foregrounded(self) -> None:
        self.backgrounded = False
        self.timer.resume()
        if self._expiry_pending:
            self._expiry_pending = False
            self._present_expiry()

    def _on_timer_expired(self) -> None:
        if self.confirmed or self.state is not SessionState.PAYMENT_REVIEW:
            return
        self.state = SessionState.EXPIRED
        logger.warning("Session %s expired before confirmation (order %s)", self.session_id, self.order_id)
        if self.backgrounded:
            self._expiry_pending = True
        else:
            self._present_expiry()

    def _present_expiry(self) -> None:
        if self._expiry_shown:
            return
        self._expiry_shown = True
        self._notify(SessionExpiredError().to_notice())
        if self.on_expired is not None:
            self.on_expired()

    # ------------------------------------------------------------------
    # confirmation
    # ------------------------------------------------------------------
    def confirm(self, contact: ContactInfo, payment_method: PaymentMethod = PaymentMethod.STRIPE) -> BookingDraft:
        """Freeze the session into a BookingDraft. Only valid during payment review."""
        self._ensure_active()
        if self.state is not SessionState.PAYMENT_REVIEW:
            raise self._reject(SessionStateError())

        # the flag goes up before the timer stops so a tick in between cannot expire us
        self.confirmed = True
        self.timer.stop()

        totals = self.totals()
        self.draft = BookingDraft(
            order_id=self.order_id,
            movie_id=self.movie_id,
            movie_title=self.movie_title,
            showtime=self.showtime,
            seats=tuple(self.selected_seats),
            food_items=tuple(self.food.values()),
            seat_total=totals.seat_subtotal,
            food_total=totals.food_subtotal,
            discount=self.discount.descriptor if self.discount else None,
            discount_amount=totals.discount_amount,
            total=totals.grand_total,
            contact=contact,
            payment_method=payment_method,
            confirmed_at=utcnow(),
        )
        self.state = SessionState.CONFIRMED
        logger.info("Session %s confirmed: order %s, total %d", self.session_id, self.order_id, totals.grand_total)
        return self.draft

    def teardown(self) -> None:
        self.timer.stop()

