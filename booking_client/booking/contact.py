from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from booking_client.crud import user_crud
from booking_client.schemas import ContactSource
from booking_client.schemas.booking_schema import CachedContactInfo, ContactInfo
from booking_client.utils.api_client import ApiClient
from booking_client.utils.errors import ApiError
from booking_client.utils.helper import to_utc, utcnow
from booking_client.utils.storage import USER_INFO, LocalStorage

logger = logging.getLogger("booking.contact")


class ContactInfoCache:
    """
    Contact details for the booking form: the signed-in profile when reachable,
    otherwise the last values cached on the device.
    """

    def __init__(self, storage: LocalStorage, client: Optional[ApiClient] = None):
        self.storage = storage
        self.client = client

    @property
    def logged_in(self) -> bool:
        return self.client is not None and bool(self.client.token)

    def cached(self) -> Optional[CachedContactInfo]:
        raw = self.storage.get_item(USER_INFO)
        if not isinstance(raw, dict):
            return None
        try:
            info = CachedContactInfo.model_validate(raw)
        except ValidationError:
            logger.warning("Ignoring malformed cached contact info")
            return None
        if info.saved_at is not None:
            info = info.model_copy(update={"saved_at": to_utc(info.saved_at)})
        return info

    def _store(self, info: CachedContactInfo) -> None:
        self.storage.set_item(USER_INFO, info.model_dump(mode="json", by_alias=True))

    def load(self) -> Optional[CachedContactInfo]:
        cached = self.cached()
        if not self.logged_in:
            return cached

        try:
            profile = user_crud.get_profile(self.client)
        except ApiError as exc:
            logger.warning("Profile unavailable, using cached contact info: %s", exc.message)
            return cached

        # profile values win; blanks are filled from the device cache
        info = CachedContactInfo(
            full_name=profile["fullName"] or (cached.full_name if cached else ""),
            email=profile["email"] or (cached.email if cached else ""),
            phone=profile["phone"] or (cached.phone if cached else ""),
            saved_at=utcnow(),
            source=ContactSource.API,
        )
        self._store(info)
        return info

    def save(self, contact: ContactInfo, remember: bool = True) -> CachedContactInfo:
        info = CachedContactInfo(
            full_name=contact.full_name,
            email=contact.email,
            phone=contact.phone,
            saved_at=utcnow(),
            source=ContactSource.MANUAL,
        )
        if remember:
            self._store(info)

        if self.logged_in:
            try:
                user_crud.update_profile(self.client, contact.full_name, contact.email, contact.phone)
            except ApiError as exc:
                logger.warning("Profile update failed, contact kept locally only: %s", exc.message)
                return info
            info = info.model_copy(update={"source": ContactSource.API_UPDATED})
            if remember:
                self._store(info)
        return info
