import logging
from typing import Any, Dict, Optional

import requests

from booking_client.utils.config import settings
from booking_client.utils.errors import ApiError
from booking_client.utils.storage import USER_TOKEN, LocalStorage

logger = logging.getLogger("booking.api")

TIMEOUT_MESSAGE = "Kết nối quá chậm. Vui lòng thử lại."
BAD_FORMAT_MESSAGE = "Server trả về định dạng không hợp lệ. Vui lòng kiểm tra API endpoint."


class ApiClient:
    """
    Thin JSON client for the booking backend.

    Every failure (transport, non-JSON body, non-2xx status) is raised as ApiError
    carrying a user-displayable message. Nothing is retried here; callers decide.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        storage: Optional[LocalStorage] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.API_TIMEOUT_SECONDS
        self.storage = storage
        self.session = session or requests.Session()

    @property
    def token(self) -> Optional[str]:
        if self.storage is None:
            return None
        return self.storage.get_item(USER_TOKEN)

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Accept-Language": settings.ACCEPT_LANGUAGE,
        }
        token = self.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("%s %s", method, url)

        try:
            resp = self.session.request(
                method, url, params=params, json=json, headers=self._headers(), timeout=self.timeout
            )
        except requests.Timeout as exc:
            raise ApiError(TIMEOUT_MESSAGE) from exc
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError() from exc

        content_type = resp.headers.get("content-type") or ""
        is_json = "application/json" in content_type

        if not resp.ok:
            raise ApiError(_error_message(resp, is_json), status_code=resp.status_code)

        if not is_json:
            logger.warning("%s %s returned %s instead of JSON", method, url, content_type or "unknown format")
            raise ApiError(BAD_FORMAT_MESSAGE, status_code=resp.status_code)
        try:
            return resp.json()
        except ValueError as exc:
            raise ApiError(BAD_FORMAT_MESSAGE, status_code=resp.status_code) from exc

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._request("GET", path, params=params)

    def post(self, path: str, json: Optional[Any] = None) -> Any:
        return self._request("POST", path, json=json)

    def put(self, path: str, json: Optional[Any] = None) -> Any:
        return self._request("PUT", path, json=json)


def _error_message(resp: requests.Response, is_json: bool) -> str:
    fallback = f"HTTP {resp.status_code}: {resp.reason}"
    if is_json:
        try:
            body = resp.json()
        except ValueError:
            return fallback
        if isinstance(body, dict):
            return body.get("message") or body.get("error") or fallback
        return fallback

    text = resp.text or ""
    if "<html" in text.lower() or "<!doctype" in text.lower():
        if resp.status_code == 404:
            return "API endpoint không tồn tại. Vui lòng kiểm tra URL."
        if resp.status_code >= 500:
            return "Lỗi server nội bộ. Vui lòng thử lại sau."
        return f"Server trả về lỗi ({resp.status_code}). Vui lòng thử lại."
    return fallback
