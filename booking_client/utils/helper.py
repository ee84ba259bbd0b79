import datetime
import time
from typing import Any, List, Optional


def to_utc(dt: datetime.datetime) -> datetime.datetime:
    # If dt is None, return as-is
    if dt is None:
        return dt
    # If dt is naive, attach UTC offset
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def generate_order_id(now_ms: Optional[int] = None) -> str:
    """Client-side order id, e.g. TK1733820000000, used until the backend assigns a ticket id."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"TK{now_ms}"


def unwrap_list(payload: Any, *keys: str) -> List[Any]:
    """
    Pull a list out of a backend response: the list itself, or the first of
    `keys` (default "data") holding one, looked up on the root and on `data`.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []
    keys = keys or ("data",)
    for container in (payload, payload.get("data")):
        if isinstance(container, list):
            return container
        if not isinstance(container, dict):
            continue
        for key in keys:
            value = container.get(key)
            if isinstance(value, list):
                return value
    return []


def unwrap_object(payload: Any) -> Any:
    """Return `data` from a {success, data} envelope, or the payload itself."""
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        return payload["data"]
    return payload
