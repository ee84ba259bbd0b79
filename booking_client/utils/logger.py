import logging
import contextvars
from contextlib import contextmanager
from typing import Iterator, Optional, Union

from booking_client.utils.config import settings

# Context var holding the reservation (order) id so any code during a booking flow can fetch it
session_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("session_id", default=None)


class SessionIdFilter(logging.Filter):
    """Attach session_id to every LogRecord so formatter can include it."""
    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = session_id_ctx.get() or "-"
        return True


def setup_logging(level: Union[int, str, None] = None) -> None:
    """
    Basic logging setup. Call once at app startup.
    This creates a StreamHandler with a formatter that includes the session_id.
    """
    root = logging.getLogger()
    if root.handlers:
        # Avoid adding duplicate handlers when called twice
        return

    handler = logging.StreamHandler()
    fmt = "%(asctime)s %(levelname)s [%(session_id)s] %(name)s: %(message)s"
    formatter = logging.Formatter(fmt)
    handler.setFormatter(formatter)

    handler.addFilter(SessionIdFilter())
    root.setLevel(level or settings.LOG_LEVEL)
    root.addHandler(handler)


@contextmanager
def bind_session(session_id: Optional[str]) -> Iterator[None]:
    """Tag log records emitted inside the block with the given reservation id."""
    token = session_id_ctx.set(session_id)
    try:
        yield
    finally:
        session_id_ctx.reset(token)