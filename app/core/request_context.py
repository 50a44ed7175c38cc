from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4


_request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def new_request_id() -> str:
    """Timestamped id used to correlate log lines with error responses."""
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    return f"req_{timestamp}_{uuid4().hex[:8]}"


def set_request_id(request_id: str) -> None:
    _request_id_var.set(request_id)


def get_request_id() -> Optional[str]:
    return _request_id_var.get()


def current_request_id() -> str:
    """Request id of the current request, or a fresh one outside a request."""
    return get_request_id() or new_request_id()


def clear_request_context() -> None:
    _request_id_var.set(None)
