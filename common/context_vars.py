# common/context_vars.py
from contextvars import ContextVar
from typing import Optional, Any

# Unique to each async task (each request)
request_timer_context_var: ContextVar[Optional[Any]] = ContextVar(
    "request_timer",
    default=None,
)

request_id_context_var: ContextVar[Optional[str]] = ContextVar(
    "request_id",
    default=None,
)

__all__ = ["request_timer_context_var", "request_id_context_var"]
