"""Context propagation for log correlation across search calls."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING
from uuid import uuid4


if TYPE_CHECKING:
    from collections.abc import Generator

search_context: ContextVar[dict | None] = ContextVar("search_context", default=None)


def generate_trace_id() -> str:
    """Generate a 32-char hex trace ID."""
    return uuid4().hex


def generate_span_id() -> str:
    """Generate a 16-char hex span ID."""
    return uuid4().hex[:16]


def get_search_context() -> dict:
    """Get current context with trace_id and span_id, creating one if needed."""
    ctx = search_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {"trace_id": generate_trace_id(), "span_id": generate_span_id()}
        search_context.set(ctx)
    return ctx


def set_search_context(trace_id: str, span_id: str, **extra: object) -> None:
    """Set context for the current thread or task."""
    search_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


@contextmanager
def operation_span(catalog: str) -> Generator[dict, None, None]:
    """Open a new span under the current trace for one index operation."""
    parent = get_search_context()
    token = search_context.set({**parent, "span_id": generate_span_id(), "catalog": catalog})
    try:
        yield search_context.get()
    finally:
        search_context.reset(token)
