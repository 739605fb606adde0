from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4

REQUEST_ID_HEADER = "X-Request-Id"
request_id_context: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_request_id() -> str | None:
    return request_id_context.get()


def outgoing_request_id() -> str:
    return get_request_id() or str(uuid4())


@contextmanager
def bound_request_id(request_id: str | None = None) -> Iterator[str]:
    value = request_id or str(uuid4())
    token = request_id_context.set(value)
    try:
        yield value
    finally:
        request_id_context.reset(token)
