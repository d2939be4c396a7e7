from __future__ import annotations

import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Mapping

TRACE_HEADER = "X-Trace-ID"
TRACE_HEADER_ALIASES = (TRACE_HEADER, "X-Trace-Id", "X-Request-ID", "x-request-id")
TRACE_PREFIX = "pos"


def new_trace_id(operation: str | None = None) -> str:
    """``pos-<operation>-<hex>``; the operation part is dropped when unnamed."""
    suffix = uuid.uuid4().hex[:16]
    if operation:
        return f"{TRACE_PREFIX}-{operation}-{suffix}"
    return f"{TRACE_PREFIX}-{suffix}"


@dataclass
class TraceContext:
    """Correlation id sent with every request of one cashier operation.

    Outside an operation scope the id is created once and reused. Inside
    ``operation()`` all requests (every catalogue page of one sync, or the
    checkout POST) share one new id; the outer id is restored on exit.
    A trace id assigned by the server replaces the current one.
    """

    trace_id: str | None = None
    operation_name: str | None = None

    def ensure(self) -> str:
        if not self.trace_id:
            self.trace_id = new_trace_id(self.operation_name)
        return self.trace_id

    @contextmanager
    def operation(self, name: str) -> Iterator[str]:
        saved = (self.trace_id, self.operation_name)
        self.operation_name = name
        self.trace_id = new_trace_id(name)
        try:
            yield self.trace_id
        finally:
            self.trace_id, self.operation_name = saved

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        for key in TRACE_HEADER_ALIASES:
            trace_id = headers.get(key)
            if trace_id:
                self.trace_id = trace_id
                return
