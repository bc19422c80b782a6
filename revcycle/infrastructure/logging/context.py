"""
Correlation id context.

Holds the correlation id of the operation currently executing so that log
records and audit entries written anywhere below a request can be tied back
to it. Backed by a ``ContextVar``, so concurrent tasks each see their own id.
"""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token:
    """Bind a correlation id (a new UUID4 if none given) and return the reset token."""
    return _correlation_id.set(correlation_id or str(uuid.uuid4()))


def reset_correlation_id(token: Token) -> None:
    _correlation_id.reset(token)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """
    Bind a correlation id for the duration of a ``with`` block.

    Yields:
        The bound correlation id
    """
    token = set_correlation_id(correlation_id)
    try:
        yield _correlation_id.get()
    finally:
        reset_correlation_id(token)
