"""Retryable vs. fatal classification.

Standalone predicates so HTTP clients, database wrappers, or other glue can
share the executor's judgment without depending on the executor itself.

Precedence for ``is_retryable`` (first match wins):
1. Cancellation: never retried
2. Explicit RetryableError tag: its flag, unless the cause is a cancellation
3. Transport transients: timeouts, temporary resolution failures
4. Connection refused / reset
5. Anything else: fatal
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import errno
import socket
from http import HTTPStatus

from retrykit.foundation.errors import CancelledError, RetryableError

_CANCELLATION_TYPES: tuple[type[BaseException], ...] = (
    CancelledError,
    asyncio.CancelledError,
    concurrent.futures.CancelledError,
)

_TRANSIENT_ERRNOS: frozenset[int] = frozenset({errno.ETIMEDOUT, errno.EAGAIN, errno.ECONNABORTED})
_CONNECTION_ERRNOS: frozenset[int] = frozenset({errno.ECONNREFUSED, errno.ECONNRESET})

# getaddrinfo "try again": the resolver itself flags these as temporary
_TEMPORARY_GAI_ERRORS: frozenset[int] = frozenset(
    code for code in (getattr(socket, "EAI_AGAIN", None),) if code is not None
)

RETRYABLE_HTTP_STATUSES: frozenset[int] = frozenset({
    HTTPStatus.REQUEST_TIMEOUT,
    HTTPStatus.TOO_MANY_REQUESTS,
    HTTPStatus.INTERNAL_SERVER_ERROR,
    HTTPStatus.BAD_GATEWAY,
    HTTPStatus.SERVICE_UNAVAILABLE,
    HTTPStatus.GATEWAY_TIMEOUT,
})


def is_cancellation(err: BaseException | None) -> bool:
    """Whether ``err`` signals cancellation rather than an operation failure."""
    return isinstance(err, _CANCELLATION_TYPES)


def is_transient_network_error(err: BaseException | None) -> bool:
    """Timeouts and temporary failures reported by the transport layer."""
    if isinstance(err, TimeoutError):  # socket.timeout is an alias
        return True
    if isinstance(err, socket.gaierror):
        return err.errno in _TEMPORARY_GAI_ERRORS
    return isinstance(err, OSError) and err.errno in _TRANSIENT_ERRNOS


def is_connection_error(err: BaseException | None) -> bool:
    """Connection refused or reset by peer."""
    if isinstance(err, (ConnectionRefusedError, ConnectionResetError)):
        return True
    return isinstance(err, OSError) and err.errno in _CONNECTION_ERRNOS


def is_retryable(err: BaseException | None) -> bool:
    """Whether the executor should attempt the operation again after ``err``.

    Pure and total: defined for every value, ``None`` included (False).
    Only the error itself and a RetryableError's direct cause are inspected;
    longer ``__cause__`` chains are not walked.
    """
    if err is None or is_cancellation(err):
        return False
    if isinstance(err, RetryableError):
        return err.retryable and not is_cancellation(err.cause)
    return is_transient_network_error(err) or is_connection_error(err)


def is_retryable_http_status(status: int) -> bool:
    """Whether an HTTP response status indicates a transient server-side condition.

    Covers 408, 429, 500, 502, 503 and 504. A response with such a status is
    a transport success, so callers typically raise ``RetryableError`` from
    it inside their operation.
    """
    return status in RETRYABLE_HTTP_STATUSES
