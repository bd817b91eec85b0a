"""Tests for retryable classification."""

from __future__ import annotations

import asyncio
import errno
import socket
from http import HTTPStatus

import pytest

from retrykit.foundation.errors import CancelledError, DeadlineExceeded, RetryableError
from retrykit.runtime.retry import (
    RETRYABLE_HTTP_STATUSES,
    is_cancellation,
    is_connection_error,
    is_retryable,
    is_retryable_http_status,
    is_transient_network_error,
)


class TestIsRetryable:
    """Precedence: cancellation > explicit tag > transport > connection > fatal."""

    @pytest.mark.parametrize("err", [
        CancelledError("stop"),
        DeadlineExceeded(1.0),
        asyncio.CancelledError(),
    ])
    def test_cancellation_is_fatal(self, err: BaseException) -> None:
        assert is_cancellation(err)
        assert not is_retryable(err)

    def test_marker_forces_retry_for_any_cause(self) -> None:
        assert is_retryable(RetryableError(ValueError("bad payload")))
        assert is_retryable(RetryableError(KeyError("missing")))

    def test_marker_can_refuse_retry(self) -> None:
        assert not is_retryable(RetryableError(ConnectionResetError(), retryable=False))
        assert not is_retryable(RetryableError.fatal(TimeoutError()))

    def test_marker_around_cancellation_is_fatal(self) -> None:
        assert not is_retryable(RetryableError(DeadlineExceeded(0.5)))
        assert not is_retryable(RetryableError(CancelledError()))
        assert not is_retryable(RetryableError(asyncio.CancelledError()))

    @pytest.mark.parametrize("err", [
        TimeoutError("read timed out"),
        socket.timeout("timed out"),
        OSError(errno.ETIMEDOUT, "Connection timed out"),
        OSError(errno.EAGAIN, "Resource temporarily unavailable"),
        OSError(errno.ECONNABORTED, "Software caused connection abort"),
    ])
    def test_transport_transients(self, err: BaseException) -> None:
        assert is_transient_network_error(err)
        assert is_retryable(err)

    def test_temporary_dns_failure(self) -> None:
        if not hasattr(socket, "EAI_AGAIN"):
            pytest.skip("platform lacks EAI_AGAIN")
        assert is_retryable(socket.gaierror(socket.EAI_AGAIN, "Temporary failure in name resolution"))

    def test_permanent_dns_failure(self) -> None:
        if not hasattr(socket, "EAI_NONAME"):
            pytest.skip("platform lacks EAI_NONAME")
        assert not is_retryable(socket.gaierror(socket.EAI_NONAME, "Name or service not known"))

    @pytest.mark.parametrize("err", [
        ConnectionRefusedError(errno.ECONNREFUSED, "Connection refused"),
        ConnectionResetError(errno.ECONNRESET, "Connection reset by peer"),
        OSError(errno.ECONNREFUSED, "Connection refused"),
        OSError(errno.ECONNRESET, "Connection reset by peer"),
    ])
    def test_connection_failures(self, err: BaseException) -> None:
        assert is_connection_error(err)
        assert is_retryable(err)

    @pytest.mark.parametrize("err", [
        ValueError("bad input"),
        KeyError("k"),
        PermissionError(errno.EACCES, "Permission denied"),
        FileNotFoundError(errno.ENOENT, "No such file"),
        BrokenPipeError(errno.EPIPE, "Broken pipe"),
        RuntimeError("boom"),
    ])
    def test_everything_else_is_fatal(self, err: BaseException) -> None:
        assert not is_retryable(err)

    def test_none_is_not_retryable(self) -> None:
        assert not is_retryable(None)

    def test_cause_chain_is_not_walked(self) -> None:
        try:
            try:
                raise ConnectionResetError()
            except ConnectionResetError as inner:
                raise RuntimeError("wrapped") from inner
        except RuntimeError as outer:
            assert not is_retryable(outer)


class TestHttpStatus:
    @pytest.mark.parametrize("status", [408, 429, 500, 502, 503, 504])
    def test_retryable_statuses(self, status: int) -> None:
        assert is_retryable_http_status(status)

    @pytest.mark.parametrize("status", [200, 201, 204, 301, 400, 401, 403, 404, 409, 422, 501, 505])
    def test_other_statuses(self, status: int) -> None:
        assert not is_retryable_http_status(status)

    def test_accepts_http_status_enum(self) -> None:
        assert is_retryable_http_status(HTTPStatus.SERVICE_UNAVAILABLE)
        assert len(RETRYABLE_HTTP_STATUSES) == 6
