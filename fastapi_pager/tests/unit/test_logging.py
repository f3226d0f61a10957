"""Tests for core logging module with context vars and middleware."""

import logging
from collections.abc import Callable, Generator
from http import HTTPStatus
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from starlette.datastructures import Headers
from starlette.requests import Request
from starlette.responses import Response

from fastapi_pager.core.config import Settings
from fastapi_pager.core.logging import (
    LoggingMiddleware,
    _request_id_var,
    configure_logging,
    get_logger,
    get_logging_context,
    get_request_id,
    log_with_context,
    set_request_id,
)


@pytest.fixture(autouse=True)
def reset_context_vars() -> Generator[None]:
    """Reset context vars before each test."""
    token = _request_id_var.set(None)
    yield
    _request_id_var.reset(token)


class TestRequestIdContextVar:
    """Tests for request ID context variable functions."""

    def test_set_and_get_request_id(self) -> None:
        set_request_id("test-request-123")

        assert get_request_id() == "test-request-123"

    def test_get_request_id_returns_none_when_not_set(self) -> None:
        assert get_request_id() is None

    def test_set_request_id_overwrites_previous_value(self) -> None:
        set_request_id("first-request-id")
        set_request_id("second-request-id")

        assert get_request_id() == "second-request-id"


class TestGetLoggingContext:
    """Tests for get_logging_context function."""

    def test_returns_request_id(self) -> None:
        request_id = str(uuid4())
        set_request_id(request_id)

        assert get_logging_context() == {"request_id": request_id}

    def test_returns_none_when_not_set(self) -> None:
        assert get_logging_context() == {"request_id": None}


class TestLogWithContext:
    """Tests for log_with_context helper function."""

    def test_merges_context_with_extra(self) -> None:
        set_request_id("req-1")
        mock_logger = MagicMock(spec=logging.Logger)

        log_with_context(
            mock_logger,
            logging.INFO,
            "pager_not_found_translated",
            extra={"path": "/items"},
        )

        mock_logger.log.assert_called_once_with(
            logging.INFO,
            "pager_not_found_translated",
            extra={"request_id": "req-1", "path": "/items"},
        )

    def test_works_without_extra(self) -> None:
        mock_logger = MagicMock(spec=logging.Logger)

        log_with_context(mock_logger, logging.WARNING, "warning_message")

        mock_logger.log.assert_called_once_with(
            logging.WARNING,
            "warning_message",
            extra={"request_id": None},
        )

    def test_extra_overrides_context(self) -> None:
        set_request_id("context-req")
        mock_logger = MagicMock(spec=logging.Logger)

        log_with_context(mock_logger, logging.INFO, "message", extra={"request_id": "override-req"})

        assert mock_logger.log.call_args.kwargs["extra"]["request_id"] == "override-req"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_sets_root_level(self) -> None:
        root = logging.getLogger()
        previous_level = root.level
        previous_handlers = list(root.handlers)
        try:
            configure_logging("warning")

            assert root.level == logging.WARNING
            assert any(type(h.formatter).__name__ == "StdlibFormatter" for h in root.handlers)
        finally:
            root.handlers = previous_handlers
            root.setLevel(previous_level)

    def test_get_logger_returns_named_logger(self) -> None:
        assert get_logger("fastapi_pager.test").name == "fastapi_pager.test"


class TestLoggingMiddleware:
    """Tests for LoggingMiddleware."""

    @pytest.fixture
    def make_middleware(self, test_settings_factory: Callable[..., Settings]) -> Callable[..., LoggingMiddleware]:
        def _factory(include_request_context_in_logs: bool = False) -> LoggingMiddleware:
            app_settings = test_settings_factory(
                request_id_header="x-request-id",
                include_request_context_in_logs=include_request_context_in_logs,
            )
            return LoggingMiddleware(app=MagicMock(), app_settings=app_settings)

        return _factory

    def _create_mock_request(self, headers: dict[str, str] | None = None) -> MagicMock:
        """Helper to create mock request objects."""
        mock_request = MagicMock(spec=Request)
        mock_request.method = "GET"
        mock_request.url = MagicMock()
        mock_request.url.path = "/items"
        mock_request.client = MagicMock()
        mock_request.client.host = "127.0.0.1"
        mock_request.headers = Headers(headers or {})
        mock_request.scope = {}
        return mock_request

    def _create_mock_response(self) -> MagicMock:
        mock_response = MagicMock(spec=Response)
        mock_response.headers = {}
        mock_response.status_code = 200
        return mock_response

    @pytest.mark.asyncio
    async def test_generates_request_id_when_not_provided(self, make_middleware) -> None:
        mock_response = self._create_mock_response()
        call_next = AsyncMock(return_value=mock_response)

        await make_middleware().dispatch(self._create_mock_request(), call_next)

        # UUID4 string form
        assert len(mock_response.headers["x-request-id"]) == 36

    @pytest.mark.asyncio
    async def test_uses_provided_request_id(self, make_middleware) -> None:
        mock_request = self._create_mock_request(headers={"x-request-id": "custom-request-id-123"})
        mock_response = self._create_mock_response()
        call_next = AsyncMock(return_value=mock_response)

        result = await make_middleware().dispatch(mock_request, call_next)

        assert result is mock_response
        assert mock_response.headers["x-request-id"] == "custom-request-id-123"
        assert get_request_id() == "custom-request-id-123"
        call_next.assert_called_once_with(mock_request)

    @pytest.mark.asyncio
    async def test_uses_configured_header(self, test_settings_factory: Callable[..., Settings]) -> None:
        middleware = LoggingMiddleware(
            app=MagicMock(),
            app_settings=test_settings_factory(request_id_header="x-correlation-id"),
        )
        mock_response = self._create_mock_response()

        await middleware.dispatch(
            self._create_mock_request(headers={"x-correlation-id": "corr-1"}),
            AsyncMock(return_value=mock_response),
        )

        assert mock_response.headers == {"x-correlation-id": "corr-1"}

    @pytest.mark.asyncio
    async def test_does_not_log_requests_when_disabled(self, make_middleware) -> None:
        call_next = AsyncMock(return_value=self._create_mock_response())

        with patch("fastapi_pager.core.logging.LOGGER") as mock_logger:
            await make_middleware(include_request_context_in_logs=False).dispatch(
                self._create_mock_request(), call_next
            )

        mock_logger.info.assert_not_called()

    @pytest.mark.asyncio
    async def test_logs_request_started_and_completed_when_enabled(self, make_middleware) -> None:
        mock_request = self._create_mock_request()
        mock_request.client = None
        call_next = AsyncMock(return_value=self._create_mock_response())

        with patch("fastapi_pager.core.logging.LOGGER") as mock_logger:
            await make_middleware(include_request_context_in_logs=True).dispatch(mock_request, call_next)

        messages = [c.args[0] for c in mock_logger.info.call_args_list]
        assert messages == ["request_started", "request_completed"]
        assert mock_logger.info.call_args_list[0].kwargs["extra"]["client_host"] is None

    @pytest.mark.asyncio
    async def test_logs_route_name(self, test_settings_factory: Callable[..., Settings]) -> None:
        app = FastAPI()
        app.add_middleware(
            LoggingMiddleware,
            app_settings=test_settings_factory(
                request_id_header="x-request-id",
                include_request_context_in_logs=True,
            ),
        )

        @app.get("/items", name="list_items")
        async def list_items() -> dict[str, str]:
            return {"status": "ok"}

        with patch("fastapi_pager.core.logging.LOGGER") as mock_logger:
            async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
                response = await client.get("/items", headers={"x-request-id": "req-42"})

        assert response.status_code == HTTPStatus.OK
        assert response.headers["x-request-id"] == "req-42"
        completed = mock_logger.info.call_args_list[-1]
        assert completed.args[0] == "request_completed"
        assert completed.kwargs["extra"]["route_name"] == "list_items"
