from typing import Any

import httpx

from gregeoip.diagnostics import BaseDiagnosticsSink

TEST_API_KEY = "test-api-key"


class MockResponse:
    def __init__(self, status_code: int, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload if payload is not None else {}
        self.text = text

    def json(self) -> Any:
        return self._payload


class MockAsyncClient:
    """Minimal async context-manager mock for httpx.AsyncClient.

    Every requested URL is appended to `calls` so tests can assert on what was
    (or was not) sent over the wire.
    """

    def __init__(self, response: MockResponse, calls: list[str]) -> None:
        self._response = response
        self._calls = calls

    async def __aenter__(self) -> "MockAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def get(self, url: str) -> MockResponse:
        self._calls.append(url)
        return self._response


class FailingAsyncClient:
    """Async client that raises a RequestError on enter to simulate network failure."""

    def __init__(self, url: str, *args: Any, **kwargs: Any) -> None:
        self._url = url

    async def __aenter__(self) -> "FailingAsyncClient":
        request = httpx.Request("GET", self._url)
        raise httpx.ConnectError("Network failure", request=request)

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None


class RecordingDiagnosticsSink(BaseDiagnosticsSink):
    """Diagnostics sink that keeps every record in memory."""

    def __init__(self) -> None:
        self.records: list[tuple[str, BaseException | None]] = []

    def record(self, message: str, cause: BaseException | None = None) -> None:
        self.records.append((message, cause))
