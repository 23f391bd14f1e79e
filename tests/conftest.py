import json

import httpx
import pytest


class FakeAsyncClient:
    responses: list[httpx.Response | Exception] = []
    calls: list[dict] = []

    def __init__(self, timeout: float):
        self.timeout = timeout

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def get(self, url, params=None, headers=None):
        self.calls.append(
            {"method": "GET", "url": url, "params": params or {}, "headers": headers or {}}
        )
        return self._next_response()

    async def post(self, url, json=None, headers=None):
        self.calls.append({"method": "POST", "url": url, "json": json, "headers": headers or {}})
        return self._next_response()

    @classmethod
    def _next_response(cls) -> httpx.Response:
        if not cls.responses:
            raise AssertionError("No queued response available.")
        response = cls.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @classmethod
    def queue_json(cls, status_code: int, payload: dict | list):
        cls.responses.append(
            httpx.Response(
                status_code=status_code,
                content=json.dumps(payload).encode("utf-8"),
                headers={"Content-Type": "application/json"},
                request=httpx.Request("GET", "http://test"),
            )
        )

    @classmethod
    def queue_text(cls, status_code: int, text: str):
        cls.responses.append(
            httpx.Response(
                status_code=status_code,
                content=text.encode("utf-8"),
                headers={"Content-Type": "text/plain"},
                request=httpx.Request("GET", "http://test"),
            )
        )

    @classmethod
    def queue_error(cls, exc: Exception):
        cls.responses.append(exc)


@pytest.fixture
def fake_http(monkeypatch):
    FakeAsyncClient.responses = []
    FakeAsyncClient.calls = []
    monkeypatch.setattr("httpx.AsyncClient", FakeAsyncClient)
    return FakeAsyncClient
