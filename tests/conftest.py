"""Shared test fixtures for the ig_api test suite.

FakeGateway stands in for the IG REST gateway. It is wired into an
httpx.AsyncClient through httpx.MockTransport, records every request it
receives, and replies with whatever response the test queued.
"""
import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio

from ig_api import IGSession


LOGIN_BODY = {
    "accountType": "CFD",
    "accountInfo": {"balance": 10000.0, "deposit": 0.0, "profitLoss": 0.0, "available": 10000.0},
    "currencyIsoCode": "GBP",
    "currencySymbol": "£",
    "currentAccountId": "ABC123",
    "lightstreamerEndpoint": "https://apd.marketdatasystems.com",
    "accounts": [
        {"accountId": "ABC123", "accountName": "CFD", "preferred": True, "accountType": "CFD"},
        {"accountId": "XYZ789", "accountName": "Spread bet", "preferred": False, "accountType": "SPREADBET"},
    ],
    "clientId": "100200300",
    "timezoneOffset": 1,
    "hasActiveDemoAccounts": True,
    "hasActiveLiveAccounts": False,
    "trailingStopsEnabled": False,
    "reroutingEnvironment": None,
    "dealingEnabled": True,
}

TOKEN_HEADERS = {"CST": "cst-token-1", "X-SECURITY-TOKEN": "xst-token-1"}


class FakeGateway:
    """Records requests and replays queued responses in order."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._responses: List[Callable[[httpx.Request], Any]] = []

    def queue(
        self,
        status_code: int = 200,
        json_body: Any = None,
        text: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        def reply(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status_code, text=text, headers=headers)
            return httpx.Response(status_code, content=json.dumps(json_body).encode(), headers=headers)

        self._responses.append(reply)

    def queue_handler(self, handler: Callable[[httpx.Request], Any]):
        """Queue a custom (possibly async) handler."""
        self._responses.append(handler)

    def queue_login(self, headers: Optional[Dict[str, str]] = None, body: Any = None):
        self.queue(
            200,
            json_body=LOGIN_BODY if body is None else body,
            headers=TOKEN_HEADERS if headers is None else headers,
        )

    async def handle(self, request: httpx.Request):
        self.requests.append(request)
        assert self._responses, f"unexpected request: {request.method} {request.url}"
        result = self._responses.pop(0)(request)
        if hasattr(result, "__await__"):
            result = await result
        return result


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest_asyncio.fixture
async def http_client(gateway):
    client = httpx.AsyncClient(transport=httpx.MockTransport(gateway.handle))
    yield client
    await client.aclose()


@pytest.fixture
def session(http_client):
    return IGSession("my-api-key", "trader", "s3cret", client=http_client)
