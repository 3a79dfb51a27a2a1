"""
Shared fixtures: a KeyMintClient wired to an in-memory httpx transport.
"""

import httpx
import pytest

from keymint.config import Settings
from keymint.license_client import KeyMintClient

ACCESS_TOKEN = "test_access_token_123"


class StubApi:
    """Records every request and answers with the configured handler."""

    def __init__(self):
        self.requests = []
        self._handler = lambda request: httpx.Response(200, json={})

    def respond(self, status_code=200, json=None, content=None):
        if content is not None:
            self._handler = lambda request: httpx.Response(status_code, content=content)
        else:
            self._handler = lambda request: httpx.Response(status_code, json=json)

    def fail(self, exc_factory):
        def handler(request):
            raise exc_factory(request)
        self._handler = handler

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, KEYMINT_ACCESS_TOKEN="", KEYMINT_API_URL="https://api.keymint.dev")


@pytest.fixture
def stub_api():
    return StubApi()


@pytest.fixture
async def client(stub_api, test_settings):
    client = KeyMintClient(
        ACCESS_TOKEN,
        settings=test_settings,
        transport=httpx.MockTransport(stub_api),
    )
    yield client
    await client.aclose()
