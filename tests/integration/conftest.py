"""Integration test fixtures: the bridge app wired to the in-memory Handy API."""

import pytest
from httpx import ASGITransport, AsyncClient

from handy_dictate.api.app import create_app
from handy_dictate.plugin import DictatePlugin
from handy_dictate.services.dictation import DictationController


@pytest.fixture
def plugin(handy_client, host, poller):
    controller = DictationController(
        handy_client, host, poller=poller, transcribe_timeout=30.0, title="Dictate"
    )
    return DictatePlugin(controller=controller)


@pytest.fixture
def app(plugin):
    """Create a fresh FastAPI application around the test plugin."""
    return create_app(plugin)


@pytest.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
