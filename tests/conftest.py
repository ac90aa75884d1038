"""Test configuration and fixtures."""

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestServer

from oci_distribution_client import Reference, RegistryClient
from tests.helpers import FakeRegistry


@pytest_asyncio.fixture
async def fake_registry():
    """Start a fake registry on a local port."""
    registry = FakeRegistry()
    server = TestServer(registry.app, host="127.0.0.1")
    await server.start_server()
    registry.host = f"{server.host}:{server.port}"
    yield registry
    await server.close()


@pytest_asyncio.fixture
async def client():
    """Plain-HTTP client, closed after the test."""
    async with RegistryClient(scheme="http", timeout=10) as registry_client:
        yield registry_client


@pytest.fixture
def image(fake_registry):
    """Reference to an image on the fake registry."""
    return Reference.parse(f"{fake_registry.host}/test/app:v1")
