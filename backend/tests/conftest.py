"""Shared fixtures: the app behind an in-process ASGI client, upstream mocked with respx."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from beamgate.config import HYPERBEAM_API_BASE, Settings, VMDefaults
from beamgate.main import create_app

API_KEY = "hb-test-key"
VM_URL = f"{HYPERBEAM_API_BASE}/vm"

CORS_EXPECTED = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET, POST, DELETE, OPTIONS",
    "access-control-allow-headers": "Content-Type, Authorization",
}


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {"hb_api_key": API_KEY, "deployment_variant": "passthrough"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def assert_cors(headers) -> None:
    for name, value in CORS_EXPECTED.items():
        assert headers.get(name) == value


async def _client_for(settings: Settings, vm_defaults: VMDefaults | None = None) -> AsyncClient:
    app = create_app(settings, vm_defaults)
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    """Passthrough deployment with a valid key."""
    async with await _client_for(make_settings()) as ac:
        yield ac


@pytest.fixture
async def viewer_client() -> AsyncIterator[AsyncClient]:
    """Viewer deployment with a valid key."""
    async with await _client_for(make_settings(deployment_variant="viewer")) as ac:
        yield ac


@pytest.fixture
def client_factory():
    """Build a client for arbitrary settings / VM defaults."""

    def _factory(settings: Settings | None = None, vm_defaults: VMDefaults | None = None):
        return _client_for(settings or make_settings(), vm_defaults)

    return _factory
