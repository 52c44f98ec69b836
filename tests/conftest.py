from __future__ import annotations

import time
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry

from homeassistant.components.application_credentials import (
    ClientCredential,
    async_import_client_credential,
)
from homeassistant.core import HomeAssistant
from homeassistant.setup import async_setup_component

from custom_components.hiax_connected.api import AbstractAuth
from custom_components.hiax_connected.const import CONF_DEVICE_ID, DOMAIN
from custom_components.hiax_connected.device_point import DevicePoint, PointWriteResult


class FakeAuth(AbstractAuth):
    async def async_get_access_token(self) -> str:
        return "token-123"


class MockResponse:
    def __init__(self, status: int, json_data: Any = None, text_data: str = "") -> None:
        self.status = status
        self._json = json_data
        self._text = text_data

    async def __aenter__(self) -> MockResponse:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def json(self) -> Any:
        return self._json

    async def text(self) -> str:
        return self._text


class FakeSession:
    """Record requests and replay queued responses."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.responses: list[MockResponse | Exception] = []

    def queue(self, response: MockResponse | Exception) -> None:
        self.responses.append(response)

    def _next(self, **call: Any) -> MockResponse:
        self.calls.append(call)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def request(self, method: str, url: str, **kwargs: Any) -> MockResponse:
        return self._next(method=method, url=url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> MockResponse:
        return self._next(method="PATCH", url=url, **kwargs)


def points(values: dict[str, Any]) -> list[DevicePoint]:
    """Build device points in insertion order."""
    return [DevicePoint(code, value) for code, value in values.items()]


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def auth() -> FakeAuth:
    return FakeAuth()


@pytest.fixture
def client() -> AsyncMock:
    """Vendor client accepting every write."""
    mock = AsyncMock()
    mock.set_device_point.return_value = PointWriteResult(True, 200)
    return mock


DEVICE_ID = "emmy-r-1234"
DEVICE_TITLE = "Bathroom heater"

DEVICE_VALUES: dict[str, Any] = {
    "100": 20,
    "101": 8,
    "302": 8.4,
    "303": 1523.0,
    "400": 2000,
    "404": 87,
    "500": 8,
    "511": 14,
    "512": 12.5,
    "516": 5,
    "517": 3,
    "527": 70,
    "528": 64,
}


def device_points(device_id: str, codes: list[str]) -> list[DevicePoint]:
    """Answer a point read from ``DEVICE_VALUES``."""
    return points({code: DEVICE_VALUES[code] for code in codes if code in DEVICE_VALUES})


@pytest.fixture
async def setup_credentials(hass: HomeAssistant, enable_custom_integrations: None) -> None:
    """Register OAuth2 application credentials for the integration."""
    assert await async_setup_component(hass, "application_credentials", {})
    await async_import_client_credential(
        hass, DOMAIN, ClientCredential("client-id", "client-secret"), DOMAIN
    )


@pytest.fixture
def config_entry() -> MockConfigEntry:
    return MockConfigEntry(
        domain=DOMAIN,
        title=DEVICE_TITLE,
        unique_id=DEVICE_ID,
        data={
            "auth_implementation": DOMAIN,
            "token": {
                "access_token": "token-123",
                "refresh_token": "refresh-123",
                "token_type": "Bearer",
                "expires_in": 3600,
                "expires_at": time.time() + 3600,
            },
            CONF_DEVICE_ID: DEVICE_ID,
        },
    )


@pytest.fixture
def device_client(client: AsyncMock) -> AsyncMock:
    """Vendor client backed by ``DEVICE_VALUES``."""
    client.get_device_points.side_effect = device_points
    return client


async def setup_integration(
    hass: HomeAssistant, entry: MockConfigEntry, client: AsyncMock
) -> None:
    """Set up the config entry against a mocked vendor client."""
    entry.add_to_hass(hass)
    with patch("custom_components.hiax_connected.HiaxClient", return_value=client):
        await hass.config_entries.async_setup(entry.entry_id)
        await hass.async_block_till_done()
