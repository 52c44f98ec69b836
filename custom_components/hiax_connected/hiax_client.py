"""Client for Hiax Connected API."""

from __future__ import annotations

from collections.abc import Iterable
import logging
from typing import Any

import aiohttp

from .api import AbstractAuth
from .const import DEFAULT_API_HOST
from .device_point import DevicePoint, HiaxDevice, PointWriteResult

_LOGGER = logging.getLogger(__name__)

REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=30)


class HiaxApiError(Exception):
    """Error returned by the API."""


class HiaxAuthError(HiaxApiError):
    """Error to indicate the access token was rejected."""


class HiaxConnectionError(HiaxApiError):
    """Error to indicate the API could not be reached."""


class HiaxClient:
    """Client for interacting with the Hiax Connected API."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        auth: AbstractAuth,
        host: str = DEFAULT_API_HOST,
    ) -> None:
        """Initialize the client."""
        self._session = session
        self._auth = auth
        self.host = host

    async def get_devices(self) -> list[HiaxDevice]:
        """Get all devices registered on the account."""
        payload = await self._request_json("GET", "/v2/systems/me")
        devices = []
        for system in payload.get("systems", []):
            for device in system.get("devices", []):
                product = device.get("product") or {}
                devices.append(
                    HiaxDevice(
                        str(device["id"]),
                        system.get("name") or product.get("name") or str(device["id"]),
                        product.get("name"),
                        product.get("serialNumber"),
                    )
                )
        return devices

    async def get_device_points(
        self, device_id: str, codes: str | Iterable[str]
    ) -> list[DevicePoint]:
        """Get device points in the order they were requested.

        ``codes`` is either a comma separated string or an iterable of codes.
        Points the API does not report are left out of the result.
        """
        if isinstance(codes, str):
            requested = [code.strip() for code in codes.split(",") if code.strip()]
        else:
            requested = [str(code) for code in codes]

        payload = await self._request_json(
            "GET",
            f"/v2/devices/{device_id}/points",
            params={"parameters": ",".join(requested)},
        )

        reported: dict[str, DevicePoint] = {}
        for item in payload or []:
            code = str(item.get("parameterId"))
            reported[code] = DevicePoint(
                code,
                item.get("value"),
                item.get("parameterName"),
                item.get("parameterUnit"),
            )

        return [reported[code] for code in requested if code in reported]

    async def set_device_point(
        self, device_id: str, values: dict[str, Any]
    ) -> PointWriteResult:
        """Write device points.

        A rejected write is reported through ``ok`` rather than raised.
        """
        headers = await self._headers()
        url = f"{self.host}/v2/devices/{device_id}/points"
        try:
            async with self._session.patch(
                url, json=values, headers=headers, timeout=REQUEST_TIMEOUT
            ) as response:
                ok = 200 <= response.status < 300
                if not ok:
                    _LOGGER.error(
                        "Writing points %s to device %s failed with status code %s: %s",
                        list(values),
                        device_id,
                        response.status,
                        await response.text(),
                    )
                return PointWriteResult(ok, response.status)
        except aiohttp.ClientError as err:
            _LOGGER.error("Unexpected error writing points to %s: %s", url, err)
            raise HiaxConnectionError(f"Error writing points: {err}") from err

    async def _headers(self) -> dict[str, str]:
        """Return the request headers."""
        token = await self._auth.async_get_access_token()
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }

    async def _request_json(
        self, method: str, path: str, params: dict[str, str] | None = None
    ) -> Any:
        """Make a request and return the decoded JSON body."""
        headers = await self._headers()
        url = f"{self.host}{path}"
        try:
            async with self._session.request(
                method, url, params=params, headers=headers, timeout=REQUEST_TIMEOUT
            ) as response:
                if response.status in (401, 403):
                    raise HiaxAuthError(
                        f"Request to {path} was not authorized ({response.status})"
                    )
                if response.status != 200:
                    _LOGGER.error(
                        "Request to %s failed with status code %s",
                        url,
                        response.status,
                    )
                    raise HiaxApiError(
                        f"Request to {path} failed with status code {response.status}"
                    )
                return await response.json()
        except aiohttp.ClientError as err:
            _LOGGER.error("Unexpected error making request to %s: %s", url, err)
            raise HiaxConnectionError(f"Error requesting {path}: {err}") from err
