"""Device point data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class DevicePoint:
    """A single device point reported by the API."""

    code: str
    value: Any
    name: str | None = None
    unit: str | None = None


@dataclass
class PointWriteResult:
    """Outcome of a device point write."""

    ok: bool
    status: int


@dataclass
class HiaxDevice:
    """Device registered on the user's account."""

    device_id: str
    name: str
    product_name: str | None = None
    serial_number: str | None = None
