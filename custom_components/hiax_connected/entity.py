"""Base entity for Hiax Connected integration."""

from __future__ import annotations

from typing import Any

from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import (
    CoordinatorEntity,
    DataUpdateCoordinator,
)

from .const import DOMAIN, MANUFACTURER, MODEL
from .heater import HiaxHeater


class HiaxEntity(CoordinatorEntity[DataUpdateCoordinator[dict[str, Any]]]):
    """Entity backed by a heater capability."""

    _attr_has_entity_name = True

    def __init__(
        self,
        coordinator: DataUpdateCoordinator[dict[str, Any]],
        heater: HiaxHeater,
        key: str,
    ) -> None:
        """Initialize the entity."""
        super().__init__(coordinator)
        self._heater = heater
        self._attr_unique_id = f"hiax_{heater.device_id}_{key}"
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, heater.device_id)},
            manufacturer=MANUFACTURER,
            model=MODEL,
        )

    def capability(self, name: str) -> Any:
        """Return the current value of a capability."""
        return self._heater.capabilities.get(name)
