"""Select platform for Hiax Connected integration."""

from __future__ import annotations

from typing import Any

import voluptuous as vol

from homeassistant.components.select import SelectEntity
from homeassistant.core import HomeAssistant
from homeassistant.helpers import entity_platform
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import HiaxConfigEntry
from .const import (
    ATTR_MAX_POWER,
    CAP_MAX_POWER,
    MAX_POWER_OPTIONS,
    SERVICE_CHANGE_MAX_POWER,
)
from .entity import HiaxEntity
from .heater import HiaxHeater


async def async_setup_entry(
    hass: HomeAssistant,
    entry: HiaxConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the select platform from a config entry."""
    data = entry.runtime_data
    async_add_entities([HiaxMaxPowerSelect(data.coordinator, data.heater)])

    platform = entity_platform.async_get_current_platform()
    platform.async_register_entity_service(
        SERVICE_CHANGE_MAX_POWER,
        {vol.Required(ATTR_MAX_POWER): vol.In(MAX_POWER_OPTIONS)},
        "async_change_max_power",
    )


class HiaxMaxPowerSelect(HiaxEntity, SelectEntity):
    """Representation of the heating element power level."""

    _attr_translation_key = CAP_MAX_POWER
    _attr_icon = "mdi:flash"
    _attr_options = MAX_POWER_OPTIONS

    def __init__(
        self,
        coordinator: DataUpdateCoordinator[dict[str, Any]],
        heater: HiaxHeater,
    ) -> None:
        """Initialize the select."""
        super().__init__(coordinator, heater, CAP_MAX_POWER)

    @property
    def current_option(self) -> str | None:
        """Return the selected power level."""
        return self.capability(CAP_MAX_POWER)

    async def async_select_option(self, option: str) -> None:
        """Change the power level."""
        await self._heater.async_select_max_power(option)

    async def async_change_max_power(self, max_power: str) -> None:
        """Change the power level from an automation action."""
        await self._heater.async_change_max_power(max_power)
