"""Switch platform for Hiax Connected integration."""

from __future__ import annotations

from typing import Any

from homeassistant.components.switch import SwitchEntity
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import HiaxConfigEntry
from .const import CAP_ONOFF
from .entity import HiaxEntity
from .heater import HiaxHeater


async def async_setup_entry(
    hass: HomeAssistant,
    entry: HiaxConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the switch platform from a config entry."""
    data = entry.runtime_data
    async_add_entities([HiaxHeaterSwitch(data.coordinator, data.heater)])


class HiaxHeaterSwitch(HiaxEntity, SwitchEntity):
    """Representation of the heater on/off switch."""

    _attr_name = "Heater"
    _attr_icon = "mdi:water-boiler"

    def __init__(
        self,
        coordinator: DataUpdateCoordinator[dict[str, Any]],
        heater: HiaxHeater,
    ) -> None:
        """Initialize the switch."""
        super().__init__(coordinator, heater, CAP_ONOFF)

    @property
    def is_on(self) -> bool | None:
        """Return whether the heater is on."""
        return self.capability(CAP_ONOFF)

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Turn on the heater."""
        await self._heater.async_turn_on()

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Turn off the heater."""
        await self._heater.async_turn_off()
