"""Water heater platform for Hiax Connected integration."""

from __future__ import annotations

from typing import Any

from homeassistant.components.water_heater import (
    STATE_ELECTRIC,
    STATE_OFF,
    WaterHeaterEntity,
    WaterHeaterEntityFeature,
)
from homeassistant.const import ATTR_TEMPERATURE, PRECISION_WHOLE, UnitOfTemperature
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import HiaxConfigEntry
from .const import (
    CAP_MEASURE_TEMPERATURE,
    CAP_ONOFF,
    CAP_TARGET_TEMPERATURE,
    MAX_TARGET_TEMPERATURE,
    MIN_TARGET_TEMPERATURE,
)
from .entity import HiaxEntity
from .heater import HiaxHeater


async def async_setup_entry(
    hass: HomeAssistant,
    entry: HiaxConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the water heater platform from a config entry."""
    data = entry.runtime_data
    async_add_entities([HiaxWaterHeater(data.coordinator, data.heater)])


class HiaxWaterHeater(HiaxEntity, WaterHeaterEntity):
    """Representation of the water tank."""

    _attr_name = None
    _attr_precision = PRECISION_WHOLE
    _attr_temperature_unit = UnitOfTemperature.CELSIUS
    _attr_min_temp = MIN_TARGET_TEMPERATURE
    _attr_max_temp = MAX_TARGET_TEMPERATURE
    _attr_operation_list = [STATE_ELECTRIC, STATE_OFF]
    _attr_supported_features = WaterHeaterEntityFeature.TARGET_TEMPERATURE

    def __init__(
        self,
        coordinator: DataUpdateCoordinator[dict[str, Any]],
        heater: HiaxHeater,
    ) -> None:
        """Initialize the water heater."""
        super().__init__(coordinator, heater, "water_heater")

    @property
    def current_temperature(self) -> float | None:
        """Return the measured water temperature."""
        return self.capability(CAP_MEASURE_TEMPERATURE)

    @property
    def target_temperature(self) -> float | None:
        """Return the requested water temperature."""
        return self.capability(CAP_TARGET_TEMPERATURE)

    @property
    def current_operation(self) -> str:
        """Return whether the heater is heating."""
        return STATE_ELECTRIC if self.capability(CAP_ONOFF) else STATE_OFF

    async def async_set_temperature(self, **kwargs: Any) -> None:
        """Set new target temperature."""
        temperature = kwargs.get(ATTR_TEMPERATURE)
        if temperature is None:
            return

        await self._heater.async_set_target_temperature(temperature)
