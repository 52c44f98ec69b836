"""Sensor platform for Hiax Connected integration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from homeassistant.components.sensor import (
    SensorDeviceClass,
    SensorEntity,
    SensorEntityDescription,
    SensorStateClass,
)
from homeassistant.const import PERCENTAGE, UnitOfEnergy, UnitOfPower
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from . import HiaxConfigEntry
from .const import (
    CAP_ENERGY_ACCUMULATED,
    CAP_ENERGY_IN_TANK,
    CAP_FILL_LEVEL,
    CAP_MEASURE_POWER,
)
from .entity import HiaxEntity
from .heater import HiaxHeater


@dataclass(frozen=True, kw_only=True)
class HiaxSensorEntityDescription(SensorEntityDescription):
    """Describes a sensor mirroring a heater capability."""

    capability: str


SENSORS: tuple[HiaxSensorEntityDescription, ...] = (
    HiaxSensorEntityDescription(
        key="estimated_power",
        translation_key="estimated_power",
        capability=CAP_MEASURE_POWER,
        device_class=SensorDeviceClass.POWER,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=UnitOfPower.WATT,
    ),
    HiaxSensorEntityDescription(
        key="energy_in_tank",
        translation_key="energy_in_tank",
        capability=CAP_ENERGY_IN_TANK,
        device_class=SensorDeviceClass.ENERGY_STORAGE,
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=UnitOfEnergy.KILO_WATT_HOUR,
    ),
    HiaxSensorEntityDescription(
        key="energy_accumulated",
        translation_key="energy_accumulated",
        capability=CAP_ENERGY_ACCUMULATED,
        device_class=SensorDeviceClass.ENERGY,
        state_class=SensorStateClass.TOTAL_INCREASING,
        native_unit_of_measurement=UnitOfEnergy.KILO_WATT_HOUR,
    ),
    HiaxSensorEntityDescription(
        key="fill_level",
        translation_key="fill_level",
        capability=CAP_FILL_LEVEL,
        icon="mdi:water-percent",
        state_class=SensorStateClass.MEASUREMENT,
        native_unit_of_measurement=PERCENTAGE,
    ),
)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: HiaxConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the sensor platform from a config entry."""
    data = entry.runtime_data
    async_add_entities(
        HiaxSensor(data.coordinator, data.heater, description) for description in SENSORS
    )


class HiaxSensor(HiaxEntity, SensorEntity):
    """Representation of a heater measurement."""

    entity_description: HiaxSensorEntityDescription

    def __init__(
        self,
        coordinator: DataUpdateCoordinator[dict[str, Any]],
        heater: HiaxHeater,
        description: HiaxSensorEntityDescription,
    ) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator, heater, description.key)
        self.entity_description = description

    @property
    def native_value(self) -> float | None:
        """Return the mirrored capability value."""
        return self.capability(self.entity_description.capability)
