"""Hiax Connected integration for Home Assistant."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Final

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import Platform
from homeassistant.core import HomeAssistant, callback
from homeassistant.exceptions import ConfigEntryAuthFailed, ConfigEntryNotReady
from homeassistant.helpers import config_entry_oauth2_flow, device_registry as dr
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed

from .api import AsyncConfigEntryAuth
from .const import (
    ATTR_MAX_POWER,
    CONF_DEVICE_ID,
    DOMAIN,
    EVENT_MAX_POWER_CHANGED,
    MANUFACTURER,
    MODEL,
    SCAN_INTERVAL,
)
from .heater import HiaxHeater, InitError
from .hiax_client import HiaxApiError, HiaxAuthError, HiaxClient

_LOGGER = logging.getLogger(__name__)

PLATFORMS: Final = [
    Platform.SELECT,
    Platform.SENSOR,
    Platform.SWITCH,
    Platform.WATER_HEATER,
]


@dataclass
class HiaxRuntimeData:
    """Objects shared by the platforms of a config entry."""

    heater: HiaxHeater
    coordinator: DataUpdateCoordinator[dict[str, Any]]


type HiaxConfigEntry = ConfigEntry[HiaxRuntimeData]


async def async_setup_entry(hass: HomeAssistant, entry: HiaxConfigEntry) -> bool:
    """Set up Hiax Connected from a config entry."""
    implementation = (
        await config_entry_oauth2_flow.async_get_config_entry_implementation(
            hass, entry
        )
    )
    oauth_session = config_entry_oauth2_flow.OAuth2Session(hass, entry, implementation)
    client = HiaxClient(
        async_get_clientsession(hass), AsyncConfigEntryAuth(oauth_session)
    )
    device_id = entry.data[CONF_DEVICE_ID]

    device = dr.async_get(hass).async_get_or_create(
        config_entry_id=entry.entry_id,
        identifiers={(DOMAIN, device_id)},
        manufacturer=MANUFACTURER,
        model=MODEL,
        name=entry.title,
    )

    @callback
    def fire_max_power_changed(tokens: dict[str, Any]) -> None:
        """Fire the max power changed event for device triggers."""
        hass.bus.async_fire(
            EVENT_MAX_POWER_CHANGED,
            {CONF_DEVICE_ID: device.id, ATTR_MAX_POWER: tokens[ATTR_MAX_POWER]},
        )

    heater = HiaxHeater(client, device_id, fire_max_power_changed)

    try:
        settings = await heater.async_initialize()
    except HiaxAuthError as err:
        raise ConfigEntryAuthFailed(str(err)) from err
    except (InitError, HiaxApiError) as err:
        raise ConfigEntryNotReady(f"Failed to initialize heater: {err}") from err

    hass.config_entries.async_update_entry(entry, options=settings)

    async def async_update_data() -> dict[str, Any]:
        """Update data from the API."""
        try:
            return await heater.async_update_state()
        except HiaxAuthError as err:
            raise ConfigEntryAuthFailed(str(err)) from err
        except Exception as err:
            raise UpdateFailed(f"Failed to update heater data: {err}") from err

    coordinator = DataUpdateCoordinator(
        hass,
        _LOGGER,
        name=DOMAIN,
        update_method=async_update_data,
        update_interval=SCAN_INTERVAL,
        config_entry=entry,
    )

    await coordinator.async_config_entry_first_refresh()

    # Capability changes outside of a poll still need to reach the entities
    entry.async_on_unload(
        heater.add_capability_listener(
            lambda values: coordinator.async_update_listeners()
        )
    )

    entry.runtime_data = HiaxRuntimeData(heater, coordinator)

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    return True


async def async_unload_entry(hass: HomeAssistant, entry: HiaxConfigEntry) -> bool:
    """Unload a config entry."""
    return await hass.config_entries.async_unload_platforms(entry, PLATFORMS)


async def async_remove_entry(hass: HomeAssistant, entry: HiaxConfigEntry) -> None:
    """Handle removal of a config entry."""
    _LOGGER.info("Hiax heater %s was deleted", entry.data[CONF_DEVICE_ID])
