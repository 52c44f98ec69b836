from __future__ import annotations

from unittest.mock import AsyncMock, call

import pytest
from pytest_homeassistant_custom_component.common import (
    MockConfigEntry,
    async_capture_events,
)

from homeassistant.config_entries import SOURCE_REAUTH, ConfigEntryState
from homeassistant.core import HomeAssistant
from homeassistant.helpers import device_registry as dr, entity_registry as er

from conftest import DEVICE_ID, device_points, points, setup_integration
from custom_components.hiax_connected.const import (
    DOMAIN,
    EVENT_MAX_POWER_CHANGED,
    SERVICE_CHANGE_MAX_POWER,
)
from custom_components.hiax_connected.device_point import PointWriteResult
from custom_components.hiax_connected.hiax_client import HiaxAuthError

pytestmark = pytest.mark.usefixtures("setup_credentials")


def _entity_id(hass: HomeAssistant, platform: str, key: str) -> str:
    entity_id = er.async_get(hass).async_get_entity_id(
        platform, DOMAIN, f"hiax_{DEVICE_ID}_{key}"
    )
    assert entity_id is not None
    return entity_id


async def test_setup_entry(
    hass: HomeAssistant, config_entry: MockConfigEntry, device_client: AsyncMock
) -> None:
    """Setup stores the device settings and creates every entity."""

    await setup_integration(hass, config_entry, device_client)

    assert config_entry.state is ConfigEntryState.LOADED
    assert config_entry.options == {
        "ambient_temperature": 20,
        "inlet_temperature": 8,
        "legionella_frequency": 14,
        "max_water_flow": 12.5,
        "regulation_diff": 5,
    }
    entities = er.async_entries_for_config_entry(
        er.async_get(hass), config_entry.entry_id
    )
    assert len(entities) == 7

    assert hass.states.get(_entity_id(hass, "switch", "onoff")).state == "on"
    assert hass.states.get(_entity_id(hass, "select", "max_power")).state == "high_power"
    assert hass.states.get(_entity_id(hass, "sensor", "fill_level")).state == "87"
    water_heater = hass.states.get(_entity_id(hass, "water_heater", "water_heater"))
    assert water_heater.attributes["current_temperature"] == 64
    assert water_heater.attributes["temperature"] == 70


async def test_setup_entry_switches_to_external_mode(
    hass: HomeAssistant, config_entry: MockConfigEntry, device_client: AsyncMock
) -> None:
    def mode_five(device_id: str, codes: list[str]):
        if codes == ["500"]:
            return points({"500": 5})
        return device_points(device_id, codes)

    device_client.get_device_points.side_effect = mode_five

    await setup_integration(hass, config_entry, device_client)

    assert config_entry.state is ConfigEntryState.LOADED
    assert device_client.set_device_point.await_args_list[0] == call(
        DEVICE_ID, {"500": "8"}
    )


async def test_setup_entry_init_error_retries(
    hass: HomeAssistant, config_entry: MockConfigEntry, device_client: AsyncMock
) -> None:
    """A heater that refuses external mode is retried later."""

    device_client.get_device_points.side_effect = [points({"500": 5})]
    device_client.set_device_point.return_value = PointWriteResult(False, 409)

    await setup_integration(hass, config_entry, device_client)

    assert config_entry.state is ConfigEntryState.SETUP_RETRY
    assert config_entry.options == {}


async def test_setup_entry_auth_error_starts_reauth(
    hass: HomeAssistant, config_entry: MockConfigEntry, device_client: AsyncMock
) -> None:
    device_client.get_device_points.side_effect = HiaxAuthError("expired")

    await setup_integration(hass, config_entry, device_client)

    assert config_entry.state is ConfigEntryState.SETUP_ERROR
    flows = hass.config_entries.flow.async_progress()
    assert [flow["context"]["source"] for flow in flows] == [SOURCE_REAUTH]


async def test_setup_entry_failed_poll_retries(
    hass: HomeAssistant, config_entry: MockConfigEntry, device_client: AsyncMock
) -> None:
    device_client.set_device_point.return_value = PointWriteResult(False, 500)

    await setup_integration(hass, config_entry, device_client)

    assert config_entry.state is ConfigEntryState.SETUP_RETRY


async def test_max_power_change_fires_event(
    hass: HomeAssistant, config_entry: MockConfigEntry, device_client: AsyncMock
) -> None:
    await setup_integration(hass, config_entry, device_client)
    events = async_capture_events(hass, EVENT_MAX_POWER_CHANGED)
    device_client.set_device_point.reset_mock()
    select_id = _entity_id(hass, "select", "max_power")

    await hass.services.async_call(
        "select",
        "select_option",
        {"entity_id": select_id, "option": "low_power"},
        blocking=True,
    )
    await hass.async_block_till_done()

    device = dr.async_get(hass).async_get_device(identifiers={(DOMAIN, DEVICE_ID)})
    assert device is not None
    device_client.set_device_point.assert_awaited_once_with(DEVICE_ID, {"517": 1})
    assert len(events) == 1
    assert events[0].data == {"device_id": device.id, "max_power": 700}
    assert hass.states.get(select_id).state == "low_power"


async def test_same_max_power_fires_no_event(
    hass: HomeAssistant, config_entry: MockConfigEntry, device_client: AsyncMock
) -> None:
    await setup_integration(hass, config_entry, device_client)
    events = async_capture_events(hass, EVENT_MAX_POWER_CHANGED)

    await hass.services.async_call(
        "select",
        "select_option",
        {"entity_id": _entity_id(hass, "select", "max_power"), "option": "high_power"},
        blocking=True,
    )
    await hass.async_block_till_done()

    assert events == []


async def test_change_max_power_service(
    hass: HomeAssistant, config_entry: MockConfigEntry, device_client: AsyncMock
) -> None:
    await setup_integration(hass, config_entry, device_client)
    device_client.set_device_point.reset_mock()

    await hass.services.async_call(
        DOMAIN,
        SERVICE_CHANGE_MAX_POWER,
        {"entity_id": _entity_id(hass, "select", "max_power"), "max_power": "medium_power"},
        blocking=True,
    )

    device_client.set_device_point.assert_awaited_once_with(DEVICE_ID, {"517": 2})


async def test_turn_off_switch(
    hass: HomeAssistant, config_entry: MockConfigEntry, device_client: AsyncMock
) -> None:
    await setup_integration(hass, config_entry, device_client)
    device_client.set_device_point.reset_mock()
    switch_id = _entity_id(hass, "switch", "onoff")

    await hass.services.async_call(
        "switch", "turn_off", {"entity_id": switch_id}, blocking=True
    )

    device_client.set_device_point.assert_awaited_once_with(DEVICE_ID, {"517": 0})
    assert hass.states.get(switch_id).state == "off"


async def test_set_water_temperature(
    hass: HomeAssistant, config_entry: MockConfigEntry, device_client: AsyncMock
) -> None:
    await setup_integration(hass, config_entry, device_client)
    device_client.set_device_point.reset_mock()
    water_heater_id = _entity_id(hass, "water_heater", "water_heater")

    await hass.services.async_call(
        "water_heater",
        "set_temperature",
        {"entity_id": water_heater_id, "temperature": 75},
        blocking=True,
    )

    device_client.set_device_point.assert_awaited_once_with(DEVICE_ID, {"527": 75})
    assert hass.states.get(water_heater_id).attributes["temperature"] == 75


async def test_unload_entry(
    hass: HomeAssistant, config_entry: MockConfigEntry, device_client: AsyncMock
) -> None:
    await setup_integration(hass, config_entry, device_client)

    assert await hass.config_entries.async_unload(config_entry.entry_id)
    await hass.async_block_till_done()

    assert config_entry.state is ConfigEntryState.NOT_LOADED
