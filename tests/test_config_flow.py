from __future__ import annotations

from unittest.mock import AsyncMock, call

import pytest
from pytest_homeassistant_custom_component.common import MockConfigEntry

from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType

from conftest import DEVICE_ID, setup_integration
from custom_components.hiax_connected.device_point import PointWriteResult

pytestmark = pytest.mark.usefixtures("setup_credentials")

STORED_SETTINGS = {
    "ambient_temperature": 20,
    "inlet_temperature": 8,
    "legionella_frequency": 14,
    "max_water_flow": 12.5,
    "regulation_diff": 5,
}


async def test_options_flow_writes_changed_settings(
    hass: HomeAssistant, config_entry: MockConfigEntry, device_client: AsyncMock
) -> None:
    """Only settings that differ from the stored options reach the device."""

    await setup_integration(hass, config_entry, device_client)
    device_client.set_device_point.reset_mock()

    result = await hass.config_entries.options.async_init(config_entry.entry_id)
    assert result["type"] is FlowResultType.FORM
    assert result["step_id"] == "init"

    result = await hass.config_entries.options.async_configure(
        result["flow_id"],
        user_input={**STORED_SETTINGS, "max_water_flow": 15, "legionella_frequency": 7},
    )

    assert result["type"] is FlowResultType.CREATE_ENTRY
    assert device_client.set_device_point.await_args_list == [
        call(DEVICE_ID, {"512": 15.0}),
        call(DEVICE_ID, {"511": 7}),
    ]
    assert config_entry.options["max_water_flow"] == 15
    assert config_entry.options["legionella_frequency"] == 7


async def test_options_flow_without_changes(
    hass: HomeAssistant, config_entry: MockConfigEntry, device_client: AsyncMock
) -> None:
    await setup_integration(hass, config_entry, device_client)
    device_client.set_device_point.reset_mock()

    result = await hass.config_entries.options.async_init(config_entry.entry_id)
    result = await hass.config_entries.options.async_configure(
        result["flow_id"], user_input=dict(STORED_SETTINGS)
    )

    assert result["type"] is FlowResultType.CREATE_ENTRY
    device_client.set_device_point.assert_not_awaited()


async def test_options_flow_rejected_setting_keeps_options(
    hass: HomeAssistant, config_entry: MockConfigEntry, device_client: AsyncMock
) -> None:
    await setup_integration(hass, config_entry, device_client)
    device_client.set_device_point.return_value = PointWriteResult(False, 400)

    result = await hass.config_entries.options.async_init(config_entry.entry_id)
    result = await hass.config_entries.options.async_configure(
        result["flow_id"], user_input={**STORED_SETTINGS, "ambient_temperature": 25}
    )

    assert result["type"] is FlowResultType.FORM
    assert result["errors"] == {"base": "cannot_control"}
    assert config_entry.options == STORED_SETTINGS
