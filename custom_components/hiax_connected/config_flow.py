"""Config flow for Hiax Connected integration."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import callback
from homeassistant.helpers import config_entry_oauth2_flow
from homeassistant.helpers.aiohttp_client import async_get_clientsession

from .api import ConfigFlowAuth
from .const import (
    CONF_DEVICE_ID,
    DOMAIN,
    OAUTH2_SCOPES,
    SETTING_LEGIONELLA_FREQUENCY,
    SETTINGS_TO_POINT,
)
from .device_point import HiaxDevice
from .heater import ControlError
from .hiax_client import HiaxApiError, HiaxClient

_LOGGER = logging.getLogger(__name__)


class HiaxConfigFlow(
    config_entry_oauth2_flow.AbstractOAuth2FlowHandler, domain=DOMAIN
):
    """Handle a config flow for Hiax Connected."""

    DOMAIN = DOMAIN
    VERSION = 1

    def __init__(self) -> None:
        """Initialize the flow."""
        super().__init__()
        self._oauth_data: dict[str, Any] = {}
        self._devices: list[HiaxDevice] = []

    @property
    def logger(self) -> logging.Logger:
        """Return logger."""
        return _LOGGER

    @property
    def extra_authorize_data(self) -> dict[str, Any]:
        """Extra data appended to the authorize url."""
        return {"scope": " ".join(OAUTH2_SCOPES)}

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> HiaxOptionsFlow:
        """Return the options flow."""
        return HiaxOptionsFlow()

    async def async_oauth_create_entry(
        self, data: dict[str, Any]
    ) -> config_entries.ConfigFlowResult:
        """Create an entry for the heater once the account is linked."""
        client = HiaxClient(
            async_get_clientsession(self.hass),
            ConfigFlowAuth(data["token"]["access_token"]),
        )
        try:
            devices = await client.get_devices()
        except HiaxApiError:
            _LOGGER.exception("Unexpected error listing devices")
            return self.async_abort(reason="cannot_connect")

        if self.source == config_entries.SOURCE_REAUTH:
            entry = self._get_reauth_entry()
            return self.async_update_reload_and_abort(
                entry, data={**entry.data, **data}
            )

        if not devices:
            return self.async_abort(reason="no_devices")

        self._oauth_data = data
        self._devices = devices
        if len(devices) == 1:
            return await self._async_create_device_entry(devices[0])
        return await self.async_step_device()

    async def async_step_device(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        """Select the heater when the account holds several devices."""
        if user_input is not None:
            device = next(
                device
                for device in self._devices
                if device.device_id == user_input[CONF_DEVICE_ID]
            )
            return await self._async_create_device_entry(device)

        data_schema = vol.Schema(
            {
                vol.Required(CONF_DEVICE_ID): vol.In(
                    {device.device_id: device.name for device in self._devices}
                )
            }
        )
        return self.async_show_form(step_id="device", data_schema=data_schema)

    async def async_step_reauth(
        self, entry_data: Mapping[str, Any]
    ) -> config_entries.ConfigFlowResult:
        """Handle reauth upon an expired or revoked token."""
        return await self.async_step_reauth_confirm()

    async def async_step_reauth_confirm(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        """Confirm reauth before sending the user to the login page."""
        if user_input is None:
            return self.async_show_form(step_id="reauth_confirm")
        return await self.async_step_user()

    async def _async_create_device_entry(
        self, device: HiaxDevice
    ) -> config_entries.ConfigFlowResult:
        """Create the config entry for a device."""
        await self.async_set_unique_id(device.device_id)
        self._abort_if_unique_id_configured()
        return self.async_create_entry(
            title=device.name,
            data={**self._oauth_data, CONF_DEVICE_ID: device.device_id},
        )


class HiaxOptionsFlow(config_entries.OptionsFlow):
    """Edit the heater settings."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        """Manage the heater settings."""
        if self.config_entry.state is not config_entries.ConfigEntryState.LOADED:
            return self.async_abort(reason="not_loaded")

        errors: dict[str, str] = {}
        current = dict(self.config_entry.options)

        if user_input is not None:
            changed_keys = [
                key for key in SETTINGS_TO_POINT if user_input.get(key) != current.get(key)
            ]
            heater = self.config_entry.runtime_data.heater
            try:
                await heater.async_apply_settings(current, user_input, changed_keys)
            except ControlError as err:
                _LOGGER.error("Failed to apply heater settings: %s", err)
                errors["base"] = "cannot_control"
            except HiaxApiError:
                _LOGGER.exception("Unexpected error applying heater settings")
                errors["base"] = "cannot_connect"
            else:
                return self.async_create_entry(data=user_input)

        return self.async_show_form(
            step_id="init",
            data_schema=_settings_schema(user_input or current),
            errors=errors,
        )


def _settings_schema(defaults: Mapping[str, Any]) -> vol.Schema:
    """Build the settings form, prefilled with the given values."""
    schema: dict[vol.Marker, Any] = {}
    for key in SETTINGS_TO_POINT:
        marker = (
            vol.Required(key, default=defaults[key])
            if key in defaults
            else vol.Required(key)
        )
        schema[marker] = (
            vol.Coerce(int) if key == SETTING_LEGIONELLA_FREQUENCY else vol.Coerce(float)
        )
    return vol.Schema(schema)
