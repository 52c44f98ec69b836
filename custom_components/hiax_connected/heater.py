"""Water heater adapter for the Hiax Connected integration."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
import logging
from typing import Any

from homeassistant.exceptions import HomeAssistantError

from .const import (
    CAP_ENERGY_ACCUMULATED,
    CAP_ENERGY_IN_TANK,
    CAP_FILL_LEVEL,
    CAP_MAX_POWER,
    CAP_MEASURE_POWER,
    CAP_MEASURE_TEMPERATURE,
    CAP_ONOFF,
    CAP_TARGET_TEMPERATURE,
    HEATER_MODE_EXTERNAL,
    POINT_AMBIENT_TEMPERATURE,
    POINT_ENERGY_STORED,
    POINT_ENERGY_TOTAL,
    POINT_ESTIMATED_POWER,
    POINT_FILL_LEVEL,
    POINT_HEATER_MODE,
    POINT_INLET_TEMPERATURE,
    POINT_LEGIONELLA_FREQUENCY,
    POINT_MAX_WATER_FLOW,
    POINT_MEASURED_TEMPERATURE,
    POINT_REGULATION_DIFF,
    POINT_REQUESTED_POWER,
    POINT_REQUESTED_TEMPERATURE,
    POWER_HIGH,
    POWER_OFF,
    SETTING_AMBIENT_TEMPERATURE,
    SETTING_INLET_TEMPERATURE,
    SETTING_LABELS,
    SETTING_LEGIONELLA_FREQUENCY,
    SETTING_MAX_WATER_FLOW,
    SETTING_REGULATION_DIFF,
    SETTINGS_POINTS,
    SETTINGS_TO_POINT,
    STATE_POINTS,
    option_to_power,
    power_to_option,
    power_to_watts,
)
from .device_point import DevicePoint
from .heater_state import HeaterState
from .hiax_client import HiaxApiError, HiaxClient

_LOGGER = logging.getLogger(__name__)

CapabilityListener = Callable[[dict[str, Any]], None]
TriggerCallback = Callable[[dict[str, Any]], None]


class ControlError(HomeAssistantError):
    """Error to indicate the device rejected a point write."""


class InitError(HomeAssistantError):
    """Error to indicate the heater could not be put into external mode."""


class HiaxHeater:
    """Bridge between Home Assistant capabilities and the heater's points."""

    def __init__(
        self,
        client: HiaxClient,
        device_id: str,
        trigger_callback: TriggerCallback | None = None,
    ) -> None:
        """Initialize the heater."""
        self._client = client
        self.device_id = device_id
        self.state = HeaterState()
        self.capabilities: dict[str, Any] = {}
        self._listeners: list[CapabilityListener] = []
        self._trigger_callback = trigger_callback
        self._polling = False

    def add_capability_listener(self, listener: CapabilityListener) -> Callable[[], None]:
        """Register a listener for capability changes, returning a remover."""
        self._listeners.append(listener)

        def remove_listener() -> None:
            self._listeners.remove(listener)

        return remove_listener

    async def async_set_heater_state(self, turn_on: bool, new_power: int) -> None:
        """Switch the heater and set its power level."""
        power = new_power if turn_on else POWER_OFF
        response = await self._client.set_device_point(
            self.device_id, {POINT_REQUESTED_POWER: power}
        )
        if not response.ok:
            raise ControlError("Unable to control device - failed to power on/off")

        self._set_capabilities(
            {CAP_ONOFF: turn_on, CAP_MAX_POWER: power_to_option(new_power)}
        )

        if new_power != self.state.max_power and self._trigger_callback is not None:
            self._trigger_callback({"max_power": power_to_watts(new_power)})

        self.state.is_on = turn_on
        self.state.max_power = new_power

    async def async_initialize(self) -> dict[str, Any]:
        """Put the heater into external mode and return its settings."""
        _LOGGER.info("Initializing Hiax heater %s", self.device_id)

        heater_mode = await self._client.get_device_points(
            self.device_id, [POINT_HEATER_MODE]
        )
        if not heater_mode:
            raise InitError("Problems reading heater mode")
        if not _is_external_mode(heater_mode[0].value):
            _LOGGER.info(
                "Heater %s is in mode %s, switching to external mode",
                self.device_id,
                heater_mode[0].value,
            )
            try:
                response = await self._client.set_device_point(
                    self.device_id, {POINT_HEATER_MODE: str(HEATER_MODE_EXTERNAL)}
                )
            except HiaxApiError as err:
                raise InitError(
                    "Unable to control device - failed to put it into external mode"
                ) from err
            if not response.ok:
                raise InitError(
                    "Unable to control device - failed to put it into external mode"
                )

        # Assume the heater runs at full power until the first poll
        self.state = HeaterState(is_on=True, max_power=POWER_HIGH)

        points = _by_code(
            await self._client.get_device_points(self.device_id, SETTINGS_POINTS)
        )
        return {
            SETTING_AMBIENT_TEMPERATURE: _value(points, POINT_AMBIENT_TEMPERATURE),
            SETTING_INLET_TEMPERATURE: _value(points, POINT_INLET_TEMPERATURE),
            SETTING_LEGIONELLA_FREQUENCY: _value(points, POINT_LEGIONELLA_FREQUENCY),
            SETTING_MAX_WATER_FLOW: _value(points, POINT_MAX_WATER_FLOW),
            SETTING_REGULATION_DIFF: _value(points, POINT_REGULATION_DIFF),
        }

    async def async_turn_on(self) -> None:
        """Turn the heater on at the last power level."""
        await self.async_set_heater_state(True, self.state.max_power)

    async def async_turn_off(self) -> None:
        """Turn the heater off."""
        await self.async_set_heater_state(False, self.state.max_power)

    async def async_select_max_power(self, option: str) -> None:
        """Set the power level from a max_power option."""
        await self.async_set_heater_state(self.state.is_on, option_to_power(option))

    async def async_change_max_power(self, option: str) -> None:
        """Set the power level from an automation action."""
        await self.async_set_heater_state(self.state.is_on, option_to_power(option))

    async def async_set_target_temperature(self, value: float) -> None:
        """Set the requested water temperature."""
        response = await self._client.set_device_point(
            self.device_id, {POINT_REQUESTED_TEMPERATURE: value}
        )
        if not response.ok:
            raise ControlError(
                "Unable to control device - failed to set target temperature"
            )
        self._set_capabilities({CAP_TARGET_TEMPERATURE: value})
        _LOGGER.info("Target temp: %s", value)

    async def async_apply_settings(
        self,
        old_settings: Mapping[str, Any],
        new_settings: Mapping[str, Any],
        changed_keys: Iterable[str],
    ) -> None:
        """Write changed settings to the heater, stopping at the first failure."""
        _LOGGER.info("Settings changed")
        changed = set(changed_keys)

        for key in (
            SETTING_AMBIENT_TEMPERATURE,
            SETTING_INLET_TEMPERATURE,
            SETTING_MAX_WATER_FLOW,
            SETTING_REGULATION_DIFF,
            SETTING_LEGIONELLA_FREQUENCY,
        ):
            if key not in changed:
                continue
            label = SETTING_LABELS[key]
            _LOGGER.info("%s changed: %s", label, new_settings[key])
            response = await self._client.set_device_point(
                self.device_id, {SETTINGS_TO_POINT[key]: new_settings[key]}
            )
            if not response.ok:
                raise ControlError(f"Unable to control device - failed to set {label}")

    async def async_update_state(self) -> dict[str, Any]:
        """Poll the heater and mirror its points into capabilities.

        Listeners are not notified while polling; the returned snapshot is
        published by the caller instead.
        """
        points = _by_code(
            await self._client.get_device_points(self.device_id, STATE_POINTS)
        )

        self._polling = True
        try:
            self._set_capabilities(
                {
                    CAP_ENERGY_IN_TANK: _value(points, POINT_ENERGY_STORED),
                    CAP_ENERGY_ACCUMULATED: _value(points, POINT_ENERGY_TOTAL),
                    CAP_MEASURE_POWER: _value(points, POINT_ESTIMATED_POWER),
                    CAP_FILL_LEVEL: _value(points, POINT_FILL_LEVEL),
                }
            )

            requested_power = int(_as_number(_value(points, POINT_REQUESTED_POWER)))
            if requested_power == POWER_OFF:
                self.state.is_on = False
            else:
                self.state.is_on = True
                self.state.max_power = requested_power

            # Writes the polled power back so the capability mirrors follow the device
            await self.async_set_heater_state(self.state.is_on, self.state.max_power)

            self._set_capabilities(
                {
                    CAP_TARGET_TEMPERATURE: _value(points, POINT_REQUESTED_TEMPERATURE),
                    CAP_MEASURE_TEMPERATURE: _value(points, POINT_MEASURED_TEMPERATURE),
                }
            )
        finally:
            self._polling = False
        return dict(self.capabilities)

    def _set_capabilities(self, values: dict[str, Any]) -> None:
        """Store capability values and notify listeners once, logging failures."""
        self.capabilities.update(values)
        if self._polling:
            return
        for listener in list(self._listeners):
            try:
                listener(values)
            except Exception:
                _LOGGER.exception("Failed to update capabilities %s", ", ".join(values))


def _by_code(points: list[DevicePoint]) -> dict[str, DevicePoint]:
    """Index device points by code."""
    return {point.code: point for point in points}


def _value(points: dict[str, DevicePoint], code: str) -> Any:
    """Return the value of a point, failing when the device did not report it."""
    point = points.get(code)
    if point is None:
        raise HiaxApiError(f"Device did not report point {code}")
    return point.value


def _as_number(value: Any) -> float:
    """Convert a point value that may arrive as a string."""
    return float(value)


def _is_external_mode(value: Any) -> bool:
    """Return whether a heater mode value is the external mode."""
    try:
        return _as_number(value) == HEATER_MODE_EXTERNAL
    except (TypeError, ValueError):
        return False
