"""Heater state data model."""

from __future__ import annotations

from dataclasses import dataclass

from .const import POWER_HIGH


@dataclass
class HeaterState:
    """On/off flag and last known power level of the heater."""

    is_on: bool = True
    max_power: int = POWER_HIGH
