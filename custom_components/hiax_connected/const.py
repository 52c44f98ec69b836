"""Constants for Hiax Connected integration."""

from datetime import timedelta

DOMAIN = "hiax_connected"
MANUFACTURER = "Høiax"
MODEL = "Connected 200"

OAUTH2_AUTHORIZE = "https://api.myuplink.com/oauth/authorize"
OAUTH2_TOKEN = "https://api.myuplink.com/oauth/token"
OAUTH2_SCOPES = ["READSYSTEM", "WRITESYSTEM", "offline_access"]

DEFAULT_API_HOST = "https://api.myuplink.com"
CONF_DEVICE_ID = "device_id"

SCAN_INTERVAL = timedelta(minutes=5)

# Device points
POINT_AMBIENT_TEMPERATURE = "100"
POINT_INLET_TEMPERATURE = "101"
POINT_ENERGY_STORED = "302"
POINT_ENERGY_TOTAL = "303"
POINT_ESTIMATED_POWER = "400"
POINT_FILL_LEVEL = "404"
POINT_HEATER_MODE = "500"
POINT_LEGIONELLA_FREQUENCY = "511"
POINT_MAX_WATER_FLOW = "512"
POINT_REGULATION_DIFF = "516"
POINT_REQUESTED_POWER = "517"
POINT_REQUESTED_TEMPERATURE = "527"
POINT_MEASURED_TEMPERATURE = "528"

HEATER_MODE_EXTERNAL = 8

SETTINGS_POINTS = [
    POINT_AMBIENT_TEMPERATURE,
    POINT_INLET_TEMPERATURE,
    POINT_LEGIONELLA_FREQUENCY,
    POINT_MAX_WATER_FLOW,
    POINT_REGULATION_DIFF,
]
STATE_POINTS = [
    POINT_ENERGY_STORED,
    POINT_ENERGY_TOTAL,
    POINT_ESTIMATED_POWER,
    POINT_FILL_LEVEL,
    POINT_REQUESTED_POWER,
    POINT_REQUESTED_TEMPERATURE,
    POINT_MEASURED_TEMPERATURE,
]

# Settings, in the order they are written back to the device
SETTING_AMBIENT_TEMPERATURE = "ambient_temperature"
SETTING_INLET_TEMPERATURE = "inlet_temperature"
SETTING_MAX_WATER_FLOW = "max_water_flow"
SETTING_REGULATION_DIFF = "regulation_diff"
SETTING_LEGIONELLA_FREQUENCY = "legionella_frequency"

SETTINGS_TO_POINT = {
    SETTING_AMBIENT_TEMPERATURE: POINT_AMBIENT_TEMPERATURE,
    SETTING_INLET_TEMPERATURE: POINT_INLET_TEMPERATURE,
    SETTING_MAX_WATER_FLOW: POINT_MAX_WATER_FLOW,
    SETTING_REGULATION_DIFF: POINT_REGULATION_DIFF,
    SETTING_LEGIONELLA_FREQUENCY: POINT_LEGIONELLA_FREQUENCY,
}
SETTING_LABELS = {
    SETTING_AMBIENT_TEMPERATURE: "Ambient temperature",
    SETTING_INLET_TEMPERATURE: "Inlet temperature",
    SETTING_MAX_WATER_FLOW: "max water flow",
    SETTING_REGULATION_DIFF: "regulation diff",
    SETTING_LEGIONELLA_FREQUENCY: "Legionella program frequency",
}

# Capabilities
CAP_ONOFF = "onoff"
CAP_MAX_POWER = "max_power"
CAP_TARGET_TEMPERATURE = "target_temperature"
CAP_MEASURE_TEMPERATURE = "measure_temperature"
CAP_MEASURE_POWER = "measure_power"
CAP_ENERGY_IN_TANK = "meter_power.in_tank"
CAP_ENERGY_ACCUMULATED = "meter_power.accumulated"
CAP_FILL_LEVEL = "measure_humidity.fill_level"

# Requested power: 0 = Off, 1 = 700W, 2 = 1300W, 3 = 2000W
POWER_OFF = 0
POWER_LOW = 1
POWER_MEDIUM = 2
POWER_HIGH = 3

MAX_POWER_LOW = "low_power"
MAX_POWER_MEDIUM = "medium_power"
MAX_POWER_HIGH = "high_power"
MAX_POWER_OPTIONS = [MAX_POWER_LOW, MAX_POWER_MEDIUM, MAX_POWER_HIGH]

EVENT_MAX_POWER_CHANGED = f"{DOMAIN}_max_power_changed"
TRIGGER_MAX_POWER_CHANGED = "max_power_changed"
ATTR_MAX_POWER = "max_power"
SERVICE_CHANGE_MAX_POWER = "change_max_power"

MIN_TARGET_TEMPERATURE = 20
MAX_TARGET_TEMPERATURE = 85


def power_to_option(power: int) -> str:
    """Return the max_power option for a power level."""
    if power == POWER_LOW:
        return MAX_POWER_LOW
    if power == POWER_MEDIUM:
        return MAX_POWER_MEDIUM
    return MAX_POWER_HIGH


def power_to_watts(power: int) -> int:
    """Return the heating element wattage for a power level."""
    if power == POWER_LOW:
        return 700
    if power == POWER_MEDIUM:
        return 1300
    return 2000


def option_to_power(option: str) -> int:
    """Return the power level for a max_power option, defaulting to high."""
    if option == MAX_POWER_LOW:
        return POWER_LOW
    if option == MAX_POWER_MEDIUM:
        return POWER_MEDIUM
    return POWER_HIGH
