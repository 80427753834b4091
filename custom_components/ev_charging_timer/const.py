"""Constants for the EV Charging Timer integration."""

DOMAIN = "ev_charging_timer"

# Configuration Keys
CONF_BATTERY_NAME = "battery_name"
CONF_BATTERY_CAPACITY = "battery_capacity_kwh"
CONF_CHARGING_POWER = "charging_power_kw"
CONF_START_PERCENT = "start_percent"
CONF_MAX_PERCENT = "max_percent"
CONF_AVAILABLE_POWERS = "available_powers"
CONF_UPDATE_INTERVAL = "update_interval_seconds"

# Defaults
DEFAULT_NAME = "EV Charging Timer"
DEFAULT_BATTERY_NAME = "My EV"
DEFAULT_BATTERY_CAPACITY = 60.0
DEFAULT_CHARGING_POWER = 7.0
DEFAULT_START_PERCENT = 20.0
DEFAULT_MAX_PERCENT = 80.0
DEFAULT_AVAILABLE_POWERS = (3.6, 7.0, 11.0, 22.0)
DEFAULT_UPDATE_INTERVAL = 60  # seconds

# Limits
MAX_BATTERY_CAPACITY = 300.0
MAX_CHARGING_POWER = 350.0
MIN_UPDATE_INTERVAL = 5
MAX_UPDATE_INTERVAL = 3600

# Time
MILLIS_PER_MINUTE = 60_000

# Storage
STORAGE_KEY = f"{DOMAIN}.storage"
STORAGE_VERSION = 1

# Dispatcher signal for entity refresh
SIGNAL_UPDATE = f"{DOMAIN}_update"

# Home Assistant bus events
EVENT_SESSION_COMPLETE = f"{DOMAIN}_session_complete"

# Services
SERVICE_START_SESSION = "start_session"
SERVICE_STOP_SESSION = "stop_session"
SERVICE_REFRESH = "refresh"
SERVICE_ADD_POWER_PRESET = "add_power_preset"
SERVICE_REMOVE_POWER_PRESET = "remove_power_preset"

ATTR_POWER = "power"
