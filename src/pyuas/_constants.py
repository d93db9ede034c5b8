"""Internal constants shared across the library."""

from __future__ import annotations

# ------------------------------------------------------------------
# Ground station identity
# ------------------------------------------------------------------

GCS_SYSTEM_ID = 255
GCS_COMPONENT_ID = 0

# ------------------------------------------------------------------
# Communication status thresholds
# ------------------------------------------------------------------

#: Expected seconds between two vehicle heartbeats.
HEARTBEAT_INTERVAL_S = 1.0
#: Consecutive heartbeats needed to leave CONNECTING.
CONNECT_HEARTBEATS = 3
#: Silence longer than this many heartbeat intervals means DISCONNECTED.
TIMEOUT_MULTIPLE = 5.0
#: Receive drop rate (percent) above which a connection is DEGRADED.
DEGRADED_DROP_RATE = 10.0

# ------------------------------------------------------------------
# Power model
# ------------------------------------------------------------------

#: Smoothing constant of the single-pole low-pass voltage filter.
VOLTAGE_FILTER_ALPHA = 0.3
#: Minimum observation window before a time-remaining estimate is given.
MIN_ESTIMATE_SECONDS = 30.0

# Per-cell (full, empty) voltages by chemistry.
LIPO_FULL_V = 4.2
LIPO_EMPTY_V = 3.5

CELL_VOLTAGES: dict[str, tuple[float, float]] = {
    "nicd": (1.4, 1.0),
    "nimh": (1.4, 1.0),
    "liion": (4.2, 3.0),
    "lipoly": (LIPO_FULL_V, LIPO_EMPTY_V),
    "life": (3.6, 2.8),
    "agzn": (1.86, 1.3),
}

# ------------------------------------------------------------------
# MQTT link
# ------------------------------------------------------------------

MQTT_PORT = 1883
MQTT_KEEPALIVE = 60
MQTT_TOPIC_PREFIX = "uas"
