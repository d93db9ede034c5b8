"""Runtime configuration for pyuas."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyuas import _constants as c
from pyuas.exceptions import UasConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class UasConfig:
    """Proxy configuration.

    Parameters
    ----------
    heartbeat_interval : float
        Expected seconds between two heartbeats from a vehicle.
    connect_heartbeats : int
        Consecutive heartbeats required before a connecting vehicle is
        considered connected.
    timeout_multiple : float
        A vehicle that has been silent for ``timeout_multiple *
        heartbeat_interval`` seconds is considered disconnected.
    degraded_drop_rate : float
        Receive drop rate (percent) above which a connected vehicle is
        marked degraded.
    voltage_filter_alpha : float
        Weight of a new sample in the low-pass voltage filter, in ``(0, 1)``.
    min_estimate_seconds : float
        Minimum seconds of voltage history before a remaining-time estimate
        is produced.
    gcs_system_id : int
        System id stamped on every outgoing message.
    gcs_component_id : int
        Component id stamped on every outgoing message.
    mqtt_host : str
        Broker host used by :class:`pyuas.mqtt.MqttLink`.
    mqtt_port : int
        Broker port.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    mqtt_topic_prefix : str
        Topic prefix; telemetry is read from ``<prefix>/telemetry`` and
        commands are published to ``<prefix>/command``.
    mqtt_tls : bool
        Enable TLS on the broker connection.
    """

    heartbeat_interval: float = c.HEARTBEAT_INTERVAL_S
    connect_heartbeats: int = c.CONNECT_HEARTBEATS
    timeout_multiple: float = c.TIMEOUT_MULTIPLE
    degraded_drop_rate: float = c.DEGRADED_DROP_RATE
    voltage_filter_alpha: float = c.VOLTAGE_FILTER_ALPHA
    min_estimate_seconds: float = c.MIN_ESTIMATE_SECONDS
    gcs_system_id: int = c.GCS_SYSTEM_ID
    gcs_component_id: int = c.GCS_COMPONENT_ID
    mqtt_host: str = "localhost"
    mqtt_port: int = c.MQTT_PORT
    mqtt_keepalive: int = c.MQTT_KEEPALIVE
    mqtt_topic_prefix: str = c.MQTT_TOPIC_PREFIX
    mqtt_tls: bool = False

    def __post_init__(self) -> None:
        if self.heartbeat_interval <= 0:
            raise UasConfigError(f"heartbeat_interval must be positive, got {self.heartbeat_interval}")
        if self.connect_heartbeats < 1:
            raise UasConfigError(f"connect_heartbeats must be >= 1, got {self.connect_heartbeats}")
        if self.timeout_multiple <= 1:
            raise UasConfigError(f"timeout_multiple must be > 1, got {self.timeout_multiple}")
        if not 0.0 < self.voltage_filter_alpha < 1.0:
            raise UasConfigError(f"voltage_filter_alpha must be in (0, 1), got {self.voltage_filter_alpha}")
        if not 0.0 <= self.degraded_drop_rate <= 100.0:
            raise UasConfigError(f"degraded_drop_rate must be in [0, 100], got {self.degraded_drop_rate}")

    @property
    def heartbeat_timeout(self) -> float:
        """Seconds of silence after which a vehicle is disconnected."""
        return self.heartbeat_interval * self.timeout_multiple

    @classmethod
    def from_env(cls, **overrides: Any) -> UasConfig:
        """Create configuration from ``UAS_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_FLOATS = {
            "UAS_HEARTBEAT_INTERVAL": "heartbeat_interval",
            "UAS_TIMEOUT_MULTIPLE": "timeout_multiple",
            "UAS_DEGRADED_DROP_RATE": "degraded_drop_rate",
            "UAS_VOLTAGE_FILTER_ALPHA": "voltage_filter_alpha",
            "UAS_MIN_ESTIMATE_SECONDS": "min_estimate_seconds",
        }
        _ENV_INTS = {
            "UAS_CONNECT_HEARTBEATS": "connect_heartbeats",
            "UAS_GCS_SYSTEM_ID": "gcs_system_id",
            "UAS_GCS_COMPONENT_ID": "gcs_component_id",
            "UAS_MQTT_PORT": "mqtt_port",
            "UAS_MQTT_KEEPALIVE": "mqtt_keepalive",
        }
        _ENV_STRS = {
            "UAS_MQTT_HOST": "mqtt_host",
            "UAS_MQTT_TOPIC_PREFIX": "mqtt_topic_prefix",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_FLOATS.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = float(val)
        for env_key, field_name in _ENV_INTS.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = int(val)
        for env_key, field_name in _ENV_STRS.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        if "mqtt_tls" not in overrides:
            config_kwargs["mqtt_tls"] = _env_bool(env.get("UAS_MQTT_TLS"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
