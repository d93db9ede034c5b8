"""MQTT link: vehicles reachable through a message broker."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, cast

import paho.mqtt.client as mqtt

from pyuas.codec import Codec, JsonCodec, SequenceTracker
from pyuas.config import UasConfig
from pyuas.exceptions import UasCodecError, UasLinkError
from pyuas.models.messages import TelemetryMessage

TelemetryHandler = Callable[["MqttLink", TelemetryMessage], Any]


class MqttLink:
    """Threaded paho-mqtt link.

    Telemetry published on ``<prefix>/telemetry`` is decoded and handed to
    ``on_telemetry`` on the paho network thread; :meth:`send` publishes raw
    encoded commands on ``<prefix>/command``.  When the decoded envelope
    carries no drop rate, one is derived from its sequence counter.

    The link is owned by the application: vehicles only keep weak
    references to it, so keep the instance alive while it is in use.
    """

    def __init__(
        self,
        config: UasConfig,
        *,
        on_telemetry: TelemetryHandler,
        codec: Codec | None = None,
        link_id: str | None = None,
        client_id: str = "",
        username: str | None = None,
        password: str | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._on_telemetry = on_telemetry
        self._codec: Codec = codec or JsonCodec()
        self._link_id = link_id or f"mqtt://{config.mqtt_host}:{config.mqtt_port}/{config.mqtt_topic_prefix}"
        self._client_id = client_id
        self._username = username
        self._password = password
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._running = False
        self._connected = threading.Event()
        self._sequences = SequenceTracker()

    @property
    def link_id(self) -> str:
        return self._link_id

    @property
    def is_open(self) -> bool:
        """Whether the runtime is started and connected to the broker."""
        return self._running and self._connected.is_set()

    @property
    def telemetry_topic(self) -> str:
        return f"{self._config.mqtt_topic_prefix}/telemetry"

    @property
    def command_topic(self) -> str:
        return f"{self._config.mqtt_topic_prefix}/command"

    def start(self) -> None:
        """Connect to the broker and subscribe to the telemetry topic."""
        self.stop()
        self._logger.debug(
            "MQTT link start requested host=%s port=%s topic=%s",
            self._config.mqtt_host,
            self._config.mqtt_port,
            self.telemetry_topic,
        )

        client = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=self._client_id,
            protocol=mqtt.MQTTv5,
        )
        client.enable_logger(self._logger)
        if self._username is not None:
            client.username_pw_set(self._username, self._password)
        if self._config.mqtt_tls:
            client.tls_set()

        def on_connect(
            c: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if reason_code.value != 0:
                self._logger.warning("MQTT connect failed: %s", reason_code)
                return
            self._logger.debug("MQTT connected reason=%s, subscribing topic=%s", reason_code, self.telemetry_topic)
            c.subscribe(self.telemetry_topic, qos=0)
            self._connected.set()

        def on_message(_c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
            self.handle_payload(msg.payload)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            self._connected.clear()
            if self._running:
                self._logger.debug("MQTT disconnected: %s", reason_code)

        client.on_connect = on_connect
        client.on_message = on_message
        client.on_disconnect = on_disconnect

        try:
            client.connect(self._config.mqtt_host, self._config.mqtt_port, keepalive=self._config.mqtt_keepalive)
        except OSError as exc:
            raise UasLinkError(f"MQTT connect to {self._config.mqtt_host} failed: {exc}", link_id=self._link_id) from exc
        client.loop_start()

        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def stop(self) -> None:
        """Stop and disconnect the MQTT client if running."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False
        self._connected.clear()

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")

    def wait_connected(self, timeout: float) -> bool:
        return self._connected.wait(timeout)

    def handle_payload(self, payload: bytes) -> TelemetryMessage | None:
        """Decode one telemetry payload and hand it to ``on_telemetry``.

        Undecodable payloads are logged and dropped.
        """
        try:
            message = self._codec.decode(payload)
        except UasCodecError:
            self._logger.debug("MQTT telemetry decode failure", exc_info=True)
            return None

        if message.sequence is not None:
            drop_rate = self._sequences.observe(message.system_id, message.sequence)
            if message.drop_rate is None:
                message = message.model_copy(update={"drop_rate": drop_rate})

        try:
            self._on_telemetry(self, message)
        except Exception:
            self._logger.debug("on_telemetry callback failed", exc_info=True)
        return message

    def send(self, raw: bytes) -> bool:
        """Publish an encoded command; ``False`` when not connected or refused."""
        client = self._client
        if client is None or not self.is_open:
            return False
        info = client.publish(self.command_topic, raw, qos=0)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            self._logger.warning("MQTT publish failed rc=%s topic=%s", info.rc, self.command_topic)
            return False
        return True
