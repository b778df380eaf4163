from __future__ import annotations

# The token desk: one counter's queue exposed over MQTT.
#
# Two layers, like the rest of the package:
# 1) `QueueEngine` (engine.py) holds all queue state and logic
# 2) `MqttTokenDeskService` + `main()` wire it to a broker: requests in,
#    replies out, and a ticker that advances the counter and broadcasts the
#    board after every step.

import argparse
import time
from typing import Any, TYPE_CHECKING

from .engine import EngineConfig, QueueEngine
from .errors import BAD_REQUEST, UNKNOWN_TYPE, ErrorResponse
from .notifications import Notice, StatusWatcher
from .ticker import TickerSlot

if TYPE_CHECKING:
    from .mqtt_client import MqttClient

# Largest board a single request may ask for.
MAX_SNAPSHOT_DEPTH = 50


def snapshot_message(engine: QueueEngine, depth: int | None = None) -> dict[str, Any]:
    entries = engine.queue_snapshot(depth)
    return {
        "type": "queue_snapshot",
        "now_serving": entries[0].identifier,
        "entries": [e.to_message() for e in entries],
    }


class MqttTokenDeskService:
    """MQTT adapter around one QueueEngine."""

    def __init__(self, *, mqtt: MqttClient, engine: QueueEngine | None = None, namespace: str = "lineless/v0") -> None:
        # Local imports keep the engine importable without paho-mqtt.
        from .mqtt_topics import desk_requests, queue_updates

        self._desk_requests = desk_requests
        self._queue_updates = queue_updates

        self.mqtt = mqtt
        self.namespace = namespace
        self.engine = engine or QueueEngine()
        self.ticker = TickerSlot(self.engine)
        self.watcher = StatusWatcher(on_change=self._publish_notice)

    def start(self, *, advance_every: float = 5.0) -> None:
        self.mqtt.subscribe(self._desk_requests(self.namespace))
        self.mqtt.add_handler(self._handle_message)
        self.ticker.start(self._on_advance, interval=advance_every)

    def stop(self) -> None:
        """Stop the ticker. Call before disconnecting MQTT."""
        self.ticker.stop()

    # -------------------- ticker side --------------------

    def _on_advance(self, identifier: str) -> None:
        print(f"[desk] now serving {identifier}")
        self.mqtt.publish(self._queue_updates(self.namespace), snapshot_message(self.engine))
        view = self.engine.token_view()
        if view["token"] is not None:
            self.watcher.observe(view["status"], view["people_ahead"])

    def _publish_notice(self, status: str, notice: Notice) -> None:
        token = self.engine.current_token
        number = token.number if token else None
        print(f"[desk] {number}: {notice.text}")
        self.mqtt.publish(
            self._queue_updates(self.namespace),
            {"type": "status_notice", "token": number, "status": status, "notice": notice.to_message()},
        )

    # -------------------- request side --------------------

    def _reply(self, reply_to: str, corr_id: str | None, message: dict[str, Any]) -> None:
        msg = dict(message)
        if corr_id is not None:
            msg["corr_id"] = corr_id
        self.mqtt.publish(reply_to, msg)

    def _reply_error(self, reply_to: str, corr_id: str | None, code: str, message: str) -> None:
        self.mqtt.publish(reply_to, ErrorResponse(code, message).to_message(corr_id=corr_id))

    def _handle_message(self, topic: str, msg: dict[str, Any]) -> None:
        mtype = msg.get("type")

        corr_id = msg.get("corr_id") if isinstance(msg.get("corr_id"), str) else None
        reply_to = msg.get("reply_to") if isinstance(msg.get("reply_to"), str) else None
        if not reply_to:
            return

        if mtype == "issue_token":
            holder_name = str(msg.get("holder_name", "") or "")
            if not holder_name:
                self._reply_error(reply_to, corr_id, BAD_REQUEST, "holder_name required")
                return
            token = self.engine.issue(
                holder_name,
                str(msg.get("contact", "") or ""),
                str(msg.get("department", "") or ""),
            )
            # A new tracked token starts a fresh notification history.
            self.watcher.reset()
            print(f"[desk] issued {token.number} to {token.holder_name} ({token.department})")
            view = self.engine.token_view()
            self._reply(reply_to, corr_id, {"type": "token_issued", **view})
            self.watcher.observe(view["status"], view["people_ahead"])
            return

        if mtype == "token_status":
            self._reply(reply_to, corr_id, {"type": "token_status", **self.engine.token_view()})
            return

        if mtype == "queue_snapshot":
            depth = msg.get("depth")
            if depth is not None and (
                isinstance(depth, bool) or not isinstance(depth, int) or not 0 <= depth <= MAX_SNAPSHOT_DEPTH
            ):
                self._reply_error(reply_to, corr_id, BAD_REQUEST, f"depth must be an integer in 0..{MAX_SNAPSHOT_DEPTH}")
                return
            self._reply(reply_to, corr_id, snapshot_message(self.engine, depth))
            return

        if mtype == "departments":
            self._reply(reply_to, corr_id, {"type": "departments", "departments": list(self.engine.departments)})
            return

        self._reply_error(reply_to, corr_id, UNKNOWN_TYPE, f"Unsupported request: {mtype}")


def add_engine_args(parser: argparse.ArgumentParser) -> None:
    defaults = EngineConfig()
    parser.add_argument("--prefix", default=defaults.token_prefix, help="token label prefix")
    parser.add_argument("--serving-start", type=int, default=defaults.serving_start)
    parser.add_argument("--last-issued", type=int, default=defaults.last_issued_seed)
    parser.add_argument("--avg-service-minutes", type=int, default=defaults.average_service_minutes)
    parser.add_argument(
        "--per-token-baseline",
        action="store_true",
        help="measure progress from the serving number at issuance instead of a fixed baseline",
    )


def engine_config_from_args(args: argparse.Namespace) -> EngineConfig:
    return EngineConfig(
        token_prefix=args.prefix,
        serving_start=args.serving_start,
        last_issued_seed=args.last_issued,
        average_service_minutes=args.avg_service_minutes,
        progress_baseline=args.serving_start,
        per_token_baseline=args.per_token_baseline,
    )


def main() -> None:
    from .mqtt_client import MqttClient

    parser = argparse.ArgumentParser(description="Token desk (MQTT)")
    parser.add_argument("--mqtt-host", default="127.0.0.1")
    parser.add_argument("--mqtt-port", type=int, default=1883)
    parser.add_argument("--namespace", default="lineless/v0")
    parser.add_argument("--interval", type=float, default=5.0, help="seconds between queue advances")
    add_engine_args(parser)
    args = parser.parse_args()

    mqtt_client = MqttClient(client_id="desk", host=args.mqtt_host, port=args.mqtt_port)
    mqtt_client.start()

    service = MqttTokenDeskService(
        mqtt=mqtt_client,
        engine=QueueEngine(engine_config_from_args(args)),
        namespace=args.namespace,
    )
    service.start(advance_every=args.interval)

    print(
        f"[desk] connected to MQTT {args.mqtt_host}:{args.mqtt_port}, namespace={args.namespace}, "
        f"now serving {service.engine.serving_identifier}"
    )

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        pass
    finally:
        service.stop()
        mqtt_client.stop()


if __name__ == "__main__":
    main()
