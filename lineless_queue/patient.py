from __future__ import annotations

# Patient client.
#
# A patient run is short-lived:
# - connect to broker
# - request a token (or just the status of the desk's tracked token)
# - print the result and exit

import argparse
import time
from typing import Any

from .mqtt_client import MqttClient
from .mqtt_topics import desk_requests, desk_responses


def _ask(*, mqtt_host: str, mqtt_port: int, namespace: str, client_id: str, message: dict[str, Any]) -> dict[str, Any]:
    mqtt = MqttClient(client_id=client_id, host=mqtt_host, port=mqtt_port)
    mqtt.start()

    reply_topic = desk_responses(client_id, namespace)
    mqtt.subscribe(reply_topic)

    try:
        return mqtt.request(
            request_topic=desk_requests(namespace),
            response_topic=reply_topic,
            message=message,
            timeout=5.0,
        )
    finally:
        mqtt.stop()


def request_token(
    *, mqtt_host: str, mqtt_port: int, namespace: str, name: str, contact: str, department: str
) -> dict[str, Any]:
    return _ask(
        mqtt_host=mqtt_host,
        mqtt_port=mqtt_port,
        namespace=namespace,
        client_id=f"patient-{name}-{int(time.time() * 1000)}",
        message={"type": "issue_token", "holder_name": name, "contact": contact, "department": department},
    )


def request_status(*, mqtt_host: str, mqtt_port: int, namespace: str) -> dict[str, Any]:
    return _ask(
        mqtt_host=mqtt_host,
        mqtt_port=mqtt_port,
        namespace=namespace,
        client_id=f"patient-status-{int(time.time() * 1000)}",
        message={"type": "token_status"},
    )


def format_status(resp: dict[str, Any]) -> str:
    token = resp.get("token") or {}
    return (
        f"token {token.get('number', '-')} ({token.get('department', '-')}) | "
        f"now serving {resp['now_serving']} | {resp['people_ahead']} ahead, ~{resp['wait_minutes']} min | "
        f"{resp['progress']:0.0f}% | {resp['message']}"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Patient client (MQTT)")
    parser.add_argument("--name", help="request a new token for this name")
    parser.add_argument("--contact", default="")
    parser.add_argument("--department", default="General OP")
    parser.add_argument("--mqtt-host", default="127.0.0.1")
    parser.add_argument("--mqtt-port", type=int, default=1883)
    parser.add_argument("--namespace", default="lineless/v0")
    args = parser.parse_args()

    if args.name:
        resp = request_token(
            mqtt_host=args.mqtt_host,
            mqtt_port=args.mqtt_port,
            namespace=args.namespace,
            name=args.name,
            contact=args.contact,
            department=args.department,
        )
    else:
        resp = request_status(mqtt_host=args.mqtt_host, mqtt_port=args.mqtt_port, namespace=args.namespace)

    if resp.get("type") in ("token_issued", "token_status"):
        print(f"[patient] {format_status(resp)}")
    else:
        print(f"[patient] error: {resp}")


if __name__ == "__main__":
    main()
