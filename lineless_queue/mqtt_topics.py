"""MQTT topic helpers.

Topic layout under a configurable namespace (default: `lineless/v0`):

Request/response:
- `<ns>/desk/requests`
    Token issuance and status/board/department queries.
- `<ns>/desk/responses/<client_id>`

Broadcast:
- `<ns>/queue/updates`
    The desk publishes a board snapshot after every advance.

Separate counters (e.g. one per hospital wing) run side by side on a shared
broker by giving each its own namespace.
"""

from __future__ import annotations

DEFAULT_NAMESPACE = "lineless/v0"


def desk_requests(namespace: str = DEFAULT_NAMESPACE) -> str:
    return f"{namespace}/desk/requests"


def desk_responses(client_id: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    return f"{namespace}/desk/responses/{client_id}"


def queue_updates(namespace: str = DEFAULT_NAMESPACE) -> str:
    """Broadcast board snapshots; boards and patients subscribe here."""
    return f"{namespace}/queue/updates"
