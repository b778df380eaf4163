"""Error envelope for desk replies.

The engine itself never raises for queue situations; only the MQTT adapter
reports malformed requests, always in this shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

BAD_REQUEST = "bad_request"
UNKNOWN_TYPE = "unknown_type"


@dataclass(frozen=True)
class ErrorResponse:
    code: str
    message: str

    def to_message(self, *, corr_id: str | None = None) -> dict[str, Any]:
        msg: dict[str, Any] = {"type": "error", "code": self.code, "message": self.message}
        if corr_id is not None:
            msg["corr_id"] = corr_id
        return msg
