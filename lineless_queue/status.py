"""Queue status classification.

A tracked token's position is reduced to one of four urgency states:

- `missed`: the serving pointer has passed the token
- `now`: the token is at the counter
- `soon`: one or two tokens left before it
- `relax`: more than two tokens ahead (or nothing tracked yet)

Status is never stored. Callers recompute it from the raw people-ahead
difference on every query and diff successive values themselves if they
care about changes (see `notifications.StatusWatcher`).
"""

from __future__ import annotations

from dataclasses import dataclass

MISSED = "missed"
NOW = "now"
SOON = "soon"
RELAX = "relax"

STATUSES = (MISSED, NOW, SOON, RELAX)

# Upper bound (inclusive) of people ahead that still counts as "soon".
SOON_THRESHOLD = 2

_MESSAGES = {
    RELAX: "Relax, you still have time. We'll notify you when your turn is near.",
    SOON: "Almost your turn! Please come near the counter.",
    NOW: "Your token is being served. Please proceed to the counter.",
    MISSED: "Your token was missed. Please contact the help desk.",
}

_BANNER_LEVELS = {
    RELAX: "success",
    SOON: "warning",
    NOW: "danger",
    MISSED: "danger",
}


@dataclass(frozen=True)
class StatusMessage:
    text: str
    type: str

    def to_message(self) -> dict[str, str]:
        return {"text": self.text, "type": self.type}


def classify(people_ahead: int | None) -> str:
    """Map an unclamped people-ahead difference to a status.

    `None` means no token is tracked and defaults to `relax`.
    """
    if people_ahead is None:
        return RELAX
    if people_ahead < 0:
        return MISSED
    if people_ahead == 0:
        return NOW
    if people_ahead <= SOON_THRESHOLD:
        return SOON
    return RELAX


def message(status: str) -> str:
    try:
        return _MESSAGES[status]
    except KeyError:
        raise ValueError(f"unknown status: {status!r}") from None


def banner_level(status: str) -> str:
    """Presentation level of the status banner (success/warning/danger)."""
    try:
        return _BANNER_LEVELS[status]
    except KeyError:
        raise ValueError(f"unknown status: {status!r}") from None


def status_message(status: str) -> StatusMessage:
    return StatusMessage(text=message(status), type=status)
