"""Patient-facing notices derived from queue status.

The engine only produces `(status, people_ahead)`. Deciding whether to alert
and suppressing repeats is done here, by keeping the last observed status
and comparing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from .status import MISSED, NOW, RELAX, SOON

ALERT_STATUSES = frozenset({SOON, NOW})


@dataclass(frozen=True)
class Notice:
    text: str
    level: str  # success | warning | danger

    def to_message(self) -> dict[str, str]:
        return {"text": self.text, "level": self.level}


NoticeHandler = Callable[[str, Notice], None]


def notice_for(status: str, people_ahead: int) -> Notice:
    if status == RELAX:
        return Notice(
            f"You can relax. {people_ahead} people ahead of you. We'll notify you when your turn is near.",
            "success",
        )
    if status == SOON:
        return Notice(
            f"Only {people_ahead} people left before your turn. Please come near the counter.",
            "warning",
        )
    if status == NOW:
        return Notice("Your token is now being served! Please proceed to the counter immediately.", "danger")
    if status == MISSED:
        return Notice("Your token was missed. Please contact the help desk for assistance.", "danger")
    raise ValueError(f"unknown status: {status!r}")


def token_issued_notice(number: str) -> Notice:
    return Notice(f"Token {number} generated successfully!", "success")


def should_alert(status: str) -> bool:
    return status in ALERT_STATUSES


class StatusWatcher:
    """Emit a notice only when the observed status changes to an alerting one."""

    def __init__(self, on_change: NoticeHandler | None = None) -> None:
        self._on_change = on_change
        self._last: str | None = None

    @property
    def last_status(self) -> str | None:
        return self._last

    def observe(self, status: str, people_ahead: int) -> Notice | None:
        changed = status != self._last
        self._last = status
        if not changed or not should_alert(status):
            return None

        notice = notice_for(status, people_ahead)
        if self._on_change is not None:
            self._on_change(status, notice)
        return notice

    def reset(self) -> None:
        self._last = None
