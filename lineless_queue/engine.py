from __future__ import annotations

# The queue engine is the single source of truth for one service counter.
#
# It owns two counters (serving pointer and last issued number), the
# department catalog and at most one "current" token whose position it
# reports on. Every view (people ahead, wait, progress, status, board) is
# recomputed from those counters on each call; nothing derived is stored.
#
# The engine never talks to MQTT or a UI. Adapters (`desk.py`, `gui.py`,
# `app.py simulate`) hold an engine instance and pass it around.

import copy
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from . import status as queue_status

DEFAULT_DEPARTMENTS = (
    "General OP",
    "X-Ray",
    "Billing",
    "Laboratory",
    "Pharmacy",
    "Emergency",
)

ROLE_CURRENT = "current"
ROLE_NEXT = "next"
ROLE_WAITING = "waiting"

TOKEN_WAITING = "waiting"
TOKEN_SERVING = "serving"
TOKEN_DONE = "done"


@dataclass(frozen=True)
class EngineConfig:
    """Starting values and constants for one engine instance."""

    token_prefix: str = "A"
    serving_start: int = 36
    last_issued_seed: int = 42
    average_service_minutes: int = 3
    # Fixed serving number progress is measured from.
    progress_baseline: int = 36
    # Measure progress from the serving pointer captured at issuance instead.
    per_token_baseline: bool = False
    departments: tuple[str, ...] = DEFAULT_DEPARTMENTS
    snapshot_depth: int = 9


@dataclass(frozen=True)
class Token:
    number: str
    sequence: int
    holder_name: str
    contact: str
    department: str
    baseline: int
    issued_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    status: str = TOKEN_WAITING

    def to_message(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "holder_name": self.holder_name,
            "contact": self.contact,
            "department": self.department,
            "issued_at": self.issued_at.isoformat(),
            "status": self.status,
        }


@dataclass
class QueueState:
    """Mutable counters for one engine."""

    serving_pointer: int
    last_issued_number: int
    token_prefix: str
    departments: tuple[str, ...]
    current_token: Token | None = None


@dataclass(frozen=True)
class QueueEntry:
    """One row of the public queue board."""

    identifier: str
    label: str
    role: str

    def to_message(self) -> dict[str, str]:
        return {"identifier": self.identifier, "label": self.label, "role": self.role}


class QueueEngine:
    """Token issuance and queue progress (testable without MQTT)."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()
        self._lock = threading.Lock()
        self._state = QueueState(
            serving_pointer=self.config.serving_start,
            last_issued_number=self.config.last_issued_seed,
            token_prefix=self.config.token_prefix,
            departments=tuple(self.config.departments),
        )

    # -------------------- accessors --------------------

    @property
    def departments(self) -> tuple[str, ...]:
        return self._state.departments

    @property
    def current_token(self) -> Token | None:
        return self._state.current_token

    @property
    def serving_pointer(self) -> int:
        return self._state.serving_pointer

    @property
    def serving_identifier(self) -> str:
        return self._identifier(self._state.serving_pointer)

    def state(self) -> QueueState:
        """Return a copy of the current counters."""
        with self._lock:
            return copy.copy(self._state)

    def _identifier(self, n: int) -> str:
        return f"{self._state.token_prefix}-{n}"

    # -------------------- mutations --------------------

    def issue(self, holder_name: str, contact: str, department: str) -> Token:
        """Issue the next token and track it as the current one.

        Inputs are stored as given. Validation belongs to the caller, and an
        unknown department is accepted so the catalog can change freely.
        """
        with self._lock:
            self._state.last_issued_number += 1
            n = self._state.last_issued_number
            token = Token(
                number=self._identifier(n),
                sequence=n,
                holder_name=holder_name,
                contact=contact,
                department=department,
                baseline=self._state.serving_pointer,
            )
            self._state.current_token = token
            return token

    def advance(self) -> str:
        """Complete one unit of service and return the new serving identifier.

        The pointer may run past the last issued token (empty queue).
        """
        with self._lock:
            self._state.serving_pointer += 1
            return self._identifier(self._state.serving_pointer)

    # -------------------- derived views --------------------
    #
    # Each view reads (serving pointer, current token) once under the lock and
    # computes from that pair, so a concurrent advance cannot mix two states.

    def _read(self) -> tuple[int, Token | None]:
        with self._lock:
            return self._state.serving_pointer, self._state.current_token

    @staticmethod
    def _raw_ahead(serving: int, token: Token | None) -> int | None:
        if token is None:
            return None
        return token.sequence - serving - 1

    def _progress(self, serving: int, token: Token | None) -> float:
        if token is None:
            return 0.0
        if serving >= token.sequence:
            return 100.0

        baseline = token.baseline if self.config.per_token_baseline else self.config.progress_baseline
        total_ahead = token.sequence - baseline
        if total_ahead <= 0:
            return 100.0

        remaining = token.sequence - serving
        progress = (total_ahead - remaining) / total_ahead * 100
        return max(0.0, min(100.0, progress))

    def raw_people_ahead(self) -> int | None:
        """Unclamped `token - serving - 1`, or None without a current token.

        Negative values mean the serving pointer already passed the token.
        """
        return self._raw_ahead(*self._read())

    def people_ahead(self) -> int:
        return max(0, self.raw_people_ahead() or 0)

    def estimated_wait_minutes(self) -> int:
        return self.people_ahead() * self.config.average_service_minutes

    def progress_percent(self) -> float:
        """Share of the tokens ahead at the baseline that have been served.

        The baseline is `config.progress_baseline` unless
        `config.per_token_baseline` is set, in which case it is the serving
        pointer captured when the token was issued.
        """
        return self._progress(*self._read())

    def status(self) -> str:
        return queue_status.classify(self.raw_people_ahead())

    def status_message(self) -> queue_status.StatusMessage:
        return queue_status.status_message(self.status())

    def queue_snapshot(self, depth: int | None = None) -> list[QueueEntry]:
        """Board listing: the serving token followed by the next `depth` numbers.

        Reads only the serving pointer; issued tokens are not consulted.
        """
        if depth is None:
            depth = self.config.snapshot_depth
        if depth < 0:
            raise ValueError("depth must be >= 0")

        serving, _ = self._read()
        entries = [QueueEntry(self._identifier(serving), "Now Serving", ROLE_CURRENT)]
        for i in range(1, depth + 1):
            if i == 1:
                entries.append(QueueEntry(self._identifier(serving + i), "Next", ROLE_NEXT))
            else:
                entries.append(QueueEntry(self._identifier(serving + i), "Waiting", ROLE_WAITING))
        return entries

    def token_view(self) -> dict[str, Any]:
        """Everything a status screen shows for the current token, from one read."""
        serving, token = self._read()
        raw = self._raw_ahead(serving, token)
        ahead = max(0, raw or 0)
        st = queue_status.classify(raw)
        return {
            "token": token.to_message() if token else None,
            "now_serving": self._identifier(serving),
            "people_ahead": ahead,
            "wait_minutes": ahead * self.config.average_service_minutes,
            "progress": self._progress(serving, token),
            "status": st,
            "message": queue_status.message(st),
            "banner": queue_status.banner_level(st),
        }
