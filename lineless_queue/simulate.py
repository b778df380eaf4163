from __future__ import annotations

# Offline simulation.
#
# Runs one engine in-process without a broker: issue a token for a patient,
# let the ticker advance the counter, and print what the status screen and
# notices would show after every step.

import argparse
import threading
from typing import Callable

from .desk import add_engine_args, engine_config_from_args
from .engine import QueueEngine
from .notifications import Notice, StatusWatcher, token_issued_notice
from .ticker import TickerSlot


def describe(engine: QueueEngine) -> str:
    view = engine.token_view()
    return (
        f"now serving {view['now_serving']} | {view['people_ahead']} ahead, ~{view['wait_minutes']} min | "
        f"{view['progress']:0.0f}% | {view['status']}"
    )


def run_simulation(
    engine: QueueEngine,
    *,
    name: str,
    contact: str,
    department: str,
    steps: int,
    interval: float,
    out: Callable[[str], None] = print,
) -> list[str]:
    """Issue one token, advance `steps` times, return the statuses seen."""
    if steps < 0:
        raise ValueError("steps must be >= 0")

    token = engine.issue(name, contact, department)
    out(f"[simulate] {token_issued_notice(token.number).text}")
    out(f"[simulate] {describe(engine)}")

    def on_notice(status: str, notice: Notice) -> None:
        out(f"[simulate] notice ({notice.level}): {notice.text}")

    watcher = StatusWatcher(on_change=on_notice)
    watcher.observe(engine.status(), engine.people_ahead())
    statuses = [engine.status()]

    if steps == 0:
        return statuses

    done = threading.Event()
    seen = 0

    def on_advance(identifier: str) -> None:
        nonlocal seen
        if done.is_set():
            return
        seen += 1
        statuses.append(engine.status())
        out(f"[simulate] {describe(engine)}")
        watcher.observe(engine.status(), engine.people_ahead())
        if seen >= steps:
            done.set()
            handle = slot.handle
            if handle is not None:
                handle.cancel()

    slot = TickerSlot(engine)
    slot.start(on_advance, interval=interval)
    try:
        done.wait()
    finally:
        slot.stop()
    return statuses


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline queue simulation (no broker)")
    parser.add_argument("--name", default="Jane")
    parser.add_argument("--contact", default="5550001001")
    parser.add_argument("--department", default="General OP")
    parser.add_argument("--steps", type=int, default=8)
    parser.add_argument("--interval", type=float, default=1.0, help="seconds between queue advances")
    add_engine_args(parser)
    args = parser.parse_args()

    engine = QueueEngine(engine_config_from_args(args))
    try:
        run_simulation(
            engine,
            name=args.name,
            contact=args.contact,
            department=args.department,
            steps=args.steps,
            interval=args.interval,
        )
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
