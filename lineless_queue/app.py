from __future__ import annotations

# Single-entrypoint runner.
#
#     python -m lineless_queue.app desk [--interval 5]
#     python -m lineless_queue.app patient --name Jane --department "X-Ray"
#     python -m lineless_queue.app board
#     python -m lineless_queue.app simulate --steps 8 --interval 1
#
# `desk`, `patient` and `board` talk to an MQTT broker; `simulate` runs one
# engine in-process with no broker.

import argparse
import sys

from .desk import add_engine_args


def main() -> None:
    parser = argparse.ArgumentParser(description="LineLess token queue - main entrypoint")
    sub = parser.add_subparsers(dest="cmd", required=True)

    def add_mqtt_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--mqtt-host", default="127.0.0.1")
        p.add_argument("--mqtt-port", type=int, default=1883)
        p.add_argument("--namespace", default="lineless/v0")

    p_desk = sub.add_parser("desk", help="Run the token desk (queue engine + ticker) over MQTT")
    add_mqtt_args(p_desk)
    p_desk.add_argument("--interval", type=float, default=5.0)
    add_engine_args(p_desk)

    p_pat = sub.add_parser("patient", help="Request a token, or the tracked token's status")
    add_mqtt_args(p_pat)
    p_pat.add_argument("--name", default=None)
    p_pat.add_argument("--contact", default="")
    p_pat.add_argument("--department", default="General OP")

    p_board = sub.add_parser("board", help="Open the Tkinter queue board")
    add_mqtt_args(p_board)

    p_sim = sub.add_parser("simulate", help="Run one queue in-process without a broker")
    p_sim.add_argument("--name", default="Jane")
    p_sim.add_argument("--contact", default="5550001001")
    p_sim.add_argument("--department", default="General OP")
    p_sim.add_argument("--steps", type=int, default=8)
    p_sim.add_argument("--interval", type=float, default=1.0)
    add_engine_args(p_sim)

    args = parser.parse_args()

    if args.cmd == "simulate":
        from .simulate import main as run

        run_args = ["--name", args.name, "--contact", args.contact, "--department", args.department]
        run_args += ["--steps", str(args.steps), "--interval", str(args.interval), *_engine_argv(args)]
        _dispatch_to_module_main(run, run_args)
        return

    mqtt_args = ["--mqtt-host", args.mqtt_host, "--mqtt-port", str(args.mqtt_port), "--namespace", args.namespace]

    if args.cmd == "desk":
        from .desk import main as run

        run_args = [*mqtt_args, "--interval", str(args.interval), *_engine_argv(args)]
        _dispatch_to_module_main(run, run_args)
        return

    if args.cmd == "patient":
        from .patient import main as run

        run_args = [*mqtt_args, "--contact", args.contact, "--department", args.department]
        if args.name:
            run_args += ["--name", args.name]
        _dispatch_to_module_main(run, run_args)
        return

    if args.cmd == "board":
        from .gui import main as run

        _dispatch_to_module_main(run, mqtt_args)
        return


def _engine_argv(args: argparse.Namespace) -> list[str]:
    argv = [
        "--prefix",
        args.prefix,
        "--serving-start",
        str(args.serving_start),
        "--last-issued",
        str(args.last_issued),
        "--avg-service-minutes",
        str(args.avg_service_minutes),
    ]
    if args.per_token_baseline:
        argv += ["--per-token-baseline"]
    return argv


def _dispatch_to_module_main(module_main, argv: list[str]) -> None:
    old_argv = sys.argv[:]
    try:
        sys.argv = [old_argv[0], *argv]
        module_main()
    finally:
        sys.argv = old_argv


if __name__ == "__main__":
    main()
