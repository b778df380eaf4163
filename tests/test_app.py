import subprocess
import sys


def _run(*args):
    return subprocess.run(
        [sys.executable, "-m", "lineless_queue.app", *args],
        capture_output=True,
        text=True,
        check=False,
        timeout=30,
    )


def test_app_help_runs():
    proc = _run("-h")
    assert proc.returncode == 0
    out = proc.stdout + proc.stderr
    assert "main entrypoint" in out
    assert "desk" in out
    assert "patient" in out
    assert "simulate" in out


def test_desk_help_runs():
    proc = _run("desk", "-h")
    assert proc.returncode == 0
    out = proc.stdout + proc.stderr
    assert "--interval" in out
    assert "--per-token-baseline" in out


def test_simulate_runs_without_broker():
    proc = _run("simulate", "--steps", "7", "--interval", "0.01")
    assert proc.returncode == 0, proc.stderr
    out = proc.stdout
    assert "Token A-43 generated successfully!" in out
    assert "now serving A-43" in out
    assert "missed" in out


def test_simulate_accepts_engine_flags():
    proc = _run(
        "simulate",
        "--prefix",
        "B",
        "--serving-start",
        "10",
        "--last-issued",
        "11",
        "--avg-service-minutes",
        "5",
        "--contact",
        "5550002002",
        "--steps",
        "0",
    )
    assert proc.returncode == 0, proc.stderr
    assert "Token B-12 generated successfully!" in proc.stdout
    assert "now serving B-10 | 1 ahead, ~5 min" in proc.stdout


def test_desk_help_lists_engine_flags():
    out = _run("desk", "-h").stdout
    for flag in ("--prefix", "--serving-start", "--last-issued", "--avg-service-minutes"):
        assert flag in out
