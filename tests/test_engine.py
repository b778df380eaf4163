import pytest

from lineless_queue.engine import DEFAULT_DEPARTMENTS, EngineConfig, QueueEngine
from lineless_queue.status import MISSED, NOW, RELAX, SOON, classify


def test_fresh_engine_defaults():
    e = QueueEngine()
    assert e.serving_identifier == "A-36"
    assert e.state().last_issued_number == 42
    assert e.current_token is None
    assert e.departments == DEFAULT_DEPARTMENTS


def test_issue_numbers_are_strictly_increasing():
    e = QueueEngine()
    seen = []
    for i in range(5):
        t = e.issue(f"p{i}", "5550000000", "Billing")
        seen.append(t.sequence)
        assert t.number == f"A-{t.sequence}"
        assert e.current_token is t
    assert seen == [43, 44, 45, 46, 47]


def test_issue_stores_unknown_department_as_given():
    e = QueueEngine()
    t = e.issue("Jane", "5550001001", "Cardiology")
    assert t.department == "Cardiology"
    assert t.status == "waiting"
    assert t.baseline == 36


def test_advance_n_times_moves_pointer_by_n():
    e = QueueEngine()
    for _ in range(4):
        e.advance()
    assert e.serving_pointer == 40

    e.issue("Jane", "5550001001", "General OP")
    assert e.advance() == "A-41"
    assert e.serving_pointer == 41


def test_advance_may_run_past_last_issued():
    e = QueueEngine()
    for _ in range(20):
        e.advance()
    assert e.serving_identifier == "A-56"
    assert e.state().last_issued_number == 42


def test_no_token_views():
    e = QueueEngine()
    assert e.raw_people_ahead() is None
    assert e.people_ahead() == 0
    assert e.estimated_wait_minutes() == 0
    assert e.progress_percent() == 0
    assert e.status() == RELAX


def test_end_to_end_scenarios():
    e = QueueEngine()

    # A: fresh issue
    t = e.issue("Jane", "5550001001", "General OP")
    assert t.number == "A-43"
    assert e.people_ahead() == 6
    assert e.estimated_wait_minutes() == 18
    assert classify(6) == RELAX
    assert e.status() == RELAX

    # B: five advances
    for _ in range(5):
        e.advance()
    assert e.serving_pointer == 41
    assert e.people_ahead() == 1
    assert e.status() == SOON

    # C
    e.advance()
    assert e.serving_pointer == 42
    assert e.people_ahead() == 0
    assert e.status() == NOW

    # D: pointer reaches the token, people ahead is clamped
    e.advance()
    assert e.serving_pointer == 43
    assert e.people_ahead() == 0
    assert e.raw_people_ahead() == -1
    assert e.status() == MISSED


def test_progress_uses_fixed_baseline_by_default():
    e = QueueEngine()
    e.issue("Jane", "5550001001", "General OP")
    assert e.progress_percent() == 0

    for _ in range(4):
        e.advance()
    assert e.progress_percent() == pytest.approx(4 / 7 * 100)

    for _ in range(3):
        e.advance()
    assert e.serving_pointer == 43
    assert e.progress_percent() == 100


def test_fixed_baseline_is_not_the_serving_pointer_at_issue():
    e = QueueEngine()
    for _ in range(4):
        e.advance()
    e.issue("Jane", "5550001001", "General OP")
    # Already 4/7 through although nothing was served since issuance.
    assert e.progress_percent() == pytest.approx(4 / 7 * 100)


def test_per_token_baseline_starts_at_zero():
    e = QueueEngine(EngineConfig(per_token_baseline=True))
    for _ in range(4):
        e.advance()
    e.issue("Jane", "5550001001", "General OP")
    assert e.progress_percent() == 0

    e.advance()
    assert e.progress_percent() == pytest.approx(1 / 3 * 100)


def test_progress_is_100_when_baseline_not_behind_token():
    e = QueueEngine(EngineConfig(progress_baseline=50))
    e.issue("Jane", "5550001001", "General OP")
    assert e.progress_percent() == 100


def test_progress_stays_in_range():
    e = QueueEngine()
    e.issue("Jane", "5550001001", "General OP")
    for _ in range(12):
        assert 0 <= e.progress_percent() <= 100
        e.advance()


def test_queue_snapshot_roles_and_labels():
    e = QueueEngine()
    snap = e.queue_snapshot(9)
    assert len(snap) == 10
    assert snap[0].identifier == "A-36"
    assert (snap[0].label, snap[0].role) == ("Now Serving", "current")
    assert (snap[1].identifier, snap[1].label, snap[1].role) == ("A-37", "Next", "next")
    assert all(s.role == "waiting" and s.label == "Waiting" for s in snap[2:])
    assert snap[-1].identifier == "A-45"


def test_queue_snapshot_ignores_current_token():
    e = QueueEngine()
    before = e.queue_snapshot()
    e.issue("Jane", "5550001001", "General OP")
    assert e.queue_snapshot() == before


def test_queue_snapshot_depth():
    e = QueueEngine()
    assert [s.role for s in e.queue_snapshot(0)] == ["current"]
    assert len(e.queue_snapshot(3)) == 4
    with pytest.raises(ValueError):
        e.queue_snapshot(-1)


def test_custom_prefix_and_seed():
    e = QueueEngine(EngineConfig(token_prefix="X", serving_start=1, last_issued_seed=1))
    assert e.issue("a", "b", "X-Ray").number == "X-2"
    assert e.advance() == "X-2"
    assert e.status() == MISSED


def test_token_view():
    e = QueueEngine()
    e.issue("Jane", "5550001001", "General OP")
    view = e.token_view()
    assert view["token"]["number"] == "A-43"
    assert view["token"]["department"] == "General OP"
    assert view["now_serving"] == "A-36"
    assert view["people_ahead"] == 6
    assert view["wait_minutes"] == 18
    assert view["status"] == "relax"
    assert view["banner"] == "success"
    assert view["message"].startswith("Relax")


def test_token_view_is_consistent_while_ticking():
    from lineless_queue.ticker import start_auto_advance

    e = QueueEngine()
    e.issue("Jane", "5550001001", "General OP")
    handle = start_auto_advance(e, interval=0.0001)
    try:
        for _ in range(2000):
            view = e.token_view()
            serving = int(view["now_serving"].split("-")[1])
            assert view["people_ahead"] == max(0, 43 - serving - 1)
            assert view["status"] == classify(43 - serving - 1)
    finally:
        handle.cancel()
