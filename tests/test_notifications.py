import pytest

from lineless_queue.notifications import StatusWatcher, notice_for, should_alert, token_issued_notice


def test_notice_wording_embeds_people_ahead():
    assert notice_for("relax", 6).text.startswith("You can relax. 6 people ahead")
    assert notice_for("relax", 6).level == "success"
    assert notice_for("soon", 2).text.startswith("Only 2 people left")
    assert notice_for("soon", 2).level == "warning"
    assert notice_for("now", 0).level == "danger"
    assert notice_for("missed", 0).level == "danger"
    with pytest.raises(ValueError):
        notice_for("late", 0)


def test_only_soon_and_now_alert():
    assert should_alert("soon")
    assert should_alert("now")
    assert not should_alert("relax")
    assert not should_alert("missed")


def test_watcher_emits_only_on_change():
    got = []
    w = StatusWatcher(on_change=lambda st, n: got.append((st, n.text)))

    assert w.observe("relax", 6) is None
    assert w.observe("soon", 2) is not None
    assert w.observe("soon", 1) is None
    assert w.observe("now", 0) is not None
    assert w.observe("missed", 0) is None

    assert [st for st, _ in got] == ["soon", "now"]
    assert w.last_status == "missed"


def test_watcher_reset_allows_repeat():
    w = StatusWatcher()
    assert w.observe("now", 0) is not None
    assert w.observe("now", 0) is None
    w.reset()
    assert w.observe("now", 0) is not None


def test_token_issued_notice():
    n = token_issued_notice("A-43")
    assert "A-43" in n.text
    assert n.level == "success"
