import pytest

from lineless_queue.status import STATUSES, banner_level, classify, message, status_message


@pytest.mark.parametrize(
    "ahead, expected",
    [(-5, "missed"), (-1, "missed"), (0, "now"), (1, "soon"), (2, "soon"), (3, "relax"), (40, "relax")],
)
def test_classify(ahead, expected):
    assert classify(ahead) == expected


def test_classify_without_token_is_relax():
    assert classify(None) == "relax"


def test_message_covers_every_status():
    for st in STATUSES:
        assert message(st)
    assert message("soon") == "Almost your turn! Please come near the counter."


def test_banner_levels():
    assert banner_level("relax") == "success"
    assert banner_level("soon") == "warning"
    assert banner_level("now") == "danger"
    assert banner_level("missed") == "danger"


def test_unknown_status_rejected():
    with pytest.raises(ValueError):
        message("late")
    with pytest.raises(ValueError):
        banner_level("late")


def test_status_message():
    sm = status_message("missed")
    assert sm.type == "missed"
    assert sm.to_message() == {"text": message("missed"), "type": "missed"}
