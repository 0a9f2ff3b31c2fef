import msgspec
import pytest
from typr.analysis import (
    Finger,
    analyze,
    confusion_matrix,
    digraph_latency,
    dwell_by_finger,
    dwell_by_key,
    finger_for_key,
    flight_by_key,
    rhythm_series,
    shift_cost,
)
from typr.analysis.types import ConfusionEntry, TypedCount
from typr.capture.signals import KeyPress
from typr.commontypes import InvalidSessionRecord
from typr.session.record import CharacterOutcome, KeyEvent, OutcomeStatus, SessionRecord


def down(key, t, index=None, expected=""):
    return KeyEvent(kind=KeyPress.PRESSED, key=key, absolute_time=t, cursor_position=index, expected_character=expected)


def up(key, t, index=None, expected=""):
    return KeyEvent(kind=KeyPress.RELEASED, key=key, absolute_time=t, cursor_position=index, expected_character=expected)


def outcomes(text, statuses=None, typed=None):
    statuses = statuses or [OutcomeStatus.CORRECT] * len(text)
    typed = typed or text
    return tuple(
        CharacterOutcome(expected=expected, typed=actual, status=status)
        for expected, actual, status in zip(text, typed, statuses)
    )


def test_dwell_single_key():
    assert dwell_by_key([down("a", 1000), up("a", 1150)]) == {"a": 150}


def test_dwell_last_press_wins():
    events = [
        up("a", 900),
        down("a", 1000),
        down("a", 1100),
        up("a", 1150),
        up("a", 1200),
        down("s", 1300),
        up("s", 1400),
    ]
    assert dwell_by_key(events) == {"a": 50, "s": 100}


def test_dwell_by_finger_is_mean_of_key_means():
    events = [
        down("e", 0),
        up("e", 100),
        down("d", 200),
        up("d", 260),
        down("d", 300),
        up("d", 320),
        down("c", 400),
        up("c", 460),
        down("Shift", 500),
        up("Shift", 900),
    ]
    # e=100, d=40, c=60 all on the left middle finger; Shift has no finger
    assert dwell_by_finger(events) == {Finger.LEFT_MIDDLE: pytest.approx(200 / 3)}


def test_flight_attributed_to_arriving_key():
    events = [down("j", 1000), up("j", 1100), down("k", 1180), up("k", 1250)]
    assert flight_by_key(events) == {"k": 80}


def test_flight_uses_most_recent_release():
    events = [down("a", 0), down("b", 50), up("a", 100), up("b", 150), down("c", 230), down("d", 260)]
    assert flight_by_key(events) == {"c": 80, "d": 110}


def test_digraph_mean_and_order():
    states = outcomes("abab")
    events = [
        down("a", 0, 0, "a"),
        up("a", 50, 1, "b"),
        down("b", 130, 1, "b"),
        up("b", 180, 2, "a"),
        down("a", 200, 2, "a"),
        up("a", 250, 3, "b"),
        down("b", 370, 3, "b"),
        up("b", 420, 4, ""),
    ]
    digraphs = digraph_latency(events, states)
    assert [(d.pair, d.mean_latency, d.count) for d in digraphs] == [("ab", 100, 2), ("ba", 20, 1)]
    assert digraphs[0].from_finger is Finger.LEFT_PINKY
    assert digraphs[0].to_finger is Finger.LEFT_INDEX
    assert not digraphs[0].same_finger
    assert digraphs[0].finger_change == "Left Pinky → Left Index"


def test_digraph_same_finger():
    states = outcomes("de")
    events = [down("d", 0, 0, "d"), up("d", 60, 1, "e"), down("e", 150, 1, "e")]
    (digraph,) = digraph_latency(events, states)
    assert digraph.same_finger
    assert digraph.mean_latency == 90


def test_digraph_backspace_breaks_chain():
    states = outcomes("ab", [OutcomeStatus.CORRECT, OutcomeStatus.CORRECTED])
    events = [
        down("a", 0, 0, "a"),
        up("a", 50, 1, "b"),
        down("x", 100, 1, "b"),
        up("x", 140, 2, ""),
        down("Backspace", 200, 2, ""),
        up("Backspace", 240, 1, "b"),
        down("b", 300, 1, "b"),
    ]
    digraphs = digraph_latency(events, states)
    # a->b from the mistyped x; nothing joins the press after the backspace
    assert [(d.pair, d.mean_latency, d.count) for d in digraphs] == [("ab", 50, 1)]


def test_digraph_skips_presses_outside_ledger():
    events = [down("a", 0, 0, "a"), up("a", 50), down("b", 100, 5, "b")]
    assert digraph_latency(events, outcomes("ab")) == []
    assert digraph_latency(events, None) == []


def test_confusion_matrix():
    states = (
        outcomes("tttt", [OutcomeStatus.INCORRECT] * 4, "eree")
        + outcomes("t", [OutcomeStatus.CORRECTED], "t")
        + outcomes("a", [OutcomeStatus.INCORRECT], "s")
        + outcomes("b", [OutcomeStatus.PENDING], [None])
    )
    assert confusion_matrix(states) == (
        ConfusionEntry(expected="t", actual_chars=(TypedCount("e", 3), TypedCount("r", 1)), total_errors=4),
        ConfusionEntry(expected="a", actual_chars=(TypedCount("s", 1),), total_errors=1),
    )


def test_confusion_matrix_absent():
    assert confusion_matrix(None) is None
    assert confusion_matrix(outcomes("abc")) is None


def test_rhythm_skips_incorrect_keystrokes():
    states = outcomes(
        "abcd",
        [OutcomeStatus.CORRECT, OutcomeStatus.INCORRECT, OutcomeStatus.CORRECT, OutcomeStatus.CORRECT],
        "axcd",
    )
    events = [
        down("a", 1000, 0, "a"),
        down("x", 1100, 1, "b"),
        down("c", 1250, 2, "c"),
        down("d", 1300, 3, "d"),
    ]
    samples = rhythm_series(events, states)
    assert [(s.session_time, s.interval, s.char) for s in samples] == [(250, 250, "c"), (300, 50, "d")]


def test_rhythm_needs_two_clean_presses():
    assert rhythm_series([down("a", 0, 0, "a")], outcomes("a")) == []
    assert rhythm_series([down("a", 0, 0, "a"), down("b", 10, 1, "b")], None) == []


def test_shift_cost():
    events = [
        down("a", 0),
        down("b", 100),
        down("Shift", 150),
        down("C", 300),
        down("1", 350),
        down("d", 420),
        down("E", 640),
        down("f", 750),
    ]
    cost = shift_cost(events)
    assert cost.avg_lowercase == 110
    assert cost.avg_uppercase == 210
    assert cost.penalty == 100
    assert cost.percent_slower == pytest.approx(90.909, abs=0.001)
    assert (cost.uppercase_count, cost.lowercase_count) == (2, 3)


def test_shift_cost_absent_or_without_lowercase():
    assert shift_cost([down("1", 0), down("2", 100)]) is None
    cost = shift_cost([down("A", 0), down("B", 100)])
    assert cost.avg_uppercase == 100
    assert cost.percent_slower == 0


@pytest.mark.parametrize(
    "key,finger",
    (
        ("a", Finger.LEFT_PINKY),
        ("A", Finger.LEFT_PINKY),
        ("t", Finger.LEFT_INDEX),
        (" ", Finger.RIGHT_THUMB),
        ("Backspace", Finger.RIGHT_PINKY),
        ("?", Finger.RIGHT_PINKY),
        ("Shift", None),
        ("", None),
    ),
)
def test_finger_for_key(key, finger):
    assert finger_for_key(key) is finger


def cat_record():
    return SessionRecord(
        session_id="s1",
        target_text="cat",
        typed_text="cat",
        char_states=outcomes("cat", [OutcomeStatus.CORRECT, OutcomeStatus.CORRECT, OutcomeStatus.CORRECTED]),
        events=(
            down("c", 1000, 0, "c"),
            up("c", 1080, 1, "a"),
            down("a", 1200, 1, "a"),
            up("a", 1260, 2, "t"),
            down("x", 1400, 2, "t"),
            down("Backspace", 1500, 3, ""),
            down("t", 1600, 2, "t"),
            up("t", 1700, 3, ""),
        ),
        session_duration_ms=700,
        accuracy_percent=66.67,
        mechanical_cpm=428.57,
        productive_cpm=257.14,
        total_keystrokes=5,
        max_index_reached=3,
        first_time_error_positions=frozenset({2}),
    )


def test_analyze_is_idempotent():
    record = cat_record()
    before = msgspec.json.encode(record)
    first = analyze(record)
    second = analyze(record)
    assert first == second
    assert msgspec.json.encode(record) == before
    assert first.summary.accuracy == 66.67
    assert first.summary.first_time_error_count == 1
    assert first.dwell_by_key == {"c": 80, "a": 60, "t": 100}
    assert first.confusion is None


def test_analyze_accepts_exported_json():
    record = cat_record()
    assert analyze(msgspec.json.encode(record)) == analyze(record)
    assert analyze(msgspec.to_builtins(record)) == analyze(record)


def test_analyze_without_char_states():
    record = msgspec.structs.replace(cat_record(), char_states=None)
    report = analyze(record)
    assert report.digraphs == ()
    assert report.rhythm == ()
    assert report.confusion is None
    assert report.dwell_by_key == {"c": 80, "a": 60, "t": 100}


@pytest.mark.parametrize(
    "raw",
    (
        b'{"text": "cat"}',
        b'{"text": "cat", "events": "nope"}',
        b"not json",
        {"events": 5},
        42,
    ),
)
def test_analyze_rejects_records_without_events(raw):
    with pytest.raises(InvalidSessionRecord):
        analyze(raw)


def test_legacy_summary():
    record = SessionRecord(
        target_text="the cat",
        typed_text="thx cat",
        events=(),
        session_duration_ms=60000,
        error_positions=frozenset({2, 5}),
    )
    summary = analyze(record).summary
    assert summary.mechanical_cpm is None
    assert summary.cpm == 7
    assert summary.wpm == 1.4
    # position 2 is wrong and position 5 was marked as an error while typing
    assert summary.accuracy == pytest.approx(71.43)


def test_legacy_export_uses_productive_keystrokes():
    report = analyze(
        b'{"text": "cat", "userInput": "cat", "events": [], "sessionDuration": 60000,'
        b' "errorPositions": [1], "productiveKeystrokes": 6}'
    )
    assert report.summary.accuracy == pytest.approx(66.67)
    assert report.summary.cpm == 6
    assert report.summary.wpm == 1.2
    assert report.summary.first_time_error_count == 0
