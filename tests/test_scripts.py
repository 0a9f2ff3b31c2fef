import logging

from typr.capture.recorded import Recording
from typr.capture.signals import InputSignal
from typr.db import make_db
from typr.scripts import print_analysis, replay_session
from typr.session.export import export_filename
from typr.session.record import SessionMode
from typr.settings import Settings


def make_settings(tmp_path):
    settings = Settings.for_test()
    settings.mode = SessionMode.WORD_COUNT
    settings.word_count = 2
    settings.db_path = tmp_path / "sessions.db"
    settings.export_path = tmp_path / "exports"
    return settings


RECORDING = Recording(
    text="to be",
    signals=[
        InputSignal.pressed("t", 1000),
        InputSignal.released("t", 1060),
        InputSignal.pressed("p", 1150),
        InputSignal.released("p", 1200),
        InputSignal.pressed("Backspace", 1300),
        InputSignal.pressed("o", 1400),
        InputSignal.pressed(" ", 1500),
        InputSignal.pressed("b", 1600),
        InputSignal.pressed("e", 1700),
    ],
)


async def test_replay_then_analyze(tmp_path, capsys):
    settings = make_settings(tmp_path)
    store = make_db(settings.db_path)
    assert await replay_session(settings, RECORDING, store) == 0
    assert "80.0% accuracy" in capsys.readouterr().out

    (listing,) = store.list_for_owner(settings.owner_id)
    record = store.fetch(listing.session_id)
    assert record.target_text == "to be"
    assert record.first_time_error_positions == frozenset({1})

    assert print_analysis(settings.export_path / export_filename(record), top=3) == 0
    out = capsys.readouterr().out
    assert "'confusion': None" in out
    assert "'mechanicalCPM'" in out


async def test_replay_without_store(tmp_path):
    settings = make_settings(tmp_path)
    assert await replay_session(settings, RECORDING, None) == 0
    assert len(list(settings.export_path.iterdir())) == 1
    assert not settings.db_path.exists()


def test_analyze_bad_file(tmp_path, caplog):
    path = tmp_path / "bad.json"
    path.write_text('{"text": "no events here"}')
    with caplog.at_level(logging.ERROR):
        assert print_analysis(path, top=5) == 1
    assert "bad.json" in caplog.text
