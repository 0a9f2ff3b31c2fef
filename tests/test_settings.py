import dataclasses
import datetime
import json
import pathlib

import pytest

from typr.session.record import SessionMode
from typr.settings import Settings


def test_for_test_defaults():
    settings = Settings.for_test()
    assert settings.mode is SessionMode.DURATION
    assert settings.time_limit == datetime.timedelta(seconds=30)
    assert settings.mode_value == 30
    assert settings.chars_per_word == 6
    assert settings.custom_words_path is None
    assert settings.db_path == pathlib.Path("test.db")


def test_save_and_load(tmp_path):
    settings = Settings.for_test()
    settings.mode = SessionMode.WORD_COUNT
    settings.word_count = 50
    settings.custom_words_path = tmp_path / "words.json"
    path = tmp_path / "settings.json"
    settings.save(path)

    raw = json.loads(path.read_text())
    assert "_path" not in raw
    assert raw["mode"] == "words"
    assert raw["time_limit"] == 30

    loaded = Settings.load(path)
    assert loaded.mode is SessionMode.WORD_COUNT
    assert loaded.mode_value == 50
    assert loaded.custom_words_path == tmp_path / "words.json"
    assert loaded._path == path


def test_load_fills_in_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "owner_id": "rose",
                "mode": "time",
                "time_limit": 60,
                "word_count": 25,
                "db_path": "sessions.db",
                "export_path": "exports",
            }
        )
    )
    loaded = Settings.load(path)
    assert loaded.owner_id == "rose"
    assert loaded.time_mode_initial_words == 200
    assert loaded.lookahead == 50
    assert loaded.mode_value == 60


def test_extension_settings_must_be_positive():
    settings = Settings.for_test()
    with pytest.raises(ValueError):
        dataclasses.replace(settings, lookahead=0)
    with pytest.raises(ValueError):
        dataclasses.replace(settings, extension_words=0)
