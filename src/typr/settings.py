import dataclasses
import datetime
import json
import pathlib
import typing

import cattrs

from .session.record import SessionMode

settings_converter = cattrs.Converter()
settings_converter.register_unstructure_hook(datetime.timedelta, lambda d: int(d.total_seconds()))
settings_converter.register_structure_hook(datetime.timedelta, lambda d, _: datetime.timedelta(seconds=d))
settings_converter.register_unstructure_hook(pathlib.Path, str)
settings_converter.register_structure_hook(pathlib.Path, lambda v, _: pathlib.Path(v))


@dataclasses.dataclass(kw_only=True)
class Settings:
    _path: pathlib.Path
    owner_id: str
    mode: SessionMode
    time_limit: datetime.timedelta
    word_count: int
    time_mode_initial_words: int = 200
    extension_words: int = 50
    lookahead: int = 50
    chars_per_word: int = 6
    custom_words_path: typing.Optional[pathlib.Path] = None
    db_path: pathlib.Path
    export_path: pathlib.Path

    def __post_init__(self):
        if self.lookahead < 1 or self.extension_words < 1:
            raise ValueError("lookahead and extension_words must both be at least 1")

    @property
    def mode_value(self) -> int:
        if self.mode is SessionMode.DURATION:
            return int(self.time_limit.total_seconds())
        return self.word_count

    def save(self, dest: typing.Optional[pathlib.Path] = None):
        if dest is None:
            dest = self._path
        raw = settings_converter.unstructure(self)
        del raw["_path"]
        with dest.open("w") as out:
            json.dump(raw, out, indent=2)

    @classmethod
    def load(cls, src: pathlib.Path):
        with src.open() as infile:
            raw = json.load(infile)
        raw["_path"] = src
        return settings_converter.structure(raw, cls)

    @classmethod
    def for_test(cls):
        return settings_converter.structure(
            {
                "_path": "test.settings.json",
                "owner_id": "guest",
                "mode": "time",
                "time_limit": 30,
                "word_count": 25,
                "db_path": "test.db",
                "export_path": "test_export",
            },
            cls,
        )


settings_converter.register_structure_hook(Settings, cattrs.gen.make_dict_structure_fn(Settings, settings_converter))
