# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections.abc
import datetime
import enum
import typing

import msgspec

from ..capture.signals import KeyPress
from ..commontypes import InvalidSessionRecord


@enum.unique
class OutcomeStatus(enum.Enum):
    PENDING = "pending"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    CORRECTED = "corrected"


@enum.unique
class SessionMode(enum.Enum):
    DURATION = "time"
    WORD_COUNT = "words"


# Field names on the wire match the JSON that the browser client has always exported, so
# old exports can still be replayed through the analyzer.
class CharacterOutcome(msgspec.Struct, kw_only=True):
    expected: str = msgspec.field(name="char")
    typed: typing.Optional[str] = msgspec.field(default=None, name="userBuffer")
    status: OutcomeStatus = OutcomeStatus.PENDING

    def __setattr__(self, name: str, value: typing.Any) -> None:
        if name == "expected":
            raise AttributeError(f"The field {name!r} cannot be modified.")
        return super().__setattr__(name, value)

    @property
    def attempted(self):
        return self.typed is not None


class KeyEvent(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    kind: KeyPress = msgspec.field(name="type")
    key: str
    code: typing.Optional[str] = None
    absolute_time: int = msgspec.field(name="timestamp")
    relative_time: int = 0
    cursor_position: typing.Optional[int] = msgspec.field(default=None, name="currentIndex")
    expected_character: str = msgspec.field(default="", name="expectedChar")

    @property
    def is_press(self):
        return self.kind is KeyPress.PRESSED

    @property
    def is_release(self):
        return self.kind is KeyPress.RELEASED


class SessionRecord(msgspec.Struct, kw_only=True, frozen=True, rename="camel"):
    session_id: typing.Optional[str] = None
    owner_id: typing.Optional[str] = msgspec.field(default=None, name="userId")
    created_at: typing.Optional[datetime.datetime] = msgspec.field(default=None, name="timestamp")
    mode: typing.Optional[SessionMode] = None
    mode_value: typing.Optional[int] = None
    target_text: str = msgspec.field(default="", name="text")
    typed_text: str = msgspec.field(default="", name="userInput")
    char_states: typing.Optional[tuple[CharacterOutcome, ...]] = None
    events: tuple[KeyEvent, ...]
    session_duration_ms: int = msgspec.field(default=0, name="sessionDuration")
    accuracy_percent: typing.Optional[float] = msgspec.field(default=None, name="accuracy")
    mechanical_cpm: typing.Optional[float] = msgspec.field(default=None, name="mechanicalCPM")
    productive_cpm: typing.Optional[float] = msgspec.field(default=None, name="productiveCPM")
    total_keystrokes: int = 0
    max_index_reached: int = 0
    first_time_error_positions: frozenset[int] = msgspec.field(default=frozenset(), name="firstTimeErrors")
    # only present in exports made before the per-keystroke counters existed
    error_positions: typing.Optional[frozenset[int]] = None
    productive_keystrokes: typing.Optional[int] = None

    def __post_init__(self):
        if not isinstance(self.events, collections.abc.Sequence):
            raise InvalidSessionRecord("Invalid session data format: missing or invalid events array")


_encoder = msgspec.json.Encoder()
_decoder = msgspec.json.Decoder(type=SessionRecord)


def encode_record(record: SessionRecord, indent: int = 0) -> bytes:
    # frozensets encode in hash order; keep exports stable by sorting positions
    ordered = msgspec.structs.replace(
        record,
        first_time_error_positions=sorted(record.first_time_error_positions),
        error_positions=sorted(record.error_positions) if record.error_positions is not None else None,
    )
    encoded = _encoder.encode(ordered)
    if indent:
        return msgspec.json.format(encoded, indent=indent)
    return encoded


def decode_record(data: bytes | str) -> SessionRecord:
    try:
        return _decoder.decode(data)
    except (msgspec.ValidationError, msgspec.DecodeError) as exc:
        raise InvalidSessionRecord(f"Invalid session data format: {exc}") from exc


def record_from_mapping(raw: collections.abc.Mapping[str, typing.Any]) -> SessionRecord:
    try:
        return msgspec.convert(raw, type=SessionRecord)
    except msgspec.ValidationError as exc:
        raise InvalidSessionRecord(f"Invalid session data format: {exc}") from exc


def as_record(record: SessionRecord | bytes | str | collections.abc.Mapping[str, typing.Any]) -> SessionRecord:
    "Accept a record, raw JSON or an already-parsed JSON mapping, validating the latter two."
    match record:
        case SessionRecord():
            return record
        case bytes() | str():
            return decode_record(record)
        case collections.abc.Mapping():
            return record_from_mapping(record)
        case _:
            raise InvalidSessionRecord(f"Cannot analyze {type(record).__name__!r}; expected a session record")
