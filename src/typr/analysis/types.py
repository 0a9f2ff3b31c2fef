# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import typing

import msgspec

from .fingers import Finger


class DigraphLatency(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    first: str = msgspec.field(name="char1")
    second: str = msgspec.field(name="char2")
    mean_latency: float = msgspec.field(name="avgLatency")
    count: int
    from_finger: typing.Optional[Finger] = None
    to_finger: typing.Optional[Finger] = None
    same_finger: bool = False

    @property
    def pair(self):
        return f"{self.first}{self.second}"

    @property
    def finger_change(self):
        if self.from_finger is None or self.to_finger is None:
            return "Unknown"
        return f"{self.from_finger.display_name} → {self.to_finger.display_name}"


class TypedCount(msgspec.Struct, frozen=True):
    actual: str
    count: int


class ConfusionEntry(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    expected: str
    actual_chars: tuple[TypedCount, ...]
    total_errors: int


class RhythmSample(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    session_time: int
    interval: int
    char: str


class ShiftCost(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    avg_uppercase: float
    avg_lowercase: float
    penalty: float
    percent_slower: float
    uppercase_count: int
    lowercase_count: int


class SessionSummary(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    session_duration: int
    accuracy: float
    mechanical_cpm: typing.Optional[float] = msgspec.field(default=None, name="mechanicalCPM")
    productive_cpm: typing.Optional[float] = msgspec.field(default=None, name="productiveCPM")
    total_keystrokes: int = 0
    max_index_reached: int = 0
    first_time_error_count: int = 0
    # only filled in for records exported before mechanical/productive rates were tracked
    cpm: typing.Optional[float] = None
    wpm: typing.Optional[float] = None


class AnalysisReport(msgspec.Struct, frozen=True, kw_only=True, rename="camel"):
    summary: SessionSummary
    dwell_by_key: dict[str, float]
    dwell_by_finger: dict[Finger, float]
    flight_by_key: dict[str, float]
    flight_by_finger: dict[Finger, float]
    digraphs: tuple[DigraphLatency, ...]
    confusion: typing.Optional[tuple[ConfusionEntry, ...]]
    rhythm: tuple[RhythmSample, ...]
    shift_cost: typing.Optional[ShiftCost]
