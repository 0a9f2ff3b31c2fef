# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import typing

from ..util import per_minute
from .types import SessionSummary

if typing.TYPE_CHECKING:
    from ..session.record import SessionRecord

CHARS_PER_WORD = 5


def summarize(record: SessionRecord) -> SessionSummary:
    if record.mechanical_cpm is not None and record.productive_cpm is not None:
        return SessionSummary(
            session_duration=record.session_duration_ms,
            accuracy=record.accuracy_percent if record.accuracy_percent is not None else 100.0,
            mechanical_cpm=record.mechanical_cpm,
            productive_cpm=record.productive_cpm,
            total_keystrokes=record.total_keystrokes,
            max_index_reached=record.max_index_reached,
            first_time_error_count=len(record.first_time_error_positions),
        )
    return _legacy_summary(record)


def _legacy_summary(record: SessionRecord) -> SessionSummary:
    # Older exports only carried the text, what was typed, and where errors happened.
    typed = record.typed_text
    target = record.target_text
    errors = record.error_positions or frozenset()
    effective = record.productive_keystrokes if record.productive_keystrokes is not None else len(typed)
    correct = sum(1 for i in range(min(len(typed), len(target))) if typed[i] == target[i] and i not in errors)
    accuracy = round(correct / len(typed) * 100, 2) if typed else 100.0
    duration = record.session_duration_ms
    return SessionSummary(
        session_duration=duration,
        accuracy=accuracy,
        total_keystrokes=record.total_keystrokes,
        max_index_reached=record.max_index_reached,
        first_time_error_count=len(record.first_time_error_positions),
        cpm=per_minute(effective, duration),
        wpm=per_minute(effective / CHARS_PER_WORD, duration),
    )
