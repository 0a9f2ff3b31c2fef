# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import typing

from ..capture.signals import BACKSPACE
from ..session.record import OutcomeStatus
from ..util import mean
from .fingers import finger_for_key
from .types import DigraphLatency, RhythmSample, ShiftCost

if typing.TYPE_CHECKING:
    from collections.abc import Sequence

    from ..session.record import CharacterOutcome, KeyEvent


def _in_ledger(event: KeyEvent, char_states: typing.Optional[Sequence[CharacterOutcome]]) -> bool:
    if char_states is None or event.cursor_position is None:
        return False
    return 0 <= event.cursor_position < len(char_states)


def digraph_latency(events: Sequence[KeyEvent], char_states: typing.Optional[Sequence[CharacterOutcome]]) -> list[DigraphLatency]:
    """Mean release-to-press latency for each consecutive pair of target characters, slowest first.

    Pairs are named by the characters the text asked for, not what was typed. A backspace
    breaks the chain, so the press after it never forms a pair with the press before it.
    """
    samples: dict[tuple[str, str], list[int]] = {}
    last_release_time: typing.Optional[int] = None
    last_char: typing.Optional[str] = None

    for event in events:
        if event.is_release:
            if len(event.key) == 1:
                last_release_time = event.absolute_time
            continue
        if event.key == BACKSPACE:
            last_char = None
            continue
        current = event.expected_character
        if not (len(event.key) == 1 and len(current) == 1 and _in_ledger(event, char_states)):
            continue
        if last_char is not None and last_release_time is not None:
            samples.setdefault((last_char, current), []).append(event.absolute_time - last_release_time)
        last_char = current

    results = []
    for (first, second), times in samples.items():
        from_finger = finger_for_key(first)
        to_finger = finger_for_key(second)
        results.append(
            DigraphLatency(
                first=first,
                second=second,
                mean_latency=mean(times),
                count=len(times),
                from_finger=from_finger,
                to_finger=to_finger,
                same_finger=from_finger is not None and from_finger == to_finger,
            )
        )
    # sorted() is stable, so equally slow pairs keep their first-seen order
    return sorted(results, key=lambda d: d.mean_latency, reverse=True)


def rhythm_series(events: Sequence[KeyEvent], char_states: typing.Optional[Sequence[CharacterOutcome]]) -> list[RhythmSample]:
    """Press-to-press intervals between keystrokes that landed correctly on the first try."""
    if char_states is None:
        return []
    samples = []
    first_time: typing.Optional[int] = None
    last_time: typing.Optional[int] = None
    for event in events:
        if not event.is_press or len(event.key) != 1 or not _in_ledger(event, char_states):
            continue
        if char_states[event.cursor_position].status is not OutcomeStatus.CORRECT:
            continue
        if first_time is None:
            first_time = event.absolute_time
        if last_time is not None:
            samples.append(
                RhythmSample(
                    session_time=event.absolute_time - first_time,
                    interval=event.absolute_time - last_time,
                    char=event.expected_character,
                )
            )
        last_time = event.absolute_time
    return samples


def _cased_letter(key: str) -> bool:
    return len(key) == 1 and key.isalpha() and key.upper() != key.lower()


def shift_cost(events: Sequence[KeyEvent]) -> typing.Optional[ShiftCost]:
    """How much longer it takes to reach an uppercase letter than a lowercase one."""
    upper: list[int] = []
    lower: list[int] = []
    last_time: typing.Optional[int] = None
    for event in events:
        if not event.is_press or not _cased_letter(event.key):
            continue
        if last_time is not None:
            interval = event.absolute_time - last_time
            if event.key.isupper():
                upper.append(interval)
            else:
                lower.append(interval)
        last_time = event.absolute_time

    if not upper and not lower:
        return None
    avg_upper = mean(upper) if upper else 0
    avg_lower = mean(lower) if lower else 0
    penalty = avg_upper - avg_lower
    return ShiftCost(
        avg_uppercase=avg_upper,
        avg_lowercase=avg_lower,
        penalty=penalty,
        percent_slower=(penalty / avg_lower * 100) if avg_lower > 0 else 0,
        uppercase_count=len(upper),
        lowercase_count=len(lower),
    )
