# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections
import typing

from ..util import mean
from .fingers import Finger, finger_for_key

if typing.TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from ..session.record import KeyEvent


def _means(samples: Mapping[str, list[int]]) -> dict[str, float]:
    return {key: mean(times) for key, times in samples.items()}


def dwell_by_key(events: Sequence[KeyEvent]) -> dict[str, float]:
    """Mean time each key was held down.

    Each key has at most one outstanding press; a second press before the release replaces
    it, and a release with nothing outstanding is ignored.
    """
    samples: dict[str, list[int]] = collections.defaultdict(list)
    pending: dict[str, int] = {}
    for event in events:
        if event.is_press:
            pending[event.key] = event.absolute_time
        elif event.key in pending:
            samples[event.key].append(event.absolute_time - pending.pop(event.key))
    return _means(samples)


def flight_by_key(events: Sequence[KeyEvent]) -> dict[str, float]:
    "Mean time from the most recent release of any key to a press, attributed to the pressed key."
    samples: dict[str, list[int]] = collections.defaultdict(list)
    last_release_time: typing.Optional[int] = None
    for event in events:
        if event.is_press:
            if last_release_time is not None:
                samples[event.key].append(event.absolute_time - last_release_time)
        else:
            last_release_time = event.absolute_time
    return _means(samples)


def by_finger(per_key: Mapping[str, float]) -> dict[Finger, float]:
    # this is the mean of the per-key means, so rarely-used keys count as much as common ones
    grouped: dict[Finger, list[float]] = collections.defaultdict(list)
    for key, value in per_key.items():
        finger = finger_for_key(key)
        if finger is not None:
            grouped[finger].append(value)
    return {finger: mean(values) for finger, values in grouped.items()}


def dwell_by_finger(events: Sequence[KeyEvent]) -> dict[Finger, float]:
    return by_finger(dwell_by_key(events))


def flight_by_finger(events: Sequence[KeyEvent]) -> dict[Finger, float]:
    return by_finger(flight_by_key(events))
