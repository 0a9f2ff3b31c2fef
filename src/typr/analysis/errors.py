# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections
import typing

from ..session.record import OutcomeStatus
from .types import ConfusionEntry, TypedCount

if typing.TYPE_CHECKING:
    from collections.abc import Sequence

    from ..session.record import CharacterOutcome


def confusion_matrix(char_states: typing.Optional[Sequence[CharacterOutcome]]) -> typing.Optional[tuple[ConfusionEntry, ...]]:
    """Which characters got typed in place of which, for positions still wrong at the end.

    Returns None when there is no ledger or nothing was left incorrect.
    """
    if char_states is None:
        return None
    confusions: dict[str, collections.Counter[str]] = {}
    for outcome in char_states:
        if outcome.status is not OutcomeStatus.INCORRECT:
            continue
        if outcome.expected and outcome.typed and outcome.expected != outcome.typed:
            confusions.setdefault(outcome.expected, collections.Counter())[outcome.typed] += 1

    entries = []
    for expected, counts in confusions.items():
        # Counter.most_common keeps insertion order among equal counts
        actual_chars = tuple(TypedCount(actual=actual, count=count) for actual, count in counts.most_common())
        entries.append(ConfusionEntry(expected=expected, actual_chars=actual_chars, total_errors=counts.total()))
    if not entries:
        return None
    return tuple(sorted(entries, key=lambda e: e.total_errors, reverse=True))
