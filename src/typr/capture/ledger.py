# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import typing

import msgspec

from ..session.record import CharacterOutcome, OutcomeStatus

if typing.TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


# The ledger is an arena of slots indexed by text position. Slots are mutated in place, and
# the arena only ever grows: extending the text appends slots and never renumbers old ones.
# Copies are made only when somebody asks for a snapshot.
class Ledger:
    def __init__(self, text: str = ""):
        self._text: list[str] = []
        self._slots: list[CharacterOutcome] = []
        self.extend(text)

    def __len__(self):
        return len(self._slots)

    def __getitem__(self, index: int) -> CharacterOutcome:
        return self._slots[index]

    def __iter__(self) -> Iterator[CharacterOutcome]:
        return iter(self._slots)

    @property
    def text(self):
        return "".join(self._text)

    def expected_at(self, index: int) -> str:
        if 0 <= index < len(self._slots):
            return self._slots[index].expected
        return ""

    def extend(self, text: Iterable[str]):
        for ch in text:
            self._text.append(ch)
            self._slots.append(CharacterOutcome(expected=ch))

    def record_attempt(self, index: int, typed: str) -> bool:
        """Store a typed character at a position. Returns True if this was the first attempt there."""
        slot = self._slots[index]
        first_attempt = not slot.attempted
        matches = typed == slot.expected
        slot.typed = typed
        if first_attempt:
            slot.status = OutcomeStatus.CORRECT if matches else OutcomeStatus.INCORRECT
        else:
            slot.status = OutcomeStatus.CORRECTED if matches else OutcomeStatus.INCORRECT
        return first_attempt

    def typed_prefix(self, end: int) -> str:
        return "".join(slot.typed or "" for slot in self._slots[:end])

    def snapshot(self) -> tuple[CharacterOutcome, ...]:
        return tuple(msgspec.structs.replace(slot) for slot in self._slots)
