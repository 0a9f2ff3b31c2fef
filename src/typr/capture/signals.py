# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import enum
import typing

import msgspec

BACKSPACE = "Backspace"


class KeyPress(enum.Enum):
    PRESSED = "keydown"
    RELEASED = "keyup"


class ModifierAnnotation(msgspec.Struct, frozen=True):
    alt: bool = False
    ctrl: bool = False
    meta: bool = False
    shift: bool = False

    @property
    def blocking(self):
        # shift only changes which character arrives; the others turn a keypress into a shortcut
        return self.alt or self.ctrl or self.meta


class InputSignal(msgspec.Struct, frozen=True, kw_only=True):
    key: str
    press: KeyPress
    timestamp: int
    modifiers: ModifierAnnotation = ModifierAnnotation()
    code: typing.Optional[str] = None

    @classmethod
    def pressed(cls, key: str, timestamp: int, **kwargs):
        return cls(key=key, press=KeyPress.PRESSED, timestamp=timestamp, **kwargs)

    @classmethod
    def released(cls, key: str, timestamp: int, **kwargs):
        return cls(key=key, press=KeyPress.RELEASED, timestamp=timestamp, **kwargs)

    @property
    def is_backspace(self):
        return self.key == BACKSPACE

    @property
    def is_printable(self):
        return len(self.key) == 1 and self.key.isprintable() and not self.modifiers.blocking
