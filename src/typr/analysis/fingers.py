# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import enum
import typing


@enum.unique
class Finger(enum.Enum):
    LEFT_PINKY = "LP"
    LEFT_RING = "LR"
    LEFT_MIDDLE = "LM"
    LEFT_INDEX = "LI"
    LEFT_THUMB = "LT"
    RIGHT_THUMB = "RT"
    RIGHT_INDEX = "RI"
    RIGHT_MIDDLE = "RM"
    RIGHT_RING = "RR"
    RIGHT_PINKY = "RP"

    @enum.property
    def display_name(self):
        hand, digit = self.name.split("_")
        return f"{hand.title()} {digit.title()}"


# Touch-typing assignment for a US QWERTY layout. Keys are stored lower-cased; shifted
# symbols share a finger with their unshifted key.
FINGER_KEYS = {
    Finger.LEFT_PINKY: ["`", "~", "1", "!", "q", "a", "z", "tab", "capslock"],
    Finger.LEFT_RING: ["2", "@", "w", "s", "x"],
    Finger.LEFT_MIDDLE: ["3", "#", "e", "d", "c"],
    Finger.LEFT_INDEX: ["4", "$", "5", "%", "r", "t", "f", "g", "v", "b"],
    Finger.LEFT_THUMB: [],
    Finger.RIGHT_THUMB: [" "],
    Finger.RIGHT_INDEX: ["6", "^", "7", "&", "y", "u", "h", "j", "n", "m"],
    Finger.RIGHT_MIDDLE: ["8", "*", "i", "k", ",", "<"],
    Finger.RIGHT_RING: ["9", "(", "o", "l", ".", ">"],
    Finger.RIGHT_PINKY: [
        "0",
        ")",
        "-",
        "_",
        "=",
        "+",
        "p",
        "[",
        "{",
        "]",
        "}",
        "\\",
        "|",
        ";",
        ":",
        "'",
        '"',
        "/",
        "?",
        "backspace",
        "enter",
    ],
}

_FINGER_LOOKUP = {key: finger for finger, keys in FINGER_KEYS.items() for key in keys}


def finger_for_key(key: typing.Optional[str]) -> typing.Optional[Finger]:
    if not key:
        return None
    return _FINGER_LOOKUP.get(key.lower())
