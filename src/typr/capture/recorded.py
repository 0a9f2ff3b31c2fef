# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections.abc
import pathlib

import msgspec
from trio.lowlevel import checkpoint

from .signals import InputSignal


class Recording(msgspec.Struct, frozen=True, kw_only=True):
    text: str
    signals: list[InputSignal]


_recording_decoder = msgspec.json.Decoder(type=Recording)


class Recorder:
    """Passes signals through unchanged while keeping a copy, so a session can be replayed later."""

    def __init__(self, wrapped: collections.abc.AsyncIterable[InputSignal]):
        self.wrapped = wrapped
        self.signals: list[InputSignal] = []

    def save_signals(self, path: pathlib.Path, text: str):
        with path.open("wb") as outfile:
            outfile.write(msgspec.json.encode(Recording(text=text, signals=self.signals)))

    async def signalstream(self) -> collections.abc.AsyncIterator[InputSignal]:
        async for signal in self.wrapped:
            self.signals.append(signal)
            yield signal


def load_recording(path: pathlib.Path) -> Recording:
    return _recording_decoder.decode(path.read_bytes())


async def replay(signals: collections.abc.Iterable[InputSignal]) -> collections.abc.AsyncIterator[InputSignal]:
    for signal in signals:
        await checkpoint()
        yield signal
