# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import abc
from contextlib import aclosing, asynccontextmanager
from typing import TYPE_CHECKING, Any, AsyncIterable, cast

import msgspec
import trio

from .signals import InputSignal, KeyPress, ModifierAnnotation

if TYPE_CHECKING:
    from .machine import CaptureMachine


class Section(abc.ABC):
    @abc.abstractmethod
    async def pump(self, source: trio.MemoryReceiveChannel[Any], sink: trio.MemorySendChannel[Any]): ...


# stage 1: track modifier keydown/up and annotate the signal stream with current modifiers.
# Sources that already report modifier flags keep them; we only add what we've seen held.
class ModifierTracking(Section):
    MODIFIER_KEYS = {
        "Alt": "alt",
        "Control": "ctrl",
        "Meta": "meta",
        "Shift": "shift",
    }

    def __init__(self):
        self.momentary_state = {name: False for name in self.MODIFIER_KEYS.values()}

    def _make_annotation(self, reported: ModifierAnnotation):
        return ModifierAnnotation(
            alt=self.momentary_state["alt"] or reported.alt,
            ctrl=self.momentary_state["ctrl"] or reported.ctrl,
            meta=self.momentary_state["meta"] or reported.meta,
            shift=self.momentary_state["shift"] or reported.shift,
        )

    async def pump(self, source: trio.MemoryReceiveChannel[InputSignal], sink: trio.MemorySendChannel[InputSignal]):
        async with aclosing(source), aclosing(sink):
            async for signal in source:
                modifier = self.MODIFIER_KEYS.get(signal.key)
                if modifier is not None:
                    self.momentary_state[modifier] = signal.press is KeyPress.PRESSED
                await sink.send(msgspec.structs.replace(signal, modifiers=self._make_annotation(signal.modifiers)))


# stage 2: apply each signal to the capture machine, passing along only the ones it accepted.
# The machine has already finished with a signal by the time anybody downstream sees it.
class Capture(Section):
    def __init__(self, machine: "CaptureMachine"):
        self.machine = machine

    async def pump(self, source: trio.MemoryReceiveChannel[InputSignal], sink: trio.MemorySendChannel[InputSignal]):
        async with aclosing(source), aclosing(sink):
            async for signal in source:
                if self.machine.handle(signal):
                    await sink.send(signal)


@asynccontextmanager
async def pump_all(first_source: AsyncIterable[Any], *sections: Section):
    async with trio.open_nursery() as nursery:
        section_input = first_source
        for section in sections:
            section_send_channel, section_receive_channel = trio.open_memory_channel(0)
            nursery.start_soon(section.pump, section_input, section_send_channel)
            section_input = section_receive_channel
        yield section_input
        nursery.cancel_scope.cancel()


@asynccontextmanager
async def make_signalstream(signal_channel: AsyncIterable[InputSignal], machine: "CaptureMachine"):
    sections = [
        ModifierTracking(),
        Capture(machine),
    ]

    async with pump_all(signal_channel, *sections) as signalstream:
        yield cast(trio.MemoryReceiveChannel[InputSignal], signalstream)
