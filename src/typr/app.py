# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import datetime
import functools
import logging
import pathlib
import typing

import outcome
import trio
import trio_util

from .capture.keystreams import make_signalstream
from .capture.machine import CaptureMachine, Phase
from .capture.wordsource import RandomWords
from .durations import timer_display
from .session.aggregator import finalize
from .session.export import export_record
from .session.record import SessionMode
from .util import Future

if typing.TYPE_CHECKING:
    from collections.abc import AsyncIterable

    from .capture.signals import InputSignal
    from .capture.wordsource import WordSource
    from .db import SessionStore
    from .session.record import SessionRecord
    from .settings import Settings

logger = logging.getLogger(__name__)

Handoff = typing.Callable[["SessionRecord"], typing.Any]


class TypingTest:
    """Runs one typing test at a time: feeds key signals into a capture machine, ends the test
    when its timer runs out or it is told to, and hands the finished record to the store.

    The store is called from a worker thread after capture has stopped, so a slow or broken
    store never delays a keystroke. Whatever happens to the handoff, the record itself is kept
    on `last_record`.
    """

    machine: CaptureMachine
    phase: trio_util.AsyncValue[Phase]
    revision: trio_util.AsyncValue[int]
    last_record: typing.Optional[SessionRecord]
    handoffs: list[Future[SessionRecord]]

    def __init__(
        self,
        settings: Settings,
        word_source: typing.Optional[WordSource] = None,
        handoff: typing.Optional[Handoff] = None,
    ):
        self.settings = settings
        if word_source is None:
            word_source = RandomWords.from_custom_list(settings.custom_words_path)
        self.handoff = handoff
        self.phase = trio_util.AsyncValue(Phase.NOT_STARTED)
        self.revision = trio_util.AsyncValue(0)
        self.machine = CaptureMachine(
            settings.mode,
            settings.mode_value,
            word_source,
            lookahead=settings.lookahead,
            extension_words=settings.extension_words,
            time_mode_words=settings.time_mode_initial_words,
            chars_per_word=settings.chars_per_word,
            on_refresh=self._on_refresh,
        )
        self.last_record = None
        self.handoffs = []
        self._deadline: typing.Optional[float] = None
        self._end_requested = trio.Event()

    @property
    def time_limit(self) -> typing.Optional[datetime.timedelta]:
        if self.settings.mode is SessionMode.DURATION:
            return self.settings.time_limit
        return None

    def remaining(self) -> typing.Optional[datetime.timedelta]:
        "Time left on the clock, or None in word-count mode. Only call from inside trio."
        if self.time_limit is None:
            return None
        if self._deadline is None:
            return self.time_limit
        return datetime.timedelta(seconds=max(0.0, self._deadline - trio.current_time()))

    def timer_text(self) -> str:
        remaining = self.remaining()
        return timer_display(remaining) if remaining is not None else ""

    def _on_refresh(self, revision: int):
        # the machine calls this synchronously; it only publishes values, it never waits
        self.phase.value = self.machine.phase
        self.revision.value = revision

    def request_end(self):
        self._end_requested.set()

    def reset(self):
        self.machine.reset()
        self._end_requested = trio.Event()
        self._deadline = None
        self.phase.value = self.machine.phase
        self.revision.value = self.machine.revision

    async def _timer(self, cancel_scope: trio.CancelScope):
        await self.phase.wait_value(Phase.ACTIVE)
        self._deadline = trio.current_time() + self.time_limit.total_seconds()
        await trio.sleep_until(self._deadline)
        logger.debug("time limit of %s reached", self.time_limit)
        self.machine.end()
        cancel_scope.cancel()

    async def _end_watcher(self, cancel_scope: trio.CancelScope):
        await self._end_requested.wait()
        self.machine.end()
        cancel_scope.cancel()

    async def _completion_watcher(self, cancel_scope: trio.CancelScope):
        await self.phase.wait_value(Phase.ENDED)
        cancel_scope.cancel()

    async def capture(self, signal_channel: AsyncIterable[InputSignal]) -> SessionRecord:
        """Capture until the session ends, then finalize it. Does not wait for the handoff."""
        with trio.CancelScope() as capture_scope:
            async with trio.open_nursery() as nursery:
                if self.time_limit is not None:
                    nursery.start_soon(self._timer, capture_scope)
                nursery.start_soon(self._end_watcher, capture_scope)
                nursery.start_soon(self._completion_watcher, capture_scope)
                async with make_signalstream(signal_channel, self.machine) as signalstream:
                    async for _signal in signalstream:
                        pass
                # input ran dry before the test ended; treat it like an explicit end
                self.machine.end()
                capture_scope.cancel()
        self.last_record = finalize(self.machine, owner_id=self.settings.owner_id)
        return self.last_record

    async def run(
        self, signal_channel: AsyncIterable[InputSignal], nursery: typing.Optional[trio.Nursery] = None
    ) -> tuple[SessionRecord, Future[SessionRecord]]:
        """Capture a whole session and hand the record off.

        With a nursery, the handoff runs in the background and the returned future reports how
        it went; without one, the handoff has finished by the time this returns.
        """
        record = await self.capture(signal_channel)
        future: Future[SessionRecord] = Future()
        self.handoffs.append(future)
        if self.handoff is None:
            future.finalize(record)
        elif nursery is not None:
            nursery.start_soon(self._hand_off, record, future)
        else:
            await self._hand_off(record, future)
        return record, future

    async def _hand_off(self, record: SessionRecord, future: Future[SessionRecord]):
        result = await outcome.acapture(trio.to_thread.run_sync, functools.partial(self.handoff, record))
        if isinstance(result, outcome.Error):
            logger.warning("could not hand off session %s: %r", record.session_id, result.error)
            future.finalize(result)
        else:
            future.finalize(record)


def store_and_export(store: typing.Optional[SessionStore], export_path: typing.Optional[pathlib.Path]) -> Handoff:
    """Build a handoff that writes the export file first, then stores the record.

    Both sides get the same encoded record, so an export can always be fed back to the analyzer.
    """

    def handoff(record: SessionRecord):
        if export_path is not None:
            export_record(record, export_path)
        if store is not None:
            store.create(record)
        return record

    return handoff
