# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import enum
import logging
import typing

from ..session.record import KeyEvent, SessionMode
from .ledger import Ledger
from .signals import InputSignal, KeyPress
from .wordsource import make_text

if typing.TYPE_CHECKING:
    from collections.abc import Callable

    from .wordsource import WordSource

logger = logging.getLogger(__name__)

DEFAULT_LOOKAHEAD = 50
DEFAULT_EXTENSION_WORDS = 50
DEFAULT_TIME_MODE_WORDS = 200
DEFAULT_CHARS_PER_WORD = 6


class Phase(enum.Enum):
    NOT_STARTED = enum.auto()
    ACTIVE = enum.auto()
    ENDED = enum.auto()


# A capture machine serves exactly one typing test at a time. Every signal is applied
# completely (ledger mutation plus log append) before handle() returns, and nothing in
# here blocks or raises for well-typed input; anything we don't understand is dropped.
class CaptureMachine:
    def __init__(
        self,
        mode: SessionMode,
        mode_value: int,
        word_source: WordSource,
        *,
        lookahead: int = DEFAULT_LOOKAHEAD,
        extension_words: int = DEFAULT_EXTENSION_WORDS,
        time_mode_words: int = DEFAULT_TIME_MODE_WORDS,
        chars_per_word: int = DEFAULT_CHARS_PER_WORD,
        on_refresh: typing.Optional[Callable[[int], None]] = None,
    ):
        self.mode = mode
        self.mode_value = mode_value
        self.word_source = word_source
        self.lookahead = lookahead
        self.extension_words = extension_words
        self.time_mode_words = time_mode_words
        self.chars_per_word = chars_per_word
        self.on_refresh = on_refresh
        if lookahead < 1 or extension_words < 1:
            raise ValueError("lookahead and extension_words must both be at least 1")
        self.reset()

    def reset(self):
        initial_words = self.mode_value if self.mode is SessionMode.WORD_COUNT else self.time_mode_words
        self.ledger = Ledger(make_text(self.word_source, initial_words))
        self.events: list[KeyEvent] = []
        self.phase = Phase.NOT_STARTED
        self.cursor = 0
        self.total_keystrokes = 0
        self.max_index_reached = 0
        self.first_time_errors: set[int] = set()
        self.start_time: typing.Optional[int] = None
        self.last_event_time: typing.Optional[int] = None
        self.revision = 0

    @property
    def text(self):
        return self.ledger.text

    @property
    def is_active(self):
        return self.phase is Phase.ACTIVE

    @property
    def is_ended(self):
        return self.phase is Phase.ENDED

    @property
    def target_chars(self) -> typing.Optional[int]:
        if self.mode is not SessionMode.WORD_COUNT:
            return None
        return min(self.mode_value * self.chars_per_word, len(self.ledger))

    @property
    def accuracy(self) -> float:
        if self.max_index_reached == 0:
            return 100.0
        return 100 * (self.max_index_reached - len(self.first_time_errors)) / self.max_index_reached

    def snapshot(self):
        return self.ledger.snapshot()

    def handle(self, signal: InputSignal) -> bool:
        """Apply one key signal. Returns False if the signal was ignored."""
        if signal.press is KeyPress.PRESSED:
            applied = self._handle_press(signal)
        else:
            applied = self._handle_release(signal)
        if applied:
            self._request_refresh()
        return applied

    def end(self) -> bool:
        if self.phase is Phase.ENDED:
            return False
        logger.debug("ending capture after %d keystrokes (phase was %s)", self.total_keystrokes, self.phase.name)
        self.phase = Phase.ENDED
        self._request_refresh()
        return True

    def _request_refresh(self):
        self.revision += 1
        if self.on_refresh is not None:
            self.on_refresh(self.revision)

    def _handle_press(self, signal: InputSignal) -> bool:
        match self.phase:
            case Phase.ENDED:
                return False
            case Phase.NOT_STARTED:
                # deliberate start: only the first character of the text starts the clock
                if not (signal.is_printable and signal.key == self.ledger.expected_at(0)):
                    return False
                self.phase = Phase.ACTIVE
                self.start_time = signal.timestamp
                logger.debug("capture started at %d", signal.timestamp)

        if signal.is_backspace:
            self._log(signal)
            if self.cursor > 0:
                self.cursor -= 1
                self.total_keystrokes += 1
            return True

        if not signal.is_printable:
            return False

        if self.mode is SessionMode.DURATION:
            self._maybe_extend()
        if self.cursor >= len(self.ledger):
            return False

        self._log(signal)
        self.total_keystrokes += 1
        if self.ledger.record_attempt(self.cursor, signal.key):
            if self.ledger[self.cursor].typed != self.ledger[self.cursor].expected:
                self.first_time_errors.add(self.cursor)
            self.max_index_reached = max(self.max_index_reached, self.cursor + 1)
        self.cursor += 1

        target = self.target_chars
        if target is not None and self.max_index_reached >= target:
            self.end()
        return True

    def _handle_release(self, signal: InputSignal) -> bool:
        if not self.is_active:
            return False
        self._log(signal)
        return True

    def _maybe_extend(self):
        while self.cursor > len(self.ledger) - self.lookahead:
            words = make_text(self.word_source, self.extension_words)
            logger.debug("extending text by %d words at cursor %d", self.extension_words, self.cursor)
            self.ledger.extend(" " + words)

    def _log(self, signal: InputSignal):
        self.events.append(
            KeyEvent(
                kind=signal.press,
                key=signal.key,
                code=signal.code,
                absolute_time=signal.timestamp,
                relative_time=signal.timestamp - self.start_time if self.start_time is not None else 0,
                cursor_position=self.cursor,
                expected_character=self.ledger.expected_at(self.cursor),
            )
        )
        self.last_event_time = signal.timestamp
