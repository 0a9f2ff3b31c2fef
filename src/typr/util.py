from __future__ import annotations

import datetime
import typing

import outcome
import trio
from dateutil.tz import tzlocal

V = typing.TypeVar("V")


def now():
    return datetime.datetime.now(tzlocal())


def epoch_millis(when: datetime.datetime) -> int:
    return int(when.timestamp() * 1000)


def mean(values: typing.Sequence[float]) -> float:
    return sum(values) / len(values)


def per_minute(count: float, duration_ms: int) -> float:
    "Rate per minute over a millisecond duration, rounded to two places; zero for an empty duration."
    minutes = duration_ms / 60000
    if minutes <= 0:
        return 0
    return round(count / minutes, 2)


class Future(typing.Generic[V]):
    _outcome: typing.Optional[outcome.Outcome]

    def __init__(self):
        self._event = trio.Event()
        self._outcome = None

    def finalize(self, result: V | outcome.Outcome[V]):
        if self._outcome is not None:
            raise Exception("already finalized")
        if isinstance(result, outcome.Outcome):
            self._outcome = result
        else:
            self._outcome = outcome.Value(result)
        self._event.set()

    async def wait(self) -> V:
        await self._event.wait()
        return self._outcome.unwrap()

    @property
    def is_final(self):
        return self._event.is_set()

    @property
    def succeeded(self):
        return self.is_final and isinstance(self._outcome, outcome.Value)
