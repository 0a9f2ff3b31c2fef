# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import itertools
import logging
import pathlib
import random
import typing

import msgspec

if typing.TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

DEFAULT_WORDS = (
    "the be to of and a in that have it for not on with he as you do at this but his by from they we say her she or an will my "
    "one all would there their what so up out if about who get which go me when make can like time no just him know take people "
    "into year your good some could them see other than then now look only come its over think also back after use two how our "
    "work first well way even new want because any these give day most us is was are been has had were said did made find where "
    "long down call may part number sound water write word through much before line right too mean old same tell boy follow came "
    "show around form three small set put end does another large must big turn here why ask went men read need land different "
    "home move try kind hand picture again change off play spell air away animal house point page letter mother answer found study "
    "still learn should world high every near add food between own below country plant last school father keep tree never start "
    "city earth eye light thought head under story saw left few while along might close something seem next hard open example begin "
    "life always those both paper together got group often run important until children side feet car mile night walk white sea "
    "began grow took river four carry state once book hear stop without second later miss idea enough eat face watch far really "
    "almost let above girl sometimes mountain cut young talk soon list song being leave family"
).split()


class WordSource(typing.Protocol):
    def words(self, count: int) -> Sequence[str]: ...


class RandomWords:
    """Draws words uniformly at random, with replacement, from a fixed vocabulary."""

    def __init__(self, vocabulary: Sequence[str] = DEFAULT_WORDS, rng: typing.Optional[random.Random] = None):
        if not vocabulary:
            raise ValueError("A word source needs at least one word")
        self.vocabulary = tuple(vocabulary)
        self.rng = rng if rng is not None else random.Random()

    def words(self, count: int) -> list[str]:
        return [self.rng.choice(self.vocabulary) for _ in range(count)]

    @classmethod
    def from_custom_list(cls, path: typing.Optional[pathlib.Path], rng: typing.Optional[random.Random] = None):
        "Use a JSON array of words from path if it is usable, otherwise the built-in vocabulary."
        if path is None:
            return cls(rng=rng)
        try:
            custom = msgspec.json.decode(path.read_bytes(), type=list[str])
        except (OSError, msgspec.DecodeError, msgspec.ValidationError) as exc:
            logger.warning("Could not load custom words from %s (%s); using the default list", path, exc)
            return cls(rng=rng)
        custom = [word for word in custom if word]
        if not custom:
            logger.warning("Custom word list %s is empty; using the default list", path)
            return cls(rng=rng)
        return cls(custom, rng=rng)


def make_text(source: WordSource, count: int) -> str:
    return " ".join(source.words(count))


class FixedWords:
    """Hands out a fixed sequence of words in order, starting over when it runs out."""

    def __init__(self, words: Sequence[str]):
        if not words:
            raise ValueError("A word source needs at least one word")
        self._words = itertools.cycle(words)

    def words(self, count: int) -> list[str]:
        return list(itertools.islice(self._words, count))

    @classmethod
    def from_text(cls, text: str):
        return cls(text.split())
