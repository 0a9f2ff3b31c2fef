# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import collections.abc
import logging
import typing

from ..commontypes import InvalidSessionRecord
from ..session.record import SessionRecord, as_record
from .errors import confusion_matrix
from .sequences import digraph_latency, rhythm_series, shift_cost
from .summary import summarize
from .timing import by_finger, dwell_by_key, flight_by_key
from .types import AnalysisReport

logger = logging.getLogger(__name__)


def validated(record: SessionRecord | bytes | str | collections.abc.Mapping[str, typing.Any]) -> SessionRecord:
    record = as_record(record)
    if not isinstance(record.events, collections.abc.Sequence):
        raise InvalidSessionRecord("Invalid session data format: missing or invalid events array")
    return record


def analyze(record: SessionRecord | bytes | str | collections.abc.Mapping[str, typing.Any]) -> AnalysisReport:
    """Compute every analysis view for one finished session.

    Nothing is cached and the record is never modified, so the same record always produces
    the same report.
    """
    record = validated(record)
    events = record.events
    char_states = record.char_states
    if char_states is None:
        logger.debug("session %s has no character ledger; ledger-based views will be empty", record.session_id)

    dwell = dwell_by_key(events)
    flight = flight_by_key(events)
    return AnalysisReport(
        summary=summarize(record),
        dwell_by_key=dwell,
        dwell_by_finger=by_finger(dwell),
        flight_by_key=flight,
        flight_by_finger=by_finger(flight),
        digraphs=tuple(digraph_latency(events, char_states)),
        confusion=confusion_matrix(char_states),
        rhythm=tuple(rhythm_series(events, char_states)),
        shift_cost=shift_cost(events),
    )
