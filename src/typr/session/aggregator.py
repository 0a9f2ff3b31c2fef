# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import typing

import timeflake

from ..util import now, per_minute
from .record import SessionRecord

if typing.TYPE_CHECKING:
    import datetime

    from ..capture.machine import CaptureMachine

logger = logging.getLogger(__name__)


def session_duration_ms(machine: CaptureMachine) -> int:
    # trailing idle time after the last keystroke never counts
    if machine.start_time is None or machine.last_event_time is None:
        return 0
    return machine.last_event_time - machine.start_time


def finalize(
    machine: CaptureMachine,
    owner_id: str,
    session_id: typing.Optional[str] = None,
    created_at: typing.Optional[datetime.datetime] = None,
) -> SessionRecord:
    """Build the immutable record for a finished capture.

    The ledger and event log are copied, so the machine may be reset afterwards without
    touching the record.
    """
    if not machine.is_ended:
        machine.end()
    duration = session_duration_ms(machine)
    record = SessionRecord(
        session_id=session_id if session_id is not None else timeflake.random().base62,
        owner_id=owner_id,
        created_at=created_at if created_at is not None else now(),
        mode=machine.mode,
        mode_value=machine.mode_value,
        target_text=machine.text,
        typed_text=machine.ledger.typed_prefix(machine.max_index_reached),
        char_states=machine.snapshot(),
        events=tuple(machine.events),
        session_duration_ms=duration,
        accuracy_percent=round(machine.accuracy, 2),
        mechanical_cpm=per_minute(machine.total_keystrokes, duration),
        productive_cpm=per_minute(machine.max_index_reached, duration),
        total_keystrokes=machine.total_keystrokes,
        max_index_reached=machine.max_index_reached,
        first_time_error_positions=frozenset(machine.first_time_errors),
    )
    logger.debug(
        "finalized session %s: %dms, %d keystrokes, %.2f%% accuracy",
        record.session_id,
        duration,
        record.total_keystrokes,
        record.accuracy_percent,
    )
    return record
