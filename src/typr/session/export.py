# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import logging
import pathlib

from ..util import epoch_millis, now
from .record import SessionRecord, decode_record, encode_record

logger = logging.getLogger(__name__)


def export_filename(record: SessionRecord) -> str:
    created_at = record.created_at if record.created_at is not None else now()
    return f"typing-session-{epoch_millis(created_at)}.json"


def export_record(record: SessionRecord, export_path: pathlib.Path) -> pathlib.Path:
    export_path.mkdir(parents=True, exist_ok=True)
    export_file = export_path / export_filename(record)
    with export_file.open(mode="wb") as out:
        out.write(encode_record(record, indent=2))
    logger.debug("exported session %s to %s", record.session_id, export_file)
    return export_file


def load_record(path: pathlib.Path) -> SessionRecord:
    return decode_record(path.read_bytes())
