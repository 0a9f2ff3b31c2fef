# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
class TyprError(Exception):
    pass


class InvalidSessionRecord(TyprError):
    """The record cannot be analyzed; usually the events array is missing or malformed."""

    pass


class StoreError(TyprError):
    pass


class UnknownOwner(StoreError):
    def __init__(self, owner_id: str):
        super().__init__(f"No owner with id {owner_id!r}")
        self.owner_id = owner_id


class SessionNotFound(StoreError):
    def __init__(self, session_id: str):
        super().__init__(f"No session with id {session_id!r}")
        self.session_id = session_id
