# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Reconcile an offering's persisted schedules with an edited list.

The client sends back the full schedule list: rows it kept carry their
id, new rows carry none. Persisted rows whose id is missing from the list
were removed.
"""

from collections.abc import Iterable, Sequence
from typing import NamedTuple

from src.core.errors import ValidationFailedError
from src.models.offering import ScheduleInput


class ScheduleDiff(NamedTuple):
    """Planned schedule writes.

    Attributes:
        to_insert: Incoming rows without an id.
        to_update: Incoming rows whose id is persisted.
        to_delete: Persisted ids absent from the incoming list.
    """

    to_insert: list[ScheduleInput]
    to_update: list[ScheduleInput]
    to_delete: list[str]


class UnknownScheduleError(ValidationFailedError):
    """Raised when an incoming schedule id does not belong to the offering."""


def diff_schedules(
    persisted_ids: Iterable[str],
    incoming: Sequence[ScheduleInput],
) -> ScheduleDiff:
    """Split an incoming schedule list into inserts, updates and deletes.

    Applying the result leaves exactly the incoming rows persisted.

    Args:
        persisted_ids: Ids of the offering's current schedules.
        incoming: Edited schedule list.

    Returns:
        The planned writes; deletes keep the persisted order.

    Raises:
        UnknownScheduleError: If an incoming id is not persisted or repeats.
    """
    persisted = list(persisted_ids)
    known = set(persisted)
    seen: set[str] = set()

    to_insert: list[ScheduleInput] = []
    to_update: list[ScheduleInput] = []
    for item in incoming:
        if item.id is None:
            to_insert.append(item)
            continue
        if item.id not in known:
            raise UnknownScheduleError(f"Schedule {item.id} does not belong to this offering")
        if item.id in seen:
            raise UnknownScheduleError(f"Schedule {item.id} appears more than once")
        seen.add(item.id)
        to_update.append(item)

    to_delete = [schedule_id for schedule_id in persisted if schedule_id not in seen]
    return ScheduleDiff(to_insert, to_update, to_delete)
