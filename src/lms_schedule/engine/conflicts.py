"""
Double-booking detection for teachers and translators.

A person is double-booked when they already teach or translate another
class on the same date in an overlapping hour. BOTH overlaps everything on
its date, in either direction.

Vacant roles (None / 0) are never checked. Unscheduled slots (date None)
are not bookings and never conflict.
"""

from __future__ import annotations

import datetime as dt
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple, Union

from lms_schedule.engine.result import (ConflictResult, ConflictingSlot,
    DoubleBooking, SlotCheck)
from lms_schedule.log import get_logger
from lms_schedule.models import (ClassSlot, DateLike, Roster, SlotContext,
    TimeSlot, coerce_date, is_vacant)

log = get_logger(__name__)

SlotSource = Union[Roster, Iterable[ClassSlot], Iterable[SlotContext]]


def _contexts(all_slots: SlotSource) -> Iterable[SlotContext]:
    if isinstance(all_slots, Roster):
        return all_slots.iter_slots()
    return (
        s if isinstance(s, SlotContext) else SlotContext(slot=s)
        for s in all_slots
    )


def check_conflict(
    person_id: Optional[int],
    date: DateLike,
    time_slot: TimeSlot,
    all_slots: SlotSource,
    exclude_slot_id: Optional[int] = None,
) -> ConflictResult:
    """Every existing slot that books person_id at an overlapping time."""
    result = ConflictResult(person_id=person_id)
    when   = coerce_date(date)
    if is_vacant(person_id) or when is None:
        return result

    wanted = TimeSlot(time_slot)
    for ctx in _contexts(all_slots):
        slot = ctx.slot
        if exclude_slot_id is not None and slot.id == exclude_slot_id:
            continue
        if coerce_date(slot.date) != when:
            continue
        role = slot.role_of(person_id)
        if role is None:
            continue
        if wanted.overlaps(slot.time_slot):
            result.conflicting_slots.append(ConflictingSlot(
                slot          = slot,
                role          = role,
                course_name   = ctx.course_name,
                subject_title = ctx.subject_title,
            ))

    if result.has_conflict:
        log.debug(
            "conflict_found",
            person_id=person_id,
            date=when.isoformat(),
            time_slot=wanted.value,
            slot_ids=[c.slot.id for c in result.conflicting_slots],
        )
    return result


def check_slot(slot: ClassSlot, all_slots: SlotSource) -> SlotCheck:
    """Check teacher and translator of a created/edited slot separately."""
    contexts = list(_contexts(all_slots))
    return SlotCheck(
        slot       = slot,
        teacher    = check_conflict(slot.teacher_id, slot.date, slot.time_slot,
                                    contexts, exclude_slot_id=slot.id),
        translator = check_conflict(slot.translator_id, slot.date, slot.time_slot,
                                    contexts, exclude_slot_id=slot.id),
    )


def _as_conflicting(ctx: SlotContext, person_id: int) -> ConflictingSlot:
    return ConflictingSlot(
        slot          = ctx.slot,
        role          = ctx.slot.role_of(person_id) or "",
        course_name   = ctx.course_name,
        subject_title = ctx.subject_title,
    )


def find_double_bookings(all_slots: SlotSource) -> List[DoubleBooking]:
    """Every pair of slots that books the same person at an overlapping time."""
    by_key: Dict[Tuple[int, dt.date], List[SlotContext]] = defaultdict(list)
    for ctx in _contexts(all_slots):
        when = coerce_date(ctx.slot.date)
        if when is None:
            continue
        for pid in set(ctx.slot.people()):
            by_key[(pid, when)].append(ctx)

    found: List[DoubleBooking] = []
    for (pid, _), group in sorted(by_key.items(), key=lambda kv: (kv[0][1], kv[0][0])):
        for i, a in enumerate(group):
            for b in group[i + 1:]:
                if TimeSlot(a.slot.time_slot).overlaps(b.slot.time_slot):
                    found.append(DoubleBooking(
                        person_id = pid,
                        first     = _as_conflicting(a, pid),
                        second    = _as_conflicting(b, pid),
                    ))
    return found
