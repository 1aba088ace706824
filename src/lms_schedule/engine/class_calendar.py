"""
Calendar generator: lays a subject's classes onto Tuesdays and Thursdays.

Classes are taken two per teaching day (first hour, then second hour) and
the teaching days alternate between "day A" and "day B" of each week:

  index:   0  1 | 2  3 | 4  5 | 6  7 ...
  day:     A0   | B0   | A1   | B1   ...   (A1 = A0 + 7 days)

Which weekday is day A depends on the start date:

  start weekday    day A              day B
  Tuesday          start              A + 2  (Thursday)
  Thursday         start              A + 5  (next Tuesday)
  Sun / Mon        next Tuesday       A + 2
  Wednesday        next Thursday      A + 5
  Fri / Sat        next Tuesday       A + 2

A missing or unparseable start date is not an error: every class comes back
with date None and the caller shows it as unscheduled.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Optional, Tuple

from lms_schedule.engine.result import GeneratedClass
from lms_schedule.log import get_logger
from lms_schedule.models import (ClassSlot, DateLike, TimeSlot, coerce_date,
    is_vacant)

log = get_logger(__name__)

TUESDAY  = 1
THURSDAY = 3


def anchor_days(start: dt.date) -> Tuple[dt.date, int]:
    """Return (day A, offset in days from day A to day B)."""
    wd = start.weekday()
    if wd == TUESDAY:
        return start, 2
    if wd == THURSDAY:
        return start, 5
    if wd == 2:  # Wednesday -> Thursday
        return start + dt.timedelta(days=1), 5
    # Fri/Sat/Sun/Mon -> the following Tuesday
    return start + dt.timedelta(days=(TUESDAY - wd) % 7), 2


def slot_for_index(index: int) -> TimeSlot:
    return TimeSlot.FIRST if index % 2 == 0 else TimeSlot.SECOND


def generate_class_dates(start_date: DateLike, class_count: int) -> List[GeneratedClass]:
    """Deterministic (date, time_slot) placement for class_count classes."""
    start = coerce_date(start_date)
    count = max(int(class_count or 0), 0)

    if start is None:
        if start_date not in (None, ""):
            log.warning("invalid_start_date", start_date=str(start_date))
        return [GeneratedClass(date=None, time_slot=slot_for_index(i)) for i in range(count)]

    day_a, b_offset = anchor_days(start)
    out: List[GeneratedClass] = []
    for i in range(count):
        day_index  = i // 2
        week_index = day_index // 2
        offset     = week_index * 7 + (b_offset if day_index % 2 else 0)
        out.append(GeneratedClass(
            date      = day_a + dt.timedelta(days=offset),
            time_slot = slot_for_index(i),
        ))
    log.debug("class_dates_generated", start=start.isoformat(), count=count)
    return out


def seed_subject_classes(
    title: str,
    start_date: DateLike,
    class_count: int,
    primary_teacher_id: Optional[int] = None,
    first_id: int = 1,
) -> List[ClassSlot]:
    """Pre-create a subject's classes: primary teacher on all, translator vacant."""
    teacher = None if is_vacant(primary_teacher_id) else primary_teacher_id
    return [
        ClassSlot(
            id            = first_id + i,
            date          = g.date,
            time_slot     = g.time_slot,
            teacher_id    = teacher,
            translator_id = None,
            title         = f"{title} - Class {i + 1}",
        )
        for i, g in enumerate(generate_class_dates(start_date, class_count))
    ]
