"""
Single import point for callers of the scheduling engine: calendar
generation, double-booking checks, cadence classification and the
read-only timetable and mentorship views built on them.
"""

from __future__ import annotations

from typing import Optional

from lms_schedule.engine.cadence import classify
from lms_schedule.engine.class_calendar import (generate_class_dates,
    seed_subject_classes)
from lms_schedule.engine.conflicts import (check_conflict, check_slot,
    find_double_bookings)
from lms_schedule.engine.dashboard import (PairStatus, cadence_alerts,
    mentorship_pairs, mentorship_stats, students_without_mentor)
from lms_schedule.engine.timetable import (PersonClass, classes_for_person,
    daily_grid, split_upcoming)
from lms_schedule.log import get_logger
from lms_schedule.models import DateLike, Roster, Subject, coerce_date, is_vacant

log = get_logger(__name__)

__all__ = [
    "add_subject", "generate_class_dates",
    "check_conflict", "check_slot", "find_double_bookings",
    "classify",
    "PairStatus", "mentorship_pairs", "cadence_alerts",
    "students_without_mentor", "mentorship_stats",
    "PersonClass", "classes_for_person", "split_upcoming", "daily_grid",
]


def add_subject(
    roster: Roster,
    course_id: int,
    title: str,
    start_date: DateLike = None,
    class_count: int = 1,
    primary_teacher_id: Optional[int] = None,
    description: str = "",
) -> Subject:
    """Append a subject with its pre-created classes to a course."""
    course = roster.get_course(course_id)
    if course is None:
        raise ValueError(f"Unknown course id: {course_id!r}")

    count   = class_count if class_count and class_count > 0 else 1
    teacher = None if is_vacant(primary_teacher_id) else primary_teacher_id
    subject = Subject(
        id                 = roster.next_subject_id(),
        title              = title,
        description        = description,
        start_date         = coerce_date(start_date),
        class_count        = count,
        primary_teacher_id = teacher,
        classes            = seed_subject_classes(
            title, start_date, count, teacher, first_id=roster.next_slot_id(),
        ),
    )
    course.subjects.append(subject)
    log.info("subject_added", course_id=course_id, subject_id=subject.id,
             classes=len(subject.classes))
    return subject
