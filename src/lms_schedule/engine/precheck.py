"""
Roster integrity checks that run before a roster is accepted or saved.

Catching broken rosters here means the coordinator sees plain-English
messages rather than a double-booked timetable going out unnoticed.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Tuple

from lms_schedule.engine.conflicts import find_double_bookings
from lms_schedule.models import Person, Role, Roster, is_vacant


class PrecheckError(ValueError):
    """Raised by ensure_ok() when hard errors are present."""


@dataclass(frozen=True)
class IdIndex:
    person_by_id:  Dict[int, Person]
    course_ids:    Dict[int, int]
    slot_id_count: Dict[int, int]


def build_index(roster: Roster) -> IdIndex:
    return IdIndex(
        person_by_id  = {p.id: p for p in roster.people},
        course_ids    = {c.id: i for i, c in enumerate(roster.courses)},
        slot_id_count = dict(Counter(ctx.slot.id for ctx in roster.iter_slots())),
    )


def precheck(roster: Roster) -> Tuple[List[str], List[str]]:
    """Return (errors, warnings). errors = roster must not be used as-is."""
    errors:   List[str] = []
    warnings: List[str] = []

    idx = build_index(roster)

    dupes = sorted(sid for sid, n in idx.slot_id_count.items() if n > 1)
    if dupes:
        errors.append(f"Duplicate class ids: {dupes}")

    seen_courses: Dict[Tuple[str, int], int] = {}
    for c in roster.courses:
        key = (c.course_type.value, c.graduation_year)
        if key in seen_courses:
            errors.append(
                f"Course {c.id} duplicates course {seen_courses[key]} "
                f"({c.display_name})."
            )
        else:
            seen_courses[key] = c.id

    for ctx in roster.iter_slots():
        s    = ctx.slot
        name = f"Class {s.id} '{s.title}'"

        if not is_vacant(s.teacher_id) and s.teacher_id == s.translator_id:
            errors.append(
                f"{name} has person {s.teacher_id} as both teacher and translator."
            )

        for pid, role in ((s.teacher_id, Role.TEACHER), (s.translator_id, Role.TRANSLATOR)):
            if is_vacant(pid):
                continue
            person = idx.person_by_id.get(pid)
            if person is None:
                errors.append(f"{name} references unknown {role.value} '{pid}'.")
            elif not person.has_role(role):
                warnings.append(
                    f"{name}: {person.name} ({pid}) is assigned as {role.value} "
                    f"but does not hold that role."
                )

        if s.date is None:
            warnings.append(f"{name} is not scheduled (no date).")
        if is_vacant(s.teacher_id):
            warnings.append(f"{name} has no teacher assigned.")

    for b in find_double_bookings(roster):
        errors.append(
            f"Person {b.person_id} is double-booked: "
            f"{b.first.describe()} and {b.second.describe()}."
        )

    for e in roster.enrollments:
        if e.course_id not in idx.course_ids:
            errors.append(
                f"Enrollment of student {e.student_id} references unknown course {e.course_id}."
            )
        if e.student_id not in idx.person_by_id:
            errors.append(f"Enrollment references unknown student {e.student_id}.")
        if is_vacant(e.mentor_id):
            warnings.append(
                f"Student {e.student_id} has no mentor in course {e.course_id}."
            )
        elif e.mentor_id not in idx.person_by_id:
            errors.append(
                f"Enrollment of student {e.student_id} references unknown mentor {e.mentor_id}."
            )

    return errors, warnings


def ensure_ok(roster: Roster) -> None:
    errors, _ = precheck(roster)
    if errors:
        raise PrecheckError("\n".join(errors))
