"""
Data model layer for the curriculum scheduling engine.

Every domain object is a plain Python dataclass. The @dataclass decorator
generates __init__, __repr__ and __eq__ automatically from field declarations.

Reference: Python Software Foundation. "dataclasses — Data Classes."
https://docs.python.org/3/library/dataclasses.html

Design note, flat entities with ID references:
  People are top-level objects. Class slots and enrollments hold person ids
  (teacher_id, translator_id, mentor_id) rather than embedded Person objects.

Vacant roles:
  An unassigned teacher/translator/mentor is None. The legacy data uses id 0
  for the same thing, so is_vacant() accepts both and the JSON layer maps
  0 <-> None at the boundary.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Tuple, Union

VACANT = 0

DateLike = Union[dt.date, str, None]


def is_vacant(person_id: Optional[int]) -> bool:
    return person_id is None or person_id == VACANT


def coerce_date(value: DateLike) -> Optional[dt.date]:
    """Return a date for a date/datetime/ISO string, None for anything unusable."""
    if value is None or value == "":
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    text = str(value).strip()
    try:
        if len(text) == 10:
            return dt.date.fromisoformat(text)
        return dt.datetime.fromisoformat(text).date()
    except ValueError:
        return None


def _stored_date(value: DateLike, what: str) -> Optional[dt.date]:
    d = coerce_date(value)
    if d is None and value not in (None, ""):
        raise ValueError(f"Invalid {what} date {value!r}; expected YYYY-MM-DD")
    return d


class TimeSlot(str, Enum):
    """Which period(s) of a teaching day a class occupies."""
    FIRST  = "first"
    SECOND = "second"
    BOTH   = "both"

    def periods(self) -> Tuple["TimeSlot", ...]:
        if self is TimeSlot.BOTH:
            return (TimeSlot.FIRST, TimeSlot.SECOND)
        return (self,)

    def overlaps(self, other: "TimeSlot") -> bool:
        other = TimeSlot(other)
        return self == TimeSlot.BOTH or other == TimeSlot.BOTH or self == other


class Role(str, Enum):
    TEACHER       = "teacher"
    TRANSLATOR    = "translator"
    MENTOR        = "mentor"
    STUDENT       = "student"
    ADMINISTRATOR = "administrator"


class Channel(str, Enum):
    DIGITAL   = "digital"
    IN_PERSON = "in_person"


class CourseType(str, Enum):
    FIRST_YEAR  = "first_year"
    SECOND_YEAR = "second_year"


class Progress(str, Enum):
    EXCELLENT         = "excellent"
    GOOD              = "good"
    NEEDS_IMPROVEMENT = "needs_improvement"
    CONCERN           = "concern"


@dataclass
class Person:
    id:    int
    name:  str
    email: str             = ""
    roles: FrozenSet[Role] = frozenset()

    def has_role(self, role: Role) -> bool:
        return role in self.roles


@dataclass
class ClassSlot:
    """One scheduled teaching session, e.g. 2024-09-03 first hour."""
    id:            int
    date:          Optional[dt.date]  # None = not yet scheduled
    time_slot:     TimeSlot           = TimeSlot.FIRST
    teacher_id:    Optional[int]      = None
    translator_id: Optional[int]      = None
    title:         str                = ""

    def __post_init__(self) -> None:
        self.date      = _stored_date(self.date, "class")
        self.time_slot = TimeSlot(self.time_slot)

    def people(self) -> List[int]:
        return [p for p in (self.teacher_id, self.translator_id) if not is_vacant(p)]

    def role_of(self, person_id: int) -> Optional[str]:
        if is_vacant(person_id):
            return None
        if self.teacher_id == person_id:
            return "Teacher"
        if self.translator_id == person_id:
            return "Translator"
        return None


@dataclass
class Subject:
    id:                 int
    title:              str
    description:        str               = ""
    start_date:         Optional[dt.date] = None
    # Used only when the class list is first seeded.
    class_count:        int               = 1
    primary_teacher_id: Optional[int]     = None
    classes:            List[ClassSlot]   = field(default_factory=list)


@dataclass
class Course:
    id:              int
    course_type:     CourseType        = CourseType.FIRST_YEAR
    graduation_year: int               = 0
    start_date:      Optional[dt.date] = None
    end_date:        Optional[dt.date] = None
    status:          str               = "active"
    subjects:        List[Subject]     = field(default_factory=list)

    @property
    def display_name(self) -> str:
        label = "First Year" if self.course_type is CourseType.FIRST_YEAR else "Second Year"
        return f"{label} {self.graduation_year}"


@dataclass
class Enrollment:
    course_id:       int
    student_id:      int
    mentor_id:       Optional[int]     = None
    enrollment_date: Optional[dt.date] = None
    status:          str               = "active"


@dataclass
class MentorshipLogEntry:
    """One recorded check-in. Same-day duplicates are allowed."""
    id:               int
    student_id:       int
    mentor_id:        int
    date:             dt.date
    channel:          Channel
    notes:            str                = ""
    duration_minutes: Optional[int]      = None
    topics:           List[str]          = field(default_factory=list)
    next_steps:       str                = ""
    student_progress: Optional[Progress] = None

    def __post_init__(self) -> None:
        date = _stored_date(self.date, "check-in")
        if date is None:
            raise ValueError(f"Check-in {self.id} has no date")
        self.date    = date
        self.channel = Channel(self.channel)
        if self.student_progress is not None:
            self.student_progress = Progress(self.student_progress)


@dataclass
class ChannelThresholds:
    """Day counts for one check-in channel. Usually expected <= warning <= critical."""
    expected_days: int
    warning_days:  int
    critical_days: int


def _default_digital() -> ChannelThresholds:
    return ChannelThresholds(expected_days=7, warning_days=10, critical_days=14)


def _default_in_person() -> ChannelThresholds:
    return ChannelThresholds(expected_days=30, warning_days=35, critical_days=45)


@dataclass
class CadenceSettings:
    digital:   ChannelThresholds = field(default_factory=_default_digital)
    in_person: ChannelThresholds = field(default_factory=_default_in_person)

    def for_channel(self, channel: Channel) -> ChannelThresholds:
        return self.digital if channel is Channel.DIGITAL else self.in_person

    def validate(self) -> None:
        for channel in Channel:
            t = self.for_channel(channel)
            if min(t.expected_days, t.warning_days, t.critical_days) < 1:
                raise ValueError(f"{channel.value} thresholds must all be >= 1")


@dataclass(frozen=True)
class SlotContext:
    """A class slot together with the course and subject that own it."""
    slot:    ClassSlot
    course:  Optional[Course]  = None
    subject: Optional[Subject] = None

    @property
    def course_name(self) -> str:
        return self.course.display_name if self.course else ""

    @property
    def subject_title(self) -> str:
        return self.subject.title if self.subject else ""


@dataclass
class Roster:
    meta:        Dict[str, Any]           = field(default_factory=dict)
    people:      List[Person]             = field(default_factory=list)
    courses:     List[Course]             = field(default_factory=list)
    enrollments: List[Enrollment]         = field(default_factory=list)
    logs:        List[MentorshipLogEntry] = field(default_factory=list)

    def get_person(self, pid: Optional[int]) -> Optional[Person]:
        return next((p for p in self.people if p.id == pid), None)

    def get_course(self, cid: int) -> Optional[Course]:
        return next((c for c in self.courses if c.id == cid), None)

    def get_subject(self, sid: int) -> Optional[Subject]:
        return next((s for c in self.courses for s in c.subjects if s.id == sid), None)

    def iter_slots(self) -> Iterator[SlotContext]:
        for course in self.courses:
            for subject in course.subjects:
                for slot in subject.classes:
                    yield SlotContext(slot=slot, course=course, subject=subject)

    def next_slot_id(self) -> int:
        return max((ctx.slot.id for ctx in self.iter_slots()), default=0) + 1

    def next_subject_id(self) -> int:
        return max((s.id for c in self.courses for s in c.subjects), default=0) + 1
