from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from lms_schedule.models import ClassSlot, TimeSlot

# days_since value for a channel that has never had a check-in.
NO_CHECK_IN = math.inf


@dataclass(frozen=True)
class GeneratedClass:
    date:      Optional[dt.date]  # None when the start date was missing
    time_slot: TimeSlot


@dataclass(frozen=True)
class ConflictingSlot:
    slot:          ClassSlot
    role:          str   # "Teacher" or "Translator"
    course_name:   str = ""
    subject_title: str = ""

    def describe(self) -> str:
        where = " / ".join(x for x in (self.course_name, self.subject_title) if x)
        when  = self.slot.date.isoformat() if self.slot.date else "unscheduled"
        text  = f"{self.role} in '{self.slot.title}' on {when} ({self.slot.time_slot.value} hour)"
        return f"{text} [{where}]" if where else text


@dataclass
class ConflictResult:
    person_id:         Optional[int]
    conflicting_slots: List[ConflictingSlot] = field(default_factory=list)

    @property
    def has_conflict(self) -> bool:
        return bool(self.conflicting_slots)


@dataclass
class SlotCheck:
    """Teacher and translator checked independently for one candidate slot."""
    slot:       ClassSlot
    teacher:    ConflictResult
    translator: ConflictResult

    @property
    def has_conflict(self) -> bool:
        return self.teacher.has_conflict or self.translator.has_conflict

    def errors(self) -> List[str]:
        out: List[str] = []
        for label, res in (("Teacher", self.teacher), ("Translator", self.translator)):
            for c in res.conflicting_slots:
                out.append(f"{label} {res.person_id} is already booked as {c.describe()}")
        return out


@dataclass(frozen=True)
class DoubleBooking:
    person_id: int
    first:     ConflictingSlot
    second:    ConflictingSlot


class RiskLevel(str, Enum):
    ON_TRACK = "on_track"
    LAGGING  = "lagging"
    AT_RISK  = "at_risk"

    @property
    def score(self) -> int:
        return _SCORES[self]


_SCORES = {RiskLevel.AT_RISK: 0, RiskLevel.LAGGING: 1, RiskLevel.ON_TRACK: 2}


@dataclass(frozen=True)
class ChannelStatus:
    level:      RiskLevel
    days_since: Union[int, float]  # NO_CHECK_IN when there is no history
    message:    str
    last_check_in: Optional[dt.date] = None


@dataclass(frozen=True)
class CadenceReport:
    student_id:    int
    digital:       ChannelStatus
    in_person:     ChannelStatus
    overall_score: float
    overall_level: RiskLevel
