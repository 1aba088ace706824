"""Mentorship dashboard: per-pair cadence, alert list and summary counts."""

from __future__ import annotations

import datetime as dt
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional

from lms_schedule.engine.cadence import classify
from lms_schedule.engine.result import CadenceReport, RiskLevel
from lms_schedule.models import (CadenceSettings, Enrollment, Person, Role,
    Roster, is_vacant)

_SEVERITY = {RiskLevel.AT_RISK: 0, RiskLevel.LAGGING: 1, RiskLevel.ON_TRACK: 2}


@dataclass(frozen=True)
class PairStatus:
    enrollment:      Enrollment
    student:         Optional[Person]
    mentor:          Optional[Person]
    course_name:     str
    total_checkins:  int
    latest_checkin:  Optional[dt.date]
    latest_progress: Optional[str]
    report:          CadenceReport

    @property
    def label(self) -> str:
        student = self.student.name if self.student else f"#{self.enrollment.student_id}"
        mentor  = self.mentor.name if self.mentor else "no mentor"
        return f"{student} / {mentor}"


def mentorship_pairs(
    roster: Roster,
    settings: CadenceSettings,
    today: Optional[dt.date] = None,
) -> List[PairStatus]:
    # History is per student, matching how check-ins are shown on the dashboard.
    today = today or dt.date.today()
    pairs: List[PairStatus] = []
    for enr in roster.enrollments:
        logs   = sorted((e for e in roster.logs if e.student_id == enr.student_id),
                        key=lambda e: e.date, reverse=True)
        course = roster.get_course(enr.course_id)
        latest = logs[0] if logs else None
        pairs.append(PairStatus(
            enrollment      = enr,
            student         = roster.get_person(enr.student_id),
            mentor          = None if is_vacant(enr.mentor_id) else roster.get_person(enr.mentor_id),
            course_name     = course.display_name if course else "",
            total_checkins  = len(logs),
            latest_checkin  = latest.date if latest else None,
            latest_progress = latest.student_progress.value
                              if latest and latest.student_progress else None,
            report          = classify(enr.student_id, logs, settings, today=today),
        ))
    return pairs


def cadence_alerts(pairs: List[PairStatus]) -> List[PairStatus]:
    """Pairs that are not on track, most severe first."""
    flagged = [p for p in pairs if p.report.overall_level is not RiskLevel.ON_TRACK]
    return sorted(flagged, key=lambda p: (_SEVERITY[p.report.overall_level],
                                          p.report.overall_score))


def students_without_mentor(roster: Roster) -> List[Person]:
    mentored = {e.student_id for e in roster.enrollments if not is_vacant(e.mentor_id)}
    return [p for p in roster.people
            if p.has_role(Role.STUDENT) and p.id not in mentored]


def mentorship_stats(roster: Roster, today: Optional[dt.date] = None) -> Dict[str, object]:
    today    = today or dt.date.today()
    week_ago = today - dt.timedelta(days=7)
    progress = Counter(e.student_progress.value for e in roster.logs if e.student_progress)
    return {
        "total_logs":            len(roster.logs),
        "active_mentors":        sum(1 for p in roster.people if p.has_role(Role.MENTOR)),
        "total_mentorships":     len(roster.enrollments),
        "recent_logs":           sum(1 for e in roster.logs if e.date >= week_ago),
        "progress_distribution": dict(progress),
    }
