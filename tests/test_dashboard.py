"""Tests for the mentorship dashboard helpers."""
import datetime as dt

from lms_schedule.engine.dashboard import (cadence_alerts, mentorship_pairs,
    mentorship_stats, students_without_mentor)
from lms_schedule.engine.result import RiskLevel
from lms_schedule.models import (CadenceSettings, Channel, Course, Enrollment,
    MentorshipLogEntry, Person, Progress, Role, Roster)

TODAY = dt.date(2024, 9, 15)


def _roster() -> Roster:
    roster = Roster()
    roster.people = [
        Person(id=4, name="Bob Mentor", roles=frozenset({Role.MENTOR})),
        Person(id=5, name="Alice Student", roles=frozenset({Role.STUDENT})),
        Person(id=6, name="David Student", roles=frozenset({Role.STUDENT})),
        Person(id=9, name="Eve Student", roles=frozenset({Role.STUDENT})),
        Person(id=7, name="Sarah", roles=frozenset({Role.MENTOR, Role.TEACHER})),
    ]
    roster.courses = [Course(id=1, graduation_year=2025)]
    roster.enrollments = [
        Enrollment(course_id=1, student_id=5, mentor_id=4),
        Enrollment(course_id=1, student_id=6, mentor_id=None),
    ]
    roster.logs = [
        MentorshipLogEntry(id=1, student_id=5, mentor_id=4, date=dt.date(2024, 9, 14),
                           channel=Channel.DIGITAL, student_progress=Progress.GOOD),
        MentorshipLogEntry(id=2, student_id=5, mentor_id=4, date=dt.date(2024, 9, 1),
                           channel=Channel.IN_PERSON, student_progress=Progress.EXCELLENT),
    ]
    return roster


def test_pairs_carry_latest_checkin_and_report() -> None:
    pairs = mentorship_pairs(_roster(), CadenceSettings(), today=TODAY)
    alice, david = pairs
    assert alice.total_checkins == 2
    assert alice.latest_checkin == dt.date(2024, 9, 14)
    assert alice.latest_progress == "good"
    assert alice.course_name == "First Year 2025"
    assert alice.report.overall_level is RiskLevel.ON_TRACK
    assert david.mentor is None
    assert david.total_checkins == 0
    assert david.report.overall_level is RiskLevel.AT_RISK
    assert david.label == "David Student / no mentor"


def test_alerts_only_flagged_pairs() -> None:
    alerts = cadence_alerts(mentorship_pairs(_roster(), CadenceSettings(), today=TODAY))
    assert [p.enrollment.student_id for p in alerts] == [6]


def test_students_without_mentor() -> None:
    names = [p.name for p in students_without_mentor(_roster())]
    assert names == ["David Student", "Eve Student"]


def test_stats() -> None:
    stats = mentorship_stats(_roster(), today=TODAY)
    assert stats["total_logs"] == 2
    assert stats["active_mentors"] == 2
    assert stats["total_mentorships"] == 2
    assert stats["recent_logs"] == 1
    assert stats["progress_distribution"] == {"good": 1, "excellent": 1}
