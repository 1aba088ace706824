"""
Mentorship cadence risk classifier.

For each check-in channel the most recent log entry decides the status:

  days_since >= critical_days  -> AT_RISK   "{n}d overdue"
  days_since >= warning_days   -> LAGGING   "{n}d ago"
  otherwise                    -> ON_TRACK  "{n}d ago"
  no entry at all              -> AT_RISK   "No check-ins"

The overall level averages the two channel scores (AT_RISK=0, LAGGING=1,
ON_TRACK=2) with equal weight and maps back:

  score <= 0.5  AT_RISK
  score <= 1.5  LAGGING
  otherwise     ON_TRACK

A check-in dated after today counts as 0 days ago.

Settings are passed in on every call; nothing is cached between calls.
Thresholds are used as given, an inverted warning/critical pair simply
produces inverted-looking results.
"""

from __future__ import annotations

import datetime as dt
from typing import Iterable, Optional

from lms_schedule.engine.result import (NO_CHECK_IN, CadenceReport,
    ChannelStatus, RiskLevel)
from lms_schedule.models import (CadenceSettings, Channel, ChannelThresholds,
    MentorshipLogEntry)

CHANNEL_WEIGHT = 0.5


def latest_check_in(
    student_id: int,
    channel: Channel,
    logs: Iterable[MentorshipLogEntry],
    mentor_id: Optional[int] = None,
) -> Optional[MentorshipLogEntry]:
    matching = [
        e for e in logs
        if e.student_id == student_id
        and e.channel == channel
        and (mentor_id is None or e.mentor_id == mentor_id)
    ]
    if not matching:
        return None
    return max(matching, key=lambda e: e.date)


def channel_status(
    last: Optional[MentorshipLogEntry],
    thresholds: ChannelThresholds,
    today: dt.date,
) -> ChannelStatus:
    if last is None:
        return ChannelStatus(RiskLevel.AT_RISK, NO_CHECK_IN, "No check-ins")

    days = max((today - last.date).days, 0)
    if days >= thresholds.critical_days:
        return ChannelStatus(RiskLevel.AT_RISK, days, f"{days}d overdue", last.date)
    if days >= thresholds.warning_days:
        return ChannelStatus(RiskLevel.LAGGING, days, f"{days}d ago", last.date)
    return ChannelStatus(RiskLevel.ON_TRACK, days, f"{days}d ago", last.date)


def level_for_score(score: float) -> RiskLevel:
    if score <= 0.5:
        return RiskLevel.AT_RISK
    if score <= 1.5:
        return RiskLevel.LAGGING
    return RiskLevel.ON_TRACK


def classify(
    student_id: int,
    logs: Iterable[MentorshipLogEntry],
    settings: CadenceSettings,
    today: Optional[dt.date] = None,
    mentor_id: Optional[int] = None,
) -> CadenceReport:
    today = today or dt.date.today()
    logs  = list(logs)

    digital = channel_status(
        latest_check_in(student_id, Channel.DIGITAL, logs, mentor_id),
        settings.digital, today,
    )
    in_person = channel_status(
        latest_check_in(student_id, Channel.IN_PERSON, logs, mentor_id),
        settings.in_person, today,
    )
    score = CHANNEL_WEIGHT * digital.level.score + CHANNEL_WEIGHT * in_person.level.score
    return CadenceReport(
        student_id    = student_id,
        digital       = digital,
        in_person     = in_person,
        overall_score = score,
        overall_level = level_for_score(score),
    )
