"""Tests for the mentorship cadence risk classifier."""
import datetime as dt
import math

import pytest

from lms_schedule.engine.cadence import classify, level_for_score
from lms_schedule.engine.result import RiskLevel
from lms_schedule.models import (CadenceSettings, Channel, ChannelThresholds,
    MentorshipLogEntry)

TODAY = dt.date(2024, 10, 1)


def _log(i, days_ago, channel, student=5, mentor=4) -> MentorshipLogEntry:
    return MentorshipLogEntry(id=i, student_id=student, mentor_id=mentor,
                              date=TODAY - dt.timedelta(days=days_ago), channel=channel)


def _settings() -> CadenceSettings:
    return CadenceSettings(
        digital   = ChannelThresholds(expected_days=7,  warning_days=10, critical_days=14),
        in_person = ChannelThresholds(expected_days=30, warning_days=35, critical_days=45),
    )


def test_example_lagging_boundary() -> None:
    logs = [_log(1, 12, Channel.DIGITAL), _log(2, 20, Channel.IN_PERSON)]
    r = classify(5, logs, _settings(), today=TODAY)
    assert r.digital.level is RiskLevel.LAGGING
    assert r.in_person.level is RiskLevel.ON_TRACK
    assert r.overall_score == 1.5
    assert r.overall_level is RiskLevel.LAGGING


def test_no_history_is_at_risk() -> None:
    r = classify(5, [], _settings(), today=TODAY)
    assert r.digital.level is RiskLevel.AT_RISK
    assert r.in_person.level is RiskLevel.AT_RISK
    assert r.digital.message == "No check-ins"
    assert math.isinf(r.digital.days_since)
    assert r.overall_level is RiskLevel.AT_RISK


def test_messages() -> None:
    logs = [_log(1, 14, Channel.DIGITAL), _log(2, 3, Channel.IN_PERSON)]
    r = classify(5, logs, _settings(), today=TODAY)
    assert r.digital.level is RiskLevel.AT_RISK
    assert r.digital.message == "14d overdue"
    assert r.in_person.message == "3d ago"
    assert r.overall_score == 1.0
    assert r.overall_level is RiskLevel.LAGGING


def test_latest_entry_wins_and_other_students_ignored() -> None:
    logs = [
        _log(1, 40, Channel.DIGITAL),
        _log(2, 2, Channel.DIGITAL),
        _log(3, 0, Channel.IN_PERSON, student=6),
    ]
    r = classify(5, logs, _settings(), today=TODAY)
    assert r.digital.days_since == 2
    assert r.digital.last_check_in == TODAY - dt.timedelta(days=2)
    assert r.in_person.level is RiskLevel.AT_RISK


def test_both_on_track() -> None:
    logs = [_log(1, 0, Channel.DIGITAL), _log(2, 0, Channel.IN_PERSON), _log(3, 0, Channel.IN_PERSON)]
    r = classify(5, logs, _settings(), today=TODAY)
    assert r.overall_level is RiskLevel.ON_TRACK
    assert r.overall_score == 2.0


def test_monotone_in_days() -> None:
    order = {RiskLevel.ON_TRACK: 0, RiskLevel.LAGGING: 1, RiskLevel.AT_RISK: 2}
    previous = -1
    for days in range(0, 30):
        level = classify(5, [_log(1, days, Channel.DIGITAL)], _settings(), today=TODAY).digital.level
        assert order[level] >= previous
        previous = order[level]


def test_settings_change_takes_effect() -> None:
    logs = [_log(1, 12, Channel.DIGITAL)]
    assert classify(5, logs, _settings(), today=TODAY).digital.level is RiskLevel.LAGGING
    strict = _settings()
    strict.digital.critical_days = 12
    assert classify(5, logs, strict, today=TODAY).digital.level is RiskLevel.AT_RISK


def test_inverted_thresholds_follow_comparison_order() -> None:
    s = _settings()
    s.digital = ChannelThresholds(expected_days=7, warning_days=20, critical_days=10)
    r = classify(5, [_log(1, 15, Channel.DIGITAL)], s, today=TODAY)
    assert r.digital.level is RiskLevel.AT_RISK


def test_mentor_filter() -> None:
    logs = [_log(1, 1, Channel.DIGITAL, mentor=4)]
    assert classify(5, logs, _settings(), today=TODAY, mentor_id=8).digital.level is RiskLevel.AT_RISK
    assert classify(5, logs, _settings(), today=TODAY, mentor_id=4).digital.level is RiskLevel.ON_TRACK


@pytest.mark.parametrize("score, level", [
    (0.0, RiskLevel.AT_RISK), (0.5, RiskLevel.AT_RISK), (1.0, RiskLevel.LAGGING),
    (1.5, RiskLevel.LAGGING), (2.0, RiskLevel.ON_TRACK),
])
def test_score_mapping(score, level) -> None:
    assert level_for_score(score) is level


def test_string_channel_and_date_are_matched() -> None:
    logs = [MentorshipLogEntry(id=1, student_id=5, mentor_id=4,
                               date="2024-09-21", channel="digital")]
    r = classify(5, logs, _settings(), today=TODAY)
    assert r.digital.level is RiskLevel.LAGGING
    assert r.digital.message == "10d ago"
    assert r.digital.last_check_in == dt.date(2024, 9, 21)
    assert r.in_person.message == "No check-ins"


def test_future_check_in_counts_as_today() -> None:
    logs = [_log(1, -3, Channel.DIGITAL)]
    r = classify(5, logs, _settings(), today=TODAY)
    assert r.digital.days_since == 0
    assert r.digital.message == "0d ago"
    assert r.digital.level is RiskLevel.ON_TRACK


def test_check_in_without_date_rejected() -> None:
    with pytest.raises(ValueError, match="no date"):
        MentorshipLogEntry(id=9, student_id=5, mentor_id=4, date=None, channel=Channel.DIGITAL)
