"""Tests for JSON load/save and structural validation."""
import datetime as dt
import json
from pathlib import Path

import pytest

from lms_schedule.io_json import (ConfigError, load_roster, load_settings,
    save_roster, save_settings)
from lms_schedule.models import (CadenceSettings, Channel, ChannelThresholds,
    Role, TimeSlot)

SAMPLE = Path(__file__).resolve().parents[1] / "data" / "sample_roster.json"


def test_load_sample_roster() -> None:
    roster = load_roster(SAMPLE)
    assert len(roster.people) == 8
    assert roster.get_person(7).roles == frozenset({Role.TEACHER, Role.TRANSLATOR, Role.MENTOR})
    slot = roster.courses[0].subjects[0].classes[2]
    assert slot.time_slot is TimeSlot.BOTH
    assert slot.date == dt.date(2024, 9, 5)
    vacant = roster.courses[0].subjects[0].classes[3]
    assert vacant.teacher_id is None and vacant.translator_id is None
    assert roster.logs[1].channel is Channel.IN_PERSON


def test_roundtrip_keeps_vacant_as_zero(tmp_path: Path) -> None:
    roster = load_roster(SAMPLE)
    path = tmp_path / "out" / "roster.json"
    save_roster(roster, path)
    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["courses"][0]["subjects"][0]["classes"][3]["teacher_id"] == 0
    again = load_roster(path)
    assert again.courses[0].subjects[0].classes[3].teacher_id is None
    assert again.logs[0].topics == ["goal setting", "course expectations"]


def test_missing_key_raises(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"people": []}))
    with pytest.raises(ConfigError, match="courses"):
        load_roster(path)


def test_bad_hour_raises(tmp_path: Path) -> None:
    raw = json.loads(SAMPLE.read_text(encoding="utf-8"))
    raw["courses"][0]["subjects"][0]["classes"][0]["hour"] = "third"
    path = tmp_path / "bad_hour.json"
    path.write_text(json.dumps(raw))
    with pytest.raises(ConfigError, match="third"):
        load_roster(path)


def test_bad_date_raises(tmp_path: Path) -> None:
    raw = json.loads(SAMPLE.read_text(encoding="utf-8"))
    raw["logs"][0]["date"] = "yesterday"
    path = tmp_path / "bad_date.json"
    path.write_text(json.dumps(raw))
    with pytest.raises(ConfigError, match="yesterday"):
        load_roster(path)


def test_duplicate_ids_raise(tmp_path: Path) -> None:
    raw = json.loads(SAMPLE.read_text(encoding="utf-8"))
    raw["people"].append({"id": 1, "name": "Duplicate"})
    path = tmp_path / "dup.json"
    path.write_text(json.dumps(raw))
    with pytest.raises(ConfigError, match="Duplicate"):
        load_roster(path)


def test_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError):
        load_roster(path)


def test_settings_roundtrip(tmp_path: Path) -> None:
    settings = CadenceSettings(digital=ChannelThresholds(5, 8, 12))
    path = tmp_path / "cadence.json"
    save_settings(settings, path)
    again = load_settings(path)
    assert again.digital == ChannelThresholds(5, 8, 12)
    assert again.in_person == CadenceSettings().in_person


def test_partial_settings_use_defaults(tmp_path: Path) -> None:
    path = tmp_path / "partial.json"
    path.write_text(json.dumps({"digital": {"critical_days": 21}}))
    settings = load_settings(path)
    assert settings.digital.critical_days == 21
    assert settings.digital.warning_days == 10
    assert settings.in_person.critical_days == 45


def test_non_positive_settings_rejected(tmp_path: Path) -> None:
    path = tmp_path / "zero.json"
    path.write_text(json.dumps({"in_person": {"warning_days": 0}}))
    with pytest.raises(ConfigError, match="in_person"):
        load_settings(path)


def test_null_graduation_year_raises(tmp_path: Path) -> None:
    raw = json.loads(SAMPLE.read_text(encoding="utf-8"))
    raw["courses"][0]["graduation_year"] = None
    path = tmp_path / "null_year.json"
    path.write_text(json.dumps(raw))
    with pytest.raises(ConfigError, match="graduation_year"):
        load_roster(path)


def test_non_numeric_person_id_raises(tmp_path: Path) -> None:
    raw = json.loads(SAMPLE.read_text(encoding="utf-8"))
    raw["courses"][0]["subjects"][0]["classes"][0]["teacher_id"] = "mike"
    path = tmp_path / "bad_ref.json"
    path.write_text(json.dumps(raw))
    with pytest.raises(ConfigError, match="teacher_id"):
        load_roster(path)


def test_non_object_enrollment_raises(tmp_path: Path) -> None:
    raw = json.loads(SAMPLE.read_text(encoding="utf-8"))
    raw["enrollments"].append(42)
    path = tmp_path / "bad_enrollment.json"
    path.write_text(json.dumps(raw))
    with pytest.raises(ConfigError, match="enrollments"):
        load_roster(path)


def test_non_numeric_settings_rejected(tmp_path: Path) -> None:
    path = tmp_path / "words.json"
    path.write_text(json.dumps({"digital": {"warning_days": "ten"}}))
    with pytest.raises(ConfigError, match="warning_days"):
        load_settings(path)


def test_boolean_threshold_rejected(tmp_path: Path) -> None:
    path = tmp_path / "bool.json"
    path.write_text(json.dumps({"in_person": {"critical_days": True}}))
    with pytest.raises(ConfigError, match="critical_days"):
        load_settings(path)
