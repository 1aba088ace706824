"""
JSON serialisation / deserialisation for Roster and CadenceSettings.

Uses only the Python standard-library json module. Basic structural
validation is applied before domain objects are built, so a bad file fails
with a ConfigError naming the offending key instead of a KeyError deep in
the engine.

Reference: Python docs, json
https://docs.python.org/3/library/json.html

Person ids of 0 in teacher_id / translator_id / mentor_id mean "vacant"
and are loaded as None; save writes 0 back.
"""

from __future__ import annotations

import datetime as dt
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from lms_schedule.models import (VACANT, CadenceSettings, Channel,
    ChannelThresholds, ClassSlot, Course, CourseType, Enrollment,
    MentorshipLogEntry, Person, Progress, Role, Roster, Subject, TimeSlot,
    coerce_date, is_vacant)


class ConfigError(ValueError):
    """Raised when a roster or settings JSON file is structurally invalid."""


def _require(obj: Dict[str, Any], key: str, ctx: str) -> Any:
    if key not in obj:
        raise ConfigError(f"Missing required key '{key}' in {ctx}")
    return obj[key]


def _as_list(obj: Any, ctx: str) -> List[Any]:
    if obj is None:
        return []
    if not isinstance(obj, list):
        raise ConfigError(f"Expected a JSON array in {ctx}, got {type(obj).__name__}")
    return obj


def _as_dict(obj: Any, ctx: str) -> Dict[str, Any]:
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ConfigError(
            f"Expected a JSON object in {ctx}, got {type(obj).__name__}"
        )
    return obj


def _as_enum(enum_cls: Any, value: Any, ctx: str) -> Any:
    try:
        return enum_cls(value)
    except ValueError:
        allowed = [m.value for m in enum_cls]
        raise ConfigError(f"Invalid value {value!r} in {ctx}; expected one of {allowed}") from None


def _as_date(value: Any, ctx: str, required: bool = False) -> Optional[dt.date]:
    d = coerce_date(value)
    if d is None and value not in (None, ""):
        raise ConfigError(f"Invalid date {value!r} in {ctx}; expected YYYY-MM-DD")
    if d is None and required:
        raise ConfigError(f"Missing date in {ctx}")
    return d


def _as_int(value: Any, ctx: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"Expected an integer in {ctx}, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Expected an integer in {ctx}, got {value!r}") from None


def _person_ref(value: Any, ctx: str) -> Optional[int]:
    if value is None:
        return None
    pid = _as_int(value, ctx)
    return None if is_vacant(pid) else pid


def _check_unique_ids(items: list, ctx: str) -> None:
    seen: set = set()
    dupes: set = set()
    for item in items:
        item_id = getattr(item, "id", None)
        if item_id is None:
            raise ConfigError(f"Missing 'id' in {ctx}")
        if item_id in seen:
            dupes.add(item_id)
        seen.add(item_id)
    if dupes:
        raise ConfigError(f"Duplicate ids in {ctx}: {sorted(dupes)}")


# ── parsing ──────────────────────────────────────────────────────────────────

def _parse_slot(raw: Dict[str, Any], ctx: str) -> ClassSlot:
    raw = _as_dict(raw, ctx)
    return ClassSlot(
        id            = _as_int(_require(raw, "id", ctx), f"{ctx}.id"),
        date          = _as_date(raw.get("date"), ctx),
        time_slot     = _as_enum(TimeSlot, raw.get("hour", raw.get("time_slot", "first")), ctx),
        teacher_id    = _person_ref(raw.get("teacher_id", raw.get("teacherId")),
                                     f"{ctx}.teacher_id"),
        translator_id = _person_ref(raw.get("translator_id", raw.get("translatorId")),
                                     f"{ctx}.translator_id"),
        title         = str(raw.get("title", "")),
    )


def _parse_subject(raw: Dict[str, Any], ctx: str) -> Subject:
    raw = _as_dict(raw, ctx)
    return Subject(
        id                 = _as_int(_require(raw, "id", ctx), f"{ctx}.id"),
        title              = str(_require(raw, "title", ctx)),
        description        = str(raw.get("description", "")),
        start_date         = _as_date(raw.get("start_date"), ctx),
        class_count        = _as_int(raw.get("class_count", raw.get("duration", 1)),
                                     f"{ctx}.class_count"),
        primary_teacher_id = _person_ref(raw.get("primary_teacher_id"),
                                         f"{ctx}.primary_teacher_id"),
        classes            = [
            _parse_slot(c, f"{ctx}.classes[{i}]")
            for i, c in enumerate(_as_list(raw.get("classes"), f"{ctx}.classes"))
        ],
    )


def _parse_course(raw: Dict[str, Any], ctx: str) -> Course:
    raw = _as_dict(raw, ctx)
    return Course(
        id              = _as_int(_require(raw, "id", ctx), f"{ctx}.id"),
        course_type     = _as_enum(CourseType, raw.get("course_type", "first_year"), ctx),
        graduation_year = _as_int(raw.get("graduation_year", 0), f"{ctx}.graduation_year"),
        start_date      = _as_date(raw.get("start_date"), ctx),
        end_date        = _as_date(raw.get("end_date"), ctx),
        status          = str(raw.get("status", "active")),
        subjects        = [
            _parse_subject(s, f"{ctx}.subjects[{i}]")
            for i, s in enumerate(_as_list(raw.get("subjects"), f"{ctx}.subjects"))
        ],
    )


def _parse_log(raw: Dict[str, Any], ctx: str) -> MentorshipLogEntry:
    raw = _as_dict(raw, ctx)
    progress = raw.get("student_progress")
    duration = raw.get("duration_minutes", raw.get("duration"))
    return MentorshipLogEntry(
        id               = _as_int(_require(raw, "id", ctx), f"{ctx}.id"),
        student_id       = _as_int(_require(raw, "student_id", ctx), f"{ctx}.student_id"),
        mentor_id        = _as_int(_require(raw, "mentor_id", ctx), f"{ctx}.mentor_id"),
        date             = _as_date(_require(raw, "date", ctx), ctx, required=True),
        channel          = _as_enum(Channel, raw.get("channel", raw.get("type")), ctx),
        notes            = str(raw.get("notes", "")),
        duration_minutes = (None if duration is None
                            else _as_int(duration, f"{ctx}.duration_minutes")),
        topics           = [str(t) for t in _as_list(raw.get("topics"), f"{ctx}.topics")],
        next_steps       = str(raw.get("next_steps", "")),
        student_progress = _as_enum(Progress, progress, ctx) if progress else None,
    )


def _parse_person(raw: Dict[str, Any], ctx: str) -> Person:
    raw = _as_dict(raw, ctx)
    return Person(
        id    = _as_int(_require(raw, "id", ctx), f"{ctx}.id"),
        name  = str(_require(raw, "name", ctx)),
        email = str(raw.get("email", "")),
        roles = frozenset(
            _as_enum(Role, r, f"{ctx}.roles")
            for r in _as_list(raw.get("roles"), f"{ctx}.roles")
        ),
    )


def _parse_enrollment(raw: Dict[str, Any], ctx: str) -> Enrollment:
    raw = _as_dict(raw, ctx)
    return Enrollment(
        course_id       = _as_int(_require(raw, "course_id", ctx), f"{ctx}.course_id"),
        student_id      = _as_int(_require(raw, "student_id", ctx), f"{ctx}.student_id"),
        mentor_id       = _person_ref(raw.get("mentor_id"), f"{ctx}.mentor_id"),
        enrollment_date = _as_date(raw.get("enrollment_date"), ctx),
        status          = str(raw.get("status", "active")),
    )


def roster_from_dict(raw: Any) -> Roster:
    raw = _as_dict(raw, "root")

    people = [
        _parse_person(p, f"people[{i}]")
        for i, p in enumerate(_as_list(_require(raw, "people", "root"), "people"))
    ]

    courses = [
        _parse_course(c, f"courses[{i}]")
        for i, c in enumerate(_as_list(_require(raw, "courses", "root"), "courses"))
    ]

    enrollments = [
        _parse_enrollment(e, f"enrollments[{i}]")
        for i, e in enumerate(_as_list(raw.get("enrollments"), "enrollments"))
    ]

    logs = [
        _parse_log(entry, f"logs[{i}]")
        for i, entry in enumerate(_as_list(raw.get("logs"), "logs"))
    ]

    roster = Roster(
        meta        = _as_dict(raw.get("meta"), "meta"),
        people      = people,
        courses     = courses,
        enrollments = enrollments,
        logs        = logs,
    )
    _check_unique_ids(roster.people,  "people")
    _check_unique_ids(roster.courses, "courses")
    _check_unique_ids(roster.logs,    "logs")
    _check_unique_ids([s for c in roster.courses for s in c.subjects], "subjects")
    return roster


def settings_from_dict(raw: Any) -> CadenceSettings:
    raw      = _as_dict(raw, "root")
    defaults = CadenceSettings()
    values: Dict[str, ChannelThresholds] = {}
    for channel in Channel:
        ctx  = f"settings.{channel.value}"
        base = defaults.for_channel(channel)
        ch   = _as_dict(raw.get(channel.value), ctx)
        values[channel.value] = ChannelThresholds(**{
            key: _as_int(ch.get(key, getattr(base, key)), f"{ctx}.{key}")
            for key in ("expected_days", "warning_days", "critical_days")
        })
    settings = CadenceSettings(digital=values["digital"], in_person=values["in_person"])
    try:
        settings.validate()
    except ValueError as e:
        raise ConfigError(str(e)) from e
    return settings


# ── serialising ──────────────────────────────────────────────────────────────

def _iso(d: Optional[dt.date]) -> str:
    return d.isoformat() if d else ""


def _ref(pid: Optional[int]) -> int:
    return VACANT if pid is None else pid


def roster_to_dict(roster: Roster) -> Dict[str, Any]:
    return {
        "meta": roster.meta,
        "people": [
            {"id": p.id, "name": p.name, "email": p.email,
             "roles": sorted(r.value for r in p.roles)}
            for p in roster.people
        ],
        "courses": [
            {
                "id": c.id,
                "course_type": c.course_type.value,
                "graduation_year": c.graduation_year,
                "start_date": _iso(c.start_date),
                "end_date": _iso(c.end_date),
                "status": c.status,
                "subjects": [
                    {
                        "id": s.id,
                        "title": s.title,
                        "description": s.description,
                        "start_date": _iso(s.start_date),
                        "class_count": s.class_count,
                        "primary_teacher_id": _ref(s.primary_teacher_id),
                        "classes": [
                            {"id": k.id, "date": _iso(k.date), "hour": k.time_slot.value,
                             "teacher_id": _ref(k.teacher_id),
                             "translator_id": _ref(k.translator_id),
                             "title": k.title}
                            for k in s.classes
                        ],
                    }
                    for s in c.subjects
                ],
            }
            for c in roster.courses
        ],
        "enrollments": [
            {"course_id": e.course_id, "student_id": e.student_id,
             "mentor_id": _ref(e.mentor_id),
             "enrollment_date": _iso(e.enrollment_date), "status": e.status}
            for e in roster.enrollments
        ],
        "logs": [
            {"id": e.id, "student_id": e.student_id, "mentor_id": e.mentor_id,
             "date": _iso(e.date), "channel": e.channel.value, "notes": e.notes,
             "duration_minutes": e.duration_minutes, "topics": list(e.topics),
             "next_steps": e.next_steps,
             "student_progress": e.student_progress.value if e.student_progress else None}
            for e in roster.logs
        ],
    }


def settings_to_dict(settings: CadenceSettings) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for channel in Channel:
        t = settings.for_channel(channel)
        out[channel.value] = {
            "expected_days": t.expected_days,
            "warning_days":  t.warning_days,
            "critical_days": t.critical_days,
        }
    return out


# ── files ────────────────────────────────────────────────────────────────────

def _read_json(path: str | Path) -> Any:
    with Path(path).open("r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"{path}: not valid JSON ({e})") from e


def _write_json(data: Any, path: str | Path) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        # ensure_ascii=False preserves accented names.
        json.dump(data, f, ensure_ascii=False, indent=2)


def load_roster(path: str | Path) -> Roster:
    """Load and structurally validate a Roster from a JSON file."""
    return roster_from_dict(_read_json(path))


def save_roster(roster: Roster, path: str | Path) -> None:
    """Serialise a Roster to JSON, creating parent directories if needed."""
    _write_json(roster_to_dict(roster), path)


def load_settings(path: str | Path) -> CadenceSettings:
    return settings_from_dict(_read_json(path))


def save_settings(settings: CadenceSettings, path: str | Path) -> None:
    settings.validate()
    _write_json(settings_to_dict(settings), path)
