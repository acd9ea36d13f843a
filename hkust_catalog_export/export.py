"""
Export parsed courses to JSON, slim JSON, CSV and ICS.
"""
from __future__ import annotations

import csv
import hashlib
import json
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Sequence

import icalendar
import pytz

from .model import Course, Schedule, Section
from .slim import slim_course

# Hong Kong timezone for calendar
TZ_HK = "Asia/Hong_Kong"

FORMATS = ("json", "slim", "csv", "ics")

CSV_FIELDS = [
    "subject", "course", "name", "units", "code", "number", "days",
    "start_time", "end_time", "from_date", "to_date", "venue",
    "instructors", "assistants", "quota", "enroll", "available", "waitlist",
]


def courses_to_dict(courses_by_subject: Mapping[str, Sequence[Course]]) -> Dict[str, List[Dict]]:
    return {subject: [c.to_dict() for c in courses] for subject, courses in courses_by_subject.items()}


def courses_to_slim_dict(courses_by_subject: Mapping[str, Sequence[Course]]) -> Dict[str, List[Dict]]:
    return {
        subject: [slim_course(c).to_dict() for c in courses]
        for subject, courses in courses_by_subject.items()
    }


def _write_json(data, out_path: str | Path) -> None:
    Path(out_path).write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def export_json(courses_by_subject: Mapping[str, Sequence[Course]], out_path: str | Path) -> None:
    """Write ``{subject: [course, ...]}`` with every parsed field."""
    _write_json(courses_to_dict(courses_by_subject), out_path)


def export_slim_json(courses_by_subject: Mapping[str, Sequence[Course]], out_path: str | Path) -> None:
    """Write ``{subject: [slim course, ...]}``."""
    _write_json(courses_to_slim_dict(courses_by_subject), out_path)


def _csv_rows(courses: Iterable[Course]) -> Iterable[Dict]:
    for c in courses:
        for s in c.sections:
            first = s.schedules[0] if s.schedules else None
            yield {
                "subject": c.subject,
                "course": c.course,
                "name": c.name,
                "units": c.units,
                "code": s.code,
                "number": s.number,
                "days": " ".join(sch.day_of_week.name[:3].title() for sch in s.schedules),
                "start_time": first.start_time.strftime("%H:%M") if first else "",
                "end_time": first.end_time.strftime("%H:%M") if first else "",
                "from_date": first.from_date.isoformat() if first and first.from_date else "",
                "to_date": first.to_date.isoformat() if first and first.to_date else "",
                "venue": s.venue,
                "instructors": "; ".join(s.instructors),
                "assistants": "; ".join(s.assistants),
                "quota": s.quota,
                "enroll": s.enroll,
                "available": s.available,
                "waitlist": s.waitlist,
            }


def export_csv(courses: Sequence[Course], out_path: str | Path) -> None:
    """Export one CSV row per section."""
    with open(out_path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=CSV_FIELDS, extrasaction="ignore")
        w.writeheader()
        w.writerows(_csv_rows(courses))


def _first_date_for_weekday(start: date, weekday: int) -> date:
    """First date on/after start falling on the given weekday (Monday = 0)."""
    offset = (weekday - start.weekday()) % 7
    return start + timedelta(days=offset)


def _schedule_event(
    course: Course,
    section: Section,
    schedule: Schedule,
    term_start: date | None,
    term_end: date | None,
) -> icalendar.Event | None:
    start_bound = schedule.from_date or term_start
    end_bound = schedule.to_date or term_end
    if start_bound is None or end_bound is None:
        return None

    first_day = _first_date_for_weekday(start_bound, schedule.day_of_week.value)
    if first_day > end_bound:
        return None
    start = datetime.combine(first_day, schedule.start_time)
    end = datetime.combine(first_day, schedule.end_time)

    summary = f"{course.subject}{course.course}-{section.code}"
    event = icalendar.Event()

    # Deterministic UID
    uid_string = f"{summary}-{section.number}-{first_day.isoformat()}-{start.isoformat()}"
    uid_hash = hashlib.md5(uid_string.encode("utf-8")).hexdigest()
    event.add("uid", f"{uid_hash}@hkust-catalog-export")

    event.add("summary", summary)
    event.add("description", f"Instructors: {', '.join(section.instructors)}\nCourse: {course.name}")
    event.add("location", section.venue)

    hk_tz = pytz.timezone(TZ_HK)
    event.add("dtstart", hk_tz.localize(start))
    event.add("dtend", hk_tz.localize(end))
    event.add("dtstamp", datetime.now(timezone.utc))

    until_dt = datetime.combine(end_bound, datetime.min.time()).replace(
        hour=23, minute=59, second=59, tzinfo=timezone.utc
    )
    event.add("rrule", {"freq": "weekly", "until": until_dt})
    return event


def export_ics(
    courses: Sequence[Course],
    out_path: str | Path,
    term_start: date | None = None,
    term_end: date | None = None,
) -> int:
    """
    Export every section meeting as a weekly recurring event.

    Date-ranged meetings use their own dates; whole-semester meetings need
    term_start/term_end and are skipped without them. Returns the event count.
    """
    cal = icalendar.Calendar()
    cal.add("prodid", "-//HKUST Catalog Export//EN")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("x-wr-calname", "HKUST Class Schedule")
    cal.add("x-wr-timezone", TZ_HK)

    count = 0
    for c in courses:
        for s in c.sections:
            for sch in s.schedules:
                event = _schedule_event(c, s, sch, term_start, term_end)
                if event is None:
                    continue
                cal.add_component(event)
                count += 1

    Path(out_path).write_text(cal.to_ical().decode("utf-8"), encoding="utf-8")
    return count


def export(
    courses_by_subject: Mapping[str, Sequence[Course]],
    out_path: str | Path,
    fmt: str,
    term_start: date | None = None,
    term_end: date | None = None,
) -> None:
    """Export to the given format: json, slim, csv, or ics."""
    fmt = fmt.lower()
    courses = [c for subject_courses in courses_by_subject.values() for c in subject_courses]
    if fmt == "json":
        export_json(courses_by_subject, out_path)
    elif fmt == "slim":
        export_slim_json(courses_by_subject, out_path)
    elif fmt == "csv":
        export_csv(courses, out_path)
    elif fmt == "ics":
        export_ics(courses, out_path, term_start, term_end)
    else:
        raise ValueError(f"Unsupported format: {fmt}. Use json, slim, csv, or ics.")
