"""
Compact view of a Course for the ``<term>-slim.json`` file.

Keeps what a timetable planner needs: identity, schedules, staff, venue and
the four occupancy numbers as one (quota, enroll, available, waitlist) tuple.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from .model import Course, Schedule, Section


@dataclass(frozen=True)
class SlimSection:
    code: str
    number: int
    schedules: Tuple[Schedule, ...]
    instructors: Tuple[str, ...]
    assistants: Tuple[str, ...]
    venue: str
    quota: Tuple[int, int, int, int]

    def to_dict(self) -> Dict:
        return {
            "code": self.code,
            "number": self.number,
            "schedules": [s.to_dict() for s in self.schedules],
            "instructors": list(self.instructors),
            "assistants": list(self.assistants),
            "venue": self.venue,
            "quota": list(self.quota),
        }


@dataclass(frozen=True)
class SlimCourse:
    subject: str
    course: str
    name: str
    sections: Tuple[SlimSection, ...]

    def to_dict(self) -> Dict:
        return {
            "subject": self.subject,
            "course": self.course,
            "name": self.name,
            "sections": [s.to_dict() for s in self.sections],
        }


def slim_section(section: Section) -> SlimSection:
    return SlimSection(
        code=section.code,
        number=section.number,
        schedules=section.schedules,
        instructors=section.instructors,
        assistants=section.assistants,
        venue=section.venue,
        quota=(section.quota, section.enroll, section.available, section.waitlist),
    )


def slim_course(course: Course) -> SlimCourse:
    return SlimCourse(
        subject=course.subject,
        course=course.course,
        name=course.name,
        sections=tuple(slim_section(s) for s in course.sections),
    )
