"""
Records produced by the catalog parser.

All records are frozen: they are built once per parse call and handed to the
caller. ``to_dict()`` gives the JSON shape written by the exporter; optional
fields that are absent are left out instead of being written as empty values.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple


class DayOfWeek(Enum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


@dataclass(frozen=True)
class Schedule:
    """One weekly meeting: a day of week plus time of day, optionally bounded by dates."""

    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    from_date: Optional[date] = None
    to_date: Optional[date] = None

    def to_dict(self) -> Dict:
        data: Dict = {}
        if self.from_date is not None:
            data["fromDate"] = self.from_date.isoformat()
        if self.to_date is not None:
            data["toDate"] = self.to_date.isoformat()
        data["dayOfWeek"] = self.day_of_week.name
        data["startTime"] = self.start_time.isoformat()
        data["endTime"] = self.end_time.isoformat()
        return data


@dataclass(frozen=True)
class QuotaDetail:
    quota: int
    enroll: int
    available: int

    def to_dict(self) -> Dict[str, int]:
        return {"quota": self.quota, "enroll": self.enroll, "available": self.available}


@dataclass(frozen=True)
class SectionId:
    code: str    # "L1", "LA1", "T2"
    number: int  # 1023


@dataclass(frozen=True)
class Section:
    code: str
    number: int
    venue: str
    instructors: Tuple[str, ...]
    assistants: Tuple[str, ...]
    schedules: Tuple[Schedule, ...]
    quota: int
    enroll: int
    available: int
    waitlist: int
    quota_detail: Optional[Mapping[str, QuotaDetail]] = field(default=None, hash=False)
    remarks: Tuple[str, ...] = ()

    def to_dict(self) -> Dict:
        data: Dict = {
            "code": self.code,
            "number": self.number,
            "remarks": list(self.remarks),
            "instructors": list(self.instructors),
            "assistants": list(self.assistants),
            "venue": self.venue,
            "schedules": [s.to_dict() for s in self.schedules],
            "quota": self.quota,
            "enroll": self.enroll,
            "available": self.available,
            "waitlist": self.waitlist,
        }
        if self.quota_detail is not None:
            data["quotaDetail"] = {k: v.to_dict() for k, v in self.quota_detail.items()}
        return data


@dataclass(frozen=True)
class Attribute:
    title: str        # "[CC22]"
    description: str  # "Students admitted from 2022"

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "description": self.description}


@dataclass(frozen=True)
class Heading:
    subject: str
    course: str
    name: str
    units: float


@dataclass(frozen=True)
class Course:
    """
    One catalog entry, e.g. ACCT 1010 with its info table, attribute badges
    and offered sections.
    """

    subject: str
    course: str
    name: str
    units: float
    info: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}), hash=False)
    attrs: Tuple[Attribute, ...] = ()
    sections: Tuple[Section, ...] = ()

    @property
    def code(self) -> str:
        return f"{self.subject} {self.course}"

    def to_dict(self) -> Dict:
        return {
            "subject": self.subject,
            "course": self.course,
            "name": self.name,
            "units": self.units,
            "info": dict(self.info),
            "attrs": [a.to_dict() for a in self.attrs],
            "sections": [s.to_dict() for s in self.sections],
        }


@dataclass(frozen=True)
class CourseFailure:
    """A course block that could not be parsed; ``index`` is its position on the page."""

    index: int
    error: Exception

    def __str__(self) -> str:
        return f"course block #{self.index}: {self.error}"


@dataclass(frozen=True)
class ParsedPage:
    courses: Tuple[Course, ...]
    failures: Tuple[CourseFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures
