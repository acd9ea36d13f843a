"""
Micro-grammars for the pieces of an HKUST class schedule page.

Each parser takes either a plain string (heading, section code, date & time)
or a single table cell (people, remarks, quota) and knows nothing about the
others. The page and table walkers in ``catalog_html`` stitch them together.

Formats handled here:
- heading:    "ACCT 1010 - Accounting, Business and Society (3 units)"
- section:    "L1 (1023)"
- date/time:  "WeFr 04:30PM - 05:50PM"
              "17-JUN-2024 - 12-JUL-2024<br>MoWeFr 02:00PM - 05:50PM"
              "TBA"
- quota:      "120", or "<span>68</span><div class="quotadetail">...</div>"
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, time
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple, Union

from bs4 import NavigableString, Tag  # type: ignore[import]
from bs4.element import Comment  # type: ignore[import]

from .errors import (
    CellFormatError,
    HeadingFormatError,
    ScheduleFormatError,
    SectionFormatError,
)
from .model import DayOfWeek, Heading, QuotaDetail, Schedule, SectionId


# ──────────────────────────────────────────────────────────────────
#  Lookup tables
# ──────────────────────────────────────────────────────────────────

DAY_CODES: Mapping[str, DayOfWeek] = MappingProxyType({
    "Mo": DayOfWeek.MONDAY,
    "Tu": DayOfWeek.TUESDAY,
    "We": DayOfWeek.WEDNESDAY,
    "Th": DayOfWeek.THURSDAY,
    "Fr": DayOfWeek.FRIDAY,
    "Sa": DayOfWeek.SATURDAY,
    "Su": DayOfWeek.SUNDAY,
})

# Fixed English month names; the ambient locale is never consulted.
MONTHS: Mapping[str, int] = MappingProxyType({
    "Jan": 1, "Feb": 2, "Mar": 3, "Apr": 4, "May": 5, "Jun": 6,
    "Jul": 7, "Aug": 8, "Sep": 9, "Oct": 10, "Nov": 11, "Dec": 12,
})

TBA = "TBA"

_HEADING_RE = re.compile(r"(\w+)\s+(\w+)\s+-\s+(.+)\s+\(([\d.]+)\s+units?\)")
_SECTION_RE = re.compile(r"(\w+)\s+\((\d+)\)")
_MEETING_RE = re.compile(
    r"^([A-Za-z]+)\s+(\d{1,2}:\d{2}\s*[AP]M)\s*-\s*(\d{1,2}:\d{2}\s*[AP]M)$",
    re.I,
)
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*([AP]M)$", re.I)
_DATE_RANGE_RE = re.compile(r"^(\S+)\s+-\s+(\S+)$")
_DATE_RE = re.compile(r"^(\d{1,2})-([A-Za-z]{3})-(\d{4})$")


# ──────────────────────────────────────────────────────────────────
#  Text helpers
# ──────────────────────────────────────────────────────────────────

def _to_title_case(text: str) -> str:
    """'JUN' -> 'Jun', '17-JUN-2024' -> '17-Jun-2024'."""
    return re.sub(r"[A-Za-z]+", lambda m: m.group(0).capitalize(), text)


def cell_lines(el: Tag | None) -> List[str]:
    """
    Text of an element split into lines.

    ``<br>`` tags and raw newlines both end a line; each line is trimmed and
    blank lines are dropped.
    """
    if el is None:
        return []
    parts: List[str] = []
    for node in el.descendants:
        if isinstance(node, Comment):
            continue
        if isinstance(node, NavigableString):
            parts.append(str(node))
        elif isinstance(node, Tag) and node.name == "br":
            parts.append("\n")
    text = "".join(parts).replace("\xa0", " ")
    return [" ".join(line.split()) for line in text.splitlines() if line.strip()]


def cell_text(el: Tag | None) -> str:
    """Whitespace-collapsed text of an element, lines joined by a space."""
    return " ".join(cell_lines(el))


def parse_count(text: str, column: str) -> int:
    try:
        return int(text.strip())
    except ValueError:
        raise CellFormatError(text, column) from None


# ──────────────────────────────────────────────────────────────────
#  Heading and section code
# ──────────────────────────────────────────────────────────────────

def parse_heading(text: str) -> Heading:
    """
    Parse a course heading, e.g.
    'ACCT 1010 - Accounting, Business and Society (3 units)'
    -> Heading('ACCT', '1010', 'Accounting, Business and Society', 3).
    """
    m = _HEADING_RE.search(text)
    if not m:
        raise HeadingFormatError(text)
    subject, course, name, units = m.groups()
    try:
        value = float(units)
    except ValueError:
        raise HeadingFormatError(text) from None
    # "3" stays an int, "1.5" or "3.0" stays a float
    return Heading(
        subject=subject,
        course=course,
        name=name,
        units=value if "." in units else int(value),
    )


def parse_section_id(text: str) -> SectionId:
    """'L1 (1023)' -> SectionId('L1', 1023)."""
    m = _SECTION_RE.search(text)
    if not m:
        raise SectionFormatError(text)
    return SectionId(code=m.group(1), number=int(m.group(2)))


# ──────────────────────────────────────────────────────────────────
#  Date & Time
# ──────────────────────────────────────────────────────────────────

def parse_day_codes(text: str) -> List[DayOfWeek]:
    """'MoWeFr' -> [MONDAY, WEDNESDAY, FRIDAY]."""
    if not text or len(text) % 2:
        raise ScheduleFormatError(text)
    days: List[DayOfWeek] = []
    for i in range(0, len(text), 2):
        day = DAY_CODES.get(text[i:i + 2])
        if day is None:
            raise ScheduleFormatError(text)
        days.append(day)
    return days


def parse_clock(text: str) -> time:
    """'04:30PM' -> time(16, 30). 12AM is midnight, 12PM is noon."""
    m = _TIME_RE.match(text.strip())
    if not m:
        raise ScheduleFormatError(text)
    hour, minute, ap = int(m.group(1)), int(m.group(2)), m.group(3).upper()
    if not 1 <= hour <= 12 or minute > 59:
        raise ScheduleFormatError(text)
    if ap == "AM":
        if hour == 12:
            hour = 0
    elif hour != 12:
        hour += 12
    return time(hour, minute)


def parse_catalog_date(text: str) -> date:
    """'17-JUN-2024' -> date(2024, 6, 17). Month names are matched case-insensitively."""
    m = _DATE_RE.match(_to_title_case(text.strip()))
    if not m:
        raise ScheduleFormatError(text)
    month = MONTHS.get(m.group(2))
    if month is None:
        raise ScheduleFormatError(text)
    try:
        return date(int(m.group(3)), month, int(m.group(1)))
    except ValueError:
        raise ScheduleFormatError(text) from None


def parse_schedule(text: str) -> Tuple[Schedule, ...]:
    """
    Parse a Date & Time cell (lines separated by '\\n').

    Whole semester::

        WeFr 04:30PM - 05:50PM

    Date range::

        17-JUN-2024 - 12-JUL-2024
        MoWeFr 02:00PM - 05:50PM

    One Schedule per day code. 'TBA' gives an empty tuple; anything else that
    does not fit raises ScheduleFormatError.
    """
    lines = [" ".join(line.split()) for line in text.splitlines() if line.strip()]
    if lines == [TBA]:
        return ()

    from_date: Optional[date] = None
    to_date: Optional[date] = None
    if len(lines) == 2:
        m = _DATE_RANGE_RE.match(lines[0])
        if not m:
            raise ScheduleFormatError(text)
        from_date = parse_catalog_date(m.group(1))
        to_date = parse_catalog_date(m.group(2))
        meeting = lines[1]
    elif len(lines) == 1:
        meeting = lines[0]
    else:
        raise ScheduleFormatError(text)

    m = _MEETING_RE.match(meeting)
    if not m:
        raise ScheduleFormatError(text)
    days = parse_day_codes(m.group(1))
    start = parse_clock(m.group(2))
    end = parse_clock(m.group(3))

    return tuple(
        Schedule(
            day_of_week=day,
            start_time=start,
            end_time=end,
            from_date=from_date,
            to_date=to_date,
        )
        for day in days
    )


# ──────────────────────────────────────────────────────────────────
#  People and remarks
# ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class LinkedPeople:
    """Instructor/TA cell with one link per person."""

    names: Tuple[str, ...]


@dataclass(frozen=True)
class PlainPeople:
    """Cell with no person links, e.g. 'Staff' or 'TBA'."""

    text: str

    @property
    def names(self) -> Tuple[str, ...]:
        return (self.text,)


PeopleCell = Union[LinkedPeople, PlainPeople]


def classify_people(cell: Tag) -> PeopleCell:
    links = cell.find_all("a")
    if links:
        names = (cell_text(a) for a in links)
        return LinkedPeople(tuple(n for n in names if n))
    return PlainPeople(cell_text(cell))


def parse_people(cell: Tag) -> Tuple[str, ...]:
    """
    Names in an Instructor or TA/IA/GTA cell:

        <a href=".../instructor/DAI, Ting">DAI, Ting</a><br><a ...>DENG, Jin</a>

    -> ('DAI, Ting', 'DENG, Jin'). A cell without links gives its text.
    """
    return classify_people(cell).names


def parse_remarks(cell: Tag) -> Tuple[str, ...]:
    """
    Remarks from every ``.popup`` in the cell, in page order::

        > For MSc(ACCT) students only
        > Add/Drop Deadline : 08-Apr-2024

    -> ('For MSc(ACCT) students only', 'Add/Drop Deadline : 08-Apr-2024')
    """
    remarks: List[str] = []
    for popup in cell.select(".popup"):
        text = popup.get_text()
        for piece in re.split(r"\s*>\s*", text):
            piece = piece.strip()
            if piece:
                remarks.append(piece)
    return tuple(remarks)


# ──────────────────────────────────────────────────────────────────
#  Quota
# ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PlainQuota:
    value: int

    @property
    def detail(self) -> None:
        return None


@dataclass(frozen=True)
class DetailedQuota:
    """Quota shown with a hover breakdown by category."""

    value: int
    detail: Mapping[str, QuotaDetail]


QuotaCell = Union[PlainQuota, DetailedQuota]


def parse_quota_detail(el: Tag | None) -> Optional[Mapping[str, QuotaDetail]]:
    """
    Parse a quota breakdown::

        Quota/Enrol/Avail
        Digital MBA: 17/14/3
        MBA: 27/25/2

    -> {'Digital MBA': QuotaDetail(17, 14, 3), 'MBA': QuotaDetail(27, 25, 2)}.
    Returns None when there is no breakdown element.
    """
    if el is None:
        return None
    detail = {}
    for line in cell_lines(el)[1:]:
        category, sep, numbers = line.rpartition(":")
        parts = numbers.split("/")
        if not sep or len(parts) != 3:
            raise CellFormatError(line, "quota detail")
        quota, enroll, available = (parse_count(p, "quota detail") for p in parts)
        detail[category.strip()] = QuotaDetail(quota=quota, enroll=enroll, available=available)
    return MappingProxyType(detail)


def parse_quota(cell: Tag) -> QuotaCell:
    detail_el = cell.select_one(".quotadetail")
    if detail_el is None:
        return PlainQuota(parse_count(cell_text(cell), "quota"))
    label = cell.find("span", recursive=False)
    value = parse_count(cell_text(label), "quota")
    return DetailedQuota(value=value, detail=parse_quota_detail(detail_el))
