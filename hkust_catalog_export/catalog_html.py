"""
Parse an HKUST "Class Schedule & Quota" subject page into Course records.

The page (one per subject, e.g. .../wcq/cgi-bin/2330/subject/ACCT) holds one
``div.course`` per catalog entry:

- ``h2``: "ACCT 1010 - Accounting, Business and Society (3 units)"
- ``.courseattr``: the COURSE INFO popup, a table of (th label, td value) rows
- ``.attrword``: attribute badges, a ``<span>`` code plus a ``<div>`` description
- ``table.sections``: one row per section, columns
  Section | Date & Time | Room | Instructor | TA/IA/GTA | Quota | Enrol | Avail | Wait | Remarks

Sections meeting at several times use ``rowspan`` on the shared cells; the
continuation rows only carry Date & Time, Room and Instructor.
"""
from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from bs4 import BeautifulSoup, NavigableString, Tag  # type: ignore[import]
from bs4.element import Comment  # type: ignore[import]

from .cells import (
    cell_lines,
    cell_text,
    parse_count,
    parse_heading,
    parse_people,
    parse_quota,
    parse_remarks,
    parse_schedule,
    parse_section_id,
)
from .errors import CatalogParseError, HeadingFormatError, ScheduleFormatError, SectionFormatError
from .model import Attribute, Course, CourseFailure, ParsedPage, Schedule, Section

log = logging.getLogger(__name__)

COL_SECTION = "Section"
COL_DATETIME = "Date & Time"
COL_ROOM = "Room"
COL_INSTRUCTOR = "Instructor"
COL_ASSISTANT = "TA/IA/GTA"
COL_QUOTA = "Quota"
COL_ENROL = "Enrol"
COL_AVAIL = "Avail"
COL_WAIT = "Wait"
COL_REMARKS = "Remarks"


# ──────────────────────────────────────────────────────────────────
#  Table helpers
# ──────────────────────────────────────────────────────────────────

def _top_level_rows(el: Tag) -> List[Tag]:
    """Rows of ``el`` that are not rows of a table nested inside another row."""
    rows = []
    for tr in el.find_all("tr"):
        outer = tr.find_parent("tr")
        if outer is None or not any(p is el for p in outer.parents):
            rows.append(tr)
    return rows


def _row_cells(tr: Tag) -> List[Tag]:
    return tr.find_all(["td", "th"], recursive=False)


def parse_table_list(table: Tag) -> str:
    """
    Flatten a table used as a numbered list into lines::

        <tr><td>1.</td><td>Describe the background ...</td></tr>
        <tr><td>2.</td><td>Explain the objectives ...</td></tr>

    -> "1. Describe the background ...\\n2. Explain the objectives ..."
    """
    lines = []
    for tr in _top_level_rows(table):
        values = [cell_text(c) for c in _row_cells(tr)]
        lines.append(" ".join(values))
    return "\n".join(lines)


def _grid_rows(table: Tag) -> Iterator[Tuple[int, List[Tag]]]:
    """
    Yield (row index, cells) for every data row, filling in cells that a
    ``rowspan`` above carries down into the row.
    """
    carried: Dict[int, Tuple[Tag, int]] = {}  # col -> (cell, rows remaining)
    data_idx = 0
    for tr in _top_level_rows(table):
        cells = tr.find_all("td", recursive=False)
        if not cells:
            continue  # header row
        row: List[Tag] = []
        col = 0
        it = iter(cells)
        pending = next(it, None)
        while pending is not None or col in carried:
            if col in carried:
                cell, remaining = carried[col]
                row.append(cell)
                if remaining <= 1:
                    del carried[col]
                else:
                    carried[col] = (cell, remaining - 1)
            else:
                cell = pending
                row.append(cell)
                try:
                    rowspan = int(cell.get("rowspan", 1))
                except ValueError:
                    rowspan = 1
                if rowspan > 1:
                    carried[col] = (cell, rowspan - 1)
                pending = next(it, None)
            col += 1
        yield data_idx, row
        data_idx += 1


def _header_keys(table: Tag) -> List[str]:
    for tr in _top_level_rows(table):
        ths = tr.find_all("th", recursive=False)
        if ths:
            return [cell_text(th) for th in ths]
    return []


# ──────────────────────────────────────────────────────────────────
#  Section table
# ──────────────────────────────────────────────────────────────────

def _cell(row: Mapping[str, Tag], key: str) -> Tag:
    cell = row.get(key)
    if cell is None:
        # Missing column: behave like an empty cell.
        return BeautifulSoup("<td></td>", "html.parser").td
    return cell


def _parse_schedules(cell: Tag, row_idx: int, strict: bool) -> Tuple[Schedule, ...]:
    text = "\n".join(cell_lines(cell))
    try:
        return parse_schedule(text)
    except ScheduleFormatError:
        if strict:
            raise
        log.warning("Row %d: unparseable Date & Time %r, no schedules kept", row_idx, text)
        return ()


def parse_section_row(row: Mapping[str, Tag], row_idx: int = 0, strict_schedules: bool = False) -> Section:
    """Build one Section from a row keyed by column header."""
    raw_id = cell_text(_cell(row, COL_SECTION))
    try:
        section_id = parse_section_id(raw_id)
    except SectionFormatError as e:
        raise SectionFormatError(e.raw, row=row_idx) from e

    quota = parse_quota(_cell(row, COL_QUOTA))

    return Section(
        code=section_id.code,
        number=section_id.number,
        venue=cell_text(_cell(row, COL_ROOM)),
        instructors=parse_people(_cell(row, COL_INSTRUCTOR)),
        assistants=parse_people(_cell(row, COL_ASSISTANT)),
        schedules=_parse_schedules(_cell(row, COL_DATETIME), row_idx, strict_schedules),
        quota=quota.value,
        enroll=parse_count(cell_text(_cell(row, COL_ENROL)), COL_ENROL),
        available=parse_count(cell_text(_cell(row, COL_AVAIL)), COL_AVAIL),
        waitlist=parse_count(cell_text(_cell(row, COL_WAIT)), COL_WAIT),
        quota_detail=quota.detail,
        remarks=parse_remarks(_cell(row, COL_REMARKS)),
    )


def parse_section_table(table: Optional[Tag], strict_schedules: bool = False) -> Tuple[Section, ...]:
    """
    Convert a ``table.sections`` element into Sections, one per table row.

    A course with no section table (not offered yet) has no sections.
    """
    if table is None:
        return ()
    keys = _header_keys(table)
    sections = []
    for row_idx, cells in _grid_rows(table):
        row = dict(zip(keys, cells))
        sections.append(parse_section_row(row, row_idx, strict_schedules))
    return tuple(sections)


# ──────────────────────────────────────────────────────────────────
#  Course block
# ──────────────────────────────────────────────────────────────────

def _info_key(label: str) -> str:
    """'PRE-REQUISITE' -> 'pre-requisite', 'Intended Learning Outcomes' -> 'intended-learning-outcomes'."""
    return re.sub(r"\s+", "-", label.strip().lower())


def parse_info_entry(td: Tag) -> str:
    """
    Text of one COURSE INFO value cell.

    Direct children are taken in order: nested tables become numbered lines
    (see parse_table_list), everything else its trimmed text. Blank pieces are
    skipped and the rest joined with newlines.
    """
    parts = []
    for child in td.children:
        if isinstance(child, Tag) and child.name == "table":
            parts.append(parse_table_list(child))
            continue
        if isinstance(child, Tag):
            text = child.get_text()
        elif isinstance(child, NavigableString) and not isinstance(child, Comment):
            text = str(child)
        else:
            continue
        if text.strip():
            parts.append(text.strip())
    return "\n".join(parts)


def parse_info(info_el: Optional[Tag]) -> Mapping[str, str]:
    """
    Parse the COURSE INFO table into an ordered mapping, e.g.::

        ATTRIBUTES      Common Core (SA) for 36-credit program
        PRE-REQUISITE   a passing letter grade in LANG 1401 OR ...
        EXCLUSION       ACCT 2010, CORE 1310

    -> {'attributes': ..., 'pre-requisite': ..., 'exclusion': 'ACCT 2010, CORE 1310'}
    """
    info: Dict[str, str] = {}
    if info_el is None:
        return MappingProxyType(info)
    for tr in _top_level_rows(info_el):
        th = tr.find("th")
        td = tr.find("td")
        if th is None or td is None:
            continue
        info[_info_key(th.get_text())] = parse_info_entry(td)
    return MappingProxyType(info)


def parse_attribute(attr_el: Tag) -> Attribute:
    """'<span>[CC22]</span><div>Students admitted from 2022</div>' -> Attribute."""
    span = attr_el.find("span")
    div = attr_el.find("div")
    return Attribute(
        title=span.get_text() if span else "",
        description=div.get_text() if div else "",
    )


def parse_course(course_el: Tag, strict_schedules: bool = False) -> Course:
    """
    Convert one ``div.course`` element into a Course.

    Raises HeadingFormatError when the heading does not match, and lets
    section row errors through; no partially built Course is returned.
    """
    heading_el = course_el.find("h2")
    if heading_el is None:
        raise HeadingFormatError("", "Course block has no heading.")
    heading = parse_heading(heading_el.get_text())

    info = parse_info(course_el.select_one(".courseattr"))
    attrs = tuple(parse_attribute(el) for el in course_el.select(".attrword"))
    sections = parse_section_table(course_el.select_one(".sections"), strict_schedules)

    return Course(
        subject=heading.subject,
        course=heading.course,
        name=heading.name,
        units=heading.units,
        info=info,
        attrs=attrs,
        sections=sections,
    )


# ──────────────────────────────────────────────────────────────────
#  Public API
# ──────────────────────────────────────────────────────────────────

def segment_page(html: str) -> List[Tag]:
    """All course blocks of a subject page in page order; empty for an empty page."""
    soup = BeautifulSoup(html, "html.parser")
    return soup.select(".course")


def parse_page(html: str, strict_schedules: bool = False) -> ParsedPage:
    """
    Parse every course block of a subject page.

    A block that fails (bad heading, bad section row) is reported in
    ``failures`` and the remaining blocks are still parsed.
    """
    courses: List[Course] = []
    failures: List[CourseFailure] = []
    for idx, block in enumerate(segment_page(html)):
        try:
            courses.append(parse_course(block, strict_schedules))
        except CatalogParseError as e:
            failures.append(CourseFailure(index=idx, error=e))
    return ParsedPage(courses=tuple(courses), failures=tuple(failures))


def parse_courses(html: str, strict_schedules: bool = False) -> List[Course]:
    """Parse a subject page, raising the first unit error instead of collecting it."""
    return [parse_course(block, strict_schedules) for block in segment_page(html)]
