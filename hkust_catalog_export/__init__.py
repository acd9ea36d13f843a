"""Parse the HKUST Class Schedule & Quota catalog into course records."""

__version__ = "0.1.0"

from .catalog_html import parse_course, parse_courses, parse_page, segment_page
from .errors import (
    CatalogParseError,
    CellFormatError,
    HeadingFormatError,
    ScheduleFormatError,
    SectionFormatError,
)
from .model import (
    Attribute,
    Course,
    CourseFailure,
    DayOfWeek,
    ParsedPage,
    QuotaDetail,
    Schedule,
    Section,
)
from .slim import SlimCourse, SlimSection, slim_course
