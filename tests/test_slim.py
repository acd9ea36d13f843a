from hkust_catalog_export.catalog_html import parse_page
from hkust_catalog_export.slim import slim_course


def test_slim_course(acct_page):
    course = parse_page(acct_page).courses[0]
    slim = slim_course(course)

    assert (slim.subject, slim.course, slim.name) == ("ACCT", "1010", "Accounting, Business and Society")
    assert len(slim.sections) == len(course.sections)

    lecture = slim.sections[0]
    assert (lecture.code, lecture.number) == ("L1", 1023)
    assert lecture.quota == (120, 93, 27, 0)
    assert lecture.schedules == course.sections[0].schedules
    assert lecture.instructors == ("DAI, Ting", "DENG, Jin", "YI, Yi")
    assert lecture.venue == "Lecture Theater A"


def test_slim_to_dict(acct_page):
    data = slim_course(parse_page(acct_page).courses[0]).to_dict()
    assert "units" not in data
    assert "info" not in data
    tutorial = data["sections"][2]
    assert tutorial["quota"] == [40, 38, 2, 5]
    assert tutorial["schedules"][0]["toDate"] == "2024-07-12"
    assert set(tutorial) == {"code", "number", "schedules", "instructors", "assistants", "venue", "quota"}


def test_slim_course_without_sections(acct_page):
    slim = slim_course(parse_page(acct_page).courses[1])
    assert slim.sections == ()
    assert slim.to_dict()["sections"] == []
