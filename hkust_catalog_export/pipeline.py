"""
Pull a term's subject pages to disk, then parse them into the term JSON files.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import requests

from .catalog_fetch import (
    Subject,
    SubjectPage,
    fetch_current_term,
    fetch_subject_page,
    fetch_subjects,
    make_session,
)
from .catalog_html import parse_page
from .export import export_json, export_slim_json
from .model import Course, CourseFailure, ParsedPage
from .storage import Storage

log = logging.getLogger(__name__)

DEFAULT_WORKERS = 8


@dataclass
class TermResult:
    term: str
    courses_by_subject: Dict[str, List[Course]] = field(default_factory=dict)
    failures: Dict[str, List[CourseFailure]] = field(default_factory=dict)

    @property
    def course_count(self) -> int:
        return sum(len(c) for c in self.courses_by_subject.values())

    @property
    def failure_count(self) -> int:
        return sum(len(f) for f in self.failures.values())


def pull_term(
    term: str,
    storage: Storage,
    workers: int = DEFAULT_WORKERS,
    session: Optional[requests.Session] = None,
    list_subjects: Optional[Callable[..., List[Subject]]] = None,
    fetch_page: Optional[Callable[..., SubjectPage]] = None,
) -> List[Subject]:
    """Fetch every subject page of ``term`` and store the raw HTML."""
    session = session or make_session()
    list_subjects = list_subjects or fetch_subjects
    fetch_page = fetch_page or fetch_subject_page
    log.info("Fetching subjects of term %s...", term)
    subjects = list_subjects(term, session)
    log.info("Fetched %d subjects.", len(subjects))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        pages = list(executor.map(lambda s: fetch_page(s, session), subjects))

    for page in pages:
        storage.save_page(page.term, page.name, page.html)
        log.debug("Pull: %s/%s", page.term, page.name)
    log.info("Stored %d pages of term %s.", len(pages), term)
    return subjects


def _parse_stored(storage: Storage, term: str, subject: str, strict_schedules: bool):
    html = storage.load_page(term, subject)
    return subject, parse_page(html, strict_schedules=strict_schedules)


def update_term(
    term: str,
    storage: Storage,
    workers: int = DEFAULT_WORKERS,
    strict_schedules: bool = False,
) -> TermResult:
    """
    Parse every stored page of ``term`` and write ``<term>.json`` and
    ``<term>-slim.json``. Course blocks that fail are logged and skipped.
    """
    subjects = storage.list_stored_subjects(term)
    if not subjects:
        raise ValueError(f"No stored pages for term {term} in {storage.data_dir}.")

    with ThreadPoolExecutor(max_workers=workers) as executor:
        parsed: List[Tuple[str, ParsedPage]] = list(
            executor.map(lambda s: _parse_stored(storage, term, s, strict_schedules), subjects)
        )

    result = TermResult(term=term)
    for subject, page in parsed:
        result.courses_by_subject[subject] = list(page.courses)
        if page.failures:
            result.failures[subject] = list(page.failures)
            for failure in page.failures:
                log.error("%s/%s: %s", term, subject, failure)

    export_json(result.courses_by_subject, storage.term_json_path(term))
    export_slim_json(result.courses_by_subject, storage.term_slim_json_path(term))
    log.info(
        "Update: %s (%d courses, %d failed blocks)",
        term, result.course_count, result.failure_count,
    )
    return result


def run(
    storage: Storage,
    term: str | None = None,
    workers: int = DEFAULT_WORKERS,
    strict_schedules: bool = False,
    session: Optional[requests.Session] = None,
) -> TermResult:
    """Pull then update one term (the current one when not given)."""
    session = session or make_session()
    if term is None:
        log.info("Fetching current term...")
        term = fetch_current_term(session)
        log.info("Current term: %s.", term)
    pull_term(term, storage, workers=workers, session=session)
    return update_term(term, storage, workers=workers, strict_schedules=strict_schedules)
