"""
Fetch HKUST Class Schedule & Quota pages.

The site is public, plain HTML:
- ``BASE_URL/`` redirects to the current term, e.g. ``/wcq/cgi-bin/2330/``
- ``BASE_URL/<term>/`` lists the subjects as ``.depts > a`` links
- each subject link is one page with every course of that subject
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup  # type: ignore[import]

log = logging.getLogger(__name__)

BASE_URL = "https://w5.ab.ust.hk/wcq/cgi-bin"
DEFAULT_TIMEOUT = 30
USER_AGENT = "hkust-catalog-export"


class FetchError(RuntimeError):
    """A catalog page could not be downloaded."""


@dataclass(frozen=True)
class Subject:
    name: str  # "ACCT"
    term: str  # "2330"
    url: str


@dataclass(frozen=True)
class SubjectPage:
    name: str
    term: str
    html: str


def make_session() -> requests.Session:
    session = requests.Session()
    session.headers["User-Agent"] = USER_AGENT
    return session


def _get(session: requests.Session, url: str, **kwargs) -> requests.Response:
    try:
        resp = session.get(url, timeout=DEFAULT_TIMEOUT, **kwargs)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"GET {url} failed: {e}") from e
    return resp


def term_from_path(path: str) -> str:
    """'/wcq/cgi-bin/2330/' -> '2330'."""
    parts = path.split("/")
    if len(parts) < 4 or not parts[3]:
        raise FetchError(f"No term code in path: {path!r}")
    return parts[3]


def fetch_current_term(session: Optional[requests.Session] = None) -> str:
    """Term code the catalog currently redirects to, e.g. '2330'."""
    session = session or make_session()
    resp = _get(session, f"{BASE_URL}/", allow_redirects=False)
    location = resp.headers.get("Location")
    if not location:
        raise FetchError(f"{BASE_URL}/ did not redirect to a term page")
    return term_from_path(urlparse(urljoin(BASE_URL + "/", location)).path)


def parse_subjects(html: str, term: str, base_url: str = BASE_URL) -> List[Subject]:
    soup = BeautifulSoup(html, "html.parser")
    subjects: List[Subject] = []
    for a in soup.select(".depts > a"):
        href = a.get("href")
        name = a.get_text(strip=True)
        if not href or not name:
            continue
        subjects.append(Subject(name=name, term=term, url=urljoin(base_url + "/", href)))
    return subjects


def fetch_subjects(term: str, session: Optional[requests.Session] = None) -> List[Subject]:
    session = session or make_session()
    resp = _get(session, f"{BASE_URL}/{term}/")
    subjects = parse_subjects(resp.text, term)
    log.debug("Term %s: %d subjects", term, len(subjects))
    return subjects


def fetch_subject_page(subject: Subject, session: Optional[requests.Session] = None) -> SubjectPage:
    session = session or make_session()
    resp = _get(session, subject.url)
    # catalog pages are UTF-8 whether or not the Content-Type says so
    html = resp.content.decode("utf-8")
    return SubjectPage(name=subject.name, term=subject.term, html=html)
