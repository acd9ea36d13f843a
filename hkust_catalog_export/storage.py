"""
On-disk layout of pulled pages and parsed terms::

    data/
      2330/ACCT.html      raw subject pages
      2330/COMP.html
      2330.json           {subject: [course, ...]}
      2330-slim.json      same, slim courses
"""
from __future__ import annotations

from pathlib import Path
from typing import List

DEFAULT_DATA_DIR = Path("data")


class Storage:
    def __init__(self, data_dir: str | Path = DEFAULT_DATA_DIR) -> None:
        self.data_dir = Path(data_dir)

    def term_dir(self, term: str) -> Path:
        return self.data_dir / term

    def page_path(self, term: str, subject: str) -> Path:
        return self.term_dir(term) / f"{subject}.html"

    def term_json_path(self, term: str) -> Path:
        return self.data_dir / f"{term}.json"

    def term_slim_json_path(self, term: str) -> Path:
        return self.data_dir / f"{term}-slim.json"

    def save_page(self, term: str, subject: str, html: str) -> Path:
        path = self.page_path(term, subject)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html, encoding="utf-8")
        return path

    def load_page(self, term: str, subject: str) -> str:
        return self.page_path(term, subject).read_text(encoding="utf-8")

    def list_stored_subjects(self, term: str) -> List[str]:
        term_dir = self.term_dir(term)
        if not term_dir.is_dir():
            return []
        return sorted(p.stem for p in term_dir.glob("*.html"))
