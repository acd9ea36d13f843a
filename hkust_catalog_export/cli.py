"""
Command-line interface: pull HKUST class schedule pages and export them.
"""
from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from . import __version__
from .catalog_fetch import FetchError, fetch_current_term, make_session
from .catalog_html import parse_page
from .export import FORMATS, export
from .logger import setup_logging
from .pipeline import DEFAULT_WORKERS, pull_term, run, update_term
from .storage import DEFAULT_DATA_DIR, Storage

log = logging.getLogger(__name__)


def _iso_date(text: str) -> date:
    try:
        return date.fromisoformat(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a YYYY-MM-DD date: {text!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hkust-catalog",
        description=(
            "Export the HKUST Class Schedule & Quota catalog to JSON / CSV / ICS.\n"
            "- --pull / --update / --run: fetch a whole term and write <term>.json and <term>-slim.json.\n"
            "- --html: parse one saved subject page."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--pull",
        action="store_true",
        help="Fetch every subject page of the term into DATA_DIR/<term>/.",
    )
    mode.add_argument(
        "--update",
        action="store_true",
        help="Parse the stored pages of the term into DATA_DIR/<term>.json and <term>-slim.json.",
    )
    mode.add_argument(
        "--run",
        action="store_true",
        help="--pull then --update.",
    )
    mode.add_argument(
        "--html",
        metavar="HTML_PATH",
        help="Parse a saved subject page and export it (see -o / -f).",
    )
    parser.add_argument(
        "--term",
        help="Term code, e.g. 2330. Default: the term the catalog currently shows.",
    )
    parser.add_argument(
        "--data-dir",
        default=str(DEFAULT_DATA_DIR),
        help=f"Directory for pulled pages and term JSON. Default: {DEFAULT_DATA_DIR}",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_WORKERS,
        help=f"Concurrent fetch/parse workers. Default: {DEFAULT_WORKERS}",
    )
    parser.add_argument(
        "--strict-schedules",
        action="store_true",
        help="Treat an unparseable Date & Time cell as an error instead of an empty schedule.",
    )
    parser.add_argument(
        "-o",
        "--output",
        default="hkust_catalog",
        help="(--html mode) Output path (without extension). Default: hkust_catalog",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default="json",
        help="(--html mode) Export format. Default: json",
    )
    parser.add_argument(
        "--term-start",
        metavar="YYYY-MM-DD",
        type=_iso_date,
        help="(ics format) First teaching day, used for meetings without their own date range.",
    )
    parser.add_argument(
        "--term-end",
        metavar="YYYY-MM-DD",
        type=_iso_date,
        help="(ics format) Last teaching day, used for meetings without their own date range.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def _export_html(args) -> int:
    html_path = Path(args.html)
    if not html_path.exists():
        print(f"Error: HTML file not found: {html_path}", file=sys.stderr)
        return 1
    page = parse_page(
        html_path.read_text(encoding="utf-8"),
        strict_schedules=args.strict_schedules,
    )
    for failure in page.failures:
        log.error("%s: %s", html_path.name, failure)

    ext = ".json" if args.format == "slim" else f".{args.format}"
    out_path = Path(args.output) if Path(args.output).suffix else Path(args.output + ext)
    export({html_path.stem: list(page.courses)}, out_path, args.format, args.term_start, args.term_end)
    print(f"Exported {len(page.courses)} course(s) to {out_path}")
    return 1 if page.failures else 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if args.workers < 1:
        parser.error("--workers must be at least 1")

    try:
        if args.html:
            return _export_html(args)

        storage = Storage(args.data_dir)
        if args.run:
            result = run(storage, args.term, args.workers, args.strict_schedules)
        elif args.pull:
            session = make_session()
            term = args.term or fetch_current_term(session)
            pull_term(term, storage, workers=args.workers, session=session)
            return 0
        elif args.update:
            if not args.term:
                print("Error: --update requires --term (e.g. --term 2330).", file=sys.stderr)
                return 1
            result = update_term(args.term, storage, args.workers, args.strict_schedules)
        else:
            print(
                "No mode specified. Use --pull, --update, --run, or --html for a saved page.",
                file=sys.stderr,
            )
            return 1
    except (FetchError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(
        f"Exported {result.course_count} course(s) of term {result.term} to "
        f"{storage.term_json_path(result.term)}"
    )
    return 1 if result.failure_count else 0


if __name__ == "__main__":
    sys.exit(main())
