"""
tutorials/scrape.py

Command-line entry point for the college search-results scraper.

Run (default: first results page only)
--------------------------------------
python -m tutorials.scrape

Run (custom)
------------
python -m tutorials.scrape --first-page 1 --last-page 5 --out data/colleges.csv
"""

from __future__ import annotations

import argparse
from pathlib import Path

import requests

from tutorials.college_scraper import (
    BASE_URL,
    build_page_url,
    robots_allows,
    scrape_pages,
)


DEFAULT_OUT_PATH = Path("data/colleges.csv")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scrape college search results into a CSV.")
    parser.add_argument("--first-page", type=int, default=1, help="First results page (1-based).")
    parser.add_argument("--last-page", type=int, default=1, help="Last results page (inclusive).")
    parser.add_argument("--base-url", type=str, default=BASE_URL, help="Search results URL.")
    parser.add_argument(
        "--out",
        type=str,
        default=str(DEFAULT_OUT_PATH),
        help="Where to write the combined table.",
    )
    parser.add_argument(
        "--skip-robots",
        action="store_true",
        help="Do not consult robots.txt before scraping.",
    )
    args = parser.parse_args(argv)
    if args.last_page < args.first_page:
        parser.error("--last-page must be >= --first-page")
    return args


def main(argv=None) -> None:
    args = parse_args(argv)
    session = requests.Session()

    if not args.skip_robots:
        first_url = build_page_url(args.first_page, args.base_url)
        if not robots_allows(first_url, session=session):
            raise SystemExit(f"robots.txt disallows scraping {first_url}")
        print(f"robots.txt allows scraping {first_url}")

    table = scrape_pages(
        range(args.first_page, args.last_page + 1),
        session=session,
        base_url=args.base_url,
        on_page=lambda page, records: print("Page", page, ":", len(records), "records"),
    )

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(out_path, index=False)
    print(f"Saved {len(table)} records to {out_path}")


if __name__ == "__main__":
    main()
