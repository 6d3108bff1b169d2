"""
tutorials/college_scraper.py

Scrapes the college search-results pages of a ranking website into a table.

Each result card on a page carries a college name and a list of four "facts"
shown in a fixed order:

    grade, acceptance rate, net price, SAT range

Two ways of turning a page into records live here:
  - extract_fragments + reshape_facts : the flat, positional approach
    (all titles, all facts, then slice the facts into groups of four)
  - extract_records                   : group facts by the card they belong to

scrape_pages uses the card-based grouping so a card with a missing or extra
fact raises instead of silently shifting every following row.
"""

from __future__ import annotations

import re
import urllib.robotparser
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple
from urllib.parse import urljoin

import numpy as np
import pandas as pd
import requests
from bs4 import BeautifulSoup


BASE_URL = "https://www.niche.com/colleges/search/best-colleges/"
USER_AGENT = "Mozilla/5.0 (compatible; CollegeTutorialScraper/1.0)"
HEADERS = {"User-Agent": USER_AGENT}

FACT_FIELDS = ("grade", "acceptance_rate", "net_price", "sat_range")
FACTS_PER_RECORD = len(FACT_FIELDS)
RECORD_COLUMNS = ["name", *FACT_FIELDS]


@dataclass(frozen=True)
class SiteSelectors:
    """CSS selectors locating a result card, its title, and its facts."""
    card: str = "li.search-results__list__item"
    title: str = "h2.search-result__title"
    fact: str = "li.search-result-fact"


DEFAULT_SELECTORS = SiteSelectors()


class PageLayoutError(ValueError):
    """Raised when a results page does not have the expected shape."""


# ---------------------------------------------------------------------
# Fetching
# ---------------------------------------------------------------------

def build_page_url(page: int, base_url: str = BASE_URL) -> str:
    """Search URL for a 1-based results page number."""
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    return f"{base_url}?page={page}"


def fetch_page(url: str, session: Optional[requests.Session] = None) -> str:
    """
    GET a page and return its HTML text.

    HTTP errors are raised as requests.HTTPError; nothing is retried.
    """
    http = session or requests.Session()
    resp = http.get(url, headers=HEADERS)
    resp.raise_for_status()
    return resp.text


def robots_allows(
    url: str,
    session: Optional[requests.Session] = None,
    user_agent: str = USER_AGENT,
) -> bool:
    """
    Check the site's robots.txt before scraping `url`.

    Status handling matches RobotFileParser.read(): 401/403 disallow
    everything, any other 4xx (no robots.txt) allows everything. Server
    errors propagate.
    """
    robots_url = urljoin(url, "/robots.txt")
    rp = urllib.robotparser.RobotFileParser()
    rp.set_url(robots_url)

    http = session or requests.Session()
    resp = http.get(robots_url, headers=HEADERS)
    if resp.status_code in (401, 403):
        rp.disallow_all = True
    elif 400 <= resp.status_code < 500:
        rp.allow_all = True
    else:
        resp.raise_for_status()
        rp.parse(resp.text.splitlines())
    return rp.can_fetch(user_agent, url)


# ---------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------

def _text(node) -> str:
    return re.sub(r"\s+", " ", node.get_text(" ", strip=True)).strip()


def extract_fragments(
    html: str, selectors: SiteSelectors = DEFAULT_SELECTORS
) -> Tuple[List[str], List[str]]:
    """
    Pull every title fragment and every fact fragment off a page.

    Returns
    -------
    titles : List[str]
        One entry per result, in page order.
    facts : List[str]
        All facts of all results, flattened in page order.
    """
    soup = BeautifulSoup(html, "html.parser")
    titles = [_text(n) for n in soup.select(selectors.title)]
    facts = [_text(n) for n in soup.select(selectors.fact)]
    return titles, facts


def reshape_facts(
    facts: List[str], n_titles: int, width: int = FACTS_PER_RECORD
) -> pd.DataFrame:
    """
    Reshape a flat fact list into an (n_titles x width) table by position.

    Raises
    ------
    PageLayoutError
        If the fact count is not exactly n_titles * width. Positional slicing
        of a list with the wrong length would misalign every record after
        the first irregular one.
    """
    expected = n_titles * width
    if len(facts) != expected:
        raise PageLayoutError(
            f"Expected {expected} facts for {n_titles} results "
            f"({width} each), found {len(facts)}."
        )

    grid = np.array(facts, dtype=object).reshape(n_titles, width)
    columns = list(FACT_FIELDS) if width == FACTS_PER_RECORD else list(range(width))
    return pd.DataFrame(grid, columns=columns)


def assemble_page(titles: List[str], facts: List[str]) -> pd.DataFrame:
    """Combine flat title and fact lists into one raw table."""
    table = reshape_facts(facts, len(titles))
    table.insert(0, "name", titles)
    return table


def extract_records(
    html: str, selectors: SiteSelectors = DEFAULT_SELECTORS
) -> pd.DataFrame:
    """
    Parse one results page into raw records, grouping facts per result card.

    Every card must carry one title and exactly FACTS_PER_RECORD facts, and
    the page must have as many titles as cards; otherwise the page layout
    has changed and PageLayoutError is raised.
    """
    soup = BeautifulSoup(html, "html.parser")
    rows = []

    for i, card in enumerate(soup.select(selectors.card)):
        title = card.select_one(selectors.title)
        if title is None:
            raise PageLayoutError(f"Result card {i} has no title ({selectors.title!r}).")

        facts = [_text(n) for n in card.select(selectors.fact)]
        if len(facts) != FACTS_PER_RECORD:
            raise PageLayoutError(
                f"Result card {i} ({_text(title)!r}) has {len(facts)} facts, "
                f"expected {FACTS_PER_RECORD}."
            )

        rows.append([_text(title), *facts])

    # Titles outside any matched card mean the card selector no longer fits.
    n_titles = len(soup.select(selectors.title))
    if n_titles != len(rows):
        raise PageLayoutError(
            f"Found {n_titles} result titles but {len(rows)} result cards "
            f"({selectors.card!r})."
        )

    return pd.DataFrame(rows, columns=RECORD_COLUMNS)


# ---------------------------------------------------------------------
# Cleaning
# ---------------------------------------------------------------------

def to_number(value: Optional[str]) -> float:
    """
    Strip everything but digits and the decimal point, then coerce.

    "Acceptance rate 7%" -> 7.0, "Net price $16,314" -> 16314.0, "—" -> nan
    """
    if value is None:
        return np.nan
    digits = re.sub(r"[^0-9.]", "", str(value))
    return float(pd.to_numeric(digits, errors="coerce")) if digits else np.nan


def _strip_label(value: str, label: str) -> str:
    # Fact text often repeats its caption ("Overall Niche Grade A+").
    return re.sub(rf"^{label}\s*", "", value, flags=re.IGNORECASE).strip()


def clean_records(df: pd.DataFrame) -> pd.DataFrame:
    """Coerce numeric facts and tidy text facts of a raw records table."""
    out = df.copy()
    out["name"] = out["name"].str.strip()
    out["grade"] = out["grade"].map(lambda v: _strip_label(v, r"(overall\s+)?(niche\s+)?grade"))
    out["sat_range"] = out["sat_range"].map(lambda v: _strip_label(v, r"sat\s+range"))
    out["acceptance_rate"] = out["acceptance_rate"].map(to_number).astype(float)
    out["net_price"] = out["net_price"].map(to_number).astype(float)
    return out


# ---------------------------------------------------------------------
# Pagination loop
# ---------------------------------------------------------------------

def scrape_page(
    page: int,
    session: Optional[requests.Session] = None,
    base_url: str = BASE_URL,
    selectors: SiteSelectors = DEFAULT_SELECTORS,
) -> pd.DataFrame:
    """Fetch, extract and clean a single results page."""
    html = fetch_page(build_page_url(page, base_url), session=session)
    records = clean_records(extract_records(html, selectors))
    records["page"] = page
    return records


def scrape_pages(
    pages: Iterable[int],
    session: Optional[requests.Session] = None,
    base_url: str = BASE_URL,
    selectors: SiteSelectors = DEFAULT_SELECTORS,
    on_page: Optional[Callable[[int, pd.DataFrame], None]] = None,
) -> pd.DataFrame:
    """
    Scrape several results pages and concatenate them into one table.

    Pages are fetched one after another with a shared session. The first
    network or layout failure propagates. `on_page(page, records)` is called
    after each page, e.g. to report progress.
    """
    http = session or requests.Session()
    frames = []
    for page in pages:
        records = scrape_page(page, session=http, base_url=base_url, selectors=selectors)
        if on_page is not None:
            on_page(page, records)
        frames.append(records)

    if not frames:
        return pd.DataFrame(columns=[*RECORD_COLUMNS, "page"])
    return pd.concat(frames, ignore_index=True)
