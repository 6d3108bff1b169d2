from __future__ import annotations

import os

# Headless plotting for report/figure tests.
os.environ.setdefault("MPLBACKEND", "Agg")

import pytest
import requests

from tutorials.census_data import CAPITAL_GAIN_SENTINEL, clean_census, design_matrices, load_census, split_census
from tutorials.make_synthetic_data import generate_census_dataset, write_adult_files


# ---------------------------------------------------------------------
# Scraper fakes
# ---------------------------------------------------------------------

def college_facts(i: int) -> list:
    return ["A+", f"Acceptance rate {5 + i}%", f"Net price ${15000 + i * 100:,}", "SAT range 1460-1570"]


def results_page(colleges) -> str:
    """Build a results page from (name, facts) pairs using the default selectors."""
    cards = []
    for name, facts in colleges:
        fact_items = "".join(f'<li class="search-result-fact">{f}</li>' for f in facts)
        cards.append(
            '<li class="search-results__list__item">'
            f'<h2 class="search-result__title">{name}</h2>'
            f"<ul>{fact_items}</ul>"
            "</li>"
        )
    return (
        "<html><body><ol class='search-results__list'>"
        + "".join(cards)
        + "</ol></body></html>"
    )


def standard_page(page: int, per_page: int = 27) -> str:
    start = (page - 1) * per_page
    return results_page(
        [(f"College {start + i}", college_facts(start + i)) for i in range(per_page)]
    )


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    """Serves canned pages by URL; unknown URLs get a 404."""

    def __init__(self, pages: dict):
        self.pages = pages
        self.requested = []

    def get(self, url, headers=None, **kwargs):
        self.requested.append(url)
        if url in self.pages:
            return FakeResponse(self.pages[url])
        return FakeResponse("not found", status_code=404)


# ---------------------------------------------------------------------
# Census fixtures
# ---------------------------------------------------------------------

@pytest.fixture
def census_frame():
    df = generate_census_dataset(n_people=900, random_state=7)
    # Guarantee the raw-file quirks are present regardless of the draw.
    df.loc[:4, "capital_gain"] = CAPITAL_GAIN_SENTINEL
    df.loc[5:9, "workclass"] = "?"
    df.loc[10:12, "occupation"] = "?"
    return df


@pytest.fixture
def census_files(tmp_path, census_frame):
    data_path = tmp_path / "adult.data"
    names_path = tmp_path / "adult.names"
    write_adult_files(census_frame, data_path, names_path)
    return data_path, names_path


@pytest.fixture
def matrices(census_files):
    data_path, names_path = census_files
    df = clean_census(load_census(data_path, names_path))
    train, test = split_census(df, test_size=0.25, random_state=42)
    return design_matrices(train, test)
