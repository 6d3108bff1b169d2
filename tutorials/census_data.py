"""
tutorials/census_data.py

Loading and cleaning of the UCI "Adult" census income data.

Inputs (as distributed by the UCI repository):
  data/adult.data   : comma-delimited rows, no header, "?" for missing values
  data/adult.names  : free-text description whose attribute lines give the
                      column order ("age: continuous.", "workclass: ...")

The outcome `income` is relabelled to a two-level categorical
{under_50K, over_50K}. The positive class for modelling is over_50K.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split


DEFAULT_DATA_PATH = Path("data/adult.data")
DEFAULT_NAMES_PATH = Path("data/adult.names")

OUTCOME = "income"

# Column order of adult.data when no names file is supplied.
ADULT_COLUMNS = [
    "age",
    "workclass",
    "fnlwgt",
    "education",
    "education_num",
    "marital_status",
    "occupation",
    "relationship",
    "race",
    "sex",
    "capital_gain",
    "capital_loss",
    "hours_per_week",
    "native_country",
    OUTCOME,
]

# fnlwgt is a sampling weight, education duplicates education_num, and
# native_country is dominated by a single level.
DROP_COLUMNS = ("fnlwgt", "education", "native_country")

# 99999 is a top-coding value in capital_gain, not a real amount.
CAPITAL_GAIN_SENTINEL = 99999

OUTCOME_LABELS = {"<=50K": "under_50K", ">50K": "over_50K"}
NEGATIVE_LABEL = "under_50K"
POSITIVE_LABEL = "over_50K"

_ATTRIBUTE_LINE = re.compile(r"^([A-Za-z][A-Za-z0-9_-]*)\s*:\s*(.+)$")


def read_names_file(path: Path) -> List[str]:
    """
    Parse the attribute names out of an adult.names-style file.

    Lines starting with "|" are comments. Every "name: values." line is an
    attribute, in column order. Hyphens become underscores and the outcome
    column is appended last.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Names file not found at {path}.")

    names = []
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("|"):
            continue
        m = _ATTRIBUTE_LINE.match(line)
        if m:
            names.append(m.group(1).replace("-", "_").lower())

    if not names:
        raise ValueError(f"No attribute lines found in {path}.")
    return names + [OUTCOME]


def load_census(data_path: Path = DEFAULT_DATA_PATH, names_path: Optional[Path] = None) -> pd.DataFrame:
    """
    Read the raw delimited file into a dataframe with named columns.

    Parameters
    ----------
    data_path : Path
        adult.data (or adult.test; its "|" comment line is skipped).
    names_path : Path, optional
        Companion names file. When omitted the fixed ADULT_COLUMNS order is used.

    Raises
    ------
    FileNotFoundError
        If the data file is missing.
    ValueError
        If the names file and the data disagree on the number of columns.
    """
    data_path = Path(data_path)
    if not data_path.exists():
        raise FileNotFoundError(
            f"Census data not found at {data_path}. "
            f"Download adult.data from the UCI repository or generate a stand-in: "
            f"python -m tutorials.make_synthetic_data"
        )

    columns = read_names_file(names_path) if names_path is not None else list(ADULT_COLUMNS)

    raw = pd.read_csv(
        data_path,
        header=None,
        skipinitialspace=True,
        na_values="?",
        comment="|",
    )
    if raw.shape[1] != len(columns):
        raise ValueError(
            f"{data_path} has {raw.shape[1]} columns but {len(columns)} names were given."
        )
    raw.columns = columns
    return raw


def clean_census(df: pd.DataFrame, drop_columns: Sequence[str] = DROP_COLUMNS) -> pd.DataFrame:
    """
    Normalize labels, drop invalid rows and uninformative columns, relabel outcome.

    The returned frame keeps the original row index, so dropped rows can be
    traced back to the raw file.
    """
    out = df.copy()

    # --- 1) Categorical label normalization
    text_cols = [c for c in out.columns if not pd.api.types.is_numeric_dtype(out[c])]
    for c in text_cols:
        out[c] = out[c].str.strip().replace("?", np.nan)
    out[OUTCOME] = out[OUTCOME].str.rstrip(".")

    # --- 2) Row validity: no missing values, no capital-gain sentinel
    out = out.dropna()
    out = out[out["capital_gain"] != CAPITAL_GAIN_SENTINEL]

    # --- 3) Uninformative columns
    out = out.drop(columns=[c for c in drop_columns if c in out.columns])

    # --- 4) Outcome relabel
    unknown = sorted(set(out[OUTCOME]) - set(OUTCOME_LABELS))
    if unknown:
        raise ValueError(f"Unexpected income labels: {unknown}")
    out[OUTCOME] = pd.Categorical(
        out[OUTCOME].map(OUTCOME_LABELS),
        categories=[NEGATIVE_LABEL, POSITIVE_LABEL],
    )

    for c in text_cols:
        if c in out.columns and c != OUTCOME:
            out[c] = out[c].astype("category")

    return out


def split_census(
    df: pd.DataFrame,
    test_size: float = 0.25,
    random_state: int = 42,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Stratified train/test split on the outcome."""
    train, test = train_test_split(
        df,
        test_size=test_size,
        random_state=random_state,
        stratify=df[OUTCOME],
    )
    return train, test


def design_matrices(
    train: pd.DataFrame, test: pd.DataFrame
) -> Tuple[pd.DataFrame, pd.DataFrame, np.ndarray, np.ndarray]:
    """
    One-hot encode predictors and binarize the outcome (1 = over_50K).

    The test matrix is aligned to the training columns; levels unseen in
    training are dropped and levels absent from test are filled with 0.
    """
    X_train = pd.get_dummies(train.drop(columns=[OUTCOME]), dtype=float)
    X_test = pd.get_dummies(test.drop(columns=[OUTCOME]), dtype=float)
    X_test = X_test.reindex(columns=X_train.columns, fill_value=0.0)

    y_train = (train[OUTCOME] == POSITIVE_LABEL).astype(int).to_numpy()
    y_test = (test[OUTCOME] == POSITIVE_LABEL).astype(int).to_numpy()
    return X_train, X_test, y_train, y_test
