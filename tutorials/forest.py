"""
tutorials/forest.py

Random forest tuned by cross-validated grid search over `max_features`, the
number of predictors sampled as split candidates at each node.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestClassifier
from sklearn.model_selection import GridSearchCV, StratifiedKFold


DEFAULT_MAX_FEATURES_GRID = (2, 4, 6, 8, 12)


def tune_forest(
    X: pd.DataFrame,
    y: np.ndarray,
    max_features_grid: Sequence[int] = DEFAULT_MAX_FEATURES_GRID,
    n_estimators: int = 500,
    cv: int = 5,
    random_state: int = 42,
    n_jobs: Optional[int] = -1,
) -> GridSearchCV:
    """
    Grid-search a RandomForestClassifier over `max_features` by ROC-AUC.

    Grid values larger than the number of columns are dropped. The returned
    search is refit on the full training data with the best value, so
    `search.best_estimator_` is the final forest.
    """
    grid = sorted({int(m) for m in max_features_grid if 1 <= int(m) <= X.shape[1]})
    if not grid:
        raise ValueError(
            f"No usable max_features values in {list(max_features_grid)} for {X.shape[1]} columns."
        )

    forest = RandomForestClassifier(n_estimators=n_estimators, random_state=random_state, n_jobs=n_jobs)
    search = GridSearchCV(
        forest,
        param_grid={"max_features": grid},
        scoring="roc_auc",
        cv=StratifiedKFold(n_splits=cv, shuffle=True, random_state=random_state),
        refit=True,
    )
    search.fit(X, y)
    return search


def tuning_results(search: GridSearchCV) -> pd.DataFrame:
    """One row per grid point: max_features, mean/std CV ROC-AUC, rank."""
    cv = pd.DataFrame(search.cv_results_)
    out = pd.DataFrame(
        {
            "max_features": cv["param_max_features"].astype(int),
            "mean_auc": cv["mean_test_score"].astype(float),
            "std_auc": cv["std_test_score"].astype(float),
            "rank": cv["rank_test_score"].astype(int),
        }
    )
    return out.sort_values("max_features").reset_index(drop=True)
