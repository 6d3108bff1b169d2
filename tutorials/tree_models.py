"""
tutorials/tree_models.py

Classification trees: a default tree, a deliberately overfit "large" tree,
and cost-complexity pruning of the large tree.

Pruning workflow
----------------
1) fit_large_tree           grow a tree with permissive stopping rules
2) complexity_table         for each alpha on the large tree's pruning path,
                            cross-validated misclassification error
3) select_ccp_alpha         pick the alpha with the lowest CV error
4) prune_tree               refit with that alpha

The CV folds are fixed by `random_state`, and alpha = 0 (no pruning, i.e.
the large tree itself) is always one of the candidates, so the selected
subtree never has a higher CV error than the large tree on those folds.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.model_selection import StratifiedKFold, cross_val_score
from sklearn.tree import DecisionTreeClassifier, export_text


LARGE_TREE_RULES: Dict = {
    "min_samples_split": 2,
    "min_samples_leaf": 1,
    "min_impurity_decrease": 0.0,
    "max_depth": 30,
}

# Pruning paths of a fully grown tree can have thousands of alphas.
MAX_CANDIDATE_ALPHAS = 40


def fit_default_tree(X: pd.DataFrame, y: np.ndarray, random_state: int = 42) -> DecisionTreeClassifier:
    """Fit a tree with scikit-learn's default stopping rules."""
    model = DecisionTreeClassifier(random_state=random_state)
    model.fit(X, y)
    return model


def fit_large_tree(
    X: pd.DataFrame,
    y: np.ndarray,
    random_state: int = 42,
    ccp_alpha: float = 0.0,
    **rules,
) -> DecisionTreeClassifier:
    """
    Fit a tree under explicit stopping rules.

    Defaults to LARGE_TREE_RULES, which let the tree grow until every leaf
    is pure (or depth 30), i.e. overfit on purpose. Keyword arguments
    override individual rules.
    """
    params = {**LARGE_TREE_RULES, **rules}
    model = DecisionTreeClassifier(random_state=random_state, ccp_alpha=ccp_alpha, **params)
    model.fit(X, y)
    return model


def cv_folds(n_splits: int = 10, random_state: int = 42) -> StratifiedKFold:
    """Shuffled stratified folds, identical for every call with the same seed."""
    return StratifiedKFold(n_splits=n_splits, shuffle=True, random_state=random_state)


def candidate_alphas(path_alphas: Sequence[float], max_candidates: int = MAX_CANDIDATE_ALPHAS) -> np.ndarray:
    """
    Thin a pruning path to at most `max_candidates` alphas.

    Alphas are picked at evenly spaced positions along the path so both the
    dense small-alpha end and the sparse large-alpha end are represented.
    0.0 is always included. The last alpha of the path (root-only tree) is
    left out.
    """
    alphas = np.unique(np.clip(np.asarray(path_alphas, dtype=float)[:-1], 0.0, None))
    if len(alphas) > max_candidates:
        idx = np.unique(np.linspace(0, len(alphas) - 1, max_candidates).round().astype(int))
        alphas = alphas[idx]
    return np.unique(np.concatenate([[0.0], alphas]))


def cv_error(
    X: pd.DataFrame,
    y: np.ndarray,
    ccp_alpha: float = 0.0,
    cv: int = 10,
    random_state: int = 42,
    **rules,
) -> np.ndarray:
    """Per-fold misclassification error of a large tree pruned at `ccp_alpha`."""
    params = {**LARGE_TREE_RULES, **rules}
    model = DecisionTreeClassifier(random_state=random_state, ccp_alpha=ccp_alpha, **params)
    accuracy = cross_val_score(model, X, y, cv=cv_folds(cv, random_state), scoring="accuracy")
    return 1.0 - accuracy


def complexity_table(
    X: pd.DataFrame,
    y: np.ndarray,
    cv: int = 10,
    random_state: int = 42,
    max_candidates: int = MAX_CANDIDATE_ALPHAS,
    **rules,
) -> pd.DataFrame:
    """
    Cross-validated error along the large tree's cost-complexity path.

    Returns
    -------
    pd.DataFrame
        One row per candidate alpha (ascending) with columns
        ccp_alpha, n_leaves, depth, cv_error, cv_std.
    """
    large = fit_large_tree(X, y, random_state=random_state, **rules)
    path = large.cost_complexity_pruning_path(X, y)

    rows: List[Dict] = []
    for alpha in candidate_alphas(path.ccp_alphas, max_candidates):
        errors = cv_error(X, y, ccp_alpha=alpha, cv=cv, random_state=random_state, **rules)
        pruned = fit_large_tree(X, y, random_state=random_state, ccp_alpha=alpha, **rules)
        rows.append(
            {
                "ccp_alpha": float(alpha),
                "n_leaves": int(pruned.get_n_leaves()),
                "depth": int(pruned.get_depth()),
                "cv_error": float(errors.mean()),
                "cv_std": float(errors.std(ddof=1)) if len(errors) > 1 else 0.0,
            }
        )

    table = pd.DataFrame(rows).sort_values("ccp_alpha").reset_index(drop=True)
    table.attrs["n_folds"] = cv
    return table


def select_ccp_alpha(table: pd.DataFrame, rule: str = "min") -> float:
    """
    Choose a complexity parameter from a complexity_table.

    rule="min" : the alpha with the lowest CV error (ties go to the larger
                 alpha, i.e. the smaller tree).
    rule="1se" : the largest alpha whose CV error is within one standard
                 error of the minimum.
    """
    if table.empty:
        raise ValueError("Complexity table is empty.")

    best = table["cv_error"].min()
    if rule == "min":
        eligible = table[table["cv_error"] <= best]
    elif rule == "1se":
        best_row = table.loc[table["cv_error"].idxmin()]
        # cv_std is the spread across folds; the standard error needs the fold count
        n_folds = table.attrs.get("n_folds", 10)
        limit = best + best_row["cv_std"] / np.sqrt(n_folds)
        eligible = table[table["cv_error"] <= limit]
    else:
        raise ValueError(f"Unknown rule {rule!r}; use 'min' or '1se'.")

    return float(eligible["ccp_alpha"].max())


def prune_tree(
    X: pd.DataFrame,
    y: np.ndarray,
    ccp_alpha: float,
    random_state: int = 42,
    **rules,
) -> DecisionTreeClassifier:
    """Refit the large tree pruned at `ccp_alpha`."""
    return fit_large_tree(X, y, random_state=random_state, ccp_alpha=ccp_alpha, **rules)


def describe_tree(
    model: DecisionTreeClassifier,
    feature_names: Optional[Sequence[str]] = None,
    max_depth: int = 3,
) -> str:
    """Short structural summary: size line plus the top levels of the tree."""
    header = f"depth={model.get_depth()} leaves={model.get_n_leaves()} nodes={model.tree_.node_count}"
    names = list(feature_names) if feature_names is not None else None
    body = export_text(model, feature_names=names, max_depth=max_depth)
    return header + "\n" + body
