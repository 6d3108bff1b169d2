from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from tutorials.evaluation import (
    compare_models,
    plot_roc_curves,
    positive_proba,
    roc_curves,
    roc_table,
    threshold_metrics,
)
from tutorials.forest import tune_forest, tuning_results
from tutorials.tree_models import (
    candidate_alphas,
    complexity_table,
    cv_error,
    describe_tree,
    fit_default_tree,
    fit_large_tree,
    prune_tree,
    select_ccp_alpha,
)


@pytest.fixture
def pruning(matrices):
    X_train, _, y_train, _ = matrices
    table = complexity_table(X_train, y_train, cv=5, random_state=42, max_candidates=12)
    return table


def test_large_tree_is_at_least_as_big_as_default_rules_allow(matrices):
    X_train, _, y_train, _ = matrices

    default = fit_default_tree(X_train, y_train)
    large = fit_large_tree(X_train, y_train)
    shallow = fit_large_tree(X_train, y_train, max_depth=2)

    assert large.get_depth() <= 30
    assert shallow.get_depth() <= 2
    assert large.get_n_leaves() > shallow.get_n_leaves()
    assert default.get_n_leaves() > 1


def test_candidate_alphas_always_include_zero_and_are_thinned():
    path = np.linspace(0.0, 0.05, 1000)
    alphas = candidate_alphas(path, max_candidates=20)

    assert alphas[0] == 0.0
    assert len(alphas) <= 21
    assert np.all(np.diff(alphas) > 0)
    # the root-only alpha at the end of the path is not a candidate
    assert alphas[-1] < path[-1]


def test_complexity_table_shape(pruning):
    assert list(pruning.columns) == ["ccp_alpha", "n_leaves", "depth", "cv_error", "cv_std"]
    assert pruning["ccp_alpha"].iloc[0] == 0.0
    assert pruning["ccp_alpha"].is_monotonic_increasing
    # larger alpha never means a larger tree
    assert pruning["n_leaves"].is_monotonic_decreasing
    assert pruning["cv_error"].between(0, 1).all()
    assert pruning.attrs["n_folds"] == 5


def test_pruned_tree_cv_error_not_worse_than_large_tree(matrices, pruning):
    X_train, _, y_train, _ = matrices

    alpha = select_ccp_alpha(pruning)
    pruned_err = cv_error(X_train, y_train, ccp_alpha=alpha, cv=5, random_state=42).mean()
    large_err = cv_error(X_train, y_train, ccp_alpha=0.0, cv=5, random_state=42).mean()

    assert pruned_err <= large_err
    assert pruning.loc[0, "cv_error"] == pytest.approx(large_err)


def test_prune_tree_shrinks_the_large_tree(matrices, pruning):
    X_train, _, y_train, _ = matrices

    alpha = select_ccp_alpha(pruning)
    large = fit_large_tree(X_train, y_train)
    pruned = prune_tree(X_train, y_train, alpha)

    assert pruned.get_n_leaves() <= large.get_n_leaves()
    assert pruned.ccp_alpha == alpha


def test_select_ccp_alpha_rules():
    table = pd.DataFrame(
        {
            "ccp_alpha": [0.0, 0.001, 0.002, 0.004, 0.01],
            "n_leaves": [200, 60, 30, 12, 3],
            "depth": [20, 12, 8, 5, 2],
            "cv_error": [0.20, 0.16, 0.16, 0.165, 0.24],
            "cv_std": [0.02, 0.02, 0.03, 0.02, 0.02],
        }
    )
    table.attrs["n_folds"] = 4

    # tie on the minimum goes to the smaller tree
    assert select_ccp_alpha(table) == 0.002
    # one standard error = 0.02 / 2 = 0.01 above 0.16
    assert select_ccp_alpha(table, rule="1se") == 0.004

    with pytest.raises(ValueError):
        select_ccp_alpha(table, rule="best")
    with pytest.raises(ValueError):
        select_ccp_alpha(table.iloc[0:0])


def test_describe_tree_mentions_size_and_features(matrices):
    X_train, _, y_train, _ = matrices
    model = fit_large_tree(X_train, y_train, max_depth=3)

    text = describe_tree(model, X_train.columns, max_depth=2)

    assert text.startswith(f"depth={model.get_depth()} leaves={model.get_n_leaves()}")
    assert any(name in text for name in X_train.columns)


def test_tune_forest_grid_search(matrices):
    X_train, _, y_train, _ = matrices

    search = tune_forest(X_train, y_train, max_features_grid=[2, 4, 10_000], n_estimators=25, cv=3, n_jobs=1)
    results = tuning_results(search)

    assert results["max_features"].tolist() == [2, 4]
    assert results["mean_auc"].between(0.5, 1.0).all()
    assert set(results["rank"]) <= {1, 2}
    assert search.best_params_["max_features"] in (2, 4)
    assert search.best_estimator_.n_estimators == 25


def test_tune_forest_rejects_unusable_grid(matrices):
    X_train, _, y_train, _ = matrices
    with pytest.raises(ValueError):
        tune_forest(X_train, y_train, max_features_grid=[0, 10_000], n_estimators=5, cv=3)


def test_roc_evaluation_of_both_models(tmp_path, matrices):
    X_train, X_test, y_train, y_test = matrices
    tree = fit_large_tree(X_train, y_train, max_depth=4)
    forest = tune_forest(X_train, y_train, max_features_grid=[3], n_estimators=25, cv=3, n_jobs=1).best_estimator_
    models = {"pruned_tree": tree, "random_forest": forest}

    proba = positive_proba(forest, X_test)
    assert proba.shape == (len(X_test),)
    assert ((proba >= 0) & (proba <= 1)).all()

    curve = roc_table(y_test, proba)
    assert curve["fpr"].is_monotonic_increasing
    assert curve["tpr"].is_monotonic_increasing
    assert curve["tpr"].iloc[-1] == 1.0

    comparison = compare_models(models, X_test, y_test)
    assert set(comparison["model"]) == set(models)
    assert comparison["roc_auc"].is_monotonic_decreasing
    assert comparison["roc_auc"].between(0.5, 1.0).all()

    out = tmp_path / "roc.png"
    fig = plot_roc_curves(roc_curves(models, X_test, y_test), out)
    assert out.exists() and out.stat().st_size > 0
    assert len(fig.axes[0].get_lines()) == 3


def test_threshold_metrics_counts():
    y = np.array([0, 0, 1, 1, 1])
    proba = np.array([0.1, 0.7, 0.8, 0.4, 0.9])

    m = threshold_metrics(y, proba, threshold=0.5)

    assert m["confusion_matrix"] == {"tn": 1, "fp": 1, "fn": 1, "tp": 2}
    assert m["precision"] == pytest.approx(2 / 3)
    assert m["recall"] == pytest.approx(2 / 3)
    assert m["accuracy"] == pytest.approx(3 / 5)
