"""
tutorials/train.py

Runs the census income modelling walk-through end to end and writes a report.

Steps
-----
1) load + clean adult.data            (census_data)
2) stratified train/test split
3) default tree, large tree           (tree_models)
4) cost-complexity pruning by CV
5) random forest grid search by CV    (forest)
6) ROC comparison on the test set     (evaluation)

Reports written to reports/ (no fitted models are saved):
    metrics.json            test-set AUCs + threshold metrics + tree sizes
    config.json             run settings
    complexity_table.csv    CV error along the pruning path
    forest_tuning.csv       CV AUC per max_features value
    roc_curves.png          ROC comparison plot

Run (default)
-------------
python -m tutorials.train

Run (custom)
------------
python -m tutorials.train --data data/adult.data --names data/adult.names --mtry 2 4 8
"""

from __future__ import annotations

import argparse
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestClassifier
from sklearn.tree import DecisionTreeClassifier

from tutorials.census_data import (
    DEFAULT_DATA_PATH,
    OUTCOME,
    clean_census,
    design_matrices,
    load_census,
    split_census,
)
from tutorials.evaluation import (
    compare_models,
    plot_roc_curves,
    positive_proba,
    roc_curves,
    threshold_metrics,
)
from tutorials.forest import DEFAULT_MAX_FEATURES_GRID, tune_forest, tuning_results
from tutorials.tree_models import (
    complexity_table,
    describe_tree,
    fit_default_tree,
    fit_large_tree,
    prune_tree,
    select_ccp_alpha,
)


REPORT_DIR = Path("reports")


@dataclass
class ModelingResults:
    """Everything the walk-through produces, kept together for reporting."""
    n_raw: int
    n_clean: int
    feature_names: List[str]
    default_tree: DecisionTreeClassifier
    large_tree: DecisionTreeClassifier
    pruned_tree: DecisionTreeClassifier
    ccp_alpha: float
    complexity: pd.DataFrame
    forest: RandomForestClassifier
    forest_tuning: pd.DataFrame
    comparison: pd.DataFrame
    curves: Dict[str, pd.DataFrame]
    metrics: Dict


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Census income tree / forest walk-through.")
    parser.add_argument(
        "--data",
        type=str,
        default=str(DEFAULT_DATA_PATH),
        help="Path to adult.data (comma-delimited, no header).",
    )
    parser.add_argument(
        "--names",
        type=str,
        default=None,
        help="Optional adult.names file giving the column order.",
    )
    parser.add_argument(
        "--test-size",
        type=float,
        default=0.25,
        help="Fraction of data used for test set.",
    )
    parser.add_argument(
        "--random-state",
        type=int,
        default=42,
        help="Random seed for reproducibility.",
    )
    parser.add_argument(
        "--tree-cv",
        type=int,
        default=10,
        help="Folds for the pruning cross-validation.",
    )
    parser.add_argument(
        "--prune-rule",
        choices=["min", "1se"],
        default="min",
        help="How to pick the complexity parameter from the CV table.",
    )
    parser.add_argument(
        "--forest-cv",
        type=int,
        default=5,
        help="Folds for the random forest grid search.",
    )
    parser.add_argument(
        "--mtry",
        type=int,
        nargs="+",
        default=list(DEFAULT_MAX_FEATURES_GRID),
        help="max_features values to grid-search.",
    )
    parser.add_argument(
        "--n-estimators",
        type=int,
        default=500,
        help="Number of trees in RandomForest.",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=0.50,
        help="Probability threshold for classification metrics.",
    )
    parser.add_argument(
        "--report-dir",
        type=str,
        default=str(REPORT_DIR),
        help="Where to write the report files.",
    )
    return parser.parse_args(argv)


def run_pipeline(
    data_path: Path,
    names_path: Optional[Path] = None,
    test_size: float = 0.25,
    random_state: int = 42,
    tree_cv: int = 10,
    prune_rule: str = "min",
    forest_cv: int = 5,
    mtry=DEFAULT_MAX_FEATURES_GRID,
    n_estimators: int = 500,
    threshold: float = 0.5,
    verbose: bool = True,
) -> ModelingResults:
    """Run every modelling step and collect the results (nothing is written)."""
    say = print if verbose else (lambda *a, **k: None)

    # -----------------------------
    # 1) Load + clean
    # -----------------------------
    raw = load_census(data_path, names_path)
    df = clean_census(raw)
    say(f"Loaded {len(raw)} rows; {len(df)} remain after cleaning.")
    say("Outcome counts:", df[OUTCOME].value_counts().to_dict())

    # -----------------------------
    # 2) Stratified split
    # -----------------------------
    train, test = split_census(df, test_size=test_size, random_state=random_state)
    X_train, X_test, y_train, y_test = design_matrices(train, test)
    say(f"Train={len(train)} Test={len(test)} | over_50K rate train={y_train.mean():.3f} test={y_test.mean():.3f}")

    # -----------------------------
    # 3) Trees
    # -----------------------------
    default_tree = fit_default_tree(X_train, y_train, random_state=random_state)
    say("Default tree:", describe_tree(default_tree, X_train.columns, max_depth=2))

    large_tree = fit_large_tree(X_train, y_train, random_state=random_state)
    say(f"Large tree: depth={large_tree.get_depth()} leaves={large_tree.get_n_leaves()}")

    # -----------------------------
    # 4) Cost-complexity pruning
    # -----------------------------
    complexity = complexity_table(X_train, y_train, cv=tree_cv, random_state=random_state)
    ccp_alpha = select_ccp_alpha(complexity, rule=prune_rule)
    pruned_tree = prune_tree(X_train, y_train, ccp_alpha, random_state=random_state)
    say(f"Pruned tree (alpha={ccp_alpha:.6f}):", describe_tree(pruned_tree, X_train.columns, max_depth=3))

    # -----------------------------
    # 5) Random forest
    # -----------------------------
    search = tune_forest(
        X_train,
        y_train,
        max_features_grid=mtry,
        n_estimators=n_estimators,
        cv=forest_cv,
        random_state=random_state,
    )
    forest_tuning = tuning_results(search)
    forest = search.best_estimator_
    say("Forest tuning (CV ROC-AUC):")
    say(forest_tuning.to_string(index=False))

    # -----------------------------
    # 6) Evaluate on held-out data
    # -----------------------------
    models = {"pruned_tree": pruned_tree, "random_forest": forest}
    comparison = compare_models(models, X_test, y_test)
    curves = roc_curves(models, X_test, y_test)

    metrics = {
        "n_raw": int(len(raw)),
        "n_clean": int(len(df)),
        "n_train": int(len(X_train)),
        "n_test": int(len(X_test)),
        "positive_rate_train": float(np.mean(y_train)),
        "positive_rate_test": float(np.mean(y_test)),
        "ccp_alpha": float(ccp_alpha),
        "tree_sizes": {
            "default_tree": int(default_tree.get_n_leaves()),
            "large_tree": int(large_tree.get_n_leaves()),
            "pruned_tree": int(pruned_tree.get_n_leaves()),
        },
        "forest_max_features": int(search.best_params_["max_features"]),
        "forest_cv_auc": float(search.best_score_),
        "roc_auc": {row.model: row.roc_auc for row in comparison.itertuples()},
        "threshold_metrics": {
            name: threshold_metrics(y_test, positive_proba(m, X_test), threshold)
            for name, m in models.items()
        },
    }

    return ModelingResults(
        n_raw=len(raw),
        n_clean=len(df),
        feature_names=list(X_train.columns),
        default_tree=default_tree,
        large_tree=large_tree,
        pruned_tree=pruned_tree,
        ccp_alpha=ccp_alpha,
        complexity=complexity,
        forest=forest,
        forest_tuning=forest_tuning,
        comparison=comparison,
        curves=curves,
        metrics=metrics,
    )


def write_report(results: ModelingResults, report_dir: Path, config: Dict) -> None:
    report_dir.mkdir(parents=True, exist_ok=True)
    (report_dir / "metrics.json").write_text(json.dumps(results.metrics, indent=2))
    (report_dir / "config.json").write_text(json.dumps(config, indent=2))
    results.complexity.to_csv(report_dir / "complexity_table.csv", index=False)
    results.forest_tuning.to_csv(report_dir / "forest_tuning.csv", index=False)
    plot_roc_curves(results.curves, report_dir / "roc_curves.png")


def main(argv=None) -> None:
    args = parse_args(argv)

    data_path = Path(args.data)
    names_path = Path(args.names) if args.names else None

    results = run_pipeline(
        data_path,
        names_path,
        test_size=args.test_size,
        random_state=args.random_state,
        tree_cv=args.tree_cv,
        prune_rule=args.prune_rule,
        forest_cv=args.forest_cv,
        mtry=args.mtry,
        n_estimators=args.n_estimators,
        threshold=args.threshold,
    )

    config = {
        "data_path": str(data_path),
        "names_path": str(names_path) if names_path else None,
        "test_size": args.test_size,
        "random_state": args.random_state,
        "tree_cv": args.tree_cv,
        "prune_rule": args.prune_rule,
        "forest_cv": args.forest_cv,
        "mtry": args.mtry,
        "n_estimators": args.n_estimators,
        "threshold": args.threshold,
    }
    report_dir = Path(args.report_dir)
    write_report(results, report_dir, config)

    print("Training complete.")
    print(f"Saved report to: {report_dir.resolve()}")
    print(results.comparison.to_string(index=False))


if __name__ == "__main__":
    main()
