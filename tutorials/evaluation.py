"""
tutorials/evaluation.py

Held-out evaluation of fitted classifiers: predicted probabilities, ROC
curves, AUC comparison and threshold metrics.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Mapping, Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    auc,
    confusion_matrix,
    precision_recall_fscore_support,
    roc_auc_score,
    roc_curve,
)


def positive_proba(model, X: pd.DataFrame) -> np.ndarray:
    """
    Predicted probability of the positive class (over_50K).

    scikit-learn orders predict_proba columns by model.classes_, so the
    column for label 1 is looked up rather than assumed.
    """
    proba = model.predict_proba(X)
    pos_col = list(model.classes_).index(1)
    return proba[:, pos_col]


def roc_table(y_true: np.ndarray, proba: np.ndarray) -> pd.DataFrame:
    """ROC curve points as a dataframe with fpr, tpr and threshold columns."""
    fpr, tpr, thresholds = roc_curve(y_true, proba)
    return pd.DataFrame({"fpr": fpr, "tpr": tpr, "threshold": thresholds})


def compare_models(models: Mapping[str, object], X_test: pd.DataFrame, y_test: np.ndarray) -> pd.DataFrame:
    """Test-set ROC-AUC for each named model, best first."""
    rows = [
        {"model": name, "roc_auc": float(roc_auc_score(y_test, positive_proba(m, X_test)))}
        for name, m in models.items()
    ]
    return pd.DataFrame(rows).sort_values("roc_auc", ascending=False).reset_index(drop=True)


def roc_curves(models: Mapping[str, object], X_test: pd.DataFrame, y_test: np.ndarray) -> Dict[str, pd.DataFrame]:
    return {name: roc_table(y_test, positive_proba(m, X_test)) for name, m in models.items()}


def threshold_metrics(y_true: np.ndarray, proba: np.ndarray, threshold: float = 0.5) -> Dict:
    """
    Compute confusion-matrix-based metrics at a given probability threshold.
    """
    y_pred = (proba >= threshold).astype(int)
    cm = confusion_matrix(y_true, y_pred, labels=[0, 1])

    # average='binary' reports the positive class (1 = over_50K)
    precision, recall, f1, _ = precision_recall_fscore_support(
        y_true, y_pred, average="binary", zero_division=0
    )

    return {
        "threshold": float(threshold),
        "confusion_matrix": {
            "tn": int(cm[0, 0]),
            "fp": int(cm[0, 1]),
            "fn": int(cm[1, 0]),
            "tp": int(cm[1, 1]),
        },
        "accuracy": float(accuracy_score(y_true, y_pred)),
        "precision": float(precision),
        "recall": float(recall),
        "f1": float(f1),
    }


def plot_roc_curves(curves: Mapping[str, pd.DataFrame], path: Optional[Path] = None):
    """
    Overlay ROC curves on one figure.

    If `path` is given the figure is also saved there. The figure is returned
    so callers (e.g. Streamlit) can display it.
    """
    fig, ax = plt.subplots(figsize=(6, 6))
    for name, curve in curves.items():
        area = auc(curve["fpr"], curve["tpr"])
        ax.plot(curve["fpr"], curve["tpr"], label=f"{name} (AUC={area:.3f})")

    ax.plot([0, 1], [0, 1], linestyle="--", color="grey", linewidth=1)
    ax.set_xlabel("False positive rate")
    ax.set_ylabel("True positive rate")
    ax.set_title("ROC curves (test set)")
    ax.legend(loc="lower right")

    if path is not None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(path, dpi=120, bbox_inches="tight")
    return fig
