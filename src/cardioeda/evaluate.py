"""cardioeda.evaluate

Notes (what this module does)
- Scores test-set predictions from the cross-validated forest:
  * Confusion matrix (rows = prediction, columns = reference)
  * Accuracy, Kappa, Sensitivity, Specificity, PPV, NPV, Prevalence,
    Detection Rate, Balanced Accuracy
- Guard: when predictions or ground truth hold a single level, no matrix is
  computed and a diagnostic message is returned instead.
- Saves a confusion-matrix heatmap for reporting.
"""

# Import typing for clear function signatures
from pathlib import Path
from typing import Dict

# Import numpy for numeric operations
import numpy as np  # Array math

# Import pandas for the labelled matrix
import pandas as pd  # DataFrames for summaries

# Import matplotlib for plotting (saved to files)
import matplotlib.pyplot as plt  # Plotting library

# Import seaborn for the heatmap
import seaborn as sns  # Statistical plotting

# Import sklearn metric functions
from sklearn.metrics import confusion_matrix, cohen_kappa_score  # Metric utilities

# Import outcome settings
from .config import POSITIVE_CLASS  # Level treated as "disease present"
from .preprocess import OUTCOME_LEVELS  # [0, 1]

# Import helper to ensure plot directory exists
from .utils import ensure_dir  # Directory creation

from .logging_config import get_logger

logger = get_logger(__name__)


def _levels(values) -> list:
    """Distinct non-missing labels as plain ints."""
    return sorted({int(v) for v in pd.Series(values).dropna().tolist()})


def evaluate_predictions(y_true, y_pred, positive: int = POSITIVE_CLASS) -> Dict:
    """Confusion matrix and derived metrics, or a diagnostic for degenerate labels.

    Args:
        y_true: Reference labels (0/1).
        y_pred: Predicted labels (0/1).
        positive: Level counted as positive for sensitivity/PPV.

    Returns:
        ``{"status": "ok", "confusion_matrix": DataFrame, "metrics": dict}`` or
        ``{"status": "degenerate", "message": str, ...}``.
    """

    y_true = np.asarray(pd.Series(y_true).astype(int))
    y_pred = np.asarray(pd.Series(y_pred).astype(int))

    true_levels = _levels(y_true)
    pred_levels = _levels(y_pred)

    # Single-level labels cannot form a 2x2 table
    if len(true_levels) < 2 or len(pred_levels) < 2:
        message = (
            "Confusion matrix skipped: need two outcome levels in both predictions and "
            f"reference, got predicted={pred_levels} reference={true_levels}."
        )
        logger.warning("degenerate evaluation labels", extra={"predicted": pred_levels, "reference": true_levels})
        return {
            "status": "degenerate",
            "message": message,
            "predicted_levels": pred_levels,
            "reference_levels": true_levels,
        }

    negative = next(level for level in OUTCOME_LEVELS if level != positive)

    # sklearn lays out rows = true, columns = predicted
    cm = confusion_matrix(y_true, y_pred, labels=OUTCOME_LEVELS)
    table = pd.DataFrame(
        cm.T,  # Rows = prediction, columns = reference
        index=pd.Index(OUTCOME_LEVELS, name="Prediction"),
        columns=pd.Index(OUTCOME_LEVELS, name="Reference"),
    )

    tp = int(table.loc[positive, positive])
    tn = int(table.loc[negative, negative])
    fp = int(table.loc[positive, negative])
    fn = int(table.loc[negative, positive])
    total = tp + tn + fp + fn

    sensitivity = tp / (tp + fn)  # Reference always has both levels here
    specificity = tn / (tn + fp)

    metrics = {
        "accuracy": (tp + tn) / total,
        "kappa": float(cohen_kappa_score(y_true, y_pred)),
        "sensitivity": sensitivity,
        "specificity": specificity,
        "pos_pred_value": tp / (tp + fp),  # Predictions also have both levels
        "neg_pred_value": tn / (tn + fn),
        "prevalence": (tp + fn) / total,
        "detection_rate": tp / total,
        "balanced_accuracy": (sensitivity + specificity) / 2,
    }

    return {"status": "ok", "confusion_matrix": table, "metrics": metrics, "positive": positive}


def print_evaluation(result: Dict) -> None:
    """Print the confusion matrix and metrics, or the diagnostic message."""

    title = "Test-set evaluation"
    print(f"\n{title}")
    print("-" * len(title))

    if result["status"] != "ok":
        print(result["message"])
        return

    print(result["confusion_matrix"].to_string())
    print(f"\n'Positive' class: {result['positive']}")
    for name, value in result["metrics"].items():
        print(f"  {name:<18} {value:.4f}")


def plot_confusion_matrix(table: pd.DataFrame, title: str, out_path: Path) -> None:
    """Create and save a confusion matrix heatmap."""

    # Ensure the target directory exists
    ensure_dir(out_path.parent)

    plt.figure(figsize=(6, 5))  # Consistent sizing for reports

    sns.heatmap(
        table,  # Rows = prediction, columns = reference
        annot=True,  # Show values in cells
        fmt="d",  # Integer formatting
        cmap="Blues",  # Simple readable palette
        cbar=False,  # Hide color bar for compactness
        xticklabels=["No disease", "Disease"],
        yticklabels=["No disease", "Disease"],
    )

    plt.xlabel("Reference")
    plt.ylabel("Prediction")
    plt.title(title)

    plt.tight_layout()  # Avoid clipping
    plt.savefig(out_path, dpi=200)  # Persist artifact
    plt.close()  # Prevent figure accumulation
