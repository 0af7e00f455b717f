"""cardioeda.eda

Notes (what this module does)
- Observational step run on the loaded dataset before any label preparation.
- Prints head, summary statistics, missing counts and frequency tables.
- Generates and saves:
  * Histogram of age
  * Histogram of serum cholesterol
  * Scatter of age vs cholesterol, coloured by the original 0-4 severity label
- Nothing produced here is consumed by later stages.

Run (from project root):
    python -m src.cardioeda.eda
"""

# Import typing for explicit return types
from pathlib import Path  # Output paths
from typing import Dict, List, Union  # Type hints

# Import pandas for DataFrame operations
import pandas as pd  # Data manipulation

# Import matplotlib for plotting
import matplotlib.pyplot as plt  # Plotting library

# Import seaborn for the coloured scatter and style
import seaborn as sns  # Statistical plots

# Import config for column names, bins and paths
from .config import CATEGORICAL_LABELS, TARGET_COL, HIST_BINS, PLOTS_DIR, METRICS_DIR  # Central constants

# Import helper to ensure output directories exist
from .utils import ensure_dir  # Directory creation

from .logging_config import get_logger

logger = get_logger(__name__)

Table = Union[pd.DataFrame, pd.Series]

# Axis labels for the plotted columns
_AXIS_LABELS = {
    "age": "Age (years)",
    "chol": "Serum cholesterol (mg/dl)",
}


def summarize_dataset(df: pd.DataFrame) -> Dict[str, Table]:
    """Collect the tabular summaries printed during exploration.

    Returns:
        Ordered mapping of title -> table: head, describe, missing counts,
        and one frequency table per categorical column plus the severity label.
    """

    summary: Dict[str, Table] = {
        "head": df.head(),  # First 5 rows
        "describe": df.describe().round(2),  # Numeric summary statistics
        "missing": df.isna().sum(),  # Missing markers per column
    }

    # Frequency tables (NaN kept as its own row so missing codes stay visible)
    for col in [*CATEGORICAL_LABELS, TARGET_COL]:
        summary[f"freq_{col}"] = df[col].value_counts(dropna=False).sort_index()

    return summary


def print_summary(summary: Dict[str, Table]) -> None:
    """Print each summary table under an underlined title."""

    for title, table in summary.items():
        print(f"\n{title}")  # Header
        print("-" * len(title))  # Underline
        print(table.to_string())  # Full table, no truncation


def plot_histogram(
    df: pd.DataFrame,
    column: str,
    bins: int = HIST_BINS,
    out_dir: Path = PLOTS_DIR,
) -> Path:
    """Plot and save a histogram of a single numeric column."""

    # Ensure output directory exists
    ensure_dir(out_dir)

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.hist(df[column].dropna(), bins=bins, edgecolor="black", alpha=0.7)  # Histogram
    ax.set_title(f"Distribution of {column}", fontweight="bold")
    ax.set_xlabel(_AXIS_LABELS.get(column, column))
    ax.set_ylabel("Frequency")
    ax.grid(True, alpha=0.3)  # Light grid

    fig.tight_layout()

    out_path = out_dir / f"hist_{column}.png"
    fig.savefig(out_path, dpi=200)  # Persist artifact
    plt.close(fig)  # Cleanup

    return out_path


def plot_age_vs_chol(
    df: pd.DataFrame,
    hue: str = TARGET_COL,
    out_dir: Path = PLOTS_DIR,
) -> Path:
    """Scatter age (x) against cholesterol (y), coloured by ``hue``.

    Called before binarization, so the colours show the 0-4 severity levels.
    """

    ensure_dir(out_dir)

    fig, ax = plt.subplots(figsize=(8, 6))
    sns.scatterplot(
        data=df,
        x="age",
        y="chol",
        hue=hue,  # Original multi-level label
        palette="viridis",
        ax=ax,
    )
    ax.set_title("Age vs Cholesterol", fontweight="bold")
    ax.set_xlabel(_AXIS_LABELS["age"])
    ax.set_ylabel(_AXIS_LABELS["chol"])
    ax.legend(title=hue)

    fig.tight_layout()

    out_path = out_dir / "scatter_age_chol.png"
    fig.savefig(out_path, dpi=200)
    plt.close(fig)

    return out_path


def save_tabular_eda(summary: Dict[str, Table], output_dir: Path = METRICS_DIR) -> None:
    """
    Notes:
    Persist head, describe and missing-value tables as CSV so they are
    available for reports and run tracking.
    """

    ensure_dir(output_dir)

    summary["head"].to_csv(output_dir / "data_head.csv", index=False)
    summary["describe"].to_csv(output_dir / "data_describe.csv")

    missing_summary = summary["missing"].reset_index()
    missing_summary.columns = ["feature", "missing_count"]
    missing_summary.to_csv(output_dir / "missing_values.csv", index=False)


def run_eda(
    df: pd.DataFrame,
    bins: int = HIST_BINS,
    out_dir: Path = PLOTS_DIR,
) -> List[Path]:
    """Print the summaries and render the three exploration plots.

    Returns:
        Paths of the saved plots (age histogram, cholesterol histogram, scatter).
    """

    print_summary(summarize_dataset(df))

    paths = [
        plot_histogram(df, "age", bins=bins, out_dir=out_dir),
        plot_histogram(df, "chol", bins=bins, out_dir=out_dir),
        plot_age_vs_chol(df, out_dir=out_dir),
    ]

    logger.info("eda plots saved", extra={"paths": [str(p) for p in paths]})
    return paths


if __name__ == "__main__":
    from .data_ingest import load_dataset  # Lazy import for CLI execution
    from .logging_config import setup_logging

    setup_logging()
    sns.set_style("darkgrid")  # Styling

    df_raw = load_dataset()  # Acquire data

    run_eda(df_raw)  # Tables + plots
    save_tabular_eda(summarize_dataset(df_raw))  # CSV copies of the tables

    print("EDA plots saved to:", PLOTS_DIR)  # Confirmation
