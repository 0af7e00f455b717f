"""cardioeda.pipeline

Notes (what this script does)
- Runs the whole analysis once, top to bottom:
  1) Load the dataset (single download, categorical coercion)
  2) Exploration: summary tables + age/cholesterol plots (observational only)
  3) Collapse the severity label to a binary outcome
  4) Stratified 80/20 split, then over-sample the training partition to 1000 rows
  5) Fit the three-predictor forest and print its summary
  6) Re-fit under 10-fold cross-validation and print the CV report
  7) Predict the untouched test partition and print the confusion matrix / metrics
  8) Save metrics JSON and log the run to MLflow
- Each stage takes the previous stage's output and returns a new value.

Run (from project root):
    python -m src.cardioeda.pipeline
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

# Import numpy/pandas for stage outputs
import numpy as np  # Prediction arrays
import pandas as pd  # DataFrames

# Import seaborn for plot styling
import seaborn as sns  # Styling

# Import mlflow for experiment tracking
import mlflow  # MLflow tracking

# Import sklearn types for the result container
from sklearn.ensemble import RandomForestClassifier
from sklearn.model_selection import GridSearchCV

# Import project stages
from .data_ingest import load_dataset  # Download + parse + coerce
from .eda import run_eda, save_tabular_eda, summarize_dataset  # Exploration
from .preprocess import binarize_target, split_train_test, oversample_training, class_counts  # Labels/partitions
from .train import fit_forest, summarize_forest, print_forest_summary, cross_validate_forest, print_cv_report, cv_report
from .evaluate import evaluate_predictions, print_evaluation, plot_confusion_matrix  # Test-set scoring

# Import configuration
from .config import (
    PREDICTORS,
    TARGET_COL,
    RANDOM_STATE,
    TRAIN_FRACTION,
    OVERSAMPLE_TARGET_SIZE,
    CV_FOLDS,
    HIST_BINS,
    RF_N_ESTIMATORS,
    RF_MAX_FEATURES,
    RF_PARAM_GRID,
    PLOTS_DIR,
    METRICS_DIR,
    METRICS_JSON_PATH,
    MLFLOW_TRACKING_URI,
    MLFLOW_EXPERIMENT_NAME,
)

# Import helpers and logging
from .utils import save_json
from .logging_config import setup_logging, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Every intermediate value of one run, kept for reporting and tests."""

    raw: pd.DataFrame  # Loaded dataset, original 0-4 label
    labeled: pd.DataFrame  # Binary outcome
    train: pd.DataFrame  # Raw training partition
    test: pd.DataFrame  # Held-out partition
    balanced: pd.DataFrame  # Over-sampled training set
    forest: RandomForestClassifier  # Plain fit on the balanced set
    search: GridSearchCV  # Cross-validated fit; best_estimator_ predicts
    predictions: np.ndarray  # Test-set predictions
    evaluation: Dict  # evaluate_predictions output
    params: Dict  # Settings used for the run
    plots: List[Path]  # Saved figures


def _print_counts(title: str, counts: Dict[int, int]) -> None:
    print(f"\n{title}")
    print("-" * len(title))
    for level, n in counts.items():
        print(f"  {level}: {n}")


def run_pipeline(
    df_raw: pd.DataFrame,
    *,
    random_state: int = RANDOM_STATE,
    train_fraction: float = TRAIN_FRACTION,
    target_size: int = OVERSAMPLE_TARGET_SIZE,
    folds: int = CV_FOLDS,
    bins: int = HIST_BINS,
    n_estimators: int = RF_N_ESTIMATORS,
    max_features=RF_MAX_FEATURES,
    param_grid: Optional[dict] = None,
    plots_dir: Path = PLOTS_DIR,
) -> PipelineResult:
    """Run exploration, label preparation, partitioning, modeling and evaluation.

    ``df_raw`` is not modified.
    """

    params = {
        "random_state": random_state,
        "train_fraction": train_fraction,
        "oversample_target_size": target_size,
        "cv_folds": folds,
        "hist_bins": bins,
        "n_estimators": n_estimators,
        "max_features": max_features,
        "param_grid": param_grid or RF_PARAM_GRID,
        "predictors": list(PREDICTORS),
    }

    # -----------------------------
    # Step 1: Exploration (before binarization, so plots see the 0-4 label)
    # -----------------------------
    plots = run_eda(df_raw, bins=bins, out_dir=plots_dir)

    # -----------------------------
    # Step 2: Label preparation
    # -----------------------------
    labeled = binarize_target(df_raw)
    _print_counts("Outcome after binarization", class_counts(labeled))

    # -----------------------------
    # Step 3: Split + rebalance
    # -----------------------------
    train, test = split_train_test(labeled, train_fraction=train_fraction, random_state=random_state)
    balanced = oversample_training(train, target_size=target_size, random_state=random_state)
    _print_counts("Training partition", class_counts(train))
    _print_counts("Balanced training set", class_counts(balanced))

    # -----------------------------
    # Step 4: Plain fit
    # -----------------------------
    forest = fit_forest(balanced, n_estimators=n_estimators, max_features=max_features, random_state=random_state)
    print_forest_summary(summarize_forest(forest, list(PREDICTORS)))

    # -----------------------------
    # Step 5: Cross-validated fit
    # -----------------------------
    search = cross_validate_forest(
        balanced,
        folds=folds,
        param_grid=param_grid,
        n_estimators=n_estimators,
        random_state=random_state,
    )
    print_cv_report(search)

    # -----------------------------
    # Step 6: Evaluate on the untouched test partition
    # -----------------------------
    predictions = search.best_estimator_.predict(test[list(PREDICTORS)])
    evaluation = evaluate_predictions(test[TARGET_COL], predictions)
    print_evaluation(evaluation)

    if evaluation["status"] == "ok":
        cm_path = plots_dir / "confusion_matrix.png"
        plot_confusion_matrix(evaluation["confusion_matrix"], "Random Forest (test set)", cm_path)
        plots = [*plots, cm_path]

    return PipelineResult(
        raw=df_raw,
        labeled=labeled,
        train=train,
        test=test,
        balanced=balanced,
        forest=forest,
        search=search,
        predictions=predictions,
        evaluation=evaluation,
        params=params,
        plots=plots,
    )


def build_metrics_payload(result: PipelineResult) -> Dict:
    """JSON-friendly summary of one run."""

    evaluation = result.evaluation
    payload = {
        "params": result.params,
        "class_counts": {
            "all": class_counts(result.labeled),
            "train": class_counts(result.train),
            "test": class_counts(result.test),
            "balanced": class_counts(result.balanced),
        },
        "forest": summarize_forest(result.forest, list(PREDICTORS)),
        "cross_validation": {
            "best_params": result.search.best_params_,
            "best_accuracy": float(result.search.best_score_),
            "candidates": cv_report(result.search).to_dict(orient="records"),
        },
        "evaluation": {"status": evaluation["status"]},
    }

    if evaluation["status"] == "ok":
        payload["evaluation"]["metrics"] = evaluation["metrics"]
        payload["evaluation"]["confusion_matrix"] = evaluation["confusion_matrix"].to_numpy().tolist()
    else:
        payload["evaluation"]["message"] = evaluation["message"]

    return payload


def configure_mlflow(tracking_uri: str = MLFLOW_TRACKING_URI, experiment: str = MLFLOW_EXPERIMENT_NAME) -> None:
    """Configure MLflow tracking URI and experiment (local file store)."""

    mlflow.set_tracking_uri(tracking_uri)  # Local tracking
    mlflow.set_experiment(experiment)  # Experiment grouping


def track_run(result: PipelineResult, run_name: str = "bagged_trees_3_predictors") -> str:
    """Log params, CV and test metrics, and plots for one run to MLflow.

    Returns:
        The MLflow run id.
    """

    with mlflow.start_run(run_name=run_name) as run:
        mlflow.set_tag("model_name", "Random Forest")
        mlflow.set_tag("evaluation_status", result.evaluation["status"])

        # Parameters (non-scalar values stringified by MLflow)
        for key, value in result.params.items():
            mlflow.log_param(key, value)
        for key, value in result.search.best_params_.items():
            mlflow.log_param(f"best_{key}", value)

        # CV metrics
        mlflow.log_metric("cv_accuracy_best", float(result.search.best_score_))
        mlflow.log_text(cv_report(result.search).to_csv(index=False), "cv_report.csv")

        # Test metrics (only when the matrix was computed)
        if result.evaluation["status"] == "ok":
            for key, value in result.evaluation["metrics"].items():
                mlflow.log_metric(f"test_{key}", float(value))
        else:
            mlflow.set_tag("evaluation", result.evaluation["message"])

        # Figures
        for path in result.plots:
            mlflow.log_artifact(str(path), artifact_path="plots")

    return run.info.run_id


def main(
    track: bool = True,
    *,
    plots_dir: Path = PLOTS_DIR,
    metrics_dir: Path = METRICS_DIR,
    tracking_uri: str = MLFLOW_TRACKING_URI,
    experiment: str = MLFLOW_EXPERIMENT_NAME,
    **pipeline_options,
) -> PipelineResult:
    """Main entry point: load, analyse, report, track.

    ``pipeline_options`` are forwarded to run_pipeline (seed, fractions, forest size, ...).
    """

    setup_logging()
    sns.set_style("darkgrid")  # Styling

    try:
        df_raw = load_dataset()
        result = run_pipeline(df_raw, plots_dir=plots_dir, **pipeline_options)

        save_tabular_eda(summarize_dataset(df_raw), metrics_dir)  # CSV copies of the EDA tables
        save_json(build_metrics_payload(result), metrics_dir / METRICS_JSON_PATH.name)

        if track:
            configure_mlflow(tracking_uri, experiment)
            run_id = track_run(result)
            logger.info("run tracked", extra={"run_id": run_id, "tracking_uri": tracking_uri})
    except Exception:
        logger.exception("pipeline failed")
        raise

    logger.info("pipeline complete", extra={"evaluation_status": result.evaluation["status"]})
    return result


if __name__ == "__main__":
    main()  # Execute the analysis when run as a script
