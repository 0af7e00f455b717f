"""cardioeda.train

Notes (what this module does)
- Fits a bagged decision-tree ensemble (RandomForestClassifier) on the balanced
  training set, using only age, cholesterol and resting blood pressure.
- Re-fits the same model family under stratified 10-fold cross-validation
  (GridSearchCV over the split-feature count), scoring accuracy and Cohen's kappa.
- Builds the printable model summary and cross-validation report.
"""

from typing import Dict, List, Optional, Sequence

# Import pandas for the CV report table
import pandas as pd  # DataFrame utilities

# Import sklearn model, CV utilities and scorers
from sklearn.ensemble import RandomForestClassifier  # Bagged trees
from sklearn.metrics import cohen_kappa_score, make_scorer  # Kappa scorer
from sklearn.model_selection import GridSearchCV, StratifiedKFold  # CV and tuning

# Import configuration (predictors, hyperparams, seed)
from .config import (
    PREDICTORS,  # Model inputs
    TARGET_COL,  # Outcome column
    RANDOM_STATE,  # Reproducibility seed
    RF_N_ESTIMATORS,  # Trees per forest
    RF_MAX_FEATURES,  # Split-feature count for the plain fit
    RF_PARAM_GRID,  # CV search space
    CV_FOLDS,  # Number of folds
)

from .logging_config import get_logger

logger = get_logger(__name__)

# Scorers reported by cross-validation; "accuracy" selects the final model
CV_SCORING = {
    "accuracy": "accuracy",
    "kappa": make_scorer(cohen_kappa_score),
}


def split_xy(df: pd.DataFrame, predictors: Sequence[str] = PREDICTORS, target: str = TARGET_COL):
    """Select the predictor columns and the integer outcome vector."""

    X = df[list(predictors)]  # Restricted feature matrix
    y = df[target].astype(int)  # 0/1 labels
    return X, y


def build_forest(
    n_estimators: int = RF_N_ESTIMATORS,
    max_features=RF_MAX_FEATURES,
    random_state: int = RANDOM_STATE,
) -> RandomForestClassifier:
    """Unfitted bagged-tree classifier with explicit ensemble settings."""

    return RandomForestClassifier(
        n_estimators=n_estimators,  # Number of trees
        max_features=max_features,  # Features tried per split
        oob_score=True,  # Out-of-bag accuracy for the summary
        random_state=random_state,  # Reproducibility
    )


def fit_forest(
    balanced: pd.DataFrame,
    predictors: Sequence[str] = PREDICTORS,
    n_estimators: int = RF_N_ESTIMATORS,
    max_features=RF_MAX_FEATURES,
    random_state: int = RANDOM_STATE,
) -> RandomForestClassifier:
    """Fit the ensemble on the balanced training set."""

    X, y = split_xy(balanced, predictors)

    model = build_forest(n_estimators, max_features, random_state)
    model.fit(X, y)

    logger.info(
        "forest fitted",
        extra={"rows": len(X), "predictors": list(predictors), "oob_accuracy": float(model.oob_score_)},
    )
    return model


def summarize_forest(model: RandomForestClassifier, feature_names: Optional[List[str]] = None) -> Dict:
    """Summary of a fitted forest: settings, OOB accuracy/error and feature importances."""

    names = feature_names or list(getattr(model, "feature_names_in_", []))
    oob = float(model.oob_score_) if hasattr(model, "oob_score_") else None

    return {
        "type": "classification",
        "n_estimators": model.n_estimators,
        "max_features": model.max_features,
        "classes": [int(c) for c in model.classes_],
        "oob_accuracy": oob,
        "oob_error": None if oob is None else 1.0 - oob,
        "feature_importances": {
            name: float(imp) for name, imp in zip(names, model.feature_importances_)
        },
    }


def print_forest_summary(summary: Dict) -> None:
    """Print the model summary block."""

    title = "Random forest (bagged trees)"
    print(f"\n{title}")
    print("-" * len(title))
    print(f"Type of forest:            {summary['type']}")
    print(f"Number of trees:           {summary['n_estimators']}")
    print(f"Features tried per split:  {summary['max_features']}")
    if summary["oob_error"] is not None:
        print(f"OOB estimate of error:     {summary['oob_error']:.2%}")
    print("Feature importances:")
    for name, imp in sorted(summary["feature_importances"].items(), key=lambda kv: -kv[1]):
        print(f"  {name:<10} {imp:.4f}")


def cross_validate_forest(
    balanced: pd.DataFrame,
    predictors: Sequence[str] = PREDICTORS,
    folds: int = CV_FOLDS,
    param_grid: Optional[dict] = None,
    n_estimators: int = RF_N_ESTIMATORS,
    random_state: int = RANDOM_STATE,
) -> GridSearchCV:
    """Tune and re-fit the forest under stratified k-fold cross-validation.

    Fold assignment is shuffled with ``random_state``. The returned search is
    refit on the full balanced set; ``best_estimator_`` is the final model.
    """

    X, y = split_xy(balanced, predictors)

    search = GridSearchCV(
        estimator=RandomForestClassifier(n_estimators=n_estimators, random_state=random_state),
        param_grid=param_grid or RF_PARAM_GRID,  # Candidate split-feature counts
        cv=StratifiedKFold(n_splits=folds, shuffle=True, random_state=random_state),  # Stratified CV
        scoring=CV_SCORING,  # Accuracy + kappa
        refit="accuracy",  # Select on accuracy
        verbose=0,  # Keep console output clean
    )
    search.fit(X, y)

    logger.info(
        "cross-validation complete",
        extra={"folds": folds, "best_params": search.best_params_, "best_accuracy": float(search.best_score_)},
    )
    return search


def cv_report(search: GridSearchCV) -> pd.DataFrame:
    """One row per candidate with mean/std accuracy and kappa across folds."""

    results = search.cv_results_
    report = pd.DataFrame(
        {
            "params": [str(p) for p in results["params"]],
            "accuracy_mean": results["mean_test_accuracy"],
            "accuracy_std": results["std_test_accuracy"],
            "kappa_mean": results["mean_test_kappa"],
            "kappa_std": results["std_test_kappa"],
            "rank": results["rank_test_accuracy"],
        }
    )
    return report.sort_values("rank").reset_index(drop=True)


def print_cv_report(search: GridSearchCV) -> None:
    """Print the cross-validation table and the selected candidate."""

    title = f"Cross-validation ({search.cv.get_n_splits()}-fold, stratified)"
    print(f"\n{title}")
    print("-" * len(title))
    print(cv_report(search).round(4).to_string(index=False))
    print(f"\nAccuracy was used to select the optimal model: {search.best_params_}")
