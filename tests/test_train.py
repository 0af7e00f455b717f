# Notes:
# - The forest only ever sees age, cholesterol and resting blood pressure.
# - Cross-validation re-fits the same family and exposes a usable final model.
# - Small forests/fold counts keep the suite fast; production defaults live in config.

import pytest

from src.cardioeda.config import PREDICTORS
from src.cardioeda.preprocess import oversample_training, split_train_test
from src.cardioeda.train import (
    cross_validate_forest,
    cv_report,
    fit_forest,
    print_cv_report,
    print_forest_summary,
    summarize_forest,
)


@pytest.fixture
def balanced(labeled_df):
    train, _ = split_train_test(labeled_df)
    return oversample_training(train)


def test_forest_uses_only_three_predictors(balanced):
    model = fit_forest(balanced, n_estimators=20)

    assert model.n_features_in_ == 3
    assert list(model.feature_names_in_) == PREDICTORS
    assert list(model.classes_) == [0, 1]


def test_forest_summary(balanced, capsys):
    model = fit_forest(balanced, n_estimators=20)

    summary = summarize_forest(model, PREDICTORS)

    assert summary["n_estimators"] == 20
    assert summary["max_features"] == "sqrt"
    assert set(summary["feature_importances"]) == set(PREDICTORS)
    assert summary["oob_error"] == pytest.approx(1 - summary["oob_accuracy"])

    print_forest_summary(summary)
    assert "Number of trees" in capsys.readouterr().out


def test_cross_validation_selects_final_model(balanced, capsys):
    search = cross_validate_forest(
        balanced, folds=3, param_grid={"max_features": [1, 2]}, n_estimators=10
    )

    assert search.best_params_["max_features"] in (1, 2)
    assert search.best_estimator_.n_features_in_ == 3
    assert search.cv.get_n_splits() == 3

    report = cv_report(search)
    assert len(report) == 2
    assert report.loc[0, "rank"] == 1
    assert {"accuracy_mean", "kappa_mean"} <= set(report.columns)

    print_cv_report(search)
    assert "3-fold" in capsys.readouterr().out


def test_cross_validation_is_reproducible(balanced):
    kwargs = dict(folds=3, param_grid={"max_features": [1, 2]}, n_estimators=10, random_state=123)

    first = cv_report(cross_validate_forest(balanced, **kwargs))
    second = cv_report(cross_validate_forest(balanced, **kwargs))

    assert first.equals(second)
