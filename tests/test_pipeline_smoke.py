# Notes:
# - Smoke test: the whole analysis runs end-to-end on the synthetic dataset.
# - Determinism: same seed -> same split, same balanced set, same predictions and metrics.
# - Uses a small forest and 3 folds; network is faked and MLflow writes to a tmp file store.

import numpy as np
import pandas as pd
import pytest

from src.cardioeda.config import TARGET_COL
from src.cardioeda.data_ingest import load_dataset
from src.cardioeda.pipeline import build_metrics_payload, main, run_pipeline
from src.cardioeda.preprocess import class_counts
from src.cardioeda.utils import save_json

FAST = dict(n_estimators=15, folds=3, param_grid={"max_features": [1, 2]})


@pytest.fixture
def result(raw_df, tmp_path):
    return run_pipeline(raw_df, plots_dir=tmp_path, **FAST)


def test_pipeline_runs_end_to_end(result, raw_df):
    """Every stage output has the documented shape."""

    assert len(result.labeled) == len(raw_df)
    assert len(result.train) + len(result.test) == len(raw_df)
    assert len(result.balanced) == 1000
    assert class_counts(result.balanced) == {0: 500, 1: 500}
    assert len(result.predictions) == len(result.test)
    assert result.evaluation["status"] in {"ok", "degenerate"}
    assert all(p.exists() for p in result.plots)


def test_pipeline_does_not_mutate_raw(raw_df, tmp_path):
    before = raw_df.copy()

    run_pipeline(raw_df, plots_dir=tmp_path, **FAST)

    pd.testing.assert_frame_equal(raw_df, before)


def test_test_partition_never_resampled(result):
    """Test rows are a subset of the labelled data with unique original indices."""

    assert result.test.index.is_unique
    assert set(result.test.index) <= set(result.labeled.index)
    assert set(result.test.index).isdisjoint(result.train.index)


def test_pipeline_is_deterministic(raw_df, tmp_path):
    first = run_pipeline(raw_df, plots_dir=tmp_path / "a", **FAST)
    second = run_pipeline(raw_df, plots_dir=tmp_path / "b", **FAST)

    assert list(first.train.index) == list(second.train.index)
    assert list(first.test.index) == list(second.test.index)
    pd.testing.assert_frame_equal(first.balanced, second.balanced)
    np.testing.assert_array_equal(first.predictions, second.predictions)
    assert build_metrics_payload(first)["evaluation"] == build_metrics_payload(second)["evaluation"]


def test_metrics_payload_is_json_serializable(result, tmp_path):
    out_path = tmp_path / "metrics" / "metrics.json"

    payload = build_metrics_payload(result)
    save_json(payload, out_path)

    assert out_path.exists()
    assert payload["class_counts"]["balanced"] == {0: 500, 1: 500}
    assert payload["params"]["predictors"] == ["age", "chol", "trestbps"]


def test_pipeline_from_download(fake_download, tmp_path):
    """Loading through the (faked) download feeds straight into the pipeline."""

    result = run_pipeline(load_dataset(), plots_dir=tmp_path, **FAST)

    assert set(result.labeled[TARGET_COL].unique()) <= {0, 1}
    assert len(fake_download) == 1


def test_main_writes_outputs_and_tracks_run(fake_download, tmp_path):
    """main() should download, run, write metrics/tables and record the run in MLflow."""

    from mlflow.tracking import MlflowClient  # Read back what was logged

    tracking_uri = (tmp_path / "mlruns").as_uri()  # Local file store under tmp

    result = main(
        plots_dir=tmp_path / "plots",
        metrics_dir=tmp_path / "metrics",
        tracking_uri=tracking_uri,
        experiment="cardioeda-smoke",
        **FAST,
    )

    assert len(fake_download) == 1  # Single download
    assert (tmp_path / "metrics" / "metrics.json").exists()  # Metrics JSON
    assert (tmp_path / "metrics" / "missing_values.csv").exists()  # EDA tables

    client = MlflowClient(tracking_uri=tracking_uri)
    experiment = client.get_experiment_by_name("cardioeda-smoke")
    runs = client.search_runs([experiment.experiment_id])
    assert len(runs) == 1  # One run per pipeline execution

    run = runs[0]
    assert run.data.params["random_state"] == "123"
    assert run.data.params["n_estimators"] == "15"
    assert "cv_accuracy_best" in run.data.metrics
    assert run.data.tags["evaluation_status"] == result.evaluation["status"]
    if result.evaluation["status"] == "ok":
        assert run.data.metrics["test_accuracy"] == pytest.approx(result.evaluation["metrics"]["accuracy"])

    logged_plots = {f.path for f in client.list_artifacts(run.info.run_id, "plots")}
    assert {"plots/hist_age.png", "plots/hist_chol.png", "plots/scatter_age_chol.png"} <= logged_plots
    assert "cv_report.csv" in {f.path for f in client.list_artifacts(run.info.run_id)}
