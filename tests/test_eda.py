# Notes:
# - Exploration is observational: it writes plots and prints tables, returning only paths.
# - The scatter is drawn from the raw 0-4 label, so EDA must run on un-binarized data.

import pandas as pd

from src.cardioeda.eda import run_eda, save_tabular_eda, summarize_dataset


def test_summary_contains_tables(raw_df):
    summary = summarize_dataset(raw_df)

    assert len(summary["head"]) == 5
    assert "age" in summary["describe"].columns
    assert summary["missing"]["ca"] == 4
    assert summary["freq_num"].to_dict() == {0: 164, 1: 55, 2: 36, 3: 35, 4: 13}
    assert summary["freq_sex"].sum() == len(raw_df)


def test_run_eda_writes_three_plots(raw_df, tmp_path, capsys):
    paths = run_eda(raw_df, bins=30, out_dir=tmp_path)

    assert [p.name for p in paths] == ["hist_age.png", "hist_chol.png", "scatter_age_chol.png"]
    assert all(p.exists() and p.stat().st_size > 0 for p in paths)
    assert "describe" in capsys.readouterr().out  # Tables were printed


def test_run_eda_does_not_mutate_input(raw_df, tmp_path):
    before = raw_df.copy()

    run_eda(raw_df, out_dir=tmp_path)

    pd.testing.assert_frame_equal(raw_df, before)


def test_save_tabular_eda(raw_df, tmp_path):
    save_tabular_eda(summarize_dataset(raw_df), tmp_path)

    missing = pd.read_csv(tmp_path / "missing_values.csv")
    assert dict(zip(missing["feature"], missing["missing_count"]))["thal"] == 2
    assert (tmp_path / "data_head.csv").exists()
    assert (tmp_path / "data_describe.csv").exists()
