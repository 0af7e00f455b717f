"""
Pytest configuration.

Ensures the project root is on PYTHONPATH so that
imports like `from src.cardioeda...` work in local
and CI environments, forces a headless matplotlib
backend, and provides a synthetic Cleveland-shaped
dataset so tests never touch the network.
"""

import os
import sys
from pathlib import Path

import numpy as np
import pytest

# Headless plotting before anything imports pyplot
os.environ.setdefault("MPLBACKEND", "Agg")

# Keep MLflow telemetry off so its HTTP ping never hits the patched requests.get
os.environ.setdefault("MLFLOW_DISABLE_TELEMETRY", "true")

# Add project root to PYTHONPATH
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

# Severity label counts shaped like the processed Cleveland file
SEVERITY_COUNTS = {0: 164, 1: 55, 2: 36, 3: 35, 4: 13}  # 303 rows, 164 healthy / 139 diseased
N_ROWS = sum(SEVERITY_COUNTS.values())  # 303

# Rows whose ca / thal are written as '?'
MISSING_CA_ROWS = [166, 192, 287, 302]
MISSING_THAL_ROWS = [87, 266]


def make_cleveland_text(seed: int = 0) -> str:
    """Headerless 14-column CSV text shaped like processed.cleveland.data."""

    rng = np.random.default_rng(seed)

    num = np.concatenate([np.full(n, level) for level, n in SEVERITY_COUNTS.items()])
    rng.shuffle(num)

    columns = [
        rng.integers(29, 78, N_ROWS),  # age
        rng.integers(0, 2, N_ROWS),  # sex
        rng.integers(1, 5, N_ROWS),  # cp
        rng.integers(94, 201, N_ROWS),  # trestbps
        rng.integers(126, 565, N_ROWS),  # chol
        rng.integers(0, 2, N_ROWS),  # fbs
        rng.integers(0, 3, N_ROWS),  # restecg
        rng.integers(71, 203, N_ROWS),  # thalach
        rng.integers(0, 2, N_ROWS),  # exang
        np.round(rng.uniform(0, 6.2, N_ROWS), 1),  # oldpeak
        rng.integers(1, 4, N_ROWS),  # slope
        rng.integers(0, 4, N_ROWS),  # ca
        rng.choice([3, 6, 7], N_ROWS),  # thal
        num,  # num
    ]

    lines = []
    for i in range(N_ROWS):
        fields = [f"{float(col[i]):.1f}" for col in columns]
        if i in MISSING_CA_ROWS:
            fields[11] = "?"
        if i in MISSING_THAL_ROWS:
            fields[12] = "?"
        fields[13] = str(int(num[i]))
        lines.append(",".join(fields))

    return "\n".join(lines) + "\n"


@pytest.fixture
def cleveland_text() -> str:
    return make_cleveland_text()


@pytest.fixture
def raw_df(cleveland_text):
    from src.cardioeda.data_ingest import coerce_categoricals, parse_dataset

    return coerce_categoricals(parse_dataset(cleveland_text))


@pytest.fixture
def labeled_df(raw_df):
    from src.cardioeda.preprocess import binarize_target

    return binarize_target(raw_df)


class FakeResponse:
    """Minimal stand-in for requests.Response used as a context manager."""

    def __init__(self, text: str, status_code: int = 200):
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def fake_download(monkeypatch, cleveland_text):
    """Patch requests.get to serve the synthetic file; returns the list of requested URLs."""

    import requests

    calls = []

    def _get(url, timeout=None):
        calls.append(url)
        return FakeResponse(cleveland_text)

    monkeypatch.setattr(requests, "get", _get)
    return calls
