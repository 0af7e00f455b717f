"""cardioeda.data_ingest

Notes (what this module does)
- Downloads the Heart Disease (processed Cleveland) dataset from UCI in a single request.
- Parses the headerless CSV into the fixed 14-column schema; '?' markers stay as NaN.
- Coerces sex, chest-pain type and exercise angina to labelled categoricals.
- Any acquisition or schema failure aborts the run (no retries, no local cache).

Run (from project root):
    python -m src.cardioeda.data_ingest
"""

# Import StringIO to treat downloaded text as a file-like object for pandas
from io import StringIO  # Allows pd.read_csv on in-memory strings

# Import requests to download the dataset over HTTP
import requests  # HTTP client

# Import pandas for CSV parsing into a DataFrame
import pandas as pd  # Data manipulation library

# Import project configuration (URL, column names, label maps)
from .config import (
    DATASET_URL,  # Remote CSV location
    COLUMN_NAMES,  # Fixed schema
    MISSING_MARKERS,  # Sentinel strings for missing values
    CATEGORICAL_LABELS,  # Code -> label maps
    REQUEST_TIMEOUT,  # HTTP timeout
)  # Central config

# Import module logger factory
from .logging_config import get_logger  # Structured logging

logger = get_logger(__name__)


class DataSchemaError(ValueError):
    """Raised when the downloaded file does not match the expected 14-column schema."""


def download_dataset(url: str = DATASET_URL, timeout: float = REQUEST_TIMEOUT) -> str:
    """Fetch the raw CSV text from ``url``.

    Network and HTTP errors from requests propagate unchanged.
    """

    logger.info("downloading dataset", extra={"url": url})

    # The response is closed as soon as the body has been read
    with requests.get(url, timeout=timeout) as response:  # Single GET, no retry
        response.raise_for_status()  # Fail fast on 4xx/5xx
        text = response.text  # Whole body in memory

    logger.info("download complete", extra={"bytes": len(text)})
    return text


def parse_dataset(text: str) -> pd.DataFrame:
    """Parse headerless CSV text into a DataFrame with the documented column names.

    Args:
        text: Raw file content.

    Returns:
        DataFrame with one row per input record and 14 named columns.

    Raises:
        DataSchemaError: if the text is empty, ragged, or not 14 columns wide.
    """

    # pandas pads short rows with NaN, so field counts are checked on the raw lines
    expected = len(COLUMN_NAMES)
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():  # Blank lines are skipped by read_csv too
            continue
        n_fields = line.count(",") + 1
        if n_fields != expected:
            raise DataSchemaError(f"line {lineno}: expected {expected} fields, got {n_fields}")

    try:
        df = pd.read_csv(
            StringIO(text),  # Provide the content as a file-like buffer
            header=None,  # The file has no header row
            na_values=MISSING_MARKERS,  # Treat '?' as missing values
        )
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as exc:
        raise DataSchemaError(f"could not parse dataset: {exc}") from exc

    # Check width before naming so a wrong file never gets silently relabelled
    if df.shape[1] != len(COLUMN_NAMES):
        raise DataSchemaError(
            f"expected {len(COLUMN_NAMES)} columns, got {df.shape[1]}"
        )

    df.columns = COLUMN_NAMES  # Assign documented column names
    return df


def coerce_categoricals(df: pd.DataFrame, labels: dict = CATEGORICAL_LABELS) -> pd.DataFrame:
    """Return a copy of ``df`` with the coded columns in ``labels`` as labelled categoricals.

    Missing values stay missing. A code with no label raises DataSchemaError.
    """

    out = df.copy()  # Leave the caller's frame untouched

    for col, mapping in labels.items():
        mapped = out[col].map(mapping)  # 1.0 and 1 hash alike, so float codes map too

        # Any non-missing code that did not map is outside the documented levels
        unknown = out[col].notna() & mapped.isna()
        if unknown.any():
            bad = sorted(out.loc[unknown, col].unique().tolist())
            raise DataSchemaError(f"column {col!r} has undocumented codes {bad}")

        out[col] = pd.Categorical(mapped, categories=list(mapping.values()))

    return out


def load_dataset(url: str = DATASET_URL, timeout: float = REQUEST_TIMEOUT) -> pd.DataFrame:
    """Download, parse, and coerce the dataset."""

    df = coerce_categoricals(parse_dataset(download_dataset(url, timeout=timeout)))

    # Report missing markers so they are visible rather than silently dropped
    missing = {col: int(n) for col, n in df.isna().sum().items() if n}
    logger.info("dataset loaded", extra={"rows": len(df), "columns": df.shape[1], "missing": missing})
    return df


if __name__ == "__main__":
    from .logging_config import setup_logging  # Configure handlers for CLI use

    setup_logging()

    df_raw = load_dataset()  # Acquire dataset

    # Print basic confirmation details
    print("Dataset ready.")
    print(f"Shape: {df_raw.shape}")  # Expected (303, 14)
    print(df_raw.head())  # Preview first 5 rows
