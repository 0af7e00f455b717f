"""cardioeda.preprocess

Notes (what this module does)
- Collapses the 0-4 severity label into a binary outcome (0 = no disease, 1 = disease).
- Splits the labelled dataset into train/test sets with stratification (seeded).
- Rebalances the training partition by random over-sampling with replacement
  (imblearn RandomOverSampler) to a fixed total size with equal class counts.
  The majority class is duplicated up to its half as well, not only the
  minority, so the result has exactly target_size rows and equal class counts.
- The test partition is never resampled; every function returns a new frame.
"""

# Import typing for explicit return types
from typing import Dict, Tuple  # Improves readability and IDE support

# Import numpy for index arrays
import numpy as np  # Numerical computing

# Import pandas for DataFrame operations
import pandas as pd  # Data manipulation

# Import scikit-learn utility for splitting
from sklearn.model_selection import train_test_split  # Train/test split

# Import imbalanced-learn for seeded over-sampling
from imblearn.over_sampling import RandomOverSampler  # Duplication with replacement

# Import project configuration constants
from .config import (
    TARGET_COL,  # Name of the target column
    TRAIN_FRACTION,  # Train split fraction
    RANDOM_STATE,  # Reproducible seed
    OVERSAMPLE_TARGET_SIZE,  # Balanced training-set size
)  # Central config

from .logging_config import get_logger

logger = get_logger(__name__)

# Outcome levels after binarization
OUTCOME_LEVELS = [0, 1]  # No disease, disease present

# Raw severity codes accepted by binarize_target
_SEVERITY_LEVELS = {0, 1, 2, 3, 4}


def binarize_target(df: pd.DataFrame, target: str = TARGET_COL) -> pd.DataFrame:
    """Return a copy of ``df`` with the severity label collapsed to a 0/1 categorical.

    Args:
        df: Dataset with the raw 0-4 label.
        target: Label column name.

    Returns:
        New DataFrame; ``target`` is a Categorical with categories [0, 1].

    Raises:
        ValueError: if the label holds missing values or codes outside 0-4.
    """

    labels = df[target]

    if labels.isna().any():
        raise ValueError(f"{target!r} has {int(labels.isna().sum())} missing values")

    unexpected = set(labels.unique().tolist()) - _SEVERITY_LEVELS
    if unexpected:
        raise ValueError(f"{target!r} has unexpected severity codes {sorted(unexpected)}")

    out = df.copy()  # Preserve the caller's frame

    # 0 stays 0; 1-4 become 1
    out[target] = pd.Categorical((labels > 0).astype(int), categories=OUTCOME_LEVELS)

    return out


def class_counts(df: pd.DataFrame, target: str = TARGET_COL) -> Dict[int, int]:
    """Count rows per outcome level (levels with zero rows included)."""

    counts = df[target].value_counts(sort=False)
    return {int(level): int(n) for level, n in counts.items()}


def split_train_test(
    df: pd.DataFrame,
    train_fraction: float = TRAIN_FRACTION,
    random_state: int = RANDOM_STATE,
    target: str = TARGET_COL,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Split into train/test partitions stratified by the outcome.

    Original index labels are kept, so the two partitions can be checked for
    disjointness against the input.

    Returns:
        (train, test)
    """

    # Perform a stratified split to preserve class proportions
    train, test = train_test_split(
        df,  # Whole labelled dataset
        train_size=train_fraction,  # Training share
        random_state=random_state,  # Seed for reproducibility
        stratify=df[target],  # Maintain class balance across splits
    )

    logger.info(
        "train/test split",
        extra={"train": class_counts(train, target), "test": class_counts(test, target)},
    )
    return train.copy(), test.copy()


def _per_class_targets(counts: Dict[int, int], target_size: int) -> Dict[int, int]:
    """Share ``target_size`` evenly across classes; any remainder goes to the smaller classes."""

    share, remainder = divmod(target_size, len(counts))
    targets = {level: share for level in counts}

    # Smallest classes first so the remainder lands on the minority
    for level in sorted(counts, key=lambda lvl: (counts[lvl], lvl))[:remainder]:
        targets[level] += 1

    return targets


def oversample_training(
    train: pd.DataFrame,
    target_size: int = OVERSAMPLE_TARGET_SIZE,
    random_state: int = RANDOM_STATE,
    target: str = TARGET_COL,
) -> pd.DataFrame:
    """Build the balanced training set by random over-sampling with replacement.

    Every class, the majority included, is topped up to its share of
    ``target_size`` by duplicating randomly chosen rows of that class, so
    both the total size and the class balance hit target. Original rows are
    always kept, so a class already larger than its share cannot be reached
    by over-sampling.

    Args:
        train: Raw training partition (left untouched).
        target_size: Total rows in the returned frame.
        random_state: Seed for the sampler.
        target: Label column name.

    Returns:
        New DataFrame of exactly ``target_size`` rows, index reset to 0..n-1.

    Raises:
        ValueError: if fewer than two classes are present or a class exceeds its share.
    """

    counts = {level: n for level, n in class_counts(train, target).items() if n > 0}
    if len(counts) < 2:
        raise ValueError(f"need at least two outcome classes to rebalance, got {counts}")

    strategy = _per_class_targets(counts, target_size)

    too_large = {level: n for level, n in counts.items() if n > strategy[level]}
    if too_large:
        raise ValueError(
            f"cannot over-sample to {target_size} rows: classes {too_large} already exceed "
            f"their share {strategy}"
        )

    # Resample row positions only, then take those rows so every column keeps its dtype
    positions = np.arange(len(train)).reshape(-1, 1)
    labels = train[target].astype(int).to_numpy()

    sampler = RandomOverSampler(sampling_strategy=strategy, random_state=random_state)
    sampler.fit_resample(positions, labels)

    balanced = train.iloc[sampler.sample_indices_].reset_index(drop=True)

    logger.info(
        "training set rebalanced",
        extra={"before": counts, "after": class_counts(balanced, target), "rows": len(balanced)},
    )
    return balanced
