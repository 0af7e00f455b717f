"""cardioeda.utils

Notes (what this module does)
- Provides small, reusable helpers used across stages (directory creation, JSON saving).
- Keeps filesystem logic consistent and reduces duplication.
"""

# Import json to write metrics in a structured format
import json  # Standard library JSON utilities

# Import Path for filesystem path handling
from pathlib import Path  # OS-independent path utility

# Import numpy to unwrap numpy scalars before serialization
import numpy as np  # Numerical computing


def ensure_dir(path: Path) -> None:
    """Create a directory if it does not already exist.

    Args:
        path: Directory path to create.
    """

    # Create the directory (and parents) if missing; do nothing if it exists
    path.mkdir(parents=True, exist_ok=True)


def _to_builtin(obj):
    """json.dump fallback for numpy scalars/arrays and paths."""

    if isinstance(obj, np.generic):  # np.int64, np.float64, ...
        return obj.item()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def save_json(obj: dict, path: Path) -> None:
    """Save a Python dictionary as pretty-printed JSON.

    Args:
        obj: Dictionary to save.
        path: File path where JSON will be written.
    """

    # Ensure the parent directory exists before writing the file
    ensure_dir(path.parent)  # Prevents 'No such file or directory' errors

    # Open the output path for writing (UTF-8 ensures cross-platform readability)
    with path.open("w", encoding="utf-8") as f:  # Context manager safely closes the file
        json.dump(obj, f, indent=2, sort_keys=True, default=_to_builtin)  # Pretty print for reporting
