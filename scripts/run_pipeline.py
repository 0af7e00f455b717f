"""scripts.run_pipeline

Notes (what this script does)
- Top-level entrypoint that runs the whole analysis (ingest -> EDA -> labels ->
  split/rebalance -> forest -> cross-validation -> evaluation) from a clean environment.
- Runs the pipeline module with the current interpreter so relative imports resolve,
  and reports the end-to-end duration.
- Outputs are written to artifacts/plots, artifacts/metrics and mlruns/.

How to run (from project root)
    python scripts/run_pipeline.py
"""

# Import subprocess to call the module entrypoint reliably
import subprocess  # Run child processes

# Import sys to forward the current interpreter and propagate exit codes
import sys  # Python interpreter + exit

# Import time to capture runtime duration for logs
import time  # Simple timing

# Import Path to reliably build OS-independent paths
from pathlib import Path  # File system paths


def _run(cmd: list[str], cwd: Path) -> None:
    """Run a command, stream logs, and fail fast on errors."""

    print(f"\n[RUN] {' '.join(cmd)}")  # Human-readable command

    completed = subprocess.run(cmd, cwd=str(cwd))  # Inherit stdout/stderr

    if completed.returncode != 0:  # Non-zero means failure
        raise RuntimeError(f"Command failed with exit code {completed.returncode}: {cmd}")


def main() -> None:
    """Run the pipeline module once and print where outputs went."""

    t0 = time.time()  # Start timer

    # Resolve the project root as the parent folder of scripts/
    project_root = Path(__file__).resolve().parents[1]

    _run([sys.executable, "-m", "src.cardioeda.pipeline"], project_root)

    dt = time.time() - t0  # Elapsed time
    print(f"\nPipeline completed successfully in {dt:.2f} seconds.")

    print("Outputs:")
    print("  artifacts/plots/ and artifacts/metrics/")
    print("  mlruns/")


if __name__ == "__main__":
    main()
