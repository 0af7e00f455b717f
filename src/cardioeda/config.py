"""cardioeda.config

Notes (what this module does)
- Centralizes constants used across ingestion, EDA, label preparation, training, and evaluation.
- Every stage function takes these values as keyword defaults, so a caller can override any of them.
- Library defaults (ensemble size, split-feature count) are pinned here for reproducibility.
"""

# Import Path for OS-independent file path handling
from pathlib import Path  # Standard library utility for paths

# Define the project root as the directory that contains this file's grandparent (repo/src/cardioeda)
PROJECT_ROOT = Path(__file__).resolve().parents[2]  # Resolve absolute path for reliability

# -----------------------------
# Dataset configuration
# -----------------------------

# Processed Cleveland subset of the UCI Heart Disease data (headerless CSV, 14 columns)
DATASET_URL = (
    "https://archive.ics.uci.edu/ml/machine-learning-databases/heart-disease/processed.cleveland.data"
)  # Public dataset endpoint

# Column names in file order
COLUMN_NAMES = [
    "age", "sex", "cp", "trestbps", "chol", "fbs",
    "restecg", "thalach", "exang", "oldpeak",
    "slope", "ca", "thal", "num"
]  # 13 attributes + 1 severity label

# Sentinel strings used by the source file for missing values
MISSING_MARKERS = ["?"]  # Read as NaN, never imputed

# Columns coerced to categorical, with code -> label maps
CATEGORICAL_LABELS = {
    "sex": {0: "Female", 1: "Male"},
    "cp": {
        1: "typical angina",
        2: "atypical angina",
        3: "non-anginal pain",
        4: "asymptomatic",
    },
    "exang": {0: "No", 1: "Yes"},
}  # Order of each map defines category order

# Severity label (0-4 in the raw file, 0/1 after binarization)
TARGET_COL = "num"  # Output label column name

# Outcome level treated as "positive" when deriving sensitivity/specificity
POSITIVE_CLASS = 1  # Disease present

# Predictors used by the classifier (deliberately restricted)
PREDICTORS = ["age", "chol", "trestbps"]  # Age, cholesterol, resting blood pressure

# HTTP timeout for the single download request (seconds)
REQUEST_TIMEOUT = 30  # Expiry is treated as a fatal acquisition failure

# -----------------------------
# Partitioning and rebalancing
# -----------------------------

# Random seed shared by split, oversampling, forest, and CV folds
RANDOM_STATE = 123  # Seed for reproducibility

# Share of rows kept for training (stratified)
TRAIN_FRACTION = 0.80  # Remaining 20% is the held-out test set

# Size of the rebalanced training set
OVERSAMPLE_TARGET_SIZE = 1000  # Split evenly across outcome classes

# -----------------------------
# Model configuration
# -----------------------------

# Bagged-tree ensemble settings (explicit instead of relying on library defaults)
RF_N_ESTIMATORS = 500  # Number of trees
RF_MAX_FEATURES = "sqrt"  # Features considered per split (1 of 3 predictors)

# Candidates tuned by cross-validation (number of features considered per split)
RF_PARAM_GRID = {
    "max_features": [1, 2, 3],
}  # Parameter grid for GridSearchCV

# Number of stratified folds used for cross-validation
CV_FOLDS = 10  # StratifiedKFold splits

# -----------------------------
# Exploration
# -----------------------------

# Histogram bin count for age/cholesterol plots
HIST_BINS = 30  # Fixed bin count

# -----------------------------
# Paths for outputs
# -----------------------------

# Where rendered plots are written
PLOTS_DIR = PROJECT_ROOT / "artifacts" / "plots"  # Folder for images

# Where tables and metrics are written
METRICS_DIR = PROJECT_ROOT / "artifacts" / "metrics"  # Folder for metrics
METRICS_JSON_PATH = METRICS_DIR / "metrics.json"  # Full metrics dump as JSON

# -----------------------------
# Experiment tracking
# -----------------------------

# Local MLflow file store and experiment name
MLFLOW_TRACKING_URI = (PROJECT_ROOT / "mlruns").as_uri()  # file:// URI
MLFLOW_EXPERIMENT_NAME = "cleveland-bagged-trees"  # Experiment grouping
