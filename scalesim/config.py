from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

OUTPUTS_DIR = PROJECT_ROOT / "outputs"
TABLES_DIR = OUTPUTS_DIR / "tables"
LOGS_DIR = OUTPUTS_DIR / "logs"

# Experiment identifiers (used in outputs/ metadata)
EXPERIMENT_NAMESPACE = "counting_scale_v1"

# Checkpoint grid: successive multiples of CHECKPOINT_STEP up to total_parts.
CHECKPOINT_STEP = 100
MIN_TOTAL_PARTS = 100
MIN_CALIBRATION_SAMPLE_SIZE = 1

# Defaults mirror the interactive scale simulator's pre-filled form.
DEFAULT_TOTAL_PARTS = 10000
DEFAULT_CALIBRATION_SAMPLE_SIZE = 100
DEFAULT_WEIGHT_MODEL = "discrete"  # choices: discrete, normal
DEFAULT_WEIGHT_VALUES = "2.1,2.2,2.3"
DEFAULT_WEIGHT_PROBABILITIES = "0.1,0.2,0.7"
DEFAULT_NORMAL_MEAN = 2.2
DEFAULT_NORMAL_STDDEV = 0.1
DEFAULT_SCALE_RESOLUTION = 0.1
DEFAULT_MEASUREMENT_NOISE_STD = 0.0

# Frozen seed protocol
DEFAULT_SEED = 2026
RANDOM_SEEDS = [2026, 2027, 2028]
SWEEP_ALPHA = 0.05

# Packages recorded in run metadata
RECORDED_PACKAGES = ["numpy", "pandas"]
