# src/config.py
"""Default settings for the housing log-price analysis.

Values here are used whenever ``configs/config.yaml`` omits a key.
"""

TARGET = "Price"
LOG_TARGET = "log_price"

ID_COLUMN = "id"
DATE_COLUMN = "date"
DROP_COLUMNS = [ID_COLUMN, DATE_COLUMN]

TRAIN_FRACTION = 0.8
SPLIT_SEED = 42

MODEL_FIT_SEED = 6
CV_FOLDS = 5

SIGNIFICANCE_THRESHOLD = 0.05

# sklearn naming: ``l1_ratio`` mixes L1/L2, ``alpha`` is the penalty strength.
ELASTIC_NET_L1_RATIOS = [0.1, 0.325, 0.55, 0.775, 1.0]
ELASTIC_NET_ALPHAS = [0.0001, 0.0003, 0.001, 0.003, 0.01, 0.03, 0.1, 0.3, 1.0]
ELASTIC_NET_MAX_ITER = 10000

MODEL_LABELS = {
    "linear": "Linear Regression",
    "elastic_net": "Regularized Regression",
}
