"""Evaluation metrics for the housing log-price models.

All metrics here operate on the **log scale** (``log_price``), the scale
both models are fitted on, so that train and test R² are comparable
across model variants.  Values are kept at full precision; rounding only
happens in :func:`format_results` for display.
"""

import logging
from typing import Dict, Mapping

import numpy as np
import pandas as pd

from src import config
from src.errors import DegenerateFoldError

logger = logging.getLogger(__name__)

RESULT_COLUMNS = ["Train Rsquared", "Test Rsquared"]


def r_squared(actual: np.ndarray, predicted: np.ndarray) -> float:
    """Coefficient of determination ``1 - SS_res / SS_tot``.

    Raises:
        ValueError: If shapes differ, the input is empty, or ``actual`` is
            constant (``SS_tot == 0``).
    """
    actual = np.asarray(actual, dtype=float)
    predicted = np.asarray(predicted, dtype=float)

    if actual.shape != predicted.shape:
        raise ValueError(
            f"Shape mismatch: actual {actual.shape} vs predicted {predicted.shape}."
        )
    if actual.size == 0:
        raise ValueError("R² is undefined for an empty sample.")

    ss_tot = float(np.sum((actual - actual.mean()) ** 2))
    if ss_tot == 0:
        raise ValueError("R² is undefined when the actual values are constant.")
    ss_res = float(np.sum((actual - predicted) ** 2))
    return 1.0 - ss_res / ss_tot


def compute_metrics(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    label: str = "",
) -> Dict[str, float]:
    """Compute R², RMSE and MAE on log-scale values.

    Args:
        y_true: Ground-truth ``log_price``.
        y_pred: Predicted ``log_price``.
        label: Optional label for log output (e.g. ``"linear/test"``).

    Returns:
        Dictionary with keys ``r2``, ``rmse`` and ``mae``.

    Raises:
        DegenerateFoldError: If ``y_true`` is constant, so R² is undefined
            for the scored subset.
    """
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)

    prefix = f"[{label}] " if label else ""
    if y_true.size and np.var(y_true) == 0:
        msg = f"{prefix}Cannot score a subset whose target is constant."
        logger.error(msg)
        raise DegenerateFoldError(msg)

    r2 = r_squared(y_true, y_pred)
    residuals = y_true - y_pred
    rmse = float(np.sqrt(np.mean(residuals ** 2)))
    mae = float(np.mean(np.abs(residuals)))

    logger.info("%sR²=%.4f | RMSE=%.4f | MAE=%.4f (log scale)", prefix, r2, rmse, mae)
    return {"r2": r2, "rmse": rmse, "mae": mae}


def results_table(results: Mapping[str, Mapping[str, float]]) -> pd.DataFrame:
    """Build the train/test R² comparison table.

    Args:
        results: ``{model_name: {"train": r2, "test": r2}}``.  Model names
            found in ``config.MODEL_LABELS`` are shown by their label.

    Returns:
        DataFrame with one row per model and columns
        ``["Train Rsquared", "Test Rsquared"]``.
    """
    rows = {
        config.MODEL_LABELS.get(name, name): [scores["train"], scores["test"]]
        for name, scores in results.items()
    }
    return pd.DataFrame.from_dict(rows, orient="index", columns=RESULT_COLUMNS)


def format_results(table: pd.DataFrame, digits: int = 4) -> str:
    """Render ``table`` for display, rounded to ``digits`` decimals."""
    return table.round(digits).to_string()
