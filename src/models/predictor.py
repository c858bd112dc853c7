"""Prediction utilities for the housing price models.

All models produce predictions in log-space (``ln(Price)``).  This
module provides helpers to back-transform those predictions into prices
(``exp``) alongside the raw log-scale output used for evaluation.
"""

import logging
from typing import Protocol, runtime_checkable

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocol – any fitted trainer is compatible
# ---------------------------------------------------------------------------


@runtime_checkable
class _FittedModel(Protocol):
    """Structural type for any fitted trainer with a ``predict`` method."""

    def predict(self, X: pd.DataFrame) -> np.ndarray: ...


# ---------------------------------------------------------------------------
# Predictor
# ---------------------------------------------------------------------------


class HousingPredictor:
    """Wraps a fitted model to produce log-price and price predictions.

    Args:
        model: Any fitted object that exposes a ``predict(X)`` method
            returning log-space predictions (e.g.
            :class:`LinearRegressionTrainer`, :class:`ElasticNetTrainer`).
    """

    def __init__(self, model: _FittedModel) -> None:
        if not isinstance(model, _FittedModel):
            raise TypeError(
                "model must have a predict(X) method. "
                f"Got {type(model).__name__}."
            )
        self.model = model

    def predict_log(self, X: pd.DataFrame) -> np.ndarray:
        """Return raw model predictions in log-space.

        Args:
            X: Feature matrix with the same columns used during training.

        Returns:
            1-D array of ``log_price`` predictions.
        """
        log_preds = np.asarray(self.model.predict(X), dtype=float)
        logger.debug("predict_log: min=%.3f, max=%.3f", log_preds.min(), log_preds.max())
        return log_preds

    def predict_price(self, X: pd.DataFrame) -> np.ndarray:
        """Return price predictions, reversing the natural-log transform."""
        prices = np.exp(self.predict_log(X))
        logger.debug(
            "predict_price: median=%.0f, min=%.0f, max=%.0f",
            np.median(prices),
            prices.min(),
            prices.max(),
        )
        return prices

    def predict_dataframe(self, X: pd.DataFrame) -> pd.DataFrame:
        """Return a DataFrame with both log and price predictions.

        Returns:
            DataFrame with columns ``predicted_log_price`` and
            ``predicted_price``, indexed like ``X``.
        """
        log_preds = self.predict_log(X)
        return pd.DataFrame(
            {
                "predicted_log_price": log_preds,
                "predicted_price": np.exp(log_preds),
            },
            index=X.index,
        )
