"""Cleaning and target transformation for the housing dataset.

The :class:`HousingPreprocessor` is sklearn-compatible (``fit`` /
``transform``) but stateless: it drops the identifier and date columns
and adds the natural-log target ``log_price``.  The raw ``Price`` column
is kept so the log transform can be checked against it; it is never used
as a predictor.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin

from src import config
from src.errors import InvalidTransformError

logger = logging.getLogger(__name__)


def drop_columns(df: pd.DataFrame, names: Sequence[str]) -> pd.DataFrame:
    """Return a copy of ``df`` without the named columns.

    Raises:
        KeyError: If any named column is absent.
    """
    absent = [c for c in names if c not in df.columns]
    if absent:
        raise KeyError(f"Cannot drop absent columns: {absent}")
    logger.info("Dropping columns: %s", list(names))
    return df.drop(columns=list(names))


def log_transform(df: pd.DataFrame, source_col: str, dest_col: str) -> pd.DataFrame:
    """Return a copy of ``df`` with ``dest_col = ln(source_col)``.

    Raises:
        KeyError: If ``source_col`` is absent.
        InvalidTransformError: If any source value is missing, infinite or ``<= 0``.
    """
    if source_col not in df.columns:
        raise KeyError(f"Column '{source_col}' not found.")

    values = pd.to_numeric(df[source_col], errors="coerce").astype(float)
    bad = ~np.isfinite(values) | (values <= 0)
    if bad.any():
        msg = (
            f"Log transform of '{source_col}' requires finite, strictly positive values; "
            f"{int(bad.sum())} invalid row(s), first at index {bad.idxmax()}."
        )
        logger.error(msg)
        raise InvalidTransformError(msg)

    df = df.copy()
    df[dest_col] = np.log(values)
    return df


class HousingPreprocessor(BaseEstimator, TransformerMixin):
    """Drop identifier columns and log-transform the sale price.

    Args:
        target: Raw price column.
        log_target: Name of the derived log-price column.
        drop_cols: Columns removed before modelling (identifier, date).
    """

    def __init__(
        self,
        target: str = config.TARGET,
        log_target: str = config.LOG_TARGET,
        drop_cols: Optional[List[str]] = None,
    ) -> None:
        self.target = target
        self.log_target = log_target
        self.drop_cols = drop_cols

    def fit(self, df: pd.DataFrame, y: Optional[pd.Series] = None) -> "HousingPreprocessor":
        """No parameters are learned; present for sklearn compatibility."""
        return self

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Apply the column drops and the log transform.

        Args:
            df: Raw, complete DataFrame (output of :class:`DataIngestor`).

        Returns:
            New DataFrame containing ``log_target``.
        """
        drop_cols = config.DROP_COLUMNS if self.drop_cols is None else self.drop_cols
        df = drop_columns(df, drop_cols)
        df = log_transform(df, self.target, self.log_target)
        logger.info("Preprocessing complete: %d rows × %d columns.", *df.shape)
        return df
