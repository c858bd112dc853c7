"""Significance-based predictor selection.

A full ordinary-least-squares model is fitted on every candidate
predictor and the per-feature coefficient table is returned as a
DataFrame.  Features whose p-value exceeds the significance threshold
(0.05 by default) are excluded from the reduced feature set used by the
model trainers.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
import statsmodels.api as sm

from src import config
from src.errors import InsufficientDataError

logger = logging.getLogger(__name__)

SIGNIFICANCE_COLUMNS = ["coef", "std_err", "t_value", "p_value"]


def candidate_features(df: pd.DataFrame, exclude: Sequence[str]) -> List[str]:
    """Return numeric columns of ``df`` that are not in ``exclude``."""
    numeric = df.select_dtypes(include=[np.number]).columns
    return [c for c in numeric if c not in set(exclude)]


def significance_table(
    df: pd.DataFrame,
    features: Sequence[str],
    target: str,
) -> pd.DataFrame:
    """Fit OLS with an intercept and tabulate per-feature significance.

    Args:
        df: Training rows.
        features: Predictor columns.
        target: Response column.

    Returns:
        DataFrame indexed by feature with columns ``coef``, ``std_err``,
        ``t_value`` and ``p_value``.  The intercept is not included.

    Raises:
        InsufficientDataError: If there are not more rows than parameters.
    """
    features = list(features)
    n_params = len(features) + 1
    if len(df) <= n_params:
        raise InsufficientDataError(
            f"OLS needs more than {n_params} rows for {len(features)} features; "
            f"got {len(df)}."
        )

    X = sm.add_constant(df[features].astype(float), has_constant="add")
    result = sm.OLS(df[target].astype(float), X).fit()

    table = pd.DataFrame(
        {
            "coef": result.params,
            "std_err": result.bse,
            "t_value": result.tvalues,
            "p_value": result.pvalues,
        }
    ).drop(index="const")
    table.index.name = "feature"
    logger.info(
        "OLS significance (R²=%.4f, n=%d):\n%s",
        result.rsquared,
        int(result.nobs),
        table.to_string(),
    )
    return table


def select_significant(
    table: pd.DataFrame,
    threshold: float = config.SIGNIFICANCE_THRESHOLD,
) -> List[str]:
    """Return features with ``p_value <= threshold`` in table order.

    Features with an undefined (NaN) p-value are treated as insignificant.
    """
    keep = table["p_value"].le(threshold)
    return table.index[keep].tolist()


class FeatureSelector:
    """Narrows the predictor set to statistically significant features.

    Args:
        threshold: Largest p-value a feature may have and still be kept.

    Attributes set by :meth:`fit`:
        significance_: Output of :func:`significance_table`.
        selected_features_: Features kept.
        dropped_features_: Features excluded.
    """

    def __init__(self, threshold: float = config.SIGNIFICANCE_THRESHOLD) -> None:
        self.threshold = threshold

    def fit(
        self,
        df: pd.DataFrame,
        target: str,
        features: Optional[Sequence[str]] = None,
        exclude: Sequence[str] = (),
    ) -> "FeatureSelector":
        """Run the full OLS fit and apply the p-value cutoff.

        Args:
            df: Training rows.
            target: Response column.
            features: Candidate predictors.  Defaults to every numeric
                column except ``target`` and ``exclude``.
            exclude: Columns never considered as predictors (raw price,
                row-index artifacts).

        Raises:
            ValueError: If no feature survives the cutoff.
        """
        if features is None:
            features = candidate_features(df, [target, *exclude])

        self.significance_ = significance_table(df, features, target)
        self.selected_features_ = select_significant(self.significance_, self.threshold)
        self.dropped_features_ = [
            f for f in self.significance_.index if f not in self.selected_features_
        ]

        if not self.selected_features_:
            raise ValueError(
                f"No feature has p-value <= {self.threshold}; nothing left to model."
            )

        logger.info(
            "Kept %d of %d features (p <= %.3f); dropped: %s",
            len(self.selected_features_),
            len(self.significance_),
            self.threshold,
            self.dropped_features_,
        )
        return self
