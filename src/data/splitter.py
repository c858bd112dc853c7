"""Seeded train/test partitioning of the cleaned dataset."""

import logging
import math
from typing import Tuple

import numpy as np
import pandas as pd

from src.errors import InsufficientDataError

logger = logging.getLogger(__name__)


def split_rows(
    df: pd.DataFrame,
    train_fraction: float,
    seed: int,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Partition ``df`` into train and test subsets.

    ``floor(n * train_fraction)`` row positions are drawn without
    replacement from ``numpy.random.default_rng(seed)``; the remaining
    rows form the test set.  Both subsets keep the original row labels in
    their original order, so identical ``(n, train_fraction, seed)``
    always yields identical membership.

    Args:
        df: Cleaned dataset.
        train_fraction: Share of rows assigned to training, in (0, 1).
        seed: Seed for the row draw.

    Returns:
        ``(train, test)`` DataFrames.

    Raises:
        ValueError: If ``train_fraction`` is outside (0, 1).
        InsufficientDataError: If either side of the split would be empty.
    """
    if not 0.0 < train_fraction < 1.0:
        raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}.")

    n = len(df)
    n_train = math.floor(n * train_fraction)
    if n_train == 0 or n_train == n:
        raise InsufficientDataError(
            f"Cannot split {n} rows at train_fraction={train_fraction}: "
            f"{n_train} train / {n - n_train} test."
        )

    rng = np.random.default_rng(seed)
    train_pos = np.sort(rng.choice(n, size=n_train, replace=False))
    test_mask = np.ones(n, dtype=bool)
    test_mask[train_pos] = False

    train = df.iloc[train_pos]
    test = df.iloc[np.flatnonzero(test_mask)]
    logger.info(
        "Split sizes → train: %d | test: %d (seed=%d)", len(train), len(test), seed
    )
    return train, test
