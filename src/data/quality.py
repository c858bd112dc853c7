"""Data quality checks for the housing price dataset."""

import logging
from typing import List, Optional

import pandas as pd

from src import config
from src.errors import MissingDataError

logger = logging.getLogger(__name__)


def check_completeness(df: pd.DataFrame) -> float:
    """Return the percentage (0-100) of rows without any missing cell.

    Raises:
        ValueError: If ``df`` has no rows.
    """
    if len(df) == 0:
        raise ValueError("Cannot measure completeness of an empty DataFrame.")
    complete = df.notnull().all(axis=1)
    return float(complete.mean() * 100)


def assert_complete(df: pd.DataFrame) -> float:
    """Require every row to be complete.

    Returns:
        The completeness percentage (always 100.0 on success).

    Raises:
        MissingDataError: If any cell is missing.
    """
    pct = check_completeness(df)
    if pct < 100.0:
        null_cols = df.columns[df.isnull().any()].tolist()
        msg = (
            f"Dataset is only {pct:.2f}% complete; "
            f"columns with missing values: {null_cols}"
        )
        logger.error(msg)
        raise MissingDataError(msg)
    return pct


class DataQualityChecker:
    """Runs schema validation and completeness checks on a DataFrame.

    These methods are stateless – they inspect the data and raise/log
    issues without fitting any parameters for later use.

    Args:
        required_columns: Columns that must be present in the raw dataset.
            Defaults to the target plus the id/date columns.
    """

    def __init__(self, required_columns: Optional[List[str]] = None) -> None:
        self.required_columns = required_columns or [config.TARGET] + config.DROP_COLUMNS

    def validate_schema(self, df: pd.DataFrame) -> None:
        """Assert that all required raw columns are present.

        Raises:
            ValueError: If any required column is missing.
        """
        missing = [c for c in self.required_columns if c not in df.columns]
        if missing:
            raise ValueError(
                f"Raw DataFrame is missing required columns: {missing}"
            )
        logger.info("Schema validation passed – all required columns present.")

    def report_nulls(self, df: pd.DataFrame) -> pd.DataFrame:
        """Return missing-value counts and rates per column.

        Returns:
            DataFrame with columns ``missing_count`` and ``missing_pct``,
            sorted descending by ``missing_pct``.
        """
        summary = pd.DataFrame(
            {
                "missing_count": df.isnull().sum(),
                "missing_pct": df.isnull().mean() * 100,
            }
        ).sort_values("missing_pct", ascending=False)

        with_nulls = summary[summary["missing_pct"] > 0]
        if not with_nulls.empty:
            logger.info("Columns with missing values:\n%s", with_nulls.to_string())
        return summary

    def run_all(self, df: pd.DataFrame) -> float:
        """Run all quality checks and return the completeness percentage.

        Raises:
            ValueError: If required columns are missing.
            MissingDataError: If any row is incomplete.
        """
        self.validate_schema(df)
        self.report_nulls(df)
        pct = assert_complete(df)
        logger.info("All quality checks complete: %.1f%% of rows complete.", pct)
        return pct
