"""Unit tests for src/evaluation/metrics.py."""

import numpy as np
import pandas as pd
import pytest

from src.errors import DegenerateFoldError
from src.evaluation.metrics import (
    compute_metrics,
    format_results,
    r_squared,
    results_table,
)


class TestRSquared:
    def test_perfect_predictions(self) -> None:
        y = np.array([11.2, 12.5, 13.1, 12.0])
        assert r_squared(y, y) == pytest.approx(1.0)

    def test_mean_predictor_scores_zero(self) -> None:
        train = np.array([1.0, 2.0, 3.0, 6.0])
        test = np.array([0.0, 4.0, 2.0, 6.0])  # same mean as train (3.0)
        predicted = np.full_like(test, train.mean())
        assert r_squared(test, predicted) == pytest.approx(0.0, abs=1e-12)

    def test_known_value(self) -> None:
        actual = np.array([1.0, 2.0, 3.0])
        predicted = np.array([1.0, 2.0, 4.0])
        # SS_res = 1, SS_tot = 2
        assert r_squared(actual, predicted) == pytest.approx(0.5)

    def test_shape_mismatch_raises(self) -> None:
        with pytest.raises(ValueError, match="Shape mismatch"):
            r_squared(np.array([1.0, 2.0]), np.array([1.0]))

    def test_constant_actual_raises(self) -> None:
        with pytest.raises(ValueError, match="constant"):
            r_squared(np.array([2.0, 2.0]), np.array([1.0, 3.0]))

    def test_empty_raises(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            r_squared(np.array([]), np.array([]))


class TestComputeMetrics:
    def test_returns_all_keys(self) -> None:
        y = np.array([12.0, 12.5, 13.0])
        metrics = compute_metrics(y, y + 0.1, label="linear/test")
        assert set(metrics) == {"r2", "rmse", "mae"}
        assert metrics["rmse"] == pytest.approx(0.1)
        assert metrics["mae"] == pytest.approx(0.1)

    def test_constant_subset_raises_pipeline_error(self) -> None:
        y = np.full(4, 12.3)
        with pytest.raises(DegenerateFoldError, match="constant"):
            compute_metrics(y, y + 0.1, label="linear/test")

    def test_label_does_not_affect_values(self) -> None:
        y = np.array([1.0, 2.0, 4.0])
        y_pred = np.array([1.5, 2.0, 3.0])
        assert compute_metrics(y, y_pred, "a") == compute_metrics(y, y_pred, "b")


class TestResultsTable:
    @pytest.fixture()
    def table(self) -> pd.DataFrame:
        return results_table(
            {
                "linear": {"train": 0.771234567, "test": 0.76543210},
                "elastic_net": {"train": 0.77110001, "test": 0.76549999},
            }
        )

    def test_shape_and_labels(self, table: pd.DataFrame) -> None:
        assert table.shape == (2, 2)
        assert list(table.index) == ["Linear Regression", "Regularized Regression"]
        assert list(table.columns) == ["Train Rsquared", "Test Rsquared"]

    def test_full_precision_kept(self, table: pd.DataFrame) -> None:
        assert table.loc["Linear Regression", "Train Rsquared"] == 0.771234567

    def test_format_rounds_for_display(self, table: pd.DataFrame) -> None:
        rendered = format_results(table)
        assert "0.7712" in rendered
        assert "0.771234567" not in rendered
