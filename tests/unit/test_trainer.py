"""Unit tests for src/models/trainer.py."""

import numpy as np
import pandas as pd
import pytest
from sklearn.linear_model import LinearRegression

from src.data.splitter import split_rows
from src.errors import DegenerateFoldError, InsufficientDataError
from src.evaluation.metrics import r_squared
from src.models.trainer import (
    ElasticNetTrainer,
    LinearRegressionTrainer,
    _standardized,
    cross_validate,
    get_trainer,
    make_folds,
)


# ---------------------------------------------------------------------------
# Helper – synthetic regression data
# ---------------------------------------------------------------------------


def _make_xy(n: int = 100, noise: float = 0.0, seed: int = 0):
    rng = np.random.default_rng(seed)
    X = pd.DataFrame(
        {"x1": rng.uniform(0, 10, n), "x2": rng.uniform(-5, 5, n)}
    )
    y = 2 * X["x1"] + 3 * X["x2"]
    if noise:
        y = y + rng.normal(scale=noise, size=n)
    return X, y


# ---------------------------------------------------------------------------
# Cross-validation protocol
# ---------------------------------------------------------------------------


class TestMakeFolds:
    def test_folds_partition_rows(self) -> None:
        folds = make_folds(23, 5, seed=6)
        assert len(folds) == 5
        holdouts = np.concatenate([h for _, h in folds])
        assert sorted(holdouts.tolist()) == list(range(23))
        for fit_idx, holdout_idx in folds:
            assert set(fit_idx).isdisjoint(holdout_idx)

    def test_seeded(self) -> None:
        a = make_folds(30, 5, seed=6)
        b = make_folds(30, 5, seed=6)
        for (fa, ha), (fb, hb) in zip(a, b):
            np.testing.assert_array_equal(ha, hb)

    @pytest.mark.parametrize("n_rows, n_folds", [(3, 5), (10, 1)])
    def test_insufficient(self, n_rows: int, n_folds: int) -> None:
        with pytest.raises(InsufficientDataError):
            make_folds(n_rows, n_folds, seed=0)


class TestCrossValidate:
    def test_mean_invariant_to_fold_order(self) -> None:
        X, y = _make_xy(noise=1.0)
        folds = make_folds(len(X), 5, seed=6)
        estimator = _standardized(LinearRegression())
        forward = cross_validate(estimator, X, y, folds)
        backward = cross_validate(estimator, X, y, list(reversed(folds)))
        assert forward.mean_score == pytest.approx(backward.mean_score, rel=1e-12)
        assert sorted(forward.fold_scores) == pytest.approx(sorted(backward.fold_scores))

    def test_scaler_fitted_on_fit_rows_only(self) -> None:
        X, y = _make_xy(n=40, noise=1.0)
        folds = make_folds(len(X), 5, seed=6)
        result = cross_validate(_standardized(LinearRegression()), X, y, folds)

        X_arr = X.to_numpy()
        assert len(result.fold_models) == 5
        for model, (fit_idx, _) in zip(result.fold_models, folds):
            scaler = model.named_steps["scaler"]
            np.testing.assert_allclose(scaler.mean_, X_arr[fit_idx].mean(axis=0))
            assert not np.allclose(scaler.mean_, X_arr.mean(axis=0))

    def test_constant_target_raises(self) -> None:
        X, _ = _make_xy(n=20)
        y = pd.Series(np.full(20, 3.0))
        with pytest.raises(DegenerateFoldError, match="constant target"):
            cross_validate(_standardized(LinearRegression()), X, y, make_folds(20, 5, 6))


# ---------------------------------------------------------------------------
# Trainers
# ---------------------------------------------------------------------------


class TestLinearRegressionTrainer:
    def test_noiseless_linear_data_fits_test_set(self) -> None:
        X, y = _make_xy(n=100)
        df = X.assign(y=y)
        train, test = split_rows(df, 0.8, seed=42)
        trainer = LinearRegressionTrainer().fit(train[["x1", "x2"]], train["y"])
        assert r_squared(test["y"].values, trainer.predict(test[["x1", "x2"]])) > 0.999
        assert trainer.cv_r2_ > 0.999

    def test_records_cv_and_in_sample(self) -> None:
        X, y = _make_xy(noise=2.0)
        trainer = LinearRegressionTrainer(n_folds=5, random_state=6).fit(X, y)
        assert len(trainer.cv_result_.fold_scores) == 5
        assert 0.0 < trainer.train_r2_ <= 1.0
        assert list(trainer.coefficients().index) == ["x1", "x2"]


class TestElasticNetTrainer:
    def test_grid_results(self) -> None:
        X, y = _make_xy(noise=1.0)
        trainer = ElasticNetTrainer(l1_ratios=[0.2, 0.8], alphas=[0.001, 0.1, 1.0]).fit(X, y)
        assert len(trainer.cv_results_) == 6
        assert trainer.best_params_["l1_ratio"] in (0.2, 0.8)
        assert trainer.best_params_["alpha"] in (0.001, 0.1, 1.0)
        assert trainer.cv_r2_ == pytest.approx(trainer.cv_results_["mean_r2"].max())

    def test_heavy_penalty_shrinks_coefficients(self) -> None:
        X, y = _make_xy(noise=1.0)
        plain = LinearRegressionTrainer().fit(X, y)
        heavy = ElasticNetTrainer(l1_ratios=[0.5], alphas=[1e4]).fit(X, y)

        assert heavy.coefficients().abs().max() < 1e-6
        assert heavy.coefficients().abs().sum() < plain.coefficients().abs().sum()
        assert heavy.train_r2_ < plain.train_r2_
        assert heavy.train_r2_ == pytest.approx(0.0, abs=1e-9)

    def test_empty_grid_raises(self) -> None:
        X, y = _make_xy()
        with pytest.raises(ValueError, match="grid"):
            ElasticNetTrainer(l1_ratios=[], alphas=[0.1]).fit(X, y)


class TestRegistry:
    def test_known_names(self) -> None:
        assert isinstance(get_trainer("linear"), LinearRegressionTrainer)
        enet = get_trainer("elastic_net", alphas=[0.5])
        assert isinstance(enet, ElasticNetTrainer)
        assert enet.get_params()["alphas"] == [0.5]

    def test_unknown_name(self) -> None:
        with pytest.raises(ValueError, match="Unknown trainer"):
            get_trainer("lgbm")
