"""Model training classes for housing log-price regression.

Both trainers share one cross-validation protocol so their scores are
directly comparable: the training rows are shuffled into ``n_folds``
seeded folds, and for every fold a fresh ``StandardScaler`` + regressor
pipeline is fitted on the remaining folds and scored (R²) on the held-out
one.  Standardization statistics therefore never see the rows they are
applied to.  After cross-validation the final model is refit on all
training rows.

Available trainers:
    - :class:`LinearRegressionTrainer` – ordinary least squares.
    - :class:`ElasticNetTrainer` – elastic net with grid-searched penalty.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, RegressorMixin, clone
from sklearn.linear_model import ElasticNet, LinearRegression
from sklearn.model_selection import KFold
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from src import config
from src.errors import DegenerateFoldError, InsufficientDataError
from src.evaluation.metrics import r_squared

logger = logging.getLogger(__name__)

Fold = Tuple[np.ndarray, np.ndarray]


# ---------------------------------------------------------------------------
# Cross-validation protocol
# ---------------------------------------------------------------------------


@dataclass
class CVResult:
    """Per-fold out-of-fold R² scores and the models that produced them."""

    fold_scores: List[float] = field(default_factory=list)
    fold_models: List[Any] = field(default_factory=list, repr=False)

    @property
    def mean_score(self) -> float:
        return float(np.mean(self.fold_scores))

    @property
    def std_score(self) -> float:
        return float(np.std(self.fold_scores))


def make_folds(n_rows: int, n_folds: int, seed: int) -> List[Fold]:
    """Build seeded, shuffled k-fold ``(train_idx, holdout_idx)`` pairs.

    Raises:
        InsufficientDataError: If ``n_folds < 2`` or there are fewer rows
            than folds.
    """
    if n_folds < 2:
        raise InsufficientDataError(f"Cross-validation needs at least 2 folds, got {n_folds}.")
    if n_rows < n_folds:
        raise InsufficientDataError(
            f"Cannot build {n_folds} folds from {n_rows} training rows."
        )
    kfold = KFold(n_splits=n_folds, shuffle=True, random_state=seed)
    return list(kfold.split(np.arange(n_rows)))


def cross_validate(
    estimator: BaseEstimator,
    X: Any,
    y: Any,
    folds: Sequence[Fold],
) -> CVResult:
    """Score a fresh clone of ``estimator`` on every fold.

    Args:
        estimator: Unfitted estimator or pipeline; cloned per fold.
        X: Training feature matrix.
        y: Training target.
        folds: Output of :func:`make_folds`.

    Returns:
        :class:`CVResult` with one R² and one fitted clone per fold, in
        fold order.

    Raises:
        DegenerateFoldError: If a fold's fitting or held-out target has
            zero variance.
    """
    X_arr = np.asarray(X, dtype=float)
    y_arr = np.asarray(y, dtype=float)

    scores: List[float] = []
    models: List[Any] = []
    for i, (fit_idx, holdout_idx) in enumerate(folds):
        y_fit, y_holdout = y_arr[fit_idx], y_arr[holdout_idx]
        if np.var(y_holdout) == 0 or np.var(y_fit) == 0:
            msg = f"Fold {i} has a constant target; R² is undefined."
            logger.error(msg)
            raise DegenerateFoldError(msg)

        model = clone(estimator).fit(X_arr[fit_idx], y_fit)
        scores.append(r_squared(y_holdout, model.predict(X_arr[holdout_idx])))
        models.append(model)

    result = CVResult(fold_scores=scores, fold_models=models)
    logger.debug("CV fold R²: %s (mean=%.4f)", np.round(scores, 4), result.mean_score)
    return result


def _standardized(regressor: BaseEstimator) -> Pipeline:
    return Pipeline([("scaler", StandardScaler()), ("model", regressor)])


def _coefficients(pipeline: Pipeline, feature_names: Optional[Sequence[str]]) -> pd.Series:
    coef = pipeline.named_steps["model"].coef_
    index = list(feature_names) if feature_names is not None else [f"x{i}" for i in range(len(coef))]
    return pd.Series(coef, index=index, name="coef")


# ---------------------------------------------------------------------------
# Ordinary least squares
# ---------------------------------------------------------------------------


class LinearRegressionTrainer(BaseEstimator, RegressorMixin):
    """Ordinary least squares on standardized predictors.

    Args:
        n_folds: Number of cross-validation folds.
        random_state: Seed for the fold assignment.
    """

    def __init__(
        self,
        n_folds: int = config.CV_FOLDS,
        random_state: int = config.MODEL_FIT_SEED,
    ) -> None:
        self.n_folds = n_folds
        self.random_state = random_state

    def fit(self, X_train: pd.DataFrame, y_train: pd.Series) -> "LinearRegressionTrainer":
        """Cross-validate, then refit on every training row.

        Args:
            X_train: Training feature matrix (reduced feature set).
            y_train: Log-transformed training target.

        Returns:
            Fitted trainer (self).
        """
        folds = make_folds(len(X_train), self.n_folds, self.random_state)
        self.cv_result_ = cross_validate(_standardized(LinearRegression()), X_train, y_train, folds)
        self.cv_r2_ = self.cv_result_.mean_score

        self.feature_names_ = list(getattr(X_train, "columns", [])) or None
        self.model_ = _standardized(LinearRegression()).fit(X_train, y_train)
        self.train_r2_ = r_squared(y_train, self.model_.predict(X_train))
        logger.info(
            "Linear regression trained: CV R²=%.4f ± %.4f | in-sample R²=%.4f",
            self.cv_r2_,
            self.cv_result_.std_score,
            self.train_r2_,
        )
        return self

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        """Generate predictions in log-space."""
        return self.model_.predict(X)

    def coefficients(self) -> pd.Series:
        """Return coefficients on the standardized scale."""
        return _coefficients(self.model_, self.feature_names_)


# ---------------------------------------------------------------------------
# Elastic net
# ---------------------------------------------------------------------------


class ElasticNetTrainer(BaseEstimator, RegressorMixin):
    """Elastic net on standardized predictors with grid-searched penalty.

    Every ``(l1_ratio, alpha)`` pair is scored with the same folds; the
    pair with the highest mean out-of-fold R² wins (first in grid order on
    ties) and the final model is refit on all training rows.

    Args:
        l1_ratios: Grid for the L1/L2 mixing weight (1.0 is the lasso).
        alphas: Grid for the overall penalty strength.
        n_folds: Number of cross-validation folds.
        random_state: Seed for the fold assignment and the solver.
        max_iter: Coordinate-descent iteration cap.
    """

    def __init__(
        self,
        l1_ratios: Optional[Sequence[float]] = None,
        alphas: Optional[Sequence[float]] = None,
        n_folds: int = config.CV_FOLDS,
        random_state: int = config.MODEL_FIT_SEED,
        max_iter: int = config.ELASTIC_NET_MAX_ITER,
    ) -> None:
        self.l1_ratios = l1_ratios
        self.alphas = alphas
        self.n_folds = n_folds
        self.random_state = random_state
        self.max_iter = max_iter

    def _regressor(self, alpha: float, l1_ratio: float) -> ElasticNet:
        return ElasticNet(
            alpha=alpha,
            l1_ratio=l1_ratio,
            max_iter=self.max_iter,
            random_state=self.random_state,
        )

    def fit(self, X_train: pd.DataFrame, y_train: pd.Series) -> "ElasticNetTrainer":
        """Grid-search the penalty with cross-validation, then refit.

        Args:
            X_train: Training feature matrix (reduced feature set).
            y_train: Log-transformed training target.

        Returns:
            Fitted trainer (self).
        """
        l1_ratios = self.l1_ratios if self.l1_ratios is not None else config.ELASTIC_NET_L1_RATIOS
        alphas = self.alphas if self.alphas is not None else config.ELASTIC_NET_ALPHAS
        if not l1_ratios or not alphas:
            raise ValueError("Elastic net grid must contain at least one l1_ratio and alpha.")

        folds = make_folds(len(X_train), self.n_folds, self.random_state)

        rows: List[Dict[str, float]] = []
        for l1_ratio in l1_ratios:
            for alpha in alphas:
                cv = cross_validate(
                    _standardized(self._regressor(alpha, l1_ratio)), X_train, y_train, folds
                )
                rows.append(
                    {
                        "l1_ratio": float(l1_ratio),
                        "alpha": float(alpha),
                        "mean_r2": cv.mean_score,
                        "std_r2": cv.std_score,
                    }
                )

        self.cv_results_ = pd.DataFrame(rows)
        best = self.cv_results_.loc[self.cv_results_["mean_r2"].idxmax()]
        self.best_params_ = {"l1_ratio": float(best["l1_ratio"]), "alpha": float(best["alpha"])}
        self.cv_r2_ = float(best["mean_r2"])

        self.feature_names_ = list(getattr(X_train, "columns", [])) or None
        self.model_ = _standardized(
            self._regressor(self.best_params_["alpha"], self.best_params_["l1_ratio"])
        ).fit(X_train, y_train)
        self.train_r2_ = r_squared(y_train, self.model_.predict(X_train))
        logger.info(
            "Elastic net trained: best l1_ratio=%.3f alpha=%.4g | CV R²=%.4f | "
            "in-sample R²=%.4f",
            self.best_params_["l1_ratio"],
            self.best_params_["alpha"],
            self.cv_r2_,
            self.train_r2_,
        )
        return self

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        """Generate predictions in log-space."""
        return self.model_.predict(X)

    def coefficients(self) -> pd.Series:
        """Return coefficients on the standardized scale."""
        return _coefficients(self.model_, self.feature_names_)


# ---------------------------------------------------------------------------
# Registry helper
# ---------------------------------------------------------------------------

_TRAINER_REGISTRY: Dict[str, type] = {
    "linear": LinearRegressionTrainer,
    "elastic_net": ElasticNetTrainer,
}


def get_trainer(name: str, **kwargs: Any) -> Any:
    """Instantiate a trainer by name.

    Args:
        name: One of ``"linear"`` or ``"elastic_net"``.
        **kwargs: Passed to the trainer's constructor.

    Raises:
        ValueError: If ``name`` is not in the registry.
    """
    if name not in _TRAINER_REGISTRY:
        raise ValueError(
            f"Unknown trainer '{name}'. Choose from: {list(_TRAINER_REGISTRY)}"
        )
    return _TRAINER_REGISTRY[name](**kwargs)
