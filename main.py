"""Entry point for the housing log-price regression analysis.

Usage
-----
    python main.py                                  # uses configs/config.yaml
    python main.py --config path/to.yaml
    python main.py --data part1.csv part2.csv       # override data paths
    python main.py --output results.csv             # also write the table

Pipeline steps
--------------
1. Load both raw tables and concatenate them (schemas must match).
2. Run data quality checks (every row must be complete).
3. Drop id/date columns and add ``log_price = ln(Price)``.
4. Seeded train/test split.
5. Select predictors with OLS p-value <= threshold on the training rows.
6. Train linear and elastic-net models with 5-fold CV.
7. Score both on the test rows; print the train/test R² table.
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
import yaml

# ---------------------------------------------------------------------------
# Bootstrap logging before any local imports so module-level loggers work.
# ---------------------------------------------------------------------------


def _setup_logging(level: str = "INFO", fmt: Optional[str] = None) -> None:
    fmt = fmt or "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO), format=fmt, force=True
    )


_setup_logging()  # default until config is loaded
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Local imports
# ---------------------------------------------------------------------------

from src import config
from src.data.loader import DataIngestor
from src.data.quality import DataQualityChecker
from src.data.preprocessor import HousingPreprocessor
from src.data.splitter import split_rows
from src.features.selector import FeatureSelector
from src.models.trainer import get_trainer
from src.models.predictor import HousingPredictor
from src.evaluation.metrics import compute_metrics, format_results, results_table


# ---------------------------------------------------------------------------
# Config helpers
# ---------------------------------------------------------------------------


def load_config(path: str = "configs/config.yaml") -> dict:
    """Load YAML configuration file.

    Args:
        path: Path to the YAML config file.

    Returns:
        Parsed configuration dictionary (empty if the file is empty).

    Raises:
        FileNotFoundError: If the config file does not exist.
    """
    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config not found: {cfg_path}")
    with open(cfg_path) as f:
        return yaml.safe_load(f) or {}


def _model_params(cfg: dict) -> Dict[str, Dict[str, Any]]:
    """Translate the ``models`` config section into trainer kwargs."""
    model_cfg = cfg.get("models", {})
    shared = {
        "n_folds": model_cfg.get("cv_folds", config.CV_FOLDS),
        "random_state": model_cfg.get("seed", config.MODEL_FIT_SEED),
    }
    enet_cfg = model_cfg.get("elastic_net", {})
    return {
        "linear": dict(shared),
        "elastic_net": dict(
            shared,
            l1_ratios=enet_cfg.get("l1_ratios", config.ELASTIC_NET_L1_RATIOS),
            alphas=enet_cfg.get("alphas", config.ELASTIC_NET_ALPHAS),
            max_iter=enet_cfg.get("max_iter", config.ELASTIC_NET_MAX_ITER),
        ),
    }


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def run_analysis(df_raw: pd.DataFrame, cfg: Optional[dict] = None) -> Dict[str, Any]:
    """Run every stage after loading on an already concatenated dataset.

    Args:
        df_raw: Raw dataset (both files appended).
        cfg: Parsed configuration; missing keys use ``src.config`` defaults.

    Returns:
        Dict with the structured diagnostics and the final table:
        ``completeness_pct``, ``significance``, ``selected_features``,
        ``split_sizes``, ``elastic_net_grid``, ``models``, ``metrics`` and
        ``results``.
    """
    cfg = cfg or {}
    target_cfg = cfg.get("target", {})
    target = target_cfg.get("column", config.TARGET)
    log_target = target_cfg.get("log_column", config.LOG_TARGET)
    drop_cols = target_cfg.get("drop_columns", config.DROP_COLUMNS)
    split_cfg = cfg.get("split", {})
    threshold = cfg.get("selection", {}).get(
        "significance_threshold", config.SIGNIFICANCE_THRESHOLD
    )

    # ------------------------------------------------------------------ #
    # 1. Quality checks                                                   #
    # ------------------------------------------------------------------ #
    checker = DataQualityChecker(required_columns=[target] + list(drop_cols))
    completeness = checker.run_all(df_raw)

    # ------------------------------------------------------------------ #
    # 2. Clean + log-transform target                                     #
    # ------------------------------------------------------------------ #
    preprocessor = HousingPreprocessor(
        target=target, log_target=log_target, drop_cols=list(drop_cols)
    )
    df = preprocessor.fit_transform(df_raw)

    # ------------------------------------------------------------------ #
    # 3. Train/test split                                                 #
    # ------------------------------------------------------------------ #
    train, test = split_rows(
        df,
        train_fraction=split_cfg.get("train_fraction", config.TRAIN_FRACTION),
        seed=split_cfg.get("seed", config.SPLIT_SEED),
    )

    # ------------------------------------------------------------------ #
    # 4. Feature selection on training rows only                          #
    # ------------------------------------------------------------------ #
    index_artifacts = [c for c in df.columns if str(c).startswith("Unnamed")]
    selector = FeatureSelector(threshold=threshold).fit(
        train, target=log_target, exclude=[target, *index_artifacts]
    )
    features = selector.selected_features_

    X_train, y_train = train[features], train[log_target]
    X_test, y_test = test[features], test[log_target]

    # ------------------------------------------------------------------ #
    # 5. Train + evaluate both models                                     #
    # ------------------------------------------------------------------ #
    models: Dict[str, Any] = {}
    metrics: Dict[str, Dict[str, float]] = {}
    r2_scores: Dict[str, Dict[str, float]] = {}

    for name, params in _model_params(cfg).items():
        logger.info("=" * 60)
        logger.info("Training model: %s", config.MODEL_LABELS[name])
        trainer = get_trainer(name, **params).fit(X_train, y_train)
        predictor = HousingPredictor(trainer)

        test_metrics = compute_metrics(
            y_test.values, predictor.predict_log(X_test), label=f"{name}/test"
        )
        models[name] = trainer
        metrics[name] = test_metrics
        r2_scores[name] = {"train": trainer.cv_r2_, "test": test_metrics["r2"]}

    table = results_table(r2_scores)
    _print_summary(table)

    return {
        "completeness_pct": completeness,
        "significance": selector.significance_,
        "selected_features": features,
        "split_sizes": {"train": len(train), "test": len(test)},
        "elastic_net_grid": models["elastic_net"].cv_results_,
        "models": models,
        "metrics": metrics,
        "results": table,
    }


def run_pipeline(
    config_path: str = "configs/config.yaml",
    data_paths: Optional[List[str]] = None,
    output_path: Optional[str] = None,
) -> Dict[str, Any]:
    """Load the configured files and execute the full analysis.

    Args:
        config_path: Path to the YAML configuration file.
        data_paths: Override for the raw data paths in the config.
        output_path: If given, the results table is written there as CSV.

    Returns:
        The dict returned by :func:`run_analysis`.
    """
    cfg = load_config(config_path)
    log_cfg = cfg.get("logging", {})
    _setup_logging(
        level=log_cfg.get("level", "INFO"),
        fmt=log_cfg.get("format"),
    )

    paths = data_paths or cfg.get("data", {}).get("paths")
    logger.info("Pipeline config: data=%s | config=%s", paths, config_path)

    df_raw = DataIngestor(paths).load_tables()
    outcome = run_analysis(df_raw, cfg)

    if output_path:
        out = Path(output_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        outcome["results"].to_csv(out)
        logger.info("Results table written to %s", out)
    return outcome


def _print_summary(table: pd.DataFrame) -> None:
    """Print the train/test R² table, rounded for display only."""
    rendered = format_results(table)
    logger.info("\n\n=== FINAL RESULTS ===\n%s\n", rendered)
    print("\n=== FINAL RESULTS ===")
    print(rendered)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Housing log-price regression: OLS vs elastic net."
    )
    parser.add_argument(
        "--config",
        default="configs/config.yaml",
        help="Path to YAML config (default: configs/config.yaml).",
    )
    parser.add_argument(
        "--data",
        nargs="+",
        default=None,
        help="Override raw data paths from config.",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the results table to this CSV path.",
    )
    return parser.parse_args(argv)


if __name__ == "__main__":
    args = _parse_args()
    run_pipeline(
        config_path=args.config,
        data_paths=args.data,
        output_path=args.output,
    )
