"""Unit tests for src/models/predictor.py."""

import numpy as np
import pandas as pd
import pytest

from src.models.predictor import HousingPredictor


class _ConstantModel:
    def __init__(self, value: float) -> None:
        self.value = value

    def predict(self, X: pd.DataFrame) -> np.ndarray:
        return np.full(len(X), self.value)


@pytest.fixture()
def X() -> pd.DataFrame:
    return pd.DataFrame({"x1": [1.0, 2.0, 3.0]}, index=[10, 11, 12])


class TestHousingPredictor:
    def test_rejects_object_without_predict(self) -> None:
        with pytest.raises(TypeError, match="predict"):
            HousingPredictor(object())

    def test_predict_price_reverses_log(self, X: pd.DataFrame) -> None:
        predictor = HousingPredictor(_ConstantModel(np.log(250_000.0)))
        np.testing.assert_allclose(predictor.predict_price(X), 250_000.0)

    def test_predict_dataframe(self, X: pd.DataFrame) -> None:
        out = HousingPredictor(_ConstantModel(2.0)).predict_dataframe(X)
        assert list(out.columns) == ["predicted_log_price", "predicted_price"]
        assert list(out.index) == [10, 11, 12]
        np.testing.assert_allclose(out["predicted_price"], np.exp(2.0))
