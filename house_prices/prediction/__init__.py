"""
Prediction module for pricing a single house with a trained model.

Usage:
    from house_prices.prediction import PricePredictor

    predictor = PricePredictor(dataset, model)
    price = predictor.predict_inputs(area=7420, bedrooms=4, ...)

    outcome = predictor.predict_safely(raw_features)
    if not outcome.success:
        print(outcome.error_message)
"""

from .errors import InvalidFeatureVectorError, PredictionError
from .models import PredictionOutcome
from .pipeline import PricePredictor

__all__ = [
    "PricePredictor",
    "PredictionOutcome",
    # Errors
    "PredictionError",
    "InvalidFeatureVectorError",
]
