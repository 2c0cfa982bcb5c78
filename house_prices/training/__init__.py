"""
Training module: runs an external regressor over the training split.

Usage:
    from house_prices.training import TrainingConfig, train_model

    cancel = threading.Event()
    result = train_model(
        model,
        dataset,
        split,
        TrainingConfig(epochs=100, report_every=10),
        progress=lambda event: print(event.stage, event.score),
        cancel_event=cancel,
    )
"""

from .errors import TrainingCancelledError, TrainingError
from .models import TrainingConfig, TrainingEvent, TrainingResult, TrainingStage
from .trainer import ProgressCallback, train_model

__all__ = [
    # Entry point
    "train_model",
    "ProgressCallback",
    # Models
    "TrainingConfig",
    "TrainingEvent",
    "TrainingResult",
    "TrainingStage",
    # Errors
    "TrainingError",
    "TrainingCancelledError",
]
