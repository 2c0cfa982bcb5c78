"""
Epoch loop around an external regression model.

train_model() is synchronous. Callers that want a responsive UI run it on
a worker thread, pass a progress callback and stop it with a
threading.Event. The dataset must not be mutated while training runs.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..models import model_score

from .errors import TrainingCancelledError, TrainingError
from .models import TrainingConfig, TrainingEvent, TrainingResult, TrainingStage

if TYPE_CHECKING:
    from house_prices.data import DatasetSplit, HousingDataset
    from house_prices.models import RegressionModel

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[TrainingEvent], None]


def train_model(
    model: RegressionModel,
    dataset: HousingDataset,
    split: DatasetSplit,
    config: TrainingConfig | None = None,
    progress: ProgressCallback | None = None,
    cancel_event: threading.Event | None = None,
) -> TrainingResult:
    """
    Fit a model on the training split for config.epochs epochs.

    Args:
        model: Regressor implementing fit/predict (score optional)
        dataset: Dataset the split was drawn from
        split: Training/testing partition
        config: Training configuration. Uses defaults if None.
        progress: Optional callback(event) invoked at start, every
            report_every epochs, and on completion, failure or cancellation.
            Exceptions it raises are logged and ignored.
        cancel_event: Optional event checked before each epoch

    Returns:
        TrainingResult

    Raises:
        TrainingError: If the training split is empty, the config is
            invalid, or fit() fails
        TrainingCancelledError: If cancel_event is set
    """
    config = config or TrainingConfig()
    if config.epochs < 1:
        raise TrainingError(f"epochs must be >= 1, got {config.epochs}")
    if config.report_every < 1:
        raise TrainingError(f"report_every must be >= 1, got {config.report_every}")

    if not split.training:
        raise TrainingError("Training split is empty; nothing to fit")

    features = dataset.feature_matrix(split.training)
    targets = dataset.target_matrix(split.training)
    total = config.epochs

    logger.info(
        f"Training {type(model).__name__} on {len(features)} samples for {total} epochs"
    )
    _notify(progress, TrainingEvent(TrainingStage.STARTED, 0, total))

    start = time.time()
    score = None
    for epoch in range(1, total + 1):
        if cancel_event is not None and cancel_event.is_set():
            message = f"Training cancelled after {epoch - 1} epochs"
            logger.info(message)
            _notify(
                progress,
                TrainingEvent(TrainingStage.CANCELLED, epoch - 1, total, score, message),
            )
            raise TrainingCancelledError(message)

        try:
            model.fit(features, targets)
            score = model_score(model)
        except Exception as e:
            message = f"Training failed at epoch {epoch}: {e}"
            logger.error(message)
            _notify(
                progress,
                TrainingEvent(TrainingStage.FAILED, epoch, total, score, message),
            )
            raise TrainingError(message) from e

        if epoch % config.report_every == 0 or epoch == total:
            score_text = f"{score:.6f}" if score is not None else "n/a"
            logger.info(f"Epoch {epoch}/{total}: score={score_text}")
            _notify(progress, TrainingEvent(TrainingStage.EPOCH, epoch, total, score))

    training_time_ms = (time.time() - start) * 1000
    _notify(
        progress,
        TrainingEvent(
            TrainingStage.COMPLETED, total, total, score, "Training completed"
        ),
    )
    logger.info(f"Training completed in {training_time_ms:.0f}ms")

    return TrainingResult(
        epochs_completed=total,
        training_samples=len(features),
        final_score=score,
        training_time_ms=training_time_ms,
    )


def _notify(progress: ProgressCallback | None, event: TrainingEvent) -> None:
    """Deliver an event; a failing callback never aborts training."""
    if progress is None:
        return
    try:
        progress(event)
    except Exception as e:
        logger.warning(
            f"Progress callback failed on {event.stage} event: {e}", exc_info=True
        )
