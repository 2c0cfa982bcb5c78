"""Tests for train_model."""

import threading
from unittest.mock import MagicMock, patch

import numpy as np
import pytest
from sklearn.linear_model import Ridge

from house_prices.data import HousingDataset, split_dataset
from house_prices.models import LinearRegressionModel
from house_prices.training import (
    TrainingCancelledError,
    TrainingConfig,
    TrainingError,
    TrainingEvent,
    TrainingStage,
    train_model,
)


@pytest.fixture
def split(varied_dataset: HousingDataset):
    return split_dataset(varied_dataset, 0.8, seed=42)


class TestTrainModel:
    """Tests for the training loop."""

    def test_fits_on_training_split(
        self, varied_dataset: HousingDataset, split, stub_model
    ) -> None:
        """fit() receives the normalized training matrices."""
        result = train_model(stub_model, varied_dataset, split)

        assert len(stub_model.fit_calls) == 1
        features, targets = stub_model.fit_calls[0]
        assert features.shape == (8, 12)
        assert targets.shape == (8, 1)
        np.testing.assert_array_equal(features, varied_dataset.feature_matrix(split.training))
        assert result.epochs_completed == 1
        assert result.training_samples == 8
        assert result.final_score == 0.01

    def test_runs_configured_epochs(
        self, varied_dataset: HousingDataset, split, stub_model
    ) -> None:
        """Each epoch calls fit() once."""
        train_model(stub_model, varied_dataset, split, TrainingConfig(epochs=7))

        assert len(stub_model.fit_calls) == 7

    def test_trains_linear_model(self, varied_dataset: HousingDataset, split) -> None:
        """A real model ends up fitted with its training MSE as the score."""
        model = LinearRegressionModel()

        result = train_model(model, varied_dataset, split)

        assert model.is_fitted
        assert result.final_score == pytest.approx(model.score())

    def test_linear_model_solves_once_across_epochs(
        self, varied_dataset: HousingDataset, split
    ) -> None:
        """Extra epochs over unchanged data don't re-solve the closed-form model."""
        model = LinearRegressionModel()
        original_fit = Ridge.fit

        with patch.object(Ridge, "fit", autospec=True, side_effect=original_fit) as fit:
            result = train_model(model, varied_dataset, split, TrainingConfig(epochs=5))

        assert fit.call_count == 1
        assert result.epochs_completed == 5

    def test_empty_training_split_raises(self, varied_dataset: HousingDataset) -> None:
        """Nothing to fit is an error raised before fit() is called."""
        model = MagicMock()
        empty_split = split_dataset(HousingDataset([]), 0.8, seed=42)

        with pytest.raises(TrainingError, match="empty"):
            train_model(model, varied_dataset, empty_split)

        model.fit.assert_not_called()

    @pytest.mark.parametrize(
        "config", [TrainingConfig(epochs=0), TrainingConfig(report_every=0)]
    )
    def test_invalid_config_raises(
        self, varied_dataset: HousingDataset, split, stub_model, config
    ) -> None:
        """epochs and report_every must be positive."""
        with pytest.raises(TrainingError, match="must be >= 1"):
            train_model(stub_model, varied_dataset, split, config)


class TestProgress:
    """Tests for progress callbacks."""

    def test_event_sequence(
        self, varied_dataset: HousingDataset, split, stub_model
    ) -> None:
        """STARTED, EPOCH every report_every epochs plus the last, then COMPLETED."""
        events: list[TrainingEvent] = []

        train_model(
            stub_model,
            varied_dataset,
            split,
            TrainingConfig(epochs=5, report_every=2),
            progress=events.append,
        )

        assert [(e.stage, e.epoch) for e in events] == [
            (TrainingStage.STARTED, 0),
            (TrainingStage.EPOCH, 2),
            (TrainingStage.EPOCH, 4),
            (TrainingStage.EPOCH, 5),
            (TrainingStage.COMPLETED, 5),
        ]
        assert all(e.total_epochs == 5 for e in events)
        assert events[-1].is_terminal
        assert events[1].score == 0.01

    def test_failing_callback_does_not_abort(
        self, varied_dataset: HousingDataset, split, stub_model
    ) -> None:
        """Exceptions from the callback are logged and ignored."""
        progress = MagicMock(side_effect=RuntimeError("UI closed"))

        result = train_model(stub_model, varied_dataset, split, progress=progress)

        assert result.epochs_completed == 1
        assert progress.call_count == 3  # STARTED, EPOCH, COMPLETED

    def test_fit_failure_reports_and_wraps(
        self, varied_dataset: HousingDataset, split
    ) -> None:
        """A fit() error emits FAILED and is re-raised as TrainingError."""
        model = MagicMock()
        model.fit.side_effect = ValueError("diverged")
        events: list[TrainingEvent] = []

        with pytest.raises(TrainingError, match="diverged") as exc_info:
            train_model(model, varied_dataset, split, progress=events.append)

        assert isinstance(exc_info.value.__cause__, ValueError)
        assert events[-1].stage == TrainingStage.FAILED
        assert events[-1].epoch == 1
        assert "diverged" in events[-1].message


class TestCancellation:
    """Tests for cooperative cancellation."""

    def test_cancel_before_start(
        self, varied_dataset: HousingDataset, split, stub_model
    ) -> None:
        """A pre-set event stops training before the first fit()."""
        cancel = threading.Event()
        cancel.set()
        events: list[TrainingEvent] = []

        with pytest.raises(TrainingCancelledError):
            train_model(
                stub_model, varied_dataset, split, progress=events.append, cancel_event=cancel
            )

        assert stub_model.fit_calls == []
        assert [e.stage for e in events] == [TrainingStage.STARTED, TrainingStage.CANCELLED]

    def test_cancel_between_epochs(
        self, varied_dataset: HousingDataset, split, stub_model_factory
    ) -> None:
        """Setting the event mid-run stops after the current epoch."""
        cancel = threading.Event()
        model = stub_model_factory()
        original_fit = model.fit

        def fit_then_cancel(features, targets):
            original_fit(features, targets)
            if len(model.fit_calls) == 3:
                cancel.set()

        model.fit = fit_then_cancel
        events: list[TrainingEvent] = []

        with pytest.raises(TrainingCancelledError, match="after 3 epochs"):
            train_model(
                model,
                varied_dataset,
                split,
                TrainingConfig(epochs=10),
                progress=events.append,
                cancel_event=cancel,
            )

        assert len(model.fit_calls) == 3
        assert events[-1].stage == TrainingStage.CANCELLED
        assert events[-1].epoch == 3

    def test_cancelled_is_a_training_error(self) -> None:
        """Callers catching TrainingError also see cancellation."""
        assert issubclass(TrainingCancelledError, TrainingError)

    def test_runs_on_worker_thread(
        self, varied_dataset: HousingDataset, split, stub_model
    ) -> None:
        """The loop can run off the main thread against a read-only dataset."""
        results = []
        worker = threading.Thread(
            target=lambda: results.append(train_model(stub_model, varied_dataset, split))
        )

        worker.start()
        worker.join(timeout=10)

        assert results[0].epochs_completed == 1
