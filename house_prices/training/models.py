"""Data models for training progress and results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class TrainingStage(StrEnum):
    """Checkpoint at which a TrainingEvent is emitted."""

    STARTED = "started"
    EPOCH = "epoch"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class TrainingConfig:
    """Configuration for train_model."""

    epochs: int = 1
    """
    Number of fit() calls over the training split.

    Only iterative models change between epochs. Closed-form models such as
    LinearRegressionModel keep the solution of the first epoch.
    """

    report_every: int = 100
    """Emit an EPOCH event every N epochs (the last epoch always reports)."""


@dataclass(frozen=True)
class TrainingEvent:
    """
    Progress notification passed to the training callback.

    score is the model's score() after the epoch when the model exposes
    one, None otherwise.
    """

    stage: TrainingStage
    epoch: int
    total_epochs: int
    score: float | None = None
    message: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.stage in (
            TrainingStage.COMPLETED,
            TrainingStage.FAILED,
            TrainingStage.CANCELLED,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "stage": str(self.stage),
            "epoch": self.epoch,
            "total_epochs": self.total_epochs,
            "score": self.score,
            "message": self.message,
        }


@dataclass(frozen=True)
class TrainingResult:
    """Outcome of a completed training run."""

    epochs_completed: int
    training_samples: int
    final_score: float | None = None
    training_time_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "epochs_completed": self.epochs_completed,
            "training_samples": self.training_samples,
            "final_score": (
                round(self.final_score, 6) if self.final_score is not None else None
            ),
            "training_time_ms": round(self.training_time_ms, 2),
        }
