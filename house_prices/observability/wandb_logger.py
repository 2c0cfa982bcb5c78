"""WandB logging for training runs, evaluations and correlation summaries."""

from __future__ import annotations

import logging
import os
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from ..training import TrainingEvent, TrainingStage
from .models import EvaluationLog, WandbConfig

if TYPE_CHECKING:
    import wandb
    from house_prices.analysis import CorrelationMatrix
    from house_prices.evaluation import EvaluationResult

logger = logging.getLogger(__name__)


class WandbLogger:
    """
    WandB logger for the housing pipeline.

    Handles:
    - Initialization of a WandB run
    - Training progress as scalars (usable as the train_model callback)
    - Evaluation summaries as scalars and sample predictions as a table
    - The correlation matrix as a table

    Logging failures are logged and never raised, so an unreachable WandB
    backend cannot break training or evaluation.

    Usage:
        wandb_logger = WandbLogger(WandbConfig(enabled=True))
        wandb_logger.start_run(run_config=config_to_dict(config))

        train_model(model, dataset, split, progress=wandb_logger.on_training_event)
        wandb_logger.log_evaluation(result)

        wandb_logger.finish()
    """

    def __init__(self, config: WandbConfig):
        self._config = config
        self._run: wandb.sdk.wandb_run.Run | None = None
        self._wandb: Any = None  # Lazy import

    def _import_wandb(self) -> Any:
        """Lazy import wandb so it is only loaded when enabled."""
        if self._wandb is None:
            import wandb

            self._wandb = wandb
        return self._wandb

    @property
    def is_enabled(self) -> bool:
        """Check if logging is enabled."""
        return self._config.enabled

    @property
    def is_running(self) -> bool:
        """Check if a run is currently active."""
        return self._run is not None

    def start_run(
        self,
        run_name: str | None = None,
        run_config: dict[str, Any] | None = None,
    ) -> None:
        """
        Start a new WandB run.

        Args:
            run_name: Optional run name override
            run_config: Effective pipeline configuration to attach to the run
        """
        if not self._config.enabled:
            logger.info("WandB logging is disabled")
            return

        # Set API key if provided (wandb also checks WANDB_API_KEY env var)
        if self._config.api_key:
            os.environ["WANDB_API_KEY"] = self._config.api_key

        if run_name is None:
            run_name = self._config.run_name
        if run_name is None:
            timestamp = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
            run_name = f"house-prices-{timestamp}"

        mode = "offline" if self._config.offline else "online"

        try:
            wandb = self._import_wandb()
            self._run = wandb.init(
                project=self._config.project,
                entity=self._config.entity,
                name=run_name,
                tags=list(self._config.tags),
                config=run_config or {},
                mode=mode,
            )
        except Exception as e:
            logger.error(f"Failed to start WandB run: {e}", exc_info=True)
            self._run = None
            return

        logger.info(f"WandB run started: {self._run.name} ({self._run.url})")

    def finish(self) -> None:
        """Finish the current WandB run."""
        if self._run is None:
            return
        try:
            self._run.finish()
            logger.info("WandB run finished")
        except Exception as e:
            logger.error(f"Failed to finish WandB run: {e}", exc_info=True)
        finally:
            self._run = None

    def on_training_event(self, event: TrainingEvent) -> None:
        """Log a training checkpoint. Signature matches ProgressCallback."""
        if not self._ready():
            return

        try:
            payload: dict[str, Any] = {
                "train/epoch": event.epoch,
                "train/stage": str(event.stage),
            }
            if event.score is not None:
                payload["train/score"] = event.score
            if event.stage in (TrainingStage.FAILED, TrainingStage.CANCELLED):
                payload["train/message"] = event.message
            self._run.log(payload)
        except Exception as e:
            logger.error(f"Failed to log training event to WandB: {e}", exc_info=True)

    def log_evaluation(self, result: EvaluationResult) -> None:
        """
        Log an evaluation to WandB.

        Args:
            result: Result of evaluate_model()
        """
        if not self._ready():
            return

        try:
            eval_log = EvaluationLog.from_result(result, datetime.now(UTC))
            self._run.log(eval_log.to_summary_dict())

            if self._config.log_samples_table and result.samples:
                self._log_samples_table(result)

            logger.info(f"Logged evaluation of {eval_log.n_samples} samples to WandB")
        except Exception as e:
            logger.error(f"Failed to log evaluation to WandB: {e}", exc_info=True)

    def log_correlations(self, matrix: CorrelationMatrix) -> None:
        """Log the correlation matrix as a table, one row per label."""
        if not self._ready() or not self._config.log_correlation_table:
            return

        try:
            wandb = self._import_wandb()
            table = wandb.Table(columns=["feature", *matrix.labels])
            for i, label in enumerate(matrix.labels):
                table.add_data(label, *(float(v) for v in matrix.values[i]))
            self._run.log({"correlations": table})
            logger.debug(f"Logged {matrix.size}x{matrix.size} correlation matrix")
        except Exception as e:
            logger.error(f"Failed to log correlations to WandB: {e}", exc_info=True)

    def _log_samples_table(self, result: EvaluationResult) -> None:
        wandb = self._import_wandb()

        columns = [
            "predicted_price",
            "actual_price",
            "absolute_error",
            "percentage_error",
        ]
        table = wandb.Table(columns=columns)
        for sample in result.samples:
            row = sample.to_dict()
            table.add_data(*(row[c] for c in columns))

        self._run.log({"sample_predictions": table})

    def _ready(self) -> bool:
        if not self._config.enabled:
            return False
        if self._run is None:
            logger.warning("WandB run not started. Call start_run() first.")
            return False
        return True


def create_wandb_logger(
    project: str = "house-prices",
    entity: str | None = None,
    api_key: str | None = None,
    enabled: bool = False,
    offline: bool = False,
) -> WandbLogger:
    """
    Create a WandB logger with common configuration.

    Args:
        project: WandB project name
        entity: WandB entity (team/user)
        api_key: WandB API key (or set WANDB_API_KEY env var)
        enabled: Whether logging is enabled
        offline: Run in offline mode

    Returns:
        Configured WandbLogger instance
    """
    config = WandbConfig(
        project=project,
        entity=entity,
        api_key=api_key or None,
        enabled=enabled,
        offline=offline,
    )
    return WandbLogger(config)
