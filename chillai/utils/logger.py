"""
Unified logging utilities that wrap Loguru and MLflow.

The `ExperimentLogger` offers a small convenience layer that the engine and
scheduler can use without worrying about tracking URIs or missing optional
dependencies.  Generation metrics are forwarded to MLflow when it is installed
and enabled, while Loguru handles console output.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional

from loguru import logger

try:
    import mlflow
except ImportError:  # pragma: no cover - tracking is optional.
    mlflow = None  # type: ignore[assignment]


def configure_console(level: str = "INFO") -> None:
    """Replace Loguru's default sink with a stderr sink at ``level``."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}")


class ExperimentLogger:
    """Thin convenience wrapper around Loguru and MLflow."""

    def __init__(self, experiment_name: str, tracking_uri: Optional[str] = None, enabled: bool = True) -> None:
        self.experiment_name = experiment_name
        self.tracking_uri = tracking_uri
        self.enabled = enabled
        if enabled and mlflow is None:
            logger.warning("MLflow is not installed. Tracking will be disabled.")

    @property
    def tracking(self) -> bool:
        return self.enabled and mlflow is not None

    def _ensure_mlflow(self) -> None:
        """Configure the MLflow tracking URI and experiment."""
        if self.tracking_uri:
            mlflow.set_tracking_uri(self.tracking_uri)
        mlflow.set_experiment(self.experiment_name)

    @contextmanager
    def start_run(self, run_name: str, params: Optional[Dict[str, str]] = None) -> Iterator[None]:
        """
        Context manager that opens and closes an MLflow run while emitting log messages.

        When tracking is off the context still works, so callers can rely on
        the same interface without extra guards.
        """

        logger.info("Starting ChillAI run: {}", run_name)
        if self.tracking:
            self._ensure_mlflow()
            with mlflow.start_run(run_name=run_name):
                if params:
                    mlflow.log_params(params)
                yield
        else:
            yield
        logger.info("Completed ChillAI run: {}", run_name)

    def log_metrics(self, metrics: Dict[str, float], step: Optional[int] = None) -> None:
        """Emit metrics to both the console and MLflow if enabled."""
        logger.debug("Metrics@{}: {}", step if step is not None else "-", metrics)
        if self.tracking:
            mlflow.log_metrics(metrics, step=step)

    def log_artifact(self, path: Path) -> None:
        """Record an artifact with MLflow when enabled."""
        if self.tracking and path.exists():
            mlflow.log_artifact(str(path))

    def log_message(self, message: str) -> None:
        """Log a simple info message."""
        logger.info(message)
