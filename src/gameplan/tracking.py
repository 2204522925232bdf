"""
Optional MLflow run tracking for exports and benchmarks.

MLflow is imported lazily; when tracking is disabled or mlflow is not
installed, a no-op tracker is handed out instead.
"""
from __future__ import annotations

import importlib.util
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional


class Tracker:
    def __init__(self, backend: Any = None):
        self._mlflow = backend

    @property
    def active(self) -> bool:
        return self._mlflow is not None

    def log_params(self, params: Dict[str, object]) -> None:
        if self.active:
            self._call("log_params", params)

    def log_metrics(self, metrics: Dict[str, float]) -> None:
        if self.active:
            self._call("log_metrics", metrics)

    def log_artifact(self, path: Path, artifact_path: Optional[str] = None) -> None:
        if self.active:
            self._call("log_artifact", str(path), artifact_path=artifact_path)

    def _call(self, name: str, *args: Any, **kwargs: Any) -> None:
        try:
            getattr(self._mlflow, name)(*args, **kwargs)
        except Exception as e:  # tracking must never abort a run
            logging.warning("mlflow.%s failed: %s: %s", name, type(e).__name__, e)


@contextmanager
def tracking_run(enabled: bool, run_name: str, log_dir: Optional[Path] = None) -> Iterator[Tracker]:
    if not enabled:
        yield Tracker()
        return
    if importlib.util.find_spec("mlflow") is None:
        logging.warning("mlflow not installed (pip install .[tracking]); tracking disabled")
        yield Tracker()
        return

    import mlflow  # type: ignore

    if log_dir is not None:
        mlflow.set_tracking_uri((log_dir.resolve() / "mlruns").as_uri())
    with mlflow.start_run(run_name=run_name):
        yield Tracker(mlflow)
