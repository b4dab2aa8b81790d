"""Event log for long-running evolution sessions."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from .metrics import MetricsRow


class EventLogger:
    """Append-only text log with UTC ISO timestamps."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self._path.open("a", encoding="utf-8")

    def __enter__(self) -> EventLogger:
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:
        self.close()

    def log(self, message: str, *, generation: int | None = None) -> None:
        """Append a timestamped message, tagged with ``generation`` if given."""
        timestamp = datetime.now(timezone.utc).isoformat()
        prefix = f"[gen {generation}] " if generation is not None else ""
        self._handle.write(f"{timestamp} {prefix}{message}\n")
        self._handle.flush()

    def log_generation(self, row: MetricsRow) -> None:
        self.log(
            f"best={row.best_evaluation:.3f} mean={row.mean_evaluation:.3f} "
            f"median={row.median_evaluation:.3f} "
            f"eval_time={row.eval_time_s:.2f}s",
            generation=row.generation,
        )

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()

    @property
    def path(self) -> Path:
        return self._path


__all__ = ["EventLogger"]
