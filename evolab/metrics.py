"""Per-generation statistics and their CSV recording."""

from __future__ import annotations

import csv
from collections.abc import Sequence
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from statistics import mean, median
from typing import IO, Any

from .genotype import Genotype


@dataclass(frozen=True, slots=True)
class MetricsRow:
    """Aggregate scores of one evaluated generation."""

    generation: int
    population_size: int
    best_evaluation: float
    mean_evaluation: float
    median_evaluation: float
    eval_time_s: float
    steps_per_sec: float

    @classmethod
    def from_population(
        cls,
        generation: int,
        population: Sequence[Genotype],
        *,
        eval_time_s: float = 0.0,
        steps: int = 0,
    ) -> MetricsRow:
        """Summarize the evaluations of ``population``."""
        if not population:
            msg = "Cannot summarize an empty population."
            raise ValueError(msg)
        evaluations = [genotype.evaluation for genotype in population]
        steps_per_sec = steps / eval_time_s if eval_time_s > 0.0 and steps > 0 else 0.0
        return cls(
            generation=generation,
            population_size=len(evaluations),
            best_evaluation=max(evaluations),
            mean_evaluation=mean(evaluations),
            median_evaluation=median(evaluations),
            eval_time_s=eval_time_s,
            steps_per_sec=steps_per_sec,
        )


class MetricsWriter:
    """CSV-backed writer that appends one row per generation."""

    _fieldnames = [item.name for item in fields(MetricsRow)]

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        needs_header = not self._path.exists() or self._path.stat().st_size == 0
        self._handle: IO[str] = self._path.open("a", encoding="utf-8", newline="")
        self._writer = csv.DictWriter(self._handle, fieldnames=self._fieldnames)
        if needs_header:
            self._writer.writeheader()
            self._handle.flush()

    def __enter__(self) -> MetricsWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    def append(self, row: MetricsRow) -> None:
        """Append a metrics row and flush to disk."""
        self._writer.writerow(asdict(row))
        self._handle.flush()

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()

    @property
    def path(self) -> Path:
        return self._path


__all__ = ["MetricsRow", "MetricsWriter"]
