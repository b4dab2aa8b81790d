from __future__ import annotations

import csv
from pathlib import Path

import pytest
from evolab.genotype import Genotype
from evolab.metrics import MetricsRow, MetricsWriter
from evolab.reporters import EventLogger


def _population(*evaluations: float) -> list[Genotype]:
    population = []
    for value in evaluations:
        genotype = Genotype([0.0])
        genotype.evaluation = value
        population.append(genotype)
    return population


def test_metrics_row_summarizes_population() -> None:
    row = MetricsRow.from_population(
        3, _population(1.0, 4.0, 2.0, 3.0), eval_time_s=2.0, steps=50
    )

    assert row.generation == 3
    assert row.population_size == 4
    assert row.best_evaluation == 4.0
    assert row.mean_evaluation == pytest.approx(2.5)
    assert row.median_evaluation == pytest.approx(2.5)
    assert row.steps_per_sec == pytest.approx(25.0)


def test_metrics_row_without_timing() -> None:
    row = MetricsRow.from_population(1, _population(1.0))
    assert row.eval_time_s == 0.0
    assert row.steps_per_sec == 0.0


def test_metrics_row_rejects_empty_population() -> None:
    with pytest.raises(ValueError):
        MetricsRow.from_population(1, [])


def test_metrics_writer_appends_rows(tmp_path: Path) -> None:
    path = tmp_path / "run" / "metrics.csv"
    with MetricsWriter(path) as writer:
        writer.append(MetricsRow.from_population(1, _population(1.0, 2.0)))
    with MetricsWriter(path) as writer:
        writer.append(MetricsRow.from_population(2, _population(3.0, 5.0)))

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("generation,population_size,best_evaluation")
    with path.open("r", encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    assert [row["generation"] for row in rows] == ["1", "2"]
    assert float(rows[1]["best_evaluation"]) == 5.0


def test_metrics_writer_adds_header_to_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "metrics.csv"
    path.touch()
    with MetricsWriter(path) as writer:
        writer.append(MetricsRow.from_population(1, _population(2.0)))

    with path.open("r", encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    assert rows[0]["best_evaluation"] == "2.0"


def test_event_logger_prefixes_generation(tmp_path: Path) -> None:
    path = tmp_path / "events.log"
    with EventLogger(path) as logger:
        logger.log("Training started")
        logger.log_generation(MetricsRow.from_population(4, _population(1.5, 0.5)))

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert lines[0].endswith(" Training started")
    assert "[gen 4] best=1.500 mean=1.000" in lines[1]
