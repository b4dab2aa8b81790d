from __future__ import annotations

import csv
from pathlib import Path

import pytest
import yaml
from evolab.config import EvolutionConfig, RunConfig
from evolab.training import check_topology, run_training
from games.track.env.env_core import TrackConfig


def _track_yaml_path() -> Path:
    repo_root = Path(__file__).resolve().parents[2]
    return repo_root / "games" / "track" / "configs" / "track.yml"


def _evolution_config(max_generations: int) -> EvolutionConfig:
    return EvolutionConfig(
        population_size=4,
        topology=(5, 3, 2),
        max_generations=max_generations,
        seed=123,
    )


def _run_config(output_dir: Path) -> RunConfig:
    return RunConfig(
        evolution_config=output_dir / "evolution.yml",
        track_config=_track_yaml_path(),
        output_dir=output_dir,
    )


def _list_run_dirs(output_dir: Path) -> list[Path]:
    return sorted(path for path in output_dir.iterdir() if path.is_dir())


def test_run_training_writes_artifacts(tmp_path: Path) -> None:
    output_dir = tmp_path / "runs"
    summary = run_training(
        _run_config(output_dir),
        _evolution_config(max_generations=2),
        track_config=TrackConfig(max_steps=30),
    )

    run_dirs = _list_run_dirs(output_dir)
    assert len(run_dirs) == 1
    run_dir = run_dirs[0]
    assert summary.run_dir == run_dir

    metrics_path = run_dir / "metrics.csv"
    log_path = run_dir / "events.log"
    config_path = run_dir / "config.yml"
    for path in (metrics_path, log_path, config_path):
        assert path.exists(), f"Missing artifact: {path}"

    with metrics_path.open("r", encoding="utf-8") as handle:
        rows = list(csv.DictReader(handle))
    assert [row["generation"] for row in rows] == ["1", "2"]
    assert all(row["population_size"] == "4" for row in rows)

    snapshot = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    assert snapshot["evolution"]["topology"] == [5, 3, 2]
    assert snapshot["track"]["max_steps"] == 30

    assert summary.generations == 2
    assert summary.best_genotype is not None
    assert summary.best_genotype.parameter_count == 6 * 3 + 4 * 2
    assert summary.best_evaluation >= 0.0
    assert "Training stopped after 2 generations." in log_path.read_text(
        encoding="utf-8"
    )


def test_run_training_loads_track_config_from_run_config(tmp_path: Path) -> None:
    summary = run_training(
        _run_config(tmp_path / "runs"),
        _evolution_config(max_generations=1),
    )
    assert summary.generations == 1


def test_run_training_rejects_mismatched_topology(tmp_path: Path) -> None:
    config = EvolutionConfig(population_size=4, topology=(3, 2), max_generations=1)
    with pytest.raises(ValueError):
        run_training(_run_config(tmp_path / "runs"), config)
    assert not (tmp_path / "runs").exists()


def test_check_topology_requires_two_outputs() -> None:
    with pytest.raises(ValueError):
        check_topology((5, 3, 1), TrackConfig())
    check_topology((5, 2), TrackConfig())
