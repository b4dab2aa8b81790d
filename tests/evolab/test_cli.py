from __future__ import annotations

from pathlib import Path

import pytest
from evolab import cli


def test_cli_help() -> None:
    parser = cli.build_parser()
    help_text = parser.format_help()
    assert "train" in help_text
    assert "topology" in help_text


def _write_evolution_config(path: Path, *, topology: str = "[5, 3, 2]") -> None:
    path.write_text(
        "population_size: 4\n"
        f"topology: {topology}\n"
        "max_generations: 1\n"
        "seed: 5\n",
        encoding="utf-8",
    )


def _write_track_config(path: Path) -> None:
    path.write_text("max_steps: 20\nidle_timeout_steps: 10\n", encoding="utf-8")


def _write_run_config(path: Path) -> None:
    path.write_text(
        """
evolution_config: evolution.yml
track_config: track.yml
output_dir: runs
""",
        encoding="utf-8",
    )


def _write_bundle(tmp_path: Path, *, topology: str = "[5, 3, 2]") -> Path:
    _write_evolution_config(tmp_path / "evolution.yml", topology=topology)
    _write_track_config(tmp_path / "track.yml")
    run_yaml = tmp_path / "run.yml"
    _write_run_config(run_yaml)
    return run_yaml


def test_cli_topology_reports_weight_count(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["topology", "2", "3", "1"])
    assert code == 0
    output = capsys.readouterr().out
    assert "layer 0: 2 -> 3" in output
    assert "weight_count: 13" in output


def test_cli_topology_rejects_single_layer(capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(["topology", "3"])
    assert code == 1
    assert "Invalid topology" in capsys.readouterr().err


def test_cli_train_dry_run(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    run_yaml = _write_bundle(tmp_path)

    code = cli.main(["train", "--config", str(run_yaml), "--dry-run"])

    assert code == 0
    assert "configuration validated" in capsys.readouterr().out
    assert not (tmp_path / "runs").exists()


def test_cli_train_dry_run_rejects_mismatched_topology(tmp_path: Path) -> None:
    run_yaml = _write_bundle(tmp_path, topology="[4, 2]")
    with pytest.raises(ValueError):
        cli.main(["train", "--config", str(run_yaml), "--dry-run"])


def test_cli_train_executes(tmp_path: Path) -> None:
    run_yaml = _write_bundle(tmp_path)

    code = cli.main(["train", "--config", str(run_yaml)])

    assert code == 0
    run_dirs = list((tmp_path / "runs").iterdir())
    assert len(run_dirs) == 1
    assert (run_dirs[0] / "metrics.csv").exists()
